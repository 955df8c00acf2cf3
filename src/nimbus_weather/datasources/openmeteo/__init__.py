"""Open-Meteo weather provider.

Fetches the hourly forecast from Open-Meteo (free, no API key).

Public API:
  - forecast: fetch_forecast, normalize_forecast, OpenMeteoProvider
  - client: API URL, requested variables
"""

from nimbus_weather.datasources.openmeteo.client import HOURLY_VARS, OPEN_METEO_API
from nimbus_weather.datasources.openmeteo.forecast import (
    OpenMeteoProvider,
    fetch_forecast,
    normalize_forecast,
)

__all__ = [
    "HOURLY_VARS",
    "OPEN_METEO_API",
    "OpenMeteoProvider",
    "fetch_forecast",
    "normalize_forecast",
]
