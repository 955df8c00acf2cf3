"""OpenWeatherMap weather provider.

Hourly and daily forecasts come from One Call 3.0 (with severe weather
alerts), 3-hourly from the 2.5 forecast API. Requires an API token.

Public API:
  - forecast: fetch_forecast, normalize_forecast, parse_alerts,
    OpenWeatherMapProvider
  - client: API URLs
"""

from nimbus_weather.datasources.openweathermap.client import FORECAST_API, ONE_CALL_API
from nimbus_weather.datasources.openweathermap.forecast import (
    OpenWeatherMapProvider,
    fetch_forecast,
    normalize_forecast,
    parse_alerts,
)

__all__ = [
    "FORECAST_API",
    "ONE_CALL_API",
    "OpenWeatherMapProvider",
    "fetch_forecast",
    "normalize_forecast",
    "parse_alerts",
]
