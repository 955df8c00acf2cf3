"""DMI weather provider (Danish Meteorological Institute).

Public API:
  - forecast: fetch_forecast, normalize_forecast, DmiProvider
  - client: API URL, requested parameters
"""

from nimbus_weather.datasources.dmi.client import DMI_EDR_API, PARAMETERS
from nimbus_weather.datasources.dmi.forecast import (
    DmiProvider,
    fetch_forecast,
    normalize_forecast,
)

__all__ = [
    "DMI_EDR_API",
    "PARAMETERS",
    "DmiProvider",
    "fetch_forecast",
    "normalize_forecast",
]
