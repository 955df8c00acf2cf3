"""Open-Meteo API client constants.

API docs: https://open-meteo.com/en/docs
"""

from nimbus_weather.datasources.base import ProviderInfo

OPEN_METEO_API = "https://api.open-meteo.com/v1/forecast"

# Hourly variables we request from Open-Meteo
HOURLY_VARS = [
    "temperature_2m",
    "precipitation",
    "wind_speed_10m",
    "wind_gusts_10m",
    "cloud_cover",
    "relative_humidity_2m",
]

#: Open-Meteo's own default; not sent as a ``models`` parameter.
AUTO_MODEL = "auto"

INFO = ProviderInfo(
    name="Open-Meteo",
    description="Open source weather data",
    website="https://open-meteo.com",
    requires_api_key=False,
    data_source="Open-Meteo Open Data API",
)
