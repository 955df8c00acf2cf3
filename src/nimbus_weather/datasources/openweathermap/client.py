"""OpenWeatherMap API client constants.

API docs:
  - One Call 3.0: https://openweathermap.org/api/one-call-3
  - 5 day / 3 hour: https://openweathermap.org/forecast5
"""

from nimbus_weather.datasources.base import ProviderInfo

ONE_CALL_API = "https://api.openweathermap.org/data/3.0/onecall"
FORECAST_API = "https://api.openweathermap.org/data/2.5/forecast"

# One Call sections to leave out, per granularity
ONE_CALL_EXCLUDE = {
    "daily": "current,minutely,hourly",
    "hourly": "daily,minutely,current",
}

TOKEN_HELP = (
    "Please configure your OpenWeatherMap API token (NIMBUS_OWM_API_TOKEN). "
    "Get one free at https://openweathermap.org/api"
)

INFO = ProviderInfo(
    name="OpenWeatherMap",
    description="Global weather data with severe weather alerts",
    website="https://openweathermap.org",
    requires_api_key=True,
    data_source="OpenWeatherMap One Call / Forecast API",
)
