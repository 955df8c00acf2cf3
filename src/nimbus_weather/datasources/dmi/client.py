"""DMI (Danish Meteorological Institute) forecast EDR API constants.

API docs: https://opendatadocs.dmi.govcloud.dk/APIs/Forecast_Data_EDR_API
"""

from nimbus_weather.datasources.base import ProviderInfo

DMI_EDR_API = "https://dmigw.govcloud.dk/v1/forecastedr/collections/harmonie_dini_sf/position"

# Parameters we request from the HARMONIE DINI surface collection
PARAMETERS = [
    "wind-speed",
    "temperature-2m",
    "wind-dir-10m",
    "cloud-transmittance",
    "total-precipitation",
]

TOKEN_HELP = (
    "Please configure your DMI API token (NIMBUS_DMI_API_TOKEN). Get one free at "
    "https://opendatadocs.dmi.govcloud.dk/Authentication#h-1-register-as-a-user"
)

INFO = ProviderInfo(
    name="DMI (Danmarks Meteorologiske Institut)",
    description="Official Danish weather service",
    website="https://www.dmi.dk/",
    requires_api_key=True,
    data_source="DMI Open Data API",
)
