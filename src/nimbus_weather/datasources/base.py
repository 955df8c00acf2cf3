"""Common provider interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from nimbus_weather.config import ForecastType
    from nimbus_weather.schemas import Location, NormalizedForecast


@dataclass(frozen=True)
class ProviderInfo:
    """Human-readable description of a provider (for ``nimbus info``)."""

    name: str
    description: str
    website: str
    requires_api_key: bool
    data_source: str


class WeatherProvider(Protocol):
    """What the flow needs from a weather provider."""

    name: str
    display_name: str
    info: ProviderInfo

    @property
    def forecast_type(self) -> ForecastType: ...

    def fetch(self, location: Location) -> dict[str, Any]:
        """Fetch the raw forecast payload for a location."""
        ...

    def normalize(self, raw: dict[str, Any]) -> NormalizedForecast:
        """Convert a raw payload into the canonical series."""
        ...


#: Open-Meteo weather models as (value, label). "auto" lets Open-Meteo pick.
OPEN_METEO_MODELS: list[tuple[str, str]] = [
    ("auto", "Best Match"),
    ("bom_access_global", "BOM Australia"),
    ("cma_grapes_global", "CMA China"),
    ("dmi_seamless", "DMI Denmark"),
    ("icon_seamless", "DWD Germany"),
    ("ecmwf_ifs04", "ECMWF"),
    ("gem_seamless", "GEM Canada"),
    ("italia_meteo_arpae_icon_2i", "ItaliaMeteo"),
    ("jma_seamless", "JMA Japan"),
    ("kma_seamless", "KMA Korea"),
    ("knmi_seamless", "KNMI Netherlands"),
    ("metno_seamless", "MET Norway"),
    ("meteofrance_seamless", "Météo-France"),
    ("meteoswiss_seamless", "MeteoSwiss"),
    ("gfs_seamless", "NOAA U.S."),
    ("ukmo_seamless", "UK Met Office"),
]
