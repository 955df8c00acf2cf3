"""Hourly forecast from the DMI forecast EDR API (GeoJSON)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

import requests

from nimbus_weather.analysis.units import TemperatureUnit, to_celsius
from nimbus_weather.config import ForecastType
from nimbus_weather.datasources.dmi.client import DMI_EDR_API, INFO, PARAMETERS, TOKEN_HELP
from nimbus_weather.exceptions import MissingApiToken, ProviderError
from nimbus_weather.schemas import NormalizedForecast, TimePoint
from nimbus_weather.services.http import session

if TYPE_CHECKING:
    from nimbus_weather.config import Settings
    from nimbus_weather.schemas import Location

logger = logging.getLogger(__name__)


def fetch_forecast(lat: float, lon: float, token: str) -> dict[str, Any]:
    """
    Fetch the position forecast from DMI as GeoJSON.

    Args:
        lat: Latitude.
        lon: Longitude.
        token: DMI API key.

    Returns:
        GeoJSON FeatureCollection, one feature per forecast step.

    Raises:
        MissingApiToken: If ``token`` is empty.
    """
    if not token:
        raise MissingApiToken(TOKEN_HELP)

    params: dict[str, str] = {
        "coords": f"POINT({lon} {lat})",
        "crs": "crs84",
        "f": "GeoJSON",
        "parameter-name": ",".join(PARAMETERS),
        "api-key": token,
    }
    resp = session.get(DMI_EDR_API, params=params)
    resp.raise_for_status()
    result: dict[str, Any] = resp.json()
    return result


def _feature_point(properties: dict[str, Any]) -> TimePoint:
    kelvin = properties.get("temperature-2m")
    transmittance = properties.get("cloud-transmittance")
    return TimePoint(
        time=datetime.fromisoformat(properties["step"]),
        temperature=None if kelvin is None else to_celsius(kelvin, TemperatureUnit.KELVIN),
        precipitation=properties.get("total-precipitation"),
        wind_speed=properties.get("wind-speed"),
        wind_direction=properties.get("wind-dir-10m"),
        clouds=None if transmittance is None else 100 * max(0.0, 1 - transmittance),
        sun_hours=None if transmittance is None else 100 * transmittance,
    )


def normalize_forecast(raw: dict[str, Any]) -> NormalizedForecast:
    """Convert a DMI GeoJSON response into the canonical series."""
    points = [_feature_point(feature["properties"]) for feature in raw.get("features") or []]
    logger.debug("DMI: %d points", len(points))
    return NormalizedForecast(data=points, alerts=[])


class DmiProvider:
    """DMI HARMONIE forecast (API key required)."""

    name = "dmi"
    display_name = "DMI"
    info = INFO

    def __init__(self, settings: Settings) -> None:
        self.token = settings.dmi_api_token

    @property
    def forecast_type(self) -> ForecastType:
        return ForecastType.HOURLY

    def fetch(self, location: Location) -> dict[str, Any]:
        try:
            return fetch_forecast(location.latitude, location.longitude, self.token)
        except requests.RequestException as e:
            raise ProviderError(self.display_name, str(e)) from e

    def normalize(self, raw: dict[str, Any]) -> NormalizedForecast:
        return normalize_forecast(raw)
