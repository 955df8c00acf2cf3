"""Hourly forecast from the Open-Meteo Forecast API."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import requests

from nimbus_weather.analysis.units import WindSpeedUnit, to_wind_speed
from nimbus_weather.config import ForecastType
from nimbus_weather.datasources.openmeteo.client import (
    AUTO_MODEL,
    HOURLY_VARS,
    INFO,
    OPEN_METEO_API,
)
from nimbus_weather.exceptions import ProviderError
from nimbus_weather.schemas import NormalizedForecast, TimePoint
from nimbus_weather.services.http import session

if TYPE_CHECKING:
    from nimbus_weather.config import Settings
    from nimbus_weather.schemas import Location

logger = logging.getLogger(__name__)

def fetch_forecast(lat: float, lon: float, *, model: str = AUTO_MODEL) -> dict[str, Any]:
    """
    Fetch the hourly forecast from Open-Meteo.

    Args:
        lat: Latitude.
        lon: Longitude.
        model: Weather model (see ``OPEN_METEO_MODELS``); "auto" lets
            Open-Meteo choose.

    Returns:
        Raw API response dict with ``hourly`` key containing arrays.
    """
    params: dict[str, str | float | list[str]] = {
        "latitude": lat,
        "longitude": lon,
        "hourly": HOURLY_VARS,
        "timezone": "auto",
    }
    if model != AUTO_MODEL:
        params["models"] = model

    resp = session.get(OPEN_METEO_API, params=params)
    resp.raise_for_status()
    result: dict[str, Any] = resp.json()
    return result


def _value(hourly: dict[str, Any], key: str, index: int) -> float | None:
    values = hourly.get(key)
    if not values or index >= len(values):
        return None
    value: float | None = values[index]
    return value


def _from_kmh(value: float | None) -> float | None:
    return None if value is None else to_wind_speed(value, WindSpeedUnit.KMH, WindSpeedUnit.MS)


def normalize_forecast(raw: dict[str, Any], now: datetime | None = None) -> NormalizedForecast:
    """
    Convert an Open-Meteo response into the canonical series.

    Times are local to the location (``timezone=auto``) and are shifted by
    ``utc_offset_seconds`` to UTC. Hours that started before the current
    hour are dropped.

    Args:
        raw: Response from ``fetch_forecast``.
        now: Reference time for dropping past hours (default: current UTC).
    """
    hourly = raw.get("hourly") or {}
    offset = timezone(timedelta(seconds=raw.get("utc_offset_seconds", 0)))
    cutoff = (now or datetime.now(UTC)).replace(minute=0, second=0, microsecond=0)

    points: list[TimePoint] = []
    for i, time_str in enumerate(hourly.get("time", [])):
        time = datetime.fromisoformat(time_str).replace(tzinfo=offset).astimezone(UTC)
        if time < cutoff:
            continue

        temperature = _value(hourly, "temperature_2m", i)
        cloud_cover = _value(hourly, "cloud_cover", i)
        points.append(
            TimePoint(
                time=time,
                temperature=temperature,
                temp_min=temperature,
                temp_max=temperature,
                precipitation=_value(hourly, "precipitation", i),
                precipitation_prob=0,
                wind_speed=_from_kmh(_value(hourly, "wind_speed_10m", i)),
                wind_gusts=_from_kmh(_value(hourly, "wind_gusts_10m", i)),
                clouds=cloud_cover,
                humidity=_value(hourly, "relative_humidity_2m", i),
                sun_hours=None if cloud_cover is None else max(0.0, 100 - cloud_cover),
            )
        )

    logger.debug("Open-Meteo: kept %d points after %s", len(points), cutoff.isoformat())
    return NormalizedForecast(data=points, alerts=[])


class OpenMeteoProvider:
    """Open-Meteo (free, no API key)."""

    name = "openmeteo"
    display_name = "Open-Meteo"
    info = INFO

    def __init__(self, settings: Settings) -> None:
        self.model = settings.open_meteo_model

    @property
    def forecast_type(self) -> ForecastType:
        return ForecastType.HOURLY

    def fetch(self, location: Location) -> dict[str, Any]:
        try:
            return fetch_forecast(location.latitude, location.longitude, model=self.model)
        except requests.RequestException as e:
            raise ProviderError(self.display_name, str(e)) from e

    def normalize(self, raw: dict[str, Any]) -> NormalizedForecast:
        return normalize_forecast(raw)
