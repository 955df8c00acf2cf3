"""Hourly, 3-hourly and daily forecasts from OpenWeatherMap."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import requests

from nimbus_weather.config import ForecastType
from nimbus_weather.datasources.openweathermap.client import (
    FORECAST_API,
    INFO,
    ONE_CALL_API,
    ONE_CALL_EXCLUDE,
    TOKEN_HELP,
)
from nimbus_weather.exceptions import MissingApiToken, ProviderError
from nimbus_weather.schemas import Alert, NormalizedForecast, TimePoint
from nimbus_weather.services.http import session

if TYPE_CHECKING:
    from nimbus_weather.config import Settings
    from nimbus_weather.schemas import Location

logger = logging.getLogger(__name__)


def fetch_forecast(
    lat: float, lon: float, token: str, forecast_type: ForecastType | str
) -> dict[str, Any]:
    """
    Fetch a forecast from OpenWeatherMap in metric units.

    Hourly and daily use One Call 3.0; 3-hourly uses the 2.5 forecast API.

    Args:
        lat: Latitude.
        lon: Longitude.
        token: OpenWeatherMap API key.
        forecast_type: Granularity to fetch.

    Returns:
        Raw API response dict.

    Raises:
        MissingApiToken: If ``token`` is empty.
    """
    if not token:
        raise MissingApiToken(TOKEN_HELP)

    forecast_type = ForecastType(forecast_type)
    params: dict[str, str | float] = {"lat": lat, "lon": lon, "appid": token, "units": "metric"}
    if forecast_type is ForecastType.THREE_HOURLY:
        url = FORECAST_API
    else:
        url = ONE_CALL_API
        params["exclude"] = ONE_CALL_EXCLUDE[forecast_type]

    resp = session.get(url, params=params)
    resp.raise_for_status()
    result: dict[str, Any] = resp.json()
    return result


# =============================================================================
# Normalization
# =============================================================================


def _timestamp(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, UTC)


def _probability(item: dict[str, Any]) -> float:
    pop = item.get("pop")
    return round(pop * 100) if pop else 0


def _sun_hours(clouds: float | None) -> float | None:
    return None if clouds is None else max(0.0, 100 - clouds)


def _daily_point(item: dict[str, Any]) -> TimePoint:
    temp = item["temp"]
    return TimePoint(
        time=_timestamp(item["dt"]),
        temperature=temp["day"],
        temp_min=temp["min"],
        temp_max=temp["max"],
        precipitation=item.get("rain") or 0,
        precipitation_prob=_probability(item),
        wind_speed=item.get("wind_speed"),
        wind_gusts=item.get("wind_gust"),
        wind_direction=item.get("wind_deg"),
        clouds=item.get("clouds"),
        humidity=item.get("humidity"),
        sun_hours=_sun_hours(item.get("clouds")),
    )


def _hourly_point(item: dict[str, Any]) -> TimePoint:
    return TimePoint(
        time=_timestamp(item["dt"]),
        temperature=item["temp"],
        temp_min=item["temp"],
        temp_max=item["temp"],
        precipitation=(item.get("rain") or {}).get("1h", 0),
        precipitation_prob=_probability(item),
        wind_speed=item.get("wind_speed"),
        wind_gusts=item.get("wind_gust"),
        wind_direction=item.get("wind_deg"),
        clouds=item.get("clouds"),
        humidity=item.get("humidity"),
        sun_hours=_sun_hours(item.get("clouds")),
    )


def _three_hourly_point(item: dict[str, Any]) -> TimePoint:
    main = item["main"]
    wind = item.get("wind") or {}
    clouds = (item.get("clouds") or {}).get("all")
    return TimePoint(
        time=_timestamp(item["dt"]),
        temperature=main["temp"],
        temp_min=main.get("temp_min"),
        temp_max=main.get("temp_max"),
        precipitation=(item.get("rain") or {}).get("3h", 0),
        precipitation_prob=_probability(item),
        wind_speed=wind.get("speed"),
        wind_gusts=wind.get("gust"),
        wind_direction=wind.get("deg"),
        clouds=clouds,
        humidity=main.get("humidity"),
        sun_hours=_sun_hours(clouds),
    )


def parse_alerts(raw: dict[str, Any]) -> list[Alert]:
    """Map One Call ``alerts`` entries to ``Alert`` models."""
    return [
        Alert(
            start=_timestamp(item["start"]),
            end=_timestamp(item["end"]),
            sender_name=item.get("sender_name"),
            event=item["event"],
            description=item.get("description", ""),
            tags=item.get("tags") or [],
        )
        for item in raw.get("alerts") or []
    ]


def normalize_forecast(
    raw: dict[str, Any], forecast_type: ForecastType | str
) -> NormalizedForecast:
    """
    Convert an OpenWeatherMap response into the canonical series.

    Args:
        raw: Response from ``fetch_forecast`` for the same granularity.
        forecast_type: Granularity the response was fetched with.
    """
    forecast_type = ForecastType(forecast_type)
    if forecast_type is ForecastType.DAILY:
        points = [_daily_point(item) for item in raw.get("daily", [])]
    elif forecast_type is ForecastType.HOURLY:
        points = [_hourly_point(item) for item in raw.get("hourly", [])]
    else:
        points = [_three_hourly_point(item) for item in raw.get("list", [])]

    alerts = parse_alerts(raw)
    logger.debug("OpenWeatherMap %s: %d points, %d alerts", forecast_type, len(points), len(alerts))
    return NormalizedForecast(data=points, alerts=alerts)


class OpenWeatherMapProvider:
    """OpenWeatherMap (API key required, granularity selectable)."""

    name = "openweathermap"
    display_name = "OpenWeatherMap"
    info = INFO

    def __init__(self, settings: Settings) -> None:
        self.token = settings.owm_api_token
        self._forecast_type = settings.owm_forecast_type

    @property
    def forecast_type(self) -> ForecastType:
        return self._forecast_type

    def fetch(self, location: Location) -> dict[str, Any]:
        try:
            return fetch_forecast(
                location.latitude, location.longitude, self.token, self.forecast_type
            )
        except requests.RequestException as e:
            raise ProviderError(self.display_name, str(e)) from e

    def normalize(self, raw: dict[str, Any]) -> NormalizedForecast:
        return normalize_forecast(raw, self.forecast_type)
