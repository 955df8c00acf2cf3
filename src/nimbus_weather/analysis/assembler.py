"""Turn a normalized provider forecast into an annotated series.

Order matters:

1. daylight correction, before anything reads ``sun_hours``
2. apparent temperature, before extrema when its channels are analysed
3. extrema detection over the configured channels
4. precipitation run grouping

Every stage is synchronous and raises straight through; nothing here
catches stage errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from nimbus_weather.analysis import apparent
from nimbus_weather.analysis.daylight import correct_sun_hours
from nimbus_weather.analysis.extrema import mark_extrema
from nimbus_weather.analysis.precipitation import group_precipitation
from nimbus_weather.analysis.units import to_utc_time
from nimbus_weather.config import PipelineConfig
from nimbus_weather.schemas import (
    ApparentTemperature,
    NormalizedForecast,
    ProcessedForecast,
    TimePoint,
    WindExposure,
)

if TYPE_CHECKING:
    from datetime import tzinfo

    from nimbus_weather.schemas import Location

logger = logging.getLogger(__name__)

DEFAULT_HUMIDITY_PCT = 50.0

#: Fields written by the pipeline; cleared so a re-run starts from raw channels.
DERIVED_FIELDS = (
    "apparent_temperature",
    "patio_weather",
    "hiking_weather",
    "extrema",
    "precipitation_group_total",
    "precipitation_group_start",
    "precipitation_group_end",
)


def clear_annotations(series: list[TimePoint]) -> list[TimePoint]:
    """Drop annotations left by an earlier run, in place."""
    for point in series:
        for field in DERIVED_FIELDS:
            setattr(point, field, None)
    return series


def add_apparent_temperature(
    series: list[TimePoint], lat: float, lon: float, tz: tzinfo | None = None
) -> list[TimePoint]:
    """Attach apparent, patio and hiking temperatures to every point.

    Humidity defaults to 50 % when missing. Points without temperature are
    left as they are; missing clouds or wind count as 0.
    """
    for point in series:
        if point.temperature is None:
            continue
        result = apparent.calculate(
            to_utc_time(point.time),
            lat,
            lon,
            point.humidity if point.humidity is not None else DEFAULT_HUMIDITY_PCT,
            point.clouds or 0.0,
            point.temperature,
            point.wind_speed or 0.0,
            tz,
        )
        point.apparent_temperature = ApparentTemperature(
            min=result.min.with_wind,
            avg=result.avg.with_wind,
            max=result.max.with_wind,
        )
        point.patio_weather = WindExposure(
            no_wind=result.min.no_wind, with_wind=result.min.with_wind
        )
        point.hiking_weather = WindExposure(
            no_wind=result.avg.no_wind, with_wind=result.avg.with_wind
        )
    return series


def process(
    forecast: NormalizedForecast,
    location: Location,
    config: PipelineConfig | None = None,
) -> ProcessedForecast:
    """Run the analytics pipeline over a normalized forecast.

    Args:
        forecast: Provider output in the normalized TimePoint shape.
        location: Where the forecast is for.
        config: Pipeline knobs (defaults to an hourly configuration).

    Returns:
        ProcessedForecast with the annotated series and the provider alerts.
    """
    config = config or PipelineConfig()
    tz = ZoneInfo(config.timezone)
    lat, lon = location.latitude, location.longitude

    # correct_sun_hours deep-copies, so the caller's forecast is never touched
    series = clear_annotations(correct_sun_hours(forecast.data, lat, lon, tz))

    if config.compute_apparent_temperature:
        series = add_apparent_temperature(series, lat, lon, tz)

    series = mark_extrema(
        series,
        config.extrema_channels,
        config.extrema_settings(),
        smoothing_window=config.smoothing_window,
        smoothed_channels=config.smoothing_channels or None,
    )
    series = group_precipitation(series)

    logger.info(
        "Processed %d points for (%.2f, %.2f), %d alerts",
        len(series),
        lat,
        lon,
        len(forecast.alerts),
    )
    return ProcessedForecast(data=series, alerts=list(forecast.alerts))
