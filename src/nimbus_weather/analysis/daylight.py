"""Zero out reported sun hours outside the daylight window.

Providers derive "sun hours" from cloud cover, which reports sunshine at
night under a clear sky. Each point is checked against sunrise/sunset for its
own date, so a multi-day series crosses days correctly.

The window is compared on a 24 hour circle: on a clock far from the
location's own (New York read in UTC, say) sunset lands past midnight as
``24:31``, and the wrapped comparison still holds. Where the sun never rises
or sets there is no window; the point's zenith decides instead.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from nimbus_weather.analysis.solar import (
    calculate_sun_times,
    decimal_hours,
    time_string_to_decimal,
)

if TYPE_CHECKING:
    from datetime import tzinfo

    from nimbus_weather.schemas import TimePoint

HOURS_PER_DAY = 24
#: Whole-degree zenith at or below which the sun counts as up (polar fallback).
POLAR_UP_ZENITH_DEG = 90


def is_daylight(point: TimePoint, lat: float, lon: float, tz: tzinfo | None = None) -> bool:
    """Whether the point's local time lies within [sunrise, sunset]."""
    sun = calculate_sun_times(lat, lon, point.time, tz)
    sunrise = time_string_to_decimal(sun.sunrise)
    sunset = time_string_to_decimal(sun.sunset)
    if math.isnan(sunrise) or math.isnan(sunset):
        return sun.zenith <= POLAR_UP_ZENITH_DEG

    now = decimal_hours(point.time, tz)
    return (now - sunrise) % HOURS_PER_DAY <= sunset - sunrise


def correct_sun_hours(
    series: list[TimePoint], lat: float, lon: float, tz: tzinfo | None = None
) -> list[TimePoint]:
    """Return deep copies of ``series`` with night-time sun hours set to 0.

    Daylight values are kept but clamped at 0; a missing value becomes 0.
    Applying the correction twice gives the same result as once.
    """
    corrected: list[TimePoint] = []
    for point in series:
        sun_hours = max(0.0, point.sun_hours or 0.0) if is_daylight(point, lat, lon, tz) else 0.0
        corrected.append(point.model_copy(update={"sun_hours": sun_hours}, deep=True))
    return corrected
