"""Apparent ("feels-like") temperature.

Australian Bureau of Meteorology thermal stress formula
(http://www.bom.gov.au/info/thermal_stress/):

    e  = rh / 100 * 6.105 * exp(17.27 * Ta / (237.7 + Ta))
    AT = Ta + 0.348 e - 0.7 ws + 0.7 Q / (ws + 10) - 4.25     (Q > 0)
    AT = Ta + 0.33 e  - 0.7 ws - 4                           (otherwise)

where Ta is the dry bulb temperature (C), ws the 10 m wind speed (m/s) and Q
the net radiation absorbed per unit area of body surface (W/m2).

``calculate`` evaluates the formula on a 3 x 2 grid: insolation at the
minimum (no sun), average (actual cloud) and maximum (clear sky) bounds, each
sheltered from the wind and exposed to it. The sheltered, no-sun bound feeds
"patio weather"; the exposed values feed "hiking weather".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nimbus_weather.analysis.solar import SunTimes, calculate_sun_times, get_solar_insolation
from nimbus_weather.analysis.units import round_half_up

if TYPE_CHECKING:
    from datetime import datetime, tzinfo

CALM_WIND_MS = 0.0


@dataclass(frozen=True)
class WindPair:
    """Apparent temperature without wind and with the actual wind."""

    no_wind: float
    with_wind: float


@dataclass(frozen=True)
class ApparentTemperatureResult:
    """Apparent temperature grid for one point in time."""

    min: WindPair
    avg: WindPair
    max: WindPair
    real: float
    sun: SunTimes
    solar_insolation: int


def vapour_pressure(relative_humidity_pct: float, temperature_c: float) -> float:
    """Water vapour pressure in hPa."""
    return (
        relative_humidity_pct
        / 100
        * 6.105
        * math.exp(17.27 * temperature_c / (237.7 + temperature_c))
    )


def get_apparent_temperature(
    relative_humidity_pct: float,
    temperature_c: float,
    wind_speed_ms: float,
    net_radiation_wm2: float,
) -> float:
    """Apparent temperature in C, rounded to a whole degree."""
    e = vapour_pressure(relative_humidity_pct, temperature_c)
    if net_radiation_wm2 > 0:
        at = (
            temperature_c
            + 0.348 * e
            - 0.7 * wind_speed_ms
            + 0.7 * (net_radiation_wm2 / (wind_speed_ms + 10))
            - 4.25
        )
    else:
        at = temperature_c + 0.33 * e - 0.7 * wind_speed_ms - 4
    return round_half_up(at)


def _pair(rh: float, temp: float, wind: float, radiation: float) -> WindPair:
    return WindPair(
        no_wind=get_apparent_temperature(rh, temp, CALM_WIND_MS, radiation),
        with_wind=get_apparent_temperature(rh, temp, wind, radiation),
    )


def calculate(
    utc_time: datetime,
    lat: float,
    lon: float,
    relative_humidity_pct: float,
    clouds_pct: float,
    temperature_c: float,
    wind_speed_ms: float,
    tz: tzinfo | None = None,
) -> ApparentTemperatureResult:
    """Evaluate apparent temperature at the min/avg/max insolation bounds.

    Args:
        utc_time: Moment of the sample.
        lat: Latitude in decimal degrees.
        lon: Longitude in decimal degrees, east-positive.
        relative_humidity_pct: Relative humidity (0-100).
        clouds_pct: Cloud cover (0-100).
        temperature_c: Dry bulb temperature in C.
        wind_speed_ms: Wind speed in m/s.
        tz: Local timezone used for the sun times.

    Returns:
        ApparentTemperatureResult with the 3 x 2 grid and the sun data used.
    """
    sun = calculate_sun_times(lat, lon, utc_time, tz)
    insolation_max = get_solar_insolation(sun.zenith, 0)
    insolation_avg = get_solar_insolation(sun.zenith, clouds_pct)

    rh, temp, wind = relative_humidity_pct, temperature_c, wind_speed_ms
    return ApparentTemperatureResult(
        min=_pair(rh, temp, wind, 0),
        avg=_pair(rh, temp, wind, insolation_avg),
        max=_pair(rh, temp, wind, insolation_max),
        real=temperature_c,
        sun=sun,
        solar_insolation=insolation_avg,
    )
