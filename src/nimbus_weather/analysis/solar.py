"""Sun position, sunrise/sunset and solar insolation.

NOAA general solar position approximation (fractional-year method):

    gamma   = 2*pi/365 * (doy - 1 + (hour - 12) / 24)
    eqtime  = 229.18 * (0.000075 + 0.001868 cos g - 0.032077 sin g
                        - 0.014615 cos 2g - 0.040849 sin 2g)          [minutes]
    decl    = 0.006918 - 0.399912 cos g + 0.070257 sin g - ...       [radians]
    ha      = (utc_minutes + eqtime + 4 * lon) / 4 - 180             [degrees]
    cos(zenith) = sin(lat) sin(decl) + cos(lat) cos(decl) cos(ha)
    sunrise = 720 - 4 * (lon + ha_s) - eqtime                        [UTC minutes]

``ha_s`` is the hour angle at zenith 90.833 deg (horizon plus refraction).
Longitude is east-positive. Times are shifted to the local clock with the
timezone's standard offset plus one hour when the daylight-saving heuristic
fires. Near the poles the sunrise hour angle is undefined; sunrise and sunset
then come out as NaN (``"--:--"``) instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo

from nimbus_weather.analysis.units import round_half_up

# Equation of time (minutes)
EQT_SCALE = 229.18
EQT_COEFFS = (0.000075, 0.001868, -0.032077, -0.014615, -0.040849)

# Solar declination (radians)
DECL_COEFFS = (0.006918, -0.399912, 0.070257, -0.006758, 0.000907, -0.002697, 0.00148)

#: Zenith angle of sunrise/sunset including atmospheric refraction.
SUNRISE_ZENITH_DEG = 90.833

#: Upper bound of solar heating on bare skin, in W/m2 (not the solar constant).
SOLAR_REFERENCE_WM2 = 400.0

#: Sun this close to the horizon contributes no insolation.
HORIZON_ZENITH_DEG = 89.0

NO_TIME = "--:--"


@dataclass(frozen=True)
class SunTimes:
    """Sun position and local clock times for one location and instant."""

    zenith: float
    sunrise: str
    sunset: str
    noon: str


# ---------------------------------------------------------------------------
# Clock helpers
# ---------------------------------------------------------------------------


def float_to_time(hours: float) -> str:
    """Format decimal hours as ``HH:MM`` (6.5 -> ``"06:30"``)."""
    if not math.isfinite(hours):
        return NO_TIME
    whole = math.floor(hours)
    minutes = int(round_half_up((hours - whole) * 60))
    if minutes >= 60:
        return f"{whole + 1:02d}:00"
    return f"{whole:02d}:{minutes:02d}"


def time_string_to_decimal(time_string: str) -> float:
    """Parse ``HH:MM`` into decimal hours. ``"--:--"`` gives NaN."""
    if time_string == NO_TIME:
        return math.nan
    hours, minutes = time_string.split(":")
    return int(hours) + int(minutes) / 60


def _localize(instant: datetime, tz: tzinfo | None) -> datetime:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(tz or UTC)


def decimal_hours(instant: datetime, tz: tzinfo | None = None) -> float:
    """Local clock time of ``instant`` in decimal hours (seconds ignored)."""
    local = _localize(instant, tz)
    return local.hour + local.minute / 60


def day_of_year(instant: datetime) -> int:
    """Day of year, 1-366."""
    return instant.timetuple().tm_yday


def _standard_offset(year: int, tz: tzinfo) -> timedelta:
    january = datetime(year, 1, 1, tzinfo=tz).utcoffset() or timedelta(0)
    july = datetime(year, 7, 1, tzinfo=tz).utcoffset() or timedelta(0)
    return min(january, july)


def is_daylight_saving_time(instant: datetime, tz: tzinfo | None = None) -> bool:
    """Whether DST is in effect at ``instant`` in ``tz``.

    Heuristic: the instant's UTC offset differs from the smaller of the
    January 1 and July 1 offsets of the same year.
    """
    if tz is None:
        return False
    local = _localize(instant, tz)
    return local.utcoffset() != _standard_offset(local.year, tz)


# ---------------------------------------------------------------------------
# Solar position
# ---------------------------------------------------------------------------


def _fractional_year(utc: datetime) -> float:
    hour = utc.hour + utc.minute / 60 + utc.second / 3600
    return 2 * math.pi / 365 * (day_of_year(utc) - 1 + (hour - 12) / 24)


def _equation_of_time(gamma: float) -> float:
    a1, a2, a3, a4, a5 = EQT_COEFFS
    return EQT_SCALE * (
        a1
        + a2 * math.cos(gamma)
        + a3 * math.sin(gamma)
        + a4 * math.cos(2 * gamma)
        + a5 * math.sin(2 * gamma)
    )


def _declination(gamma: float) -> float:
    b0, b1, b2, b3, b4, b5, b6 = DECL_COEFFS
    return (
        b0
        + b1 * math.cos(gamma)
        + b2 * math.sin(gamma)
        + b3 * math.cos(2 * gamma)
        + b4 * math.sin(2 * gamma)
        + b5 * math.cos(3 * gamma)
        + b6 * math.sin(3 * gamma)
    )


def _acos_or_nan(x: float) -> float:
    if -1.0 <= x <= 1.0:
        return math.acos(x)
    return math.nan


def calculate_sun_times(
    lat: float, lon: float, instant: datetime, tz: tzinfo | None = None
) -> SunTimes:
    """Compute zenith, sunrise, sunset and solar noon.

    Args:
        lat: Latitude in decimal degrees.
        lon: Longitude in decimal degrees, east-positive.
        instant: Moment of interest. Naive values are taken as UTC.
        tz: Timezone whose clock the times are expressed on (default UTC).

    Returns:
        SunTimes with the zenith in whole degrees and ``HH:MM`` times.
    """
    utc = _localize(instant, UTC)
    gamma = _fractional_year(utc)
    eqtime = _equation_of_time(gamma)
    decl = _declination(gamma)
    lat_rad = math.radians(lat)

    utc_minutes = utc.hour * 60 + utc.minute + utc.second / 60
    true_solar_time = utc_minutes + eqtime + 4 * lon
    hour_angle = math.radians(true_solar_time / 4 - 180)

    cos_zenith = math.sin(lat_rad) * math.sin(decl) + math.cos(lat_rad) * math.cos(
        decl
    ) * math.cos(hour_angle)
    zenith = round_half_up(math.degrees(math.acos(max(-1.0, min(1.0, cos_zenith)))))

    ha_sunrise = math.degrees(
        _acos_or_nan(
            math.cos(math.radians(SUNRISE_ZENITH_DEG)) / (math.cos(lat_rad) * math.cos(decl))
            - math.tan(lat_rad) * math.tan(decl)
        )
    )

    shift = 0.0
    if tz is not None:
        shift = _standard_offset(_localize(instant, tz).year, tz).total_seconds() / 3600
        if is_daylight_saving_time(instant, tz):
            shift += 1

    sunrise = round_half_up((720 - 4 * (lon + ha_sunrise) - eqtime) / 60, 2) + shift
    sunset = round_half_up((720 - 4 * (lon - ha_sunrise) - eqtime) / 60, 2) + shift
    noon = round_half_up((720 - 4 * lon - eqtime) / 60, 2) + shift

    return SunTimes(
        zenith=zenith,
        sunrise=float_to_time(sunrise),
        sunset=float_to_time(sunset),
        noon=float_to_time(noon),
    )


def get_current_sun_times(lat: float, lon: float, tz: tzinfo | None = None) -> SunTimes:
    """Sun times for right now."""
    return calculate_sun_times(lat, lon, datetime.now(UTC), tz)


def get_daylight_duration(
    lat: float, lon: float, instant: datetime | None = None, tz: tzinfo | None = None
) -> float:
    """Hours between sunrise and sunset, rounded to 2 decimals (NaN at the poles)."""
    sun = calculate_sun_times(lat, lon, instant or datetime.now(UTC), tz)
    duration = time_string_to_decimal(sun.sunset) - time_string_to_decimal(sun.sunrise)
    return round_half_up(duration, 2)


# ---------------------------------------------------------------------------
# Insolation
# ---------------------------------------------------------------------------


def get_solar_insolation(zenith: float, clouds_pct: float) -> int:
    """Solar heating on an optimally oriented surface, in W/m2.

    The reference power is attenuated by the atmosphere path length
    (``1 / cos(zenith)``) and linearly by cloud cover. Zero when the sun is at
    or below the horizon.
    """
    if zenith >= HORIZON_ZENITH_DEG:
        return 0
    path_length = 1 / math.cos(math.radians(zenith))
    insolation = round_half_up(SOLAR_REFERENCE_WM2 / path_length * (100 - clouds_pct) / 100)
    if insolation < 0:
        return 0
    return int(insolation)
