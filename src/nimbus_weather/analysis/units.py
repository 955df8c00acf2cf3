"""Unit conversions and time normalization.

Pure functions, no I/O. Temperatures convert through Celsius and wind speeds
through km/h, so any pair of supported units round-trips.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from enum import StrEnum

from nimbus_weather.exceptions import InvalidUnit


class TemperatureUnit(StrEnum):
    """Supported temperature units."""

    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"
    KELVIN = "kelvin"


class WindSpeedUnit(StrEnum):
    """Supported wind speed units."""

    MS = "ms"
    KMH = "kmh"
    MPH = "mph"
    KNOTS = "knots"


KELVIN_OFFSET = 273.15

# km/h per unit, and unit per km/h (published rounded factors, not exact inverses)
_TO_KMH: dict[str, float] = {"ms": 3.6, "kmh": 1.0, "mph": 1.6093, "knots": 1.852}
_FROM_KMH: dict[str, float] = {"ms": 1 / 3.6, "kmh": 1.0, "mph": 0.6214, "knots": 0.5399}


def to_celsius(value: float, from_unit: str) -> float:
    """Convert a temperature to Celsius."""
    if from_unit == TemperatureUnit.FAHRENHEIT:
        return (value - 32) * 5 / 9
    if from_unit == TemperatureUnit.CELSIUS:
        return value
    if from_unit == TemperatureUnit.KELVIN:
        return value - KELVIN_OFFSET
    raise InvalidUnit(from_unit)


def to_temperature(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a temperature between any two supported units."""
    celsius = to_celsius(value, from_unit)
    if to_unit == TemperatureUnit.FAHRENHEIT:
        return celsius * 9 / 5 + 32
    if to_unit == TemperatureUnit.CELSIUS:
        return celsius
    if to_unit == TemperatureUnit.KELVIN:
        return celsius + KELVIN_OFFSET
    raise InvalidUnit(to_unit)


def to_kmh(value: float, from_unit: str) -> float:
    """Convert a wind speed to km/h."""
    try:
        return value * _TO_KMH[from_unit]
    except KeyError:
        raise InvalidUnit(from_unit) from None


def to_wind_speed(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a wind speed between any two supported units."""
    if to_unit not in _FROM_KMH:
        raise InvalidUnit(to_unit)
    return to_kmh(value, from_unit) * _FROM_KMH[to_unit]


def to_utc_time(instant: datetime) -> datetime:
    """Rebuild ``instant`` from its UTC calendar fields.

    The result is a UTC-aware datetime whose wall-clock fields equal the
    input's UTC wall-clock fields, truncated to whole seconds. Naive input is
    taken to already be UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    utc = instant.astimezone(UTC)
    return datetime(
        utc.year, utc.month, utc.day, utc.hour, utc.minute, utc.second, tzinfo=UTC
    )


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going toward +infinity (2.5 -> 3, -2.5 -> -2).

    NaN and infinities pass through unchanged.
    """
    if not math.isfinite(value):
        return value
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor
