"""Forecast time-series analytics.

Pure, provider-agnostic transformations that turn a normalized forecast into
an annotated, display-ready series.

Dependency rule: analysis/ imports schemas and config only.
It never fetches data, touches the cache or renders anything.

Modules (leaves first):
  - units: temperature / wind speed conversion, UTC normalization
  - solar: sun position, sunrise/sunset, solar insolation
  - apparent: feels-like temperature at min/avg/max insolation
  - daylight: zero sun hours outside sunrise..sunset
  - extrema: adaptive local minima/maxima detection
  - precipitation: precipitation run totals
  - savgol: Savitzky-Golay smoothing/derivative filter
  - assembler: ``process()``, the ordered pipeline

Adding a stage
--------------
1. Create ``analysis/{name}.py`` with a pure function taking and returning
   ``list[TimePoint]`` (annotate in place or return copies, never reorder or
   drop points).

2. Rules:
   - No I/O, no HTTP, no Prefect decorators.
   - Raise on caller bugs (bad parameters); return short or sparse input
     unchanged.

3. Wire it into ``assembler.process`` at the right point in the order.

4. Re-export in ``__init__.py`` and add tests in ``tests/test_{name}.py``.
"""

from nimbus_weather.analysis.apparent import (
    ApparentTemperatureResult,
    WindPair,
    calculate,
    get_apparent_temperature,
)
from nimbus_weather.analysis.assembler import add_apparent_temperature, process
from nimbus_weather.analysis.daylight import correct_sun_hours, is_daylight
from nimbus_weather.analysis.extrema import find_extrema, mark_extrema, resolve_channel
from nimbus_weather.analysis.precipitation import group_precipitation
from nimbus_weather.analysis.savgol import savitzky_golay, smooth_values
from nimbus_weather.analysis.solar import (
    SunTimes,
    calculate_sun_times,
    get_daylight_duration,
    get_solar_insolation,
    time_string_to_decimal,
)
from nimbus_weather.analysis.units import (
    TemperatureUnit,
    WindSpeedUnit,
    to_celsius,
    to_kmh,
    to_temperature,
    to_utc_time,
    to_wind_speed,
)

__all__ = [
    "ApparentTemperatureResult",
    "SunTimes",
    "TemperatureUnit",
    "WindPair",
    "WindSpeedUnit",
    "add_apparent_temperature",
    "calculate",
    "calculate_sun_times",
    "correct_sun_hours",
    "find_extrema",
    "get_apparent_temperature",
    "get_daylight_duration",
    "get_solar_insolation",
    "group_precipitation",
    "is_daylight",
    "mark_extrema",
    "process",
    "resolve_channel",
    "savitzky_golay",
    "smooth_values",
    "time_string_to_decimal",
    "to_celsius",
    "to_kmh",
    "to_temperature",
    "to_utc_time",
    "to_wind_speed",
]
