"""Nimbus weather - forecast time-series analytics.

Architecture::

    datasources/   Weather providers (Open-Meteo, OpenWeatherMap, DMI)
    analysis/      Pure pipeline stages (units, solar, apparent temperature,
                   daylight, extrema, precipitation, Savitzky-Golay, assembler)
    store.py       Forecast cache with TTL
    flows/         Prefect orchestration (cache check, fetch, process, save)
    services/      Shared utilities (HTTP client with retry)

Data flow: datasources → normalize → analysis.process → store (cache) → display

Extension points (see each package's docstring for step-by-step guides):
  - New provider:        datasources/__init__.py
  - New pipeline stage:  analysis/__init__.py
"""

__version__ = "0.1.0"

from nimbus_weather.config import Settings
from nimbus_weather.schemas import NormalizedForecast, ProcessedForecast, TimePoint

__all__ = ["NormalizedForecast", "ProcessedForecast", "Settings", "TimePoint", "__version__"]
