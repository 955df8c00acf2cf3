"""
Application settings and pipeline configuration.

``Settings`` is read from ``NIMBUS_*`` environment variables.
``PipelineConfig`` and ``ExtremaSettings`` are plain read-only configuration
handed to the analysis pipeline; forecast granularity is the
dominant factor in choosing extrema thresholds, so each ``ForecastType`` has
its own preset.
"""

from __future__ import annotations

import hashlib
import os
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from nimbus_weather.exceptions import UnknownProvider

if TYPE_CHECKING:
    from collections.abc import Mapping


class ForecastType(StrEnum):
    """Sampling granularity of a forecast series."""

    HOURLY = "hourly"
    THREE_HOURLY = "3-hourly"
    DAILY = "daily"


# =============================================================================
# Extrema thresholds
# =============================================================================


class ExtremaSettings(BaseModel):
    """Tunables for the adaptive extrema detector.

    Distances are in samples, amplitudes in the channel's native units
    (C for temperature, m/s for wind).
    """

    model_config = {"frozen": True}

    window_size: int = Field(default=5, ge=1)
    base_prominence: float = Field(default=3.0, ge=0)
    decay_distance: float = Field(default=6.0, gt=0)
    min_separation: int = Field(default=3, ge=0)
    min_difference: float = Field(default=1.0, ge=0)


EXTREMA_PRESETS: dict[ForecastType, ExtremaSettings] = {
    # Hourly series are dense: wait longer before re-arming and keep
    # opposite extrema further apart.
    ForecastType.HOURLY: ExtremaSettings(decay_distance=12.0, min_separation=6),
    ForecastType.THREE_HOURLY: ExtremaSettings(decay_distance=6.0, min_separation=3),
    ForecastType.DAILY: ExtremaSettings(window_size=3, decay_distance=6.0, min_separation=2),
}


def extrema_settings_for(forecast_type: ForecastType | str) -> ExtremaSettings:
    """Return the extrema preset for a forecast granularity."""
    return EXTREMA_PRESETS[ForecastType(forecast_type)]


DEFAULT_EXTREMA_CHANNELS: tuple[str, ...] = (
    "temperature",
    "wind_speed",
    "wind_gusts",
    "apparent_temperature.min",
    "apparent_temperature.max",
)


class PipelineConfig(BaseModel):
    """Read-only knobs for one pipeline invocation."""

    model_config = {"frozen": True}

    forecast_type: ForecastType = ForecastType.HOURLY
    extrema_channels: tuple[str, ...] = DEFAULT_EXTREMA_CHANNELS
    extrema: ExtremaSettings | None = None
    compute_apparent_temperature: bool = True
    timezone: str = "Europe/Copenhagen"
    smoothing_window: int | None = None
    smoothing_channels: tuple[str, ...] = ()

    def extrema_settings(self) -> ExtremaSettings:
        """Explicit extrema settings, or the preset for ``forecast_type``."""
        return self.extrema or extrema_settings_for(self.forecast_type)

    def fingerprint(self) -> str:
        """Short stable hash of the configuration, used in cache keys."""
        payload = self.model_dump_json()
        return hashlib.sha256(payload.encode()).hexdigest()[:12]


# =============================================================================
# Application settings
# =============================================================================

ENV_PREFIX = "NIMBUS_"

PROVIDER_FORECAST_TYPES: dict[str, ForecastType | None] = {
    "openmeteo": ForecastType.HOURLY,
    "dmi": ForecastType.HOURLY,
    # OpenWeatherMap granularity is user-selectable.
    "openweathermap": None,
}


class Settings(BaseModel):
    """Application settings, usually built with ``Settings.from_env()``."""

    app_name: str = "nimbus-weather"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    weather_provider: str = "openmeteo"
    owm_api_token: str = ""
    dmi_api_token: str = ""
    open_meteo_model: str = "auto"
    owm_forecast_type: ForecastType = ForecastType.THREE_HOURLY

    # Display units for CLI output; series values stay in C and m/s
    temp_unit: str = "celsius"
    wind_unit: str = "ms"
    show_apparent_temperature: bool = False
    location_cache_minutes: int = 15
    timezone: str = "Europe/Copenhagen"

    lat: float = 55.49
    lon: float = 9.47
    cache_dir: Path = Path("data")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``NIMBUS_<FIELD>`` environment variables.

        Unset variables keep their defaults; values are coerced by pydantic.
        """
        environ = os.environ if environ is None else environ
        values = {
            name: environ[ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if ENV_PREFIX + name.upper() in environ
        }
        return cls(**values)

    def forecast_type(self) -> ForecastType:
        """Granularity of the configured provider's forecast."""
        if self.weather_provider not in PROVIDER_FORECAST_TYPES:
            raise UnknownProvider(self.weather_provider)
        return PROVIDER_FORECAST_TYPES[self.weather_provider] or self.owm_forecast_type

    def pipeline_config(self) -> PipelineConfig:
        """Pipeline configuration derived from these settings."""
        return PipelineConfig(forecast_type=self.forecast_type(), timezone=self.timezone)


@lru_cache
def get_settings() -> Settings:
    """Return the process settings (read once)."""
    return Settings.from_env()
