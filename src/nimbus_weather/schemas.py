"""
Domain models for nimbus weather.

Pydantic models for normalized provider data and pipeline output.
These define the canonical schema - providers normalize API responses to these,
and every analysis stage reads and annotates them.

Attributes are snake_case in Python; ``model_dump(by_alias=True)`` produces the
camelCase wire shape (``windSpeed``, ``isMinima``, ``precipitationGroupTotal``)
consumed by the chart layer.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


def _as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC; leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# =============================================================================
# Location
# =============================================================================


class Location(BaseModel):
    """Geographic point in decimal degrees.

    Coordinates are treated as opaque floats; the solar model tolerates
    whatever the trigonometry tolerates.
    """

    model_config = _MODEL_CONFIG

    latitude: float
    longitude: float

    def truncated(self) -> Location:
        """Round both coordinates to 2 decimals (about 1 km)."""
        return Location(latitude=round(self.latitude, 2), longitude=round(self.longitude, 2))


#: Used when the caller has no position (Kolding, Denmark).
FALLBACK_LOCATION = Location(latitude=55.49, longitude=9.47)


# =============================================================================
# Derived annotations
# =============================================================================


class ApparentTemperature(BaseModel):
    """Feels-like temperature at the min/avg/max insolation bounds (actual wind)."""

    model_config = _MODEL_CONFIG

    min: float
    avg: float
    max: float


class WindExposure(BaseModel):
    """Feels-like temperature sheltered from the wind and exposed to it."""

    model_config = _MODEL_CONFIG

    no_wind: float
    with_wind: float


class Extrema(BaseModel):
    """Channels for which a point is a local minimum or maximum."""

    model_config = _MODEL_CONFIG

    is_minima: list[str] = Field(default_factory=list)
    is_maxima: list[str] = Field(default_factory=list)


# =============================================================================
# Series
# =============================================================================


class TimePoint(BaseModel):
    """One sample of a forecast series.

    Units: temperature in C, wind in m/s, precipitation in mm, clouds and
    humidity in percent. ``sun_hours`` is the provider's sunshine proxy
    (percent of the period), zeroed at night by daylight correction.
    """

    model_config = _MODEL_CONFIG

    time: datetime
    temperature: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    wind_speed: float | None = None
    wind_gusts: float | None = None
    wind_direction: float | None = None
    precipitation: float | None = None
    precipitation_prob: float | None = None
    sun_hours: float | None = None
    clouds: float | None = None
    humidity: float | None = None

    apparent_temperature: ApparentTemperature | None = None
    patio_weather: WindExposure | None = None
    hiking_weather: WindExposure | None = None
    extrema: Extrema | None = None
    precipitation_group_total: float | None = None
    precipitation_group_start: int | None = None
    precipitation_group_end: int | None = None

    @field_validator("time")
    @classmethod
    def _time_is_aware(cls, value: datetime) -> datetime:
        return _as_utc(value)


class Alert(BaseModel):
    """A severe-weather alert issued by a provider."""

    model_config = _MODEL_CONFIG

    start: datetime
    end: datetime
    sender_name: str | None = None
    event: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("start", "end")
    @classmethod
    def _times_are_aware(cls, value: datetime) -> datetime:
        return _as_utc(value)


class NormalizedForecast(BaseModel):
    """Provider output after normalization: the pipeline's input."""

    model_config = _MODEL_CONFIG

    data: list[TimePoint] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)


class ProcessedForecast(NormalizedForecast):
    """Annotated, display-ready series plus alerts: the pipeline's output."""
