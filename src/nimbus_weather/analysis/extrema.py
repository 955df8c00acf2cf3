"""Local extrema detection for forecast channels.

Adaptive rolling-window detector. For each sample, the channel value is
compared against the average of up to ``window_size`` neighbours on each side.
A maximum candidate must exceed both averages, be at least as high as its left
neighbour and strictly higher than its right one, and have a prominence
(height above the lower of the two window minima) that clears a threshold
decaying with the distance since the last accepted maximum::

    threshold = base_prominence * exp(-distance / decay_distance)

Before the first maximum the full ``base_prominence`` applies. Right after a
peak the detector is stiff; the longer it goes without firing, the smaller
the bump it accepts, so one dominant early peak cannot hide the rest of the
series. Minima mirror this with window maxima.

An accepted extremum must also be far enough from the most recent extremum of
the opposite type, either in samples (``min_separation``) or in value
(``min_difference``). A sharp dip between two peaks survives; a near-flat
wiggle does not.

Endpoints have a window on one side only. They qualify when they are the
extreme of that window, differ from their neighbour and have a prominence of
at least ``base_prominence``.

Missing values are skipped: they are never candidates and are left out of
their neighbours' windows. Distances are measured in original indices.
"""

from __future__ import annotations

import logging
import math
import statistics
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from nimbus_weather.analysis.savgol import smooth_values
from nimbus_weather.config import ExtremaSettings
from nimbus_weather.schemas import Extrema

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence

    from nimbus_weather.schemas import TimePoint

logger = logging.getLogger(__name__)

#: Shorter series are returned unchanged.
MIN_SERIES_LENGTH = 3


class ExtremumType(StrEnum):
    """Kind of extremum."""

    MINIMUM = "minimum"
    MAXIMUM = "maximum"

    @property
    def opposite(self) -> ExtremumType:
        """The other kind."""
        if self is ExtremumType.MINIMUM:
            return ExtremumType.MAXIMUM
        return ExtremumType.MINIMUM


@dataclass(frozen=True)
class ExtremumCandidate:
    """An accepted extremum while scanning one channel."""

    index: int
    value: float
    type: ExtremumType


# ---------------------------------------------------------------------------
# Channel access
# ---------------------------------------------------------------------------


def resolve_channel(point: Any, channel: str) -> float | None:
    """Read a possibly dotted channel path (``apparent_temperature.min``).

    Returns None when any segment is missing or the value is not numeric.
    """
    value = point
    for part in channel.split("."):
        value = getattr(value, part, None)
        if value is None:
            return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return float(value)


def channel_values(series: Sequence[TimePoint], channel: str) -> list[float | None]:
    """Values of one channel across the series (None where missing)."""
    return [resolve_channel(point, channel) for point in series]


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def _threshold(index: int, last: ExtremumCandidate | None, settings: ExtremaSettings) -> float:
    if last is None:
        return settings.base_prominence
    distance = index - last.index
    return settings.base_prominence * math.exp(-distance / settings.decay_distance)


def _classify_endpoint(
    value: float, window: list[float], neighbour: float, settings: ExtremaSettings
) -> ExtremumType | None:
    if value >= max(window) and value > neighbour:
        if value - min(window) >= settings.base_prominence:
            return ExtremumType.MAXIMUM
    elif value <= min(window) and value < neighbour:
        if max(window) - value >= settings.base_prominence:
            return ExtremumType.MINIMUM
    return None


def _classify_interior(
    index: int,
    value: float,
    left: list[float],
    right: list[float],
    last: dict[ExtremumType, ExtremumCandidate | None],
    settings: ExtremaSettings,
) -> ExtremumType | None:
    if (
        value >= left[-1]
        and value > right[0]
        and value > statistics.fmean(left)
        and value > statistics.fmean(right)
    ):
        prominence = min(value - min(left), value - min(right))
        if prominence >= _threshold(index, last[ExtremumType.MAXIMUM], settings):
            return ExtremumType.MAXIMUM
    elif (
        value <= left[-1]
        and value < right[0]
        and value < statistics.fmean(left)
        and value < statistics.fmean(right)
    ):
        prominence = min(max(left) - value, max(right) - value)
        if prominence >= _threshold(index, last[ExtremumType.MINIMUM], settings):
            return ExtremumType.MINIMUM
    return None


def _is_distinct(
    index: int, value: float, opposite: ExtremumCandidate | None, settings: ExtremaSettings
) -> bool:
    if opposite is None:
        return True
    far_apart = index - opposite.index >= settings.min_separation
    contrasting = abs(value - opposite.value) >= settings.min_difference
    return far_apart or contrasting


def find_extrema(
    values: Sequence[float | None], settings: ExtremaSettings | None = None
) -> tuple[list[int], list[int]]:
    """Find local minima and maxima of one channel.

    Args:
        values: Channel values in series order; None marks a missing sample.
        settings: Detector tunables (defaults to ``ExtremaSettings()``).

    Returns:
        Tuple of (minima indices, maxima indices), each ascending.
    """
    settings = settings or ExtremaSettings()
    samples = [(i, v) for i, v in enumerate(values) if v is not None]
    if len(samples) < MIN_SERIES_LENGTH:
        return [], []

    w = settings.window_size
    last: dict[ExtremumType, ExtremumCandidate | None] = {
        ExtremumType.MINIMUM: None,
        ExtremumType.MAXIMUM: None,
    }
    accepted: list[ExtremumCandidate] = []

    for pos, (index, value) in enumerate(samples):
        left = [v for _, v in samples[max(0, pos - w) : pos]]
        right = [v for _, v in samples[pos + 1 : pos + 1 + w]]

        if not left:
            kind = _classify_endpoint(value, right, right[0], settings)
        elif not right:
            kind = _classify_endpoint(value, left, left[-1], settings)
        else:
            kind = _classify_interior(index, value, left, right, last, settings)

        if kind is None or not _is_distinct(index, value, last[kind.opposite], settings):
            continue

        candidate = ExtremumCandidate(index=index, value=value, type=kind)
        last[kind] = candidate
        accepted.append(candidate)

    minima = [c.index for c in accepted if c.type is ExtremumType.MINIMUM]
    maxima = [c.index for c in accepted if c.type is ExtremumType.MAXIMUM]
    return minima, maxima


def mark_extrema(
    series: list[TimePoint],
    channels: str | Iterable[str],
    settings: ExtremaSettings | None = None,
    *,
    smoothing_window: int | None = None,
    smoothed_channels: Collection[str] | None = None,
) -> list[TimePoint]:
    """Annotate points that are local extrema of the given channels.

    Each qualifying point gets an ``extrema`` annotation listing the channels
    for which it is a minimum (``is_minima``) or maximum (``is_maxima``).
    Points are annotated in place; the same list is returned. Channels absent
    from the whole series are skipped.

    Args:
        series: Time-ordered points.
        channels: Channel name(s); dotted paths reach nested values.
        settings: Detector tunables.
        smoothing_window: When set, channel values are passed through a
            Savitzky-Golay filter of this window before detection. The stored
            values are not changed.
        smoothed_channels: Channels to smooth (default: all of ``channels``).

    Returns:
        The annotated series.
    """
    channel_list = [channels] if isinstance(channels, str) else list(channels)
    if len(series) < MIN_SERIES_LENGTH:
        logger.debug("Series of %d points too short for extrema detection", len(series))
        return series

    for channel in channel_list:
        values = channel_values(series, channel)
        if all(v is None for v in values):
            logger.debug("Channel %r absent from series, skipping", channel)
            continue

        if smoothing_window and (smoothed_channels is None or channel in smoothed_channels):
            values = smooth_values(values, smoothing_window)

        minima, maxima = find_extrema(values, settings)
        for index in minima:
            _mark(series[index], channel, ExtremumType.MINIMUM)
        for index in maxima:
            _mark(series[index], channel, ExtremumType.MAXIMUM)
        logger.debug(
            "Channel %r: %d minima, %d maxima", channel, len(minima), len(maxima)
        )

    return series


def _mark(point: TimePoint, channel: str, kind: ExtremumType) -> None:
    if point.extrema is None:
        point.extrema = Extrema()
    names = point.extrema.is_minima if kind is ExtremumType.MINIMUM else point.extrema.is_maxima
    if channel not in names:
        names.append(channel)
