"""Group consecutive precipitation periods into annotated runs.

A run opens on the first wet point and continues while wet points follow.
A single dry point is bridged when the point right after it is wet again;
anything longer closes the run. Each run's total is written to the point in
the middle of the run so the chart can show one label per shower.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nimbus_weather.schemas import TimePoint

logger = logging.getLogger(__name__)


def _is_wet(point: TimePoint) -> bool:
    return (point.precipitation or 0) > 0


def _annotate(series: list[TimePoint], start: int, end: int, total: float) -> None:
    middle = (start + end) // 2
    point = series[middle]
    point.precipitation_group_total = total
    point.precipitation_group_start = start
    point.precipitation_group_end = end
    logger.debug("Precipitation run %d..%d: %.1f mm", start, end, total)


def group_precipitation(series: list[TimePoint]) -> list[TimePoint]:
    """Mark the middle point of every precipitation run with the run's total.

    The annotated point gets ``precipitation_group_total`` (sum over the run),
    ``precipitation_group_start`` and ``precipitation_group_end`` (first and
    last wet index). Points are annotated in place; the same list is returned.
    A series without wet points is left untouched.
    """
    in_group = False
    start = -1
    total = 0.0
    dry_count = 0

    for i, point in enumerate(series):
        if _is_wet(point):
            if not in_group:
                in_group = True
                start = i
                total = 0.0
            total += point.precipitation or 0
            dry_count = 0
            continue

        if not in_group:
            continue

        dry_count += 1
        next_is_wet = i + 1 < len(series) and _is_wet(series[i + 1])
        if dry_count >= 2 or not next_is_wet:
            _annotate(series, start, i - dry_count, total)
            in_group = False
            dry_count = 0

    if in_group:
        _annotate(series, start, len(series) - 1 - dry_count, total)

    return series
