"""Tests for adaptive extrema detection."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from nimbus_weather.analysis.extrema import (
    ExtremumType,
    channel_values,
    find_extrema,
    mark_extrema,
    resolve_channel,
)
from nimbus_weather.config import ExtremaSettings
from nimbus_weather.schemas import ApparentTemperature, TimePoint

SETTINGS = ExtremaSettings(
    window_size=5, base_prominence=3, decay_distance=6, min_separation=3, min_difference=1
)


def _series(temperatures: list[float | None]) -> list[TimePoint]:
    start = datetime(2024, 6, 21, tzinfo=UTC)
    return [
        TimePoint(time=start + timedelta(hours=3 * i), temperature=t)
        for i, t in enumerate(temperatures)
    ]


def _spikes(length: int, spikes: dict[int, float]) -> list[float | None]:
    return [spikes.get(i, 0.0) for i in range(length)]


class TestExtremumType:
    """Test the extremum kind enum."""

    def test_opposite(self) -> None:
        assert ExtremumType.MINIMUM.opposite is ExtremumType.MAXIMUM
        assert ExtremumType.MAXIMUM.opposite is ExtremumType.MINIMUM


class TestChannelAccess:
    """Test reading plain and dotted channels."""

    def test_plain_channel(self) -> None:
        point = TimePoint(time=datetime(2024, 1, 1, tzinfo=UTC), wind_speed=4)
        assert resolve_channel(point, "wind_speed") == 4.0

    def test_dotted_channel(self) -> None:
        point = TimePoint(
            time=datetime(2024, 1, 1, tzinfo=UTC),
            apparent_temperature=ApparentTemperature(min=1, avg=2, max=3),
        )
        assert resolve_channel(point, "apparent_temperature.max") == 3.0

    def test_missing_nested_is_none(self) -> None:
        point = TimePoint(time=datetime(2024, 1, 1, tzinfo=UTC))
        assert resolve_channel(point, "apparent_temperature.min") is None

    def test_unknown_channel_is_none(self) -> None:
        point = TimePoint(time=datetime(2024, 1, 1, tzinfo=UTC))
        assert resolve_channel(point, "no_such_channel") is None

    def test_channel_values(self) -> None:
        assert channel_values(_series([1, None, 3]), "temperature") == [1.0, None, 3.0]


class TestFindExtrema:
    """Test detection on raw value sequences."""

    def test_alternating_series(self) -> None:
        minima, maxima = find_extrema([10, 15, 9, 14, 8], SETTINGS)
        assert maxima == [1, 3]
        assert minima == [2, 4]

    def test_shallow_dip_between_close_peaks_suppressed(self) -> None:
        """A dip too close to and too near in value to a peak is dropped."""
        settings = SETTINGS.model_copy(update={"min_difference": 5})
        minima, maxima = find_extrema([10, 15, 12, 16, 10], settings)
        assert maxima == [1, 3]
        assert 2 not in minima
        assert minima == [0, 4]

    def test_rearms_after_dominant_peak(self) -> None:
        """Small later peaks are found once the threshold has decayed."""
        values = _spikes(55, {2: 10, 17: 2, 32: 2, 47: 2})
        minima, maxima = find_extrema(values, SETTINGS)
        assert maxima == [2, 17, 32, 47]
        assert minima == []

    def test_small_peak_right_after_dominant_peak_suppressed(self) -> None:
        values = _spikes(20, {2: 10, 4: 2})
        minima, maxima = find_extrema(values, SETTINGS)
        assert maxima == [2]
        assert 3 not in minima

    def test_flat_series_has_no_extrema(self) -> None:
        assert find_extrema([5.0] * 12, SETTINGS) == ([], [])

    def test_short_series_unchanged(self) -> None:
        assert find_extrema([1, 9], SETTINGS) == ([], [])
        assert find_extrema([], SETTINGS) == ([], [])

    def test_missing_values_skipped(self) -> None:
        """Gaps are left out of windows; indices stay those of the input."""
        minima, maxima = find_extrema([10, None, 15, 9, None, 14, 8], SETTINGS)
        assert maxima == [2, 5]
        assert minima == [3, 6]

    def test_too_few_present_values(self) -> None:
        assert find_extrema([None, 4, None, 7, None], SETTINGS) == ([], [])

    def test_minima_and_maxima_disjoint(self) -> None:
        values = [3, 8, 1, 9, 2, 12, 4, 4, 11, 0, 7, 13, 1, 6, 2, 10]
        minima, maxima = find_extrema(values, SETTINGS)
        assert not set(minima) & set(maxima)
        assert minima == sorted(minima)
        assert maxima == sorted(maxima)

    def test_default_settings(self) -> None:
        minima, maxima = find_extrema([10, 15, 9, 14, 8])
        assert maxima == [1, 3]
        assert minima == [2, 4]


class TestMarkExtrema:
    """Test annotating a series in place."""

    def test_marks_points(self) -> None:
        series = _series([10, 15, 9, 14, 8])
        result = mark_extrema(series, "temperature", SETTINGS)

        assert result is series
        assert series[0].extrema is None
        assert series[1].extrema is not None
        assert series[1].extrema.is_maxima == ["temperature"]
        assert series[2].extrema is not None
        assert series[2].extrema.is_minima == ["temperature"]

    def test_absent_channel_skipped(self) -> None:
        series = _series([10, 15, 9, 14, 8])
        mark_extrema(series, ["wind_speed"], SETTINGS)
        assert all(p.extrema is None for p in series)

    def test_multiple_channels_accumulate(self) -> None:
        series = _series([10, 15, 9, 14, 8])
        for point, wind in zip(series, [1, 6, 0, 5, 0], strict=True):
            point.wind_speed = wind
        mark_extrema(series, ["temperature", "wind_speed"], SETTINGS)
        assert series[1].extrema is not None
        assert series[1].extrema.is_maxima == ["temperature", "wind_speed"]

    def test_marking_twice_does_not_duplicate(self) -> None:
        series = _series([10, 15, 9, 14, 8])
        mark_extrema(series, "temperature", SETTINGS)
        mark_extrema(series, "temperature", SETTINGS)
        assert series[1].extrema is not None
        assert series[1].extrema.is_maxima == ["temperature"]

    def test_short_series_returned_unchanged(self) -> None:
        series = _series([10, 15])
        assert mark_extrema(series, "temperature", SETTINGS) is series
        assert all(p.extrema is None for p in series)

    def test_smoothing_keeps_stored_values(self) -> None:
        temps: list[float | None] = [10, 15, 9, 14, 8, 13, 7, 12, 6, 11]
        series = _series(temps)
        mark_extrema(series, "temperature", SETTINGS, smoothing_window=5)
        assert [p.temperature for p in series] == temps

    @pytest.mark.parametrize("channel", ["temperature", "wind_speed"])
    def test_channel_not_in_smoothed_set(self, channel: str) -> None:
        """Channels outside ``smoothed_channels`` are analysed raw."""
        series = _series([10, 15, 9, 14, 8])
        for point in series:
            point.wind_speed = point.temperature
        mark_extrema(
            series,
            channel,
            SETTINGS,
            smoothing_window=5,
            smoothed_channels=["precipitation"],
        )
        assert series[1].extrema is not None
        assert series[1].extrema.is_maxima == [channel]
