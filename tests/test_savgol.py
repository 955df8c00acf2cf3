"""Tests for the Savitzky-Golay filter."""

from __future__ import annotations

import numpy as np
import pytest

from nimbus_weather.analysis.savgol import (
    full_weights,
    gen_fact,
    savitzky_golay,
    smooth_values,
)
from nimbus_weather.exceptions import InvalidFilterParameters


class TestWeights:
    """Test convolution weights."""

    def test_gen_fact(self) -> None:
        assert gen_fact(5, 2) == 20
        assert gen_fact(3, 0) == 1
        assert gen_fact(2, 3) == 1

    def test_smoothing_rows_sum_to_one(self) -> None:
        weights = full_weights(7, 2, 0)
        assert weights.sum(axis=1) == pytest.approx(np.ones(7))

    def test_classic_quadratic_window_5(self) -> None:
        """Centre row is the textbook (-3, 12, 17, 12, -3) / 35."""
        weights = full_weights(5, 2, 0)
        assert weights[2] == pytest.approx(np.array([-3, 12, 17, 12, -3]) / 35)


class TestSavitzkyGolay:
    """Test smoothing and differentiation."""

    def test_constant_series_unchanged(self) -> None:
        ys = np.full(15, 7.5)
        assert savitzky_golay(ys, 1.0, 5, 0, 2) == pytest.approx(ys)

    def test_same_length_as_input(self) -> None:
        ys = np.sin(np.linspace(0, 3, 30))
        assert savitzky_golay(ys, 1.0).shape == ys.shape

    def test_polynomial_reproduced_exactly(self) -> None:
        """A cubic fit leaves a quadratic untouched, borders included."""
        xs = np.arange(12, dtype=float)
        ys = 0.5 * xs**2 - 3 * xs + 1
        assert savitzky_golay(ys, 1.0, 7, 0, 3) == pytest.approx(ys, abs=1e-8)

    def test_first_derivative_of_line(self) -> None:
        ys = 2 * np.arange(10, dtype=float)
        assert savitzky_golay(ys, 1.0, 5, 1, 2) == pytest.approx(np.full(10, 2.0), abs=1e-8)

    def test_derivative_scaled_by_spacing(self) -> None:
        ys = 2 * np.arange(10, dtype=float)
        assert savitzky_golay(ys, 0.5, 5, 1, 2) == pytest.approx(np.full(10, 4.0), abs=1e-8)

    def test_non_uniform_x_values(self) -> None:
        """With an x array, the derivative is in y per unit of x."""
        xs = np.arange(10, dtype=float) * 0.5
        ys = 3 * xs
        assert savitzky_golay(ys, xs, 5, 1, 2) == pytest.approx(np.full(10, 3.0), abs=1e-8)

    def test_smooths_noise(self) -> None:
        ys = np.array([0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0], dtype=float)
        smoothed = savitzky_golay(ys, 1.0, 5, 0, 2)
        assert np.ptp(smoothed[2:-2]) < np.ptp(ys)

    def test_accepts_lists(self) -> None:
        result = savitzky_golay([1.0, 2.0, 3.0, 4.0, 5.0], 1.0, 5, 0, 1)
        assert result == pytest.approx([1.0, 2.0, 3.0, 4.0, 5.0])


class TestParameterValidation:
    """Test rejection of malformed parameters."""

    @pytest.mark.parametrize("window_size", [4, 3, 1, 6, 5.0])
    def test_bad_window(self, window_size: int) -> None:
        with pytest.raises(InvalidFilterParameters, match="Invalid window size"):
            savitzky_golay(np.ones(20), 1.0, window_size)

    def test_window_longer_than_data(self) -> None:
        with pytest.raises(InvalidFilterParameters, match="higher than the data length 9>6"):
            savitzky_golay(np.ones(6), 1.0, 9)

    def test_missing_x(self) -> None:
        with pytest.raises(InvalidFilterParameters, match="X must be defined"):
            savitzky_golay(np.ones(10), None, 5)  # type: ignore[arg-type]

    def test_negative_derivative(self) -> None:
        with pytest.raises(InvalidFilterParameters, match="Derivative"):
            savitzky_golay(np.ones(10), 1.0, 5, -1)

    def test_zero_polynomial(self) -> None:
        with pytest.raises(InvalidFilterParameters, match="Polynomial"):
            savitzky_golay(np.ones(10), 1.0, 5, 0, 0)

    def test_two_dimensional_input(self) -> None:
        with pytest.raises(InvalidFilterParameters):
            savitzky_golay(np.ones((3, 10)), 1.0, 5)

    def test_invalid_parameters_are_value_errors(self) -> None:
        with pytest.raises(ValueError):
            savitzky_golay(np.ones(10), 1.0, 4)

    def test_high_polynomial_warns(self) -> None:
        with pytest.warns(UserWarning, match="polynomial grade higher than 5"):
            result = savitzky_golay(np.ones(20), 1.0, 9, 0, 6)
        assert result == pytest.approx(np.ones(20))


class TestSmoothValues:
    """Test the lenient helper used by extrema detection."""

    def test_smooths(self) -> None:
        values: list[float | None] = [0, 1, 0, 1, 0, 1, 0, 1]
        assert smooth_values(values, 5) != values

    def test_gaps_returned_unchanged(self) -> None:
        values: list[float | None] = [1, None, 3, 4, 5, 6]
        assert smooth_values(values, 5) == values

    def test_short_returned_unchanged(self) -> None:
        values: list[float | None] = [1, 2, 3]
        assert smooth_values(values, 5) == values

    def test_returns_plain_floats(self) -> None:
        result = smooth_values([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 5)
        assert all(isinstance(v, float) for v in result)
