"""Generalized Savitzky-Golay smoothing and differentiation.

Least-squares polynomial fit over a sliding window, expressed as a
convolution with precomputed weights. Weights come from Gram polynomials
(P. A. Gorry, "General least-squares smoothing and differentiation by the
convolution (Savitzky-Golay) method", Anal. Chem. 1990), which also give
asymmetric weight rows for the first and last ``window_size // 2`` points, so
the output has the same length as the input.

``xs`` is either a constant sample spacing or the array of x values; with an
array, each output point uses the mean spacing around it.
"""

from __future__ import annotations

import logging
import numbers
import warnings
from functools import lru_cache
from typing import TYPE_CHECKING

import numpy as np

from nimbus_weather.exceptions import InvalidFilterParameters

if TYPE_CHECKING:
    from collections.abc import Sequence

    from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)

MIN_WINDOW_SIZE = 5
#: Polynomials of this degree and above tend to oscillate.
OSCILLATION_DEGREE = 6


def _is_int(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _validate(n_points: int, xs: object, window_size: int, derivative: int, polynomial: int) -> None:
    if not _is_int(window_size) or window_size % 2 == 0 or window_size < MIN_WINDOW_SIZE:
        raise InvalidFilterParameters(
            "Invalid window size (should be odd and at least 5 integer number)"
        )
    if xs is None:
        raise InvalidFilterParameters("X must be defined")
    if window_size > n_points:
        raise InvalidFilterParameters(
            f"Window size is higher than the data length {window_size}>{n_points}"
        )
    if not _is_int(derivative) or derivative < 0:
        raise InvalidFilterParameters("Derivative should be a positive integer")
    if not _is_int(polynomial) or polynomial < 1:
        raise InvalidFilterParameters("Polynomial should be a positive integer")
    if polynomial >= OSCILLATION_DEGREE:
        msg = (
            "You should not use polynomial grade higher than 5 if you are not sure that "
            "your data arises from such a model. Possible polynomial oscillation problems"
        )
        logger.warning(msg)
        warnings.warn(msg, UserWarning, stacklevel=3)


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------


@lru_cache(maxsize=4096)
def gram_poly(i: int, m: int, k: int, s: int) -> float:
    """Gram polynomial (or its ``s``-th derivative) of order ``k`` at ``i``.

    ``m`` is the half window size; ``i`` ranges over ``-m..m``.
    """
    if k > 0:
        return (4 * k - 2) / (k * (2 * m - k + 1)) * (
            i * gram_poly(i, m, k - 1, s) + s * gram_poly(i, m, k - 1, s - 1)
        ) - ((k - 1) * (2 * m + k)) / (k * (2 * m - k + 1)) * gram_poly(i, m, k - 2, s)
    if k == 0 and s == 0:
        return 1.0
    return 0.0


def gen_fact(a: int, b: int) -> float:
    """Generalized factorial ``a * (a-1) * ... * (a-b+1)``."""
    gf = 1.0
    if a >= b:
        for j in range(a - b + 1, a + 1):
            gf *= j
    return gf


def weight(i: int, t: int, m: int, n: int, s: int) -> float:
    """Weight of point ``i`` for the evaluation position ``t``."""
    return sum(
        (2 * k + 1)
        * (gen_fact(2 * m, k) / gen_fact(2 * m + k + 1, k + 1))
        * gram_poly(i, m, k, 0)
        * gram_poly(t, m, k, s)
        for k in range(n + 1)
    )


def full_weights(window_size: int, polynomial: int, derivative: int) -> NDArray[np.float64]:
    """Weight matrix: row ``t + half`` evaluates the fit at offset ``t``."""
    half = window_size // 2
    weights = np.empty((window_size, window_size))
    for t in range(-half, half + 1):
        for j in range(-half, half + 1):
            weights[t + half, j + half] = weight(j, t, half, polynomial, derivative)
    return weights


def _spacing(xs: NDArray[np.float64], center: int, half: int, derivative: int) -> float:
    total = 0.0
    count = 0
    for i in range(center - half, center + half):
        if 0 <= i < len(xs) - 1:
            total += xs[i + 1] - xs[i]
            count += 1
    return float((total / count) ** derivative)


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------


def savitzky_golay(
    ys: ArrayLike,
    xs: ArrayLike | float,
    window_size: int = 9,
    derivative: int = 0,
    polynomial: int = 3,
) -> NDArray[np.float64]:
    """Apply the Savitzky-Golay filter.

    Args:
        ys: Values to filter.
        xs: Constant x spacing, or x values of the same length as ``ys``.
        window_size: Odd window length, at least 5 and at most ``len(ys)``.
        derivative: Derivative order (0 smooths).
        polynomial: Degree of the fitted polynomial (at least 1).

    Returns:
        Filtered values (or derivative), same length as ``ys``.

    Raises:
        InvalidFilterParameters: On a malformed window, derivative or degree.
    """
    y = np.asarray(ys, dtype=float)
    if y.ndim != 1:
        raise InvalidFilterParameters("Y values must be a one-dimensional array")
    _validate(len(y), xs, window_size, derivative, polynomial)

    half = window_size // 2
    n = len(y)
    result = np.empty(n)
    weights = full_weights(window_size, polynomial, derivative)

    constant_h = np.ndim(xs) == 0
    x = None if constant_h else np.asarray(xs, dtype=float)
    hs = float(xs) ** derivative if constant_h else 0.0  # type: ignore[arg-type]

    # Borders
    for i in range(half):
        d1 = float(np.dot(weights[half - i - 1], y[:window_size]))
        d2 = float(np.dot(weights[half + i + 1], y[n - window_size :]))
        if x is None:
            result[half - i - 1] = d1 / hs
            result[n - half + i] = d2 / hs
        else:
            result[half - i - 1] = d1 / _spacing(x, half - i - 1, half, derivative)
            result[n - half + i] = d2 / _spacing(x, n - half + i, half, derivative)

    # Interior
    interior = np.correlate(y, weights[half], mode="valid")
    if x is None:
        result[half : n - half] = interior / hs
    else:
        for k, d in enumerate(interior):
            center = k + half
            result[center] = d / _spacing(x, center, half, derivative)

    return result


def smooth_values(
    values: Sequence[float | None], window_size: int = 5, polynomial: int = 2
) -> list[float | None]:
    """Smooth a channel for analysis, leaving unusable input unchanged.

    A channel with gaps or fewer samples than the window is returned as-is;
    short series are legitimate input, not a caller error.
    """
    if len(values) < window_size or any(v is None for v in values):
        logger.debug("Skipping smoothing of %d values (gaps or shorter than window)", len(values))
        return list(values)
    return savitzky_golay(values, 1.0, window_size, 0, polynomial).tolist()
