"""
Kernel regression engine: rational-quadratic and Gaussian estimators.

Each kernel family ships two independent strategies of the same formula:

- BATCH: weight vector computed once, every trailing window reduced with
  a single matrix-vector product (production path).
- REFERENCE (``*_tv`` functions): nested loop over bars and lags, weight
  recomputed inline per bar (bar-by-bar TradingView formulation).

Both must agree within floating-point tolerance; tests cross-check them.

Window size is ``start_at_bar + 2``. Estimates for bars before the first
full window are exactly 0.0 (never NaN). Output length == input length.

Error Handling: raise_and_propagate
- DomainError on invalid parameters or a series shorter than the window
- NumericError on zero/non-finite cumulative weight or non-finite estimates
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from lorentzian_kernels.core.series import SeriesLike, as_float_series
from lorentzian_kernels.errors import DomainError, NumericError

logger = logging.getLogger(__name__)


class KernelFamily(Enum):
    RATIONAL_QUADRATIC = "rational_quadratic"
    GAUSSIAN = "gaussian"


class KernelStrategy(Enum):
    BATCH = "batch"
    REFERENCE = "reference"


def window_size_for(start_at_bar: int) -> int:
    return start_at_bar + 2


def valid_start_index(start_at_bar: int, strategy: KernelStrategy) -> int:
    """
    First bar index that receives a defined estimate under ``strategy``.

    BATCH places its first window at ``window_size - 1``; REFERENCE starts its
    loop at ``start_at_bar + 1``. With ``window_size = start_at_bar + 2`` both
    resolve to the same index.
    """
    if strategy is KernelStrategy.BATCH:
        return window_size_for(start_at_bar) - 1
    return start_at_bar + 1


# --- Weight functions ---


def rational_quadratic_weights(
    look_back: int, relative_weight: float, window_size: int
) -> np.ndarray:
    """
    Rational quadratic weights for lags 0..window_size-1.

    w(i) = (1 + i^2 / (look_back^2 * 2 * relative_weight)) ^ (-relative_weight)

    Larger relative_weight thins the tails; as it grows the curve approaches
    the Gaussian weight with the same look_back.
    """
    lags = np.arange(window_size, dtype=np.float64)
    scale = float(look_back) ** 2 * 2.0 * relative_weight
    return (1.0 + lags**2 / scale) ** (-relative_weight)


def gaussian_weights(look_back: int, window_size: int) -> np.ndarray:
    """Gaussian (RBF) weights for lags 0..window_size-1: exp(-i^2 / (2 * look_back^2))."""
    lags = np.arange(window_size, dtype=np.float64)
    return np.exp(-(lags**2) / (2.0 * float(look_back) ** 2))


def _rational_quadratic_weight(i: int, look_back: int, relative_weight: float) -> float:
    return (1.0 + i**2 / (look_back**2 * 2.0 * relative_weight)) ** (-relative_weight)


def _gaussian_weight(i: int, look_back: int) -> float:
    return math.exp(-(i**2) / (2.0 * look_back**2))


# --- Validation ---


def _validate(
    series: pd.Series,
    look_back: int,
    start_at_bar: int,
    relative_weight: float | None = None,
    requires_relative_weight: bool = False,
) -> int:
    """Check preconditions, return the window size."""
    if not look_back > 0:
        raise DomainError(f"look_back must be > 0, got {look_back}")

    if start_at_bar < 0:
        raise DomainError(f"start_at_bar must be >= 0, got {start_at_bar}")

    if requires_relative_weight:
        if relative_weight is None:
            raise DomainError("relative_weight is required for the rational quadratic kernel")
        if not relative_weight > 0:
            raise DomainError(f"relative_weight must be > 0, got {relative_weight}")

    window_size = window_size_for(start_at_bar)
    if len(series) < window_size:
        raise DomainError(
            f"src length ({len(series)}) must be >= window size ({window_size}) "
            f"for start_at_bar={start_at_bar}"
        )
    return window_size


def _check_cumulative_weight(cumulative_weight: float, bar_index: int | None = None) -> None:
    if not math.isfinite(cumulative_weight) or cumulative_weight == 0.0:
        where = "" if bar_index is None else f" at bar {bar_index}"
        raise NumericError(f"cumulative kernel weight is {cumulative_weight}{where}")


def _check_estimates(estimates: np.ndarray, offset: int) -> None:
    finite = np.isfinite(estimates)
    if not finite.all():
        bad = int(np.argmin(finite))
        raise NumericError(
            f"non-finite kernel estimate {estimates[bad]} at bar {bad + offset}"
        )


# --- Strategies ---


def _batch(series: pd.Series, weights: np.ndarray) -> pd.Series:
    values = series.to_numpy(dtype=np.float64)
    window_size = weights.shape[0]

    cumulative_weight = float(weights.sum())
    _check_cumulative_weight(cumulative_weight)

    # Row k holds values[k : k + window_size]; reversing puts lag 0 first.
    windows = sliding_window_view(values, window_size)
    estimates = windows[:, ::-1] @ weights / cumulative_weight
    _check_estimates(estimates, offset=window_size - 1)

    out = np.zeros(values.shape[0], dtype=np.float64)
    out[window_size - 1 :] = estimates
    return pd.Series(out, index=series.index, name=series.name)


def _reference(
    series: pd.Series, start_at_bar: int, weight: Callable[[int], float]
) -> pd.Series:
    values = series.to_numpy(dtype=np.float64).tolist()
    out = [0.0] * len(values)

    for bar_index in range(start_at_bar + 1, len(values)):
        current_weight = 0.0
        cumulative_weight = 0.0
        for i in range(start_at_bar + 2):
            w = weight(i)
            current_weight += values[bar_index - i] * w
            cumulative_weight += w

        _check_cumulative_weight(cumulative_weight, bar_index)
        estimate = current_weight / cumulative_weight
        if not math.isfinite(estimate):
            raise NumericError(f"non-finite kernel estimate {estimate} at bar {bar_index}")
        out[bar_index] = estimate

    return pd.Series(out, index=series.index, name=series.name, dtype=np.float64)


# --- Public API ---


def rational_quadratic(
    src: SeriesLike, look_back: int, relative_weight: float, start_at_bar: int
) -> pd.Series:
    """
    Rational quadratic kernel regression, batch strategy.

    Args:
        src: Input series (e.g. close prices)
        look_back: Kernel bandwidth; larger values flatten the weight curve
        relative_weight: Tail heaviness; larger values approach the Gaussian
        start_at_bar: Window is start_at_bar + 2 bars; earlier bars are 0.0

    Returns:
        Estimate series with the same length, index and name as src

    Raises:
        DomainError: If parameters are invalid or src is shorter than the window
        NumericError: If an estimate is non-finite (e.g. NaN in src)

    Example:
        >>> rational_quadratic([1.0, 2.0, 3.0, 4.0, 5.0], 2, 3.0, 1).round(4).tolist()
        [0.0, 0.0, 2.1473, 3.1473, 4.1473]
    """
    series = as_float_series(src)
    window_size = _validate(series, look_back, start_at_bar, relative_weight, True)
    logger.debug(
        "rational_quadratic batch: bars=%d window=%d look_back=%s relative_weight=%s",
        len(series),
        window_size,
        look_back,
        relative_weight,
    )
    weights = rational_quadratic_weights(look_back, relative_weight, window_size)
    return _batch(series, weights)


def rational_quadratic_tv(
    src: SeriesLike, look_back: int, relative_weight: float, start_at_bar: int
) -> pd.Series:
    """Rational quadratic kernel regression, reference (bar-by-bar) strategy."""
    series = as_float_series(src)
    window_size = _validate(series, look_back, start_at_bar, relative_weight, True)
    logger.debug(
        "rational_quadratic reference: bars=%d window=%d look_back=%s relative_weight=%s",
        len(series),
        window_size,
        look_back,
        relative_weight,
    )
    return _reference(
        series,
        start_at_bar,
        lambda i: _rational_quadratic_weight(i, look_back, relative_weight),
    )


def gaussian(src: SeriesLike, look_back: int, start_at_bar: int) -> pd.Series:
    """
    Gaussian kernel regression, batch strategy.

    Args:
        src: Input series
        look_back: Kernel bandwidth (standard deviation of the weight curve, in bars)
        start_at_bar: Window is start_at_bar + 2 bars; earlier bars are 0.0

    Returns:
        Estimate series with the same length, index and name as src

    Raises:
        DomainError: If parameters are invalid or src is shorter than the window
        NumericError: If an estimate is non-finite
    """
    series = as_float_series(src)
    window_size = _validate(series, look_back, start_at_bar)
    logger.debug(
        "gaussian batch: bars=%d window=%d look_back=%s", len(series), window_size, look_back
    )
    return _batch(series, gaussian_weights(look_back, window_size))


def gaussian_tv(src: SeriesLike, look_back: int, start_at_bar: int) -> pd.Series:
    """Gaussian kernel regression, reference (bar-by-bar) strategy."""
    series = as_float_series(src)
    window_size = _validate(series, look_back, start_at_bar)
    logger.debug(
        "gaussian reference: bars=%d window=%d look_back=%s",
        len(series),
        window_size,
        look_back,
    )
    return _reference(series, start_at_bar, lambda i: _gaussian_weight(i, look_back))


def kernel_regression(
    src: SeriesLike,
    family: KernelFamily,
    look_back: int,
    *,
    start_at_bar: int,
    relative_weight: float | None = None,
    strategy: KernelStrategy = KernelStrategy.BATCH,
) -> pd.Series:
    """
    Dispatch to the estimator for ``family`` computed with ``strategy``.

    relative_weight is required for RATIONAL_QUADRATIC and ignored for GAUSSIAN.
    """
    if family is KernelFamily.RATIONAL_QUADRATIC:
        if relative_weight is None:
            raise DomainError("relative_weight is required for the rational quadratic kernel")
        if strategy is KernelStrategy.BATCH:
            return rational_quadratic(src, look_back, relative_weight, start_at_bar)
        return rational_quadratic_tv(src, look_back, relative_weight, start_at_bar)

    if family is KernelFamily.GAUSSIAN:
        if strategy is KernelStrategy.BATCH:
            return gaussian(src, look_back, start_at_bar)
        return gaussian_tv(src, look_back, start_at_bar)

    raise ValueError(f"unsupported kernel family: {family!r}")


__all__ = [
    "KernelFamily",
    "KernelStrategy",
    "gaussian",
    "gaussian_tv",
    "gaussian_weights",
    "kernel_regression",
    "rational_quadratic",
    "rational_quadratic_tv",
    "rational_quadratic_weights",
    "valid_start_index",
    "window_size_for",
]
