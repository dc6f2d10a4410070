"""
Series conditioning helpers that feed or post-process kernel estimates.

- normalizer: global min-max normalisation against the observed range
- rescale: linear remap between caller-supplied ranges
- rma: rolling mean followed by an exponential recurrence

normalizer is strict about a degenerate observed range, rescale is not
(its denominator is floored at RESCALE_EPSILON). rma drops leading missing
values instead of zero-filling them, unlike the kernel engine.

Error Handling: raise_and_propagate
- DomainError on degenerate observed range or non-positive rma length
"""

from __future__ import annotations

import logging

import pandas as pd

from lorentzian_kernels.core.series import SeriesLike, as_float_series
from lorentzian_kernels.errors import DomainError

logger = logging.getLogger(__name__)

RESCALE_EPSILON = 1e-9


def normalizer(src: SeriesLike, min_val: float, max_val: float) -> pd.Series:
    """
    Min-max normalise src into [min_val, max_val] using its own observed range.

    out[t] = (src[t] - obs_min) / (obs_max - obs_min) * (max_val - min_val) + min_val

    The observed min/max are taken over the whole series (NaN skipped) before
    any output is produced. NaN inputs stay NaN.

    Raises:
        DomainError: If obs_max <= obs_min (constant, empty or all-NaN series)
    """
    series = as_float_series(src)
    obs_min = series.min()
    obs_max = series.max()

    if not obs_max > obs_min:
        raise DomainError(
            f"normalizer needs a non-degenerate observed range, "
            f"got min={obs_min}, max={obs_max} over {len(series)} values"
        )

    return (series - obs_min) / (obs_max - obs_min) * (max_val - min_val) + min_val


def rescale(
    src: SeriesLike,
    old_min: float,
    old_max: float,
    new_min: float,
    new_max: float,
) -> pd.Series:
    """
    Linearly remap src from [old_min, old_max] to [new_min, new_max].

    The old span is floored at RESCALE_EPSILON, so a degenerate or inverted
    old range never divides by zero.
    """
    series = as_float_series(src)
    span = max(old_max - old_min, RESCALE_EPSILON)
    return new_min + (new_max - new_min) * (series - old_min) / span


def rma(src: SeriesLike, length: int) -> pd.Series:
    """
    Rolling mean (min_periods=1) smoothed by an EMA with alpha = 2 / (length + 1).

    ema[0] = mean[0]; ema[t] = alpha * mean[t] + (1 - alpha) * ema[t-1].
    Missing rolling means are skipped: they neither advance nor reset the
    recurrence and are left out of the result, so the output may be shorter
    than src. Retained rows keep their original index labels.

    Raises:
        DomainError: If length < 1
    """
    if length < 1:
        raise DomainError(f"rma length must be >= 1, got {length}")

    series = as_float_series(src)
    rolling_mean = series.rolling(window=length, min_periods=1).mean()

    alpha = 2.0 / (length + 1.0)
    present = rolling_mean.notna()
    # ignore_na: a missing mean neither advances nor resets the recurrence
    ewma = rolling_mean.ewm(alpha=alpha, adjust=False, ignore_na=True).mean()[present]

    skipped = len(series) - len(ewma)
    if skipped:
        logger.debug("rma skipped %d missing rolling-mean values (length=%d)", skipped, length)

    return ewma


# Long-form name kept for callers of the rma_indicator API
rma_indicator = rma


__all__ = ["RESCALE_EPSILON", "normalizer", "rescale", "rma", "rma_indicator"]
