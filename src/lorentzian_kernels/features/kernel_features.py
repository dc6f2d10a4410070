"""
Kernel feature expander: close series -> 9 kernel trend feature columns.

Columns:
1. Estimates (2): kernel_rq (yhat1), kernel_gaussian (yhat2)
2. Rates (4): bullish/bearish rate of change of yhat1 and their flips
3. Crosses (2): yhat2 crossing over / under yhat1
4. Direction (1): +1 / -1 / 0 via Direction.to_int()

Warm-up: estimates are 0.0 and every flag is 0 (direction NEUTRAL) where a
referenced bar precedes the first defined estimate.

Non-anticipative guarantee: row t uses only src[0..t].

Error Handling: raise_and_propagate
- NumericError from the kernel engine (e.g. NaN in src)
- Short input is logged and returned as an all-warm-up frame
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from lorentzian_kernels.config import DEFAULT_KERNEL_FILTER, Direction, KernelFilter
from lorentzian_kernels.core.kernels import (
    KernelFamily,
    KernelStrategy,
    kernel_regression,
    valid_start_index,
)
from lorentzian_kernels.core.series import SeriesLike, as_float_series
from lorentzian_kernels.features.estimates import KernelEstimates

logger = logging.getLogger(__name__)

FEATURE_COLUMNS = (
    "kernel_rq",
    "kernel_gaussian",
    "kernel_bullish_rate",
    "kernel_bearish_rate",
    "kernel_bullish_change",
    "kernel_bearish_change",
    "kernel_bullish_cross",
    "kernel_bearish_cross",
    "kernel_direction",
)
_ESTIMATE_COLUMNS = ("kernel_rq", "kernel_gaussian")

# Relative gap below which yhat2 and yhat1 count as equal in smoothing mode
SMOOTHING_TIE_RTOL = 1e-12


class KernelFeatureExpander:
    """
    Derive trend features from rational quadratic and Gaussian estimates.

    yhat1 = rational_quadratic(src, look_back_window, relative_weight, regression_level)
    yhat2 = gaussian(src, look_back_window - crossover_lag, regression_level)
    """

    def __init__(
        self,
        kernel_filter: KernelFilter | None = None,
        strategy: KernelStrategy = KernelStrategy.BATCH,
    ):
        self.kernel_filter = kernel_filter or DEFAULT_KERNEL_FILTER
        self.strategy = strategy

    @property
    def min_bars(self) -> int:
        return self.kernel_filter.min_bars

    def estimates(self, src: SeriesLike) -> KernelEstimates:
        """
        Compute yhat1 and yhat2.

        Raises:
            DomainError: If src is shorter than min_bars
            NumericError: If an estimate is non-finite
        """
        kf = self.kernel_filter
        yhat1 = kernel_regression(
            src,
            KernelFamily.RATIONAL_QUADRATIC,
            kf.look_back_window,
            relative_weight=kf.relative_weight,
            start_at_bar=kf.regression_level,
            strategy=self.strategy,
        )
        yhat2 = kernel_regression(
            src,
            KernelFamily.GAUSSIAN,
            kf.gaussian_look_back,
            start_at_bar=kf.regression_level,
            strategy=self.strategy,
        )
        return KernelEstimates(
            rational_quadratic=yhat1.to_numpy(),
            gaussian=yhat2.to_numpy(),
            valid_from=valid_start_index(kf.regression_level, self.strategy),
        )

    def expand(self, src: SeriesLike) -> pd.DataFrame:
        """
        Expand src into FEATURE_COLUMNS.

        Returns:
            DataFrame indexed like src with the 9 kernel feature columns
        """
        series = as_float_series(src)

        if len(series) < self.min_bars:
            logger.warning(
                "Only %d bars (need %d for kernel warm-up). "
                "All kernel features will be in warm-up state.",
                len(series),
                self.min_bars,
            )
            return pd.DataFrame(
                {
                    col: np.zeros(
                        len(series),
                        dtype=np.float64 if col in _ESTIMATE_COLUMNS else np.int64,
                    )
                    for col in FEATURE_COLUMNS
                },
                index=series.index,
            )

        est = self.estimates(series)
        yhat1 = pd.Series(est.rational_quadratic, index=series.index)
        yhat2 = pd.Series(est.gaussian, index=series.index)

        bar = np.arange(len(series))
        has_prev = bar >= est.valid_from + 1
        has_prev2 = bar >= est.valid_from + 2

        rates = self._extract_rates(yhat1, has_prev, has_prev2)
        crosses = self._extract_crosses(yhat1, yhat2, has_prev)
        direction = self._extract_direction(
            yhat1, yhat2, rates, valid=bar >= est.valid_from
        )

        return pd.concat(
            [
                pd.DataFrame({"kernel_rq": yhat1, "kernel_gaussian": yhat2}),
                rates,
                crosses,
                direction,
            ],
            axis=1,
        )

    def latest_direction(self, src: SeriesLike) -> Direction:
        """Direction of the most recent bar."""
        features = self.expand(src)
        if features.empty:
            return Direction.NEUTRAL
        return Direction.from_sign(features["kernel_direction"].iloc[-1])

    def _extract_rates(
        self, yhat1: pd.Series, has_prev: np.ndarray, has_prev2: np.ndarray
    ) -> pd.DataFrame:
        """
        Extract 4 rate-of-change features of yhat1.

        - kernel_bullish_rate: yhat1[t-1] < yhat1[t]
        - kernel_bearish_rate: yhat1[t-1] > yhat1[t]
        - kernel_bullish_change: bullish now, bearish one bar ago
        - kernel_bearish_change: bearish now, bullish one bar ago
        """
        prev1 = yhat1.shift(1)
        prev2 = yhat1.shift(2)

        is_bullish = (prev1 < yhat1) & has_prev
        is_bearish = (prev1 > yhat1) & has_prev
        was_bullish = (prev2 < prev1) & has_prev2
        was_bearish = (prev2 > prev1) & has_prev2

        return pd.DataFrame(
            {
                "kernel_bullish_rate": is_bullish.astype(np.int64),
                "kernel_bearish_rate": is_bearish.astype(np.int64),
                "kernel_bullish_change": (is_bullish & was_bearish).astype(np.int64),
                "kernel_bearish_change": (is_bearish & was_bullish).astype(np.int64),
            }
        )

    def _extract_crosses(
        self, yhat1: pd.Series, yhat2: pd.Series, has_prev: np.ndarray
    ) -> pd.DataFrame:
        """
        Extract 2 crossover features of yhat2 against yhat1.

        Non-anticipative: compares bar t with bar t-1.
        """
        spread = yhat2 - yhat1
        spread_prev = spread.shift(1)

        bullish_cross = (spread > 0) & (spread_prev <= 0) & has_prev
        bearish_cross = (spread < 0) & (spread_prev >= 0) & has_prev

        return pd.DataFrame(
            {
                "kernel_bullish_cross": bullish_cross.astype(np.int64),
                "kernel_bearish_cross": bearish_cross.astype(np.int64),
            }
        )

    def _extract_direction(
        self,
        yhat1: pd.Series,
        yhat2: pd.Series,
        rates: pd.DataFrame,
        valid: np.ndarray,
    ) -> pd.DataFrame:
        """
        Extract the kernel trend direction.

        Smoothing mode: yhat2 >= yhat1 is LONG, yhat2 < yhat1 is SHORT. Values
        within SMOOTHING_TIE_RTOL of each other are a tie and count as LONG.
        Rate mode: bullish/bearish rate of yhat1 (flat -> NEUTRAL).
        """
        if self.kernel_filter.use_kernel_smoothing:
            upper = yhat2.to_numpy()
            lower = yhat1.to_numpy()
            tie = np.isclose(upper, lower, rtol=SMOOTHING_TIE_RTOL, atol=0.0)
            bullish = ((upper >= lower) | tie) & valid
            bearish = ~bullish & valid
        else:
            bullish = rates["kernel_bullish_rate"].to_numpy() == 1
            bearish = rates["kernel_bearish_rate"].to_numpy() == 1

        direction = np.select(
            [bullish, bearish],
            [Direction.LONG.to_int(), Direction.SHORT.to_int()],
            default=Direction.NEUTRAL.to_int(),
        ).astype(np.int64)

        return pd.DataFrame({"kernel_direction": direction}, index=yhat1.index)
