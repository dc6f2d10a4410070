"""
Non-anticipative progressive subset tests for kernel estimates and features.

Methodology:
    For t in [min_bars+10, 50%, 75%, 100%]:
        partial = compute(src[:t])
        full = compute(src)
        assert partial == full[:t]

The reference strategy is a plain Python loop, so prefixes must match
bit for bit. The batch strategy is compared with a tight tolerance.

Error Handling: raise_and_propagate
"""

import numpy as np
import pandas as pd
import pytest

from lorentzian_kernels import (
    KernelFeatureExpander,
    KernelStrategy,
    gaussian,
    rational_quadratic,
    rational_quadratic_tv,
    rma,
)
from lorentzian_kernels.features import FEATURE_COLUMNS


@pytest.fixture
def close() -> pd.Series:
    np.random.seed(42)
    return pd.Series(100.0 + np.cumsum(np.random.randn(600) * 0.5), name="close")


def cutoffs(n: int, min_bars: int) -> list[int]:
    return [min_bars + 10, n // 2, (3 * n) // 4, n]


class TestKernelNonAnticipative:
    def test_reference_estimates_are_prefix_stable(self, close):
        full = rational_quadratic_tv(close, 8, 8.0, 25)
        for t in cutoffs(len(close), 27):
            partial = rational_quadratic_tv(close.iloc[:t], 8, 8.0, 25)
            pd.testing.assert_series_equal(partial, full.iloc[:t])

    @pytest.mark.parametrize(
        "compute",
        [
            lambda s: rational_quadratic(s, 8, 8.0, 25),
            lambda s: gaussian(s, 6, 25),
            lambda s: rma(s, 14),
        ],
    )
    def test_batch_outputs_are_prefix_stable(self, close, compute):
        full = compute(close)
        for t in cutoffs(len(close), 27):
            partial = compute(close.iloc[:t])
            np.testing.assert_allclose(
                partial.to_numpy(), full.iloc[:t].to_numpy(), rtol=1e-12, atol=0
            )

    def test_features_are_prefix_stable(self, close):
        expander = KernelFeatureExpander(strategy=KernelStrategy.REFERENCE)
        full = expander.expand(close)

        for t in cutoffs(len(close), expander.min_bars):
            partial = expander.expand(close.iloc[:t])
            for col in FEATURE_COLUMNS:
                mismatch = partial[col].to_numpy() != full[col].iloc[:t].to_numpy()
                if mismatch.any():
                    idx = int(np.argmax(mismatch))
                    pytest.fail(
                        f"Non-anticipative violation in '{col}' at index {idx} "
                        f"(cutoff {t}): partial={partial[col].iloc[idx]}, "
                        f"full={full[col].iloc[idx]}"
                    )
