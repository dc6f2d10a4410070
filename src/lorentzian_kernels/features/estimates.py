"""Raw kernel estimates consumed by KernelFeatureExpander.

Non-anticipative guarantee: values at index i use only bars 0..i.
"""

from dataclasses import dataclass

import numpy as np


@dataclass
class KernelEstimates:
    """Per-bar kernel estimates aligned with the input series.

    Attributes:
        rational_quadratic: Rational quadratic estimate (yhat1), 0.0 in warm-up
        gaussian: Gaussian estimate (yhat2), 0.0 in warm-up
        valid_from: First index holding a defined estimate in both arrays
    """

    rational_quadratic: np.ndarray
    gaussian: np.ndarray
    valid_from: int

    def __len__(self) -> int:
        return self.rational_quadratic.shape[0]
