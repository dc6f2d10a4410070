"""Feature constructors built on the kernel regression engine."""

from lorentzian_kernels.features.estimates import KernelEstimates
from lorentzian_kernels.features.kernel_features import (
    FEATURE_COLUMNS,
    KernelFeatureExpander,
)

__all__ = ["FEATURE_COLUMNS", "KernelEstimates", "KernelFeatureExpander"]
