"""Kernel regression engine and series conditioning helpers."""

from lorentzian_kernels.core.conditioning import (
    RESCALE_EPSILON,
    normalizer,
    rescale,
    rma,
    rma_indicator,
)
from lorentzian_kernels.core.kernels import (
    KernelFamily,
    KernelStrategy,
    gaussian,
    gaussian_tv,
    gaussian_weights,
    kernel_regression,
    rational_quadratic,
    rational_quadratic_tv,
    rational_quadratic_weights,
    valid_start_index,
    window_size_for,
)
from lorentzian_kernels.core.series import as_float_series

__all__ = [
    "KernelFamily",
    "KernelStrategy",
    "RESCALE_EPSILON",
    "as_float_series",
    "gaussian",
    "gaussian_tv",
    "gaussian_weights",
    "kernel_regression",
    "normalizer",
    "rational_quadratic",
    "rational_quadratic_tv",
    "rational_quadratic_weights",
    "rescale",
    "rma",
    "rma_indicator",
    "valid_start_index",
    "window_size_for",
]
