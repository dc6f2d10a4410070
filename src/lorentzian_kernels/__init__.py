"""
Lorentzian kernel regression library.

Rational-quadratic and Gaussian kernel regression (Nadaraya-Watson style)
over price series, with series conditioning helpers and kernel trend features.
"""

__version__ = "0.1.0"

# Configuration
from lorentzian_kernels.config import (  # noqa: F401
    DEFAULT_KERNEL_FILTER,
    Direction,
    Filters,
    KernelFilter,
    Settings,
    load_kernel_filter_from_env,
)

# Core components
from lorentzian_kernels.core import (  # noqa: F401
    KernelFamily,
    KernelStrategy,
    gaussian,
    gaussian_tv,
    kernel_regression,
    normalizer,
    rational_quadratic,
    rational_quadratic_tv,
    rescale,
    rma,
    rma_indicator,
)

# Data loaders
from lorentzian_kernels.data import CsvBarLoader  # noqa: F401

# Errors
from lorentzian_kernels.errors import (  # noqa: F401
    ConfigError,
    ConfigErrorKind,
    DomainError,
    KernelRegressionError,
    NumericError,
)

# Feature constructors
from lorentzian_kernels.features import (  # noqa: F401
    KernelEstimates,
    KernelFeatureExpander,
)

__all__ = [
    # Config
    "DEFAULT_KERNEL_FILTER",
    "Direction",
    "Filters",
    "KernelFilter",
    "Settings",
    "load_kernel_filter_from_env",
    # Core
    "KernelFamily",
    "KernelStrategy",
    "gaussian",
    "gaussian_tv",
    "kernel_regression",
    "normalizer",
    "rational_quadratic",
    "rational_quadratic_tv",
    "rescale",
    "rma",
    "rma_indicator",
    # Data
    "CsvBarLoader",
    # Errors
    "ConfigError",
    "ConfigErrorKind",
    "DomainError",
    "KernelRegressionError",
    "NumericError",
    # Features
    "KernelEstimates",
    "KernelFeatureExpander",
]
