"""
Error types raised by the kernel regression engine and its helpers.

Error Handling: raise_and_propagate
- DomainError before any computation when a precondition is violated
- NumericError when a computation step yields a non-finite value
- ConfigError at construction time of a settings object
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class KernelRegressionError(Exception):
    """Base class for all errors raised by lorentzian_kernels."""


class DomainError(KernelRegressionError, ValueError):
    """Input violates a precondition (series too short, degenerate range, ...)."""


class NumericError(KernelRegressionError, ArithmeticError):
    """A computation produced NaN/Inf or divided by a zero cumulative weight."""


class ConfigErrorKind(Enum):
    """Enumerates every configuration rule that can fail."""

    INVALID_SOURCE = "invalid_source"
    NON_POSITIVE_NEIGHBORS_COUNT = "non_positive_neighbors_count"
    NON_POSITIVE_MAX_BARS_BACK = "non_positive_max_bars_back"
    EMA_PERIOD_TOO_SMALL = "ema_period_too_small"
    SMA_PERIOD_TOO_SMALL = "sma_period_too_small"
    REGIME_THRESHOLD_OUT_OF_RANGE = "regime_threshold_out_of_range"
    ADX_THRESHOLD_OUT_OF_RANGE = "adx_threshold_out_of_range"
    NON_POSITIVE_LOOK_BACK = "non_positive_look_back"
    NON_POSITIVE_RELATIVE_WEIGHT = "non_positive_relative_weight"
    NEGATIVE_REGRESSION_LEVEL = "negative_regression_level"
    CROSSOVER_LAG_OUT_OF_RANGE = "crossover_lag_out_of_range"
    INVALID_ENVIRONMENT = "invalid_environment"


class ConfigError(KernelRegressionError, ValueError):
    """
    Settings object failed validation.

    Attributes:
        kind: Which rule failed
        field: Name of the offending field (or environment variable)
        value: The rejected value
    """

    def __init__(self, kind: ConfigErrorKind, field: str, value: Any, message: str):
        super().__init__(f"{field}={value!r}: {message}")
        self.kind = kind
        self.field = field
        self.value = value


__all__ = [
    "ConfigError",
    "ConfigErrorKind",
    "DomainError",
    "KernelRegressionError",
    "NumericError",
]
