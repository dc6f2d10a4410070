"""
Validated parameter objects for Lorentzian classification and its kernel filter.

Every range check runs once, in ``__post_init__``; an instance that exists is
valid. Failures raise ConfigError carrying a ConfigErrorKind.

Environment overrides (all optional, LORENTZIAN_KERNEL_LOOKBACK activates them):
    LORENTZIAN_KERNEL_LOOKBACK          look_back_window (int)
    LORENTZIAN_KERNEL_RELATIVE_WEIGHT   relative_weight (float, default 8.0)
    LORENTZIAN_KERNEL_REGRESSION_LEVEL  regression_level (int, default 25)
    LORENTZIAN_KERNEL_CROSSOVER_LAG     crossover_lag (int, default 2)
    LORENTZIAN_KERNEL_SMOOTHING         use_kernel_smoothing (bool, default false)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from lorentzian_kernels.errors import ConfigError, ConfigErrorKind

logger = logging.getLogger(__name__)

SOURCES = ("close", "open", "high", "low", "volume", "vol")

_ENV_PREFIX = "LORENTZIAN_KERNEL_"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Direction(Enum):
    """Market trend direction. Use to_int() for the signed numeric form."""

    LONG = "long"
    SHORT = "short"
    NEUTRAL = "neutral"

    def to_int(self) -> int:
        """LONG -> +1, SHORT -> -1, NEUTRAL -> 0."""
        return _DIRECTION_SIGNS[self]

    @classmethod
    def from_sign(cls, value: float) -> Direction:
        """Map the sign of value back to a direction (0 and NaN are NEUTRAL)."""
        if value > 0:
            return cls.LONG
        if value < 0:
            return cls.SHORT
        return cls.NEUTRAL


_DIRECTION_SIGNS = {Direction.LONG: 1, Direction.SHORT: -1, Direction.NEUTRAL: 0}


@dataclass(frozen=True)
class Settings:
    """General classification settings."""

    source: str = "close"
    neighbors_count: int = 8
    max_bars_back: int = 2000
    show_exits: bool = False
    use_dynamic_exits: bool = False
    use_ema_filter: bool = False
    ema_period: int = 200
    use_sma_filter: bool = False
    sma_period: int = 200

    def __post_init__(self) -> None:
        if self.source not in SOURCES:
            raise ConfigError(
                ConfigErrorKind.INVALID_SOURCE,
                "source",
                self.source,
                f"must be one of {SOURCES}",
            )
        if self.neighbors_count <= 0:
            raise ConfigError(
                ConfigErrorKind.NON_POSITIVE_NEIGHBORS_COUNT,
                "neighbors_count",
                self.neighbors_count,
                "must be bigger than zero",
            )
        if self.max_bars_back <= 0:
            raise ConfigError(
                ConfigErrorKind.NON_POSITIVE_MAX_BARS_BACK,
                "max_bars_back",
                self.max_bars_back,
                "must be bigger than zero",
            )
        if self.ema_period <= 1:
            raise ConfigError(
                ConfigErrorKind.EMA_PERIOD_TOO_SMALL,
                "ema_period",
                self.ema_period,
                "must be bigger than one",
            )
        if self.sma_period <= 1:
            raise ConfigError(
                ConfigErrorKind.SMA_PERIOD_TOO_SMALL,
                "sma_period",
                self.sma_period,
                "must be bigger than one",
            )


@dataclass(frozen=True)
class Filters:
    """Optional market filters applied on top of the classifier."""

    use_volatility_filter: bool = True
    use_regime_filter: bool = True
    use_adx_filter: bool = False
    regime_threshold: float = -0.1
    adx_threshold: int = 20

    def __post_init__(self) -> None:
        if not -10.0 <= self.regime_threshold <= 10.0:
            raise ConfigError(
                ConfigErrorKind.REGIME_THRESHOLD_OUT_OF_RANGE,
                "regime_threshold",
                self.regime_threshold,
                "must be between -10.0 and 10.0",
            )
        if not 0 <= self.adx_threshold <= 100:
            raise ConfigError(
                ConfigErrorKind.ADX_THRESHOLD_OUT_OF_RANGE,
                "adx_threshold",
                self.adx_threshold,
                "must be between 0 and 100",
            )


@dataclass(frozen=True)
class KernelFilter:
    """
    Kernel regression settings used for smoothing and trend estimation.

    Attributes:
        show_kernel_estimate: Whether the estimate is meant to be plotted
        use_kernel_smoothing: Use the Gaussian/rational-quadratic crossover
            instead of the rational-quadratic rate of change for direction
        look_back_window: Bandwidth of the rational quadratic kernel
        relative_weight: Rational quadratic shape parameter
        regression_level: start_at_bar of both kernels
        crossover_lag: Gaussian bandwidth is look_back_window - crossover_lag
    """

    show_kernel_estimate: bool = True
    use_kernel_smoothing: bool = False
    look_back_window: int = 8
    relative_weight: float = 8.0
    regression_level: int = 25
    crossover_lag: int = 2

    def __post_init__(self) -> None:
        if self.look_back_window <= 0:
            raise ConfigError(
                ConfigErrorKind.NON_POSITIVE_LOOK_BACK,
                "look_back_window",
                self.look_back_window,
                "must be bigger than zero",
            )
        if not self.relative_weight > 0:
            raise ConfigError(
                ConfigErrorKind.NON_POSITIVE_RELATIVE_WEIGHT,
                "relative_weight",
                self.relative_weight,
                "must be bigger than zero",
            )
        if self.regression_level < 0:
            raise ConfigError(
                ConfigErrorKind.NEGATIVE_REGRESSION_LEVEL,
                "regression_level",
                self.regression_level,
                "must not be negative",
            )
        if not 0 <= self.crossover_lag < self.look_back_window:
            raise ConfigError(
                ConfigErrorKind.CROSSOVER_LAG_OUT_OF_RANGE,
                "crossover_lag",
                self.crossover_lag,
                f"must be in [0, look_back_window={self.look_back_window})",
            )

    @property
    def gaussian_look_back(self) -> int:
        return self.look_back_window - self.crossover_lag

    @property
    def min_bars(self) -> int:
        """Bars needed before both kernels produce an estimate."""
        return self.regression_level + 2


DEFAULT_KERNEL_FILTER = KernelFilter()


def _env_number(environ: Mapping[str, str], suffix: str, default: str, cast: type):
    key = _ENV_PREFIX + suffix
    raw = environ.get(key, default).strip()
    try:
        return cast(raw)
    except ValueError as error:
        raise ConfigError(
            ConfigErrorKind.INVALID_ENVIRONMENT, key, raw, f"expected {cast.__name__}"
        ) from error


def _env_bool(environ: Mapping[str, str], suffix: str, default: bool) -> bool:
    key = _ENV_PREFIX + suffix
    raw = environ.get(key)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(
        ConfigErrorKind.INVALID_ENVIRONMENT, key, raw, "expected a boolean flag"
    )


def load_kernel_filter_from_env(
    environ: Mapping[str, str] | None = None,
) -> KernelFilter | None:
    """Load KernelFilter from LORENTZIAN_KERNEL_* env vars if set."""
    if environ is None:
        environ = os.environ

    if environ.get(_ENV_PREFIX + "LOOKBACK") is None:
        return None

    kernel_filter = KernelFilter(
        use_kernel_smoothing=_env_bool(environ, "SMOOTHING", False),
        look_back_window=_env_number(environ, "LOOKBACK", "8", int),
        relative_weight=_env_number(environ, "RELATIVE_WEIGHT", "8.0", float),
        regression_level=_env_number(environ, "REGRESSION_LEVEL", "25", int),
        crossover_lag=_env_number(environ, "CROSSOVER_LAG", "2", int),
    )
    logger.info("Kernel filter loaded from environment: %s", kernel_filter)
    return kernel_filter


__all__ = [
    "DEFAULT_KERNEL_FILTER",
    "Direction",
    "Filters",
    "KernelFilter",
    "SOURCES",
    "Settings",
    "load_kernel_filter_from_env",
]
