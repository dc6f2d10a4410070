"""Coercion of caller input into the float64 pd.Series every operation works on."""

from __future__ import annotations

from typing import Iterable, Union

import numpy as np
import pandas as pd

SeriesLike = Union[pd.Series, np.ndarray, Iterable[float]]


def as_float_series(src: SeriesLike) -> pd.Series:
    """
    Return a float64 copy of ``src`` as a pd.Series.

    Index and name of a pd.Series input are kept; anything else gets a
    RangeIndex. The caller's object is never mutated.

    Raises:
        TypeError: If src is a scalar or a string
        ValueError: If values cannot be converted to float64, or src is not 1D
    """
    if isinstance(src, pd.Series):
        return src.astype(np.float64).copy()

    if isinstance(src, (str, bytes)) or np.isscalar(src):
        raise TypeError(f"src must be a 1D sequence of floats, got {type(src)}")

    values = np.array(list(src) if not isinstance(src, np.ndarray) else src, dtype=np.float64)
    if values.ndim != 1:
        raise ValueError(f"src must be one-dimensional, got shape {values.shape}")
    return pd.Series(values)
