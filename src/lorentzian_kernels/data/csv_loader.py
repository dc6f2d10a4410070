"""
CsvBarLoader: load historical OHLCV bars from CSV into named series.

Used by examples and tests to feed the kernel regression engine with real
price history (e.g. TradingView exports with a ``time,open,high,low,close``
header plus extra indicator columns).

Error Handling: raise_and_propagate
- ValueError if required OHLC columns are missing
- ValueError if the requested column does not exist
- Propagate all pandas I/O and parsing errors
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class CsvBarLoader:
    """
    Read OHLCV bar files and extract float series for indicator computation.

    Column names are normalised (stripped, lower-cased) so exports with
    ``Close`` or `` close`` headers load the same way.

    Example:
        >>> close = CsvBarLoader.load_series("BINANCE_BTCUSDT_15.csv", "close")
        >>> rational_quadratic(close, 8, 1.0, 25)
    """

    REQUIRED_COLUMNS: list[str] = ["open", "high", "low", "close"]

    # Alternative spellings accepted by extract_series
    COLUMN_ALIASES: dict[str, str] = {"vol": "volume"}

    @classmethod
    def read(cls, path: str | Path) -> pd.DataFrame:
        """
        Read a CSV file of bars.

        Args:
            path: CSV file with a header row

        Returns:
            DataFrame with normalised column names, rows in file order

        Raises:
            ValueError: If any of REQUIRED_COLUMNS is missing
            FileNotFoundError: If path does not exist
        """
        frame = pd.read_csv(path)
        frame.columns = [str(col).strip().lower() for col in frame.columns]

        missing = [col for col in cls.REQUIRED_COLUMNS if col not in frame.columns]
        if missing:
            raise ValueError(
                f"Missing OHLC columns: {missing} in {path}. "
                f"Available columns: {list(frame.columns)}"
            )

        logger.debug("Loaded %d bars from %s", len(frame), path)
        return frame

    @classmethod
    def extract_series(cls, frame: pd.DataFrame, column: str = "close") -> pd.Series:
        """
        Extract one column as a float64 series named after the column.

        Raises:
            TypeError: If frame is not a pd.DataFrame
            ValueError: If the column (or its alias) is not present
        """
        if not isinstance(frame, pd.DataFrame):
            raise TypeError(f"frame must be pd.DataFrame, got {type(frame)}")

        name = column.strip().lower()
        if name not in frame.columns:
            name = cls.COLUMN_ALIASES.get(name, name)
        if name not in frame.columns:
            raise ValueError(
                f"Column '{column}' not found. Available columns: {list(frame.columns)}"
            )

        series = frame[name].astype(np.float64)
        missing = int(series.isna().sum())
        if missing:
            logger.warning(
                "Column '%s' has %d missing values; kernel estimates over them will fail",
                name,
                missing,
            )
        return series.rename(name)

    @classmethod
    def load_series(cls, path: str | Path, column: str = "close") -> pd.Series:
        """Read path and extract column in one call."""
        return cls.extract_series(cls.read(path), column)

    @classmethod
    def validate_schema(cls, frame: pd.DataFrame) -> dict[str, bool]:
        """
        Report which OHLCV columns are present.

        Returns:
            Dict with has_<column> flags for open/high/low/close/volume and
            all_present (True when every REQUIRED_COLUMNS entry exists)
        """
        columns = {str(col).strip().lower() for col in frame.columns}
        result = {
            f"has_{col}": col in columns
            for col in [*cls.REQUIRED_COLUMNS, "volume"]
        }
        result["has_volume"] = result["has_volume"] or "vol" in columns
        result["all_present"] = all(result[f"has_{col}"] for col in cls.REQUIRED_COLUMNS)
        return result
