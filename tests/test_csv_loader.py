"""
Tests for CsvBarLoader.

Test categories:
1. Reading and column normalisation
2. Series extraction (aliases, errors, missing-value warning)
3. Schema validation
4. End-to-end: CSV close column through the kernel engine
"""

import logging

import numpy as np
import pandas as pd
import pytest

from lorentzian_kernels import CsvBarLoader, rational_quadratic, rational_quadratic_tv


@pytest.fixture
def bars_csv(tmp_path):
    """200-bar TradingView-style export with mixed-case headers."""
    np.random.seed(42)
    n = 200
    close = 100.0 + np.cumsum(np.random.randn(n) * 0.5)
    frame = pd.DataFrame(
        {
            "time": pd.date_range("2024-01-01", periods=n, freq="15min").astype(str),
            "Open": close + np.random.randn(n) * 0.2,
            "High": close + np.abs(np.random.randn(n) * 0.3),
            "Low": close - np.abs(np.random.randn(n) * 0.3),
            " Close": close,
            "Vol": np.random.randint(100, 10000, size=n).astype(float),
        }
    )
    path = tmp_path / "BINANCE_BTCUSDT_15.csv"
    frame.to_csv(path, index=False)
    return path


class TestRead:
    def test_columns_normalised(self, bars_csv):
        frame = CsvBarLoader.read(bars_csv)
        assert list(frame.columns) == ["time", "open", "high", "low", "close", "vol"]
        assert len(frame) == 200

    def test_missing_ohlc_column(self, tmp_path):
        path = tmp_path / "partial.csv"
        pd.DataFrame({"open": [1.0], "close": [1.0]}).to_csv(path, index=False)
        with pytest.raises(ValueError, match="Missing OHLC columns"):
            CsvBarLoader.read(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CsvBarLoader.read(tmp_path / "nope.csv")


class TestExtractSeries:
    def test_close_series(self, bars_csv):
        frame = CsvBarLoader.read(bars_csv)
        close = CsvBarLoader.extract_series(frame, "Close")
        assert close.name == "close"
        assert close.dtype == np.float64
        assert len(close) == 200

    def test_vol_alias(self, bars_csv):
        frame = CsvBarLoader.read(bars_csv).rename(columns={"vol": "volume"})
        series = CsvBarLoader.extract_series(frame, "vol")
        assert series.name == "volume"

    def test_unknown_column(self, bars_csv):
        frame = CsvBarLoader.read(bars_csv)
        with pytest.raises(ValueError, match="not found"):
            CsvBarLoader.extract_series(frame, "hl2")

    def test_not_a_dataframe(self):
        with pytest.raises(TypeError):
            CsvBarLoader.extract_series([1.0, 2.0], "close")

    def test_missing_values_logged(self, caplog):
        frame = pd.DataFrame(
            {"open": [1.0, 2.0], "high": [1.0, 2.0], "low": [1.0, 2.0], "close": [1.0, np.nan]}
        )
        with caplog.at_level(logging.WARNING, logger="lorentzian_kernels"):
            series = CsvBarLoader.extract_series(frame, "close")
        assert "1 missing values" in caplog.text
        assert series.isna().sum() == 1


class TestValidateSchema:
    def test_all_present(self, bars_csv):
        result = CsvBarLoader.validate_schema(CsvBarLoader.read(bars_csv))
        assert result["all_present"] is True
        assert result["has_volume"] is True

    def test_partial(self):
        result = CsvBarLoader.validate_schema(pd.DataFrame({"Close": [1.0], "Open": [1.0]}))
        assert result["has_close"] is True
        assert result["has_high"] is False
        assert result["has_volume"] is False
        assert result["all_present"] is False


class TestEndToEnd:
    def test_close_through_both_strategies(self, bars_csv):
        close = CsvBarLoader.load_series(bars_csv, "close")

        batch = rational_quadratic(close, 8, 1.0, 25)
        reference = rational_quadratic_tv(close, 8, 1.0, 25)

        assert len(batch) == len(close)
        assert (batch.iloc[:26] == 0.0).all()
        np.testing.assert_allclose(batch.iloc[26:], reference.iloc[26:], rtol=1e-9)
        # estimates stay within the price range of the window they summarise
        assert batch.iloc[26:].between(close.min(), close.max()).all()
