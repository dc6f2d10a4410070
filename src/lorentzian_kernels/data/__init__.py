"""Data loaders for OHLCV sources."""

from lorentzian_kernels.data.csv_loader import CsvBarLoader

__all__ = ["CsvBarLoader"]
