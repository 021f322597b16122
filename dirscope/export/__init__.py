"""Export modules for Dirfiles."""

from dirscope.export.csv import export_csv
from dirscope.export.hdf5 import export_hdf5

__all__ = ["export_csv", "export_hdf5"]
