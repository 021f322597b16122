"""dirscope — Python access to Dirfile time-series data.

Reads Dirfiles (directory-based, multi-field sampled telemetry) through
the GetData library and hands the samples back as numpy arrays.

Quick start:
    from dirscope import Dirfile, export_csv

    # Read
    with Dirfile("/data/flight_2024") as d:
        print(d)                  # Summary
        print(d.fields)           # Field names
        print(d.nframes)          # Frame count
        print(d.spf("lon"))       # Samples per frame
        lon = d.get_data("lon")   # float64 array

    # Export
    export_csv("/data/flight_2024", output_dir="exports/")
    from dirscope.export import export_hdf5
    export_hdf5("/data/flight_2024")
"""

__version__ = "0.1.0"

from dirscope.dirfile import Dirfile, open_dirfile
from dirscope.errors import (
    DirfileClosedError,
    DirfileError,
    DirfileOpenError,
    FieldNotFoundError,
    LibraryNotFoundError,
    UnsupportedTypeError,
)
from dirscope.export.csv import export_csv
from dirscope.utils.schema import EntryType, GDType

__all__ = [
    "Dirfile",
    "open_dirfile",
    "export_csv",
    "GDType",
    "EntryType",
    "DirfileError",
    "DirfileOpenError",
    "DirfileClosedError",
    "FieldNotFoundError",
    "LibraryNotFoundError",
    "UnsupportedTypeError",
    "__version__",
]
