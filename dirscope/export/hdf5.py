"""HDF5 export for Dirfiles.

The output layout is:

    /                  — attrs: source, nframes, nfields, summary (JSON)
    /fields/
        /<name>        — dataset per vector field, native dtype,
                         attrs: spf, native_type, entry_type
    /strings           — group attrs holding STRING field values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import h5py

from dirscope.dirfile import Dirfile
from dirscope.native.format import COMPRESSION, COMPRESSION_OPTS
from dirscope.utils.logging import get_logger
from dirscope.utils.schema import EntryType, GDType

log = get_logger(__name__)

FIELDS_GROUP = "fields"
STRINGS_GROUP = "strings"


def export_hdf5(
    path: str | Path,
    output: str | Path | None = None,
    fields: list[str] | None = None,
    library: Any = None,
) -> Path:
    """Export a Dirfile to a single HDF5 file.

    Args:
        path: Path to the Dirfile directory.
        output: Output file. Defaults to ``<dirfile>.h5`` next to the Dirfile.
        fields: Specific fields to export. None means all.
        library: libgetdata binding to use.

    Returns:
        Path to the created file.
    """
    path = Path(path)
    out = Path(output) if output is not None else path.parent / f"{path.name}.h5"
    out.parent.mkdir(parents=True, exist_ok=True)

    with Dirfile(path, library=library) as dirfile:
        summary = dirfile.describe()
        wanted = set(fields) if fields else None

        with h5py.File(str(out), "w") as f:
            f.attrs["source"] = str(path)
            f.attrs["nframes"] = summary.nframes
            f.attrs["nfields"] = summary.nfields
            f.attrs["summary"] = summary.to_json()
            fields_group = f.create_group(FIELDS_GROUP)
            strings_group = f.create_group(STRINGS_GROUP)

            for info in summary.fields:
                if wanted is not None and info.name not in wanted:
                    continue
                gd_type = GDType[info.native_type]
                entry = EntryType[info.entry_type]

                if gd_type == GDType.STRING:
                    strings_group.attrs[info.name] = str(dirfile.get_data(info.name, native=True)[0])
                    continue
                if not entry.is_vector or not gd_type.is_numeric:
                    log.warning("skipping field", field=info.name, type=info.native_type)
                    continue

                data = dirfile.get_data(info.name, native=True)
                ds = fields_group.create_dataset(
                    info.name,
                    data=data,
                    compression=COMPRESSION if data.size else None,
                    compression_opts=COMPRESSION_OPTS if data.size else None,
                )
                ds.attrs["spf"] = info.spf
                ds.attrs["native_type"] = info.native_type
                ds.attrs["entry_type"] = info.entry_type

    log.debug("hdf5 export done", dirfile=str(path), output=str(out))
    return out
