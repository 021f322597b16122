"""CSV export for Dirfiles.

Exports field data to CSV files:
  - {name}_spf{n}.csv — one file per samples-per-frame rate; the first
                        column is the frame coordinate of each row
  - {name}_fields.csv — field metadata
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

import numpy as np

from dirscope.dirfile import Dirfile
from dirscope.native.format import CSV_FLOAT_FORMAT
from dirscope.utils.logging import get_logger
from dirscope.utils.schema import EntryType, FieldInfo, GDType

log = get_logger(__name__)


def export_csv(
    path: str | Path,
    output_dir: str | Path | None = None,
    fields: list[str] | None = None,
    include_metadata: bool = True,
    library: Any = None,
) -> list[Path]:
    """Export a Dirfile to CSV files.

    Fields sharing a samples-per-frame value go in the same file, one row
    per sample. STRING, CONST and other non-vector fields only appear in
    the metadata file.

    Args:
        path: Path to the Dirfile directory.
        output_dir: Directory for output files. Defaults to the Dirfile's parent.
        fields: Specific fields to export. None means all.
        include_metadata: Whether to write a field metadata CSV.
        library: libgetdata binding to use.

    Returns:
        List of paths to created CSV files.
    """
    path = Path(path)
    if output_dir is None:
        out = path.parent
    else:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)

    created: list[Path] = []
    with Dirfile(path, library=library) as dirfile:
        name = dirfile.name
        field_names = fields if fields else dirfile.fields
        infos = [dirfile.field_info(f) for f in field_names]

        for spf, group in sorted(_group_by_spf(infos).items()):
            rate_path = out / f"{name}_spf{spf}.csv"
            _write_rate_csv(dirfile, rate_path, group)
            created.append(rate_path)

        if include_metadata:
            meta_path = out / f"{name}_fields.csv"
            _write_fields_csv(infos, meta_path)
            created.append(meta_path)

    log.debug("csv export done", dirfile=str(path), files=len(created))
    return created


def _group_by_spf(infos: list[FieldInfo]) -> dict[int, list[str]]:
    """Bucket exportable vector fields by their samples-per-frame."""
    groups: dict[int, list[str]] = {}
    for info in infos:
        entry = EntryType[info.entry_type]
        gd_type = GDType[info.native_type]
        if not entry.is_vector or not gd_type.is_numeric or info.spf == 0:
            if entry.is_vector:
                log.warning("skipping field", field=info.name, type=info.native_type)
            continue
        groups.setdefault(info.spf, []).append(info.name)
    return groups


def _write_rate_csv(dirfile: Dirfile, path: Path, field_names: list[str]) -> None:
    """Write all fields of one sample rate to a CSV file."""
    data = {name: dirfile.get_data(name) for name in field_names}
    n_rows = max((len(v) for v in data.values()), default=0)
    frames = dirfile.frame_axis(field_names[0])[:n_rows]

    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["frame", *field_names])

        for i in range(n_rows):
            row: list[str] = [CSV_FLOAT_FORMAT.format(frames[i]) if i < len(frames) else ""]
            for name in field_names:
                values = data[name]
                row.append(_format_value(values[i]) if i < len(values) else "")
            writer.writerow(row)


def _format_value(value: float) -> str:
    if np.isnan(value):
        return "nan"
    return CSV_FLOAT_FORMAT.format(value)


def _write_fields_csv(infos: list[FieldInfo], path: Path) -> None:
    """Write field metadata to a CSV file."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["name", "entry_type", "native_type", "dtype", "spf", "num_samples"])
        for info in infos:
            writer.writerow([
                info.name,
                info.entry_type,
                info.native_type,
                info.dtype or "",
                info.spf,
                info.num_samples,
            ])
