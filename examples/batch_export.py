"""dirscope Example: Batch Export

Exports every Dirfile found under a directory to CSV and HDF5 and prints
a summary table.

Requires GetData (libgetdata) to be installed.

Run:
    python examples/batch_export.py /data/flights exports/

Output:
    - exports/<dirfile>_spf<n>.csv for each sample rate
    - exports/<dirfile>_fields.csv with field metadata
    - exports/<dirfile>.h5
"""

import sys
from pathlib import Path

from dirscope import Dirfile, DirfileError, export_csv
from dirscope.export import export_hdf5


def find_dirfiles(root: Path) -> list[Path]:
    """Directories under root that contain a format file."""
    return sorted(p.parent for p in root.rglob("format") if p.is_file())


def main(root: Path, output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"{'Dirfile':30s}  {'Frames':>10s}  {'Fields':>8s}  {'Files':>6s}")
    print("-" * 60)

    for path in find_dirfiles(root):
        try:
            with Dirfile(path) as d:
                nframes, nfields = d.nframes, d.nfields
            created = export_csv(path, output_dir=output_dir)
            created.append(export_hdf5(path, output=output_dir / f"{path.name}.h5"))
        except DirfileError as e:
            print(f"{path.name:30s}  error: {e}")
            continue
        print(f"{path.name:30s}  {nframes:>10d}  {nfields:>8d}  {len(created):>6d}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    out = Path(sys.argv[2]) if len(sys.argv) > 2 else Path("exports")
    main(Path(sys.argv[1]), out)
