"""dirscope Example: Reading Fields

Opens a Dirfile, prints its layout, and reads a couple of fields at
different sample rates.

Requires GetData (libgetdata) to be installed.

Run:
    python examples/read_fields.py /data/test_dirfile lon test_fsc2
"""

import sys

from dirscope import Dirfile, FieldNotFoundError


def main(path: str, field_names: list[str]) -> None:
    with Dirfile(path) as d:
        print(f"nfields: {d.nfields}")
        print(f"Total frames: {d.nframes}")

        for name in field_names:
            try:
                spf = d.spf(name)
                gd_type = d.field_type(name)
                data = d.get_data(name)
            except FieldNotFoundError as e:
                print(f"{name}: {e}")
                continue

            print(f"{name}: {gd_type.name}, {spf} samples/frame, {len(data)} samples")
            stats = d.stats(name)
            print(f"  min={stats.min:.4f} max={stats.max:.4f} mean={stats.mean:.4f}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    main(sys.argv[1], sys.argv[2:] or ["INDEX"])
