"""Dirfile — the main interface for reading Dirfile data.

Usage:
    from dirscope import Dirfile

    d = Dirfile("/data/flight_2024")

    print(d)                      # Summary
    print(d.nfields)              # 42
    print(d.nframes)              # 18000
    print(d.spf("lon"))           # 5
    print(d.field_type("lon"))    # GDType.FLOAT64
    lon = d.get_data("lon")       # float64 array, nframes * spf samples
    lon = d["lon"]                # same thing

    d.plot("lon")                 # Matplotlib plot against frame number
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import numpy as np

from dirscope.errors import UnsupportedTypeError
from dirscope.native.format import GD_RDONLY
from dirscope.native.handle import NativeHandle
from dirscope.utils.logging import get_logger
from dirscope.utils.schema import (
    DirfileSummary,
    EntryType,
    FieldInfo,
    FieldStats,
    GDType,
)

log = get_logger(__name__)


class Dirfile:
    """Read-only access to a Dirfile through libgetdata.

    The Dirfile is opened on construction and stays open until close()
    (or the end of a ``with`` block).

    Args:
        path: Path to the Dirfile directory.
        library: libgetdata binding to use. None means the process-wide one.
    """

    def __init__(self, path: str | Path, library: Any = None) -> None:
        self._handle = NativeHandle(path, flags=GD_RDONLY, library=library)
        self._handle.open()
        self._fields: list[str] | None = None

    def close(self) -> None:
        """Close the underlying handle."""
        self._handle.close()

    def __enter__(self) -> Dirfile:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # --- Properties ---

    @property
    def path(self) -> Path:
        return self._handle.path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def closed(self) -> bool:
        return self._handle.closed

    @property
    def nfields(self) -> int:
        """Number of fields defined in the Dirfile."""
        return self._handle.nfields()

    @property
    def nframes(self) -> int:
        """Number of frames in the Dirfile."""
        return self._handle.nframes()

    @property
    def fields(self) -> list[str]:
        """Field names in format-file order."""
        if self._fields is None:
            self._fields = self._handle.field_list()
        return list(self._fields)

    def field_list(self) -> list[str]:
        return self.fields

    # --- Per-field metadata ---

    def spf(self, field: str) -> int:
        """Samples per frame of a field."""
        return self._handle.spf(field)

    def field_type(self, field: str) -> GDType:
        """Native sample type of a field."""
        return GDType.from_code(self._handle.native_type(field))

    def entry_type(self, field: str) -> EntryType:
        """Entry kind of a field (RAW, LINCOM, CONST, ...)."""
        return EntryType.from_code(self._handle.entry_type(field))

    def field_info(self, field: str) -> FieldInfo:
        entry = self.entry_type(field)
        gd_type = self.field_type(field)
        spf = self.spf(field) if entry.is_vector else 0
        dtype = gd_type.dtype
        return FieldInfo(
            name=field,
            entry_type=entry.name,
            native_type=gd_type.name,
            dtype=str(dtype) if dtype is not None else None,
            spf=spf,
            num_samples=self.nframes * spf,
        )

    # --- Data Access ---

    def _frame_range(self, first_frame: int, num_frames: int | None) -> tuple[int, int]:
        if first_frame < 0:
            raise ValueError(f"first_frame must be >= 0, got {first_frame}")
        nframes = self.nframes
        if first_frame > nframes:
            raise ValueError(f"first_frame {first_frame} is past the end ({nframes} frames)")
        if num_frames is None:
            num_frames = nframes - first_frame
        elif num_frames < 0:
            raise ValueError(f"num_frames must be >= 0, got {num_frames}")
        return first_frame, num_frames

    def get_data(
        self,
        field: str,
        first_frame: int = 0,
        num_frames: int | None = None,
        native: bool = False,
    ) -> np.ndarray:
        """Read a field's samples.

        Args:
            field: Field name.
            first_frame: First frame to read. Default 0.
            num_frames: Number of frames. Default None (to the last frame).
            native: Return the field's native dtype instead of float64.

        Returns:
            numpy array of num_frames * spf samples (fewer if the Dirfile
            ends early). The array owns its memory.

        Raises:
            FieldNotFoundError: If the field does not exist.
            UnsupportedTypeError: If the native type has no float64 conversion.
        """
        first_frame, num_frames = self._frame_range(first_frame, num_frames)
        gd_type = self.field_type(field)
        if gd_type == GDType.STRING:
            return self._get_string_data(field, native)
        if not gd_type.is_numeric:
            raise UnsupportedTypeError(f"Field '{field}' has unsupported type {gd_type.name}")

        spf = self.spf(field)
        total = num_frames * spf

        buf = np.zeros(total, dtype=gd_type.dtype)
        n_read = 0
        if total > 0:
            n_read = self._handle.getdata(field, first_frame, num_frames, int(gd_type), buf)
        log.debug(
            "read field",
            field=field,
            type=gd_type.name,
            first_frame=first_frame,
            num_frames=num_frames,
            samples=n_read,
        )

        if n_read < total:
            buf = buf[:n_read].copy()
        if native:
            return buf
        return buf.astype(np.float64)

    def _get_string_data(self, field: str, native: bool) -> np.ndarray:
        value = self._handle.get_string(field)
        if native:
            return np.array([value])
        try:
            number = float(value)
        except ValueError:
            log.warning("string field is not numeric, using 0.0", field=field, value=value)
            number = 0.0
        return np.array([number], dtype=np.float64)

    def read(
        self,
        fields: list[str] | None = None,
        first_frame: int = 0,
        num_frames: int | None = None,
    ) -> dict[str, np.ndarray]:
        """Read several fields over the same frame range.

        Args:
            fields: Field names. None means every readable field: vector
                    fields with a numeric type, plus STRING fields.
            first_frame: First frame to read.
            num_frames: Number of frames. None means to the last frame.

        Returns:
            dict mapping field name to float64 array.
        """
        names = fields if fields is not None else self.readable_fields()
        return {name: self.get_data(name, first_frame, num_frames) for name in names}

    def readable_fields(self) -> list[str]:
        """Fields get_data() can convert to float64, in format-file order.

        CONST, CARRAY and SARRAY entries and complex-typed fields are left out.
        """
        names = []
        for name in self.fields:
            entry = self.entry_type(name)
            if entry == EntryType.STRING:
                names.append(name)
            elif entry.is_vector and self.field_type(name).is_numeric:
                names.append(name)
            else:
                log.debug("not readable as samples", field=name, entry=entry.name)
        return names

    def frame_axis(self, field: str, first_frame: int = 0, num_frames: int | None = None) -> np.ndarray:
        """Frame coordinate of every sample of a field.

        Sample i of a read starting at first_frame sits at
        first_frame + i / spf. Scalar entries (STRING, CONST, ...) have a
        single value, placed at first_frame.
        """
        first_frame, num_frames = self._frame_range(first_frame, num_frames)
        if not self.entry_type(field).is_vector:
            return np.array([first_frame], dtype=np.float64)
        spf = self.spf(field)
        if spf == 0:
            return np.zeros(0, dtype=np.float64)
        return first_frame + np.arange(num_frames * spf, dtype=np.float64) / spf

    def stats(self, field: str) -> FieldStats:
        """Min/max/mean/std over the whole field."""
        return FieldStats.from_array(field, self.get_data(field))

    def describe(self) -> DirfileSummary:
        """Metadata snapshot of every field."""
        return DirfileSummary(
            path=str(self.path),
            nfields=self.nfields,
            nframes=self.nframes,
            fields=[self.field_info(name) for name in self.fields],
        )

    # --- Mapping protocol ---

    def __getitem__(self, field: str) -> np.ndarray:
        if not isinstance(field, str):
            raise TypeError(f"Invalid index type: {type(field)}. Use a field name.")
        return self.get_data(field)

    def __contains__(self, field: object) -> bool:
        return isinstance(field, str) and field in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return self.nframes

    # --- Visualization ---

    def plot(self, field: str, first_frame: int = 0, num_frames: int | None = None) -> Any:
        """Plot a field against frame number using matplotlib.

        Returns:
            matplotlib Figure object.

        Raises:
            ImportError: If matplotlib is not installed.
            ValueError: If the field is a scalar entry (CONST, STRING, ...).
        """
        entry = self.entry_type(field)
        if not entry.is_vector:
            raise ValueError(f"Field '{field}' is a {entry.name} entry and has no samples to plot")

        try:
            import matplotlib.pyplot as plt
        except ImportError:
            raise ImportError(
                "matplotlib is required for plotting. "
                "Install it with: pip install dirscope[viz]"
            )

        data = self.get_data(field, first_frame, num_frames)
        frames = self.frame_axis(field, first_frame, num_frames)[: len(data)]

        fig, ax = plt.subplots(figsize=(12, 4))
        ax.plot(frames, data, linewidth=0.8)
        ax.set_xlabel("Frame")
        ax.set_ylabel(field)
        ax.set_title(f"{self.name} — {field} ({self.spf(field)} spf)")
        ax.grid(True, alpha=0.3)
        fig.tight_layout()

        return fig

    # --- Display ---

    def summary(self) -> str:
        """Generate a human-readable summary string."""
        lines = []
        lines.append(f"Dirfile: {self.path}")
        lines.append(f"Frames: {self.nframes}")
        lines.append(f"Fields: {self.nfields}")
        names = self.fields
        for name in names[:20]:  # Show first 20
            info = self.field_info(name)
            lines.append(f"  {name}: {info.entry_type} {info.native_type}, spf={info.spf}")
        if len(names) > 20:
            lines.append(f"  ... and {len(names) - 20} more")
        return "\n".join(lines)

    def __repr__(self) -> str:
        if self.closed:
            return f"Dirfile(path='{self.path}', closed)"
        return f"Dirfile(path='{self.path}', fields={self.nfields}, frames={self.nframes})"

    def __str__(self) -> str:
        return self.summary()


def open_dirfile(path: str | Path, library: Any = None) -> Dirfile:
    """Open a Dirfile read-only."""
    return Dirfile(path, library=library)
