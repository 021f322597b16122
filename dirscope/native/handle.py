"""Thin, checked wrapper around a libgetdata DIRFILE handle.

Every call is followed by a gd_error() check; native failures surface
as dirscope exceptions instead of sentinel return values.
"""

from __future__ import annotations

import ctypes
import os
from pathlib import Path
from typing import Any

import numpy as np

from dirscope.errors import (
    DirfileClosedError,
    DirfileError,
    DirfileOpenError,
    FieldNotFoundError,
)
from dirscope.native.format import (
    ERROR_STRING_SIZE,
    GD_E_BAD_CODE,
    GD_E_OK,
    GD_RDONLY,
    STRING_VALUE_SIZE,
)
from dirscope.native.library import get_library
from dirscope.utils.logging import get_logger

log = get_logger(__name__)


def encode_field(field: str) -> bytes:
    """Encode a field code for the C API."""
    if "\x00" in field:
        raise ValueError(f"Field name contains a NUL byte: {field!r}")
    return field.encode("utf-8")


class NativeHandle:
    """Owns one DIRFILE* opened through libgetdata.

    Args:
        path: Dirfile directory.
        flags: gd_open() flags. Defaults to read-only.
        library: Binding to use. None means the process-wide libgetdata.
    """

    def __init__(self, path: str | Path, flags: int = GD_RDONLY, library: Any = None) -> None:
        self.path = Path(path)
        self.flags = flags
        self._lib = library
        self._handle: Any = None

    def open(self) -> None:
        """Open the Dirfile with gd_open()."""
        if not self.path.is_dir():
            raise FileNotFoundError(f"Dirfile not found: {self.path}")
        if self._lib is None:
            self._lib = get_library()

        handle = self._lib.gd_open(os.fsencode(self.path), self.flags)
        if not handle:
            raise DirfileOpenError(f"gd_open returned NULL for {self.path}")

        code = self._lib.gd_error(handle)
        if code != GD_E_OK:
            message = self._error_string(handle)
            self._lib.gd_discard(handle)
            raise DirfileOpenError(f"Cannot open {self.path}: {message}", code=code)

        self._handle = handle
        log.debug("dirfile opened", path=str(self.path))

    def close(self) -> None:
        """Close the handle. Safe to call more than once."""
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        if self._lib.gd_close(handle) != 0:
            # gd_close leaves the handle alive on failure
            log.warning("gd_close failed, discarding", path=str(self.path),
                        error=self._error_string(handle))
            self._lib.gd_discard(handle)
        log.debug("dirfile closed", path=str(self.path))

    @property
    def closed(self) -> bool:
        return self._handle is None

    def _require_open(self) -> Any:
        if self._handle is None:
            raise DirfileClosedError(f"Dirfile {self.path} is closed.")
        return self._handle

    def _error_string(self, handle: Any) -> str:
        buf = ctypes.create_string_buffer(ERROR_STRING_SIZE)
        self._lib.gd_error_string(handle, buf, ERROR_STRING_SIZE)
        return buf.value.decode("utf-8", errors="replace")

    def _check(self, operation: str, field: str | None = None) -> None:
        """Raise if the last call on this handle set an error."""
        code = self._lib.gd_error(self._handle)
        if code == GD_E_OK:
            return
        message = self._error_string(self._handle)
        if code == GD_E_BAD_CODE:
            raise FieldNotFoundError(f"Field '{field}' not found in {self.path}: {message}", code=code)
        raise DirfileError(f"{operation} failed on {self.path}: {message}", code=code)

    # --- Queries ---

    def nfields(self) -> int:
        handle = self._require_open()
        n = self._lib.gd_nfields(handle)
        self._check("gd_nfields")
        return int(n)

    def nframes(self) -> int:
        handle = self._require_open()
        n = self._lib.gd_nframes(handle)
        self._check("gd_nframes")
        return int(n)

    def spf(self, field: str) -> int:
        handle = self._require_open()
        n = self._lib.gd_spf(handle, encode_field(field))
        self._check("gd_spf", field)
        return int(n)

    def native_type(self, field: str) -> int:
        handle = self._require_open()
        code = self._lib.gd_native_type(handle, encode_field(field))
        self._check("gd_native_type", field)
        return int(code)

    def entry_type(self, field: str) -> int:
        handle = self._require_open()
        code = self._lib.gd_entry_type(handle, encode_field(field))
        self._check("gd_entry_type", field)
        return int(code)

    def field_list(self) -> list[str]:
        handle = self._require_open()
        names_p = self._lib.gd_field_list(handle)
        self._check("gd_field_list")
        if not names_p:
            return []

        names = []
        i = 0
        while names_p[i] is not None:
            names.append(names_p[i].decode("utf-8", errors="replace"))
            i += 1
        return names

    # --- Data ---

    def getdata(
        self,
        field: str,
        first_frame: int,
        num_frames: int,
        return_type: int,
        out: np.ndarray,
    ) -> int:
        """Read num_frames frames of a field into ``out`` with gd_getdata().

        ``out`` must be a contiguous array whose dtype matches return_type and
        which holds at least num_frames * spf samples.

        Returns:
            Number of samples actually read.
        """
        handle = self._require_open()
        if not out.flags["C_CONTIGUOUS"]:
            raise ValueError("Output buffer must be C-contiguous.")

        n = self._lib.gd_getdata(
            handle,
            encode_field(field),
            first_frame,
            0,
            num_frames,
            0,
            return_type,
            out.ctypes.data_as(ctypes.c_void_p),
        )
        self._check("gd_getdata", field)
        return min(int(n), out.size)

    def get_string(self, field: str) -> str:
        """Read the value of a STRING field with gd_get_string()."""
        handle = self._require_open()
        buf = ctypes.create_string_buffer(STRING_VALUE_SIZE)
        self._lib.gd_get_string(handle, encode_field(field), STRING_VALUE_SIZE, buf)
        self._check("gd_get_string", field)
        return buf.value.decode("utf-8", errors="replace")
