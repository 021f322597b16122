"""Shared fixtures: an in-process stand-in for libgetdata.

FakeGetdata exposes the same function names and calling convention as the
ctypes binding, writing results into the caller's buffers, so the whole
stack above the shared library runs without GetData installed.
"""

from __future__ import annotations

import ctypes
import os
from dataclasses import dataclass, field

import numpy as np
import pytest

from dirscope.native import format as gd
from dirscope.native.library import set_library

_DTYPES = {
    gd.GD_UINT8: np.uint8,
    gd.GD_INT8: np.int8,
    gd.GD_UINT16: np.uint16,
    gd.GD_INT16: np.int16,
    gd.GD_UINT32: np.uint32,
    gd.GD_INT32: np.int32,
    gd.GD_UINT64: np.uint64,
    gd.GD_INT64: np.int64,
    gd.GD_FLOAT32: np.float32,
    gd.GD_FLOAT64: np.float64,
    gd.GD_COMPLEX64: np.complex64,
    gd.GD_COMPLEX128: np.complex128,
}

_VECTOR_ENTRIES = {gd.GD_RAW_ENTRY, gd.GD_LINCOM_ENTRY, gd.GD_BIT_ENTRY, gd.GD_INDEX_ENTRY}


@dataclass
class FakeField:
    data: np.ndarray | None = None
    spf: int = 1
    gd_type: int = gd.GD_FLOAT64
    entry: int = gd.GD_RAW_ENTRY
    string: str = ""


@dataclass
class FakeDirfile:
    nframes: int
    fields: dict[str, FakeField] = field(default_factory=dict)


@dataclass
class _HandleState:
    dirfile: FakeDirfile | None
    error: int = gd.GD_E_OK
    message: str = "Success"


class FakeGetdata:
    """Pure-Python implementation of the libgetdata calls dirscope makes."""

    def __init__(self) -> None:
        self.dirfiles: dict[bytes, FakeDirfile] = {}
        self.handles: dict[int, _HandleState] = {}
        self.getdata_calls: list[tuple] = []
        self.discarded: list[int] = []
        self.closed: list[int] = []
        self.close_fails = False
        self._next_handle = 1
        self._keepalive: list[object] = []

    def register(self, path: os.PathLike | str, dirfile: FakeDirfile) -> None:
        self.dirfiles[os.fsencode(path)] = dirfile

    # --- helpers ---

    def _state(self, handle: int) -> _HandleState:
        state = self.handles[handle]
        state.error, state.message = gd.GD_E_OK, "Success"
        return state

    def _field(self, state: _HandleState, code: bytes) -> FakeField | None:
        assert state.dirfile is not None
        name = code.decode()
        f = state.dirfile.fields.get(name)
        if f is None:
            state.error = gd.GD_E_BAD_CODE
            state.message = f"Field code not found in format specification: {name}"
        return f

    def _bad_field_type(self, state: _HandleState, code: bytes) -> None:
        state.error = gd.GD_E_BAD_FIELD_TYPE
        state.message = f"Invalid field type for {code.decode()}"

    # --- libgetdata API ---

    def gd_open(self, path: bytes, flags: int) -> int:
        handle = self._next_handle
        self._next_handle += 1
        dirfile = self.dirfiles.get(path)
        state = _HandleState(dirfile)
        if dirfile is None:
            state.error = gd.GD_E_IO
            state.message = f"I/O error accessing {path.decode()}/format"
        self.handles[handle] = state
        return handle

    def gd_close(self, handle: int) -> int:
        if self.close_fails:
            self.handles[handle].error = gd.GD_E_IO
            self.handles[handle].message = "I/O error flushing"
            return -1
        self.closed.append(handle)
        del self.handles[handle]
        return 0

    def gd_discard(self, handle: int) -> int:
        self.discarded.append(handle)
        self.handles.pop(handle, None)
        return 0

    def gd_error(self, handle: int) -> int:
        return self.handles[handle].error

    def gd_error_string(self, handle: int, buf, size: int) -> bytes:
        buf.value = self.handles[handle].message.encode()[: size - 1]
        return buf.value

    def gd_nfields(self, handle: int) -> int:
        return len(self._state(handle).dirfile.fields)

    def gd_nframes(self, handle: int) -> int:
        return self._state(handle).dirfile.nframes

    def gd_spf(self, handle: int, code: bytes) -> int:
        state = self._state(handle)
        f = self._field(state, code)
        if f is None:
            return 0
        if f.entry not in _VECTOR_ENTRIES:
            self._bad_field_type(state, code)
            return 0
        return f.spf

    def gd_native_type(self, handle: int, code: bytes) -> int:
        state = self._state(handle)
        f = self._field(state, code)
        return gd.GD_UNKNOWN if f is None else f.gd_type

    def gd_entry_type(self, handle: int, code: bytes) -> int:
        state = self._state(handle)
        f = self._field(state, code)
        return gd.GD_NO_ENTRY if f is None else f.entry

    def gd_field_list(self, handle: int):
        names = [n.encode() for n in self._state(handle).dirfile.fields]
        arr = (ctypes.c_char_p * (len(names) + 1))(*names, None)
        self._keepalive.append(arr)
        return arr

    def gd_getdata(
        self,
        handle: int,
        code: bytes,
        first_frame: int,
        first_sample: int,
        num_frames: int,
        num_samples: int,
        return_type: int,
        data_out: ctypes.c_void_p,
    ) -> int:
        self.getdata_calls.append((code.decode(), first_frame, first_sample, num_frames, num_samples, return_type))
        state = self._state(handle)
        f = self._field(state, code)
        if f is None:
            return 0
        if f.entry not in _VECTOR_ENTRIES:
            self._bad_field_type(state, code)
            return 0
        start = first_frame * f.spf + first_sample
        count = num_frames * f.spf + num_samples
        chunk = np.ascontiguousarray(f.data[start:start + count].astype(_DTYPES[return_type]))
        if chunk.size:
            ctypes.memmove(data_out, chunk.ctypes.data, chunk.nbytes)
        return int(chunk.size)

    def gd_get_string(self, handle: int, code: bytes, size: int, buf) -> int:
        state = self._state(handle)
        f = self._field(state, code)
        if f is None:
            return 0
        if f.entry != gd.GD_STRING_ENTRY:
            self._bad_field_type(state, code)
            return 0
        buf.value = f.string.encode()[: size - 1]
        return len(buf.value) + 1


NFRAMES = 20


def build_flight_dirfile() -> FakeDirfile:
    """A small Dirfile with mixed rates and types."""
    return FakeDirfile(
        nframes=NFRAMES,
        fields={
            "INDEX": FakeField(np.arange(NFRAMES, dtype=np.float64), spf=1, entry=gd.GD_INDEX_ENTRY),
            "time": FakeField(np.arange(NFRAMES, dtype=np.float64) * 0.2, spf=1),
            "lon": FakeField(
                np.linspace(-80.0, -79.0, NFRAMES * 5).astype(np.float32),
                spf=5,
                gd_type=gd.GD_FLOAT32,
            ),
            "counter": FakeField(
                np.arange(NFRAMES * 5, dtype=np.uint16),
                spf=5,
                gd_type=gd.GD_UINT16,
            ),
            "status": FakeField(
                np.tile(np.array([-1, 0, 1, 2], dtype=np.int8), NFRAMES // 4),
                spf=1,
                gd_type=gd.GD_INT8,
            ),
            "version": FakeField(string="3.25", gd_type=gd.GD_STRING, entry=gd.GD_STRING_ENTRY, spf=0),
            "gain": FakeField(np.array([2.5]), spf=0, entry=gd.GD_CONST_ENTRY),
        },
    )


@pytest.fixture
def fake_lib():
    """Install a FakeGetdata as the process-wide binding."""
    lib = FakeGetdata()
    set_library(lib)
    yield lib
    set_library(None)


@pytest.fixture
def flight_dir(tmp_path, fake_lib):
    """Path to a registered sample Dirfile."""
    path = tmp_path / "flight"
    path.mkdir()
    fake_lib.register(path, build_flight_dirfile())
    return path
