"""ctypes binding to libgetdata.

Loads the shared library once, declares the prototypes of the functions
dirscope calls and caches the result. Any object exposing the same function
names can be installed with :func:`set_library` instead.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import os
import threading
from typing import Any

from dirscope.errors import LibraryNotFoundError
from dirscope.native.format import LIBRARY_ENV_VAR, LIBRARY_FALLBACKS, LIBRARY_NAME
from dirscope.utils.logging import get_logger

log = get_logger(__name__)

# DIRFILE* is opaque to us
DIRFILE_P = ctypes.c_void_p
gd_type_t = ctypes.c_int
gd_entype_t = ctypes.c_int
off_t = ctypes.c_int64

_lib: Any = None
_lock = threading.Lock()


def _declare_prototypes(lib: ctypes.CDLL) -> None:
    """Set argtypes/restype for every libgetdata function dirscope uses."""
    lib.gd_open.argtypes = [ctypes.c_char_p, ctypes.c_ulong]
    lib.gd_open.restype = DIRFILE_P

    lib.gd_close.argtypes = [DIRFILE_P]
    lib.gd_close.restype = ctypes.c_int

    lib.gd_discard.argtypes = [DIRFILE_P]
    lib.gd_discard.restype = ctypes.c_int

    lib.gd_error.argtypes = [DIRFILE_P]
    lib.gd_error.restype = ctypes.c_int

    lib.gd_error_string.argtypes = [DIRFILE_P, ctypes.c_char_p, ctypes.c_size_t]
    lib.gd_error_string.restype = ctypes.c_char_p

    lib.gd_nfields.argtypes = [DIRFILE_P]
    lib.gd_nfields.restype = ctypes.c_uint

    lib.gd_nframes.argtypes = [DIRFILE_P]
    lib.gd_nframes.restype = off_t

    lib.gd_spf.argtypes = [DIRFILE_P, ctypes.c_char_p]
    lib.gd_spf.restype = ctypes.c_uint

    lib.gd_native_type.argtypes = [DIRFILE_P, ctypes.c_char_p]
    lib.gd_native_type.restype = gd_type_t

    lib.gd_entry_type.argtypes = [DIRFILE_P, ctypes.c_char_p]
    lib.gd_entry_type.restype = gd_entype_t

    lib.gd_field_list.argtypes = [DIRFILE_P]
    lib.gd_field_list.restype = ctypes.POINTER(ctypes.c_char_p)

    lib.gd_getdata.argtypes = [
        DIRFILE_P, ctypes.c_char_p,
        off_t, off_t,
        ctypes.c_size_t, ctypes.c_size_t,
        gd_type_t, ctypes.c_void_p,
    ]
    lib.gd_getdata.restype = ctypes.c_size_t

    lib.gd_get_string.argtypes = [DIRFILE_P, ctypes.c_char_p, ctypes.c_size_t, ctypes.c_char_p]
    lib.gd_get_string.restype = ctypes.c_size_t


def _candidates(path: str | None) -> list[str]:
    if path:
        return [path]
    env_path = os.environ.get(LIBRARY_ENV_VAR)
    if env_path:
        return [env_path]
    found = ctypes.util.find_library(LIBRARY_NAME)
    names = [found] if found else []
    names.extend(LIBRARY_FALLBACKS)
    return names


def load_library(path: str | None = None) -> ctypes.CDLL:
    """Load libgetdata and declare its prototypes.

    Args:
        path: Explicit path to the shared library. If None, uses the
              DIRSCOPE_GETDATA_LIBRARY environment variable, then the
              system search path.

    Returns:
        The loaded ctypes library.

    Raises:
        LibraryNotFoundError: If no candidate could be loaded.
    """
    errors = []
    for name in _candidates(path):
        try:
            lib = ctypes.CDLL(name)
        except OSError as e:
            errors.append(f"{name}: {e}")
            continue
        _declare_prototypes(lib)
        log.debug("loaded libgetdata", library=name)
        return lib

    raise LibraryNotFoundError(
        "libgetdata not found. Install GetData or set "
        f"{LIBRARY_ENV_VAR} to the shared library path. Tried: {'; '.join(errors) or 'nothing'}"
    )


def get_library() -> Any:
    """Return the active libgetdata binding, loading it on first use."""
    global _lib
    with _lock:
        if _lib is None:
            _lib = load_library()
        return _lib


def set_library(lib: Any) -> None:
    """Install a binding (or None to reset to lazy loading)."""
    global _lib
    with _lock:
        _lib = lib
