"""ctypes layer over libgetdata."""

from dirscope.native.handle import NativeHandle
from dirscope.native.library import get_library, load_library, set_library

__all__ = ["NativeHandle", "get_library", "load_library", "set_library"]
