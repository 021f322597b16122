"""Exceptions raised by dirscope."""

from __future__ import annotations


class DirfileError(RuntimeError):
    """Base error for everything reported by dirscope or libgetdata.

    Args:
        message: Human-readable description.
        code: GetData error code (``GD_E_*``), if the error came from the library.
    """

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class LibraryNotFoundError(DirfileError):
    """libgetdata could not be located or loaded."""


class DirfileOpenError(DirfileError):
    """gd_open() reported an error for the given directory."""


class FieldNotFoundError(DirfileError, KeyError):
    """The field code does not exist in the Dirfile."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""


class UnsupportedTypeError(DirfileError):
    """A field's native type cannot be converted to float64."""


class DirfileClosedError(DirfileError):
    """Operation attempted on a closed Dirfile."""
