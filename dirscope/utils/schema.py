"""Type tags and pydantic models describing Dirfile contents."""

from __future__ import annotations

import math
from enum import IntEnum

import numpy as np
from pydantic import BaseModel, Field

from dirscope.native import format as gd


class GDType(IntEnum):
    """GetData sample type (gd_type_t)."""

    NULL = gd.GD_NULL
    UINT8 = gd.GD_UINT8
    INT8 = gd.GD_INT8
    UINT16 = gd.GD_UINT16
    INT16 = gd.GD_INT16
    UINT32 = gd.GD_UINT32
    INT32 = gd.GD_INT32
    UINT64 = gd.GD_UINT64
    INT64 = gd.GD_INT64
    FLOAT32 = gd.GD_FLOAT32
    FLOAT64 = gd.GD_FLOAT64
    COMPLEX64 = gd.GD_COMPLEX64
    COMPLEX128 = gd.GD_COMPLEX128
    STRING = gd.GD_STRING
    UNKNOWN = gd.GD_UNKNOWN

    @classmethod
    def from_code(cls, code: int) -> GDType:
        """Map a raw gd_type_t value, collapsing unrecognised codes to UNKNOWN."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @property
    def size(self) -> int:
        """Sample size in bytes (0 for NULL/UNKNOWN)."""
        if self in (GDType.NULL, GDType.UNKNOWN, GDType.STRING):
            return 0
        return int(self) & 0x1F

    @property
    def dtype(self) -> np.dtype | None:
        """Matching numpy dtype, or None for types without one."""
        name = _NUMPY_DTYPES.get(self)
        return np.dtype(name) if name else None

    @property
    def is_numeric(self) -> bool:
        return self in _NUMPY_DTYPES and not self.is_complex

    @property
    def is_complex(self) -> bool:
        return self in (GDType.COMPLEX64, GDType.COMPLEX128)


_NUMPY_DTYPES = {
    GDType.UINT8: "uint8",
    GDType.INT8: "int8",
    GDType.UINT16: "uint16",
    GDType.INT16: "int16",
    GDType.UINT32: "uint32",
    GDType.INT32: "int32",
    GDType.UINT64: "uint64",
    GDType.INT64: "int64",
    GDType.FLOAT32: "float32",
    GDType.FLOAT64: "float64",
    GDType.COMPLEX64: "complex64",
    GDType.COMPLEX128: "complex128",
}


class EntryType(IntEnum):
    """GetData field entry kind (gd_entype_t)."""

    NO_ENTRY = gd.GD_NO_ENTRY
    RAW = gd.GD_RAW_ENTRY
    LINCOM = gd.GD_LINCOM_ENTRY
    LINTERP = gd.GD_LINTERP_ENTRY
    BIT = gd.GD_BIT_ENTRY
    MULTIPLY = gd.GD_MULTIPLY_ENTRY
    PHASE = gd.GD_PHASE_ENTRY
    INDEX = gd.GD_INDEX_ENTRY
    POLYNOM = gd.GD_POLYNOM_ENTRY
    SBIT = gd.GD_SBIT_ENTRY
    DIVIDE = gd.GD_DIVIDE_ENTRY
    RECIP = gd.GD_RECIP_ENTRY
    WINDOW = gd.GD_WINDOW_ENTRY
    MPLEX = gd.GD_MPLEX_ENTRY
    INDIR = gd.GD_INDIR_ENTRY
    SINDIR = gd.GD_SINDIR_ENTRY
    CONST = gd.GD_CONST_ENTRY
    STRING = gd.GD_STRING_ENTRY
    CARRAY = gd.GD_CARRAY_ENTRY
    SARRAY = gd.GD_SARRAY_ENTRY

    @classmethod
    def from_code(cls, code: int) -> EntryType:
        try:
            return cls(code)
        except ValueError:
            return cls.NO_ENTRY

    @property
    def is_vector(self) -> bool:
        """True for entries that carry samples along the frame axis."""
        return self not in (
            EntryType.NO_ENTRY,
            EntryType.CONST,
            EntryType.STRING,
            EntryType.CARRAY,
            EntryType.SARRAY,
        )


class FieldInfo(BaseModel):
    """Metadata for a single field."""

    name: str
    entry_type: str  # EntryType name, e.g. "RAW"
    native_type: str  # GDType name, e.g. "FLOAT64"
    dtype: str | None = None  # numpy dtype string, None for STRING/unknown
    spf: int
    num_samples: int


class FieldStats(BaseModel):
    """Summary statistics for a field's samples."""

    name: str
    min: float
    max: float
    mean: float
    std: float
    num_samples: int

    @classmethod
    def from_array(cls, name: str, data: np.ndarray) -> FieldStats:
        values = np.asarray(data, dtype=np.float64)
        finite = values[np.isfinite(values)]
        if finite.size == 0:
            nan = math.nan
            return cls(name=name, min=nan, max=nan, mean=nan, std=nan, num_samples=int(values.size))
        return cls(
            name=name,
            min=float(np.min(finite)),
            max=float(np.max(finite)),
            mean=float(np.mean(finite)),
            std=float(np.std(finite)),
            num_samples=int(values.size),
        )


class DirfileSummary(BaseModel):
    """Snapshot of a Dirfile's layout."""

    path: str
    nfields: int
    nframes: int
    fields: list[FieldInfo] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> DirfileSummary:
        return cls.model_validate_json(data)
