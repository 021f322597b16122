"""GetData constants used by dirscope.

Values mirror ``getdata.h``:

    gd_type_t     — sample type codes: size in bytes | SIGNED | IEEE754 | COMPLEX | CHAR
    gd_entype_t   — field entry kinds (RAW, LINCOM, ...)
    GD_E_*        — error codes returned by gd_error()
    GD_RDONLY...  — gd_open() flags
"""

# Library lookup
LIBRARY_NAME = "getdata"  # passed to ctypes.util.find_library
LIBRARY_FALLBACKS = ("libgetdata.so.8", "libgetdata.so.7", "libgetdata.so", "libgetdata.dylib")
LIBRARY_ENV_VAR = "DIRSCOPE_GETDATA_LIBRARY"

# gd_open() flags
GD_RDONLY = 0x00000000
GD_RDWR = 0x00000001

# gd_type_t flag bits
GD_SIGNED = 0x020
GD_IEEE754 = 0x080
GD_COMPLEX = 0x100
GD_CHAR = 0x200

# gd_type_t codes
GD_NULL = 0x000
GD_UINT8 = 0x001
GD_INT8 = GD_SIGNED | 0x001
GD_UINT16 = 0x002
GD_INT16 = GD_SIGNED | 0x002
GD_UINT32 = 0x004
GD_INT32 = GD_SIGNED | 0x004
GD_UINT64 = 0x008
GD_INT64 = GD_SIGNED | 0x008
GD_FLOAT32 = GD_IEEE754 | 0x004
GD_FLOAT64 = GD_IEEE754 | 0x008
GD_COMPLEX64 = GD_COMPLEX | 0x008
GD_COMPLEX128 = GD_COMPLEX | 0x010
GD_STRING = GD_CHAR | 0x001
GD_UNKNOWN = 0x040

# gd_entype_t codes
GD_NO_ENTRY = 0x00
GD_RAW_ENTRY = 0x01
GD_LINCOM_ENTRY = 0x02
GD_LINTERP_ENTRY = 0x03
GD_BIT_ENTRY = 0x04
GD_MULTIPLY_ENTRY = 0x05
GD_PHASE_ENTRY = 0x06
GD_INDEX_ENTRY = 0x07
GD_POLYNOM_ENTRY = 0x08
GD_SBIT_ENTRY = 0x09
GD_DIVIDE_ENTRY = 0x0A
GD_RECIP_ENTRY = 0x0B
GD_WINDOW_ENTRY = 0x0C
GD_MPLEX_ENTRY = 0x0D
GD_INDIR_ENTRY = 0x0E
GD_SINDIR_ENTRY = 0x0F
GD_CONST_ENTRY = 0x10
GD_STRING_ENTRY = 0x11
GD_CARRAY_ENTRY = 0x12
GD_SARRAY_ENTRY = 0x13

# Error codes
GD_E_OK = 0
GD_E_FORMAT = -1
GD_E_CREAT = -2
GD_E_BAD_CODE = -3
GD_E_BAD_TYPE = -4
GD_E_IO = -5
GD_E_INTERNAL_ERROR = -6
GD_E_ALLOC = -7
GD_E_RANGE = -8
GD_E_LUT = -9
GD_E_RECURSE_LEVEL = -10
GD_E_BAD_DIRFILE = -11
GD_E_BAD_FIELD_TYPE = -12
GD_E_ACCMODE = -13
GD_E_UNSUPPORTED = -14

# Size of the buffer handed to gd_error_string()
ERROR_STRING_SIZE = 4096

# Size of the buffer handed to gd_get_string() for STRING fields
STRING_VALUE_SIZE = 4096

# HDF5 export settings
COMPRESSION = "gzip"
COMPRESSION_OPTS = 4

# CSV float formatting
CSV_FLOAT_FORMAT = "{:.10g}"
