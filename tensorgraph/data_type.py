"""Element data types of tensors."""

from __future__ import annotations

import enum

import numpy as np

from .errors import GraphError


class DataType(enum.Enum):
    """Tensor element type, numbered as in the ONNX element-type list."""

    Undefine = 0
    Float32 = 1
    UInt8 = 2
    Int8 = 3
    UInt16 = 4
    Int16 = 5
    Int32 = 6
    Int64 = 7
    String = 8
    Bool = 9
    Float16 = 10
    Double = 11
    UInt32 = 12
    UInt64 = 13
    BFloat16 = 16

    @property
    def index(self) -> int:
        return self.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DataType):
            return NotImplemented
        return self.value < other.value

    def size(self) -> int:
        """Bytes taken by one element."""
        return _SIZES[self]

    def cpu_type(self) -> int:
        """Identifier of the host type that stores the elements, or -1."""
        return _CPU_TYPES[self]

    def numpy_dtype(self) -> np.dtype:
        """The numpy dtype used to hold elements of this type."""
        return np.dtype(_NUMPY_TYPES[self])

    def __str__(self) -> str:
        return self.name


# String elements are stored as host string objects.
_STRING_SIZE = 32

_SIZES = {
    DataType.Undefine: 0,
    DataType.Float32: 4,
    DataType.UInt8: 1,
    DataType.Int8: 1,
    DataType.UInt16: 2,
    DataType.Int16: 2,
    DataType.Int32: 4,
    DataType.Int64: 8,
    DataType.String: _STRING_SIZE,
    DataType.Bool: 1,
    DataType.Float16: 2,
    DataType.Double: 8,
    DataType.UInt32: 4,
    DataType.UInt64: 8,
    DataType.BFloat16: 2,
}

_CPU_TYPES = {
    DataType.Undefine: -1,
    DataType.Float32: 0,
    DataType.UInt8: 2,
    DataType.Int8: 3,
    DataType.UInt16: 4,
    DataType.Int16: 5,
    DataType.Int32: 6,
    DataType.Int64: 7,
    DataType.String: -1,
    DataType.Bool: 3,
    DataType.Float16: 4,
    DataType.Double: 9,
    DataType.UInt32: 1,
    DataType.UInt64: 8,
    DataType.BFloat16: 4,
}

# Bool is held as int8 and the 16-bit float formats as raw uint16 words.
_NUMPY_TYPES = {
    DataType.Undefine: np.bool_,
    DataType.Float32: np.float32,
    DataType.UInt8: np.uint8,
    DataType.Int8: np.int8,
    DataType.UInt16: np.uint16,
    DataType.Int16: np.int16,
    DataType.Int32: np.int32,
    DataType.Int64: np.int64,
    DataType.String: "S1",
    DataType.Bool: np.int8,
    DataType.Float16: np.uint16,
    DataType.Double: np.float64,
    DataType.UInt32: np.uint32,
    DataType.UInt64: np.uint64,
    DataType.BFloat16: np.uint16,
}

_CPU_TYPE_OF_NUMPY = {
    np.dtype(np.float32): 0,
    np.dtype(np.uint32): 1,
    np.dtype(np.uint8): 2,
    np.dtype(np.int8): 3,
    np.dtype(np.uint16): 4,
    np.dtype(np.int16): 5,
    np.dtype(np.int32): 6,
    np.dtype(np.int64): 7,
    np.dtype(np.uint64): 8,
    np.dtype(np.float64): 9,
}


def cpu_type_of(numpy_dtype) -> int:
    """Host type identifier for a numpy dtype; raises for unsupported types."""
    try:
        return _CPU_TYPE_OF_NUMPY[np.dtype(numpy_dtype)]
    except (KeyError, TypeError) as exc:
        raise GraphError("Unsupported data type") from exc