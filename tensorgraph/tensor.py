"""Tensors and the storage blobs that back them."""

from __future__ import annotations

import math
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from .data_type import DataType, cpu_type_of
from .errors import ensure, vec_to_string
from .objects import GraphObject, next_fuid

if TYPE_CHECKING:
    from .operator import Operator


@dataclass(eq=False)
class Blob:
    """A region of a host byte buffer, starting at *offset*, that holds tensor data."""

    runtime: Any
    buffer: Any
    offset: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.buffer, np.ndarray):
            self.buffer = np.frombuffer(self.buffer, dtype=np.uint8)
        self.buffer = self.buffer.reshape(-1).view(np.uint8)

    def view(self, dtype, count: int) -> np.ndarray:
        """A writable view of *count* elements of *dtype* starting at the offset."""
        dtype = np.dtype(dtype)
        end = self.offset + count * dtype.itemsize
        ensure(end <= self.buffer.size, "blob is smaller than the requested view")
        return self.buffer[self.offset:end].view(dtype)


def _format_element(value: object) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def _equal_values(actual: np.ndarray, expected: np.ndarray, relative_error: float) -> bool:
    if not np.issubdtype(actual.dtype, np.floating):
        return bool(np.array_equal(actual, expected))
    for i, (a, b) in enumerate(zip(actual.tolist(), expected.tolist())):
        diff = abs(a - b)
        if min(abs(a), abs(b)) == 0.0:
            mismatch = diff > relative_error
        else:
            mismatch = diff / max(abs(a), abs(b)) > relative_error
        if mismatch:
            print(f"Error on {i}: {a:f} {b:f}")
            return False
    return True


class Tensor(GraphObject):
    """A typed, shaped value in a graph, connected to the operators that use it."""

    def __init__(self, shape: Iterable[int], dtype: DataType, runtime: Any) -> None:
        super().__init__()
        self.dtype = dtype
        self.runtime = runtime
        self.data: Blob | None = None
        self.fuid = next_fuid()
        self._shape: list[int] = [int(d) for d in shape]
        self._size = math.prod(self._shape)
        self._targets: list[Operator] = []
        self._source: Operator | None = None

    @property
    def shape(self) -> list[int]:
        return list(self._shape)

    @shape.setter
    def shape(self, value: Iterable[int]) -> None:
        self._shape = [int(d) for d in value]
        self._size = math.prod(self._shape)

    @property
    def size(self) -> int:
        """Number of elements."""
        return self._size

    @property
    def bytes(self) -> int:
        """Number of bytes the elements occupy."""
        return self._size * self.dtype.size()

    @property
    def rank(self) -> int:
        return len(self._shape)

    @property
    def targets(self) -> list[Operator]:
        """Operators that take this tensor as an input."""
        return list(self._targets)

    @property
    def source(self) -> Operator | None:
        """Operator that produces this tensor, if any."""
        return self._source

    def array(self) -> np.ndarray:
        """A writable numpy view of the tensor's data, shaped like the tensor."""
        ensure(self.data is not None, "tensor has no data")
        return self.data.view(self.dtype.numpy_dtype(), self._size).reshape(self._shape)

    def set_data(self, generator: Callable[[np.ndarray, int, DataType], None]) -> None:
        """Fill the data with *generator*, called as ``generator(array, size, dtype)``."""
        ensure(self.data is not None, "tensor has no data")
        generator(self.array(), self._size, self.dtype)

    def set_data_blob(self, blob: Blob) -> None:
        self.data = blob

    def data_to_string(self) -> str:
        """Render the data as nested bracketed rows."""
        ensure(self.data is not None, "tensor has no data")
        header = f"Tensor: {self.guid}\n"
        values = [_format_element(v) for v in self.array().ravel().tolist()]
        if not self._shape:
            return header + "".join(values) + "\n"
        if self._size == 0:
            return header
        rank = len(self._shape)
        blocks = [math.prod(self._shape[j:]) for j in range(rank)]
        column = self._shape[-1]
        last = self._size - 1
        parts = [header]
        for i, value in enumerate(values):
            parts.append("[" * sum(i % b == 0 for b in blocks))
            parts.append(value)
            parts.append("]" * sum(i % b == b - 1 for b in blocks))
            if i != last:
                parts.append(", ")
            if i % column == column - 1:
                parts.append("\n")
        return "".join(parts)

    def print_data(self) -> str:
        """Write the rendered data to standard output and return it."""
        text = self.data_to_string()
        sys.stdout.write(text + "\n")
        return text

    def equal_data(self, other, relative_error: float = 1e-6) -> bool:
        """Compare data with another tensor or a sequence of values.

        Integers must match exactly; floats within *relative_error*.
        """
        ensure(self.data is not None, "tensor has no data")
        if isinstance(other, Tensor):
            ensure(other.data is not None, "other tensor has no data")
            ensure(self.dtype == other.dtype, "data types differ")
            if self._size != other.size:
                return False
            expected = other.array().ravel()
        else:
            if isinstance(other, np.ndarray):
                ensure(
                    cpu_type_of(other.dtype) == self.dtype.cpu_type(),
                    "data types differ",
                )
                expected = other.ravel()
            else:
                expected = np.asarray(list(other), dtype=self.dtype.numpy_dtype())
            ensure(self._size == expected.size, "sizes differ")
        return _equal_values(self.array().ravel(), expected, relative_error)

    def add_target(self, op: Operator) -> None:
        self._targets.append(op)

    def remove_target(self, op: Operator) -> None:
        self._targets = [t for t in self._targets if t is not op]

    def set_source(self, op: Operator | None) -> None:
        self._source = op

    def __str__(self) -> str:
        data = f"blob at offset {self.data.offset}" if self.data is not None else "no data"
        text = (
            f"Tensor {self.guid}, Fuid {self.fuid}, shape {vec_to_string(self._shape)}, "
            f"dtype {self.dtype}, {self.runtime}, {data}\n"
        )
        if self._source is not None:
            text += f", source {self._source.guid}"
        else:
            text += ", source None"
        text += ", targets " + vec_to_string(op.guid for op in self._targets)
        return text