"""Callables that fill tensor storage with generated values."""

from __future__ import annotations

import numpy as np

from .data_type import DataType
from .errors import GraphError

_SUPPORTED = (DataType.UInt32, DataType.Float32)


class DataGenerator:
    """Fills the first *size* elements of an array; supports UInt32 and Float32."""

    def __call__(self, data: np.ndarray, size: int, dtype: DataType) -> None:
        if dtype not in _SUPPORTED:
            raise GraphError("Unimplemented")
        self._fill(data, size)

    def _fill(self, data: np.ndarray, size: int) -> None:
        raise GraphError("Unimplemented")


class IncrementalGenerator(DataGenerator):
    """Writes 0, 1, 2, ... into consecutive elements."""

    def _fill(self, data: np.ndarray, size: int) -> None:
        data.flat[:size] = np.arange(size, dtype=data.dtype)


class ValueGenerator(DataGenerator):
    """Writes one constant value into every element."""

    def __init__(self, value: int) -> None:
        self.value = value

    def _fill(self, data: np.ndarray, size: int) -> None:
        data.flat[:size] = self.value


class OneGenerator(ValueGenerator):
    """Fills with ones."""

    def __init__(self) -> None:
        super().__init__(1)


class ZeroGenerator(ValueGenerator):
    """Fills with zeros."""

    def __init__(self) -> None:
        super().__init__(0)