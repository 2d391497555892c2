"""Shape arithmetic shared by operators and kernels."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import zip_longest

from .errors import ensure


def infer_broadcast(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Bidirectional (numpy-style) broadcast of two shapes."""
    result = []
    for dim_a, dim_b in zip_longest(reversed(a), reversed(b), fillvalue=1):
        if dim_a != dim_b and dim_a != 1 and dim_b != 1:
            raise ValueError("Shapes cannot be broadcasted")
        result.append(max(dim_a, dim_b))
    result.reverse()
    return result


def get_real_axis(axis: int, rank: int) -> int:
    """Turn a possibly negative axis into an index in ``range(rank)``."""
    ensure(rank >= 1, "rank must be at least 1")
    ensure(-rank <= axis <= rank - 1, f"axis {axis} out of range for rank {rank}")
    return rank + axis if axis < 0 else axis


def locate_index(flat_index: int, shape: Sequence[int]) -> list[int]:
    """Multi-dimensional index of a row-major flat offset within *shape*."""
    index = []
    for dim in reversed(shape):
        flat_index, rem = divmod(flat_index, dim)
        index.append(rem)
    index.reverse()
    return index


def delocate_index(
    shape_index: Sequence[int], shape: Sequence[int], stride: Sequence[int]
) -> int:
    """Flat offset of *shape_index*, wrapping each coordinate by *shape* for broadcast."""
    ensure(len(shape_index) == len(shape), "index rank differs from shape rank")
    ensure(len(shape) == len(stride), "shape rank differs from stride rank")
    return sum((i % d) * s for i, d, s in zip(shape_index, shape, stride))