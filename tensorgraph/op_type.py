"""Operator kinds."""

from __future__ import annotations

import enum


class OpType(enum.IntEnum):
    """Kind of an operator in a graph."""

    Unknown = 0
    Add = enum.auto()
    Cast = enum.auto()
    Clip = enum.auto()
    Concat = enum.auto()
    Div = enum.auto()
    Mul = enum.auto()
    MatMul = enum.auto()
    Relu = enum.auto()
    Sub = enum.auto()
    Transpose = enum.auto()

    def __str__(self) -> str:
        return self.name