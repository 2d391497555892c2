"""Matrix multiplication with optional transposition of either operand."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..errors import ensure
from ..op_type import OpType
from ..operator import Operator
from ..tensor import Tensor


class MatmulObjShape:
    pass


class MatmulOp(Operator):
    """Row-major matmul; ``trans_a``/``trans_b`` swap the last two axes first.

    The output shape is that of A (after transposition) with its last axis
    replaced by the last axis of B.
    """

    def __init__(
        self,
        graph: Any,
        a: Tensor,
        b: Tensor,
        c: Tensor | None,
        trans_a: bool = False,
        trans_b: bool = False,
    ) -> None:
        super().__init__(OpType.MatMul, [a, b], [c])
        self.trans_a = trans_a
        self.trans_b = trans_b
        self.m = 0
        self.n = 0
        self.k = 0
        ensure(self.check_valid(graph), "MatMul operator is not valid")

    def infer_shape(self, inputs: Sequence[Tensor]) -> list[list[int]] | None:
        a_shape = inputs[0].shape
        b_shape = inputs[1].shape
        if len(a_shape) < 2 or len(b_shape) < 2:
            return None
        if self.trans_a:
            a_shape[-1], a_shape[-2] = a_shape[-2], a_shape[-1]
        if self.trans_b:
            b_shape[-1], b_shape[-2] = b_shape[-2], b_shape[-1]
        self.m, self.k = a_shape[-2], a_shape[-1]
        self.n = b_shape[-1]
        output = list(a_shape)
        output[-1] = b_shape[-1]
        return [output]

    def num_outputs(self) -> int:
        return 1

    def __str__(self) -> str:
        a_text = "A^T" if self.trans_a else "A"
        b_text = "B^T" if self.trans_b else "B]"
        return (
            f"Matmul([{a_text},{b_text},A={self.inputs[0].guid},"
            f"B={self.inputs[1].guid},C={self.outputs[0].guid},"
            f"mnk=[{self.m},{self.n},{self.k}])"
        )