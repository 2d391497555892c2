"""Concatenation of several tensors along one axis."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..errors import ensure, vec_to_string
from ..op_type import OpType
from ..operator import Operator
from ..shape_utils import get_real_axis
from ..tensor import Tensor


class ConcatOp(Operator):
    """Joins tensors that agree on every axis except ``dim``."""

    def __init__(
        self,
        graph: Any,
        inputs: Iterable[Tensor],
        output: Tensor | None,
        dim: int,
    ) -> None:
        inputs = list(inputs)
        super().__init__(OpType.Concat, inputs, [output])
        self.dim = get_real_axis(dim, inputs[0].rank)
        ensure(self.check_valid(graph), "Concat operator is not valid")

    def infer_shape(self, inputs: Sequence[Tensor]) -> list[list[int]] | None:
        dims = inputs[0].shape
        rank = inputs[0].rank
        for tensor in inputs[1:]:
            ensure(tensor.rank == rank, "Concat inputs must share the same rank")
            dims[self.dim] += tensor.shape[self.dim]
        return [dims]

    def num_outputs(self) -> int:
        return 1

    def __str__(self) -> str:
        shapes = "".join(f"{vec_to_string(t.shape)}," for t in self.inputs)
        guids = "".join(f"{t.guid}," for t in self.inputs)
        return (
            f"Concat[{self.guid}]({shapes}dim={self.dim},"
            f"input={guids}output={self.outputs[0].guid})"
        )