"""Axis permutation of a tensor."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..errors import ensure, vec_to_string
from ..op_type import OpType
from ..operator import Operator
from ..tensor import Tensor


class TransposeOp(Operator):
    """Permutes the axes of its input, like ``numpy.transpose``."""

    def __init__(
        self,
        graph: Any,
        input: Tensor,
        output: Tensor | None,
        permute: Iterable[int] = (),
    ) -> None:
        super().__init__(OpType.Transpose, [input], [output])
        permute = [int(p) for p in permute]
        if not permute:
            permute = list(range(input.rank))
        else:
            ensure(len(permute) == input.rank, "permutation length differs from rank")
        self._permute = permute
        ensure(self.check_valid(graph), "Transpose operator is not valid")

    @property
    def permute(self) -> list[int]:
        return list(self._permute)

    def infer_shape(self, inputs: Sequence[Tensor]) -> list[list[int]] | None:
        dims = inputs[0].shape
        if len(dims) != len(self._permute):
            return None
        return [[dims[p] for p in self._permute]]

    def num_inputs(self) -> int:
        return 1

    def num_outputs(self) -> int:
        return 1

    def __str__(self) -> str:
        source = self.inputs[0]
        return (
            f"{self.op_type}[{self.guid}]({vec_to_string(source.shape)},"
            f"input={source.guid},output={self.outputs[0].guid})"
        )