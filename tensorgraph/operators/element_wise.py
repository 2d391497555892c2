"""Binary element-wise operators with broadcasting."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..errors import ensure, vec_to_string
from ..op_type import OpType
from ..operator import Operator
from ..shape_utils import infer_broadcast
from ..tensor import Tensor


class ElementWiseOp(Operator):
    """Base of binary element-wise operators; inputs are broadcast together."""

    def __init__(
        self,
        op_type: OpType,
        graph: Any,
        input0: Tensor,
        input1: Tensor,
        output: Tensor | None,
    ) -> None:
        super().__init__(op_type, [input0, input1], [output])
        ensure(self.check_valid(graph), f"{op_type} operator is not valid")

    def infer_shape(self, inputs: Sequence[Tensor]) -> list[list[int]] | None:
        return [infer_broadcast(inputs[0].shape, inputs[1].shape)]

    def num_inputs(self) -> int:
        return 2

    def num_outputs(self) -> int:
        return 1

    def __str__(self) -> str:
        a, b = self.inputs[0], self.inputs[1]
        return (
            f"{self.op_type}[{self.guid}]("
            f"{vec_to_string(a.shape)},{vec_to_string(b.shape)},"
            f"input0={a.guid},input1={b.guid},output={self.outputs[0].guid})"
        )


class AddOp(ElementWiseOp):
    """Element-wise sum."""

    def __init__(self, graph: Any, input0: Tensor, input1: Tensor, output: Tensor | None) -> None:
        super().__init__(OpType.Add, graph, input0, input1, output)


class SubOp(ElementWiseOp):
    """Element-wise difference."""

    def __init__(self, graph: Any, input0: Tensor, input1: Tensor, output: Tensor | None) -> None:
        super().__init__(OpType.Sub, graph, input0, input1, output)


class MulOp(ElementWiseOp):
    """Element-wise product."""

    def __init__(self, graph: Any, input0: Tensor, input1: Tensor, output: Tensor | None) -> None:
        super().__init__(OpType.Mul, graph, input0, input1, output)


class DivOp(ElementWiseOp):
    """Element-wise quotient."""

    def __init__(self, graph: Any, input0: Tensor, input1: Tensor, output: Tensor | None) -> None:
        super().__init__(OpType.Div, graph, input0, input1, output)