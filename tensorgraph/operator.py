"""Base class of graph operators."""

from __future__ import annotations

import copy
from abc import abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from .data_type import DataType
from .errors import ensure
from .objects import GraphObject
from .op_type import OpType

if TYPE_CHECKING:
    from .tensor import Tensor


class Operator(GraphObject):
    """A node of a graph consuming input tensors and producing output tensors."""

    def __init__(
        self,
        op_type: OpType,
        inputs: Iterable[Tensor | None],
        outputs: Iterable[Tensor | None],
    ) -> None:
        super().__init__()
        self.op_type = op_type
        self.inputs: list[Tensor] = list(inputs)
        self.outputs: list[Tensor | None] = list(outputs)
        self._predecessors: list[Operator] = []
        self._successors: list[Operator] = []

    @abstractmethod
    def infer_shape(self, inputs: Sequence[Tensor]) -> list[list[int]] | None:
        """Output shapes for *inputs*, or None when they are not compatible."""

    def infer_data_type(self, inputs: Sequence[Tensor]) -> list[DataType]:
        """Output data types; by default every output takes the first input's type."""
        return [inputs[0].dtype] * self.num_outputs()

    def check_valid(self, graph: Any = None) -> bool:
        """Create outputs in *graph* if given, otherwise check the existing ones.

        Returns False when shape inference fails or disagrees with the outputs.
        """
        shapes = self.infer_shape(self.inputs)
        if shapes is None:
            return False
        if len(shapes) != len(self.outputs):
            return False
        if graph is not None:
            dtypes = self.infer_data_type(self.inputs)
            for i, (shape, dtype) in enumerate(zip(shapes, dtypes)):
                ensure(self.outputs[i] is None, "Find empty output while operator creation")
                self.outputs[i] = graph.add_tensor(shape, dtype)
            return True
        return all(
            list(shape) == output.shape for shape, output in zip(shapes, self.outputs)
        )

    def get_output(self, index: int | None = None) -> Tensor:
        """The output at *index*; without an index the operator must have one output."""
        if index is None:
            ensure(len(self.outputs) == 1, "Unimplemented")
            return self.outputs[0]
        ensure(0 <= index < len(self.outputs), "Index exceeded")
        return self.outputs[index]

    @property
    def output(self) -> Tensor:
        return self.get_output()

    @property
    def predecessors(self) -> list[Operator]:
        return list(self._predecessors)

    @property
    def successors(self) -> list[Operator]:
        return list(self._successors)

    @property
    def dtype(self) -> DataType:
        """Data type of the first input."""
        return self.inputs[0].dtype

    @property
    def out_dtype(self) -> DataType:
        """Data type of the single output."""
        return self.get_output().dtype

    def num_inputs(self) -> int:
        return len(self.inputs)

    def num_outputs(self) -> int:
        return len(self.outputs)

    def add_predecessor(self, op: Operator) -> None:
        self._predecessors.append(op)

    def add_successor(self, op: Operator) -> None:
        self._successors.append(op)

    def remove_predecessor(self, op: Operator) -> None:
        self._predecessors = [p for p in self._predecessors if p is not op]

    def remove_successor(self, op: Operator) -> None:
        self._successors = [s for s in self._successors if s is not op]

    def replace_input(self, old: Tensor, new: Tensor) -> None:
        """Replace every occurrence of *old* among the inputs with *new*."""
        self.inputs = [new if t is old else t for t in self.inputs]

    def clone(self, new_inputs: Iterable[Tensor], new_outputs: Iterable[Tensor]) -> Operator:
        """A copy of this operator bound to other tensors, with no graph links."""
        op = copy.copy(self)
        op.inputs = list(new_inputs)
        op.outputs = list(new_outputs)
        op._predecessors = []
        op._successors = []
        ensure(op.check_valid(None), "cloned operator is not valid")
        return op