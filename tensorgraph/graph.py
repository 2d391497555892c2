"""Computation graphs of tensors and operators."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .allocator import Allocator
from .data_type import DataType
from .errors import ensure, vec_to_string
from .objects import GraphObject
from .op_type import OpType
from .operator import Operator
from .operators.matmul import MatmulOp
from .operators.transpose import TransposeOp
from .tensor import Blob, Tensor


def _swaps_last_two_axes(perm: list[int]) -> bool:
    rank = len(perm)
    if rank < 2:
        return False
    if any(p != m for m, p in enumerate(perm[: rank - 2])):
        return False
    return perm[-1] == rank - 2 and perm[-2] == rank - 1


class Graph(GraphObject):
    """Owns tensors and operators and keeps their connections consistent."""

    def __init__(self, runtime: Any) -> None:
        super().__init__()
        self.runtime = runtime
        self._tensors: list[Tensor] = []
        self._ops: list[Operator] = []
        self.allocator = Allocator(runtime)
        self._sorted = False

    @property
    def tensors(self) -> list[Tensor]:
        return list(self._tensors)

    @property
    def operators(self) -> list[Operator]:
        return list(self._ops)

    @property
    def inputs(self) -> list[Tensor]:
        """Tensors that no operator produces."""
        return [t for t in self._tensors if t.source is None]

    @property
    def outputs(self) -> list[Tensor]:
        """Tensors that no operator consumes."""
        return [t for t in self._tensors if not t.targets]

    def add_tensor(self, shape: Iterable[int], dtype: DataType = DataType.Float32) -> Tensor:
        """Create a tensor in this graph's runtime and add it."""
        tensor = Tensor(shape, dtype, self.runtime)
        self._tensors.append(tensor)
        return tensor

    def add_existing_tensors(self, tensors: Iterable[Tensor]) -> list[Tensor]:
        """Add tensors created elsewhere; they must share this graph's runtime."""
        tensors = list(tensors)
        for tensor in tensors:
            ensure(
                tensor.runtime is self.runtime,
                f"Tensor runtime mismatch: cannot add a tensor in {tensor.runtime} "
                f"to {self.runtime}",
            )
            self._tensors.append(tensor)
        return tensors

    def add_op(self, op_class: type, *args: Any, **kwargs: Any) -> Operator:
        """Create an operator whose outputs are created in this graph."""
        op = op_class(self, *args, **kwargs)
        self._connect(op)
        return op

    def add_op_with_outputs(self, op_class: type, *args: Any, **kwargs: Any) -> Operator:
        """Create an operator whose output tensors are given by the caller."""
        op = op_class(None, *args, **kwargs)
        self._connect(op)
        return op

    def _connect(self, op: Operator) -> None:
        self._sorted = False
        self._ops.append(op)
        for tensor in op.inputs:
            if tensor is None:
                continue
            tensor.add_target(op)
            pred = tensor.source
            if pred is not None:
                pred.add_successor(op)
                op.add_predecessor(pred)
        for tensor in op.outputs:
            if tensor is None:
                continue
            tensor.set_source(op)
            for succ in tensor.targets:
                succ.add_predecessor(op)
                op.add_successor(succ)

    def remove_operator(self, op: Operator) -> None:
        for i, existing in enumerate(self._ops):
            if existing is op:
                del self._ops[i]
                return

    def remove_tensor(self, tensor: Tensor) -> None:
        for i, existing in enumerate(self._tensors):
            if existing is tensor:
                del self._tensors[i]
                return

    def get_tensor(self, fuid: int) -> Tensor | None:
        """The tensor with family id *fuid*, or None."""
        return next((t for t in self._tensors if t.fuid == fuid), None)

    def topo_sort(self) -> bool:
        """Order operators topologically; False if the graph has a cycle."""
        if self._sorted:
            return True
        ordered: list[Operator] = []
        placed: set[Operator] = set()
        while len(ordered) < len(self._ops):
            modified = False
            for op in self._ops:
                if op in placed:
                    continue
                if all(t.source is None or t.source in placed for t in op.inputs):
                    modified = True
                    ordered.append(op)
                    placed.add(op)
            if not modified:
                return False
        self._ops = ordered
        self._sorted = True
        return True

    def optimize(self) -> None:
        """Drop or fuse adjacent transposes and fold last-axes transposes into matmuls."""
        ops_size = len(self._ops)
        i = 0
        while i < ops_size:
            op = self._ops[i]
            if op.op_type == OpType.Transpose and self._fuse_transposes(op):
                ops_size -= 2
                i = max(i - 2, -1) + 1
                continue
            if op.op_type == OpType.MatMul:
                removed = self._fold_into_matmul(op)
                ops_size -= removed
                i -= removed
            i += 1

    def _fuse_transposes(self, op: TransposeOp) -> bool:
        middle = op.inputs[0]
        pre_op = middle.source
        if pre_op is None or pre_op.op_type != OpType.Transpose or len(middle.targets) != 1:
            return False
        pre_input = pre_op.inputs[0]
        perm = [pre_op.permute[p] for p in op.permute]
        pre_input.remove_target(pre_op)
        output = op.get_output()
        if all(p == m for m, p in enumerate(perm)):
            for succ in op.successors:
                succ.replace_input(output, pre_input)
                pre_input.add_target(succ)
            self.remove_tensor(output)
        else:
            self._connect(TransposeOp(None, pre_input, output, perm))
        for pre in pre_op.predecessors:
            pre.remove_successor(pre_op)
        for succ in op.successors:
            succ.remove_predecessor(op)
        self.remove_operator(op)
        self.remove_operator(pre_op)
        self.remove_tensor(middle)
        return True

    def _fold_into_matmul(self, op: MatmulOp) -> int:
        """Fold qualifying input transposes into *op*; return how many ops were removed."""
        removed = 0
        sources = (op.inputs[0].source, op.inputs[1].source)
        for slot, transpose in enumerate(sources):
            operand = op.inputs[slot]
            if (
                transpose is None
                or transpose.op_type != OpType.Transpose
                or len(operand.targets) != 1
            ):
                continue
            if not _swaps_last_two_axes(transpose.permute):
                break
            if slot == 0:
                op.trans_a = not op.trans_a
            else:
                op.trans_b = not op.trans_b
            op.remove_predecessor(transpose)
            for pre in transpose.predecessors:
                pre.remove_successor(transpose)
                pre.add_successor(op)
                op.add_predecessor(pre)
            source = transpose.inputs[0]
            source.remove_target(transpose)
            source.add_target(op)
            op.inputs[slot] = source
            self.remove_tensor(operand)
            self.remove_operator(transpose)
            removed += 1
        return removed

    def shape_infer(self) -> None:
        """Recompute output shapes of every operator and update changed tensors."""
        for op in self._ops:
            shapes = op.infer_shape(op.inputs)
            ensure(shapes is not None, "shape inference failed")
            ensure(len(shapes) == len(op.outputs), "wrong number of inferred shapes")
            for shape, output in zip(shapes, op.outputs):
                if list(shape) != output.shape:
                    tensor = self.get_tensor(output.fuid)
                    ensure(tensor is not None, "output tensor is not in the graph")
                    tensor.shape = shape

    def data_malloc(self) -> None:
        """Plan offsets for every tensor, allocate one buffer and bind the tensors to it."""
        ensure(self.topo_sort(), "graph has a cycle")
        offsets = [self.allocator.alloc(t.bytes) for t in self._tensors]
        memory = self.allocator.memory()
        for tensor, offset in zip(self._tensors, offsets):
            tensor.set_data_blob(Blob(self.runtime, memory, offset))
        self.allocator.info()

    def check_valid(self) -> bool:
        """Check that tensors and operators reference only members of this graph."""
        for tensor in self._tensors:
            ensure(tensor.targets or tensor.source is not None, "tensor is not connected")
            for op in tensor.targets:
                ensure(op in self._ops, "tensor target is not in the graph")
            source = tensor.source
            ensure(source is None or source in self._ops, "tensor source is not in the graph")
        for op in self._ops:
            for tensor in (*op.inputs, *op.outputs):
                ensure(tensor in self._tensors, "operator tensor is not in the graph")
            for other in (*op.predecessors, *op.successors):
                ensure(other in self._ops, "operator neighbour is not in the graph")
        seen: set[int] = set()
        for tensor in self._tensors:
            ensure(tensor.fuid not in seen, str(tensor.fuid))
            seen.add(tensor.fuid)
        return True

    def __str__(self) -> str:
        lines = ["Graph Tensors:"]
        lines.extend(str(t) for t in self._tensors)
        lines.append("Graph operators:")
        for op in self._ops:
            preds = vec_to_string(o.guid for o in op.predecessors)
            succs = vec_to_string(o.guid for o in op.successors)
            lines.append(f"OP {op.guid}, pred {preds}, succ {succs}, {op}")
        return "\n".join(lines) + "\n"