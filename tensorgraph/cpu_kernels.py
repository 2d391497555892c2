"""Reference host kernels; importing this module registers them."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from .data_type import DataType
from .errors import GraphError
from .kernel import Device, Kernel, register_kernel
from .op_type import OpType

_SUPPORTED_TYPES = (DataType.Float32, DataType.UInt32)


def _check_supported(op: Any) -> None:
    if op.dtype not in _SUPPORTED_TYPES:
        raise GraphError("Unimplemented")


def idx_to_pos(shape: Sequence[int], index: int) -> list[int]:
    """Multi-dimensional position of a row-major flat *index* in *shape*."""
    pos = [0] * len(shape)
    dim = len(shape) - 1
    while index > 0:
        index, pos[dim] = divmod(index, shape[dim])
        dim -= 1
    return pos


@register_kernel(Device.CPU, OpType.Concat, "ConcatNaive_CPU")
class NaiveConcat(Kernel):
    """Copies every input into its slice of the output along the concat axis."""

    def compute(self, op: Any, context: Any) -> None:
        _check_supported(op)
        out = op.get_output().array()
        out[...] = np.concatenate([t.array() for t in op.inputs], axis=op.dim)


def _divide(a: np.ndarray, b: np.ndarray, out: np.ndarray) -> None:
    if np.issubdtype(out.dtype, np.integer):
        with np.errstate(divide="ignore"):
            np.floor_divide(a, b, out=out)
    else:
        np.divide(a, b, out=out)


_BINARY = {
    OpType.Add: np.add,
    OpType.Sub: np.subtract,
    OpType.Mul: np.multiply,
    OpType.Div: _divide,
}


@register_kernel(Device.CPU, OpType.Add, "addNaive_CPU")
@register_kernel(Device.CPU, OpType.Sub, "subNaive_CPU")
@register_kernel(Device.CPU, OpType.Mul, "mulNaive_CPU")
@register_kernel(Device.CPU, OpType.Div, "divNaive_CPU")
class NativeElementWise(Kernel):
    """Binary arithmetic with numpy-style broadcasting of the inputs."""

    def compute(self, op: Any, context: Any) -> None:
        _check_supported(op)
        func = _BINARY.get(op.op_type)
        if func is None:
            raise GraphError("Unimplemented")
        a = op.inputs[0].array()
        b = op.inputs[1].array()
        func(a, b, out=op.get_output().array())


@register_kernel(Device.CPU, OpType.Transpose, "TransposeNaive_CPU")
class NaiveTranspose(Kernel):
    """Writes the input with its axes permuted."""

    def compute(self, op: Any, context: Any) -> None:
        _check_supported(op)
        out = op.get_output(0).array()
        out[...] = np.transpose(op.inputs[0].array(), op.permute)


@register_kernel(Device.CPU, OpType.Relu, "reluNaive_CPU")
class NativeUnary(Kernel):
    """Element-wise activations."""

    def compute(self, op: Any, context: Any) -> None:
        _check_supported(op)
        if op.op_type != OpType.Relu:
            raise GraphError("Unimplemented")
        source = op.inputs[0].array()
        np.maximum(source, source.dtype.type(0), out=op.get_output().array())


@register_kernel(Device.CPU, OpType.Clip, "Clip_CPU")
class ClipKernel(Kernel):
    """Clamps each element to the operator's bounds; the lower bound wins."""

    def compute(self, op: Any, context: Any) -> None:
        _check_supported(op)
        source = op.inputs[0].array()
        result = source
        if op.max_value is not None:
            result = np.where(source > op.max_value, op.max_value, result)
        if op.min_value is not None:
            result = np.where(source < op.min_value, op.min_value, result)
        op.get_output().array()[...] = result