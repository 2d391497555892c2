import pytest

from tensorgraph.data_generator import IncrementalGenerator, OneGenerator
from tensorgraph.data_type import DataType
from tensorgraph.errors import GraphError
from tensorgraph.graph import Graph
from tensorgraph.operators.concat import ConcatOp
from tensorgraph.operators.element_wise import AddOp, DivOp, MulOp, SubOp
from tensorgraph.operators.transpose import TransposeOp
from tensorgraph.operators.unary import CastOp, CastType
from tensorgraph.runtime import NativeCpuRuntime


def test_instance_is_shared():
    before = NativeCpuRuntime.instance().allocated_bytes
    buffer = NativeCpuRuntime.instance().alloc(8)
    assert NativeCpuRuntime.instance().allocated_bytes == before + 8
    NativeCpuRuntime.instance().dealloc(buffer)
    assert NativeCpuRuntime.instance().allocated_bytes == before


def test_str_and_is_cpu():
    runtime = NativeCpuRuntime()
    assert str(runtime) == "CPU Runtime"
    assert runtime.is_cpu is True


@pytest.mark.parametrize("size, expected", [(0, 0), (1, 8), (8, 8), (10, 16), (17, 24)])
def test_alloc_rounds_to_words(size, expected):
    runtime = NativeCpuRuntime()
    buffer = runtime.alloc(size)
    assert buffer.size == expected
    assert not buffer.any()


def test_dealloc_releases_once():
    runtime = NativeCpuRuntime()
    buffer = runtime.alloc(10)
    assert runtime.allocated_bytes == 16
    runtime.dealloc(buffer)
    assert runtime.allocated_bytes == 0
    with pytest.raises(GraphError):
        runtime.dealloc(buffer)


def test_concat_native_cpu():
    runtime = NativeCpuRuntime.instance()
    g = Graph(runtime)
    t1 = g.add_tensor([2, 2, 3, 1], DataType.Float32)
    t2 = g.add_tensor([2, 2, 1, 1], DataType.Float32)
    t3 = g.add_tensor([2, 2, 2, 1], DataType.Float32)
    op = g.add_op(ConcatOp, [t1, t2, t3], None, 2)
    g.data_malloc()
    t1.set_data(IncrementalGenerator())
    t2.set_data(OneGenerator())
    t3.set_data(OneGenerator())
    runtime.run(g)
    assert op.get_output().equal_data(
        [0, 1, 2, 1, 1, 1, 3, 4, 5, 1, 1, 1, 6, 7, 8, 1, 1, 1, 9, 10, 11, 1, 1, 1]
    )


@pytest.mark.parametrize(
    "op_class, second, expected",
    [
        (AddOp, IncrementalGenerator, [0, 1, 2, 4, 5, 6, 6, 7, 8, 10, 11, 12]),
        (MulOp, IncrementalGenerator, [0, 0, 0, 3, 4, 5, 0, 0, 0, 9, 10, 11]),
        (SubOp, IncrementalGenerator, [0, 1, 2, 2, 3, 4, 6, 7, 8, 8, 9, 10]),
        (DivOp, OneGenerator, [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11]),
    ],
)
def test_element_wise_native_cpu(op_class, second, expected):
    runtime = NativeCpuRuntime.instance()
    g = Graph(runtime)
    t1 = g.add_tensor([1, 2, 2, 3, 1], DataType.Float32)
    t2 = g.add_tensor([2, 1, 1], DataType.Float32)
    op = g.add_op(op_class, t1, t2, None)
    g.data_malloc()
    t1.set_data(IncrementalGenerator())
    t2.set_data(second())
    runtime.run(g)
    assert op.get_output().equal_data(expected)


def test_transpose_native_cpu():
    runtime = NativeCpuRuntime.instance()
    g = Graph(runtime)
    source = g.add_tensor([1, 2, 3, 4], DataType.Float32)
    op = g.add_op(TransposeOp, source, None, [0, 2, 1, 3])
    g.data_malloc()
    source.set_data(IncrementalGenerator())
    runtime.run(g)
    assert op.get_output(0).equal_data(
        [0, 1, 2, 3, 12, 13, 14, 15, 4, 5, 6, 7, 16, 17, 18, 19, 8, 9, 10, 11, 20, 21, 22, 23]
    )


def test_run_without_kernel_raises():
    runtime = NativeCpuRuntime.instance()
    g = Graph(runtime)
    source = g.add_tensor([2], DataType.Float32)
    g.add_op(CastOp, source, None, CastType.Float2Float16)
    g.data_malloc()
    with pytest.raises(GraphError, match="Kernel not found"):
        runtime.run(g)