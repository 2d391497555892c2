import pytest

from tensorgraph.data_type import DataType
from tensorgraph.errors import GraphError
from tensorgraph.op_type import OpType
from tensorgraph.operators.concat import ConcatOp
from tensorgraph.tensor import Tensor


class _Graph:
    def __init__(self):
        self.tensors = []

    def add_tensor(self, shape, dtype=DataType.Float32):
        tensor = Tensor(shape, dtype, "CPU Runtime")
        self.tensors.append(tensor)
        return tensor


def test_shape_infer():
    g = _Graph()
    t1 = g.add_tensor([1, 3, 2, 4], DataType.Float32)
    t2 = g.add_tensor([1, 3, 2, 5], DataType.Float32)
    op = ConcatOp(g, [t1, t2], None, 3)
    assert op.get_output().shape == [1, 3, 2, 9]
    assert op.op_type == OpType.Concat
    assert len(g.tensors) == 3


def test_three_inputs_middle_axis():
    g = _Graph()
    t1 = g.add_tensor([2, 2, 3, 1])
    t2 = g.add_tensor([2, 2, 1, 1])
    t3 = g.add_tensor([2, 2, 2, 1])
    op = ConcatOp(g, [t1, t2, t3], None, 2)
    assert op.output.shape == [2, 2, 6, 1]
    assert op.num_inputs() == 3
    assert op.num_outputs() == 1


def test_negative_axis_is_normalised():
    g = _Graph()
    t1 = g.add_tensor([1, 3, 2, 4])
    t2 = g.add_tensor([1, 3, 2, 5])
    op = ConcatOp(g, [t1, t2], None, -1)
    assert op.dim == 3
    assert op.output.shape == [1, 3, 2, 9]


def test_axis_out_of_range():
    g = _Graph()
    t1 = g.add_tensor([1, 3])
    t2 = g.add_tensor([1, 3])
    with pytest.raises(GraphError):
        ConcatOp(g, [t1, t2], None, 2)


def test_rank_mismatch():
    g = _Graph()
    t1 = g.add_tensor([1, 3])
    t2 = g.add_tensor([1, 3, 2])
    with pytest.raises(GraphError):
        ConcatOp(g, [t1, t2], None, 0)


def test_given_output_wrong_shape():
    t1 = Tensor([2, 3], DataType.Float32, None)
    t2 = Tensor([2, 4], DataType.Float32, None)
    out = Tensor([2, 6], DataType.Float32, None)
    with pytest.raises(GraphError):
        ConcatOp(None, [t1, t2], out, 1)


def test_given_output_right_shape():
    t1 = Tensor([2, 3], DataType.Float32, None)
    t2 = Tensor([2, 4], DataType.Float32, None)
    out = Tensor([2, 7], DataType.Float32, None)
    op = ConcatOp(None, [t1, t2], out, 1)
    assert op.output is out


def test_str():
    g = _Graph()
    t1 = g.add_tensor([1, 2])
    t2 = g.add_tensor([1, 3])
    op = ConcatOp(g, [t1, t2], None, 1)
    expected = (
        f"Concat[{op.guid}]([1,2],[1,3],dim=1,"
        f"input={t1.guid},{t2.guid},output={op.output.guid})"
    )
    assert str(op) == expected


def test_clone_keeps_dim():
    g = _Graph()
    t1 = g.add_tensor([1, 2])
    t2 = g.add_tensor([1, 3])
    op = ConcatOp(g, [t1, t2], None, 1)
    n1 = Tensor([1, 2], DataType.Float32, None)
    n2 = Tensor([1, 3], DataType.Float32, None)
    n3 = Tensor([1, 5], DataType.Float32, None)
    clone = op.clone([n1, n2], [n3])
    assert clone.dim == 1
    assert clone.inputs == [n1, n2]
    assert clone.guid != op.guid