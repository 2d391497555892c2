import numpy as np
import pytest

from tensorgraph.data_type import DataType, cpu_type_of
from tensorgraph.errors import GraphError

NUMERIC_INDICES = [1, 2, 3, 4, 5, 6, 7, 9, 10, 11, 12, 13, 16]


def test_names():
    assert str(DataType(1)) == "Float32"
    assert str(DataType(16)) == "BFloat16"
    assert DataType(12).__str__() == "UInt32"


def test_indices_follow_onnx_numbering():
    assert DataType.BFloat16.index == 16
    assert DataType(12) is DataType.UInt32


def test_cpu_type_table_values():
    assert DataType.Float32.cpu_type() == 0
    assert DataType.String.cpu_type() == -1
    assert DataType.Undefine.size() == 0


@pytest.mark.parametrize("index", NUMERIC_INDICES)
def test_size_matches_numpy_itemsize(index):
    dtype = DataType(index)
    assert dtype.size() == dtype.numpy_dtype().itemsize


@pytest.mark.parametrize("index", NUMERIC_INDICES)
def test_cpu_type_round_trip(index):
    dtype = DataType(index)
    assert cpu_type_of(dtype.numpy_dtype()) == dtype.cpu_type()


def test_ordering_by_index():
    assert DataType(1) < DataType(12)
    assert not DataType(12) < DataType(1)
    assert sorted([DataType(11), DataType(0), DataType(3)]) == [
        DataType.Undefine,
        DataType.Int8,
        DataType.Double,
    ]


def test_cpu_type_of_unsupported():
    with pytest.raises(GraphError, match="Unsupported data type"):
        cpu_type_of(np.complex64)


def test_cpu_type_of_accepts_scalar_types():
    assert cpu_type_of(np.float32) == DataType.Float32.cpu_type()