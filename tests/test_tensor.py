import math
from types import SimpleNamespace

import numpy as np
import pytest

from tensorgraph.data_generator import IncrementalGenerator, OneGenerator
from tensorgraph.data_type import DataType
from tensorgraph.errors import GraphError
from tensorgraph.tensor import Blob, Tensor


class _Runtime:
    def __str__(self):
        return "CPU Runtime"


RUNTIME = _Runtime()


def _with_data(shape, dtype=DataType.Float32):
    tensor = Tensor(shape, dtype, RUNTIME)
    tensor.set_data_blob(Blob(RUNTIME, bytearray(max(tensor.bytes, 8))))
    return tensor


def test_size_and_bytes_follow_shape():
    shape = [1, 2, 2, 3]
    t = Tensor(shape, DataType.Float32, RUNTIME)
    assert t.size == math.prod(shape)
    assert t.bytes == t.size * DataType.Float32.size()
    assert t.rank == len(shape)
    assert t.shape == shape


def test_scalar_shape_has_one_element():
    t = Tensor([], DataType.Float32, RUNTIME)
    assert t.size == 1
    assert t.rank == 0


def test_shape_setter_updates_size():
    t = Tensor([2, 2], DataType.Float32, RUNTIME)
    t.shape = [3, 4, 5]
    assert t.shape == [3, 4, 5]
    assert t.size == math.prod([3, 4, 5])


def test_ids_are_unique():
    a = Tensor([2], DataType.Float32, RUNTIME)
    b = Tensor([2], DataType.Float32, RUNTIME)
    assert a.guid != b.guid and a.fuid != b.fuid
    assert b.fuid > a.fuid


def test_array_without_data_raises():
    t = Tensor([2], DataType.Float32, RUNTIME)
    with pytest.raises(GraphError):
        t.array()
    with pytest.raises(GraphError):
        t.set_data(IncrementalGenerator())


def test_set_data_incremental():
    t = _with_data([2, 3])
    t.set_data(IncrementalGenerator())
    assert t.array().shape == (2, 3)
    assert np.array_equal(t.array().ravel(), np.arange(t.size, dtype=np.float32))


def test_set_data_ones_uint32():
    t = _with_data([4], DataType.UInt32)
    t.set_data(OneGenerator())
    assert t.array().dtype == np.uint32
    assert np.all(t.array() == 1)


def test_blob_views_share_buffer():
    buffer = bytearray(16)
    a = Tensor([2], DataType.Float32, RUNTIME)
    b = Tensor([2], DataType.Float32, RUNTIME)
    a.set_data_blob(Blob(RUNTIME, buffer, 0))
    b.set_data_blob(Blob(RUNTIME, buffer, 8))
    a.set_data(OneGenerator())
    assert np.all(a.array() == 1)
    assert np.all(b.array() == 0)
    assert np.frombuffer(bytes(buffer[:8]), dtype=np.float32).tolist() == [1.0, 1.0]


def test_blob_too_small_raises():
    blob = Blob(RUNTIME, bytearray(4))
    with pytest.raises(GraphError):
        blob.view(np.float32, 2)


def test_equal_data_between_tensors():
    a = _with_data([2, 3])
    b = _with_data([2, 3])
    a.set_data(IncrementalGenerator())
    b.set_data(IncrementalGenerator())
    assert a.equal_data(b)
    b.array()[1, 2] += 1
    assert not a.equal_data(b)


def test_equal_data_with_list_and_relative_error():
    t = _with_data([1])
    t.array()[0] = 100.0
    assert t.equal_data([100.00001])
    assert not t.equal_data([101.0])
    assert t.equal_data([101.0], ) is False


def test_equal_data_near_zero_uses_absolute_error():
    t = _with_data([1])
    assert t.equal_data([1e-7])
    assert not t.equal_data([1e-5])


def test_equal_data_integers_exact():
    t = _with_data([3], DataType.UInt32)
    t.set_data(IncrementalGenerator())
    assert t.equal_data([0, 1, 2])
    assert not t.equal_data([0, 1, 3])


def test_equal_data_list_size_mismatch_raises():
    t = _with_data([3])
    with pytest.raises(GraphError):
        t.equal_data([0.0, 1.0])


def test_equal_data_array_dtype_mismatch_raises():
    t = _with_data([2])
    with pytest.raises(GraphError):
        t.equal_data(np.zeros(2, dtype=np.int32))


def test_equal_data_tensor_dtype_mismatch_raises():
    a = _with_data([2], DataType.Float32)
    b = _with_data([2], DataType.UInt32)
    with pytest.raises(GraphError):
        a.equal_data(b)


def test_equal_data_different_sizes_is_false():
    a = _with_data([2])
    b = _with_data([3])
    assert a.equal_data(b) is False


def test_data_to_string_layout():
    t = _with_data([2, 3])
    t.set_data(IncrementalGenerator())
    expected = f"Tensor: {t.guid}\n[[0, 1, 2], \n[3, 4, 5]]\n"
    assert t.data_to_string() == expected


def test_print_data_writes_rendering(capsys):
    t = _with_data([2, 2])
    t.set_data(IncrementalGenerator())
    t.print_data()
    assert capsys.readouterr().out == t.data_to_string() + "\n"


def test_str_mentions_source_and_targets():
    t = Tensor([2, 3], DataType.Float32, RUNTIME)
    text = str(t)
    assert text.startswith(f"Tensor {t.guid}, Fuid {t.fuid}, shape [2,3], dtype Float32")
    assert "CPU Runtime" in text
    assert "source None" in text
    assert text.endswith("targets []")
    producer = SimpleNamespace(guid=11)
    consumer = SimpleNamespace(guid=12)
    t.set_source(producer)
    t.add_target(consumer)
    text = str(t)
    assert "source 11" in text
    assert text.endswith("targets [12]")


def test_remove_target_removes_every_occurrence():
    t = Tensor([2], DataType.Float32, RUNTIME)
    first, second = object(), object()
    t.add_target(first)
    t.add_target(second)
    t.add_target(first)
    t.remove_target(first)
    assert t.targets == [second]
    assert t.source is None