# tensorgraph

A small computation-graph framework. You build a graph of tensors and
operators. The graph infers output shapes and data types, can be
optimised, plans the memory of all its tensors in one buffer, and runs
on the CPU with numpy-based kernels.

## Install

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## What it offers

- `tensorgraph.graph.Graph` holds tensors and operators and keeps the
  links between them up to date. Its methods:
  - `add_tensor(shape, dtype)`
  - `add_existing_tensors(tensors)`
  - `add_op(op_class, ...)`, which creates the output tensors for you
  - `add_op_with_outputs(op_class, ...)`
  - `remove_operator` and `remove_tensor`
  - `get_tensor(fuid)`
  - `topo_sort()`, which returns `False` when the graph has a cycle
  - `optimize()`, `shape_infer()`, `data_malloc()` and `check_valid()`
- `tensorgraph.tensor.Tensor` has `shape`, `size`, `bytes`, `rank` and
  `dtype`. `array()` returns a writable numpy view of the tensor's data.
  `set_data(generator)` fills the data, `equal_data(other,
  relative_error)` compares it, and `data_to_string()` and `print_data()`
  render it.
- Operators in `tensorgraph.operators`:
  - `concat.ConcatOp`
  - `element_wise.AddOp`, `SubOp`, `MulOp` and `DivOp`, which broadcast
    their inputs in both directions
  - `matmul.MatmulOp`, with the flags `trans_a` and `trans_b`
  - `transpose.TransposeOp`
  - `unary.ReluOp`
  - `unary.ClipOp`, whose bounds may each be `None`
  - `unary.CastOp`, together with `unary.CastType`
- `tensorgraph.data_type.DataType` lists the element types (`Float32`,
  `UInt32`, `Int64` and others). For each type it gives the byte size and
  the numpy dtype.
- `tensorgraph.runtime.NativeCpuRuntime` runs a graph's operators in the
  order they are stored. For each operator it uses the kernel registered
  in `tensorgraph.kernel.KernelRegistry`. The host kernels live in
  `tensorgraph.cpu_kernels`.
- `tensorgraph.allocator.Allocator` is a first-fit offset planner:
  - Sizes are rounded up to 8 bytes.
  - A freed block is merged with an adjacent free block.
  - A block that ends at the peak lowers the peak.
  - The single buffer is taken when `memory()` is first called. After
    that, `alloc` and `free` raise.
- `tensorgraph.data_generator` provides `IncrementalGenerator`,
  `OneGenerator`, `ZeroGenerator` and `ValueGenerator(value)`. They fill
  Float32 and UInt32 tensors.
- Errors in graph invariants raise `tensorgraph.errors.GraphError`.

## Example

```python
from tensorgraph.data_type import DataType
from tensorgraph.data_generator import IncrementalGenerator, OneGenerator
from tensorgraph.graph import Graph
from tensorgraph.operators.element_wise import AddOp
from tensorgraph.runtime import NativeCpuRuntime

runtime = NativeCpuRuntime.instance()
g = Graph(runtime)
a = g.add_tensor([1, 2, 2, 3, 1], DataType.Float32)
b = g.add_tensor([2, 1, 1], DataType.Float32)
op = g.add_op(AddOp, a, b, None)

g.data_malloc()
a.set_data(IncrementalGenerator())
b.set_data(OneGenerator())
runtime.run(g)

print(op.get_output(0).array())
```

`data_malloc()` writes the allocated size and the used and peak memory
to standard output.

## Graph optimisation

`Graph.optimize()` applies two rules:

1. Two transposes in a row whose permutations cancel out are removed.
   If they do not cancel, they are replaced by a single transpose.
2. A transpose that only swaps the last two axes of a matmul input is
   folded into the matmul's `trans_a` or `trans_b` flag.

## What it does not do

- There is no command-line tool.
- There is no model import or export.
- Kernels exist only for the CPU. They handle Concat, Add, Sub, Mul,
  Div, Transpose, Relu and Clip, and only on Float32 and UInt32 data.
- `CastOp` and `MatmulOp` take part in shape and type inference, but no
  kernel executes them, so running a graph that contains them raises
  `GraphError`.