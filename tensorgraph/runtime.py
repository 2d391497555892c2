"""Host runtime that owns buffers and executes graphs with registered kernels."""

from __future__ import annotations

from typing import Any

import numpy as np

from . import cpu_kernels  # noqa: F401  (registers the host kernels)
from .errors import GraphError
from .kernel import Device, KernelRegistry

_WORD = 8  # buffers are handed out in whole 64-bit words


class NativeCpuRuntime:
    """Runs every operator of a graph on the host, in the graph's operator order."""

    _instance: NativeCpuRuntime | None = None

    def __init__(self) -> None:
        self.device = Device.CPU
        self._live: dict[int, np.ndarray] = {}

    @classmethod
    def instance(cls) -> NativeCpuRuntime:
        """The process-wide host runtime."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def is_cpu(self) -> bool:
        return True

    @property
    def allocated_bytes(self) -> int:
        """Total size of the buffers handed out and not yet released."""
        return sum(buffer.size for buffer in self._live.values())

    def alloc(self, size: int) -> np.ndarray:
        """A zero-filled byte buffer of *size* rounded up to whole 8-byte words."""
        words = (size + _WORD - 1) // _WORD
        buffer = np.zeros(words * _WORD, dtype=np.uint8)
        self._live[id(buffer)] = buffer
        return buffer

    def dealloc(self, buffer: np.ndarray) -> None:
        """Release a buffer previously returned by :meth:`alloc`."""
        if self._live.pop(id(buffer), None) is None:
            raise GraphError("buffer was not allocated by this runtime")

    def run(self, graph: Any) -> None:
        """Execute each operator of *graph* with the kernel registered for it."""
        registry = KernelRegistry.instance()
        for op in graph.operators:
            kernel = registry.get_kernel((self.device, op.op_type))
            kernel.compute(op, self)

    def __str__(self) -> str:
        return "CPU Runtime"