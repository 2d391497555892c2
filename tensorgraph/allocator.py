"""Offset planner that packs tensor storage into one buffer."""

from __future__ import annotations

import sys
from typing import Any

from .errors import ensure

_ALIGNMENT = 8  # width of the widest supported element type


class Allocator:
    """Plans byte offsets of blocks, then allocates one buffer of the peak size.

    Freed blocks are kept by start offset and merged with an adjacent free
    block; a block that ends at the peak shrinks the peak instead.
    """

    def __init__(self, runtime: Any) -> None:
        self.runtime = runtime
        self.used = 0
        self.peak = 0
        self.alignment = _ALIGNMENT
        self._memory = None
        self._free_blocks: dict[int, int] = {}

    def _aligned(self, size: int) -> int:
        return ((size - 1) // self.alignment + 1) * self.alignment

    def alloc(self, size: int) -> int:
        """Reserve *size* bytes (rounded up) and return the block's offset."""
        ensure(self._memory is None, "memory has already been allocated")
        size = self._aligned(size)
        for addr, block in sorted(self._free_blocks.items()):
            if block >= size:
                del self._free_blocks[addr]
                self._grow(size)
                if block > size:
                    self._free_blocks[addr + size] = block - size
                return addr
        addr = self.used
        self._grow(size)
        return addr

    def _grow(self, size: int) -> None:
        self.used += size
        self.peak = max(self.peak, self.used)

    def free(self, addr: int, size: int) -> None:
        """Release the block of *size* bytes at offset *addr*."""
        ensure(self._memory is None, "memory has already been allocated")
        size = self._aligned(size)
        if addr + size == self.peak:
            self.used -= size
            self.peak -= size
            return
        for block_addr, block_size in sorted(self._free_blocks.items()):
            if block_addr + block_size == addr:
                self._free_blocks[block_addr] = block_size + size
                return
            if block_addr == addr + size:
                del self._free_blocks[block_addr]
                self._free_blocks[addr] = size + block_size
                return
        self._free_blocks[addr] = size

    @property
    def free_blocks(self) -> dict[int, int]:
        """Free blocks as offset to size, in offset order."""
        return dict(sorted(self._free_blocks.items()))

    def memory(self):
        """Allocate the buffer of the peak size on first call and return it."""
        if self._memory is None:
            self._memory = self.runtime.alloc(self.peak)
            sys.stdout.write(f"Allocator really alloc: {self.peak} bytes\n")
        return self._memory

    def info(self) -> str:
        """Write the used and peak memory to standard output and return the line."""
        text = f"Used memory: {self.used}, peak memory: {self.peak}"
        sys.stdout.write(text + "\n")
        return text

    def __del__(self) -> None:
        memory = getattr(self, "_memory", None)
        if memory is not None:
            self.runtime.dealloc(memory)