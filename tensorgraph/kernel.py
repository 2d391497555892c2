"""Compute kernels and the registry that maps devices and operator kinds to them."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Any, Callable, NamedTuple, TypeVar

from .errors import GraphError, ensure
from .op_type import OpType


class Device(enum.Enum):
    """Device a kernel runs on."""

    CPU = 1


class Kernel(ABC):
    """Executes one kind of operator on one device."""

    @abstractmethod
    def compute(self, op: Any, context: Any) -> None:
        """Run *op*, reading its input tensors and writing its outputs."""


class KernelRecord(NamedTuple):
    """A registered kernel with its name and registration number."""

    kernel: Kernel
    name: str
    id: int


def _normalize(key: tuple) -> tuple[Device, int]:
    device, op_type = key
    return device, int(op_type)


class KernelRegistry:
    """Maps ``(device, op_type)`` keys to kernels."""

    _instance: KernelRegistry | None = None

    def __init__(self) -> None:
        self._kernels: dict[tuple[Device, int], KernelRecord] = {}
        self._count = 0

    @classmethod
    def instance(cls) -> KernelRegistry:
        """The process-wide registry."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def register(self, key: tuple, kernel: Kernel, name: str) -> bool:
        """Register *kernel* under *key*; a key may be registered only once."""
        key = _normalize(key)
        ensure(key not in self._kernels, "Kernel already registered")
        self._count += 1
        self._kernels[key] = KernelRecord(kernel, name, self._count)
        return True

    def get_kernel(self, key: tuple) -> Kernel:
        """The kernel registered under *key*."""
        record = self._kernels.get(_normalize(key))
        ensure(
            record is not None,
            "Kernel not found for key {" + get_kernel_attrs_str(key) + "}",
        )
        return record.kernel

    def get_kernel_item(self, key: tuple) -> KernelRecord:
        """The full record for *key*; raises KeyError when absent."""
        return self._kernels[_normalize(key)]


_K = TypeVar("_K", bound=type)


def register_kernel(device: Device, op_type: OpType, name: str) -> Callable[[_K], _K]:
    """Class decorator that registers an instance of the kernel class globally."""

    def decorator(kernel_class: _K) -> _K:
        KernelRegistry.instance().register((device, op_type), kernel_class(), name)
        return kernel_class

    return decorator


def device_to_str(device: Device) -> str:
    """Short name of a device."""
    if device is Device.CPU:
        return "CPU"
    raise GraphError("Unimplemented")


def get_kernel_attrs_str(kernel_attrs: tuple) -> str:
    """Render a kernel key as ``"<device>, <op type>"``."""
    device, op_type = kernel_attrs
    try:
        op_name = str(OpType(int(op_type)))
    except ValueError:
        op_name = "Unknown"
    return f"{device_to_str(device)}, {op_name}"