"""Error type and small assertion and formatting helpers."""

from __future__ import annotations

from collections.abc import Iterable


class GraphError(RuntimeError):
    """Raised when a graph, tensor or operator invariant does not hold."""


def ensure(condition: object, message: str = "") -> None:
    """Raise :class:`GraphError` carrying *message* unless *condition* is truthy."""
    if not condition:
        raise GraphError(f"Assertion failed: {message}" if message else "Assertion failed")


def _format_value(value: object) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def vec_to_string(values: Iterable[object]) -> str:
    """Render a sequence as ``[a,b,c]``."""
    return "[" + ",".join(_format_value(v) for v in values) + "]"