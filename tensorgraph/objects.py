"""Unique identifiers and the common base of graph objects."""

from __future__ import annotations

import itertools
import sys
from abc import ABC, abstractmethod

_guid_counter = itertools.count(1)
_fuid_counter = itertools.count(1)


def next_guid() -> int:
    """Return a new globally unique object id."""
    return next(_guid_counter)


def next_fuid() -> int:
    """Return a new family id; clones of a tensor share theirs."""
    return next(_fuid_counter)


class GraphObject(ABC):
    """Base of tensors, operators and graphs: owns a unique ``guid``."""

    def __init__(self) -> None:
        self.guid = next_guid()

    @abstractmethod
    def __str__(self) -> str: ...

    def print(self) -> str:
        """Write the string form and a newline to standard output; return the string form."""
        text = str(self)
        sys.stdout.write(text + "\n")
        return text

    def __copy__(self):
        cls = type(self)
        clone = cls.__new__(cls)
        clone.__dict__.update(self.__dict__)
        clone.guid = next_guid()
        return clone