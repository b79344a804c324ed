"""Immutable operation records making up an operation log.

An operation log is an ordered trace of the primitive accesses performed
against addressable storage (reads and writes) interleaved with free-form
messages.  Higher level operations such as :class:`Swap` are synthesised by
the interpreter and keep a reference to the primitive operations they
replace so that the original trace can always be reconstructed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Iterable, Mapping, Optional, Tuple

__all__ = [
    "Locator",
    "Message",
    "Operation",
    "OperationType",
    "Read",
    "ReadWriteOperation",
    "Swap",
    "Write",
]


class OperationType(str, Enum):
    """Kinds of operation that may appear in an operation log."""

    READ = "read"
    WRITE = "write"
    MESSAGE = "message"
    SWAP = "swap"

    @property
    def atomic_operations(self) -> int:
        """Number of read/write operations represented by this kind."""

        return _ATOMIC_OPERATION_COUNTS[self]

    @classmethod
    def coerce(cls, value: "OperationType | str") -> "OperationType":
        """Return the member identified by ``value`` ignoring case."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip().lower()
            for member in cls:
                if member.value == token:
                    return member
        raise ValueError(f"unknown operation type {value!r}")


_ATOMIC_OPERATION_COUNTS: Mapping[OperationType, int] = {
    OperationType.READ: 1,
    OperationType.WRITE: 1,
    OperationType.MESSAGE: 0,
    OperationType.SWAP: 4,
}


@dataclass(frozen=True)
class Locator:
    """Address of an element: a variable identifier plus an optional index."""

    identifier: str
    index: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.index, tuple):
            object.__setattr__(self, "index", tuple(self.index))

    @classmethod
    def of(cls, identifier: str, *index: int) -> "Locator":
        return cls(identifier, tuple(index))

    def __str__(self) -> str:
        return self.identifier + "".join(f"[{position}]" for position in self.index)


def _as_value_tuple(value: Any) -> Any:
    if value is None or isinstance(value, tuple):
        return value
    if isinstance(value, (str, bytes)):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(value)
    return (value,)


@dataclass(frozen=True)
class Operation:
    """Base record for every operation in a log."""

    kind: ClassVar[OperationType]


@dataclass(frozen=True)
class ReadWriteOperation(Operation):
    """Operation accessing the element identified by :attr:`locator`."""

    locator: Locator


@dataclass(frozen=True)
class Read(ReadWriteOperation):
    """Read of a single element; ``value`` holds the observed value, if known."""

    kind: ClassVar[OperationType] = OperationType.READ

    value: Optional[Tuple[Any, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _as_value_tuple(self.value))


@dataclass(frozen=True)
class Write(ReadWriteOperation):
    """Write of ``value`` into the element identified by ``locator``.

    A write carrying a single value is a scalar write.  Writes carrying more
    than one value (batch writes, e.g. an array initialisation) never take
    part in a consolidation.
    """

    kind: ClassVar[OperationType] = OperationType.WRITE

    value: Optional[Tuple[Any, ...]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _as_value_tuple(self.value))


@dataclass(frozen=True)
class Message(Operation):
    """Free-form annotation carried through the log untouched."""

    kind: ClassVar[OperationType] = OperationType.MESSAGE

    text: str


@dataclass(frozen=True)
class Swap(Operation):
    """Exchange of the values held by ``first`` and ``second``."""

    kind: ClassVar[OperationType] = OperationType.SWAP

    first: Locator
    second: Locator
    operations: Tuple[Operation, ...] = field(default=(), repr=False)

    @property
    def values(self) -> Tuple[Any, ...]:
        """Values written into ``first`` and ``second``, when recorded."""

        writes = [op for op in self.operations if isinstance(op, Write)]
        return tuple(write.value[0] if write.value else None for write in writes)
