"""Structural typing interfaces for operation log records.

The interpreter only relies on the attributes described here, so operation
types defined outside :mod:`oplog_interpreter.operations.model` can be
interpreted as long as they expose the same shape.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

__all__ = [
    "SupportsOperation",
    "SupportsReadWrite",
    "SupportsWrite",
]


@runtime_checkable
class SupportsOperation(Protocol):
    """Any tagged operation."""

    kind: Any


@runtime_checkable
class SupportsReadWrite(Protocol):
    """Operation addressing a single storage element."""

    kind: Any
    locator: Any


@runtime_checkable
class SupportsWrite(Protocol):
    """Write operation exposing the written payload."""

    kind: Any
    locator: Any
    value: Sequence[Any] | None
