"""Classification helpers shared by the interpreter and the patterns."""

from __future__ import annotations

from collections.abc import Sized
from typing import Any, Iterable, List

from ..errors import MalformedOperationError
from .interfaces import SupportsReadWrite
from .model import OperationType

__all__ = [
    "flatten_operations",
    "is_batch_write",
    "is_message",
    "is_read",
    "is_read_or_write",
    "is_write",
    "payload_length",
]


def _kind_of(operation: Any) -> Any:
    return getattr(operation, "kind", None)


def is_read(operation: Any) -> bool:
    return _kind_of(operation) == OperationType.READ


def is_write(operation: Any) -> bool:
    return _kind_of(operation) == OperationType.WRITE


def is_message(operation: Any) -> bool:
    return _kind_of(operation) == OperationType.MESSAGE


def is_read_or_write(operation: Any) -> bool:
    """Return ``True`` when ``operation`` is a read or a write of one locator."""

    if not isinstance(operation, SupportsReadWrite):
        return False
    return is_read(operation) or is_write(operation)


def payload_length(operation: Any) -> int:
    """Return the number of values carried by the write ``operation``.

    Raises :class:`~oplog_interpreter.errors.MalformedOperationError` when the
    payload is missing, has no length or is empty: such a write cannot be
    classified as either scalar or batch.
    """

    value = getattr(operation, "value", None)
    if value is None:
        raise MalformedOperationError(
            f"write operation {operation!r} carries no value payload",
            operation=operation,
        )
    if not isinstance(value, Sized):
        raise MalformedOperationError(
            f"write operation {operation!r} has a payload of undetermined length",
            operation=operation,
        )
    length = len(value)
    if length == 0:
        raise MalformedOperationError(
            f"write operation {operation!r} carries an empty value payload",
            operation=operation,
        )
    return length


def is_batch_write(operation: Any) -> bool:
    """Return ``True`` for writes carrying more than one value."""

    return is_write(operation) and payload_length(operation) > 1


def flatten_operations(operations: Iterable[Any]) -> List[Any]:
    """Expand synthesised operations back into the primitives they absorbed."""

    flattened: List[Any] = []
    stack = [iter(operations)]
    while stack:
        try:
            operation = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        absorbed = getattr(operation, "operations", None)
        if absorbed:
            stack.append(iter(absorbed))
        else:
            flattened.append(operation)
    return flattened
