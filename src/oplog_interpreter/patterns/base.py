"""Contracts implemented by consolidation patterns and pattern registries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, Sequence, Tuple, runtime_checkable

from oplog_interpreter.operations.model import Operation, OperationType

__all__ = ["ConsolidationPattern", "SupportsPatternMatching"]


class ConsolidationPattern(ABC):
    """Structural matcher turning a window of reads/writes into one operation.

    Subclasses set :attr:`kind` to the operation type they synthesise.  The
    number of read/write operations they consume defaults to the atomic count
    declared by that operation type.
    """

    kind: OperationType

    @property
    def atomic_operation_count(self) -> int:
        """Number of read/write operations consumed by a successful match."""

        return self.kind.atomic_operations

    @abstractmethod
    def match(self, window: Sequence[Any]) -> Optional[Operation]:
        """Return the consolidated operation for ``window`` or ``None``.

        ``window`` must not be modified.  Implementations return ``None``
        whenever the window does not have exactly the expected shape.
        """

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"atomic_operation_count={self.atomic_operation_count})"
        )


@runtime_checkable
class SupportsPatternMatching(Protocol):
    """Registry contract consumed by :class:`~oplog_interpreter.Interpreter`.

    Both window-size queries return ``None`` (or a negative value) when no
    pattern is registered.
    """

    def minimum_window_size(self) -> Optional[int]:
        ...

    def maximum_window_size(self) -> Optional[int]:
        ...

    def try_match(self, window: Sequence[Any]) -> Optional[Any]:
        ...

    def register(self, pattern: Any) -> bool:
        ...

    def unregister(self, kind: Any, atomic_operation_count: int) -> bool:
        ...

    def active_kinds(self) -> Tuple[Any, ...]:
        ...
