"""Recognition of value exchanges between two elements."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from oplog_interpreter.operations.model import OperationType, Swap, _as_value_tuple
from oplog_interpreter.operations.utils import is_read, is_write
from oplog_interpreter.patterns.base import ConsolidationPattern
from oplog_interpreter.patterns.registry import pattern_factory

__all__ = ["SwapPattern"]


@pattern_factory(OperationType.SWAP)
class SwapPattern(ConsolidationPattern):
    """Match ``read(a), read(b), write(a), write(b)`` as ``Swap(a, b)``.

    When both the reads and the writes record their values, the value written
    into ``a`` must be the value read from ``b`` and vice versa.  Unknown
    values do not prevent a match.
    """

    kind = OperationType.SWAP

    def match(self, window: Sequence[Any]) -> Optional[Swap]:
        if len(window) != self.atomic_operation_count:
            return None

        first_read, second_read, first_write, second_write = window
        if not (is_read(first_read) and is_read(second_read)):
            return None
        if not (is_write(first_write) and is_write(second_write)):
            return None

        first = first_read.locator
        second = second_read.locator
        if first == second:
            return None
        if first_write.locator != first or second_write.locator != second:
            return None

        if not _values_agree(second_read, first_write):
            return None
        if not _values_agree(first_read, second_write):
            return None

        return Swap(first, second, tuple(window))


def _values_agree(read: Any, write: Any) -> bool:
    observed = _as_value_tuple(getattr(read, "value", None))
    written = _as_value_tuple(getattr(write, "value", None))
    if observed is None or written is None:
        return True
    return observed == written
