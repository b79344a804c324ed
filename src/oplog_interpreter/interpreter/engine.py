"""Sliding-window interpreter consolidating operation logs.

The interpreter raises the abstraction level of an operation log by replacing
runs of scalar reads and writes with the higher level operation they
represent, e.g. ``read(a), read(b), write(a), write(b)`` becomes
``Swap(a, b)``.  Operations that cannot take part in a consolidation are kept
verbatim.

A single pass moves operations from a pending queue into a working window.
The window is grown from the smallest to the largest atomic count of the
active patterns, and the registry is asked for a match at every size.  When
no size matches, the oldest window element is committed to the output and the
remaining elements are handed back to the queue so the search restarts one
position later.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Deque, Dict, List, Mapping, Optional, Sequence, Tuple

from oplog_interpreter.errors import (
    Diagnostic,
    RegistryInvariantError,
    UnsupportedPatternError,
    build_diagnostic,
    log_diagnostic,
)
from oplog_interpreter.operations.model import OperationType
from oplog_interpreter.operations.utils import (
    is_batch_write,
    is_message,
    is_read_or_write,
)
from oplog_interpreter.patterns.base import SupportsPatternMatching
from oplog_interpreter.patterns.registry import (
    PatternRegistry,
    available_pattern_kinds,
    create_pattern,
)

logger = logging.getLogger(__name__)

__all__ = ["Interpreter", "RegistrationResult"]


_STATISTIC_KEYS: Tuple[str, ...] = (
    "input",
    "output",
    "consolidated",
    "committed",
    "flushed",
    "messages",
    "match_attempts",
)


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of :meth:`Interpreter.add_pattern` and :meth:`Interpreter.remove_pattern`.

    ``accepted`` is ``False`` when the request was rejected; ``diagnostic``
    then explains why and the registry is left untouched.  ``changed`` tells
    whether the set of active patterns was modified.
    """

    kind: Any
    accepted: bool
    changed: bool = False
    diagnostic: Optional[Diagnostic] = None

    def __bool__(self) -> bool:
        return self.accepted


class _Step(Enum):
    MATCHED = "matched"
    REFILL = "refill"
    SLIDE = "slide"
    EXHAUSTED = "exhausted"


@dataclass
class _WorkingState:
    pending: Deque[Any]
    window: Deque[Any] = field(default_factory=deque)
    output: List[Any] = field(default_factory=list)
    counters: Dict[str, int] = field(
        default_factory=lambda: dict.fromkeys(_STATISTIC_KEYS, 0)
    )


class Interpreter:
    """Consolidate operation logs using the patterns held by a registry.

    Instances keep no state between :meth:`interpret` calls apart from the
    registry and the statistics of the last call.  They are not thread-safe:
    use one interpreter per thread or serialise the calls.
    """

    def __init__(self, registry: Optional[SupportsPatternMatching] = None) -> None:
        self._registry: SupportsPatternMatching = (
            registry if registry is not None else PatternRegistry()
        )
        self._statistics: Mapping[str, int] = MappingProxyType(
            dict.fromkeys(_STATISTIC_KEYS, 0)
        )

    @property
    def registry(self) -> SupportsPatternMatching:
        """Registry providing the active consolidation patterns."""

        return self._registry

    @property
    def statistics(self) -> Mapping[str, int]:
        """Counters collected during the most recent :meth:`interpret` call."""

        return self._statistics

    # ------------------------------------------------------------------
    # Interpretation
    # ------------------------------------------------------------------
    def interpret(self, operations: Sequence[Any]) -> List[Any]:
        """Return a consolidated copy of ``operations``.

        ``operations`` is never modified.  Raises
        :class:`~oplog_interpreter.errors.MalformedOperationError` for writes
        whose payload length cannot be determined and
        :class:`~oplog_interpreter.errors.RegistryInvariantError` when the
        registry reports inconsistent window bounds.
        """

        candidates = list(operations)
        bounds = self._window_bounds()
        state = _WorkingState(pending=deque(candidates))

        if bounds is None:
            state.output.extend(candidates)
        else:
            minimum, maximum = bounds
            self._consolidate(state, minimum, maximum)

        self._publish_statistics(state, len(candidates))
        return list(state.output)

    def _consolidate(self, state: _WorkingState, minimum: int, maximum: int) -> None:
        while state.pending or state.window:
            if not self._fill(state, minimum):
                break
            step = self._match(state, minimum, maximum)
            if step is _Step.EXHAUSTED:
                break
            if step is _Step.SLIDE:
                self._slide(state, minimum)

        state.output.extend(state.window)
        state.window.clear()

    def _fill(self, state: _WorkingState, minimum: int) -> bool:
        while len(state.window) < minimum:
            if not self._pull(state):
                return False
        return True

    def _match(self, state: _WorkingState, minimum: int, maximum: int) -> _Step:
        while len(state.window) <= maximum:
            if len(state.window) < minimum:
                # A flush emptied the window while it was being expanded.
                return _Step.REFILL

            state.counters["match_attempts"] += 1
            consolidated = self._registry.try_match(tuple(state.window))
            if consolidated is not None:
                state.output.append(consolidated)
                state.window.clear()
                state.counters["consolidated"] += 1
                return _Step.MATCHED

            if not self._pull(state):
                return _Step.EXHAUSTED
        return _Step.SLIDE

    def _slide(self, state: _WorkingState, minimum: int) -> None:
        state.output.append(state.window.popleft())
        state.counters["committed"] += 1
        while len(state.window) > minimum:
            state.pending.appendleft(state.window.pop())

    def _pull(self, state: _WorkingState) -> bool:
        """Move the next scalar read/write from the queue into the window.

        Messages are emitted straight away.  Batch writes and operations that
        are neither reads nor writes flush the window before being emitted.
        Returns ``False`` once the queue is exhausted.
        """

        while state.pending:
            candidate = state.pending.popleft()
            if is_message(candidate):
                state.output.append(candidate)
                state.counters["messages"] += 1
                continue
            if not is_read_or_write(candidate) or is_batch_write(candidate):
                state.output.extend(state.window)
                state.window.clear()
                state.output.append(candidate)
                state.counters["flushed"] += 1
                continue
            state.window.append(candidate)
            return True
        return False

    def _window_bounds(self) -> Optional[Tuple[int, int]]:
        minimum = _as_bound(self._registry.minimum_window_size())
        maximum = _as_bound(self._registry.maximum_window_size())

        if minimum is None and maximum is None:
            return None
        if minimum is None or maximum is None:
            raise RegistryInvariantError(
                "registry reports a single window bound "
                f"(minimum={minimum!r}, maximum={maximum!r})"
            )
        if maximum < minimum:
            raise RegistryInvariantError(
                f"registry maximum window size {maximum} is smaller than "
                f"its minimum window size {minimum}"
            )
        if maximum == 0:
            return None
        # An empty window has nothing to consolidate.
        return max(minimum, 1), maximum

    def _publish_statistics(self, state: _WorkingState, input_size: int) -> None:
        counters = dict(state.counters)
        counters["input"] = input_size
        counters["output"] = len(state.output)
        self._statistics = MappingProxyType(counters)
        logger.debug(
            "Interpreted %d operations into %d",
            input_size,
            counters["output"],
            extra={"event": "interpreter.interpret", "statistics": counters},
        )

    # ------------------------------------------------------------------
    # Pattern management
    # ------------------------------------------------------------------
    def add_pattern(self, kind: OperationType | str) -> RegistrationResult:
        """Activate the consolidation pattern producing operations of ``kind``."""

        try:
            pattern = create_pattern(kind)
        except UnsupportedPatternError as exc:
            return self._reject(kind, exc, action="add")

        changed = self._registry.register(pattern)
        return RegistrationResult(kind=pattern.kind, accepted=True, changed=changed)

    def remove_pattern(
        self,
        kind: OperationType | str,
        atomic_operation_count: Optional[int] = None,
    ) -> RegistrationResult:
        """Deactivate the pattern for ``kind``.

        ``atomic_operation_count`` defaults to the atomic count declared by
        ``kind``.  Once this method returns the pattern is guaranteed not to
        be active.
        """

        try:
            resolved = OperationType.coerce(kind)
        except ValueError:
            return self._reject(kind, UnsupportedPatternError(kind), action="remove")
        if resolved not in available_pattern_kinds():
            return self._reject(kind, UnsupportedPatternError(resolved), action="remove")

        count = (
            atomic_operation_count
            if atomic_operation_count is not None
            else resolved.atomic_operations
        )
        changed = self._registry.unregister(resolved, count)
        return RegistrationResult(kind=resolved, accepted=True, changed=changed)

    def active_pattern_kinds(self) -> Tuple[Any, ...]:
        """Kinds of the active patterns in registration order."""

        return tuple(self._registry.active_kinds())

    def _reject(
        self, kind: Any, error: UnsupportedPatternError, *, action: str
    ) -> RegistrationResult:
        diagnostic = build_diagnostic(
            str(error),
            category="unsupported_pattern",
            context={"kind": getattr(kind, "value", kind), "action": action},
        )
        log_diagnostic(diagnostic, logger=logger)
        return RegistrationResult(kind=kind, accepted=False, diagnostic=diagnostic)


def _as_bound(value: Optional[int]) -> Optional[int]:
    if value is None or value < 0:
        return None
    return value
