"""Registry of the consolidation patterns known to the interpreter."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from oplog_interpreter.errors import PatternRegistrationError, UnsupportedPatternError
from oplog_interpreter.operations.model import Operation, OperationType
from oplog_interpreter.patterns.base import ConsolidationPattern

logger = logging.getLogger(__name__)

PatternFactory = Callable[[], ConsolidationPattern]
PatternKey = Tuple[Any, int]

_PATTERN_FACTORIES: Dict[OperationType, PatternFactory] = {}

__all__ = [
    "PatternFactory",
    "PatternRegistry",
    "available_pattern_kinds",
    "create_pattern",
    "pattern_factory",
    "register_pattern_factory",
]


def _normalise_kind(kind: Any) -> Any:
    try:
        return OperationType.coerce(kind)
    except ValueError:
        return kind


def register_pattern_factory(
    kind: OperationType | str, factory: PatternFactory
) -> PatternFactory:
    """Declare ``factory`` as the builder of patterns synthesising ``kind``."""

    try:
        resolved = OperationType.coerce(kind)
    except ValueError as exc:
        raise PatternRegistrationError(f"unknown operation type {kind!r}") from exc
    if not callable(factory):
        raise PatternRegistrationError("pattern factories must be callable")

    existing = _PATTERN_FACTORIES.get(resolved)
    if existing is not None and existing is not factory:
        raise PatternRegistrationError(
            f"a pattern factory is already registered for '{resolved.value}'"
        )
    _PATTERN_FACTORIES[resolved] = factory
    return factory


def pattern_factory(kind: OperationType | str) -> Callable[[PatternFactory], PatternFactory]:
    """Decorator registering a pattern class (or factory) for ``kind``."""

    def decorator(factory: PatternFactory) -> PatternFactory:
        return register_pattern_factory(kind, factory)

    return decorator


def available_pattern_kinds() -> Tuple[OperationType, ...]:
    """Return the operation types that can be consolidated."""

    return tuple(_PATTERN_FACTORIES)


def create_pattern(kind: OperationType | str) -> ConsolidationPattern:
    """Instantiate the pattern registered for ``kind``."""

    try:
        resolved = OperationType.coerce(kind)
    except ValueError as exc:
        raise UnsupportedPatternError(kind) from exc
    factory = _PATTERN_FACTORIES.get(resolved)
    if factory is None:
        raise UnsupportedPatternError(resolved)
    return factory()


class PatternRegistry:
    """Set of active consolidation patterns.

    Patterns are keyed by ``(kind, atomic_operation_count)`` and tried in
    registration order; the first pattern matching a window wins.  The
    smallest and largest atomic counts of the active patterns bound the
    window sizes the interpreter submits to :meth:`try_match`.
    """

    def __init__(self, patterns: Iterable[Any] = ()) -> None:
        self._patterns: Dict[PatternKey, Any] = {}
        self._minimum: Optional[int] = None
        self._maximum: Optional[int] = None
        for pattern in patterns:
            self.register(pattern)

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[Any]:
        return iter(tuple(self._patterns.values()))

    def __contains__(self, kind: object) -> bool:
        resolved = _normalise_kind(kind)
        return any(key[0] == resolved for key in self._patterns)

    # ------------------------------------------------------------------
    # Window bounds
    # ------------------------------------------------------------------
    def minimum_window_size(self) -> Optional[int]:
        """Smallest atomic operation count among active patterns."""

        return self._minimum

    def maximum_window_size(self) -> Optional[int]:
        """Largest atomic operation count among active patterns."""

        return self._maximum

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------
    def register(self, pattern: Any) -> bool:
        """Activate ``pattern``.

        Returns ``False`` when an equivalent pattern is already active.
        """

        key = self._key_for(pattern)
        if key in self._patterns:
            return False
        self._patterns[key] = pattern
        self._recompute_bounds()
        logger.info(
            "Registered consolidation pattern '%s' (%d atomic operations)",
            getattr(key[0], "value", key[0]),
            key[1],
        )
        return True

    def unregister(self, kind: Any, atomic_operation_count: int) -> bool:
        """Deactivate the pattern identified by ``kind`` and its atomic count."""

        key = (_normalise_kind(kind), atomic_operation_count)
        if self._patterns.pop(key, None) is None:
            return False
        self._recompute_bounds()
        logger.info(
            "Removed consolidation pattern '%s' (%d atomic operations)",
            getattr(key[0], "value", key[0]),
            atomic_operation_count,
        )
        return True

    def clear(self) -> None:
        """Deactivate every pattern; both window bounds become ``None``."""

        self._patterns.clear()
        self._recompute_bounds()

    def active_kinds(self) -> Tuple[Any, ...]:
        """Kinds of the active patterns in registration order."""

        return tuple(key[0] for key in self._patterns)

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------
    def try_match(self, window: Sequence[Any]) -> Optional[Operation]:
        """Return the operation synthesised by the first matching pattern."""

        snapshot = tuple(window)
        for pattern in self._patterns.values():
            consolidated = pattern.match(snapshot)
            if consolidated is not None:
                return consolidated
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _key_for(self, pattern: Any) -> PatternKey:
        if not callable(getattr(pattern, "match", None)):
            raise PatternRegistrationError(
                f"pattern {pattern!r} does not provide a callable 'match'"
            )
        kind = getattr(pattern, "kind", None)
        if kind is None:
            raise PatternRegistrationError(f"pattern {pattern!r} declares no kind")
        count = getattr(pattern, "atomic_operation_count", None)
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise PatternRegistrationError(
                f"pattern {pattern!r} must consume a positive number of "
                f"atomic operations, got {count!r}"
            )
        return _normalise_kind(kind), count

    def _recompute_bounds(self) -> None:
        counts = [key[1] for key in self._patterns]
        if not counts:
            self._minimum = None
            self._maximum = None
            return
        self._minimum = min(counts)
        self._maximum = max(counts)
