from __future__ import annotations

import logging

import pytest

from oplog_interpreter import (
    OperationType,
    PatternRegistrationError,
    PatternRegistry,
    SwapPattern,
    UnsupportedPatternError,
)
from oplog_interpreter.patterns import (
    available_pattern_kinds,
    create_pattern,
    register_pattern_factory,
)

from tests.helpers import Copy, CopyPattern, read, write


class _ClonePattern(CopyPattern):
    """Same shape as :class:`CopyPattern` under another kind."""

    kind = "clone"

    def match(self, window):
        matched = super().match(window)
        if matched is None:
            return None
        return ("clone", matched.source, matched.target)


def test_empty_registry_reports_no_bounds() -> None:
    registry = PatternRegistry()

    assert registry.minimum_window_size() is None
    assert registry.maximum_window_size() is None
    assert registry.active_kinds() == ()
    assert len(registry) == 0


def test_register_swap_sets_bounds() -> None:
    registry = PatternRegistry()

    assert registry.register(SwapPattern()) is True

    assert registry.minimum_window_size() == 4
    assert registry.maximum_window_size() == 4
    assert registry.active_kinds() == (OperationType.SWAP,)
    assert "swap" in registry
    assert OperationType.SWAP in registry


def test_duplicate_registration_is_ignored() -> None:
    registry = PatternRegistry([SwapPattern()])

    assert registry.register(SwapPattern()) is False
    assert len(registry) == 1


def test_bounds_follow_active_patterns() -> None:
    registry = PatternRegistry([CopyPattern(), SwapPattern()])
    assert (registry.minimum_window_size(), registry.maximum_window_size()) == (2, 4)

    assert registry.unregister("swap", 4) is True
    assert (registry.minimum_window_size(), registry.maximum_window_size()) == (2, 2)

    assert registry.unregister("copy", 2) is True
    assert registry.minimum_window_size() is None
    assert registry.maximum_window_size() is None


def test_unregister_unknown_key_returns_false() -> None:
    registry = PatternRegistry([SwapPattern()])

    assert registry.unregister(OperationType.SWAP, 2) is False
    assert registry.unregister("merge", 4) is False
    assert registry.active_kinds() == (OperationType.SWAP,)


def test_clear_removes_every_pattern() -> None:
    registry = PatternRegistry([CopyPattern(), SwapPattern()])

    registry.clear()

    assert len(registry) == 0
    assert registry.maximum_window_size() is None


@pytest.mark.parametrize("count", [0, -2, 1.5, True, None])
def test_invalid_atomic_count_is_rejected(count) -> None:
    class Broken(CopyPattern):
        atomic_operation_count = count

    registry = PatternRegistry()

    with pytest.raises(PatternRegistrationError):
        registry.register(Broken())
    assert len(registry) == 0


def test_pattern_without_match_is_rejected() -> None:
    class NoMatch:
        kind = "nothing"
        atomic_operation_count = 2

    with pytest.raises(PatternRegistrationError):
        PatternRegistry().register(NoMatch())


def test_registration_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="oplog_interpreter.patterns.registry")

    registry = PatternRegistry()
    registry.register(SwapPattern())
    registry.unregister("swap", 4)

    messages = [record.getMessage() for record in caplog.records]
    assert any("Registered consolidation pattern 'swap'" in text for text in messages)
    assert any("Removed consolidation pattern 'swap'" in text for text in messages)


def test_try_match_does_not_modify_window() -> None:
    registry = PatternRegistry([SwapPattern()])
    window = [read("x"), read("y"), write("x"), write("y")]
    snapshot = list(window)

    assert registry.try_match(window) is not None
    assert window == snapshot


def test_try_match_returns_none_without_match() -> None:
    registry = PatternRegistry([SwapPattern(), CopyPattern()])

    assert registry.try_match([read("x"), read("y")]) is None


def test_first_registered_pattern_wins() -> None:
    window = [read("x"), write("y")]

    copy_first = PatternRegistry([CopyPattern(), _ClonePattern()])
    clone_first = PatternRegistry([_ClonePattern(), CopyPattern()])

    assert isinstance(copy_first.try_match(window), Copy)
    assert clone_first.try_match(window)[0] == "clone"
    assert copy_first.active_kinds() == ("copy", "clone")


def test_create_pattern_resolves_names() -> None:
    assert isinstance(create_pattern("SWAP"), SwapPattern)
    assert isinstance(create_pattern(OperationType.SWAP), SwapPattern)
    assert OperationType.SWAP in available_pattern_kinds()


@pytest.mark.parametrize("kind", ["read", "message", "merge", 7])
def test_create_pattern_rejects_unknown_kinds(kind) -> None:
    with pytest.raises(UnsupportedPatternError) as excinfo:
        create_pattern(kind)

    assert "Cannot consolidate operation type" in str(excinfo.value)


def test_factory_registration_conflicts_are_rejected() -> None:
    register_pattern_factory(OperationType.SWAP, SwapPattern)

    with pytest.raises(PatternRegistrationError):
        register_pattern_factory(OperationType.SWAP, CopyPattern)
    with pytest.raises(PatternRegistrationError):
        register_pattern_factory("merge", CopyPattern)


def test_iteration_yields_patterns_in_registration_order() -> None:
    copy, swap = CopyPattern(), SwapPattern()
    registry = PatternRegistry([swap, copy])

    assert list(registry) == [swap, copy]
