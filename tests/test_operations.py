from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from oplog_interpreter import (
    Locator,
    MalformedOperationError,
    Message,
    OperationType,
    Read,
    Swap,
    Write,
    flatten_operations,
    is_read_or_write,
)
from oplog_interpreter.operations import (
    SupportsReadWrite,
    is_batch_write,
    is_message,
    payload_length,
)

from tests.helpers import Copy, batch_write, loc, message, read, write


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("swap", OperationType.SWAP),
        (" SWAP ", OperationType.SWAP),
        ("Read", OperationType.READ),
        (OperationType.MESSAGE, OperationType.MESSAGE),
    ],
)
def test_operation_type_coerce(raw, expected) -> None:
    assert OperationType.coerce(raw) is expected


@pytest.mark.parametrize("raw", ["merge", "", 4, None])
def test_operation_type_coerce_rejects_unknown(raw) -> None:
    with pytest.raises(ValueError):
        OperationType.coerce(raw)


def test_atomic_operation_counts() -> None:
    assert OperationType.READ.atomic_operations == 1
    assert OperationType.WRITE.atomic_operations == 1
    assert OperationType.MESSAGE.atomic_operations == 0
    assert OperationType.SWAP.atomic_operations == 4


def test_locator_rendering_and_equality() -> None:
    assert str(Locator("x")) == "x"
    assert str(Locator.of("grid", 1, 2)) == "grid[1][2]"
    assert Locator("a", [0]) == Locator.of("a", 0)
    assert hash(Locator("a", [0])) == hash(Locator.of("a", 0))


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (5, (5,)),
        ([1, 2], (1, 2)),
        ((3,), (3,)),
        ("ab", ("ab",)),
        (None, None),
    ],
)
def test_write_values_are_normalised(value, expected) -> None:
    assert Write(loc("x"), value).value == expected


def test_operations_are_immutable() -> None:
    operation = write("x", 1)

    with pytest.raises(FrozenInstanceError):
        operation.value = (2,)  # type: ignore[misc]


def test_kinds_are_class_level_tags() -> None:
    assert read("x").kind is OperationType.READ
    assert write("x").kind is OperationType.WRITE
    assert message().kind is OperationType.MESSAGE
    assert Swap(loc("x"), loc("y")).kind is OperationType.SWAP


def test_read_or_write_classification() -> None:
    assert is_read_or_write(read("x"))
    assert is_read_or_write(write("x"))
    assert is_read_or_write(batch_write("x"))
    assert not is_read_or_write(message())
    assert not is_read_or_write(Swap(loc("x"), loc("y")))
    assert not is_read_or_write(Copy(loc("x"), loc("y")))
    assert not is_read_or_write(object())
    assert isinstance(read("x"), SupportsReadWrite)


def test_kind_comparison_accepts_plain_strings() -> None:
    class ForeignRead:
        kind = "read"
        locator = "x"

    assert is_read_or_write(ForeignRead())


def test_payload_length_and_batches() -> None:
    assert payload_length(write("x", 1)) == 1
    assert payload_length(batch_write("x", (1, 2, 3))) == 3
    assert is_batch_write(batch_write("x"))
    assert not is_batch_write(write("x"))
    assert not is_batch_write(read("x"))
    assert is_message(Message("hi"))


@pytest.mark.parametrize("value", [None, (), object()])
def test_payload_length_rejects_undetermined_payloads(value) -> None:
    class ForeignWrite:
        kind = OperationType.WRITE
        locator = loc("x")

    operation = ForeignWrite()
    operation.value = value

    with pytest.raises(MalformedOperationError):
        payload_length(operation)


def test_flatten_expands_nested_operations() -> None:
    quartet = (read("x"), read("y"), write("x"), write("y"))
    inner = Swap(loc("x"), loc("y"), quartet)
    outer = Copy(loc("p"), loc("q"), (read("p"), inner))
    note = message()

    flattened = flatten_operations([note, outer, write("z")])

    assert flattened == [note, read("p"), *quartet, write("z")]


def test_swap_values_reflect_writes() -> None:
    swap = Swap(
        loc("x"),
        loc("y"),
        (read("x", 1), read("y", 2), write("x", 2), write("y", 1)),
    )

    assert swap.values == (2, 1)
    assert Swap(loc("x"), loc("y")).values == ()
    assert isinstance(Read(loc("x")), Read)
