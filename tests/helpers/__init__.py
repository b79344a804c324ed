"""Convenience re-exports for test helpers."""

from __future__ import annotations

from tests.helpers.operations import (
    batch_write,
    loc,
    message,
    random_trace,
    read,
    write,
)
from tests.helpers.registries import (
    Copy,
    CopyPattern,
    FixedBoundsRegistry,
    RecordingRegistry,
)

__all__ = [
    "Copy",
    "CopyPattern",
    "FixedBoundsRegistry",
    "RecordingRegistry",
    "batch_write",
    "loc",
    "message",
    "random_trace",
    "read",
    "write",
]
