"""Operation log records and classification helpers."""

from oplog_interpreter.operations.interfaces import (
    SupportsOperation,
    SupportsReadWrite,
    SupportsWrite,
)
from oplog_interpreter.operations.model import (
    Locator,
    Message,
    Operation,
    OperationType,
    Read,
    ReadWriteOperation,
    Swap,
    Write,
)
from oplog_interpreter.operations.utils import (
    flatten_operations,
    is_batch_write,
    is_message,
    is_read,
    is_read_or_write,
    is_write,
    payload_length,
)

__all__ = [
    "Locator",
    "Message",
    "Operation",
    "OperationType",
    "Read",
    "ReadWriteOperation",
    "Swap",
    "Write",
    "SupportsOperation",
    "SupportsReadWrite",
    "SupportsWrite",
    "flatten_operations",
    "is_batch_write",
    "is_message",
    "is_read",
    "is_read_or_write",
    "is_write",
    "payload_length",
]
