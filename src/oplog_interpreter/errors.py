"""Exception hierarchy and structured diagnostics for the interpreter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional

__all__ = [
    "ConfigurationError",
    "Diagnostic",
    "InterpreterError",
    "MalformedOperationError",
    "PatternRegistrationError",
    "RegistryInvariantError",
    "UnsupportedPatternError",
    "build_diagnostic",
    "log_diagnostic",
]


_DEFAULT_LOGGER_NAME = "oplog_interpreter"


class InterpreterError(Exception):
    """Base class for errors raised by :mod:`oplog_interpreter`."""


class UnsupportedPatternError(InterpreterError, ValueError):
    """Raised when no consolidation pattern exists for an operation kind."""

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        label = getattr(kind, "value", kind)
        super().__init__(f"Cannot consolidate operation type: {str(label).upper()}")


class PatternRegistrationError(InterpreterError, ValueError):
    """Raised when a pattern does not honour the consolidation contract."""


class RegistryInvariantError(InterpreterError, RuntimeError):
    """Raised when a registry reports inconsistent window bounds."""


class MalformedOperationError(InterpreterError, ValueError):
    """Raised when an operation cannot be classified safely."""

    def __init__(self, message: str, *, operation: Any = None) -> None:
        super().__init__(message)
        self.operation = operation


class ConfigurationError(InterpreterError, RuntimeError):
    """Raised when the interpreter configuration is invalid."""


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured description of a rejected request."""

    category: str
    message: str
    context: Mapping[str, Any]

    def as_dict(self) -> Mapping[str, Any]:
        return {
            "category": self.category,
            "message": self.message,
            "context": dict(self.context),
        }


def _normalise_context(context: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if not context:
        return {}
    payload: MutableMapping[str, Any] = {}
    for key, value in context.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            payload[key] = value
        else:
            payload[key] = str(value)
    return dict(payload)


def build_diagnostic(
    message: str,
    *,
    category: str,
    context: Optional[Mapping[str, Any]] = None,
) -> Diagnostic:
    """Create a :class:`Diagnostic` with JSON friendly context values."""

    return Diagnostic(
        category=category,
        message=message,
        context=_normalise_context(context),
    )


def log_diagnostic(
    diagnostic: Diagnostic,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.WARNING,
) -> None:
    """Emit ``diagnostic`` through ``logger`` with structured context."""

    target = logger or logging.getLogger(_DEFAULT_LOGGER_NAME)
    target.log(
        level,
        diagnostic.message,
        extra={
            "event": f"interpreter.{diagnostic.category}",
            "category": diagnostic.category,
            "context": dict(diagnostic.context),
        },
    )
