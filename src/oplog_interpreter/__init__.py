"""Top-level package for the operation log interpreter.

The interpreter raises the abstraction level of operation logs by
consolidating runs of primitive reads and writes into higher level
operations such as swaps, leaving every other operation untouched.
"""

from ._version import __version__
from .errors import (
    ConfigurationError,
    InterpreterError,
    MalformedOperationError,
    PatternRegistrationError,
    RegistryInvariantError,
    UnsupportedPatternError,
)
from .operations import (
    Locator,
    Message,
    Operation,
    OperationType,
    Read,
    Swap,
    Write,
    flatten_operations,
    is_read_or_write,
)
from .patterns import ConsolidationPattern, PatternRegistry, SwapPattern
from .interpreter import Interpreter, RegistrationResult
from .config_loader import build_interpreter, load_interpreter_config
from .logging.config import setup_logging

__all__ = [
    "Interpreter",
    "RegistrationResult",
    "PatternRegistry",
    "ConsolidationPattern",
    "SwapPattern",
    "Operation",
    "OperationType",
    "Locator",
    "Read",
    "Write",
    "Message",
    "Swap",
    "flatten_operations",
    "is_read_or_write",
    "build_interpreter",
    "load_interpreter_config",
    "setup_logging",
    "InterpreterError",
    "ConfigurationError",
    "MalformedOperationError",
    "PatternRegistrationError",
    "RegistryInvariantError",
    "UnsupportedPatternError",
    "__version__",
]
