"""Operation log interpreter."""

from oplog_interpreter.interpreter.engine import Interpreter, RegistrationResult

__all__ = ["Interpreter", "RegistrationResult"]
