"""Logging utilities for the operation log interpreter."""

from oplog_interpreter.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
