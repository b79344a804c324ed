"""Logging configuration helpers."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

from oplog_interpreter.errors import ConfigurationError

__all__ = ["JsonFormatter", "setup_logging"]


_PACKAGE_LOGGER_NAME = "oplog_interpreter"
_HANDLER_MARKER = "_oplog_interpreter_handler"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_DEFAULT_LOGGING: Mapping[str, str] = {
    "level": "info",
    "output": "stderr",
    "format": "json",
}

_RESERVED_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents.

    Attributes supplied through ``extra`` are included as top-level keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRIBUTES or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=True)


def _resolve_level(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown logging level {value!r}")
    return level


def _build_handler(output: str) -> logging.Handler:
    target = output.strip()
    if target.lower() == "stdout":
        return logging.StreamHandler(sys.stdout)
    if target.lower() == "stderr":
        return logging.StreamHandler(sys.stderr)
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf-8")


def _build_formatter(name: str) -> logging.Formatter:
    resolved = name.strip().lower()
    if resolved == "json":
        return JsonFormatter()
    if resolved == "text":
        return logging.Formatter(_TEXT_FORMAT)
    raise ConfigurationError(f"Unknown logging format {name!r}; expected 'json' or 'text'")


def setup_logging(config: Optional[Mapping[str, Any]] = None) -> logging.Handler:
    """Install a handler on the package logger according to ``config``.

    ``config`` is either the full interpreter configuration (the ``logging``
    table is used) or the logging table itself.  Handlers installed by a
    previous call are replaced.
    """

    section: Mapping[str, Any] = config or {}
    nested = section.get("logging")
    if isinstance(nested, Mapping):
        section = nested

    settings = dict(_DEFAULT_LOGGING)
    for key in _DEFAULT_LOGGING:
        if section.get(key) is not None:
            settings[key] = section[key]

    level = _resolve_level(settings["level"])
    formatter = _build_formatter(str(settings["format"]))
    handler = _build_handler(str(settings["output"]))
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_MARKER, True)

    package_logger = logging.getLogger(_PACKAGE_LOGGER_NAME)
    for existing in list(package_logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            package_logger.removeHandler(existing)
            existing.close()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
