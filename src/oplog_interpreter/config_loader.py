"""Resolve the interpreter configuration and build configured interpreters."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from oplog_interpreter.configuration import find_project_config
from oplog_interpreter.errors import ConfigurationError, UnsupportedPatternError
from oplog_interpreter.interpreter.engine import Interpreter
from oplog_interpreter.patterns.registry import PatternRegistry, create_pattern

__all__ = ["build_interpreter", "load_defaults", "load_interpreter_config"]


_DEFAULTS_RESOURCE_PACKAGE = "oplog_interpreter.resources"
_DEFAULTS_RESOURCE_NAME = "interpreter.yaml"


def load_defaults(path: str | Path | None = None) -> Mapping[str, Any]:
    """Load the YAML defaults, from ``path`` or from the bundled resource."""

    if path is not None:
        candidate = Path(path).expanduser()
        if not candidate.is_file():
            raise FileNotFoundError(candidate)
        with candidate.open("r", encoding="utf-8") as buffer:
            payload = buffer.read()
        return _load_from_text(payload, source=str(candidate))

    resource = resources.files(_DEFAULTS_RESOURCE_PACKAGE).joinpath(
        _DEFAULTS_RESOURCE_NAME
    )
    payload = resource.read_text(encoding="utf-8")
    return _load_from_text(payload, source=str(resource))


def load_interpreter_config(
    path: str | Path | None = None,
    *,
    defaults_path: str | Path | None = None,
) -> Mapping[str, Any]:
    """Merge the YAML defaults with the project overrides.

    Parameters
    ----------
    path:
        Directory or ``pyproject.toml`` holding a ``[tool.oplog_interpreter]``
        table. When omitted the ``OPLOG_INTERPRETER_CONFIG`` environment
        variable and the current directory are inspected.
    defaults_path:
        Optional YAML file replacing the bundled defaults.
    """

    result = _deep_copy_mapping(load_defaults(defaults_path))
    result["_config_path"] = None

    loaded = find_project_config(Path(path) if path is not None else None)
    if loaded is not None:
        overrides, source = loaded
        _deep_merge(result, overrides)
        result["_config_path"] = str(source)

    return MappingProxyType(result)


def build_interpreter(config: Mapping[str, Any] | None = None) -> Interpreter:
    """Return an :class:`Interpreter` with the patterns named in ``config``."""

    if config is None:
        config = load_interpreter_config()

    names = config.get("patterns", ())
    if isinstance(names, str) or not isinstance(names, (list, tuple)):
        raise ConfigurationError(
            f"'patterns' must be a list of operation type names, got {names!r}"
        )

    registry = PatternRegistry()
    for name in names:
        try:
            pattern = create_pattern(name)
        except UnsupportedPatternError as exc:
            raise ConfigurationError(
                f"Invalid pattern {name!r} in configuration "
                f"{config.get('_config_path') or '<defaults>'}: {exc}"
            ) from exc
        registry.register(pattern)
    return Interpreter(registry)


def _deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        key_str = str(key)
        existing = target.get(key_str)
        if isinstance(existing, MappingABC) and isinstance(value, MappingABC):
            merged = dict(existing)
            _deep_merge(merged, value)
            target[key_str] = merged
        elif isinstance(value, MappingABC):
            target[key_str] = _deep_copy_mapping(value)
        else:
            target[key_str] = value


def _deep_copy_mapping(source: Mapping[str, Any]) -> dict[str, Any]:
    copied: dict[str, Any] = {}
    for key, value in source.items():
        key_str = str(key)
        if isinstance(value, MappingABC):
            copied[key_str] = _deep_copy_mapping(value)
        elif isinstance(value, list):
            copied[key_str] = list(value)
        else:
            copied[key_str] = value
    return copied


def _load_from_text(payload: str, *, source: str) -> Mapping[str, Any]:
    try:
        data = yaml.safe_load(payload)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in interpreter configuration: {source}") from exc

    if data is None:
        return MappingProxyType({})
    if not isinstance(data, MappingABC):
        raise ConfigurationError(
            f"Interpreter configuration in {source!s} must decode to a mapping"
        )
    return MappingProxyType(_deep_copy_mapping(data))
