from __future__ import annotations

import logging
import sys
from pathlib import Path
from textwrap import dedent
from typing import Iterator

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
for _entry in (SRC_ROOT, ROOT):
    if str(_entry) not in sys.path:
        sys.path.insert(0, str(_entry))


from oplog_interpreter import Interpreter, PatternRegistry, SwapPattern
from oplog_interpreter.configuration import CONFIG_ENV_VAR


def write_pyproject(directory: Path, contents: str) -> Path:
    """Persist a ``pyproject.toml`` under ``directory`` and return its path."""

    payload = dedent(contents).lstrip()
    target = directory / "pyproject.toml"
    target.write_text(payload, encoding="utf8")
    return target


@pytest.fixture
def swap_interpreter() -> Interpreter:
    """Interpreter with the swap pattern as its only active pattern."""

    return Interpreter(PatternRegistry([SwapPattern()]))


@pytest.fixture
def empty_interpreter() -> Interpreter:
    return Interpreter()


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory without the configuration env variable."""

    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """Restore the package logger after tests installing handlers."""

    logger = logging.getLogger("oplog_interpreter")
    handlers = list(logger.handlers)
    level = logger.level
    try:
        yield logger
    finally:
        for handler in list(logger.handlers):
            if handler not in handlers:
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(level)
