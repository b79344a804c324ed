"""Package version, validated as ``MAJOR.MINOR.PATCH``."""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

__all__ = ["__version__"]


_DISTRIBUTION = "oplog-interpreter"
_CHANGELOG = Path(__file__).resolve().parents[2] / "CHANGELOG.md"
_RELEASE_HEADING = re.compile(r"^## v(?P<version>\d+\.\d+\.\d+)\b")


def _latest_changelog_release(changelog: Path = _CHANGELOG) -> str:
    """Return the newest release listed in a source checkout's changelog."""

    if changelog.is_file():
        for line in changelog.read_text(encoding="utf-8").splitlines():
            match = _RELEASE_HEADING.match(line)
            if match:
                return match.group("version")
    raise RuntimeError(
        f"'{_DISTRIBUTION}' is not installed and {changelog} lists no release"
    )


def _load_version() -> str:
    try:
        raw_version = metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        raw_version = _latest_changelog_release()

    try:
        release = Version(raw_version).release
    except InvalidVersion as exc:
        raise RuntimeError(f"invalid version {raw_version!r} for '{_DISTRIBUTION}'") from exc
    if len(release) != 3:
        raise RuntimeError(
            f"'{_DISTRIBUTION}' version {raw_version!r} is not MAJOR.MINOR.PATCH"
        )
    return raw_version


__version__ = _load_version()
