"""Find the jarl version constraint declared in a dependency manifest.

Two inputs are understood: a flat requirements listing (``*.txt``, one
dependency per line) and a ``pyproject.toml``-style TOML document. A file
that is missing, unreadable or malformed is logged as a warning and yields
None.
"""

from __future__ import annotations

import logging
import re
import tomllib
from collections.abc import Iterable
from pathlib import Path

from jarl_action.errors import ManifestError
from jarl_action.models import TOOL_NAME

logger = logging.getLogger(__name__)

# The name must be followed by something that cannot continue an identifier,
# so "jarl>=1.0" matches but "jarl-extras==1.0" does not.
_REQUIREMENT_PATTERN = re.compile(rf"^{re.escape(TOOL_NAME)}([^\w.-].*)$")


# ─── Public API ──────────────────────────────────────────────


def get_version_from_manifest(file_path: str | Path) -> str | None:
    """Return the jarl version constraint declared in ``file_path``, if any.

    ``==X`` is reduced to the bare ``X``; any other operator is kept so the
    result can be resolved as a range.
    """
    path = Path(file_path)
    if not path.is_file():
        logger.warning("Could not find file: %s", path)
        return None

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None

    if path.suffix == ".txt":
        return version_from_requirements(text.splitlines())

    try:
        return version_from_pyproject(text)
    except ManifestError as exc:
        logger.warning("Error while parsing %s: %s", path, exc)
        return None


def version_from_requirements(lines: Iterable[str]) -> str | None:
    """Apply the first-match-by-name rule to requirement strings.

    Packages that merely share the prefix (``jarl-extras``, ``jarlhelper``)
    are skipped. A bare ``jarl`` line declares no version.
    """
    for raw_line in lines:
        line = raw_line.split(" #", 1)[0].strip()
        if line == TOOL_NAME:
            return None
        match = _REQUIREMENT_PATTERN.match(line)
        if match is None:
            continue
        version = _strip_extras_and_markers(match.group(1))
        if not version:
            return None
        if version.startswith("=="):
            return version[2:].strip()
        logger.info("Found %s version in manifest: %s", TOOL_NAME, version)
        return version
    return None


def _strip_extras_and_markers(spec: str) -> str:
    """``[extra]>=1.0 ; python_version > "3.8"`` -> ``>=1.0``."""
    spec = spec.split(";", 1)[0].strip()
    if spec.startswith("[") and "]" in spec:
        spec = spec.split("]", 1)[1].strip()
    return spec


def version_from_pyproject(text: str) -> str | None:
    """Search a pyproject document: PEP 621 and PEP 735 lists first, Poetry last.

    Raises:
        ManifestError: If the text is not valid TOML.
    """
    try:
        data = tomllib.loads(text)
    except (tomllib.TOMLDecodeError, ValueError) as exc:
        raise ManifestError(str(exc)) from exc

    requirements = [
        *_project_dependencies(data),
        *_optional_dependencies(data),
        *_dependency_groups(data),
    ]
    return version_from_requirements(requirements) or _version_from_poetry(data)


# ─── Section readers ─────────────────────────────────────────


def _table(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


def _strings(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _project_dependencies(data: dict[str, object]) -> list[str]:
    return _strings(_table(data.get("project")).get("dependencies"))


def _optional_dependencies(data: dict[str, object]) -> list[str]:
    groups = _table(_table(data.get("project")).get("optional-dependencies"))
    return [dep for group in groups.values() for dep in _strings(group)]


def _dependency_groups(data: dict[str, object]) -> list[str]:
    # PEP 735 allows {include-group = "..."} tables next to strings.
    groups = _table(data.get("dependency-groups"))
    return [dep for group in groups.values() for dep in _strings(group)]


def _version_from_poetry(data: dict[str, object]) -> str | None:
    """Poetry keeps dependencies in name -> spec tables instead of PEP 508 strings."""
    poetry = _table(_table(data.get("tool")).get("poetry"))
    tables = [
        _table(_table(group).get("dependencies"))
        for group in _table(poetry.get("group")).values()
    ]
    if "dependencies" in poetry:
        tables.insert(0, _table(poetry.get("dependencies")))

    for table in tables:
        for name, spec in table.items():
            if name != TOOL_NAME:
                continue
            if isinstance(spec, str):
                return spec
            version = _table(spec).get("version")
            if isinstance(version, str):
                return version
    return None
