"""PEP 440 specifiers and ordering, backed by ``packaging``."""

from __future__ import annotations

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version


def parse_tag(tag: str) -> Version | None:
    """Parse a release tag as a PEP 440 version, or None if it is not one."""
    try:
        return Version(tag.strip())
    except InvalidVersion:
        return None


def max_satisfying(versions: list[str], specifier: str) -> str | None:
    """Return the highest tag in ``versions`` matching the PEP 440 ``specifier``.

    Pre-releases only win when the specifier names one or nothing else
    matches, per ``SpecifierSet.filter``. Unparseable tags are skipped.
    """
    try:
        spec = SpecifierSet(specifier.strip())
    except InvalidSpecifier:
        return None

    tags_by_version: dict[Version, str] = {}
    for tag in versions:
        parsed = parse_tag(tag)
        if parsed is not None:
            tags_by_version.setdefault(parsed, tag)

    matches = list(spec.filter(tags_by_version))
    if not matches:
        return None
    return tags_by_version[max(matches)]


def is_older_than(version: str, minimum: str) -> bool | None:
    """Compare two versions by PEP 440 ordering. None if either does not parse."""
    parsed, floor = parse_tag(version), parse_tag(minimum)
    if parsed is None or floor is None:
        return None
    return parsed < floor
