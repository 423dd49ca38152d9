# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false
"""Thin typed wrapper around semantic_version for SemVer ranges and precedence.

Range syntax follows npm (``^1.2``, ``~0.3.0``, ``1.x``, ``>=1.0.0 <2.0.0``,
``1.2.3 - 1.4.0``, ``||``), which is what GitHub Actions' tool cache understands.
"""

from __future__ import annotations

import re

from semantic_version import NpmSpec, Version  # type: ignore[import-untyped]

_LOOSE_PREFIX = re.compile(r"^[=v]+")


def clean(version: str) -> str | None:
    """Return the canonical SemVer form of ``version``, or None if it is not one.

    Surrounding whitespace and leading ``=``/``v`` characters are ignored, so
    ``" v1.2.3"`` cleans to ``"1.2.3"``.
    """
    cleaned = _LOOSE_PREFIX.sub("", version.strip())
    try:
        return str(Version(cleaned))
    except ValueError:
        return None


def parse_tag(tag: str) -> Version | None:
    """Parse a release tag into a Version, or None for non-SemVer tags."""
    cleaned = clean(tag)
    if cleaned is None:
        return None
    return Version(cleaned)


def parse_range(constraint: str) -> NpmSpec | None:
    """Parse an npm-style range, or None when the text is not one."""
    try:
        return NpmSpec(constraint.strip())
    except ValueError:
        return None


def max_satisfying(versions: list[str], constraint: str) -> str | None:
    """Return the highest tag in ``versions`` inside the SemVer range ``constraint``.

    Tags that are not valid SemVer are skipped. The original tag string is
    returned, not its cleaned form.
    """
    spec = parse_range(constraint)
    if spec is None:
        return None

    best: tuple[Version, str] | None = None
    for tag in versions:
        parsed = parse_tag(tag)
        if parsed is None or not spec.match(parsed):
            continue
        if best is None or parsed > best[0]:
            best = (parsed, tag)
    return best[1] if best else None


def is_older_than(version: str, minimum: str) -> bool | None:
    """Compare two versions by SemVer precedence. None if either is not SemVer."""
    parsed, floor = parse_tag(version), parse_tag(minimum)
    if parsed is None or floor is None:
        return None
    return parsed < floor
