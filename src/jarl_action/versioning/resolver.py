"""Resolve a user-supplied version constraint to one published jarl release.

Two grammars are tried in order and never merged: an npm-style SemVer range
first, then a PEP 440 specifier. Each picks its maximum by its own ordering.
"""

from __future__ import annotations

import logging

from jarl_action.errors import UnsupportedVersionError, VersionNotFoundError
from jarl_action.models import LATEST, TOOL_NAME
from jarl_action.registry.base import ReleaseSource
from jarl_action.versioning import pep440, semver

logger = logging.getLogger(__name__)


def is_explicit_version(version: str) -> bool:
    """True when ``version`` names exactly one release (no ranges or wildcards)."""
    return semver.clean(version) is not None


def max_satisfying(versions: list[str], constraint: str) -> str | None:
    """Best tag in ``versions`` for ``constraint``: SemVer range first, then PEP 440."""
    max_semver = semver.max_satisfying(versions, constraint)
    if max_semver is not None:
        logger.debug("Found a version that satisfies the semver range: %s", max_semver)
        return max_semver
    max_pep440 = pep440.max_satisfying(versions, constraint)
    if max_pep440 is not None:
        logger.debug("Found a version that satisfies the pep440 specifier: %s", max_pep440)
        return max_pep440
    return None


async def resolve_version(version_input: str, releases: ReleaseSource) -> str:
    """Turn ``"latest"``, an explicit version or a range into a concrete release tag.

    Explicit versions are returned untouched without listing releases.

    Raises:
        VersionNotFoundError: If no published release satisfies the constraint.
        RegistryError: If the releases API cannot be used.
    """
    logger.debug("Resolving %s...", version_input)
    version = version_input
    if version_input == LATEST:
        version = await releases.get_latest_release()

    if is_explicit_version(version):
        logger.debug("Version %s is an explicit version.", version)
        return version

    available_versions = await releases.list_releases()
    resolved = max_satisfying(available_versions, version)
    if resolved is None:
        raise VersionNotFoundError(f"No version found for {version}")
    logger.debug("Resolved version: %s", resolved)
    return resolved


def ensure_supported(version: str, minimum: str) -> None:
    """Reject versions older than ``minimum``.

    SemVer precedence decides; PEP 440 ordering is used for tags that are not
    SemVer. A version neither grammar can order is rejected too.

    Raises:
        UnsupportedVersionError: If ``version`` is older than ``minimum`` or unorderable.
    """
    older = semver.is_older_than(version, minimum)
    if older is None:
        older = pep440.is_older_than(version, minimum)
    if older is None:
        raise UnsupportedVersionError(
            f"Cannot compare {TOOL_NAME} version {version} with the minimum supported "
            f"version {minimum}"
        )
    if older:
        raise UnsupportedVersionError(
            f"This action does not support {TOOL_NAME} versions older than {minimum}"
        )
