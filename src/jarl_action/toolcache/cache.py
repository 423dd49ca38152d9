"""On-disk tool cache shared by every job on a runner.

Layout matches the GitHub Actions tool cache so entries written here are
visible to other actions and vice versa::

    <root>/<tool>/<version>/<arch>/           installed files
    <root>/<tool>/<version>/<arch>.complete   marker, written last

There is no locking: two jobs caching the same (tool, version, arch) both
copy the same immutable content and the last writer wins.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from jarl_action.versioning import semver
from jarl_action.versioning.resolver import is_explicit_version, max_satisfying

logger = logging.getLogger(__name__)

_COMPLETE_SUFFIX = ".complete"


def default_cache_root(environ: Mapping[str, str] | None = None) -> Path:
    """``$RUNNER_TOOL_CACHE`` on a runner, a per-user cache directory elsewhere."""
    env = os.environ if environ is None else environ
    runner_cache = env.get("RUNNER_TOOL_CACHE", "").strip()
    if runner_cache:
        return Path(runner_cache)
    return Path.home() / ".cache" / "jarl-action" / "tool-cache"


@dataclass(frozen=True, slots=True)
class ToolCache:
    """Keyed store of installed tool directories under ``root``."""

    root: Path

    def find(self, tool: str, version_spec: str, arch: str) -> str | None:
        """Return the cached directory for ``version_spec``, or None on a miss.

        A non-explicit spec is first matched against the cached versions.
        """
        version = version_spec
        if not is_explicit_version(version_spec):
            match = self.evaluate_versions(self.find_all_versions(tool, arch), version_spec)
            if match is None:
                return None
            version = match

        path = self._entry(tool, version, arch)
        if path.is_dir() and _marker(path).is_file():
            logger.debug("Found tool in cache %s %s %s", tool, version, arch)
            return str(path)
        logger.debug("Unable to locate tool in cache %s %s %s", tool, version, arch)
        return None

    def find_all_versions(self, tool: str, arch: str) -> list[str]:
        """Return every fully cached version of ``tool`` for ``arch``."""
        tool_dir = self.root / tool
        if not tool_dir.is_dir():
            return []
        return sorted(
            child.name
            for child in tool_dir.iterdir()
            if (child / arch).is_dir() and _marker(child / arch).is_file()
        )

    def evaluate_versions(self, versions: list[str], version_spec: str) -> str | None:
        """Best entry of ``versions`` for ``version_spec``, or None when nothing fits."""
        return max_satisfying(versions, version_spec)

    def cache_dir(self, source_dir: str | Path, tool: str, version: str, arch: str) -> str:
        """Copy ``source_dir`` into the cache and return the cached path.

        Any previous entry for the same key is replaced.
        """
        dest = self._entry(tool, version, arch)
        marker = _marker(dest)
        logger.debug("Caching tool %s %s %s into %s", tool, version, arch, dest)

        marker.unlink(missing_ok=True)
        if dest.exists():
            shutil.rmtree(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source_dir, dest)
        marker.write_text("", encoding="utf-8")
        return str(dest)

    def _entry(self, tool: str, version: str, arch: str) -> Path:
        return self.root / tool / (semver.clean(version) or version) / arch


def _marker(entry: Path) -> Path:
    return entry.with_name(entry.name + _COMPLETE_SUFFIX)
