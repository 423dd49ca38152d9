"""Provide a jarl installation: tool cache first, release download second."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from jarl_action.models import (
    TOOL_NAME,
    Architecture,
    CacheLookup,
    PlatformDescriptor,
    SetupResult,
)
from jarl_action.toolcache.cache import ToolCache
from jarl_action.toolcache.download import download_version
from jarl_action.versioning.resolver import ensure_supported

logger = logging.getLogger(__name__)


def try_get_from_tool_cache(cache: ToolCache, arch: Architecture, version: str) -> CacheLookup:
    """Look ``version`` up among cached versions for ``arch`` without touching the network.

    The returned version is the exact cached one when the request matched an
    entry, otherwise the request itself.
    """
    logger.debug("Trying to get %s from tool cache for %s...", TOOL_NAME, version)
    cached_versions = cache.find_all_versions(TOOL_NAME, arch)
    logger.debug("Cached versions: %s", ", ".join(cached_versions))
    resolved = cache.evaluate_versions(cached_versions, version) or version
    installed_path = cache.find(TOOL_NAME, resolved, arch)
    return CacheLookup(version=resolved, installed_path=installed_path)


async def setup_jarl(
    descriptor: PlatformDescriptor,
    version: str,
    *,
    http: httpx.AsyncClient,
    cache: ToolCache,
    temp_dir: Path,
    checksum: str = "",
    github_token: str = "",
    minimum_version: str | None = None,
) -> SetupResult:
    """Return an installed jarl for an already resolved ``version``.

    When ``minimum_version`` is set, older versions are rejected before the
    cache or the network is consulted.

    Raises:
        UnsupportedVersionError: If ``version`` is below ``minimum_version``.
        DownloadError: If the artifact cannot be fetched or unpacked.
        ChecksumMismatchError: If ``checksum`` does not match the artifact.
    """
    if minimum_version is not None:
        ensure_supported(version, minimum_version)

    cached = try_get_from_tool_cache(cache, descriptor.arch, version)
    if cached.installed_path:
        logger.info("Found %s dir in tool-cache for %s", TOOL_NAME, cached.version)
        return SetupResult(jarl_dir=cached.installed_path, version=cached.version)

    return await download_version(
        descriptor,
        version,
        http=http,
        cache=cache,
        temp_dir=temp_dir,
        checksum=checksum,
        github_token=github_token,
    )
