"""Download, verify and unpack a jarl release artifact into the tool cache."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tarfile
import tempfile
import uuid
import zipfile
from collections.abc import Mapping
from pathlib import Path

import httpx

from jarl_action.errors import DownloadError
from jarl_action.models import (
    DOWNLOAD_HOST,
    OWNER,
    REPO,
    TOOL_NAME,
    Platform,
    PlatformDescriptor,
    SetupResult,
)
from jarl_action.toolcache.cache import ToolCache
from jarl_action.toolcache.hasher import validate_checksum

logger = logging.getLogger(__name__)


def default_temp_dir(environ: Mapping[str, str] | None = None) -> Path:
    """``$RUNNER_TEMP`` on a runner, the system temp directory elsewhere."""
    env = os.environ if environ is None else environ
    runner_temp = env.get("RUNNER_TEMP", "").strip()
    if runner_temp:
        return Path(runner_temp)
    return Path(tempfile.gettempdir()) / "jarl-action"


def construct_download_url(descriptor: PlatformDescriptor, version: str) -> str:
    """Release asset URL. Tags carry no ``v`` prefix and asset names carry no version."""
    return (
        f"{DOWNLOAD_HOST}/{OWNER}/{REPO}/releases/download/{version}/"
        f"{descriptor.artifact_name}{descriptor.archive_extension}"
    )


async def download_tool(
    http: httpx.AsyncClient,
    url: str,
    dest_dir: Path,
    token: str = "",
) -> Path:
    """Stream ``url`` into a fresh file under ``dest_dir`` and return its path.

    Raises:
        DownloadError: On transport errors or a non-success HTTP status.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    target = dest_dir / uuid.uuid4().hex
    headers = {"Authorization": f"Bearer {token}"} if token else {}

    try:
        async with http.stream("GET", url, headers=headers) as response:
            if response.status_code >= 400:
                raise DownloadError(
                    f"Unexpected HTTP response: {response.status_code} while downloading {url}"
                )
            with target.open("wb") as handle:
                async for chunk in response.aiter_bytes():
                    handle.write(chunk)
    except httpx.HTTPError as exc:
        target.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {exc}") from exc
    except DownloadError:
        target.unlink(missing_ok=True)
        raise
    return target


def extract_artifact(
    archive_path: Path,
    descriptor: PlatformDescriptor,
    dest_dir: Path,
) -> Path:
    """Unpack the archive and return the directory holding the jarl binary.

    Windows zips unpack flat. Tarballs hold a single ``jarl-<arch>-<platform>``
    directory, which is returned.

    Raises:
        DownloadError: If the archive is corrupt or lacks the expected layout.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    try:
        if descriptor.platform is Platform.WINDOWS:
            with zipfile.ZipFile(archive_path) as archive:
                archive.extractall(dest_dir)
            tool_dir = dest_dir
        else:
            with tarfile.open(archive_path, mode="r:gz") as archive:
                archive.extractall(dest_dir, filter="data")
            tool_dir = dest_dir / descriptor.artifact_name
    except (tarfile.TarError, zipfile.BadZipFile, OSError) as exc:
        raise DownloadError(f"Failed to extract {archive_path}: {exc}") from exc

    if not tool_dir.is_dir():
        raise DownloadError(
            f"Archive {archive_path} does not contain the expected directory "
            f"{descriptor.artifact_name}"
        )
    logger.debug(
        "Contents of %s: %s",
        tool_dir,
        ", ".join(sorted(entry.name for entry in tool_dir.iterdir())),
    )
    return tool_dir


async def download_version(
    descriptor: PlatformDescriptor,
    version: str,
    *,
    http: httpx.AsyncClient,
    cache: ToolCache,
    temp_dir: Path,
    checksum: str = "",
    github_token: str = "",
) -> SetupResult:
    """Fetch ``version`` for ``descriptor``, verify it, unpack it and cache it.

    The downloaded archive and the unpacked copy are removed from
    ``temp_dir`` once the cache holds the files, or on failure.

    Raises:
        DownloadError: If fetching or unpacking fails.
        ChecksumMismatchError: If ``checksum`` is given and does not match.
    """
    url = construct_download_url(descriptor, version)
    logger.debug('Downloading %s from "%s" ...', TOOL_NAME, url)
    archive_path = await download_tool(http, url, temp_dir, github_token)
    logger.debug('Downloaded %s to "%s"', TOOL_NAME, archive_path)
    extract_dir = temp_dir / uuid.uuid4().hex

    try:
        if checksum:
            await asyncio.to_thread(validate_checksum, archive_path, checksum)
            logger.info("Checksum for %s matched.", descriptor.artifact_name)

        extracted = await asyncio.to_thread(
            extract_artifact, archive_path, descriptor, extract_dir
        )
        cached_dir = await asyncio.to_thread(
            cache.cache_dir, extracted, TOOL_NAME, version, descriptor.arch
        )
    finally:
        await asyncio.to_thread(_remove_scratch, archive_path, extract_dir)
    return SetupResult(jarl_dir=cached_dir, version=version)


def _remove_scratch(archive_path: Path, extract_dir: Path) -> None:
    archive_path.unlink(missing_ok=True)
    shutil.rmtree(extract_dir, ignore_errors=True)
