"""List jarl releases through the GitHub REST API.

API docs: https://docs.github.com/en/rest/releases/releases
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx

from jarl_action.errors import RegistryAuthError, RegistryError
from jarl_action.models import OWNER, REPO

logger = logging.getLogger(__name__)

_API_BASE = "https://api.github.com"
_API_VERSION = "2022-11-28"
_PER_PAGE = 100

_STATUS_HINT = "Check the GitHub status page for outages. Try again later."

T = TypeVar("T")


@dataclass
class GitHubReleases:
    """Async client for the releases of one GitHub repository.

    An authenticated call rejected with 401 is repeated once anonymously;
    anonymous calls are rate limited but otherwise equivalent.
    """

    http: httpx.AsyncClient
    token: str = ""
    owner: str = OWNER
    repo: str = REPO

    async def list_releases(self) -> list[str]:
        """Return the tag names of all releases across every page.

        Raises:
            RegistryError: If the API fails or reports no releases at all.
        """
        return await self._with_anonymous_fallback(self._list_release_tags)

    async def get_latest_release(self) -> str:
        """Return the tag of the release GitHub marks as latest.

        Raises:
            RegistryError: If the API fails or the repository has no latest release.
        """
        try:
            return await self._with_anonymous_fallback(self._latest_release_tag)
        except RegistryError:
            logger.error("GitHub API request failed while getting latest release. %s", _STATUS_HINT)
            raise

    # ── Request helpers ──────────────────────────────────────────

    async def _with_anonymous_fallback(
        self, operation: Callable[[str], Awaitable[T]]
    ) -> T:
        try:
            return await operation(self.token)
        except RegistryAuthError:
            logger.info(
                "No (valid) GitHub token provided. Falling back to anonymous. "
                "Requests might be rate limited."
            )
            return await operation("")

    async def _list_release_tags(self, token: str) -> list[str]:
        url: str | None = f"{_API_BASE}/repos/{self.owner}/{self.repo}/releases"
        params: dict[str, int] | None = {"per_page": _PER_PAGE}
        tags: list[str] = []
        while url:
            response = await self._get(url, token, params=params)
            tags.extend(_tag_names(response.json()))
            url = response.links.get("next", {}).get("url")
            params = None  # the "next" link already carries the query string

        if not tags:
            raise RegistryError(
                f"GitHub API request failed while getting releases. {_STATUS_HINT}"
            )
        return tags

    async def _latest_release_tag(self, token: str) -> str:
        url = f"{_API_BASE}/repos/{self.owner}/{self.repo}/releases/latest"
        response = await self._get(url, token, missing_ok=True)
        if response.status_code == 404:
            raise RegistryError("Could not determine latest release.")

        data = response.json()
        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str) or not tag:
            raise RegistryError("Could not determine latest release.")
        return tag

    async def _get(
        self,
        url: str,
        token: str,
        *,
        params: dict[str, int] | None = None,
        missing_ok: bool = False,
    ) -> httpx.Response:
        try:
            response = await self.http.get(url, params=params, headers=_github_headers(token))
        except httpx.HTTPError as exc:
            raise RegistryError(f"Failed to reach GitHub API at {url}: {exc}") from exc

        if response.status_code == 401:
            raise RegistryAuthError(f"GitHub API rejected credentials (401) for {url}")
        if response.status_code == 404 and missing_ok:
            return response
        if response.status_code >= 400:
            raise RegistryError(
                f"GitHub API request to {url} failed with HTTP {response.status_code}"
            )
        return response


def _github_headers(token: str) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": _API_VERSION,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _tag_names(payload: object) -> list[str]:
    """Pull ``tag_name`` out of a page of release records, skipping malformed ones."""
    if not isinstance(payload, list):
        return []
    return [
        release["tag_name"]
        for release in payload
        if isinstance(release, dict) and isinstance(release.get("tag_name"), str)
    ]
