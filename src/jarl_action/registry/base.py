"""Port: published-release listing."""

from __future__ import annotations

from typing import Protocol


class ReleaseSource(Protocol):
    """Port for querying the release tags of the jarl repository."""

    async def list_releases(self) -> list[str]:
        """Return every published release tag, newest first as the registry orders them."""
        ...

    async def get_latest_release(self) -> str:
        """Return the tag of the release the registry marks as latest."""
        ...
