"""Shared test fixtures."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field

import pytest

from jarl_action.workflow.commands import Workflow


@dataclass
class FakeReleases:
    """In-memory ReleaseSource that records how often it was queried."""

    tags: list[str] = field(default_factory=list)
    latest: str = ""
    list_calls: int = 0
    latest_calls: int = 0

    async def list_releases(self) -> list[str]:
        self.list_calls += 1
        return list(self.tags)

    async def get_latest_release(self) -> str:
        self.latest_calls += 1
        return self.latest


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """setup_logging() detaches the package logger from root; undo that for caplog."""
    yield
    package_logger = logging.getLogger("jarl_action")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def releases() -> FakeReleases:
    return FakeReleases(tags=["0.0.246", "0.0.247", "0.1.0", "0.2.0", "0.2.1"], latest="0.2.1")


@pytest.fixture
def workflow() -> Workflow:
    """Workflow writing to an in-memory stream with a private environment."""
    return Workflow(environ={"PATH": "/usr/bin"}, stream=io.StringIO())
