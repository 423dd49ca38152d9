"""Domain models for jarl-action. All frozen dataclasses -- no mutation after creation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# ─── Release coordinates ──────────────────────────────────────

TOOL_NAME = "jarl"
OWNER = "etiennebacher"
REPO = "jarl"
DOWNLOAD_HOST = "https://github.com"

# Below this release jarl's output contract is not guaranteed.
MINIMUM_SUPPORTED_VERSION = "0.0.247"

LATEST = "latest"

# ─── Enumerations ─────────────────────────────────────────────


class Platform(StrEnum):
    LINUX = "unknown-linux-gnu"
    MACOS = "apple-darwin"
    WINDOWS = "pc-windows-msvc"


class Architecture(StrEnum):
    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    I686 = "i686"


class ActionMode(StrEnum):
    RUN = "run"
    SETUP = "setup"


# ─── Platform Models ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PlatformDescriptor:
    """The (platform, architecture) pair a release artifact is built for."""

    platform: Platform
    arch: Architecture

    @property
    def artifact_name(self) -> str:
        return f"{TOOL_NAME}-{self.arch}-{self.platform}"

    @property
    def archive_extension(self) -> str:
        if self.platform is Platform.WINDOWS:
            return ".zip"
        return ".tar.gz"

    @property
    def executable_name(self) -> str:
        if self.platform is Platform.WINDOWS:
            return f"{TOOL_NAME}.exe"
        return TOOL_NAME


# ─── Installation Models ──────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CacheLookup:
    """Outcome of a tool-cache probe. installed_path is None on a miss."""

    version: str
    installed_path: str | None = None


@dataclass(frozen=True, slots=True)
class SetupResult:
    """A ready-to-use jarl installation."""

    jarl_dir: str
    version: str


# ─── Input Models ─────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ActionInputs:
    """Inputs recognised by both action modes. Empty string means "not given"."""

    version: str = ""
    version_file: str = ""
    checksum: str = ""
    github_token: str = ""
    args: str = ""
    src: str = "."

    @property
    def args_list(self) -> list[str]:
        return self.args.split()

    @property
    def src_list(self) -> list[str]:
        return self.src.split()
