"""Map the current host onto the platform/architecture names used by jarl releases."""

from __future__ import annotations

import platform
import sys

from jarl_action.errors import UnsupportedPlatformError
from jarl_action.models import Architecture, Platform, PlatformDescriptor

_MACHINE_ALIASES: dict[str, Architecture] = {
    "x86_64": Architecture.X86_64,
    "amd64": Architecture.X86_64,
    "x64": Architecture.X86_64,
    "aarch64": Architecture.AARCH64,
    "arm64": Architecture.AARCH64,
    "i386": Architecture.I686,
    "i686": Architecture.I686,
    "x86": Architecture.I686,
}


def get_platform(system: str | None = None) -> Platform | None:
    """Return the release platform for ``system`` (defaults to sys.platform)."""
    match system or sys.platform:
        case "linux":
            return Platform.LINUX
        case "darwin":
            return Platform.MACOS
        case "win32":
            return Platform.WINDOWS
    return None


def get_arch(machine: str | None = None) -> Architecture | None:
    """Return the release architecture for ``machine`` (defaults to platform.machine())."""
    return _MACHINE_ALIASES.get((machine or platform.machine()).lower())


def detect_platform() -> PlatformDescriptor:
    """Describe the current host.

    Raises:
        UnsupportedPlatformError: If jarl publishes no artifact for this OS or CPU.
    """
    host_platform = get_platform()
    if host_platform is None:
        raise UnsupportedPlatformError(f"Unsupported platform: {sys.platform}")
    arch = get_arch()
    if arch is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {platform.machine()}")
    return PlatformDescriptor(platform=host_platform, arch=arch)
