"""Exception hierarchy for jarl-action.

All exceptions inherit from JarlActionError (single catch point).
Messages end up verbatim in the failed CI run, so they must read well on their own.
"""

from __future__ import annotations


class JarlActionError(Exception):
    """Base exception for all jarl-action errors."""


class UnsupportedPlatformError(JarlActionError):
    """The host OS or CPU architecture has no jarl release artifact."""


class InputError(JarlActionError):
    """The action inputs are contradictory or malformed."""


class ManifestError(JarlActionError):
    """A dependency manifest could not be parsed."""


class RegistryError(JarlActionError):
    """Error communicating with the GitHub releases API."""


class RegistryAuthError(RegistryError):
    """The GitHub API rejected the supplied credentials."""


class VersionNotFoundError(JarlActionError):
    """No published release satisfies the requested version constraint."""


class UnsupportedVersionError(JarlActionError):
    """The resolved jarl version is older than the supported minimum."""


class DownloadError(JarlActionError):
    """The release artifact could not be downloaded or extracted."""


class ChecksumMismatchError(DownloadError):
    """The downloaded artifact does not match the expected checksum."""


class ToolRunError(JarlActionError):
    """jarl exited with a non-zero status."""
