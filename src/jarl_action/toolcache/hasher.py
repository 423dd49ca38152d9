"""Compute and verify artifact checksums."""

from __future__ import annotations

import hashlib
from pathlib import Path

from jarl_action.errors import ChecksumMismatchError

_CHUNK_SIZE = 1 << 16


def compute_file_sha256(path: str | Path) -> str:
    """Return the hex SHA-256 digest of a file, read in chunks."""
    digest = hashlib.sha256()
    with Path(path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def validate_checksum(path: str | Path, expected: str) -> None:
    """Compare a file against an expected SHA-256 (``sha256:`` prefix optional).

    Raises:
        ChecksumMismatchError: If the digests differ.
    """
    wanted = expected.strip().lower().removeprefix("sha256:")
    actual = compute_file_sha256(path)
    if actual != wanted:
        raise ChecksumMismatchError(
            f"Checksum for {path} did not match {wanted}. Actual checksum: {actual}"
        )
