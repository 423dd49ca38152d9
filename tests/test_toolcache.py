"""Tests for toolcache.cache and toolcache.hasher."""

from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from jarl_action.errors import ChecksumMismatchError
from jarl_action.toolcache.cache import ToolCache, default_cache_root
from jarl_action.toolcache.hasher import compute_file_sha256, validate_checksum


def _source(tmp_path: Path, name: str = "src") -> Path:
    source = tmp_path / name
    source.mkdir()
    (source / "jarl").write_text("#!/bin/sh\necho jarl\n")
    return source


@pytest.fixture
def cache(tmp_path) -> ToolCache:
    return ToolCache(tmp_path / "cache")


class TestDefaultCacheRoot:
    def test_runner_tool_cache(self):
        assert default_cache_root({"RUNNER_TOOL_CACHE": "/opt/hostedtoolcache"}) == Path(
            "/opt/hostedtoolcache"
        )

    def test_local_fallback(self, monkeypatch, tmp_path):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert default_cache_root({}) == tmp_path / ".cache" / "jarl-action" / "tool-cache"


class TestCacheDir:
    def test_layout_and_marker(self, cache, tmp_path):
        cached = cache.cache_dir(_source(tmp_path), "jarl", "0.2.0", "x86_64")

        entry = cache.root / "jarl" / "0.2.0" / "x86_64"
        assert cached == str(entry)
        assert (entry / "jarl").is_file()
        assert (cache.root / "jarl" / "0.2.0" / "x86_64.complete").is_file()

    def test_version_is_cleaned(self, cache, tmp_path):
        cache.cache_dir(_source(tmp_path), "jarl", "v0.2.0", "x86_64")
        assert (cache.root / "jarl" / "0.2.0" / "x86_64").is_dir()

    def test_replaces_previous_entry(self, cache, tmp_path):
        cache.cache_dir(_source(tmp_path, "first"), "jarl", "0.2.0", "x86_64")
        stale = cache.root / "jarl" / "0.2.0" / "x86_64" / "stale"
        stale.write_text("old")

        cache.cache_dir(_source(tmp_path, "second"), "jarl", "0.2.0", "x86_64")
        assert not stale.exists()


class TestFind:
    def test_hit_for_explicit_version(self, cache, tmp_path):
        cache.cache_dir(_source(tmp_path), "jarl", "0.2.0", "x86_64")
        expected = str(cache.root / "jarl" / "0.2.0" / "x86_64")
        assert cache.find("jarl", "0.2.0", "x86_64") == expected

    def test_miss_for_other_arch(self, cache, tmp_path):
        cache.cache_dir(_source(tmp_path), "jarl", "0.2.0", "x86_64")
        assert cache.find("jarl", "0.2.0", "aarch64") is None

    def test_incomplete_entry_is_a_miss(self, cache):
        (cache.root / "jarl" / "0.2.0" / "x86_64").mkdir(parents=True)
        assert cache.find("jarl", "0.2.0", "x86_64") is None

    def test_range_matches_best_cached_version(self, cache, tmp_path):
        for index, version in enumerate(["0.1.0", "0.2.0", "0.2.1"]):
            cache.cache_dir(_source(tmp_path, f"s{index}"), "jarl", version, "x86_64")
        assert cache.find("jarl", "^0.2", "x86_64") == str(cache.root / "jarl" / "0.2.1" / "x86_64")

    def test_range_without_cached_match(self, cache, tmp_path):
        cache.cache_dir(_source(tmp_path), "jarl", "0.1.0", "x86_64")
        assert cache.find("jarl", ">=0.2", "x86_64") is None


class TestFindAllVersions:
    def test_empty_cache(self, cache):
        assert cache.find_all_versions("jarl", "x86_64") == []

    def test_only_complete_entries_for_arch(self, cache, tmp_path):
        cache.cache_dir(_source(tmp_path, "a"), "jarl", "0.1.0", "x86_64")
        cache.cache_dir(_source(tmp_path, "b"), "jarl", "0.2.0", "aarch64")
        (cache.root / "jarl" / "0.3.0" / "x86_64").mkdir(parents=True)

        assert cache.find_all_versions("jarl", "x86_64") == ["0.1.0"]


class TestEvaluateVersions:
    def test_semver_range(self, cache):
        assert cache.evaluate_versions(["0.1.0", "0.2.0"], "<0.2.0") == "0.1.0"

    def test_pep440_specifier(self, cache):
        assert cache.evaluate_versions(["0.1.0", "0.2.0"], ">=0.1,!=0.2.0") == "0.1.0"

    def test_nothing_fits(self, cache):
        assert cache.evaluate_versions(["0.1.0"], ">=1") is None


class TestChecksum:
    def test_compute(self, tmp_path):
        path = tmp_path / "artifact"
        path.write_bytes(b"jarl")
        assert compute_file_sha256(path) == hashlib.sha256(b"jarl").hexdigest()

    def test_match_is_case_insensitive_and_accepts_prefix(self, tmp_path):
        path = tmp_path / "artifact"
        path.write_bytes(b"jarl")
        digest = hashlib.sha256(b"jarl").hexdigest()
        validate_checksum(path, digest.upper())
        validate_checksum(path, f"sha256:{digest}")

    def test_mismatch(self, tmp_path):
        path = tmp_path / "artifact"
        path.write_bytes(b"jarl")
        with pytest.raises(ChecksumMismatchError, match="Actual checksum"):
            validate_checksum(path, "0" * 64)
