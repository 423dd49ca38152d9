"""Tests for version grammars and release resolution."""

from __future__ import annotations

import pytest

from jarl_action.errors import UnsupportedVersionError, VersionNotFoundError
from jarl_action.versioning import pep440, semver
from jarl_action.versioning.resolver import (
    ensure_supported,
    is_explicit_version,
    max_satisfying,
    resolve_version,
)

# ─── SemVer grammar ──────────────────────────────────────────


class TestSemverClean:
    def test_plain_version(self):
        assert semver.clean("0.2.0") == "0.2.0"

    def test_strips_v_prefix_and_whitespace(self):
        assert semver.clean("  v1.2.3 ") == "1.2.3"

    def test_strips_equals_prefix(self):
        assert semver.clean("=1.2.3") == "1.2.3"

    def test_prerelease_kept(self):
        assert semver.clean("1.2.3-beta.1") == "1.2.3-beta.1"

    def test_partial_version_is_not_semver(self):
        assert semver.clean("1.2") is None

    def test_garbage_is_not_semver(self):
        assert semver.clean("nightly") is None


class TestSemverMaxSatisfying:
    def test_picks_highest_in_range(self):
        assert semver.max_satisfying(["1.0.0", "1.2.0", "2.0.0"], "<2.0.0") == "1.2.0"

    def test_returns_original_tag_text(self):
        assert semver.max_satisfying(["v1.0.0", "v1.4.0", "v2.0.0"], "^1.0.0") == "v1.4.0"

    def test_skips_non_semver_tags(self):
        assert semver.max_satisfying(["nightly", "0.1.0", "0.1.5"], "~0.1.0") == "0.1.5"

    def test_ignores_input_order(self):
        assert semver.max_satisfying(["0.2.1", "0.1.0", "0.2.0"], "0.x") == "0.2.1"

    def test_prerelease_excluded_from_plain_range(self):
        assert semver.max_satisfying(["1.0.0", "1.1.0-rc.1"], ">=1.0.0") == "1.0.0"

    def test_no_match_returns_none(self):
        assert semver.max_satisfying(["1.0.0"], ">=3.0.0") is None

    def test_unparseable_range_returns_none(self):
        assert semver.max_satisfying(["1.0.0"], "not a range") is None


# ─── PEP 440 grammar ─────────────────────────────────────────


class TestPep440MaxSatisfying:
    def test_comma_separated_specifier(self):
        assert pep440.max_satisfying(["1.0", "1.5", "2.0"], ">=1.0,<2.0") == "1.5"

    def test_exclusion(self):
        assert pep440.max_satisfying(["0.1.0", "0.2.0", "0.2.1"], ">=0.1,!=0.2.1") == "0.2.0"

    def test_compatible_release(self):
        assert pep440.max_satisfying(["0.1.0", "0.1.9", "0.2.0"], "~=0.1.0") == "0.1.9"

    def test_invalid_tags_skipped(self):
        assert pep440.max_satisfying(["nightly", "1.0"], ">=1") == "1.0"

    def test_invalid_specifier_returns_none(self):
        assert pep440.max_satisfying(["1.0"], "^1.0") is None

    def test_no_match_returns_none(self):
        assert pep440.max_satisfying(["1.0"], ">=5") is None


# ─── Resolver ────────────────────────────────────────────────


class TestIsExplicitVersion:
    @pytest.mark.parametrize("version", ["0.2.0", "v0.2.0", "1.2.3-beta.1", " =0.2.0 "])
    def test_explicit(self, version):
        assert is_explicit_version(version) is True

    @pytest.mark.parametrize("version", ["0.2", "^0.2.0", ">=0.1", "0.2.x", "latest", "*"])
    def test_not_explicit(self, version):
        assert is_explicit_version(version) is False


class TestMaxSatisfying:
    def test_semver_grammar_first(self):
        assert max_satisfying(["1.0.0", "1.2.0", "2.0.0"], "<2.0.0") == "1.2.0"

    def test_falls_back_to_pep440(self):
        assert max_satisfying(["0.1.0", "0.2.0", "0.2.1"], ">=0.1,!=0.2.1") == "0.2.0"

    def test_neither_grammar_matches(self):
        assert max_satisfying(["0.1.0"], ">=9") is None


class TestResolveVersion:
    async def test_explicit_version_needs_no_network(self, releases):
        assert await resolve_version("0.1.0", releases) == "0.1.0"
        assert releases.list_calls == 0
        assert releases.latest_calls == 0

    async def test_explicit_version_returned_unchanged_even_if_unpublished(self, releases):
        assert await resolve_version("v9.9.9", releases) == "v9.9.9"
        assert releases.list_calls == 0

    async def test_latest_uses_marked_latest_release(self, releases):
        releases.latest = "0.2.0"
        assert await resolve_version("latest", releases) == "0.2.0"
        assert releases.latest_calls == 1
        assert releases.list_calls == 0

    async def test_range_picks_highest_match(self, releases):
        assert await resolve_version("<0.2.0", releases) == "0.1.0"
        assert releases.list_calls == 1

    async def test_caret_range(self, releases):
        assert await resolve_version("^0.2", releases) == "0.2.1"

    async def test_pep440_specifier(self, releases):
        assert await resolve_version(">=0.1,<0.2.1", releases) == "0.2.0"

    async def test_unsatisfiable_constraint_raises(self, releases):
        with pytest.raises(VersionNotFoundError, match="No version found for >=9"):
            await resolve_version(">=9", releases)


class TestEnsureSupported:
    def test_older_version_rejected(self):
        with pytest.raises(UnsupportedVersionError, match="older than 0.0.247"):
            ensure_supported("0.0.246", "0.0.247")

    def test_minimum_itself_accepted(self):
        ensure_supported("0.0.247", "0.0.247")

    def test_v_prefixed_newer_accepted(self):
        ensure_supported("v0.3.0", "0.0.247")

    def test_pep440_only_version_compared_with_pep440(self):
        ensure_supported("0.1.0a1", "0.0.247")

    def test_unorderable_version_rejected(self):
        with pytest.raises(UnsupportedVersionError, match="Cannot compare"):
            ensure_supported("nightly", "0.0.247")
