"""Orchestrate one action run: resolve, install, publish, invoke.

Two modes share the pipeline. ``run`` reads the version from inputs or a
manifest, enforces the minimum supported version and registers both problem
matchers. ``setup`` only honours an explicit version (else latest) and
registers the check matcher alone.

Nothing here exits the process; :func:`execute` returns the exit status and
the caller decides what to do with it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager, nullcontext
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path

import httpx

from jarl_action.errors import InputError, JarlActionError
from jarl_action.installer.setup import setup_jarl
from jarl_action.installer.subprocess import run_tool
from jarl_action.manifest.reader import get_version_from_manifest
from jarl_action.models import (
    LATEST,
    MINIMUM_SUPPORTED_VERSION,
    TOOL_NAME,
    ActionInputs,
    ActionMode,
    PlatformDescriptor,
    SetupResult,
)
from jarl_action.platforms import detect_platform
from jarl_action.registry.base import ReleaseSource
from jarl_action.registry.github import GitHubReleases
from jarl_action.toolcache.cache import ToolCache, default_cache_root
from jarl_action.toolcache.download import default_temp_dir
from jarl_action.versioning.resolver import resolve_version
from jarl_action.workflow.commands import Workflow

logger = logging.getLogger(__name__)

OUTPUT_FORMAT_VARIABLE = "JARL_OUTPUT_FORMAT"
OUTPUT_FORMAT = "github"
VERSION_OUTPUT = "jarl-version"

RUN_MATCHERS = ("check.json", "format.json")
SETUP_MATCHERS = ("check.json",)

_IMPLICIT_MANIFEST = "pyproject.toml"


@dataclass(frozen=True, slots=True)
class ActionContext:
    """Adapters shared by one action run."""

    http: httpx.AsyncClient
    releases: ReleaseSource
    cache: ToolCache
    temp_dir: Path
    workflow: Workflow


@asynccontextmanager
async def action_context(
    github_token: str,
    workflow: Workflow,
    environ: Mapping[str, str] | None = None,
) -> AsyncIterator[ActionContext]:
    """Manage the HTTP client lifecycle -- the composition root."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(30.0, connect=10.0),
        follow_redirects=True,
        transport=httpx.AsyncHTTPTransport(retries=3),
    ) as http_client:
        yield ActionContext(
            http=http_client,
            releases=GitHubReleases(http_client, token=github_token),
            cache=ToolCache(default_cache_root(environ)),
            temp_dir=default_temp_dir(environ),
            workflow=workflow,
        )


# ─── Version determination ──────────────────────────────────


async def determine_version(inputs: ActionInputs, releases: ReleaseSource) -> str:
    """Pick the constraint for run mode and resolve it.

    Priority: explicit version, then the given version file, then
    ``<src>/pyproject.toml`` when present, then latest. A manifest that
    declares nothing usable falls back to latest.

    Raises:
        InputError: If both ``version`` and ``version-file`` are given.
    """
    if inputs.version and inputs.version_file:
        raise InputError("It is not allowed to specify both version and version-file")

    if inputs.version:
        return await resolve_version(inputs.version, releases)

    if inputs.version_file:
        from_file = await asyncio.to_thread(get_version_from_manifest, inputs.version_file)
        if from_file is None:
            logger.warning(
                "Could not parse version from %s. Using latest version.", inputs.version_file
            )
        return await resolve_version(from_file or LATEST, releases)

    src_root = inputs.src_list[0] if inputs.src_list else "."
    manifest = Path(src_root) / _IMPLICIT_MANIFEST
    if not manifest.is_file():
        logger.info("Could not find %s. Using latest version.", manifest)
        return await resolve_version(LATEST, releases)

    from_manifest = await asyncio.to_thread(get_version_from_manifest, manifest)
    if from_manifest is None:
        logger.info("Could not parse version from %s. Using latest version.", manifest)
    return await resolve_version(from_manifest or LATEST, releases)


async def determine_setup_version(inputs: ActionInputs, releases: ReleaseSource) -> str:
    """Setup mode: the explicit version input, else latest."""
    return await resolve_version(inputs.version or LATEST, releases)


# ─── Installation effects ───────────────────────────────────


def matcher_paths(names: Sequence[str]) -> list[Path]:
    """Absolute paths of the packaged problem-matcher definitions."""
    root = files("jarl_action.matchers")
    return [Path(str(root.joinpath(name))) for name in names]


def apply_installation_effects(
    result: SetupResult,
    workflow: Workflow,
    matchers: Sequence[str],
) -> None:
    """Publish an installation to the job: PATH, output format, matchers, output value."""
    workflow.add_path(result.jarl_dir)
    logger.info("Added %s to the path", result.jarl_dir)

    workflow.export_variable(OUTPUT_FORMAT_VARIABLE, OUTPUT_FORMAT)
    logger.info("Set %s to %s", OUTPUT_FORMAT_VARIABLE, OUTPUT_FORMAT)

    for matcher in matcher_paths(matchers):
        workflow.add_matcher(matcher)

    workflow.set_output(VERSION_OUTPUT, result.version)
    logger.info("Successfully installed %s version %s", TOOL_NAME, result.version)


# ─── Modes ──────────────────────────────────────────────────


async def run_action(
    inputs: ActionInputs,
    context: ActionContext,
    descriptor: PlatformDescriptor,
) -> SetupResult:
    """Run mode: resolve from inputs or manifest, install, publish, lint."""
    version = await determine_version(inputs, context.releases)
    result = await setup_jarl(
        descriptor,
        version,
        http=context.http,
        cache=context.cache,
        temp_dir=context.temp_dir,
        checksum=inputs.checksum,
        github_token=inputs.github_token,
        minimum_version=MINIMUM_SUPPORTED_VERSION,
    )
    apply_installation_effects(result, context.workflow, RUN_MATCHERS)
    await run_tool(_executable(result, descriptor), inputs.args_list, inputs.src_list)
    return result


async def setup_action(
    inputs: ActionInputs,
    context: ActionContext,
    descriptor: PlatformDescriptor,
) -> SetupResult:
    """Setup mode: explicit version or latest, install, publish, invoke."""
    version = await determine_setup_version(inputs, context.releases)
    result = await setup_jarl(
        descriptor,
        version,
        http=context.http,
        cache=context.cache,
        temp_dir=context.temp_dir,
        github_token=inputs.github_token,
    )
    apply_installation_effects(result, context.workflow, SETUP_MATCHERS)
    await run_tool(_executable(result, descriptor), inputs.args_list, inputs.src_list)
    return result


async def execute(
    mode: ActionMode,
    inputs: ActionInputs,
    *,
    workflow: Workflow | None = None,
    context: ActionContext | None = None,
    descriptor: PlatformDescriptor | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Run ``mode`` end to end and return the process exit status.

    Every failure is reported once as a failed step; side effects that
    already happened are left in place.
    """
    workflow = workflow or (context.workflow if context else Workflow())
    try:
        platform = descriptor or detect_platform()
        scope = (
            nullcontext(context)
            if context is not None
            else action_context(inputs.github_token, workflow, environ)
        )
        async with scope as ctx:
            if mode is ActionMode.RUN:
                await run_action(inputs, ctx, platform)
            else:
                await setup_action(inputs, ctx, platform)
    except JarlActionError as exc:
        return workflow.set_failed(str(exc))
    except Exception as exc:
        logger.debug("Unexpected error in %s mode", mode, exc_info=True)
        return workflow.set_failed(str(exc) or type(exc).__name__)
    return 0


def _executable(result: SetupResult, descriptor: PlatformDescriptor) -> str:
    return str(Path(result.jarl_dir) / descriptor.executable_name)
