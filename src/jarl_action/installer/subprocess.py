"""Run the installed jarl binary as a child process."""

from __future__ import annotations

import asyncio
import logging

from jarl_action.errors import ToolRunError

logger = logging.getLogger(__name__)


async def run_command(cmd: list[str], env: dict[str, str] | None = None) -> int:
    """Run ``cmd`` with the parent's stdout/stderr and return its exit code.

    Uses asyncio.create_subprocess_exec -- never shell=True. Output is not
    captured so the CI log shows it live and annotations reach the runner.

    Raises:
        ToolRunError: If the executable cannot be started.
    """
    logger.info("[command]%s", " ".join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(*cmd, env=env)
    except OSError as exc:
        raise ToolRunError(f"Unable to start '{cmd[0]}': {exc}") from exc
    return await proc.wait()


async def run_tool(executable: str, args: list[str], src: list[str]) -> None:
    """Invoke ``executable`` with ``args`` followed by ``src``.

    Raises:
        ToolRunError: If the process cannot start or exits non-zero.
    """
    returncode = await run_command([executable, *args, *src])
    if returncode != 0:
        raise ToolRunError(f"The process '{executable}' failed with exit code {returncode}")
