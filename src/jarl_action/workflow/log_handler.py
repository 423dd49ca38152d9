"""Route the package's log records to the CI log.

Inside GitHub Actions every record becomes the matching workflow command so
warnings and errors show up as annotations; elsewhere records are printed
with a level prefix.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import TextIO

from jarl_action.workflow.commands import format_command

_PACKAGE_LOGGER = "jarl_action"

_LEVEL_COMMANDS = (
    (logging.ERROR, "error"),
    (logging.WARNING, "warning"),
    (logging.INFO, ""),
    (logging.DEBUG, "debug"),
)


class WorkflowCommandHandler(logging.StreamHandler):
    """Stream handler that renders records as ``::debug::``/``::warning::``/``::error::``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for level, command in _LEVEL_COMMANDS:
            if record.levelno >= level:
                return format_command(command, message) if command else message
        return format_command("debug", message)


def in_github_actions(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get("GITHUB_ACTIONS", "").lower() == "true"


def setup_logging(
    *,
    debug: bool = False,
    environ: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``jarl_action`` logger and return it.

    On a runner, debug records are always emitted; the runner hides them
    unless step debugging is on.
    """
    env = os.environ if environ is None else environ
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.handlers.clear()
    logger.propagate = False

    if in_github_actions(env):
        handler: logging.Handler = WorkflowCommandHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.setLevel(logging.DEBUG)
    else:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        verbose = debug or env.get("RUNNER_DEBUG") == "1"
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    logger.addHandler(handler)
    return logger
