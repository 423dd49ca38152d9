"""Command-line entry point used by the CI host and for local runs."""

from __future__ import annotations

import argparse
import asyncio
import sys

from jarl_action import __version__
from jarl_action.action import execute
from jarl_action.config.inputs import read_inputs
from jarl_action.errors import InputError
from jarl_action.models import ActionMode
from jarl_action.workflow.commands import Workflow
from jarl_action.workflow.log_handler import setup_logging

# argparse dest -> action input name
_SHARED_FLAGS = {
    "version": "version",
    "github_token": "github-token",
    "args": "args",
    "src": "src",
}
_RUN_ONLY_FLAGS = {
    "version_file": "version-file",
    "checksum": "checksum",
}


def _add_shared_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--version",
        default=None,
        help='jarl version: explicit ("0.2.0"), a range (">=0.1,<0.3", "^0.2") or "latest".',
    )
    parser.add_argument(
        "--github-token",
        default=None,
        help="GitHub token for API requests. Defaults to INPUT_GITHUB-TOKEN.",
    )
    parser.add_argument(
        "--args",
        default=None,
        help='Arguments passed to jarl, e.g. --args="check --fix".',
    )
    parser.add_argument(
        "--src",
        default=None,
        help="Space separated source paths passed to jarl after --args.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print debug logs.",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jarl-action",
        description="Install jarl from its GitHub releases and run it.",
    )
    parser.add_argument("--action-version", action="version", version=__version__)
    subparsers = parser.add_subparsers(dest="mode", required=True)

    run_parser = subparsers.add_parser(
        ActionMode.RUN.value,
        help="Resolve jarl from inputs or pyproject.toml, install it and run it.",
    )
    _add_shared_arguments(run_parser)
    run_parser.add_argument(
        "--version-file",
        default=None,
        help="pyproject.toml or requirements *.txt declaring the jarl version.",
    )
    run_parser.add_argument(
        "--checksum",
        default=None,
        help="Expected SHA-256 of the downloaded archive.",
    )

    setup_parser = subparsers.add_parser(
        ActionMode.SETUP.value,
        help="Install jarl (explicit version or latest) and put it on the PATH.",
    )
    _add_shared_arguments(setup_parser)
    return parser.parse_args(argv)


def run_cli(argv: list[str] | None = None) -> int:
    """CLI runner. Flags override the ``INPUT_*`` variables set by the runner."""
    args = _parse_args(argv)
    mode = ActionMode(args.mode)
    setup_logging(debug=args.debug)
    workflow = Workflow()

    flags = dict(_SHARED_FLAGS)
    if mode is ActionMode.RUN:
        flags.update(_RUN_ONLY_FLAGS)
    overrides = {input_name: getattr(args, dest) for dest, input_name in flags.items()}

    try:
        inputs = read_inputs(mode, overrides=overrides)
    except InputError as exc:
        return workflow.set_failed(str(exc))

    return asyncio.run(execute(mode, inputs, workflow=workflow))


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``jarl-action`` console script."""
    sys.exit(run_cli(argv))


if __name__ == "__main__":
    main()
