"""jarl-action: install jarl from GitHub releases and run it in CI."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _distribution_version

DISTRIBUTION_NAME = "jarl-action"

# Reported by ``jarl-action --action-version`` when running from a source checkout.
_UNINSTALLED_VERSION = "0.0.0+local"


def _resolve_version() -> str:
    try:
        return _distribution_version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return _UNINSTALLED_VERSION


__version__ = _resolve_version()


def main() -> None:
    """Console script: ``jarl-action run|setup``."""
    from jarl_action.cli import main as cli_main

    cli_main()
