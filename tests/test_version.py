"""Tests for the action version reported by ``jarl-action --action-version``."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version

import pytest

import jarl_action
from jarl_action.cli import run_cli


class TestActionVersion:
    def test_reports_installed_distribution(self):
        assert jarl_action.__version__ == distribution_version(jarl_action.DISTRIBUTION_NAME)

    def test_source_checkout_gets_local_version(self, monkeypatch):
        def _not_installed(_: str) -> str:
            raise PackageNotFoundError

        monkeypatch.setattr(jarl_action, "_distribution_version", _not_installed)

        assert jarl_action._resolve_version() == "0.0.0+local"

    def test_cli_flag_prints_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(["--action-version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == jarl_action.__version__
