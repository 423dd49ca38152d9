"""GitHub Actions workflow commands and environment files.

Each method mutates the current process (PATH, environment) and, when the
runner provides the matching ``GITHUB_*`` file, persists the change for the
following steps of the job. Without the files the legacy ``::command::``
form is printed instead.
"""

from __future__ import annotations

import os
import sys
import uuid
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_command(command: str, message: str = "", **properties: str) -> str:
    """Render ``::command key=value,...::message``."""
    rendered = ",".join(
        f"{key}={escape_property(value)}" for key, value in properties.items() if value
    )
    head = f"{command} {rendered}" if rendered else command
    return f"::{head}::{escape_data(message)}"


@dataclass
class Workflow:
    """Side-effect surface of a workflow step."""

    environ: MutableMapping[str, str] = field(default_factory=lambda: os.environ)
    stream: TextIO = field(default_factory=lambda: sys.stdout)

    def issue(self, command: str, message: str = "", **properties: str) -> None:
        self._write_line(format_command(command, message, **properties))

    def add_path(self, path: str) -> None:
        """Prepend ``path`` to PATH for this process and every later step."""
        if not self._append_file("GITHUB_PATH", path):
            self.issue("add-path", path)
        current = self.environ.get("PATH", "")
        self.environ["PATH"] = f"{path}{os.pathsep}{current}" if current else path

    def export_variable(self, name: str, value: str) -> None:
        """Set ``name`` for this process and every later step."""
        self.environ[name] = value
        if not self._append_file("GITHUB_ENV", _key_value_message(name, value)):
            self.issue("set-env", value, name=name)

    def set_output(self, name: str, value: str) -> None:
        """Publish a step output."""
        if not self._append_file("GITHUB_OUTPUT", _key_value_message(name, value)):
            self._write_line("")
            self.issue("set-output", value, name=name)

    def add_matcher(self, matcher_path: str | Path) -> None:
        """Register a problem-matcher definition file with the runner."""
        self._write_line(f"##[add-matcher]{matcher_path}")

    def set_failed(self, message: str) -> int:
        """Report the step as failed and return the exit code to use."""
        self.issue("error", message)
        return 1

    def _append_file(self, variable: str, line: str) -> bool:
        file_path = self.environ.get(variable, "")
        if not file_path:
            return False
        with Path(file_path).open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")
        return True

    def _write_line(self, line: str) -> None:
        self.stream.write(f"{line}\n")
        self.stream.flush()


def _key_value_message(key: str, value: str) -> str:
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in key or delimiter in value:
        raise ValueError(
            f"Unexpected input: name/value should not contain the delimiter {delimiter}"
        )
    return f"{key}<<{delimiter}\n{value}\n{delimiter}"
