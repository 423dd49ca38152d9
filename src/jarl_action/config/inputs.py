"""Read action inputs from the CI host, falling back to packaged defaults.

The runner exposes each input as ``INPUT_<NAME>``; defaults live in the
mode's action metadata file under ``presets/``.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
from collections.abc import Mapping

import yaml

from jarl_action.errors import InputError
from jarl_action.models import ActionInputs, ActionMode

logger = logging.getLogger(__name__)

# ActionInputs field -> input name as declared in the metadata files.
_INPUT_FIELDS = {
    "version": "version",
    "version_file": "version-file",
    "checksum": "checksum",
    "github_token": "github-token",
    "args": "args",
    "src": "src",
}


def load_action_metadata(mode: ActionMode) -> dict[str, object]:
    """Load the metadata document describing ``mode``'s inputs and outputs.

    Raises:
        InputError: If the packaged file is missing or malformed.
    """
    try:
        ref = importlib.resources.files("jarl_action.config") / "presets" / f"{mode}.yml"
        data = yaml.safe_load(ref.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise InputError(f"No action metadata for mode '{mode}'.") from None
    except yaml.YAMLError as exc:
        raise InputError(f"Invalid action metadata for mode '{mode}': {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("inputs"), dict):
        raise InputError(
            f"Invalid action metadata for mode '{mode}': expected an 'inputs' mapping."
        )
    return data


def input_defaults(mode: ActionMode) -> dict[str, str]:
    """Return ``{input name: default}`` for every input ``mode`` declares."""
    inputs = load_action_metadata(mode)["inputs"]
    defaults: dict[str, str] = {}
    for name, spec in inputs.items():
        default = spec.get("default", "") if isinstance(spec, dict) else ""
        defaults[str(name)] = "" if default is None else str(default)
    return defaults


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Value of input ``name`` as set by the runner, trimmed; ``""`` when unset."""
    env = os.environ if environ is None else environ
    return env.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()


def read_inputs(
    mode: ActionMode,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, str | None] | None = None,
) -> ActionInputs:
    """Collect ``mode``'s inputs: explicit overrides, then ``INPUT_*``, then defaults.

    Inputs the mode does not declare stay empty. In run mode an empty ``src``
    means the workspace.
    """
    env = os.environ if environ is None else environ
    defaults = input_defaults(mode)
    values: dict[str, str] = {}
    for field_name, input_name in _INPUT_FIELDS.items():
        if input_name not in defaults:
            values[field_name] = ""
            continue
        override = (overrides or {}).get(input_name)
        value = override.strip() if override is not None else get_input(input_name, env)
        values[field_name] = value or defaults[input_name]

    if mode is ActionMode.RUN and not values["src"]:
        values["src"] = env.get("GITHUB_WORKSPACE", "").strip() or "."
    logger.debug("Inputs for %s: %s", mode, _redacted(values))
    return ActionInputs(**values)


def _redacted(values: Mapping[str, str]) -> dict[str, str]:
    return {
        key: ("***" if key == "github_token" and value else value)
        for key, value in values.items()
    }
