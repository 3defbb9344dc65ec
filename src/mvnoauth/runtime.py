"""The invoking environment: inputs, outputs, saved state and the secret sink.

A run talks to whatever launched it through a :class:`Runtime`:

- :class:`GitHubActionsRuntime` -- reads ``INPUT_*`` variables, appends
  outputs and state to the files named by ``GITHUB_OUTPUT`` /
  ``GITHUB_STATE``, and masks secrets with ``::add-mask::``.
- :class:`LocalRuntime` -- for shells and other CI systems. Outputs go to
  stdout as ``name=value`` and state lives in a JSON file in the data
  directory, so ``mvnoauth cleanup`` can find the file ``mvnoauth run``
  wrote.

Use :func:`detect_runtime` to pick the right one.
"""

from __future__ import annotations

import json
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Optional

from mvnoauth.config import atomic_write, get_data_dir
from mvnoauth.exceptions import FilesystemError
from mvnoauth.output import get_output

SETTINGS_FILE_KEY = "settings-file"
"""Output name and state key holding the generated settings path."""

_STATE_FILENAME = "state.json"


class Runtime(ABC):
    """Abstract interface to the environment that invoked mvnoauth."""

    name: str = "runtime"

    def get_input(self, name: str) -> Optional[str]:
        """Return the input *name*, or ``None`` when unset or blank."""
        return None

    def set_secret(self, value: str) -> None:
        """Register *value* so that no output mechanism prints it.

        Subclasses extend this to also mask the value in the environment's
        own logs.
        """
        get_output().register_secret(value)

    @abstractmethod
    def set_output(self, name: str, value: str) -> None:
        """Publish a named output value for later steps."""
        ...

    @abstractmethod
    def save_state(self, name: str, value: str) -> None:
        """Persist a value for the cleanup step of the same job."""
        ...

    @abstractmethod
    def get_state(self, name: str) -> Optional[str]:
        """Return a value saved by :meth:`save_state`, or ``None``."""
        ...


class GitHubActionsRuntime(Runtime):
    """Runtime backed by GitHub Actions environment variables and file commands.

    Args:
        environ: Environment mapping. Defaults to :data:`os.environ`.
    """

    name = "github-actions"

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get_input(self, name: str) -> Optional[str]:
        key = "INPUT_" + name.replace(" ", "_").upper()
        value = self._environ.get(key, "").strip()
        return value or None

    def set_secret(self, value: str) -> None:
        super().set_secret(value)
        if value:
            get_output().command("add-mask", value)

    def set_output(self, name: str, value: str) -> None:
        self._file_command("GITHUB_OUTPUT", "set-output", name, value)

    def save_state(self, name: str, value: str) -> None:
        self._file_command("GITHUB_STATE", "save-state", name, value)

    def get_state(self, name: str) -> Optional[str]:
        value = self._environ.get(f"STATE_{name}", "")
        return value or None

    def _file_command(self, env_var: str, legacy: str, name: str, value: str) -> None:
        """Append ``name<<delimiter`` / value / delimiter to the file in *env_var*.

        Falls back to the legacy ``::set-output`` style command when the
        runner does not provide the file.
        """
        file_path = self._environ.get(env_var)
        if not file_path:
            get_output().command(legacy, value, name=name)
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError(f"Unexpected input: delimiter {delimiter} found in value")
        try:
            with open(file_path, "a", encoding="utf-8") as fh:
                fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        except OSError as exc:
            raise FilesystemError(f"Cannot write to {env_var} file {file_path}: {exc}") from exc


class LocalRuntime(Runtime):
    """Runtime for local shells and non-Actions CI systems.

    Args:
        state_dir: Directory holding ``state.json``. Defaults to
            :func:`~mvnoauth.config.get_data_dir`.
    """

    name = "local"

    def __init__(self, state_dir: Optional[Path] = None) -> None:
        self._state_dir = state_dir

    @property
    def state_path(self) -> Path:
        """Path of the JSON state file."""
        base = self._state_dir if self._state_dir is not None else get_data_dir()
        return base / _STATE_FILENAME

    def set_output(self, name: str, value: str) -> None:
        get_output().print_data(f"{name}={value}")

    def save_state(self, name: str, value: str) -> None:
        state = self._load_state()
        state[name] = value
        path = self.state_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            atomic_write(path, json.dumps(state, indent=2) + "\n")
        except OSError as exc:
            raise FilesystemError(f"Cannot save state to {path}: {exc}") from exc

    def get_state(self, name: str) -> Optional[str]:
        return self._load_state().get(name) or None

    def clear_state(self, name: str) -> None:
        """Forget a saved value. Missing keys and unwritable files are ignored."""
        state = self._load_state()
        if name not in state:
            return
        del state[name]
        try:
            atomic_write(self.state_path, json.dumps(state, indent=2) + "\n")
        except OSError:
            get_output().debug(f"Could not update state file {self.state_path}")

    def _load_state(self) -> dict[str, str]:
        path = self.state_path
        if not path.is_file():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            get_output().debug(f"Ignoring unreadable state file {path}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}


def detect_runtime(environ: Optional[Mapping[str, str]] = None) -> Runtime:
    """Return the runtime matching the current environment.

    ``GITHUB_ACTIONS=true`` selects :class:`GitHubActionsRuntime`; anything
    else gets a :class:`LocalRuntime`.
    """
    env = os.environ if environ is None else environ
    if env.get("GITHUB_ACTIONS") == "true":
        return GitHubActionsRuntime(env)
    return LocalRuntime()
