"""Shared test fixtures for mvnoauth.

Provides fixtures for isolating the environment and data directory,
managing output state, faking the token endpoint, and simulating a GitHub
Actions runner. These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from mvnoauth.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove variables that change how a run resolves its inputs.

    Tests may themselves run on a GitHub Actions runner, where
    ``GITHUB_ACTIONS`` and friends are set.
    """
    prefixes = ("MVNOAUTH_", "INPUT_", "STATE_")
    names = ("GITHUB_ACTIONS", "GITHUB_OUTPUT", "GITHUB_STATE", "RUNNER_TEMP", "NO_COLOR")
    for var in list(os.environ):
        if var.startswith(prefixes) or var in names:
            monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a reference to sys.stderr at creation time.
    When Typer's CliRunner redirects the stream during a test, the cached
    reference goes stale. Resetting forces a fresh manager on next use.
    """
    yield
    reset_output()


@pytest.fixture
def isolated_data(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the data directory at ``tmp_path/data`` and chdir into tmp_path.

    Returns:
        The data directory mvnoauth will use (``tmp_path/data/mvnoauth``).
    """
    monkeypatch.setattr("mvnoauth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    return tmp_path / "data" / "mvnoauth"


@pytest.fixture
def actions_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, Path]:
    """Simulate a GitHub Actions step with output and state files.

    Returns:
        A dict with the ``output`` and ``state`` file paths.
    """
    output_file = tmp_path / "github_output"
    state_file = tmp_path / "github_state"
    output_file.touch()
    state_file.touch()
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
    monkeypatch.setenv("GITHUB_STATE", str(state_file))
    monkeypatch.setenv("RUNNER_TEMP", str(tmp_path / "runner_temp"))
    return {"output": output_file, "state": state_file}


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a colourless output manager that prints everything, debug included."""
    output = OutputManager(no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Token endpoint fixtures
# ---------------------------------------------------------------------------


def make_token_client(
    body: Any = None,
    status_code: int = 200,
    captured: Optional[list[httpx.Request]] = None,
    raises: Optional[Callable[[httpx.Request], Exception]] = None,
) -> httpx.Client:
    """Build an httpx.Client whose transport answers like a token endpoint.

    Args:
        body: JSON body to return. Defaults to a standard token response.
        status_code: HTTP status to return.
        captured: If given, every request is appended to this list.
        raises: Factory producing an exception to raise instead of
            answering, given the request.
    """
    if body is None:
        body = {"access_token": "mock-access-token", "token_type": "Bearer", "expires_in": 3600}

    def handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        if raises is not None:
            raise raises(request)
        return httpx.Response(status_code, json=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def token_client_factory() -> Callable[..., httpx.Client]:
    """Expose :func:`make_token_client` to tests as a fixture."""
    return make_token_client
