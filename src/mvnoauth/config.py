"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles everything a run needs before it talks to the network:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.mvnoauth/`` on macOS and Windows. See :func:`get_data_dir`.
* **Atomic writes** -- :func:`atomic_write` writes through a temp file in the
  target directory and renames it into place, so readers never observe a
  half-written file.
* **Precedence resolution** -- :func:`resolve_run_config` merges CLI flags,
  ``MVNOAUTH_*`` environment variables, runtime inputs (GitHub Actions
  ``INPUT_*`` variables) and defaults into a :class:`~mvnoauth.models.RunConfig`.
* **Credential resolution** -- :func:`resolve_credential` reads the client
  secret from an env var, a file, or an interactive prompt.
"""

from __future__ import annotations

import getpass
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Optional

from pydantic import ValidationError

from mvnoauth.exceptions import ConfigError
from mvnoauth.models import RunConfig

if TYPE_CHECKING:
    from mvnoauth.runtime import Runtime

_APP_NAME = "mvnoauth"
_ENV_PREFIX = "MVNOAUTH_"
_DEFAULT_SETTINGS_NAME = "settings.xml"

SETTINGS_PATH_INPUT = "maven-settings-path"
"""Runtime input naming the settings file, shared with the cleanup command."""

# field name -> (environment variable suffix, runtime input name)
_INPUT_SOURCES: dict[str, tuple[str, str]] = {
    "token_url": ("TOKEN_URL", "token-url"),
    "client_id": ("CLIENT_ID", "client-id"),
    "client_secret": ("CLIENT_SECRET", "client-secret"),
    "scope": ("SCOPE", "scope"),
    "server_id": ("SERVER_ID", "server-id"),
    "settings_path": ("SETTINGS_PATH", SETTINGS_PATH_INPUT),
}

_REQUIRED = ("token_url", "client_id", "client_secret", "server_id")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def get_data_dir() -> Path:
    """Return the data directory (local state, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/mvnoauth/`` (default ``~/.local/share/mvnoauth/``).
    On macOS/Windows: ``~/.mvnoauth/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_settings_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the settings path used when none is configured.

    Prefers the runner's scratch directory (``RUNNER_TEMP``) so the file
    never lands in the workspace or in ``~/.m2``.
    """
    env = os.environ if environ is None else environ
    base = env.get("RUNNER_TEMP") or tempfile.gettempdir()
    return Path(base) / _APP_NAME / _DEFAULT_SETTINGS_NAME


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. ``tempfile`` creates
    it with owner-only permissions, which the renamed file keeps. On any
    failure the temp file is removed and the original error re-raised.

    The parent directory must already exist.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Args:
        source: The source descriptor string.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Client secret: ")

    raise ConfigError(
        f"Unknown credential source format: {source!r} "
        "(expected env:VAR, file:/path or prompt)"
    )


# --- Precedence resolution ---


def _lookup(
    field: str,
    environ: Mapping[str, str],
    runtime: Optional[Runtime],
) -> Optional[str]:
    """Return *field* from the environment, then the runtime inputs."""
    env_suffix, input_name = _INPUT_SOURCES[field]
    value = environ.get(_ENV_PREFIX + env_suffix, "").strip()
    if value:
        return value
    if runtime is not None:
        return runtime.get_input(input_name)
    return None


def resolve_settings_path(
    cli_settings_path: Optional[str] = None,
    runtime: Optional[Runtime] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Resolve the settings path with the same precedence as :func:`resolve_run_config`."""
    env = os.environ if environ is None else environ
    raw = cli_settings_path or _lookup("settings_path", env, runtime)
    if not raw:
        return default_settings_path(env)
    return Path(raw).expanduser()


def resolve_run_config(
    cli_token_url: Optional[str] = None,
    cli_client_id: Optional[str] = None,
    cli_client_secret_source: Optional[str] = None,
    cli_scope: Optional[str] = None,
    cli_server_id: Optional[str] = None,
    cli_settings_path: Optional[str] = None,
    runtime: Optional[Runtime] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """Resolve every run input with full precedence chain.

    Precedence (high to low):
        1. CLI flags (the ``cli_*`` arguments)
        2. Environment variables (``MVNOAUTH_TOKEN_URL`` and friends)
        3. Runtime inputs (``token-url``, ``client-id``, ... under Actions)
        4. Defaults (settings path only)

    The client secret has no literal CLI form: ``cli_client_secret_source``
    is a descriptor handed to :func:`resolve_credential`.

    Returns:
        The validated :class:`~mvnoauth.models.RunConfig`.

    Raises:
        ConfigError: If required inputs are missing, the secret source cannot
            be resolved, or a value fails validation.
    """
    env = os.environ if environ is None else environ

    values: dict[str, Optional[str]] = {
        "token_url": cli_token_url,
        "client_id": cli_client_id,
        "scope": cli_scope,
        "server_id": cli_server_id,
    }
    for field, value in values.items():
        value = value.strip() if value else None
        values[field] = value or _lookup(field, env, runtime)

    if cli_client_secret_source:
        values["client_secret"] = resolve_credential(cli_client_secret_source)
    else:
        values["client_secret"] = _lookup("client_secret", env, runtime)

    missing = [field for field in _REQUIRED if not values.get(field)]
    if missing:
        names = ", ".join(
            f"{_INPUT_SOURCES[f][1]} ({_ENV_PREFIX}{_INPUT_SOURCES[f][0]})"
            for f in missing
        )
        raise ConfigError(f"Missing required inputs: {names}")

    try:
        return RunConfig(
            **values,
            settings_path=resolve_settings_path(cli_settings_path, runtime, env),
        )
    except ValidationError as exc:
        # Build the message from field locations only; the input echo could
        # contain the client secret.
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from None
