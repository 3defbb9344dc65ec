"""``mvnoauth cleanup`` -- remove the settings file written by ``mvnoauth run``."""

from __future__ import annotations

from typing import Optional

import typer

from mvnoauth.commands import get_runtime
from mvnoauth.config import resolve_settings_path
from mvnoauth.exceptions import MvnOAuthError
from mvnoauth.output import debug, warning
from mvnoauth.runtime import SETTINGS_FILE_KEY, LocalRuntime
from mvnoauth.settings import remove_settings_file


def cleanup_command(
    ctx: typer.Context,
    settings_path: Optional[str] = typer.Option(
        None, "--settings-path", help="Settings file to remove."
    ),
) -> None:
    """Remove the generated settings file if it still exists.

    The path comes from ``--settings-path``, else from the state saved by
    ``mvnoauth run``, else from the configured settings path. Failures are
    reported as warnings and the command always exits 0.
    """
    runtime = get_runtime(ctx)
    try:
        target = (
            settings_path
            or runtime.get_state(SETTINGS_FILE_KEY)
            or str(resolve_settings_path(runtime=runtime))
        )
    except (MvnOAuthError, OSError) as exc:
        warning(f"Cannot determine settings file to clean up: {exc}")
        return

    debug(f"Cleanup target: {target}")
    remove_settings_file(target)

    if isinstance(runtime, LocalRuntime):
        try:
            runtime.clear_state(SETTINGS_FILE_KEY)
        except OSError as exc:
            debug(f"Could not clear saved state: {exc}")
