"""Typer application and CLI entry point for mvnoauth.

This module wires together the top-level Typer application and registers
the ``run`` and ``cleanup`` commands.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`mvnoauth.runtime`: Environment detection used by both commands.
    :mod:`mvnoauth.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from mvnoauth import __version__
from mvnoauth.commands.cleanup import cleanup_command
from mvnoauth.commands.run import run_command
from mvnoauth.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="mvnoauth",
    help="Write a Maven settings.xml carrying an OAuth2 client-credentials token.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)

app.command("run")(run_command)
app.command("cleanup")(cleanup_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"mvnoauth {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Detects the invoking environment, installs the global
    :class:`~mvnoauth.output.OutputManager` (with workflow-command
    annotations under GitHub Actions) and stores the runtime in
    ``ctx.obj`` for the sub-commands.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from mvnoauth.output import OutputManager, set_output
    from mvnoauth.runtime import GitHubActionsRuntime, detect_runtime

    runtime = detect_runtime()
    set_output(
        OutputManager(
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            annotations=isinstance(runtime, GitHubActionsRuntime),
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["runtime"] = runtime


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from mvnoauth.config import get_data_dir
    from mvnoauth.output import get_output

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(get_output().redact(traceback.format_exc()), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``mvnoauth`` console script.

    Expected failures are handled inside the commands, which exit with the
    error's code. Anything else produces a crash log and a generic failure
    exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from mvnoauth.exceptions import MvnOAuthError
        from mvnoauth.output import error

        if isinstance(exc, MvnOAuthError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)


if __name__ == "__main__":
    main()
