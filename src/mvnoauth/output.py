"""Output system with strict stdout/stderr discipline and secret redaction.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (the settings path). This is what a
  calling script captures.
* **stderr** -- all diagnostics (status, warnings, errors). Never
  contaminates the data stream.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.
* **Redaction** -- values passed to :meth:`OutputManager.register_secret`
  are replaced by ``***`` in every line this module prints.
* **Annotations** -- under GitHub Actions, warnings, errors and debug lines
  are emitted as workflow commands so the runner renders them.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding Rich consoles, flags
   and the set of registered secrets. Created once in
   :func:`~mvnoauth.app.main_callback` and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape as escape_markup

REDACTED = "***"


def escape_command_data(value: str) -> str:
    """Escape a value for the data part of a GitHub Actions workflow command."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class OutputManager:
    """Central manager for all CLI output.

    Maintains a Rich :class:`~rich.console.Console` for stderr diagnostics
    and routes every output call to the correct stream. Every message is
    passed through :meth:`redact` first.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
        annotations: Emit warnings, errors and debug lines as GitHub Actions
            workflow commands on stdout.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        annotations: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._annotations = annotations
        self._secrets: set[str] = set()

        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
        )

    # ------------------------------------------------------------------ #
    # Secrets
    # ------------------------------------------------------------------ #

    def register_secret(self, value: str) -> None:
        """Redact *value* from every message printed from now on.

        Empty values are ignored. Each non-empty line of a multi-line value
        is registered separately, so a secret split across lines is still
        masked.
        """
        if not value:
            return
        self._secrets.add(value)
        for line in value.splitlines():
            if line.strip():
                self._secrets.add(line)

    def redact(self, message: str) -> str:
        """Return *message* with every registered secret replaced by ``***``."""
        # Longest first so a secret containing another is masked whole.
        for secret in sorted(self._secrets, key=len, reverse=True):
            message = message.replace(secret, REDACTED)
        return message

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout.

        Args:
            text: The string to write. A trailing newline is appended.
        """
        print(self.redact(text), file=sys.stdout, flush=True)

    def command(self, name: str, value: str = "", /, **properties: str) -> None:
        """Print a GitHub Actions workflow command (``::name k=v::value``) to stdout.

        *value* is not redacted: ``add-mask`` must carry the secret itself.
        """
        props = ",".join(
            f"{key}={escape_command_data(val).replace(':', '%3A').replace(',', '%2C')}"
            for key, val in properties.items()
        )
        head = f"::{name} {props}::" if props else f"::{name}::"
        print(f"{head}{escape_command_data(value)}", file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if not self._quiet:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        """Print a warning. NOT suppressed by ``--quiet``.

        Args:
            message: The warning text.
        """
        if self._annotations:
            self.command("warning", self.redact(message))
        elif self._no_color:
            self._emit(f"Warning: {message}")
        else:
            self._emit(message, prefix="[yellow]Warning:[/yellow] ")

    def error(self, message: str) -> None:
        """Print an error. Never suppressed.

        Args:
            message: The error text.
        """
        if self._annotations:
            self.command("error", self.redact(message))
        elif self._no_color:
            self._emit(f"Error: {message}")
        else:
            self._emit(message, prefix="[bold red]Error:[/bold red] ")

    def debug(self, message: str) -> None:
        """Print a debug message.

        Shown on stderr only when ``--verbose`` is active. With annotations
        enabled it is always sent as a ``::debug::`` command, which the
        runner displays when step debug logging is turned on.

        Args:
            message: The debug text (prefixed with ``[debug]`` on output).
        """
        if self._annotations:
            self.command("debug", self.redact(message))
        elif self._verbose:
            self._emit(f"[debug] {message}", style="dim")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _emit(self, message: str, style: Optional[str] = None, prefix: str = "") -> None:
        """Redact and print a diagnostic line to stderr."""
        text = self.redact(message)
        if self._no_color:
            print(text, file=sys.stderr, flush=True)
            return
        # Escape so brackets in messages are not read as Rich markup.
        markup = escape_markup(text)
        if style:
            markup = f"[{style}]{markup}[/{style}]"
        self._stderr.print(prefix + markup)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    ``OutputManager`` is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance.

    Called once during CLI startup from :func:`~mvnoauth.app.main_callback`.
    """
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning via the global OutputManager."""
    get_output().warning(message)


def debug(message: str) -> None:
    """Print debug message via the global OutputManager."""
    get_output().debug(message)


def register_secret(value: str) -> None:
    """Register a value for redaction with the global OutputManager."""
    get_output().register_secret(value)
