"""Built-in mvnoauth commands.

Each module exposes a command function that :mod:`mvnoauth.app` registers
on the root Typer application.
"""

from __future__ import annotations

import typer

from mvnoauth.runtime import Runtime, detect_runtime


def get_runtime(ctx: typer.Context) -> Runtime:
    """Return the runtime stored by the root callback, detecting one if absent."""
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    runtime = obj.get("runtime")
    return runtime if runtime is not None else detect_runtime()
