"""Best-effort removal of a generated settings file.

Runs after the build. A failure here does not affect the build result, so
it is reported as a warning and never raised.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from mvnoauth.output import info, warning


def remove_settings_file(path: Union[str, Path]) -> bool:
    """Delete *path* if it exists.

    Returns:
        ``True`` if a file was removed, ``False`` if there was nothing to
        remove or removal failed.
    """
    settings_path = Path(path)
    try:
        if not settings_path.exists():
            return False
        info(f"Cleaning up settings file: {settings_path}")
        settings_path.unlink()
    except OSError as exc:
        warning(f"Failed to cleanup settings file: {exc}")
        return False
    info("Settings file cleaned up successfully")
    return True
