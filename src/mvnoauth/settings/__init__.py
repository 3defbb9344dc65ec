"""Maven settings document generation and cleanup.

See Also:
    :func:`~mvnoauth.settings.synthesizer.write_settings`
    :func:`~mvnoauth.settings.cleanup.remove_settings_file`
"""

from mvnoauth.settings.cleanup import remove_settings_file
from mvnoauth.settings.synthesizer import render_settings, write_settings

__all__ = ["remove_settings_file", "render_settings", "write_settings"]
