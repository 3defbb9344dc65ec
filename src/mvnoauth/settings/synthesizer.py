"""Render a Maven ``settings.xml`` carrying a bearer token and write it to disk.

The document holds exactly one ``<server>`` whose ``<id>`` is the caller's
server identifier and whose HTTP headers carry
``Authorization: Bearer <token>``. Maven matches the id against the
``<repository>`` / ``<distributionManagement>`` ids of the build and sends
the header with every request to that repository.

Rendering goes through a Jinja2 template with XML autoescaping, so neither
value can break the document structure. Writing is atomic (see
:func:`mvnoauth.config.atomic_write`) and the resulting file is readable by
its owner only.

See Also:
    :mod:`mvnoauth.settings.cleanup` for removing the file after the build.
"""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from mvnoauth.config import atomic_write
from mvnoauth.exceptions import FilesystemError, SettingsError
from mvnoauth.models import has_xml_illegal_chars
from mvnoauth.output import debug, info

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``settings/templates/``)."""

SETTINGS_TEMPLATE = "settings.xml.j2"

PathT = TypeVar("PathT", bound=Union[str, Path])

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(enabled_extensions=("xml.j2",), default=True),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
)


def render_settings(token: str, server_id: str) -> str:
    """Render the settings document for a single server.

    Args:
        token: Bearer token placed after ``Bearer `` in the header value.
        server_id: Maven server id.

    Returns:
        The XML document as text.

    Raises:
        SettingsError: If either value is empty or contains characters XML
            1.0 cannot represent.
    """
    if not server_id:
        raise SettingsError("Server id must not be empty")
    if not token:
        raise SettingsError("Access token must not be empty")
    if has_xml_illegal_chars(server_id):
        raise SettingsError("Server id contains characters not allowed in XML")
    if has_xml_illegal_chars(token):
        raise SettingsError("Access token contains characters not allowed in XML")

    template = _env.get_template(SETTINGS_TEMPLATE)
    return template.render(server_id=server_id, token=token)


def write_settings(token: str, server_id: str, target_path: PathT) -> PathT:
    """Render the settings document and write it to *target_path*.

    Missing parent directories are created. An existing file is replaced.

    Args:
        token: Bearer token to embed.
        server_id: Maven server id to embed.
        target_path: Destination file, absolute or relative.

    Returns:
        *target_path*, unchanged.

    Raises:
        SettingsError: If the values cannot be embedded.
        FilesystemError: If the directory or the file cannot be written.
    """
    document = render_settings(token, server_id)
    path = Path(target_path)

    parent = path.parent
    if not parent.is_dir():
        debug(f"Creating directory {parent}")
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Cannot create directory {parent}: {exc}") from exc

    try:
        atomic_write(path, document)
    except OSError as exc:
        raise FilesystemError(f"Cannot write settings file {path}: {exc}") from exc

    info(f"Maven settings for server '{server_id}' written to {path}")
    return target_path
