"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~mvnoauth.exceptions.MvnOAuthError` subclass.
CI steps can inspect the exit code to tell a rejected credential from an
unreachable token endpoint without parsing stderr.

Example::

    $ mvnoauth run --server-id internal
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the token endpoint rejected the client
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Required inputs are missing or invalid."""

EXIT_AUTH_FAILURE = 3
"""The token endpoint rejected the request or returned an unusable response."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_SETTINGS_ERROR = 7
"""A value could not be embedded in the settings document."""

EXIT_FILESYSTEM_ERROR = 8
"""The settings file or its directory could not be written."""
