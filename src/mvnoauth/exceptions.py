"""Exception hierarchy for mvnoauth.

All exceptions inherit from :class:`MvnOAuthError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`mvnoauth.exit_codes`.
Commands catch ``MvnOAuthError``, print the message and exit with the
matching code. Every error is fatal for the run except during cleanup,
which downgrades filesystem problems to warnings.

Subclass hierarchy::

    MvnOAuthError (exit 1)
    +-- ConfigError              (exit 2)
    +-- OAuthError               (exit 3)
    |   +-- OAuthServerError     (exit 3)
    |   +-- OAuthRequestError    (exit 3)
    |   +-- OAuthResponseError   (exit 3)
    |   +-- OAuthNetworkError    (exit 6)
    +-- SettingsError            (exit 7)
    +-- FilesystemError          (exit 8)
"""

from mvnoauth.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_FILESYSTEM_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SETTINGS_ERROR,
)


class MvnOAuthError(Exception):
    """Base exception for all mvnoauth errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`mvnoauth.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(MvnOAuthError):
    """Raised for missing or invalid inputs and unresolvable credential sources."""

    exit_code = EXIT_INVALID_USAGE


class OAuthError(MvnOAuthError):
    """Base class for failures of the client-credentials exchange."""

    exit_code = EXIT_AUTH_FAILURE


class OAuthServerError(OAuthError):
    """Raised when the token endpoint answers with a non-success status.

    Args:
        status: The HTTP status code returned by the endpoint.
        body: The raw response body, kept for diagnostics. It is not part of
            the message.
    """

    def __init__(self, status: int, body: str = ""):
        super().__init__(f"OAuth request failed with status {status}")
        self.status = status
        self.body = body


class OAuthNetworkError(OAuthError):
    """Raised when the request was sent but no response came back."""

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, message: str = "No response received from OAuth server"):
        super().__init__(message)


class OAuthRequestError(OAuthError):
    """Raised when the token request could not be built or dispatched."""


class OAuthResponseError(OAuthError):
    """Raised when a successful response lacks a usable ``access_token``."""


class SettingsError(MvnOAuthError):
    """Raised when a value cannot be represented in the settings document."""

    exit_code = EXIT_SETTINGS_ERROR


class FilesystemError(MvnOAuthError):
    """Raised when the settings directory or file cannot be written."""

    exit_code = EXIT_FILESYSTEM_ERROR
