"""Canonical Pydantic models shared across mvnoauth modules.

**Input models** -- built once from the resolved configuration:
    :class:`TokenRequest` and :class:`RunConfig`.

**Response models** -- parsed from the token endpoint:
    :class:`TokenResponse`.

Secrets (the client secret and the access token) are held as
:class:`~pydantic.SecretStr` so that ``repr()`` and ``str()`` of a model
never expose them. Call ``get_secret_value()`` at the single point where the
plain value is needed.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

# Characters XML 1.0 cannot carry, even escaped.
_XML_ILLEGAL_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def has_xml_illegal_chars(value: str) -> bool:
    """Return ``True`` if *value* contains characters that XML 1.0 forbids."""
    return _XML_ILLEGAL_RE.search(value) is not None


def _normalise_scope(value: Optional[str]) -> Optional[str]:
    return value or None


# --- Token exchange ---


class TokenRequest(BaseModel):
    """Inputs of a single OAuth2 client-credentials exchange.

    Example::

        TokenRequest(
            token_url="https://auth.example.com/oauth/token",
            client_id="build-bot",
            client_secret="s3cret",
            scope="artifacts:read",
        )
    """

    model_config = ConfigDict(frozen=True)

    token_url: str = Field(min_length=1, description="Token endpoint URL")
    client_id: str = Field(min_length=1)
    client_secret: SecretStr
    scope: Optional[str] = Field(
        default=None, description="Space-separated scopes; empty means none"
    )

    @field_validator("client_secret")
    @classmethod
    def _secret_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("client_secret must not be empty")
        return value

    @field_validator("scope")
    @classmethod
    def _scope_empty_is_none(cls, value: Optional[str]) -> Optional[str]:
        return _normalise_scope(value)


class TokenResponse(BaseModel):
    """JSON body returned by the token endpoint.

    Only ``access_token`` is required for a usable response, and that check
    happens in :mod:`mvnoauth.auth.client_credentials` so the failure can be
    classified. Unknown fields are preserved in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    access_token: Optional[SecretStr] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None

    @field_validator("expires_in", mode="before")
    @classmethod
    def _lenient_expires_in(cls, value: Any) -> Optional[int]:
        # Informational only: drop values that are not a number of seconds.
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None


# --- Run configuration ---


class RunConfig(BaseModel):
    """Fully resolved inputs of one ``mvnoauth run`` invocation.

    Produced by :func:`mvnoauth.config.resolve_run_config`.
    """

    model_config = ConfigDict(frozen=True)

    token_url: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
    client_secret: SecretStr
    scope: Optional[str] = None
    server_id: str = Field(
        min_length=1, description="Maven server id matched against repository ids"
    )
    settings_path: Path

    @field_validator("scope")
    @classmethod
    def _scope_empty_is_none(cls, value: Optional[str]) -> Optional[str]:
        return _normalise_scope(value)

    @field_validator("server_id")
    @classmethod
    def _server_id_xml_safe(cls, value: str) -> str:
        if has_xml_illegal_chars(value):
            raise ValueError("server_id contains characters not allowed in XML")
        return value

    def token_request(self) -> TokenRequest:
        """Build the :class:`TokenRequest` for this run."""
        return TokenRequest(
            token_url=self.token_url,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=self.scope,
        )
