"""OAuth2 Client Credentials token acquisition.

This module provides :class:`TokenAcquirer`, which performs the
non-interactive Client Credentials grant (:rfc:`6749` section 4.4),
exchanging a ``client_id`` and ``client_secret`` for an access token at the
configured ``token_url``.

The exchange is a single fail-fast POST: no retries, no caching and no
timeout beyond the httpx default. Every failure is raised as one of the
:class:`~mvnoauth.exceptions.OAuthError` subclasses so the caller can tell a
rejected client from an unreachable endpoint.

Neither the client secret nor the returned token is ever passed to the
output layer.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import ValidationError

from mvnoauth.exceptions import (
    OAuthNetworkError,
    OAuthRequestError,
    OAuthResponseError,
    OAuthServerError,
)
from mvnoauth.models import TokenRequest, TokenResponse
from mvnoauth.output import debug, info

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Failures raised before anything reached the wire.
_DISPATCH_ERRORS = (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError)


def build_token_form(request: TokenRequest) -> dict[str, str]:
    """Return the ordered form fields for *request*.

    ``scope`` is only present when the request carries a non-empty scope.
    """
    form: dict[str, str] = {
        "grant_type": "client_credentials",
        "client_id": request.client_id,
        "client_secret": request.client_secret.get_secret_value(),
    }
    if request.scope:
        form["scope"] = request.scope
    return form


class TokenAcquirer:
    """Fetch access tokens with the OAuth2 Client Credentials grant.

    Args:
        client: Optional :class:`httpx.Client` to send the request with.
            When omitted, a client is created for each :meth:`fetch` call
            and closed afterwards. Tests inject a client built on
            :class:`httpx.MockTransport`.
    """

    def __init__(self, client: Optional[httpx.Client] = None) -> None:
        self._client = client

    def fetch(self, request: TokenRequest) -> str:
        """Exchange the client credentials for an access token.

        Args:
            request: Endpoint and credentials for the exchange.

        Returns:
            The ``access_token`` value from the token response.

        Raises:
            OAuthServerError: The endpoint answered with a non-success status.
            OAuthNetworkError: The request was sent but no response arrived.
            OAuthRequestError: The request could not be built or dispatched.
            OAuthResponseError: The response was not JSON or had no
                ``access_token``.
        """
        debug(
            f"Requesting access token from {request.token_url} "
            f"(scope: {request.scope or 'none'})"
        )
        if self._client is not None:
            response = self._post(self._client, request)
        else:
            with httpx.Client() as client:
                response = self._post(client, request)

        token_response = self._parse(response)
        assert token_response.access_token is not None  # checked in _parse

        details = []
        if token_response.token_type:
            details.append(f"type {token_response.token_type}")
        if token_response.expires_in is not None:
            details.append(f"expires in {token_response.expires_in}s")
        suffix = f" ({', '.join(details)})" if details else ""
        info(f"Access token obtained{suffix}")

        return token_response.access_token.get_secret_value()

    def _post(self, client: httpx.Client, request: TokenRequest) -> httpx.Response:
        """Send the token request and map transport failures to OAuth errors."""
        try:
            response = client.post(
                request.token_url,
                data=build_token_form(request),
                headers={
                    "Content-Type": FORM_CONTENT_TYPE,
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise OAuthServerError(exc.response.status_code, exc.response.text) from exc
        except _DISPATCH_ERRORS as exc:
            raise OAuthRequestError(f"OAuth request could not be sent: {exc}") from exc
        except httpx.TransportError as exc:
            debug(f"Transport error: {type(exc).__name__}: {exc}")
            raise OAuthNetworkError() from exc
        except httpx.HTTPError as exc:
            raise OAuthRequestError(f"OAuth request failed: {exc}") from exc
        return response

    def _parse(self, response: httpx.Response) -> TokenResponse:
        """Parse the JSON body and require a non-empty ``access_token``."""
        try:
            token_response = TokenResponse.model_validate(response.json())
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError both land here.
            kind = "invalid" if isinstance(exc, ValidationError) else "not valid JSON"
            raise OAuthResponseError(f"OAuth response was {kind}") from None

        if (
            token_response.access_token is None
            or not token_response.access_token.get_secret_value()
        ):
            raise OAuthResponseError("OAuth response missing access_token")
        return token_response


def fetch_access_token(
    token_url: str,
    client_id: str,
    client_secret: str,
    scope: Optional[str] = None,
    *,
    client: Optional[httpx.Client] = None,
) -> str:
    """Convenience wrapper: build a :class:`TokenRequest` and fetch a token.

    Raises:
        OAuthRequestError: If the arguments do not form a valid request.
        OAuthError: Any failure of :meth:`TokenAcquirer.fetch`.
    """
    try:
        request = TokenRequest(
            token_url=token_url,
            client_id=client_id,
            client_secret=client_secret,
            scope=scope,
        )
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise OAuthRequestError(f"Invalid token request: {fields}") from None
    return TokenAcquirer(client).fetch(request)
