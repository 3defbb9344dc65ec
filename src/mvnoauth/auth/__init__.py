"""OAuth2 client-credentials token acquisition.

See Also:
    :class:`~mvnoauth.auth.client_credentials.TokenAcquirer`
"""

from mvnoauth.auth.client_credentials import (
    TokenAcquirer,
    build_token_form,
    fetch_access_token,
)

__all__ = ["TokenAcquirer", "build_token_form", "fetch_access_token"]
