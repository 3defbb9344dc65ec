"""``mvnoauth run`` -- fetch a token and write the Maven settings file.

Typical workflow::

    export MVNOAUTH_CLIENT_SECRET=...
    mvnoauth run --token-url https://auth.example.com/oauth/token \\
        --client-id build-bot --server-id internal-releases
    mvn -s "$SETTINGS_FILE" deploy
    mvnoauth cleanup
"""

from __future__ import annotations

from typing import Optional

import typer

from mvnoauth.auth import TokenAcquirer
from mvnoauth.commands import get_runtime
from mvnoauth.config import resolve_run_config
from mvnoauth.exceptions import MvnOAuthError, OAuthServerError
from mvnoauth.output import debug, error, success
from mvnoauth.runtime import SETTINGS_FILE_KEY
from mvnoauth.settings import write_settings


def run_command(
    ctx: typer.Context,
    token_url: Optional[str] = typer.Option(
        None, "--token-url", help="OAuth2 token endpoint URL."
    ),
    client_id: Optional[str] = typer.Option(
        None, "--client-id", help="OAuth2 client id."
    ),
    client_secret_source: Optional[str] = typer.Option(
        None,
        "--client-secret-source",
        help="Where to read the client secret: env:VAR, file:/path or prompt.",
    ),
    scope: Optional[str] = typer.Option(
        None, "--scope", help="Space-separated OAuth2 scopes."
    ),
    server_id: Optional[str] = typer.Option(
        None, "--server-id", help="Maven server id to attach the token to."
    ),
    settings_path: Optional[str] = typer.Option(
        None, "--settings-path", help="Where to write settings.xml."
    ),
) -> None:
    """Fetch an access token and write a Maven settings file that uses it.

    Every option can also come from a ``MVNOAUTH_*`` environment variable
    or, under GitHub Actions, from the step inputs. The client secret and
    the token are registered as secrets before anything is printed. The
    settings path is published as the ``settings-file`` output and saved
    for ``mvnoauth cleanup``.

    Raises:
        typer.Exit: With the error's exit code when any step fails.
    """
    runtime = get_runtime(ctx)
    debug(f"Runtime: {runtime.name}")

    try:
        config = resolve_run_config(
            cli_token_url=token_url,
            cli_client_id=client_id,
            cli_client_secret_source=client_secret_source,
            cli_scope=scope,
            cli_server_id=server_id,
            cli_settings_path=settings_path,
            runtime=runtime,
        )
        runtime.set_secret(config.client_secret.get_secret_value())

        token = TokenAcquirer().fetch(config.token_request())
        runtime.set_secret(token)

        path = write_settings(token, config.server_id, config.settings_path)
        runtime.save_state(SETTINGS_FILE_KEY, str(path))
        runtime.set_output(SETTINGS_FILE_KEY, str(path))
    except OAuthServerError as exc:
        error(str(exc))
        if exc.body:
            debug(f"Response body: {exc.body}")
        raise typer.Exit(code=exc.exit_code) from None
    except MvnOAuthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Maven settings ready: {path}")
