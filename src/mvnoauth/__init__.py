"""mvnoauth -- Maven settings with a short-lived OAuth2 bearer token.

This package obtains an access token with the OAuth2 client-credentials
grant and writes it into a Maven ``settings.xml`` as an ``Authorization``
header for one server id, so a build can reach a private repository
without secrets in source control or on the command line. The file is
removed again by ``mvnoauth cleanup``.

Typical workflow::

    mvnoauth run --server-id internal   # fetch token, write settings.xml
    mvn -s <settings-file> deploy
    mvnoauth cleanup                    # remove settings.xml

Modules:
    app: Typer application and CLI entry point.
    auth: OAuth2 client-credentials token acquisition.
    settings: Settings document rendering, writing and cleanup.
    runtime: GitHub Actions and local invoking environments.
    config: Input precedence, credential sources and directories.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr output with secret redaction.
"""

__version__ = "0.1.0"
