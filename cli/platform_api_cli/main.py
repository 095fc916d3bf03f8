from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from platform_api_client import ApiClientError, ApiClientTokenError, ConfigError

from . import console
from .http import ClientOverrides, make_client, parse_headers
from .logging_ import setup_logging

app = typer.Typer(
    name="platform-api",
    help="Call the platform API with client-credentials auth.",
    no_args_is_help=True,
)


@app.callback()
def _main(
        ctx: typer.Context,
        verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
        base_url: str | None = typer.Option(None, "--base-url", help="API base URL (env PLATFORM_API_BASE_URL)."),
        client_id: str | None = typer.Option(None, "--client-id", help="OAuth client id (env NYPL_OAUTH_ID)."),
        client_secret: str | None = typer.Option(
            None, "--client-secret", help="OAuth client secret (env NYPL_OAUTH_SECRET)."
        ),
        oauth_url: str | None = typer.Option(None, "--oauth-url", help="OAuth server URL (env NYPL_OAUTH_URL)."),
        log_level: str | None = typer.Option(None, "--log-level", help="Client log level (default info)."),
):
    setup_logging(verbose, log_level)
    ctx.obj = ClientOverrides(
        base_url=base_url,
        client_id=client_id,
        client_secret=client_secret,
        oauth_url=oauth_url,
        log_level=log_level,
    )


def _read_body(raw: str, *, as_json: bool) -> Any:
    text = Path(raw[1:]).read_text(encoding="utf-8") if raw.startswith("@") else raw
    return json.loads(text) if as_json else text


def _run(ctx: typer.Context, call) -> None:
    try:
        client = make_client(ctx.obj)
    except ConfigError as e:
        console.err(str(e))
        raise typer.Exit(code=2)

    try:
        data = call(client)
    except ApiClientTokenError as e:
        console.err(f"Unauthorized: {e}")
        raise typer.Exit(code=3)
    except ApiClientError as e:
        console.err(str(e))
        raise typer.Exit(code=1)
    finally:
        client.close()

    console.print_json(data)


@app.command("get")
def get_cmd(
        ctx: typer.Context,
        path: str = typer.Argument(..., help="Path relative to the base URL."),
        no_auth: bool = typer.Option(False, "--no-auth", help="Send without a bearer token."),
        header: list[str] = typer.Option([], "-H", "--header", help="Extra header, 'Name: value'."),
):
    """GET a path and print the JSON response."""
    try:
        headers = parse_headers(header)
    except ValueError as e:
        console.err(str(e))
        raise typer.Exit(code=2)

    options = {"authenticated": not no_auth, "headers": headers}
    _run(ctx, lambda client: client.fetch(path, options))


@app.command("post")
def post_cmd(
        ctx: typer.Context,
        path: str = typer.Argument(..., help="Path relative to the base URL."),
        body: str = typer.Argument(..., help="JSON body, or @file to read it from a file."),
        no_auth: bool = typer.Option(False, "--no-auth", help="Send without a bearer token."),
        header: list[str] = typer.Option([], "-H", "--header", help="Extra header, 'Name: value'."),
):
    """POST a body and print the JSON response.

    With a custom Content-Type header the body is sent as-is instead of as JSON.
    """
    try:
        headers = parse_headers(header)
        raw_body = any(k.lower() == "content-type" for k in headers)
        payload = _read_body(body, as_json=not raw_body)
    except (ValueError, OSError) as e:
        console.err(str(e))
        raise typer.Exit(code=2)

    options = {"authenticated": not no_auth, "headers": headers}
    _run(ctx, lambda client: client.submit(path, payload, options))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
