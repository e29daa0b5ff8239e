"""dockhand CLI application."""

from __future__ import annotations

import asyncio
import functools
import json
from pathlib import Path

import typer

from dockhand import stream
from dockhand.cli.output import (
    console,
    print_error,
    print_frames,
    print_status,
    print_text,
    setup_logging,
)
from dockhand.client import DockerClient
from dockhand.config import load_config
from dockhand.errors import APIError, DockhandError
from dockhand.host import TCP, resolve_host

app = typer.Typer(
    name="dockhand",
    help="Talk HTTP to a Docker daemon over its Unix socket.",
    no_args_is_help=True,
)


def run_async(coro):
    """Run an async coroutine from sync typer commands."""
    return asyncio.run(coro)


def handle_errors(func):
    """Decorator to catch common client errors."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except APIError as e:
            print_error(f"{e.status_code}: {e}")
            raise typer.Exit(1) from None
        except DockhandError as e:
            print_error(f"{e.kind.value}: {e}")
            raise typer.Exit(1) from None
    return wrapper


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers = {}
    for value in values:
        name, colon, rest = value.partition(":")
        if not colon or not name.strip():
            raise typer.BadParameter(f"expected NAME:VALUE, got {value!r}", param_hint="--header")
        headers[name.strip()] = rest.strip()
    return headers


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each exchange"),
):
    """Talk HTTP to a Docker daemon over its Unix socket."""
    setup_logging(verbose)


@app.command()
@handle_errors
def resolve(
    host: str = typer.Argument(None, help="Docker host string (default: DOCKER_HOST or config)"),
):
    """Show the connection target a host string resolves to."""
    target = resolve_host(host or load_config().host)
    if isinstance(target, TCP):
        console.print(f"[bold]tcp[/bold] {target.base_url}", highlight=False)
    else:
        console.print(f"[bold]unix[/bold] {target.path}", highlight=False)


@app.command()
@handle_errors
def request(
    method: str = typer.Argument(..., help="HTTP method"),
    path: str = typer.Argument(..., help="API path without version, e.g. /containers/json"),
    data: str = typer.Option(None, "--data", "-d", help="JSON request body"),
    header: list[str] = typer.Option([], "--header", "-H", help="Extra header NAME:VALUE"),
    host: str = typer.Option(None, "--host", help="Docker host string"),
    include_stderr: bool = typer.Option(
        False, "--stderr", help="Include stderr when the body is a multiplexed stream"
    ),
):
    """Send one request and print the response body."""
    headers = _parse_headers(header)
    body = None
    if data is not None:
        try:
            body = json.loads(data)
        except ValueError as e:
            raise typer.BadParameter(f"invalid JSON: {e}", param_hint="--data") from None

    async def _request():
        async with DockerClient(host) as docker:
            response = await docker.request(method, path, json=body, headers=headers)
            print_status(response)
            print_text(docker.read_output(response, include_stderr=include_stderr))

    run_async(_request())


@app.command()
@handle_errors
def demux(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved multiplexed stream"),
    include_stderr: bool = typer.Option(False, "--stderr", help="Include stderr frames"),
    frames: bool = typer.Option(False, "--frames", help="Show a table of frames instead of text"),
    strict: bool = typer.Option(False, "--strict", help="Fail on malformed frames"),
):
    """Decode a saved multiplexed log/exec stream."""
    buffer = file.read_bytes()
    if frames:
        print_frames(stream.decode(buffer, strict=strict))
        return
    if strict:
        stream.decode(buffer, strict=True)
    print_text(stream.text(buffer, include_stderr=include_stderr))


@app.command()
def config():
    """Show the effective configuration."""
    cfg = load_config()
    for k, v in cfg._asdict().items():
        console.print(f"[bold]{k}[/bold] = {v}", highlight=False)
