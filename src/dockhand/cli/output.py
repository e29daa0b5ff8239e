"""CLI output formatting using rich."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dockhand.stream import LogFrame, StreamType
from dockhand.transport import IncomingResponse

console = Console()
err_console = Console(stderr=True)


STREAM_COLORS = {
    StreamType.STDIN: "cyan",
    StreamType.STDOUT: "green",
    StreamType.STDERR: "red",
}


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_error(message: str) -> None:
    err_console.print(f"[red]error:[/red] {message}", highlight=False)


def print_status(response: IncomingResponse) -> None:
    color = "green" if response.status_code < 400 else "red"
    err_console.print(
        f"[{color}]{response.status_code}[/{color}] {response.reason_phrase}",
        highlight=False,
    )


def print_text(text: str) -> None:
    console.print(text, end="", markup=False, highlight=False)


def print_frames(frames: list[LogFrame]) -> None:
    if not frames:
        console.print("[dim]No frames.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Stream")
    table.add_column("Bytes", justify="right")
    table.add_column("Payload")

    for i, frame in enumerate(frames):
        color = STREAM_COLORS[frame.stream]
        name = frame.stream.name.lower()
        preview = frame.text
        if preview is None:
            preview = "[dim]<binary>[/dim]"
        else:
            preview = escape(preview.rstrip("\n"))
        table.add_row(str(i), f"[{color}]{name}[/{color}]", str(len(frame.payload)), preview)

    console.print(table)
