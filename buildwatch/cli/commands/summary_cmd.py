"""``buildwatch summary LOG_FILE`` - replay a saved log and print the result.

Non-interactive: the whole log is applied in order and a single summary
panel is printed.  Any decode or protocol failure stops the replay; the
state reached before it is still printed.
"""

from __future__ import annotations

from contextlib import closing
from pathlib import Path

import typer
from rich.console import Console

from buildwatch.bridge.sources import SourceUnavailableError, open_log_file
from buildwatch.config import config
from buildwatch.core.build_state import BuildState, ProtocolViolationError
from buildwatch.core.ingestor import DecodeError, iter_messages
from buildwatch.logging_setup import configure_logging
from buildwatch.monitor.renderer import MonitorRenderer

console = Console()


def summary_cmd(
    log_file: Path = typer.Argument(
        ...,
        help="Path to a saved structured build log.",
    ),
    failed_only: bool = typer.Option(
        False,
        "--failed",
        "-f",
        help="Print the captured output of every failed edge after the summary.",
    ),
) -> None:
    """Print a summary of a saved structured build log."""
    configure_logging(config.log_level, config.log_file)

    try:
        lines = open_log_file(log_file)
    except SourceUnavailableError as exc:
        console.print(f"[bold red]Source unavailable:[/bold red] {exc}")
        raise typer.Exit(code=1)

    state = BuildState()
    renderer = MonitorRenderer(console=console)
    error: Exception | None = None
    try:
        with closing(lines):
            state.apply_all(iter_messages(lines))
    except (DecodeError, ProtocolViolationError, OSError) as exc:
        error = exc

    summary = state.snapshot()
    renderer.print_summary(summary)

    if failed_only:
        for record in summary.failed_edges:
            console.rule(f"[red]{record.compiler}[/red] (edge {record.id})")
            console.print(record.command, markup=False)
            console.print(record.captured_output or "", markup=False)

    if error is not None:
        if isinstance(error, DecodeError):
            label = "Malformed build log"
        elif isinstance(error, ProtocolViolationError):
            label = "Protocol violation"
        else:
            label = "Read error"
        console.print(f"[bold red]{label}:[/bold red] {error}")
        raise typer.Exit(code=1)
