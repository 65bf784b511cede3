"""``buildwatch watch`` - interactive live monitor for a build.

Either replays a saved structured log (``--log-file``) or spawns the build
engine with structured logging and watches its output.  Keys: ``j``/Down
and ``k``/Up move the selection, ``q``/Esc quits.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from buildwatch.bridge.channel import MessageChannel
from buildwatch.bridge.sources import (
    BuildProcess,
    SourceUnavailableError,
    open_log_file,
    spawn_build,
)
from buildwatch.config import config
from buildwatch.core.build_state import ProtocolViolationError
from buildwatch.core.ingestor import DecodeError
from buildwatch.logging_setup import configure_logging
from buildwatch.monitor.keys import start_key_reader
from buildwatch.monitor.renderer import MonitorRenderer
from buildwatch.monitor.session import MonitorSession

console = Console()


def watch_cmd(
    ninja_args: Optional[List[str]] = typer.Argument(
        None,
        help="Extra arguments passed to the build engine (after --).",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        "-l",
        help="Replay a saved structured log instead of running a build.",
    ),
    ninja_binary: Optional[str] = typer.Option(
        None,
        "--ninja-binary",
        help="Build engine executable (default from BUILDWATCH_NINJA_BINARY).",
    ),
    build_dir: Optional[Path] = typer.Option(
        None,
        "--build-dir",
        "-C",
        help="Directory to run the build in.",
    ),
    poll_ms: Optional[int] = typer.Option(
        None,
        "--poll-ms",
        help="Maximum wait for a key press between redraws, in milliseconds.",
    ),
) -> None:
    """Watch a build live.

    State is rebuilt from the event stream as it arrives; the screen is
    redrawn whenever a key is pressed or the poll interval elapses.
    """
    configure_logging(config.log_level, config.log_file)

    process: BuildProcess | None = None
    try:
        if log_file is not None:
            lines = open_log_file(log_file)
        else:
            process = spawn_build(
                ninja_binary or config.ninja_binary,
                build_dir or config.build_dir,
                ninja_args or [],
            )
            lines = process.lines()
    except SourceUnavailableError as exc:
        console.print(f"[bold red]Source unavailable:[/bold red] {exc}")
        raise typer.Exit(code=1)

    channel = MessageChannel(name=str(log_file) if log_file else "build")
    channel.start_reader(lines)

    poll_seconds = (
        poll_ms / 1000.0 if poll_ms is not None else config.poll_interval_seconds
    )
    session = MonitorSession(channel, poll_interval=poll_seconds)
    renderer = MonitorRenderer(console=console)

    try:
        start_key_reader(session)
        renderer.render_live(session, refresh_per_second=config.refresh_per_second)
    except DecodeError as exc:
        console.print(f"[bold red]Malformed build log:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except ProtocolViolationError as exc:
        console.print(f"[bold red]Protocol violation:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except OSError as exc:
        console.print(f"[bold red]Read error:[/bold red] {exc}")
        raise typer.Exit(code=1)
    finally:
        if process is not None:
            process.terminate()

    summary = session.summary
    console.print(
        f"[dim]{len(summary.entries)} edges, {summary.failed_count} failed.[/dim]"
    )
