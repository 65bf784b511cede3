"""Rich terminal renderer for the build monitor.

Turns a ``BuildSummary`` plus the current selection into Rich renderables:
the edge list, the selected edge's captured output, its dependency paths,
and a one-line status bar.  ``render_live`` drives a ``MonitorSession``
under ``Rich.Live``.

Color scheme
------------
- default   : RUNNING / SUCCEEDED
- red       : FAILED
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from buildwatch.core.derivation import file_label
from buildwatch.models.messages import BuildStatus
from buildwatch.models.state import BuildSummary, EdgeOutcome, EdgeRecord

if TYPE_CHECKING:
    from buildwatch.monitor.session import MonitorSession


# ---------------------------------------------------------------------------
# Outcome / phase -> Rich style mapping
# ---------------------------------------------------------------------------

_OUTCOME_STYLES: dict[EdgeOutcome, str] = {
    EdgeOutcome.RUNNING: "",
    EdgeOutcome.SUCCEEDED: "",
    EdgeOutcome.FAILED: "on red",
}

_PHASE_LABELS: dict[BuildStatus, str] = {
    BuildStatus.NOT_STARTED: "Not started",
    BuildStatus.RUNNING: "Running",
    BuildStatus.FINISHED: "Finished",
}

HIGHLIGHT_SYMBOL = ">> "


def edge_line(record: EdgeRecord) -> str:
    """One-line description: ``compiler: inputs -> outputs``."""
    inputs = ", ".join(file_label(p) for p in record.inputs)
    outputs = ", ".join(file_label(p) for p in record.outputs)
    return f"{record.compiler}: {inputs} -> {outputs}"


def status_line(summary: BuildSummary) -> str:
    """Status bar text: phase, edges seen, and the engine's total estimate."""
    return (
        f" {_PHASE_LABELS[summary.phase]} - "
        f"{len(summary.entries)} / {summary.total_edges_hint}"
    )


class MonitorRenderer:
    """Renders ``BuildSummary`` snapshots as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Pieces
    # ------------------------------------------------------------------

    def edge_list(
        self,
        summary: BuildSummary,
        selected: int | None,
        *,
        max_rows: int | None = None,
    ) -> Panel:
        """Edge list with the selected row reversed and marked ``>>``.

        When *max_rows* is given only a window of rows around the selection
        is shown.
        """
        entries = summary.entries
        start, stop = 0, len(entries)
        if max_rows is not None and len(entries) > max_rows:
            anchor = selected if selected is not None else 0
            start = min(max(anchor - max_rows // 2, 0), len(entries) - max_rows)
            stop = start + max_rows

        lines: list[Text] = []
        for index in range(start, stop):
            record = entries[index]
            style = _OUTCOME_STYLES[record.outcome]
            if index == selected:
                style = f"{style} reverse".strip()
                prefix = HIGHLIGHT_SYMBOL
            else:
                prefix = " " * len(HIGHLIGHT_SYMBOL)
            lines.append(Text(prefix + edge_line(record), style=style, no_wrap=True))

        return Panel(Group(*lines), title="Log entries", border_style="blue")

    def output_panel(self, record: EdgeRecord | None) -> Panel:
        """Captured output of the selected edge (empty while it runs)."""
        body = ""
        if record is not None and record.captured_output is not None:
            body = record.captured_output
        return Panel(Text(body), title="Log Output")

    def dependency_table(self, record: EdgeRecord | None) -> Panel:
        """Full input and output paths of the selected edge."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Kind", style="dim", width=7)
        table.add_column("Path")
        if record is not None:
            for path in record.inputs:
                table.add_row("input", path)
            for path in record.outputs:
                table.add_row("output", path)
        return Panel(table, title="Dependencies")

    # ------------------------------------------------------------------
    # Full screen
    # ------------------------------------------------------------------

    def render_screen(
        self,
        summary: BuildSummary,
        selected: int | None,
        *,
        height: int | None = None,
    ) -> Layout:
        """Compose the full monitor screen."""
        selected_record = summary.entries[selected] if selected is not None else None

        # Half the screen for the list, minus borders and status bar.
        max_rows = None
        if height is not None:
            max_rows = max((height - 1) // 2 - 2, 1)

        layout = Layout()
        layout.split_column(
            Layout(name="main"),
            Layout(Text(status_line(summary), style="bright_black"), name="status", size=1),
        )
        layout["main"].split_row(
            Layout(name="log", ratio=7),
            Layout(self.dependency_table(selected_record), name="dependencies", ratio=3),
        )
        layout["log"].split_column(
            Layout(self.edge_list(summary, selected, max_rows=max_rows), name="entries"),
            Layout(self.output_panel(selected_record), name="output"),
        )
        return layout

    def render_summary(self, summary: BuildSummary) -> Panel:
        """Render a completed (or partial) build as a single summary panel."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("#", style="dim", width=5, justify="right")
        table.add_column("Edge", min_width=30)
        table.add_column("Outcome", min_width=10, justify="center")
        table.add_column("Time (ms)", justify="right", width=10)

        for i, record in enumerate(summary.entries):
            if record.outcome == EdgeOutcome.FAILED:
                outcome = "[bold red]FAILED[/bold red]"
            elif record.outcome == EdgeOutcome.SUCCEEDED:
                outcome = "[green]ok[/green]"
            else:
                outcome = "[yellow]running[/yellow]"
            duration = record.duration_millis
            table.add_row(
                str(i),
                Text(edge_line(record)),
                outcome,
                str(duration) if duration is not None else "[dim]-[/dim]",
            )

        parts = [
            f"[bold]Phase:[/bold] {_PHASE_LABELS[summary.phase]}",
            f"[bold]Edges:[/bold] {len(summary.entries)}/{summary.total_edges_hint}",
            f"[bold]Succeeded:[/bold] {summary.succeeded_count}",
        ]
        if summary.failed_count:
            parts.append(f"[bold red]Failed:[/bold red] {summary.failed_count}")
        if summary.running_count:
            parts.append(f"[yellow][bold]Running:[/bold] {summary.running_count}[/yellow]")

        return Panel(
            Group(table, Text(""), Text.from_markup("  |  ".join(parts))),
            title="[bold]Build Summary[/bold]",
            border_style="blue",
            padding=(1, 2),
        )

    # ------------------------------------------------------------------
    # Continuous live rendering
    # ------------------------------------------------------------------

    def render_live(
        self,
        session: MonitorSession,
        *,
        refresh_per_second: float = 10.0,
    ) -> None:
        """Run *session* to completion under ``Rich.Live``.

        Redraws after every session step.  Returns when quit is requested;
        session failures propagate after the last consistent frame is shown.
        """
        with Live(
            console=self.console,
            refresh_per_second=refresh_per_second,
            screen=True,
            auto_refresh=False,
        ) as live:

            def _draw(s: MonitorSession) -> None:
                live.update(
                    self.render_screen(
                        s.summary, s.selected, height=self.console.size.height
                    ),
                    refresh=True,
                )

            session.run(_draw)

    def print_summary(self, summary: BuildSummary) -> None:
        """Print a single summary panel to the console."""
        self.console.print(self.render_summary(summary))
