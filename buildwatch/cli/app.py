"""Main Typer application - imports and registers all CLI commands.

Entry point: ``buildwatch`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from buildwatch import __version__
from buildwatch.cli.commands.summary_cmd import summary_cmd
from buildwatch.cli.commands.watch_cmd import watch_cmd

app = typer.Typer(
    name="buildwatch",
    help="Buildwatch: live monitor for ninja structured build logs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(
    name="watch",
    help="Watch a build live (spawns ninja, or replays --log-file).",
    context_settings={"ignore_unknown_options": True},
)(watch_cmd)
app.command(name="summary", help="Summarise a saved structured build log.")(summary_cmd)


@app.command(name="version", help="Show the buildwatch version.")
def version_cmd() -> None:
    """Print the installed version."""
    typer.echo(f"buildwatch {__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
