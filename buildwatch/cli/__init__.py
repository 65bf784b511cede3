"""Buildwatch CLI - Typer-based command-line interface.

Provides the ``buildwatch`` command with subcommands for watching a build
live and summarising a saved structured log.

All output uses Rich for formatted terminal display.
"""
