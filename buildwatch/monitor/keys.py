"""Keyboard input for the live monitor.

A daemon thread reads single key presses with ``click.getchar`` and turns
them into session interactions.  The session never waits on the keyboard
directly; it polls its interaction queue with a bounded timeout.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import click

from buildwatch.monitor.session import NEXT, PREVIOUS, QUIT, Interaction, MonitorSession

logger = logging.getLogger(__name__)

KEY_BINDINGS: dict[str, Interaction] = {
    "j": NEXT,
    "\x1b[B": NEXT,  # down arrow
    "k": PREVIOUS,
    "\x1b[A": PREVIOUS,  # up arrow
    "q": QUIT,
    "\x1b": QUIT,  # escape
}


def interaction_for_key(key: str) -> Interaction | None:
    """Map one key press to an interaction, or ``None`` if unbound."""
    return KEY_BINDINGS.get(key)


def start_key_reader(
    session: MonitorSession,
    getchar: Callable[[], str] = click.getchar,
) -> threading.Thread:
    """Forward key presses to *session* until a quit key is read."""

    def _run() -> None:
        while True:
            try:
                key = getchar()
            except (EOFError, KeyboardInterrupt):
                session.request(QUIT)
                return
            interaction = interaction_for_key(key)
            if interaction is None:
                continue
            session.request(interaction)
            if interaction.quit:
                return

    thread = threading.Thread(target=_run, name="key-reader", daemon=True)
    thread.start()
    logger.debug("Keys: reader thread started.")
    return thread
