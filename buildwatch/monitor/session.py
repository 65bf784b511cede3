"""MonitorSession - the consumer side of the monitor.

The session owns the ``BuildState`` and is its only writer.  Each call to
``step()``:

1. drains every message the channel has ready and applies it in order;
2. waits a bounded time (``poll_interval``) for one interaction request;
3. handles that request, if any.

The caller re-renders after each step.  The wait is always bounded so new
build events keep showing up while the user is idle.
"""

from __future__ import annotations

import logging
import queue
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from buildwatch.bridge.channel import MessageChannel
from buildwatch.core.build_state import BuildState
from buildwatch.models.state import BuildSummary, EdgeRecord

logger = logging.getLogger(__name__)


class Interaction(BaseModel):
    """A request from the input handler: move the selection, or quit."""

    model_config = ConfigDict(frozen=True)

    offset: int = 0
    quit: bool = False


NEXT = Interaction(offset=1)
PREVIOUS = Interaction(offset=-1)
QUIT = Interaction(quit=True)


class MonitorSession:
    """Single-threaded consumer loop over a ``MessageChannel``.

    Parameters
    ----------
    channel:
        Source of decoded messages.  May already be closed.
    poll_interval:
        Upper bound, in seconds, on each wait for an interaction.
    """

    def __init__(self, channel: MessageChannel, *, poll_interval: float = 0.1) -> None:
        self._channel = channel
        self._poll_interval = poll_interval
        self._state = BuildState()
        self._interactions: queue.SimpleQueue[Interaction] = queue.SimpleQueue()
        self._selected: int | None = None
        self._summary: BuildSummary | None = None
        self._quit = False

    # ------------------------------------------------------------------
    # Query surface
    # ------------------------------------------------------------------

    @property
    def channel(self) -> MessageChannel:
        return self._channel

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def state(self) -> BuildState:
        return self._state

    @property
    def summary(self) -> BuildSummary:
        """Frozen snapshot of the state, rebuilt only after changes."""
        if self._summary is None:
            self._summary = self._state.snapshot()
        return self._summary

    @property
    def selected(self) -> int | None:
        """Index of the selected entry, or ``None`` while there are none."""
        return self._selected

    @property
    def selected_entry(self) -> EdgeRecord | None:
        if self._selected is None:
            return None
        return self.summary.entries[self._selected]

    @property
    def quit_requested(self) -> bool:
        return self._quit

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def select_relative(self, offset: int) -> int | None:
        """Move the selection by *offset*, clamped to the entry range."""
        count = len(self._state)
        if count == 0:
            self._selected = None
        else:
            current = self._selected if self._selected is not None else 0
            self._selected = min(max(current + offset, 0), count - 1)
        return self._selected

    def request(self, interaction: Interaction) -> None:
        """Queue an interaction.  Safe to call from any thread."""
        self._interactions.put(interaction)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def pump(self) -> int:
        """Apply every message the channel has ready.  Never blocks.

        Returns the number of messages applied.  Decode and protocol
        failures propagate; messages applied before them stay applied.
        """
        messages = self._channel.drain()
        applied = 0
        try:
            for message in messages:
                self._state.apply(message)
                applied += 1
        finally:
            if applied:
                self._summary = None
                if self._selected is None:
                    self._selected = 0 if len(self._state) else None
        return applied

    def step(self, timeout: float | None = None) -> bool:
        """Run one loop iteration.  Returns ``False`` once quit is requested."""
        self.pump()

        wait = self._poll_interval if timeout is None else timeout
        try:
            interaction = self._interactions.get(timeout=wait)
        except queue.Empty:
            return not self._quit

        if interaction.quit:
            logger.debug("Session: quit requested.")
            self._quit = True
        elif interaction.offset:
            self.select_relative(interaction.offset)
        return not self._quit

    def run(self, render: Callable[[MonitorSession], None]) -> None:
        """Step until quit, calling *render* after every iteration."""
        render(self)
        while self.step():
            render(self)
