"""Build state reducer - merges started/finished events into edge records.

Enforces:
- An edge id may not be started while a record for it is still running
- Every finish matches exactly one earlier, still-running start
- ``entries`` is append-only; identity fields never change after append
- A message that violates the protocol is not applied

``BuildState`` is single-writer: only the consumer that owns it calls
``apply()``.  Readers take frozen ``BuildSummary`` snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from buildwatch.core.derivation import compiler_name, explicit_inputs, output_paths
from buildwatch.models.messages import (
    BuildStatus,
    EdgeFinished,
    EdgeStarted,
    Message,
    StatusChanged,
    TotalEdgesHint,
)
from buildwatch.models.state import BuildSummary, EdgeOutcome, EdgeRecord

logger = logging.getLogger(__name__)


class ProtocolViolationError(RuntimeError):
    """Raised when a message breaks the start/finish pairing contract."""


class BuildState:
    """Authoritative in-memory reconstruction of one build run."""

    def __init__(self) -> None:
        self._entries: list[EdgeRecord] = []
        # edge_id -> index into _entries, for running edges only
        self._open: dict[int, int] = {}
        self._total_edges_hint = 0
        self._phase = BuildStatus.NOT_STARTED

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[EdgeRecord, ...]:
        return tuple(self._entries)

    @property
    def total_edges_hint(self) -> int:
        return self._total_edges_hint

    @property
    def phase(self) -> BuildStatus:
        return self._phase

    def __len__(self) -> int:
        return len(self._entries)

    def is_open(self, edge_id: int) -> bool:
        """Whether *edge_id* currently has a running record."""
        return edge_id in self._open

    def snapshot(self) -> BuildSummary:
        """Return a frozen view of the current state."""
        return BuildSummary(
            entries=tuple(self._entries),
            total_edges_hint=self._total_edges_hint,
            phase=self._phase,
        )

    # ------------------------------------------------------------------
    # Reducer
    # ------------------------------------------------------------------

    def apply(self, message: Message) -> None:
        """Apply one decoded message.

        Raises
        ------
        ProtocolViolationError
            On a start for an id that is already running, or a finish for
            an id with no running record.  State is left unchanged.
        """
        if isinstance(message, EdgeStarted):
            self._start_edge(message)
        elif isinstance(message, EdgeFinished):
            self._finish_edge(message)
        elif isinstance(message, TotalEdgesHint):
            self._total_edges_hint = message.total
            logger.debug("BuildState: total edges hint is now %d.", message.total)
        elif isinstance(message, StatusChanged):
            logger.debug(
                "BuildState: phase %s -> %s.",
                self._phase.value,
                message.status.value,
            )
            self._phase = message.status
        else:
            raise TypeError(f"Unsupported message type: {type(message).__name__}")

    def apply_all(self, messages: Iterable[Message]) -> None:
        """Apply *messages* in order, stopping at the first failure."""
        for message in messages:
            self.apply(message)

    def _start_edge(self, message: EdgeStarted) -> None:
        if message.edge_id in self._open:
            raise ProtocolViolationError(
                f"Edge {message.edge_id} started while already running "
                f"(entry #{self._open[message.edge_id]})."
            )

        record = EdgeRecord(
            id=message.edge_id,
            command=message.command,
            compiler=compiler_name(message.command),
            inputs=explicit_inputs(message.inputs),
            outputs=output_paths(message.outputs),
            start_time=message.start_time_millis,
        )
        self._open[message.edge_id] = len(self._entries)
        self._entries.append(record)
        logger.debug(
            "BuildState: edge %d started (%s).", record.id, record.compiler
        )

    def _finish_edge(self, message: EdgeFinished) -> None:
        index = self._open.get(message.edge_id)
        if index is None:
            raise ProtocolViolationError(
                f"Edge {message.edge_id} finished without a running start."
            )

        outcome = EdgeOutcome.SUCCEEDED if message.success else EdgeOutcome.FAILED
        self._entries[index] = self._entries[index].model_copy(
            update={
                "end_time": message.end_time_millis,
                "outcome": outcome,
                "captured_output": message.output,
            }
        )
        del self._open[message.edge_id]
        logger.debug(
            "BuildState: edge %d finished (%s).", message.edge_id, outcome.value
        )
