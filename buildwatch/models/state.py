"""Reconstructed build state - one record per edge plus run-wide counters.

``EdgeRecord`` and ``BuildSummary`` are frozen.  The reducer replaces a
record with an updated copy when its edge finishes; identity fields are
copied through untouched.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from buildwatch.models.messages import BuildStatus


class EdgeOutcome(str, Enum):
    """Tri-state result of a single edge."""

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class EdgeRecord(BaseModel):
    """The merged state of one build step.

    ``end_time``, a non-running ``outcome`` and ``captured_output`` are
    either all present or all absent.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    command: str
    compiler: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    start_time: int
    end_time: int | None = None
    outcome: EdgeOutcome = EdgeOutcome.RUNNING
    captured_output: str | None = None

    @model_validator(mode="after")
    def _check_completion_fields(self) -> EdgeRecord:
        running = self.outcome == EdgeOutcome.RUNNING
        if running != (self.end_time is None) or running != (
            self.captured_output is None
        ):
            raise ValueError(
                "end_time, outcome and captured_output must be set together"
            )
        return self

    @property
    def is_running(self) -> bool:
        return self.outcome == EdgeOutcome.RUNNING

    @property
    def duration_millis(self) -> int | None:
        """Elapsed time between start and finish, once finished."""
        if self.end_time is None:
            return None
        return self.end_time - self.start_time


class BuildSummary(BaseModel):
    """A frozen, point-in-time view of a monitored build.

    Produced by ``BuildState.snapshot()``.  ``entries`` is ordered by the
    arrival of each edge's start event.
    """

    model_config = ConfigDict(frozen=True)

    entries: tuple[EdgeRecord, ...] = ()
    total_edges_hint: int = 0
    phase: BuildStatus = BuildStatus.NOT_STARTED

    @property
    def running_edges(self) -> list[EdgeRecord]:
        """Edges that have started but not finished."""
        return [e for e in self.entries if e.outcome == EdgeOutcome.RUNNING]

    @property
    def failed_edges(self) -> list[EdgeRecord]:
        """Edges that finished unsuccessfully."""
        return [e for e in self.entries if e.outcome == EdgeOutcome.FAILED]

    @property
    def running_count(self) -> int:
        return len(self.running_edges)

    @property
    def failed_count(self) -> int:
        return len(self.failed_edges)

    @property
    def succeeded_count(self) -> int:
        return sum(1 for e in self.entries if e.outcome == EdgeOutcome.SUCCEEDED)

    @property
    def finished_count(self) -> int:
        """Edges in a terminal state (SUCCEEDED or FAILED)."""
        return len(self.entries) - self.running_count
