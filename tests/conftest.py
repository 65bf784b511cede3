"""Shared test fixtures for Buildwatch."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from buildwatch.core.build_state import BuildState
from buildwatch.models.messages import (
    BuildStatus,
    EdgeFinished,
    EdgeStarted,
    InputBinding,
    InputKind,
    MessageBase,
    OutputBinding,
    OutputKind,
    StatusChanged,
    TotalEdgesHint,
    encode_message,
)


@pytest.fixture
def build_state() -> BuildState:
    """Provide an empty BuildState."""
    return BuildState()


# ---------------------------------------------------------------------------
# Message factories - shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_started() -> Callable[..., EdgeStarted]:
    """Factory fixture: build an EdgeStarted for a compile of a.cpp -> a.o."""

    def _factory(edge_id: int = 1, **overrides: Any) -> EdgeStarted:
        defaults: dict[str, Any] = {
            "edge_id": edge_id,
            "command": "g++ -c a.cpp -o a.o",
            "start_time_millis": 1000,
            "inputs": [InputBinding(path="a.cpp", kind=InputKind.EXPLICIT)],
            "outputs": [OutputBinding(path="a.o", kind=OutputKind.EXPLICIT)],
        }
        defaults.update(overrides)
        return EdgeStarted(**defaults)

    return _factory


@pytest.fixture
def make_finished() -> Callable[..., EdgeFinished]:
    """Factory fixture: build a successful EdgeFinished."""

    def _factory(edge_id: int = 1, **overrides: Any) -> EdgeFinished:
        defaults: dict[str, Any] = {
            "edge_id": edge_id,
            "end_time_millis": 1050,
            "success": True,
            "output": "",
        }
        defaults.update(overrides)
        return EdgeFinished(**defaults)

    return _factory


@pytest.fixture
def sample_messages(
    make_started: Callable[..., EdgeStarted],
    make_finished: Callable[..., EdgeFinished],
) -> list[MessageBase]:
    """A short, well-formed build: two edges, one of which fails."""
    return [
        StatusChanged(status=BuildStatus.RUNNING),
        TotalEdgesHint(total=2),
        make_started(1),
        make_started(
            2,
            command="/usr/bin/clang -c b.c -o b.o",
            start_time_millis=1010,
            inputs=[
                InputBinding(path="src/b.c", kind=InputKind.EXPLICIT),
                InputBinding(path="include/b.h", kind=InputKind.IMPLICIT),
            ],
            outputs=[OutputBinding(path="out/b.o")],
        ),
        make_finished(2, end_time_millis=1200, success=False, output="b.c:1: error"),
        make_finished(1, end_time_millis=1300),
        StatusChanged(status=BuildStatus.FINISHED),
    ]


@pytest.fixture
def write_log(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write messages (or raw strings) as a JSON-lines log."""

    def _factory(records: list[MessageBase | str], name: str = "build.jsonl") -> Path:
        path = tmp_path / name
        lines = [r if isinstance(r, str) else encode_message(r) for r in records]
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path

    return _factory
