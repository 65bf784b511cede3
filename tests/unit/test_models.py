"""Tests for the message schema and the reconstructed state models."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from buildwatch.models.messages import (
    MESSAGE_ADAPTER,
    BuildStatus,
    EdgeFinished,
    EdgeStarted,
    InputBinding,
    InputKind,
    OutputKind,
    StatusChanged,
    TotalEdgesHint,
    encode_message,
)
from buildwatch.models.state import BuildSummary, EdgeOutcome, EdgeRecord


def _from_wire(record: dict):
    return MESSAGE_ADAPTER.validate_json(json.dumps(record))


class TestMessageSchema:
    def test_started_from_wire(self):
        msg = _from_wire(
            {
                "type": "build_edge_started",
                "edge_id": 3,
                "command": "cc -c x.c",
                "start_time_millis": 5,
                "inputs": [
                    {"path": "x.c", "kind": "explicit"},
                    {"path": "x.h", "kind": "implicit"},
                    {"path": "gen", "kind": "order_only"},
                ],
                "outputs": [{"path": "x.o", "kind": "explicit"}],
            }
        )
        assert isinstance(msg, EdgeStarted)
        assert [b.kind for b in msg.inputs] == [
            InputKind.EXPLICIT,
            InputKind.IMPLICIT,
            InputKind.ORDER_ONLY,
        ]
        assert msg.outputs[0].kind == OutputKind.EXPLICIT

    def test_started_defaults_to_no_bindings(self):
        msg = _from_wire(
            {
                "type": "build_edge_started",
                "edge_id": 1,
                "command": "true",
                "start_time_millis": 0,
            }
        )
        assert msg.inputs == []
        assert msg.outputs == []

    def test_each_type_selects_its_model(self):
        cases = {
            "build_edge_finished": (
                {"edge_id": 1, "end_time_millis": 2, "success": True, "output": ""},
                EdgeFinished,
            ),
            "total_edges": ({"total": 9}, TotalEdgesHint),
            "build_status_changed": ({"status": "running"}, StatusChanged),
        }
        for type_name, (fields, model) in cases.items():
            msg = _from_wire({"type": type_name, **fields})
            assert isinstance(msg, model), type_name

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            _from_wire({"type": "build_edge_paused", "edge_id": 1})

    def test_missing_field_rejected(self):
        with pytest.raises(ValidationError):
            _from_wire({"type": "total_edges"})

    def test_extra_fields_ignored(self):
        """Records carry fields the monitor does not read, e.g. finished.command."""
        msg = _from_wire(
            {
                "type": "build_edge_finished",
                "edge_id": 1,
                "command": "cc -c x.c",
                "end_time_millis": 2,
                "success": True,
                "output": "",
            }
        )
        assert msg == EdgeFinished(edge_id=1, end_time_millis=2, success=True, output="")
        assert not hasattr(msg, "command")

    def test_extra_binding_fields_ignored(self):
        msg = _from_wire(
            {
                "type": "build_edge_started",
                "edge_id": 1,
                "command": "cc",
                "start_time_millis": 0,
                "inputs": [{"path": "x.c", "kind": "explicit", "mtime": 12}],
            }
        )
        assert msg.inputs == [InputBinding(path="x.c", kind=InputKind.EXPLICIT)]

    @pytest.mark.parametrize(
        "fields",
        [
            {"edge_id": "7", "end_time_millis": 5, "success": True, "output": ""},
            {"edge_id": 7, "end_time_millis": "5", "success": True, "output": ""},
            {"edge_id": 7, "end_time_millis": 5, "success": "yes", "output": ""},
            {"edge_id": 7, "end_time_millis": 5, "success": 1, "output": ""},
            {"edge_id": 7.5, "end_time_millis": 5, "success": True, "output": ""},
            {"edge_id": 7, "end_time_millis": 5, "success": True, "output": 3},
        ],
    )
    def test_wrongly_typed_fields_rejected(self, fields):
        with pytest.raises(ValidationError):
            _from_wire({"type": "build_edge_finished", **fields})

    def test_string_total_rejected(self):
        with pytest.raises(ValidationError):
            _from_wire({"type": "total_edges", "total": "42"})

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            _from_wire(
                {"type": "build_status_changed", "status": "paused"}
            )

    def test_messages_are_frozen(self):
        msg = TotalEdgesHint(total=1)
        with pytest.raises(ValidationError):
            msg.total = 2

    def test_encode_message_is_single_json_line(self):
        msg = EdgeStarted(
            edge_id=4,
            command="ld -o app a.o",
            start_time_millis=10,
            inputs=[InputBinding(path="a.o")],
        )
        line = encode_message(msg)
        assert "\n" not in line
        data = json.loads(line)
        assert data["type"] == "build_edge_started"
        assert data["inputs"] == [{"path": "a.o", "kind": "explicit"}]
        assert MESSAGE_ADAPTER.validate_json(line) == msg


class TestEdgeRecord:
    def test_running_record_has_no_completion_fields(self):
        rec = EdgeRecord(id=1, command="cc", compiler="cc", start_time=0)
        assert rec.is_running
        assert rec.end_time is None
        assert rec.captured_output is None
        assert rec.duration_millis is None

    def test_finished_record_requires_all_completion_fields(self):
        with pytest.raises(ValidationError):
            EdgeRecord(
                id=1,
                command="cc",
                compiler="cc",
                start_time=0,
                outcome=EdgeOutcome.SUCCEEDED,
            )

    def test_running_record_rejects_end_time(self):
        with pytest.raises(ValidationError):
            EdgeRecord(id=1, command="cc", compiler="cc", start_time=0, end_time=5)

    def test_duration(self):
        rec = EdgeRecord(
            id=1,
            command="cc",
            compiler="cc",
            start_time=100,
            end_time=250,
            outcome=EdgeOutcome.FAILED,
            captured_output="boom",
        )
        assert rec.duration_millis == 150


class TestBuildSummary:
    def _record(self, edge_id: int, outcome: EdgeOutcome) -> EdgeRecord:
        if outcome == EdgeOutcome.RUNNING:
            return EdgeRecord(id=edge_id, command="cc", compiler="cc", start_time=0)
        return EdgeRecord(
            id=edge_id,
            command="cc",
            compiler="cc",
            start_time=0,
            end_time=1,
            outcome=outcome,
            captured_output="",
        )

    def test_defaults(self):
        summary = BuildSummary()
        assert summary.entries == ()
        assert summary.total_edges_hint == 0
        assert summary.phase == BuildStatus.NOT_STARTED

    def test_counters(self):
        summary = BuildSummary(
            entries=(
                self._record(1, EdgeOutcome.SUCCEEDED),
                self._record(2, EdgeOutcome.FAILED),
                self._record(3, EdgeOutcome.RUNNING),
                self._record(4, EdgeOutcome.SUCCEEDED),
            )
        )
        assert summary.succeeded_count == 2
        assert summary.failed_count == 1
        assert summary.running_count == 1
        assert summary.finished_count == 3
        assert [e.id for e in summary.failed_edges] == [2]
        assert [e.id for e in summary.running_edges] == [3]
