"""Structured build-log messages - the wire schema of ``ninja -d structlog``.

Every line of the event stream is one JSON object.  The ``type`` field
selects the message shape; each shape is a frozen Pydantic model and the
full set is a discriminated union (``Message``).  Unknown ``type`` values,
missing fields and wrongly typed fields fail validation; validation is
strict, so ``"7"`` is not an integer and ``"yes"`` is not a boolean.
Fields the schema does not name are ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class InputKind(str, Enum):
    """How an edge depends on one of its input paths."""

    EXPLICIT = "explicit"
    IMPLICIT = "implicit"  # discovered, e.g. from a depfile
    ORDER_ONLY = "order_only"


class OutputKind(str, Enum):
    """How an edge produces one of its output paths."""

    EXPLICIT = "explicit"
    IMPLICIT = "implicit"


class BuildStatus(str, Enum):
    """Overall phase of the monitored build."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"


class InputBinding(BaseModel):
    """A path read by an edge, tagged with its dependency kind."""

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    path: str
    kind: InputKind = InputKind.EXPLICIT


class OutputBinding(BaseModel):
    """A path produced by an edge."""

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    path: str
    kind: OutputKind = OutputKind.EXPLICIT


class MessageBase(BaseModel):
    """Fields and config shared by every message shape."""

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)


class EdgeStarted(MessageBase):
    """An edge began executing its command."""

    type: Literal["build_edge_started"] = "build_edge_started"
    edge_id: int
    command: str
    start_time_millis: int
    inputs: list[InputBinding] = []
    outputs: list[OutputBinding] = []


class EdgeFinished(MessageBase):
    """A running edge completed; ``output`` is its combined stdout/stderr."""

    type: Literal["build_edge_finished"] = "build_edge_finished"
    edge_id: int
    end_time_millis: int
    success: bool
    output: str


class TotalEdgesHint(MessageBase):
    """The build engine's current estimate of how many edges it will run."""

    type: Literal["total_edges"] = "total_edges"
    total: int


class StatusChanged(MessageBase):
    """The build as a whole moved to a new phase."""

    type: Literal["build_status_changed"] = "build_status_changed"
    status: BuildStatus


Message = Annotated[
    Union[EdgeStarted, EdgeFinished, TotalEdgesHint, StatusChanged],
    Field(discriminator="type"),
]

MESSAGE_ADAPTER: TypeAdapter[Message] = TypeAdapter(Message)


def encode_message(message: MessageBase) -> str:
    """Serialize a message to a single JSON line (no trailing newline)."""
    return message.model_dump_json()
