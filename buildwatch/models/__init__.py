"""Buildwatch data models - all Pydantic v2, all frozen (immutable)."""

from buildwatch.models.messages import (
    MESSAGE_ADAPTER,
    BuildStatus,
    EdgeFinished,
    EdgeStarted,
    InputBinding,
    InputKind,
    Message,
    MessageBase,
    OutputBinding,
    OutputKind,
    StatusChanged,
    TotalEdgesHint,
    encode_message,
)
from buildwatch.models.state import BuildSummary, EdgeOutcome, EdgeRecord

__all__ = [
    # messages
    "InputKind",
    "OutputKind",
    "BuildStatus",
    "InputBinding",
    "OutputBinding",
    "MessageBase",
    "EdgeStarted",
    "EdgeFinished",
    "TotalEdgesHint",
    "StatusChanged",
    "Message",
    "MESSAGE_ADAPTER",
    "encode_message",
    # state
    "EdgeOutcome",
    "EdgeRecord",
    "BuildSummary",
]
