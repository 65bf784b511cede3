"""Buildwatch: live monitor for a build engine's structured event stream.

Reads ``ninja -d structlog`` output (live, or replayed from a saved log),
merges each edge's started/finished events into one record, and shows the
build's progress in an interactive Rich terminal view.
"""

__version__ = "0.1.0"
__description__ = "Live monitor for ninja structured build logs"

from buildwatch.core.build_state import BuildState, ProtocolViolationError
from buildwatch.core.ingestor import DecodeError, decode_line, iter_messages
from buildwatch.bridge.channel import MessageChannel
from buildwatch.bridge.sources import SourceUnavailableError
from buildwatch.monitor.session import MonitorSession

__all__ = [
    "BuildState",
    "DecodeError",
    "MessageChannel",
    "MonitorSession",
    "ProtocolViolationError",
    "SourceUnavailableError",
    "decode_line",
    "iter_messages",
    "__version__",
]
