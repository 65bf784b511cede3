"""Line ingestor - decodes a structured build log, one message per line.

Every non-blank line must decode to exactly one ``Message``.  A line that
does not is fatal: ``DecodeError`` is raised and nothing after it is read.
End of stream simply ends iteration.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from pydantic import ValidationError

from buildwatch.models.messages import MESSAGE_ADAPTER, Message

logger = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Raised when a log line is not a valid structured message."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def decode_line(line: bytes | str, *, line_number: int | None = None) -> Message:
    """Decode one JSON line into its message model.

    Raises
    ------
    DecodeError
        If the line is not UTF-8, not JSON, has an unknown ``type``, or
        has missing or malformed fields.
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"Invalid UTF-8: {exc}", line_number=line_number
            ) from exc

    try:
        return MESSAGE_ADAPTER.validate_json(line)
    except ValidationError as exc:
        raise DecodeError(
            f"Invalid message: {exc}", line_number=line_number
        ) from exc


def iter_messages(lines: Iterable[bytes | str]) -> Iterator[Message]:
    """Yield decoded messages from *lines* in arrival order.

    Lines are pulled lazily, so a live pipe is read one message at a time.
    Blank lines are skipped.
    """
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        yield decode_line(line, line_number=number)
    logger.debug("Ingestor: end of stream.")
