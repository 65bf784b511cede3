"""Message channel - hands decoded messages from a reader thread to the consumer.

Bridge boundary
---------------
The producer side (a line source that may block on file or pipe reads)
runs on its own daemon thread and only ever touches the channel.  The
consumer side owns ``BuildState`` and calls ``drain()``, which never
blocks: it returns whatever has arrived, in arrival order.

The queue is unbounded so a slow consumer never stalls the reader.  When
the producer ends (EOF, process exit) the channel closes; closure is not an
error and ``drain()`` keeps returning ``[]``.  When the producer fails
(``DecodeError`` or a read error) the failure is queued behind the messages
decoded before it and raised by ``drain()`` once those have been returned.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterable

from buildwatch.core.ingestor import iter_messages
from buildwatch.models.messages import Message

logger = logging.getLogger(__name__)


class ChannelClosedError(RuntimeError):
    """Raised when a producer pushes into a channel it already closed."""


class _EndOfStream:
    """Marker queued after the producer's last message."""

    __slots__ = ("error",)

    def __init__(self, error: BaseException | None) -> None:
        self.error = error


class MessageChannel:
    """Unbounded, ordered, single-consumer message channel.

    Parameters
    ----------
    name:
        Label used in log lines and for the reader thread.
    """

    def __init__(self, name: str = "build-log") -> None:
        self._name = name
        self._queue: queue.SimpleQueue[Message | _EndOfStream] = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._closed = False
        # Consumer-side view: set once drain() has seen the end marker.
        self._exhausted = False
        self._error: BaseException | None = None
        self._reader: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        """``True`` once the producer has ended, successfully or not."""
        return self._closed

    @property
    def exhausted(self) -> bool:
        """``True`` once the consumer has drained past the end of the stream."""
        return self._exhausted

    @property
    def failed(self) -> bool:
        """``True`` once the consumer has reached a producer failure."""
        return self._error is not None

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def push(self, message: Message) -> None:
        """Enqueue one message.  Never blocks."""
        with self._lock:
            if self._closed:
                raise ChannelClosedError(f"Channel {self._name!r} is closed.")
            self._queue.put(message)

    def close(self, error: BaseException | None = None) -> None:
        """End the supply of messages, optionally recording why it failed.

        Closing twice is a no-op.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_EndOfStream(error))
        if error is None:
            logger.info("Channel %s: producer finished.", self._name)
        else:
            logger.error("Channel %s: producer failed: %s", self._name, error)

    def start_reader(self, lines: Iterable[bytes | str]) -> threading.Thread:
        """Decode *lines* on a daemon thread, pushing each message.

        The thread closes the channel when the lines run out or decoding
        fails, then closes *lines* if it has a ``close()`` method.  Returns
        the started thread.
        """
        if self._reader is not None:
            raise RuntimeError(f"Channel {self._name!r} already has a reader.")

        def _run() -> None:
            try:
                for message in iter_messages(lines):
                    self.push(message)
            except (ValueError, OSError) as exc:
                self.close(exc)
            else:
                self.close()
            finally:
                # Release the file or pipe even when decoding stopped early.
                close_source = getattr(lines, "close", None)
                if close_source is not None:
                    close_source()

        self._reader = threading.Thread(
            target=_run, name=f"{self._name}-reader", daemon=True
        )
        self._reader.start()
        return self._reader

    def join(self, timeout: float | None = None) -> None:
        """Wait for the reader thread, if any, to finish."""
        if self._reader is not None:
            self._reader.join(timeout)

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    def drain(self) -> list[Message]:
        """Return every message currently available, without blocking.

        Raises
        ------
        DecodeError | OSError
            The producer's failure, once every message queued before it
            has been returned by an earlier (or this) call.
        """
        messages: list[Message] = []
        while not self._exhausted:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if isinstance(item, _EndOfStream):
                self._exhausted = True
                self._error = item.error
                break
            messages.append(item)

        if not messages and self._error is not None:
            raise self._error
        return messages

    def __repr__(self) -> str:
        if self._exhausted:
            status = "failed" if self._error is not None else "exhausted"
        elif self._closed:
            status = "closed"
        else:
            status = "open"
        return f"MessageChannel(name={self._name!r}, status={status})"
