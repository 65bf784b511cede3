"""Line sources for the monitor - a saved log file or a live build process.

Both return raw byte-line iterators for ``MessageChannel.start_reader``;
UTF-8 decoding happens in the ingestor so a bad line is a ``DecodeError``
with its line number.  Failure to open the file or spawn the process raises
``SourceUnavailableError`` before any monitoring starts.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import IO, Any

logger = logging.getLogger(__name__)

# Debug mode that makes ninja emit one JSON event per line on stdout.
STRUCTLOG_FLAGS: tuple[str, ...] = ("-d", "structlog")


class SourceUnavailableError(OSError):
    """Raised when the log file or build process cannot be opened."""


def _read_lines(stream: IO[bytes]) -> Iterator[bytes]:
    with stream:
        yield from stream


def open_log_file(path: Path | str) -> Iterator[bytes]:
    """Open a saved structured log for sequential reading.

    The file is opened eagerly so a missing path fails here, not on the
    reader thread.  The file is closed when iteration ends.
    """
    path = Path(path)
    try:
        stream = path.open("rb")
    except OSError as exc:
        raise SourceUnavailableError(
            f"Cannot open build log {path}: {exc.strerror or exc}"
        ) from exc
    logger.info("Source: reading build log %s.", path)
    return _read_lines(stream)


class BuildProcess:
    """A spawned build engine whose stdout carries the event stream.

    Parameters
    ----------
    binary:
        Build engine executable (``ninja`` by default).
    build_dir:
        Working directory for the build.
    extra_args:
        Arguments appended after the structured-log flags.
    popen_kwargs:
        Extra keyword arguments forwarded to ``subprocess.Popen``; they
        override the default ``stdin`` and ``stdout`` redirections.
    """

    def __init__(
        self,
        binary: str | Path = "ninja",
        build_dir: Path | str = ".",
        extra_args: Sequence[str] = (),
        **popen_kwargs: Any,
    ) -> None:
        self._argv = [str(binary), *STRUCTLOG_FLAGS, *extra_args]
        self._build_dir = Path(build_dir)
        popen_kwargs = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.PIPE,
            **popen_kwargs,
        }
        try:
            self._proc = subprocess.Popen(
                self._argv, cwd=self._build_dir, **popen_kwargs
            )
        except (OSError, ValueError) as exc:
            raise SourceUnavailableError(
                f"Failed to spawn {self._argv[0]!r} in {self._build_dir}: {exc}"
            ) from exc
        logger.info(
            "Source: spawned %s (pid=%d) in %s.",
            " ".join(self._argv),
            self._proc.pid,
            self._build_dir,
        )

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def returncode(self) -> int | None:
        """Exit status once the process has ended, else ``None``."""
        return self._proc.poll()

    def lines(self) -> Iterator[bytes]:
        """Iterate the process's stdout line by line until it exits."""
        if self._proc.stdout is None:
            raise SourceUnavailableError(
                f"Build process {self._argv[0]!r} has no stdout pipe."
            )
        return _read_lines(self._proc.stdout)

    def terminate(self, timeout: float = 5.0) -> None:
        """Stop the build if it is still running."""
        if self._proc.poll() is not None:
            return
        self._proc.terminate()
        try:
            self._proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("Source: pid %d ignored SIGTERM, killing.", self._proc.pid)
            self._proc.kill()
            self._proc.wait()

    def __enter__(self) -> BuildProcess:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.terminate()

    def __repr__(self) -> str:
        return f"BuildProcess(argv={self._argv!r}, pid={self._proc.pid})"


def spawn_build(
    binary: str | Path = "ninja",
    build_dir: Path | str = ".",
    extra_args: Sequence[str] = (),
) -> BuildProcess:
    """Start the build engine with structured logging on stdout."""
    return BuildProcess(binary, build_dir, extra_args)
