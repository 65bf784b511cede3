"""Root logger setup for the command-line entry points."""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Configure the root logger once per process.

    When *log_file* is given, records go there instead of stderr so they
    do not interleave with the live display.
    """
    kwargs: dict = {
        "level": level.upper(),
        "format": LOG_FORMAT,
        "datefmt": "%H:%M:%S",
        "force": True,
    }
    if log_file is not None:
        kwargs["filename"] = str(log_file)
        kwargs["encoding"] = "utf-8"
    logging.basicConfig(**kwargs)
