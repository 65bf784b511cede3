"""Monitor configuration - env-driven defaults for the CLI.

Centralized config using pydantic-settings.  Reads from a .env file and
BUILDWATCH_* environment variables; command-line options override it.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class MonitorConfig(BaseSettings):
    """Monitor configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BUILDWATCH_LOG_LEVEL=DEBUG
        export BUILDWATCH_LOG_FILE=/tmp/buildwatch.log
        export BUILDWATCH_NINJA_BINARY=/opt/ninja/bin/ninja

    Or via .env file::

        BUILDWATCH_POLL_INTERVAL_MS=50
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDWATCH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "WARNING"
    log_file: Path | None = None  # stderr when unset

    # Consumer loop
    poll_interval_ms: int = 100
    refresh_per_second: float = 10.0

    # Build engine
    ninja_binary: str = "ninja"
    build_dir: Path = Path(".")

    @property
    def poll_interval_seconds(self) -> float:
        """The bounded interaction wait, in seconds."""
        return max(self.poll_interval_ms, 1) / 1000.0


# Module-level singleton - import as `from buildwatch.config import config`
config = MonitorConfig()
