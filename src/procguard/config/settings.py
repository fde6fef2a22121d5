"""
Process controller settings.

Values come from the environment (or a .env file) with defaults suitable for
supervising short build and test commands. All durations are in seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError
from .runtime import env_bool, env_int, env_seconds, env_str

DEFAULT_POLL_INTERVAL_SECONDS = 0.05
DEFAULT_LOG_DIR = "procguard-logs"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class ProcessSettings:
    """
    Tunables for running supervised child processes.

    Attributes:
        poll_interval_seconds: Sleep between non-blocking status checks
        timeout_seconds: Default wall-clock limit per run; None disables it
        log_dir: Directory where per-run log files are created
        jobs: Token count for a fresh jobserver; None means no jobserver
        log_level: Root log level used by setup_logging
        verbose: Debug logging with technical formatting for the command-line runner
    """

    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    timeout_seconds: Optional[float] = None
    log_dir: Path = Path(DEFAULT_LOG_DIR)
    jobs: Optional[int] = None
    log_level: str = DEFAULT_LOG_LEVEL
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.poll_interval_seconds <= 0:
            raise ConfigurationError.out_of_range("poll_interval_seconds", self.poll_interval_seconds, "Must be positive")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigurationError.out_of_range("timeout_seconds", self.timeout_seconds, "Must be positive")
        if self.jobs is not None and self.jobs < 1:
            raise ConfigurationError.out_of_range("jobs", self.jobs, "Must be at least 1")

    @classmethod
    def from_env(cls) -> "ProcessSettings":
        """Build settings from PROCGUARD_* environment variables."""
        poll_interval = env_seconds("PROCGUARD_POLL_INTERVAL_SECONDS", or_value=DEFAULT_POLL_INTERVAL_SECONDS)
        log_dir = env_str("PROCGUARD_LOG_DIR", or_value=DEFAULT_LOG_DIR)
        log_level = env_str("PROCGUARD_LOG_LEVEL", or_value=DEFAULT_LOG_LEVEL)
        return cls(
            poll_interval_seconds=float(poll_interval),
            timeout_seconds=env_seconds("PROCGUARD_TIMEOUT_SECONDS"),
            log_dir=Path(log_dir).expanduser(),
            jobs=env_int("PROCGUARD_JOBS"),
            log_level=log_level.upper(),
            verbose=bool(env_bool("PROCGUARD_VERBOSE", or_value=False)),
        )


# Lazy load configuration to avoid reading the environment at import time
_settings: ProcessSettings | None = None


def get_settings() -> ProcessSettings:
    """Get or initialize the process settings."""
    global _settings
    if _settings is None:
        _settings = ProcessSettings.from_env()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


__all__ = [
    "DEFAULT_LOG_DIR",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "ProcessSettings",
    "get_settings",
    "reset_settings",
]
