"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

# Keep developer .env files and shell settings out of the tests
for _name in list(os.environ):
    if _name.startswith("PROCGUARD_"):
        del os.environ[_name]

from procguard import interrupt  # noqa: E402
from procguard.config import reset_default_values, reset_settings  # noqa: E402
from procguard.config import runtime as config_runtime  # noqa: E402
from procguard.log_file import LogFile  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch):
    """Clear the interrupt flag and cached settings around every test."""
    monkeypatch.setattr(config_runtime, "_DOTENV_CANDIDATES", ())
    reset_default_values()
    reset_settings()
    interrupt.clear_interrupt()
    yield
    interrupt.clear_interrupt()
    reset_settings()
    reset_default_values()


@pytest.fixture
def log_file(tmp_path):
    """Provide a fresh per-test log file."""
    log = LogFile.create_in(tmp_path, "test")
    yield log
    log.close()
