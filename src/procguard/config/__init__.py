"""Shared configuration helpers and settings."""

from .errors import ConfigurationError
from .runtime import (
    env_bool,
    env_float,
    env_int,
    env_seconds,
    env_str,
    reset_default_values,
)
from .settings import ProcessSettings, get_settings, reset_settings

__all__ = [
    "ConfigurationError",
    "ProcessSettings",
    "env_bool",
    "env_float",
    "env_int",
    "env_seconds",
    "env_str",
    "get_settings",
    "reset_default_values",
    "reset_settings",
]
