"""Environment-backed configuration lookups with .env fallbacks."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

_TRUE_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "f", "no", "n", "off"})

# Searched in order; an earlier file wins over a later one.
_DOTENV_CANDIDATES = (Path(".env"), Path.home() / ".env")

_DEFAULT_VALUES: dict[str, str] | None = None


def _load_default_values() -> dict[str, str]:
    from .runtime_helpers import DotenvLoader

    global _DEFAULT_VALUES
    if _DEFAULT_VALUES is None:
        defaults: dict[str, str] = {}
        for path in _DOTENV_CANDIDATES:
            for key, value in DotenvLoader.load_from_file(path).items():
                defaults.setdefault(key, value)
        _DEFAULT_VALUES = defaults
    return _DEFAULT_VALUES


def reset_default_values() -> None:
    """Forget cached .env defaults so the next lookup re-reads them."""
    global _DEFAULT_VALUES
    _DEFAULT_VALUES = None


def _lookup(name: str, *, strip: bool, allow_blank: bool) -> Optional[str]:
    """Return the environment value for *name*, else the .env default, else None."""
    for candidate in (os.getenv(name), _load_default_values().get(name)):
        if candidate is None:
            continue
        if strip:
            candidate = candidate.strip()
        if candidate or allow_blank:
            return candidate
    return None


def env_str(
    name: str,
    or_value: str | None = None,
    *,
    required: bool = False,
    strip: bool = True,
    allow_blank: bool = False,
) -> str | None:
    """Fetch a setting as a string."""
    value = _lookup(name, strip=strip, allow_blank=allow_blank)
    if value is not None:
        return value
    if required:
        raise ConfigurationError.not_set(name)
    return or_value


def _env_parsed(
    name: str,
    parse: Callable[[str], T],
    expected: str,
    or_value: T | None,
    required: bool,
) -> T | None:
    raw = _lookup(name, strip=True, allow_blank=False)
    if raw is None:
        if required and or_value is None:
            raise ConfigurationError.not_set(name)
        return or_value
    try:
        return parse(raw)
    except ValueError as exc:
        raise ConfigurationError.wrong_type(name, raw, expected) from exc


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(raw)


def env_int(name: str, or_value: int | None = None, *, required: bool = False) -> int | None:
    return _env_parsed(name, int, "an integer", or_value, required)


def env_float(name: str, or_value: float | None = None, *, required: bool = False) -> float | None:
    return _env_parsed(name, float, "a number", or_value, required)


def env_bool(name: str, or_value: bool | None = None, *, required: bool = False) -> bool | None:
    return _env_parsed(name, _parse_bool, "a boolean such as yes/no or 1/0", or_value, required)


def env_seconds(name: str, or_value: float | None = None, *, required: bool = False) -> float | None:
    """Fetch a duration in (possibly fractional) seconds; negative durations are rejected."""
    value = env_float(name, or_value=or_value, required=required)
    if value is not None and value < 0:
        raise ConfigurationError.out_of_range(name, value, "Must be non-negative")
    return value


__all__ = [
    "ConfigurationError",
    "env_bool",
    "env_float",
    "env_int",
    "env_seconds",
    "env_str",
    "reset_default_values",
]
