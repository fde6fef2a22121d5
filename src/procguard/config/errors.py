"""Exception types for configuration handling."""

from __future__ import annotations

from typing import Optional


class ConfigurationError(RuntimeError):
    """Raised when a setting is missing, malformed or out of range."""

    def __init__(self, message: str, *, setting: Optional[str] = None) -> None:
        super().__init__(message)
        self.setting = setting

    @classmethod
    def not_set(cls, setting: str) -> "ConfigurationError":
        """Create error for a required setting with no value anywhere."""
        return cls(f"Required setting {setting!r} is not set", setting=setting)

    @classmethod
    def wrong_type(cls, setting: str, raw: str, expected: str) -> "ConfigurationError":
        """Create error for a value that does not parse as the expected type."""
        return cls(f"Setting {setting!r} must be {expected} (got {raw!r})", setting=setting)

    @classmethod
    def invalid_format(cls, setting: str, received_value: str, expected_format: str = "") -> "ConfigurationError":
        """Create error for a structured value with the wrong shape."""
        msg = f"{setting} has invalid format (received {received_value!r})"
        if expected_format:
            msg += f". Expected {expected_format}"
        return cls(msg, setting=setting)

    @classmethod
    def out_of_range(cls, setting: str, value, reason: str = "") -> "ConfigurationError":
        """Create error for a well-typed value outside its allowed range."""
        msg = f"Invalid value for {setting}: {value!r}"
        if reason:
            msg += f". {reason}"
        return cls(msg, setting=setting)


__all__ = ["ConfigurationError"]
