"""Final outcome of running a single child process."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import orjson


class StatusKind(Enum):
    """Closed set of ways a supervised child can finish"""

    SUCCESS = "success"  # Exited with status 0
    FAILURE = "failure"  # Exited with a non-zero status
    TIMEOUT = "timeout"  # Exceeded its timeout and was terminated
    SIGNALLED = "signalled"  # Killed by a signal (POSIX only)
    OTHER = "other"  # Unknown or unexpected situation


@dataclass(frozen=True)
class ProcessStatus:
    """
    The result of running a single child process.

    Build instances with the class constructors rather than directly:
    ``ProcessStatus.success()``, ``ProcessStatus.failure(code)``,
    ``ProcessStatus.timeout()``, ``ProcessStatus.signalled(signum)`` and
    ``ProcessStatus.other()``. ``code`` is only set for failures and
    ``signal`` only for signalled children.
    """

    kind: StatusKind
    code: Optional[int] = None
    signal: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is StatusKind.FAILURE:
            if self.code is None or self.code == 0:
                raise ValueError(f"Failure status needs a non-zero exit code (got {self.code!r})")
        elif self.code is not None:
            raise ValueError(f"{self.kind.value} status cannot carry an exit code")
        if self.kind is StatusKind.SIGNALLED:
            if self.signal is None or self.signal <= 0:
                raise ValueError(f"Signalled status needs a positive signal number (got {self.signal!r})")
        elif self.signal is not None:
            raise ValueError(f"{self.kind.value} status cannot carry a signal number")

    @classmethod
    def success(cls) -> "ProcessStatus":
        return cls(StatusKind.SUCCESS)

    @classmethod
    def failure(cls, code: int) -> "ProcessStatus":
        return cls(StatusKind.FAILURE, code=code)

    @classmethod
    def timeout(cls) -> "ProcessStatus":
        return cls(StatusKind.TIMEOUT)

    @classmethod
    def signalled(cls, signal: int) -> "ProcessStatus":
        return cls(StatusKind.SIGNALLED, signal=signal)

    @classmethod
    def other(cls) -> "ProcessStatus":
        return cls(StatusKind.OTHER)

    def is_success(self) -> bool:
        return self.kind is StatusKind.SUCCESS

    def is_timeout(self) -> bool:
        return self.kind is StatusKind.TIMEOUT

    def is_failure(self) -> bool:
        return self.kind is StatusKind.FAILURE

    def describe(self) -> str:
        """Short human-readable form, used in log lines."""
        if self.kind is StatusKind.FAILURE:
            return f"Failure({self.code})"
        if self.kind is StatusKind.SIGNALLED:
            return f"Signalled({self.signal})"
        return self.kind.value.capitalize()

    def __str__(self) -> str:
        return self.describe()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.code is not None:
            data["code"] = self.code
        if self.signal is not None:
            data["signal"] = self.signal
        return data

    def to_json(self) -> str:
        """Convert to JSON string"""
        return orjson.dumps(self.to_dict()).decode()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcessStatus":
        try:
            kind = StatusKind(data["kind"])
        except KeyError as exc:
            raise ValueError(f"Process status payload has no kind: {data!r}") from exc
        return cls(kind, code=data.get("code"), signal=data.get("signal"))

    @classmethod
    def from_json(cls, data: str | bytes) -> "ProcessStatus":
        """Create from JSON string"""
        payload = orjson.loads(data)
        if not isinstance(payload, dict):
            raise ValueError(f"Process status JSON must be an object (got {type(payload).__name__})")
        return cls.from_dict(payload)


__all__ = ["ProcessStatus", "StatusKind"]
