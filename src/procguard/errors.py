"""Exception classes raised by the process controller.

All controller errors inherit from ProcessControlError so callers can catch
the whole family in one place. Keyword arguments passed to the constructor
are stored as attributes to keep diagnostic context (argv, pid, errno,
exit status) attached to the error.
"""

from __future__ import annotations

from typing import Any, Sequence


class ProcessControlError(Exception):
    """Base exception for all process controller errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Process control error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class SpawnError(ProcessControlError):
    """The operating system refused to create the process."""

    def __init__(self, argv: Sequence[str], **kwargs: Any) -> None:
        self.argv = list(argv)
        super().__init__(f"failed to spawn {' '.join(self.argv)}", **kwargs)


class TerminationSignalError(ProcessControlError):
    """Sending the termination request to a child failed."""

    def __init__(self, pid: int, errno: int | None = None, reason: str = "", **kwargs: Any) -> None:
        self.pid = pid
        self.errno = errno
        message = f"failed to terminate child {pid}"
        if reason:
            message += f": {reason}"
        super().__init__(message, **kwargs)


class RunInterruptedError(ProcessControlError):
    """The run was cancelled by an interrupt request."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "interrupted"
        super().__init__(message, **kwargs)


class LogFileError(ProcessControlError):
    """A per-run log file could not be created or written."""


class OutputDecodeError(ProcessControlError):
    """Captured command output was not valid UTF-8 text."""

    def __init__(self, argv: Sequence[str], **kwargs: Any) -> None:
        self.argv = list(argv)
        super().__init__(f"Child output is not UTF-8: {self.argv!r}", **kwargs)


class NonZeroExitError(ProcessControlError):
    """A metadata command exited unsuccessfully."""

    def __init__(self, argv: Sequence[str], exit_status: Any, **kwargs: Any) -> None:
        self.argv = list(argv)
        self.exit_status = exit_status
        super().__init__(f"Child failed with status {exit_status}: {self.argv!r}", **kwargs)


__all__ = [
    "LogFileError",
    "NonZeroExitError",
    "OutputDecodeError",
    "ProcessControlError",
    "RunInterruptedError",
    "SpawnError",
    "TerminationSignalError",
]
