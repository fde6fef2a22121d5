"""Subprocess lifecycle controller: launch, watch, time out and terminate child processes."""

from .command_output import get_command_output
from .errors import (
    LogFileError,
    NonZeroExitError,
    OutputDecodeError,
    ProcessControlError,
    RunInterruptedError,
    SpawnError,
    TerminationSignalError,
)
from .jobserver import JobserverClient
from .log_file import LogFile
from .process import Process
from .process_status import ProcessStatus, StatusKind
from .progress import LoggingProgress, NullProgress, ProgressTicker
from .shell_quote import cheap_shell_quote

__all__ = [
    "JobserverClient",
    "LogFile",
    "LogFileError",
    "LoggingProgress",
    "NonZeroExitError",
    "NullProgress",
    "OutputDecodeError",
    "Process",
    "ProcessControlError",
    "ProcessStatus",
    "ProgressTicker",
    "RunInterruptedError",
    "SpawnError",
    "StatusKind",
    "TerminationSignalError",
    "cheap_shell_quote",
    "get_command_output",
]
