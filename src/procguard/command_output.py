"""Run short metadata commands and capture their output."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from .errors import NonZeroExitError, OutputDecodeError, SpawnError
from .process_helpers import classify_returncode

logger = logging.getLogger(__name__)


def get_command_output(argv: Sequence[str], cwd: Path | str) -> str:
    """
    Run a command to completion and return its stdout as a string.

    stderr is inherited so any messages the command writes reach the user
    directly. There is no timeout and no interrupt handling, so use this only
    for quick, trusted queries. Output is held in memory, which is fine for
    the small outputs these commands produce but not for large volumes.

    Raises:
        SpawnError: If the command could not be started
        NonZeroExitError: If the command exited unsuccessfully
        OutputDecodeError: If stdout is not valid UTF-8
    """
    argv = list(argv)
    if not argv:
        raise ValueError("argv must name an executable")
    logger.debug("get_command_output argv=%r cwd=%s", argv, cwd)
    try:
        completed = subprocess.run(
            argv,
            cwd=str(cwd),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=None,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        raise SpawnError(argv, errno=getattr(exc, "errno", None)) from exc

    status = classify_returncode(completed.returncode)
    if not status.is_success():
        logger.error("Child failed with status %s: %r", status, argv)
        raise NonZeroExitError(argv, status)
    try:
        stdout = completed.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise OutputDecodeError(argv) from exc
    logger.debug("output: %s", stdout.strip())
    return stdout


__all__ = ["get_command_output"]
