"""Build and start child processes."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from ..errors import SpawnError
from ..jobserver import JobserverClient
from ..log_file import LogFile
from ..shell_quote import cheap_shell_quote

logger = logging.getLogger(__name__)


def build_spawn_kwargs(
    env: Iterable[Tuple[str, str]],
    cwd: Path | str,
    jobserver: Optional[JobserverClient],
    *,
    posix: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Assemble ``subprocess.Popen`` keyword arguments, excluding the output streams.

    The environment is inherited and then overridden by *env*. On POSIX the
    child becomes the leader of a new process group whose id equals its pid,
    so a signal sent to the group reaches every descendant.
    """
    if posix is None:
        posix = os.name == "posix"
    child_env = dict(os.environ)
    child_env.update(dict(env))
    kwargs: Dict[str, Any] = {
        "stdin": subprocess.DEVNULL,
        "cwd": str(cwd),
        "env": child_env,
    }
    if jobserver is not None:
        jobserver.configure(kwargs)
    if posix:
        kwargs["process_group"] = 0
    return kwargs


def spawn_child(
    argv: Sequence[str],
    *,
    env: Iterable[Tuple[str, str]],
    cwd: Path | str,
    jobserver: Optional[JobserverClient],
    log_file: LogFile,
) -> subprocess.Popen:
    """
    Start *argv* with stdout and stderr appended to *log_file*.

    Raises:
        ValueError: If argv is empty
        SpawnError: If the operating system refuses to start the process
    """
    argv = list(argv)
    if not argv:
        raise ValueError("argv must name an executable")
    quoted_argv = cheap_shell_quote(argv)
    log_file.message(quoted_argv)
    logger.debug("start process: %s", quoted_argv)

    kwargs = build_spawn_kwargs(env, cwd, jobserver)
    with log_file.open_append() as stdout, log_file.open_append() as stderr:
        try:
            return subprocess.Popen(argv, stdout=stdout, stderr=stderr, **kwargs)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("Failed to spawn %s: %s", quoted_argv, exc)
            raise SpawnError(argv, errno=getattr(exc, "errno", None)) from exc
