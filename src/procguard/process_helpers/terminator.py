"""
Terminate a child and everything it started.

On POSIX the child leads its own process group, so SIGTERM goes to the whole
group and reaches grandchildren too. Elsewhere there are no process groups;
the single child is killed directly and its descendants may survive.
"""

from __future__ import annotations

import errno
import logging
import os
import signal
import subprocess
import sys
from typing import Optional

from ..errors import TerminationSignalError

logger = logging.getLogger(__name__)

# macOS can report EPERM when signalling a group whose processes have all gone.
EPERM_MEANS_GONE_PLATFORMS = frozenset({"darwin"})


def terminate_process_tree(child: subprocess.Popen) -> None:
    """Ask *child* (and on POSIX, its process group) to stop. Does not wait."""
    if os.name == "posix":
        terminate_process_group(child)
    else:
        kill_single_process(child)


def terminate_process_group(child: subprocess.Popen, *, platform: Optional[str] = None) -> None:
    """Send SIGTERM to the child's process group, treating an already-gone group as success."""
    platform = sys.platform if platform is None else platform
    pid = child.pid
    try:
        os.killpg(pid, signal.SIGTERM)
    except ProcessLookupError:
        logger.debug("Process group %s already gone", pid)
    except PermissionError as exc:
        if platform in EPERM_MEANS_GONE_PLATFORMS:
            logger.debug("EPERM signalling process group %s on %s; assuming it already exited", pid, platform)
            return
        raise _signal_failed(pid, exc) from exc
    except OSError as exc:
        raise _signal_failed(pid, exc) from exc


def kill_single_process(child: subprocess.Popen) -> None:
    pid = child.pid
    try:
        child.kill()
    except OSError as exc:
        raise _signal_failed(pid, exc) from exc


def _signal_failed(pid: int, exc: OSError) -> TerminationSignalError:
    reason = errno.errorcode.get(exc.errno, str(exc.errno)) if exc.errno is not None else str(exc)
    logger.warning("failed to terminate child %s: %s", pid, reason)
    return TerminationSignalError(pid, errno=exc.errno, reason=reason)
