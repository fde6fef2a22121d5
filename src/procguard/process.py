"""
Supervised child processes.

Manage a subprocess with polling, a wall-clock timeout, cooperative
interruption and termination of the whole process tree.

Usage:
    from procguard import LogFile, Process

    with LogFile.create_in(log_dir, "build") as log_file:
        status = Process.run(["make", "-j4"], cwd=repo, timeout=600, log_file=log_file)

On POSIX the child runs as the leader of its own process group, so any
grandchildren are also signalled if the run times out or is interrupted.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
import time
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from . import interrupt
from .config import get_settings
from .errors import RunInterruptedError
from .jobserver import JobserverClient
from .log_file import LogFile
from .process_helpers import classify_returncode, spawn_child, terminate_process_tree
from .process_status import ProcessStatus
from .progress import NullProgress, ProgressTicker

logger = logging.getLogger(__name__)


class Process:
    """
    A running child process owned by a single caller.

    The OS process is reaped exactly once: either by :meth:`poll` observing a
    natural exit, or by :meth:`terminate` waiting for it after signalling.
    Once :meth:`poll` has returned a status, do not poll again.
    """

    def __init__(self, child: subprocess.Popen, start: float, timeout: Optional[float]) -> None:
        self.child = child
        self.start_time = start
        self.timeout = timeout

    @property
    def pid(self) -> int:
        return self.child.pid

    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    @classmethod
    def start(
        cls,
        argv: Sequence[str],
        *,
        env: Iterable[Tuple[str, str]] = (),
        cwd: Path | str,
        timeout: Optional[float] = None,
        jobserver: Optional[JobserverClient] = None,
        log_file: LogFile,
    ) -> "Process":
        """
        Launch a process, and return an object representing the child.

        Args:
            argv: Executable followed by its arguments; passed to the OS unquoted
            env: Variables to set on top of the inherited environment
            cwd: Working directory for the child
            timeout: Seconds before the child is terminated; None for no limit
            jobserver: Jobserver the child should join, if any
            log_file: Receives the quoted command line and the child's stdout/stderr

        Raises:
            SpawnError: If the process could not be started
        """
        start = time.monotonic()
        child = spawn_child(argv, env=env, cwd=cwd, jobserver=jobserver, log_file=log_file)
        logger.debug("started child %s", child.pid)
        return cls(child, start, timeout)

    def timed_out(self) -> bool:
        return self.timeout is not None and self.elapsed() > self.timeout

    def poll(self) -> Optional[ProcessStatus]:
        """
        Check if the child process has finished; if so, return its status.

        Checks run in a fixed order: timeout, then interrupt, then exit. A
        child that exits in the same instant its timeout expires may still be
        reported as a timeout.

        Raises:
            RunInterruptedError: If an interrupt was requested; the child is terminated first
            TerminationSignalError: If the child could not be signalled
        """
        if self.timed_out():
            logger.debug("timeout, terminating child process %s...", self.pid)
            self.terminate()
            return ProcessStatus.timeout()
        try:
            interrupt.check_interrupted()
        except RunInterruptedError:
            logger.debug("interrupted, terminating child process %s...", self.pid)
            self.terminate()
            raise
        returncode = self.child.poll()
        if returncode is None:
            return None
        return classify_returncode(returncode)

    def terminate(self) -> None:
        """
        Terminate the subprocess and its process group.

        Blocks until the child has exited and been reaped. Calling this on a
        child that was already reaped does nothing.

        Raises:
            TerminationSignalError: If the termination signal could not be sent
                for a reason other than the child already being gone
        """
        if self.child.returncode is not None:
            logger.debug("child %s already reaped; nothing to terminate", self.pid)
            return
        logger.debug("terminating child process %s", self.pid)
        try:
            terminate_process_tree(self.child)
        finally:
            self._wait_after_termination()

    def _wait_after_termination(self) -> None:
        logger.debug("wait for child %s after termination", self.pid)
        try:
            returncode = self.child.wait()
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("Failed to wait for child %s after termination: %s", self.pid, exc)
        else:
            logger.debug("terminated child %s exit status %s", self.pid, returncode)

    @classmethod
    def run(
        cls,
        argv: Sequence[str],
        *,
        env: Iterable[Tuple[str, str]] = (),
        cwd: Path | str,
        timeout: Optional[float] = None,
        jobserver: Optional[JobserverClient] = None,
        log_file: LogFile,
        progress: Optional[ProgressTicker] = None,
        poll_interval: Optional[float] = None,
    ) -> ProcessStatus:
        """
        Run a subprocess to completion, watching for interrupts, with a timeout,
        while ticking the progress indicator.

        The final status is also appended to the log file.

        Raises:
            SpawnError: If the process could not be started
            RunInterruptedError: If an interrupt was requested while it ran
        """
        process = cls.start(argv, env=env, cwd=cwd, timeout=timeout, jobserver=jobserver, log_file=log_file)
        progress = progress if progress is not None else NullProgress()
        interval = poll_interval if poll_interval is not None else get_settings().poll_interval_seconds
        try:
            while True:
                status = process.poll()
                if status is not None:
                    break
                progress.tick()
                time.sleep(interval)
        except KeyboardInterrupt:
            # The child is in its own process group and never saw the Ctrl+C.
            logger.debug("KeyboardInterrupt while waiting; terminating child %s", process.pid)
            process.terminate()
            raise
        log_file.message(f"result: {status}")
        return status

    @classmethod
    async def run_async(
        cls,
        argv: Sequence[str],
        *,
        env: Iterable[Tuple[str, str]] = (),
        cwd: Path | str,
        timeout: Optional[float] = None,
        jobserver: Optional[JobserverClient] = None,
        log_file: LogFile,
        progress: Optional[ProgressTicker] = None,
        poll_interval: Optional[float] = None,
    ) -> ProcessStatus:
        """Like :meth:`run`, but yields to the event loop between polls.

        Termination, including its blocking wait for the child, runs in a
        worker thread so a child slow to exit does not stall the loop.
        Cancelling the awaiting task terminates the child before the
        cancellation propagates.
        """
        process = cls.start(argv, env=env, cwd=cwd, timeout=timeout, jobserver=jobserver, log_file=log_file)
        progress = progress if progress is not None else NullProgress()
        interval = poll_interval if poll_interval is not None else get_settings().poll_interval_seconds
        try:
            while True:
                if process.timed_out():
                    logger.debug("timeout, terminating child process %s...", process.pid)
                    await asyncio.to_thread(process.terminate)
                    status = ProcessStatus.timeout()
                    break
                if interrupt.is_interrupted():
                    logger.debug("interrupted, terminating child process %s...", process.pid)
                    await asyncio.to_thread(process.terminate)
                    interrupt.check_interrupted()
                status = process.poll()
                if status is not None:
                    break
                progress.tick()
                await asyncio.sleep(interval)
        except asyncio.CancelledError:
            logger.debug("run cancelled; terminating child %s", process.pid)
            await asyncio.to_thread(process.terminate)
            raise
        log_file.message(f"result: {status}")
        return status


__all__ = ["Process"]
