"""
Command-line entry point: run one command under the process controller.

    procguard --timeout 60 --name unit-tests -- pytest -x

Exit codes: 0 on success, the child's own code on failure, 124 on timeout,
128 + N when killed by signal N, 130 when interrupted, 2 for bad configuration
and 1 otherwise.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from . import interrupt
from .config import ConfigurationError, get_settings
from .errors import ProcessControlError, RunInterruptedError
from .jobserver import JobserverClient
from .log_file import LogFile
from .logging_config import setup_logging
from .process import Process
from .process_status import ProcessStatus, StatusKind
from .progress import LoggingProgress

logger = logging.getLogger(__name__)

EXIT_TIMEOUT = 124
EXIT_INTERRUPTED = 130
EXIT_SIGNAL_BASE = 128


def _parse_env_pair(text: str) -> Tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procguard",
        description="Run a command with a timeout, killing its whole process group on timeout or interrupt.",
    )
    parser.add_argument("--timeout", type=float, help="Seconds before the command is terminated.")
    parser.add_argument("--log-dir", type=Path, help="Directory for the per-run log file.")
    parser.add_argument("--name", default=None, help="Scenario name used for the log file name.")
    parser.add_argument("--jobs", type=int, help="Give the command a fresh jobserver with this many tokens.")
    parser.add_argument("--cwd", type=Path, default=Path.cwd(), help="Working directory for the command.")
    parser.add_argument(
        "--env",
        type=_parse_env_pair,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra environment variable for the command; may be repeated.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    parser.add_argument("cmd", nargs=argparse.REMAINDER, help="Command to execute (after a -- separator).")
    return parser


def exit_code_for(status: ProcessStatus) -> int:
    if status.kind is StatusKind.SUCCESS:
        return 0
    if status.kind is StatusKind.FAILURE:
        assert status.code is not None
        return status.code if 0 < status.code < 256 else 1
    if status.kind is StatusKind.TIMEOUT:
        return EXIT_TIMEOUT
    if status.kind is StatusKind.SIGNALLED:
        assert status.signal is not None
        return EXIT_SIGNAL_BASE + status.signal
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cmd: List[str] = list(args.cmd)
    # argparse keeps the literal '--' inside REMAINDER; drop it if present.
    if cmd and cmd[0] == "--":
        cmd = cmd[1:]
    if not cmd:
        parser.error("Missing command to execute; supply it after '--'.")

    try:
        settings = get_settings()
        verbose = args.verbose or settings.verbose
        setup_logging("DEBUG" if verbose else None, user_friendly=not verbose)
        jobs = args.jobs if args.jobs is not None else settings.jobs
        jobserver = JobserverClient.new(jobs) if jobs is not None else None
    except ConfigurationError as exc:
        sys.stderr.write(f"procguard: {exc}\n")
        return 2

    timeout = args.timeout if args.timeout is not None else settings.timeout_seconds
    log_dir: Path = args.log_dir if args.log_dir is not None else settings.log_dir
    name = args.name or Path(cmd[0]).name

    interrupt.install_handler()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        with LogFile.create_in(log_dir, name) as log_file:
            status = Process.run(
                cmd,
                env=args.env,
                cwd=args.cwd,
                timeout=timeout,
                jobserver=jobserver,
                log_file=log_file,
                progress=LoggingProgress(name),
                poll_interval=settings.poll_interval_seconds,
            )
            logger.warning("%s: %s (log: %s)", name, status, log_file.path)
    except RunInterruptedError as exc:
        logger.warning("%s: %s", name, exc)
        return EXIT_INTERRUPTED
    except (ProcessControlError, OSError) as exc:
        logger.error("%s: %s", name, exc)
        return 1
    finally:
        if jobserver is not None:
            jobserver.close()
    return exit_code_for(status)


if __name__ == "__main__":
    raise SystemExit(main())
