"""
Process-wide cooperative interrupt flag.

A signal handler (or any other code) requests an interrupt; every supervised
run polls the flag and, once it is set, terminates its child and raises
RunInterruptedError. The flag is level-triggered and global: there is no way
to cancel one run without cancelling every run that shares this process.
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Optional

from .errors import RunInterruptedError

logger = logging.getLogger(__name__)

_flag = threading.Event()
_lock = threading.Lock()
_reason: str = ""
_error: Optional[BaseException] = None


def request_interrupt(reason: str = "", error: Optional[BaseException] = None) -> None:
    """Set the interrupt flag, optionally attaching a reason and an originating error."""
    global _reason, _error
    with _lock:
        if not _flag.is_set():
            _reason = reason
            _error = error
        _flag.set()


def is_interrupted() -> bool:
    return _flag.is_set()


def check_interrupted() -> None:
    """Raise RunInterruptedError if an interrupt has been requested.

    If an error payload was attached to the request it is chained as the
    cause, so callers can tell what triggered the cancellation.
    """
    if not _flag.is_set():
        return
    with _lock:
        reason = _reason
        error = _error
    message = f"interrupted: {reason}" if reason else "interrupted"
    if error is not None:
        raise RunInterruptedError(message, reason=reason) from error
    raise RunInterruptedError(message, reason=reason)


def clear_interrupt() -> None:
    """Reset the flag; intended for tests and for reusing a long-lived process."""
    global _reason, _error
    with _lock:
        _flag.clear()
        _reason = ""
        _error = None


def _handle_signal(signum: int, _frame) -> None:
    try:
        name = signal.Signals(signum).name
    except ValueError:
        name = str(signum)
    request_interrupt(f"received {name}")


def install_handler() -> None:
    """Route SIGINT (and SIGTERM where available) to the interrupt flag.

    Must be called from the main thread.
    """
    signal.signal(signal.SIGINT, _handle_signal)
    sigterm = getattr(signal, "SIGTERM", None)
    if sigterm is not None:
        try:
            signal.signal(sigterm, _handle_signal)
        except (OSError, ValueError) as exc:
            logger.debug("Could not install SIGTERM handler: %s", exc)
    logger.debug("Installed interrupt signal handlers")


__all__ = [
    "check_interrupted",
    "clear_interrupt",
    "install_handler",
    "is_interrupted",
    "request_interrupt",
]
