"""
Centralized logging configuration.

setup_logging configures the root logger once per process with:
- Console output to stdout (message-only in user-friendly mode)
- Optional file output, appended so repeated runs keep their history
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import Optional

from .config import ConfigurationError, get_settings

# Thread-safe lock for logging configuration
_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)

_TECHNICAL_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[str | int]) -> int:
    if level is None:
        level = get_settings().log_level
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ConfigurationError.out_of_range("log level", level, "Use DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return resolved


def _close_handlers(logger: logging.Logger) -> None:
    """Close all handlers for a logger, logging any errors."""
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as e:
            _MODULE_LOGGER.debug("Handler close failed: %s", e)
        logger.removeHandler(handler)


def _build_console_handler(user_friendly: bool) -> logging.Handler:
    if user_friendly:
        formatter = logging.Formatter("%(message)s")
    else:
        formatter = logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    return console_handler


def _build_file_handler(log_path: Path) -> logging.Handler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler_cls = getattr(logging.handlers, "WatchedFileHandler", logging.FileHandler)
    file_handler = handler_cls(log_path, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(_TECHNICAL_FORMAT, _DATE_FORMAT))
    return file_handler


def setup_logging(
    level: Optional[str | int] = None,
    log_path: Optional[Path] = None,
    user_friendly: bool = False,
) -> None:
    """Configure the root logger, replacing any handlers installed earlier."""

    with _config_lock:
        root_logger = logging.getLogger()
        resolved_level = _resolve_level(level)
        _close_handlers(root_logger)

        root_logger.addHandler(_build_console_handler(user_friendly))
        if log_path is not None:
            root_logger.addHandler(_build_file_handler(Path(log_path)))

        root_logger.setLevel(resolved_level)
        logging.getLogger("asyncio").setLevel(logging.WARNING)


__all__ = ["setup_logging"]
