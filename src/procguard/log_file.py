"""
Per-run log files.

Each supervised run gets its own log file. The child's stdout and stderr are
attached to two independent append-mode handles on the same file, and the
controller appends its own diagnostic messages through a third handle. All
handles use O_APPEND so concurrent writers never overwrite each other.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional

from .errors import LogFileError

logger = logging.getLogger(__name__)

MAX_NAME_ATTEMPTS = 1000

_UNSAFE_FILENAME_CHARS = frozenset('\\ :<>?*|"')


def clean_filename(name: str) -> str:
    """Turn a scenario name into something safe to use as a file name."""
    name = name.replace("/", "__")
    return "".join("_" if c in _UNSAFE_FILENAME_CHARS else c for c in name)


class LogFile:
    """Text log file for one child process run."""

    def __init__(self, path: Path, write_to: BinaryIO) -> None:
        self.path = path
        self._write_to = write_to

    @classmethod
    def create_in(cls, log_dir: Path, scenario_name: str) -> "LogFile":
        """
        Create a new, previously nonexistent, log file in *log_dir*.

        The file is named after the scenario; if that name is taken, a
        numeric suffix is added. Existing files are never overwritten.

        Raises:
            LogFileError: If no free name is found or the file cannot be created
        """
        log_dir = Path(log_dir)
        basename = clean_filename(scenario_name)
        for i in range(MAX_NAME_ATTEMPTS):
            filename = f"{basename}.log" if i == 0 else f"{basename}_{i:03}.log"
            path = log_dir / filename
            try:
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL | os.O_APPEND, 0o644)
            except FileExistsError:
                continue
            except OSError as exc:
                raise LogFileError(f"can't create log file {path}", path=path) from exc
            logger.debug("Created log file %s", path)
            return cls(path, os.fdopen(fd, "ab"))
        raise LogFileError(f"couldn't create any log in {log_dir} for {scenario_name!r}", path=log_dir)

    def open_append(self) -> BinaryIO:
        """Open another independent append handle, suitable for a child's output stream."""
        try:
            return open(self.path, "ab")
        except OSError as exc:
            raise LogFileError(f"can't open log file {self.path} for append", path=self.path) from exc

    def message(self, message: str) -> None:
        """Append a controller diagnostic message, marked so it stands out from child output."""
        self._write_to.write(f"\n*** {message}\n".encode("utf-8"))
        self._write_to.flush()

    def last_line(self) -> Optional[str]:
        """Return the last non-blank line of the log, or None if there is none."""
        text = self.path.read_text(encoding="utf-8", errors="replace")
        for line in reversed(text.splitlines()):
            if line.strip():
                return line
        return None

    def close(self) -> None:
        self._write_to.close()

    def __enter__(self) -> "LogFile":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["LogFile", "clean_filename"]
