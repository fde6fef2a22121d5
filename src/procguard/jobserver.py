"""
GNU make compatible jobserver client.

A jobserver limits how many build-tool processes run at once across a whole
build. The controller never takes or returns tokens itself; it only hands the
jobserver to the child at spawn time, by advertising it in the environment and
keeping the pipe descriptors open across exec.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Tuple

from .config import ConfigurationError

logger = logging.getLogger(__name__)

TOKEN = b"|"
MAKEFLAGS_VARIABLES = ("CARGO_MAKEFLAGS", "MAKEFLAGS", "MFLAGS")

_AUTH_PATTERN = re.compile(r"--jobserver-(?:auth|fds)=(\S+)")


class JobserverClient:
    """Handle on a jobserver, either created here or inherited from a parent make."""

    def __init__(
        self,
        *,
        fds: Optional[Tuple[int, int]] = None,
        fifo: Optional[Path] = None,
        owned: bool = False,
    ) -> None:
        if (fds is None) == (fifo is None):
            raise ValueError("JobserverClient needs exactly one of fds or fifo")
        self.fds = fds
        self.fifo = fifo
        self._owned = owned
        self._closed = False

    @classmethod
    def new(cls, limit: int) -> "JobserverClient":
        """Create a fresh jobserver pipe holding *limit* tokens."""
        if limit < 1:
            raise ConfigurationError.out_of_range("jobserver limit", limit, "Must be at least 1")
        if os.name != "posix":
            raise ConfigurationError("A pipe-based jobserver requires a POSIX platform")
        read_fd, write_fd = os.pipe()
        # The pipe has no reader yet; a write past its buffer must not block.
        os.set_blocking(write_fd, False)
        try:
            written = os.write(write_fd, TOKEN * limit)
        except BlockingIOError:
            written = 0
        if written < limit:
            os.close(read_fd)
            os.close(write_fd)
            raise ConfigurationError.out_of_range(
                "jobserver limit", limit, f"The jobserver pipe holds at most {written} tokens"
            )
        os.set_blocking(write_fd, True)
        logger.debug("Created jobserver with %d tokens on fds %d,%d", limit, read_fd, write_fd)
        return cls(fds=(read_fd, write_fd), owned=True)

    @classmethod
    def from_env(cls, environ: Optional[MutableMapping[str, str]] = None) -> Optional["JobserverClient"]:
        """Attach to a jobserver advertised by a parent make, if there is one.

        Returns None when no jobserver is advertised or the advertised
        descriptors are not open in this process.
        """
        environ = os.environ if environ is None else environ
        for variable in MAKEFLAGS_VARIABLES:
            flags = environ.get(variable)
            if not flags:
                continue
            matches = _AUTH_PATTERN.findall(flags)
            if not matches:
                continue
            # make honours the last occurrence
            return cls._from_auth(matches[-1], variable)
        return None

    @classmethod
    def _from_auth(cls, auth: str, variable: str) -> Optional["JobserverClient"]:
        if auth.startswith("fifo:"):
            path = Path(auth[len("fifo:") :])
            if not path.exists():
                logger.debug("Jobserver fifo %s from %s does not exist", path, variable)
                return None
            return cls(fifo=path)
        try:
            read_text, write_text = auth.split(",", 1)
            fds = (int(read_text), int(write_text))
        except ValueError as exc:
            raise ConfigurationError.invalid_format(variable, auth, "--jobserver-auth=R,W or fifo:PATH") from exc
        for fd in fds:
            try:
                os.fstat(fd)
            except OSError:
                logger.debug("Jobserver fd %d from %s is not open; ignoring jobserver", fd, variable)
                return None
        return cls(fds=fds)

    @property
    def auth_argument(self) -> str:
        if self.fifo is not None:
            return f"fifo:{self.fifo}"
        assert self.fds is not None
        return f"{self.fds[0]},{self.fds[1]}"

    def makeflags(self) -> str:
        auth = self.auth_argument
        if self.fds is not None:
            return f"-j --jobserver-fds={auth} --jobserver-auth={auth}"
        return f"-j --jobserver-auth={auth}"

    def configure(self, spawn_kwargs: Dict[str, Any], *, make: bool = False) -> None:
        """Prepare ``subprocess.Popen`` keyword arguments so the child joins this jobserver.

        Sets CARGO_MAKEFLAGS in the child environment (plus MAKEFLAGS and
        MFLAGS when *make* is true) and adds the pipe descriptors to
        ``pass_fds`` so they survive exec.
        """
        if self._closed:
            raise ConfigurationError("Jobserver has already been closed")
        env = spawn_kwargs.get("env")
        env = dict(os.environ) if env is None else dict(env)
        flags = self.makeflags()
        env["CARGO_MAKEFLAGS"] = flags
        if make:
            env["MAKEFLAGS"] = flags
            env["MFLAGS"] = flags
        spawn_kwargs["env"] = env
        if self.fds is not None:
            pass_fds = tuple(spawn_kwargs.get("pass_fds", ()))
            spawn_kwargs["pass_fds"] = pass_fds + tuple(fd for fd in self.fds if fd not in pass_fds)

    def close(self) -> None:
        """Close descriptors created by :meth:`new`; inherited descriptors are left alone."""
        if self._closed:
            return
        self._closed = True
        if self._owned and self.fds is not None:
            for fd in self.fds:
                try:
                    os.close(fd)
                except OSError as exc:
                    logger.debug("Closing jobserver fd %d failed: %s", fd, exc)

    def __enter__(self) -> "JobserverClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["JobserverClient", "MAKEFLAGS_VARIABLES", "TOKEN"]
