"""Small Python programs used as supervised children in tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

SLEEP_FOREVER = "import time\nwhile True:\n    time.sleep(0.1)\n"


def python_argv(code: str) -> List[str]:
    return [sys.executable, "-c", code]


def exit_with(code: int) -> List[str]:
    return python_argv(f"import sys; sys.exit({code})")


def sleeper() -> List[str]:
    return python_argv(SLEEP_FOREVER)


def spawn_grandchild(pid_file: Path) -> List[str]:
    """A child that starts a sleeping grandchild, records its pid, then sleeps itself."""
    code = (
        "import subprocess, sys, time, pathlib\n"
        f"gc = subprocess.Popen([sys.executable, '-c', {SLEEP_FOREVER!r}])\n"
        f"tmp = pathlib.Path({str(pid_file)!r} + '.tmp')\n"
        "tmp.write_text(str(gc.pid))\n"
        f"tmp.replace({str(pid_file)!r})\n"
        "while True:\n"
        "    time.sleep(0.1)\n"
    )
    return python_argv(code)


def wait_for_file(path: Path, timeout: float = 10.0) -> str:
    import time

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if path.exists():
            return path.read_text()
        time.sleep(0.02)
    raise AssertionError(f"{path} was not written within {timeout}s")
