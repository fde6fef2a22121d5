"""Map subprocess return codes onto ProcessStatus."""

from __future__ import annotations

import os
from typing import Optional

from ..process_status import ProcessStatus


def classify_returncode(returncode: Optional[int], *, posix: Optional[bool] = None) -> ProcessStatus:
    """
    Convert a ``Popen.returncode`` of an exited child into a ProcessStatus.

    On POSIX a negative return code means the child was killed by that
    signal. Anything that is neither an exit code nor a POSIX signal maps to
    ``ProcessStatus.other()``.
    """
    if posix is None:
        posix = os.name == "posix"
    if not isinstance(returncode, int) or isinstance(returncode, bool):
        return ProcessStatus.other()
    if returncode == 0:
        return ProcessStatus.success()
    if returncode > 0:
        return ProcessStatus.failure(returncode)
    if posix:
        return ProcessStatus.signalled(-returncode)
    return ProcessStatus.other()
