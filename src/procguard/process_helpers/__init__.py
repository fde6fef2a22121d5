"""Launch, classify and terminate supervised child processes."""

from .exit_status import classify_returncode
from .launcher import build_spawn_kwargs, spawn_child
from .terminator import terminate_process_tree

__all__ = [
    "build_spawn_kwargs",
    "classify_returncode",
    "spawn_child",
    "terminate_process_tree",
]
