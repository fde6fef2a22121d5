"""Cheap shell-style quoting for log lines."""

from __future__ import annotations

from typing import Iterable

_ESCAPED_CHARS = frozenset(" \t\n\r\\'\"")


def cheap_shell_quote(argv: Iterable[str]) -> str:
    """Quote an argv sequence in Unix shell style.

    This is not guaranteed to produce something a shell would parse back to
    the same argv; it is only for making debug logs legible. Whitespace,
    backslashes and quote characters are each escaped with a backslash.
    """
    return " ".join("".join("\\" + c if c in _ESCAPED_CHARS else c for c in arg) for arg in argv)


__all__ = ["cheap_shell_quote"]
