"""Dotenv file loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from ..errors import ConfigurationError

_EXPORT_PREFIX = "export "
_QUOTES = ("'", '"')


class DotenvLoader:
    """Reads ``KEY=VALUE`` defaults from .env-style files."""

    @staticmethod
    def load_from_file(path: Path) -> Dict[str, str]:
        """
        Load key-value pairs from a .env file.

        Blank lines, ``#`` comments and lines without ``=`` are ignored. A
        leading ``export`` is accepted, and a value wrapped in matching single
        or double quotes is unquoted. For unquoted values, a `` #`` starts a
        trailing comment. When a key repeats, the last assignment wins.

        Returns:
            Dictionary of variables declared in the file; empty when the file is absent

        Raises:
            ConfigurationError: If the file exists but cannot be read
        """
        if not path.is_file():
            return {}
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Failed to load configuration from {path}") from exc
        return DotenvLoader.parse_lines(text.splitlines())

    @staticmethod
    def parse_lines(lines: Iterable[str]) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for line in lines:
            pair = DotenvLoader._parse_line(line)
            if pair is not None:
                values[pair[0]] = pair[1]
        return values

    @staticmethod
    def _parse_line(line: str) -> Optional[Tuple[str, str]]:
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            return None
        key, raw_value = stripped.split("=", 1)
        key = key.strip()
        if key.startswith(_EXPORT_PREFIX):
            key = key[len(_EXPORT_PREFIX) :].strip()
        if not key:
            return None
        return key, DotenvLoader._unquote(raw_value.strip())

    @staticmethod
    def _unquote(value: str) -> str:
        if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
            return value[1:-1]
        comment = value.find(" #")
        if comment != -1:
            value = value[:comment].rstrip()
        return value
