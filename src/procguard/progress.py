"""Progress indicators ticked while waiting for a child."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class ProgressTicker(Protocol):
    """Anything with a ``tick()`` that is called once per poll-loop iteration."""

    def tick(self) -> None: ...


class NullProgress:
    """Progress indicator that does nothing."""

    def tick(self) -> None:
        return None


class LoggingProgress:
    """Emit a DEBUG heartbeat every ``every`` ticks."""

    def __init__(self, label: str, every: int = 100) -> None:
        if every < 1:
            raise ValueError(f"every must be at least 1 (got {every})")
        self.label = label
        self.every = every
        self.ticks = 0

    def tick(self) -> None:
        self.ticks += 1
        if self.ticks % self.every == 0:
            logger.debug("%s still running after %d polls", self.label, self.ticks)


__all__ = ["LoggingProgress", "NullProgress", "ProgressTicker"]
