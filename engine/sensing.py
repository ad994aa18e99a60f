"""
GridCache — engine/sensing.py
Position sensing interface and the periodic refresh trigger.

Both are triggers only: they decide *when* the session re-reads the
player's position, never what happens to the grid.
"""

from __future__ import annotations

import time
from typing import Callable, Optional, Protocol, Tuple


class PositionUnavailable(Exception):
    """Raised by a PositionSource when no fix can be obtained."""


class PositionSource(Protocol):
    def current_position(self) -> Tuple[float, float]:
        """Returns (lat, lng) or raises PositionUnavailable."""
        ...


class FixedPositionSource:
    """Reports a settable position. position=None behaves like a lost fix."""

    def __init__(self, position: Optional[Tuple[float, float]] = None):
        self.position = position

    def current_position(self) -> Tuple[float, float]:
        if self.position is None:
            raise PositionUnavailable("no position fix")
        return self.position


class PeriodicTrigger:
    """
    Fixed-interval trigger polled from the main loop.
    Disabling only prevents future firings.
    """

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self.clock = clock
        self.enabled = False
        self._next_due: Optional[float] = None

    def enable(self, now: Optional[float] = None) -> None:
        if self.enabled:
            return
        self.enabled = True
        # Fire on the first poll after enabling
        self._next_due = self.clock() if now is None else now

    def disable(self) -> None:
        self.enabled = False
        self._next_due = None

    def due(self, now: Optional[float] = None) -> bool:
        """True at most once per interval while enabled."""
        if not self.enabled or self._next_due is None:
            return False
        if now is None:
            now = self.clock()
        if now < self._next_due:
            return False
        self._next_due = now + self.interval
        return True
