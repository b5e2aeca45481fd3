"""Time sources for the price oracle.

The exchange only needs "now" in whole unix seconds. Production code uses
the wall clock; simulations and tests drive a ManualClock.
"""

from __future__ import annotations

import time
from collections.abc import Callable

Clock = Callable[[], int]


def system_clock() -> int:
    """Current wall-clock time in whole unix seconds."""
    return int(time.time())


class ManualClock:
    """Clock that only moves when told to.

    Usage:
        clock = ManualClock(start=1_700_000_000)
        clock.advance(3600)
        swapper = Swapper(owner=OWNER, custody=bank, clock=clock)
    """

    def __init__(self, start: int = 1) -> None:
        if start < 0:
            raise ValueError(f"Clock cannot start before the epoch: {start}")
        self._now = start

    def __call__(self) -> int:
        return self._now

    @property
    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move the clock forward and return the new time."""
        if seconds < 0:
            raise ValueError(f"Clock cannot move backwards: {seconds}")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        """Jump to an absolute timestamp (never backwards)."""
        if timestamp < self._now:
            raise ValueError(f"Clock cannot move backwards: {timestamp} < {self._now}")
        self._now = timestamp
