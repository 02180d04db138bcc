"""
Time sources for the timing engine.

The engine never owns a timer. It reads a Clock at the moment a split
is recorded and keeps only the reading taken at session start, so the
clock itself stays a read-only value.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """
    Interface for monotonic time sources.

    Using a Protocol here means the engine doesn't care whether time
    comes from the OS or from a test that advances it by hand.
    """

    def now(self) -> float:
        """Monotonic seconds from an arbitrary origin."""
        ...


class MonotonicClock:
    """Clock backed by time.monotonic; unaffected by wall-clock changes."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """
    Clock that only moves when told to.

    Handy for replaying recorded sessions and for tests.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += seconds

    def set(self, value: float) -> None:
        if value < self._now:
            raise ValueError("Clock cannot move backwards")
        self._now = value
