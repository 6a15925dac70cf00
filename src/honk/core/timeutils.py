"""
Clock abstraction for poll loops
"""
from __future__ import annotations

import time


class Clock:
    """Monotonic time source plus blocking sleep.

    Poll loops take a clock so that their timing is testable without real waits.
    """

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class Deadline:
    """Verb-level wall-clock budget, checked at the top of every poll iteration."""

    def __init__(self, clock: Clock, timeout: float) -> None:
        self.clock = clock
        self.timeout = float(timeout)
        self.started = clock.now()

    @property
    def elapsed(self) -> float:
        return self.clock.now() - self.started

    @property
    def remaining(self) -> float:
        return max(0.0, self.timeout - self.elapsed)

    def expired(self) -> bool:
        return self.elapsed >= self.timeout

    def sleep(self, interval: float) -> None:
        """Sleep for ``interval`` but never past the deadline."""
        self.clock.sleep(min(interval, self.remaining))


system_clock = Clock()
