"""Elapsed time between successive frames."""

from __future__ import annotations

import time
from collections.abc import Callable

__all__ = ["FrameTimer", "get_time_delta_seconds"]

_NANOSECONDS_PER_SECOND = 1_000_000_000.0


class FrameTimer:
    """Measures the seconds passed since the previous measurement.

    The first measurement is taken relative to the moment the timer was made.
    ``clock`` returns a monotonic time in nanoseconds.
    """

    def __init__(self, clock: Callable[[], int] = time.monotonic_ns) -> None:
        self._clock = clock
        self._previous = clock()

    def delta_seconds(self) -> float:
        """Seconds since the last call (or since construction)."""
        now = self._clock()
        delta = (now - self._previous) / _NANOSECONDS_PER_SECOND
        self._previous = now
        return delta


_default_timer = FrameTimer()


def get_time_delta_seconds() -> float:
    """Seconds since the previous call, measured from module load for the first."""
    return _default_timer.delta_seconds()