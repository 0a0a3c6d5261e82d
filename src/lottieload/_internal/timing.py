"""Phase timing for load diagnostics."""

from __future__ import annotations

from datetime import timedelta
from time import perf_counter
from typing import Callable


class PhaseTimer:
    """Measures the time between consecutive phase boundaries.

    Each call to elapsed_and_restart() returns the time since the timer was
    started or last queried, then restarts from that point.
    """

    def __init__(self, clock: Callable[[], float] = perf_counter) -> None:
        self._clock = clock
        self._started = clock()

    def restart(self) -> None:
        self._started = self._clock()

    def elapsed_and_restart(self) -> timedelta:
        now = self._clock()
        elapsed = max(now - self._started, 0.0)
        self._started = now
        return timedelta(seconds=elapsed)
