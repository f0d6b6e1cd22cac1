"""
Clock Sources
=============

The timers and the draw pacing both depend on wall-clock time. The CPU
takes the clock as a plain callable returning seconds, so any of these work:

    time.monotonic          real time (the default)
    ManualClock()           deterministic time for tests and headless runs

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import time
from typing import Callable

Clock = Callable[[], float]

default_clock: Clock = time.monotonic


class ManualClock:
    """
    Clock that only moves when told to.

    Example:
        >>> clock = ManualClock()
        >>> clock.advance(0.5)
        >>> clock()
        0.5
    """

    def __init__(self, start: float = 0.0):
        self._now = start

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        if seconds < 0:
            raise ValueError(f"Cannot move clock backwards ({seconds}s)")
        self._now += seconds

    def advance_frames(self, frames: int = 1, rate: float = 60.0) -> None:
        """Move the clock forward by a number of frames at the given rate."""
        self.advance(frames / rate)
