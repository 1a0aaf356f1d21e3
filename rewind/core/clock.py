"""
Timestamp sources for recorded actions.

Each PERFORM_ACTION record carries a millisecond timestamp. Production
engines read wall time; tests inject a DeterministicClock so recorded
history is reproducible.
"""

import time
from typing import Callable

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    """Current wall time in integer milliseconds."""
    return int(time.time() * 1000)


class DeterministicClock:
    """
    Monotonic fake clock.

    Every call returns the current value and then advances it by step.
    """

    def __init__(self, start: int = 0, step: int = 1) -> None:
        self.current = start
        self.step = step

    def now(self) -> int:
        """Get current timestamp without advancing."""
        return self.current

    def __call__(self) -> int:
        ts = self.current
        self.current += self.step
        return ts
