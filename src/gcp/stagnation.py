"""
Stagnation detection for the metaheuristics.

Every window the monitor compares the best conflict count at the start of the
window with the best count now. The improvement required shrinks as the
reference conflict count approaches zero:

    > 100 -> 5, > 80 -> 4, > 50 -> 3, > 20 -> 2, else 1
"""

import time
from typing import Callable, Optional

# (lower bound, required improvement), checked top-down
_THRESHOLD_BANDS = ((100, 5), (80, 4), (50, 3), (20, 2))


def dynamic_threshold(conflicts: int) -> int:
    """Minimum improvement over a window for a search at `conflicts` to count as progressing."""
    for bound, threshold in _THRESHOLD_BANDS:
        if conflicts > bound:
            return threshold
    return 1


class StagnationMonitor:
    """
    Judges once per wall-clock window whether the best conflict count improved enough.

    Usage:
        monitor = StagnationMonitor(window_seconds=5.0)
        monitor.start(best_conflicts)
        while searching:
            ...
            if monitor.check(best_conflicts):
                break  # stagnated, hand control back to the driver
    """

    def __init__(self, window_seconds: float, clock: Callable[[], float] = time.perf_counter):
        self.window_seconds = window_seconds
        self.clock = clock
        self.reference_conflicts: Optional[int] = None
        self.window_start = 0.0
        self.last_improvement = 0
        self.last_threshold = 0

    def start(self, best_conflicts: int) -> None:
        """Open the first window with the attempt's initial best."""
        self.reference_conflicts = best_conflicts
        self.window_start = self.clock()

    def check(self, best_conflicts: int) -> bool:
        """
        Return True if the attempt is stagnated.

        Outside a window boundary this is a single clock read. At a boundary the
        improvement since the window start is compared with the dynamic
        threshold; on success a new window opens at the current best.
        """
        if self.reference_conflicts is None:
            self.start(best_conflicts)
            return False

        now = self.clock()
        if now - self.window_start < self.window_seconds:
            return False

        self.last_threshold = dynamic_threshold(self.reference_conflicts)
        self.last_improvement = self.reference_conflicts - best_conflicts
        if self.last_improvement < self.last_threshold:
            return True

        self.reference_conflicts = best_conflicts
        self.window_start = now
        return False

    def describe(self) -> str:
        return f"Stagnated (imp {self.last_improvement} < thres {self.last_threshold})"
