"""
Cooperative time budget and cancellation.

Every search loop asks its guard `expired()` between steps and returns its
best-so-far result when the answer is yes. The hard upper bound for loops
that miss a check is the watchdog in gcp.watchdog.
"""

import threading
import time
from typing import Callable, Optional

from .errors import SoftTimeExceeded


class CancellationToken:
    """Flag set from outside a run (reset, escalation abort) and polled inside it."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class TimeBudgetGuard:
    """
    Global deadline shared by all attempts of one run.

    Args:
        time_limit: Budget in seconds, measured from construction
        cancel_token: Optional token; a cancelled run counts as expired
        clock: Monotonic clock in seconds
    """

    def __init__(
        self,
        time_limit: float,
        cancel_token: Optional[CancellationToken] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.time_limit = time_limit
        self.cancel_token = cancel_token or CancellationToken()
        self.clock = clock
        self.started_at = clock()
        self.deadline = self.started_at + time_limit

    def elapsed(self) -> float:
        return self.clock() - self.started_at

    def remaining(self) -> float:
        return max(0.0, self.deadline - self.clock())

    @property
    def cancelled(self) -> bool:
        return self.cancel_token.cancelled

    @property
    def timed_out(self) -> bool:
        return self.clock() >= self.deadline

    def expired(self) -> bool:
        """True once the deadline has passed or the run was cancelled."""
        return self.cancel_token.cancelled or self.clock() >= self.deadline

    def sub_budget(self, seconds: float) -> float:
        """A per-call budget that never outlives the global deadline."""
        return max(0.0, min(seconds, self.remaining()))

    def check_call(self, started_at: float, budget: float, label: str = "call") -> None:
        """
        Raise SoftTimeExceeded if a blocking call that began at `started_at`
        ran past its `budget` (seconds) or past the global deadline.
        """
        took = self.clock() - started_at
        if took > budget or self.expired():
            raise SoftTimeExceeded(f"{label} took {took:.3f}s (budget {budget:.3f}s)")
