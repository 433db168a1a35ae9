"""
Common contract of the coloring strategies.

A strategy makes one attempt: color the graph using at most `ctx.max_colors`
colors (None = unbounded) before the guard expires. The EscalationDriver
decides what happens after the attempt.
"""

import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from .budget import TimeBudgetGuard
from .coloring import ColoringState, count_conflicts
from .config import RunParams
from .instance import GraphInstance
from .progress import ProgressReporter
from .stagnation import StagnationMonitor


class AttemptOutcome(Enum):
    """How an attempt ended."""

    SOLVED = "solved"  # zero conflicts reached
    STAGNATED = "stagnated"  # insufficient progress over a monitoring window
    EXHAUSTED = "exhausted"  # search space or step budget used up at this k
    FINISHED = "finished"  # ran to its natural end (greedy pass, temperature floor)
    TIMED_OUT = "timed_out"  # global deadline reached
    CANCELLED = "cancelled"


@dataclass
class AttemptResult:
    """Best coloring of one attempt and how the attempt ended."""

    outcome: AttemptOutcome
    coloring: list[int]
    conflicts: int
    max_colors: Optional[int]
    iterations: int = 0
    message: str = ""

    @property
    def solved(self) -> bool:
        return self.outcome is AttemptOutcome.SOLVED

    @property
    def stopped(self) -> bool:
        """True if the attempt ended because the run ran out of time or was cancelled."""
        return self.outcome in (AttemptOutcome.TIMED_OUT, AttemptOutcome.CANCELLED)


@dataclass
class RunContext:
    """
    Per-attempt state: the graph, a fresh coloring, the best-known coloring,
    configuration, the shared deadline and the attempt's random generator.

    Created by the driver for every attempt and dropped when it ends.
    """

    instance: GraphInstance
    params: RunParams
    guard: TimeBudgetGuard
    reporter: ProgressReporter
    max_colors: Optional[int] = None
    step_budget: int = 0
    attempt: int = 0

    state: ColoringState = field(init=False)
    rng: random.Random = field(init=False)
    best_coloring: Optional[list[int]] = field(default=None, init=False)
    best_conflicts: Optional[int] = field(default=None, init=False)

    def __post_init__(self):
        self.state = ColoringState(self.instance)
        seed = None if self.params.seed is None else self.params.seed + self.attempt
        self.rng = random.Random(seed)

    @property
    def num_colors(self) -> int:
        """The color budget as an int; only valid for bounded attempts."""
        if self.max_colors is None:
            raise ValueError("attempt has no color budget")
        return self.max_colors

    def should_stop(self) -> bool:
        return self.guard.expired()

    def stop_outcome(self) -> AttemptOutcome:
        return AttemptOutcome.CANCELLED if self.guard.cancelled else AttemptOutcome.TIMED_OUT

    def record_best(self, coloring: Sequence[int], conflicts: int) -> bool:
        """Keep a copy of `coloring` if it beats the best of this attempt."""
        if self.best_conflicts is not None and conflicts >= self.best_conflicts:
            return False
        self.best_conflicts = conflicts
        self.best_coloring = list(coloring)
        return True

    def new_stagnation_monitor(self) -> StagnationMonitor:
        return StagnationMonitor(self.params.stagnation_window, clock=time.perf_counter)

    def random_coloring(self) -> list[int]:
        """Uniform random coloring over 1..max_colors."""
        k = self.num_colors
        return [self.rng.randint(1, k) for _ in range(self.instance.num_vertices)]

    def result(
        self,
        outcome: AttemptOutcome,
        coloring: Optional[Sequence[int]] = None,
        conflicts: Optional[int] = None,
        iterations: int = 0,
        message: str = "",
    ) -> AttemptResult:
        """
        Package the attempt's result. Defaults to the best recorded coloring,
        falling back to the live state when nothing was recorded.
        """
        if coloring is None:
            if self.best_coloring is not None:
                coloring, conflicts = self.best_coloring, self.best_conflicts
            else:
                coloring = self.state.snapshot()
        if conflicts is None:
            conflicts = count_conflicts(self.instance, coloring)
        return AttemptResult(
            outcome=outcome,
            coloring=list(coloring),
            conflicts=conflicts,
            max_colors=self.max_colors,
            iterations=iterations,
            message=message,
        )


class ColoringStrategy:
    """
    Base class of the twelve strategies.

    Attributes:
        name: External algorithm identifier
        escalates: Whether the driver retries with more colors after a failed attempt
        initial_colors: First color budget tried by the driver for escalating strategies
    """

    name: str = ""
    escalates: bool = True
    initial_colors: int = 3

    def attempt(self, ctx: RunContext) -> AttemptResult:
        raise NotImplementedError

    def get_params(self) -> dict:
        """Get strategy parameters as a dictionary."""
        return {"solver": self.name, "escalates": self.escalates, "initial_colors": self.initial_colors}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
