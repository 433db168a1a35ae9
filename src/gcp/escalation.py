"""
Escalation driver: the outer loop of a run.

Non-escalating strategies (the greedy family and the ILP bridge) get a single
attempt. The others start at a small color budget and, whenever an attempt
ends without a proper coloring, retry with more colors on fresh state until
one succeeds or the shared deadline passes. The budget grows by

    residual conflicts > 1000 -> +5, > 100 -> +2, else +1

and never exceeds the number of nodes.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .budget import TimeBudgetGuard
from .config import RunParams
from .instance import GraphInstance
from .progress import ProgressReporter
from .strategy import AttemptOutcome, AttemptResult, ColoringStrategy, RunContext

logger = logging.getLogger(__name__)


def escalation_step(conflicts: int) -> int:
    """How many colors to add after an attempt that ended with `conflicts`."""
    if conflicts > 1000:
        return 5
    if conflicts > 100:
        return 2
    return 1


def next_color_budget(k: int, conflicts: int, num_vertices: int) -> int:
    return max(k, min(k + escalation_step(conflicts), max(num_vertices, 1)))


def step_budget_for(params: RunParams, attempt: int) -> int:
    """Exact-search step budget: doubled before every attempt, capped."""
    return min(params.step_budget * 2 ** (attempt + 1), params.step_budget_cap)


@dataclass
class RunOutcome:
    """Everything the driver learned during one run."""

    best: AttemptResult
    attempts: list[AttemptResult] = field(default_factory=list)
    color_budgets: list[Optional[int]] = field(default_factory=list)  # k per attempt
    timed_out: bool = False

    @property
    def coloring(self) -> list[int]:
        return self.best.coloring

    @property
    def claimed_solved(self) -> bool:
        return self.best.solved


class EscalationDriver:
    """
    Run a strategy attempt by attempt under one global deadline.

    Args:
        strategy: Strategy to run
        instance: Graph to color
        params: Run configuration
        reporter: Progress sink shared by all attempts
        guard: Global deadline and cancellation
    """

    def __init__(
        self,
        strategy: ColoringStrategy,
        instance: GraphInstance,
        params: RunParams,
        reporter: ProgressReporter,
        guard: TimeBudgetGuard,
    ):
        self.strategy = strategy
        self.instance = instance
        self.params = params
        self.reporter = reporter
        self.guard = guard

    def _context(self, max_colors: Optional[int], attempt: int) -> RunContext:
        return RunContext(
            instance=self.instance,
            params=self.params,
            guard=self.guard,
            reporter=self.reporter,
            max_colors=max_colors,
            step_budget=step_budget_for(self.params, attempt),
            attempt=attempt,
        )

    def run(self) -> RunOutcome:
        if not self.strategy.escalates:
            ctx = self._context(self.params.max_colors_hint, attempt=0)
            logger.info(f"{self.strategy.name}: single pass (max colors {ctx.max_colors})")
            result = self.strategy.attempt(ctx)
            return RunOutcome(
                best=result,
                attempts=[result],
                color_budgets=[ctx.max_colors],
                timed_out=result.outcome is AttemptOutcome.TIMED_OUT or self.guard.timed_out,
            )

        n = self.instance.num_vertices
        k = min(self.params.max_colors_hint or self.strategy.initial_colors, max(n, 1))
        attempts: list[AttemptResult] = []
        budgets: list[Optional[int]] = []
        attempt = 0

        while True:
            ctx = self._context(k, attempt)
            self.reporter.begin_attempt()
            self.reporter.status(ctx.state.colors, f"k={k}")
            logger.info(f"{self.strategy.name}: attempt {attempt + 1} with k={k}")

            result = self.strategy.attempt(ctx)
            attempts.append(result)
            budgets.append(k)
            logger.info(
                f"{self.strategy.name}: k={k} ended {result.outcome.value} "
                f"with {result.conflicts} conflicts after {result.iterations} iterations"
            )

            if result.solved or result.stopped or self.guard.expired():
                break

            new_k = next_color_budget(k, result.conflicts, n)
            if new_k > k:
                self.reporter.status(result.coloring, f"Boosting colors to k={new_k}")
                logger.info(f"{self.strategy.name}: boosting colors to k={new_k}")
            k = new_k
            attempt += 1

        # Complete colorings first, then fewest conflicts, then the earliest (smallest k)
        best = min(attempts, key=lambda r: (0 in r.coloring, r.conflicts))
        if attempts[-1].solved:
            best = attempts[-1]
        return RunOutcome(
            best=best,
            attempts=attempts,
            color_budgets=budgets,
            timed_out=attempts[-1].outcome is AttemptOutcome.TIMED_OUT or self.guard.timed_out,
        )
