"""
Exact search family: Backtracking, BranchAndBound and BruteForce.

All three walk the assignment tree depth-first with an explicit stack of
[position, color tried, inherited conflicts] frames instead of recursion.
At every frame the conflicts a color adds against already-assigned neighbors
are counted; a color is pruned when inherited + added conflicts reach the
incumbent bound. A full assignment is re-counted from scratch and becomes the
new incumbent if it is better; zero conflicts ends the search.

- Backtracking: degree order, incumbent bound 1, so only conflict-free partial
  assignments are extended
- BranchAndBound: degree order, infinite initial bound, so the best conflicted
  assignment is kept when no proper coloring exists at this k
- BruteForce: natural index order, bound 1, starting from a single color

Running out of stack or of the attempt's step budget gives up at the current k.
"""

import logging
import math

from .coloring import count_conflicts
from .greedy import greedy_coloring, welsh_powell_order
from .strategy import AttemptOutcome, AttemptResult, ColoringStrategy, RunContext

logger = logging.getLogger(__name__)


class StackSearch(ColoringStrategy):
    """Depth-first search over colors 1..k with conflict-bound pruning."""

    initial_bound: float = 1

    def order(self, ctx: RunContext) -> list[int]:
        return welsh_powell_order(ctx.instance)

    def attempt(self, ctx: RunContext) -> AttemptResult:
        instance = ctx.instance
        adjacency = instance.adjacency
        colors = ctx.state.colors
        k = ctx.num_colors
        order = self.order(ctx)
        n = len(order)
        if n == 0:
            return ctx.result(AttemptOutcome.SOLVED, colors, 0)

        budget = ctx.step_budget if ctx.step_budget > 0 else math.inf
        best = self.initial_bound
        stack = [[0, 0, 0]]
        steps = 0

        while stack:
            if steps >= budget:
                logger.debug(f"{self.name}: step budget {budget} spent at k={k}")
                return self._give_up(ctx, steps, "step budget")
            if ctx.should_stop():
                return ctx.result(ctx.stop_outcome(), iterations=steps)
            steps += 1

            frame = stack[-1]
            pos, color, inherited = frame
            u = order[pos]
            color += 1
            if color > k:
                colors[u] = 0
                stack.pop()
                continue
            frame[1] = color

            added = 0
            for v in adjacency[u]:
                if colors[v] == color:
                    added += 1
            total = inherited + added
            if total >= best:
                continue

            colors[u] = color
            if pos == n - 1:
                conflicts = count_conflicts(instance, colors)
                if conflicts < best:
                    best = conflicts
                    ctx.record_best(colors, conflicts)
                    ctx.reporter.report_best(steps, colors, conflicts)
                    if conflicts == 0:
                        return ctx.result(AttemptOutcome.SOLVED, iterations=steps)
            else:
                stack.append([pos + 1, 0, total])

            ctx.reporter.report(steps, colors)

        logger.debug(f"{self.name}: search space exhausted at k={k} after {steps} steps")
        return self._give_up(ctx, steps, "search exhausted")

    def _give_up(self, ctx: RunContext, steps: int, message: str) -> AttemptResult:
        """EXHAUSTED result; without an incumbent the capped greedy coloring stands in."""
        if ctx.best_coloring is None:
            fallback = greedy_coloring(ctx.instance, ctx.max_colors)
            ctx.record_best(fallback, count_conflicts(ctx.instance, fallback))
        return ctx.result(AttemptOutcome.EXHAUSTED, iterations=steps, message=message)

    def get_params(self) -> dict:
        params = super().get_params()
        params["initial_bound"] = self.initial_bound
        return params


class Backtracking(StackSearch):
    name = "backtracking"
    initial_bound = 1


class BranchAndBound(StackSearch):
    name = "branchAndBound"
    initial_bound = math.inf


class BruteForce(StackSearch):
    name = "bruteForce"
    initial_bound = 1
    initial_colors = 1

    def order(self, ctx: RunContext) -> list[int]:
        return list(range(ctx.instance.num_vertices))
