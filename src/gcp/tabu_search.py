"""
Tabu search over a fixed color budget.

Algorithm overview:
1. Start from a random coloring with k colors
2. Each iteration, evaluate recoloring every conflicting node with every other color
3. Apply the best move that is not tabu; a tabu move is allowed only when it
   beats the best conflict count found so far (aspiration)
4. Forbid moving the node back to its old color for `tenure` iterations
5. Stop at zero conflicts, when no move is eligible, at the deadline or on stagnation
"""

import logging
from typing import Optional

from .strategy import AttemptOutcome, AttemptResult, ColoringStrategy, RunContext

logger = logging.getLogger(__name__)

REPORT_EVERY_ITERATIONS = 50


class TabuSearch(ColoringStrategy):
    name = "tabuSearch"

    def attempt(self, ctx: RunContext) -> AttemptResult:
        tenure = ctx.params.tabu_tenure
        state = ctx.state
        adjacency = ctx.instance.adjacency
        k = ctx.num_colors
        n = ctx.instance.num_vertices

        state.assign(ctx.random_coloring())
        colors = state.colors
        # Same-colored neighbors per node
        node_conflicts = [sum(1 for v in adjacency[u] if colors[v] == colors[u]) for u in range(n)]
        current = sum(node_conflicts) // 2
        ctx.record_best(colors, current)
        ctx.reporter.report_best(0, colors, current)

        # (node, color) -> first iteration at which the move is allowed again
        tabu: dict[tuple[int, int], int] = {}
        monitor = ctx.new_stagnation_monitor()
        monitor.start(current)
        iteration = 0

        while current > 0:
            if ctx.should_stop():
                return ctx.result(ctx.stop_outcome(), iterations=iteration)
            if monitor.check(ctx.best_conflicts):
                ctx.reporter.status(ctx.best_coloring, monitor.describe())
                return ctx.result(AttemptOutcome.STAGNATED, iterations=iteration, message=monitor.describe())

            iteration += 1
            best_move: Optional[tuple[int, int]] = None
            best_delta = 0
            for u in range(n):
                if node_conflicts[u] == 0:
                    continue
                for c in range(1, k + 1):
                    if c == colors[u]:
                        continue
                    delta = state.move_delta(u, c)
                    if tabu.get((u, c), 0) > iteration and current + delta >= ctx.best_conflicts:
                        continue
                    if best_move is None or delta < best_delta:
                        best_move = (u, c)
                        best_delta = delta

            if best_move is None:
                logger.debug(f"tabu: no eligible move at iteration {iteration}, k={k}")
                return ctx.result(AttemptOutcome.FINISHED, iterations=iteration, message="no eligible move")

            u, new_color = best_move
            old_color = colors[u]
            for v in adjacency[u]:
                if colors[v] == old_color:
                    node_conflicts[v] -= 1
                    node_conflicts[u] -= 1
                elif colors[v] == new_color:
                    node_conflicts[v] += 1
                    node_conflicts[u] += 1
            colors[u] = new_color
            current += best_delta
            tabu[u, old_color] = iteration + tenure

            if ctx.record_best(colors, current):
                ctx.reporter.report_best(iteration, colors, current)
            ctx.reporter.report(iteration, colors, every=REPORT_EVERY_ITERATIONS)

        return ctx.result(AttemptOutcome.SOLVED, iterations=iteration)

    def get_params(self) -> dict:
        params = super().get_params()
        params["report_every"] = REPORT_EVERY_ITERATIONS
        return params
