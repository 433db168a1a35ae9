"""
Simulated annealing over a fixed color budget.

Each iteration recolors a random node with a random color; improving moves are
always taken, worsening ones with probability exp(-delta / T). T cools
geometrically every iteration.
"""

import logging
import math

from .strategy import AttemptOutcome, AttemptResult, ColoringStrategy, RunContext

logger = logging.getLogger(__name__)


class SimulatedAnnealing(ColoringStrategy):
    name = "simulatedAnnealing"

    def attempt(self, ctx: RunContext) -> AttemptResult:
        params = ctx.params
        rng = ctx.rng
        state = ctx.state
        k = ctx.num_colors
        n = ctx.instance.num_vertices

        state.assign(ctx.random_coloring())
        current = state.conflict_count()
        ctx.record_best(state.colors, current)
        ctx.reporter.report_best(0, state.colors, current)

        temperature = params.temperature
        monitor = ctx.new_stagnation_monitor()
        monitor.start(current)
        iteration = 0

        while current > 0:
            if ctx.should_stop():
                return ctx.result(ctx.stop_outcome(), iterations=iteration)
            if temperature < params.min_temperature:
                logger.debug(f"sa: temperature floor reached at k={k}, best {ctx.best_conflicts}")
                return ctx.result(AttemptOutcome.FINISHED, iterations=iteration, message="frozen")
            if monitor.check(ctx.best_conflicts):
                ctx.reporter.status(ctx.best_coloring, monitor.describe())
                return ctx.result(AttemptOutcome.STAGNATED, iterations=iteration, message=monitor.describe())

            iteration += 1
            u = rng.randrange(n)
            color = rng.randint(1, k)
            delta = state.move_delta(u, color)
            if delta < 0 or rng.random() < math.exp(-delta / temperature):
                state[u] = color
                current += delta
                if ctx.record_best(state.colors, current):
                    ctx.reporter.report_best(iteration, state.colors, current)

            temperature *= params.cooling_rate
            ctx.reporter.report(iteration, state.colors)

        return ctx.result(AttemptOutcome.SOLVED, iterations=iteration)
