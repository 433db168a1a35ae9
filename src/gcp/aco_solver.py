"""
Ant Colony Optimization over a fixed color budget.

Algorithm overview:
1. Initialize pheromone tau[v][c] for every node v and color c
2. For each generation:
   a. Each ant colors the nodes in index order; color c for node v is chosen
      with probability ~ tau[v][c]^alpha * eta^beta, where
      eta = 1 / (1 + neighbors of v already colored c by this ant)
   b. With probability q0 the ant takes the best weighted color outright,
      otherwise it spins the roulette wheel
   c. Evaporate all pheromone by (1 - rho), then deposit
      1 / (1 + conflicts) on the choices of the generation's best ant
3. Stop at zero conflicts, at the deadline or on stagnation
"""

import logging
import random

from .coloring import count_conflicts
from .config import RunParams
from .instance import GraphInstance
from .strategy import AttemptOutcome, AttemptResult, ColoringStrategy, RunContext

logger = logging.getLogger(__name__)

REPORT_EVERY_GENERATIONS = 5
MAX_ANTS = 20


def default_num_ants(num_vertices: int) -> int:
    return max(1, min(MAX_ANTS, num_vertices // 2))


class AntColony(ColoringStrategy):
    name = "antColony"

    def attempt(self, ctx: RunContext) -> AttemptResult:
        params = ctx.params
        instance = ctx.instance
        rng = ctx.rng
        k = ctx.num_colors
        n = instance.num_vertices
        num_ants = params.num_ants or default_num_ants(n)

        # Index 0 (uncolored) is never chosen
        pheromone = [[params.initial_pheromone] * (k + 1) for _ in range(n)]
        monitor = ctx.new_stagnation_monitor()
        generation = 0

        while True:
            if ctx.should_stop():
                return ctx.result(ctx.stop_outcome(), iterations=generation)

            generation += 1
            iteration_best = None
            iteration_best_conflicts = 0
            for _ in range(num_ants):
                coloring = self._construct_solution(instance, pheromone, k, params, rng)
                conflicts = count_conflicts(instance, coloring)
                if iteration_best is None or conflicts < iteration_best_conflicts:
                    iteration_best = coloring
                    iteration_best_conflicts = conflicts

            self._update_pheromones(pheromone, iteration_best, iteration_best_conflicts, params.rho)

            ctx.state.assign(iteration_best)
            if ctx.record_best(iteration_best, iteration_best_conflicts):
                ctx.reporter.report_best(generation, iteration_best, iteration_best_conflicts)
            ctx.reporter.report(generation, iteration_best, every=REPORT_EVERY_GENERATIONS)

            if generation == 1:
                monitor.start(ctx.best_conflicts)
            if ctx.best_conflicts == 0:
                return ctx.result(AttemptOutcome.SOLVED, iterations=generation)
            if monitor.check(ctx.best_conflicts):
                ctx.reporter.status(ctx.best_coloring, monitor.describe())
                return ctx.result(AttemptOutcome.STAGNATED, iterations=generation, message=monitor.describe())

    def _construct_solution(
        self,
        instance: GraphInstance,
        pheromone: list[list[float]],
        k: int,
        params: RunParams,
        rng: random.Random,
    ) -> list[int]:
        """Build one ant's complete coloring."""
        coloring = [0] * instance.num_vertices
        candidates = list(range(1, k + 1))
        for v in range(instance.num_vertices):
            # Neighbors already colored with each color by this ant
            local = [0] * (k + 1)
            for u in instance.adjacency[v]:
                local[coloring[u]] += 1

            weights = [
                (pheromone[v][c] ** params.alpha) * ((1.0 / (1 + local[c])) ** params.beta)
                for c in candidates
            ]

            if rng.random() < params.q0:
                best = 0
                for i in range(1, k):
                    if weights[i] > weights[best]:
                        best = i
                coloring[v] = candidates[best]
                continue

            total = sum(weights)
            if total <= 0:
                coloring[v] = rng.choice(candidates)
                continue
            probabilities = [w / total for w in weights]
            coloring[v] = self._roulette_select(candidates, probabilities, rng)
        return coloring

    def _roulette_select(
        self,
        candidates: list[int],
        probabilities: list[float],
        rng: random.Random,
    ) -> int:
        """
        Select an item using roulette wheel selection.

        Args:
            candidates: List of candidate items
            probabilities: Selection probabilities
            rng: Random number generator

        Returns:
            Selected item
        """
        r = rng.random()
        cumulative = 0.0
        for item, prob in zip(candidates, probabilities):
            cumulative += prob
            if r <= cumulative:
                return item
        # Rounding can leave the cumulative sum just below r
        return candidates[-1]

    def _update_pheromones(
        self,
        pheromone: list[list[float]],
        best_coloring: list[int],
        best_conflicts: int,
        rho: float,
    ) -> None:
        """Evaporate everywhere, then reinforce the generation's best choices."""
        for row in pheromone:
            for c in range(len(row)):
                row[c] *= 1.0 - rho

        deposit = 1.0 / (1 + best_conflicts)
        for v, c in enumerate(best_coloring):
            pheromone[v][c] += deposit

    def get_params(self) -> dict:
        params = super().get_params()
        params["max_ants"] = MAX_ANTS
        params["report_every"] = REPORT_EVERY_GENERATIONS
        return params
