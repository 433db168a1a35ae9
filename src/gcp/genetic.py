"""
Genetic algorithm over a fixed color budget.

Individuals are complete colorings ranked by conflict count. Every generation
keeps the two best unchanged and fills the rest with children of a tournament
winner (better of two random picks) and a random partner, joined by
single-point crossover and occasionally mutated at one node.
"""

import logging

from .coloring import count_conflicts
from .strategy import AttemptOutcome, AttemptResult, ColoringStrategy, RunContext

logger = logging.getLogger(__name__)

ELITE_SIZE = 2
REPORT_EVERY_GENERATIONS = 20


class GeneticAlgorithm(ColoringStrategy):
    name = "geneticAlgorithm"

    def attempt(self, ctx: RunContext) -> AttemptResult:
        params = ctx.params
        rng = ctx.rng
        instance = ctx.instance
        k = ctx.num_colors
        n = instance.num_vertices
        size = params.population

        population = [ctx.random_coloring() for _ in range(size)]
        fitness = [count_conflicts(instance, ind) for ind in population]
        monitor = ctx.new_stagnation_monitor()
        generation = 0

        while True:
            ranked = sorted(range(size), key=lambda i: fitness[i])
            population = [population[i] for i in ranked]
            fitness = [fitness[i] for i in ranked]

            if ctx.record_best(population[0], fitness[0]):
                ctx.reporter.report_best(generation, population[0], fitness[0])
            if generation == 0:
                monitor.start(fitness[0])

            if fitness[0] == 0:
                return ctx.result(AttemptOutcome.SOLVED, iterations=generation)
            if ctx.should_stop():
                return ctx.result(ctx.stop_outcome(), iterations=generation)
            if params.generations is not None and generation >= params.generations:
                return ctx.result(AttemptOutcome.FINISHED, iterations=generation, message="generation cap")
            if monitor.check(ctx.best_conflicts):
                ctx.reporter.status(ctx.best_coloring, monitor.describe())
                return ctx.result(AttemptOutcome.STAGNATED, iterations=generation, message=monitor.describe())

            generation += 1
            children = [list(population[i]) for i in range(min(ELITE_SIZE, size))]
            while len(children) < size:
                a, b = rng.randrange(size), rng.randrange(size)
                parent1 = population[a] if fitness[a] <= fitness[b] else population[b]
                parent2 = population[rng.randrange(size)]
                point = rng.randrange(n)
                child = parent1[:point] + parent2[point:]
                if rng.random() < params.mutation_rate:
                    child[rng.randrange(n)] = rng.randint(1, k)
                children.append(child)

            population = children
            fitness = [count_conflicts(instance, ind) for ind in population]
            ctx.reporter.report(generation, population[0], every=REPORT_EVERY_GENERATIONS)

    def get_params(self) -> dict:
        params = super().get_params()
        params["elite_size"] = ELITE_SIZE
        return params
