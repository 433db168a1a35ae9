"""
Greedy coloring family: BasicGreedy, Welsh-Powell, DSATUR and RLF.

All four visit the nodes once and give each the smallest color not used by a
colored neighbor. They differ in the visitation order:

- BasicGreedy: natural index order
- WelshPowell: non-increasing static degree
- DSatur: the uncolored node with the highest saturation degree (distinct
  colors among its colored neighbors), ties broken by degree, then by the
  lowest index
- RLF: one color class at a time, seeded with the uncolored node of maximum
  degree in the uncolored subgraph and extended with non-adjacent nodes that
  have the most uncolored neighbors

When the driver caps the palette and the smallest free color is above the cap,
the node gets the least conflicting color within the cap instead.

Ref: https://www.geeksforgeeks.org/dsa/dsatur-algorithm-for-graph-coloring/
"""

import logging
from typing import Iterator, Optional

from .coloring import ColoringState
from .instance import GraphInstance
from .strategy import AttemptOutcome, AttemptResult, ColoringStrategy, RunContext

logger = logging.getLogger(__name__)


def pick_color(state: ColoringState, u: int, max_colors: Optional[int]) -> int:
    """Smallest available color of u, or the least conflicting one if that exceeds the cap."""
    color = state.smallest_available_color(u)
    if max_colors is not None and color > max_colors:
        return state.least_conflicting_color(u, max_colors)
    return color


def welsh_powell_order(instance: GraphInstance) -> list[int]:
    """Nodes by non-increasing degree; equal degrees keep index order."""
    return sorted(range(instance.num_vertices), key=lambda u: (-instance.degree[u], u))


def dsatur_order(state: ColoringState) -> Iterator[int]:
    """
    Yield nodes in DSATUR order, coloring each before yielding the next.

    The caller assigns `state[u]` between steps; saturation is derived from
    the state, so the order adapts to whatever color was assigned.
    """
    instance = state.instance
    n = instance.num_vertices
    neighbor_colors: list[set[int]] = [set() for _ in range(n)]
    colored = [False] * n

    for _ in range(n):
        # Select vertex with max saturation, break ties by max degree, then lowest index
        best_vertex = -1
        best_saturation = -1
        best_degree = -1
        for v in range(n):
            if colored[v]:
                continue
            sat = len(neighbor_colors[v])
            deg = instance.degree[v]
            if sat > best_saturation or (sat == best_saturation and deg > best_degree):
                best_vertex = v
                best_saturation = sat
                best_degree = deg

        yield best_vertex

        colored[best_vertex] = True
        c = state[best_vertex]
        # Update saturation of uncolored neighbors
        for neighbor in instance.adjacency[best_vertex]:
            if not colored[neighbor]:
                neighbor_colors[neighbor].add(c)


class SequentialGreedy(ColoringStrategy):
    """Visit nodes in `order(ctx)` and color each with `pick_color`."""

    escalates = False

    def order(self, ctx: RunContext) -> Iterator[int]:
        raise NotImplementedError

    def attempt(self, ctx: RunContext) -> AttemptResult:
        state = ctx.state
        iteration = 0
        reported = False
        for u in self.order(ctx):
            if ctx.should_stop():
                return ctx.result(ctx.stop_outcome(), state.snapshot(), iterations=iteration)
            state[u] = pick_color(state, u, ctx.max_colors)
            iteration += 1
            reported = ctx.reporter.report(iteration, state.colors)

        if not reported:
            ctx.reporter.report(iteration, state.colors, force=True)
        conflicts = state.conflict_count()
        logger.debug(f"{self.name}: {state.colors_used()} colors, {conflicts} conflicts")
        outcome = AttemptOutcome.SOLVED if conflicts == 0 else AttemptOutcome.FINISHED
        return ctx.result(outcome, state.snapshot(), conflicts, iterations=iteration)


class BasicGreedy(SequentialGreedy):
    name = "basicGreedy"

    def order(self, ctx: RunContext) -> Iterator[int]:
        return iter(range(ctx.instance.num_vertices))


class WelshPowell(SequentialGreedy):
    name = "welshPowell"

    def order(self, ctx: RunContext) -> Iterator[int]:
        return iter(welsh_powell_order(ctx.instance))


class DSatur(SequentialGreedy):
    name = "dSatur"

    def order(self, ctx: RunContext) -> Iterator[int]:
        return dsatur_order(ctx.state)


class RLF(ColoringStrategy):
    """Recursive Largest First: build color classes one at a time."""

    name = "rlf"
    escalates = False

    def attempt(self, ctx: RunContext) -> AttemptResult:
        instance = ctx.instance
        state = ctx.state
        adjacency = instance.adjacency
        n = instance.num_vertices
        uncolored = set(range(n))
        # Neighbors of each node that are still uncolored
        uncolored_degree = list(instance.degree)
        color = 0
        iteration = 0
        reported = False

        def assign(u: int, c: int) -> None:
            state[u] = c
            uncolored.discard(u)
            for v in adjacency[u]:
                uncolored_degree[v] -= 1

        while uncolored:
            if ctx.should_stop():
                return ctx.result(ctx.stop_outcome(), state.snapshot(), iterations=iteration)

            color += 1
            if ctx.max_colors is not None and color > ctx.max_colors:
                # Palette exhausted, the rest take the least conflicting color
                for u in sorted(uncolored):
                    if ctx.should_stop():
                        return ctx.result(ctx.stop_outcome(), state.snapshot(), iterations=iteration)
                    state[u] = state.least_conflicting_color(u, ctx.max_colors)
                    iteration += 1
                    reported = ctx.reporter.report(iteration, state.colors)
                uncolored.clear()
                break

            # Seed: max degree within the uncolored subgraph, lowest index on ties
            seed = min(uncolored, key=lambda u: (-uncolored_degree[u], u))
            assign(seed, color)
            members = 1
            iteration += 1
            reported = ctx.reporter.report(iteration, state.colors)

            candidates = uncolored.difference(adjacency[seed])
            while candidates:
                if ctx.should_stop():
                    return ctx.result(ctx.stop_outcome(), state.snapshot(), iterations=iteration)
                nxt = min(candidates, key=lambda u: (-uncolored_degree[u], u))
                assign(nxt, color)
                candidates.discard(nxt)
                candidates.difference_update(adjacency[nxt])
                members += 1
                iteration += 1
                reported = ctx.reporter.report(iteration, state.colors)

            logger.debug(f"rlf: class {color} has {members} nodes")

        if not reported:
            ctx.reporter.report(iteration, state.colors, force=True)
        conflicts = state.conflict_count()
        outcome = AttemptOutcome.SOLVED if conflicts == 0 else AttemptOutcome.FINISHED
        return ctx.result(outcome, state.snapshot(), conflicts, iterations=iteration)


def greedy_coloring(instance: GraphInstance, max_colors: Optional[int] = None) -> list[int]:
    """One unbounded (or capped) BasicGreedy pass outside any run, e.g. to seed a bound."""
    state = ColoringState(instance)
    for u in range(instance.num_vertices):
        state[u] = pick_color(state, u, max_colors)
    return state.snapshot()
