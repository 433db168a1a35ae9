"""
Coloring state and conflict analysis.

A coloring is a list of length n with values 0 (uncolored) or 1..k. A conflict
is an edge (u, v), u < v, whose endpoints are both colored with the same color.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .instance import GraphInstance


@dataclass(frozen=True)
class ConflictReport:
    """Conflict count and conflicting edges of a coloring, each edge as (u, v) with u < v."""

    count: int
    edges: list[tuple[int, int]] = field(default_factory=list)


def evaluate_conflicts(instance: GraphInstance, coloring: Sequence[int]) -> ConflictReport:
    """
    Compute the conflicts of a coloring.

    Scans every node once and counts each edge from its lower endpoint, so the
    result does not depend on the order in which edges were added.

    Args:
        instance: Graph to check against
        coloring: Color per node index (0 = uncolored)

    Returns:
        ConflictReport with edges sorted by (u, v)
    """
    edges = []
    for u in range(instance.num_vertices):
        cu = coloring[u]
        if cu == 0:
            continue
        for v in instance.adjacency[u]:
            if u < v and coloring[v] == cu:
                edges.append((u, v))
    edges.sort()
    return ConflictReport(count=len(edges), edges=edges)


def count_conflicts(instance: GraphInstance, coloring: Sequence[int]) -> int:
    """Conflict count only; no edge list is built."""
    count = 0
    for u in range(instance.num_vertices):
        cu = coloring[u]
        if cu == 0:
            continue
        for v in instance.adjacency[u]:
            if u < v and coloring[v] == cu:
                count += 1
    return count


def count_colors(coloring: Sequence[int]) -> int:
    """
    Count the number of distinct colors used in a coloring.

    Args:
        coloring: Color per node index (0 = uncolored, not counted)

    Returns:
        Number of distinct colors (0 if nothing is colored)
    """
    return len({c for c in coloring if c != 0})


def verify_coloring(instance: GraphInstance, coloring: Sequence[int]) -> bool:
    """
    Verify that a coloring is complete and valid (no adjacent nodes share a color).

    Args:
        instance: Graph to check against
        coloring: Color assignment to verify

    Returns:
        True if coloring is valid, False otherwise
    """
    if len(coloring) != instance.num_vertices:
        return False
    if any(c <= 0 for c in coloring):
        return False  # node not colored
    return all(coloring[u] != coloring[v] for u, v in instance.edges)


def least_conflicting_color(
    instance: GraphInstance,
    coloring: Sequence[int],
    u: int,
    max_colors: int,
) -> int:
    """
    Pick the color in 1..max_colors with the fewest same-colored neighbors of u.

    The first minimum wins and the scan stops early at a conflict-free color.
    """
    best_color = 1
    min_conflicts: Optional[int] = None
    neighbors = instance.adjacency[u]
    for c in range(1, max_colors + 1):
        conflicts = 0
        for v in neighbors:
            if coloring[v] == c:
                conflicts += 1
        if min_conflicts is None or conflicts < min_conflicts:
            min_conflicts = conflicts
            best_color = c
            if conflicts == 0:
                break
    return best_color


class ColoringState:
    """
    Mutable coloring vector owned by a single attempt.

    Built fresh for every attempt so that nothing leaks between attempts with
    different color budgets.
    """

    def __init__(self, instance: GraphInstance, colors: Optional[Sequence[int]] = None):
        self.instance = instance
        if colors is None:
            self.colors = [0] * instance.num_vertices
        else:
            if len(colors) != instance.num_vertices:
                raise ValueError(f"Expected {instance.num_vertices} colors, got {len(colors)}")
            self.colors = list(colors)

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, u: int) -> int:
        return self.colors[u]

    def __setitem__(self, u: int, color: int) -> None:
        self.colors[u] = color

    def reset(self) -> None:
        """Set every node back to uncolored."""
        self.colors = [0] * self.instance.num_vertices

    def assign(self, colors: Sequence[int]) -> None:
        self.colors = list(colors)

    def snapshot(self) -> list[int]:
        """Independent copy of the current colors."""
        return list(self.colors)

    def neighbor_colors(self, u: int) -> set[int]:
        """Distinct non-zero colors among the neighbors of u."""
        colors = self.colors
        return {colors[v] for v in self.instance.adjacency[u] if colors[v] != 0}

    def smallest_available_color(self, u: int) -> int:
        """Smallest color >= 1 not used by any colored neighbor of u."""
        used = self.neighbor_colors(u)
        color = 1
        while color in used:
            color += 1
        return color

    def least_conflicting_color(self, u: int, max_colors: int) -> int:
        return least_conflicting_color(self.instance, self.colors, u, max_colors)

    def move_delta(self, u: int, new_color: int) -> int:
        """
        Change in conflict count if u were recolored to new_color.

        O(degree(u)): compares neighbors matching the old color with neighbors
        matching the new one.
        """
        old_color = self.colors[u]
        if old_color == new_color:
            return 0
        delta = 0
        for v in self.instance.adjacency[u]:
            cv = self.colors[v]
            if cv == 0:
                continue
            if cv == old_color:
                delta -= 1
            if cv == new_color:
                delta += 1
        return delta

    def conflicts(self) -> ConflictReport:
        return evaluate_conflicts(self.instance, self.colors)

    def conflict_count(self) -> int:
        return count_conflicts(self.instance, self.colors)

    def uncolored_nodes(self) -> list[int]:
        return [u for u, c in enumerate(self.colors) if c == 0]

    def colors_used(self) -> int:
        return count_colors(self.colors)
