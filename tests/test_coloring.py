import random
import unittest

from gcp.coloring import (
    ColoringState,
    count_colors,
    count_conflicts,
    evaluate_conflicts,
    least_conflicting_color,
    verify_coloring,
)
from gcp.instance import GraphInstance

from helpers import complete_graph, cycle_graph


class TestConflicts(unittest.TestCase):

    def test_counts_equal_colored_edges(self):
        g = cycle_graph(4)
        report = evaluate_conflicts(g, [1, 1, 2, 2])
        self.assertEqual(report.count, 2)
        self.assertEqual(report.edges, [(0, 1), (2, 3)])

    def test_uncolored_endpoints_ignored(self):
        g = complete_graph(3)
        self.assertEqual(count_conflicts(g, [0, 0, 0]), 0)
        self.assertEqual(count_conflicts(g, [1, 0, 1]), 1)

    def test_invariant_under_edge_permutation(self):
        base = GraphInstance.random(25, 0.3, seed=3)
        rng = random.Random(11)
        coloring = [rng.randint(1, 3) for _ in range(base.num_vertices)]
        expected = evaluate_conflicts(base, coloring)
        for _ in range(5):
            edges = [(v, u) if rng.random() < 0.5 else (u, v) for u, v in base.edges]
            rng.shuffle(edges)
            shuffled = GraphInstance(name="shuffled", num_vertices=base.num_vertices, edges=edges)
            self.assertEqual(evaluate_conflicts(shuffled, coloring), expected)

    def test_count_colors_distinct(self):
        self.assertEqual(count_colors([1, 3, 3, 0]), 2)
        self.assertEqual(count_colors([]), 0)

    def test_verify_coloring(self):
        g = cycle_graph(4)
        self.assertTrue(verify_coloring(g, [1, 2, 1, 2]))
        self.assertFalse(verify_coloring(g, [1, 2, 1, 1]))
        self.assertFalse(verify_coloring(g, [1, 2, 1, 0]))
        self.assertFalse(verify_coloring(g, [1, 2, 1]))


class TestLeastConflictingColor(unittest.TestCase):

    def test_first_free_color(self):
        g = complete_graph(3)
        self.assertEqual(least_conflicting_color(g, [1, 2, 0], 2, 3), 3)

    def test_first_minimum_wins(self):
        g = complete_graph(3)
        # colors 1 and 2 each conflict once within a budget of 2
        self.assertEqual(least_conflicting_color(g, [1, 2, 0], 2, 2), 1)

    def test_fewest_conflicts(self):
        g = GraphInstance(name="star", num_vertices=4, edges=[(0, 1), (0, 2), (0, 3)])
        self.assertEqual(least_conflicting_color(g, [0, 1, 1, 2], 0, 2), 2)


class TestColoringState(unittest.TestCase):

    def test_smallest_available_color(self):
        g = complete_graph(4)
        state = ColoringState(g, [1, 3, 0, 0])
        self.assertEqual(state.smallest_available_color(2), 2)
        self.assertEqual(state.neighbor_colors(2), {1, 3})

    def test_snapshot_is_independent(self):
        state = ColoringState(cycle_graph(3), [1, 2, 3])
        snap = state.snapshot()
        state[0] = 2
        self.assertEqual(snap, [1, 2, 3])

    def test_wrong_length_raises(self):
        with self.assertRaises(ValueError):
            ColoringState(cycle_graph(3), [1, 2])

    def test_move_delta_matches_recount(self):
        g = GraphInstance.random(15, 0.4, seed=8)
        rng = random.Random(2)
        state = ColoringState(g, [rng.randint(1, 4) for _ in range(g.num_vertices)])
        before = state.conflict_count()
        for u in range(g.num_vertices):
            for c in range(1, 5):
                trial = state.snapshot()
                trial[u] = c
                self.assertEqual(state.move_delta(u, c), count_conflicts(g, trial) - before)

    def test_uncolored_and_colors_used(self):
        state = ColoringState(cycle_graph(4), [1, 0, 2, 0])
        self.assertEqual(state.uncolored_nodes(), [1, 3])
        self.assertEqual(state.colors_used(), 2)
        state.reset()
        self.assertEqual(state.colors, [0, 0, 0, 0])


if __name__ == "__main__":
    unittest.main()
