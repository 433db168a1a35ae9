import tempfile
import unittest
from pathlib import Path

from gcp.instance import GraphInstance


class TestGraphInstance(unittest.TestCase):

    def test_adjacency_is_symmetric(self):
        g = GraphInstance(name="g", num_vertices=4, edges=[(0, 1), (2, 1), (3, 0)])
        for u, v in g.edges:
            self.assertIn(v, g.adjacency[u])
            self.assertIn(u, g.adjacency[v])
        self.assertEqual(g.degree, [2, 2, 1, 1])

    def test_edges_normalized_and_deduplicated(self):
        g = GraphInstance(name="g", num_vertices=3, edges=[(1, 0), (0, 1), (2, 2), (2, 1)])
        self.assertEqual(g.edges, [(0, 1), (1, 2)])
        self.assertEqual(g.num_edges, 2)
        self.assertEqual(g.adjacency[2], [1])

    def test_out_of_range_edge_raises(self):
        with self.assertRaises(ValueError):
            GraphInstance(name="g", num_vertices=2, edges=[(0, 2)])

    def test_default_node_ids(self):
        g = GraphInstance(name="g", num_vertices=3, edges=[])
        self.assertEqual(g.node_ids, [0, 1, 2])


class TestFromExternal(unittest.TestCase):

    def test_pairs_map_to_dense_indices(self):
        g = GraphInstance.from_external(["a", "b", "c"], [("a", "c"), ("c", "b")])
        self.assertEqual(g.num_vertices, 3)
        self.assertEqual(g.edges, [(0, 2), (1, 2)])
        self.assertEqual(g.node_ids, ["a", "b", "c"])

    def test_mapping_edges(self):
        edges = [{"source": {"id": 10}, "target": {"id": 20}}, {"source": 20, "target": 30}]
        g = GraphInstance.from_external([10, 20, 30], edges)
        self.assertEqual(g.edges, [(0, 1), (1, 2)])

    def test_unknown_ids_dropped(self):
        g = GraphInstance.from_external([1, 2], [(1, 2), (2, 99), (42, 1)])
        self.assertEqual(g.edges, [(0, 1)])

    def test_duplicate_ids_raise(self):
        with self.assertRaises(ValueError):
            GraphInstance.from_external([1, 1], [])


class TestFromFile(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, name: str, text: str) -> Path:
        path = self.dir / name
        path.write_text(text)
        return path

    def test_dimacs(self):
        path = self.write(
            "myciel.col",
            "c sample graph\np edge 4 3\ne 1 2\ne 2 3\ne 4 1\n",
        )
        g = GraphInstance.from_file(path)
        self.assertEqual(g.name, "myciel")
        self.assertEqual(g.num_vertices, 4)
        self.assertEqual(g.edges, [(0, 1), (1, 2), (0, 3)])

    def test_dimacs_invalid_line_raises(self):
        path = self.write("bad.col", "p edge 3 1\ne 1 2\nx 1 3\n")
        with self.assertRaises(ValueError):
            GraphInstance.from_file(path)

    def test_edge_list_relabels_sorted(self):
        path = self.write("edges.txt", "# comment\n10 30\n30 20\n")
        g = GraphInstance.from_file(path)
        self.assertEqual(g.node_ids, [10, 20, 30])
        self.assertEqual(g.edges, [(0, 2), (1, 2)])

    def test_edge_list_malformed_raises(self):
        path = self.write("bad.txt", "1 2\n3\n")
        with self.assertRaises(ValueError):
            GraphInstance.from_file(path)


class TestRandom(unittest.TestCase):

    def test_seed_reproducible(self):
        a = GraphInstance.random(20, 0.3, seed=5)
        b = GraphInstance.random(20, 0.3, seed=5)
        self.assertEqual(a.edges, b.edges)

    def test_density_extremes(self):
        self.assertEqual(GraphInstance.random(6, 0.0, seed=1).num_edges, 0)
        self.assertEqual(GraphInstance.random(6, 1.0, seed=1).num_edges, 15)

    def test_invalid_density(self):
        with self.assertRaises(ValueError):
            GraphInstance.random(5, 1.5)


if __name__ == "__main__":
    unittest.main()
