import unittest

from gcp.config import RunParams
from gcp.engine import RunRequest, run_algorithm
from gcp.errors import UnknownAlgorithm
from gcp.instance import GraphInstance
from gcp.progress import DoneEvent, ErrorEvent, StepEvent, is_terminal
from gcp.registry import algorithm_names, create_strategy

from helpers import complete_graph, two_triangles


def run(algorithm, graph, **params):
    events = []
    params.setdefault("time_limit", 5.0)
    terminal = run_algorithm(RunRequest(algorithm, graph, RunParams(**params)), events.append)
    return terminal, events


class TestRegistry(unittest.TestCase):

    def test_twelve_algorithms(self):
        self.assertEqual(len(algorithm_names()), 12)
        for name in algorithm_names():
            self.assertEqual(create_strategy(name).name, name)

    def test_alias(self):
        self.assertEqual(create_strategy("aco").name, "antColony")

    def test_unknown(self):
        with self.assertRaises(UnknownAlgorithm):
            create_strategy("quantumAnnealing")


class TestRunScenarios(unittest.TestCase):

    def test_single_edge_basic_greedy(self):
        g = GraphInstance(name="edge", num_vertices=2, edges=[(0, 1)])
        done, _ = run("basicGreedy", g)
        self.assertIsInstance(done, DoneEvent)
        self.assertEqual(done.coloring, {0: 1, 1: 2})
        self.assertEqual(done.metrics.conflicts, 0)
        self.assertEqual(done.metrics.colors_used, 2)
        self.assertEqual(done.status, "Completed")

    def test_isolated_nodes(self):
        g = GraphInstance(name="isolated", num_vertices=10, edges=[])
        done, _ = run("basicGreedy", g)
        self.assertEqual(done.coloring, {i: 1 for i in range(10)})
        self.assertEqual(done.metrics.colors_used, 1)

    def test_two_triangles_dsatur(self):
        done, _ = run("dSatur", two_triangles())
        self.assertEqual(done.metrics.conflicts, 0)
        self.assertEqual(done.metrics.colors_used, 3)

    def test_complete_graph_exact(self):
        for algorithm in ("backtracking", "branchAndBound", "bruteForce"):
            done, _ = run(algorithm, complete_graph(4))
            self.assertEqual(done.status, "Completed", algorithm)
            self.assertEqual(done.metrics.colors_used, 4)

    def test_every_algorithm_gives_complete_coloring(self):
        g = GraphInstance.random(12, 0.3, seed=21)
        for algorithm in algorithm_names():
            done, events = run(algorithm, g, seed=1, stagnation_window=0.2)
            self.assertIsInstance(done, DoneEvent, algorithm)
            self.assertEqual(len(done.coloring), 12)
            self.assertTrue(all(c >= 1 for c in done.coloring.values()))
            if done.status.startswith("Completed"):
                for u, v in g.edges:
                    self.assertNotEqual(done.coloring[u], done.coloring[v])
            self.assertEqual(sum(1 for e in events if is_terminal(e)), 1)
            self.assertIs(events[-1], done)

    def test_step_iterations_non_decreasing(self):
        _, events = run("tabuSearch", GraphInstance.random(20, 0.4, seed=2), seed=3, stagnation_window=0.1)
        iterations = [e.iteration for e in events if isinstance(e, StepEvent)]
        self.assertEqual(iterations, sorted(iterations))


class TestRunBoundary(unittest.TestCase):

    def test_unknown_algorithm_is_error_event(self):
        terminal, events = run("nope", complete_graph(3))
        self.assertIsInstance(terminal, ErrorEvent)
        self.assertIn("Unknown algorithm", terminal.message)
        self.assertEqual(events, [terminal])

    def test_internal_exception_is_error_event(self):
        calls = []

        def failing_emit(event):
            calls.append(event)
            if isinstance(event, StepEvent):
                raise RuntimeError("display went away")

        request = RunRequest("basicGreedy", complete_graph(3), RunParams(time_limit=1.0))
        terminal = run_algorithm(request, failing_emit)
        self.assertIsInstance(terminal, ErrorEvent)
        self.assertEqual(terminal.message, "RuntimeError: display went away")
        self.assertIs(calls[-1], terminal)


class TestRunRequest(unittest.TestCase):

    def test_from_dict(self):
        request = RunRequest.from_dict({
            "algorithm": "tabuSearch",
            "graph": {
                "nodes": [{"id": "x"}, {"id": "y"}, "z"],
                "edges": [{"source": "x", "target": "y"}, ["y", "z"], ["z", "missing"]],
            },
            "params": {"timeLimit": 3, "stagnationWindow": 1500, "maxColorsHint": 4, "extra": True},
        })
        self.assertEqual(request.graph.node_ids, ["x", "y", "z"])
        self.assertEqual(request.graph.edges, [(0, 1), (1, 2)])
        self.assertEqual(request.params.time_limit, 3.0)
        self.assertEqual(request.params.stagnation_window, 1.5)
        self.assertEqual(request.params.max_colors_hint, 4)

    def test_from_dict_node_count(self):
        request = RunRequest.from_dict({
            "algorithm": "dSatur",
            "graph": {"nodeCount": 3, "edges": [[0, 1]]},
        })
        self.assertEqual(request.graph.num_vertices, 3)
        self.assertEqual(request.params, RunParams())

    def test_params_validation(self):
        with self.assertRaises(ValueError):
            RunParams(time_limit=0)
        with self.assertRaises(ValueError):
            RunParams.from_dict({"population": 1})


if __name__ == "__main__":
    unittest.main()
