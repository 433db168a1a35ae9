import unittest

from gcp.budget import TimeBudgetGuard
from gcp.config import RunParams
from gcp.escalation import EscalationDriver, escalation_step, next_color_budget, step_budget_for
from gcp.exact import Backtracking, BruteForce
from gcp.greedy import BasicGreedy
from gcp.instance import GraphInstance
from gcp.progress import ProgressReporter, StepEvent
from gcp.annealing import SimulatedAnnealing

from helpers import complete_graph, is_proper


def drive(strategy, instance, events=None, **params):
    run_params = RunParams(**params)
    guard = TimeBudgetGuard(run_params.time_limit)
    reporter = ProgressReporter(
        instance,
        emit=events.append if events is not None else None,
        report_every=run_params.report_every,
        started_at=guard.started_at,
    )
    return EscalationDriver(strategy, instance, run_params, reporter, guard).run()


class TestEscalationRules(unittest.TestCase):

    def test_jump_sizes(self):
        self.assertEqual(escalation_step(2000), 5)
        self.assertEqual(escalation_step(1001), 5)
        self.assertEqual(escalation_step(1000), 2)
        self.assertEqual(escalation_step(101), 2)
        self.assertEqual(escalation_step(100), 1)
        self.assertEqual(escalation_step(0), 1)

    def test_never_above_node_count(self):
        self.assertEqual(next_color_budget(8, 5000, 10), 10)
        self.assertEqual(next_color_budget(10, 1, 10), 10)
        self.assertEqual(next_color_budget(1, 0, 0), 1)

    def test_step_budget_doubles_and_caps(self):
        params = RunParams(step_budget=5000, step_budget_cap=40_000)
        self.assertEqual([step_budget_for(params, a) for a in range(4)], [10_000, 20_000, 40_000, 40_000])


class TestEscalationDriver(unittest.TestCase):

    def test_complete_graph_escalates_to_four(self):
        g = complete_graph(4)
        outcome = drive(Backtracking(), g, time_limit=5.0)
        self.assertEqual(outcome.color_budgets, [3, 4])
        self.assertTrue(outcome.claimed_solved)
        self.assertEqual(sorted(outcome.coloring), [1, 2, 3, 4])
        self.assertFalse(outcome.timed_out)

    def test_brute_force_starts_at_one(self):
        outcome = drive(BruteForce(), complete_graph(3), time_limit=5.0)
        self.assertEqual(outcome.color_budgets, [1, 2, 3])

    def test_hint_overrides_start(self):
        outcome = drive(Backtracking(), complete_graph(5), time_limit=5.0, max_colors_hint=5)
        self.assertEqual(outcome.color_budgets, [5])

    def test_budget_non_decreasing(self):
        g = complete_graph(6)
        events = []
        outcome = drive(
            SimulatedAnnealing(), g, events=events,
            time_limit=10.0, stagnation_window=0.05, temperature=5.0, seed=7,
        )
        self.assertEqual(outcome.color_budgets, sorted(outcome.color_budgets))
        self.assertTrue(outcome.claimed_solved)
        self.assertEqual(outcome.color_budgets[-1], 6)
        self.assertTrue(is_proper(g, outcome.coloring))

        statuses = [e.metrics.status for e in events if isinstance(e, StepEvent) and e.metrics.status]
        self.assertIn("k=3", statuses)
        self.assertIn("Boosting colors to k=4", statuses)
        iterations = [e.iteration for e in events]
        self.assertEqual(iterations, sorted(iterations))

    def test_non_escalating_single_pass(self):
        outcome = drive(BasicGreedy(), complete_graph(5), time_limit=5.0, max_colors_hint=3)
        self.assertEqual(outcome.color_budgets, [3])
        self.assertEqual(len(outcome.attempts), 1)
        self.assertEqual(outcome.best.conflicts, 2)

    def test_deadline_stops_escalation(self):
        g = GraphInstance.random(60, 0.5, seed=3)
        outcome = drive(SimulatedAnnealing(), g, time_limit=0.3, stagnation_window=30.0, cooling_rate=0.999999)
        self.assertTrue(outcome.timed_out)
        self.assertEqual(outcome.color_budgets, [3])


if __name__ == "__main__":
    unittest.main()
