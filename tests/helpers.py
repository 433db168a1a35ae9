"""Graph builders and a run context factory shared by the tests."""

from gcp.budget import TimeBudgetGuard
from gcp.config import RunParams
from gcp.instance import GraphInstance
from gcp.progress import ProgressReporter
from gcp.strategy import RunContext


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def complete_graph(n: int) -> GraphInstance:
    edges = [(u, v) for u in range(n) for v in range(u + 1, n)]
    return GraphInstance(name=f"K{n}", num_vertices=n, edges=edges)


def cycle_graph(n: int) -> GraphInstance:
    edges = [(i, (i + 1) % n) for i in range(n)]
    return GraphInstance(name=f"C{n}", num_vertices=n, edges=edges)


def two_triangles() -> GraphInstance:
    return GraphInstance(
        name="two_triangles",
        num_vertices=6,
        edges=[(0, 1), (1, 2), (0, 2), (3, 4), (4, 5), (3, 5)],
    )


def petersen_graph() -> GraphInstance:
    outer = [(i, (i + 1) % 5) for i in range(5)]
    spokes = [(i, i + 5) for i in range(5)]
    inner = [(5 + i, 5 + (i + 2) % 5) for i in range(5)]
    return GraphInstance(name="petersen", num_vertices=10, edges=outer + spokes + inner)


def make_context(
    instance: GraphInstance,
    k=None,
    events=None,
    step_budget: int = 0,
    attempt: int = 0,
    clock=None,
    **params,
) -> RunContext:
    """A single-attempt context; `events` (a list) collects emitted events, `clock` drives the guard."""
    run_params = RunParams(**params)
    if clock is None:
        guard = TimeBudgetGuard(run_params.time_limit)
    else:
        guard = TimeBudgetGuard(run_params.time_limit, clock=clock)
    reporter = ProgressReporter(
        instance,
        emit=events.append if events is not None else None,
        report_every=run_params.report_every,
        started_at=guard.started_at,
    )
    return RunContext(
        instance=instance,
        params=run_params,
        guard=guard,
        reporter=reporter,
        max_colors=k,
        step_budget=step_budget,
        attempt=attempt,
    )


def is_proper(instance: GraphInstance, coloring) -> bool:
    return all(c > 0 for c in coloring) and all(coloring[u] != coloring[v] for u, v in instance.edges)
