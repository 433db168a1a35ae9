"""
Run boundary: one request in, Step events and exactly one terminal event out.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .budget import CancellationToken, TimeBudgetGuard
from .config import RunParams
from .errors import UnknownAlgorithm
from .escalation import EscalationDriver
from .instance import GraphInstance
from .progress import (
    DoneEvent,
    DoneMetrics,
    EmitFn,
    ErrorEvent,
    ProgressReporter,
    TerminalEvent,
    coloring_by_id,
    edges_by_id,
)
from .registry import create_strategy
from .verification import VerificationAuditor
from .watchdog import Watchdog

logger = logging.getLogger(__name__)


@dataclass
class RunRequest:
    """An algorithm, a graph and the run configuration."""

    algorithm: str
    graph: GraphInstance
    params: RunParams = field(default_factory=RunParams)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunRequest":
        """
        Build a request from the external payload:
        {algorithm, graph: {nodes | nodeCount, edges}, params: {...}}.
        """
        graph = data["graph"]
        if "nodes" in graph:
            node_ids = [n["id"] if isinstance(n, dict) else n for n in graph["nodes"]]
        else:
            node_ids = list(range(int(graph["nodeCount"])))
        instance = GraphInstance.from_external(node_ids, graph.get("edges", []), name=graph.get("name", "graph"))
        params = RunParams.from_dict(data.get("params") or {})
        return cls(algorithm=data["algorithm"], graph=instance, params=params)


def run_algorithm(
    request: RunRequest,
    emit: Optional[EmitFn] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> TerminalEvent:
    """
    Run one request in the calling process.

    Every exception is caught here and turned into an ErrorEvent, so the
    caller always receives exactly one terminal event (also returned).
    """
    instance = request.graph
    params = request.params
    try:
        strategy = create_strategy(request.algorithm)
        guard = TimeBudgetGuard(params.time_limit, cancel_token)
        reporter = ProgressReporter(
            instance,
            emit=emit,
            report_every=params.report_every,
            pacing_delay=params.pacing_delay,
            started_at=guard.started_at,
        )
        logger.info(f"Running {strategy.name} on {instance} (limit {params.time_limit}s)")

        outcome = EscalationDriver(strategy, instance, params, reporter, guard).run()
        report = VerificationAuditor().audit(
            instance,
            outcome.coloring,
            timed_out=outcome.timed_out,
            claimed_solved=outcome.claimed_solved,
        )
        event: TerminalEvent = DoneEvent(
            status=report.status,
            metrics=DoneMetrics(
                time=guard.elapsed(),
                colors_used=report.colors_used,
                conflicts=report.conflicts,
            ),
            coloring=coloring_by_id(instance, report.coloring),
            conflict_edges=edges_by_id(instance, report.conflict_edges),
        )
        logger.info(f"{strategy.name}: {report.status}, {report.colors_used} colors in {event.metrics.time:.2f}s")
    except UnknownAlgorithm as exc:
        logger.error(str(exc))
        event = ErrorEvent(message=str(exc))
    except Exception as exc:
        logger.exception(f"Run of {request.algorithm} failed")
        event = ErrorEvent(message=f"{type(exc).__name__}: {exc}")

    if emit is not None:
        emit(event)
    return event


def run_isolated(
    request: RunRequest,
    on_event: Optional[EmitFn] = None,
    start_method: Optional[str] = None,
) -> TerminalEvent:
    """
    Run one request in a child process under the watchdog.

    The child is terminated if no terminal event arrives within the time
    limit plus the grace period; the caller then receives a WatchdogKilled
    error event instead.
    """
    watchdog = Watchdog(
        request.params.time_limit,
        grace=request.params.watchdog_grace,
        start_method=start_method,
    )
    return watchdog.run(run_algorithm, (request,), on_event)
