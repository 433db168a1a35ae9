"""
Progress events and throttled snapshot emission.

A run emits any number of StepEvents followed by exactly one terminal event,
DoneEvent or ErrorEvent. Events carry external node ids and plain data only,
so they can cross a process boundary unchanged.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Hashable, Optional, Sequence, Union

from .coloring import evaluate_conflicts
from .instance import GraphInstance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepMetrics:
    iter: int
    conflicts: int
    time: float  # seconds since the run started
    status: Optional[str] = None


@dataclass(frozen=True)
class StepEvent:
    """Snapshot of the coloring being searched; uncolored nodes are omitted."""

    iteration: int
    coloring: dict[Hashable, int]
    conflict_edges: list[tuple[Hashable, Hashable]]
    metrics: StepMetrics


@dataclass(frozen=True)
class DoneMetrics:
    time: float
    colors_used: int
    conflicts: int


@dataclass(frozen=True)
class DoneEvent:
    """Terminal event carrying the audited result."""

    status: str
    metrics: DoneMetrics
    coloring: dict[Hashable, int]
    conflict_edges: list[tuple[Hashable, Hashable]] = field(default_factory=list)


@dataclass(frozen=True)
class ErrorEvent:
    """Terminal event for a run that could not produce a result."""

    message: str


Event = Union[StepEvent, DoneEvent, ErrorEvent]
TerminalEvent = Union[DoneEvent, ErrorEvent]
EmitFn = Callable[[Event], None]


def is_terminal(event: Event) -> bool:
    return isinstance(event, (DoneEvent, ErrorEvent))


def coloring_by_id(instance: GraphInstance, coloring: Sequence[int]) -> dict[Hashable, int]:
    """Map a dense coloring to external ids, skipping uncolored nodes."""
    return {instance.node_ids[u]: c for u, c in enumerate(coloring) if c != 0}


def edges_by_id(instance: GraphInstance, edges: Sequence[tuple[int, int]]) -> list[tuple[Hashable, Hashable]]:
    return [(instance.node_ids[u], instance.node_ids[v]) for u, v in edges]


class ProgressReporter:
    """
    Throttled Step emission for one run.

    Strategies count iterations from zero in every attempt; the reporter adds
    an offset per attempt so that the iterations it emits never decrease over
    the whole run. A snapshot reported through `report_best` is only emitted
    when it is strictly better than every best reported before.

    Args:
        instance: Graph being colored
        emit: Event sink (None discards events)
        report_every: Periodic snapshots are emitted every this many iterations
        pacing_delay: Sleep after each emission in seconds; 0 in benchmark mode
        started_at: Run start on the perf_counter clock
    """

    def __init__(
        self,
        instance: GraphInstance,
        emit: Optional[EmitFn] = None,
        report_every: int = 200,
        pacing_delay: float = 0.0,
        started_at: Optional[float] = None,
    ):
        self.instance = instance
        self.emit = emit
        self.report_every = max(1, report_every)
        self.pacing_delay = pacing_delay
        self.started_at = time.perf_counter() if started_at is None else started_at
        self.best_conflicts: Optional[int] = None
        self.last_iteration = 0
        self._offset = 0
        self.emitted = 0

    def begin_attempt(self) -> None:
        """Continue iteration numbering after the last emitted step."""
        self._offset = self.last_iteration

    def elapsed(self) -> float:
        return time.perf_counter() - self.started_at

    def report(
        self,
        iteration: int,
        coloring: Sequence[int],
        status: Optional[str] = None,
        force: bool = False,
        every: Optional[int] = None,
    ) -> bool:
        """
        Emit a periodic snapshot if `iteration` falls on the cadence (or `force`).

        `every` overrides the reporter cadence for strategies that count in
        coarser units such as generations.
        """
        if not force and iteration % (every or self.report_every) != 0:
            return False
        self._send(iteration, coloring, status)
        return True

    def report_best(
        self,
        iteration: int,
        coloring: Sequence[int],
        conflicts: int,
        status: Optional[str] = None,
    ) -> bool:
        """Emit a best-so-far snapshot if it strictly improves on the run's best."""
        if self.best_conflicts is not None and conflicts >= self.best_conflicts:
            return False
        self.best_conflicts = conflicts
        self._send(iteration, coloring, status)
        return True

    def status(self, coloring: Sequence[int], message: str) -> None:
        """Emit a status-only snapshot at the current iteration."""
        self._send(self.last_iteration - self._offset, coloring, message)

    def _send(self, iteration: int, coloring: Sequence[int], status: Optional[str]) -> None:
        run_iteration = max(self.last_iteration, self._offset + iteration)
        self.last_iteration = run_iteration
        if self.emit is None:
            return

        report = evaluate_conflicts(self.instance, coloring)
        event = StepEvent(
            iteration=run_iteration,
            coloring=coloring_by_id(self.instance, coloring),
            conflict_edges=edges_by_id(self.instance, report.edges),
            metrics=StepMetrics(
                iter=run_iteration,
                conflicts=report.count,
                time=self.elapsed(),
                status=status,
            ),
        )
        self.emit(event)
        self.emitted += 1
        if self.pacing_delay > 0:
            time.sleep(self.pacing_delay)
