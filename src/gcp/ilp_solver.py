"""
ILP-assisted color reduction.

A greedy pass gives a proper coloring with k0 colors. The bridge then asks an
integer-program solver whether k0 - 1 colors suffice, one fresh model and one
strict sub-budget per question, and stops at the first answer that is not a
proven, parseable feasible assignment.

Model for k colors, x[v,c] = 1 if node v takes color c:
    sum_c x[v,c] == 1                 for every node v
    x[u,c] + x[v,c] <= 1              for every edge (u,v) and color c
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from ortools.linear_solver import pywraplp

from .coloring import count_colors, count_conflicts
from .errors import ResultParseFailure, SoftTimeExceeded, SolverInfeasible
from .greedy import greedy_coloring
from .instance import GraphInstance
from .strategy import AttemptOutcome, AttemptResult, ColoringStrategy, RunContext

logger = logging.getLogger(__name__)

Var = tuple[int, int]  # (node, color), color 1-based


class SolverStatus(Enum):
    """Status of the solver after optimization."""

    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass
class ColoringModel:
    """0/1 feasibility model for coloring with `num_colors` colors."""

    num_vertices: int
    num_colors: int
    time_limit: float  # seconds
    variables: list[Var] = field(default_factory=list)
    equalities: list[list[Var]] = field(default_factory=list)  # each sums to exactly 1
    at_most_one: list[list[Var]] = field(default_factory=list)  # each sums to at most 1


@dataclass
class FeasibilityResult:
    """Result of one feasibility question."""

    status: SolverStatus
    assignment: Optional[dict[Var, float]] = None
    runtime_seconds: float = 0.0

    @property
    def feasible(self) -> bool:
        return self.status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE)


class FeasibilitySolver(Protocol):
    def solve(self, model: ColoringModel) -> FeasibilityResult: ...


def build_model(instance: GraphInstance, num_colors: int, time_limit: float) -> ColoringModel:
    """
    Build the k-coloring model of a graph.

    Args:
        instance: Graph to color
        num_colors: Candidate color count k
        time_limit: Sub-budget for this question in seconds

    Returns:
        ColoringModel with n*k variables, n equalities and m*k at-most-one groups
    """
    colors = range(1, num_colors + 1)
    model = ColoringModel(
        num_vertices=instance.num_vertices,
        num_colors=num_colors,
        time_limit=time_limit,
    )
    for v in range(instance.num_vertices):
        row = [(v, c) for c in colors]
        model.variables.extend(row)
        model.equalities.append(row)
    for u, v in instance.edges:
        for c in colors:
            model.at_most_one.append([(u, c), (v, c)])
    return model


def parse_assignment(model: ColoringModel, assignment: Optional[dict[Var, float]]) -> list[int]:
    """
    Turn solver values into a coloring.

    Raises:
        ResultParseFailure: if the assignment is missing or a node does not
            take exactly one color
    """
    if assignment is None:
        raise ResultParseFailure("solver reported feasible without an assignment")

    coloring = [0] * model.num_vertices
    for v in range(model.num_vertices):
        chosen = []
        for c in range(1, model.num_colors + 1):
            value = assignment.get((v, c))
            if value is None:
                raise ResultParseFailure(f"no value for x[{v},{c}]")
            if value > 0.5:
                chosen.append(c)
        if len(chosen) != 1:
            raise ResultParseFailure(f"node {v} takes {len(chosen)} colors")
        coloring[v] = chosen[0]
    return coloring


class OrToolsFeasibilitySolver:
    """
    Feasibility backend on OR-Tools.

    Uses the SCIP backend by default.
    """

    def __init__(self, solver_name: str = "SCIP", verbose: bool = False):
        """
        Args:
            solver_name: Backend solver ("SCIP", "CBC")
            verbose: Whether to enable solver output
        """
        self.solver_name = solver_name
        self.verbose = verbose

    def solve(self, model: ColoringModel) -> FeasibilityResult:
        solver = pywraplp.Solver.CreateSolver(self.solver_name)
        if solver is None:
            logger.error(f"OR-Tools backend {self.solver_name} is not available")
            return FeasibilityResult(status=SolverStatus.ERROR)
        solver.SetTimeLimit(max(1, int(model.time_limit * 1000)))
        if self.verbose:
            solver.EnableOutput()

        # Decision variables
        x = {}
        for v, c in model.variables:
            x[v, c] = solver.BoolVar(f"x_{v}_{c}")

        # Exactly one color per node
        for idx, group in enumerate(model.equalities):
            solver.Add(sum(x[var] for var in group) == 1, f"one_color_{idx}")

        # Adjacent nodes cannot share a color
        for idx, group in enumerate(model.at_most_one):
            solver.Add(sum(x[var] for var in group) <= 1, f"conflict_{idx}")

        logger.debug(
            f"ILP k={model.num_colors}: {solver.NumVariables()} variables, "
            f"{solver.NumConstraints()} constraints, limit {model.time_limit:.2f}s"
        )

        status = solver.Solve()
        runtime = solver.WallTime() / 1000.0  # convert ms to seconds

        if status == pywraplp.Solver.OPTIMAL:
            result_status = SolverStatus.OPTIMAL
        elif status == pywraplp.Solver.FEASIBLE:
            result_status = SolverStatus.FEASIBLE
        elif status == pywraplp.Solver.INFEASIBLE:
            result_status = SolverStatus.INFEASIBLE
        elif status == pywraplp.Solver.NOT_SOLVED:
            result_status = SolverStatus.TIMEOUT
        else:
            result_status = SolverStatus.ERROR

        assignment = None
        if result_status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
            assignment = {var: x[var].solution_value() for var in model.variables}

        return FeasibilityResult(status=result_status, assignment=assignment, runtime_seconds=runtime)


class ILPApprox(ColoringStrategy):
    """
    Greedy seed followed by ILP-proven color reductions.

    Args:
        solver: Feasibility backend; defaults to OR-Tools with the run's
            configured backend
        overrun_tolerance: Seconds a call may exceed its sub-budget before it
            counts as an overrun
    """

    name = "ilp"
    escalates = False

    def __init__(self, solver: Optional[FeasibilitySolver] = None, overrun_tolerance: float = 0.25):
        self.solver = solver
        self.overrun_tolerance = overrun_tolerance

    def attempt(self, ctx: RunContext) -> AttemptResult:
        instance = ctx.instance
        guard = ctx.guard
        solver = self.solver or OrToolsFeasibilitySolver(ctx.params.ilp_backend)

        best = greedy_coloring(instance)
        k0 = count_colors(best)
        ctx.record_best(best, count_conflicts(instance, best))
        ctx.reporter.report_best(0, best, ctx.best_conflicts, status=f"Greedy seed k={k0}")
        logger.info(f"ilp: greedy seed uses {k0} colors")

        iteration = 0
        while k0 > 1:
            if ctx.should_stop():
                return ctx.result(ctx.stop_outcome(), best, iterations=iteration)
            budget = guard.sub_budget(ctx.params.ilp_sub_time_limit)
            if budget <= 0:
                break

            iteration += 1
            model = build_model(instance, k0 - 1, budget)
            started = guard.clock()
            try:
                result = solver.solve(model)
                guard.check_call(started, budget + self.overrun_tolerance, f"ILP k={k0 - 1}")
                if not result.feasible:
                    raise SolverInfeasible(f"k={k0 - 1}: {result.status.value}")
                coloring = parse_assignment(model, result.assignment)
            except (SolverInfeasible, ResultParseFailure, SoftTimeExceeded) as exc:
                logger.info(f"ilp: stopping at k={k0} ({type(exc).__name__}: {exc})")
                break

            conflicts = count_conflicts(instance, coloring)
            if conflicts != 0:
                logger.warning(f"ilp: solver assignment for k={k0 - 1} has {conflicts} conflicts")
                break

            k0 -= 1
            best = coloring
            ctx.record_best(best, 0)
            ctx.reporter.report(iteration, best, status=f"ILP proved k={k0}", force=True)
            logger.info(f"ilp: reduced to {k0} colors")

        conflicts = count_conflicts(instance, best)
        outcome = AttemptOutcome.SOLVED if conflicts == 0 else AttemptOutcome.FINISHED
        return ctx.result(outcome, best, conflicts, iterations=iteration)

    def get_params(self) -> dict:
        params = super().get_params()
        params["overrun_tolerance"] = self.overrun_tolerance
        return params
