"""
Graph Coloring Problem (GCP)

This package provides a time-boxed engine of graph coloring strategies
(greedy, exact, ILP-assisted and metaheuristic) with color escalation,
stagnation detection and post-run verification.
"""

from .budget import CancellationToken, TimeBudgetGuard
from .coloring import ColoringState, count_colors, count_conflicts, evaluate_conflicts, verify_coloring
from .config import RunParams
from .engine import RunRequest, run_algorithm, run_isolated
from .errors import (
    ColoringError,
    PostRunInvariantViolation,
    ResultParseFailure,
    SoftTimeExceeded,
    SolverInfeasible,
    UnknownAlgorithm,
    WatchdogKilled,
)
from .instance import GraphInstance
from .progress import DoneEvent, ErrorEvent, StepEvent
from .registry import algorithm_names, create_strategy
from .runner import BenchmarkEntry, BenchmarkRunner

__all__ = [
    # Instance
    "GraphInstance",
    # Configuration
    "RunParams",
    # Coloring utilities
    "ColoringState",
    "evaluate_conflicts",
    "count_conflicts",
    "count_colors",
    "verify_coloring",
    # Running
    "RunRequest",
    "run_algorithm",
    "run_isolated",
    "algorithm_names",
    "create_strategy",
    "CancellationToken",
    "TimeBudgetGuard",
    # Events
    "StepEvent",
    "DoneEvent",
    "ErrorEvent",
    # Benchmark
    "BenchmarkRunner",
    "BenchmarkEntry",
    # Errors
    "ColoringError",
    "UnknownAlgorithm",
    "SoftTimeExceeded",
    "WatchdogKilled",
    "SolverInfeasible",
    "ResultParseFailure",
    "PostRunInvariantViolation",
]
