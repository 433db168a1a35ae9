#!/usr/bin/env python3
"""
Main script to run graph coloring experiments.

Usage:
    # Watch one algorithm on a random graph (events printed as they arrive)
    python run_experiments.py --algorithm dSatur --nodes 50 --density 0.2

    # Run one algorithm on a DIMACS instance with a 30 second budget
    python run_experiments.py --algorithm tabuSearch --graph instances/myciel5.col --time-limit 30

    # Benchmark a few algorithms on the same graph
    python run_experiments.py --benchmark basicGreedy dSatur simulatedAnnealing --nodes 80 --density 0.1

    # Benchmark all twelve algorithms and save CSV + JSON to results/
    python run_experiments.py --benchmark-all --graph instances/queen6_6.col --output-dir results

    # The ILP bridge uses the SCIP backend by default, --ilp-backend CBC selects CBC.
"""

import argparse
import logging
from pathlib import Path

from gcp import BenchmarkRunner, GraphInstance, RunParams, RunRequest, algorithm_names, run_algorithm, run_isolated
from gcp.progress import DoneEvent, ErrorEvent, StepEvent


def build_graph(args: argparse.Namespace) -> GraphInstance:
    if args.graph:
        return GraphInstance.from_file(args.graph)
    return GraphInstance.random(args.nodes, args.density, seed=args.graph_seed)


def build_params(args: argparse.Namespace) -> RunParams:
    return RunParams(
        time_limit=args.time_limit,
        stagnation_window=args.stagnation_ms / 1000.0,
        population=args.population,
        generations=args.generations,
        temperature=args.temperature,
        max_colors_hint=args.max_colors,
        ilp_backend=args.ilp_backend,
        pacing_delay=args.pacing_ms / 1000.0,
        seed=args.seed,
    )


def print_event(event) -> None:
    """Print a run event as one line."""
    if isinstance(event, StepEvent):
        status = f" [{event.metrics.status}]" if event.metrics.status else ""
        print(f"  iter {event.iteration:>8}  conflicts {event.metrics.conflicts:>5}  t={event.metrics.time:.2f}s{status}")
    elif isinstance(event, DoneEvent):
        print(f"\nResult: {event.status}")
        print(f"  Colors used: {event.metrics.colors_used}")
        print(f"  Conflicts: {event.metrics.conflicts}")
        print(f"  Runtime: {event.metrics.time:.3f}s")
    elif isinstance(event, ErrorEvent):
        print(f"\nERROR: {event.message}")


def main():
    parser = argparse.ArgumentParser(description="Run graph coloring algorithms")

    # Mode selection
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--algorithm", type=str, help="Run a single algorithm and print its progress")
    mode.add_argument("--benchmark", nargs="+", metavar="ID", help="Run these algorithms one after another")
    mode.add_argument("--benchmark-all", action="store_true", help="Run all algorithms one after another")

    # Graph selection
    parser.add_argument("--graph", type=Path, help="Path to a DIMACS .col or edge list file")
    parser.add_argument("--nodes", type=int, default=30, help="Nodes of the random graph (default: 30)")
    parser.add_argument("--density", type=float, default=0.2, help="Edge probability of the random graph (default: 0.2)")
    parser.add_argument("--graph-seed", type=int, default=None, help="Seed of the random graph (default: None = random)")

    # Run parameters
    parser.add_argument("--time-limit", type=float, default=10.0, help="Time limit per run in seconds (default: 10)")
    parser.add_argument(
        "--stagnation-ms",
        type=float,
        default=5000.0,
        help="Stagnation check window in milliseconds (default: 5000)",
    )
    parser.add_argument("--population", type=int, default=50, help="Genetic algorithm population (default: 50)")
    parser.add_argument(
        "--generations",
        type=int,
        default=None,
        help="Genetic algorithm generation cap per attempt (default: None = uncapped)",
    )
    parser.add_argument(
        "--temperature",
        type=float,
        default=1000.0,
        help="Simulated annealing initial temperature (default: 1000)",
    )
    parser.add_argument(
        "--max-colors",
        type=int,
        default=None,
        help="Starting color budget (escalating algorithms) or palette cap (greedy family)",
    )
    parser.add_argument(
        "--ilp-backend",
        type=str,
        default="SCIP",
        choices=["SCIP", "CBC"],
        help="ILP solver backend (default: SCIP)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility (default: None = random)")
    parser.add_argument(
        "--pacing-ms",
        type=float,
        default=0.0,
        help="Delay after each progress event in single-algorithm mode (default: 0)",
    )
    parser.add_argument("--no-watchdog", action="store_true", help="Run in this process without a watchdog")

    # Output
    parser.add_argument("--verbose", action="store_true", help="Print detailed engine logs")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("results"),
        help="Directory for output files",
    )
    parser.add_argument("--output-file", type=str, help="Output CSV filename (default: auto-generated)")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    graph = build_graph(args)
    params = build_params(args)
    print(f"Graph: {graph}")

    if args.algorithm:
        request = RunRequest(algorithm=args.algorithm, graph=graph, params=params)
        print(f"Running {args.algorithm} (time limit {params.time_limit}s)")
        if args.no_watchdog:
            run_algorithm(request, print_event)
        else:
            run_isolated(request, print_event)
        return

    algorithms = algorithm_names() if args.benchmark_all else args.benchmark
    runner = BenchmarkRunner(params, output_dir=args.output_dir, isolated=not args.no_watchdog, verbose=True)
    runner.run_sequence(graph, algorithms)
    runner.print_table()
    runner.print_summary()

    csv_path = runner.save_results_csv(args.output_file)
    runner.save_params_json(csv_path)


if __name__ == "__main__":
    main()
