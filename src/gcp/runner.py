"""
Benchmark runner: one graph, a sequence of algorithms, one entry per algorithm.

Runs never overlap, so elapsed times stay comparable.
"""

import csv
import json
import sys
import time
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .config import RunParams
from .engine import RunRequest, run_algorithm, run_isolated
from .instance import GraphInstance
from .progress import DoneEvent, EmitFn, TerminalEvent


@dataclass
class BenchmarkEntry:
    """Result of one algorithm in a benchmark sequence."""

    name: str
    elapsed_time: float
    colors_used: Optional[int]
    conflicts: Optional[int]
    status: str

    def to_csv_row(self) -> list[str]:
        """Format as CSV row."""
        return [
            self.name,
            f"{self.elapsed_time:.3f}",
            str(self.colors_used) if self.colors_used is not None else "",
            str(self.conflicts) if self.conflicts is not None else "",
            self.status,
        ]

    @staticmethod
    def csv_header() -> list[str]:
        """Return CSV header."""
        return ["algorithm", "time_s", "colors", "conflicts", "status"]

    @classmethod
    def from_event(cls, name: str, event: TerminalEvent, elapsed: float) -> "BenchmarkEntry":
        if isinstance(event, DoneEvent):
            return cls(
                name=name,
                elapsed_time=event.metrics.time,
                colors_used=event.metrics.colors_used,
                conflicts=event.metrics.conflicts,
                status=event.status,
            )
        return cls(name=name, elapsed_time=elapsed, colors_used=None, conflicts=None, status=f"Error: {event.message}")


RunFn = Callable[[RunRequest, Optional[EmitFn]], TerminalEvent]


class BenchmarkRunner:
    """Runs a sequence of algorithms on one graph and collects results.

    Pacing is always disabled: delays for display smoothing would distort
    the measured times.
    """

    def __init__(
        self,
        params: Optional[RunParams] = None,
        output_dir: Path | None = None,
        isolated: bool = True,
        verbose: bool = False,
    ):
        """
        Initialize the benchmark runner.

        Args:
            params: Configuration shared by every run (default: RunParams())
            output_dir: Directory for output files (default: current directory)
            isolated: Run each algorithm in a watched child process
            verbose: Print one line per algorithm while running
        """
        self.params = replace(params or RunParams(), pacing_delay=0.0)
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self.isolated = isolated
        self.verbose = verbose
        self.graph: Optional[GraphInstance] = None
        self.results: list[BenchmarkEntry] = []

    def _run_fn(self) -> RunFn:
        return run_isolated if self.isolated else run_algorithm

    def run_one(self, graph: GraphInstance, algorithm: str) -> BenchmarkEntry:
        """Run a single algorithm to completion (or timeout)."""
        request = RunRequest(algorithm=algorithm, graph=graph, params=self.params)
        started = time.perf_counter()
        event = self._run_fn()(request, None)
        entry = BenchmarkEntry.from_event(algorithm, event, time.perf_counter() - started)
        self.results.append(entry)
        return entry

    def run_sequence(self, graph: GraphInstance, algorithms: list[str]) -> list[BenchmarkEntry]:
        """
        Run every algorithm in order on the same graph.

        Args:
            graph: Graph shared by all runs
            algorithms: Algorithm identifiers, run strictly one after another

        Returns:
            One BenchmarkEntry per algorithm, in the given order
        """
        self.graph = graph
        entries = []
        for i, algorithm in enumerate(algorithms):
            if self.verbose:
                print(f"[{i + 1}/{len(algorithms)}] Running {algorithm}...", end=" ")
                sys.stdout.flush()

            entry = self.run_one(graph, algorithm)
            entries.append(entry)

            if self.verbose:
                self._print_result_line(entry)

        return entries

    def _print_result_line(self, entry: BenchmarkEntry) -> None:
        colors = entry.colors_used if entry.colors_used is not None else "-"
        print(f"{entry.status} - {colors} colors in {entry.elapsed_time:.2f}s")

    def save_results_csv(self, filename: str | None = None) -> Path:
        """
        Save all results to a CSV file.

        Args:
            filename: Output filename (default: benchmark_GRAPH_TIMESTAMP.csv)

        Returns:
            Path to the saved file
        """
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            graph_part = f"{self.graph.name}_" if self.graph is not None else ""
            filename = f"benchmark_{graph_part}{timestamp}.csv"

        filepath = self.output_dir / filename
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(BenchmarkEntry.csv_header())
            for entry in self.results:
                writer.writerow(entry.to_csv_row())

        print(f"\nResults saved to: {filepath}")
        return filepath

    def save_params_json(self, csv_filepath: Path) -> Path:
        """
        Save run parameters to a JSON file alongside the CSV.

        Args:
            csv_filepath: Path to the CSV file (JSON will be saved with same name)

        Returns:
            Path to the saved JSON file
        """
        json_filepath = Path(csv_filepath).with_suffix(".json")

        params = self.params.get_params()
        params["isolated"] = self.isolated
        params["algorithms"] = [entry.name for entry in self.results]
        if self.graph is not None:
            params["graph"] = {
                "name": self.graph.name,
                "vertices": self.graph.num_vertices,
                "edges": self.graph.num_edges,
            }
        params["timestamp"] = datetime.now().isoformat()

        with open(json_filepath, "w") as f:
            json.dump(params, f, indent=2)

        print(f"Parameters saved to: {json_filepath}")
        return json_filepath

    def print_summary(self):
        """Print a summary of results."""
        if not self.results:
            print("No results to summarize.")
            return

        print(f"\n{'=' * 60}")
        print("SUMMARY")
        print(f"{'=' * 60}")

        total = len(self.results)
        completed = [e for e in self.results if e.status.startswith("Completed")]
        errors = [e for e in self.results if e.status.startswith("Error")]
        print(f"Total algorithms: {total}")
        print(f"  Completed: {len(completed)} ({100 * len(completed) / total:.1f}%)")
        print(f"  Errors:    {len(errors)} ({100 * len(errors) / total:.1f}%)")

        if completed:
            fewest = min(completed, key=lambda e: (e.colors_used, e.elapsed_time))
            fastest = min(completed, key=lambda e: e.elapsed_time)
            print(f"\nFewest colors: {fewest.name} ({fewest.colors_used})")
            print(f"Fastest:       {fastest.name} ({fastest.elapsed_time:.3f}s)")

    def print_table(self):
        """Print results as a formatted table."""
        if not self.results:
            print("No results to display.")
            return

        print(f"\n{'Algorithm':<20} {'Time(s)':>10} {'Colors':>7} {'Conflicts':>10}  {'Status'}")
        print("-" * 80)

        for e in self.results:
            colors_str = str(e.colors_used) if e.colors_used is not None else "-"
            conflicts_str = str(e.conflicts) if e.conflicts is not None else "-"
            print(f"{e.name:<20} {e.elapsed_time:>10.3f} {colors_str:>7} {conflicts_str:>10}  {e.status}")
