import contextlib
import csv
import io
import json
import tempfile
import unittest
from pathlib import Path

from gcp.config import RunParams
from gcp.runner import BenchmarkEntry, BenchmarkRunner

from helpers import two_triangles


class TestBenchmarkRunner(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.runner = BenchmarkRunner(
            params=RunParams(time_limit=2.0, pacing_delay=0.5, seed=1),
            output_dir=Path(self.tmp.name),
            isolated=False,
        )

    def tearDown(self):
        self.tmp.cleanup()

    def test_pacing_disabled(self):
        self.assertEqual(self.runner.params.pacing_delay, 0.0)

    def test_sequence_keeps_order(self):
        algorithms = ["basicGreedy", "nope", "dSatur", "rlf"]
        entries = self.runner.run_sequence(two_triangles(), algorithms)
        self.assertEqual([e.name for e in entries], algorithms)
        self.assertEqual(entries[0].status, "Completed")
        self.assertEqual(entries[0].colors_used, 3)
        self.assertTrue(entries[1].status.startswith("Error: Unknown algorithm"))
        self.assertIsNone(entries[1].colors_used)

    def test_save_csv_and_json(self):
        self.runner.run_sequence(two_triangles(), ["welshPowell", "dSatur"])
        with contextlib.redirect_stdout(io.StringIO()):
            csv_path = self.runner.save_results_csv("results.csv")
            json_path = self.runner.save_params_json(csv_path)

        with open(csv_path, newline="") as f:
            rows = list(csv.reader(f))
        self.assertEqual(rows[0], BenchmarkEntry.csv_header())
        self.assertEqual([r[0] for r in rows[1:]], ["welshPowell", "dSatur"])

        with open(json_path) as f:
            saved = json.load(f)
        self.assertEqual(saved["algorithms"], ["welshPowell", "dSatur"])
        self.assertEqual(saved["graph"]["vertices"], 6)
        self.assertFalse(saved["isolated"])

    def test_print_methods(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            self.runner.print_summary()
            self.runner.run_sequence(two_triangles(), ["basicGreedy", "nope"])
            self.runner.print_summary()
            self.runner.print_table()
        text = out.getvalue()
        self.assertIn("No results to summarize.", text)
        self.assertIn("Completed: 1", text)
        self.assertIn("nope", text)


class TestBenchmarkEntry(unittest.TestCase):

    def test_csv_row(self):
        entry = BenchmarkEntry("dSatur", 0.12345, 3, 0, "Completed")
        self.assertEqual(entry.to_csv_row(), ["dSatur", "0.123", "3", "0", "Completed"])

    def test_error_row(self):
        entry = BenchmarkEntry("x", 1.0, None, None, "Error: boom")
        self.assertEqual(entry.to_csv_row()[2:4], ["", ""])


if __name__ == "__main__":
    unittest.main()
