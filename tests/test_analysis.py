"""Tests for the sweep, reporting, plotting and CLI layers."""

import csv
import json
from pathlib import Path
import sys
import tempfile
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config_manager import ConfigManager
from nqueens_trace.analysis import cli, settings
from nqueens_trace.analysis.experiments import run_trace_sweep
from nqueens_trace.analysis.plots import check_counts, plot_and_save, plot_board, plot_check_heatmap
from nqueens_trace.analysis.reporting import (
    SUMMARY_COLUMNS,
    save_summary_csv,
    save_trace_csv,
    save_trace_json,
    trace_dataframe,
)
from nqueens_trace.analysis.stats import (
    check_trace_invariants,
    compute_detailed_statistics,
    summarize_trace,
)
from nqueens_trace.board import Cell, with_cell
from nqueens_trace.tracing import TraceEntry, TraceResult, solve


class StatsTests(unittest.TestCase):
    def test_detailed_statistics(self):
        summary = compute_detailed_statistics([4.0, 1.0, 3.0, 2.0])
        self.assertEqual(summary["count"], 4)
        self.assertAlmostEqual(summary["mean"], 2.5)
        self.assertAlmostEqual(summary["median"], 2.5)
        self.assertEqual(summary["q25"], 2.0)
        self.assertEqual(summary["q75"], 4.0)
        self.assertEqual(summary["range"], 3.0)

    def test_detailed_statistics_empty(self):
        summary = compute_detailed_statistics([])
        self.assertEqual(summary["count"], 0)
        self.assertIsNone(summary["mean"])

    def test_summarize_trace(self):
        summary = summarize_trace(solve(4), [0.5, 0.25])
        self.assertEqual(summary["solutions"], 2)
        self.assertEqual(summary["calls"], 17)
        self.assertEqual(summary["invalids"], 44)
        self.assertEqual(summary["placements_per_column"], [4, 6, 4, 2])
        self.assertEqual(summary["max_depth"], 4)
        self.assertEqual(summary["time"]["count"], 2)

    def test_max_depth_without_solutions(self):
        summary = summarize_trace(solve(3))
        self.assertEqual(summary["placements_per_column"], [3, 2, 0])
        self.assertEqual(summary["max_depth"], 2)
        self.assertNotIn("time", summary)

    def test_invariants_hold(self):
        for size in range(1, 8):
            with self.subTest(size=size):
                self.assertEqual(check_trace_invariants(solve(size)), [])

    def test_invariants_detect_tampering(self):
        result = solve(4)
        entry = result.trace[1]
        forged = TraceEntry(with_cell(entry.board, entry.row, entry.col, Cell.EMPTY), entry.row, entry.col, entry.action)
        tampered = TraceResult(
            size=result.size,
            trace=(result.trace[0], forged) + result.trace[2:],
            solutions=result.solutions,
            metrics=result.metrics,
        )
        problems = check_trace_invariants(tampered)
        self.assertTrue(any("step 1" in problem for problem in problems))


class SweepTests(unittest.TestCase):
    def test_sweep_with_validation(self):
        summaries, kept = run_trace_sweep([4, 5, 6], runs=2, validate=True, keep_results=True)
        self.assertEqual([summaries[n]["solutions"] for n in (4, 5, 6)], [2, 10, 4])
        self.assertEqual(summaries[5]["time"]["count"], 2)
        self.assertEqual(sorted(kept), [4, 5, 6])
        self.assertEqual(kept[4], solve(4))

    def test_sweep_without_kept_results(self):
        _, kept = run_trace_sweep([4])
        self.assertEqual(kept, {})

    def test_invalid_runs(self):
        with self.assertRaises(ValueError):
            run_trace_sweep([4], runs=0)

    def test_invalid_size(self):
        with self.assertRaises(ValueError):
            run_trace_sweep([0])


class ReportingTests(unittest.TestCase):
    def test_summary_csv(self):
        summaries, _ = run_trace_sweep([4, 5])
        with tempfile.TemporaryDirectory() as tmpdir:
            path = save_summary_csv(summaries, [4, 5, 6], tmpdir)
            with open(path, newline="") as f:
                rows = list(csv.reader(f))
        self.assertEqual(rows[0], SUMMARY_COLUMNS)
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[1][:4], ["4", "2", "17", "16"])

    def test_trace_dataframe(self):
        frame = trace_dataframe(solve(4))
        self.assertEqual(len(frame), 136)
        self.assertEqual(list(frame.columns), ["row", "col", "action", "queens"])
        self.assertEqual(frame.index.name, "step")
        counts = frame["action"].value_counts()
        self.assertEqual(counts["place"], 16)
        self.assertEqual(counts["invalid"], 44)
        self.assertEqual(int(frame["queens"].max()), 4)

    def test_trace_csv_and_json(self):
        result = solve(4)
        with tempfile.TemporaryDirectory() as tmpdir:
            csv_path = Path(save_trace_csv(result, tmpdir))
            json_path = Path(save_trace_json(result, tmpdir))
            self.assertGreater(csv_path.stat().st_size, 0)
            with open(json_path, encoding="utf-8") as f:
                payload = json.load(f)

        self.assertEqual(payload["size"], 4)
        self.assertEqual(payload["metrics"], {"calls": 17, "backtracks": 16})
        self.assertEqual(len(payload["steps"]), 136)
        self.assertEqual(len(payload["solutions"]), 2)
        self.assertEqual(payload["steps"][1]["action"], "place")
        self.assertIs(payload["steps"][1]["board"][0][0], True)
        self.assertIs(payload["steps"][3]["board"][0][1], False)
        self.assertIsNone(payload["steps"][0]["board"][0][0])


class PlotTests(unittest.TestCase):
    def test_check_counts(self):
        counts = check_counts(solve(4))
        self.assertEqual(int(counts.sum()), 60)
        self.assertEqual([int(v) for v in counts.sum(axis=0)], [4, 16, 24, 16])

    def test_plots_are_written(self):
        result = solve(5)
        summaries, _ = run_trace_sweep([4, 5])
        with tempfile.TemporaryDirectory() as tmpdir:
            board_path = plot_board(result.trace[result.solution_indices()[0]].board, str(Path(tmpdir) / "board.png"))
            heatmap_path = plot_check_heatmap(result, tmpdir)
            sweep_paths = plot_and_save(summaries, [4, 5], tmpdir)
            for path in [board_path, heatmap_path] + sweep_paths:
                self.assertTrue(Path(path).exists(), path)
            self.assertEqual(len(sweep_paths), 2)


# Module globals rewritten by cli.apply_configuration
CONFIGURED_SETTINGS = (
    "MIN_BOARD_SIZE",
    "MAX_BOARD_SIZE",
    "DEFAULT_BOARD_SIZE",
    "SIZES",
    "RUNS_PER_SIZE",
    "OUT_DIR",
    "PLAYBACK_DELAY",
    "PLAYBACK_MAX_STEPS",
)


class SettingsIsolationTests(unittest.TestCase):
    def test_cli_tests_restore_settings(self):
        before = {name: getattr(settings, name) for name in CONFIGURED_SETTINGS}
        case = CliTests("test_configuration_updates_every_section")
        result = unittest.TestResult()
        case.run(result)
        self.assertTrue(result.wasSuccessful(), result.failures + result.errors)
        after = {name: getattr(settings, name) for name in CONFIGURED_SETTINGS}
        self.assertEqual(after, before)


class CliTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.config_path = Path(self.tmpdir.name) / "config.json"
        self.config_path.write_text(json.dumps({
            "board_settings": {"min_size": 4, "max_size": 10, "default_size": 8},
            "analysis_settings": {"sizes": [4, 5], "runs_per_size": 1, "output_dir": str(Path(self.tmpdir.name) / "out")},
            "playback_settings": {"delay_seconds": 0.0, "max_steps": 5},
        }))
        self._saved_settings = {name: getattr(settings, name) for name in CONFIGURED_SETTINGS}

    def tearDown(self):
        for name, value in self._saved_settings.items():
            setattr(settings, name, value)
        self.tmpdir.cleanup()

    def test_configuration_updates_every_section(self):
        cli.apply_configuration(str(self.config_path))
        self.assertEqual(settings.SIZES, [4, 5])
        self.assertEqual(settings.RUNS_PER_SIZE, 1)
        self.assertEqual(settings.OUT_DIR, str(Path(self.tmpdir.name) / "out"))
        self.assertEqual(settings.PLAYBACK_MAX_STEPS, 5)
        self.assertEqual(settings.PLAYBACK_DELAY, 0.0)
        self.assertEqual(
            (settings.MIN_BOARD_SIZE, settings.MAX_BOARD_SIZE, settings.DEFAULT_BOARD_SIZE),
            (4, 10, 8),
        )

    def test_parse_size_list(self):
        self.assertEqual(cli.parse_size_list(["4-6", "8,5"]), [4, 5, 6, 8])
        self.assertIsNone(cli.parse_size_list(None))
        with self.assertRaises(ValueError):
            cli.parse_size_list(["four"])

    def test_resolve_board_size(self):
        cli.apply_configuration(str(self.config_path))
        self.assertEqual(cli.resolve_board_size(None), 8)
        self.assertEqual(cli.resolve_board_size(4), 4)
        with self.assertRaises(ValueError):
            cli.resolve_board_size(3)
        with self.assertRaises(ValueError):
            cli.resolve_board_size(11)

    def test_solve_mode_with_export(self):
        cli.main(["--config", str(self.config_path), "--mode", "solve", "-n", "4", "--show-boards", "1", "--export", "--validate"])
        out_dir = Path(self.tmpdir.name) / "out"
        self.assertTrue((out_dir / "trace_N4.csv").exists())
        self.assertTrue((out_dir / "trace_N4.json").exists())
        self.assertTrue((out_dir / "check_heatmap_N4.png").exists())

    def test_trace_and_play_modes(self):
        cli.main(["--config", str(self.config_path), "--mode", "trace", "-n", "4", "--max-steps", "3", "--boards"])
        cli.main(["--config", str(self.config_path), "--mode", "play", "-n", "4"])

    def test_analyze_mode(self):
        cli.main(["--config", str(self.config_path), "--mode", "analyze", "--sizes", "4,5"])
        out_dir = Path(self.tmpdir.name) / "out"
        self.assertTrue((out_dir / "trace_summary.csv").exists())
        self.assertTrue((out_dir / "01_growth_vs_N.png").exists())

    def test_update_setting_persists(self):
        config_mgr = ConfigManager(str(self.config_path))
        config_mgr.update_setting("playback_settings", "delay_seconds", 0.25)
        config_mgr.update_setting("extra", "flag", True)
        reloaded = ConfigManager(str(self.config_path))
        self.assertEqual(reloaded.get_playback_settings()["delay_seconds"], 0.25)
        self.assertEqual(reloaded.config["extra"], {"flag": True})
        self.assertEqual(reloaded.get_board_settings()["default_size"], 8)

    def test_malformed_config_is_rejected(self):
        bad_path = Path(self.tmpdir.name) / "bad.json"
        bad_path.write_text(json.dumps({"board_settings": [4, 10, 8]}))
        with self.assertRaises(ValueError):
            ConfigManager(str(bad_path))
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--config", str(bad_path)])
        self.assertEqual(ctx.exception.code, 1)

    def test_missing_section_reads_empty(self):
        partial_path = Path(self.tmpdir.name) / "partial.json"
        partial_path.write_text(json.dumps({"playback_settings": {"max_steps": 3}}))
        config_mgr = ConfigManager(str(partial_path))
        self.assertEqual(config_mgr.get_board_settings(), {})
        self.assertEqual(config_mgr.get_playback_settings(), {"max_steps": 3})

    def test_missing_config_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--config", str(Path(self.tmpdir.name) / "missing.json")])
        self.assertEqual(ctx.exception.code, 1)

    def test_out_of_range_size_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--config", str(self.config_path), "-n", "12"])
        self.assertEqual(ctx.exception.code, 1)

    def test_trace_start_out_of_range_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--config", str(self.config_path), "--mode", "trace", "-n", "4", "--start", "500"])
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()
