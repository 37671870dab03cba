"""Command-line interface for solving, inspecting and replaying N-Queens traces.

This module wires together configuration loading, the trace-recording
solver, step-wise playback, and the sweep/report/plot pipeline. It isolates
I/O, argument parsing, and pacing from the core modules so that the solver
remains a pure function of the board size.

Modes
-----
- solve: solve one board, print counters and the first solutions.
- trace: print the recorded steps (optionally with board snapshots).
- play: replay the trace frame by frame with a delay between frames.
- analyze: sweep several board sizes, export CSV and charts.
"""
from __future__ import annotations

import argparse
import os
import tempfile
import time
from pathlib import Path
from typing import List, Optional

from config_manager import ConfigManager
from nqueens_trace.board import render_board, render_solution
from nqueens_trace.playback import TracePlayer, describe_step
from nqueens_trace.tracing import TraceResult, solve

from . import settings
from .experiments import run_trace_sweep, timed_solve
from .plots import plot_and_save, plot_check_heatmap, plot_trace_step
from .reporting import save_summary_csv, save_trace_csv, save_trace_json
from .stats import check_trace_invariants

# Known solution counts used by the quick regression run
KNOWN_SOLUTION_COUNTS = {1: 1, 2: 0, 3: 0, 4: 2, 5: 10, 6: 4, 7: 40, 8: 92}


# ------------- Utils --------------------------------------------------------

def parse_size_list(size_args: Optional[List[str]]) -> Optional[List[int]]:
    """Normalize ``--sizes`` inputs into a sorted list of unique ints.

    Accepts repeated flags (``--sizes 4 --sizes 6``), comma-separated lists
    (``--sizes 4,6,8``) and ranges (``--sizes 4-8``). Returns ``None`` when
    nothing is given so callers fall back to the configured sizes.
    """
    if not size_args:
        return None
    selected: List[int] = []
    for entry in size_args:
        for token in entry.split(","):
            token = token.strip()
            if not token:
                continue
            try:
                if "-" in token:
                    low, high = (int(part) for part in token.split("-", 1))
                    selected.extend(range(low, high + 1))
                else:
                    selected.append(int(token))
            except ValueError as exc:
                raise ValueError(f"Invalid board size '{token}'") from exc
    return sorted(set(selected)) or None


def apply_configuration(config_path: str) -> ConfigManager:
    """Load configuration and update the global ``settings`` module in-place."""
    config_mgr = ConfigManager(config_path)

    board_settings = config_mgr.get_board_settings()
    if board_settings:
        settings.set_board_bounds(
            int(board_settings.get("min_size", settings.MIN_BOARD_SIZE)),
            int(board_settings.get("max_size", settings.MAX_BOARD_SIZE)),
            int(board_settings.get("default_size", settings.DEFAULT_BOARD_SIZE)),
        )

    analysis_settings = config_mgr.get_analysis_settings()
    if analysis_settings:
        settings.SIZES = [int(n) for n in analysis_settings.get("sizes", settings.SIZES)]
        settings.RUNS_PER_SIZE = int(analysis_settings.get("runs_per_size", settings.RUNS_PER_SIZE))
        settings.OUT_DIR = analysis_settings.get("output_dir", settings.OUT_DIR)

    playback_settings = config_mgr.get_playback_settings()
    if playback_settings:
        settings.PLAYBACK_DELAY = float(playback_settings.get("delay_seconds", settings.PLAYBACK_DELAY))
        max_steps = playback_settings.get("max_steps", settings.PLAYBACK_MAX_STEPS)
        settings.PLAYBACK_MAX_STEPS = int(max_steps) if max_steps is not None else None

    if settings.RUNS_PER_SIZE < 1:
        raise ValueError("runs_per_size must be >= 1")
    return config_mgr


def resolve_board_size(size: Optional[int]) -> int:
    """Return the requested size, or the default, checked against the bounds."""
    chosen = settings.DEFAULT_BOARD_SIZE if size is None else size
    if not settings.MIN_BOARD_SIZE <= chosen <= settings.MAX_BOARD_SIZE:
        raise ValueError(
            f"Board size {chosen} outside the supported range "
            f"{settings.MIN_BOARD_SIZE}..{settings.MAX_BOARD_SIZE}"
        )
    return chosen


def print_summary(result: TraceResult, elapsed: Optional[float] = None) -> None:
    counts = result.action_counts()
    print(f"N-Queens size: {result.size}")
    print(f"Solutions found: {len(result.solutions)}")
    print(f"Recursive calls: {result.metrics.calls}")
    print(f"Backtracking steps: {result.metrics.backtracks}")
    print(
        f"Trace steps: {len(result.trace)} "
        f"(check={counts['check']}, place={counts['place']}, "
        f"remove={counts['remove']}, invalid={counts['invalid']})"
    )
    if elapsed is not None:
        print(f"Elapsed: {elapsed:.4f}s")


def export_trace(result: TraceResult, out_dir: str) -> None:
    """Write the trace CSV/JSON, the check heatmap and the first solution board."""
    save_trace_csv(result, out_dir)
    save_trace_json(result, out_dir)
    plot_check_heatmap(result, out_dir)
    indices = result.solution_indices()
    if indices:
        plot_trace_step(result, indices[0], out_dir)


# ------------- Modes ------------------------------------------------------

def run_solve(size: int, show_boards: int, export: bool, validate: bool) -> TraceResult:
    result, elapsed = timed_solve(size, max_size=settings.MAX_BOARD_SIZE)
    print_summary(result, elapsed)

    if validate:
        problems = check_trace_invariants(result)
        if problems:
            raise AssertionError("Trace validation failed: " + "; ".join(problems[:5]))
        print("Trace validation passed.")

    player = TracePlayer(result)
    for index in range(min(show_boards, len(result.solutions))):
        print()
        print(f"Solution {index + 1} of {len(result.solutions)}")
        print(render_solution(player.current_solution))
        player.next_solution()

    if export:
        export_trace(result, settings.OUT_DIR)
    return result


def run_trace(size: int, start: int, max_steps: Optional[int], show_boards: bool) -> None:
    result = solve(size, max_size=settings.MAX_BOARD_SIZE)
    player = TracePlayer(result)
    shown = 0
    for index, entry in player.frames(start):
        if max_steps is not None and shown >= max_steps:
            print(f"... {len(player) - index} more steps")
            break
        print(f"[{index + 1}/{len(player)}] {describe_step(entry)}")
        if show_boards:
            print(render_board(entry.board))
            print()
        shown += 1


def run_play(size: int, delay: float, max_steps: Optional[int]) -> None:
    """Replay the trace in real time; pacing happens here, not in the solver."""
    result = solve(size, max_size=settings.MAX_BOARD_SIZE)
    player = TracePlayer(result)
    print(player.describe())
    for index, _entry in player.frames():
        if max_steps is not None and index >= max_steps:
            print(f"Stopped after {max_steps} steps ({player.progress}).")
            break
        print()
        print(f"Step {player.progress}: {player.describe()}")
        print(render_board(player.current_board))
        if delay > 0:
            time.sleep(delay)
    print()
    print_summary(result)


def run_analyze(sizes: List[int], runs: int, validate: bool) -> None:
    os.makedirs(settings.OUT_DIR, exist_ok=True)
    print(f"Sweeping sizes {sizes} with {runs} run(s) each")
    summaries, kept = run_trace_sweep(
        sizes,
        runs=runs,
        validate=validate,
        progress_label="Trace sweep",
        max_size=settings.MAX_BOARD_SIZE,
        keep_results=True,
    )
    save_summary_csv(summaries, sizes, settings.OUT_DIR)
    plot_and_save(summaries, sizes, settings.OUT_DIR)
    for N in sizes:
        plot_check_heatmap(kept[N], settings.OUT_DIR)
    print("\nAnalysis completed.")


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Execute a fast, deterministic smoke test of the solver and exports.

    Verifies that:
    - Solution counts match the known values for N=1..8.
    - Every trace satisfies the structural invariants.
    - Two runs for N=5 yield identical results.
    - The summary CSV and trace exports are produced in a temporary folder.
    """
    print("Running quick regression tests (N=1..8)...")

    for N, expected in KNOWN_SOLUTION_COUNTS.items():
        result = solve(N)
        if len(result.solutions) != expected:
            raise AssertionError(f"N={N}: expected {expected} solutions, got {len(result.solutions)}.")
        problems = check_trace_invariants(result)
        if problems:
            raise AssertionError(f"N={N}: trace invariants violated: {problems[:3]}")
        print(f"  N={N}: {expected} solutions, calls={result.metrics.calls}, steps={len(result.trace)}")

    if solve(5) != solve(5):
        raise AssertionError("solve(5) is not deterministic.")

    with tempfile.TemporaryDirectory() as tmpdir:
        summaries, _ = run_trace_sweep([4, 5], runs=2, validate=True)
        csv_path = Path(save_summary_csv(summaries, [4, 5], tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Summary CSV was not generated during quick tests.")
        json_path = Path(save_trace_json(solve(4), tmpdir))
        if not json_path.exists() or json_path.stat().st_size == 0:
            raise AssertionError("Trace JSON was not generated during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Solve, trace and replay the N-Queens backtracking search.")
    parser.add_argument(
        "--mode",
        choices=["solve", "trace", "play", "analyze"],
        default="solve",
        help="solve (default), trace (list steps), play (timed replay) or analyze (sweep sizes).",
    )
    parser.add_argument("--size", "-n", type=int, help="Board size N (default from configuration).")
    parser.add_argument(
        "--sizes",
        "-s",
        action="append",
        help="Sizes for analyze mode: comma-separated, ranges like 4-8, or multiple flags.",
    )
    parser.add_argument("--runs", type=int, help="Repetitions per size in analyze mode.")
    parser.add_argument("--show-boards", type=int, default=3, help="Number of solutions to print in solve mode.")
    parser.add_argument("--boards", action="store_true", help="Print the board snapshot of every step in trace mode.")
    parser.add_argument("--start", type=int, default=0, help="First step to print in trace mode (0-based).")
    parser.add_argument("--max-steps", type=int, help="Maximum number of steps to print in trace/play modes.")
    parser.add_argument("--delay", type=float, help="Seconds between frames in play mode.")
    parser.add_argument("--export", action="store_true", help="Write trace CSV/JSON and charts in solve mode.")
    parser.add_argument("--config", default="config.json", help="Path to configuration file (default: config.json).")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests and exit.")
    parser.add_argument("--validate", action="store_true", help="Check trace invariants and determinism (extra assertions).")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen mode."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.quick_test:
        run_quick_regression_tests()
        return

    try:
        apply_configuration(args.config)
        sizes = parse_size_list(args.sizes)
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    max_steps = args.max_steps if args.max_steps is not None else settings.PLAYBACK_MAX_STEPS

    try:
        if args.mode == "analyze":
            runs = args.runs if args.runs is not None else settings.RUNS_PER_SIZE
            run_analyze(sizes or settings.SIZES, runs, args.validate)
        else:
            size = resolve_board_size(args.size)
            if args.mode == "solve":
                run_solve(size, args.show_boards, args.export, args.validate)
            elif args.mode == "trace":
                run_trace(size, args.start, max_steps, args.boards)
            else:
                delay = args.delay if args.delay is not None else settings.PLAYBACK_DELAY
                run_play(size, delay, max_steps)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None
    except (ValueError, TypeError, IndexError) as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc
