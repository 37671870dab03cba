"""Typed result shapes and statistics helpers for the analysis pipeline.

Defines ``TypedDict`` structures for sweep outputs, summarizes a single
trace, checks the structural invariants every trace must satisfy, and
provides robust aggregate statistics for repeated timing runs.
"""
from __future__ import annotations

import statistics
from typing import Dict, List, Optional, TypedDict

from nqueens_trace.board import Cell, count_queens, to_solution
from nqueens_trace.safety import is_safe
from nqueens_trace.tracing import TraceAction, TraceResult
from nqueens_trace.utils import is_valid_solution


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class TraceSummary(TypedDict, total=False):
    n: int
    solutions: int
    calls: int
    backtracks: int
    checks: int
    places: int
    removes: int
    invalids: int
    trace_length: int
    max_depth: int
    placements_per_column: List[int]
    time: StatsSummary
    raw_times: List[float]


SweepResults = Dict[int, TraceSummary]


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of steps expected. Values <= 0 are coerced to 1 to
        avoid division by zero when reporting percentages.
    label : str
        Short label printed in front of the progress counters.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def compute_detailed_statistics(values: List[float]) -> StatsSummary:
    """Compute summary statistics for a numeric sequence.

    Returns
    -------
    StatsSummary
        count, mean, median, population std, min, max, 25th/75th
        percentiles and range. On empty input every numeric field is
        ``None`` and ``count`` is 0, so CSV columns stay aligned.
    """
    if not values:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std": None,
            "min": None,
            "max": None,
            "q25": None,
            "q75": None,
            "range": None,
        }

    sorted_vals = sorted(values)
    n = len(values)
    min_val = sorted_vals[0]
    max_val = sorted_vals[-1]

    return {
        "count": n,
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "std": statistics.pstdev(values) if n > 1 else 0.0,
        "min": min_val,
        "max": max_val,
        "q25": sorted_vals[n // 4] if n >= 4 else min_val,
        "q75": sorted_vals[3 * n // 4] if n >= 4 else max_val,
        "range": max_val - min_val,
    }


def summarize_trace(result: TraceResult, times: Optional[List[float]] = None) -> TraceSummary:
    """Collapse one trace into the scalar metrics reported per board size.

    ``placements_per_column[c]`` is the number of ``place`` entries in
    column ``c``, i.e. the number of legal partial placements of ``c + 1``
    queens; ``max_depth`` is the deepest column that received a queen.
    """
    counts = result.action_counts()
    per_column = [0] * result.size
    for entry in result.trace:
        if entry.action is TraceAction.PLACE:
            per_column[entry.col] += 1
    reached = [col for col, placed in enumerate(per_column) if placed]

    summary: TraceSummary = {
        "n": result.size,
        "solutions": len(result.solutions),
        "calls": result.metrics.calls,
        "backtracks": result.metrics.backtracks,
        "checks": counts[TraceAction.CHECK.value],
        "places": counts[TraceAction.PLACE.value],
        "removes": counts[TraceAction.REMOVE.value],
        "invalids": counts[TraceAction.INVALID.value],
        "trace_length": len(result.trace),
        "max_depth": (reached[-1] + 1) if reached else 0,
        "placements_per_column": per_column,
    }
    if times is not None:
        summary["time"] = compute_detailed_statistics(times)
        summary["raw_times"] = list(times)
    return summary


def check_trace_invariants(result: TraceResult) -> List[str]:
    """Return human-readable violations of the trace contract (empty if none).

    Checked
    - every snapshot is N×N and queen placements never conflict;
    - a ``place`` adds exactly one queen at its square, ``remove`` and
      ``invalid`` leave that square rejected;
    - ``backtracks`` equals the number of ``remove`` entries, which equals
      the number of ``place`` entries;
    - every solution is valid and matches the snapshot of its completing
      ``place`` entry.
    """
    problems: List[str] = []
    size = result.size

    for index, entry in enumerate(result.trace):
        board = entry.board
        if len(board) != size or any(len(row) != size for row in board):
            problems.append(f"step {index}: board is not {size}x{size}")
            continue
        cell = board[entry.row][entry.col]
        if entry.action is TraceAction.PLACE:
            if cell is not Cell.QUEEN:
                problems.append(f"step {index}: place without a queen at ({entry.row}, {entry.col})")
            elif count_queens(board) != entry.col + 1:
                problems.append(f"step {index}: expected {entry.col + 1} queens, found {count_queens(board)}")
            else:
                without = tuple(
                    tuple(Cell.EMPTY if (r, c) == (entry.row, entry.col) else value for c, value in enumerate(row))
                    for r, row in enumerate(board)
                )
                if not is_safe(without, entry.row, entry.col):
                    problems.append(f"step {index}: placed queen is attacked")
        elif entry.action in (TraceAction.REMOVE, TraceAction.INVALID):
            if cell is not Cell.REJECTED:
                problems.append(f"step {index}: {entry.action.value} does not mark ({entry.row}, {entry.col}) rejected")

    counts = result.action_counts()
    if counts["place"] != counts["remove"]:
        problems.append(f"place/remove mismatch: {counts['place']} vs {counts['remove']}")
    if result.metrics.backtracks != counts["remove"]:
        problems.append(f"backtracks={result.metrics.backtracks} but {counts['remove']} remove entries")

    indices = result.solution_indices()
    if len(indices) != len(result.solutions):
        problems.append(f"{len(result.solutions)} solutions but {len(indices)} completing placements")
    for number, (index, solution) in enumerate(zip(indices, result.solutions)):
        if not is_valid_solution(solution):
            problems.append(f"solution {number} is not a valid placement")
        if to_solution(result.trace[index].board) != solution:
            problems.append(f"solution {number} differs from trace step {index}")

    return problems
