"""Export utilities for sweep summaries and individual traces.

- ``save_summary_csv``: one row per board size with counters and timings.
- ``save_trace_csv``: one row per trace entry, built through pandas.
- ``save_trace_json``: the full trace with board snapshots, for external
  players that step through the search on their own.

Filenames carry the optional run tag / datestamp suffix configured in
``nqueens_trace.analysis.settings``.
"""
from __future__ import annotations

import csv
import json
import os
from typing import Any, Dict, List

import pandas as pd

from nqueens_trace.board import Board, Cell
from nqueens_trace.tracing import TraceResult

from . import settings
from .stats import SweepResults

_CELL_CODES = {Cell.QUEEN: True, Cell.REJECTED: False, Cell.EMPTY: None}

SUMMARY_COLUMNS = [
    "n",
    "solutions",
    "calls",
    "backtracks",
    "checks",
    "places",
    "removes",
    "invalids",
    "trace_length",
    "max_depth",
    "time_mean_seconds",
    "time_median_seconds",
    "time_std_seconds",
    "runs",
]


def save_summary_csv(results: SweepResults, sizes: List[int], out_dir: str) -> str:
    """Write per-N counters and timing aggregates to CSV; return the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"trace_summary{settings.filename_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(SUMMARY_COLUMNS)
        for N in sizes:
            entry = results.get(N)
            if not entry:
                continue
            timing = entry.get("time", {})
            writer.writerow([
                entry["n"],
                entry["solutions"],
                entry["calls"],
                entry["backtracks"],
                entry["checks"],
                entry["places"],
                entry["removes"],
                entry["invalids"],
                entry["trace_length"],
                entry["max_depth"],
                timing.get("mean", ""),
                timing.get("median", ""),
                timing.get("std", ""),
                timing.get("count", 0),
            ])

    print(f"Saved summary CSV: {filename}")
    return filename


def trace_dataframe(result: TraceResult) -> pd.DataFrame:
    """Return the trace as a DataFrame indexed by step.

    Columns: ``row``, ``col``, ``action``, ``queens``.
    """
    frame = pd.DataFrame.from_records(result.to_records(), columns=["step", "row", "col", "action", "queens"])
    return frame.set_index("step")


def save_trace_csv(result: TraceResult, out_dir: str) -> str:
    """Write one row per trace entry; return the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"trace_N{result.size}{settings.filename_suffix()}.csv")
    trace_dataframe(result).to_csv(filename)
    print(f"Saved trace CSV: {filename}")
    return filename


def _encode_board(board: Board) -> List[List[Any]]:
    # true = queen, false = rejected, null = untried
    return [[_CELL_CODES[cell] for cell in row] for row in board]


def trace_to_dict(result: TraceResult) -> Dict[str, Any]:
    """Serializable form of a ``TraceResult``."""
    return {
        "size": result.size,
        "metrics": result.metrics.to_dict(),
        "solutions": [[list(row) for row in solution] for solution in result.solutions],
        "steps": [
            {
                "board": _encode_board(entry.board),
                "row": entry.row,
                "col": entry.col,
                "action": entry.action.value,
            }
            for entry in result.trace
        ],
    }


def save_trace_json(result: TraceResult, out_dir: str) -> str:
    """Write the complete trace, snapshots included, as JSON; return the path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"trace_N{result.size}{settings.filename_suffix()}.json")
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(trace_to_dict(result), f)
    print(f"Saved trace JSON: {filename}")
    return filename
