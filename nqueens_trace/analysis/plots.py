"""Visualization utilities for traces and sweep summaries.

Overview
--------
Plotting helpers that write PNG charts for a single trace or for a sweep
across board sizes. Every public function only has side effects (file
creation, a stdout line naming the file) and returns the written path.

Chart map
---------
- board_N{N}_step{k}.png: Board snapshot at trace step k
    - Queen squares green, rejected squares red, untried squares grey; the
      shade alternates with checker parity.
- check_heatmap_N{N}.png: How often each square was checked
    - seaborn heatmap of per-square ``check`` counts over the whole trace.
- 01_growth_vs_N.png: Search effort vs N (log scale)
    - Calls, backtracks and trace length per board size.
- 02_action_breakdown_vs_N.png: Trace composition vs N
    - Stacked bars of check / place / remove / invalid counts.
"""
from __future__ import annotations

import os
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import seaborn as sns  # noqa: E402
from matplotlib.colors import to_rgb  # noqa: E402

from nqueens_trace.board import Board, board_to_array  # noqa: E402
from nqueens_trace.playback import cell_colour, describe_step  # noqa: E402
from nqueens_trace.tracing import TraceAction, TraceResult  # noqa: E402

from . import settings  # noqa: E402
from .stats import SweepResults  # noqa: E402


def _board_image(board: Board) -> np.ndarray:
    size = len(board)
    image = np.zeros((size, size, 3))
    for r, row in enumerate(board):
        for c, cell in enumerate(row):
            image[r, c] = to_rgb(cell_colour(r, c, cell))
    return image


def plot_board(board: Board, out_path: str, title: Optional[str] = None) -> str:
    """Draw one snapshot with the playback colour scheme; return the path."""
    directory = os.path.dirname(out_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    size = len(board)
    codes = board_to_array(board)
    fig, ax = plt.subplots(figsize=(max(4, size * 0.6), max(4, size * 0.6)))
    ax.imshow(_board_image(board), interpolation="nearest")
    for r, c in zip(*np.nonzero(codes == 1)):
        ax.text(c, r, "Q", ha="center", va="center", fontsize=max(10, 160 // size), fontweight="bold", color="#eab308")
    ax.set_xticks(range(size))
    ax.set_yticks(range(size))
    ax.set_xticklabels([str(i + 1) for i in range(size)])
    ax.set_yticklabels([str(i + 1) for i in range(size)])
    ax.set_xlabel("Column")
    ax.set_ylabel("Row")
    if title:
        ax.set_title(title)
    fig.savefig(out_path, bbox_inches="tight", dpi=150)
    plt.close(fig)
    print(f"Saved board chart: {out_path}")
    return out_path


def plot_trace_step(result: TraceResult, step: int, out_dir: str) -> str:
    """Plot the snapshot stored at ``result.trace[step]``."""
    entry = result.trace[step]
    fname = os.path.join(out_dir, f"board_N{result.size}_step{step}{settings.filename_suffix()}.png")
    return plot_board(entry.board, fname, title=f"Step {step + 1}: {describe_step(entry)}")


def check_counts(result: TraceResult) -> np.ndarray:
    """Return an N×N matrix counting ``check`` entries per square."""
    counts = np.zeros((result.size, result.size), dtype=int)
    for entry in result.trace:
        if entry.action is TraceAction.CHECK:
            counts[entry.row, entry.col] += 1
    return counts


def plot_check_heatmap(result: TraceResult, out_dir: str) -> str:
    """Heatmap of how often the search checked each square."""
    os.makedirs(out_dir, exist_ok=True)
    counts = check_counts(result)
    labels = [str(i + 1) for i in range(result.size)]

    plt.figure(figsize=(8, 6))
    ax = sns.heatmap(counts, annot=result.size <= 8, fmt="d", cmap="viridis", xticklabels=labels, yticklabels=labels)
    ax.set_xlabel("Column")
    ax.set_ylabel("Row")
    ax.set_title(f"Safety checks per square (N={result.size})")
    fname = os.path.join(out_dir, f"check_heatmap_N{result.size}{settings.filename_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved check heatmap: {fname}")
    return fname


def plot_growth_vs_N(results: SweepResults, sizes: List[int], out_dir: str) -> str:
    """Plot calls, backtracks and trace length against N on a log scale."""
    os.makedirs(out_dir, exist_ok=True)
    present = [N for N in sizes if N in results]
    calls = [max(results[N]["calls"], 1) for N in present]
    backtracks = [max(results[N]["backtracks"], 1) for N in present]
    lengths = [max(results[N]["trace_length"], 1) for N in present]

    plt.figure(figsize=(12, 8))
    plt.semilogy(present, calls, marker="o", linewidth=2, markersize=8, label="Recursive calls")
    plt.semilogy(present, backtracks, marker="s", linewidth=2, markersize=8, label="Backtracks")
    plt.semilogy(present, lengths, marker="^", linewidth=2, markersize=8, label="Trace length")
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Count (log scale)", fontsize=12)
    plt.title("Search Effort vs Board Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(present)

    fname = os.path.join(out_dir, f"01_growth_vs_N{settings.filename_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved growth chart: {fname}")
    return fname


def plot_action_breakdown(results: SweepResults, sizes: List[int], out_dir: str) -> str:
    """Stacked bars of trace actions per board size."""
    os.makedirs(out_dir, exist_ok=True)
    present = [N for N in sizes if N in results]
    x = np.arange(len(present))
    bottom = np.zeros(len(present))

    plt.figure(figsize=(12, 8))
    for key, label in (("checks", "check"), ("places", "place"), ("removes", "remove"), ("invalids", "invalid")):
        values = np.array([results[N][key] for N in present], dtype=float)
        plt.bar(x, values, bottom=bottom, label=label)
        bottom += values
    plt.xticks(x, [str(N) for N in present])
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Trace entries", fontsize=12)
    plt.title("Trace Composition vs Board Size", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, axis="y", alpha=0.5)

    fname = os.path.join(out_dir, f"02_action_breakdown_vs_N{settings.filename_suffix()}.png")
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved action breakdown chart: {fname}")
    return fname


def plot_and_save(results: SweepResults, sizes: List[int], out_dir: str) -> List[str]:
    """Generate the sweep charts."""
    return [
        plot_growth_vs_N(results, sizes, out_dir),
        plot_action_breakdown(results, sizes, out_dir),
    ]
