"""Sweep runner: solve a range of board sizes and summarize each trace.

Every size is solved ``runs`` times. The search itself is deterministic, so
the repeats serve two purposes: timing statistics (measured here, outside
the engine, with ``perf_counter``) and a cross-run determinism check.

Outputs are ``SweepResults`` mappings suitable for CSV export and plotting.
"""
from __future__ import annotations

from time import perf_counter
from typing import Dict, List, Optional, Tuple

from nqueens_trace.tracing import TraceResult, solve

from .stats import ProgressPrinter, SweepResults, check_trace_invariants, summarize_trace


def timed_solve(board_size: int, max_size: Optional[int] = None) -> Tuple[TraceResult, float]:
    """Solve once and return ``(result, elapsed_seconds)``."""
    start = perf_counter()
    result = solve(board_size, max_size=max_size)
    return result, perf_counter() - start


def run_trace_sweep(
    sizes: List[int],
    runs: int = 1,
    validate: bool = False,
    progress_label: Optional[str] = None,
    max_size: Optional[int] = None,
    keep_results: bool = False,
) -> Tuple[SweepResults, Dict[int, TraceResult]]:
    """Solve each size ``runs`` times and summarize the traces.

    Parameters
    ----------
    sizes : List[int]
        Board sizes, processed in the given order.
    runs : int
        Repetitions per size (>= 1).
    validate : bool
        When True, check trace invariants on the first run and require all
        repeats to produce an identical result.
    progress_label : str | None
        Enables a ``ProgressPrinter`` with this label.
    max_size : int | None
        Forwarded to ``solve``.
    keep_results : bool
        When True, also return the first ``TraceResult`` of each size (used
        for heatmaps); otherwise the returned mapping is empty.

    Returns
    -------
    (summaries, traces)
        ``summaries[N]`` is a ``TraceSummary`` with timing statistics.

    Raises
    ------
    ValueError
        If ``runs < 1`` or a size is rejected by ``solve``.
    AssertionError
        If ``validate`` is set and a check fails.
    """
    if runs < 1:
        raise ValueError("runs must be >= 1.")

    summaries: SweepResults = {}
    kept: Dict[int, TraceResult] = {}
    progress = ProgressPrinter(len(sizes), progress_label) if progress_label else None

    for index, N in enumerate(sizes, start=1):
        if progress:
            progress.update(index, f"N={N}")

        first, elapsed = timed_solve(N, max_size=max_size)
        times = [elapsed]

        if validate:
            problems = check_trace_invariants(first)
            if problems:
                raise AssertionError(f"Trace invariants violated for N={N}: " + "; ".join(problems[:5]))

        for _ in range(runs - 1):
            again, elapsed = timed_solve(N, max_size=max_size)
            times.append(elapsed)
            if validate and again != first:
                raise AssertionError(f"Non-deterministic trace for N={N}")

        summaries[N] = summarize_trace(first, times)
        print(
            f"  N={N}: {summaries[N]['solutions']} solutions, "
            f"{summaries[N]['calls']} calls, {summaries[N]['backtracks']} backtracks, "
            f"{summaries[N]['trace_length']} steps"
        )
        if keep_results:
            kept[N] = first

    return summaries, kept
