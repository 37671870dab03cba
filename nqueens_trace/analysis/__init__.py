"""
Analysis and presentation package for N-Queens traces.

This package contains:
- settings: global knobs (board bounds, sweep sizes, output naming)
- stats: typed summaries, trace invariants and aggregation helpers
- experiments: sweep runner with external timing and determinism checks
- reporting: CSV/JSON exports
- plots: board, heatmap and sweep charts
- cli: argument parser and mode dispatch
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    TraceSummary,
    SweepResults,
    ProgressPrinter,
    check_trace_invariants,
    compute_detailed_statistics,
    summarize_trace,
)

__all__ = [
    # types
    "StatsSummary",
    "TraceSummary",
    "SweepResults",
    # utils
    "ProgressPrinter",
    "check_trace_invariants",
    "compute_detailed_statistics",
    "summarize_trace",
    # settings module
    "settings",
]
