"""Global settings for the trace analysis and playback pipeline.

This module centralizes tunable constants used across the CLI, experiments,
reporting and plotting code. Values can be overridden at runtime via the
configuration loader in `nqueens_trace.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from nqueens_trace.tracing import MAX_BOARD_SIZE as _ENGINE_MAX

# Board size bounds for interactive use (solve / trace / play modes)
MIN_BOARD_SIZE: int = 4
MAX_BOARD_SIZE: int = _ENGINE_MAX
DEFAULT_BOARD_SIZE: int = 8

# Board sizes swept by the analyze mode (ascending)
SIZES: List[int] = [4, 5, 6, 7, 8]

# Repetitions per size; the search is deterministic, repeats only serve timing
RUNS_PER_SIZE: int = 3

# Output directory for CSV, JSON and charts
OUT_DIR: str = "results_nqueens_trace"

# Playback pacing (seconds between frames) and a cap on printed frames
PLAYBACK_DELAY: float = 0.0
PLAYBACK_MAX_STEPS: Optional[int] = 200

# Output naming policy --------------------------------------------------------

# When True, artifacts include a datestamp suffix (e.g., _20251113-142530)
# shared by every file written in the same run.
DATE_IN_FILENAMES: bool = False

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run label appended to filenames
RUN_TAG: Optional[str] = None


def set_board_bounds(min_size: int, max_size: int, default_size: int) -> None:
    """Configure the accepted board sizes for interactive modes.

    Raises
    - ValueError: if the bounds are inconsistent or the default falls
      outside them.

    Side effects
    - Updates module-level globals and prints the active range.
    """
    global MIN_BOARD_SIZE, MAX_BOARD_SIZE, DEFAULT_BOARD_SIZE
    if min_size < 1 or max_size < min_size:
        raise ValueError(f"Invalid board bounds: min={min_size}, max={max_size}")
    if not min_size <= default_size <= max_size:
        raise ValueError(f"Default board size {default_size} outside {min_size}..{max_size}")
    MIN_BOARD_SIZE = min_size
    MAX_BOARD_SIZE = max_size
    DEFAULT_BOARD_SIZE = default_size
    print(f"Board sizes: {MIN_BOARD_SIZE}..{MAX_BOARD_SIZE} (default {DEFAULT_BOARD_SIZE})")


def filename_suffix() -> str:
    """Return the filename suffix built from ``RUN_TAG`` and ``RUN_ID``.

    Empty when neither a tag nor datestamping is configured.
    """
    parts: List[str] = []
    if RUN_TAG:
        parts.append(str(RUN_TAG))
    if DATE_IN_FILENAMES and RUN_ID:
        parts.append(str(RUN_ID))
    return ("_" + "_".join(parts)) if parts else ""
