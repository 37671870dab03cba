"""Trace-recording backtracking solver for the N-Queens problem.

This module implements an exhaustive, recursive, column-major backtracking
search that enumerates every solution for a board of size N and records a
complete log of the decisions it makes along the way.

Entry point
-----------
- solve(board_size, max_size=None) -> TraceResult

Search order
------------
- Columns are filled left to right, 0..N-1.
- Within a column, rows are tried top to bottom, 0..N-1. Row index is the
    only tie-break.
- The search never stops early: after a solution is found (or after any
    recursive call returns), the remaining rows of the same column are still
    tried. All solutions are therefore returned, in discovery order.

Trace semantics
---------------
For every row tried at column ``col`` the engine records:

- ``check``: the board as it stands before the safety test.
- ``place``: the board with a queen added at ``(row, col)``; the search then
    descends to ``col + 1``.
- ``remove``: after the descent returns, the parent board with
    ``(row, col)`` marked rejected. Every ``place`` is followed by exactly
    one ``remove``, including placements that completed a solution.
- ``invalid``: when the safety test fails, the parent board with
    ``(row, col)`` marked rejected. No descent follows.

Each entry holds its own immutable snapshot, so the trace can be replayed
forward or backward at any granularity once ``solve`` returns.

Counters
--------
- ``calls``: number of invocations of the recursive search, including the
    base-case calls that record solutions.
- ``backtracks``: number of ``remove`` entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .board import Board, Cell, Solution, count_queens, empty_board, to_solution, with_cell
from .safety import is_safe

# Largest board accepted by default. Every decision is stored,
# so N=10 already produces several hundred thousand entries.
MAX_BOARD_SIZE = 10


class TraceAction(str, Enum):
    CHECK = "check"
    PLACE = "place"
    REMOVE = "remove"
    INVALID = "invalid"


@dataclass(frozen=True)
class TraceEntry:
    """One recorded decision of the search."""

    board: Board
    row: int
    col: int
    action: TraceAction


@dataclass(frozen=True)
class SearchMetrics:
    """Counters scoped to a single ``solve`` invocation."""

    calls: int = 0
    backtracks: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"calls": self.calls, "backtracks": self.backtracks}


@dataclass(frozen=True)
class TraceResult:
    """Everything one search produced: trace, solutions and counters.

    The instance is never mutated after ``solve`` returns and may be shared
    freely between readers.
    """

    size: int
    trace: Tuple[TraceEntry, ...]
    solutions: Tuple[Solution, ...]
    metrics: SearchMetrics

    def action_counts(self) -> Dict[str, int]:
        """Return how many entries of each action the trace contains."""
        counts = {action.value: 0 for action in TraceAction}
        for entry in self.trace:
            counts[entry.action.value] += 1
        return counts

    def solution_indices(self) -> List[int]:
        """Return trace indices whose snapshot is a complete solution.

        A ``place`` in the last column always completes the board, so these
        indices line up one-to-one with ``solutions``.
        """
        last = self.size - 1
        return [
            index
            for index, entry in enumerate(self.trace)
            if entry.action is TraceAction.PLACE and entry.col == last
        ]

    def to_records(self) -> List[Dict[str, Any]]:
        """Flatten the trace into rows suitable for tabular export."""
        return [
            {
                "step": index,
                "row": entry.row,
                "col": entry.col,
                "action": entry.action.value,
                "queens": count_queens(entry.board),
            }
            for index, entry in enumerate(self.trace)
        ]


class _SearchRecorder:
    """Accumulator threaded through the recursion.

    Holds the growing trace, the solutions found so far and the counters.
    Owned by exactly one ``solve`` call.
    """

    def __init__(self, size: int):
        self.size = size
        self.trace: List[TraceEntry] = []
        self.solutions: List[Solution] = []
        self.calls = 0
        self.backtracks = 0

    def record(self, board: Board, row: int, col: int, action: TraceAction) -> None:
        self.trace.append(TraceEntry(board=board, row=row, col=col, action=action))

    def add_solution(self, board: Board) -> None:
        self.solutions.append(to_solution(board))

    def freeze(self) -> TraceResult:
        metrics = SearchMetrics(calls=self.calls, backtracks=self.backtracks)
        return TraceResult(
            size=self.size,
            trace=tuple(self.trace),
            solutions=tuple(self.solutions),
            metrics=metrics,
        )


def _search(board: Board, col: int, recorder: _SearchRecorder) -> bool:
    """Explore every row of ``col`` and recurse on each safe placement.

    Returns True when ``board`` itself is complete. The value is informative
    only; callers never prune on it.
    """
    recorder.calls += 1
    size = recorder.size

    if col == size:
        recorder.add_solution(board)
        return True

    for row in range(size):
        recorder.record(board, row, col, TraceAction.CHECK)

        if is_safe(board, row, col):
            placed = with_cell(board, row, col, Cell.QUEEN)
            recorder.record(placed, row, col, TraceAction.PLACE)

            _search(placed, col + 1, recorder)

            # Undo from the parent snapshot, not from ``placed``.
            removed = with_cell(board, row, col, Cell.REJECTED)
            recorder.record(removed, row, col, TraceAction.REMOVE)
            recorder.backtracks += 1
        else:
            rejected = with_cell(board, row, col, Cell.REJECTED)
            recorder.record(rejected, row, col, TraceAction.INVALID)

    return False


def validate_board_size(board_size: Any, max_size: Optional[int] = None) -> int:
    """Return ``board_size`` unchanged if it is an accepted board dimension.

    Raises
    ------
    TypeError
        If ``board_size`` is not an ``int`` (``bool`` is rejected too).
    ValueError
        If ``board_size`` is outside ``1..max_size``.
    """
    limit = MAX_BOARD_SIZE if max_size is None else max_size
    if isinstance(board_size, bool) or not isinstance(board_size, int):
        raise TypeError(f"Board size must be an integer, got {type(board_size).__name__}: {board_size!r}")
    if board_size < 1 or board_size > limit:
        raise ValueError(f"Board size must be between 1 and {limit}, got {board_size}.")
    return board_size


def solve(board_size: int, max_size: Optional[int] = None) -> TraceResult:
    """Enumerate all N-Queens solutions and record the full search trace.

    Parameters
    ----------
    board_size : int
        Board dimension N (also the number of queens), ``1 <= N <= max_size``.
    max_size : int | None
        Upper bound on N; defaults to ``MAX_BOARD_SIZE``. The bound keeps the
        trace within memory since every decision is stored.

    Returns
    -------
    TraceResult
        ``trace``: ordered tuple of ``TraceEntry``.
        ``solutions``: tuple of boolean grids in discovery order.
        ``metrics``: ``SearchMetrics(calls, backtracks)``.

    Raises
    ------
    TypeError, ValueError
        On an invalid ``board_size``, before any search work begins.

    Determinism
    -----------
    For equal inputs the returned results compare equal: no randomness and
    a fixed row-ascending, column-ascending order.
    """
    size = validate_board_size(board_size, max_size)
    recorder = _SearchRecorder(size)
    _search(empty_board(size), 0, recorder)
    return recorder.freeze()
