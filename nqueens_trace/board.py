"""Immutable board snapshots for the trace-recording solver.

Representation
--------------
A board is an N×N tuple of tuples of :class:`Cell`. Rows are indexed first,
so ``board[row][col]`` is the state of a single square. Because tuples are
immutable, every edit returns a new board and older snapshots stored in a
trace can never change under the reader.

A solution is the two-state projection of a complete board: a tuple of
tuples of ``bool`` where ``True`` marks a queen.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

import numpy as np


class Cell(Enum):
    """State of one square on a traced board."""

    EMPTY = "empty"
    QUEEN = "queen"
    REJECTED = "rejected"


Board = Tuple[Tuple[Cell, ...], ...]
Solution = Tuple[Tuple[bool, ...], ...]

_SYMBOLS = {Cell.EMPTY: ".", Cell.QUEEN: "Q", Cell.REJECTED: "x"}


def empty_board(size: int) -> Board:
    """Return an N×N board with every square untried."""
    row = (Cell.EMPTY,) * size
    return (row,) * size


def with_cell(board: Board, row: int, col: int, cell: Cell) -> Board:
    """Return a copy of ``board`` with square ``(row, col)`` set to ``cell``.

    Only the touched row is rebuilt; the remaining row tuples are shared,
    which is safe because they are immutable.
    """
    old_row = board[row]
    new_row = old_row[:col] + (cell,) + old_row[col + 1:]
    return board[:row] + (new_row,) + board[row + 1:]


def to_solution(board: Board) -> Solution:
    """Project a board onto queen / no-queen booleans."""
    return tuple(tuple(cell is Cell.QUEEN for cell in row) for row in board)


def count_queens(board: Board) -> int:
    return sum(1 for row in board for cell in row if cell is Cell.QUEEN)


def render_board(board: Board) -> str:
    """Render a snapshot as text: ``Q`` queen, ``x`` rejected, ``.`` empty."""
    return "\n".join(" ".join(_SYMBOLS[cell] for cell in row) for row in board)


def render_solution(solution: Solution) -> str:
    return "\n".join(" ".join("Q" if queen else "." for queen in row) for row in solution)


def board_to_array(board: Board) -> np.ndarray:
    """Encode a snapshot as an int8 matrix (1 queen, -1 rejected, 0 empty)."""
    size = len(board)
    grid = np.zeros((size, size), dtype=np.int8)
    for r, row in enumerate(board):
        for c, cell in enumerate(row):
            if cell is Cell.QUEEN:
                grid[r, c] = 1
            elif cell is Cell.REJECTED:
                grid[r, c] = -1
    return grid
