"""Safety check used before every queen placement.

The search fills the board column by column, so when column ``col`` is being
filled only columns ``0..col-1`` can hold queens. A candidate square is
therefore threatened only from the left: along its row, along the
upper-left diagonal, and along the lower-left diagonal.
"""

from __future__ import annotations

from .board import Board, Cell


def is_safe(board: Board, row: int, col: int) -> bool:
    """Return True if a queen may be placed at ``(row, col)``.

    Parameters
    ----------
    board : Board
        Snapshot of the partially filled board. Squares marked
        ``Cell.REJECTED`` are treated as free.
    row, col : int
        Candidate square; ``col`` is the column currently being filled.

    Returns
    -------
    bool
        True iff no queen shares the row or either backward diagonal.

    Notes
    -----
    Pure function. Every index is derived from the loop bounds, so no
    out-of-range access is possible for a well-formed N×N board.
    """
    size = len(board)

    # Same row, columns to the left.
    for c in range(col):
        if board[row][c] is Cell.QUEEN:
            return False

    # Upper-left diagonal.
    r, c = row, col
    while r >= 0 and c >= 0:
        if board[r][c] is Cell.QUEEN:
            return False
        r -= 1
        c -= 1

    # Lower-left diagonal.
    r, c = row, col
    while r < size and c >= 0:
        if board[r][c] is Cell.QUEEN:
            return False
        r += 1
        c -= 1

    return True
