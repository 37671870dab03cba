"""Solution verification helpers.

These helpers check solutions independently of the safety test used during
the search, so the two can validate each other in tests and in
``--validate`` runs.

Representation
--------------
Verification works on the compact encoding ``positions[col] = row``, derived
from a boolean solution grid by :func:`solution_positions`.
"""

from __future__ import annotations

from collections import Counter
from typing import List, Sequence

from .board import Solution


def solution_positions(solution: Solution) -> List[int]:
    """Convert a boolean grid into ``positions[col] = row``.

    Columns without exactly one queen are encoded as ``-1``.
    """
    size = len(solution)
    positions: List[int] = []
    for col in range(size):
        rows = [row for row in range(size) if solution[row][col]]
        positions.append(rows[0] if len(rows) == 1 else -1)
    return positions


def conflicts(positions: Sequence[int]) -> int:
    """Count attacking queen pairs in O(N).

    Uses counters per row and per diagonal; columns are distinct by
    construction of the encoding.
    """
    row_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for column, row in enumerate(positions):
        row_count[row] += 1
        diag1[row - column] += 1
        diag2[row + column] += 1

    total = 0
    for counter in (row_count, diag1, diag2):
        for count in counter.values():
            if count > 1:
                total += count * (count - 1) // 2
    return total


def is_valid_solution(solution: Solution) -> bool:
    """Return True if ``solution`` is a complete, non-attacking placement.

    Contract
    - Input: N×N boolean grid, ``True`` marks a queen.
    - Valid if: every row is N wide, exactly N queens, one per column and
      zero attacking pairs.
    """
    size = len(solution)
    if size == 0:
        return False
    if any(len(row) != size for row in solution):
        return False
    if sum(1 for row in solution for queen in row if queen) != size:
        return False
    positions = solution_positions(solution)
    # A column without a single queen means some other column holds two
    if -1 in positions:
        return False
    return conflicts(positions) == 0
