"""Cursor-based playback over a recorded search trace.

``TracePlayer`` lets a front end step through one :class:`TraceResult`
forward or backward, jump to either end, and cycle through the solutions
independently of the trace cursor. It owns no timers: pacing real-time
playback is up to the caller (see the ``play`` mode of the CLI).

The cursor starts at ``-1``, meaning "nothing shown yet"; the board at that
position is an empty board of the traced size.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from .board import Board, Cell, Solution, empty_board
from .tracing import TraceAction, TraceEntry, TraceResult

_MESSAGES = {
    TraceAction.CHECK: "Checking if queen can be placed at row {row}, column {col}",
    TraceAction.PLACE: "Placing queen at row {row}, column {col}",
    TraceAction.REMOVE: "Removing queen from row {row}, column {col} (backtracking)",
    TraceAction.INVALID: "Invalid position at row {row}, column {col}",
}

READY_MESSAGE = "Ready to start"

# Colours used by the board plots: queen, rejected (light, dark), empty (light, dark)
QUEEN_COLOUR = "#22c55e"
REJECTED_COLOURS = ("#fecaca", "#fca5a5")
EMPTY_COLOURS = ("#e5e7eb", "#d1d5db")


def describe_step(entry: Optional[TraceEntry]) -> str:
    """Return a one-line, 1-based description of a trace entry."""
    if entry is None:
        return READY_MESSAGE
    return _MESSAGES[entry.action].format(row=entry.row + 1, col=entry.col + 1)


def cell_colour(row: int, col: int, cell: Cell) -> str:
    """Map a square to its display colour (checker parity picks the shade)."""
    shade = 0 if (row + col) % 2 == 0 else 1
    if cell is Cell.QUEEN:
        return QUEEN_COLOUR
    if cell is Cell.REJECTED:
        return REJECTED_COLOURS[shade]
    return EMPTY_COLOURS[shade]


class TracePlayer:
    """Step-wise navigation over a finished trace and its solutions.

    Parameters
    ----------
    result : TraceResult
        Output of ``solve``; it is only read, never modified.
    """

    def __init__(self, result: TraceResult):
        self.result = result
        self.index = -1
        self.solution_index = 0
        self._blank = empty_board(result.size)

    # ---- trace cursor -----------------------------------------------------

    def __len__(self) -> int:
        return len(self.result.trace)

    @property
    def at_start(self) -> bool:
        return self.index <= 0

    @property
    def at_end(self) -> bool:
        return self.index >= len(self) - 1

    @property
    def current_entry(self) -> Optional[TraceEntry]:
        if self.index < 0:
            return None
        return self.result.trace[self.index]

    @property
    def current_board(self) -> Board:
        entry = self.current_entry
        return entry.board if entry is not None else self._blank

    @property
    def progress(self) -> str:
        return f"{self.index + 1} / {len(self)}"

    def step_forward(self) -> bool:
        """Advance one entry; return False if already at the last one."""
        if self.at_end:
            return False
        self.index += 1
        return True

    def step_backward(self) -> bool:
        """Go back one entry; return False if already at the first one."""
        if self.at_start:
            return False
        self.index -= 1
        return True

    def jump_to_start(self) -> None:
        self.index = 0 if len(self) else -1

    def jump_to_end(self) -> None:
        self.index = len(self) - 1

    def seek(self, index: int) -> TraceEntry:
        """Move the cursor to ``index`` and return the entry there."""
        if not 0 <= index < len(self):
            raise IndexError(f"Trace index {index} out of range (0..{len(self) - 1}).")
        self.index = index
        return self.result.trace[index]

    def describe(self) -> str:
        return describe_step(self.current_entry)

    def frames(self, start: int = 0) -> Iterator[Tuple[int, TraceEntry]]:
        """Yield ``(index, entry)`` from ``start`` to the end of the trace.

        The cursor follows the iteration, so a consumer that stops early
        leaves the player at the last frame it received.
        """
        if len(self) == 0:
            return
        self.seek(start)
        yield self.index, self.result.trace[self.index]
        while self.step_forward():
            yield self.index, self.result.trace[self.index]

    # ---- solutions --------------------------------------------------------

    @property
    def current_solution(self) -> Optional[Solution]:
        if not self.result.solutions:
            return None
        return self.result.solutions[self.solution_index]

    def next_solution(self) -> bool:
        if self.solution_index >= len(self.result.solutions) - 1:
            return False
        self.solution_index += 1
        return True

    def previous_solution(self) -> bool:
        if self.solution_index <= 0:
            return False
        self.solution_index -= 1
        return True
