"""N-Queens solver that records a replayable trace of its search."""

from .board import Board, Cell, Solution, board_to_array, empty_board, render_board, render_solution
from .playback import TracePlayer, cell_colour, describe_step
from .safety import is_safe
from .tracing import MAX_BOARD_SIZE, SearchMetrics, TraceAction, TraceEntry, TraceResult, solve
from .utils import conflicts, is_valid_solution, solution_positions

__all__ = [
    "Board",
    "Cell",
    "Solution",
    "board_to_array",
    "empty_board",
    "render_board",
    "render_solution",
    "TracePlayer",
    "cell_colour",
    "describe_step",
    "is_safe",
    "MAX_BOARD_SIZE",
    "SearchMetrics",
    "TraceAction",
    "TraceEntry",
    "TraceResult",
    "solve",
    "conflicts",
    "is_valid_solution",
    "solution_positions",
]
