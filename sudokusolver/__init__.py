from .board import EMPTY, ConstraintBoard
from .errors import (
    ConflictingClueError,
    EmptyCellError,
    OutOfRangeError,
    PuzzleFormatError,
    SudokuError,
)
from .solver import BacktrackingSolver, SolveResult, solve

__all__ = [
    "EMPTY",
    "BacktrackingSolver",
    "ConflictingClueError",
    "ConstraintBoard",
    "EmptyCellError",
    "OutOfRangeError",
    "PuzzleFormatError",
    "SolveResult",
    "SudokuError",
    "solve",
]
