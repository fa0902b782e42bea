from __future__ import annotations


class SudokuError(Exception):
    """Base class for every error raised by sudokusolver."""


class OutOfRangeError(SudokuError, IndexError):
    """A row, column or value lies outside the board."""


class EmptyCellError(SudokuError, ValueError):
    """reset_cell was called on a cell that holds no value."""


class PuzzleFormatError(SudokuError, ValueError):
    pass


class ConflictingClueError(SudokuError, ValueError):
    pass
