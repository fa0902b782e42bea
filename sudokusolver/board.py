from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence
import math

from .errors import ConflictingClueError, EmptyCellError, OutOfRangeError, PuzzleFormatError

Grid = List[List[int]]  # 0 = empty, values 1..N

EMPTY = 0
BLANK_GLYPHS = ".0"
VALUE_GLYPHS = "123456789ABCDEFGHIJKLMNOPQRSTUVWXY"
MAX_BOX_SIZE = 5  # largest box whose values all have a glyph


@dataclass(frozen=True)
class BoardSpec:
    box_size: int   # box is box_size x box_size (e.g., 3)
    size: int       # board is size x size (e.g., 9)


def _spec(box_size: int) -> BoardSpec:
    """Validate the box size and build basic constants."""
    if not isinstance(box_size, int) or box_size < 1:
        raise ValueError(f"Invalid box size: {box_size!r}. Must be a positive integer.")
    if box_size > MAX_BOX_SIZE:
        raise ValueError(f"Invalid box size: {box_size}. At most {MAX_BOX_SIZE} is supported.")
    return BoardSpec(box_size=box_size, size=box_size * box_size)


def glyph_value(ch: str, size: int) -> int:
    """Map one puzzle glyph to a cell value (EMPTY for a blank)."""
    if len(ch) != 1:
        raise PuzzleFormatError(f"Invalid glyph {ch!r} (expected a single character).")
    if ch in BLANK_GLYPHS:
        return EMPTY
    v = VALUE_GLYPHS.find(ch.upper())
    if v < 0 or v >= size:
        raise PuzzleFormatError(f"Invalid glyph {ch!r} (allowed: '.', '0', {VALUE_GLYPHS[0]}..{VALUE_GLYPHS[size - 1]}).")
    return v + 1


def value_glyph(value: int) -> str:
    return "." if value == EMPTY else VALUE_GLYPHS[value - 1]


class ConstraintBoard:
    """
    Sudoku grid that keeps, for every row, column and box, a count of each
    value placed in it. A value is "used" in a group while its count is
    positive, so has_conflict() is a constant-time lookup.

    Rows, columns and values are 1-based in the public API.
    """

    def __init__(self, box_size: int = 3) -> None:
        self._spec = _spec(box_size)
        self.clear()

    # -----------------------------
    # Shape
    # -----------------------------

    @property
    def box_size(self) -> int:
        return self._spec.box_size

    @property
    def size(self) -> int:
        return self._spec.size

    @property
    def min_value(self) -> int:
        return 1

    @property
    def max_value(self) -> int:
        return self._spec.size

    def box_index(self, row: int, col: int) -> int:
        """Box containing (row, col), numbered 1..N row-major."""
        self._check_cell(row, col, "box_index")
        b = self._spec.box_size
        return b * ((row - 1) // b) + (col - 1) // b + 1

    def _check_cell(self, row: int, col: int, op: str) -> None:
        n = self._spec.size
        if not (1 <= row <= n and 1 <= col <= n):
            raise OutOfRangeError(f"{op}: invalid index ({row},{col}) (allowed: 1..{n}).")

    def _check_value(self, value: int, op: str) -> None:
        if not (1 <= value <= self._spec.size):
            raise OutOfRangeError(f"{op}: invalid value {value} (allowed: 1..{self._spec.size}).")

    # -----------------------------
    # State
    # -----------------------------

    def clear(self) -> None:
        n = self._spec.size
        self._grid: Grid = [[EMPTY] * n for _ in range(n)]
        # index 0 of each count list is unused so values index directly
        self._row_used = [[0] * (n + 1) for _ in range(n)]
        self._col_used = [[0] * (n + 1) for _ in range(n)]
        self._box_used = [[0] * (n + 1) for _ in range(n)]

    def is_empty(self, row: int, col: int) -> bool:
        return self.get_value(row, col) == EMPTY

    def get_value(self, row: int, col: int) -> int:
        self._check_cell(row, col, "get_value")
        return self._grid[row - 1][col - 1]

    def has_conflict(self, row: int, col: int, value: int) -> bool:
        """True if value is already used in the row, column or box of (row, col)."""
        self._check_cell(row, col, "has_conflict")
        self._check_value(value, "has_conflict")
        r, c = row - 1, col - 1
        b = self.box_index(row, col) - 1
        return self._row_used[r][value] > 0 or self._col_used[c][value] > 0 or self._box_used[b][value] > 0

    def set_cell(self, row: int, col: int, value: int) -> None:
        """
        Place value at (row, col). The cell does not have to be empty: a value
        already there is released first, so the conflict counts always match
        the grid.
        """
        self._check_cell(row, col, "set_cell")
        self._check_value(value, "set_cell")
        if self._grid[row - 1][col - 1] != EMPTY:
            self.reset_cell(row, col)
        self._grid[row - 1][col - 1] = value
        self._update_conflicts(row, col, value, 1)

    def reset_cell(self, row: int, col: int) -> None:
        self._check_cell(row, col, "reset_cell")
        value = self._grid[row - 1][col - 1]
        if value == EMPTY:
            raise EmptyCellError(f"reset_cell: cell ({row},{col}) is already empty.")
        self._grid[row - 1][col - 1] = EMPTY
        self._update_conflicts(row, col, value, -1)

    def _update_conflicts(self, row: int, col: int, value: int, delta: int) -> None:
        b = self.box_index(row, col) - 1
        self._row_used[row - 1][value] += delta
        self._col_used[col - 1][value] += delta
        self._box_used[b][value] += delta

    def is_solved(self) -> bool:
        """True when no cell is empty."""
        return all(v != EMPTY for row in self._grid for v in row)

    # -----------------------------
    # Loading & snapshots
    # -----------------------------

    def load(self, glyphs: Iterable[str]) -> None:
        """
        Replace the board contents with a flattened N*N glyph stream, row-major.
        Whitespace is ignored; '.' and '0' are blanks.

        Raises PuzzleFormatError for bad glyphs or a wrong number of cells, and
        ConflictingClueError when a clue repeats a value already in its row,
        column or box.
        """
        n = self._spec.size
        cells = [ch for ch in glyphs if not ch.isspace()]
        if len(cells) != n * n:
            raise PuzzleFormatError(f"Expected {n * n} cells, received {len(cells)}.")

        values = [glyph_value(ch, n) for ch in cells]
        self.clear()
        for i, v in enumerate(values):
            if v != EMPTY:
                self._place_clue(i // n + 1, i % n + 1, v)

    def _place_clue(self, row: int, col: int, value: int) -> None:
        if self.has_conflict(row, col, value):
            self.clear()
            raise ConflictingClueError(
                f"Conflict: value {value} appears twice in a row/column/box (cell {row},{col})."
            )
        self.set_cell(row, col, value)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], box_size: Optional[int] = None) -> "ConstraintBoard":
        """Build a board from N rows of N ints (0 = empty)."""
        n = len(rows)
        if n == 0 or any(len(row) != n for row in rows):
            raise PuzzleFormatError("Board must be square (N x N).")
        if box_size is None:
            box_size = math.isqrt(n)
            if box_size * box_size != n:
                raise PuzzleFormatError(f"Invalid size: {n}. Only perfect squares are supported (4, 9, 16, ...).")
        board = cls(box_size)
        if board.size != n:
            raise PuzzleFormatError(f"Expected {board.size} rows for box size {box_size}, received {n}.")

        for r, row in enumerate(rows, start=1):
            for c, v in enumerate(row, start=1):
                if not isinstance(v, int) or isinstance(v, bool):
                    raise PuzzleFormatError(f"Invalid value at ({r},{c}): {v!r} (not an integer).")
                if v == EMPTY:
                    continue
                if not (1 <= v <= n):
                    raise PuzzleFormatError(f"Invalid value at ({r},{c}): {v} (allowed: 0..{n}).")
                board._place_clue(r, c, v)
        return board

    def to_rows(self) -> Grid:
        return [row[:] for row in self._grid]

    def to_glyphs(self) -> str:
        return "".join(value_glyph(v) for row in self._grid for v in row)

    def copy(self) -> "ConstraintBoard":
        other = ConstraintBoard(self._spec.box_size)
        other._grid = self.to_rows()
        other._row_used = [counts[:] for counts in self._row_used]
        other._col_used = [counts[:] for counts in self._col_used]
        other._box_used = [counts[:] for counts in self._box_used]
        return other

    def used_values(self) -> Dict[str, Dict[int, List[int]]]:
        """Values currently used per group: {"row": {1: [..]}, "column": {..}, "box": {..}}."""
        def collect(table: List[List[int]]) -> Dict[int, List[int]]:
            return {i + 1: [v for v, cnt in enumerate(counts) if cnt > 0] for i, counts in enumerate(table)}

        return {
            "row": collect(self._row_used),
            "column": collect(self._col_used),
            "box": collect(self._box_used),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConstraintBoard):
            return NotImplemented
        return self._spec == other._spec and self._grid == other._grid

    def __repr__(self) -> str:
        return f"ConstraintBoard(box_size={self.box_size}, glyphs={self.to_glyphs()!r})"
