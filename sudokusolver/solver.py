from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .board import ConstraintBoard

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolveResult:
    solved: bool
    activations: int        # recursive activations, including the first scan
    aborted: bool = False   # step budget ran out before the search finished


class _Search:
    """Per-call bookkeeping; the board itself carries all search state."""

    def __init__(self, board: ConstraintBoard, max_activations: Optional[int]) -> None:
        self.board = board
        self.max_activations = max_activations
        self.activations = 0
        self.aborted = False

    def first_empty(self) -> Optional[tuple]:
        n = self.board.size
        for r in range(1, n + 1):
            for c in range(1, n + 1):
                if self.board.is_empty(r, c):
                    return r, c
        return None

    def dfs(self) -> bool:
        if self.max_activations is not None and self.activations >= self.max_activations:
            self.aborted = True
            return False
        self.activations += 1

        cell = self.first_empty()
        if cell is None:
            return True  # solved

        r, c = cell
        board = self.board
        for v in range(board.min_value, board.max_value + 1):
            if board.has_conflict(r, c, v):
                continue
            # place
            board.set_cell(r, c, v)
            if self.dfs():
                return True
            # undo
            board.reset_cell(r, c)
            if self.aborted:
                return False

        return False


def solve(board: ConstraintBoard, max_activations: Optional[int] = None) -> SolveResult:
    """
    Fill the empty cells of board in place by depth-first backtracking.

    The first empty cell in row-major order is tried with values in ascending
    order. On success the board holds the completed grid; otherwise it holds
    exactly the clues it started with.

    max_activations caps the number of recursive activations. When the cap is
    hit the search unwinds, the board is restored and the result is marked
    aborted.
    """
    if max_activations is not None and max_activations < 1:
        raise ValueError(f"max_activations must be positive, received {max_activations}.")

    log.debug("Solving %dx%d board: %s", board.size, board.size, board.to_glyphs())
    search = _Search(board, max_activations)
    solved = search.dfs()
    result = SolveResult(solved=solved, activations=search.activations, aborted=search.aborted)

    if result.aborted:
        log.warning("Search aborted after %d recursive activations", result.activations)
    elif result.solved:
        log.info("Solved in %d recursive activations", result.activations)
    else:
        log.info("No solution exists (%d recursive activations)", result.activations)
    return result


class BacktrackingSolver:
    """Holds solver configuration only; each solve() borrows the board it is given."""

    def __init__(self, max_activations: Optional[int] = None) -> None:
        self.max_activations = max_activations

    def solve(self, board: ConstraintBoard) -> SolveResult:
        return solve(board, max_activations=self.max_activations)
