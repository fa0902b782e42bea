from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence

import pandas as pd

from .board import ConstraintBoard, EMPTY, Grid, value_glyph
from .errors import ConflictingClueError, PuzzleFormatError
from .solver import solve

log = logging.getLogger(__name__)

SENTINEL = "Z"


# -----------------------------
# Reading
# -----------------------------

def iter_puzzles(text: str, box_size: int = 3) -> Iterator[str]:
    """
    Split a stream of concatenated puzzles into one glyph string per puzzle.

    Whitespace is ignored. A 'Z' where the next puzzle would start ends the
    stream; anything after it is not read.
    """
    n = box_size * box_size
    cells = [ch for ch in text if not ch.isspace()]
    i = 0
    while i < len(cells) and cells[i] != SENTINEL:
        chunk = cells[i:i + n * n]
        if len(chunk) < n * n:
            raise PuzzleFormatError(
                f"Truncated puzzle at cell {i + 1}: expected {n * n} cells, received {len(chunk)}."
            )
        yield "".join(chunk)
        i += n * n


def decode_puzzle_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PuzzleFormatError(f"Puzzle text is not valid UTF-8: {e}") from e


def read_puzzle_file(path: str, box_size: int = 3) -> List[str]:
    with open(path, "rb") as f:
        text = decode_puzzle_text(f.read())
    puzzles = list(iter_puzzles(text, box_size))
    log.info("Read %d puzzle(s) from %s", len(puzzles), path)
    return puzzles


# -----------------------------
# Rendering
# -----------------------------

def format_grid(board: ConstraintBoard) -> str:
    """Plain-text grid with box borders; empty cells are left blank."""
    n = board.size
    base = board.box_size
    rule = " -" + "---" * n + "-"
    lines: List[str] = []
    for r in range(1, n + 1):
        if (r - 1) % base == 0:
            lines.append(rule)
        parts: List[str] = []
        for c in range(1, n + 1):
            if (c - 1) % base == 0:
                parts.append("|")
            v = board.get_value(r, c)
            parts.append("   " if v == EMPTY else f" {value_glyph(v)} ")
        parts.append("|")
        lines.append("".join(parts))
    lines.append(rule)
    return "\n".join(lines)


def grid_to_csv(rows: Grid) -> bytes:
    lines = [",".join(str(v) for v in row) for row in rows]
    return ("\n".join(lines) + "\n").encode("utf-8")


# -----------------------------
# Batches
# -----------------------------

def solve_batch(puzzles: Sequence[str], box_size: int = 3, max_activations: Optional[int] = None) -> pd.DataFrame:
    """
    Solve each puzzle on a fresh board.

    One row per puzzle: puzzle (1-based), clues, solved, aborted, activations,
    solution (glyph string of the final board; the clues again when unsolved)
    and error. A puzzle that cannot be loaded gets its message in error, no
    solution and zero activations; the other puzzles are still solved.
    """
    records: List[Dict[str, object]] = []
    for i, glyphs in enumerate(puzzles, start=1):
        record: Dict[str, object] = {"puzzle": i, "clues": glyphs}
        board = ConstraintBoard(box_size)
        try:
            board.load(glyphs)
        except (ConflictingClueError, PuzzleFormatError) as e:
            log.warning("Skipping puzzle %d: %s", i, e)
            record.update(solved=False, aborted=False, activations=0, solution="", error=str(e))
        else:
            result = solve(board, max_activations=max_activations)
            record.update(
                solved=result.solved,
                aborted=result.aborted,
                activations=result.activations,
                solution=board.to_glyphs(),
                error="",
            )
        records.append(record)
    columns = ["puzzle", "clues", "solved", "aborted", "activations", "solution", "error"]
    return pd.DataFrame.from_records(records, columns=columns)


def batch_summary(df: pd.DataFrame) -> Dict[str, float]:
    """Totals over a solve_batch() frame; the average is integer-truncated."""
    count = int(len(df))
    total = int(df["activations"].sum()) if count else 0
    return {
        "puzzles": count,
        "solved": int(df["solved"].sum()) if count else 0,
        "total_activations": total,
        "average_activations": total // count if count else 0,
    }
