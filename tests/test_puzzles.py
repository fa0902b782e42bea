"""Tests for reading, rendering and batch-solving puzzle streams."""

import pytest

from sudokusolver.board import ConstraintBoard
from sudokusolver.errors import PuzzleFormatError
from sudokusolver.puzzles import (
    batch_summary,
    decode_puzzle_text,
    format_grid,
    grid_to_csv,
    iter_puzzles,
    read_puzzle_file,
    solve_batch,
)


def test_iter_puzzles_splits_concatenated_stream(easy, deadlock):
    text = easy[:40] + "\n" + easy[40:] + "\n\n" + deadlock
    assert list(iter_puzzles(text)) == [easy, deadlock]


def test_iter_puzzles_stops_at_sentinel(easy, deadlock):
    text = easy + "\nZ\n" + deadlock
    assert list(iter_puzzles(text)) == [easy]


def test_iter_puzzles_rejects_truncated_puzzle(easy):
    with pytest.raises(PuzzleFormatError):
        list(iter_puzzles(easy + "123"))


def test_iter_puzzles_4x4():
    assert list(iter_puzzles("1...\n..3.\n.4..\n...2\n", box_size=2)) == ["1.....3..4.....2"]


def test_read_puzzle_file(tmp_path, easy, deadlock):
    path = tmp_path / "sudoku.txt"
    path.write_text(easy + "\n" + deadlock + "\nZ\n", encoding="utf-8")
    assert read_puzzle_file(str(path)) == [easy, deadlock]


def test_read_puzzle_file_rejects_invalid_utf8(tmp_path):
    path = tmp_path / "broken.txt"
    path.write_bytes(b"\xff" + b"." * 80)
    with pytest.raises(PuzzleFormatError) as info:
        read_puzzle_file(str(path))
    assert isinstance(info.value.__cause__, UnicodeDecodeError)


def test_decode_puzzle_text():
    assert decode_puzzle_text(b"1.\n") == "1.\n"
    with pytest.raises(PuzzleFormatError):
        decode_puzzle_text(b"\xfe\xff")


def test_format_grid_draws_box_borders():
    board = ConstraintBoard(box_size=2)
    board.load("1.....3..4.....2")
    assert format_grid(board).splitlines() == [
        " --------------",
        "| 1    |      |",
        "|      | 3    |",
        " --------------",
        "|    4 |      |",
        "|      |    2 |",
        " --------------",
    ]


def test_grid_to_csv():
    assert grid_to_csv([[1, 0], [0, 2]]) == b"1,0\n0,2\n"


def test_solve_batch_reports_each_puzzle(easy, easy_solution, deadlock):
    df = solve_batch([easy, deadlock])
    assert list(df["puzzle"]) == [1, 2]
    assert list(df["solved"]) == [True, False]
    assert list(df["aborted"]) == [False, False]
    assert df.loc[0, "solution"] == easy_solution
    assert df.loc[1, "solution"] == deadlock
    assert df.loc[1, "activations"] == 2

    summary = batch_summary(df)
    assert summary["puzzles"] == 2
    assert summary["solved"] == 1
    assert summary["total_activations"] == int(df["activations"].sum())
    assert summary["average_activations"] == summary["total_activations"] // 2


def test_solve_batch_keeps_going_past_conflicting_clues(easy, easy_solution):
    df = solve_batch(["11" + "." * 79, easy])
    assert list(df["solved"]) == [False, True]
    assert "appears twice" in df.loc[0, "error"]
    assert df.loc[0, "activations"] == 0
    assert df.loc[0, "solution"] == ""
    assert df.loc[1, "error"] == ""
    assert df.loc[1, "solution"] == easy_solution
    assert batch_summary(df)["solved"] == 1


def test_batch_summary_of_empty_batch():
    summary = batch_summary(solve_batch([]))
    assert summary == {"puzzles": 0, "solved": 0, "total_activations": 0, "average_activations": 0}
