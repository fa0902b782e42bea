from __future__ import annotations

from typing import List, Optional, Tuple

import pandas as pd
import streamlit as st

from sudokusolver.board import ConstraintBoard, Grid, glyph_value, value_glyph
from sudokusolver.errors import ConflictingClueError, PuzzleFormatError
from sudokusolver.puzzles import batch_summary, decode_puzzle_text, grid_to_csv, iter_puzzles, solve_batch
from sudokusolver.settings import configure_logging, load_settings
from sudokusolver.solver import BacktrackingSolver

SUPPORTED_BOX_SIZES = [2, 3, 4]

SETTINGS = load_settings()
configure_logging(SETTINGS)


def cell_key(n: int, r: int, c: int) -> str:
    # include N so changing size doesn't collide with old widget state
    return f"cell_{n}_{r}_{c}"


def reset_board(n: int) -> None:
    for r in range(n):
        for c in range(n):
            st.session_state[cell_key(n, r, c)] = ""


@st.cache_data(show_spinner=False)
def _solve_file(data: bytes, box_size: int, limit: int) -> pd.DataFrame:
    # keyed on file bytes, box size and limit (0 = unlimited)
    puzzles = list(iter_puzzles(decode_puzzle_text(data), box_size=box_size))
    return solve_batch(puzzles, box_size=box_size, max_activations=limit or None)


def parse_board(n: int) -> Tuple[Grid, List[str]]:
    """
    Read cell widget values from session_state and build an int board.
    Returns (board, errors). Empty string, '.' or '0' => 0.
    """
    errors: List[str] = []
    rows: Grid = [[0] * n for _ in range(n)]

    for r in range(n):
        for c in range(n):
            raw = str(st.session_state.get(cell_key(n, r, c), "")).strip()
            if raw == "":
                continue
            if len(raw) != 1:
                errors.append(f"Cell ({r+1},{c+1}) must be a single symbol: '{raw}'")
                continue
            try:
                rows[r][c] = glyph_value(raw, n)
            except PuzzleFormatError as e:
                errors.append(f"Cell ({r+1},{c+1}): {e}")

    return rows, errors


def render_board_html(board: ConstraintBoard, title: str, clues: Optional[Grid] = None) -> None:
    """
    Render the grid with thick box borders using HTML/CSS.
    Cells filled by the solver (not in clues) are highlighted.
    """
    n = board.size
    base = board.box_size

    html = [f"<div class='sudoku-wrap'><div class='sudoku-title'>{title}</div>"]
    html.append("<table class='sudoku'>")
    for r in range(n):
        html.append("<tr>")
        for c in range(n):
            v = board.get_value(r + 1, c + 1)
            cls = []
            if r % base == 0:
                cls.append("top")
            if c % base == 0:
                cls.append("left")
            if (r + 1) % base == 0:
                cls.append("bottom")
            if (c + 1) % base == 0:
                cls.append("right")
            if clues is not None and v != 0 and clues[r][c] == 0:
                cls.append("filled")
            cls_attr = f" class='{' '.join(cls)}'" if cls else ""
            disp = "" if v == 0 else value_glyph(v)
            html.append(f"<td{cls_attr}>{disp}</td>")
        html.append("</tr>")
    html.append("</table></div>")

    st.markdown("".join(html), unsafe_allow_html=True)


st.set_page_config(page_title="Sudoku Solver", layout="wide")

st.markdown(
    """
<style>
div[data-testid="stTextInput"] input {
    text-align: center;
    font-size: 22px !important;
    height: 2.8rem;
    padding: 0.25rem 0.25rem;
}
div[data-testid="stTextInput"] { margin-bottom: 0rem; }

.sudoku-wrap { margin-top: 0.5rem; }
.sudoku-title { font-size: 1.05rem; font-weight: 600; margin: 0.5rem 0 0.35rem 0; }
table.sudoku { border-collapse: collapse; }
table.sudoku td {
    width: 2.8rem;
    height: 2.8rem;
    text-align: center;
    vertical-align: middle;
    font-size: 22px;
    border: 1px solid rgba(49, 51, 63, 0.25);
}
table.sudoku td.top { border-top: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.left { border-left: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.bottom { border-bottom: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.right { border-right: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.filled { color: #1f77b4; }

.sudoku-spacer { height: 0.25rem; }
</style>
""",
    unsafe_allow_html=True,
)

st.title("Sudoku Solver")
st.caption(
    "Leave cells blank (or enter . / 0). Click **Solve** to fill the grid by backtracking search. "
    "The number of recursive activations is reported for every solve."
)

# ---- Sidebar controls ----
with st.sidebar:
    st.header("Settings")
    if "box_size" not in st.session_state:
        default = SETTINGS.box_size if SETTINGS.box_size in SUPPORTED_BOX_SIZES else 3
        st.session_state.box_size = default

    box_size = st.selectbox(
        "Box size",
        SUPPORTED_BOX_SIZES,
        index=SUPPORTED_BOX_SIZES.index(st.session_state.box_size),
        format_func=lambda b: f"{b} ({b * b}x{b * b} grid)",
    )

    if box_size != st.session_state.box_size:
        st.session_state.box_size = box_size
        reset_board(box_size * box_size)

    limit = st.number_input(
        "Max recursive activations (0 = unlimited)",
        min_value=0,
        value=SETTINGS.max_activations or 0,
        step=10_000,
    )

    st.divider()
    if st.button("Reset board", use_container_width=True):
        reset_board(st.session_state.box_size ** 2)

base = int(st.session_state.box_size)
n = base * base
solver = BacktrackingSolver(max_activations=int(limit) or None)

tab_single, tab_batch = st.tabs(["Single puzzle", "Puzzle file"])

# ---- Input grid in a form (prevents rerun on every keystroke) ----
with tab_single:
    st.subheader("Input")

    with st.form("sudoku_form", clear_on_submit=False):
        spacer_w = 0.18
        widths = []
        for g in range(base):
            widths.extend([1.0] * base)
            if g != base - 1:
                widths.append(spacer_w)

        for r in range(n):
            cols = st.columns(widths, gap="small")
            col_idx = 0
            for c in range(n):
                if c > 0 and c % base == 0:
                    col_idx += 1  # skip spacer column
                with cols[col_idx]:
                    key = cell_key(n, r, c)
                    if key not in st.session_state:
                        st.session_state[key] = ""
                    st.text_input(
                        label="",
                        key=key,
                        label_visibility="collapsed",
                        placeholder="",
                    )
                col_idx += 1

            if (r + 1) % base == 0 and (r + 1) != n:
                st.markdown("<div class='sudoku-spacer'></div>", unsafe_allow_html=True)

        colA, colB, colC = st.columns([1, 1, 2])
        validate_clicked = colA.form_submit_button("Validate", use_container_width=True)
        solve_clicked = colB.form_submit_button("Solve", use_container_width=True)

    if validate_clicked or solve_clicked:
        rows, parse_errors = parse_board(n)
        if parse_errors:
            st.error("Please fix these input issues:")
            st.write("\n".join([f"- {e}" for e in parse_errors]))
        else:
            try:
                board = ConstraintBoard.from_rows(rows, box_size=base)
            except (ConflictingClueError, PuzzleFormatError) as e:
                st.error(str(e))
            else:
                st.success("Board looks valid.")
                render_board_html(board, "Current board (preview)")

                if solve_clicked:
                    result = solver.solve(board)
                    if result.solved:
                        st.success(f"Solution found in {result.activations:,} recursive activations.")
                        render_board_html(board, "Solution", clues=rows)
                        st.download_button(
                            "Download solution as CSV",
                            data=grid_to_csv(board.to_rows()),
                            file_name=f"sudoku_solution_{n}x{n}.csv",
                            mime="text/csv",
                        )
                    elif result.aborted:
                        st.warning(f"Search stopped after {result.activations:,} recursive activations.")
                    else:
                        st.error(
                            f"No solution exists for this board ({result.activations:,} recursive activations)."
                        )

                with st.expander("Used values per row / column / box"):
                    used = board.used_values()
                    st.dataframe(
                        pd.DataFrame(
                            {
                                group.capitalize(): [
                                    " ".join(value_glyph(v) for v in used[group][i]) for i in range(1, n + 1)
                                ]
                                for group in ("row", "column", "box")
                            },
                            index=range(1, n + 1),
                        ),
                        use_container_width=True,
                    )
    else:
        rows, _ = parse_board(n)
        preview = ConstraintBoard(base)
        for r, row in enumerate(rows, start=1):
            for c, v in enumerate(row, start=1):
                if v:
                    preview.set_cell(r, c, v)
        render_board_html(preview, "Current board (preview)")

# ---- Batch: one or more puzzles from a text file ----
with tab_batch:
    st.subheader("Solve a puzzle file")
    st.caption(
        f"Puzzles of {n * n} symbols each, row-major, '.' for blanks. "
        "Whitespace is ignored and a 'Z' ends the file early."
    )
    uploaded = st.file_uploader("Puzzle file", type=["txt"])
    if uploaded is not None:
        try:
            df = _solve_file(uploaded.getvalue(), base, int(limit))
        except PuzzleFormatError as e:
            st.error(str(e))
        else:
            summary = batch_summary(df)
            m1, m2, m3, m4 = st.columns(4)
            m1.metric("Puzzles", summary["puzzles"])
            m2.metric("Solved", summary["solved"])
            m3.metric("Total activations", f"{summary['total_activations']:,}")
            m4.metric("Average activations", f"{summary['average_activations']:,}")
            bad = int((df["error"] != "").sum())
            if bad:
                st.warning(f"{bad} puzzle(s) could not be loaded; see the error column.")
            st.dataframe(df, use_container_width=True, hide_index=True)
            st.download_button(
                "Download results as CSV",
                data=df.to_csv(index=False).encode("utf-8"),
                file_name="sudoku_results.csv",
                mime="text/csv",
            )
