"""
Minefield Advisor - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
import time
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
from typing import Optional, Tuple

from minefield import (
    CLEARED,
    MINE_HIT,
    BoardConfig,
    FINISHED_GAMES_FILE,
    UNFINISHED_GAMES_FILE,
    CoverageState,
    GameRecord,
    MinefieldBoard,
    MinefieldSolver,
    load_games,
    recent_games,
    restore_board,
    save_game,
)


def render_board_html(
    board: MinefieldBoard,
    solver: Optional[MinefieldSolver] = None,
    highlight_cell: Optional[Tuple[int, int]] = None,
    show_mines: bool = False,
) -> str:
    """Render the board as HTML with styling; covered cells are tinted by score when a solver is given."""
    # Scale cell size based on board width
    if board.cols >= 25:
        cell_size = 16
        font_size = "11px"
    elif board.cols >= 16:
        cell_size = 20
        font_size = "13px"
    else:
        cell_size = 26
        font_size = "15px"

    colors = {
        "0": "#cccccc",
        "1": "#0000ff",
        "2": "#008000",
        "3": "#ff0000",
        "4": "#000080",
        "5": "#800000",
        "6": "#008080",
        "7": "#000000",
        "8": "#808080",
        "X": "#ff0000",
    }

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for r in range(board.rows):
        html += "<tr>"
        for c in range(board.cols):
            cell = board.cells[r][c]

            if cell.state is CoverageState.UNCOVERED:
                text = str(cell.value)
                bg = "#ff0000" if cell.value.is_mine else ("#f0f0f0" if text == "0" else "#ffffff")
                text_color = "#ffffff" if cell.value.is_mine else colors.get(text, "#000000")
            elif cell.state is CoverageState.FLAGGED:
                text = "F"
                bg = "#ffa500"
                text_color = "#ffffff"
            elif show_mines and cell.value.is_mine:
                text = "X"
                bg = "#ffcccc"
                text_color = "#ff0000"
            else:
                text = "."
                bg = "#c0c0c0"
                text_color = "#666666"
                if solver is not None:
                    p = min(float(solver.board_probabilities[r, c]), 1.0)
                    # grey -> red as the score rises
                    bg = f"rgb({192 + int(63 * p)}, {int(192 * (1 - p))}, {int(192 * (1 - p))})"

            border = "2px solid #ff0000" if (r, c) == highlight_cell else "1px solid #999"
            display = text if text != "0" else " "

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def new_game(config: BoardConfig) -> None:
    st.session_state.board = config.build_board()
    st.session_state.solver = MinefieldSolver(st.session_state.board)
    st.session_state.status = None
    st.session_state.hint = None
    st.session_state.started = time.monotonic()


def current_record() -> GameRecord:
    elapsed = int(time.monotonic() - st.session_state.started)
    return GameRecord.from_board(st.session_state.board, final_time=elapsed)


def finish_game(status: int) -> None:
    st.session_state.status = status
    if status == CLEARED:
        save_game(current_record(), FINISHED_GAMES_FILE)


def show_finished_game(record: GameRecord) -> None:
    """Read-only view of a stored game."""
    st.subheader(f"Finished game: {record.summary()}")
    st.markdown(render_board_html(restore_board(record)), unsafe_allow_html=True)
    st.markdown("⭐" * record.highest_number)


def main():
    st.set_page_config(
        page_title="Minefield Advisor",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minefield Advisor")
    st.markdown("""
    Play a minefield with a local mine-probability heuristic whispering in your ear.
    """)

    # Sidebar configuration
    st.sidebar.header("Board Configuration")
    rows = st.sidebar.slider("Rows", 9, 30, 9)
    cols = st.sidebar.slider("Columns", 9, 30, 9)
    config = BoardConfig(rows, cols, 10)
    # at least one safe cell, so a new board never starts cleared
    mines = st.sidebar.slider("Mines", 1, config.max_mines - 1, 10)
    config = BoardConfig(rows, cols, mines).normalized()

    show_scores = st.sidebar.checkbox("Show solver scores", value=False)

    st.sidebar.markdown("---")
    st.sidebar.header("Finished Games")
    records = recent_games(load_games(FINISHED_GAMES_FILE))
    choice = st.sidebar.selectbox(
        "Replay",
        range(len(records) + 1),
        format_func=lambda i: "Current game" if i == 0 else records[i - 1].summary(),
    )
    if choice:
        show_finished_game(records[choice - 1])
        return

    if "board" not in st.session_state or st.session_state.get("config") != config:
        st.session_state.config = config
        new_game(config)

    board: MinefieldBoard = st.session_state.board
    solver: MinefieldSolver = st.session_state.solver
    solver.estimate()

    col1, col2 = st.columns([3, 1])

    with col1:
        st.subheader("Game Board")

        in_col1, in_col2 = st.columns(2)
        with in_col1:
            row = st.number_input("Row", 0, board.rows - 1, 0)
        with in_col2:
            col = st.number_input("Column", 0, board.cols - 1, 0)

        playing = st.session_state.status is None
        btn_col1, btn_col2, btn_col3, btn_col4, btn_col5 = st.columns(5)

        with btn_col1:
            if st.button("Reveal", type="primary", disabled=not playing):
                status, _ = board.uncover(int(row), int(col))
                st.session_state.hint = None
                if status in (MINE_HIT, CLEARED):
                    finish_game(status)
                st.rerun()

        with btn_col2:
            if st.button("Flag", disabled=not playing):
                board.toggle_flag(int(row), int(col))
                st.rerun()

        with btn_col3:
            if st.button("Hint", disabled=not playing):
                best = solver.safest_cell()
                st.session_state.hint = None if best is None else (best.row, best.col)
                st.rerun()

        with btn_col4:
            if st.button("New Board"):
                new_game(config)
                st.rerun()

        with btn_col5:
            if st.button("Save Unfinished", disabled=not playing):
                save_game(current_record(), UNFINISHED_GAMES_FILE)
                st.toast(f"Game saved to {UNFINISHED_GAMES_FILE}")

        html = render_board_html(
            board,
            solver if show_scores else None,
            highlight_cell=st.session_state.hint,
            show_mines=not playing,
        )
        st.markdown(html, unsafe_allow_html=True)

        if st.session_state.status == CLEARED:
            st.success(f"Cleared! Highest number on the board: {board.highest_neighbor_value()}")
        elif st.session_state.status == MINE_HIT:
            st.error("Game Over! Hit a mine.")

    with col2:
        st.subheader("Board Statistics")
        st.metric("Uncovered", len(board.uncovered_cells))
        st.metric("Flagged", len(board.flagged_cells))
        st.metric("Safe cells left", len(board.legal_cells()))

        st.markdown("---")
        st.markdown("**Safest cells**")
        estimates = [
            e for e in solver.estimate()
            if board.cells[e.row][e.col].state is CoverageState.COVERED
        ]
        for e in estimates[:5]:
            st.text(f"({e.row}, {e.col}): {e.score:.2f}")

        if st.session_state.hint is not None:
            st.info(f"Hint: try ({st.session_state.hint[0]}, {st.session_state.hint[1]})")


if __name__ == "__main__":
    main()
