"""Terminal front-end for playing a minefield with solver hints."""

import argparse
import time
from typing import List, Optional

from .engine import CLEARED, MINE_HIT, MinefieldBoard
from .history import (
    UNFINISHED_GAMES_FILE,
    GameRecord,
    load_games,
    recent_games,
    restore_board,
    save_game,
)
from .solver import MinefieldSolver

HELP = (
    "Commands: r ROW COL (reveal), f ROW COL (toggle flag), "
    "h (hint), s (save unfinished game), q (quit). Coordinates are 0-based."
)


def play_cli(
    board: MinefieldBoard,
    save_path: Optional[str] = None,
    started: Optional[float] = None,
) -> int:
    """
    Run a simple terminal UI for playing a board.

    Args:
        board: A MinefieldBoard instance to play on.
        save_path: File the 's' command appends the game in progress to.
            Saving is disabled when omitted.
        started: time.monotonic() value the elapsed game time counts from.

    Returns:
        The final status: MINE_HIT, CLEARED, or 0 if the player quit.
    """
    solver = MinefieldSolver(board)
    if started is None:
        started = time.monotonic()
    print(HELP + "\n")
    print(board.format_board())

    while True:
        s = input("\nMove: ").strip()
        if s.lower() in {"q", "quit", "exit"}:
            print("Quit.")
            return 0

        if s.lower() in {"h", "hint"}:
            best = solver.safest_cell()
            print(solver.format_probabilities())
            if best is None:
                print("\nNo unflagged cell left to suggest.")
            else:
                print(f"\nSafest cell: ({best.row}, {best.col}) with score {best.score:.2f}")
            continue

        if s.lower() in {"s", "save"}:
            if save_path is None:
                print("Saving is disabled for this game.")
            else:
                record = GameRecord.from_board(board, final_time=int(time.monotonic() - started))
                save_game(record, save_path)
                print(f"Game saved to {save_path}")
            continue

        parts = s.replace(",", " ").split()
        if len(parts) != 3 or parts[0].lower() not in {"r", "f"}:
            print("Invalid input. Example: r 3 5")
            continue

        try:
            row = int(parts[1])
            col = int(parts[2])
        except ValueError:
            print("Invalid input. Coordinates must be integers.")
            continue

        if board.out_of_bounds(row, col):
            print(f"({row}, {col}) is outside the {board.rows}x{board.cols} board.")
            continue

        if parts[0].lower() == "f":
            board.toggle_flag(row, col)
            print(board.format_board())
            continue

        status, _ = board.uncover(row, col)
        print(f"\nYou decided to reveal ({row}, {col}).\n")
        print(board.format_board())

        if status == MINE_HIT:
            print("\nYou hit a mine. You lost.")
            print("\nFull board:")
            print(board.format_solution())
            return status

        if status == CLEARED:
            print(f"\nYou uncovered every safe cell. You won! Highest number: {board.highest_neighbor_value()}")
            print("\nFull board:")
            print(board.format_solution())
            return status


def show_history(path: str, replay: Optional[int] = None) -> None:
    """
    Print the games stored in a history file, newest first.

    Args:
        path: JSON-lines history file.
        replay: 1-based position in the listing whose final board is printed.

    Raises:
        ValueError: If the file holds a malformed record or replay is out of range.
    """
    records = recent_games(load_games(path))
    if not records:
        print(f"No games recorded in {path}.")
    else:
        print(f"Games in {path} (newest first):")
        for i, record in enumerate(records, start=1):
            print(f"{i:>3}. {record.summary()}")

    if replay is None:
        return
    if not 1 <= replay <= len(records):
        raise ValueError(f"No game #{replay} in {path}.")

    record = records[replay - 1]
    print(f"\nGame #{replay}, highest number {record.highest_number}:")
    print(restore_board(record).format_board())


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Play a minefield in the terminal.")
    parser.add_argument("--rows", type=int, default=9)
    parser.add_argument("--cols", type=int, default=9)
    parser.add_argument("--mines", type=int, default=10)
    parser.add_argument("--seed", type=int, default=-1, help="RNG seed; <0 draws a random board")
    parser.add_argument("--history", type=str, default="", help="Append won games to this JSON-lines file")
    parser.add_argument("--save-to", type=str, default=UNFINISHED_GAMES_FILE, help="File the 's' command saves the game in progress to")
    parser.add_argument("--show-history", type=str, default="", metavar="PATH", help="List the games in PATH instead of playing")
    parser.add_argument("--replay", type=int, default=None, metavar="N", help="With --show-history, print the final board of game N")
    args = parser.parse_args(argv)

    if args.show_history:
        try:
            show_history(args.show_history, args.replay)
        except ValueError as e:
            parser.error(str(e))
        return 0
    if args.replay is not None:
        parser.error("--replay requires --show-history")

    board = MinefieldBoard(
        args.rows, args.cols, args.mines, seed=(None if args.seed < 0 else args.seed)
    )
    started = time.monotonic()
    status = play_cli(board, save_path=args.save_to, started=started)

    if args.history and status == CLEARED:
        record = GameRecord.from_board(board, final_time=int(time.monotonic() - started))
        save_game(record, args.history)
        print(f"\nGame saved to {args.history}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
