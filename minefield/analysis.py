"""Benchmarking tools: let the probability solver play games and aggregate the outcomes."""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Set, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .engine import CLEARED, MINE_HIT, MinefieldBoard
from .solver import MinefieldSolver
from .utils import Coordinate

STANDARD_SIZES: Tuple[Tuple[int, int, int], ...] = (
    (9, 9, 10),
    (16, 16, 40),
    (16, 30, 99),
)


def play_advised_game(board: MinefieldBoard) -> Dict[str, object]:
    """
    Play a board to the end by following the solver.

    Each turn flags every identified mine and reveals the lowest-scoring
    covered cell.

    Args:
        board: A freshly generated board; it is mutated in place.

    Returns:
        Payload with the terminal status (MINE_HIT or CLEARED) and move counts.

    Raises:
        RuntimeError: If no move is available while safe cells remain.
    """
    solver = MinefieldSolver(board)
    reveal_moves_count = 0
    identified: Set[Coordinate] = set()

    while True:
        solver.estimate()
        for r, c in sorted(solver.identified_mines()):
            identified.add((r, c))
            if (r, c) not in board.flagged_cells:
                board.toggle_flag(r, c)

        # Flags count as covered for the solver, so this pass scores the same cells
        best = solver.safest_cell()
        if best is None:
            raise RuntimeError("No covered cell left to reveal while the board is not cleared.")

        status, _ = board.uncover(best.row, best.col)
        reveal_moves_count += 1
        if status in (MINE_HIT, CLEARED):
            break

    return {
        "status": status,
        "reveal_moves_count": reveal_moves_count,
        "revealed_cells_count": len(board.uncovered_cells) - int(status == MINE_HIT),
        "flagged_cells_count": len(board.flagged_cells),
        "identified_mines_count": len(identified),
        "identified_mines_correct": len(identified & board.mine_cells),
        "highest_number": board.highest_neighbor_value(),
    }


def run_advisor_single_test(
    rows: int,
    cols: int,
    mines: int,
    *,
    seed: Optional[int] = None,
    show_boards: bool = False,
) -> Dict[str, object]:
    """
    Run one end-to-end game driven by MinefieldSolver on a fresh board.

    Args:
        rows: Board rows.
        cols: Board columns.
        mines: Total number of mines on the board.
        seed: Seed for mine placement.
        show_boards: If True, print the final player view and the solution.

    Returns:
        The payload of play_advised_game().
    """
    board = MinefieldBoard(rows, cols, mines, seed=seed)
    payload = play_advised_game(board)

    if show_boards:
        print("Final board:")
        print(board.format_board())
        print()
        print(board.format_solution())
        print()
        print(f"Finished with status {payload['status']}.")

    return payload


def run_advisor_many_tests(
    rows: int,
    cols: int,
    mines: int,
    runs: int,
    *,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Run many independent advised games and return averaged metrics plus win rate.

    Args:
        rows: Board rows.
        cols: Board columns.
        mines: Total number of mines on the board.
        runs: Number of independent games to run.
        seed: Base seed; game i uses seed + i. None draws fresh boards.

    Returns:
        Averages of the numeric payload fields (prefixed with "avg_"), plus:
        - win_rate
        - identified_mine_precision
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    sums: Dict[str, float] = defaultdict(float)
    wins = 0
    total_identified = 0.0
    total_correct = 0.0

    for i in range(runs):
        payload = run_advisor_single_test(
            rows, cols, mines, seed=None if seed is None else seed + i
        )
        status = payload["status"]
        if status == CLEARED:
            wins += 1
        elif status != MINE_HIT:
            raise RuntimeError(f"Unexpected game status: {status}")

        total_identified += float(payload["identified_mines_count"])  # type: ignore[arg-type]
        total_correct += float(payload["identified_mines_correct"])  # type: ignore[arg-type]

        for k, v in payload.items():
            if k == "status":
                continue
            if isinstance(v, (int, float)) and not isinstance(v, bool):
                sums[f"avg_{k}"] += float(v)

    out: Dict[str, float] = {k: total / runs for k, total in sums.items()}
    out["win_rate"] = wins / runs
    out["identified_mine_precision"] = (
        total_correct / total_identified if total_identified > 0 else 1.0
    )
    return out


def run_advisor_size_analysis(
    runs: int,
    *,
    sizes: Optional[Sequence[Tuple[int, int, int]]] = None,
    seed: Optional[int] = None,
    show_plots: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Benchmark the advisor over several board sizes and plot summaries.

    Args:
        runs: Number of independent games per board size.
        sizes: (rows, cols, mines) triples; defaults to STANDARD_SIZES.
        seed: Base seed passed to run_advisor_many_tests().
        show_plots: If True, draw win rate and move count charts.

    Returns:
        Mapping from "RxC/M" labels to statistics from run_advisor_many_tests().
    """
    sizes = list(sizes or STANDARD_SIZES)

    results: Dict[str, Dict[str, float]] = {}
    for r, c, m in sizes:
        results[f"{r}x{c}/{m}"] = run_advisor_many_tests(r, c, m, runs, seed=seed)

    if not show_plots:
        return results

    labels: List[str] = list(results.keys())
    x = np.arange(len(labels))

    # 1) Win rate by size
    plt.figure()  # type: ignore[misc]
    plt.bar(x, [results[k]["win_rate"] for k in labels])  # type: ignore[misc]
    plt.xticks(x, labels)  # type: ignore[misc]
    plt.ylabel("Win rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Advisor win rate by board size")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Moves and revealed cells
    bar_w = 0.35
    plt.figure()  # type: ignore[misc]
    plt.bar(  # type: ignore[misc]
        x - bar_w / 2,
        [results[k]["avg_reveal_moves_count"] for k in labels],
        width=bar_w,
        label="reveal moves",
    )
    plt.bar(  # type: ignore[misc]
        x + bar_w / 2,
        [results[k]["avg_revealed_cells_count"] for k in labels],
        width=bar_w,
        label="revealed cells",
    )
    plt.xticks(x, labels)  # type: ignore[misc]
    plt.ylabel("Average per game")  # type: ignore[misc]
    plt.title("Advisor moves and revealed cells (per game)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    return results
