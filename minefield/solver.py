"""Local mine-probability heuristic over the visible clues of a minefield board."""

from typing import List, NamedTuple, Optional, Set

import numpy as np

from .cell import CoverageState
from .engine import MinefieldBoard
from .utils import Coordinate


class ProbabilityEstimate(NamedTuple):
    """Mine-likelihood score of one non-uncovered cell. Tuples order by score first."""

    score: float
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.score:.2f}, ({self.row}, {self.col}))"


class MinefieldSolver:
    """
    Single-pass heuristic that ranks covered cells by how likely they hide a mine.

    The score of a covered cell is the highest clue ratio among its uncovered
    neighbors: value / number of that neighbor's cells still covered or
    flagged. Cells scoring exactly 1.0 are treated as identified mines, and one
    propagation sweep then zeroes the cells around clues those mines satisfy.
    Scores of +inf are kept as they are and never join the identified mines.
    """

    def __init__(self, board: MinefieldBoard) -> None:
        self.board = board
        self.board_probabilities: np.ndarray = np.zeros(
            (board.rows, board.cols), dtype=float
        )

    def remaining_covered_neighbors(self, row: int, col: int) -> int:
        """Count the neighbors of (row, col) that are still covered or flagged."""
        return sum(
            1
            for nr, nc in self.board.neighbors(row, col)
            if self.board.cells[nr][nc].state is not CoverageState.UNCOVERED
        )

    def cell_probability(self, row: int, col: int) -> float:
        """
        Score a single covered cell from its uncovered numbered neighbors.

        Returns:
            The maximum clue ratio, +inf when a clue has no covered neighbor
            left, or 0.0 when the cell touches no uncovered clue.
        """
        max_prob = 0.0
        for nr, nc in self.board.neighbors(row, col):
            neighbor = self.board.cells[nr][nc]
            if neighbor.state is not CoverageState.UNCOVERED or neighbor.value.is_mine:
                continue

            remaining = self.remaining_covered_neighbors(nr, nc)
            ratio = float("inf") if remaining == 0 else neighbor.value.count / remaining
            max_prob = max(max_prob, ratio)
        return max_prob

    def estimate(self, board: Optional[MinefieldBoard] = None) -> List[ProbabilityEstimate]:
        """
        Recompute the score of every non-uncovered cell from the current board.

        Args:
            board: Board to evaluate; rebinds the solver when given.

        Returns:
            One ProbabilityEstimate per covered or flagged cell, ascending by
            score (safest first), ties broken by coordinate.
        """
        if board is not None and board is not self.board:
            self.board = board
            self.board_probabilities = np.zeros((board.rows, board.cols), dtype=float)

        board = self.board
        probs = self.board_probabilities
        cells = board.cells

        for r in range(board.rows):
            for c in range(board.cols):
                if cells[r][c].state is CoverageState.UNCOVERED:
                    probs[r, c] = 0.0
                else:
                    probs[r, c] = self.cell_probability(r, c)

        mines_identified = sorted(self.identified_mines())

        # Working copy of the clues, decremented as identified mines satisfy them
        temp_board = board.raw_board()

        for mine_r, mine_c in mines_identified:
            for nr, nc in board.neighbors(mine_r, mine_c):
                neighbor = cells[nr][nc]
                if neighbor.state is not CoverageState.UNCOVERED or neighbor.value.is_mine:
                    continue

                temp_board[nr, nc] -= 1
                if temp_board[nr, nc] != 0:
                    continue

                for sr, sc in board.neighbors(nr, nc):
                    if (sr, sc) == (mine_r, mine_c):
                        continue
                    if cells[sr][sc].state is CoverageState.UNCOVERED:
                        continue
                    if probs[sr, sc] == 1.0:
                        continue
                    probs[sr, sc] = 0.0

        return sorted(
            ProbabilityEstimate(float(probs[r, c]), r, c)
            for r in range(board.rows)
            for c in range(board.cols)
            if cells[r][c].state is not CoverageState.UNCOVERED
        )

    def identified_mines(self) -> Set[Coordinate]:
        """Cells scored exactly 1.0 by the last pass."""
        return {
            (int(r), int(c)) for r, c in zip(*np.nonzero(self.board_probabilities == 1.0))
        }

    def safest_cell(self) -> Optional[ProbabilityEstimate]:
        """
        Run a fresh pass and return the lowest-scoring covered, unflagged cell.

        Returns:
            The best estimate, or None if every remaining cell is flagged.
        """
        for estimate in self.estimate():
            if self.board.cells[estimate.row][estimate.col].state is CoverageState.COVERED:
                return estimate
        return None

    def format_probabilities(self) -> str:
        """Render the last pass as a grid of scores with two decimals."""
        lines: List[str] = []
        for r in range(self.board.rows):
            lines.append(
                " ".join(f"{p:.2f}" for p in self.board_probabilities[r])
            )
        return "\n".join(lines)
