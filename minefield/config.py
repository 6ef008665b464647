"""Board size and mine count settings, as collected by a front-end form."""

from dataclasses import dataclass
from typing import Optional

from .engine import MAX_SIDE, MIN_MINES, MIN_SIDE, MinefieldBoard
from .utils import clamp


@dataclass(frozen=True)
class BoardConfig:
    rows: int = MIN_SIDE
    cols: int = MIN_SIDE
    mines: int = 10

    def normalized(self) -> "BoardConfig":
        """Return the config clamped to the bounds the board enforces."""
        rows = clamp(self.rows, MIN_SIDE, MAX_SIDE)
        cols = clamp(self.cols, MIN_SIDE, MAX_SIDE)
        return BoardConfig(rows, cols, clamp(self.mines, MIN_MINES, rows * cols))

    @property
    def max_mines(self) -> int:
        n = self.normalized()
        return n.rows * n.cols

    def build_board(self, seed: Optional[int] = None) -> MinefieldBoard:
        n = self.normalized()
        return MinefieldBoard(n.rows, n.cols, n.mines, seed=seed)
