"""Minefield board: mine placement, solution generation and the reveal/flag state machine."""

import random
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .cell import EMPTY, MINE, Cell, CoverageState
from .traversal import cascade_reveal, solve_neighbor_counts
from .utils import Coordinate, clamp, get_neighborhoods, grid_coordinates

MIN_SIDE = 9
MAX_SIDE = 30
MIN_MINES = 1

# uncover() status codes
MINE_HIT = -1
SAFE = 0
CLEARED = 1

FLAG_SYMBOL = "✓"


class MinefieldBoard:
    """Minefield with a precomputed solution and cached coverage sets."""

    def __init__(
        self,
        rows: int,
        cols: int,
        num_mines: int = MIN_MINES,
        *,
        seed: Optional[int] = None,
        mine_locations: Optional[Iterable[Coordinate]] = None,
    ) -> None:
        """
        Build a fully covered board whose hidden values are already solved.

        Args:
            rows: Requested number of rows, clamped to [MIN_SIDE, MAX_SIDE].
            cols: Requested number of columns, clamped to [MIN_SIDE, MAX_SIDE].
            num_mines: Requested number of mines, clamped to [1, rows * cols].
                Ignored when mine_locations is given.
            seed: Seed for the board's private random generator.
            mine_locations: Exact mine coordinates to use instead of random
                placement.

        Raises:
            ValueError: If mine_locations is empty or holds a coordinate
                outside the clamped grid.
        """
        self.rows: int = clamp(rows, MIN_SIDE, MAX_SIDE)
        self.cols: int = clamp(cols, MIN_SIDE, MAX_SIDE)
        self.rng = random.Random(seed)

        locations: Optional[FrozenSet[Coordinate]] = None
        if mine_locations is not None:
            locations = frozenset((int(r), int(c)) for r, c in mine_locations)
            if not locations:
                raise ValueError("mine_locations must hold at least one mine.")
            for r, c in locations:
                if self.out_of_bounds(r, c):
                    raise ValueError(f"Mine location {(r, c)} is outside the board.")
            num_mines = len(locations)

        self.num_mines: int = clamp(num_mines, MIN_MINES, self.rows * self.cols)

        self.cells: List[List[Cell]] = [
            [Cell(CoverageState.COVERED, EMPTY) for _ in range(self.cols)]
            for _ in range(self.rows)
        ]
        self.mines: np.ndarray = np.zeros((self.rows, self.cols), dtype=bool)

        self.uncovered_cells: FrozenSet[Coordinate] = frozenset()
        self.covered_cells: FrozenSet[Coordinate] = frozenset()
        self.flagged_cells: FrozenSet[Coordinate] = frozenset()
        self.mine_cells: FrozenSet[Coordinate] = frozenset()

        self._neighborhoods: Dict[
            Coordinate, Tuple[Coordinate, ...]
        ] = get_neighborhoods(self.rows, self.cols)

        self.place_mines(locations)
        self.generate_solution()
        self.cover_cells()

    @classmethod
    def from_snapshot(
        cls,
        board_state: Sequence[Sequence[int]],
        uncovered: Optional[Sequence[Sequence[int]]] = None,
        flagged: Optional[Sequence[Sequence[int]]] = None,
    ) -> "MinefieldBoard":
        """
        Rebuild a board from its raw values and coverage grids.

        Args:
            board_state: Raw grid, -1 for mines and neighbor counts elsewhere.
            uncovered: 0/1 grid of uncovered cells. When omitted every safe
                cell is shown uncovered.
            flagged: 0/1 grid of flagged cells. When omitted nothing is flagged,
                unless uncovered is omitted too, in which case every mine is.
                A record without coverage comes back as a solved board.

        Raises:
            ValueError: If the grid shape is out of bounds, holds no mine, or
                its numbers disagree with the mine layout.
        """
        raw = np.asarray(board_state, dtype=int)
        if raw.ndim != 2:
            raise ValueError("board_state must be a 2D grid.")
        rows, cols = raw.shape
        if not (MIN_SIDE <= rows <= MAX_SIDE and MIN_SIDE <= cols <= MAX_SIDE):
            raise ValueError(f"Snapshot grid size {(rows, cols)} is outside the board bounds.")

        locations = [(int(r), int(c)) for r, c in zip(*np.nonzero(raw == -1))]
        board = cls(rows, cols, mine_locations=locations)
        if not np.array_equal(board.raw_board(), raw):
            raise ValueError("Snapshot numbers do not match its mine layout.")

        mines = raw == -1
        uncovered_mask = (
            ~mines
            if uncovered is None
            else np.asarray(uncovered, dtype=int).astype(bool)
        )
        if flagged is not None:
            flagged_mask = np.asarray(flagged, dtype=int).astype(bool)
        elif uncovered is None:
            flagged_mask = mines.copy()
        else:
            flagged_mask = np.zeros((rows, cols), dtype=bool)
        if uncovered_mask.shape != raw.shape or flagged_mask.shape != raw.shape:
            raise ValueError("Coverage grids must match the board_state shape.")
        if np.any(uncovered_mask & flagged_mask):
            raise ValueError("A cell cannot be both uncovered and flagged.")

        for r, c in grid_coordinates(rows, cols):
            if uncovered_mask[r, c]:
                board.cells[r][c].state = CoverageState.UNCOVERED
            elif flagged_mask[r, c]:
                board.cells[r][c].state = CoverageState.FLAGGED

        board.update_coverage_cache()
        return board

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def neighbors(self, row: int, col: int) -> Tuple[Coordinate, ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(row, col)]

    def out_of_bounds(self, row: int, col: int) -> bool:
        return min(row, col) < 0 or row >= self.rows or col >= self.cols

    def place_mines(self, locations: Optional[FrozenSet[Coordinate]] = None) -> None:
        """
        Fill the mine mask, either from explicit locations or at random.

        Random placement draws coordinates uniformly and retries on collision
        until exactly num_mines positions are set.
        """
        if locations is None:
            mines_placed = 0
            while mines_placed < self.num_mines:
                r = self.rng.randrange(self.rows)
                c = self.rng.randrange(self.cols)
                if not self.mines[r, c]:
                    self.mines[r, c] = True
                    mines_placed += 1
        else:
            for r, c in locations:
                self.mines[r, c] = True

        for r, c in zip(*np.nonzero(self.mines)):
            self.cells[r][c] = Cell(CoverageState.COVERED, MINE)

        self.mine_cells = frozenset(
            (int(r), int(c)) for r, c in zip(*np.nonzero(self.mines))
        )

    def generate_solution(self) -> None:
        """Compute every non-mine cell's neighbor count, leaving solved cells uncovered."""
        visited = np.zeros((self.rows, self.cols), dtype=bool)
        for r, c in grid_coordinates(self.rows, self.cols):
            if self.mines[r, c] or visited[r, c]:
                continue
            solve_neighbor_counts(
                self.cells, self.mines, self._neighborhoods, (r, c), visited
            )
            self.update_coverage_cache()
            if not self.legal_cells():
                return

    def cover_cells(self) -> None:
        """Re-cover every uncovered cell, keeping its solved value."""
        for row in self.cells:
            for cell in row:
                if cell.state is CoverageState.UNCOVERED:
                    cell.state = CoverageState.COVERED
        self.update_coverage_cache()

    def update_coverage_cache(self) -> None:
        """Recompute the uncovered/covered/flagged coordinate sets from cell states."""
        uncovered: List[Coordinate] = []
        covered: List[Coordinate] = []
        flagged: List[Coordinate] = []

        for r, c in grid_coordinates(self.rows, self.cols):
            state = self.cells[r][c].state
            if state is CoverageState.UNCOVERED:
                uncovered.append((r, c))
            elif state is CoverageState.COVERED:
                covered.append((r, c))
            else:
                flagged.append((r, c))

        self.uncovered_cells = frozenset(uncovered)
        self.covered_cells = frozenset(covered)
        self.flagged_cells = frozenset(flagged)

    # -------------------------------------------------------------------------
    # Player operations
    # -------------------------------------------------------------------------

    def _check_bounds(self, row: int, col: int) -> None:
        if self.out_of_bounds(row, col):
            raise ValueError(f"Cell coordinates {(row, col)} are outside the board.")

    def uncover(self, row: int, col: int) -> Tuple[int, Dict[str, Any]]:
        """
        Reveal a cell and return a status code plus payload.

        Args:
            row: Row of the cell to reveal.
            col: Column of the cell to reveal.

        Returns:
            Tuple of (status, payload) where status is:
                - MINE_HIT (-1): the cell is a mine; it is revealed, nothing cascades
                - SAFE (0): cascade ran, or the cell was already uncovered (no effect)
                - CLEARED (1): cascade ran and no legal cell remains

            Payload is {"revealed_cells": [(row, col, value), ...]} after a
            cascade and {} otherwise.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        self._check_bounds(row, col)
        cell = self.cells[row][col]

        if self.mines[row, col]:
            cell.state = CoverageState.UNCOVERED
            self.update_coverage_cache()
            return MINE_HIT, {}

        if cell.state is CoverageState.UNCOVERED:
            return SAFE, {}

        visited = np.zeros((self.rows, self.cols), dtype=bool)
        revealed_cells = cascade_reveal(
            self.cells, self.mines, self._neighborhoods, (row, col), visited
        )
        self.update_coverage_cache()

        if not self.legal_cells():
            return CLEARED, {"revealed_cells": revealed_cells}
        return SAFE, {"revealed_cells": revealed_cells}

    def toggle_flag(self, row: int, col: int) -> None:
        """Toggle a cell between covered and flagged; uncovered cells are left alone."""
        self._check_bounds(row, col)
        cell = self.cells[row][col]
        if cell.state is CoverageState.COVERED:
            cell.state = CoverageState.FLAGGED
        elif cell.state is CoverageState.FLAGGED:
            cell.state = CoverageState.COVERED
        self.update_coverage_cache()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def cell(self, row: int, col: int) -> Cell:
        self._check_bounds(row, col)
        return self.cells[row][col]

    def legal_cells(self) -> FrozenSet[Coordinate]:
        """Coordinates that are neither uncovered nor mines. Empty means the board is cleared."""
        return frozenset(
            (r, c)
            for r, c in grid_coordinates(self.rows, self.cols)
            if not (
                self.cells[r][c].state is CoverageState.UNCOVERED or self.mines[r, c]
            )
        )

    def highest_neighbor_value(self) -> int:
        return max(cell.value.raw for row in self.cells for cell in row)

    def raw_board(self) -> np.ndarray:
        """Numeric grid of cell values: -1 for mines, else the neighbor count."""
        return np.array(
            [[cell.value.raw for cell in row] for row in self.cells], dtype=int
        )

    def _coordinates_grid(self, coordinates: FrozenSet[Coordinate]) -> np.ndarray:
        grid = np.zeros((self.rows, self.cols), dtype=bool)
        for r, c in coordinates:
            grid[r, c] = True
        return grid

    def uncovered_grid(self) -> np.ndarray:
        return self._coordinates_grid(self.uncovered_cells)

    def covered_grid(self) -> np.ndarray:
        return self._coordinates_grid(self.covered_cells)

    def flagged_grid(self) -> np.ndarray:
        return self._coordinates_grid(self.flagged_cells)

    def mine_grid(self) -> np.ndarray:
        return self.mines.copy()

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    def _header(self) -> str:
        return f"Minefield(grid_size=({self.rows}, {self.cols}), mines={self.num_mines})"

    def format_board(self, marks: Optional[Mapping[Coordinate, str]] = None) -> str:
        """
        Render the player's view as plain text.

        Args:
            marks: Optional per-coordinate symbols drawn instead of the cell.

        Returns:
            A header line followed by one line per row, where covered cells are
            '-', flagged cells a check mark, uncovered mines 'X' and uncovered
            numbers their digit.
        """
        marks = marks or {}

        def cell_str(r: int, c: int) -> str:
            if (r, c) in marks:
                return marks[(r, c)]
            cell = self.cells[r][c]
            if cell.state is CoverageState.UNCOVERED:
                return str(cell.value)
            if cell.state is CoverageState.FLAGGED:
                return FLAG_SYMBOL
            return "-"

        out = [self._header()]
        for r in range(self.rows):
            out.append(" ".join(cell_str(r, c) for c in range(self.cols)))
        return "\n".join(out)

    def format_solution(self) -> str:
        """Render every cell's underlying value; flagged cells keep their check mark."""
        out = ["Oracle:" + self._header()]
        for r in range(self.rows):
            out.append(
                " ".join(
                    FLAG_SYMBOL
                    if cell.state is CoverageState.FLAGGED
                    else str(cell.value)
                    for cell in self.cells[r]
                )
            )
        return "\n".join(out)

    def format_mines(self) -> str:
        out = [self._header()]
        for r in range(self.rows):
            out.append(
                " ".join("X" if self.mines[r, c] else "-" for c in range(self.cols))
            )
        return "\n".join(out)

    def __str__(self) -> str:
        return self.format_board()
