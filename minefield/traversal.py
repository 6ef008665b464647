"""
Worklist traversals over the cell grid.

Both walks take their own visited grid so that the generation-time walk and
the player-time cascade never share state.
"""

from collections import deque
from typing import Deque, Dict, List, Tuple

import numpy as np

from .cell import Cell, CellValue, CoverageState
from .utils import Coordinate


def solve_neighbor_counts(
    cells: List[List[Cell]],
    mines: np.ndarray,
    neighborhoods: Dict[Coordinate, Tuple[Coordinate, ...]],
    start: Coordinate,
    visited: np.ndarray,
) -> List[Coordinate]:
    """
    Walk every non-mine cell reachable from start and write its true neighbor count.

    Mines are never entered: each one contributes a single unit to the count of
    the cell that looks at it. Every other cell is visited once, marked
    uncovered with its count, and queues all of its unvisited non-mine
    neighbors regardless of its own value.

    Args:
        cells: The board's cell grid, updated in place.
        mines: Boolean mine mask of shape (rows, cols).
        neighborhoods: Precomputed 8-neighborhoods for the grid.
        start: Coordinate to start from.
        visited: Boolean grid of shape (rows, cols), updated in place.

    Returns:
        Coordinates solved by this walk, in visiting order.
    """
    solved: List[Coordinate] = []
    if mines[start] or visited[start]:
        return solved

    frontier: Deque[Coordinate] = deque([start])
    while frontier:
        r, c = frontier.pop()
        if visited[r, c]:
            continue
        visited[r, c] = True

        mine_count = 0
        for nr, nc in neighborhoods[(r, c)]:
            if mines[nr, nc]:
                mine_count += 1
            elif not visited[nr, nc]:
                frontier.append((nr, nc))

        cell = cells[r][c]
        cell.state = CoverageState.UNCOVERED
        cell.value = CellValue.number(mine_count)
        solved.append((r, c))

    return solved


def cascade_reveal(
    cells: List[List[Cell]],
    mines: np.ndarray,
    neighborhoods: Dict[Coordinate, Tuple[Coordinate, ...]],
    start: Coordinate,
    visited: np.ndarray,
) -> List[Tuple[int, int, CellValue]]:
    """
    Reveal the connected region starting at start using flood fill rules.

    A branch stops at visited, uncovered or flagged cells. Mines met on the way
    stay covered. Only empty cells spread to their neighbors.

    Returns:
        A list of newly revealed cells as (row, col, value).
    """
    frontier: Deque[Coordinate] = deque([start])
    revealed_cells: List[Tuple[int, int, CellValue]] = []

    while frontier:
        r, c = frontier.popleft()
        if visited[r, c]:
            continue
        visited[r, c] = True

        cell = cells[r][c]
        if cell.state is not CoverageState.COVERED or mines[r, c]:
            continue

        cell.state = CoverageState.UNCOVERED
        revealed_cells.append((r, c, cell.value))

        if cell.value.is_empty:
            for nr, nc in neighborhoods[(r, c)]:
                if not visited[nr, nc]:
                    frontier.append((nr, nc))

    return revealed_cells
