"""Grid helpers shared by the board engine and the probability solver."""

from functools import lru_cache
from typing import Dict, Iterator, Tuple

Coordinate = Tuple[int, int]
Neighborhoods = Dict[Coordinate, Tuple[Coordinate, ...]]

# Row-major order, so every neighbourhood lists its cells top-left first.
DIRECTIONS: Tuple[Coordinate, ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


def grid_coordinates(rows: int, cols: int) -> Iterator[Coordinate]:
    """Yield every (row, col) of a rows x cols grid in row-major order."""
    for r in range(rows):
        for c in range(cols):
            yield r, c


def in_grid(row: int, col: int, rows: int, cols: int) -> bool:
    return 0 <= row < rows and 0 <= col < cols


def get_neighborhoods(rows: int, cols: int) -> Neighborhoods:
    """
    Map every cell of a grid to its in-bounds 8-connected neighbours.

    The mapping is built once per shape and shared; callers must not mutate it.

    Raises:
        ValueError: If rows or cols is non-positive.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError("rows and cols must be positive.")
    return _build_neighborhoods(rows, cols)


@lru_cache(maxsize=None)
def _build_neighborhoods(rows: int, cols: int) -> Neighborhoods:
    return {
        (r, c): tuple(
            (r + dr, c + dc)
            for dr, dc in DIRECTIONS
            if in_grid(r + dr, c + dc, rows, cols)
        )
        for r, c in grid_coordinates(rows, cols)
    }


def clamp(value: int, low: int, high: int) -> int:
    """Limit value to the inclusive range [low, high]."""
    return max(min(value, high), low)
