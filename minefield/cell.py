"""Cell-level types: coverage state, tagged cell value and the cell itself."""

from dataclasses import dataclass
from enum import Enum


class CoverageState(Enum):
    """What the player currently sees of a cell."""

    COVERED = "covered"
    UNCOVERED = "uncovered"
    FLAGGED = "flagged"


@dataclass(frozen=True)
class CellValue:
    """
    Either a mine or the number of mines among the 8 neighboring cells.

    Use ``CellValue.number(n)`` / ``CellValue.from_raw(raw)`` or the module
    constants ``MINE`` and ``EMPTY`` rather than the constructor.
    """

    is_mine: bool = False
    count: int = 0

    def __post_init__(self) -> None:
        if self.is_mine and self.count != 0:
            raise ValueError("A mine value carries no neighbor count.")
        if not 0 <= self.count <= 8:
            raise ValueError(f"Neighbor count must be in [0, 8], got {self.count}.")

    @classmethod
    def number(cls, count: int) -> "CellValue":
        return cls(is_mine=False, count=count)

    @classmethod
    def from_raw(cls, raw: int) -> "CellValue":
        """Decode the serialized form: -1 for a mine, else the neighbor count."""
        if raw == -1:
            return cls(is_mine=True)
        return cls.number(raw)

    @property
    def raw(self) -> int:
        return -1 if self.is_mine else self.count

    @property
    def is_empty(self) -> bool:
        return not self.is_mine and self.count == 0

    def __str__(self) -> str:
        return "X" if self.is_mine else str(self.count)


MINE = CellValue(is_mine=True)
EMPTY = CellValue()


@dataclass
class Cell:
    state: CoverageState = CoverageState.COVERED
    value: CellValue = EMPTY
