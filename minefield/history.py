"""Game history: one JSON record per game, appended to a line-delimited file.

Won games go to the finished-games file, games saved mid-play to the
unfinished-games file. Both share the record format.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .engine import MinefieldBoard

Grid = List[List[int]]

_REQUIRED_KEYS = ("boardSize", "finalBoardState", "highestNumber", "finalTime", "dateTime")

FINISHED_GAMES_FILE = "finished_games.json"
UNFINISHED_GAMES_FILE = "unfinished_games.json"


@dataclass
class GameRecord:
    """Snapshot of a game as stored in the history file."""

    rows: int
    cols: int
    num_mines: int
    board_state: Grid
    uncovered_cells: Optional[Grid]
    flagged_cells: Optional[Grid]
    highest_number: int
    final_time: int
    date_time: datetime

    @classmethod
    def from_board(
        cls,
        board: MinefieldBoard,
        final_time: int,
        date_time: Optional[datetime] = None,
    ) -> "GameRecord":
        return cls(
            rows=board.rows,
            cols=board.cols,
            num_mines=board.num_mines,
            board_state=board.raw_board().tolist(),
            uncovered_cells=board.uncovered_grid().astype(int).tolist(),
            flagged_cells=board.flagged_grid().astype(int).tolist(),
            highest_number=board.highest_neighbor_value(),
            final_time=int(final_time),
            date_time=(date_time or datetime.now()).replace(microsecond=0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boardSize": [self.rows, self.cols, self.num_mines],
            "uncoveredCells": self.uncovered_cells,
            "flaggedCells": self.flagged_cells,
            "finalBoardState": self.board_state,
            "highestNumber": self.highest_number,
            "finalTime": self.final_time,
            "dateTime": self.date_time.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameRecord":
        """
        Decode a record from its JSON mapping.

        Raises:
            ValueError: If a required key is missing or a field is malformed.
        """
        missing = [k for k in _REQUIRED_KEYS if k not in data]
        if missing:
            raise ValueError(f"Missing game record keys: {missing}")

        board_size = data["boardSize"]
        if not isinstance(board_size, list) or len(board_size) != 3:
            raise ValueError("'boardSize' must be [rows, cols, mines].")

        try:
            date_time = datetime.fromisoformat(data["dateTime"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid 'dateTime': {data['dateTime']!r}") from e

        try:
            rows, cols, num_mines = (int(v) for v in board_size)
            record = cls(
                rows=rows,
                cols=cols,
                num_mines=num_mines,
                board_state=[[int(v) for v in row] for row in data["finalBoardState"]],
                uncovered_cells=_optional_grid(data.get("uncoveredCells")),
                flagged_cells=_optional_grid(data.get("flaggedCells")),
                highest_number=int(data["highestNumber"]),
                final_time=int(data["finalTime"]),
                date_time=date_time,
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Malformed game record field: {e}") from e

        for name, grid in (
            ("finalBoardState", record.board_state),
            ("uncoveredCells", record.uncovered_cells),
            ("flaggedCells", record.flagged_cells),
        ):
            if grid is not None and not _has_shape(grid, rows, cols):
                raise ValueError(f"'{name}' is not a {rows}x{cols} grid.")
        return record

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def summary(self) -> str:
        """One-line listing entry: '(rows, cols) → mines | MM:SS  date'."""
        minutes, seconds = divmod(self.final_time, 60)
        return (
            f"({self.rows}, {self.cols}) → {self.num_mines} | {minutes:02d}:{seconds:02d}"
            f"  {self.date_time:%Y-%m-%d %H:%M}"
        )


def _optional_grid(value: Any) -> Optional[Grid]:
    if value is None:
        return None
    return [[int(v) for v in row] for row in value]


def _has_shape(grid: Grid, rows: int, cols: int) -> bool:
    return len(grid) == rows and all(len(row) == cols for row in grid)


def save_game(record: GameRecord, path: Union[str, Path]) -> None:
    """Append a record to the history file, one JSON document per line."""
    path = Path(path)
    with path.open("a", encoding="utf-8") as f:
        f.write(record.to_json() + "\n")


def load_games(path: Union[str, Path]) -> List[GameRecord]:
    """
    Load every record from a history file.

    Returns:
        Records in file order; an empty list if the file does not exist.

    Raises:
        ValueError: If a line is not a valid game record.
    """
    path = Path(path)
    if not path.exists():
        return []

    records: List[GameRecord] = []
    with path.open(encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(GameRecord.from_dict(json.loads(line)))
            except (ValueError, TypeError) as e:
                raise ValueError(f"{path}:{line_no}: invalid game record: {e}") from e
    return records


def restore_board(record: GameRecord) -> MinefieldBoard:
    """Rebuild the board of a stored game; records without coverage grids come back solved."""
    return MinefieldBoard.from_snapshot(
        record.board_state, record.uncovered_cells, record.flagged_cells
    )


def recent_games(records: Iterable[GameRecord]) -> List[GameRecord]:
    """Records ordered newest first; records sharing a timestamp keep file order."""
    return sorted(records, key=lambda record: record.date_time, reverse=True)
