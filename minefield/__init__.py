"""
Minefield state engine and heuristic advisor

A mine-clearing puzzle core with two parts:
- MinefieldBoard: mine placement, solved neighbor counts, cascading reveal,
  flag toggling and cached coverage sets
- MinefieldSolver: single-pass local mine-probability heuristic over the
  visible clues
"""

from .cell import EMPTY, MINE, Cell, CellValue, CoverageState
from .config import BoardConfig
from .engine import CLEARED, MINE_HIT, SAFE, MinefieldBoard
from .history import (
    FINISHED_GAMES_FILE,
    UNFINISHED_GAMES_FILE,
    GameRecord,
    load_games,
    recent_games,
    restore_board,
    save_game,
)
from .solver import MinefieldSolver, ProbabilityEstimate
from .analysis import (
    play_advised_game,
    run_advisor_single_test,
    run_advisor_many_tests,
    run_advisor_size_analysis,
)

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "MinefieldBoard",
    "MinefieldSolver",
    "ProbabilityEstimate",
    # Cell types
    "Cell",
    "CellValue",
    "CoverageState",
    "MINE",
    "EMPTY",
    # uncover() status codes
    "MINE_HIT",
    "SAFE",
    "CLEARED",
    # Collaborators
    "BoardConfig",
    "GameRecord",
    "save_game",
    "load_games",
    "restore_board",
    "recent_games",
    "FINISHED_GAMES_FILE",
    "UNFINISHED_GAMES_FILE",
    # Analysis functions
    "play_advised_game",
    "run_advisor_single_test",
    "run_advisor_many_tests",
    "run_advisor_size_analysis",
]
