import pytest

from minefield import MinefieldBoard

# Two mines in the top-left corner of a 9x9 board. After revealing (3, 0) the
# top-left 4x4 reads
#     0 1 - -
#     0 1 - 2
#     0 1 1 1
#     0 0 0 0
# and the only covered cells are (0, 2), (0, 3) and (1, 2).
EXAMPLE_MINES = [(1, 2), (0, 3)]


@pytest.fixture
def example_board():
    board = MinefieldBoard(9, 9, mine_locations=EXAMPLE_MINES)
    board.uncover(3, 0)
    return board


@pytest.fixture
def single_mine_board():
    return MinefieldBoard(9, 9, mine_locations=[(0, 0)])


def _assert_partition(board):
    all_cells = {(r, c) for r in range(board.rows) for c in range(board.cols)}
    u, cv, f = board.uncovered_cells, board.covered_cells, board.flagged_cells
    assert not (u & cv) and not (u & f) and not (cv & f)
    assert u | cv | f == all_cells


@pytest.fixture
def assert_partition():
    """The three coverage caches split the grid with no overlap."""
    return _assert_partition
