from collections import deque

import numpy as np
import pytest

from minefield import CLEARED, MINE_HIT, SAFE, CoverageState, MinefieldBoard
from minefield.cell import MINE


def direct_count(board, r, c):
    return sum(1 for nr, nc in board.neighbors(r, c) if board.mines[nr, nc])


# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "rows, cols, mines, expected",
    [
        (1, 100, 0, (9, 30, 1)),
        (9, 9, 10_000, (9, 9, 81)),
        (-5, 12, -3, (9, 12, 1)),
        (16, 30, 99, (16, 30, 99)),
    ],
)
def test_construction_clamps_inputs(rows, cols, mines, expected):
    board = MinefieldBoard(rows, cols, mines, seed=0)
    assert (board.rows, board.cols, board.num_mines) == expected
    assert len(board.mine_cells) == board.num_mines
    assert int(board.mines.sum()) == board.num_mines


def test_beginner_board_starts_fully_covered():
    board = MinefieldBoard(9, 9, 10, seed=42)

    assert len(board.covered_cells) == 81
    assert board.uncovered_cells == frozenset()
    assert board.flagged_cells == frozenset()
    assert len(board.mine_cells) == 10
    assert len(board.legal_cells()) == 71
    assert all(
        cell.state is CoverageState.COVERED for row in board.cells for cell in row
    )


@pytest.mark.parametrize("seed", range(10))
def test_solution_matches_direct_neighbor_counts(seed):
    board = MinefieldBoard(12, 15, 30, seed=seed)
    for r in range(board.rows):
        for c in range(board.cols):
            value = board.cells[r][c].value
            if board.mines[r, c]:
                assert value == MINE
            else:
                assert value.count == direct_count(board, r, c)


def test_same_seed_same_layout():
    a = MinefieldBoard(16, 16, 40, seed=123)
    b = MinefieldBoard(16, 16, 40, seed=123)
    assert a.mine_cells == b.mine_cells
    assert np.array_equal(a.raw_board(), b.raw_board())


def test_full_board_of_mines_is_legal():
    board = MinefieldBoard(9, 9, 81, seed=1)
    assert board.legal_cells() == frozenset()
    assert board.highest_neighbor_value() == -1


def test_explicit_mine_locations():
    board = MinefieldBoard(9, 9, 50, mine_locations=[(0, 0), (8, 8), (0, 0)])
    assert board.num_mines == 2
    assert board.mine_cells == {(0, 0), (8, 8)}


@pytest.mark.parametrize("locations", [[], [(9, 0)], [(0, -1)]])
def test_bad_mine_locations_rejected(locations):
    with pytest.raises(ValueError):
        MinefieldBoard(9, 9, mine_locations=locations)


# -----------------------------------------------------------------------------
# Reveal
# -----------------------------------------------------------------------------

def test_cascade_reveals_zero_region_and_its_border(example_board, assert_partition):
    assert example_board.covered_cells == {(0, 2), (0, 3), (1, 2)}
    assert example_board.legal_cells() == {(0, 2)}
    assert_partition(example_board)


def test_uncover_payload_lists_revealed_cells():
    board = MinefieldBoard(9, 9, mine_locations=[(1, 2), (0, 3)])
    status, payload = board.uncover(3, 0)

    assert status == SAFE
    revealed = {(r, c) for r, c, _ in payload["revealed_cells"]}
    assert revealed == board.uncovered_cells
    assert len(revealed) == 81 - 3


def test_uncover_number_reveals_single_cell():
    board = MinefieldBoard(9, 9, mine_locations=[(1, 2), (0, 3)])
    status, payload = board.uncover(0, 1)

    assert status == SAFE
    assert board.uncovered_cells == {(0, 1)}
    assert [(r, c, v.count) for r, c, v in payload["revealed_cells"]] == [(0, 1, 1)]


@pytest.mark.parametrize("seed", range(8))
def test_cascade_region_matches_independent_flood(seed):
    board = MinefieldBoard(16, 16, 30, seed=seed)
    zeros = [
        (r, c)
        for r in range(board.rows)
        for c in range(board.cols)
        if board.cells[r][c].value.raw == 0
    ]
    if not zeros:
        pytest.skip("layout without empty cells")
    start = zeros[0]

    expected = set()
    seen = {start}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        expected.add((r, c))
        if board.cells[r][c].value.raw == 0:
            for n in board.neighbors(r, c):
                if n not in seen:
                    seen.add(n)
                    queue.append(n)

    board.uncover(*start)
    assert board.uncovered_cells == expected


def test_uncover_mine_reports_hit_without_cascade(example_board, assert_partition):
    before = set(example_board.uncovered_cells)
    status, payload = example_board.uncover(0, 3)

    assert status == MINE_HIT
    assert payload == {}
    assert example_board.cells[0][3].state is CoverageState.UNCOVERED
    assert example_board.uncovered_cells == before | {(0, 3)}
    assert_partition(example_board)


def test_uncover_is_idempotent(example_board):
    snapshot = (
        example_board.uncovered_cells,
        example_board.covered_cells,
        example_board.flagged_cells,
    )
    status, payload = example_board.uncover(3, 0)

    assert (status, payload) == (SAFE, {})
    assert (
        example_board.uncovered_cells,
        example_board.covered_cells,
        example_board.flagged_cells,
    ) == snapshot


def test_last_safe_cell_clears_board(example_board):
    status, payload = example_board.uncover(0, 2)

    assert status == CLEARED
    assert [(r, c) for r, c, _ in payload["revealed_cells"]] == [(0, 2)]
    assert example_board.legal_cells() == frozenset()


def test_single_click_can_clear_board(single_mine_board):
    status, _ = single_mine_board.uncover(8, 8)
    assert status == CLEARED
    assert single_mine_board.covered_cells == {(0, 0)}


def test_cascade_stops_at_flags(single_mine_board, assert_partition):
    single_mine_board.toggle_flag(5, 5)
    status, _ = single_mine_board.uncover(8, 8)

    assert status == SAFE
    assert single_mine_board.flagged_cells == {(5, 5)}
    assert single_mine_board.legal_cells() == {(5, 5)}
    assert_partition(single_mine_board)


def test_uncover_flagged_safe_cell_has_no_effect(single_mine_board):
    single_mine_board.toggle_flag(4, 4)
    status, payload = single_mine_board.uncover(4, 4)

    assert status == SAFE
    assert payload == {"revealed_cells": []}
    assert single_mine_board.cells[4][4].state is CoverageState.FLAGGED


# -----------------------------------------------------------------------------
# Flags
# -----------------------------------------------------------------------------

def test_flag_toggle_round_trip(single_mine_board, assert_partition):
    value = single_mine_board.cells[1][1].value

    single_mine_board.toggle_flag(1, 1)
    assert single_mine_board.cells[1][1].state is CoverageState.FLAGGED
    assert single_mine_board.flagged_cells == {(1, 1)}
    assert_partition(single_mine_board)

    single_mine_board.toggle_flag(1, 1)
    assert single_mine_board.cells[1][1].state is CoverageState.COVERED
    assert single_mine_board.cells[1][1].value == value
    assert single_mine_board.flagged_cells == frozenset()
    assert_partition(single_mine_board)


def test_flag_uncovered_cell_is_noop(example_board):
    example_board.toggle_flag(3, 0)
    assert example_board.cells[3][0].state is CoverageState.UNCOVERED
    assert example_board.flagged_cells == frozenset()


def test_flagged_mine_is_still_legal_exclusion(single_mine_board):
    single_mine_board.toggle_flag(0, 0)
    assert (0, 0) not in single_mine_board.legal_cells()
    assert single_mine_board.mine_cells == {(0, 0)}


@pytest.mark.parametrize("method", ["uncover", "toggle_flag", "cell"])
@pytest.mark.parametrize("coord", [(-1, 0), (0, 9), (9, 9)])
def test_out_of_bounds_fails_fast(single_mine_board, method, coord):
    with pytest.raises(ValueError):
        getattr(single_mine_board, method)(*coord)


@pytest.mark.parametrize("seed", range(5))
def test_caches_partition_after_every_mutation(seed, assert_partition):
    board = MinefieldBoard(10, 14, 20, seed=seed)
    mines_before = board.mine_cells
    rng = np.random.default_rng(seed)

    for _ in range(40):
        r = int(rng.integers(board.rows))
        c = int(rng.integers(board.cols))
        if rng.random() < 0.3:
            board.toggle_flag(r, c)
        elif not board.mines[r, c]:
            board.uncover(r, c)
        assert_partition(board)
        assert board.mine_cells == mines_before
        assert len(board.mine_cells) == board.num_mines


# -----------------------------------------------------------------------------
# Queries and display
# -----------------------------------------------------------------------------

def test_out_of_bounds_helper(single_mine_board):
    assert single_mine_board.out_of_bounds(-1, -1)
    assert single_mine_board.out_of_bounds(-1, 0)
    assert not single_mine_board.out_of_bounds(0, 0)
    assert not single_mine_board.out_of_bounds(8, 8)
    assert single_mine_board.out_of_bounds(9, 9)


def test_highest_neighbor_value():
    ring = [(3, 3), (3, 4), (3, 5), (4, 3), (4, 5), (5, 3), (5, 4), (5, 5)]
    assert MinefieldBoard(9, 9, mine_locations=ring).highest_neighbor_value() == 8
    assert MinefieldBoard(9, 9, mine_locations=[(0, 0)]).highest_neighbor_value() == 1


def test_raw_board_and_dense_grids(example_board):
    raw = example_board.raw_board()
    assert raw.shape == (9, 9)
    assert raw[1, 2] == -1 and raw[0, 3] == -1
    assert raw[0, 2] == 2 and raw[1, 3] == 2
    assert raw[8, 8] == 0

    covered = example_board.covered_grid()
    assert covered.dtype == bool
    assert int(covered.sum()) == 3 and covered[0, 2]
    assert int(example_board.uncovered_grid().sum()) == 78
    assert not example_board.flagged_grid().any()
    assert np.array_equal(example_board.mine_grid(), raw == -1)


def test_format_board(example_board):
    example_board.toggle_flag(0, 2)
    lines = example_board.format_board().splitlines()

    assert lines[0] == "Minefield(grid_size=(9, 9), mines=2)"
    assert lines[1] == "0 1 ✓ - 1 0 0 0 0"
    assert lines[2] == "0 1 - 2 1 0 0 0 0"
    assert lines[3] == "0 1 1 1 0 0 0 0 0"
    assert lines[4] == "0 0 0 0 0 0 0 0 0"
    assert str(example_board) == example_board.format_board()


def test_format_board_marks(example_board):
    lines = example_board.format_board(marks={(0, 2): "?"}).splitlines()
    assert lines[1] == "0 1 ? - 1 0 0 0 0"


def test_format_solution_and_mines():
    board = MinefieldBoard(9, 9, mine_locations=[(1, 2), (0, 3)])

    solution = board.format_solution().splitlines()
    assert solution[0] == "Oracle:Minefield(grid_size=(9, 9), mines=2)"
    assert solution[1] == "0 1 2 X 1 0 0 0 0"
    assert solution[2] == "0 1 X 2 1 0 0 0 0"

    mines = board.format_mines().splitlines()
    assert mines[1] == "- - - X - - - - -"
    assert mines[2] == "- - X - - - - - -"


# -----------------------------------------------------------------------------
# Snapshots
# -----------------------------------------------------------------------------

def test_snapshot_round_trip(example_board):
    example_board.toggle_flag(0, 3)
    restored = MinefieldBoard.from_snapshot(
        example_board.raw_board(),
        example_board.uncovered_grid().astype(int),
        example_board.flagged_grid().astype(int),
    )

    assert restored.mine_cells == example_board.mine_cells
    assert restored.uncovered_cells == example_board.uncovered_cells
    assert restored.flagged_cells == example_board.flagged_cells
    assert restored.covered_cells == example_board.covered_cells


def test_snapshot_without_coverage_is_solved(example_board):
    restored = MinefieldBoard.from_snapshot(example_board.raw_board().tolist())
    assert len(restored.uncovered_cells) == 79
    assert restored.flagged_cells == restored.mine_cells == frozenset({(1, 2), (0, 3)})
    assert restored.covered_cells == frozenset()
    assert restored.legal_cells() == frozenset()
    assert "\u2713" in restored.format_board()
    assert "X" not in restored.format_board()


def test_snapshot_with_coverage_only_flags_nothing(example_board):
    uncovered = np.zeros((9, 9), dtype=int)
    uncovered[8, 8] = 1
    restored = MinefieldBoard.from_snapshot(example_board.raw_board(), uncovered)
    assert restored.uncovered_cells == frozenset({(8, 8)})
    assert restored.flagged_cells == frozenset()


def test_snapshot_rejects_inconsistent_numbers(example_board):
    raw = example_board.raw_board()
    raw[8, 8] = 3
    with pytest.raises(ValueError):
        MinefieldBoard.from_snapshot(raw)


def test_snapshot_rejects_bad_shape():
    with pytest.raises(ValueError):
        MinefieldBoard.from_snapshot([[-1, 0], [1, 1]])
