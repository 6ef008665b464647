"""
Quickstart example for the Minefield Advisor.

This script demonstrates basic usage of the board and the solver.
"""

from minefield import (
    MinefieldBoard,
    MinefieldSolver,
    run_advisor_many_tests,
)


def main():
    print("=" * 60)
    print("Minefield Advisor - Quickstart Example")
    print("=" * 60)

    # Example 1: Play one move by hand and ask for advice
    print("\n1. A 9x9 board with 10 mines, after one reveal...")
    print("-" * 60)

    board = MinefieldBoard(9, 9, 10, seed=7)
    solver = MinefieldSolver(board)

    best = solver.safest_cell()
    status, payload = board.uncover(best.row, best.col)
    print(f"Revealed {len(payload.get('revealed_cells', []))} cells (status {status}).")
    print(board.format_board())

    # Example 2: The solver's view of the board
    print("\n2. Scores after the first reveal (0 = safest):")
    print("-" * 60)
    estimates = solver.estimate()
    print(solver.format_probabilities())
    print(f"Safest: {estimates[0]}, riskiest: {estimates[-1]}")
    print(f"Identified mines: {sorted(solver.identified_mines())}")

    # Example 3: Let the solver play many games
    print("\n3. Running 50 advised games for win rate statistics...")
    print("-" * 60)

    results = run_advisor_many_tests(9, 9, 10, runs=50)
    print(f"Win rate: {results['win_rate']*100:.1f}%")
    print(f"Average moves per game: {results['avg_reveal_moves_count']:.1f}")
    print(f"Identified mine precision: {results['identified_mine_precision']*100:.1f}%")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
