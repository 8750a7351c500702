"""Solver test suite.

Boards are scrambled from fixed seeds.  Every test is hard-killed after a
while by ``pytest-timeout`` (configured in ``pyproject.toml``).  If the
solver returns in time, the move list is replayed on a fresh copy of the
board to verify it.
"""

from __future__ import annotations

import random

import pytest

from conftest import replay
from tilecore.engine.gamegenerator.generator import GameGenerator
from tilecore.engine.gamesolver.base import Move, SolverError, directions
from tilecore.engine.gamesolver.solver import Solver, chunk_start, hint, is_solvable, solve, solve_next
from tilecore.engine.gamesolver.solver5 import Solver5
from tilecore.models.board import HOLE, Board, Direction
from tilecore.models.moveq import MoveQueue
from tilecore.models.rotation import Rotation

SEEDS = range(5)


# -- helpers ------------------------------------------------------------------


def _assert_solve(board: Board, goal: Board, seed: int) -> None:
    """Solve the board and verify the returned moves reach the goal."""
    before = list(board)

    moves = solve(board, goal, rng=random.Random(seed))

    # ---- move-list sanity ---------------------------------------------------
    assert isinstance(moves, list)
    assert len(moves) > 0, f"Unsolved board returned 0 moves:\n{board}"
    assert HOLE not in moves
    assert list(board) == before, "solve() must not touch its input"

    # ---- replay and check ---------------------------------------------------
    final = replay(board, moves)
    assert final.matches(goal), f"Board not solved after {len(moves)} moves:\n{final}"


def _scrambled(goal: Board, seed: int) -> Board:
    """Scramble *goal* until the result differs from it."""
    rng = random.Random(seed)
    board = goal.scramble(rng=rng)
    while board.matches(goal):
        board = goal.scramble(rng=rng)
    return board


# -- composite moves ----------------------------------------------------------


def test_directions_rotate() -> None:
    assert directions(Move.MA) == [Direction.UP, Direction.LEFT, Direction.DOWN, Direction.RIGHT]
    assert directions(Move.MA, Rotation.ROT90) == [
        Direction.RIGHT,
        Direction.UP,
        Direction.LEFT,
        Direction.DOWN,
    ]


@pytest.mark.parametrize("rot", list(Rotation))
@pytest.mark.parametrize("move", list(Move))
def test_composite_undo_restores_board(move: Move, rot: Rotation) -> None:
    board = Board.from_flat(3, 3, [1, 2, 3, 4, 0, 5, 6, 7, 8])
    before = list(board)
    queue = MoveQueue()
    solver = Solver(board, board.deep_copy(), queue)

    solver.push_composite(move, rot)
    assert board.location(HOLE) == (1, 1)
    assert list(board) != before

    solver.undo_composite(move, rot)
    assert list(board) == before
    assert queue.pending_size() == 0


def test_composite_undo_restores_elided_moves() -> None:
    board = Board.from_flat(3, 3, [1, 2, 3, 4, 5, 6, 7, 0, 8])
    queue = MoveQueue()
    solver = Solver(board, board.deep_copy(), queue)
    solver.push_direction(Direction.UP)
    assert queue.pending == (5,)
    before = list(board)

    # Its first step slides 5 straight back, which elides the pending 5.
    solver.push_composite(Move.MA, Rotation.ROT180)
    assert queue.pending == (8, 6, 5)

    solver.undo_composite(Move.MA, Rotation.ROT180)
    assert list(board) == before
    assert queue.pending == (5,)


def test_try_composites_keeps_first_accepted() -> None:
    board = Board.from_flat(3, 2, [1, 2, 3, 4, 0, 5])
    queue = MoveQueue()
    solver = Solver5(board, board.deep_copy(), queue)

    assert solver.try_composites([Move.MA, Move.MB], lambda: False) is None
    assert list(board) == [1, 2, 3, 4, 0, 5]
    assert queue.pending_size() == 0

    assert solver.try_composites([Move.MA, Move.MB], lambda: True) is Move.MA
    assert queue.pending_size() == 4


# -- chunking -----------------------------------------------------------------


@pytest.mark.parametrize(
    "width, col, expected",
    [
        (3, 0, (0, 3)),
        (4, 0, (0, 1)),
        (4, 1, (1, 3)),
        (4, 3, (1, 3)),
        (5, 0, (0, 2)),
        (5, 1, (1, 1)),
        (5, 4, (2, 3)),
        (6, 3, (3, 3)),
    ],
)
def test_chunk_start(width: int, col: int, expected: tuple[int, int]) -> None:
    assert chunk_start(width, col) == expected


# -- solvability --------------------------------------------------------------


def test_is_solvable() -> None:
    goal = Board(3, 3)
    b = Board(3, 3)
    b.move(8)
    assert is_solvable(b, goal)

    b.swap(1, 2)
    assert not is_solvable(b, goal)
    assert solve(b, goal) == []
    assert hint(b, goal) is None

    assert not is_solvable(Board(3, 3), Board(3, 2))


# -- incremental solving ------------------------------------------------------


def test_solved_board_needs_no_moves() -> None:
    queue = MoveQueue()
    assert not solve_next(Board(3, 3), Board(3, 3), queue)
    assert len(queue) == 0
    assert solve(Board(4, 4)) == []
    assert hint(Board(4, 4)) is None


def test_hint_is_the_single_winning_move() -> None:
    b = Board(3, 3)
    b.move(8)
    assert solve(b) == [8]
    assert hint(b) == 8


def test_goal_hole_in_top_row_is_rejected() -> None:
    game = Board(3, 3)
    goal = Board.from_flat(3, 3, [1, 0, 2, 3, 4, 5, 6, 7, 8])
    queue = MoveQueue()
    with pytest.raises(SolverError):
        solve_next(game, goal, queue)
    assert list(game) == list(Board(3, 3))


def test_step_limit() -> None:
    board = GameGenerator.generate(5, 5, random.Random(0))
    with pytest.raises(SolverError):
        solve(board, max_steps=1)


# -- the 5-puzzle -------------------------------------------------------------


@pytest.mark.parametrize("seed", range(20))
def test_solver5_converges(seed: int) -> None:
    rng = random.Random(seed)
    start = GameGenerator.generate(3, 2, rng)
    game = start.deep_copy()
    goal = Board(3, 2)
    queue = MoveQueue()

    steps = 0
    while Solver5(game, goal, queue, rng).solve_next():
        steps += 1
        assert steps <= 20, f"no convergence within 20 steps from\n{start}"

    assert game.matches(goal)
    assert replay(start, queue.pending).matches(goal)
    assert goal.location(HOLE) == (2, 1)


@pytest.mark.parametrize("hole", [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1)])
@pytest.mark.parametrize("seed", range(5))
def test_solver5_any_goal_hole(hole: tuple[int, int], seed: int) -> None:
    goal = Board(3, 2)
    goal.move_hole(hole)
    expected = list(goal)
    _assert_solve(_scrambled(goal, seed), goal, seed)
    assert list(goal) == expected


@pytest.mark.parametrize(
    "game, goal, moves",
    [
        ([1, 4, 2, 3, 0, 5], [1, 2, 0, 3, 4, 5], [4, 2]),
        ([1, 4, 2, 3, 0, 5], [0, 1, 2, 3, 4, 5], [4, 1]),
    ],
)
def test_solver5_goal_hole_two_steps_from_slot(game: list[int], goal: list[int], moves: list[int]) -> None:
    board = Board.from_flat(3, 2, game)
    target = Board.from_flat(3, 2, goal)
    assert is_solvable(board, target)
    assert solve(board, target) == moves
    _assert_solve(board, target, 0)


def test_pieces_home_but_goal_hole_two_steps_away() -> None:
    board = Board.from_flat(3, 3, [1, 2, 3, 4, 8, 5, 7, 0, 6])
    goal = Board.from_flat(3, 3, [1, 2, 3, 4, 5, 0, 7, 8, 6])
    assert solve(board, goal) == [8, 5]


# -- end to end ---------------------------------------------------------------


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize(
    "size",
    [(3, 2), (3, 3), (4, 4), (4, 3), (3, 4), (5, 5), (5, 3), (6, 4)],
    ids=lambda s: f"{s[0]}x{s[1]}",
)
def test_solve(size: tuple[int, int], seed: int) -> None:
    board = GameGenerator.generate(*size, random.Random(seed))
    _assert_solve(board, Board(*size), seed)


def _lower_cells(width: int, height: int) -> list[tuple[int, int, int]]:
    return [(width, height, k) for k in range(width, width * height)]


@pytest.mark.parametrize("seed", range(2))
@pytest.mark.parametrize(
    "width, height, k",
    _lower_cells(3, 3) + _lower_cells(4, 4) + _lower_cells(4, 3),
    ids=lambda v: str(v),
)
def test_solve_any_goal_hole(width: int, height: int, k: int, seed: int) -> None:
    goal = Board(width, height)
    goal.move_hole((k % width, k // width))
    _assert_solve(_scrambled(goal, seed), goal, seed)


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("size", [(3, 3), (4, 4)], ids=lambda s: f"{s[0]}x{s[1]}")
def test_solve_goal_hole_top_left(size: tuple[int, int], seed: int) -> None:
    goal = Board(*size)
    goal.move_hole((0, 0))
    _assert_solve(_scrambled(goal, seed), goal, seed)


@pytest.mark.parametrize("seed", SEEDS)
def test_solve_2x2_by_random_walk(seed: int) -> None:
    board = GameGenerator.generate(2, 2, random.Random(seed))
    _assert_solve(board, Board(2, 2), seed)


@pytest.mark.timeout(120)
def test_solve_10x10() -> None:
    board = GameGenerator.generate(10, 10, random.Random(42))
    _assert_solve(board, Board(10, 10), 42)
