"""Session tests: solver playback, undo, user moves."""

from __future__ import annotations

import random

import pytest

from tilecore.config import PuzzleConfig
from tilecore.engine.gamegenerator.generator import GameGenerator
from tilecore.engine.gameplay.game import GamePlay
from tilecore.engine.gamesolver.base import SolverError
from tilecore.engine.gamestate.state import GameState
from tilecore.models.board import HOLE, Board, Direction


def _play_out(game: GamePlay, limit: int = 5000) -> None:
    for _ in range(limit):
        if game.is_won:
            return
        game.move_forward()
    pytest.fail(f"not solved after {limit} moves:\n{game.board}")


# -- generator ----------------------------------------------------------------


@pytest.mark.parametrize("seed", range(10))
def test_generated_boards_are_unsolved(seed: int) -> None:
    board = GameGenerator.generate(3, 3, random.Random(seed))
    assert not board.matches(GameGenerator.solved(3, 3))


def test_tiny_boards_generate() -> None:
    assert list(GameGenerator.generate(1, 1)) == [HOLE]
    assert list(GameGenerator.generate(2, 1, relocate_hole=False)) == [1, HOLE]


# -- solver playback ----------------------------------------------------------


@pytest.mark.parametrize("seed", range(3))
@pytest.mark.parametrize("size", [(3, 3), (4, 4), (5, 3)])
def test_move_forward_solves(size: tuple[int, int], seed: int) -> None:
    game = GamePlay(*size, rng=random.Random(seed))
    assert not game.is_won

    _play_out(game)

    assert game.is_won
    assert game.queue.pending_size() == 0
    assert not game.solving
    assert game.state.moves == game.queue.history_size()
    assert game.state.solver_moves == game.state.moves
    assert game.move_forward() is None


def test_solver_runs_ahead() -> None:
    game = GamePlay(4, 4, rng=random.Random(3), lookahead=3)
    game.move_forward()
    game.move_forward()
    if not game.is_won:
        assert game.solving
        assert game.queue.pending_size() >= 3


def test_move_backward_then_forward() -> None:
    game = GamePlay(3, 3, rng=random.Random(8))
    _play_out(game)

    piece = game.move_backward()
    assert piece is not None
    assert not game.is_won
    assert game.queue.pending == (piece,)

    assert game.move_forward() == piece
    assert game.is_won


def test_move_backward_without_history() -> None:
    game = GamePlay(3, 3, scramble=False)
    assert game.move_backward() is None
    assert game.state.moves == 0


def test_backing_into_the_solution_clears_history() -> None:
    game = GamePlay.from_board(Board(3, 3))
    assert game.move(Direction.DOWN)
    assert game.board.location(HOLE) == (2, 1)
    assert not game.is_won

    assert game.move_backward() == 6
    assert game.is_won
    assert not game.has_history
    assert (game.state.moves, game.state.undos, game.state.solver_moves) == (2, 1, 0)


def test_solver_error_is_propagated() -> None:
    goal = Board.from_flat(3, 3, [1, 0, 2, 3, 4, 5, 6, 7, 8])
    game = GamePlay.from_board(Board(3, 3), goal)
    with pytest.raises(SolverError):
        game.move_forward()
    assert game.queue.pending_size() == 0
    assert not game.solving


# -- user moves ---------------------------------------------------------------


def test_move_slides_tile_into_hole() -> None:
    game = GamePlay.from_board(Board(3, 3))
    assert not game.move(Direction.UP)  # nothing below the hole
    assert not game.move(Direction.LEFT)  # nothing right of the hole
    assert game.move(Direction.RIGHT)
    assert game.board.location(HOLE) == (1, 2)
    assert game.board.piece_at((2, 2)) == 8
    assert game.state.moves == 1


def test_move_hole_moves_the_hole() -> None:
    game = GamePlay.from_board(Board(3, 3))
    assert game.move_hole(Direction.UP) == 6
    assert game.board.location(HOLE) == (2, 1)
    assert game.move_hole(Direction.RIGHT) is None


def test_move_piece_at_pushes_a_line() -> None:
    game = GamePlay.from_board(Board(3, 3))
    assert game.move_piece_at(0, 2)
    assert game.board.rows()[2] == [HOLE, 7, 8]
    assert game.state.moves == 2

    assert not game.move_piece_at(2, 0)
    assert not game.move_piece_at(0, 2)  # the hole
    assert game.move_piece_at(0, 0)
    assert game.board.location(HOLE) == (0, 0)


def test_user_move_drops_solver_plan() -> None:
    game = GamePlay(4, 4, rng=random.Random(3))
    game.move_forward()
    game.move_forward()

    assert any(game.move(d) for d in Direction)
    assert game.queue.pending_size() == 0
    assert not game.solving

    # Solving picks up from wherever the user left off.
    _play_out(game)


# -- session ------------------------------------------------------------------


def test_scramble_starts_over() -> None:
    game = GamePlay(3, 3, rng=random.Random(2))
    game.move_forward()
    game.scramble()
    assert game.state.moves == 0
    assert len(game.queue) == 0
    assert not game.solving
    assert not game.is_won


def test_from_config_is_reproducible() -> None:
    config = PuzzleConfig(columns=5, rows=3, seed=9)
    a = GamePlay.from_config(config)
    b = GamePlay.from_config(config)
    assert (a.columns, a.rows) == (5, 3)
    assert list(a.board) == list(b.board)


@pytest.mark.parametrize(
    "config",
    [
        PuzzleConfig(columns=1),
        PuzzleConfig(rows=11),
        PuzzleConfig(delay=-1.0),
        PuzzleConfig(lookahead=-2),
    ],
)
def test_config_validation(config: PuzzleConfig) -> None:
    with pytest.raises(ValueError):
        config.validate()


def test_game_state_clock() -> None:
    state = GameState(Board(3, 3))
    state.pause()
    frozen = state.elapsed_time
    assert not state.running
    assert state.elapsed_time == frozen
    state.resume()
    assert state.running
    assert state.elapsed_time >= frozen
    state.record(5)
    state.record(5, undo=True)
    state.record(8, solver=True)
    assert (state.moves, state.undos, state.solver_moves) == (3, 1, 1)
    assert state.last_move == 8
