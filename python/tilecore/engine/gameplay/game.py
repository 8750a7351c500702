"""Core gameplay logic -- applies user and solver moves, tracks undo."""

from __future__ import annotations

import logging
import random

from tilecore.config import DEFAULT_LOOKAHEAD, PuzzleConfig
from tilecore.engine.gamegenerator.generator import GameGenerator
from tilecore.engine.gamesolver.base import SolverError
from tilecore.engine.gamesolver.solver import solve_next
from tilecore.engine.gamestate.state import GameState
from tilecore.models.board import HOLE, Board, Direction, Piece
from tilecore.models.moveq import MoveQueue
from tilecore.models.rotation import Rotation

logger = logging.getLogger(__name__)


class GamePlay:
    """Orchestrates a single puzzle session.

    The solver never touches the displayed board.  It works on a shadow
    copy, running a few moves ahead and pushing them onto the move queue;
    each move is applied to the displayed board as it is popped.  Any user
    move drops the pending moves along with the shadow.
    """

    def __init__(
        self,
        columns: int,
        rows: int,
        rng: random.Random | None = None,
        lookahead: int = DEFAULT_LOOKAHEAD,
        scramble: bool = True,
        relocate_hole: bool = True,
    ) -> None:
        rng = rng or random.Random()
        goal = GameGenerator.solved(columns, rows)
        if scramble:
            board = GameGenerator.generate(columns, rows, rng, relocate_hole)
        else:
            board = goal.deep_copy()
        self._setup(board, goal, rng, lookahead, relocate_hole)

    @classmethod
    def from_board(
        cls,
        board: Board,
        goal: Board | None = None,
        rng: random.Random | None = None,
        lookahead: int = DEFAULT_LOOKAHEAD,
    ) -> GamePlay:
        """Create a session from an existing board."""
        obj = object.__new__(cls)
        goal = goal if goal is not None else GameGenerator.solved(board.width, board.height)
        obj._setup(board, goal, rng or random.Random(), lookahead, True)
        return obj

    @classmethod
    def from_config(cls, config: PuzzleConfig) -> GamePlay:
        config.validate()
        return cls(
            config.columns,
            config.rows,
            rng=random.Random(config.seed),
            lookahead=config.lookahead,
            relocate_hole=config.relocate_hole,
        )

    def _setup(
        self,
        board: Board,
        goal: Board,
        rng: random.Random,
        lookahead: int,
        relocate_hole: bool,
    ) -> None:
        self.goal = goal
        self.rng = rng
        self.lookahead = lookahead
        self.relocate_hole = relocate_hole
        self.state = GameState(board)
        self.queue = MoveQueue()
        self._shadow: Board | None = None

    # -- queries --------------------------------------------------------------

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def columns(self) -> int:
        return self.board.width

    @property
    def rows(self) -> int:
        return self.board.height

    @property
    def is_won(self) -> bool:
        return self.board.matches(self.goal)

    @property
    def has_history(self) -> bool:
        return self.queue.history_size() > 0

    @property
    def solving(self) -> bool:
        """True while a solver shadow is running ahead of the board."""
        return self._shadow is not None

    # -- session --------------------------------------------------------------

    def scramble(self, relocate_hole: bool | None = None) -> None:
        """Start over with a freshly scrambled board."""
        if relocate_hole is None:
            relocate_hole = self.relocate_hole
        board = GameGenerator.generate(self.goal.width, self.goal.height, self.rng, relocate_hole)
        logger.info(f"scrambled {board.width}×{board.height} board")
        self.state = GameState(board)
        self.queue.reset()
        self._shadow = None

    # -- solver-driven movement -----------------------------------------------

    def move_forward(self) -> Piece | None:
        """Make the next move, asking the solver for more if none are pending.

        While a solver is active it is kept ``lookahead`` moves ahead so
        that the queue has a chance to elide useless pairs.  A new solver
        starts only after pending moves are drained, otherwise it would be
        out of sync with the board.
        """
        ahead = self.lookahead if self._shadow is not None else 0
        while self.queue.pending_size() <= ahead and self._solve_next():
            pass
        return self._next_move(solver=True)

    def _solve_next(self) -> bool:
        if self.is_won:
            return False
        if self._shadow is None:
            self._shadow = self.board.deep_copy()
        try:
            return solve_next(self._shadow, self.goal, self.queue, self.rng)
        except SolverError:
            logger.error("solver gave up on this configuration", exc_info=True)
            self._shadow = None
            self.queue.clear_pending()
            raise

    def move_backward(self) -> Piece | None:
        """Undo the previous move, reinstating it as the next pending move."""
        if not self.has_history:
            return None
        piece = self.queue.pull()
        self._apply(piece, undo=True)

        if self.is_won:
            # Backed into the solution; don't back up any farther.
            self.queue.clear_history()
        return piece

    def _next_move(self, solver: bool = False) -> Piece | None:
        piece = self.queue.pop()
        self._apply(piece, solver=solver)

        if self.is_won:
            self.queue.clear_pending()
            self._shadow = None
        return piece

    def _apply(self, piece: Piece | None, solver: bool = False, undo: bool = False) -> None:
        if piece is None:
            return
        self.board.move(piece)
        self.state.record(piece, solver=solver, undo=undo)

    # -- user movement --------------------------------------------------------

    def move_piece_at(self, col: int, row: int) -> bool:
        """Push the piece at (col, row) toward the hole.

        The piece must share a row or column with the hole; intervening
        pieces move with it.  Returns True if anything moved.
        """
        board = self.board
        piece = board.piece_at((col, row))
        if piece == HOLE or not board.can_move(piece):
            return False
        while self._move_piece(board.n_move_hole(board.location(piece))) != piece:
            pass
        return True

    def move_hole(self, direction: Direction) -> Piece | None:
        """Move the hole one step; the neighbouring piece slides the other way."""
        piece = self.board.n_move_delta(*Direction(direction).delta)
        if piece == HOLE:
            return None
        return self._move_piece(piece)

    def move(self, direction: Direction) -> bool:
        """Slide a tile in *direction* into the adjacent hole.

        E.g. ``Direction.UP`` moves the tile **below** the hole upward.
        Returns True if the move was valid.
        """
        return self.move_hole(Direction(direction).rotated(Rotation.ROT180)) is not None

    def _move_piece(self, piece: Piece) -> Piece | None:
        # The common path for all user moves: the solver's plan is stale.
        self.queue.clear_pending()
        self._shadow = None
        self.queue.push(piece)
        return self._next_move()
