"""Shared machinery for the incremental puzzle solvers.

A solver is bound to a game board, a goal board and a move queue.  Each
call to ``solve_next`` advances the game a few moves toward the goal and
pushes those moves onto the queue.

Most of the work is done with *composite moves*: short hole-preserving
sequences on a 3×2 block.  Solvers try a composite, measure the result,
and undo it again if it did not help.  Pushing uses the queue's elision
and undoing uses ``dequeue``, so a rejected try leaves the queue exactly as
it was.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Callable, Iterable

from tilecore.models.board import HOLE, Board, Coord, Direction, Piece
from tilecore.models.moveq import MoveQueue
from tilecore.models.rotation import Rotation

logger = logging.getLogger(__name__)

# Top left corner position.
CORNER = Coord(0, 0)
# Top center position of a 3×2 work area.
CENTER = Coord(1, 0)
# Preferred hole position of a 3×2 (or 3×3) work area.
HOLE_SLOT = Coord(1, 1)


class SolverError(RuntimeError):
    """The game and goal are inconsistent; the algorithm cannot proceed."""


class Move(IntEnum):
    """The six hole-preserving moves on a 3×2 block."""

    MA = 0   # left corner twist
    MAI = 1  # inverse
    MB = 2   # right corner twist
    MBI = 3  # inverse
    MC = 4   # full rotation
    MCI = 5  # inverse


_UP, _RT, _DN, _LT = Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT

_SEQUENCES: dict[Move, tuple[Direction, ...]] = {
    Move.MA: (_UP, _LT, _DN, _RT),
    Move.MAI: (_LT, _UP, _RT, _DN),
    Move.MB: (_RT, _UP, _LT, _DN),
    Move.MBI: (_UP, _RT, _DN, _LT),
    Move.MC: (_RT, _UP, _LT, _LT, _DN, _RT),
    Move.MCI: (_LT, _UP, _RT, _RT, _DN, _LT),
}


def directions(move: Move, rotation: int = Rotation.ROT0) -> list[Direction]:
    """Expand a composite move into elementary directions."""
    return [d.rotated(rotation) for d in _SEQUENCES[move]]


class AbstractSolver(ABC):
    """Base class for iterative solvers."""

    def __init__(
        self,
        game: Board,
        goal: Board,
        queue: MoveQueue,
        rng: random.Random | None = None,
    ) -> None:
        self.game = game
        self.goal = goal
        self.queue = queue
        self.rng = rng or random.Random()

    @abstractmethod
    def solve_next(self) -> bool:
        """Advance a few moves toward the goal; True if moves were made."""

    # -- queries --------------------------------------------------------------

    def is_piece_solved(self, c: tuple[int, int]) -> bool:
        piece = self.goal.piece_at(c)
        if piece == HOLE:  # the hole is not a piece
            return False
        return piece == self.game.piece_at(c)

    def is_solved(self) -> bool:
        """Check the game against the goal; the goal's hole is not checked."""
        return self.game.matches(self.goal)

    # -- shortcuts ------------------------------------------------------------

    def solve_hole(self) -> bool:
        """If a single move solves the game, make it.

        The piece the goal wants in the current hole cell is moved in if it
        is adjacent; the move is kept only when it solves the game.
        """
        piece = self.goal.piece_at(self.game.location(HOLE))
        if piece != HOLE and piece == self.game.n_move_hole(self.game.location(piece)):
            self.push_move(piece)
            if self.is_solved():
                return True
            self.undo_move(piece)
        return False

    def random_walk(self) -> bool:
        """Move in a random legal direction.  We'll get there eventually!"""
        dirs = list(Direction)
        self.rng.shuffle(dirs)
        for d in dirs:
            piece = self.game.move_delta(d)
            if piece != HOLE:
                self.queue.push(piece)
                return True
        return False

    # -- elementary moves -----------------------------------------------------

    def _slide(self, d: Direction) -> Piece:
        piece = self.game.move_delta(d)
        if piece == HOLE:
            raise SolverError(f"No piece {d.name} of the hole at {self.game.location(HOLE)}")
        return piece

    def push_direction(self, d: Direction) -> None:
        # move & filter do-nothing pairs
        self.queue.push(self._slide(d), elide=True)

    def undo_direction(self, d: Direction) -> None:
        # undo, regenerating elided moves
        self.queue.dequeue(self._slide(d))

    def push_move(self, piece: Piece) -> None:
        self.game.move(piece)
        self.queue.push(piece, elide=True)

    def undo_move(self, piece: Piece) -> None:
        self.game.move(piece)
        self.queue.dequeue(piece)

    # -- composite moves ------------------------------------------------------

    def push_composite(self, move: Move, rotation: int = Rotation.ROT0) -> None:
        for d in directions(move, rotation):
            self.push_direction(d)

    def undo_composite(self, move: Move, rotation: int = Rotation.ROT0) -> None:
        # Do the move backwards, looking in a mirror.
        back = (rotation + Rotation.ROT180) % len(Rotation)
        for d in reversed(directions(move, back)):
            self.undo_direction(d)

    def try_composites(
        self,
        moves: Iterable[Move],
        accept: Callable[[], bool],
        rotation: int = Rotation.ROT0,
    ) -> Move | None:
        """Apply each move in turn and keep the first one *accept* approves."""
        for move in moves:
            self.push_composite(move, rotation)  # try it
            if accept():
                return move
            self.undo_composite(move, rotation)  # undo it
        return None
