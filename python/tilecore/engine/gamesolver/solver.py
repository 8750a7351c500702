"""Solver for 3×3 puzzles and larger.

3×2 puzzles are dispatched to ``Solver5``.  Anything bigger is decomposed:
the top row of the goal is solved a chunk of (at most) three pieces at a
time by herding the chunk into the 3×2 block beneath its columns and
solving that block, then the top row is sliced off and the remaining
(height − 1) rows are solved the same way.  Boards wider than they are
tall are turned upright first.

A few invariants keep the recursion honest:

* The goal hole is rotated out of the row being solved before solving
  starts, so moving the goal hole around (``Solver5`` does) never alters
  the part of the goal being worked on.
* Once the top row is solved the sub-puzzle solver is called directly,
  without goal hole adjustments, so ``solve_hole`` can still restore the
  goal hole to its original location.
* The goal handed to a sub-solver must stay the same, given the same
  pieces, on every call; otherwise the solver may thrash.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

from tilecore.config import STEP_LIMIT_PER_CELL
from tilecore.engine.gamesolver.base import HOLE_SLOT, AbstractSolver, Move, SolverError
from tilecore.engine.gamesolver.solver5 import Solver5
from tilecore.models.board import HOLE, Board, Coord, Direction, Extent, Piece
from tilecore.models.moveq import MoveQueue
from tilecore.models.rotation import Rotation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClearRule:
    """If the bottom-row cell *lower* holds a chunk piece and the upper cell
    *upper* does not, perform *move* rotated by *rot*.

    Cells are relative to the corner of a 3×3 work area.
    """

    lower: Coord
    upper: Coord
    move: Move
    rot: Rotation


_R0, _R90, _R180, _R270 = Rotation

# NOTE: these are enough as long as a chunk never holds more than three
# pieces; at most five pieces fit in the upper 3×2 block.
CLEAR_RULES: tuple[ClearRule, ...] = (
    # Clear bottom left.
    ClearRule(Coord(0, 2), Coord(0, 1), Move.MB, _R180),
    ClearRule(Coord(0, 2), Coord(1, 0), Move.MC, _R270),
    ClearRule(Coord(0, 2), Coord(2, 1), Move.MC, _R180),
    # Clear bottom right.
    ClearRule(Coord(2, 2), Coord(2, 1), Move.MAI, _R180),
    ClearRule(Coord(2, 2), Coord(1, 0), Move.MCI, _R90),
    ClearRule(Coord(2, 2), Coord(0, 1), Move.MCI, _R180),
    # Clear bottom center.
    ClearRule(Coord(1, 2), Coord(0, 1), Move.MBI, _R180),
    ClearRule(Coord(1, 2), Coord(2, 1), Move.MA, _R180),
    ClearRule(Coord(1, 2), Coord(0, 0), Move.MAI, _R0),
)


def _offset(c: Coord, base: Coord) -> Coord:
    return Coord(c.col + base.col, c.row + base.row)


def chunk_start(width: int, col: int) -> tuple[int, int]:
    """Return (start column, size) of the top-row chunk containing *col*.

    An odd lot of ``width % 3`` columns on the left is placed one piece at
    a time; the rest of the row goes in triplets.
    """
    rem = width % 3
    if col < rem:
        return col, rem - col
    return col - (col - rem) % 3, 3


class Solver(AbstractSolver):
    """Solves M×N puzzles by recursive decomposition."""

    def _sub(self, game: Board, goal: Board) -> Solver:
        return Solver(game, goal, self.queue, self.rng)

    def solve_next(self) -> bool:
        width, height = self.game.extent

        # Dispatch to small puzzle solvers.
        if (width, height) == (3, 2):
            return Solver5(self.game, self.goal, self.queue, self.rng).solve_next()

        if width < 3 or height < 3:
            if self.is_solved():
                return False
            return self.random_walk()

        if self._sideways_flip(width, height):
            return True

        # RULE 0
        if self.is_solved():
            return False

        if self.solve_hole():
            return True

        if self.goal.location(HOLE).row == 0:
            raise SolverError("solve: goal hole is in the row being solved")

        # RULE 1 -- move game hole out of the top row.
        if self.game.location(HOLE).row == 0:
            self.push_direction(Direction.DOWN)
            return True

        # RULE 2 -- if the top row is solved then solve the rows beneath.
        col = 0
        while col < width and self.is_piece_solved((col, 0)):
            col += 1
        if col == width:
            base, size = (0, 1), (width, height - 1)
            return self._sub(self.game.transform(base, size), self.goal.transform(base, size)).solve_next()

        # RULE 3 -- solve the next chunk of the top row.
        col, size = chunk_start(width, col)
        top = [self.goal.piece_at((c, 0)) for c in range(col, col + size)]
        logger.debug(f"solve {width}×{height}: chunk {top} at column {col}")

        # RULE 3A -- chunk pieces left of the chunk move right.
        if col > 0:
            gm = self.game.transform((width - 1, 1), (height - 1, width), Rotation.ROT90)
            if self._sub(gm, gm).clear_bottom(top, width - col):
                return True

        # RULE 3B -- chunk pieces right of the chunk move left.
        if col + 3 < width:
            gm = self.game.transform((col, height - 1), (height, width - col), Rotation.ROT270)
            if self._sub(gm, gm).clear_bottom(top, 3):
                return True

        # RULE 3C -- chunk pieces in the lower rows move up into the 3×2
        # block above.
        gm = self.game.transform((col, 0), (3, height))
        if self._sub(gm, gm).clear_bottom(top, 2):
            return True

        # RULE 3D -- the 3×2 block holds the chunk: solve it.
        gm = self.game.transform((col, 0), (3, 2))
        if len(top) < 3:
            return Solver5(gm, gm, self.queue, self.rng).solve_corner(top[0])
        gl = gm.assign(top)
        return Solver5(gm, gl, self.queue, self.rng).solve_next()

    def _sideways_flip(self, width: int, height: int) -> bool:
        """Turn a sideways puzzle upright, keeping the hole out of the top row.

        A square puzzle is turned back when its goal hole sits in column 0.
        """
        flipped = self.goal.location(HOLE).col == 0
        if not (width > height or (flipped and width == height)):
            return False

        if flipped:
            base, rot = (width - 1, 0), Rotation.ROT90
        else:
            base, rot = (0, height - 1), Rotation.ROT270
        size = (height, width)
        logger.debug(f"solve {width}×{height}: turning {rot.name}")
        return self._sub(
            self.game.transform(base, size, rot),
            self.goal.transform(base, size, rot),
        ).solve_next()

    # -- clearing -------------------------------------------------------------

    def clear_bottom(self, top: Sequence[Piece], keep_rows: int) -> bool:
        """Clear the hole and members of *top* out of rows ``keep_rows`` and below.

        Pieces are lifted from the bottom row into the rows above it, using
        a 3×3 work area that slides right to left along the bottom edge.
        Returns True if moves were made.
        """
        width, height = self.game.extent
        for rows in range(height, keep_rows, -1):
            # Move game hole out of the bottom row.
            if self.game.location(HOLE).row == rows - 1:
                self.push_direction(Direction.UP)
                return True

            if self._clear_base(top, Extent(width, rows)):
                return True
        return False

    def _clear_base(self, top: Sequence[Piece], size: Extent) -> bool:
        x = size.width - 3
        y = size.height - 3
        while x + 3 > 0:
            # Slide back if we've gone over a bit.
            base = Coord(max(x, 0), y)
            bottom = (Coord(c, base.row + 2) for c in range(base.col + 2, base.col - 1, -1))
            if any(self.game.piece_at(c) in top for c in bottom):
                if self._clear_helper(top, base):
                    return True
            x -= 3
        return False

    def _clear_helper(self, top: Sequence[Piece], base: Coord) -> bool:
        """Lift chunk pieces out of the bottom row of the 3×3 area at *base*."""
        # Move game hole to center.
        h0 = _offset(HOLE_SLOT, base)
        if self.game.piece_at(h0) != HOLE:
            self.push_move(self.game.n_move_hole(h0))
            return True

        for rule in CLEAR_RULES:
            if (
                self.game.piece_at(_offset(rule.lower, base)) in top
                and self.game.piece_at(_offset(rule.upper, base)) not in top
            ):
                logger.debug(f"clear: {rule.move.name}/{rule.rot.name} at {tuple(base)}")
                self.push_composite(rule.move, rule.rot)
                return True

        raise SolverError(f"clear: no rule matches the work area at {tuple(base)}")


# -- public API -------------------------------------------------------------


def solve_next(
    game: Board,
    goal: Board,
    queue: MoveQueue,
    rng: random.Random | None = None,
) -> bool:
    """Advance *game* a few moves toward *goal*, pushing them onto *queue*.

    Returns False once the game is solved.
    """
    return Solver(game, goal, queue, rng).solve_next()


def is_solvable(game: Board, goal: Board) -> bool:
    """Return True if *goal* can be reached from *game* by sliding pieces."""
    cells = list(game)
    target = list(goal)
    if sorted(cells) != sorted(target):
        return False

    # Parity of the cell permutation, hole included.
    index = {piece: k for k, piece in enumerate(target)}
    perm = [index[piece] for piece in cells]
    seen = [False] * len(perm)
    transpositions = 0
    for start in range(len(perm)):
        length = 0
        k = start
        while not seen[k]:
            seen[k] = True
            k = perm[k]
            length += 1
        if length:
            transpositions += length - 1

    # Every slide is one transposition and moves the hole one cell.
    a = game.location(HOLE)
    b = goal.location(HOLE)
    hole_distance = abs(a.col - b.col) + abs(a.row - b.row)
    return (transpositions + hole_distance) % 2 == 0


def solve(
    game: Board,
    goal: Board | None = None,
    max_steps: int | None = None,
    rng: random.Random | None = None,
) -> list[Piece]:
    """Return the moves that solve *game*, or ``[]`` if solved / unsolvable.

    The solver works on a copy; *game* itself is not changed.  The default
    goal is the ordered board of the same size.
    """
    goal = goal if goal is not None else Board(game.width, game.height)
    if game.matches(goal) or not is_solvable(game, goal):
        return []

    work = game.deep_copy()
    queue = MoveQueue()
    limit = max_steps if max_steps is not None else STEP_LIMIT_PER_CELL * max(len(game), 1)
    for _ in range(limit):
        if not solve_next(work, goal, queue, rng):
            return list(queue.pending)
    raise SolverError(f"solve: no solution within {limit} steps")


def hint(game: Board, goal: Board | None = None) -> Piece | None:
    """Return the single next move, or ``None`` if solved / unsolvable."""
    moves = solve(game, goal)
    return moves[0] if moves else None
