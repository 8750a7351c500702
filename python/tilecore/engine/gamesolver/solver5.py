"""Rule-based solver for the 5-puzzle (3×2).

The rules follow Donald Michie, "Preserving the Vital Link of
Comprehension", Practical Computing, 9/79, p. 64, with an error in rule 3
corrected and the original rule 1 split into the ``solve_hole`` shortcut
and an explicit hole-placement rule so that any goal hole position works.

Coordinates used below (the hole works from (1,1))::

    (0,0) (1,0) (2,0)
    (0,1) (1,1) (2,1)
"""

from __future__ import annotations

import logging
from enum import IntEnum

from tilecore.engine.gamesolver.base import (
    CENTER,
    CORNER,
    HOLE_SLOT,
    AbstractSolver,
    Move,
    SolverError,
)
from tilecore.models.board import HOLE, Coord, Piece

logger = logging.getLogger(__name__)


class Pair(IntEnum):
    LEFT = 0
    RIGHT = 1


# Goal cells of each edge pair, in ring order.
EDGES: dict[Pair, tuple[Coord, Coord]] = {
    Pair.LEFT: (Coord(0, 1), Coord(0, 0)),
    Pair.RIGHT: (Coord(2, 0), Coord(2, 1)),
}

# If the piece bound for the corner sits at CORNER_SOURCES[i], move i
# advances it toward the corner.
CORNER_SOURCES: tuple[tuple[Coord, Move], ...] = (
    (Coord(0, 1), Move.MA),
    (Coord(1, 0), Move.MAI),
    (Coord(2, 1), Move.MB),
    (Coord(2, 0), Move.MBI),
)

RULE_SET_3 = (Move.MC, Move.MCI)
RULE_SET_4 = (Move.MA, Move.MBI)
RULE_SET_5 = (Move.MAI, Move.MB, Move.MC, Move.MCI)
RULE_SET_6 = (Move.MAI, Move.MB)


def _ring_next(c: Coord) -> Coord:
    """Next cell clockwise around the outer ring, skipping (1,1)."""
    col, row = c
    if row == 0:
        return Coord(col, 1) if col == 2 else Coord(col + 1, 0)
    if col == 0:
        return Coord(0, 0)
    return Coord(0, 1)


class Solver5(AbstractSolver):
    """Solves 3×2 puzzles."""

    def solve_next(self) -> bool:
        # RULE 0
        if self.is_solved():
            return False

        if self.solve_hole():
            return True

        # RULE 1 -- move game hole to the bottom center.
        if self.game.piece_at(HOLE_SLOT) != HOLE:
            self.push_move(self.game.n_move_hole(HOLE_SLOT))
            return True

        # Align goal hole with game hole; restore it whatever happens.
        g0 = self.goal.location(HOLE)
        self.goal.move_hole(HOLE_SLOT)
        try:
            if not self.is_solved():
                return self._solve5()
        finally:
            self.goal.move_hole(g0)

        # Pieces are home but the goal hole is two steps off: retrace the
        # path the goal hole took, one step per call.
        self.push_move(self.game.n_move_hole(g0))
        return True

    def solve_corner(self, piece: Piece) -> bool:
        """Advance *piece* toward the upper left corner."""
        if self.game.piece_at(HOLE_SLOT) != HOLE:
            self.push_move(self.game.n_move_hole(HOLE_SLOT))
            return True

        for c, move in CORNER_SOURCES:
            if self.game.piece_at(c) == piece:
                logger.debug(f"solve_corner: {piece} at {tuple(c)}, {move.name}")
                self.push_composite(move)
                return True

        raise SolverError(f"solve_corner: piece {piece!r} is not in the work area")

    # -- measures -------------------------------------------------------------

    def _piece_distance(self, piece: Piece) -> int:
        a = self.game.location(piece)
        b = self.goal.location(piece)
        return abs(a.col - b.col) + abs(a.row - b.row)

    def _pair_pieces(self, pair: Pair) -> tuple[Piece, Piece]:
        first, second = EDGES[pair]
        return self.goal.piece_at(first), self.goal.piece_at(second)

    def edge_pair_distance(self, pair: Pair) -> int:
        return sum(self._piece_distance(p) for p in self._pair_pieces(pair))

    def apart(self, pair: Pair) -> int:
        """Number of ring steps from the pair's first piece to its second."""
        n0, n1 = self._pair_pieces(pair)
        c = self.game.location(n0)
        for gap in range(4):
            c = _ring_next(c)
            if self.game.piece_at(c) == n1:
                return gap
        raise SolverError(f"apart: {n1!r} not found within 4 steps of {n0!r}")

    # -- rules ----------------------------------------------------------------

    def _solve_edge(self, pair: Pair, moves: tuple[Move, ...]) -> bool:
        if self.try_composites(moves, lambda: self.edge_pair_distance(pair) == 0) is None:
            raise SolverError(f"solve_edge: cannot twist {pair.name} edge into place")
        return True

    def _solve5(self) -> bool:
        epds = {pair: self.edge_pair_distance(pair) for pair in Pair}

        # RULE 2 -- if one edge is solved then twist the other into place.
        if epds[Pair.LEFT] == 0:
            return self._solve_edge(Pair.RIGHT, (Move.MB, Move.MBI))
        if epds[Pair.RIGHT] == 0:
            return self._solve_edge(Pair.LEFT, (Move.MA, Move.MAI))

        gaps = {pair: self.apart(pair) for pair in Pair}
        logger.debug(f"solve5: distances {list(epds.values())}, gaps {list(gaps.values())}")

        # RULE 3A -- if only one edge is together and it can be twisted
        # into place then twist it into place.
        center = self.game.piece_at(CENTER)
        if gaps[Pair.LEFT] == 0 and gaps[Pair.RIGHT] != 0 and center == self._pair_pieces(Pair.LEFT)[1]:
            self.push_composite(Move.MAI)
            return True
        if gaps[Pair.RIGHT] == 0 and gaps[Pair.LEFT] != 0 and center == self._pair_pieces(Pair.RIGHT)[0]:
            self.push_composite(Move.MB)
            return True

        # Preferred edge pair.
        pep = min(Pair, key=lambda pair: (gaps[pair], epds[pair]))

        # RULE 3B -- preferred edge together but not in place: move it closer.
        if gaps[pep] == 0:
            return self._closer(pep, epds[pep], RULE_SET_3, "3B")

        # RULE 4 -- one apart with the first piece in the corner: twist the
        # pair together toward its place.
        if gaps[pep] == 1 and self.game.piece_at(CORNER) == self._pair_pieces(pep)[0]:
            return self._closer(pep, epds[pep], RULE_SET_4, "4")

        # RULE 5 -- one apart otherwise: move the intervening piece to the
        # top center.
        if gaps[pep] == 1:
            between = self.game.piece_at(_ring_next(self.game.location(self._pair_pieces(pep)[0])))
            if self.try_composites(RULE_SET_5, lambda: self.game.piece_at(CENTER) == between) is None:
                raise SolverError("solve5: rule 5 exhausted")
            return True

        # RULE 6 -- both edges are three apart: twist them so they aren't.
        if self.try_composites(RULE_SET_6, lambda: any(self.apart(p) < 3 for p in Pair)) is None:
            raise SolverError("solve5: rule 6 exhausted")
        return True

    def _closer(self, pair: Pair, before: int, moves: tuple[Move, ...], rule: str) -> bool:
        if self.try_composites(moves, lambda: self.edge_pair_distance(pair) < before) is None:
            raise SolverError(f"solve5: rule {rule} exhausted")
        return True
