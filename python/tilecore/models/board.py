"""Board model for M×N sliding-tile puzzles.

A root ``Board`` owns a dense cell grid plus its inverse, a map from piece
to cell.  ``transform`` creates *views*: shifted, clipped and rotated
windows onto the same storage.  A piece moved through any view moves in
the root and in every other view of that root.

Pieces are ints numbered from 1 in row-major order.  ``HOLE`` (0) marks
the single empty cell.
"""

from __future__ import annotations

import logging
import random
from enum import IntEnum
from itertools import islice
from typing import Iterator, NamedTuple, Sequence

from tilecore.models.rotation import Rotation, inv_rotate, rotate

logger = logging.getLogger(__name__)

Piece = int

HOLE: Piece = 0


class Coord(NamedTuple):
    col: int
    row: int


class Extent(NamedTuple):
    width: int
    height: int


class Direction(IntEnum):
    """Offset from the hole to the piece that slides into it.

    The hole itself travels in this direction.  Values double as quarter
    turns so a direction can be rotated with ``rotated``.
    """

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    def rotated(self, rot: int) -> Direction:
        return Direction((self + rot) % len(Direction))


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


class _Grid:
    """Cell storage shared by a root board and all of its views."""

    __slots__ = ("cols", "rows", "cells", "points")

    def __init__(self, cols: int, rows: int) -> None:
        self.cols = cols
        self.rows = rows
        self.cells: list[Piece] = [HOLE] * (cols * rows)
        self.points: dict[Piece, tuple[int, int]] = {}

    def get(self, col: int, row: int) -> Piece:
        return self.cells[row * self.cols + col]

    def put(self, col: int, row: int, piece: Piece) -> None:
        self.cells[row * self.cols + col] = piece
        self.points[piece] = (col, row)

    def swap(self, a: Piece, b: Piece) -> None:
        if a == b:
            raise ValueError(f"Cannot swap piece {a!r} with itself.")
        try:
            pa = self.points[a]
            pb = self.points[b]
        except KeyError as exc:
            raise ValueError(f"Piece {exc.args[0]!r} is not on the board.") from None
        self.put(*pa, b)
        self.put(*pb, a)


class Board:
    """A rectangular board, or a rotated/clipped view of one."""

    _grid: _Grid
    _base: Coord
    _extent: Extent
    _rot: Rotation

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Invalid board size {width}×{height}.")
        grid = _Grid(width, height)
        k = 0
        for row in range(height):
            for col in range(width):
                k += 1
                grid.put(col, row, k)

        # Hole goes in the last slot.
        if width > 0 and height > 0:
            del grid.points[grid.get(width - 1, height - 1)]
            grid.put(width - 1, height - 1, HOLE)

        self._attach(grid, Coord(0, 0), Extent(width, height), Rotation.ROT0)

    # -- construction helpers -------------------------------------------------

    def _attach(self, grid: _Grid, base: Coord, extent: Extent, rot: Rotation) -> None:
        self._grid = grid
        self._base = base
        self._extent = extent
        self._rot = rot

    @classmethod
    def _view(cls, grid: _Grid, base: Coord, extent: Extent, rot: Rotation) -> Board:
        obj = object.__new__(cls)
        obj._attach(grid, base, extent, rot)
        return obj

    @classmethod
    def from_flat(cls, width: int, height: int, flat: Sequence[Piece]) -> Board:
        """Create a root board from a flat row-major piece list.

        Example::

            Board.from_flat(3, 2, [1, 2, 3, 4, 0, 5])
        """
        if len(flat) != width * height:
            raise ValueError(
                f"Expected {width * height} cells for a {width}×{height} board, "
                f"got {len(flat)}."
            )
        if list(flat).count(HOLE) != 1:
            raise ValueError("A board needs exactly one hole.")
        if len(set(flat)) != len(flat):
            raise ValueError("Pieces must be unique.")

        grid = _Grid(width, height)
        for k, piece in enumerate(flat):
            grid.put(k % width, k // width, piece)
        return cls._view(grid, Coord(0, 0), Extent(width, height), Rotation.ROT0)

    def deep_copy(self) -> Board:
        """Return a new root board holding this view's pieces.

        The copy has its own storage; mutating it never affects this board.
        """
        width = self.width
        grid = _Grid(width, self.height)
        for k, piece in enumerate(self):
            grid.put(k % width, k // width, piece)
        return self._view(grid, Coord(0, 0), self.extent, Rotation.ROT0)

    def transform(
        self,
        origin: tuple[int, int],
        extent: tuple[int, int],
        rotation: int = Rotation.ROT0,
    ) -> Board:
        """Create a shifted, clipped, rotated view sharing this board's storage.

        *origin* and *extent* are given in this view's frame; *rotation* is
        relative to this view.  Raises ``ValueError`` if the window does not
        fit inside this view.
        """
        origin = Coord(*origin)
        extent = Extent(*extent)
        rotation = Rotation(rotation % len(Rotation))

        # Check extents.
        dx, dy = inv_rotate((extent.width - 1, extent.height - 1), rotation)
        far = (origin.col + dx, origin.row + dy)
        if (
            extent.width <= 0
            or extent.height <= 0
            or not self._contains(origin)
            or not self._contains(far)
        ):
            raise ValueError(
                f"Invalid transform: origin {tuple(origin)}, extent "
                f"{extent.width}×{extent.height}, {rotation.name} does not fit "
                f"a {self.width}×{self.height} view."
            )

        bx, by = inv_rotate(origin, self._rot)
        base = Coord(self._base.col + bx, self._base.row + by)
        return self._view(self._grid, base, extent, self._rot.compose(rotation))

    # -- queries --------------------------------------------------------------

    @property
    def extent(self) -> Extent:
        return self._extent

    @property
    def width(self) -> int:
        return self._extent.width

    @property
    def height(self) -> int:
        return self._extent.height

    @property
    def origin(self) -> Coord:
        """Origin of this view in root coordinates."""
        return self._base

    @property
    def rotation(self) -> Rotation:
        return self._rot

    def _contains(self, c: tuple[int, int]) -> bool:
        return 0 <= c[0] < self._extent.width and 0 <= c[1] < self._extent.height

    def _coord(self, k: int) -> Coord:
        """Convert a row-major index into a coordinate."""
        return Coord(k % self.width, k // self.width)

    def location(self, piece: Piece) -> Coord:
        """Return the coordinate of *piece* in this view's frame.

        Raises ``ValueError`` if the piece is not on the board or lies
        outside this view.
        """
        point = self._grid.points.get(piece)
        if point is None:
            raise ValueError(f"Piece {piece!r} is not on the board.")

        local = rotate((point[0] - self._base.col, point[1] - self._base.row), self._rot)
        if not self._contains(local):
            raise ValueError(f"Piece {piece!r} at {local} is outside this view.")
        return Coord(*local)

    def piece_at(self, c: tuple[int, int]) -> Piece:
        """Return the piece at *c*; cells outside this view read as ``HOLE``."""
        if not self._contains(c):
            return HOLE
        x, y = inv_rotate(c, self._rot)
        return self._grid.get(x + self._base.col, y + self._base.row)

    def __iter__(self) -> Iterator[Piece]:
        """Yield this view's pieces in row-major order."""
        for k in range(self.width * self.height):
            yield self.piece_at(self._coord(k))

    def __len__(self) -> int:
        return self.width * self.height

    def rows(self) -> list[list[Piece]]:
        it = iter(self)
        return [list(islice(it, self.width)) for _ in range(self.height)]

    def matches(self, other: Board) -> bool:
        """Check the pieces of this view against the same cells of *other*.

        Cells where *other* holds the hole are not compared.
        """
        if other is self:
            return True
        if other.width < self.width or other.height < self.height:
            raise ValueError(
                f"Cannot match a {self.width}×{self.height} view against a "
                f"smaller {other.width}×{other.height} one."
            )

        for row in range(self.height):
            for col in range(self.width):
                expected = other.piece_at((col, row))
                if expected != HOLE and self.piece_at((col, row)) != expected:
                    return False
        return True

    def delta(self, piece: Piece) -> tuple[int, int]:
        """Column and row distance from the hole to *piece*."""
        p = self.location(piece)
        h = self.location(HOLE)
        return (p.col - h.col, p.row - h.row)

    def can_move(self, piece: Piece) -> bool:
        """True if *piece* shares a row or column with the hole.

        Such a piece can be pushed toward the hole, any pieces in between
        moving along with it.
        """
        if piece == HOLE:
            return False
        dcol, drow = self.delta(piece)
        return dcol == 0 or drow == 0

    # -- moves ----------------------------------------------------------------

    def swap(self, a: Piece, b: Piece) -> None:
        """Exchange the cells of two pieces (either may be the hole)."""
        self._grid.swap(a, b)

    def move(self, piece: Piece) -> Piece:
        """Slide *piece* into the hole.  The piece must be adjacent to it."""
        dcol, drow = self.delta(piece)
        if abs(dcol) + abs(drow) != 1:
            raise ValueError(f"Piece {piece!r} is not adjacent to the hole.")
        self._grid.swap(piece, HOLE)
        return piece

    def n_move_delta(self, dcol: int, drow: int) -> Piece:
        """Return the piece at the given unit offset from the hole.

        ``HOLE`` is returned when that cell lies outside this view.
        """
        if abs(dcol) + abs(drow) != 1:
            raise ValueError(f"Not a unit step: ({dcol}, {drow}).")
        hole = self.location(HOLE)
        return self.piece_at((hole.col + dcol, hole.row + drow))

    def move_delta(self, direction: Direction) -> Piece:
        """Slide the piece lying in *direction* from the hole.

        Returns the piece moved, or ``HOLE`` if there is none (boundary).
        """
        piece = self.n_move_delta(*Direction(direction).delta)
        if piece != HOLE:
            self._grid.swap(piece, HOLE)
        return piece

    def _step_toward(self, target: tuple[int, int]) -> tuple[int, int]:
        # -row first, then col, then +row.  Repeating this for the original
        # hole location backtracks the whole sequence.
        hole = self.location(HOLE)
        dcol = target[0] - hole.col
        drow = target[1] - hole.row
        if drow < 0:
            return (0, -1)
        if dcol != 0:
            return (1 if dcol > 0 else -1, 0)
        if drow > 0:
            return (0, 1)
        raise ValueError(f"The hole is already at {tuple(target)}.")

    def n_move_hole(self, target: tuple[int, int]) -> Piece:
        """Return the piece to move for the hole to step toward *target*."""
        return self.n_move_delta(*self._step_toward(target))

    def move_hole(self, target: tuple[int, int]) -> list[Piece]:
        """Walk the hole to *target*, returning the pieces moved in order."""
        target = Coord(*target)
        if not self._contains(target):
            raise ValueError(f"Hole target {tuple(target)} is outside this view.")
        moved: list[Piece] = []
        while self.location(HOLE) != target:
            moved.append(self.move(self.n_move_hole(target)))
        return moved

    # -- derived boards -------------------------------------------------------

    def scramble(self, relocate_hole: bool = True, rng: random.Random | None = None) -> Board:
        """Return a scrambled copy of this board.

        The copy is always reachable from this board: pieces are shuffled
        with an even number of transpositions while the hole sits in the
        last cell.  Optionally the hole is then walked to a random cell.
        """
        rng = rng or random.Random()
        board = self.deep_copy()
        width, height = board.width, board.height
        count = width * height - 1  # not the hole
        if count < 0:
            return board

        board.move_hole((width - 1, height - 1))

        # For each slot, swap with a remaining slot, including itself.
        swaps = 0
        for n in range(count - 1):
            k = n + rng.randrange(count - n)
            if k != n:
                board.swap(board.piece_at(board._coord(n)), board.piece_at(board._coord(k)))
                swaps += 1

        if swaps % 2:
            board.swap(board.piece_at((0, 0)), board.piece_at(board._coord(1)))

        if relocate_hole and count > 0:
            board.move_hole((rng.randrange(width), rng.randrange(height)))

        return board

    def assign(self, top: Sequence[Piece]) -> Board:
        """Create a solvable goal whose top row starts with *top*.

        The remaining pieces keep their current cells, except that one
        extra exchange is made when needed so the goal differs from this
        board by an even permutation.
        """
        if len(top) > self.width:
            raise ValueError(f"{len(top)} top pieces do not fit a width of {self.width}.")

        board = self.deep_copy()

        # Top pieces are fixed: swap them into place.
        swaps = 0
        for col, piece in enumerate(top):
            target = Coord(col, 0)
            if board.location(piece) != target:
                occupant = board.piece_at(target)
                if occupant == HOLE:
                    raise ValueError("Cannot assign a goal while the hole is in the top row.")
                board.swap(occupant, piece)
                swaps += 1

        if swaps % 2:
            # Scan order is fixed so the same pieces always yield the same goal.
            spare = [p for p in islice(board, len(top), None) if p != HOLE][:2]
            if len(spare) < 2:
                logger.warning(f"assign: no free pieces to fix parity of {list(top)}")
            else:
                board.swap(*spare)

        return board

    # -- display --------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"Board({self.width}×{self.height}, origin={tuple(self._base)}, "
            f"rotation={self._rot.name})"
        )

    def __str__(self) -> str:
        cells = [str(p) if p != HOLE else "." for p in self]
        width = max((len(c) for c in cells), default=1)
        lines = []
        for row in range(self.height):
            part = cells[row * self.width : (row + 1) * self.width]
            lines.append(" ".join(c.rjust(width) for c in part))
        return "\n".join(lines)
