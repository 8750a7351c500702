"""Quarter-turn rotations and the point transforms they induce."""

from __future__ import annotations

from enum import IntEnum

NROT = 4

# Rows of the clockwise rotation matrix for each quarter turn.
_TRANS: tuple[tuple[tuple[int, int], tuple[int, int]], ...] = (
    ((1, 0), (0, 1)),    # ROT0
    ((0, 1), (-1, 0)),   # ROT90
    ((-1, 0), (0, -1)),  # ROT180
    ((0, -1), (1, 0)),   # ROT270
)


class Rotation(IntEnum):
    ROT0 = 0
    ROT90 = 1
    ROT180 = 2
    ROT270 = 3

    def compose(self, other: int) -> Rotation:
        return Rotation((self + other) % NROT)

    def inverse(self) -> Rotation:
        return Rotation((NROT - self) % NROT)


def rotate(point: tuple[int, int], rot: int) -> tuple[int, int]:
    """Rotate *point* clockwise about the origin by *rot* quarter turns."""
    (a, b), (c, d) = _TRANS[rot % NROT]
    x, y = point
    return (x * a + y * b, x * c + y * d)


def inv_rotate(point: tuple[int, int], rot: int) -> tuple[int, int]:
    """Rotate *point* counterclockwise; undoes ``rotate(point, rot)``."""
    return rotate(point, (NROT - rot % NROT) % NROT)
