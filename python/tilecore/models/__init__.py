from tilecore.models.board import HOLE, Board, Coord, Direction, Extent, Piece
from tilecore.models.moveq import MoveQueue
from tilecore.models.rotation import Rotation

__all__ = [
    "HOLE",
    "Board",
    "Coord",
    "Direction",
    "Extent",
    "MoveQueue",
    "Piece",
    "Rotation",
]
