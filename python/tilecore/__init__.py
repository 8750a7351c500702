"""Sliding-tile puzzle engine for M×N boards."""

from tilecore.engine.gamegenerator import GameGenerator, new_board
from tilecore.engine.gameplay import GamePlay
from tilecore.engine.gamesolver import SolverError, hint, is_solvable, solve, solve_next
from tilecore.models import HOLE, Board, Coord, Direction, Extent, MoveQueue, Rotation

__all__ = [
    "HOLE",
    "Board",
    "Coord",
    "Direction",
    "Extent",
    "GameGenerator",
    "GamePlay",
    "MoveQueue",
    "Rotation",
    "SolverError",
    "hint",
    "is_solvable",
    "new_board",
    "solve",
    "solve_next",
]
