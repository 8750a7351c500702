from tilecore.engine.gamesolver.base import AbstractSolver, Move, SolverError
from tilecore.engine.gamesolver.solver import Solver, hint, is_solvable, solve, solve_next
from tilecore.engine.gamesolver.solver5 import Solver5

__all__ = [
    "AbstractSolver",
    "Move",
    "Solver",
    "Solver5",
    "SolverError",
    "hint",
    "is_solvable",
    "solve",
    "solve_next",
]
