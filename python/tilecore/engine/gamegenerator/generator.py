"""Generates solved and scrambled puzzle boards."""

from __future__ import annotations

import random

from tilecore.models.board import Board


def new_board(width: int, height: int) -> Board:
    """Return the goal-state board: pieces in order, hole bottom-right."""
    return Board(width, height)


class GameGenerator:
    """Creates solvable puzzles by scrambling the solved state."""

    @staticmethod
    def solved(width: int, height: int) -> Board:
        return new_board(width, height)

    @staticmethod
    def generate(
        width: int,
        height: int,
        rng: random.Random | None = None,
        relocate_hole: bool = True,
    ) -> Board:
        """Return a random *solvable* board of the given size.

        Boards with more than one reachable arrangement are never returned
        already solved.
        """
        rng = rng or random.Random()
        goal = GameGenerator.solved(width, height)
        board = goal.scramble(relocate_hole, rng)

        # Ensure the board is not already solved.  Fewer than three pieces
        # only ever scramble back to the goal unless the hole moves.
        cells = width * height
        varied = cells > 3 or (relocate_hole and cells > 1)
        while varied and board.matches(goal):
            board = goal.scramble(relocate_hole, rng)

        return board
