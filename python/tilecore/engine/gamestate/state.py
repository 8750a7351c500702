"""Counters and clock for a puzzle session."""

from __future__ import annotations

import time

from tilecore.models.board import Board, Piece


class GameState:
    """The displayed board plus what has been done to it.

    ``moves`` counts every slide applied to the board; ``solver_moves`` and
    ``undos`` break out the ones played from the queue by ``move_forward``
    and the ones made by backing up.  The clock runs from construction
    until paused.
    """

    def __init__(self, board: Board) -> None:
        self.board = board
        self.moves = 0
        self.solver_moves = 0
        self.undos = 0
        self.last_move: Piece | None = None
        self._banked = 0.0
        self._since: float | None = time.monotonic()

    # -- clock ----------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._since is not None

    @property
    def elapsed_time(self) -> float:
        if self._since is None:
            return self._banked
        return self._banked + time.monotonic() - self._since

    def pause(self) -> None:
        if self._since is not None:
            self._banked += time.monotonic() - self._since
            self._since = None

    def resume(self) -> None:
        if self._since is None:
            self._since = time.monotonic()

    # -- moves ----------------------------------------------------------------

    def record(self, piece: Piece, solver: bool = False, undo: bool = False) -> None:
        self.moves += 1
        self.last_move = piece
        if solver:
            self.solver_moves += 1
        if undo:
            self.undos += 1
