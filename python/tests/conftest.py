from __future__ import annotations

import random
from typing import Iterable

import pytest

from tilecore.models.board import Board, Piece


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def replay(board: Board, moves: Iterable[Piece]) -> Board:
    """Apply *moves* to a copy of *board*; every move must be legal."""
    work = board.deep_copy()
    for i, piece in enumerate(moves):
        try:
            work.move(piece)
        except ValueError as exc:
            raise AssertionError(f"Move {i} ({piece}) was invalid:\n{work}") from exc
    return work
