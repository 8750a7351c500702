"""Undo/redo queue of puzzle moves.

A move is designated by the piece that slides into the hole, so undoing a
move is as simple as repeating it.  The queue is a single list split by a
cursor: entries left of the cursor are the history (oldest first), entries
right of it are pending moves.  ``pop`` advances the cursor, ``pull`` backs
it up.

Two identical moves in a row cancel out.  When pushed with ``elide=True``
such a pair is removed from the pending list as it forms.
"""

from __future__ import annotations

from tilecore.models.board import HOLE, Piece


class MoveQueue:
    """Pending moves plus a history stack, with optional elision."""

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity <= 0:
            raise ValueError(f"Queue capacity must be positive, got {capacity}.")
        self.capacity = capacity
        self._moves: list[Piece] = []
        self._cursor = 0

    def reset(self) -> None:
        """Clear both the pending list and the history stack."""
        self._moves = []
        self._cursor = 0

    def copy(self) -> MoveQueue:
        q = MoveQueue(self.capacity)
        q._moves = self._moves[:]
        q._cursor = self._cursor
        return q

    # -- queries --------------------------------------------------------------

    def pending_size(self) -> int:
        return len(self._moves) - self._cursor

    def history_size(self) -> int:
        return self._cursor

    @property
    def pending(self) -> tuple[Piece, ...]:
        return tuple(self._moves[self._cursor :])

    @property
    def history(self) -> tuple[Piece, ...]:
        return tuple(self._moves[: self._cursor])

    def __len__(self) -> int:
        return len(self._moves)

    def __repr__(self) -> str:
        return f"MoveQueue(history={list(self.history)}, pending={list(self.pending)})"

    # -- mutation -------------------------------------------------------------

    def clear_pending(self) -> None:
        del self._moves[self._cursor :]

    def clear_history(self) -> None:
        del self._moves[: self._cursor]
        self._cursor = 0

    def push(self, piece: Piece, elide: bool = False) -> None:
        """Append a move to the pending list.

        With *elide*, a move equal to the pending tail removes that tail
        instead of being appended.  If the queue is at capacity the oldest
        history entry is dropped to make room.
        """
        if piece == HOLE:
            raise ValueError("The hole cannot be pushed as a move.")

        if elide and self.pending_size() > 0 and self._moves[-1] == piece:
            self._moves.pop()
            return

        if self.capacity is not None and len(self._moves) >= self.capacity:
            if self._cursor == 0:
                raise OverflowError(f"Move queue is full ({self.capacity} pending moves).")
            del self._moves[0]  # shrink history stack
            self._cursor -= 1

        self._moves.append(piece)

    def dequeue(self, piece: Piece | None = None) -> Piece:
        """Remove a move from the tail of the pending list.

        If *piece* is given and is not the tail, it must have been elided
        earlier, so it is pushed back instead.  Either way *piece* is
        returned.  Without *piece* the tail is removed unconditionally.
        """
        if piece is not None and (self.pending_size() == 0 or self._moves[-1] != piece):
            self.push(piece)
            return piece

        if self.pending_size() == 0:
            raise IndexError("dequeue from an empty pending list")
        return self._moves.pop()

    def pop(self) -> Piece | None:
        """Take the next pending move, moving it onto the history stack."""
        if self._cursor >= len(self._moves):
            return None  # nothing pending
        piece = self._moves[self._cursor]
        self._cursor += 1
        return piece

    def pull(self) -> Piece | None:
        """Take the last move off the history stack and make it pending again."""
        if self._cursor == 0:
            return None  # no history
        self._cursor -= 1
        return self._moves[self._cursor]
