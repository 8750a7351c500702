"""Settings for a puzzle session."""

from __future__ import annotations

from dataclasses import dataclass

MIN_SIZE = 2
MAX_SIZE = 10

DEFAULT_COLUMNS = 4
DEFAULT_ROWS = 4
DEFAULT_DELAY = 0.15
DEFAULT_LOOKAHEAD = 3

# Solver steps (or played moves) allowed per board cell before giving up.
STEP_LIMIT_PER_CELL = 1000


@dataclass
class PuzzleConfig:
    """Board dimensions and solver pacing.

    ``lookahead`` is how many moves the solver keeps queued ahead of the
    displayed board, which lets the queue elide back-and-forth pairs.
    """

    columns: int = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS
    seed: int | None = None
    delay: float = DEFAULT_DELAY
    lookahead: int = DEFAULT_LOOKAHEAD
    relocate_hole: bool = True

    def validate(self) -> PuzzleConfig:
        for name in ("columns", "rows"):
            value = getattr(self, name)
            if not MIN_SIZE <= value <= MAX_SIZE:
                raise ValueError(f"{name} must be between {MIN_SIZE} and {MAX_SIZE}, got {value}.")
        if self.delay < 0:
            raise ValueError(f"delay must not be negative, got {self.delay}.")
        if self.lookahead < 0:
            raise ValueError(f"lookahead must not be negative, got {self.lookahead}.")
        return self
