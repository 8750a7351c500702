#!/usr/bin/env python3
"""Sliding Tile Puzzle.

Usage::

    python main.py                 # 4×4 in the Rich terminal
    python main.py -c 5 -r 3       # 5 columns, 3 rows
    python main.py --auto --seed 7 # scramble, solve, print a summary
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tilecore.config import (  # noqa: E402
    DEFAULT_COLUMNS,
    DEFAULT_DELAY,
    DEFAULT_LOOKAHEAD,
    DEFAULT_ROWS,
    MAX_SIZE,
    MIN_SIZE,
    PuzzleConfig,
)


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    columns: int = typer.Option(
        DEFAULT_COLUMNS, "-c", "--columns",
        min=MIN_SIZE, max=MAX_SIZE,
        help=f"Board width ({MIN_SIZE}-{MAX_SIZE}).",
    ),
    rows: int = typer.Option(
        DEFAULT_ROWS, "-r", "--rows",
        min=MIN_SIZE, max=MAX_SIZE,
        help=f"Board height ({MIN_SIZE}-{MAX_SIZE}).",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Random seed for scrambling and the solver's random walk.",
    ),
    delay: float = typer.Option(
        DEFAULT_DELAY, "--delay",
        min=0.0,
        help="Seconds between moves while auto-solving.",
    ),
    lookahead: int = typer.Option(
        DEFAULT_LOOKAHEAD, "--lookahead",
        min=0,
        help="Moves the solver keeps queued ahead of the board.",
    ),
    auto: bool = typer.Option(
        False, "--auto",
        help="Scramble and solve without interaction, then print a summary.",
    ),
    verbose: int = typer.Option(
        0, "-v", "--verbose",
        count=True,
        help="Increase log output (-v info, -vv debug).",
    ),
) -> None:
    """Sliding Tile Puzzle."""
    _configure_logging(verbose)

    config = PuzzleConfig(
        columns=columns,
        rows=rows,
        seed=seed,
        delay=delay,
        lookahead=lookahead,
    )

    from tileterm import app as frontend

    if auto:
        if not frontend.run_headless(config):
            raise typer.Exit(code=1)
        return

    frontend.run(config)


if __name__ == "__main__":
    app()
