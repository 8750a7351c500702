"""Rich terminal frontend -- coloured board, solver playback, undo/redo.

Keys: arrows / WASD slide a tile, N plays the solver's next move, V
toggles automatic solving, B backs up one move, R scrambles, Q quits.
"""

from __future__ import annotations

import logging
import time

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tileterm.input_handler import get_key, get_key_timeout
from tilecore.config import STEP_LIMIT_PER_CELL, PuzzleConfig
from tilecore.engine.gameplay import GamePlay
from tilecore.engine.gamesolver import SolverError
from tilecore.models.board import HOLE, Board, Direction

logger = logging.getLogger(__name__)

console = Console()

_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}

_UNSOLVABLE = "[red]This configuration cannot be solved by this algorithm.[/red]"


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _render_board(board: Board, goal: Board) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    width = len(str(len(board) - 1))
    table = Table(
        show_header=False,
        show_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(board.width):
        table.add_column(width=width + 1, justify="center")

    for r, row in enumerate(board.rows()):
        cells: list[str] = []
        for c, piece in enumerate(row):
            if piece == HOLE:
                cells.append("[dim]·[/dim]")
            elif goal.piece_at((c, r)) == piece:
                cells.append(f"[bold green]{piece:>{width}}[/bold green]")
            else:
                cells.append(f"[bold white]{piece:>{width}}[/bold white]")
        table.add_row(*cells)

    return table


def _stats(game: GamePlay) -> Text:
    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.state.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(game.state.elapsed_time), style="bold yellow")
    stats.append("    History: ", style="dim")
    stats.append(str(game.queue.history_size()), style="bold cyan")
    stats.append("    Queued: ", style="dim")
    stats.append(str(game.queue.pending_size()), style="bold cyan")
    return stats


def _controls(auto: bool) -> Text:
    controls = Text()
    for key, label in (
        ("↑↓←→/WASD", "move"),
        ("N", "next"),
        ("V", "pause" if auto else "solve"),
        ("B", "back"),
        ("R", "scramble"),
        ("Q", "quit"),
    ):
        controls.append(f"  {key}", style="bold cyan")
        controls.append(f" {label} ", style="dim")
    return controls


# -- screens ------------------------------------------------------------------


def _draw(game: GamePlay, status: str = "", auto: bool = False) -> None:
    console.clear()

    if game.is_won:
        title = f"[bold green]Solved  {game.columns}×{game.rows}[/bold green]"
        border = "bold green"
    else:
        title = f"[bold cyan]Sliding Puzzle  {game.columns}×{game.rows}[/bold cyan]"
        border = "yellow" if auto else "bright_blue"

    panel = Panel(
        Align.center(_render_board(game.board, game.goal)),
        title=title,
        border_style=border,
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(_stats(game)))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(_controls(auto)))


def _draw_help() -> None:
    console.clear()
    table = Table(box=rich.box.ROUNDED, border_style="dim", show_header=False)
    table.add_column(style="bold cyan", justify="right")
    table.add_column()
    table.add_row("↑↓←→ / WASD", "slide the tile next to the hole")
    table.add_row("N", "play the solver's next move")
    table.add_row("V", "start / stop automatic solving")
    table.add_row("B", "back up one move (undo)")
    table.add_row("R", "scramble a new puzzle")
    table.add_row("Q", "quit")
    console.print()
    console.print(Align.center(Panel(table, title="[bold]HELP[/bold]", border_style="bright_blue")))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


# -- game loop ----------------------------------------------------------------


def _step(game: GamePlay) -> str:
    """Play one solver move and return a status line."""
    try:
        piece = game.move_forward()
    except SolverError:
        return _UNSOLVABLE
    if game.is_won:
        game.state.pause()
        return "[bold green]Solved![/bold green]"
    return f"[cyan]Solver:[/cyan] moved [bold]{piece}[/bold]" if piece is not None else ""


def run(config: PuzzleConfig) -> None:
    """Launch the interactive terminal puzzle."""
    game = GamePlay.from_config(config)
    status = ""
    auto = False

    while True:
        _draw(game, status, auto)
        status = ""

        if auto:
            key = get_key_timeout(config.delay)
            if key is None:
                status = _step(game)
                auto = not game.is_won and status != _UNSOLVABLE
                continue
        else:
            key = get_key()

        if key in _DIRECTIONS:
            auto = False
            if game.move(_DIRECTIONS[key]):
                game.state.resume()
        elif key == "next":
            status = _step(game)
        elif key == "solve":
            auto = not auto and not game.is_won
        elif key == "back":
            auto = False
            if game.move_backward() is None:
                status = "[yellow]Nothing to undo.[/yellow]"
        elif key == "scramble":
            auto = False
            game.scramble()
            status = "[yellow]Scrambled![/yellow]"
        elif key == "help":
            _draw_help()
        elif key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return


# -- headless -----------------------------------------------------------------


def run_headless(config: PuzzleConfig) -> bool:
    """Scramble, solve to completion, and print a summary.  True if solved."""
    game = GamePlay.from_config(config)
    start = game.board.deep_copy()
    began = time.perf_counter()
    limit = STEP_LIMIT_PER_CELL * len(game.board)
    status = "[bold green]solved[/bold green]"
    try:
        for _ in range(limit):
            if game.is_won:
                break
            game.move_forward()
        else:
            if not game.is_won:
                status = f"[red]unsolved: gave up after {limit} moves[/red]"
                logger.warning(f"headless run gave up after {limit} moves")
    except SolverError:
        status = _UNSOLVABLE
    elapsed = time.perf_counter() - began

    summary = Table(box=rich.box.ROUNDED, border_style="dim", show_header=False)
    summary.add_column(style="dim", justify="right")
    summary.add_column(style="bold yellow")
    summary.add_row("board", f"{game.columns}×{game.rows}")
    summary.add_row("seed", str(config.seed))
    summary.add_row("moves", str(game.state.moves))
    summary.add_row("from solver", str(game.state.solver_moves))
    summary.add_row("solve time", f"{elapsed:.3f}s")
    summary.add_row("result", status)

    console.print(
        Align.center(
            Group(
                Align.center(Text("Scrambled", style="bold cyan")),
                Align.center(_render_board(start, game.goal)),
                Align.center(Text("Final", style="bold cyan")),
                Align.center(_render_board(game.board, game.goal)),
                Align.center(summary),
            )
        )
    )
    logger.debug(f"headless run: {game.state.moves} moves in {elapsed:.3f}s")
    return game.is_won
