#!/usr/bin/env python3
"""Klotski solver.

Usage::

    python main.py solve                      # solve the classic layout
    python main.py solve -l board.json -g caocao --max-nodes 100000
    python main.py scramble --steps 60 --seed 7 --json > board.json
    python main.py layout                     # list the classic pieces
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import rich.box
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.gamegenerator import (  # noqa: E402
    MIN_SCRAMBLE_STEPS,
    SCRAMBLE_STEPS,
    GameGenerator,
)
from backend.engine.gamesolver import (  # noqa: E402
    DEFAULT_MAX_NODES,
    ReplaySolver,
    SolveStatus,
    Solver,
    count_piece_moves,
)
from backend.models.board import Move, Piece  # noqa: E402
from backend.models.layouts import (  # noqa: E402
    DEFAULT_GOAL_PIECE_ID,
    classic_pieces,
    load_pieces,
    pieces_to_dicts,
)

console = Console()

_EXIT_CODES = {
    SolveStatus.EXHAUSTED: 1,
    SolveStatus.BUDGET_EXCEEDED: 2,
    SolveStatus.INVALID_LAYOUT: 1,
}


# -- helpers ------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load(layout: Optional[Path]) -> list[Piece]:
    if layout is None:
        return classic_pieces()
    try:
        return load_pieces(layout)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Cannot load layout:[/red] {exc}")
        raise typer.Exit(code=1)


def _pieces_table(pieces: list[Piece], goal_piece_id: str) -> Table:
    table = Table(box=rich.box.ROUNDED, border_style="dim")
    table.add_column("Id", style="bold")
    table.add_column("Name")
    table.add_column("Size", justify="center")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    for p in pieces:
        style = "bold yellow" if p.id == goal_piece_id else None
        table.add_row(p.id, p.name, p.shape, str(p.x), str(p.y), style=style)
    return table


def _moves_table(moves: list[Move]) -> Table:
    table = Table(box=rich.box.SIMPLE, show_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Piece", style="cyan")
    table.add_column("Direction")
    for i, step in enumerate(moves, 1):
        table.add_row(str(i), step.piece_id, step.direction.value)
    return table


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False, help="Klotski sliding block solver.")


@app.command()
def solve(
    layout: Optional[Path] = typer.Option(
        None, "-l", "--layout",
        exists=True, dir_okay=False,
        help="JSON list of pieces. Omit for the classic layout.",
    ),
    goal: str = typer.Option(
        DEFAULT_GOAL_PIECE_ID, "-g", "--goal",
        help="Id of the piece that must reach the exit.",
    ),
    max_nodes: int = typer.Option(
        DEFAULT_MAX_NODES, "--max-nodes",
        min=1, envvar="KLOTSKI_MAX_NODES",
        help="Give up after discovering this many distinct states.",
    ),
    quiet: bool = typer.Option(
        False, "-q", "--quiet",
        help="Print the summary only, not every move.",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging."),
) -> None:
    """Find a shortest solution for a layout."""
    _setup_logging(verbose)
    pieces = _load(layout)

    result = Solver.search(pieces, max_nodes=max_nodes, goal_piece_id=goal)

    if result.path is None:
        messages = {
            SolveStatus.EXHAUSTED: "No solution exists for this layout.",
            SolveStatus.BUDGET_EXCEEDED: (
                f"Gave up after {result.explored} states; raise --max-nodes."
            ),
            SolveStatus.INVALID_LAYOUT: (
                f"The layout is invalid or has no piece {goal!r}."
            ),
        }
        console.print(f"[red]{messages[result.status]}[/red]")
        raise typer.Exit(code=_EXIT_CODES[result.status])

    if not result.path:
        console.print("[green]Already solved![/green]")
        return

    if not quiet:
        console.print(_moves_table(result.path))
    console.print(
        f"[bold green]Solved in {len(result.path)} moves[/bold green] "
        f"({count_piece_moves(result.path)} piece moves, "
        f"{result.explored} states explored)."
    )


@app.command()
def scramble(
    steps: int = typer.Option(
        SCRAMBLE_STEPS, "-n", "--steps",
        min=MIN_SCRAMBLE_STEPS,
        help="Random moves to apply from the solved layout.",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed."),
    as_json: bool = typer.Option(
        False, "--json",
        help="Print the layout as JSON, ready for 'solve --layout'.",
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging."),
) -> None:
    """Generate a layout by scrambling a solved one."""
    _setup_logging(verbose)
    try:
        state = GameGenerator.generate(steps, seed)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(pieces_to_dicts(state.pieces), ensure_ascii=False, indent=2))
        return

    replay = ReplaySolver.solve(state)
    console.print(_pieces_table(state.pieces, state.goal_piece_id))
    console.print(
        f"Known way back: [bold]{len(replay.path or [])}[/bold] moves "
        f"(from {steps} scramble steps)."
    )


@app.command()
def layout(
    path: Optional[Path] = typer.Argument(
        None, exists=True, dir_okay=False,
        help="JSON layout to show. Omit for the classic layout.",
    ),
    goal: str = typer.Option(DEFAULT_GOAL_PIECE_ID, "-g", "--goal"),
) -> None:
    """List the pieces of a layout."""
    pieces = _load(path)
    console.print(_pieces_table(pieces, goal))


if __name__ == "__main__":
    app()
