"""Search-free solver for scrambled games.

A game produced by :class:`~backend.engine.gamegenerator.GameGenerator`
knows a path from its starting layout back to the solved one.  Undoing the
player's moves and then following that path always wins, so no search is
needed.  The result is usually far from optimal.
"""

from __future__ import annotations

from typing import Iterable

from backend.engine.gamesolver.solver import SolveResult, SolveStatus
from backend.engine.gamestate import PuzzleState
from backend.models.board import Move


def reverse_moves(moves: Iterable[Move]) -> list[Move]:
    """Return the moves that undo *moves*, last one first."""
    return [step.inverse() for step in reversed(list(moves))]


def compact_path(moves: Iterable[Move]) -> list[Move]:
    """Drop adjacent move / undo pairs, repeatedly."""
    result: list[Move] = []
    for step in moves:
        if result and result[-1] == step.inverse():
            result.pop()
            continue
        result.append(step)
    return result


class ReplaySolver:
    """Stateless — all methods are static."""

    @staticmethod
    def solve(state: PuzzleState) -> SolveResult:
        if state.start_to_solved_path is None:
            return SolveResult(None, SolveStatus.MISSING_START_SOLUTION)

        path = compact_path(
            reverse_moves(state.move_log) + list(state.start_to_solved_path)
        )
        return SolveResult(path, SolveStatus.HISTORY_REVERSE, len(path))
