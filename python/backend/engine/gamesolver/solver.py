"""Klotski solver — breadth-first search over canonical board states.

A configuration is a tuple of top-left cell indices (``y * cols + x``),
one per piece, in the order the pieces were supplied.  Two configurations
that differ only in which of several same-shaped pieces sits where are
the same puzzle position, so the visited / parent / action tables are
keyed by a canonical form:

    (goal_pos, (("1x1", (sorted positions...)), ("1x2", (...)), ...))

The goal piece is tracked on its own; every other piece is grouped by its
``WxH`` shape and the positions inside a group are sorted.  The raw tuple
behind each canonical key is kept in a side table because moves are
generated, and wins tested, against real piece identities.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator, Sequence

from backend.models.board import DEFAULT_BOARD, Board, Direction, Move, Piece
from backend.models.layouts import DEFAULT_GOAL_PIECE_ID

logger = logging.getLogger(__name__)

DEFAULT_MAX_NODES = 300_000

Config = tuple[int, ...]
CanonicalKey = tuple[int, tuple[tuple[str, tuple[int, ...]], ...]]


class SolveStatus(StrEnum):
    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    BUDGET_EXCEEDED = "budget_exceeded"
    INVALID_LAYOUT = "invalid_layout"
    HISTORY_REVERSE = "history_reverse"
    MISSING_START_SOLUTION = "missing_start_solution"


@dataclass
class SolveResult:
    """Outcome of a solve attempt.

    ``path`` is ``None`` unless a solution was found; ``explored`` counts
    the distinct states discovered (or moves returned, for replays).
    """

    path: list[Move] | None
    status: SolveStatus
    explored: int = 0

    @property
    def found(self) -> bool:
        return self.path is not None


# ======================================================================
#  Layout wrapper — piece metadata with precomputed move tables
# ======================================================================

class _Layout:
    __slots__ = ("board", "ids", "sizes", "goal", "groups", "cells", "steps")

    def __init__(self, pieces: Sequence[Piece], goal: int, board: Board) -> None:
        self.board = board
        self.ids = tuple(p.id for p in pieces)
        self.sizes = tuple((p.width, p.height) for p in pieces)
        self.goal = goal

        groups: dict[str, list[int]] = {}
        for i, piece in enumerate(pieces):
            if i != goal:
                groups.setdefault(piece.shape, []).append(i)
        self.groups = tuple((shape, tuple(groups[shape])) for shape in sorted(groups))

        # Per piece: position -> footprint, and position -> legal-in-bounds
        # steps as (direction, next position, cells entered).  Same-shaped
        # pieces share their tables.
        tables: dict[tuple[int, int], tuple[dict, dict]] = {}
        cells = []
        steps = []
        for piece in pieces:
            size = (piece.width, piece.height)
            if size not in tables:
                tables[size] = self._tables(piece.width, piece.height)
            cells.append(tables[size][0])
            steps.append(tables[size][1])
        self.cells = tuple(cells)
        self.steps = tuple(steps)

    def _tables(self, w: int, h: int) -> tuple[dict, dict]:
        board = self.board
        cells: dict[int, frozenset[int]] = {}
        for y in range(board.rows - h + 1):
            for x in range(board.cols - w + 1):
                cells[board.index(x, y)] = frozenset(
                    board.index(cx, cy)
                    for cy in range(y, y + h)
                    for cx in range(x, x + w)
                )

        steps: dict[int, tuple[tuple[Direction, int, frozenset[int]], ...]] = {}
        for pos, footprint in cells.items():
            x, y = board.position(pos)
            out = []
            for direction in Direction:
                dx, dy = direction.delta
                if not board.in_bounds(x + dx, y + dy, w, h):
                    continue
                nxt = board.index(x + dx, y + dy)
                out.append((direction, nxt, cells[nxt] - footprint))
            steps[pos] = tuple(out)
        return cells, steps

    # -- encoding -------------------------------------------------------------

    def key(self, config: Config) -> CanonicalKey:
        return (
            config[self.goal],
            tuple(
                (shape, tuple(sorted(config[i] for i in members)))
                for shape, members in self.groups
            ),
        )

    def is_goal(self, config: Config) -> bool:
        x, y = self.board.position(config[self.goal])
        w, h = self.sizes[self.goal]
        return self.board.is_goal_position(x, y, w, h)

    # -- expansion ------------------------------------------------------------

    def neighbours(self, config: Config) -> Iterator[tuple[int, Direction, Config]]:
        """Yield ``(piece index, direction, successor)`` for every legal move.

        Pieces are visited in supplied order, directions in
        up/down/left/right order.
        """
        occupied: set[int] = set()
        for i, pos in enumerate(config):
            occupied.update(self.cells[i][pos])

        for i, pos in enumerate(config):
            for direction, nxt, entered in self.steps[i][pos]:
                if occupied.isdisjoint(entered):
                    succ = list(config)
                    succ[i] = nxt
                    yield i, direction, tuple(succ)


def _rebuild(
    end: CanonicalKey,
    parents: dict[CanonicalKey, CanonicalKey | None],
    actions: dict[CanonicalKey, Move],
) -> list[Move]:
    path: list[Move] = []
    cursor = end
    while parents[cursor] is not None:
        path.append(actions[cursor])
        cursor = parents[cursor]
    path.reverse()
    return path


def count_piece_moves(path: Sequence[Move]) -> int:
    """Count moves with consecutive slides of the same piece merged.

    This only compresses *path*; a shortest unit-move path is not in general
    a shortest path in merged moves.
    """
    count = 0
    previous: str | None = None
    for step in path:
        if step.piece_id != previous:
            count += 1
            previous = step.piece_id
    return count


# ======================================================================
#  Public entry point
# ======================================================================

class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def search(
        pieces: Sequence[Piece],
        max_nodes: int = DEFAULT_MAX_NODES,
        goal_piece_id: str = DEFAULT_GOAL_PIECE_ID,
        board: Board = DEFAULT_BOARD,
    ) -> SolveResult:
        """Find a shortest move sequence from *pieces* to a winning layout.

        *pieces* is read, never modified.  The result status tells apart a
        proven dead end (``EXHAUSTED``) from giving up once more than
        *max_nodes* canonical states were discovered (``BUDGET_EXCEEDED``).
        """
        pieces = [piece.copy() for piece in pieces]
        try:
            board.validate(pieces)
        except ValueError as exc:
            logger.warning("Refusing to solve an invalid layout: %s", exc)
            return SolveResult(None, SolveStatus.INVALID_LAYOUT)

        goal = next((i for i, p in enumerate(pieces) if p.id == goal_piece_id), None)
        if goal is None:
            logger.warning("Goal piece %r is not on the board.", goal_piece_id)
            return SolveResult(None, SolveStatus.INVALID_LAYOUT)

        layout = _Layout(pieces, goal, board)
        start: Config = tuple(board.index(p.x, p.y) for p in pieces)
        if layout.is_goal(start):
            return SolveResult([], SolveStatus.SOLVED)

        start_key = layout.key(start)
        queue: deque[CanonicalKey] = deque([start_key])
        parents: dict[CanonicalKey, CanonicalKey | None] = {start_key: None}
        actions: dict[CanonicalKey, Move] = {}
        configs: dict[CanonicalKey, Config] = {start_key: start}

        logger.debug("Searching %d pieces, budget %d states.", len(pieces), max_nodes)

        while queue:
            if len(parents) > max_nodes:
                logger.warning(
                    "Search budget exceeded after %d states.", len(parents)
                )
                return SolveResult(None, SolveStatus.BUDGET_EXCEEDED, len(parents))

            key = queue.popleft()
            for i, direction, succ in layout.neighbours(configs[key]):
                succ_key = layout.key(succ)
                if succ_key in parents:
                    continue

                parents[succ_key] = key
                actions[succ_key] = Move(layout.ids[i], direction)
                configs[succ_key] = succ

                if layout.is_goal(succ):
                    path = _rebuild(succ_key, parents, actions)
                    logger.debug(
                        "Solved in %d moves after %d states.", len(path), len(parents)
                    )
                    return SolveResult(path, SolveStatus.SOLVED, len(parents))

                queue.append(succ_key)

        logger.debug("Search space exhausted after %d states.", len(parents))
        return SolveResult(None, SolveStatus.EXHAUSTED, len(parents))

    @staticmethod
    def solve(
        pieces: Sequence[Piece],
        max_nodes: int = DEFAULT_MAX_NODES,
        goal_piece_id: str = DEFAULT_GOAL_PIECE_ID,
        board: Board = DEFAULT_BOARD,
    ) -> list[Move] | None:
        """Return a shortest solution, ``[]`` if already solved, or ``None``.

        ``None`` covers both an unsolvable layout and an exceeded budget;
        use :meth:`search` to tell them apart.
        """
        return Solver.search(pieces, max_nodes, goal_piece_id, board).path

    @staticmethod
    def hint(
        pieces: Sequence[Piece],
        max_nodes: int = DEFAULT_MAX_NODES,
        goal_piece_id: str = DEFAULT_GOAL_PIECE_ID,
        board: Board = DEFAULT_BOARD,
    ) -> Move | None:
        """Return the first move of a shortest solution, or ``None``."""
        moves = Solver.solve(pieces, max_nodes, goal_piece_id, board)
        return moves[0] if moves else None
