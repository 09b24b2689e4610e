"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

import time

from backend.models.board import DEFAULT_BOARD, Board, Move, Piece


class PuzzleState:
    """Holds the pieces, goal, move counter, timestamps, and move log.

    Owned by a single caller; the solver only ever reads copies of
    ``pieces``.
    """

    def __init__(
        self,
        pieces: list[Piece],
        goal_piece_id: str,
        board: Board = DEFAULT_BOARD,
    ) -> None:
        self.pieces = pieces
        self.goal_piece_id = goal_piece_id
        self.board = board
        self.steps: int = 0
        self.started_at: float | None = None
        self.won_at: float | None = None
        self.move_log: list[Move] = []
        self.start_to_solved_path: list[Move] | None = None

    # -- lookup ---------------------------------------------------------------

    def get_piece(self, piece_id: str) -> Piece | None:
        for piece in self.pieces:
            if piece.id == piece_id:
                return piece
        return None

    def snapshot(self) -> list[Piece]:
        """Return an independent copy of the current pieces."""
        return [piece.copy() for piece in self.pieces]

    # -- bookkeeping ----------------------------------------------------------

    def record_move(self, move: Move, solved: bool) -> None:
        """Update counters, timestamps and the log after an accepted move."""
        self.steps += 1
        now = time.time()
        if self.started_at is None:
            self.started_at = now
        if solved and self.won_at is None:
            self.won_at = now

        # An immediate reversal cancels the previous entry.
        if self.move_log and self.move_log[-1] == move.inverse():
            self.move_log.pop()
        else:
            self.move_log.append(move)

    def reset_counters(self) -> None:
        self.steps = 0
        self.started_at = None
        self.won_at = None
        self.move_log = []

    @property
    def elapsed_time(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.won_at if self.won_at is not None else time.time()
        return end - self.started_at
