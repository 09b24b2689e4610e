"""Generates scrambled games that know their own way back."""

from __future__ import annotations

import logging
import random

from backend.engine.gameplay.game import create_initial_state, is_solved
from backend.engine.gamesolver.replay import reverse_moves
from backend.engine.gamestate import PuzzleState
from backend.models.board import Direction, Move
from backend.models.layouts import DEFAULT_GOAL_PIECE_ID, solved_pieces

logger = logging.getLogger(__name__)

SCRAMBLE_STEPS = 140
# Cao Cao cannot move out of the solved layout, so one step never unsolves it.
MIN_SCRAMBLE_STEPS = 2
MAX_ATTEMPTS = 1000


class GameGenerator:
    """Creates puzzles by random walks away from a solved layout."""

    @staticmethod
    def solved() -> PuzzleState:
        """Return a fresh game with Cao Cao already in the exit."""
        return create_initial_state(DEFAULT_GOAL_PIECE_ID, solved_pieces())

    @staticmethod
    def scramble(
        state: PuzzleState, steps: int, rng: random.Random | None = None
    ) -> list[Move]:
        """Apply up to *steps* random legal moves to *state* in-place.

        Never undoes the previous move directly.  Counters, timestamps and
        the move log are not touched.  Returns the moves applied.
        """
        rng = rng or random.Random()
        board = state.board
        applied: list[Move] = []
        prev: Move | None = None

        for _ in range(steps):
            candidates: list[Move] = []
            for piece in state.pieces:
                occupied = board.occupied(state.pieces, ignore=piece.id)
                for direction in Direction:
                    step = Move(piece.id, direction)
                    if prev is not None and step == prev.inverse():
                        continue
                    if board.can_move(piece, direction, occupied):
                        candidates.append(step)
            if not candidates:
                break

            step = rng.choice(candidates)
            piece = state.get_piece(step.piece_id)
            dx, dy = step.direction.delta
            piece.x += dx
            piece.y += dy
            applied.append(step)
            prev = step

        return applied

    @staticmethod
    def generate(steps: int = SCRAMBLE_STEPS, seed: int | None = None) -> PuzzleState:
        """Return a scrambled, unsolved game with ``start_to_solved_path`` set."""
        if steps < MIN_SCRAMBLE_STEPS:
            raise ValueError(
                f"Scramble needs at least {MIN_SCRAMBLE_STEPS} steps, got {steps}."
            )
        rng = random.Random(seed)
        for _ in range(MAX_ATTEMPTS):
            state = GameGenerator.solved()
            scramble = GameGenerator.scramble(state, steps, rng)
            if not is_solved(state):
                break
            logger.debug("Scramble of %d moves ended solved; retrying.", len(scramble))
        else:
            raise ValueError(
                f"No unsolved layout reached in {MAX_ATTEMPTS} scrambles of {steps} steps."
            )

        state.start_to_solved_path = reverse_moves(scramble)
        state.reset_counters()
        return state
