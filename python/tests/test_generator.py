"""Generator and replay-solver tests."""

from __future__ import annotations

import random

import pytest

from backend.engine.gamegenerator import MIN_SCRAMBLE_STEPS, GameGenerator
from backend.engine.gameplay import GamePlay, create_initial_state, is_solved, move, valid_moves
from backend.engine.gamesolver import ReplaySolver, SolveStatus, compact_path, reverse_moves
from backend.models.board import Direction, Move

A_UP = Move("a", Direction.UP)
A_DOWN = Move("a", Direction.DOWN)
B_LEFT = Move("b", Direction.LEFT)
B_RIGHT = Move("b", Direction.RIGHT)


# -- path helpers -------------------------------------------------------------


def test_reverse_moves() -> None:
    assert reverse_moves([A_UP, B_LEFT]) == [B_RIGHT, A_DOWN]
    assert reverse_moves([]) == []


@pytest.mark.parametrize(
    "moves, expected",
    [
        ([A_UP, A_DOWN, B_LEFT], [B_LEFT]),
        ([A_UP, B_LEFT, B_RIGHT, A_DOWN], []),
        ([A_UP, B_LEFT, A_DOWN], [A_UP, B_LEFT, A_DOWN]),
        ([A_UP, A_UP], [A_UP, A_UP]),
    ],
)
def test_compact_path(moves: list[Move], expected: list[Move]) -> None:
    assert compact_path(moves) == expected


# -- generator ----------------------------------------------------------------


def test_solved_layout_is_solved() -> None:
    assert is_solved(GameGenerator.solved())


def test_scramble_leaves_counters_alone() -> None:
    state = GameGenerator.solved()
    applied = GameGenerator.scramble(state, 25, random.Random(5))

    assert 0 < len(applied) <= 25
    assert state.steps == 0
    assert state.move_log == []
    state.board.validate(state.pieces)
    for prev, step in zip(applied, applied[1:]):
        assert step != prev.inverse()


def test_generate_is_seeded_and_unsolved() -> None:
    first = GameGenerator.generate(60, seed=11)
    second = GameGenerator.generate(60, seed=11)

    assert not is_solved(first)
    assert first.pieces == second.pieces
    assert first.start_to_solved_path == second.start_to_solved_path
    assert first.steps == 0 and first.started_at is None


@pytest.mark.parametrize("steps", [0, 1])
def test_generate_rejects_too_short_scramble(steps: int) -> None:
    with pytest.raises(ValueError, match="at least 2 steps"):
        GameGenerator.generate(steps)


def test_single_step_never_leaves_solved_layout() -> None:
    state = GameGenerator.solved()
    caocao = state.get_piece("caocao")
    occupied = state.board.occupied(state.pieces, ignore="caocao")

    assert not any(state.board.can_move(caocao, d, occupied) for d in Direction)
    assert GameGenerator.generate(MIN_SCRAMBLE_STEPS, seed=0).start_to_solved_path


# -- replay solver ------------------------------------------------------------


def test_replay_requires_known_start_path() -> None:
    result = ReplaySolver.solve(create_initial_state())
    assert result.status is SolveStatus.MISSING_START_SOLUTION
    assert result.path is None


def test_replay_solves_fresh_scramble() -> None:
    state = GameGenerator.generate(80, seed=3)
    result = ReplaySolver.solve(state)

    assert result.status is SolveStatus.HISTORY_REVERSE
    assert result.explored == len(result.path)

    game = GamePlay.from_state(state)
    game.apply(result.path)
    assert game.is_won


def test_replay_undoes_player_moves_first() -> None:
    state = GameGenerator.generate(80, seed=21)
    rng = random.Random(8)
    for _ in range(15):
        candidates = [(p.id, d) for p in state.pieces for d in valid_moves(state, p.id)]
        move(state, *rng.choice(candidates))
        if is_solved(state):
            break

    result = ReplaySolver.solve(state)
    game = GamePlay.from_state(state)
    game.apply(result.path)
    assert game.is_won
