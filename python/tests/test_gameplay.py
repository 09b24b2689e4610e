"""Gameplay tests — move legality, counters, timestamps, and the win check."""

from __future__ import annotations

import random

import pytest

from backend.engine.gameplay import (
    GamePlay,
    create_initial_state,
    is_solved,
    move,
    valid_moves,
)
from backend.models.board import Direction, Move, Piece
from backend.models.layouts import CLASSIC_LAYOUT, classic_pieces, solved_pieces


# -- helpers ------------------------------------------------------------------


def _positions(state) -> dict[str, tuple[int, int]]:
    return {p.id: (p.x, p.y) for p in state.pieces}


def _lone_caocao(x: int, y: int) -> list[Piece]:
    return [Piece("caocao", "曹操", 2, 2, x, y)]


# -- creation -----------------------------------------------------------------


def test_initial_state_defaults_to_classic_layout() -> None:
    state = create_initial_state()

    assert state.goal_piece_id == "caocao"
    assert state.pieces == [Piece(*row) for row in CLASSIC_LAYOUT]
    assert state.steps == 0
    assert state.started_at is None and state.won_at is None


def test_initial_state_copies_supplied_pieces() -> None:
    pieces = classic_pieces()
    state = create_initial_state("caocao", pieces)

    assert move(state, "soldier1", Direction.DOWN)
    assert pieces[6].y == 3


# -- solved check -------------------------------------------------------------


def test_classic_layout_is_not_solved() -> None:
    assert not is_solved(create_initial_state())


def test_goal_at_exit_is_solved() -> None:
    state = create_initial_state("caocao", solved_pieces())
    assert is_solved(state)


def test_goal_wider_than_exit_is_solved_from_inside_it() -> None:
    wide = create_initial_state("bar", [Piece("bar", "bar", 3, 1, 0, 4)])
    assert not is_solved(wide)

    assert move(wide, "bar", Direction.RIGHT)
    assert is_solved(wide)
    assert wide.won_at is not None
    assert is_solved(wide)  # no hidden state


def test_one_wide_goal_may_sit_in_either_exit_column() -> None:
    pieces = [Piece("g", "g", 1, 1, 2, 4), Piece("b", "b", 1, 1, 0, 0)]
    assert is_solved(create_initial_state("g", pieces))

    pieces[0].x = 3
    assert not is_solved(create_initial_state("g", pieces))


def test_missing_goal_piece_is_never_solved() -> None:
    assert not is_solved(create_initial_state("nobody", solved_pieces()))


# -- valid moves --------------------------------------------------------------


@pytest.mark.parametrize(
    "piece_id, expected",
    [
        ("caocao", []),
        ("soldier1", [Direction.DOWN]),
        ("soldier2", [Direction.DOWN]),
        ("soldier3", [Direction.RIGHT]),
        ("soldier4", [Direction.LEFT]),
        ("guanyu", []),
        ("nobody", []),
    ],
)
def test_valid_moves_on_classic_layout(piece_id: str, expected: list[Direction]) -> None:
    assert valid_moves(create_initial_state(), piece_id) == expected


# -- move ---------------------------------------------------------------------


def test_blocked_move_is_rejected_without_side_effects() -> None:
    state = create_initial_state()
    before = _positions(state)

    assert move(state, "caocao", "down") is False
    assert state.steps == 0
    assert state.started_at is None
    assert _positions(state) == before


@pytest.mark.parametrize(
    "piece_id, direction",
    [("nobody", "down"), ("soldier1", "diagonal"), ("soldier1", "up"), ("soldier3", "left")],
)
def test_invalid_moves_return_false(piece_id: str, direction: str) -> None:
    state = create_initial_state()
    assert move(state, piece_id, direction) is False
    assert state.steps == 0
    assert state.move_log == []


def test_move_accepts_strings_and_enums() -> None:
    state = create_initial_state()
    assert move(state, "soldier1", "down")
    assert move(state, "soldier1", Direction.UP)
    assert state.steps == 2


def test_timestamps_are_set_once() -> None:
    state = create_initial_state("caocao", _lone_caocao(1, 2))

    assert move(state, "caocao", Direction.DOWN)
    assert is_solved(state)
    started, won = state.started_at, state.won_at
    assert started is not None and won is not None

    assert move(state, "caocao", Direction.UP)
    assert move(state, "caocao", Direction.DOWN)
    assert state.started_at == started
    assert state.won_at == won
    assert state.steps == 3


def test_move_log_cancels_immediate_reversal() -> None:
    state = create_initial_state()
    move(state, "soldier1", "down")
    move(state, "soldier1", "up")
    assert state.move_log == []

    move(state, "soldier1", "down")
    move(state, "soldier2", "down")
    assert state.move_log == [
        Move("soldier1", Direction.DOWN),
        Move("soldier2", Direction.DOWN),
    ]


def test_random_walk_keeps_layout_legal_and_moves_reversible() -> None:
    rng = random.Random(1234)
    state = create_initial_state()

    for _ in range(300):
        candidates = [
            (p.id, d) for p in state.pieces for d in valid_moves(state, p.id)
        ]
        piece_id, direction = rng.choice(candidates)
        before = _positions(state)

        assert move(state, piece_id, direction)
        state.board.validate(state.pieces)

        assert move(state, piece_id, direction.opposite)
        assert _positions(state) == before

        assert move(state, piece_id, direction)


# -- session ------------------------------------------------------------------


def test_gameplay_apply_stops_at_illegal_move() -> None:
    game = GamePlay()
    applied = game.apply(
        [
            Move("soldier1", Direction.DOWN),
            Move("caocao", Direction.DOWN),
            Move("soldier2", Direction.DOWN),
        ]
    )
    assert applied == 1
    assert game.state.steps == 1


def test_gameplay_auto_solve_wins() -> None:
    game = GamePlay("caocao", _lone_caocao(1, 0))
    result = game.auto_solve()

    assert result.path == [Move("caocao", Direction.DOWN)] * 3
    assert game.is_won
    assert game.state.steps == 3


def test_gameplay_hint() -> None:
    assert GamePlay("caocao", _lone_caocao(0, 3)).hint() == Move("caocao", Direction.RIGHT)
    assert GamePlay("caocao", solved_pieces()).hint() is None
