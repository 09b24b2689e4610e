"""Built-in starting layouts and loading layouts from plain data."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

from backend.models.board import DEFAULT_BOARD, Board, Piece

DEFAULT_GOAL_PIECE_ID = "caocao"

# "Hengdao Lima" (横刀立马): the classic opening, two empty cells at the bottom.
# Stored as plain (id, name, width, height, x, y) rows; use classic_pieces().
CLASSIC_LAYOUT: tuple[tuple[str, str, int, int, int, int], ...] = (
    ("caocao", "曹操", 2, 2, 1, 0),
    ("zhangfei", "张飞", 1, 2, 0, 0),
    ("zhaoyun", "赵云", 1, 2, 3, 0),
    ("machao", "马超", 1, 2, 0, 2),
    ("huangzhong", "黄忠", 1, 2, 3, 2),
    ("guanyu", "关羽", 2, 1, 1, 2),
    ("soldier1", "兵一", 1, 1, 1, 3),
    ("soldier2", "兵二", 1, 1, 2, 3),
    ("soldier3", "兵三", 1, 1, 0, 4),
    ("soldier4", "兵四", 1, 1, 3, 4),
)

# Same pieces with Cao Cao already standing in the exit.
SOLVED_POSITIONS: dict[str, tuple[int, int]] = {
    "caocao": (1, 3),
    "zhangfei": (0, 0),
    "zhaoyun": (3, 0),
    "machao": (0, 2),
    "huangzhong": (3, 2),
    "guanyu": (1, 2),
    "soldier1": (1, 0),
    "soldier2": (2, 0),
    "soldier3": (0, 4),
    "soldier4": (3, 4),
}


def classic_pieces() -> list[Piece]:
    """Return a fresh, mutable copy of the classic layout."""
    return [Piece(*row) for row in CLASSIC_LAYOUT]


def solved_pieces() -> list[Piece]:
    """Return the classic pieces arranged in a solved configuration."""
    pieces = classic_pieces()
    for piece in pieces:
        piece.x, piece.y = SOLVED_POSITIONS[piece.id]
    return pieces


def pieces_from_dicts(
    items: Iterable[dict[str, Any]], board: Board = DEFAULT_BOARD
) -> list[Piece]:
    """Build and validate pieces from ``{"id", "width", "height", "x", "y"}`` dicts.

    ``name`` is optional and defaults to the id. Raises ``ValueError`` on
    missing keys, non-integer geometry, or an illegal layout.
    """
    pieces: list[Piece] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"Piece #{i} must be an object, got {type(item).__name__}.")
        missing = [k for k in ("id", "width", "height", "x", "y") if k not in item]
        if missing:
            raise ValueError(f"Piece #{i} is missing {', '.join(missing)}.")
        geometry = [item[k] for k in ("width", "height", "x", "y")]
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in geometry):
            raise ValueError(f"Piece {item['id']!r} geometry must be integers.")
        piece_id = str(item["id"])
        pieces.append(
            Piece(
                id=piece_id,
                name=str(item.get("name", piece_id)),
                width=item["width"],
                height=item["height"],
                x=item["x"],
                y=item["y"],
            )
        )
    board.validate(pieces)
    return pieces


def pieces_to_dicts(pieces: Iterable[Piece]) -> list[dict[str, Any]]:
    return [
        {
            "id": p.id,
            "name": p.name,
            "width": p.width,
            "height": p.height,
            "x": p.x,
            "y": p.y,
        }
        for p in pieces
    ]


def load_pieces(path: Path, board: Board = DEFAULT_BOARD) -> list[Piece]:
    """Load a layout from a JSON file holding a list of piece objects."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of pieces.")
    return pieces_from_dicts(data, board)
