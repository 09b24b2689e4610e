from backend.models.board import DEFAULT_BOARD, Board, Direction, Move, Piece
from backend.models.layouts import (
    CLASSIC_LAYOUT,
    DEFAULT_GOAL_PIECE_ID,
    classic_pieces,
    load_pieces,
    pieces_from_dicts,
    pieces_to_dicts,
    solved_pieces,
)

__all__ = [
    "Board",
    "CLASSIC_LAYOUT",
    "DEFAULT_BOARD",
    "DEFAULT_GOAL_PIECE_ID",
    "Direction",
    "Move",
    "Piece",
    "classic_pieces",
    "load_pieces",
    "pieces_from_dicts",
    "pieces_to_dicts",
    "solved_pieces",
]
