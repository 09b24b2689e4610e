from backend.engine.gamesolver.replay import ReplaySolver, compact_path, reverse_moves
from backend.engine.gamesolver.solver import (
    DEFAULT_MAX_NODES,
    SolveResult,
    SolveStatus,
    Solver,
    count_piece_moves,
)

__all__ = [
    "DEFAULT_MAX_NODES",
    "ReplaySolver",
    "SolveResult",
    "SolveStatus",
    "Solver",
    "compact_path",
    "count_piece_moves",
    "reverse_moves",
]
