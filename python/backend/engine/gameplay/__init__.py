from backend.engine.gameplay.game import (
    GamePlay,
    create_initial_state,
    is_solved,
    move,
    valid_moves,
)

__all__ = ["GamePlay", "create_initial_state", "is_solved", "move", "valid_moves"]
