from backend.engine.gamegenerator.generator import (
    MIN_SCRAMBLE_STEPS,
    SCRAMBLE_STEPS,
    GameGenerator,
)

__all__ = ["GameGenerator", "MIN_SCRAMBLE_STEPS", "SCRAMBLE_STEPS"]
