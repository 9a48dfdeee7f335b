"""Storage module for live game sessions."""

from game.storage.session_registry import (
    SESSION_ID_ALPHABET,
    GameSessionRegistry,
)

__all__ = [
    "SESSION_ID_ALPHABET",
    "GameSessionRegistry",
]
