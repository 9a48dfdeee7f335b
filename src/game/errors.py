"""Exceptions raised by the game engine.

Recoverable player mistakes (unknown name, no connection, repeated name) are
reported through ``MoveOutcome`` values, not exceptions. Everything here is a
condition the caller has to handle explicitly.
"""


class GameError(Exception):
    """Base class for engine errors."""


class IllegalTurnError(GameError):
    """Raised when the caller drives the state machine out of order."""


class StoreUnavailableError(GameError):
    """Raised when the knowledge store cannot answer a query."""


class GameConfigurationError(GameError):
    """Raised when a round cannot start with the active thresholds."""
