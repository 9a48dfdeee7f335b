"""Game module for the Movie / Actor engine and session management."""

from game.engine import GameEngine
from game.errors import (
    GameConfigurationError,
    GameError,
    IllegalTurnError,
    StoreUnavailableError,
)
from game.domain import (
    Actor,
    Candidate,
    CastCredit,
    ChallengeResult,
    Credit,
    Difficulty,
    DifficultyProfile,
    EntityKind,
    GamePhase,
    GameSnapshot,
    Movie,
    MoveOutcome,
    MoveResult,
    Player,
    RoundEnd,
    RoundEndReason,
    RoundStartResult,
    get_profile,
)
from game.resolver import EntityResolver
from game.round import RoundStateMachine
from game.selector import CandidateSelector
from game.session import GameSession
from game.storage import GameSessionRegistry
from game.store import (
    InMemoryKnowledgeStore,
    KnowledgeStore,
    SearchQuery,
    SqliteKnowledgeStore,
)
from game.validator import Validator

__all__ = [
    "GameEngine",
    "GameConfigurationError",
    "GameError",
    "IllegalTurnError",
    "StoreUnavailableError",
    "Actor",
    "Candidate",
    "CastCredit",
    "ChallengeResult",
    "Credit",
    "Difficulty",
    "DifficultyProfile",
    "EntityKind",
    "GamePhase",
    "GameSnapshot",
    "Movie",
    "MoveOutcome",
    "MoveResult",
    "Player",
    "RoundEnd",
    "RoundEndReason",
    "RoundStartResult",
    "get_profile",
    "EntityResolver",
    "RoundStateMachine",
    "CandidateSelector",
    "GameSession",
    "GameSessionRegistry",
    "InMemoryKnowledgeStore",
    "KnowledgeStore",
    "SearchQuery",
    "SqliteKnowledgeStore",
    "Validator",
]
