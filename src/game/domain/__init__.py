"""Domain models for the game system."""

from game.domain.difficulty import (
    DIFFICULTY_PROFILES,
    EASY_PROFILE,
    HARD_PROFILE,
    MEDIUM_PROFILE,
    Difficulty,
    DifficultyProfile,
    get_profile,
)
from game.domain.entities import (
    Actor,
    Candidate,
    CastCredit,
    Credit,
    Entity,
    EntityKind,
    GamePhase,
    Movie,
    Player,
    RoundState,
    SessionState,
)
from game.domain.results import (
    ChallengeResult,
    GameSnapshot,
    MoveOutcome,
    MoveResult,
    RoundEnd,
    RoundEndReason,
    RoundStartResult,
)

__all__ = [
    "DIFFICULTY_PROFILES",
    "EASY_PROFILE",
    "HARD_PROFILE",
    "MEDIUM_PROFILE",
    "Difficulty",
    "DifficultyProfile",
    "get_profile",
    "Actor",
    "Candidate",
    "CastCredit",
    "Credit",
    "Entity",
    "EntityKind",
    "GamePhase",
    "Movie",
    "Player",
    "RoundState",
    "SessionState",
    "ChallengeResult",
    "GameSnapshot",
    "MoveOutcome",
    "MoveResult",
    "RoundEnd",
    "RoundEndReason",
    "RoundStartResult",
]
