"""Result objects returned by the game session."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from game.domain.entities import Entity, EntityKind, GamePhase, Player


class MoveOutcome(str, Enum):
    VALID = "valid"
    NOT_FOUND = "not_found"
    NOT_CONNECTED = "not_connected"
    ALREADY_USED = "already_used"
    GAVE_UP = "gave_up"

    @property
    def is_retry(self) -> bool:
        """True for outcomes where the same player simply tries again."""
        return self in (MoveOutcome.NOT_FOUND, MoveOutcome.NOT_CONNECTED, MoveOutcome.ALREADY_USED)


class RoundEndReason(str, Enum):
    GAVE_UP = "gave_up"
    CHALLENGE_UPHELD = "challenge_upheld"
    CHALLENGE_REFUTED = "challenge_refuted"


class RoundEnd(BaseModel):
    model_config = ConfigDict(frozen=True)

    round_number: int
    winner: Player
    reason: RoundEndReason
    scores: Dict[Player, int]
    proof: Optional[Entity] = None
    game_winner: Optional[Player] = None

    @property
    def game_over(self) -> bool:
        return self.game_winner is not None


class RoundStartResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    round_number: int
    entity: Entity
    kind: EntityKind
    first_player: Player = Player.HUMAN
    message: str = ""


class MoveResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    player: Player
    outcome: MoveOutcome
    entity: Optional[Entity] = None
    query: Optional[str] = None
    round_end: Optional[RoundEnd] = None
    message: str = ""

    @property
    def success(self) -> bool:
        return self.outcome == MoveOutcome.VALID

    @property
    def found(self) -> bool:
        return self.outcome != MoveOutcome.NOT_FOUND


class ChallengeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    round_winner: Player
    proof: Optional[Entity] = None
    round_end: RoundEnd
    message: str = ""


class GameSnapshot(BaseModel):
    """Read-only view of a session, safe to serialise for display."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    difficulty: Optional[str] = None
    phase: GamePhase
    round_number: int
    rounds_to_win: int
    turn_owner: Optional[Player] = None
    current_entity: Optional[Entity] = None
    current_kind: Optional[EntityKind] = None
    scores: Dict[Player, int]
    winner: Optional[Player] = None
    used_actor_ids: List[str]
    used_movie_ids: List[str]
    last_move_message: Optional[str] = None
