"""Domain entities for the Movie / Actor game.

This module defines the nodes and edges of the credit relation and the
mutable state owned by the round state machine:
- Actor / Movie: the two kinds of graph entities
- Credit: an actor credited in a movie at a billing position
- CastCredit / Candidate: adjacency results returned by the knowledge store
- RoundState / SessionState: per-round and per-game state
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(str, Enum):
    ACTOR = "actor"
    MOVIE = "movie"

    @property
    def other(self) -> "EntityKind":
        return EntityKind.MOVIE if self == EntityKind.ACTOR else EntityKind.ACTOR


class Player(str, Enum):
    HUMAN = "human"
    COMPUTER = "computer"

    @property
    def opponent(self) -> "Player":
        return Player.COMPUTER if self == Player.HUMAN else Player.HUMAN


class GamePhase(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    CHALLENGE_PENDING = "challenge_pending"
    ROUND_OVER = "round_over"
    GAME_OVER = "game_over"


class Actor(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["actor"] = "actor"
    id: str
    display_name: str
    birth_year: Optional[int] = None
    filmography_size: int = 0

    @property
    def name(self) -> str:
        return self.display_name

    @property
    def label(self) -> str:
        return self.display_name

    @property
    def popularity(self) -> int:
        return self.filmography_size


class Movie(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["movie"] = "movie"
    id: str
    title: str
    year: Optional[int] = None
    rating_votes: int = 0
    cast_size: int = 0

    @property
    def name(self) -> str:
        return self.title

    @property
    def label(self) -> str:
        if self.year:
            return f'"{self.title}" ({self.year})'
        return f'"{self.title}"'

    @property
    def popularity(self) -> int:
        return self.rating_votes


Entity = Annotated[Union[Actor, Movie], Field(discriminator="kind")]


class Credit(BaseModel):
    model_config = ConfigDict(frozen=True)

    movie_id: str
    actor_id: str
    billing: int


class CastCredit(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity: Entity
    billing: int


class Candidate(BaseModel):
    """An adjacent entity the computer may name, with its ranking breadth."""

    model_config = ConfigDict(frozen=True)

    entity: Entity
    billing: int
    breadth: int = 0

    @property
    def id(self) -> str:
        return self.entity.id


class RoundState(BaseModel):
    current_entity: Optional[Entity] = None
    current_kind: Optional[EntityKind] = None
    turn_owner: Optional[Player] = None
    used_actor_ids: Set[str] = Field(default_factory=set)
    used_movie_ids: Set[str] = Field(default_factory=set)

    @property
    def used_ids(self) -> Set[str]:
        return self.used_actor_ids | self.used_movie_ids

    def is_used(self, entity_id: str) -> bool:
        return entity_id in self.used_actor_ids or entity_id in self.used_movie_ids

    def mark_used(self, entity: Union[Actor, Movie]) -> None:
        if entity.kind == EntityKind.ACTOR:
            self.used_actor_ids.add(entity.id)
        else:
            self.used_movie_ids.add(entity.id)

    def reset(self) -> None:
        self.current_entity = None
        self.current_kind = None
        self.turn_owner = None
        self.used_actor_ids.clear()
        self.used_movie_ids.clear()


class SessionState(BaseModel):
    round_number: int = 0
    scores: Dict[Player, int] = Field(
        default_factory=lambda: {Player.HUMAN: 0, Player.COMPUTER: 0}
    )
    phase: GamePhase = GamePhase.IDLE
    winner: Optional[Player] = None

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER
