"""Configuration data models using Pydantic."""

from __future__ import annotations

import os
import re
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

DIFFICULTY_NAMES = ("easy", "medium", "hard")

PROFILE_FIELDS = (
    "max_billing_order",
    "min_year",
    "min_relevance_for_knowledge",
    "min_relevance_for_round_start",
    "min_filmography_size_for_round_start",
)


def resolve_env_vars(value: str) -> str:
    pattern = r'\$\{(\w+)(?::([^}]*))?\}'

    def replacer(match):
        var_name = match.group(1)
        default_value = match.group(2) or ""
        return os.environ.get(var_name, default_value)

    return re.sub(pattern, replacer, value)


class StoreConfig(BaseModel):
    backend: str = "sqlite"
    path: str = Field(default="${MOVIE_ACTOR_DB:data/imdb.db}", validate_default=True)

    @field_validator("path", mode="before")
    @classmethod
    def resolve_env(cls, v: Any) -> str:
        if isinstance(v, str):
            return resolve_env_vars(v)
        return v

    @field_validator("backend")
    @classmethod
    def check_backend(cls, v: str) -> str:
        if v not in ("sqlite", "json"):
            raise ValueError(f"Unsupported store backend: {v}")
        return v


class GameSettingsConfig(BaseModel):
    rounds_to_win: int = Field(default=5, ge=1)
    default_difficulty: str = "medium"
    resolver_limit: int = Field(default=5, ge=1)
    candidate_pool_size: int = Field(default=5, ge=1)
    top_k: int = Field(default=3, ge=1)

    @field_validator("default_difficulty")
    @classmethod
    def check_difficulty(cls, v: str) -> str:
        v = v.lower()
        if v not in DIFFICULTY_NAMES:
            raise ValueError(f"Unknown difficulty: {v}")
        return v


class SessionsConfig(BaseModel):
    idle_timeout_seconds: float = Field(default=300, gt=0)
    id_length: int = Field(default=6, ge=1)


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class GameConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    game: GameSettingsConfig = Field(default_factory=GameSettingsConfig)
    # Partial overrides of the canonical difficulty profiles, keyed by name.
    difficulty: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    sessions: SessionsConfig = Field(default_factory=SessionsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @field_validator("difficulty")
    @classmethod
    def check_overrides(cls, v: Dict[str, Dict[str, int]]) -> Dict[str, Dict[str, int]]:
        for name, overrides in v.items():
            if name not in DIFFICULTY_NAMES:
                raise ValueError(f"Unknown difficulty: {name}")
            unknown = set(overrides) - set(PROFILE_FIELDS)
            if unknown:
                raise ValueError(f"Unknown profile fields for {name}: {sorted(unknown)}")
        return v

    def profile_overrides(self, difficulty: str) -> Dict[str, int]:
        return dict(self.difficulty.get(difficulty, {}))
