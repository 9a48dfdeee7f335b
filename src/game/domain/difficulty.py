"""Difficulty profiles.

A profile controls what the computer "knows": which credits and movies it may
pick from and which entities are prominent enough to open a round. Human
answers are always validated against the full relation, so a profile never
affects correctness, only selection.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, text: str) -> Optional["Difficulty"]:
        """Map loose user wording ("simple", "2", "tough") onto a difficulty."""
        lower = text.lower().strip()
        if not lower:
            return None

        if (
            re.search(r"\b(easy|simple|beginner|casual|relaxed|chill|laid\s*back)\b", lower)
            or lower == "1"
            or re.fullmatch(r"one|first", lower)
        ):
            return cls.EASY

        if (
            re.search(r"\b(hard|difficult|tough|challenging|expert|intense|brutal)\b", lower)
            or lower == "3"
            or re.fullmatch(r"three|third", lower)
        ):
            return cls.HARD

        if (
            re.search(r"\b(medium|normal|moderate|regular|standard|average|middle)\b", lower)
            or lower == "2"
            or re.fullmatch(r"two|second", lower)
        ):
            return cls.MEDIUM

        return None

    @classmethod
    def coerce(cls, value: "Difficulty | str") -> "Difficulty":
        """Exact name first, then loose wording via ``parse``."""
        try:
            return cls(value)
        except ValueError:
            parsed = cls.parse(value) if isinstance(value, str) else None
        if parsed is None:
            raise ValueError(f"Unknown difficulty: {value}")
        return parsed


class DifficultyProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    max_billing_order: int = Field(ge=1)
    min_year: int
    min_relevance_for_knowledge: int = Field(ge=0)
    min_relevance_for_round_start: int = Field(ge=0)
    min_filmography_size_for_round_start: int = Field(ge=1)

    def with_overrides(self, **overrides: int) -> "DifficultyProfile":
        data = self.model_dump()
        data.update(overrides)
        return DifficultyProfile(**data)


# Easy: modern blockbusters and leading stars only.
EASY_PROFILE = DifficultyProfile(
    name=Difficulty.EASY.value,
    max_billing_order=3,
    min_year=1980,
    min_relevance_for_knowledge=100_000,
    min_relevance_for_round_start=200_000,
    min_filmography_size_for_round_start=15,
)

# Medium: popular movies back to 1960, main cast.
MEDIUM_PROFILE = DifficultyProfile(
    name=Difficulty.MEDIUM.value,
    max_billing_order=10,
    min_year=1960,
    min_relevance_for_knowledge=10_000,
    min_relevance_for_round_start=50_000,
    min_filmography_size_for_round_start=8,
)

# Hard: nearly everything, entire cast.
HARD_PROFILE = DifficultyProfile(
    name=Difficulty.HARD.value,
    max_billing_order=999,
    min_year=1900,
    min_relevance_for_knowledge=1_000,
    min_relevance_for_round_start=5_000,
    min_filmography_size_for_round_start=3,
)

DIFFICULTY_PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: EASY_PROFILE,
    Difficulty.MEDIUM: MEDIUM_PROFILE,
    Difficulty.HARD: HARD_PROFILE,
}


def get_profile(difficulty: Difficulty | str) -> DifficultyProfile:
    return DIFFICULTY_PROFILES[Difficulty.coerce(difficulty)]
