"""Move validation against the unrestricted credit relation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Optional, Sequence

from game.domain.entities import Actor, Movie
from game.domain.results import MoveOutcome
from game.store.base_store import KnowledgeStore


@dataclass
class Validation:
    outcome: MoveOutcome
    entity: Optional[Actor | Movie] = None


class Validator:
    def __init__(self, store: KnowledgeStore):
        self._store = store

    def is_connected(self, actor_id: str, movie_id: str) -> bool:
        return self._store.is_connected(actor_id, movie_id)

    def connects(self, current: Actor | Movie, other: Actor | Movie) -> bool:
        if isinstance(current, Movie) and isinstance(other, Actor):
            return self.is_connected(other.id, current.id)
        if isinstance(current, Actor) and isinstance(other, Movie):
            return self.is_connected(current.id, other.id)
        return False

    def check(
        self,
        current: Actor | Movie,
        resolved: Sequence[Actor | Movie],
        used_ids: Collection[str],
    ) -> Validation:
        """Classify a player's answer given the resolver's ranked matches.

        The first match connected to ``current`` decides the outcome; when none
        connects, the best-ranked match is reported as not connected.
        """
        if not resolved:
            return Validation(MoveOutcome.NOT_FOUND)

        for entity in resolved:
            if not self.connects(current, entity):
                continue
            if entity.id in used_ids:
                return Validation(MoveOutcome.ALREADY_USED, entity)
            return Validation(MoveOutcome.VALID, entity)

        return Validation(MoveOutcome.NOT_CONNECTED, resolved[0])
