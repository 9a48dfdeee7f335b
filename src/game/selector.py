"""Knowledge-limited candidate selection for the computer player.

Both the computer's move and its defence against a challenge look only at
what the active difficulty profile lets it "know". A challenge proof is valid
only inside that knowledge, never against the full relation.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Collection, List, Optional, Sequence

from game.domain.difficulty import DifficultyProfile
from game.domain.entities import Actor, Candidate, Movie
from game.store.base_store import KnowledgeStore

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 3
DEFAULT_POOL_SIZE = 5

Chooser = Callable[[Sequence[Candidate]], Candidate]


class CandidateSelector:
    """Picks continuations under a difficulty profile.

    Candidates are ranked by breadth (filmography size for actors, cast size
    for movies) so the computer favours well-connected entities; the final
    pick is uniform among the ``top_k`` best so play is not identical every
    time. Pass ``chooser`` to replace that random policy, e.g. in tests.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        top_k: int = DEFAULT_TOP_K,
        pool_size: int = DEFAULT_POOL_SIZE,
        rng: Optional[random.Random] = None,
        chooser: Optional[Chooser] = None,
    ):
        if top_k < 1:
            raise ValueError("top_k must be at least 1")
        if pool_size < top_k:
            raise ValueError("pool_size must be at least top_k")

        self._store = store
        self._top_k = top_k
        self._pool_size = pool_size
        self._rng = rng or random.Random()
        self._chooser = chooser

    @property
    def top_k(self) -> int:
        return self._top_k

    def candidates(
        self,
        from_entity: Actor | Movie,
        profile: DifficultyProfile,
        exclude_ids: Collection[str],
    ) -> List[Candidate]:
        return self._store.adjacent_candidates(
            from_entity,
            max_billing=profile.max_billing_order,
            min_year=profile.min_year,
            min_connectivity=profile.min_relevance_for_knowledge,
            exclude_ids=exclude_ids,
            limit=self._pool_size,
        )

    def pick_continuation(
        self,
        from_entity: Actor | Movie,
        profile: DifficultyProfile,
        exclude_ids: Collection[str],
    ) -> Optional[Candidate]:
        ranked = self.candidates(from_entity, profile, exclude_ids)
        if not ranked:
            logger.debug("No %s continuation from %s", profile.name, from_entity.id)
            return None

        pool = ranked[: self._top_k]
        if self._chooser is not None:
            return self._chooser(pool)
        return self._rng.choice(pool)

    def prove_continuation_exists(
        self,
        from_entity: Actor | Movie,
        profile: DifficultyProfile,
        exclude_ids: Collection[str],
    ) -> Optional[Candidate]:
        witnesses = self._store.adjacent_candidates(
            from_entity,
            max_billing=profile.max_billing_order,
            min_year=profile.min_year,
            min_connectivity=profile.min_relevance_for_knowledge,
            exclude_ids=exclude_ids,
            limit=1,
        )
        return witnesses[0] if witnesses else None
