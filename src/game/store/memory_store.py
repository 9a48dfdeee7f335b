"""In-memory knowledge store.

Holds the whole relation in Python dictionaries. Suitable for small datasets
loaded from JSON and for exercising the engine without a database. Filters
and ranking mirror the SQLite store.
"""

from __future__ import annotations

import json
import logging
import random
from collections import defaultdict
from pathlib import Path
from typing import Collection, Dict, Iterable, List, Optional

from game.domain.entities import Actor, Candidate, CastCredit, Credit, Movie
from game.errors import StoreUnavailableError
from game.store.base_store import KnowledgeStore, SearchQuery, fold_diacritics

logger = logging.getLogger(__name__)


def _fold(text: str) -> str:
    return fold_diacritics(text).lower()


class InMemoryKnowledgeStore(KnowledgeStore):
    def __init__(
        self,
        actors: Iterable[Actor],
        movies: Iterable[Movie],
        credits: Iterable[Credit],
        rng: Optional[random.Random] = None,
    ):
        self._rng = rng or random.Random()
        self._actors: Dict[str, Actor] = {}
        self._movies: Dict[str, Movie] = {}
        self._credits_by_movie: Dict[str, Dict[str, int]] = defaultdict(dict)
        self._credits_by_actor: Dict[str, Dict[str, int]] = defaultdict(dict)

        raw_movies = {movie.id: movie for movie in movies}
        raw_actors = {actor.id: actor for actor in actors}

        for credit in credits:
            if credit.movie_id not in raw_movies or credit.actor_id not in raw_actors:
                raise ValueError(
                    f"Credit references unknown entity: {credit.actor_id} -> {credit.movie_id}"
                )
            previous = self._credits_by_movie[credit.movie_id].get(credit.actor_id)
            billing = credit.billing if previous is None else min(previous, credit.billing)
            self._credits_by_movie[credit.movie_id][credit.actor_id] = billing
            self._credits_by_actor[credit.actor_id][credit.movie_id] = billing

        # Connectivity is derived from the credits so rankings stay consistent.
        for movie_id, movie in raw_movies.items():
            self._movies[movie_id] = movie.model_copy(
                update={"cast_size": len(self._credits_by_movie.get(movie_id, {}))}
            )
        for actor_id, actor in raw_actors.items():
            self._actors[actor_id] = actor.model_copy(
                update={"filmography_size": len(self._credits_by_actor.get(actor_id, {}))}
            )

        logger.info(
            "In-memory store loaded: %d actors, %d movies",
            len(self._actors),
            len(self._movies),
        )

    @classmethod
    def from_file(cls, path: str | Path, rng: Optional[random.Random] = None) -> "InMemoryKnowledgeStore":
        """Load ``{"actors": [...], "movies": [...], "credits": [...]}`` JSON."""
        path = Path(path)
        if not path.exists():
            raise StoreUnavailableError(f"Knowledge store file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls(
            actors=[Actor.model_validate(a) for a in data.get("actors", [])],
            movies=[Movie.model_validate(m) for m in data.get("movies", [])],
            credits=[Credit.model_validate(c) for c in data.get("credits", [])],
            rng=rng,
        )

    @property
    def actor_count(self) -> int:
        return len(self._actors)

    @property
    def movie_count(self) -> int:
        return len(self._movies)

    def get_actor(self, actor_id: str) -> Actor:
        return self._actors[actor_id]

    def get_movie(self, movie_id: str) -> Movie:
        return self._movies[movie_id]

    def _matches(self, name: str, query: SearchQuery) -> bool:
        folded = _fold(name)
        return all(_fold(term) in folded for term in query.terms)

    def fuzzy_search_actors(self, query: SearchQuery, limit: int) -> List[Actor]:
        hits = [
            actor for actor in self._actors.values()
            if actor.filmography_size > 0 and self._matches(actor.display_name, query)
        ]
        hits.sort(key=lambda a: a.filmography_size, reverse=True)
        return hits[:limit]

    def fuzzy_search_movies(self, query: SearchQuery, limit: int) -> List[Movie]:
        hits = [movie for movie in self._movies.values() if self._matches(movie.title, query)]
        hits.sort(key=lambda m: m.rating_votes, reverse=True)
        return hits[:limit]

    def like_search_actors(self, text: str, limit: int) -> List[Actor]:
        needle = text.lower()
        hits = [
            actor for actor in self._actors.values()
            if actor.filmography_size > 0 and needle in actor.display_name.lower()
        ]
        hits.sort(key=lambda a: a.filmography_size, reverse=True)
        return hits[:limit]

    def like_search_movies(self, text: str, limit: int) -> List[Movie]:
        needle = text.lower()
        hits = [movie for movie in self._movies.values() if needle in movie.title.lower()]
        hits.sort(key=lambda m: m.rating_votes, reverse=True)
        return hits[:limit]

    def actors_for_movie(self, movie_id: str, max_billing: int) -> List[CastCredit]:
        cast = [
            CastCredit(entity=self._actors[actor_id], billing=billing)
            for actor_id, billing in self._credits_by_movie.get(movie_id, {}).items()
            if billing <= max_billing
        ]
        cast.sort(key=lambda c: c.billing)
        return cast

    def movies_for_actor(self, actor_id: str, max_billing: int) -> List[CastCredit]:
        movies = [
            CastCredit(entity=self._movies[movie_id], billing=billing)
            for movie_id, billing in self._credits_by_actor.get(actor_id, {}).items()
            if billing <= max_billing
        ]
        movies.sort(key=lambda c: c.entity.rating_votes, reverse=True)
        return movies

    def is_connected(self, actor_id: str, movie_id: str) -> bool:
        return actor_id in self._credits_by_movie.get(movie_id, {})

    def random_actor(
        self,
        min_connectivity: int,
        min_year: int,
        max_billing: int,
        min_filmography_size: int,
    ) -> Optional[Actor]:
        eligible = []
        for actor_id, credits in self._credits_by_actor.items():
            known = [
                movie_id for movie_id, billing in credits.items()
                if billing <= max_billing and self._movie_is_known(movie_id, min_year, min_connectivity)
            ]
            if len(known) >= min_filmography_size:
                eligible.append(self._actors[actor_id])

        if not eligible:
            return None
        eligible.sort(key=lambda a: a.id)
        return self._rng.choice(eligible)

    def random_movie(self, min_connectivity: int, min_year: int) -> Optional[Movie]:
        eligible = sorted(
            (m for m in self._movies.values() if self._movie_is_known(m.id, min_year, min_connectivity)),
            key=lambda m: m.id,
        )
        if not eligible:
            return None
        return self._rng.choice(eligible)

    def _movie_is_known(self, movie_id: str, min_year: int, min_connectivity: int) -> bool:
        movie = self._movies[movie_id]
        return (
            movie.year is not None
            and movie.year >= min_year
            and movie.rating_votes >= min_connectivity
        )

    def adjacent_candidates(
        self,
        from_entity: Actor | Movie,
        max_billing: int,
        min_year: int,
        min_connectivity: int,
        exclude_ids: Collection[str] = (),
        limit: Optional[int] = None,
    ) -> List[Candidate]:
        excluded = set(exclude_ids)
        candidates: List[Candidate] = []

        if isinstance(from_entity, Movie):
            for actor_id, billing in self._credits_by_movie.get(from_entity.id, {}).items():
                if billing > max_billing or actor_id in excluded:
                    continue
                actor = self._actors[actor_id]
                candidates.append(
                    Candidate(entity=actor, billing=billing, breadth=actor.filmography_size)
                )
            candidates.sort(key=lambda c: (-c.breadth, c.billing, c.entity.id))
        else:
            for movie_id, billing in self._credits_by_actor.get(from_entity.id, {}).items():
                if billing > max_billing or movie_id in excluded:
                    continue
                if not self._movie_is_known(movie_id, min_year, min_connectivity):
                    continue
                movie = self._movies[movie_id]
                candidates.append(
                    Candidate(entity=movie, billing=billing, breadth=movie.cast_size)
                )
            candidates.sort(
                key=lambda c: (-c.breadth, -c.entity.rating_votes, c.entity.id)
            )

        if limit is not None:
            return candidates[:limit]
        return candidates
