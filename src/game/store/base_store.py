"""Abstract base class for knowledge stores.

The engine never talks to a database directly. Everything it needs from the
actor/movie relation goes through this interface: approximate and substring
search, adjacency queries with billing/year/popularity filters, an
unrestricted connectivity check and random picks for round openings.
"""

from __future__ import annotations

import unicodedata
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Collection, List, Optional, Tuple

from game.domain.entities import Actor, Candidate, CastCredit, Movie


def fold_diacritics(text: str) -> str:
    """Strip combining marks so "Zoë" and "zoe" compare equal."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


@dataclass(frozen=True)
class SearchQuery:
    """A fuzzy-search request; every term must match the name."""

    terms: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.terms or not all(term.strip() for term in self.terms):
            raise ValueError("SearchQuery needs at least one non-empty term")

    @classmethod
    def phrase(cls, text: str) -> "SearchQuery":
        return cls((text,))

    @classmethod
    def all_of(cls, *terms: str) -> "SearchQuery":
        return cls(tuple(terms))

    @property
    def is_phrase(self) -> bool:
        return len(self.terms) == 1


class KnowledgeStore(ABC):
    @abstractmethod
    def fuzzy_search_actors(self, query: SearchQuery, limit: int) -> List[Actor]:
        pass

    @abstractmethod
    def fuzzy_search_movies(self, query: SearchQuery, limit: int) -> List[Movie]:
        pass

    @abstractmethod
    def like_search_actors(self, text: str, limit: int) -> List[Actor]:
        pass

    @abstractmethod
    def like_search_movies(self, text: str, limit: int) -> List[Movie]:
        pass

    @abstractmethod
    def actors_for_movie(self, movie_id: str, max_billing: int) -> List[CastCredit]:
        pass

    @abstractmethod
    def movies_for_actor(self, actor_id: str, max_billing: int) -> List[CastCredit]:
        pass

    @abstractmethod
    def is_connected(self, actor_id: str, movie_id: str) -> bool:
        pass

    @abstractmethod
    def random_actor(
        self,
        min_connectivity: int,
        min_year: int,
        max_billing: int,
        min_filmography_size: int,
    ) -> Optional[Actor]:
        pass

    @abstractmethod
    def random_movie(self, min_connectivity: int, min_year: int) -> Optional[Movie]:
        pass

    @abstractmethod
    def adjacent_candidates(
        self,
        from_entity: Actor | Movie,
        max_billing: int,
        min_year: int,
        min_connectivity: int,
        exclude_ids: Collection[str] = (),
        limit: Optional[int] = None,
    ) -> List[Candidate]:
        pass

    def close(self) -> None:
        pass

    def __enter__(self) -> "KnowledgeStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
