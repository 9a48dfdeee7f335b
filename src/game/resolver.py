"""Entity resolution from free-text player input.

Input is tried against the store's fuzzy index with progressively looser
query variants; the first variant that returns anything wins. When no
variant matches, a case-insensitive substring search is used instead.
"""

from __future__ import annotations

import logging
import re
from typing import List

from game.domain.entities import Actor, EntityKind, Movie
from game.store.base_store import KnowledgeStore, SearchQuery

logger = logging.getLogger(__name__)

# Trigram indexes cannot match anything shorter than three characters.
MIN_TOKEN_LENGTH = 3

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_input(text: str) -> str:
    """Collapse whitespace, keeping punctuation for the phrase query."""
    return _WHITESPACE.sub(" ", text).strip()


def strip_punctuation(text: str) -> str:
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub("", text)).strip()


def normalize_for_substring(text: str) -> str:
    return strip_punctuation(text.lower())


def build_query_variants(text: str) -> List[SearchQuery]:
    """Fuzzy-search variants for ``text``, most specific first."""
    normalized = normalize_input(text)
    if not normalized:
        return []

    variants: List[SearchQuery] = []

    def add(query: SearchQuery) -> None:
        if query not in variants:
            variants.append(query)

    forms = [normalized]
    bare = strip_punctuation(normalized)
    if bare and bare != normalized:
        forms.append(bare)

    for form in forms:
        add(SearchQuery.phrase(form))

    for form in forms:
        words = [w for w in form.split(" ") if len(w) >= MIN_TOKEN_LENGTH]
        if len(words) > 1:
            add(SearchQuery.all_of(*words))
        elif len(words) == 1:
            add(SearchQuery.phrase(words[0]))

    return variants


class EntityResolver:
    def __init__(self, store: KnowledgeStore, default_limit: int = 5):
        self._store = store
        self._default_limit = default_limit

    def resolve(self, kind: EntityKind | str, text: str, limit: int | None = None) -> List[Actor | Movie]:
        kind = EntityKind(kind)
        if limit is None:
            limit = self._default_limit
        if limit <= 0:
            return []

        normalized = normalize_input(text)
        if not normalized:
            return []

        for query in build_query_variants(normalized):
            if kind == EntityKind.ACTOR:
                hits = self._store.fuzzy_search_actors(query, limit)
            else:
                hits = self._store.fuzzy_search_movies(query, limit)
            if hits:
                logger.debug("Fuzzy %s search %s matched %d", kind.value, query.terms, len(hits))
                return self._rank(hits)[:limit]

        substring = normalize_for_substring(normalized)
        if not substring:
            return []

        if kind == EntityKind.ACTOR:
            hits = self._store.like_search_actors(substring, limit)
        else:
            hits = self._store.like_search_movies(substring, limit)
        logger.debug("Substring %s search %r matched %d", kind.value, substring, len(hits))
        return self._rank(hits)[:limit]

    @staticmethod
    def _rank(hits: List[Actor | Movie]) -> List[Actor | Movie]:
        return sorted(hits, key=lambda e: e.popularity, reverse=True)
