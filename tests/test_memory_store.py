"""Tests for InMemoryKnowledgeStore."""

import json
import random
import shutil
import tempfile
from pathlib import Path

import pytest

from game.domain.entities import Actor, Credit, Movie
from game.errors import StoreUnavailableError
from game.store.base_store import SearchQuery, fold_diacritics
from game.store.memory_store import InMemoryKnowledgeStore


@pytest.fixture
def temp_dir():
    dir_path = Path(tempfile.mkdtemp())
    yield dir_path
    shutil.rmtree(dir_path, ignore_errors=True)


class TestSearchQuery:
    def test_phrase(self):
        query = SearchQuery.phrase("Tom Hardy")
        assert query.terms == ("Tom Hardy",)
        assert query.is_phrase

    def test_all_of(self):
        query = SearchQuery.all_of("Tom", "Hardy")
        assert query.terms == ("Tom", "Hardy")
        assert not query.is_phrase

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            SearchQuery(())
        with pytest.raises(ValueError):
            SearchQuery.phrase("  ")

    def test_fold_diacritics(self):
        assert fold_diacritics("Zoë Saldaña") == "Zoe Saldana"
        assert fold_diacritics("Amélie") == "Amelie"


class TestConstruction:
    def test_connectivity_derived_from_credits(self, store):
        assert store.get_actor("nm0000138").filmography_size == 5
        assert store.get_movie("tt1375666").cast_size == 6
        assert store.get_actor("nm9999999").filmography_size == 0

    def test_unknown_credit_rejected(self):
        with pytest.raises(ValueError):
            InMemoryKnowledgeStore(
                actors=[Actor(id="a1", display_name="A")],
                movies=[],
                credits=[Credit(movie_id="m1", actor_id="a1", billing=1)],
            )

    def test_duplicate_credit_keeps_best_billing(self):
        store = InMemoryKnowledgeStore(
            actors=[Actor(id="a1", display_name="A")],
            movies=[Movie(id="m1", title="M", year=2000)],
            credits=[
                Credit(movie_id="m1", actor_id="a1", billing=7),
                Credit(movie_id="m1", actor_id="a1", billing=2),
            ],
        )
        assert [c.billing for c in store.actors_for_movie("m1", 10)] == [2]
        assert store.get_actor("a1").filmography_size == 1

    def test_from_file(self, temp_dir, graph_data):
        path = temp_dir / "graph.json"
        path.write_text(json.dumps(graph_data), encoding="utf-8")

        store = InMemoryKnowledgeStore.from_file(path)

        assert store.actor_count == 15
        assert store.movie_count == 8
        assert store.is_connected("nm0362766", "tt1663202")

    def test_from_missing_file(self, temp_dir):
        with pytest.raises(StoreUnavailableError):
            InMemoryKnowledgeStore.from_file(temp_dir / "missing.json")


class TestSearch:
    def test_fuzzy_actor_search(self, store):
        hits = store.fuzzy_search_actors(SearchQuery.phrase("caprio"), 5)
        assert [a.id for a in hits] == ["nm0000138"]

    def test_fuzzy_all_terms_required(self, store):
        assert store.fuzzy_search_actors(SearchQuery.all_of("Tom", "Kelly"), 5) == []

    def test_fuzzy_movie_search_ranked_by_votes(self, store):
        hits = store.fuzzy_search_movies(SearchQuery.phrase("in"), 10)
        votes = [m.rating_votes for m in hits]
        assert votes == sorted(votes, reverse=True)
        assert hits[0].id == "tt1375666"

    def test_like_search_limit(self, store):
        hits = store.like_search_movies("the", 1)
        assert [m.id for m in hits] == ["tt0993846"]

    def test_like_search_actors_skips_uncredited(self, store):
        assert store.like_search_actors("extra", 5) == []


class TestAdjacency:
    def test_actors_for_movie_by_billing(self, store):
        cast = store.actors_for_movie("tt1375666", 3)
        assert [(c.entity.id, c.billing) for c in cast] == [
            ("nm0000138", 1),
            ("nm0330687", 2),
            ("nm0680983", 3),
        ]

    def test_movies_for_actor(self, store):
        movies = store.movies_for_actor("nm0362766", 999)
        assert [c.entity.id for c in movies] == ["tt1375666", "tt1663202"]
        assert store.movies_for_actor("nm0362766", 3)[0].entity.id == "tt1663202"

    def test_is_connected(self, store):
        assert store.is_connected("nm0711110", "tt1375666")
        assert not store.is_connected("nm0000701", "tt1375666")
        assert not store.is_connected("nm0000701", "tt_unknown")

    def test_adjacent_limit(self, store, inception):
        ranked = store.adjacent_candidates(inception, 999, 1900, 0, limit=2)
        assert [c.id for c in ranked] == ["nm0000138", "nm0330687"]


class TestRandomPicks:
    def test_random_movie_thresholds(self):
        for seed in range(10):
            store = InMemoryKnowledgeStore(
                actors=[],
                movies=[
                    Movie(id="old", title="Old", year=1950, rating_votes=900_000),
                    Movie(id="new", title="New", year=2010, rating_votes=900_000),
                    Movie(id="small", title="Small", year=2010, rating_votes=10),
                ],
                credits=[],
                rng=random.Random(seed),
            )
            assert store.random_movie(1000, 1980).id == "new"

    def test_random_movie_none(self, store):
        assert store.random_movie(10_000_000, 1900) is None

    def test_random_actor_filmography_threshold(self, store):
        assert store.random_actor(1000, 1900, 999, 5).id == "nm0000138"
        assert store.random_actor(1000, 1900, 999, 6) is None

    def test_random_actor_counts_only_known_movies(self, store):
        # Rear Window predates 1960, leaving James Stewart no qualifying credits.
        picks = {store.random_actor(1000, 1960, 999, 1).id for _ in range(50)}
        assert "nm0000071" not in picks
