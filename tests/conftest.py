"""Shared fixtures: a small actor/movie graph held in memory."""

import random

import pytest

from game.domain.entities import Actor, Credit, Movie
from game.store.memory_store import InMemoryKnowledgeStore

MOVIES = [
    Movie(id="tt1375666", title="Inception", year=2010, rating_votes=2_500_000),
    Movie(id="tt0120338", title="Titanic", year=1997, rating_votes=1_300_000),
    Movie(id="tt1663202", title="The Revenant", year=2015, rating_votes=850_000),
    Movie(id="tt0993846", title="The Wolf of Wall Street", year=2013, rating_votes=1_600_000),
    Movie(id="tt1130884", title="Shutter Island", year=2010, rating_votes=1_400_000),
    Movie(id="tt0047396", title="Rear Window", year=1954, rating_votes=520_000),
    Movie(id="tt0390384", title="Primer", year=2004, rating_votes=250_000),
    Movie(id="tt0200001", title="Obscure Indie", year=2001, rating_votes=2_000),
]

ACTORS = [
    Actor(id="nm0000138", display_name="Leonardo DiCaprio", birth_year=1974),
    Actor(id="nm0330687", display_name="Joseph Gordon-Levitt", birth_year=1981),
    Actor(id="nm0680983", display_name="Elliot Page", birth_year=1987),
    Actor(id="nm0362766", display_name="Tom Hardy", birth_year=1977),
    Actor(id="nm0913822", display_name="Ken Watanabe", birth_year=1959),
    Actor(id="nm0711110", display_name="Dileep Rao", birth_year=1973),
    Actor(id="nm0000701", display_name="Kate Winslet", birth_year=1975),
    Actor(id="nm1706767", display_name="Jonah Hill", birth_year=1983),
    Actor(id="nm0749263", display_name="Mark Ruffalo", birth_year=1967),
    Actor(id="nm0000071", display_name="James Stewart", birth_year=1908),
    Actor(id="nm0000038", display_name="Grace Kelly", birth_year=1929),
    Actor(id="nm0140948", display_name="Shane Carruth", birth_year=1972),
    Actor(id="nm0838289", display_name="David Sullivan"),
    Actor(id="nm0757855", display_name="Zoë Saldaña", birth_year=1978),
    Actor(id="nm9999999", display_name="Uncredited Extra"),
]

CREDITS = [
    ("tt1375666", "nm0000138", 1),
    ("tt1375666", "nm0330687", 2),
    ("tt1375666", "nm0680983", 3),
    ("tt1375666", "nm0362766", 4),
    ("tt1375666", "nm0913822", 5),
    ("tt1375666", "nm0711110", 12),
    ("tt0120338", "nm0000138", 1),
    ("tt0120338", "nm0000701", 2),
    ("tt1663202", "nm0000138", 1),
    ("tt1663202", "nm0362766", 2),
    ("tt0993846", "nm0000138", 1),
    ("tt0993846", "nm1706767", 2),
    ("tt1130884", "nm0000138", 1),
    ("tt1130884", "nm0749263", 2),
    ("tt0047396", "nm0000071", 1),
    ("tt0047396", "nm0000038", 2),
    ("tt0390384", "nm0140948", 4),
    ("tt0390384", "nm0838289", 5),
    ("tt0200001", "nm0757855", 1),
    ("tt0200001", "nm0330687", 3),
]


def build_store(seed=0):
    return InMemoryKnowledgeStore(
        actors=ACTORS,
        movies=MOVIES,
        credits=[Credit(movie_id=m, actor_id=a, billing=b) for m, a, b in CREDITS],
        rng=random.Random(seed),
    )


@pytest.fixture
def store():
    return build_store()


@pytest.fixture
def inception(store):
    return store.get_movie("tt1375666")


@pytest.fixture
def revenant(store):
    return store.get_movie("tt1663202")


@pytest.fixture
def primer(store):
    return store.get_movie("tt0390384")


@pytest.fixture
def dicaprio(store):
    return store.get_actor("nm0000138")


@pytest.fixture
def hardy(store):
    return store.get_actor("nm0362766")


@pytest.fixture
def winslet(store):
    return store.get_actor("nm0000701")


@pytest.fixture
def graph_data():
    """The sample graph in the JSON layout read by ``InMemoryKnowledgeStore.from_file``."""
    return {
        "actors": [a.model_dump() for a in ACTORS],
        "movies": [m.model_dump() for m in MOVIES],
        "credits": [{"movie_id": m, "actor_id": a, "billing": b} for m, a, b in CREDITS],
    }
