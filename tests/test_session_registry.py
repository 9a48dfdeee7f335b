"""Tests for the live session registry."""

import random
import threading

import pytest

from game.session import GameSession
from game.storage.session_registry import SESSION_ID_ALPHABET, GameSessionRegistry


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return GameSessionRegistry(idle_timeout_seconds=300, clock=clock, rng=random.Random(0))


def make_session(store, registry):
    return registry.create(lambda session_id: GameSession(store, session_id=session_id))


class TestSessionIds:
    def test_id_shape(self, store, registry):
        session_id = make_session(store, registry).session_id
        assert len(session_id) == 6
        assert set(session_id) <= set(SESSION_ID_ALPHABET)

    def test_custom_length(self, store, clock):
        registry = GameSessionRegistry(id_length=4, clock=clock)
        assert len(make_session(store, registry).session_id) == 4

    def test_invalid_length(self):
        with pytest.raises(ValueError):
            GameSessionRegistry(id_length=0)

    def test_ids_unique_among_registered(self, store, registry):
        ids = {make_session(store, registry).session_id for _ in range(50)}
        assert len(ids) == 50
        assert len(registry) == 50

    def test_concurrent_create(self, store, clock):
        # Two-letter ids leave 441 slots, so draws collide often.
        registry = GameSessionRegistry(id_length=2, clock=clock)
        errors = []

        def worker():
            try:
                for _ in range(20):
                    make_session(store, registry)
            except ValueError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(registry) == 160

    def test_factory_must_use_given_id(self, store, registry):
        with pytest.raises(ValueError):
            registry.create(lambda session_id: GameSession(store, session_id="other"))
        assert len(registry) == 0


class TestRegistry:
    def test_create_and_get(self, store, registry):
        session = make_session(store, registry)

        assert session.session_id in registry
        assert registry.get(session.session_id) is session
        assert registry.list_session_ids() == [session.session_id]

    def test_add_existing_session(self, store, registry):
        session = GameSession(store, session_id="manual")
        assert registry.add(session) == "manual"
        assert registry.get("manual") is session

    def test_duplicate_add(self, store, registry):
        session = make_session(store, registry)
        with pytest.raises(ValueError):
            registry.add(session)

    def test_get_unknown(self, registry):
        with pytest.raises(KeyError):
            registry.get("zzzzzz")

    def test_remove(self, store, registry):
        session = make_session(store, registry)

        assert registry.remove(session.session_id)
        assert not registry.remove(session.session_id)
        assert session.session_id not in registry


class TestEviction:
    def test_attached_sessions_never_expire(self, store, registry, clock):
        session = make_session(store, registry)

        clock.now += 10_000
        assert registry.evict_expired() == []
        assert session.session_id in registry

    def test_detached_session_expires_after_timeout(self, store, registry, clock):
        session = make_session(store, registry)
        registry.detach(session.session_id)

        clock.now += 299
        assert registry.evict_expired() == []

        clock.now += 1
        assert registry.evict_expired() == [session.session_id]
        assert session.session_id not in registry

    def test_lookup_does_not_cancel_eviction(self, store, registry, clock):
        session = make_session(store, registry)
        registry.detach(session.session_id)

        clock.now += 200
        registry.get(session.session_id)

        clock.now += 100
        assert registry.evict_expired() == [session.session_id]

    def test_reattach_cancels_eviction(self, store, registry, clock):
        session = make_session(store, registry)
        registry.detach(session.session_id)

        clock.now += 200
        assert registry.attach(session.session_id) is session

        clock.now += 200
        assert registry.evict_expired() == []

    def test_detach_unknown_is_noop(self, registry):
        registry.detach("zzzzzz")
        assert len(registry) == 0

    def test_attach_unknown(self, registry):
        with pytest.raises(KeyError):
            registry.attach("zzzzzz")
