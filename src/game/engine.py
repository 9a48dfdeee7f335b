"""Game Engine for wiring configuration, the knowledge store and sessions."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import List, Optional

from config import ConfigLoader, GameConfig
from game.domain.difficulty import Difficulty, DifficultyProfile, get_profile
from game.selector import CandidateSelector
from game.session import GameSession
from game.storage.session_registry import GameSessionRegistry
from game.store.base_store import KnowledgeStore
from game.store.memory_store import InMemoryKnowledgeStore
from game.store.sqlite_store import SqliteKnowledgeStore

logger = logging.getLogger(__name__)


def open_store(config: GameConfig, base_dir: Path) -> KnowledgeStore:
    path = Path(config.store.path)
    if not path.is_absolute():
        path = base_dir / path

    if config.store.backend == "json":
        return InMemoryKnowledgeStore.from_file(path)
    return SqliteKnowledgeStore(path)


def resolve_profile(
    config: GameConfig, difficulty: Difficulty | str | None = None
) -> DifficultyProfile:
    """Canonical profile for ``difficulty`` with the config's overrides applied."""
    if difficulty is None:
        difficulty = config.game.default_difficulty
    difficulty = Difficulty.coerce(difficulty)

    profile = get_profile(difficulty)
    overrides = config.profile_overrides(difficulty.value)
    if overrides:
        profile = profile.with_overrides(**overrides)
    return profile


def list_profiles(config: GameConfig) -> List[DifficultyProfile]:
    return [resolve_profile(config, difficulty) for difficulty in Difficulty]


class GameEngine:
    def __init__(
        self,
        config_dir: Optional[Path] = None,
        base_dir: Optional[Path] = None,
        store: Optional[KnowledgeStore] = None,
    ):
        self._config_loader = ConfigLoader(config_dir)
        self._game_config: GameConfig = self._config_loader.load_game_config()

        if base_dir is None:
            base_dir = Path(__file__).parent.parent.parent

        self._base_dir = base_dir
        self._store = store if store is not None else open_store(self._game_config, base_dir)
        self._registry = GameSessionRegistry(
            idle_timeout_seconds=self._game_config.sessions.idle_timeout_seconds,
            id_length=self._game_config.sessions.id_length,
        )

        logger.info("GameEngine initialized with base_dir=%s", base_dir)

    @property
    def game_config(self) -> GameConfig:
        return self._game_config

    @property
    def store(self) -> KnowledgeStore:
        return self._store

    @property
    def registry(self) -> GameSessionRegistry:
        return self._registry

    def get_profile(self, difficulty: Difficulty | str | None = None) -> DifficultyProfile:
        return resolve_profile(self._game_config, difficulty)

    def list_profiles(self) -> List[DifficultyProfile]:
        return list_profiles(self._game_config)

    def create_session(self, rng: Optional[random.Random] = None) -> GameSession:
        settings = self._game_config.game
        rng = rng or random.Random()
        selector = CandidateSelector(
            self._store,
            top_k=settings.top_k,
            pool_size=max(settings.candidate_pool_size, settings.top_k),
            rng=rng,
        )
        session = self._registry.create(
            lambda session_id: GameSession(
                store=self._store,
                rounds_to_win=settings.rounds_to_win,
                resolver_limit=settings.resolver_limit,
                selector=selector,
                rng=rng,
                session_id=session_id,
            )
        )
        logger.info("Created session %s", session.session_id)
        return session

    def get_session(self, session_id: str) -> GameSession:
        return self._registry.get(session_id)

    def release_session(self, session_id: str) -> None:
        self._registry.detach(session_id)

    def evict_idle_sessions(self) -> List[str]:
        return self._registry.evict_expired()

    def close(self) -> None:
        self._store.close()
        logger.info("GameEngine closed")
