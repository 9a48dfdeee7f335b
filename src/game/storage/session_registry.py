"""In-memory registry of live game sessions.

Front ends (terminal, web sockets) look sessions up by a short id. A session
whose client has detached is kept for ``idle_timeout_seconds`` so the client
can reconnect, then evicted on the next ``evict_expired`` sweep. The registry
owns no timers; callers decide when to sweep.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from game.session import GameSession

logger = logging.getLogger(__name__)

# Consonants only, so ids are easy to read out loud.
SESSION_ID_ALPHABET = "bcdfghjklmnpqrstvwxyz"


@dataclass
class _Entry:
    session: GameSession
    detached_at: Optional[float] = None


class GameSessionRegistry:
    def __init__(
        self,
        idle_timeout_seconds: float = 300,
        id_length: int = 6,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ):
        if id_length < 1:
            raise ValueError("id_length must be at least 1")
        self._idle_timeout = idle_timeout_seconds
        self._id_length = id_length
        self._clock = clock
        self._rng = rng or random.Random()
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._entries

    def _generate_id(self) -> str:
        while True:
            session_id = "".join(
                self._rng.choice(SESSION_ID_ALPHABET) for _ in range(self._id_length)
            )
            if session_id not in self._entries:
                return session_id

    def create(self, factory: Callable[[str], GameSession]) -> GameSession:
        """Draw a fresh id and register ``factory(id)`` under a single lock."""
        with self._lock:
            session_id = self._generate_id()
            session = factory(session_id)
            if session.session_id != session_id:
                raise ValueError(
                    f"Factory returned session {session.session_id}, expected {session_id}"
                )
            self._entries[session_id] = _Entry(session=session)
        logger.info("Registered session %s", session_id)
        return session

    def add(self, session: GameSession) -> str:
        with self._lock:
            session_id = session.session_id
            if session_id in self._entries:
                raise ValueError(f"Session already registered: {session_id}")
            self._entries[session_id] = _Entry(session=session)
        logger.info("Registered session %s", session_id)
        return session_id

    def get(self, session_id: str) -> GameSession:
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                raise KeyError(f"Session not found: {session_id}")
            return entry.session

    def attach(self, session_id: str) -> GameSession:
        """Mark a client as (re)connected; cancels pending eviction."""
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                raise KeyError(f"Session not found: {session_id}")
            entry.detached_at = None
            return entry.session

    def detach(self, session_id: str) -> None:
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return
            entry.detached_at = self._clock()
        logger.info(
            "Session %s detached, evictable in %ss", session_id, self._idle_timeout
        )

    def remove(self, session_id: str) -> bool:
        with self._lock:
            removed = self._entries.pop(session_id, None) is not None
        if removed:
            logger.info("Removed session %s", session_id)
        return removed

    def evict_expired(self) -> List[str]:
        now = self._clock()
        with self._lock:
            expired = [
                session_id
                for session_id, entry in self._entries.items()
                if entry.detached_at is not None and now - entry.detached_at >= self._idle_timeout
            ]
            for session_id in expired:
                del self._entries[session_id]

        for session_id in expired:
            logger.info("Session %s aged out after %ss", session_id, self._idle_timeout)
        return expired

    def list_session_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)
