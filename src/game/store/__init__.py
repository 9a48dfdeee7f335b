"""Knowledge store adapters over the actor/movie credit relation."""

from game.store.base_store import KnowledgeStore, SearchQuery, fold_diacritics
from game.store.memory_store import InMemoryKnowledgeStore
from game.store.sqlite_store import SqliteKnowledgeStore

__all__ = [
    "KnowledgeStore",
    "SearchQuery",
    "fold_diacritics",
    "InMemoryKnowledgeStore",
    "SqliteKnowledgeStore",
]
