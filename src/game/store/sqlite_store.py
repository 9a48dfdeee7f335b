"""SQLite-backed knowledge store.

Reads the IMDb-derived database produced by the ingestion pipeline:

    name_basics        - people (nconst, primary_name, birth_year)
    title_basics       - titles (tconst, title_type, primary_title, start_year)
    title_principals   - credits (tconst, nconst, ordering, category)
    title_ratings      - votes (tconst, num_votes)
    name_basics_fts    - FTS5 trigram index over diacritic-folded names
    title_basics_fts   - FTS5 trigram index over diacritic-folded titles

The connection is opened read-only and shared by every game session, so all
access goes through one lock.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Collection, List, Optional, Sequence

from game.domain.entities import Actor, Candidate, CastCredit, Movie
from game.errors import StoreUnavailableError
from game.store.base_store import KnowledgeStore, SearchQuery, fold_diacritics

logger = logging.getLogger(__name__)

_ACTING = "tp.category IN ('actor', 'actress')"

_SEARCH_ACTORS_FTS_SQL = f"""
SELECT n.nconst, n.primary_name, n.birth_year,
       COUNT(DISTINCT tp.tconst) AS movie_count
FROM name_basics_fts fts
JOIN name_basics n ON fts.nconst = n.nconst
JOIN title_principals tp ON n.nconst = tp.nconst
JOIN title_basics t ON tp.tconst = t.tconst
WHERE fts.primary_name MATCH ?
  AND {_ACTING}
  AND t.title_type = 'movie'
GROUP BY n.nconst
ORDER BY movie_count DESC
LIMIT ?
"""

_SEARCH_MOVIES_FTS_SQL = """
SELECT t.tconst, t.primary_title, t.start_year, r.num_votes
FROM title_basics_fts fts
JOIN title_basics t ON fts.tconst = t.tconst
LEFT JOIN title_ratings r ON t.tconst = r.tconst
WHERE fts.primary_title MATCH ?
  AND t.title_type = 'movie'
ORDER BY COALESCE(r.num_votes, 0) DESC
LIMIT ?
"""

_SEARCH_ACTORS_LIKE_SQL = f"""
SELECT n.nconst, n.primary_name, n.birth_year,
       COUNT(DISTINCT tp.tconst) AS movie_count
FROM name_basics n
JOIN title_principals tp ON n.nconst = tp.nconst
JOIN title_basics t ON tp.tconst = t.tconst
WHERE LOWER(n.primary_name) LIKE ? ESCAPE '\\'
  AND {_ACTING}
  AND t.title_type = 'movie'
GROUP BY n.nconst
ORDER BY movie_count DESC
LIMIT ?
"""

_SEARCH_MOVIES_LIKE_SQL = """
SELECT t.tconst, t.primary_title, t.start_year, r.num_votes
FROM title_basics t
LEFT JOIN title_ratings r ON t.tconst = r.tconst
WHERE LOWER(t.primary_title) LIKE ? ESCAPE '\\'
  AND t.title_type = 'movie'
ORDER BY COALESCE(r.num_votes, 0) DESC
LIMIT ?
"""

_MOVIE_CAST_SQL = f"""
SELECT n.nconst, n.primary_name, n.birth_year, tp.ordering
FROM title_principals tp
JOIN name_basics n ON tp.nconst = n.nconst
WHERE tp.tconst = ?
  AND {_ACTING}
  AND tp.ordering <= ?
ORDER BY tp.ordering
"""

_ACTOR_MOVIES_SQL = f"""
SELECT t.tconst, t.primary_title, t.start_year, r.num_votes, tp.ordering
FROM title_principals tp
JOIN title_basics t ON tp.tconst = t.tconst
LEFT JOIN title_ratings r ON t.tconst = r.tconst
WHERE tp.nconst = ?
  AND {_ACTING}
  AND t.title_type = 'movie'
  AND tp.ordering <= ?
ORDER BY COALESCE(r.num_votes, 0) DESC
"""

_IS_CONNECTED_SQL = f"""
SELECT 1
FROM title_principals tp
WHERE tp.tconst = ?
  AND tp.nconst = ?
  AND {_ACTING}
LIMIT 1
"""

_RANDOM_ACTOR_SQL = f"""
SELECT n.nconst, n.primary_name, n.birth_year,
       COUNT(DISTINCT tp.tconst) AS movie_count
FROM name_basics n
JOIN title_principals tp ON n.nconst = tp.nconst
JOIN title_basics t ON tp.tconst = t.tconst
JOIN title_ratings r ON t.tconst = r.tconst
WHERE {_ACTING}
  AND t.title_type = 'movie'
  AND r.num_votes >= ?
  AND t.start_year >= ?
  AND tp.ordering <= ?
GROUP BY n.nconst
HAVING movie_count >= ?
ORDER BY RANDOM()
LIMIT 1
"""

_RANDOM_MOVIE_SQL = """
SELECT t.tconst, t.primary_title, t.start_year, r.num_votes
FROM title_basics t
JOIN title_ratings r ON t.tconst = r.tconst
WHERE t.title_type = 'movie'
  AND r.num_votes >= ?
  AND t.start_year >= ?
ORDER BY RANDOM()
LIMIT 1
"""

_ADJACENT_ACTORS_SQL = f"""
SELECT n.nconst, n.primary_name, n.birth_year, tp.ordering,
       (SELECT COUNT(*) FROM title_principals
        WHERE nconst = n.nconst AND category IN ('actor', 'actress')) AS career_size
FROM title_principals tp
JOIN name_basics n ON tp.nconst = n.nconst
WHERE tp.tconst = ?
  AND {_ACTING}
  AND tp.ordering <= ?
"""

_ADJACENT_MOVIES_SQL = f"""
SELECT t.tconst, t.primary_title, t.start_year, tp.ordering, r.num_votes,
       (SELECT COUNT(*) FROM title_principals
        WHERE tconst = t.tconst AND category IN ('actor', 'actress')) AS cast_size
FROM title_principals tp
JOIN title_basics t ON tp.tconst = t.tconst
LEFT JOIN title_ratings r ON t.tconst = r.tconst
WHERE tp.nconst = ?
  AND {_ACTING}
  AND t.title_type = 'movie'
  AND tp.ordering <= ?
  AND t.start_year >= ?
  AND COALESCE(r.num_votes, 0) >= ?
"""

_FTS_TABLES = ("name_basics_fts", "title_basics_fts")


def to_fts_query(query: SearchQuery) -> str:
    """Render a search query as an FTS5 expression of quoted terms."""
    quoted = ['"' + fold_diacritics(term).replace('"', '""') + '"' for term in query.terms]
    return " AND ".join(quoted)


def to_like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _placeholders(values: Sequence[Any]) -> str:
    return ",".join("?" for _ in values)


class SqliteKnowledgeStore(KnowledgeStore):
    def __init__(self, db_path: str | Path, read_only: bool = True):
        self._db_path = Path(db_path)
        if not self._db_path.exists():
            raise StoreUnavailableError(f"Database not found: {self._db_path}")

        self._lock = threading.Lock()
        try:
            if read_only:
                uri = self._db_path.resolve().as_uri() + "?mode=ro"
                self._conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
            else:
                self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Cannot open database {self._db_path}: {exc}") from exc

        self._conn.row_factory = sqlite3.Row
        self._has_fts = self._detect_fts()
        if not self._has_fts:
            logger.warning(
                "FTS tables missing in %s, fuzzy search disabled (substring search only)",
                self._db_path,
            )
        logger.info("Opened knowledge store %s (read_only=%s)", self._db_path, read_only)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def has_fts(self) -> bool:
        return self._has_fts

    def _detect_fts(self) -> bool:
        rows = self._query(
            f"SELECT name FROM sqlite_master WHERE name IN ({_placeholders(_FTS_TABLES)})",
            _FTS_TABLES,
        )
        return len(rows) == len(_FTS_TABLES)

    def _query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        try:
            with self._lock:
                return self._conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Knowledge store query failed: {exc}") from exc

    @staticmethod
    def _actor(row: sqlite3.Row, size_column: str = "movie_count") -> Actor:
        return Actor(
            id=row["nconst"],
            display_name=row["primary_name"],
            birth_year=row["birth_year"],
            filmography_size=row[size_column] if size_column in row.keys() else 0,
        )

    @staticmethod
    def _movie(row: sqlite3.Row) -> Movie:
        keys = row.keys()
        return Movie(
            id=row["tconst"],
            title=row["primary_title"],
            year=row["start_year"],
            rating_votes=row["num_votes"] or 0,
            cast_size=row["cast_size"] if "cast_size" in keys else 0,
        )

    def fuzzy_search_actors(self, query: SearchQuery, limit: int) -> List[Actor]:
        if not self._has_fts:
            return []
        rows = self._query(_SEARCH_ACTORS_FTS_SQL, (to_fts_query(query), limit))
        return [self._actor(row) for row in rows]

    def fuzzy_search_movies(self, query: SearchQuery, limit: int) -> List[Movie]:
        if not self._has_fts:
            return []
        rows = self._query(_SEARCH_MOVIES_FTS_SQL, (to_fts_query(query), limit))
        return [self._movie(row) for row in rows]

    def like_search_actors(self, text: str, limit: int) -> List[Actor]:
        rows = self._query(_SEARCH_ACTORS_LIKE_SQL, (to_like_pattern(text.lower()), limit))
        return [self._actor(row) for row in rows]

    def like_search_movies(self, text: str, limit: int) -> List[Movie]:
        rows = self._query(_SEARCH_MOVIES_LIKE_SQL, (to_like_pattern(text.lower()), limit))
        return [self._movie(row) for row in rows]

    def actors_for_movie(self, movie_id: str, max_billing: int) -> List[CastCredit]:
        rows = self._query(_MOVIE_CAST_SQL, (movie_id, max_billing))
        return [CastCredit(entity=self._actor(row), billing=row["ordering"]) for row in rows]

    def movies_for_actor(self, actor_id: str, max_billing: int) -> List[CastCredit]:
        rows = self._query(_ACTOR_MOVIES_SQL, (actor_id, max_billing))
        return [CastCredit(entity=self._movie(row), billing=row["ordering"]) for row in rows]

    def is_connected(self, actor_id: str, movie_id: str) -> bool:
        return bool(self._query(_IS_CONNECTED_SQL, (movie_id, actor_id)))

    def random_actor(
        self,
        min_connectivity: int,
        min_year: int,
        max_billing: int,
        min_filmography_size: int,
    ) -> Optional[Actor]:
        rows = self._query(
            _RANDOM_ACTOR_SQL,
            (min_connectivity, min_year, max_billing, min_filmography_size),
        )
        return self._actor(rows[0]) if rows else None

    def random_movie(self, min_connectivity: int, min_year: int) -> Optional[Movie]:
        rows = self._query(_RANDOM_MOVIE_SQL, (min_connectivity, min_year))
        return self._movie(rows[0]) if rows else None

    def adjacent_candidates(
        self,
        from_entity: Actor | Movie,
        max_billing: int,
        min_year: int,
        min_connectivity: int,
        exclude_ids: Collection[str] = (),
        limit: Optional[int] = None,
    ) -> List[Candidate]:
        excluded = sorted(set(exclude_ids))

        if isinstance(from_entity, Movie):
            sql = _ADJACENT_ACTORS_SQL
            params: List[Any] = [from_entity.id, max_billing]
            if excluded:
                sql += f" AND n.nconst NOT IN ({_placeholders(excluded)})"
                params.extend(excluded)
            sql += " ORDER BY career_size DESC, tp.ordering, n.nconst"
        else:
            sql = _ADJACENT_MOVIES_SQL
            params = [from_entity.id, max_billing, min_year, min_connectivity]
            if excluded:
                sql += f" AND t.tconst NOT IN ({_placeholders(excluded)})"
                params.extend(excluded)
            sql += " ORDER BY cast_size DESC, COALESCE(r.num_votes, 0) DESC, t.tconst"

        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        rows = self._query(sql, params)

        if isinstance(from_entity, Movie):
            return [
                Candidate(
                    entity=self._actor(row, size_column="career_size"),
                    billing=row["ordering"],
                    breadth=row["career_size"],
                )
                for row in rows
            ]
        return [
            Candidate(entity=self._movie(row), billing=row["ordering"], breadth=row["cast_size"])
            for row in rows
        ]

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        logger.info("Closed knowledge store %s", self._db_path)
