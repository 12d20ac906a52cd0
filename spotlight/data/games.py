"""
Game entity, its validation rules, and the GameModel data-access layer.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from psycopg import sql
from pydantic import BaseModel, Field

from spotlight.data.errors import EditConflictError, RecordNotFoundError
from spotlight.data.filters import Filters, Metadata, calculate_metadata
from spotlight.data.store import PooledModel
from spotlight.utils.logging import get_logger
from spotlight.validator import Validator, unique

log = get_logger(__name__)

MIN_YEAR = 1888
MAX_TITLE_BYTES = 500
MAX_GENRES = 5


class Game(BaseModel):
    """
    Representation of a single row in the `games` table.

    ``id``, ``created_at`` and ``version`` are assigned by the database and
    filled in by ``GameModel.insert``.
    """

    id: int = Field(0, description="Primary key (BIGSERIAL).")
    created_at: Optional[datetime] = Field(None, exclude=True, description="Row creation timestamp.")
    title: str = Field("", description="Display title.")
    year: int = Field(0, description="Release year.")
    genres: Optional[List[str]] = Field(None, description="Ordered, distinct genre names.")
    version: Optional[UUID] = Field(None, description="Optimistic concurrency token.")


def validate_game(v: Validator, game: Game) -> None:
    v.check(game.title != "", "title", "must be provided")
    v.check(
        len(game.title.encode("utf-8")) <= MAX_TITLE_BYTES,
        "title",
        "must not be more than 500 bytes long",
    )

    v.check(game.year != 0, "year", "must be provided")
    v.check(game.year >= MIN_YEAR, "year", "must be greater than 1888")
    v.check(game.year <= datetime.now().year, "year", "must not be in the future")

    genres = game.genres or []
    v.check(game.genres is not None, "genres", "must be provided")
    v.check(len(genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(len(genres) <= MAX_GENRES, "genres", "must not contain more than 5 genres")
    v.check(unique(genres), "genres", "must not contain duplicate values")


_INSERT = """
INSERT INTO games (title, year, genres)
VALUES (%s, %s, %s)
RETURNING id, created_at, version"""

_SELECT_ONE = """
SELECT id, created_at, title, year, genres, version
FROM games
WHERE id = %s"""

_UPDATE = """
UPDATE games
SET title = %s, year = %s, genres = %s, version = gen_random_uuid()
WHERE id = %s AND version = %s
RETURNING version"""

_DELETE = """
DELETE FROM games
WHERE id = %s"""

_SELECT_PAGE = """
SELECT count(*) OVER(), id, created_at, title, year, genres, version
FROM games
WHERE (to_tsvector('simple', title) @@ plainto_tsquery('simple', %(title)s::text) OR %(title)s::text = '')
AND (genres @> %(genres)s::text[] OR cardinality(%(genres)s::text[]) = 0)
ORDER BY {column} {direction}, id ASC
LIMIT %(limit)s OFFSET %(offset)s"""


def _game_from_row(row: Sequence) -> Game:
    return Game(
        id=row[0],
        created_at=row[1],
        title=row[2],
        year=row[3],
        genres=list(row[4]),
        version=row[5],
    )


class GameModel(PooledModel):
    """CRUD and listing for games; see ``PooledModel`` for pool/timeout handling."""

    def insert(self, game: Game) -> None:
        """Insert ``game`` and populate its id, created_at and version in place."""
        with self._connection() as conn:
            row = conn.execute(_INSERT, (game.title, game.year, game.genres)).fetchone()
        game.id, game.created_at, game.version = row
        log.debug("Game inserted", extra={"game_id": game.id})

    def get(self, id: int) -> Game:
        if id < 1:
            raise RecordNotFoundError()
        with self._connection() as conn:
            row = conn.execute(_SELECT_ONE, (id,)).fetchone()
        if row is None:
            raise RecordNotFoundError()
        return _game_from_row(row)

    def update(self, game: Game) -> None:
        """
        Write ``game`` back if its version still matches the stored row.

        On success ``game.version`` is replaced by the newly generated token.
        A missing row and a stale version both raise EditConflictError.
        """
        args = (game.title, game.year, game.genres, game.id, game.version)
        with self._connection() as conn:
            row = conn.execute(_UPDATE, args).fetchone()
        if row is None:
            log.debug("Game update conflict", extra={"game_id": game.id})
            raise EditConflictError()
        game.version = row[0]

    def delete(self, id: int) -> None:
        if id < 1:
            raise RecordNotFoundError()
        with self._connection() as conn:
            cur = conn.execute(_DELETE, (id,))
            rows_affected = cur.rowcount
        if rows_affected == 0:
            raise RecordNotFoundError()
        log.debug("Game deleted", extra={"game_id": id})

    def get_all(
        self, title: str, genres: Sequence[str], filters: Filters
    ) -> Tuple[List[Game], Metadata]:
        """
        Return one page of games matching ``title`` and ``genres``.

        An empty title or genre list disables that filter. Results are ordered
        by the filter's sort column with ``id`` as a tie-breaker; the metadata
        reflects every matching row, not just the returned page.
        """
        query = sql.SQL(_SELECT_PAGE).format(
            column=sql.Identifier(filters.sort_column()),
            direction=sql.SQL(filters.sort_direction()),
        )
        params = {
            "title": title,
            "genres": list(genres),
            "limit": filters.limit(),
            "offset": filters.offset(),
        }
        total_records = 0
        games: List[Game] = []
        with self._connection() as conn:
            for row in conn.execute(query, params).fetchall():
                total_records = row[0]
                games.append(_game_from_row(row[1:]))

        metadata = calculate_metadata(total_records, filters.page, filters.page_size)
        return games, metadata


__all__ = ["Game", "GameModel", "validate_game"]
