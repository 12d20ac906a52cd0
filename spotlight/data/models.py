"""
Aggregate handle over every model, built from one shared pool.
"""
from __future__ import annotations

from dataclasses import dataclass

from psycopg_pool import ConnectionPool

from spotlight.data.games import GameModel
from spotlight.data.store import DEFAULT_QUERY_TIMEOUT
from spotlight.data.users import UserModel


@dataclass(frozen=True)
class Models:
    games: GameModel
    users: UserModel


def new_models(pool: ConnectionPool, timeout: float = DEFAULT_QUERY_TIMEOUT) -> Models:
    return Models(
        games=GameModel(pool, timeout=timeout),
        users=UserModel(pool, timeout=timeout),
    )


__all__ = ["Models", "new_models"]
