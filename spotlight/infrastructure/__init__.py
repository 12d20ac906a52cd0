"""
Infrastructure package for Spotlight.

Centralizes database connectivity concerns (DSN building, pool creation).
Keep this layer focused on I/O and resource management, decoupled from the
data models that receive the pool.
"""

from spotlight.infrastructure.db_factory import (
    build_dsn,
    create_pool,
    get_sync_connection,
)

__all__ = [
    "build_dsn",
    "create_pool",
    "get_sync_connection",
]
