"""
Database connection factory utilities for Spotlight.

Builds DSNs and opens psycopg connections/pools from Settings. Pools are
created by the caller and passed explicitly into the data models; nothing in
this module holds a process-wide pool.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from spotlight.config import Settings, get_settings
from spotlight.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings (defaults to the cached settings)."""
    return (settings or get_settings()).dsn


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.
    Used for one-off work such as migrations. Prefer a pool for request traffic.

    Parameters
    ----------
    dsn : str, optional
        Connection string override. Defaults to the DSN built from settings.

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn())


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def _open_pool(conninfo: str, settings: Settings, timeout: float) -> ConnectionPool:
    # A pool that failed to open is closed for good, so every attempt builds a new one.
    pool = ConnectionPool(
        conninfo=conninfo,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        open=False,
        name="spotlight",
    )
    try:
        pool.open(wait=True, timeout=timeout)
    except Exception:
        pool.close()
        raise
    return pool


def create_pool(
    settings: Optional[Settings] = None,
    dsn: Optional[str] = None,
    open_timeout: float = 30.0,
) -> ConnectionPool:
    """
    Create and open a synchronous connection pool.

    The caller owns the returned pool and is responsible for closing it
    (it is also usable as a context manager).

    Parameters
    ----------
    settings : Settings, optional
        Source of DSN and pool sizing. Defaults to the cached settings.
    dsn : str, optional
        Connection string override, mainly for tests.
    open_timeout : float
        Seconds to wait for the minimum number of connections on open.

    Returns
    -------
    ConnectionPool
        An opened pool ready to hand to ``spotlight.data.new_models``.

    Raises
    ------
    psycopg_pool.PoolTimeout
        If the pool cannot connect after all retry attempts.
    """
    settings = settings or get_settings()
    pool = _open_pool(dsn or settings.dsn, settings, open_timeout)
    log.debug(
        "Connection pool opened",
        extra={"min_size": settings.db_pool_min_size, "max_size": settings.db_pool_max_size},
    )
    return pool


__all__ = [
    "build_dsn",
    "create_pool",
    "get_sync_connection",
]
