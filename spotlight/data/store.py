"""
Shared plumbing for pool-backed models.

Every data-access call checks a connection out of the injected pool and runs
inside one transaction whose statements are bounded by ``timeout`` seconds.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from psycopg import Connection
from psycopg_pool import ConnectionPool

DEFAULT_QUERY_TIMEOUT = 3.0


class PooledModel:
    """
    Base for models that issue SQL through a shared ConnectionPool.

    Attributes
    ----------
    pool : ConnectionPool
        Pool owned by the caller; the model never opens or closes it.
    timeout : float
        Upper bound, in seconds, for both pool checkout and statement runtime.
    """

    def __init__(self, pool: ConnectionPool, timeout: float = DEFAULT_QUERY_TIMEOUT) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        self.pool = pool
        self.timeout = timeout

    def statement_timeout_ms(self) -> str:
        # 0 disables statement_timeout; sub-millisecond bounds clamp to 1 ms.
        return str(max(1, round(self.timeout * 1000)))

    @contextmanager
    def _connection(self) -> Generator[Connection, None, None]:
        """
        Check out a connection with a transaction-local statement timeout.

        Raises ``psycopg_pool.PoolTimeout`` if no connection frees up in time and
        ``psycopg.errors.QueryCanceled`` if a statement outlives the bound.
        """
        with self.pool.connection(timeout=self.timeout) as conn:
            conn.execute(
                "SELECT set_config('statement_timeout', %s, true)",
                (self.statement_timeout_ms(),),
            )
            yield conn


__all__ = ["DEFAULT_QUERY_TIMEOUT", "PooledModel"]
