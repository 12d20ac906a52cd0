"""
In-memory stand-ins for a psycopg ConnectionPool.

Tests queue one response per data statement; the per-transaction
``set_config`` call made by every model is answered automatically.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

import pytest


class FakeCursor:
    def __init__(self, rows: Sequence[tuple], rowcount: Optional[int] = None) -> None:
        self._rows = list(rows)
        self.rowcount = len(self._rows) if rowcount is None else rowcount

    def fetchone(self) -> Optional[tuple]:
        return self._rows[0] if self._rows else None

    def fetchall(self) -> list[tuple]:
        return list(self._rows)


class FakeConnection:
    def __init__(self) -> None:
        self.responses: list[Any] = []
        self.executed: list[tuple[Any, Any]] = []
        self.statement_timeouts: list[str] = []

    def execute(self, query: Any, params: Any = None) -> FakeCursor:
        if isinstance(query, str) and "set_config" in query:
            self.statement_timeouts.append(params[0])
            return FakeCursor([(params[0],)])
        self.executed.append((query, params))
        if not self.responses:
            raise AssertionError(f"unexpected statement: {query!r}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class FakePool:
    def __init__(self) -> None:
        self.conn = FakeConnection()
        self.checkout_timeouts: list[Optional[float]] = []

    @contextmanager
    def connection(self, timeout: Optional[float] = None) -> Iterator[FakeConnection]:
        self.checkout_timeouts.append(timeout)
        yield self.conn

    def respond(self, rows: Sequence[tuple] = (), rowcount: Optional[int] = None) -> None:
        self.conn.responses.append(FakeCursor(rows, rowcount))

    def fail(self, exc: BaseException) -> None:
        self.conn.responses.append(exc)

    @property
    def statement_timeouts(self) -> list[str]:
        return self.conn.statement_timeouts

    @property
    def executed(self) -> list[tuple[Any, Any]]:
        return self.conn.executed


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()
