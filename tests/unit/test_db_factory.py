from __future__ import annotations

from typing import ClassVar

import pytest
from psycopg_pool import PoolTimeout
from tenacity import wait_none

from spotlight.config import Settings
from spotlight.infrastructure import db_factory

OPEN_TIMEOUT = 0.5


class _FakeConnectionPool:
    instances: ClassVar[list[_FakeConnectionPool]] = []
    failures_before_success: ClassVar[int] = 0

    def __init__(self, conninfo: str, min_size: int, max_size: int, open: bool, name: str) -> None:
        self.conninfo = conninfo
        self.min_size = min_size
        self.max_size = max_size
        self.opened = False
        self.closed = False
        _FakeConnectionPool.instances.append(self)

    def open(self, wait: bool, timeout: float) -> None:
        if self.closed or self.opened:
            raise AssertionError("pool has already been opened/closed and cannot be reused")
        self.opened = True
        if len(_FakeConnectionPool.instances) <= _FakeConnectionPool.failures_before_success:
            raise PoolTimeout(f"pool initialization incomplete after {timeout} sec")

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_pool_class(monkeypatch):
    _FakeConnectionPool.instances = []
    monkeypatch.setattr(db_factory, "ConnectionPool", _FakeConnectionPool)
    monkeypatch.setattr(db_factory._open_pool.retry, "wait", wait_none())
    return _FakeConnectionPool


def _settings() -> Settings:
    return Settings(
        _env_file=None, db_port=1, db_name="spotlight", db_pool_min_size=1, db_pool_max_size=2
    )


def test_unreachable_database_surfaces_pool_timeout(fake_pool_class) -> None:
    fake_pool_class.failures_before_success = 3

    with pytest.raises(PoolTimeout):
        db_factory.create_pool(_settings(), open_timeout=OPEN_TIMEOUT)

    assert len(fake_pool_class.instances) == 3
    assert all(pool.opened and pool.closed for pool in fake_pool_class.instances)


def test_retry_opens_a_fresh_pool_after_transient_failure(fake_pool_class) -> None:
    fake_pool_class.failures_before_success = 1

    pool = db_factory.create_pool(_settings(), open_timeout=OPEN_TIMEOUT)

    first, second = fake_pool_class.instances
    assert first.closed
    assert pool is second
    assert second.opened and not second.closed
    assert pool.conninfo.endswith(":1/spotlight")
    assert (pool.min_size, pool.max_size) == (1, 2)
