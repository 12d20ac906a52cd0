"""
Pytest configuration for Spotlight.

Provides fixtures for:
- Database connection management
- Schema migration and table cleanup
- A pool-backed Models handle for integration tests
"""

from __future__ import annotations

import os
from typing import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from spotlight.config import Settings
from spotlight.data import Models, new_models
from spotlight.infrastructure import create_pool
from spotlight.migrate import apply_migrations


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "spotlight"),
        db_pool_max_size=4,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            conn.execute("SELECT 1;").fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(test_dsn: str, db_connection: psycopg.Connection) -> bool:
    """
    Ensure the schema is migrated to the latest version.
    """
    with psycopg.connect(test_dsn) as conn:
        apply_migrations(conn)
    return True


@pytest.fixture(scope="function")
def clean_tables(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Empty the games and users tables around each test function.
    """
    db_connection.execute("TRUNCATE TABLE games, users RESTART IDENTITY CASCADE;")
    yield
    db_connection.execute("TRUNCATE TABLE games, users RESTART IDENTITY CASCADE;")


@pytest.fixture(scope="session")
def db_pool(
    test_settings: Settings, db_schema_initialized: bool
) -> Generator[ConnectionPool, None, None]:
    pool = create_pool(test_settings)
    try:
        yield pool
    finally:
        pool.close()


@pytest.fixture(scope="function")
def models(db_pool: ConnectionPool, clean_tables) -> Models:
    """
    Models bound to the shared test pool, over empty tables.
    """
    return new_models(db_pool, timeout=3.0)
