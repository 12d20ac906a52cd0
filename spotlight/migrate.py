"""
Forward-only SQL migration runner.

Applies ``NNNNNN_<name>.up.sql`` files from the migrations directory in
lexical order, recording each applied version in ``schema_migrations`` so a
re-run only picks up new files. Each file runs in its own transaction.

Usage:
    from spotlight.infrastructure import get_sync_connection
    from spotlight.migrate import apply_migrations

    with get_sync_connection() as conn:
        applied = apply_migrations(conn)
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from psycopg import Connection

from spotlight.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"
UP_SUFFIX = ".up.sql"

_CREATE_TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version text PRIMARY KEY,
    applied_at timestamp(0) with time zone NOT NULL DEFAULT NOW()
)"""


def migration_version(path: Path) -> str:
    """Return the version key for a migration file (its name without ``.up.sql``)."""
    return path.name[: -len(UP_SUFFIX)]


def discover_migrations(directory: Optional[Path] = None) -> List[Path]:
    directory = directory or DEFAULT_MIGRATIONS_DIR
    return sorted(directory.glob(f"*{UP_SUFFIX}"))


def applied_versions(conn: Connection) -> set[str]:
    with conn.transaction():
        conn.execute(_CREATE_TRACKING_TABLE)
        rows = conn.execute("SELECT version FROM schema_migrations").fetchall()
    return {row[0] for row in rows}


def apply_migrations(conn: Connection, directory: Optional[Path] = None) -> List[str]:
    """
    Apply every pending migration and return the versions applied, in order.

    Parameters
    ----------
    conn : Connection
        A dedicated (non-pooled) connection.
    directory : Path, optional
        Where to look for ``*.up.sql`` files. Defaults to the repo's ``migrations/``.

    Raises
    ------
    psycopg.Error
        If a migration fails; that migration's transaction is rolled back and
        later files are not attempted.
    """
    done = applied_versions(conn)
    applied: List[str] = []
    for path in discover_migrations(directory):
        version = migration_version(path)
        if version in done:
            continue
        log.info("Applying migration", extra={"migration": version})
        with conn.transaction():
            conn.execute(path.read_text(encoding="utf-8"))
            conn.execute("INSERT INTO schema_migrations (version) VALUES (%s)", (version,))
        applied.append(version)
    return applied


__all__ = [
    "DEFAULT_MIGRATIONS_DIR",
    "applied_versions",
    "apply_migrations",
    "discover_migrations",
    "migration_version",
]
