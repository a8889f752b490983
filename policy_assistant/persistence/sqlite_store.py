"""SQLite-backed :class:`KeyValueStore`.

Purpose
-------
Persist editor content and endpoint settings across restarts in a single
``kv`` table.

Timeout and reliability strategy
--------------------------------
- Applies ``busy_timeout`` from ``policy_assistant.config.defaults`` to
  mitigate lock contention.
- Enables WAL journaling and NORMAL synchronous mode.

Each operation opens its own short-lived connection, so one store instance is
safe to share between threads.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..config.defaults import (
    SQLITE_BUSY_TIMEOUT_MS,
    SQLITE_DEFAULT_FILENAME,
    SQLITE_JOURNAL_MODE,
    SQLITE_SYNCHRONOUS,
)

DEFAULT_DB_PATH = Path.home() / ".policy_assistant" / SQLITE_DEFAULT_FILENAME


def get_db_path(db_path: Optional[str] = None) -> Path:
    """Return a concrete database path; ``~`` is expanded."""
    return Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH


def create_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Open a connection with the PRAGMA settings applied.

    The parent directory is created when missing.
    """
    path = get_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute(f"PRAGMA journal_mode={SQLITE_JOURNAL_MODE};")
    conn.execute(f"PRAGMA synchronous={SQLITE_SYNCHRONOUS};")
    conn.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")  # ms
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the ``kv`` table if it does not exist, then commit."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS kv (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """
    )
    conn.commit()


@contextmanager
def db_session(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Yield a connection with the schema in place.

    Commits on normal exit, rolls back on error and always closes.
    """
    conn = create_connection(db_path)
    try:
        init_schema(conn)
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


class SqliteKeyValueStore:
    """Key/value rows in a local SQLite file."""

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = str(get_db_path(db_path))

    def get(self, key: str) -> Optional[str]:
        with db_session(self.db_path) as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with db_session(self.db_path) as conn:
            conn.execute(
                "INSERT INTO kv(key, value, updated_at) VALUES(?, ?, CURRENT_TIMESTAMP) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=CURRENT_TIMESTAMP",
                (key, value),
            )

    def delete(self, key: str) -> None:
        with db_session(self.db_path) as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))


__all__ = ["SqliteKeyValueStore", "create_connection", "db_session", "get_db_path", "init_schema"]
