"""SQLite database connection and schema management."""

from __future__ import annotations

import os
import sqlite3
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from anyio import to_thread

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()

_DB_FILE_PERMISSIONS = 0o600

# Usernames are unique among live rows only; deleted_at marks soft-deleted players.
_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS players (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL,
    secret TEXT NOT NULL,
    balance TEXT NOT NULL DEFAULT '0.00',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    deleted_at TEXT
);

CREATE UNIQUE INDEX IF NOT EXISTS idx_players_username_live
    ON players (username) WHERE deleted_at IS NULL;

CREATE INDEX IF NOT EXISTS idx_players_deleted_at
    ON players (deleted_at);
"""


class Database:
    """SQLite database wrapper shared by every request.

    All statements go through ``run()``, which executes the callable in a
    worker thread while holding the connection lock. A caller that is
    cancelled stops waiting immediately; the statement still completes (and
    commits or rolls back) in its thread, so the connection is never left
    mid-transaction for the next caller.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the active connection or raise if disconnected."""
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the database, apply pragmas, create schema, and harden file permissions."""
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA busy_timeout=5000")
        self._conn.executescript(_SCHEMA_SQL)

        self._harden_permissions()
        logger.info("database connected", path=self._path)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("database connection closed", path=self._path)

    async def run[T](self, fn: Callable[[sqlite3.Connection], T]) -> T:
        """Run ``fn(connection)`` in a worker thread under the connection lock.

        Raises RuntimeError if the database is not connected.
        """

        def _locked() -> T:
            with self._lock:
                return fn(self.connection)

        return await to_thread.run_sync(_locked, abandon_on_cancel=True)

    async def ping(self) -> None:
        """Round-trip a trivial statement; raises on any connection problem."""
        await self.run(lambda conn: conn.execute("SELECT 1").fetchone())

    def _harden_permissions(self) -> None:
        """Set restrictive file permissions on POSIX systems (best effort).

        Covers the WAL/SHM sibling files too, since they hold player secrets.
        """
        if os.name != "posix" or self._path == ":memory:":  # pragma: no cover
            return
        for suffix in ("", "-wal", "-shm"):
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))
