"""Tests for Database connection and schema."""

from __future__ import annotations

import sqlite3
import sys
from typing import TYPE_CHECKING

import pytest

from accounts.db.connection import Database

if TYPE_CHECKING:
    from pathlib import Path


def _insert(db: Database, username: str, deleted_at: str | None = None) -> None:
    db.connection.execute(
        "INSERT INTO players (username, secret, created_at, updated_at, deleted_at) VALUES (?, 'pw', 'now', 'now', ?)",
        (username, deleted_at),
    )
    db.connection.commit()


class TestConnect:
    def test_creates_schema_and_connects(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()

        tables = db.connection.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        assert "players" in [t[0] for t in tables]
        assert db.connected
        db.close()

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "nested" / "dir" / "test.db")
        db.connect()
        assert (tmp_path / "nested" / "dir" / "test.db").exists()
        db.close()

    def test_in_memory_database(self) -> None:
        db = Database(":memory:")
        db.connect()
        assert db.connected
        db.close()

    def test_reconnect_after_close(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        _insert(db, "alice")
        db.close()
        db.connect()

        count = db.connection.execute("SELECT COUNT(*) FROM players").fetchone()[0]
        assert count == 1
        db.close()

    def test_connection_raises_when_closed(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        with pytest.raises(RuntimeError, match="not connected"):
            _ = db.connection
        assert not db.connected

    def test_close_is_idempotent(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        db.close()
        db.close()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
    def test_database_file_is_owner_only(self, tmp_path: Path) -> None:
        path = tmp_path / "test.db"
        db = Database(path)
        db.connect()
        assert path.stat().st_mode & 0o777 == 0o600
        db.close()


class TestUsernameIndex:
    @pytest.fixture
    def db(self, tmp_path: Path):
        db = Database(tmp_path / "test.db")
        db.connect()
        yield db
        db.close()

    def test_live_usernames_are_unique(self, db: Database) -> None:
        _insert(db, "alice")
        with pytest.raises(sqlite3.IntegrityError, match="username"):
            _insert(db, "alice")

    def test_soft_deleted_username_can_be_reused(self, db: Database) -> None:
        _insert(db, "alice", deleted_at="2025-01-01T00:00:00+00:00")
        _insert(db, "alice")

        count = db.connection.execute("SELECT COUNT(*) FROM players WHERE username = 'alice'").fetchone()[0]
        assert count == 2


class TestRun:
    async def test_run_executes_in_worker_thread(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()

        result = await db.run(lambda conn: conn.execute("SELECT 41 + 1").fetchone()[0])

        assert result == 42
        db.close()

    async def test_run_raises_when_disconnected(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        with pytest.raises(RuntimeError, match="not connected"):
            await db.run(lambda conn: conn.execute("SELECT 1"))

    async def test_ping(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        await db.ping()
        db.close()

    async def test_ping_fails_when_closed(self, tmp_path: Path) -> None:
        db = Database(tmp_path / "test.db")
        db.connect()
        db.close()
        with pytest.raises(RuntimeError):
            await db.ping()
