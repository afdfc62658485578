"""SQLite-backed player repository with a read-through cache for id lookups."""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from pydantic import ValidationError

from accounts.cache.client import CacheError
from accounts.dal.errors import (
    PlayerConflictError,
    RepositoryInternalError,
    StoreUnavailableError,
)
from accounts.dal.models import Player
from accounts.dal.player_repository import NOT_FOUND, Found, PlayerLookup, PlayerRepository

if TYPE_CHECKING:
    from collections.abc import Callable

    from accounts.cache.client import PlayerCache
    from accounts.context import RequestContext
    from accounts.db.connection import Database

PLAYER_CACHE_KEY = "player:{player_id}"
PLAYER_CACHE_TTL_SECONDS = 300

_SELECT_COLUMNS = "id, username, secret, balance, created_at, updated_at"

# SQLite INTEGER is a signed 64-bit value; larger ids can never have been stored.
_MAX_PLAYER_ID = 2**63 - 1


class SqlitePlayerRepository(PlayerRepository):
    """SQLite implementation of PlayerRepository, optionally fronted by a cache.

    Username uniqueness is enforced by a partial unique index over live rows;
    the resulting IntegrityError is surfaced as PlayerConflictError. The
    repository holds no locks of its own.

    ``get_player_by_id`` is read-through cache-aside: a well-formed cache hit
    skips the store, anything else falls back to the store and writes the
    record back for PLAYER_CACHE_TTL_SECONDS. Cache failures are logged and
    never fail the call. Concurrent misses for the same id each query the
    store; there is no request coalescing.

    Writes never touch the cache. That is safe only while players cannot be
    updated: a fresh id has no prior cache entry to go stale.
    """

    def __init__(self, db: Database, cache: PlayerCache | None = None) -> None:
        self._db = db
        self._cache = cache

    async def create_player(self, ctx: RequestContext, player: Player) -> None:
        """Insert a player. Raises PlayerConflictError if the username is taken."""
        now = datetime.now(tz=UTC)
        params = (
            player.username,
            player.secret.get_secret_value(),
            str(player.balance),
            now.isoformat(),
            now.isoformat(),
        )

        def _insert(conn: sqlite3.Connection) -> int:
            try:
                cursor = conn.execute(
                    "INSERT INTO players (username, secret, balance, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                    params,
                )
                conn.commit()
            except (sqlite3.Error, UnicodeError, OverflowError):
                conn.rollback()
                raise
            return cursor.lastrowid

        try:
            player_id = await self._store(ctx, _insert)
        except sqlite3.IntegrityError as exc:
            if "username" in str(exc).lower():
                raise PlayerConflictError(player.username) from exc
            raise RepositoryInternalError(f"failed to create player: {exc}") from exc

        player.id = player_id
        player.created_at = now
        player.updated_at = now
        ctx.log.info("player created", player_id=player_id, username=player.username)

    async def get_player_by_username(self, ctx: RequestContext, username: str) -> PlayerLookup:
        """Read straight from the store; usernames are not cached."""
        if not _is_storable_text(username):
            return NOT_FOUND
        row = await self._store(
            ctx,
            lambda conn: conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM players WHERE username = ? AND deleted_at IS NULL",  # noqa: S608
                (username,),
            ).fetchone(),
        )
        if row is None:
            return NOT_FOUND
        return Found(_row_to_player(row))

    async def get_player_by_id(self, ctx: RequestContext, player_id: int) -> PlayerLookup:
        """Look up a player by id, serving from the cache when possible."""
        if not 1 <= player_id <= _MAX_PLAYER_ID:
            return NOT_FOUND

        key = PLAYER_CACHE_KEY.format(player_id=player_id)

        cached = await self._cache_get(ctx, key)
        if cached is not None:
            ctx.log.debug("player served from cache", player_id=player_id)
            return Found(cached)

        row = await self._store(
            ctx,
            lambda conn: conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM players WHERE id = ? AND deleted_at IS NULL",  # noqa: S608
                (player_id,),
            ).fetchone(),
        )
        if row is None:
            return NOT_FOUND

        player = _row_to_player(row)
        await self._cache_put(ctx, key, player)
        return Found(player)

    # -- private helpers --

    async def _store[T](self, ctx: RequestContext, fn: Callable[[sqlite3.Connection], T]) -> T:
        """Run a statement within the request deadline, translating driver failures.

        IntegrityError is re-raised untouched so callers can map constraint
        violations themselves.
        """
        try:
            async with ctx.bounded():
                return await self._db.run(fn)
        except TimeoutError as exc:
            ctx.log.error("database call exceeded request deadline")
            raise StoreUnavailableError("deadline exceeded waiting for database") from exc
        except RuntimeError as exc:
            ctx.log.error("database not connected")
            raise StoreUnavailableError(str(exc)) from exc
        except sqlite3.IntegrityError:
            raise
        except sqlite3.OperationalError as exc:
            ctx.log.error("database operation failed", error=str(exc))
            raise StoreUnavailableError(f"database unavailable: {exc}") from exc
        except sqlite3.Error as exc:
            ctx.log.error("unexpected database error", error=str(exc))
            raise RepositoryInternalError(f"database error: {exc}") from exc
        except (UnicodeError, OverflowError) as exc:
            ctx.log.error("database rejected statement parameters", error=str(exc))
            raise RepositoryInternalError(f"unbindable parameter: {exc}") from exc

    async def _cache_get(self, ctx: RequestContext, key: str) -> Player | None:
        """Return a decoded cached player, or None on miss, error or bad payload."""
        if self._cache is None:
            return None
        try:
            async with ctx.bounded():
                raw = await self._cache.get(key)
        except (CacheError, TimeoutError):
            ctx.log.warning("cache read failed, falling back to database", key=key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return Player.from_cache_json(raw)
        except ValueError:
            ctx.log.warning("discarding malformed cache entry", key=key)
            return None

    async def _cache_put(self, ctx: RequestContext, key: str, player: Player) -> None:
        """Write the player back to the cache; failures are logged and swallowed."""
        if self._cache is None:
            return
        try:
            payload = player.to_cache_json()
            async with ctx.bounded():
                await self._cache.set(key, payload, PLAYER_CACHE_TTL_SECONDS)
        except (CacheError, TimeoutError, TypeError, ValueError):
            ctx.log.warning("cache write failed", key=key, exc_info=True)


def _is_storable_text(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True

def _row_to_player(row: tuple) -> Player:
    player_id, username, secret, balance, created_at, updated_at = row
    try:
        return Player(
            id=player_id,
            username=username,
            secret=secret,
            balance=Decimal(balance),
            created_at=datetime.fromisoformat(created_at),
            updated_at=datetime.fromisoformat(updated_at),
        )
    except (ValidationError, InvalidOperation, ValueError) as exc:
        raise RepositoryInternalError(f"corrupt player row id={player_id}") from exc
