"""In-memory player repository for local development and tests."""

import asyncio
from datetime import UTC, datetime

import structlog

from accounts.context import RequestContext
from accounts.dal.errors import PlayerConflictError, StoreUnavailableError
from accounts.dal.models import Player
from accounts.dal.player_repository import NOT_FOUND, Found, PlayerLookup, PlayerRepository

logger = structlog.get_logger()


class MemoryPlayerRepository(PlayerRepository):
    """Volatile PlayerRepository backed by a dict keyed by player id.

    One asyncio.Lock covers the uniqueness scan, id lookups and inserts, and
    the id counter only advances under that lock. The lock is never held
    across any other await. Stored and returned players are deep copies, so
    callers cannot alias internal state.

    Username uniqueness is an O(n) scan per insert; this backend is meant
    for small, throwaway datasets. Everything is lost when the process exits.
    """

    def __init__(self) -> None:
        self._players: dict[int, Player] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()
        logger.info("using in-memory player storage, data will be lost on restart")

    async def create_player(self, ctx: RequestContext, player: Player) -> None:
        """Insert a copy of ``player``. Raises PlayerConflictError on a taken username."""
        async with self._acquire(ctx):
            if any(p.username == player.username for p in self._players.values()):
                raise PlayerConflictError(player.username)

            now = datetime.now(tz=UTC)
            player.id = self._next_id
            player.created_at = now
            player.updated_at = now
            self._next_id += 1
            self._players[player.id] = player.model_copy(deep=True)

        ctx.log.info("player created", player_id=player.id, username=player.username)

    async def get_player_by_username(self, ctx: RequestContext, username: str) -> PlayerLookup:
        async with self._acquire(ctx):
            for p in self._players.values():
                if p.username == username:
                    return Found(p.model_copy(deep=True))
        return NOT_FOUND

    async def get_player_by_id(self, ctx: RequestContext, player_id: int) -> PlayerLookup:
        async with self._acquire(ctx):
            p = self._players.get(player_id)
            if p is None:
                return NOT_FOUND
            return Found(p.model_copy(deep=True))

    def _acquire(self, ctx: RequestContext) -> "_DeadlineLock":
        return _DeadlineLock(self._lock, ctx)


class _DeadlineLock:
    """Acquire an asyncio.Lock within the request deadline."""

    __slots__ = ("_ctx", "_lock")

    def __init__(self, lock: asyncio.Lock, ctx: RequestContext) -> None:
        self._lock = lock
        self._ctx = ctx

    async def __aenter__(self) -> None:
        try:
            async with self._ctx.bounded():
                await self._lock.acquire()
        except TimeoutError as exc:
            raise StoreUnavailableError("deadline exceeded waiting for in-memory store") from exc

    async def __aexit__(self, *exc_info: object) -> None:
        self._lock.release()
