"""Startup wiring: pick the persistence backend and build its dependency handles.

The backend is selected exactly once from AccountsSettings.persistence_mode.
Handles are plain objects owned by the returned Dependencies and passed by
reference into the repository and the health checker.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from anyio import to_thread

from accounts.cache.client import CacheError, RedisCache
from accounts.db.connection import Database
from accounts.db.player_repository import SqlitePlayerRepository
from accounts.health.checker import HealthChecker
from accounts.memory.player_repository import MemoryPlayerRepository
from accounts.messaging.producer import NullMessageProducer
from accounts.settings import PersistenceMode

if TYPE_CHECKING:
    from accounts.cache.client import PlayerCache
    from accounts.dal.player_repository import PlayerRepository
    from accounts.messaging.producer import MessageProducer
    from accounts.settings import AccountsSettings

logger = structlog.get_logger()


@dataclass
class Dependencies:
    settings: AccountsSettings
    repository: PlayerRepository
    database: Database | None = None
    cache: PlayerCache | None = None
    messaging: MessageProducer | None = None

    def health_checker(self) -> HealthChecker:
        return HealthChecker(
            self.settings.persistence_mode,
            database=self.database,
            cache=self.cache,
            messaging=self.messaging,
            latency_threshold_ms=self.settings.health_latency_threshold_ms,
            probe_timeout_seconds=self.settings.health_probe_timeout_seconds,
        )

    async def start(self) -> None:
        """Warm up network handles. A cache that does not answer is logged, not fatal."""
        if self.cache is not None:
            try:
                await self.cache.ping()
            except CacheError:
                logger.warning("cache unreachable at startup, reads will fall back to the database", exc_info=True)
        if self.messaging is not None:
            await self.messaging.start()

    async def close(self) -> None:
        if self.messaging is not None:
            await self.messaging.shutdown()
        if isinstance(self.cache, RedisCache):
            await self.cache.close()
        if self.database is not None:
            # Database.close blocks on the connection lock; keep it off the event loop.
            await to_thread.run_sync(self.database.close)


def build_dependencies(settings: AccountsSettings) -> Dependencies:
    """Construct the repository selected by ``settings.persistence_mode``."""
    logger.info("initializing persistence", persistence_mode=settings.persistence_mode)

    messaging: MessageProducer | None = None
    if settings.messaging_enabled:
        messaging = NullMessageProducer(settings.messaging_nameserver, settings.messaging_producer_group)

    if settings.persistence_mode == PersistenceMode.MEMORY:
        return Dependencies(settings=settings, repository=MemoryPlayerRepository(), messaging=messaging)

    db = Database(settings.database_path)
    db.connect()

    cache: RedisCache | None = None
    if settings.redis_url:
        cache = RedisCache.from_url(settings.redis_url, socket_timeout=settings.redis_socket_timeout_seconds)
    else:
        logger.warning("no redis_url configured, player lookups will always hit the database")

    return Dependencies(
        settings=settings,
        repository=SqlitePlayerRepository(db, cache),
        database=db,
        cache=cache,
        messaging=messaging,
    )
