"""Key-value cache handle used by the durable backend and the health checker.

The handle is long-lived and shared by every request. A cancelled command
leaves the underlying connection pool usable; redis-py discards a connection
interrupted mid-command instead of returning it to the pool.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

logger = structlog.get_logger()


class CacheError(Exception):
    """Cache command failed. Always best-effort for callers."""


@runtime_checkable
class PlayerCache(Protocol):
    """Minimal string cache used for player records."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def ping(self) -> None: ...


class RedisCache:
    """PlayerCache over a redis-py asyncio client."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, *, socket_timeout: float = 2.0, max_connections: int = 50) -> RedisCache:
        """Build a lazily-connecting cache; no network I/O happens here."""
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            decode_responses=True,
            max_connections=max_connections,
            retry_on_timeout=False,
        )
        logger.info("redis cache configured", url_scheme=url.split("://")[0] if "://" in url else "unknown")
        return cls(client)

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except RedisError as exc:
            raise CacheError(f"GET {key} failed: {exc}") from exc

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as exc:
            raise CacheError(f"SET {key} failed: {exc}") from exc

    async def ping(self) -> None:
        try:
            await self._client.ping()
        except RedisError as exc:
            raise CacheError(f"PING failed: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()
