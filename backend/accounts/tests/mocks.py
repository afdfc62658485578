"""Test doubles for the accounts store, cache and health probes."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from accounts.cache.client import CacheError
from accounts.db.connection import Database

if TYPE_CHECKING:
    import sqlite3
    from collections.abc import Callable


class FakeCache:
    """In-process PlayerCache that records every command it receives."""

    def __init__(self, *, fail: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail = fail
        self.get_calls = 0
        self.set_calls = 0
        self.ping_calls = 0

    async def get(self, key: str) -> str | None:
        self.get_calls += 1
        if self.fail:
            raise CacheError(f"GET {key} failed: connection refused")
        return self.data.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.set_calls += 1
        if self.fail:
            raise CacheError(f"SET {key} failed: connection refused")
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    async def ping(self) -> None:
        self.ping_calls += 1
        if self.fail:
            raise CacheError("PING failed: connection refused")


class CountingDatabase(Database):
    """Database that counts the statements run through it."""

    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.run_calls = 0

    async def run[T](self, fn: Callable[[sqlite3.Connection], T]) -> T:
        self.run_calls += 1
        return await super().run(fn)


class FakeProbe:
    """Pingable handle whose ping can be made slow or failing."""

    def __init__(self, *, delay: float = 0.0, error: Exception | None = None) -> None:
        self.delay = delay
        self.error = error
        self.calls = 0

    async def ping(self) -> None:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error


class SteppingClock:
    """Monotonic clock stub that advances by ``step`` seconds on every read."""

    def __init__(self, step: float = 0.0, start: float = 1000.0) -> None:
        self.step = step
        self.now = start

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value
