"""Composite health check over the active persistence backend and its dependencies.

Each call probes afresh; nothing is cached between calls. Probe failures are
converted into DOWN or DEGRADED entries and never raised, so the health
endpoint always has something to report.
"""

from __future__ import annotations

import asyncio
import platform
import threading
import time
from typing import TYPE_CHECKING, Protocol

from accounts.health.types import ComponentStatus, HealthReport, HealthState
from accounts.settings import PersistenceMode

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from accounts.context import RequestContext
    from accounts.messaging.producer import MessageProducer

DEFAULT_LATENCY_THRESHOLD_MS = 100.0
DEFAULT_PROBE_TIMEOUT_SECONDS = 2.0


class Pingable(Protocol):
    async def ping(self) -> None: ...


def aggregate_status(components: Iterable[ComponentStatus]) -> HealthState:
    """UP when every enabled component is UP, otherwise DEGRADED."""
    enabled = [c for c in components if c.status != HealthState.DISABLED]
    if all(c.status == HealthState.UP for c in enabled):
        return HealthState.UP
    return HealthState.DEGRADED


class HealthChecker:
    """Probe the dependencies relevant to the configured persistence mode.

    Memory mode reports the in-process store as UP and the database and
    cache as DISABLED. Durable mode pings the database and cache
    concurrently; a missing handle or failed ping is DOWN, a ping slower
    than ``latency_threshold_ms`` is DEGRADED. Messaging is DISABLED unless a
    producer was supplied.
    """

    def __init__(
        self,
        persistence_mode: PersistenceMode,
        *,
        database: Pingable | None = None,
        cache: Pingable | None = None,
        messaging: MessageProducer | None = None,
        latency_threshold_ms: float = DEFAULT_LATENCY_THRESHOLD_MS,
        probe_timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._mode = persistence_mode
        self._database = database
        self._cache = cache
        self._messaging = messaging
        self._latency_threshold_ms = latency_threshold_ms
        self._probe_timeout_seconds = probe_timeout_seconds
        self._clock = clock
        self._started_at = clock()

    async def check(self, ctx: RequestContext) -> HealthReport:
        components: dict[str, ComponentStatus] = {}

        if self._mode == PersistenceMode.MEMORY:
            components["memory_store"] = ComponentStatus(HealthState.UP, details="in-memory persistence enabled")
            components["database"] = ComponentStatus(HealthState.DISABLED, message="not used in memory mode")
            components["cache"] = ComponentStatus(HealthState.DISABLED, message="not used in memory mode")
        else:
            database, cache = await asyncio.gather(
                self._probe(ctx, "database", self._database),
                self._probe(ctx, "cache", self._cache),
            )
            components["database"] = database
            components["cache"] = cache

        components["messaging"] = self._messaging_status()

        status = aggregate_status(components.values())
        if status != HealthState.UP:
            ctx.log.warning(
                "health check degraded",
                components={name: c.status for name, c in components.items()},
            )
        return HealthReport(
            status=status,
            components=components,
            uptime_seconds=self._clock() - self._started_at,
            system=_system_metrics(),
        )

    async def _probe(self, ctx: RequestContext, name: str, handle: Pingable | None) -> ComponentStatus:
        if handle is None:
            return ComponentStatus(HealthState.DOWN, message=f"{name} client not initialized")

        start = self._clock()
        try:
            async with ctx.bounded(self._probe_timeout_seconds):
                await handle.ping()
        except TimeoutError:
            latency_ms = (self._clock() - start) * 1000
            ctx.log.error("health probe timed out", component=name, latency_ms=latency_ms)
            return ComponentStatus(HealthState.DOWN, latency_ms=latency_ms, message="ping timed out")
        except Exception as exc:  # noqa: BLE001
            latency_ms = (self._clock() - start) * 1000
            ctx.log.error("health probe failed", component=name, error=str(exc))
            return ComponentStatus(HealthState.DOWN, latency_ms=latency_ms, message=f"ping failed: {exc}")

        latency_ms = (self._clock() - start) * 1000
        if latency_ms > self._latency_threshold_ms:
            ctx.log.warning(
                "health probe detected high latency",
                component=name,
                latency_ms=latency_ms,
                threshold_ms=self._latency_threshold_ms,
            )
            return ComponentStatus(
                HealthState.DEGRADED,
                latency_ms=latency_ms,
                message=f"high latency: {latency_ms:.1f}ms > {self._latency_threshold_ms:g}ms",
            )
        return ComponentStatus(HealthState.UP, latency_ms=latency_ms)

    def _messaging_status(self) -> ComponentStatus:
        if self._messaging is None:
            return ComponentStatus(HealthState.DISABLED, message="messaging not configured")
        if self._messaging.started:
            return ComponentStatus(HealthState.UP)
        return ComponentStatus(HealthState.DOWN, message="producer not started")


def _system_metrics() -> dict[str, object]:
    return {
        "python_version": platform.python_version(),
        "threads": threading.active_count(),
    }
