"""Per-request context carried into repository and health calls.

A RequestContext holds the correlation (trace) id used in log lines and an
optional absolute deadline on the monotonic clock. Every store, cache and
probe await is wrapped in ``ctx.bounded()`` so that an expired or cancelled
request stops waiting on I/O instead of finishing a useless query.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class RequestContext:
    trace_id: str = field(default_factory=lambda: str(uuid4()))
    deadline: float | None = None  # time.monotonic() value, None = unbounded

    @classmethod
    def with_timeout(cls, seconds: float | None, trace_id: str | None = None) -> RequestContext:
        """Build a context whose deadline is ``seconds`` from now."""
        deadline = None if seconds is None else time.monotonic() + seconds
        if trace_id is None:
            return cls(deadline=deadline)
        return cls(trace_id=trace_id, deadline=deadline)

    @property
    def log(self) -> BoundLogger:
        return _logger.bind(trace_id=self.trace_id)

    def remaining(self) -> float | None:
        """Seconds left before the deadline (never negative), or None if unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def bounded(self, limit: float | None = None) -> asyncio.Timeout:
        """Return an ``asyncio.timeout`` scope honouring the deadline.

        When ``limit`` is given the scope ends at whichever comes first: the
        request deadline or ``limit`` seconds from now. Raises TimeoutError on
        expiry, like any asyncio timeout.
        """
        remaining = self.remaining()
        if limit is not None:
            remaining = limit if remaining is None else min(remaining, limit)
        return asyncio.timeout(remaining)
