"""Message producer interface and its no-op stand-in.

No broker is wired up. NullMessageProducer satisfies the interface so that
startup, shutdown and health reporting behave as they would with a real
producer, while ``send`` only logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from accounts.context import RequestContext

logger = structlog.get_logger()

SEND_OK = "SEND_OK"


@dataclass(frozen=True, slots=True)
class SendResult:
    status: str
    message_id: str


@runtime_checkable
class MessageProducer(Protocol):
    @property
    def started(self) -> bool: ...

    async def start(self) -> None: ...

    async def shutdown(self) -> None: ...

    async def send(
        self,
        ctx: RequestContext,
        topic: str,
        payload: bytes,
        keys: list[str] | None = None,
    ) -> SendResult: ...


class NullMessageProducer:
    """Producer that accepts every message and delivers none of them."""

    def __init__(self, nameserver: str, group: str) -> None:
        self._nameserver = nameserver
        self._group = group
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        self._started = True
        logger.info("message producer started (no-op)", nameserver=self._nameserver, group=self._group)

    async def shutdown(self) -> None:
        if self._started:
            self._started = False
            logger.info("message producer shut down (no-op)")

    async def send(
        self,
        ctx: RequestContext,
        topic: str,
        payload: bytes,
        keys: list[str] | None = None,
    ) -> SendResult:
        if not self._started:
            raise RuntimeError("message producer is not started")
        ctx.log.info("message sent (no-op)", topic=topic, size=len(payload), keys=keys or [])
        return SendResult(status=SEND_OK, message_id=f"noop-{uuid4().hex}")
