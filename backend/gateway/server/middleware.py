"""ASGI middleware for the gateway server."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.datastructures import Headers, MutableHeaders

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

TRACE_ID_HEADER = "X-Trace-ID"
REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger()


class TraceIdMiddleware:
    """Attach a trace id and a request id to every HTTP request.

    The trace id is taken from the incoming X-Trace-ID header when present,
    so it can span services; the request id identifies this hop only and is
    generated unless the caller supplied one. Both are echoed in the response
    headers, stored on ``request.state`` and bound into structlog contextvars
    for the duration of the request.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        trace_id = headers.get(TRACE_ID_HEADER) or str(uuid4())
        request_id = headers.get(REQUEST_ID_HEADER) or str(uuid4())

        state = scope.setdefault("state", {})
        state["trace_id"] = trace_id
        state["request_id"] = request_id

        async def send_with_ids(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                response_headers[TRACE_ID_HEADER] = trace_id
                response_headers[REQUEST_ID_HEADER] = request_id
            await send(message)

        with structlog.contextvars.bound_contextvars(trace_id=trace_id, request_id=request_id):
            await self.app(scope, receive, send_with_ids)


class RequestLoggingMiddleware:
    """Log one line per HTTP request, at WARNING when slower than the threshold."""

    def __init__(self, app: ASGIApp, *, slow_threshold_ms: int = 500) -> None:
        self.app = app
        self._slow_threshold_ms = slow_threshold_ms

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_capturing_status(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_capturing_status)
        except Exception:
            logger.exception("request failed", method=scope["method"], path=scope["path"])
            raise
        finally:
            latency_ms = (time.perf_counter() - start) * 1000
            client = scope.get("client")
            fields = {
                "status_code": status_code,
                "method": scope["method"],
                "path": scope["path"],
                "latency_ms": round(latency_ms, 3),
                "client_ip": client[0] if client else None,
            }
            if latency_ms > self._slow_threshold_ms:
                logger.warning("slow request", threshold_ms=self._slow_threshold_ms, **fields)
            else:
                logger.info("request completed", **fields)
