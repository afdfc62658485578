"""Helpers shared by the gateway request handlers."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pydantic import ValidationError
from starlette.responses import JSONResponse

from accounts.context import RequestContext
from gateway.views.types import CredentialsRequest

if TYPE_CHECKING:
    from starlette.requests import Request

    from gateway.server.settings import GatewayServerSettings


def request_context(request: Request) -> RequestContext:
    """Build the RequestContext for this request from middleware state and settings."""
    settings: GatewayServerSettings = request.app.state.settings
    trace_id = getattr(request.state, "trace_id", None)
    return RequestContext.with_timeout(settings.request_timeout_seconds, trace_id=trace_id)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def parse_credentials(request: Request) -> CredentialsRequest | JSONResponse:
    """Parse a credentials body, or return the 422 response to send instead."""
    raw_body = await request.body()
    try:
        body = json.loads(raw_body) if raw_body.strip() else {}
    except ValueError:
        return error_response("Invalid JSON body", 422)

    if not isinstance(body, dict):
        return error_response("Expected a JSON object", 422)

    try:
        return CredentialsRequest(**body)
    except (TypeError, ValidationError) as e:
        return error_response(str(e), 422)
