from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from gateway.views.common import request_context

if TYPE_CHECKING:
    from starlette.requests import Request

    from accounts.health.checker import HealthChecker


async def health(request: Request) -> JSONResponse:
    """Composite health report: 200 when every enabled dependency is UP, 503 otherwise."""
    checker: HealthChecker = request.app.state.health_checker
    report = await checker.check(request_context(request))
    status_code = HTTPStatus.OK if report.is_up else HTTPStatus.SERVICE_UNAVAILABLE
    return JSONResponse(report.to_dict(), status_code=status_code)
