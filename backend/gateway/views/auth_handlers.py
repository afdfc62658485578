from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from accounts.auth.service import AuthError
from gateway.views.common import error_response, parse_credentials, request_context

if TYPE_CHECKING:
    from starlette.requests import Request

    from accounts.auth.service import AuthService


async def login(request: Request) -> JSONResponse:
    auth_service: AuthService = request.app.state.auth_service

    credentials = await parse_credentials(request)
    if isinstance(credentials, JSONResponse):
        return credentials

    try:
        result = await auth_service.login(request_context(request), credentials.username, credentials.password)
    except AuthError as e:
        return error_response(str(e), HTTPStatus.UNAUTHORIZED)

    return JSONResponse({"token": result.token})
