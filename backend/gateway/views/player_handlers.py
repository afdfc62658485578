from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse

from accounts.dal.errors import PlayerConflictError
from accounts.players.service import PlayerNotFoundError
from gateway.views.common import error_response, parse_credentials, request_context

if TYPE_CHECKING:
    from starlette.requests import Request

    from accounts.players.service import PlayerService


async def create_player(request: Request) -> JSONResponse:
    player_service: PlayerService = request.app.state.player_service

    credentials = await parse_credentials(request)
    if isinstance(credentials, JSONResponse):
        return credentials

    ctx = request_context(request)
    try:
        player = await player_service.register(ctx, credentials.username, credentials.password)
    except PlayerConflictError as e:
        return error_response(str(e), HTTPStatus.CONFLICT)

    return JSONResponse(player.to_view().model_dump(mode="json"), status_code=HTTPStatus.CREATED)


async def get_player(request: Request) -> JSONResponse:
    player_service: PlayerService = request.app.state.player_service
    player_id: int = request.path_params["player_id"]

    ctx = request_context(request)
    try:
        view = await player_service.get_player_info(ctx, player_id)
    except PlayerNotFoundError as e:
        return error_response(str(e), HTTPStatus.NOT_FOUND)

    return JSONResponse(view.model_dump(mode="json"))
