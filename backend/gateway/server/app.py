from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from accounts.auth import AuthService
from accounts.bootstrap import build_dependencies
from accounts.dal.errors import ErrorKind, RepositoryError
from accounts.logging import setup_logging
from accounts.players import PlayerService
from accounts.settings import AccountsSettings
from gateway.server.middleware import RequestLoggingMiddleware, TraceIdMiddleware
from gateway.server.settings import GatewayServerSettings
from gateway.views.auth_handlers import login
from gateway.views.health_handlers import health
from gateway.views.player_handlers import create_player, get_player

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request
    from starlette.responses import Response

    from accounts.bootstrap import Dependencies


async def _repository_error_handler(request: Request, exc: Exception) -> Response:
    """Map repository failures that escaped the handlers onto JSON errors."""
    repo_exc = cast("RepositoryError", exc)
    status_code = HTTPStatus.CONFLICT if repo_exc.kind == ErrorKind.CONFLICT else HTTPStatus.INTERNAL_SERVER_ERROR
    logger.error(
        "repository error",
        kind=repo_exc.kind,
        error=str(repo_exc),
        method=request.method,
        path=request.url.path,
    )
    return JSONResponse({"error": str(repo_exc)}, status_code=status_code)


async def _unhandled_error_handler(request: Request, exc: Exception) -> Response:
    logger.error("unhandled error", method=request.method, path=request.url.path, exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


def create_app(
    settings: GatewayServerSettings | None = None,
    accounts_settings: AccountsSettings | None = None,
    dependencies: Dependencies | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = GatewayServerSettings()
    if dependencies is None:
        if accounts_settings is None:  # pragma: no cover
            accounts_settings = AccountsSettings()
        dependencies = build_dependencies(accounts_settings)

    routes = [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/api/v1/players", create_player, methods=["POST"], name="create_player"),
        Route("/api/v1/players/{player_id:int}", get_player, methods=["GET"], name="get_player"),
        Route("/api/v1/login", login, methods=["POST"], name="login"),
    ]

    deps = dependencies

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        await deps.start()
        try:
            yield
        finally:
            await deps.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={
            RepositoryError: _repository_error_handler,
            Exception: _unhandled_error_handler,
        },
    )
    app.add_middleware(RequestLoggingMiddleware, slow_threshold_ms=settings.slow_request_threshold_ms)  # type: ignore[arg-type]
    app.add_middleware(TraceIdMiddleware)  # type: ignore[arg-type]

    app.state.settings = settings
    app.state.deps = deps
    app.state.player_service = PlayerService(deps.repository)
    app.state.auth_service = AuthService(deps.repository)
    app.state.health_checker = deps.health_checker()

    logger.info("gateway server ready", persistence_mode=deps.settings.persistence_mode)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory gateway.server.app:get_app."""
    s = GatewayServerSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, accounts_settings=AccountsSettings())
