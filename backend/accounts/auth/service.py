"""Login use case.

Credential checking here is a placeholder: secrets are compared as plain
strings and the returned token is not signed. Token issuance belongs to a
real identity provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from accounts.dal.player_repository import NotFound

if TYPE_CHECKING:
    from accounts.context import RequestContext
    from accounts.dal.player_repository import PlayerRepository

PLACEHOLDER_TOKEN_PREFIX = "placeholder-token-player-"


class AuthError(Exception):
    """Authentication failure."""


@dataclass(frozen=True, slots=True)
class LoginResult:
    token: str


class AuthService:
    def __init__(self, player_repo: PlayerRepository) -> None:
        self._player_repo = player_repo

    async def login(self, ctx: RequestContext, username: str, password: str) -> LoginResult:
        """Validate credentials. Repository failures propagate unchanged."""
        result = await self._player_repo.get_player_by_username(ctx, username)
        if isinstance(result, NotFound):
            ctx.log.warning("login attempt with unknown username", username=username)
            raise AuthError("Invalid credentials")

        player = result.player
        if player.secret.get_secret_value() != password:
            ctx.log.warning("login attempt with incorrect password", username=username)
            raise AuthError("Invalid credentials")

        ctx.log.info("player logged in", player_id=player.id, username=player.username)
        return LoginResult(token=f"{PLACEHOLDER_TOKEN_PREFIX}{player.id}")
