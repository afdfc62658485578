"""Player use cases: registration and public profile lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING

from accounts.dal.models import Player
from accounts.dal.player_repository import NotFound

if TYPE_CHECKING:
    from accounts.context import RequestContext
    from accounts.dal.models import PlayerView
    from accounts.dal.player_repository import PlayerRepository


class PlayerNotFoundError(Exception):
    def __init__(self, player_id: int) -> None:
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


class PlayerService:
    def __init__(self, player_repo: PlayerRepository) -> None:
        self._player_repo = player_repo

    async def register(self, ctx: RequestContext, username: str, secret: str) -> Player:
        """Create a player. PlayerConflictError propagates for a taken username."""
        player = Player(username=username, secret=secret)
        await self._player_repo.create_player(ctx, player)
        return player

    async def get_player_info(self, ctx: RequestContext, player_id: int) -> PlayerView:
        result = await self._player_repo.get_player_by_id(ctx, player_id)
        if isinstance(result, NotFound):
            ctx.log.warning("player not found", player_id=player_id)
            raise PlayerNotFoundError(player_id)
        ctx.log.info("player information retrieved", player_id=player_id)
        return result.player.to_view()
