"""Player use cases."""

from accounts.players.service import PlayerNotFoundError, PlayerService

__all__ = ["PlayerNotFoundError", "PlayerService"]
