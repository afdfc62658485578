"""Abstract interface for player persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from accounts.context import RequestContext
    from accounts.dal.models import Player


@dataclass(frozen=True, slots=True)
class Found:
    """Lookup hit. ``player`` is a copy owned by the caller."""

    player: Player


class NotFound:
    """Lookup miss. Use the NOT_FOUND singleton rather than instantiating."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND: Final = NotFound()

type PlayerLookup = Found | NotFound


class PlayerRepository(ABC):
    """Abstract interface for player persistence.

    Implementations: in-memory (MemoryPlayerRepository) and SQLite with an
    optional read-through cache (SqlitePlayerRepository). Lookups return a
    PlayerLookup; real failures raise RepositoryError subclasses.
    """

    @abstractmethod
    async def create_player(self, ctx: RequestContext, player: Player) -> None:
        """Persist a new player, assigning its id and timestamps in place.

        Raises PlayerConflictError when the username is already taken.
        """

    @abstractmethod
    async def get_player_by_username(self, ctx: RequestContext, username: str) -> PlayerLookup: ...

    @abstractmethod
    async def get_player_by_id(self, ctx: RequestContext, player_id: int) -> PlayerLookup: ...
