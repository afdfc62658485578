"""Data access layer: player models, the repository contract and its error taxonomy."""

from accounts.dal.errors import (
    ErrorKind,
    PlayerConflictError,
    RepositoryError,
    RepositoryInternalError,
    StoreUnavailableError,
)
from accounts.dal.models import Player, PlayerView
from accounts.dal.player_repository import NOT_FOUND, Found, NotFound, PlayerLookup, PlayerRepository

__all__ = [
    "NOT_FOUND",
    "ErrorKind",
    "Found",
    "NotFound",
    "Player",
    "PlayerConflictError",
    "PlayerLookup",
    "PlayerRepository",
    "PlayerView",
    "RepositoryError",
    "RepositoryInternalError",
    "StoreUnavailableError",
]
