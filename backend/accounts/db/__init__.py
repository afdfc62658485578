"""SQLite database layer: connection management and the durable player repository."""

from accounts.db.connection import Database
from accounts.db.player_repository import PLAYER_CACHE_KEY, PLAYER_CACHE_TTL_SECONDS, SqlitePlayerRepository

__all__ = [
    "PLAYER_CACHE_KEY",
    "PLAYER_CACHE_TTL_SECONDS",
    "Database",
    "SqlitePlayerRepository",
]
