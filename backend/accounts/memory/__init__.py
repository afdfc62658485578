"""Volatile in-process persistence backend."""

from accounts.memory.player_repository import MemoryPlayerRepository

__all__ = ["MemoryPlayerRepository"]
