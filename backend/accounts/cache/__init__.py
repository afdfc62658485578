"""Cache handle for read-through player lookups."""

from accounts.cache.client import CacheError, PlayerCache, RedisCache

__all__ = ["CacheError", "PlayerCache", "RedisCache"]
