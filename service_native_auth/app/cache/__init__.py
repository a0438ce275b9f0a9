"""
Cache backends for block timestamps and impersonation decisions.

The validator only depends on the ``Cache`` protocol (get/set with a TTL
chosen by the caller). Entries are memoization only: with no cache, or a
failing one, validation outcomes are unchanged.
"""

from .base import Cache, SafeCache
from .memory import MemoryCache
from .redis_cache import RedisCache

__all__ = ["Cache", "SafeCache", "MemoryCache", "RedisCache"]
