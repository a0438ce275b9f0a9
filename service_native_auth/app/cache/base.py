"""
Pluggable cache contract and the failure-tolerant wrapper the validator uses.
"""

from typing import Any, Optional, Protocol

from shared.logging import get_logger


class Cache(Protocol):
    """Key/value store with per-entry TTL supplied by the caller."""

    async def get_value(self, key: str) -> Optional[Any]:
        ...

    async def set_value(self, key: str, value: Any, ttl: int) -> None:
        ...


class SafeCache:
    """Wraps an optional ``Cache`` so that absence and failure look like a miss."""

    def __init__(self, cache: Optional[Cache] = None):
        self.cache = cache
        self.logger = get_logger("native_auth.cache")

    @property
    def enabled(self) -> bool:
        return self.cache is not None

    async def get(self, key: str) -> Optional[Any]:
        if self.cache is None:
            return None

        try:
            return await self.cache.get_value(key)
        except Exception as e:
            self.logger.warning("Cache fetch error", key=key, error=str(e))
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        if self.cache is None:
            return

        try:
            await self.cache.set_value(key, value, ttl)
        except Exception as e:
            self.logger.warning("Cache write error", key=key, error=str(e))
