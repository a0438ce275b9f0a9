"""
Redis-backed cache for block timestamps and impersonation decisions.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis

from shared.logging import get_logger
from shared.errors import ExternalServiceError


class RedisCache:
    """Stores JSON-encoded values under a key prefix with a per-entry TTL."""

    def __init__(self, redis_url: str, key_prefix: str = "native-auth:"):
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.logger = get_logger("native_auth.cache.redis")
        self.redis: Optional[redis.Redis] = None

    async def start(self):
        """Connect and ping Redis."""
        try:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )

            await self.redis.ping()

            self.logger.info("Redis cache started")

        except Exception as e:
            self.logger.error("Failed to start Redis cache", error=str(e))
            raise ExternalServiceError("redis", str(e))

    async def stop(self):
        """Close the Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis cache stopped")

    async def get_value(self, key: str) -> Optional[Any]:
        if self.redis is None:
            return None

        cached = await self.redis.get(self.key_prefix + key)
        if cached is None:
            return None

        return json.loads(cached)

    async def set_value(self, key: str, value: Any, ttl: int) -> None:
        if self.redis is None or ttl <= 0:
            return

        await self.redis.setex(self.key_prefix + key, ttl, json.dumps(value))

    async def ping(self) -> bool:
        if self.redis is None:
            return False
        return bool(await self.redis.ping())
