"""
Block timestamp client for the chain API.

Block timestamps anchor a token's issuance time: the token references a
block hash, and its expiry is measured against the latest block.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from shared.circuit_breaker import CircuitBreaker
from shared.errors import ExternalServiceError
from shared.logging import get_logger
from shared.metrics import record_oracle_request
from ..cache.base import SafeCache

LATEST_TIMESTAMP_CACHE_KEY = "block:timestamp:latest"
# the chain head moves every few seconds
LATEST_TIMESTAMP_TTL = 6


class BlockTimestampClient:
    """Fetches current and historical block timestamps, memoized in a cache."""

    def __init__(
        self,
        api_url: str,
        cache: SafeCache,
        historical_ttl: int,
        *,
        extra_headers: Optional[Dict[str, str]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.cache = cache
        self.historical_ttl = int(historical_ttl)
        self.extra_headers = dict(extra_headers or {})
        self.timeout = timeout
        self._transport = transport
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            f"block-api:{self.api_url}",
            failure_threshold=5,
            recovery_timeout=30.0
        )
        self.logger = get_logger("native_auth.blocks")

    async def get_current_block_timestamp(self) -> int:
        """Timestamp of the most recent block."""
        cached = await self.cache.get(LATEST_TIMESTAMP_CACHE_KEY)
        if cached:
            record_oracle_request("latest", "cache_hit")
            return int(cached)

        try:
            blocks = await self.circuit_breaker.call(
                self._get, f"{self.api_url}/blocks?size=1&fields=timestamp"
            )
        except Exception:
            record_oracle_request("latest", "error")
            raise

        if not blocks:
            record_oracle_request("latest", "error")
            raise ExternalServiceError("block-api", "latest block list is empty")

        timestamp = int(blocks[0]["timestamp"])
        record_oracle_request("latest", "ok")

        await self.cache.set(LATEST_TIMESTAMP_CACHE_KEY, timestamp, LATEST_TIMESTAMP_TTL)

        return timestamp

    async def get_block_timestamp(self, block_hash: str) -> Optional[int]:
        """Timestamp of the block with ``block_hash``, or None if the API does not know it."""
        cache_key = f"block:timestamp:{block_hash}"

        cached = await self.cache.get(cache_key)
        if cached:
            record_oracle_request("block", "cache_hit")
            return int(cached)

        url = f"{self.api_url}/blocks/{quote(block_hash, safe='')}?extract=timestamp"

        async def _fetch():
            try:
                return await self._get(url)
            except httpx.HTTPStatusError as e:
                if e.response.status_code == httpx.codes.NOT_FOUND:
                    return None
                raise

        try:
            timestamp = await self.circuit_breaker.call(_fetch)
        except Exception:
            record_oracle_request("block", "error")
            raise

        if timestamp is None:
            record_oracle_request("block", "not_found")
            self.logger.info("Block not found", block_hash=block_hash)
            return None

        timestamp = int(timestamp)
        record_oracle_request("block", "ok")

        # mined blocks never change their timestamp
        await self.cache.set(cache_key, timestamp, self.historical_ttl)

        return timestamp

    async def _get(self, url: str) -> Any:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers=self.extra_headers,
            transport=self._transport
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()
