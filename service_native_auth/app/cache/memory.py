"""
In-process TTL cache used when no Redis URL is configured.
"""

import time
from typing import Any, Dict, Optional, Tuple


class MemoryCache:
    """Dictionary-backed cache; expired entries are dropped on read."""

    def __init__(self, max_entries: int = 10000):
        self.max_entries = max_entries
        self._entries: Dict[str, Tuple[Any, float]] = {}

    async def get_value(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at <= time.monotonic():
            self._entries.pop(key, None)
            return None

        return value

    async def set_value(self, key: str, value: Any, ttl: int) -> None:
        if ttl <= 0:
            return

        if key not in self._entries and len(self._entries) >= self.max_entries:
            self._evict()

        self._entries[key] = (value, time.monotonic() + ttl)

    def _evict(self):
        now = time.monotonic()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

        # still full: drop the oldest insertion
        if len(self._entries) >= self.max_entries:
            del self._entries[next(iter(self._entries))]

    def __len__(self) -> int:
        return len(self._entries)
