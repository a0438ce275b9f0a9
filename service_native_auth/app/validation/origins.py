"""
Accepted-origin checks, including ``<protocol>*<domain>`` wildcard entries.
"""

from collections import OrderedDict
from typing import List, Optional

from shared.logging import get_logger
from .errors import InvalidWildcardOriginError
from .interfaces import OriginApprover
from .models import WildcardOrigin

WILDCARD_PROTOCOLS = ("", "http://", "https://")
ACCEPTED_WILDCARD_CACHE_SIZE = 1000


def parse_wildcard_origins(accepted_origins: List[str]) -> List[WildcardOrigin]:
    """Extract the wildcard entries of an accepted-origins list.

    The protocol is whatever precedes the ``*`` and must be empty, http://
    or https://; the domain is everything after it.
    """
    wildcard_origins = []

    for origin in accepted_origins:
        if "*" not in origin:
            continue

        components = origin.split("*")
        if len(components) != 2:
            raise InvalidWildcardOriginError(origin)

        protocol, domain = components
        if protocol not in WILDCARD_PROTOCOLS:
            raise InvalidWildcardOriginError(origin)

        wildcard_origins.append(WildcardOrigin(protocol=protocol, domain=domain))

    return wildcard_origins


class AcceptedOriginCache:
    """Insertion-ordered set of origins; the oldest is dropped past capacity."""

    def __init__(self, capacity: int = ACCEPTED_WILDCARD_CACHE_SIZE):
        self.capacity = capacity
        self._origins: "OrderedDict[str, None]" = OrderedDict()

    def __contains__(self, origin: str) -> bool:
        return origin in self._origins

    def __len__(self) -> int:
        return len(self._origins)

    def add(self, origin: str):
        self._origins[origin] = None

        if len(self._origins) > self.capacity:
            self._origins.popitem(last=False)


class OriginMatcher:
    """Decides whether a token's origin is in the accepted list."""

    def __init__(self, accepted_origins: List[str], approver: Optional[OriginApprover] = None):
        self.accepted_origins = list(accepted_origins)
        self.wildcard_origins = parse_wildcard_origins(self.accepted_origins)
        self.approver = approver
        self.accepted_wildcard_cache = AcceptedOriginCache()
        self.logger = get_logger("native_auth.origins")

    async def is_origin_accepted(self, origin: str) -> bool:
        if self._is_wildcard_origin_accepted(origin):
            return True

        if origin in self.accepted_origins or f"https://{origin}" in self.accepted_origins:
            return True

        if self.approver is not None:
            return bool(await self.approver(origin))

        self.logger.debug("Origin not accepted", origin=origin)
        return False

    def _is_wildcard_origin_accepted(self, origin: str) -> bool:
        if origin in self.accepted_wildcard_cache:
            return True

        if not self.wildcard_origins:
            return False

        if self._match_wildcard(origin) is None:
            return False

        self.accepted_wildcard_cache.add(origin)
        return True

    def _match_wildcard(self, origin: str) -> Optional[WildcardOrigin]:
        return next((w for w in self.wildcard_origins if w.matches(origin)), None)
