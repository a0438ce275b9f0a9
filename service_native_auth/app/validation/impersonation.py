"""
Resolution of ``multisig`` / ``impersonate`` claims in a token's extra info.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from shared.logging import get_logger
from ..cache.base import SafeCache
from .errors import InvalidImpersonateError
from .interfaces import ImpersonationApprover

IMPERSONATE_DECISION_TTL = 3600


def get_impersonate_target(extra_info: Optional[Dict[str, Any]]) -> Optional[Any]:
    """The account a token claims to act for, if any (``multisig`` wins)."""
    if not extra_info:
        return None

    target = extra_info.get("multisig")
    if target is None:
        target = extra_info.get("impersonate")

    return target or None


class UrlImpersonationApprover:
    """Asks ``GET {url}/{signer}/{target}``; any 2xx approves, 403 denies.

    Both decisions are cached for an hour. Other failures propagate.
    """

    def __init__(
        self,
        url: str,
        cache: SafeCache,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self._transport = transport
        self.logger = get_logger("native_auth.impersonation")

    async def __call__(self, signer: str, target: str) -> bool:
        cache_key = f"impersonate:{signer}:{target}"

        cached = await self.cache.get(cache_key)
        if cached == 1:
            return True
        if cached == 0:
            return False

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(f"{self.url}/{quote(signer, safe='')}/{quote(target, safe='')}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            if response.status_code == httpx.codes.FORBIDDEN:
                self.logger.info("Impersonation denied", signer=signer, target=target)
                await self.cache.set(cache_key, 0, IMPERSONATE_DECISION_TTL)
                return False
            raise

        await self.cache.set(cache_key, 1, IMPERSONATE_DECISION_TTL)
        return True


class ImpersonationResolver:
    """Applies the configured approvers to an impersonation claim."""

    def __init__(
        self,
        callback: Optional[ImpersonationApprover] = None,
        url_approver: Optional[UrlImpersonationApprover] = None,
    ):
        self.callback = callback
        self.url_approver = url_approver

    async def resolve(self, signer: str, extra_info: Optional[Dict[str, Any]]) -> Optional[str]:
        """Return the approved target, None when no claim is made.

        Raises ``InvalidImpersonateError`` when a claim is present and no
        configured approver accepts it.
        """
        target = get_impersonate_target(extra_info)
        if target is None:
            return None

        if not isinstance(target, str):
            raise InvalidImpersonateError("Impersonate target must be an address")

        if self.callback is not None and await self.callback(signer, target):
            return target

        if self.url_approver is not None and await self.url_approver(signer, target):
            return target

        raise InvalidImpersonateError(details={"signer": signer, "target": target})
