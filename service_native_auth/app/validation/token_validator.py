"""
Native auth token validation.

A token proves that the holder of an account key asked for access to an
origin, anchored at a block of the chain. Validation runs these stages in
order and stops at the first failure:

decode -> ttl bound -> origin -> block timestamp -> expiry -> signature
-> impersonation -> result
"""

import time
from typing import Optional

import httpx

from shared.circuit_breaker import CircuitBreaker
from shared.logging import get_logger
from shared.metrics import record_validation
from ..blocks.client import BlockTimestampClient
from ..cache.base import SafeCache
from .address import Address, InvalidAddressError
from .decoder import decode
from .errors import (
    InvalidBlockHashError,
    InvalidSignatureError,
    InvalidTokenError,
    InvalidTokenTtlError,
    NativeAuthValidationError,
    OriginNotAcceptedError,
    TokenExpiredError,
)
from .impersonation import ImpersonationResolver, UrlImpersonationApprover
from .models import DecodedToken, ServerConfig, ValidationResult
from .origins import OriginMatcher
from .signature import Ed25519SignatureVerifier


class NativeAuthServer:
    """Validates native auth access tokens against one ``ServerConfig``."""

    def __init__(
        self,
        config: ServerConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
    ):
        self.config = config
        self.logger = get_logger("native_auth.validator")
        self.cache = SafeCache(config.cache)

        self.origin_matcher = OriginMatcher(config.accepted_origins, config.is_origin_accepted)

        self.blocks = BlockTimestampClient(
            config.api_url,
            self.cache,
            config.max_expiry_seconds,
            extra_headers=config.extra_request_headers,
            timeout=config.request_timeout,
            transport=transport,
            circuit_breaker=circuit_breaker,
        )

        self.signature_verifier = config.verify_signature or Ed25519SignatureVerifier(config.address_hrp)

        url_approver = None
        if config.validate_impersonate_url:
            url_approver = UrlImpersonationApprover(
                config.validate_impersonate_url,
                self.cache,
                timeout=config.request_timeout,
                transport=transport,
            )
        self.impersonation = ImpersonationResolver(config.validate_impersonate_callback, url_approver)

    def decode(self, access_token: str) -> DecodedToken:
        """Split the token into its components without any verification."""
        return decode(access_token)

    async def validate(self, access_token: str) -> ValidationResult:
        """Decode and fully validate ``access_token``.

        Raises a ``NativeAuthValidationError`` subclass naming the failed
        check. Errors talking to the block API or the impersonation endpoint
        propagate unchanged.
        """
        start_time = time.time()

        try:
            result = await self._validate(access_token)
        except NativeAuthValidationError as e:
            record_validation(e.code, time.time() - start_time)
            self.logger.info("Token rejected", code=e.code, reason=e.message)
            raise
        except Exception as e:
            record_validation("error", time.time() - start_time)
            self.logger.warning("Token validation error", error=str(e), error_type=type(e).__name__)
            raise

        record_validation("valid", time.time() - start_time)
        return result

    async def _validate(self, access_token: str) -> ValidationResult:
        decoded = decode(access_token)

        # NOTE: ttl is scaled to milliseconds here and added to the raw block
        # timestamps below; keep in step with token issuers before changing units.
        ttl = decoded.ttl * 1000
        if ttl > self.config.max_expiry_seconds * 1000:
            raise InvalidTokenTtlError(decoded.ttl, self.config.max_expiry_seconds)

        if not await self.origin_matcher.is_origin_accepted(decoded.origin):
            raise OriginNotAcceptedError(details={"origin": decoded.origin})

        block_timestamp = await self.blocks.get_block_timestamp(decoded.block_hash)
        if not block_timestamp:
            raise InvalidBlockHashError(details={"block_hash": decoded.block_hash})

        current_block_timestamp = await self.blocks.get_current_block_timestamp()
        expires = block_timestamp + ttl

        self.logger.debug(
            "Token timing",
            issued=block_timestamp,
            current=current_block_timestamp,
            expires=expires
        )

        if expires < current_block_timestamp:
            raise TokenExpiredError(details={"expires": expires, "current": current_block_timestamp})

        await self._check_signature(decoded)

        impersonate_address = await self.impersonation.resolve(decoded.address, decoded.extra_info)

        return ValidationResult(
            issued=block_timestamp,
            expires=expires,
            origin=decoded.origin,
            address=impersonate_address or decoded.address,
            signer_address=decoded.address,
            extra_info=decoded.extra_info,
        )

    async def _check_signature(self, decoded: DecodedToken):
        try:
            address = Address.from_bech32(decoded.address, self.config.address_hrp).to_bech32()
        except InvalidAddressError as e:
            raise InvalidTokenError(str(e))

        try:
            signature = bytes.fromhex(decoded.signature)
        except ValueError:
            raise InvalidSignatureError("Signature is not hex encoded")

        signed_message = f"{decoded.address}{decoded.body}"
        valid = await self.signature_verifier(address, signed_message, signature)

        if not valid and not self.config.skip_legacy_validation:
            # tokens issued before extra info existed signed an empty object
            valid = await self.signature_verifier(address, f"{signed_message}{{}}", signature)

        if not valid:
            raise InvalidSignatureError()
