"""
Native auth service.
"""

from typing import Any, Dict, Optional, Union

import httpx
from fastapi import Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.base_service import SERVICE_VERSION, BaseService
from shared.circuit_breaker import CircuitBreaker, CircuitBreakerOpenException
from shared.errors import ExternalServiceError
from shared.logging import set_address_context
from .cache import MemoryCache, RedisCache
from .validation import (
    InvalidTokenError,
    NativeAuthServer,
    NativeAuthValidationError,
    ServerConfig,
)


class TokenVerificationRequest(BaseModel):
    """Request model for token verification."""
    token: str


def strip_bearer(token: str) -> str:
    if token.startswith("Bearer "):
        return token[len("Bearer "):]
    return token


class NativeAuthService(BaseService):
    """HTTP front for ``NativeAuthServer``."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, **config_overrides: Any):
        super().__init__("native_auth", 8010, **config_overrides)

        self.cache: Union[MemoryCache, RedisCache]
        if self.config.redis_url:
            self.cache = RedisCache(self.config.redis_url)
        else:
            self.cache = MemoryCache()

        self.validator = NativeAuthServer(ServerConfig(
            api_url=self.config.api_url,
            max_expiry_seconds=self.config.max_expiry_seconds,
            accepted_origins=self.config.accepted_origins,
            skip_legacy_validation=self.config.skip_legacy_validation,
            validate_impersonate_url=self.config.validate_impersonate_url,
            address_hrp=self.config.address_hrp or None,
            request_timeout=self.config.request_timeout,
            cache=self.cache,
        ), transport=transport, circuit_breaker=CircuitBreaker(
            "block-api",
            failure_threshold=self.config.oracle_failure_threshold,
            recovery_timeout=self.config.oracle_recovery_timeout
        ))

        self._setup_auth_routes()

    async def _on_startup(self):
        if "*" in self.config.accepted_origins:
            self.logger.warning(
                "Tokens for any origin are accepted; set NATIVE_AUTH_ACCEPTED_ORIGINS to restrict them",
                accepted_origins=self.config.accepted_origins
            )

        if isinstance(self.cache, RedisCache):
            await self.cache.start()

    async def _on_shutdown(self):
        if isinstance(self.cache, RedisCache):
            await self.cache.stop()

    async def _validate(self, token: str):
        try:
            result = await self.validator.validate(strip_bearer(token))
        except (httpx.HTTPError, CircuitBreakerOpenException) as e:
            raise ExternalServiceError("upstream", str(e), {"error_type": type(e).__name__})

        set_address_context(result.address)
        return result

    def _setup_auth_routes(self):
        """Set up auth-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": self.service_name,
                "message": "Native auth token validation service",
                "version": SERVICE_VERSION
            }

        @self.app.post("/auth/verify")
        async def verify_token(request: TokenVerificationRequest):
            """Validate a token; failures are reported by the error handlers."""
            result = await self._validate(request.token)

            self.logger.info("Token verified", address=result.address, signer=result.signer_address)

            return {
                "valid": True,
                "result": result.to_dict()
            }

        @self.app.post("/auth/decode")
        async def decode_token(request: TokenVerificationRequest):
            """Decode a token without validating it."""
            try:
                decoded = self.validator.decode(strip_bearer(request.token))
            except InvalidTokenError as e:
                return JSONResponse(status_code=400, content=e.to_response().model_dump())

            return {"decoded": decoded.to_dict()}

        @self.app.get("/auth")
        async def authenticate(access_token: Optional[str] = Query(default=None, alias="accessToken")):
            """Query-string variant used by browser redirects.

            ``user`` is the account the token acts for: the impersonated
            account when a claim was approved, otherwise the signer.
            """
            if not access_token:
                return JSONResponse(
                    status_code=400,
                    content={"success": False, "error": "accessToken query parameter is required"}
                )

            try:
                result = await self._validate(access_token)
            except NativeAuthValidationError as e:
                self.logger.info("Token rejected", code=e.code)
                return JSONResponse(
                    status_code=401,
                    content={"success": False, "error": "Invalid or expired token"}
                )

            return {
                "success": True,
                "message": "Token validated successfully",
                "user": {"user": result.address}
            }

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check the block API and, when configured, Redis."""
        dependencies = {}

        try:
            await self.validator.blocks.get_current_block_timestamp()
            dependencies["block_api"] = "ok"
        except Exception:
            dependencies["block_api"] = "error"

        if isinstance(self.cache, RedisCache):
            try:
                dependencies["redis"] = "ok" if await self.cache.ping() else "error"
            except Exception:
                dependencies["redis"] = "error"

        return dependencies


def create_app(**config_overrides: Any):
    """Create FastAPI application."""
    service = NativeAuthService(**config_overrides)
    return service.app


if __name__ == "__main__":
    service = NativeAuthService()
    service.run()
