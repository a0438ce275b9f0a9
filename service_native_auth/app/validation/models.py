"""
Data types for native auth tokens and validator configuration.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..cache.base import Cache
from .errors import InvalidConfigError
from .interfaces import ImpersonationApprover, OriginApprover, SignatureVerifier

DEFAULT_API_URL = "https://api.multiversx.com"

# One day, expressed the way the ttl bound check scales it
MAX_EXPIRY_SECONDS = 86400 * 1000


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, absent ``extraInfo`` left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


class DecodedToken(_CamelModel):
    """A token split into its components. Nothing here has been verified."""

    address: str
    origin: str
    block_hash: str
    ttl: int
    signature: str
    body: str
    extra_info: Optional[Dict[str, Any]] = None


class ValidationResult(_CamelModel):
    """Outcome of a successful validation."""

    issued: int
    expires: int
    origin: str
    address: str
    signer_address: str
    extra_info: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class WildcardOrigin:
    """An accepted origin of the form ``<protocol>*<domain>``."""

    protocol: str
    domain: str

    def matches(self, origin: str) -> bool:
        return origin.startswith(self.protocol) and origin.endswith(self.domain)


@dataclass
class ServerConfig:
    """Construction-time settings of a ``NativeAuthServer``.

    ``verify_signature``, ``is_origin_accepted`` and
    ``validate_impersonate_callback`` replace or extend the built-in
    behaviour; ``cache`` memoizes block timestamps and impersonation checks.
    """

    max_expiry_seconds: int
    accepted_origins: List[str]
    api_url: Optional[str] = DEFAULT_API_URL
    skip_legacy_validation: bool = False
    validate_impersonate_url: Optional[str] = None
    validate_impersonate_callback: Optional[ImpersonationApprover] = None
    verify_signature: Optional[SignatureVerifier] = None
    is_origin_accepted: Optional[OriginApprover] = None
    cache: Optional[Cache] = None
    extra_request_headers: Dict[str, str] = field(default_factory=dict)
    address_hrp: Optional[str] = None
    request_timeout: float = 10.0

    def __post_init__(self):
        if not self.api_url:
            self.api_url = DEFAULT_API_URL
        self.api_url = self.api_url.rstrip("/")

        if self.validate_impersonate_url:
            self.validate_impersonate_url = self.validate_impersonate_url.rstrip("/")

        max_expiry = self.max_expiry_seconds
        if (
            isinstance(max_expiry, bool)
            or not isinstance(max_expiry, (int, float))
            or not 0 < max_expiry <= MAX_EXPIRY_SECONDS
        ):
            raise InvalidConfigError(
                f"maxExpirySeconds must be greater than 0 and cannot be greater than {MAX_EXPIRY_SECONDS}",
                {"max_expiry_seconds": max_expiry}
            )

        if not isinstance(self.accepted_origins, (list, tuple)):
            raise InvalidConfigError("acceptedOrigins must be an array")

        if len(self.accepted_origins) == 0:
            raise InvalidConfigError("at least one value must be specified in the acceptedOrigins array")

        self.accepted_origins = list(self.accepted_origins)
        self.extra_request_headers = dict(self.extra_request_headers or {})
