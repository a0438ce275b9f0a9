"""
Native auth token validation package.

Tokens are ``<address>.<body>.<signature>`` strings signed by an account's
Ed25519 key. Validation covers:

- Decoding the token and its body (origin, block hash, ttl, extra info).
- Checking the requested ttl against the server maximum.
- Matching the origin against accepted origins, wildcards included.
- Anchoring issuance and expiry to block timestamps from the chain API.
- Verifying the signature over the wallet's signed-message encoding.
- Resolving ``multisig`` / ``impersonate`` claims through an approver.
"""

from .decoder import decode
from .errors import (
    InvalidBlockHashError,
    InvalidConfigError,
    InvalidImpersonateError,
    InvalidSignatureError,
    InvalidTokenError,
    InvalidTokenTtlError,
    InvalidWildcardOriginError,
    NativeAuthValidationError,
    OriginNotAcceptedError,
    TokenExpiredError,
)
from .models import DecodedToken, ServerConfig, ValidationResult, WildcardOrigin
from .token_validator import NativeAuthServer

__all__ = [
    "decode",
    "DecodedToken",
    "ServerConfig",
    "ValidationResult",
    "WildcardOrigin",
    "NativeAuthServer",
    "InvalidBlockHashError",
    "InvalidConfigError",
    "InvalidImpersonateError",
    "InvalidSignatureError",
    "InvalidTokenError",
    "InvalidTokenTtlError",
    "InvalidWildcardOriginError",
    "NativeAuthValidationError",
    "OriginNotAcceptedError",
    "TokenExpiredError",
]
