"""
Error kinds raised by native auth token validation.

Construction failures (``InvalidConfigError`` and its subclasses) and
validation failures (``NativeAuthValidationError`` subclasses) are separate
branches so a bad config is never reported as a bad token.
"""

from typing import Any, Dict, Optional

from shared.errors import AuthenticationError, ConfigurationError


class InvalidConfigError(ConfigurationError):
    """The validator was constructed with invalid arguments."""

    def __init__(self, message: str = "Invalid native auth configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_CONFIG", message, details)


class InvalidWildcardOriginError(InvalidConfigError):
    """An accepted origin has more than one '*' or an unsupported protocol before it."""

    def __init__(self, origin: str):
        super().__init__(f"Invalid wildcard origin: {origin}", {"origin": origin})
        self.code = "INVALID_WILDCARD_ORIGIN"


class NativeAuthValidationError(AuthenticationError):
    """Base class for every reason a token can be rejected."""

    code_name = "AUTHENTICATION_ERROR"
    default_message = "Authentication failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(self.code_name, message or self.default_message, details)


class InvalidTokenError(NativeAuthValidationError):
    code_name = "INVALID_TOKEN"
    default_message = "Invalid token"


class InvalidTokenTtlError(NativeAuthValidationError):
    code_name = "INVALID_TOKEN_TTL"

    def __init__(self, ttl: int, max_ttl: int):
        super().__init__(
            f"The provided TTL {ttl} is larger than the maximum allowed TTL {max_ttl}",
            {"ttl": ttl, "max_ttl": max_ttl}
        )
        self.ttl = ttl
        self.max_ttl = max_ttl


class OriginNotAcceptedError(NativeAuthValidationError):
    code_name = "ORIGIN_NOT_ACCEPTED"
    default_message = "Origin not accepted"


class InvalidBlockHashError(NativeAuthValidationError):
    code_name = "INVALID_BLOCK_HASH"
    default_message = "Invalid block hash"


class TokenExpiredError(NativeAuthValidationError):
    code_name = "TOKEN_EXPIRED"
    default_message = "Token expired"


class InvalidSignatureError(NativeAuthValidationError):
    code_name = "INVALID_SIGNATURE"
    default_message = "Invalid signature"


class InvalidImpersonateError(NativeAuthValidationError):
    code_name = "INVALID_IMPERSONATE"
    default_message = "Invalid impersonate"
