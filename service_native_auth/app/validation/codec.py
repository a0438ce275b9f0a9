"""
URL-safe base64 helpers for native auth token segments.
"""

import base64


def unescape(value: str) -> str:
    """Map the URL-safe alphabet back to standard base64."""
    return value.replace("-", "+").replace("_", "/")


def escape(value: str) -> str:
    """Map standard base64 to the URL-safe alphabet and drop padding."""
    return value.replace("+", "-").replace("/", "_").rstrip("=")


def decode_value(value: str) -> str:
    """Decode a token segment into UTF-8 text.

    Segments are sent without padding, so it is restored before decoding.
    Raises ``ValueError`` (``binascii.Error`` or ``UnicodeDecodeError``) on
    malformed input.
    """
    standard = unescape(value)
    standard += "=" * (-len(standard) % 4)
    return base64.b64decode(standard, validate=True).decode("utf-8")


def encode_value(value: str) -> str:
    """Encode UTF-8 text as an unpadded URL-safe base64 segment."""
    return escape(base64.b64encode(value.encode("utf-8")).decode("ascii"))
