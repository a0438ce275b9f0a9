"""
Parsing of the compact ``address.body.signature`` token format.
"""

import json

from .codec import decode_value
from .errors import InvalidTokenError
from .models import DecodedToken

# encode_value("{}")
EMPTY_EXTRA_INFO = "e30"


def decode(access_token: str) -> DecodedToken:
    """Split an access token into its components without validating it.

    The token is ``<address_b64>.<body_b64>.<signature_hex>`` and the
    decoded body is ``<origin_b64>.<blockHash>.<ttl>.<extraInfo_b64>``.
    Raises ``InvalidTokenError`` on any structural problem.
    """
    components = access_token.split(".")
    if len(components) != 3:
        raise InvalidTokenError("Token must have exactly three segments")

    encoded_address, encoded_body, signature = components

    try:
        address = decode_value(encoded_address)
        body = decode_value(encoded_body)
    except ValueError:
        raise InvalidTokenError("Token segments are not valid base64")

    body_components = body.split(".")
    if len(body_components) != 4:
        raise InvalidTokenError("Token body must have exactly four fields")

    encoded_origin, block_hash, ttl, encoded_extra_info = body_components

    try:
        extra_info = json.loads(decode_value(encoded_extra_info))
    except ValueError:
        raise InvalidTokenError("Token extra info is not valid JSON")

    try:
        origin = decode_value(encoded_origin)
    except ValueError:
        raise InvalidTokenError("Token origin is not valid base64")

    if not isinstance(extra_info, dict):
        raise InvalidTokenError("Token extra info must be a JSON object")

    if not (ttl.isascii() and ttl.isdigit()):
        raise InvalidTokenError("Token ttl is not a decimal number of seconds")

    if encoded_extra_info == EMPTY_EXTRA_INFO or not extra_info:
        extra_info = None

    return DecodedToken(
        address=address,
        origin=origin,
        block_hash=block_hash,
        ttl=int(ttl),
        signature=signature,
        body=body,
        extra_info=extra_info,
    )
