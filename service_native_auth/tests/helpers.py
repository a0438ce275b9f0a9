"""
Test accounts, token assembly and a fake block API.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from bech32 import bech32_encode, convertbits
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from service_native_auth.app.validation.codec import encode_value
from service_native_auth.app.validation.signature import compute_bytes_for_signing

API_URL = "https://api.test.local"
IMPERSONATE_URL = "https://impersonate.test.local/check"
BLOCK_HASH = "b3d07a5a2b0d11be4c0c0d0f1c8a1a6f7f7b46d2dbd6a6f1d2c3b4a5968778695"
BLOCK_TIMESTAMP = 1_700_000_000
ORIGIN = "https://app.example.com"


@dataclass
class WalletAccount:
    """An Ed25519 key pair and its bech32 address."""

    private_key: Ed25519PrivateKey
    address: str

    @classmethod
    def generate(cls, hrp: str = "vibe") -> "WalletAccount":
        private_key = Ed25519PrivateKey.generate()
        public_key = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return cls(private_key, bech32_encode(hrp, convertbits(public_key, 8, 5)))

    def sign(self, message: str) -> str:
        return self.private_key.sign(compute_bytes_for_signing(message.encode("utf-8"))).hex()


def build_token(
    account: WalletAccount,
    *,
    origin: str = ORIGIN,
    block_hash: str = BLOCK_HASH,
    ttl: int = 3600,
    extra_info: Optional[Dict[str, Any]] = None,
    legacy: bool = False,
    signer: Optional[WalletAccount] = None,
) -> str:
    """Assemble a token the way a wallet would, optionally signed by someone else."""
    encoded_extra_info = encode_value(json.dumps(extra_info or {}, separators=(",", ":")))
    body = ".".join([encode_value(origin), block_hash, str(ttl), encoded_extra_info])

    message = f"{account.address}{body}"
    if legacy:
        message += "{}"

    signature = (signer or account).sign(message)
    return ".".join([encode_value(account.address), encode_value(body), signature])


class FakeBlockApi:
    """httpx transport answering the block and impersonation endpoints."""

    def __init__(self, current_timestamp: int, blocks: Optional[Dict[str, int]] = None):
        self.current_timestamp = current_timestamp
        self.blocks = dict(blocks or {})
        self.impersonate_status = 200
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.url.host == httpx.URL(IMPERSONATE_URL).host:
            return httpx.Response(self.impersonate_status, json={})

        if path == "/blocks":
            return httpx.Response(200, json=[{"timestamp": self.current_timestamp}])

        block_hash = path.rsplit("/", 1)[-1]
        if block_hash in self.blocks:
            return httpx.Response(200, json=self.blocks[block_hash])

        return httpx.Response(404, json={"message": "Block not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, host: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]
