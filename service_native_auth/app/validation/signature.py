"""
Ed25519 verification of signed account messages.

Wallets do not sign the raw message: they sign the keccak256 digest of
``"\\x17Elrond Signed Message:\\n" + len(message) + message``, so the same
bytes are rebuilt here before verifying.
"""

from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from cryptography.hazmat.primitives.serialization import load_der_public_key
from eth_utils import keccak

from .address import Address

MESSAGE_PREFIX = b"\x17Elrond Signed Message:\n"

# id-Ed25519, 1.3.101.112
ED25519_OID = bytes([0x06, 0x03, 0x2B, 0x65, 0x70])


def compute_bytes_for_signing(data: bytes) -> bytes:
    """Digest that a wallet actually signs for ``data``."""
    size = str(len(data)).encode("ascii")
    return keccak(MESSAGE_PREFIX + size + data)


def ed25519_public_key_to_der(public_key: bytes) -> bytes:
    """Wrap a raw 32-byte key in a SubjectPublicKeyInfo structure."""
    algorithm = bytes([0x30, len(ED25519_OID)]) + ED25519_OID
    subject_public_key = bytes([0x03, len(public_key) + 1, 0x00]) + public_key
    elements = algorithm + subject_public_key
    return bytes([0x30, len(elements)]) + elements


class Ed25519SignatureVerifier:
    """Default ``SignatureVerifier``: the address itself is the public key."""

    def __init__(self, hrp: Optional[str] = None):
        self.hrp = hrp

    async def __call__(self, address: str, message: str, signature: bytes) -> bool:
        return self.verify(Address.from_bech32(address, self.hrp), message, signature)

    def verify(self, address: Address, message: str, signature: bytes) -> bool:
        public_key = load_der_public_key(ed25519_public_key_to_der(address.public_key))
        if not isinstance(public_key, Ed25519PublicKey):
            raise TypeError("Expected an Ed25519 public key")

        signed_bytes = compute_bytes_for_signing(message.encode("utf-8"))

        try:
            public_key.verify(signature, signed_bytes)
        except InvalidSignature:
            return False

        return True
