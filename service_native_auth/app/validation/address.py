"""
Bech32 account addresses carrying a raw Ed25519 public key.
"""

from dataclasses import dataclass
from typing import Optional

from bech32 import bech32_decode, bech32_encode, convertbits

PUBLIC_KEY_LENGTH = 32


class InvalidAddressError(ValueError):
    """The text is not a bech32 address with the expected prefix and key length."""


@dataclass(frozen=True)
class Address:
    hrp: str
    public_key: bytes

    @classmethod
    def from_bech32(cls, value: str, hrp: Optional[str] = None) -> "Address":
        """Parse ``value``; when ``hrp`` is given the address prefix must equal it."""
        decoded_hrp, data = bech32_decode(value)
        if decoded_hrp is None or data is None:
            raise InvalidAddressError(f"Not a bech32 address: {value!r}")

        if hrp is not None and decoded_hrp != hrp:
            raise InvalidAddressError(f"Expected address prefix {hrp!r}, got {decoded_hrp!r}")

        public_key = convertbits(data, 5, 8, False)
        if public_key is None or len(public_key) != PUBLIC_KEY_LENGTH:
            raise InvalidAddressError(f"Address does not hold a {PUBLIC_KEY_LENGTH}-byte public key")

        return cls(hrp=decoded_hrp, public_key=bytes(public_key))

    def to_bech32(self) -> str:
        return bech32_encode(self.hrp, convertbits(self.public_key, 8, 5))

    def __str__(self) -> str:
        return self.to_bech32()
