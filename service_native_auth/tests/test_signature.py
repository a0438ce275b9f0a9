"""
Unit tests for addresses and Ed25519 signature verification.
"""

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from eth_utils import keccak

from service_native_auth.app.validation.address import Address, InvalidAddressError
from service_native_auth.app.validation.signature import (
    Ed25519SignatureVerifier,
    compute_bytes_for_signing,
    ed25519_public_key_to_der,
)
from .helpers import WalletAccount


class TestAddress:
    """Test cases for bech32 address parsing."""

    def test_round_trip(self, account):
        address = Address.from_bech32(account.address)

        assert address.hrp == "vibe"
        assert len(address.public_key) == 32
        assert address.to_bech32() == account.address

    def test_public_key_matches_account(self, account):
        raw = account.private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

        assert Address.from_bech32(account.address).public_key == raw

    def test_expected_hrp(self):
        account = WalletAccount.generate(hrp="vibe")

        assert Address.from_bech32(account.address, hrp="vibe").hrp == "vibe"
        with pytest.raises(InvalidAddressError):
            Address.from_bech32(account.address, hrp="erd")

    @pytest.mark.parametrize("value", ["", "not-an-address", "erd1qqqqqqqq"])
    def test_invalid(self, value):
        with pytest.raises(InvalidAddressError):
            Address.from_bech32(value)

    def test_bad_checksum(self, account):
        last = "q" if account.address[-1] != "q" else "p"

        with pytest.raises(InvalidAddressError):
            Address.from_bech32(account.address[:-1] + last)


class TestSigningBytes:
    """Test cases for message canonicalization."""

    def test_prefix_and_length(self):
        data = "erd1abc.body".encode("utf-8")

        expected = keccak(b"\x17Elrond Signed Message:\n" + b"12" + data)

        assert compute_bytes_for_signing(data) == expected
        assert len(expected) == 32

    def test_length_counts_bytes_not_characters(self):
        data = "é".encode("utf-8")

        assert compute_bytes_for_signing(data) == keccak(b"\x17Elrond Signed Message:\n2" + data)

    def test_der_matches_subject_public_key_info(self):
        public_key = Ed25519PrivateKey.generate().public_key()
        raw = public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)

        der = ed25519_public_key_to_der(raw)

        assert der == public_key.public_bytes(Encoding.DER, PublicFormat.SubjectPublicKeyInfo)
        assert der[:12] == bytes.fromhex("302a300506032b6570032100")


class TestEd25519SignatureVerifier:
    """Test cases for the default verifier."""

    @pytest.mark.asyncio
    async def test_valid_signature(self, account):
        verifier = Ed25519SignatureVerifier()
        message = f"{account.address}some-body"

        assert await verifier(account.address, message, bytes.fromhex(account.sign(message))) is True

    @pytest.mark.asyncio
    async def test_wrong_message(self, account):
        verifier = Ed25519SignatureVerifier()
        signature = bytes.fromhex(account.sign("original"))

        assert await verifier(account.address, "tampered", signature) is False

    @pytest.mark.asyncio
    async def test_wrong_signer(self, account, other_account):
        verifier = Ed25519SignatureVerifier()
        signature = bytes.fromhex(other_account.sign("message"))

        assert await verifier(account.address, "message", signature) is False

    @pytest.mark.asyncio
    async def test_raw_message_signature_rejected(self, account):
        verifier = Ed25519SignatureVerifier()
        signature = account.private_key.sign(b"message")

        assert await verifier(account.address, "message", signature) is False

    @pytest.mark.asyncio
    async def test_truncated_signature(self, account):
        verifier = Ed25519SignatureVerifier()
        signature = bytes.fromhex(account.sign("message"))[:10]

        assert await verifier(account.address, "message", signature) is False

    @pytest.mark.asyncio
    async def test_malformed_address_raises(self):
        verifier = Ed25519SignatureVerifier()

        with pytest.raises(InvalidAddressError):
            await verifier("garbage", "message", b"\x00" * 64)
