"""Unit tests for SigningCredential.

Tests for chainblob/core/keys.py - secret parsing, address derivation and
transaction signing.

Run with:
    pytest tests/unit/test_keys.py -v
"""

import base64
import hashlib

import pytest
from bech32 import bech32_encode, convertbits
from nacl.signing import VerifyKey

from conftest import TEST_SEED, TEST_SECRET

from chainblob.core.errors import CredentialError
from chainblob.core.keys import SigningCredential, blake2b_256


def suiprivkey(seed: bytes, flag: int = 0) -> str:
    return bech32_encode("suiprivkey", convertbits(bytes([flag]) + seed, 8, 5))


@pytest.mark.fast
class TestFromSecret:
    """Tests for parsing supported secret encodings."""

    def test_hex_secret(self, credential):
        assert SigningCredential.from_secret(TEST_SECRET).address == credential.address

    def test_bech32_secret(self, credential):
        parsed = SigningCredential.from_secret(suiprivkey(TEST_SEED))
        assert parsed.address == credential.address

    def test_base64_flagged_secret(self, credential):
        secret = base64.b64encode(bytes([0]) + TEST_SEED).decode()
        assert SigningCredential.from_secret(secret).address == credential.address

    def test_base64_bare_seed(self, credential):
        secret = base64.b64encode(TEST_SEED).decode()
        assert SigningCredential.from_secret(secret).address == credential.address

    def test_base64_seed_and_public_key(self, credential):
        secret = base64.b64encode(TEST_SEED + credential.public_key).decode()
        assert SigningCredential.from_secret(secret).address == credential.address

    def test_surrounding_whitespace_ignored(self, credential):
        assert SigningCredential.from_secret(f"  {TEST_SECRET}\n").address == credential.address

    @pytest.mark.parametrize("secret", [None, ""])
    def test_missing_secret(self, secret):
        with pytest.raises(CredentialError, match="required"):
            SigningCredential.from_secret(secret)

    def test_non_ed25519_bech32_flag(self):
        with pytest.raises(CredentialError, match="Unsupported key scheme"):
            SigningCredential.from_secret(suiprivkey(TEST_SEED, flag=1))

    def test_corrupt_bech32(self):
        encoded = suiprivkey(TEST_SEED)
        corrupted = encoded[:-1] + ("p" if encoded[-1] == "q" else "q")
        with pytest.raises(CredentialError):
            SigningCredential.from_secret(corrupted)

    def test_short_hex(self):
        with pytest.raises(CredentialError, match="32 bytes"):
            SigningCredential.from_secret("0x" + "ab" * 16)

    def test_bad_hex(self):
        with pytest.raises(CredentialError, match="Malformed hex"):
            SigningCredential.from_secret("0xnothex")

    def test_garbage(self):
        with pytest.raises(CredentialError):
            SigningCredential.from_secret("definitely not a key")

    def test_credential_error_is_fatal(self):
        with pytest.raises(CredentialError) as exc_info:
            SigningCredential.from_secret("")
        assert exc_info.value.retryable is False


@pytest.mark.fast
class TestCredential:
    """Tests for address derivation and signing."""

    def test_address_format(self, credential):
        assert credential.address.startswith("0x")
        assert len(credential.address) == 66

    def test_address_is_blake2b_of_flag_and_key(self, credential):
        expected = hashlib.blake2b(b"\x00" + credential.public_key, digest_size=32).hexdigest()
        assert credential.address == "0x" + expected

    def test_repr_hides_key_material(self, credential):
        text = repr(credential)
        assert credential.address in text
        assert TEST_SEED.hex() not in text

    def test_sign_transaction_layout(self, credential):
        tx_bytes = b"\x00" * 40
        serialized = base64.b64decode(credential.sign_transaction(tx_bytes))

        assert len(serialized) == 1 + 64 + 32
        assert serialized[0] == 0
        assert serialized[65:] == credential.public_key

        digest = blake2b_256(bytes([0, 0, 0]) + tx_bytes)
        VerifyKey(credential.public_key).verify(digest, serialized[1:65])

    def test_from_seed_wrong_length(self):
        with pytest.raises(CredentialError):
            SigningCredential.from_seed(b"\x01" * 31)
