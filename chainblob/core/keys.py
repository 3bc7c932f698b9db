"""Ed25519 signing credential for the Sui ledger.

Parses the configured secret, derives the Sui address and signs transaction
bytes. Key material never appears in repr() or logs; only the derived
address is safe to print.

Examples:
    >>> credential = SigningCredential.from_secret("suiprivkey1...")
    >>> credential.address
    '0x...'
    >>> signature = credential.sign_transaction(tx_bytes)

Tests:
    - tests/unit/test_keys.py
"""

from __future__ import annotations

import base64
import hashlib

from bech32 import bech32_decode, convertbits
from nacl.exceptions import CryptoError
from nacl.signing import SigningKey

from chainblob.core.errors import CredentialError

ED25519_FLAG = 0x00
SEED_LENGTH = 32
BECH32_HRP = "suiprivkey"

# Intent prefix for transaction data: scope TransactionData, version V0, app Sui.
TRANSACTION_INTENT = bytes([0, 0, 0])


def blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def _decode_seed(secret: str) -> bytes:
    """Decode a secret string into a 32-byte Ed25519 seed.

    Accepted formats:
        - suiprivkey1... (bech32, flag byte + 32-byte seed)
        - 0x-prefixed hex seed
        - base64 of flag + seed, of a bare seed, or of seed + public key

    Raises:
        CredentialError: If the string is not a supported Ed25519 key.
    """
    secret = secret.strip()

    if secret.startswith(BECH32_HRP):
        hrp, data = bech32_decode(secret)
        if hrp != BECH32_HRP or data is None:
            raise CredentialError("Malformed suiprivkey string")
        raw = convertbits(data, 5, 8, False)
        if raw is None or len(raw) != SEED_LENGTH + 1:
            raise CredentialError("Malformed suiprivkey payload")
        if raw[0] != ED25519_FLAG:
            raise CredentialError(f"Unsupported key scheme flag: {raw[0]:#04x}")
        return bytes(raw[1:])

    if secret.startswith("0x"):
        try:
            raw = bytes.fromhex(secret[2:])
        except ValueError:
            raise CredentialError("Malformed hex private key") from None
        if len(raw) != SEED_LENGTH:
            raise CredentialError(f"Hex private key must be {SEED_LENGTH} bytes")
        return raw

    try:
        raw = base64.b64decode(secret, validate=True)
    except ValueError:
        raise CredentialError("Private key is not bech32, hex or base64") from None

    if len(raw) == SEED_LENGTH + 1:
        if raw[0] != ED25519_FLAG:
            raise CredentialError(f"Unsupported key scheme flag: {raw[0]:#04x}")
        return raw[1:]
    if len(raw) in (SEED_LENGTH, SEED_LENGTH * 2):
        return raw[:SEED_LENGTH]
    raise CredentialError(f"Unexpected private key length: {len(raw)} bytes")


class SigningCredential:
    """An Ed25519 keypair usable as a Sui transaction signer.

    Attributes:
        address: Sui address derived from the public key.
        public_key: Raw 32-byte public key.
    """

    def __init__(self, signing_key: SigningKey) -> None:
        self._signing_key = signing_key
        self.public_key = signing_key.verify_key.encode()
        self.address = "0x" + blake2b_256(bytes([ED25519_FLAG]) + self.public_key).hex()

    @classmethod
    def from_seed(cls, seed: bytes) -> "SigningCredential":
        """Build a credential from a raw 32-byte seed."""
        if len(seed) != SEED_LENGTH:
            raise CredentialError(f"Seed must be {SEED_LENGTH} bytes")
        try:
            return cls(SigningKey(seed))
        except CryptoError as e:
            raise CredentialError(f"Invalid Ed25519 seed: {e}") from None

    @classmethod
    def from_secret(cls, secret: str | None) -> "SigningCredential":
        """Parse a configured secret string.

        Args:
            secret: Private key in any supported encoding.

        Raises:
            CredentialError: If the secret is absent or malformed.
        """
        if not secret:
            raise CredentialError("Signing key secret is required")
        return cls.from_seed(_decode_seed(secret))

    def sign(self, message: bytes) -> bytes:
        """Raw Ed25519 signature over message."""
        return self._signing_key.sign(message).signature

    def sign_transaction(self, tx_bytes: bytes) -> str:
        """Sign BCS transaction bytes with the Sui transaction intent.

        Returns:
            Base64 serialized signature: flag || signature || public key.
        """
        digest = blake2b_256(TRANSACTION_INTENT + tx_bytes)
        serialized = bytes([ED25519_FLAG]) + self.sign(digest) + self.public_key
        return base64.b64encode(serialized).decode("ascii")

    def __repr__(self) -> str:
        return f"SigningCredential(address={self.address!r})"
