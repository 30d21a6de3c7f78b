"""
Cryptographic provider interface for hdkeys.

Key derivation never touches hashing, randomness or curve math directly. It goes
through a CryptoProvider passed in by the caller. The base class implements
everything that only needs the standard library; a backend supplies the
secp256k1 operations.

Uses external libraries for security-critical operations:
- coincurve: libsecp256k1 bindings for public key computation and tweaking
- pycryptodome: RIPEMD-160, which hashlib only offers on some OpenSSL builds
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from abc import ABC, abstractmethod

import coincurve
from Crypto.Hash import RIPEMD160

from hdkeys.errors import InvalidIntermediateKeyError, ProviderError

# Order of the secp256k1 group (n in BIP32)
SECP256K1_ORDER = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)

# HMAC key used to turn a seed into the master key and chain code
MASTER_KEY_HMAC_KEY = b"Bitcoin seed"


class CryptoProvider(ABC):
    """
    Primitive operations consumed by the BIP32 engine.

    Implementations must be safe for concurrent use; the engine holds no
    locks and may call a provider from several threads at once.
    """

    def hmac_sha512(self, key: bytes, data: bytes) -> bytes:
        """HMAC-SHA512 of data under key (64 bytes)."""
        try:
            return hmac.new(key, data, hashlib.sha512).digest()
        except (TypeError, ValueError) as e:
            raise ProviderError(f"HMAC-SHA512 failed: {e}") from e

    def hash160(self, data: bytes) -> bytes:
        """
        RIPEMD160(SHA256(data)) - used for key identifiers and fingerprints.

        Args:
            data: Input data to hash

        Returns:
            20-byte hash
        """
        try:
            return RIPEMD160.new(hashlib.sha256(data).digest()).digest()
        except (TypeError, ValueError) as e:
            raise ProviderError(f"HASH160 failed: {e}") from e

    def double_sha256(self, data: bytes) -> bytes:
        """SHA256(SHA256(data)), the Bitcoin hash256 digest."""
        return hashlib.sha256(hashlib.sha256(data).digest()).digest()

    def secure_random_bytes(self, n: int) -> bytes:
        """
        Read n bytes from the OS entropy source.

        Raises:
            ProviderError: If the entropy source is unavailable
        """
        if n < 0:
            raise ProviderError(f"Cannot read a negative number of random bytes: {n}")
        try:
            return secrets.token_bytes(n)
        except OSError as e:
            raise ProviderError("System entropy source is unavailable") from e

    def master_key_from_seed(self, seed: bytes) -> tuple[bytes, bytes]:
        """
        Split HMAC-SHA512("Bitcoin seed", seed) into (key, chain_code).

        The key is returned as-is; checking it against the curve order is the
        caller's job.
        """
        digest = self.hmac_sha512(MASTER_KEY_HMAC_KEY, seed)
        return digest[:32], digest[32:]

    @abstractmethod
    def compressed_public_key(self, scalar: bytes) -> bytes:
        """
        Compute the 33-byte compressed public point for a 32-byte scalar.

        Raises:
            ProviderError: If the scalar is not a valid private key
        """

    @abstractmethod
    def add_public_key_tweak(self, public_key: bytes, tweak: bytes) -> bytes:
        """
        Compute tweak*G + P for a compressed point P and a 32-byte scalar tweak.

        Raises:
            InvalidIntermediateKeyError: If the result is the point at infinity
            ProviderError: If the point or the tweak cannot be parsed
        """

    @abstractmethod
    def uncompressed_public_key(self, public_key: bytes) -> bytes:
        """Decompress a 33-byte public point into its 65-byte SEC1 form."""


class CoincurveProvider(CryptoProvider):
    """CryptoProvider backed by libsecp256k1 through coincurve."""

    def compressed_public_key(self, scalar: bytes) -> bytes:
        if len(scalar) != 32:
            raise ProviderError(f"Private scalar must be 32 bytes, got {len(scalar)}")
        try:
            private_key = coincurve.PrivateKey(scalar)
        except ValueError as e:
            raise ProviderError("Scalar is not a valid secp256k1 private key") from e
        return private_key.public_key.format(compressed=True)

    def add_public_key_tweak(self, public_key: bytes, tweak: bytes) -> bytes:
        if len(tweak) != 32:
            raise ProviderError(f"Tweak must be 32 bytes, got {len(tweak)}")
        tweak_int = int.from_bytes(tweak, "big")
        if tweak_int == 0 or tweak_int >= SECP256K1_ORDER:
            raise ProviderError("Tweak is outside the secp256k1 scalar range")

        try:
            point = coincurve.PublicKey(public_key)
        except (TypeError, ValueError) as e:
            raise ProviderError("Public key is not a valid secp256k1 point") from e

        # With a valid point and an in-range tweak, libsecp256k1 only rejects
        # the sum when it is the point at infinity.
        try:
            tweaked = point.add(tweak)
        except ValueError as e:
            raise InvalidIntermediateKeyError(
                "Public key tweak produced the point at infinity"
            ) from e
        return tweaked.format(compressed=True)

    def uncompressed_public_key(self, public_key: bytes) -> bytes:
        try:
            return coincurve.PublicKey(public_key).format(compressed=False)
        except (TypeError, ValueError) as e:
            raise ProviderError("Public key is not a valid secp256k1 point") from e


def default_provider() -> CryptoProvider:
    """Build the standard provider. Callers pass the result explicitly."""
    return CoincurveProvider()


__all__ = [
    "SECP256K1_ORDER",
    "MASTER_KEY_HMAC_KEY",
    "CryptoProvider",
    "CoincurveProvider",
    "default_provider",
]
