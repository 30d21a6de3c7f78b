"""
BIP32 extended keys.

An ExtendedKey wraps the 78-byte serialized form and nothing else; every
accessor is a slice of those bytes. Values are immutable: neutering or deriving
always produces a new key.

Serialized layout (big-endian):
    offset 0   len 4   version
    offset 4   len 1   depth
    offset 5   len 4   parent fingerprint
    offset 9   len 4   child index (bit 31 = hardened)
    offset 13  len 32  chain code
    offset 45  len 33  key material (0x00 || scalar, or compressed point)
"""

from __future__ import annotations

import base58
from loguru import logger

from hdkeys.bip32.key_depth import KeyDepth
from hdkeys.bip32.key_index import KeyIndex
from hdkeys.bip32.network import NetworkVersion, Sector
from hdkeys.crypto import SECP256K1_ORDER, CryptoProvider
from hdkeys.errors import (
    InvalidIntermediateKeyError,
    InvalidSerializedKeyError,
    RootKeyMustBePrivateError,
)

SERIALIZED_KEY_LENGTH = 78
ROOT_FINGERPRINT = b"\x00\x00\x00\x00"


class ExtendedKey:
    """
    A key plus chain code plus metadata (version, depth, fingerprint, index).

    Create one with from_seed(), from_serialized(), from_base58check() or by
    deriving a child with hdkeys.bip32.derivation.derive().
    """

    __slots__ = ("_serialized",)

    def __init__(self, serialized: bytes):
        if len(serialized) != SERIALIZED_KEY_LENGTH:
            raise InvalidSerializedKeyError(
                f"Serialized extended key must be {SERIALIZED_KEY_LENGTH} bytes, "
                f"got {len(serialized)}"
            )
        self._serialized = bytes(serialized)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def assemble(
        cls,
        network: NetworkVersion,
        depth: KeyDepth,
        parent_fingerprint: bytes,
        index: KeyIndex,
        chain_code: bytes,
        key_material: bytes,
    ) -> ExtendedKey:
        """Concatenate the fields; any resulting length other than 78 is rejected."""
        return cls(
            network.to_bytes()
            + bytes([depth.value])
            + parent_fingerprint
            + index.to_bytes()
            + chain_code
            + key_material
        )

    @classmethod
    def from_seed(
        cls,
        seed: bytes | str,
        network: NetworkVersion,
        provider: CryptoProvider,
    ) -> ExtendedKey:
        """
        Create a root key from a seed.

        Args:
            seed: Seed bytes, or the seed as a hex string
            network: Must be a private network version
            provider: Crypto provider computing HMAC-SHA512

        Raises:
            RootKeyMustBePrivateError: If network is a public version
            InvalidIntermediateKeyError: If the seed yields no valid master key
        """
        if network.sector != Sector.PRIVATE:
            raise RootKeyMustBePrivateError(
                f"Root keys must use a private network version, got {network.name}"
            )
        try:
            seed_bytes = bytes.fromhex(seed) if isinstance(seed, str) else bytes(seed)
        except ValueError as e:
            raise ValueError(f"Seed is not valid hex: {e}") from e

        key, chain_code = provider.master_key_from_seed(seed_bytes)
        key_int = int.from_bytes(key, "big")
        if key_int == 0 or key_int >= SECP256K1_ORDER:
            raise InvalidIntermediateKeyError("Seed does not produce a valid master key")

        logger.debug(f"Created root key for {network.chain.value}")
        return cls.assemble(
            network=network,
            depth=KeyDepth(0),
            parent_fingerprint=ROOT_FINGERPRINT,
            index=KeyIndex(0),
            chain_code=chain_code,
            key_material=b"\x00" + key,
        )

    @classmethod
    def from_serialized(cls, data: bytes) -> ExtendedKey:
        """Import raw serialized bytes. Only the length is checked."""
        return cls(data)

    @classmethod
    def from_base58check(cls, text: str) -> ExtendedKey:
        """
        Import an xprv/xpub/tprv/tpub string from an untrusted source.

        Unlike from_serialized(), this validates the checksum, the version,
        the agreement between version and key material, and the root invariant.

        Raises:
            InvalidSerializedKeyError: If any check fails
        """
        try:
            data = base58.b58decode_check(text.strip())
        except ValueError as e:
            raise InvalidSerializedKeyError(f"Invalid Base58Check extended key: {e}") from e

        key = cls(data)
        network = NetworkVersion.from_bytes(data[0:4])
        material = key.key_material

        if network.sector == Sector.PRIVATE:
            if material[0] != 0x00:
                raise InvalidSerializedKeyError("Private key material must start with 0x00")
            scalar = int.from_bytes(material[1:], "big")
            if scalar == 0 or scalar >= SECP256K1_ORDER:
                raise InvalidSerializedKeyError("Private key is outside the secp256k1 range")
        elif material[0] not in (0x02, 0x03):
            raise InvalidSerializedKeyError("Public key material must be a compressed point")

        if key.depth.is_root and (
            key.parent_fingerprint != ROOT_FINGERPRINT or key.index.wire_value != 0
        ):
            raise InvalidSerializedKeyError(
                "Root key must have a zero parent fingerprint and index"
            )
        return key

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    @property
    def serialized(self) -> bytes:
        return self._serialized

    def to_base58check(self) -> str:
        """Base58(serialized || first 4 bytes of SHA256(SHA256(serialized)))."""
        return base58.b58encode_check(self._serialized).decode("ascii")

    # -------------------------------------------------------------------------
    # Field accessors
    # -------------------------------------------------------------------------

    @property
    def network(self) -> NetworkVersion:
        return NetworkVersion.from_bytes(self._serialized[0:4])

    @property
    def sector(self) -> Sector:
        return self.network.sector

    @property
    def is_private(self) -> bool:
        return self.sector == Sector.PRIVATE

    @property
    def depth(self) -> KeyDepth:
        return KeyDepth(self._serialized[4])

    @property
    def parent_fingerprint(self) -> bytes:
        return self._serialized[5:9]

    @property
    def index(self) -> KeyIndex:
        return KeyIndex.from_bytes(self._serialized[9:13])

    @property
    def chain_code(self) -> bytes:
        return self._serialized[13:45]

    @property
    def key_material(self) -> bytes:
        return self._serialized[45:78]

    @property
    def is_root(self) -> bool:
        return self.depth.is_root

    @property
    def private_key(self) -> bytes:
        """The 32-byte private scalar (private keys only)."""
        if not self.is_private:
            raise InvalidSerializedKeyError("Public extended key has no private scalar")
        return self.key_material[1:]

    # -------------------------------------------------------------------------
    # Derived values (need the provider)
    # -------------------------------------------------------------------------

    def public_key(self, provider: CryptoProvider) -> bytes:
        """The 33-byte compressed public point."""
        if self.is_private:
            return provider.compressed_public_key(self.private_key)
        return self.key_material

    def neuter(self, provider: CryptoProvider) -> ExtendedKey:
        """Public counterpart of this key; returns self if already public."""
        if not self.is_private:
            return self
        return ExtendedKey.assemble(
            network=self.network.switched(Sector.PUBLIC),
            depth=self.depth,
            parent_fingerprint=self.parent_fingerprint,
            index=self.index,
            chain_code=self.chain_code,
            key_material=self.public_key(provider),
        )

    def identifier(self, provider: CryptoProvider) -> bytes:
        """HASH160 of the compressed public key."""
        return provider.hash160(self.public_key(provider))

    def fingerprint(self, provider: CryptoProvider) -> bytes:
        """This key's own fingerprint, as recorded in its children."""
        return self.identifier(provider)[:4]

    # -------------------------------------------------------------------------
    # Comparison / display
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ExtendedKey):
            return self._serialized == other._serialized
        if isinstance(other, str):
            return self.to_base58check() == other
        return NotImplemented

    def __hash__(self) -> int:
        # Keys compare equal to their Base58Check text, so hash that form
        return hash(self.to_base58check())

    def __str__(self) -> str:
        return self.to_base58check()

    def __repr__(self) -> str:
        return (
            f"ExtendedKey(network={self.network.name}, depth={self.depth.value}, "
            f"index={self.index}, parent_fingerprint={self.parent_fingerprint.hex()})"
        )


__all__ = ["ExtendedKey", "SERIALIZED_KEY_LENGTH", "ROOT_FINGERPRINT"]
