"""
Extended key version prefixes.

The 4-byte version at the start of a serialized key encodes both the chain
(mainnet/testnet) and the sector (public/private).
"""

from __future__ import annotations

import struct
from enum import Enum

from hdkeys.errors import InvalidSerializedKeyError


class Sector(str, Enum):
    """Whether a key carries private or only public material."""

    PUBLIC = "public"
    PRIVATE = "private"


class Chain(str, Enum):
    """Bitcoin networks with their own extended key prefixes."""

    MAINNET = "mainnet"
    TESTNET = "testnet"


class NetworkVersion(Enum):
    """The four BIP32 version constants."""

    MAINNET_PUBLIC = 0x0488B21E  # xpub
    MAINNET_PRIVATE = 0x0488ADE4  # xprv
    TESTNET_PUBLIC = 0x043587CF  # tpub
    TESTNET_PRIVATE = 0x04358394  # tprv

    @classmethod
    def of(cls, chain: Chain | str, sector: Sector | str) -> NetworkVersion:
        return _BY_CHAIN_AND_SECTOR[(Chain(chain), Sector(sector))]

    @classmethod
    def from_version(cls, version: int) -> NetworkVersion:
        try:
            return cls(version)
        except ValueError as e:
            raise InvalidSerializedKeyError(f"Unknown extended key version: 0x{version:08X}") from e

    @classmethod
    def from_bytes(cls, data: bytes) -> NetworkVersion:
        if len(data) != 4:
            raise InvalidSerializedKeyError(f"Version must be 4 bytes, got {len(data)}")
        return cls.from_version(struct.unpack(">I", data)[0])

    @property
    def version(self) -> int:
        return self.value

    @property
    def chain(self) -> Chain:
        return _CHAIN_AND_SECTOR[self][0]

    @property
    def sector(self) -> Sector:
        return _CHAIN_AND_SECTOR[self][1]

    @property
    def is_private(self) -> bool:
        return self.sector == Sector.PRIVATE

    def switched(self, sector: Sector | str) -> NetworkVersion:
        """Same chain, requested sector."""
        return NetworkVersion.of(self.chain, sector)

    def to_bytes(self) -> bytes:
        return struct.pack(">I", self.value)

    def __str__(self) -> str:
        return f"{self.chain.value} {self.sector.value} (0x{self.value:08X})"


_CHAIN_AND_SECTOR: dict[NetworkVersion, tuple[Chain, Sector]] = {
    NetworkVersion.MAINNET_PUBLIC: (Chain.MAINNET, Sector.PUBLIC),
    NetworkVersion.MAINNET_PRIVATE: (Chain.MAINNET, Sector.PRIVATE),
    NetworkVersion.TESTNET_PUBLIC: (Chain.TESTNET, Sector.PUBLIC),
    NetworkVersion.TESTNET_PRIVATE: (Chain.TESTNET, Sector.PRIVATE),
}

_BY_CHAIN_AND_SECTOR: dict[tuple[Chain, Sector], NetworkVersion] = {
    pair: network for network, pair in _CHAIN_AND_SECTOR.items()
}


__all__ = ["Sector", "Chain", "NetworkVersion"]
