"""
BIP44 multi-account hierarchy.

Builds the fixed path m / purpose' / coin_type' / account' / change / address_index
on top of the BIP32 engine and encodes leaf public keys as coin addresses.

Uses external libraries:
- base58: Base58Check encoding for Bitcoin P2PKH addresses
- pycryptodome: Keccak-256 for Ethereum addresses
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

import base58
from Crypto.Hash import keccak
from loguru import logger

from hdkeys.bip32.derivation import ChildKind, derive
from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip32.key_index import KeyIndex
from hdkeys.bip32.network import Chain, NetworkVersion
from hdkeys.bip32.path import DerivationPath
from hdkeys.bip39 import mnemonic_to_seed
from hdkeys.crypto import CryptoProvider
from hdkeys.errors import RootKeyMustBePrivateError, UnknownCoinError

BIP44_PURPOSE = 44
EXTERNAL_CHAIN = 0
INTERNAL_CHAIN = 1

# Base58 version bytes for P2PKH addresses
P2PKH_VERSION = {
    Chain.MAINNET: 0x00,
    Chain.TESTNET: 0x6F,
}


# =============================================================================
# Address Encoders
# =============================================================================


def p2pkh_address(public_key: bytes, chain: Chain, provider: CryptoProvider) -> str:
    """Base58Check(version || HASH160(compressed public key))."""
    payload = bytes([P2PKH_VERSION[chain]]) + provider.hash160(public_key)
    return base58.b58encode_check(payload).decode("ascii")


def _keccak256(data: bytes) -> bytes:
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return digest.digest()


def to_checksum_address(address_bytes: bytes) -> str:
    """EIP-55 mixed-case hex encoding of a 20-byte address."""
    hex_address = address_bytes.hex()
    hashed = _keccak256(hex_address.encode("ascii")).hex()
    return "0x" + "".join(
        char.upper() if int(nibble, 16) >= 8 else char
        for char, nibble in zip(hex_address, hashed)
    )


def ethereum_address(public_key: bytes, chain: Chain, provider: CryptoProvider) -> str:
    """Last 20 bytes of Keccak-256 over the uncompressed point (without 0x04)."""
    uncompressed = provider.uncompressed_public_key(public_key)
    return to_checksum_address(_keccak256(uncompressed[1:])[-20:])


# =============================================================================
# Coin Types
# =============================================================================


@dataclass(frozen=True)
class CoinType:
    """A SLIP-44 registered coin and how to render its addresses."""

    id: int
    symbol: str
    name: str
    encode_address: Callable[[bytes, Chain, CryptoProvider], str]

    def address(self, public_key: bytes, chain: Chain, provider: CryptoProvider) -> str:
        return self.encode_address(public_key, chain, provider)


def _testnet_p2pkh_address(public_key: bytes, chain: Chain, provider: CryptoProvider) -> str:
    return p2pkh_address(public_key, Chain.TESTNET, provider)


BTC = CoinType(id=0, symbol="BTC", name="Bitcoin", encode_address=p2pkh_address)
BTC_TESTNET = CoinType(
    id=1, symbol="TBTC", name="Bitcoin Testnet", encode_address=_testnet_p2pkh_address
)
ETH = CoinType(id=60, symbol="ETH", name="Ethereum", encode_address=ethereum_address)

COIN_TYPES: dict[str, CoinType] = {coin.symbol: coin for coin in (BTC, BTC_TESTNET, ETH)}


def get_coin(coin: str | int) -> CoinType:
    """Look up a coin by symbol (case-insensitive) or SLIP-44 id."""
    if isinstance(coin, int) or (isinstance(coin, str) and coin.isdigit()):
        coin_id = int(coin)
        for candidate in COIN_TYPES.values():
            if candidate.id == coin_id:
                return candidate
        raise UnknownCoinError(f"No coin type registered with id {coin_id}")

    try:
        return COIN_TYPES[coin.upper()]
    except KeyError as e:
        raise UnknownCoinError(
            f"Unknown coin: {coin}. Known coins: {', '.join(sorted(COIN_TYPES))}"
        ) from e


# =============================================================================
# Paths
# =============================================================================


@dataclass(frozen=True)
class AccountPath:
    """m / purpose' / coin_type' / account' / change"""

    coin_type: int
    account: int
    change: int = EXTERNAL_CHAIN
    purpose: int = BIP44_PURPOSE

    def indices(self) -> tuple[KeyIndex, KeyIndex, KeyIndex, KeyIndex]:
        return (
            KeyIndex(self.purpose, hardened=True),
            KeyIndex(self.coin_type, hardened=True),
            KeyIndex(self.account, hardened=True),
            KeyIndex(self.change),
        )

    def derivation_path(self) -> DerivationPath:
        return DerivationPath(self.indices())

    def address_path(self, index: int) -> DerivationPath:
        return self.derivation_path().child(KeyIndex(index))

    def __str__(self) -> str:
        return str(self.derivation_path())


# =============================================================================
# Accounts
# =============================================================================


class Account:
    """
    One change chain of a BIP44 account.

    The key may be private or public; a public account key (from an xpub) can
    still enumerate addresses.
    """

    def __init__(
        self,
        key: ExtendedKey,
        coin: CoinType,
        provider: CryptoProvider,
        path: AccountPath | None = None,
    ):
        self.key = key
        self.coin = coin
        self.provider = provider
        self.path = path

    @property
    def xpub(self) -> str:
        return self.key.neuter(self.provider).to_base58check()

    def neuter(self) -> Account:
        """Watch-only copy of this account."""
        return Account(self.key.neuter(self.provider), self.coin, self.provider, self.path)

    def address_key(self, index: int) -> ExtendedKey:
        kind = ChildKind.PRIVATE if self.key.is_private else ChildKind.PUBLIC
        return derive(self.key, KeyIndex(index), kind, self.provider)

    def address(self, index: int) -> str:
        leaf = self.address_key(index)
        return self.coin.address(leaf.public_key(self.provider), leaf.network.chain, self.provider)

    def address_path(self, index: int) -> str:
        if self.path is None:
            return f"{index}"
        return str(self.path.address_path(index))

    def addresses(self, start: int = 0, count: int = 10) -> Iterator[tuple[str, str]]:
        """Yield (path, address) pairs for count consecutive indices."""
        for index in range(start, start + count):
            yield self.address_path(index), self.address(index)

    def __repr__(self) -> str:
        return f"Account(coin={self.coin.symbol}, path={self.path})"


class Wallet:
    """BIP44 wallet rooted at a private BIP32 master key."""

    def __init__(self, root_key: ExtendedKey, coin: CoinType, provider: CryptoProvider):
        if not root_key.is_private:
            raise RootKeyMustBePrivateError("BIP44 wallets require a private root key")
        self.root_key = root_key
        self.coin = coin
        self.provider = provider

    @classmethod
    def from_seed(
        cls,
        seed: bytes | str,
        coin: CoinType,
        provider: CryptoProvider,
        network: NetworkVersion = NetworkVersion.MAINNET_PRIVATE,
    ) -> Wallet:
        return cls(ExtendedKey.from_seed(seed, network, provider), coin, provider)

    @classmethod
    def from_mnemonic(
        cls,
        phrase: str,
        coin: CoinType,
        provider: CryptoProvider,
        passphrase: str = "",
        network: NetworkVersion = NetworkVersion.MAINNET_PRIVATE,
    ) -> Wallet:
        if not network.is_private:
            raise RootKeyMustBePrivateError("BIP44 wallets require a private network version")
        return cls.from_seed(mnemonic_to_seed(phrase, passphrase), coin, provider, network)

    def account(self, index: int, change: bool = False) -> Account:
        """Derive m/44'/coin'/index'/change."""
        path = AccountPath(
            coin_type=self.coin.id,
            account=index,
            change=INTERNAL_CHAIN if change else EXTERNAL_CHAIN,
        )
        key = self.root_key
        for segment in path.indices():
            key = derive(key, segment, ChildKind.PRIVATE, self.provider)

        logger.debug(f"Derived {self.coin.symbol} account at {path}")
        return Account(key, self.coin, self.provider, path)

    def __str__(self) -> str:
        return self.root_key.to_base58check()


__all__ = [
    "Account",
    "AccountPath",
    "BTC",
    "BTC_TESTNET",
    "COIN_TYPES",
    "CoinType",
    "ETH",
    "Wallet",
    "ethereum_address",
    "get_coin",
    "p2pkh_address",
    "to_checksum_address",
]
