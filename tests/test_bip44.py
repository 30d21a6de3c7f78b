"""
Tests for BIP44 accounts and address encoding.
"""

from __future__ import annotations

import pytest
from _hdkeys_test_helpers import (
    BIP44_BTC_ACCOUNT_XPRV,
    BIP44_BTC_ACCOUNT_XPUB,
    BIP44_BTC_FIRST_ADDRESS,
    BIP44_ETH_FIRST_ADDRESS,
)

from hdkeys.bip32.derivation import ChildKind, derive
from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip32.key_index import KeyIndex
from hdkeys.bip32.network import Chain, NetworkVersion
from hdkeys.bip32.path import derive_path
from hdkeys.bip44 import (
    BTC,
    BTC_TESTNET,
    ETH,
    Account,
    AccountPath,
    Wallet,
    get_coin,
    p2pkh_address,
    to_checksum_address,
)
from hdkeys.crypto import CryptoProvider
from hdkeys.errors import RootKeyMustBePrivateError, UnknownCoinError


@pytest.fixture
def btc_wallet(provider: CryptoProvider, test_mnemonic: str) -> Wallet:
    return Wallet.from_mnemonic(test_mnemonic, BTC, provider)


class TestCoinLookup:
    @pytest.mark.parametrize(
        "query,expected",
        [("BTC", BTC), ("btc", BTC), ("TBTC", BTC_TESTNET), ("eth", ETH), (60, ETH), ("0", BTC)],
    )
    def test_get_coin(self, query: str | int, expected: object) -> None:
        assert get_coin(query) is expected

    @pytest.mark.parametrize("query", ["DOGE", 999, "12345"])
    def test_unknown_coin(self, query: str | int) -> None:
        with pytest.raises(UnknownCoinError):
            get_coin(query)


class TestAccountPath:
    def test_str(self) -> None:
        assert str(AccountPath(coin_type=0, account=0)) == "m/44'/0'/0'/0"
        assert str(AccountPath(coin_type=60, account=2, change=1)) == "m/44'/60'/2'/1"

    def test_address_path(self) -> None:
        path = AccountPath(coin_type=0, account=0)
        assert str(path.address_path(7)) == "m/44'/0'/0'/0/7"

    def test_indices(self) -> None:
        indices = AccountPath(coin_type=1, account=3).indices()
        assert indices[0] == KeyIndex(44, hardened=True)
        assert indices[1] == KeyIndex(1, hardened=True)
        assert indices[2] == KeyIndex(3, hardened=True)
        assert indices[3] == KeyIndex(0)


class TestWallet:
    def test_account_key_matches_path(
        self, btc_wallet: Wallet, provider: CryptoProvider
    ) -> None:
        account_key = derive_path(btc_wallet.root_key, "m/44'/0'/0'", provider)
        assert account_key == BIP44_BTC_ACCOUNT_XPRV
        assert account_key.neuter(provider) == BIP44_BTC_ACCOUNT_XPUB

        account = btc_wallet.account(0)
        expected = derive(account_key, KeyIndex(0), ChildKind.PRIVATE, provider)
        assert account.key == expected
        assert account.key.depth.value == 4

    def test_first_btc_address(self, btc_wallet: Wallet) -> None:
        account = btc_wallet.account(0)
        assert account.address(0) == BIP44_BTC_FIRST_ADDRESS
        assert account.address_path(0) == "m/44'/0'/0'/0/0"

    def test_first_eth_address(self, provider: CryptoProvider, test_mnemonic: str) -> None:
        wallet = Wallet.from_mnemonic(test_mnemonic, ETH, provider)
        assert wallet.account(0).address(0) == BIP44_ETH_FIRST_ADDRESS

    def test_change_chain_differs(self, btc_wallet: Wallet) -> None:
        external = btc_wallet.account(0)
        internal = btc_wallet.account(0, change=True)
        assert str(internal.path) == "m/44'/0'/0'/1"
        assert external.address(0) != internal.address(0)

    def test_accounts_differ(self, btc_wallet: Wallet) -> None:
        assert btc_wallet.account(0).address(0) != btc_wallet.account(1).address(0)

    def test_public_root_rejected(self, provider: CryptoProvider, test_mnemonic: str) -> None:
        root = Wallet.from_mnemonic(test_mnemonic, BTC, provider).root_key
        with pytest.raises(RootKeyMustBePrivateError):
            Wallet(root.neuter(provider), BTC, provider)

    def test_public_network_rejected(self, provider: CryptoProvider, test_mnemonic: str) -> None:
        with pytest.raises(RootKeyMustBePrivateError):
            Wallet.from_mnemonic(
                test_mnemonic, BTC, provider, network=NetworkVersion.MAINNET_PUBLIC
            )

    def test_testnet_coin_addresses(self, provider: CryptoProvider, test_mnemonic: str) -> None:
        wallet = Wallet.from_mnemonic(
            test_mnemonic, BTC_TESTNET, provider, network=NetworkVersion.TESTNET_PRIVATE
        )
        account = wallet.account(0)
        assert str(account.path) == "m/44'/1'/0'/0"
        assert account.address(0)[0] in ("m", "n")
        assert account.xpub.startswith("tpub")


class TestAccount:
    def test_addresses_iterates_paths(self, btc_wallet: Wallet) -> None:
        rows = list(btc_wallet.account(0).addresses(start=0, count=3))
        assert [path for path, _ in rows] == [
            "m/44'/0'/0'/0/0",
            "m/44'/0'/0'/0/1",
            "m/44'/0'/0'/0/2",
        ]
        assert rows[0][1] == BIP44_BTC_FIRST_ADDRESS
        assert len({address for _, address in rows}) == 3

    def test_watch_only_account_matches(self, btc_wallet: Wallet) -> None:
        account = btc_wallet.account(0)
        watch_only = account.neuter()

        assert not watch_only.key.is_private
        assert watch_only.xpub == account.xpub
        for index in range(3):
            assert watch_only.address(index) == account.address(index)

    def test_account_from_xpub(self, provider: CryptoProvider, btc_wallet: Wallet) -> None:
        chain_key = btc_wallet.account(0).key.neuter(provider)
        account = Account(ExtendedKey.from_base58check(chain_key.to_base58check()), BTC, provider)

        assert account.address(0) == BIP44_BTC_FIRST_ADDRESS
        assert account.address_path(4) == "4"
        assert "BTC" in repr(account)

    def test_address_key_is_leaf(self, btc_wallet: Wallet) -> None:
        leaf = btc_wallet.account(0).address_key(0)
        assert leaf.depth.value == 5
        assert leaf.is_private


class TestAddressEncoding:
    def test_p2pkh_generator_address(self, provider: CryptoProvider) -> None:
        # Public key of private key 1
        generator = bytes.fromhex(
            "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
        )
        assert p2pkh_address(generator, Chain.MAINNET, provider) == (
            "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH"
        )

    @pytest.mark.parametrize(
        "address",
        [
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
            "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
            "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
        ],
    )
    def test_eip55_checksum(self, address: str) -> None:
        assert to_checksum_address(bytes.fromhex(address[2:])) == address
