"""
BIP44 account commands: addresses, account-xpub.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip44 import Account, Wallet
from hdkeys.cli import app
from hdkeys.cli_common import (
    resolve_coin,
    resolve_source_key,
    setup_cli,
)
from hdkeys.crypto import default_provider
from hdkeys.errors import HDKeyError


@app.command()
def addresses(
    mnemonic: Annotated[str | None, typer.Option("--mnemonic", "-m", help="BIP39 mnemonic")] = None,
    mnemonic_file: Annotated[
        Path | None, typer.Option("--mnemonic-file", "-f", help="Path to mnemonic file")
    ] = None,
    bip39_passphrase: Annotated[
        str | None,
        typer.Option(
            "--bip39-passphrase",
            envvar="BIP39_PASSPHRASE",
            help="BIP39 passphrase (13th/25th word)",
        ),
    ] = None,
    seed: Annotated[str | None, typer.Option("--seed", "-s", help="Seed as hex")] = None,
    xpub: Annotated[
        str | None,
        typer.Option("--xpub", help="Account-level extended public key (watch-only)"),
    ] = None,
    coin: Annotated[
        str | None, typer.Option("--coin", "-c", help="Coin symbol (BTC, TBTC, ETH)")
    ] = None,
    account: Annotated[int | None, typer.Option("--account", "-a", help="Account index")] = None,
    change: Annotated[
        bool, typer.Option("--change", help="List internal (change) addresses")
    ] = False,
    count: Annotated[
        int | None, typer.Option("--count", help="Number of addresses to list")
    ] = None,
    start: Annotated[int, typer.Option("--start", help="First address index")] = 0,
    network: Annotated[
        str | None, typer.Option("--network", "-n", help="mainnet or testnet")
    ] = None,
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """List BIP44 receive or change addresses.

    With --xpub the key is taken as the account's change-level parent
    (m/44'/coin'/account'/change) and no secrets are needed.
    """
    settings = setup_cli(log_level)
    provider = default_provider()
    resolved_account = account if account is not None else settings.wallet.account
    resolved_count = count if count is not None else settings.wallet.address_count

    try:
        coin_type = resolve_coin(settings, coin)
        if xpub:
            watch_key = ExtendedKey.from_base58check(xpub)
            chain_account = Account(watch_key.neuter(provider), coin_type, provider)
        else:
            root_key = resolve_source_key(
                settings,
                provider,
                seed=seed,
                mnemonic=mnemonic,
                mnemonic_file=mnemonic_file,
                bip39_passphrase=bip39_passphrase,
                chain=network,
            )
            chain_account = Wallet(root_key, coin_type, provider).account(
                resolved_account, change=change
            )
        rows = list(chain_account.addresses(start=start, count=resolved_count))
    except (HDKeyError, ValueError, FileNotFoundError) as e:
        logger.error(f"Failed to list addresses: {e}")
        raise typer.Exit(1)

    if chain_account.path is not None:
        typer.echo(f"{coin_type.name} account {chain_account.path}")
        typer.echo(f"Account xpub: {chain_account.xpub}")
    for path, address in rows:
        typer.echo(f"{path:<28} {address}")


@app.command("account-xpub")
def account_xpub(
    mnemonic: Annotated[str | None, typer.Option("--mnemonic", "-m", help="BIP39 mnemonic")] = None,
    mnemonic_file: Annotated[
        Path | None, typer.Option("--mnemonic-file", "-f", help="Path to mnemonic file")
    ] = None,
    bip39_passphrase: Annotated[
        str | None,
        typer.Option(
            "--bip39-passphrase",
            envvar="BIP39_PASSPHRASE",
            help="BIP39 passphrase (13th/25th word)",
        ),
    ] = None,
    coin: Annotated[
        str | None, typer.Option("--coin", "-c", help="Coin symbol (BTC, TBTC, ETH)")
    ] = None,
    account: Annotated[int | None, typer.Option("--account", "-a", help="Account index")] = None,
    change: Annotated[
        bool, typer.Option("--change", help="Export the internal (change) chain")
    ] = False,
    network: Annotated[
        str | None, typer.Option("--network", "-n", help="mainnet or testnet")
    ] = None,
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """Export the watch-only key of an account chain for use with --xpub."""
    settings = setup_cli(log_level)
    provider = default_provider()
    resolved_account = account if account is not None else settings.wallet.account

    try:
        coin_type = resolve_coin(settings, coin)
        root_key = resolve_source_key(
            settings,
            provider,
            mnemonic=mnemonic,
            mnemonic_file=mnemonic_file,
            bip39_passphrase=bip39_passphrase,
            chain=network,
        )
        chain_account = Wallet(root_key, coin_type, provider).account(
            resolved_account, change=change
        )
    except (HDKeyError, ValueError, FileNotFoundError) as e:
        logger.error(f"Failed to derive account: {e}")
        raise typer.Exit(1)

    typer.echo(chain_account.xpub)
