"""
Extended key commands: root, derive, inspect.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip32.path import derive_path, parse_path
from hdkeys.cli import app
from hdkeys.cli_common import resolve_source_key, setup_cli
from hdkeys.crypto import default_provider
from hdkeys.errors import HDKeyError


@app.command()
def root(
    seed: Annotated[str | None, typer.Option("--seed", "-s", help="Seed as hex")] = None,
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
    network: Annotated[
        str | None, typer.Option("--network", "-n", help="mainnet or testnet")
    ] = None,
    public: Annotated[
        bool, typer.Option("--public", help="Print only the neutered (xpub) root")
    ] = False,
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """Create the BIP32 root key from a seed or mnemonic."""
    settings = setup_cli(log_level)
    provider = default_provider()

    try:
        key = resolve_source_key(
            settings,
            provider,
            seed=seed,
            mnemonic=mnemonic,
            mnemonic_file=mnemonic_file,
            bip39_passphrase=bip39_passphrase,
            chain=network,
        )
    except (HDKeyError, ValueError, FileNotFoundError) as e:
        logger.error(f"Failed to create root key: {e}")
        raise typer.Exit(1)

    if not public:
        typer.echo(key.to_base58check())
    typer.echo(key.neuter(provider).to_base58check())


@app.command()
def derive(
    path: Annotated[str, typer.Option("--path", "-p", help="Derivation path, e.g. m/44'/0'/0'")],
    key: Annotated[
        str | None, typer.Option("--key", "-k", help="Parent extended key (xprv/xpub/tprv/tpub)")
    ] = None,
    seed: Annotated[str | None, typer.Option("--seed", "-s", help="Seed as hex")] = None,
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
    network: Annotated[
        str | None, typer.Option("--network", "-n", help="mainnet or testnet (seed/mnemonic only)")
    ] = None,
    public: Annotated[
        bool, typer.Option("--public", help="Print only the public key at the end of the path")
    ] = False,
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """Derive the extended key at a path.

    Examples:
        hdkeys derive --seed 000102... --path "m/0'/1"
        hdkeys derive --key xpub... --path "m/0/5"
    """
    settings = setup_cli(log_level)
    provider = default_provider()

    try:
        parsed = parse_path(path)
        parent = resolve_source_key(
            settings,
            provider,
            key=key,
            seed=seed,
            mnemonic=mnemonic,
            mnemonic_file=mnemonic_file,
            bip39_passphrase=bip39_passphrase,
            chain=network,
        )
        child = derive_path(parent, parsed, provider)
    except (HDKeyError, ValueError, FileNotFoundError) as e:
        logger.error(f"Derivation failed: {e}")
        raise typer.Exit(1)

    if public:
        child = child.neuter(provider)
    logger.info(f"Derived {parsed} (depth {child.depth.value})")
    typer.echo(child.to_base58check())


@app.command()
def inspect(
    key: Annotated[str, typer.Argument(help="Extended key (xprv/xpub/tprv/tpub)")],
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """Decode an extended key and show its fields. Private scalars are never printed."""
    setup_cli(log_level)
    provider = default_provider()

    try:
        extended = ExtendedKey.from_base58check(key)
        public_key = extended.public_key(provider)
        fingerprint = extended.fingerprint(provider)
    except (HDKeyError, ValueError) as e:
        logger.error(f"Invalid extended key: {e}")
        raise typer.Exit(1)

    network = extended.network
    typer.echo(f"Network:            {network.chain.value} ({network.sector.value})")
    typer.echo(f"Depth:              {extended.depth.value}")
    typer.echo(f"Parent fingerprint: {extended.parent_fingerprint.hex()}")
    typer.echo(f"Index:              {extended.index} ({extended.index.wire_value})")
    typer.echo(f"Chain code:         {extended.chain_code.hex()}")
    typer.echo(f"Fingerprint:        {fingerprint.hex()}")
    typer.echo(f"Public key:         {public_key.hex()}")
    typer.echo(f"Extended public:    {extended.neuter(provider).to_base58check()}")
