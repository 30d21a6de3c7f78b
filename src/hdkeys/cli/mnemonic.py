"""
Mnemonic commands: generate, validate, seed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from hdkeys.bip39 import generate_mnemonic, mnemonic_to_entropy, mnemonic_to_seed, validate_mnemonic
from hdkeys.cli import app
from hdkeys.cli_common import require_mnemonic, setup_cli
from hdkeys.crypto import default_provider
from hdkeys.errors import HDKeyError


@app.command()
def generate(
    word_count: Annotated[
        int | None, typer.Option("--words", "-w", help="Number of words (12, 15, 18, 21, or 24)")
    ] = None,
    language: Annotated[
        str | None, typer.Option("--language", help="BIP39 wordlist language")
    ] = None,
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """Generate a new BIP39 mnemonic phrase with secure entropy."""
    settings = setup_cli(log_level)
    resolved_words = word_count if word_count is not None else settings.wallet.word_count
    resolved_language = language if language is not None else settings.wallet.language

    try:
        phrase = generate_mnemonic(resolved_words, resolved_language, default_provider())
    except HDKeyError as e:
        logger.error(f"Failed to generate mnemonic: {e}")
        raise typer.Exit(1)

    typer.echo("\n" + "=" * 80)
    typer.echo("GENERATED MNEMONIC - WRITE THIS DOWN AND KEEP IT SAFE!")
    typer.echo("=" * 80)
    typer.echo(f"\n{phrase}\n")
    typer.echo("=" * 80)
    typer.echo("Anyone with this phrase can derive every key in the wallet.")
    typer.echo("=" * 80 + "\n")


@app.command()
def validate(
    mnemonic: Annotated[str | None, typer.Option("--mnemonic", "-m", help="BIP39 mnemonic")] = None,
    mnemonic_file: Annotated[
        Path | None, typer.Option("--mnemonic-file", "-f", help="Path to mnemonic file")
    ] = None,
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """Check a mnemonic's words and checksum."""
    settings = setup_cli(log_level)
    language = settings.wallet.language

    try:
        resolved = require_mnemonic(
            mnemonic=mnemonic, mnemonic_file=mnemonic_file, language=language
        )
    except (FileNotFoundError, HDKeyError) as e:
        logger.error(str(e))
        raise typer.Exit(1)

    words = resolved.mnemonic.split()
    if not validate_mnemonic(resolved.mnemonic, language):
        typer.echo("Mnemonic is INVALID")
        raise typer.Exit(1)

    entropy = mnemonic_to_entropy(resolved.mnemonic, language)
    typer.echo("Mnemonic is VALID")
    typer.echo(f"Word count: {len(words)}")
    typer.echo(f"Entropy bits: {len(entropy) * 8}")


@app.command()
def seed(
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
    log_level: Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")] = None,
) -> None:
    """Print the 64-byte BIP39 seed of a mnemonic as hex."""
    settings = setup_cli(log_level)

    try:
        resolved = require_mnemonic(
            mnemonic=mnemonic,
            mnemonic_file=mnemonic_file,
            bip39_passphrase=bip39_passphrase,
            language=settings.wallet.language,
        )
    except (FileNotFoundError, HDKeyError) as e:
        logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(mnemonic_to_seed(resolved.mnemonic, resolved.bip39_passphrase).hex())
