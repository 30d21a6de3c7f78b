"""
Common CLI components for hdkeys.

Architecture:
- Setup functions: logging and settings initialization
- Resolver functions: take CLI args + settings and return resolved values
- Key source resolution: one root/extended key from --key, --seed or a mnemonic

Keeping the resolution logic here keeps the typer command modules thin and
lets it be tested without invoking the CLI.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip32.network import Chain, NetworkVersion, Sector
from hdkeys.bip39 import VALID_WORD_COUNTS, mnemonic_to_seed, validate_mnemonic
from hdkeys.bip44 import CoinType, get_coin
from hdkeys.crypto import CryptoProvider
from hdkeys.errors import MnemonicError
from hdkeys.settings import HDKeysSettings, get_settings, reset_settings

# =============================================================================
# Resolved Settings Dataclasses
# =============================================================================


@dataclass
class ResolvedMnemonic:
    """Resolved mnemonic and BIP39 passphrase."""

    mnemonic: str
    bip39_passphrase: str
    source: str  # Where the mnemonic came from (for logging)


# =============================================================================
# Setup Functions
# =============================================================================


def setup_logging(level: str = "INFO") -> None:
    """
    Configure loguru logging with consistent format.

    Args:
        level: Log level (TRACE, DEBUG, INFO, WARNING, ERROR)
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        level=level.upper(),
        colorize=True,
    )


def setup_cli(log_level: str | None = None) -> HDKeysSettings:
    """
    Common CLI setup: reset settings cache, configure logging, return settings.

    Log level priority: CLI argument > settings (env/config) > default "INFO"
    """
    reset_settings()
    settings = get_settings()

    effective_log_level = log_level if log_level is not None else settings.logging.level
    setup_logging(effective_log_level)

    return settings


# =============================================================================
# Resolution Functions
# =============================================================================


def resolve_chain(settings: HDKeysSettings, chain: Chain | str | None = None) -> Chain:
    """Resolve the network chain with priority: CLI > Settings > Default."""
    if chain is not None:
        return Chain(chain)
    return settings.network.chain


def resolve_network_version(
    settings: HDKeysSettings,
    chain: Chain | str | None = None,
    sector: Sector = Sector.PRIVATE,
) -> NetworkVersion:
    return NetworkVersion.of(resolve_chain(settings, chain), sector)


def resolve_coin(settings: HDKeysSettings, coin: str | None = None) -> CoinType:
    """Resolve the BIP44 coin with priority: CLI > Settings."""
    return get_coin(coin if coin is not None else settings.wallet.coin)


# =============================================================================
# Mnemonic Loading
# =============================================================================


def load_mnemonic_from_file(path: Path) -> str:
    """
    Load a plain-text mnemonic from a file.

    Raises:
        FileNotFoundError: If file doesn't exist
        MnemonicError: If the file does not hold 12-24 words
    """
    if not path.exists():
        raise FileNotFoundError(f"Mnemonic file not found: {path}")

    words = path.read_text(encoding="utf-8").split()
    if len(words) not in VALID_WORD_COUNTS:
        raise MnemonicError(
            f"Invalid mnemonic file: expected 12-24 words, got {len(words)}: {path}"
        )
    return " ".join(words)


def resolve_mnemonic(
    *,
    mnemonic: str | None = None,
    mnemonic_file: Path | None = None,
    bip39_passphrase: str | None = None,
    language: str = "english",
    required: bool = True,
) -> ResolvedMnemonic | None:
    """
    Resolve mnemonic from various sources with priority.

    Mnemonic priority:
    1. --mnemonic argument
    2. --mnemonic-file argument
    3. MNEMONIC_FILE environment variable
    4. MNEMONIC environment variable

    BIP39 passphrase priority:
    1. --bip39-passphrase argument
    2. BIP39_PASSPHRASE environment variable
    3. Empty string

    Raises:
        MnemonicError: If required and no source is available
    """
    resolved: str | None = None
    source = ""

    if mnemonic:
        resolved, source = " ".join(mnemonic.split()), "--mnemonic"
    elif mnemonic_file is not None:
        resolved, source = load_mnemonic_from_file(mnemonic_file), f"file {mnemonic_file}"
    elif os.environ.get("MNEMONIC_FILE"):
        env_file = Path(os.environ["MNEMONIC_FILE"])
        resolved, source = load_mnemonic_from_file(env_file), f"MNEMONIC_FILE {env_file}"
    elif os.environ.get("MNEMONIC"):
        resolved, source = " ".join(os.environ["MNEMONIC"].split()), "MNEMONIC"

    if resolved is None:
        if required:
            raise MnemonicError(
                "No mnemonic provided. Use --mnemonic, --mnemonic-file, "
                "or the MNEMONIC / MNEMONIC_FILE environment variables"
            )
        return None

    if not validate_mnemonic(resolved, language):
        logger.warning(f"Mnemonic from {source} has an invalid checksum or unknown words")

    if bip39_passphrase is None:
        bip39_passphrase = os.environ.get("BIP39_PASSPHRASE", "")

    logger.debug(f"Using mnemonic from {source}")
    return ResolvedMnemonic(mnemonic=resolved, bip39_passphrase=bip39_passphrase, source=source)


def require_mnemonic(
    *,
    mnemonic: str | None = None,
    mnemonic_file: Path | None = None,
    bip39_passphrase: str | None = None,
    language: str = "english",
) -> ResolvedMnemonic:
    """Like resolve_mnemonic, but a missing mnemonic is always an error."""
    resolved = resolve_mnemonic(
        mnemonic=mnemonic,
        mnemonic_file=mnemonic_file,
        bip39_passphrase=bip39_passphrase,
        language=language,
    )
    if resolved is None:
        raise MnemonicError("No mnemonic provided")
    return resolved


def resolve_source_key(
    settings: HDKeysSettings,
    provider: CryptoProvider,
    *,
    key: str | None = None,
    seed: str | None = None,
    mnemonic: str | None = None,
    mnemonic_file: Path | None = None,
    bip39_passphrase: str | None = None,
    chain: Chain | str | None = None,
) -> ExtendedKey:
    """
    Resolve the starting key for a derivation command.

    Priority: --key (extended key) > --seed (hex) > mnemonic sources.
    Seeds and mnemonics always produce a private root key.
    """
    if key:
        return ExtendedKey.from_base58check(key)

    network = resolve_network_version(settings, chain, Sector.PRIVATE)
    if seed:
        root_key = ExtendedKey.from_seed(seed, network, provider)
    else:
        resolved = require_mnemonic(
            mnemonic=mnemonic,
            mnemonic_file=mnemonic_file,
            bip39_passphrase=bip39_passphrase,
            language=settings.wallet.language,
        )
        root_key = ExtendedKey.from_seed(
            mnemonic_to_seed(resolved.mnemonic, resolved.bip39_passphrase), network, provider
        )

    # Secrets only reach the log when explicitly enabled
    if settings.logging.sensitive:
        logger.debug(f"Resolved root key: {root_key.to_base58check()}")
    return root_key


__all__ = [
    "ResolvedMnemonic",
    "load_mnemonic_from_file",
    "require_mnemonic",
    "resolve_chain",
    "resolve_coin",
    "resolve_mnemonic",
    "resolve_network_version",
    "resolve_source_key",
    "setup_cli",
    "setup_logging",
]
