"""
BIP39 mnemonic phrases.

Wordlists, checksums and PBKDF2 come from the python-mnemonic library; this
module adapts it to hdkeys' error types and provider-supplied entropy, and
turns phrases into BIP32 root keys.
"""

from __future__ import annotations

from mnemonic import Mnemonic

from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip32.network import NetworkVersion
from hdkeys.crypto import CryptoProvider, default_provider
from hdkeys.errors import MnemonicError

# Entropy bits per word count: word_count * 11 = bits + bits / 32
WORD_COUNT_TO_STRENGTH: dict[int, int] = {12: 128, 15: 160, 18: 192, 21: 224, 24: 256}
VALID_WORD_COUNTS = tuple(WORD_COUNT_TO_STRENGTH)
VALID_ENTROPY_LENGTHS = tuple(strength // 8 for strength in WORD_COUNT_TO_STRENGTH.values())


def list_languages() -> list[str]:
    """Wordlist languages shipped with python-mnemonic."""
    return Mnemonic.list_languages()


def _wordlist(language: str) -> Mnemonic:
    if language not in list_languages():
        raise MnemonicError(
            f"Unsupported mnemonic language: {language}. "
            f"Choose one of: {', '.join(sorted(list_languages()))}"
        )
    return Mnemonic(language)


def mnemonic_from_entropy(entropy: bytes | str, language: str = "english") -> str:
    """
    Encode entropy as a mnemonic phrase.

    Args:
        entropy: 16, 20, 24, 28 or 32 bytes, or the same as a hex string

    Returns:
        Mnemonic phrase with a valid checksum
    """
    if isinstance(entropy, str):
        try:
            entropy = bytes.fromhex(entropy)
        except ValueError as e:
            raise MnemonicError(f"Entropy is not valid hex: {e}") from e

    if len(entropy) not in VALID_ENTROPY_LENGTHS:
        raise MnemonicError(
            f"Entropy must be one of {VALID_ENTROPY_LENGTHS} bytes, got {len(entropy)}"
        )
    return _wordlist(language).to_mnemonic(bytes(entropy))


def generate_mnemonic(
    word_count: int = 24,
    language: str = "english",
    provider: CryptoProvider | None = None,
) -> str:
    """
    Generate a mnemonic from secure entropy.

    Args:
        word_count: Number of words (12, 15, 18, 21, or 24)
        language: Wordlist language
        provider: Source of random bytes (defaults to the standard provider)
    """
    if word_count not in WORD_COUNT_TO_STRENGTH:
        raise MnemonicError(f"word_count must be one of {VALID_WORD_COUNTS}, got {word_count}")
    if provider is None:
        provider = default_provider()

    entropy = provider.secure_random_bytes(WORD_COUNT_TO_STRENGTH[word_count] // 8)
    return mnemonic_from_entropy(entropy, language)


def validate_mnemonic(phrase: str, language: str = "english") -> bool:
    """Check word count, wordlist membership and checksum."""
    words = phrase.split()
    if len(words) not in WORD_COUNT_TO_STRENGTH:
        return False
    return _wordlist(language).check(" ".join(words))


def mnemonic_to_entropy(phrase: str, language: str = "english") -> bytes:
    """
    Recover the entropy a phrase encodes.

    Raises:
        MnemonicError: If the phrase is not a valid mnemonic
    """
    words = phrase.split()
    if len(words) not in WORD_COUNT_TO_STRENGTH:
        raise MnemonicError(
            f"Mnemonic must have {', '.join(map(str, VALID_WORD_COUNTS))} words, got {len(words)}"
        )
    try:
        return bytes(_wordlist(language).to_entropy(words))
    except (LookupError, ValueError) as e:
        raise MnemonicError(f"Invalid mnemonic: {e}") from e


def mnemonic_to_seed(phrase: str, passphrase: str = "") -> bytes:
    """
    PBKDF2-HMAC-SHA512 over the phrase, 2048 rounds, salt "mnemonic" + passphrase.

    The phrase is not validated; BIP39 defines the seed for any phrase.
    """
    return Mnemonic.to_seed(" ".join(phrase.split()), passphrase)


def root_key_from_mnemonic(
    phrase: str,
    passphrase: str,
    network: NetworkVersion,
    provider: CryptoProvider,
) -> ExtendedKey:
    """Seed a BIP32 root key from a mnemonic and optional passphrase."""
    return ExtendedKey.from_seed(mnemonic_to_seed(phrase, passphrase), network, provider)


__all__ = [
    "VALID_WORD_COUNTS",
    "WORD_COUNT_TO_STRENGTH",
    "generate_mnemonic",
    "list_languages",
    "mnemonic_from_entropy",
    "mnemonic_to_entropy",
    "mnemonic_to_seed",
    "root_key_from_mnemonic",
    "validate_mnemonic",
]
