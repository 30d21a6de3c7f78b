"""
Error taxonomy for hdkeys.

Every error raised by the library derives from HDKeyError. Errors describing a
bad input value additionally derive from ValueError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hdkeys.bip32.key_index import KeyIndex


class HDKeyError(Exception):
    """Base class for all hdkeys errors."""


class InvalidSerializedKeyError(HDKeyError, ValueError):
    """Serialized extended key data is malformed (length, checksum, version)."""


class RootKeyMustBePrivateError(HDKeyError, ValueError):
    """A root key was requested with a public network version."""


class InvalidDerivationError(HDKeyError):
    """The requested parent -> child sector transition is not possible."""

    def __init__(self, parent_sector: str, child_kind: str, hardened: bool):
        self.parent_sector = parent_sector
        self.child_kind = child_kind
        self.hardened = hardened
        kind = "hardened " if hardened else ""
        super().__init__(
            f"Cannot derive a {kind}{child_kind} child from a {parent_sector} parent key"
        )


class InvalidIntermediateKeyError(HDKeyError):
    """HMAC output for an index does not yield a valid key; the next index must be used."""

    def __init__(self, message: str, index: KeyIndex | None = None):
        self.index = index
        super().__init__(message)


class DerivationExhaustedError(HDKeyError):
    """Retrying invalid intermediate keys ran past the last representable index."""


class DepthOverflowError(HDKeyError, ValueError):
    """A key depth would not fit in one byte."""


class ProviderError(HDKeyError):
    """A cryptographic provider operation failed. The cause is chained."""


class InvalidKeyIndexError(HDKeyError, ValueError):
    """A child index ordinal or path segment is out of range or malformed."""


class InvalidPathError(HDKeyError, ValueError):
    """A derivation path string is malformed."""


class MnemonicError(HDKeyError, ValueError):
    """A mnemonic phrase, entropy value or wordlist language is invalid."""


class UnknownCoinError(HDKeyError, ValueError):
    """No BIP44 coin type is registered under the requested name or id."""


__all__ = [
    "HDKeyError",
    "InvalidSerializedKeyError",
    "RootKeyMustBePrivateError",
    "InvalidDerivationError",
    "InvalidIntermediateKeyError",
    "DerivationExhaustedError",
    "DepthOverflowError",
    "ProviderError",
    "InvalidKeyIndexError",
    "InvalidPathError",
    "MnemonicError",
    "UnknownCoinError",
]
