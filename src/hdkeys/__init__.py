"""
hdkeys - Hierarchical deterministic keys for Bitcoin-style wallets

Provides BIP32 extended keys and derivation, BIP39 mnemonics and BIP44 accounts.
"""

from hdkeys.bip32 import (
    Chain,
    ChildKind,
    DerivationPath,
    ExtendedKey,
    KeyDepth,
    KeyIndex,
    NetworkVersion,
    Sector,
    derive,
    derive_path,
    parse_path,
)
from hdkeys.crypto import CoincurveProvider, CryptoProvider, default_provider
from hdkeys.errors import HDKeyError
from hdkeys.version import __version__

__all__ = [
    "__version__",
    "Chain",
    "ChildKind",
    "CoincurveProvider",
    "CryptoProvider",
    "DerivationPath",
    "ExtendedKey",
    "HDKeyError",
    "KeyDepth",
    "KeyIndex",
    "NetworkVersion",
    "Sector",
    "default_provider",
    "derive",
    "derive_path",
    "parse_path",
]
