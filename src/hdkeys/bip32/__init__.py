"""
BIP32 hierarchical deterministic keys.
"""

from hdkeys.bip32.derivation import (
    ChildKind,
    check_derivation,
    derive,
    derive_private_child,
    derive_public_child,
)
from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip32.key_depth import KeyDepth
from hdkeys.bip32.key_index import HARDENED_OFFSET, KeyIndex
from hdkeys.bip32.network import Chain, NetworkVersion, Sector
from hdkeys.bip32.path import DerivationPath, derive_path, format_path, parse_path

__all__ = [
    "ChildKind",
    "Chain",
    "DerivationPath",
    "ExtendedKey",
    "HARDENED_OFFSET",
    "KeyDepth",
    "KeyIndex",
    "NetworkVersion",
    "Sector",
    "check_derivation",
    "derive",
    "derive_path",
    "derive_private_child",
    "derive_public_child",
    "format_path",
    "parse_path",
]
