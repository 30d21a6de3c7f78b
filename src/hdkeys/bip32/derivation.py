"""
BIP32 child key derivation.

Implements CKDpriv and CKDpub:
https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki#child-key-derivation-ckd-functions

Which derivations are legal depends only on the parent's sector, the requested
child kind and whether the index is hardened:

    parent   child    hardened  result
    private  private  any       CKDpriv
    private  public   any       CKDpriv, then neuter
    public   public   no        CKDpub (point addition)
    public   public   yes       InvalidDerivationError
    public   private  any       InvalidDerivationError
"""

from __future__ import annotations

from enum import Enum

from loguru import logger

from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip32.key_index import KeyIndex
from hdkeys.bip32.network import Sector
from hdkeys.crypto import SECP256K1_ORDER, CryptoProvider
from hdkeys.errors import InvalidDerivationError, InvalidIntermediateKeyError


class ChildKind(str, Enum):
    """Sector of the requested child key. Hardening is carried by the KeyIndex."""

    PRIVATE = "private"
    PUBLIC = "public"


def check_derivation(parent_sector: Sector, kind: ChildKind, hardened: bool) -> None:
    """
    Reject illegal sector transitions.

    Raises:
        InvalidDerivationError: For public -> private, or public -> hardened public
    """
    if parent_sector == Sector.PRIVATE:
        return
    if kind == ChildKind.PUBLIC and not hardened:
        return
    raise InvalidDerivationError(parent_sector.value, kind.value, hardened)


def _split_hmac(
    chain_code: bytes, data: bytes, index: KeyIndex, provider: CryptoProvider
) -> tuple[bytes, int, bytes]:
    """Compute I = HMAC-SHA512(chain_code, data || ser32(index)) and validate IL."""
    digest = provider.hmac_sha512(chain_code, data + index.to_bytes())
    il, ir = digest[:32], digest[32:]
    il_int = int.from_bytes(il, "big")
    if il_int == 0 or il_int >= SECP256K1_ORDER:
        raise InvalidIntermediateKeyError(f"IL is not a valid scalar at index {index}", index)
    return il, il_int, ir


def _private_child(
    parent: ExtendedKey,
    parent_public_key: bytes,
    index: KeyIndex,
    provider: CryptoProvider,
) -> tuple[bytes, bytes]:
    """CKDpriv: returns (key material 0x00 || k_i, chain code)."""
    data = b"\x00" + parent.private_key if index.hardened else parent_public_key
    _, il_int, chain_code = _split_hmac(parent.chain_code, data, index, provider)

    child_int = (il_int + int.from_bytes(parent.private_key, "big")) % SECP256K1_ORDER
    if child_int == 0:
        raise InvalidIntermediateKeyError(f"Child private key is zero at index {index}", index)
    return b"\x00" + child_int.to_bytes(32, "big"), chain_code


def _public_child(
    parent: ExtendedKey, index: KeyIndex, provider: CryptoProvider
) -> tuple[bytes, bytes]:
    """CKDpub: returns (compressed point IL*G + K_par, chain code)."""
    il, _, chain_code = _split_hmac(parent.chain_code, parent.key_material, index, provider)
    return provider.add_public_key_tweak(parent.key_material, il), chain_code


def derive(
    parent: ExtendedKey,
    index: KeyIndex,
    kind: ChildKind,
    provider: CryptoProvider,
) -> ExtendedKey:
    """
    Derive the child of parent at index.

    If the index yields an invalid intermediate key (probability below 2^-127),
    the next index with the same hardened flag is used instead; the returned
    key records the index actually used.

    Args:
        parent: Parent extended key
        index: Requested child index
        kind: ChildKind.PRIVATE or ChildKind.PUBLIC
        provider: Crypto provider for hashing and curve operations

    Returns:
        The child ExtendedKey

    Raises:
        InvalidDerivationError: Illegal sector transition
        DepthOverflowError: Parent is already at depth 255
        DerivationExhaustedError: No valid index remains
        ProviderError: A provider operation failed
    """
    check_derivation(parent.sector, kind, index.hardened)
    depth = parent.depth.next()

    parent_public_key = parent.public_key(provider)
    parent_fingerprint = provider.hash160(parent_public_key)[:4]

    candidate = index
    while True:
        try:
            if parent.is_private:
                key_material, chain_code = _private_child(
                    parent, parent_public_key, candidate, provider
                )
            else:
                key_material, chain_code = _public_child(parent, candidate, provider)
            break
        except InvalidIntermediateKeyError as e:
            following = candidate.next()
            logger.warning(f"{e}; retrying with index {following}")
            candidate = following

    child = ExtendedKey.assemble(
        network=parent.network,
        depth=depth,
        parent_fingerprint=parent_fingerprint,
        index=candidate,
        chain_code=chain_code,
        key_material=key_material,
    )
    if kind == ChildKind.PUBLIC:
        child = child.neuter(provider)

    logger.debug(
        f"Derived {kind.value} child {candidate} at depth {depth.value} "
        f"(parent fingerprint {parent_fingerprint.hex()})"
    )
    return child


def derive_private_child(
    parent: ExtendedKey, index: KeyIndex, provider: CryptoProvider
) -> ExtendedKey:
    return derive(parent, index, ChildKind.PRIVATE, provider)


def derive_public_child(
    parent: ExtendedKey, index: KeyIndex, provider: CryptoProvider
) -> ExtendedKey:
    return derive(parent, index, ChildKind.PUBLIC, provider)


__all__ = [
    "ChildKind",
    "check_derivation",
    "derive",
    "derive_private_child",
    "derive_public_child",
]
