"""
Derivation path notation ("m/44'/0'/0'/0/0").

Keys do not remember how they were derived; a path is caller-side
bookkeeping that can be parsed, rendered and walked.
"""

from __future__ import annotations

from dataclasses import dataclass

from hdkeys.bip32.derivation import ChildKind, derive
from hdkeys.bip32.extended_key import ExtendedKey
from hdkeys.bip32.key_index import KeyIndex
from hdkeys.crypto import CryptoProvider
from hdkeys.errors import InvalidKeyIndexError, InvalidPathError


@dataclass(frozen=True)
class DerivationPath:
    """
    Parsed derivation path.

    ``public`` is set for paths written with a capital ``M`` root, which
    denote the public key at the end of the path.
    """

    indices: tuple[KeyIndex, ...] = ()
    public: bool = False

    def child(self, index: KeyIndex) -> DerivationPath:
        return DerivationPath(self.indices + (index,), self.public)

    def __len__(self) -> int:
        return len(self.indices)

    def __str__(self) -> str:
        return format_path(self.indices, public=self.public)


def parse_path(path: str) -> DerivationPath:
    """
    Parse path notation like ``m/84'/0'/0'/0/0``.

    ' (or h/H) marks a hardened segment. A leading ``M`` requests the public key.

    Raises:
        InvalidPathError: If the path is malformed
    """
    text = path.strip()
    if not text:
        raise InvalidPathError("Path is empty")

    parts = text.split("/")
    root = parts[0]
    if root not in ("m", "M"):
        raise InvalidPathError(f"Path must start with 'm' or 'M': {path!r}")

    segments = parts[1:]
    # Tolerate a single trailing slash ("m/0/")
    if segments and segments[-1] == "":
        segments = segments[:-1]

    indices: list[KeyIndex] = []
    for segment in segments:
        if not segment:
            raise InvalidPathError(f"Empty segment in path {path!r}")
        try:
            indices.append(KeyIndex.parse(segment))
        except InvalidKeyIndexError as e:
            raise InvalidPathError(f"Invalid path {path!r}: {e}") from e

    return DerivationPath(tuple(indices), public=root == "M")


def format_path(indices: tuple[KeyIndex, ...] | list[KeyIndex], public: bool = False) -> str:
    root = "M" if public else "m"
    return "/".join([root, *(str(index) for index in indices)])


def derive_path(
    key: ExtendedKey,
    path: DerivationPath | str,
    provider: CryptoProvider,
) -> ExtendedKey:
    """
    Walk a path from key.

    Private keys derive private children along the way, public keys derive
    public children. An ``M/...`` path neuters the final key.
    """
    if isinstance(path, str):
        path = parse_path(path)

    kind = ChildKind.PRIVATE if key.is_private else ChildKind.PUBLIC
    current = key
    for index in path.indices:
        current = derive(current, index, kind, provider)

    if path.public:
        current = current.neuter(provider)
    return current


__all__ = ["DerivationPath", "parse_path", "format_path", "derive_path"]
