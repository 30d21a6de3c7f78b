"""
Child index values for BIP32 derivation paths.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from hdkeys.errors import DerivationExhaustedError, InvalidKeyIndexError

HARDENED_OFFSET = 0x80000000
MAX_ORDINAL = 0x7FFFFFFF

_HARDENED_MARKERS = ("'", "h", "H")


@dataclass(frozen=True, order=False)
class KeyIndex:
    """
    A path segment: a 31-bit ordinal plus a hardened flag.

    Hardened and normal indices occupy disjoint halves of the 32-bit wire
    range, so ``KeyIndex(0, hardened=True).wire_value == 0x80000000``.
    """

    ordinal: int
    hardened: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.ordinal, int) or isinstance(self.ordinal, bool):
            raise InvalidKeyIndexError(f"Index ordinal must be an integer, got {self.ordinal!r}")
        if not 0 <= self.ordinal <= MAX_ORDINAL:
            raise InvalidKeyIndexError(
                f"Index ordinal must be between 0 and {MAX_ORDINAL}, got {self.ordinal}"
            )

    @classmethod
    def normal(cls, ordinal: int) -> KeyIndex:
        return cls(ordinal, hardened=False)

    @classmethod
    def hardened_index(cls, ordinal: int) -> KeyIndex:
        return cls(ordinal, hardened=True)

    @classmethod
    def from_wire(cls, value: int) -> KeyIndex:
        """Decode a raw 32-bit child number."""
        if not 0 <= value <= 0xFFFFFFFF:
            raise InvalidKeyIndexError(f"Wire index must fit in 32 bits, got {value}")
        if value & HARDENED_OFFSET:
            return cls(value & MAX_ORDINAL, hardened=True)
        return cls(value, hardened=False)

    @classmethod
    def from_bytes(cls, data: bytes) -> KeyIndex:
        if len(data) != 4:
            raise InvalidKeyIndexError(f"Wire index must be 4 bytes, got {len(data)}")
        return cls.from_wire(struct.unpack(">I", data)[0])

    @classmethod
    def parse(cls, segment: str) -> KeyIndex:
        """
        Parse a single path segment such as ``44'``, ``44h`` or ``7``.

        Raises:
            InvalidKeyIndexError: If the segment is not a valid index
        """
        text = segment.strip()
        hardened = text.endswith(_HARDENED_MARKERS)
        if hardened:
            text = text[:-1]
        if not (text.isascii() and text.isdigit()):
            raise InvalidKeyIndexError(f"Invalid path segment: {segment!r}")
        return cls(int(text), hardened=hardened)

    @property
    def wire_value(self) -> int:
        return (HARDENED_OFFSET | self.ordinal) if self.hardened else self.ordinal

    def to_bytes(self) -> bytes:
        return struct.pack(">I", self.wire_value)

    def next(self) -> KeyIndex:
        """
        The following index with the same hardened flag.

        Raises:
            DerivationExhaustedError: If this is already the last ordinal
        """
        if self.ordinal == MAX_ORDINAL:
            kind = "hardened" if self.hardened else "normal"
            raise DerivationExhaustedError(f"No {kind} child index follows {self}")
        return KeyIndex(self.ordinal + 1, hardened=self.hardened)

    def __lt__(self, other: KeyIndex) -> bool:
        if not isinstance(other, KeyIndex):
            return NotImplemented
        return self.wire_value < other.wire_value

    def __int__(self) -> int:
        return self.wire_value

    def __str__(self) -> str:
        return f"{self.ordinal}'" if self.hardened else str(self.ordinal)


__all__ = ["KeyIndex", "HARDENED_OFFSET", "MAX_ORDINAL"]
