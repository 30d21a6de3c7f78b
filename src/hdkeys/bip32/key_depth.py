"""
Depth counter for extended keys.
"""

from __future__ import annotations

from dataclasses import dataclass

from hdkeys.errors import DepthOverflowError

MAX_DEPTH = 255


@dataclass(frozen=True, order=True)
class KeyDepth:
    """Number of derivation steps from the root, serialized as one byte."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= MAX_DEPTH:
            raise DepthOverflowError(
                f"Key depth must be between 0 and {MAX_DEPTH}, got {self.value}"
            )

    def next(self) -> KeyDepth:
        if self.value >= MAX_DEPTH:
            raise DepthOverflowError(f"Cannot derive past depth {MAX_DEPTH}")
        return KeyDepth(self.value + 1)

    @property
    def is_root(self) -> bool:
        return self.value == 0

    def __int__(self) -> int:
        return self.value


__all__ = ["KeyDepth", "MAX_DEPTH"]
