"""Tape symbols and Morse pulse codes.

A *tape symbol* is one row of data holes: a fixed-width bit vector of
``level`` bits (1-8).  Bit 0 is the least significant bit and sits at the
right-hand data hole when the tape is read unmirrored.  Bits above
``level - 1`` are never meaningful and are always masked off.

Morse tapes are two-level; each pulse is the value of one row, with bit 0
and bit 1 selecting the lower and upper hole.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

MAX_LEVEL = 8


# ---------------------------------------------------------------------------
# Pulse codes
# ---------------------------------------------------------------------------


class WheatstonePulse(IntEnum):
    """Row values of a two-level Wheatstone (Morse) tape."""

    ADVANCE = 0
    DASH_START = 1
    DASH_CONTINUE = 2
    DOT = 3


class CableCodePulse(IntEnum):
    """Row values of a two-level Cable Code (Morse) tape."""

    SEPARATOR = 0
    SHORT = 1
    LONG = 2


# ---------------------------------------------------------------------------
# Symbol
# ---------------------------------------------------------------------------


def level_mask(level: int) -> int:
    """Bit mask covering the ``level`` meaningful bits."""
    return (1 << level) - 1


@dataclass(frozen=True, slots=True)
class TapeSymbol:
    """One row of data holes.

    Parameters
    ----------
    value : int
        Bit pattern; bit *i* set means data hole *i* is punched.
    level : int
        Number of data holes per row (1-8).
    """

    value: int
    level: int

    def __post_init__(self) -> None:
        if not 1 <= self.level <= MAX_LEVEL:
            raise ValueError(
                f"Tape level must be 1-{MAX_LEVEL}, got {self.level}"
            )
        if self.value < 0 or self.value > level_mask(self.level):
            raise ValueError(
                f"Value {self.value} does not fit in {self.level} bits"
            )

    @classmethod
    def from_byte(cls, byte: int, level: int) -> TapeSymbol:
        """Build a symbol from a byte, masking it to ``level`` bits."""
        return cls(byte & level_mask(level), level)

    @classmethod
    def blank(cls, level: int) -> TapeSymbol:
        """All-zero symbol (only the sprocket hole is punched)."""
        return cls(0, level)

    def bit(self, i: int) -> bool:
        return bool(self.value >> i & 1)

    @property
    def popcount(self) -> int:
        return bin(self.value).count("1")

    def with_bit(self, i: int, on: bool) -> TapeSymbol:
        if not 0 <= i < self.level:
            raise IndexError(f"Bit {i} outside level {self.level}")
        if on:
            return TapeSymbol(self.value | 1 << i, self.level)
        return TapeSymbol(self.value & ~(1 << i), self.level)

    def inverted(self) -> TapeSymbol:
        """Bitwise NOT over the ``level`` meaningful bits."""
        return TapeSymbol(~self.value & level_mask(self.level), self.level)
