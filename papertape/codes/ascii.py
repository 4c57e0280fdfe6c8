"""Plain pass-through encoding: one byte, one row."""

from __future__ import annotations

from papertape.codes.symbols import TapeSymbol


def transcode_ascii(data: bytes, level: int = 8) -> list[TapeSymbol]:
    """Map every byte to a symbol carrying its low ``level`` bits."""
    return [TapeSymbol.from_byte(b, level) for b in data]
