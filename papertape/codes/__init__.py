"""Character-to-tape-code transcoders.

:func:`transcode` dispatches a byte string to the encoder selected by
:class:`Encoding` and :func:`effective_geometry` reports the tape level
and sprocket position each encoding imposes.
"""

from __future__ import annotations

from enum import Enum

from papertape.codes import baudot, morse
from papertape.codes.ascii import transcode_ascii
from papertape.codes.symbols import (
    CableCodePulse,
    TapeSymbol,
    WheatstonePulse,
    level_mask,
)


class Encoding(str, Enum):
    """Supported tape codes."""

    ASCII = "ascii"
    BAUDOT = "baudot"
    WHEATSTONE = "wheatstone"
    CABLE_CODE = "cable_code"

    @property
    def is_morse(self) -> bool:
        return self in (Encoding.WHEATSTONE, Encoding.CABLE_CODE)


def effective_geometry(
    encoding: Encoding, level: int, sprocket: int,
) -> tuple[int, int]:
    """Return the ``(level, sprocket)`` actually used for an encoding.

    Baudot forces 5-level tape with the sprocket after bit 2; both Morse
    variants force 2-level tape with the sprocket after bit 1.  Plain
    ASCII keeps the requested values.
    """
    if encoding is Encoding.BAUDOT:
        return baudot.LEVEL, baudot.SPROCKET
    if encoding.is_morse:
        return morse.LEVEL, morse.SPROCKET
    return level, sprocket


def transcode(data: bytes, encoding: Encoding, level: int = 8) -> list[TapeSymbol]:
    """Encode raw bytes into tape symbols.

    Parameters
    ----------
    data : bytes
        Message bytes.  Baudot and Morse read them as Latin-1 text.
    encoding : Encoding
        Tape code.
    level : int
        Data width for :attr:`Encoding.ASCII`; ignored otherwise.

    Returns
    -------
    list[TapeSymbol]
        Possibly empty when nothing in *data* is representable.
    """
    if encoding is Encoding.ASCII:
        return transcode_ascii(data, level)
    text = data.decode("latin-1")
    if encoding is Encoding.BAUDOT:
        return baudot.transcode_baudot(text)
    if encoding is Encoding.WHEATSTONE:
        return morse.WHEATSTONE.transcode(text)
    return morse.CABLE_CODE.transcode(text)


__all__ = [
    "CableCodePulse",
    "Encoding",
    "TapeSymbol",
    "WheatstonePulse",
    "effective_geometry",
    "level_mask",
    "transcode",
]
