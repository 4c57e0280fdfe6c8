"""Punched banner lettering.

Each glyph is a list of vertical slices through an 8x8 letter, one slice
per tape row, with the least significant bit at the top of the letter.
Glyph widths vary.  Only space through backtick are drawable; the text is
upper-cased first and anything else is skipped.
"""

from __future__ import annotations

import logging

from papertape.codes.symbols import TapeSymbol

logger = logging.getLogger(__name__)

FONT_FIRST = " "

# Indexed by ord(ch) - ord(" ").
FONT: tuple[tuple[int, ...], ...] = (
    (0, 0, 0, 0, 0, 0),                      # space
    (0, 0, 0, 95, 0, 0, 0),                  # !
    (0, 0, 0, 3, 0, 3, 0),                   # "
    (0, 20, 20, 127, 20, 127, 20, 20, 0),    # #
    (0, 0, 36, 42, 127, 42, 18, 0),          # $
    (0, 0, 38, 22, 8, 52, 50, 0),            # %
    (0, 48, 74, 69, 75, 48, 80, 0),          # &
    (0, 0, 0, 0, 3, 0, 0, 0),                # '
    (0, 0, 0, 28, 34, 65, 0, 0),             # (
    (0, 0, 0, 65, 34, 28, 0, 0),             # )
    (0, 34, 20, 8, 127, 8, 20, 34, 0),       # *
    (0, 8, 8, 8, 127, 8, 8, 8, 0),           # +
    (0, 0, 0, 0, 176, 112, 0, 0),            # ,
    (0, 8, 8, 8, 8, 8, 8, 8, 0),             # -
    (0, 0, 0, 0, 96, 96, 0, 0, 0),           # .
    (64, 32, 16, 8, 4, 2, 1, 0),             # /
    (0, 0, 62, 65, 73, 65, 62, 0),           # 0
    (0, 0, 66, 127, 64, 0, 0),               # 1
    (0, 0, 66, 97, 81, 73, 70, 0),           # 2
    (0, 0, 34, 65, 73, 73, 54, 0),           # 3
    (0, 0, 12, 10, 73, 127, 72, 0),          # 4
    (0, 0, 47, 73, 73, 73, 49, 0),           # 5
    (0, 0, 62, 73, 73, 73, 50, 0),           # 6
    (0, 0, 1, 113, 9, 5, 3, 0),              # 7
    (0, 0, 54, 73, 73, 73, 54, 0),           # 8
    (0, 0, 38, 73, 73, 73, 62, 0),           # 9
    (0, 0, 0, 0, 54, 54, 0, 0),              # :
    (0, 0, 0, 0, 182, 118, 0),               # ;
    (0, 0, 8, 20, 34, 65, 0),                # <
    (0, 20, 20, 20, 20, 20, 20),             # =
    (0, 0, 65, 34, 20, 8, 0),                # >
    (0, 2, 1, 81, 9, 6, 0),                  # ?
    (0, 62, 65, 93, 85, 14, 0),              # @
    (0, 126, 9, 9, 9, 126, 0),               # A
    (0, 127, 73, 73, 73, 54, 0),             # B
    (0, 62, 65, 65, 65, 34, 0),              # C
    (0, 127, 65, 65, 65, 62, 0),             # D
    (0, 127, 73, 73, 73, 73, 0),             # E
    (0, 127, 9, 9, 9, 9, 0),                 # F
    (0, 62, 65, 73, 73, 26, 0),              # G
    (0, 127, 8, 8, 8, 127, 0),               # H
    (0, 0, 65, 127, 65, 0, 0),               # I
    (0, 48, 64, 65, 63, 1, 0),               # J
    (0, 63, 8, 8, 20, 99, 0),                # K
    (0, 0, 0, 127, 64, 64, 0),               # L
    (0, 127, 2, 4, 8, 4, 2, 127),            # M
    (0, 127, 2, 12, 16, 127, 0),             # N
    (0, 62, 65, 65, 65, 62, 0),              # O
    (0, 0, 127, 9, 9, 6, 0),                 # P
    (0, 62, 65, 65, 193, 62, 0),             # Q
    (0, 127, 9, 25, 41, 70, 0),              # R
    (0, 38, 73, 73, 73, 50, 0),              # S
    (0, 1, 1, 127, 1, 1, 0),                 # T
    (0, 63, 64, 64, 64, 63, 0),              # U
    (0, 7, 24, 96, 24, 7, 0),                # V
    (7, 24, 96, 24, 96, 24, 7),              # W
    (0, 99, 20, 8, 20, 99, 0),               # X
    (0, 3, 4, 120, 4, 3, 0),                 # Y
    (0, 97, 81, 73, 69, 67, 0),              # Z
    (0, 0, 127, 65, 65, 0, 0),               # [
    (1, 2, 4, 8, 16, 32, 64),                # backslash
    (0, 0, 65, 65, 127, 0, 0),               # ]
    (0, 4, 2, 1, 2, 4, 0),                   # ^
    (0, 128, 128, 128, 128, 128, 128, 128),  # _
    (0, 0, 1, 2, 0, 0, 0),                   # `
)


def glyph(ch: str) -> tuple[int, ...] | None:
    """Font columns for one character, or ``None`` if it is not drawable."""
    upper = ch.upper()
    if len(upper) != 1:
        return None
    index = ord(upper) - ord(FONT_FIRST)
    if 0 <= index < len(FONT):
        return FONT[index]
    return None


def render_banner(text: str, level: int) -> list[TapeSymbol]:
    """Render *text* as banner rows, one symbol per font column.

    Columns wider than ``level`` bits lose their upper pixels: bits at and
    above ``level`` are masked off.
    """
    columns: list[TapeSymbol] = []
    for ch in text:
        cols = glyph(ch)
        if cols is None:
            logger.debug("Banner: no glyph for %r, skipped", ch)
            continue
        columns.extend(TapeSymbol.from_byte(c, level) for c in cols)
    return columns
