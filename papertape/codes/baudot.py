"""ITA2 (Baudot-Murray) five-level encoding.

ITA2 shares 32 codes between two character sets.  The LETTERS set is
active at the start of a tape; the FIGS code (27) switches to FIGURES and
the LTRS code (31) switches back.  Space (4) exists in both sets and never
forces a shift.

The encoder is a pure fold: :func:`encode_char` takes the current shift
state and one character and returns the new state plus the codes to
punch.  :func:`transcode_baudot` runs the fold over a whole message
starting in LETTERS.
"""

from __future__ import annotations

import logging

from papertape.codes.symbols import TapeSymbol

logger = logging.getLogger(__name__)

LEVEL = 5
SPROCKET = 2

FIGS = 27
LTRS = 31
SPACE = 4

# Index is the ITA2 code.  ``None`` marks codes with no printable meaning
# in that set (shift codes, NUL, unassigned).
LETTERS: tuple[str | None, ...] = (
    None, "E", "\n", "A", " ", "S", "I", "U",
    "\r", "D", "R", "J", "N", "F", "C", "K",
    "T", "Z", "L", "W", "H", "Y", "P", "Q",
    "O", "B", "G", None, "M", "X", "V", None,
)

FIGURES: tuple[str | None, ...] = (
    None, "3", "\n", "-", " ", "\a", "8", "7",
    "\r", None, "4", "'", ",", "!", ":", "(",
    "5", '"', ")", "2", "#", "6", "0", "1",
    "9", "?", "&", None, ".", "/", ";", None,
)

_LETTER_CODES = {
    ch: code for code, ch in enumerate(LETTERS) if ch is not None and ch.isalpha()
}
_FIGURE_CODES = {
    ch: code
    for code, ch in enumerate(FIGURES)
    if ch is not None and ch.isprintable() and not ch.isspace()
}


def encode_char(figures: bool, ch: str) -> tuple[bool, list[int]]:
    """Encode one character.

    Parameters
    ----------
    figures : bool
        ``True`` when the FIGURES set is active.
    ch : str
        Single character.  Letters are case-folded to upper case.

    Returns
    -------
    tuple[bool, list[int]]
        New shift state and the codes to punch (empty when the character
        has no ITA2 representation).
    """
    if ch == " ":
        return figures, [SPACE]

    letter = _LETTER_CODES.get(ch.upper())
    if letter is not None:
        if figures:
            return False, [LTRS, letter]
        return False, [letter]

    figure = _FIGURE_CODES.get(ch)
    if figure is not None:
        if not figures:
            return True, [FIGS, figure]
        return True, [figure]

    return figures, []


def transcode_baudot(text: str) -> list[TapeSymbol]:
    """Encode a message as five-level ITA2 symbols.

    Characters with no code in either set are dropped.
    """
    figures = False
    out: list[TapeSymbol] = []
    dropped = 0
    for ch in text:
        figures, codes = encode_char(figures, ch)
        if not codes:
            dropped += 1
        out.extend(TapeSymbol(code, LEVEL) for code in codes)
    if dropped:
        logger.debug("Baudot: dropped %d unsupported characters", dropped)
    return out


def code_name(code: int, figures: bool = False) -> str:
    """Printable name of an ITA2 code in the given shift state."""
    if code == FIGS:
        return "FIGS"
    if code == LTRS:
        return "LTRS"
    table = FIGURES if figures else LETTERS
    ch = table[code]
    if ch is None:
        return "NUL" if code == 0 else "?"
    return {"\n": "LF", "\r": "CR", " ": "SP", "\a": "BEL"}.get(ch, ch)
