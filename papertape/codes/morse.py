"""Two-level Morse tapes: USN Wheatstone and Cable Code.

Both variants share one dot/dash table and differ only in how each
element is turned into rows, so a variant is a small strategy record
rather than a subclass.

Wheatstone
    A dash takes two rows (``DASH_START`` then ``DASH_CONTINUE``), a dot
    one row (``DOT``), and every character is closed by an ``ADVANCE`` row.
Cable Code
    A dash is one ``LONG`` row, a dot one ``SHORT`` row, and every
    character is closed by a ``SEPARATOR`` row.

Whitespace becomes a single advance/separator row in either variant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from papertape.codes.symbols import CableCodePulse, TapeSymbol, WheatstonePulse

logger = logging.getLogger(__name__)

LEVEL = 2
SPROCKET = 1

MORSE_TABLE: dict[str, str] = {
    # Letters
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".",
    "F": "..-.", "G": "--.", "H": "....", "I": "..", "J": ".---",
    "K": "-.-", "L": ".-..", "M": "--", "N": "-.", "O": "---",
    "P": ".--.", "Q": "--.-", "R": ".-.", "S": "...", "T": "-",
    "U": "..-", "V": "...-", "W": ".--", "X": "-..-", "Y": "-.--",
    "Z": "--..",
    # Digits
    "1": ".----", "2": "..---", "3": "...--", "4": "....-", "5": ".....",
    "6": "-....", "7": "--...", "8": "---..", "9": "----.", "0": "-----",
    # Punctuation
    ".": ".-.-.-", ",": "--..--", "?": "..--..", "'": ".----.",
    "!": "-.-.--", ":": "---...", ";": "-.-.-.", "=": "-...-",
    "+": ".-.-.", "-": "-....-", "_": "..--.-", '"': ".-..-.",
    "@": ".--.-.",
}


@dataclass(frozen=True)
class MorseVariant:
    """Row expansion rules for one Morse tape format."""

    name: str
    dot: tuple[int, ...]
    dash: tuple[int, ...]
    separator: int

    def encode_char(self, ch: str) -> list[int]:
        """Pulses for one character; empty when it has no Morse form."""
        if ch.isspace():
            return [self.separator]
        elements = MORSE_TABLE.get(ch.upper())
        if elements is None:
            return []
        pulses: list[int] = []
        for element in elements:
            pulses.extend(self.dash if element == "-" else self.dot)
        pulses.append(self.separator)
        return pulses

    def transcode(self, text: str) -> list[TapeSymbol]:
        out: list[TapeSymbol] = []
        for ch in text:
            pulses = self.encode_char(ch)
            if not pulses:
                logger.debug("%s: dropped unsupported character %r", self.name, ch)
            out.extend(TapeSymbol(int(p), LEVEL) for p in pulses)
        return out


WHEATSTONE = MorseVariant(
    name="wheatstone",
    dot=(WheatstonePulse.DOT,),
    dash=(WheatstonePulse.DASH_START, WheatstonePulse.DASH_CONTINUE),
    separator=WheatstonePulse.ADVANCE,
)

CABLE_CODE = MorseVariant(
    name="cable_code",
    dot=(CableCodePulse.SHORT,),
    dash=(CableCodePulse.LONG,),
    separator=CableCodePulse.SEPARATOR,
)
