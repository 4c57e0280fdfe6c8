"""Console projection -- a read-only text view of a generated tape.

Each row prints as the tape looks from above, edges as ``|``, the
sprocket hole as ``.``::

    #00000097  | OO  .  O|    a

A ``+--------+`` line marks every segment boundary, where a joiner goes.
After the rows, one line per segment gives the offsets a joiner tape for
that boundary must be cut at.

Nothing here feeds back into geometry.
"""

from __future__ import annotations

import string
from collections.abc import Iterator
from dataclasses import dataclass

from papertape.assembly.rows import Region, Row
from papertape.codes import Encoding, TapeSymbol, baudot
from papertape.layout.segments import JoinerMark
from papertape.pipeline import GenerateResult

NUMBER_BLANK = " " * 11

CONTROL_NAMES = (
    "NUL", "SOH", "STX", "ETX", "EOT", "ENQ", "ACK", "BEL",
    "BS", "HT", "LF", "VT", "FF", "CR", "SO", "SI",
    "DLE", "DC1", "DC2", "DC3", "DC4", "NAK", "SYN", "ETB",
    "CAN", "EM", "SUB", "ESC", "FS", "GS", "RS", "US",
)


@dataclass(frozen=True)
class ConsoleOptions:
    """What to show alongside each row."""

    mark: str = "O"
    space: str = " "
    chadless_mark: str = "U"
    line_numbers: bool = False
    ascii_chars: bool = False
    control_chars: bool = False


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_row(
    symbol: TapeSymbol,
    sprocket: int,
    mark: str = "O",
    space: str = " ",
    mirror: bool = False,
) -> str:
    """Render one row, e.g. ``'a'`` on 8-level tape as ``| OO  .  O|``."""
    cells = ["|"]
    if sprocket > symbol.level - 1:
        cells.append(".")
    for i in range(symbol.level - 1, -1, -1):
        cells.append(mark if symbol.bit(i) else space)
        if i == sprocket:
            cells.append(".")
    cells.append("|")
    row = "".join(cells)
    return row[::-1] if mirror else row


def control_code_name(value: int) -> str:
    """``<NUL>`` .. ``<US>``, ``<DEL>``, ``RUBOUT`` for 255; else empty."""
    if value < len(CONTROL_NAMES):
        return f"<{CONTROL_NAMES[value]}>"
    if value == 0x7F:
        return "<DEL>"
    if value == 0xFF:
        return "RUBOUT"
    return ""


def separator(level: int, line_numbers: bool = False) -> str:
    """Segment boundary line, as wide as the row rendering."""
    line = "+-" + "-" * level + "+"
    return (NUMBER_BLANK + line) if line_numbers else line


def number_column(row: Row) -> str:
    if row.number is None:
        return NUMBER_BLANK
    return f"#{row.number:08d}  "


def mode_labels(result: GenerateResult) -> str:
    job = result.job
    labels = []
    if job.invert:
        labels.append("INVERTED")
    if job.mirror:
        labels.append("MIRROR")
    if job.joiner:
        labels.append("JOINER")
    if job.chadless:
        labels.append("CHADLESS")
    if result.encoding is Encoding.WHEATSTONE:
        labels.append("MORSE (WHEATSTONE)")
    elif result.encoding is Encoding.CABLE_CODE:
        labels.append("MORSE (CABLE CODE)")
    elif result.encoding is Encoding.BAUDOT:
        labels.append("BAUDOT")
    return "".join(f" {label} " for label in labels)


def joiner_report(marks: tuple[JoinerMark, ...] | list[JoinerMark]) -> list[str]:
    return [
        f"Joiner {m.segment:04d}: data byte {m.row_offset:08d}  "
        f"absolute position {m.code_offset:08d}"
        for m in marks
    ]


# ---------------------------------------------------------------------------
# Whole-tape rendering
# ---------------------------------------------------------------------------


def render_lines(
    result: GenerateResult, options: ConsoleOptions | None = None,
) -> Iterator[str]:
    """Yield the console view of *result* line by line."""
    opts = options or ConsoleOptions()
    job = result.job
    mark = opts.chadless_mark if job.chadless else opts.mark
    labels = mode_labels(result)
    rows = result.rows
    figures = False

    yield separator(result.level, opts.line_numbers)
    for segment in result.layout.segments:
        for row in rows[segment.row_start:segment.row_stop]:
            parts = []
            if opts.line_numbers:
                parts.append(number_column(row))
            parts.append(format_row(row.symbol, result.sprocket, mark, opts.space, job.mirror))
            parts.append(labels)

            value = row.symbol.value
            if result.encoding is Encoding.BAUDOT:
                if row.region is Region.CODE:
                    parts.append(" " + baudot.code_name(value, figures))
                    if value == baudot.FIGS:
                        figures = True
                    elif value == baudot.LTRS:
                        figures = False
            elif not result.encoding.is_morse:
                ch = chr(value)
                if opts.ascii_chars and value < 128 and (
                    ch.isalnum() or ch in string.punctuation
                ):
                    parts.append("    " + ch)
                if opts.control_chars and control_code_name(value):
                    parts.append("    " + control_code_name(value))
            yield "".join(parts).rstrip()
        yield separator(result.level, opts.line_numbers)

    if not job.joiner:
        yield from joiner_report(result.joiner_marks)


def render(result: GenerateResult, options: ConsoleOptions | None = None) -> str:
    return "\n".join(render_lines(result, options))
