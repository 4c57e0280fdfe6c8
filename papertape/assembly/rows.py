"""Row assembly -- from symbol streams to the ordered rows of one tape.

A tape is laid out top to bottom as four regions::

    BANNER   punched lettering, one row per font column
    LEADER   blank rows (sprocket only)
    CODE     the transcoded data, optionally a sub-range of it
    TRAILER  blank rows

Rows are immutable.  Parity and inversion each produce a new row from the
old one, parity first.

Range semantics
---------------
``start``/``length`` select ``[start, start + length)`` of the code
stream.  A negative ``start`` is satisfied with extra blank LEADER rows
and the length is reduced by the same amount.  Positions past the end of
the stream become blank CODE rows.  Neither case is an error: joiner and
trailer fragments are cut from arbitrary offsets this way.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from enum import Enum

from papertape.assembly.numbering import Numbering
from papertape.codes.symbols import TapeSymbol

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class Region(str, Enum):
    BANNER = "banner"
    LEADER = "leader"
    CODE = "code"
    TRAILER = "trailer"

    @property
    def flag(self) -> Numbering:
        return Numbering[self.name]


REGION_ORDER = (Region.BANNER, Region.LEADER, Region.CODE, Region.TRAILER)


class Parity(str, Enum):
    """Use of the most significant data bit as a parity bit."""

    NONE = "none"
    EVEN = "even"
    ODD = "odd"


@dataclass(frozen=True, slots=True)
class Row:
    """One punched row.

    Attributes
    ----------
    symbol : TapeSymbol
        Data holes after parity and inversion.
    region : Region
        Tape region the row belongs to.
    sequence : int
        0-based index within its region.
    number : int | None
        Display line number, ``None`` when the region is not numbered.
        Presentation only; geometry never reads it.
    """

    symbol: TapeSymbol
    region: Region
    sequence: int
    number: int | None = None


@dataclass(frozen=True)
class TapeRowList:
    """Ordered rows of a whole tape with per-region bookkeeping."""

    rows: tuple[Row, ...]
    counts: dict[Region, int]
    level: int
    code_start: int = 0

    def __post_init__(self) -> None:
        if sum(self.counts.values()) != len(self.rows):
            raise ValueError(
                f"Region counts {dict(self.counts)} do not add up to "
                f"{len(self.rows)} rows"
            )

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index):
        return self.rows[index]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def region_count(self, region: Region) -> int:
        return self.counts.get(region, 0)

    @property
    def banner_count(self) -> int:
        return self.region_count(Region.BANNER)

    @property
    def leader_count(self) -> int:
        return self.region_count(Region.LEADER)

    @property
    def code_count(self) -> int:
        return self.region_count(Region.CODE)

    @property
    def trailer_count(self) -> int:
        return self.region_count(Region.TRAILER)


# ---------------------------------------------------------------------------
# Row transforms
# ---------------------------------------------------------------------------


def apply_parity(symbol: TapeSymbol, parity: Parity) -> TapeSymbol:
    """Set or clear the top bit so the row's total parity matches.

    The top bit (``level - 1``) becomes the parity of the ``level - 1``
    bits below it: EVEN leaves an even number of holes, ODD an odd number.
    """
    if parity is Parity.NONE:
        return symbol
    msb = symbol.level - 1
    lower = symbol.with_bit(msb, False).popcount
    if parity is Parity.EVEN:
        return symbol.with_bit(msb, lower % 2 == 1)
    return symbol.with_bit(msb, lower % 2 == 0)


def apply_inversion(symbol: TapeSymbol, invert: bool) -> TapeSymbol:
    return symbol.inverted() if invert else symbol


def transform_row(row: Row, parity: Parity, invert: bool) -> Row:
    """Return *row* with parity then inversion applied."""
    symbol = apply_inversion(apply_parity(row.symbol, parity), invert)
    if symbol == row.symbol:
        return row
    return replace(row, symbol=symbol)


# ---------------------------------------------------------------------------
# Range resolution
# ---------------------------------------------------------------------------


def resolve_range(
    start: int | None, length: int | None, available: int,
) -> tuple[int, int, int]:
    """Resolve a requested code range.

    Returns
    -------
    tuple[int, int, int]
        ``(pad_rows, start, length)``: blank leader rows to prepend, the
        clamped start offset and the number of code rows to emit.

    Raises
    ------
    ValueError
        If *length* is negative.
    """
    if length is not None and length < 0:
        raise ValueError(f"Range length must be >= 0, got {length}")
    if start is None and length is None:
        return 0, 0, available
    start = 0 if start is None else start
    if length is None:
        length = max(0, available - start)
    pad = 0
    if start < 0:
        pad = -start
        length = max(0, length - pad)
        start = 0
    return pad, start, length


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def _number_rows(
    regions: dict[Region, list[TapeSymbol]],
    numbering: Numbering,
    code_start: int,
) -> dict[Region, list[int | None]]:
    """Display numbers per region.

    Numbered regions count from 1, except CODE, which shows the data
    offset of each row.  With ``ALL`` a single count runs through every
    row of the tape.
    """
    numbers: dict[Region, list[int | None]] = {}
    if numbering == Numbering.ALL:
        n = 1
        for region in REGION_ORDER:
            size = len(regions[region])
            numbers[region] = list(range(n, n + size))
            n += size
        return numbers
    for region in REGION_ORDER:
        size = len(regions[region])
        if not numbering & region.flag:
            numbers[region] = [None] * size
        elif region is Region.CODE:
            numbers[region] = list(range(code_start, code_start + size))
        else:
            numbers[region] = list(range(1, size + 1))
    return numbers


def assemble(
    code_symbols: Sequence[TapeSymbol],
    *,
    level: int,
    leader: int = 0,
    banner_symbols: Sequence[TapeSymbol] = (),
    trailer: int = 0,
    start: int | None = None,
    length: int | None = None,
    parity: Parity = Parity.NONE,
    invert: bool = False,
    numbering: Numbering = Numbering.CODE,
) -> TapeRowList:
    """Build the rows of one tape.

    Parameters
    ----------
    code_symbols : Sequence[TapeSymbol]
        Transcoded data.
    level : int
        Data holes per row; leader, trailer and padding rows use it.
    leader, trailer : int
        Blank rows before and after the code region.
    banner_symbols : Sequence[TapeSymbol]
        Rendered banner columns, placed at the very top of the tape.
    start, length : int | None
        Optional code sub-range (see module docstring).
    parity : Parity
        Parity mode applied to every row.
    invert : bool
        Invert every row after parity.
    numbering : Numbering
        Regions that receive display numbers.

    Returns
    -------
    TapeRowList

    Raises
    ------
    ValueError
        On negative counts or a negative range length.
    """
    if leader < 0 or trailer < 0:
        raise ValueError(
            f"Leader and trailer must be >= 0, got {leader} and {trailer}"
        )

    pad, start_, length_ = resolve_range(start, length, len(code_symbols))
    blank = TapeSymbol.blank(level)

    code: list[TapeSymbol] = [
        code_symbols[i] if i < len(code_symbols) else blank
        for i in range(start_, start_ + length_)
    ]
    if start_ + length_ > len(code_symbols):
        logger.debug(
            "Range runs %d rows past end of data, padded",
            start_ + length_ - len(code_symbols),
        )
    if pad:
        logger.debug("Range starts %d rows before data, padded leader", pad)

    regions: dict[Region, list[TapeSymbol]] = {
        Region.BANNER: list(banner_symbols),
        Region.LEADER: [blank] * (leader + pad),
        Region.CODE: code,
        Region.TRAILER: [blank] * trailer,
    }
    numbers = _number_rows(regions, numbering, start_)

    rows: list[Row] = []
    for region in REGION_ORDER:
        for seq, symbol in enumerate(regions[region]):
            row = Row(symbol, region, seq, numbers[region][seq])
            rows.append(transform_row(row, parity, invert))

    counts = {region: len(regions[region]) for region in REGION_ORDER}
    logger.debug(
        "Assembled %d rows: banner=%d leader=%d code=%d trailer=%d",
        len(rows),
        counts[Region.BANNER],
        counts[Region.LEADER],
        counts[Region.CODE],
        counts[Region.TRAILER],
    )
    return TapeRowList(tuple(rows), counts, level, start_)
