"""Segment layout -- split a tape into strips that fit the cutting mat.

A *segment* is a run of consecutive rows drawn as one vertical strip.
Strips are placed side by side along +X; within a strip the first row is
at the top.  A *page* is the set of segments written to one output file.

Segment count
-------------
The historical formula ``total // rows_per_segment + 1`` is the default.
It adds an empty trailing strip whenever the division is exact, which
existing tapes and joiner offsets depend on.  ``exact=True`` selects
``ceil(total / rows_per_segment)`` instead.

Segment origins
---------------
Strip ``i`` is placed at ``i * (width + inter_segment_gap)`` using its
global index, so later pages continue to the right of earlier ones.
``page_origins=True`` restarts X at 0 on every page instead.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from papertape.assembly.rows import TapeRowList
from papertape.configs.loader import GeometryConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


class CapStyle(str, Enum):
    """Shape of a segment's top or bottom edge."""

    FLAT = "flat"
    VEE = "vee"
    TAB = "tab"


@dataclass(frozen=True, slots=True)
class Segment:
    """One strip of tape.

    Attributes
    ----------
    index : int
        Global 0-based segment number.
    page : int
        0-based output file this segment is drawn on.
    position : int
        0-based slot within its page.
    row_start, row_count : int
        Rows ``[row_start, row_start + row_count)`` of the tape.
    origin_x : float
        Left edge in mm.
    width, length : float
        Strip size in mm; ``length`` spans the rows only, not the caps.
    """

    index: int
    page: int
    position: int
    row_start: int
    row_count: int
    origin_x: float
    width: float
    length: float
    is_first: bool
    is_last: bool
    top_cap: CapStyle
    bottom_cap: CapStyle

    @property
    def row_stop(self) -> int:
        return self.row_start + self.row_count


@dataclass(frozen=True, slots=True)
class JoinerMark:
    """Where a segment boundary falls on the tape.

    ``row_offset`` is the tape row the segment starts at.  ``code_offset``
    is the row the segment ends at, counted from the first code row
    (banner and leader excluded); a joiner tape cut with the same range
    lines up with this boundary.
    """

    segment: int
    row_offset: int
    code_offset: int


@dataclass(frozen=True)
class TapeLayout:
    segments: tuple[Segment, ...]
    joiner_marks: tuple[JoinerMark, ...]
    pages: tuple[tuple[Segment, ...], ...]
    tape_width: float

    @property
    def page_count(self) -> int:
        return len(self.pages)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def tape_width(
    level: int, joiner: bool = False, geometry: GeometryConfig | None = None,
) -> float:
    """Physical tape width in mm for a given level.

    One inch for 6-8 level tape, 11/16 inch for 5-level, and two hole
    spacings of margin around the holes below that.  Joiner tape is twice
    as wide so it overlaps both neighbouring strips.
    """
    g = geometry or GeometryConfig()
    if level >= 6:
        width = g.wide_tape_width_mm
    elif level == 5:
        width = g.five_level_tape_width_mm
    else:
        width = level * g.hole_spacing_mm + 2 * g.hole_spacing_mm
    return 2 * width if joiner else width


def segment_count(
    total_rows: int, rows_per_segment: int | None, exact: bool = False,
) -> int:
    """Number of segments for *total_rows*.

    ``rows_per_segment=None`` means unlimited: a single segment.
    """
    if rows_per_segment is None:
        return 1
    if rows_per_segment < 1:
        raise ValueError(
            f"rows_per_segment must be >= 1, got {rows_per_segment}"
        )
    if exact:
        return max(1, math.ceil(total_rows / rows_per_segment))
    return total_rows // rows_per_segment + 1


def paginate(
    segments: list[Segment] | tuple[Segment, ...], segments_per_file: int | None,
) -> tuple[tuple[Segment, ...], ...]:
    """Group segments into pages of *segments_per_file* (last page may be short).

    ``0`` or ``None`` puts everything on one page.
    """
    if not segments_per_file:
        return (tuple(segments),)
    return tuple(
        tuple(segments[i:i + segments_per_file])
        for i in range(0, len(segments), segments_per_file)
    )


def _caps(
    index: int, count: int, draw_vee: bool, joiner: bool,
) -> tuple[CapStyle, CapStyle]:
    end_cap = CapStyle.TAB if joiner else CapStyle.VEE if draw_vee else CapStyle.FLAT
    top = end_cap if index == 0 else CapStyle.FLAT
    bottom = end_cap if index == count - 1 else CapStyle.FLAT
    return top, bottom


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def layout(
    rows: TapeRowList,
    *,
    rows_per_segment: int | None = None,
    width: float | None = None,
    inter_segment_gap: float = 0.0,
    draw_vee: bool = False,
    joiner: bool = False,
    segments_per_file: int | None = 0,
    exact_segment_count: bool = False,
    page_origins: bool = False,
    geometry: GeometryConfig | None = None,
) -> TapeLayout:
    """Partition *rows* into positioned segments and pages.

    Parameters
    ----------
    rows : TapeRowList
        Assembled tape.
    rows_per_segment : int | None
        Rows per strip; ``None`` for a single strip.
    width : float | None
        Tape width in mm; derived from ``rows.level`` and *joiner* when
        omitted.
    inter_segment_gap : float
        Clearance between strips in mm; 0 makes neighbours share an edge.
    draw_vee : bool
        Vee ends on the first and last strip.
    joiner : bool
        Joiner-tab ends on the first and last strip (overrides vee).
    segments_per_file : int | None
        Strips per output file; 0 or ``None`` for one file.
    exact_segment_count : bool
        Use ``ceil`` instead of the historical segment count.
    page_origins : bool
        Place strips by their slot within the page rather than their
        global index.
    geometry : GeometryConfig | None
        Physical constants; defaults when omitted.

    Returns
    -------
    TapeLayout
    """
    g = geometry or GeometryConfig()
    if width is None:
        width = tape_width(rows.level, joiner, g)
    if inter_segment_gap < 0:
        raise ValueError(f"inter_segment_gap must be >= 0, got {inter_segment_gap}")
    if segments_per_file is not None and segments_per_file < 0:
        raise ValueError(f"segments_per_file must be >= 0, got {segments_per_file}")

    total = len(rows)
    count = segment_count(total, rows_per_segment, exact_segment_count)
    per_segment = total if rows_per_segment is None else rows_per_segment
    pitch = width + inter_segment_gap

    segments: list[Segment] = []
    marks: list[JoinerMark] = []
    row_start = 0
    for index in range(count):
        row_count = max(0, min(per_segment, total - row_start))
        if segments_per_file:
            page, position = divmod(index, segments_per_file)
        else:
            page, position = 0, index
        top, bottom = _caps(index, count, draw_vee, joiner)
        segment = Segment(
            index=index,
            page=page,
            position=position,
            row_start=row_start,
            row_count=row_count,
            origin_x=(position if page_origins else index) * pitch,
            width=width,
            length=row_count * g.hole_spacing_mm,
            is_first=index == 0,
            is_last=index == count - 1,
            top_cap=top,
            bottom_cap=bottom,
        )
        segments.append(segment)
        marks.append(JoinerMark(
            segment=index,
            row_offset=row_start,
            code_offset=segment.row_stop - rows.banner_count - rows.leader_count,
        ))
        row_start += row_count

    pages = paginate(segments, segments_per_file)
    logger.debug(
        "Layout: %d rows -> %d segments on %d page(s), width %.2f mm",
        total, count, len(pages), width,
    )
    return TapeLayout(tuple(segments), tuple(marks), pages, width)
