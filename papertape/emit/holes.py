"""Hole emission -- rows of a segment to circles (or chadless arcs).

Hole positions across the tape, left to right, start one hole spacing
in from the left edge and advance one spacing per position.  Normally
the most significant bit is leftmost; mirrored tape (for joiners stuck
to the back of the tape) reverses the order.

The sprocket (feed) hole follows bit ``sprocket`` in traversal order.
When ``sprocket`` is beyond the top data bit it sits at the edge: first
on normal tape, last on mirrored tape.

Row ``k`` of a segment is centred half a spacing below the row above it,
the first row half a spacing below the top of the strip.

No validation happens here; the job record has already checked level
and sprocket position.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from papertape.assembly.rows import Row
from papertape.codes.symbols import TapeSymbol
from papertape.configs.loader import ChadlessConfig, GeometryConfig
from papertape.dxf.entities import Point
from papertape.dxf.writer import DrawingSink
from papertape.layout.segments import Segment

logger = logging.getLogger(__name__)


class HoleKind(str, Enum):
    DATA = "data"
    SPROCKET = "sprocket"


@dataclass(frozen=True, slots=True)
class HoleSite:
    """One evaluated hole position of a row.

    ``x`` is measured from the segment's left edge.  ``bit`` is ``None``
    for the sprocket hole.
    """

    x: float
    kind: HoleKind
    bit: int | None
    punched: bool


class HoleEmitter:
    """Draw the holes of tape rows into a :class:`DrawingSink`.

    Parameters
    ----------
    sink : DrawingSink
        Drawing the holes are appended to.
    level : int
        Data holes per row.
    sprocket : int
        Data bit the sprocket hole follows; ``>= level`` puts it at the edge.
    mirror : bool
        Least significant bit leftmost.
    chadless : bool
        Draw open arcs instead of circles so the chad stays attached.
    geometry, chadless_angles
        Physical constants; defaults when omitted.
    """

    def __init__(
        self,
        sink: DrawingSink,
        level: int,
        sprocket: int,
        *,
        mirror: bool = False,
        chadless: bool = False,
        geometry: GeometryConfig | None = None,
        chadless_angles: ChadlessConfig | None = None,
    ) -> None:
        self._sink = sink
        self._level = level
        self._sprocket = sprocket
        self._mirror = mirror
        self._chadless = chadless
        self._g = geometry or GeometryConfig()
        self._angles = chadless_angles or ChadlessConfig()

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def _bit_order(self) -> range:
        if self._mirror:
            return range(0, self._level)
        return range(self._level - 1, -1, -1)

    def hole_sites(self, symbol: TapeSymbol) -> list[HoleSite]:
        """Every hole position of one row, left to right."""
        h = self._g.hole_spacing_mm
        x = h
        sites: list[HoleSite] = []
        edge_sprocket = self._sprocket > self._level - 1

        if edge_sprocket and not self._mirror:
            sites.append(HoleSite(x, HoleKind.SPROCKET, None, True))
            x += h
        for i in self._bit_order():
            sites.append(HoleSite(x, HoleKind.DATA, i, symbol.bit(i)))
            x += h
            if i == self._sprocket:
                sites.append(HoleSite(x, HoleKind.SPROCKET, None, True))
                x += h
        if edge_sprocket and self._mirror:
            sites.append(HoleSite(x, HoleKind.SPROCKET, None, True))
        return sites

    def row_y(self, segment: Segment, k: int) -> float:
        """Centre line of row *k* (0-based within the segment)."""
        h = self._g.hole_spacing_mm
        return segment.length - h / 2 - k * h

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _hole(self, center: Point, radius: float) -> None:
        if self._chadless:
            self._sink.arc(
                center, radius,
                self._angles.start_angle_deg, self._angles.end_angle_deg,
            )
        else:
            self._sink.circle(center, radius)

    def emit_row(self, segment: Segment, k: int, symbol: TapeSymbol) -> int:
        """Draw the punched holes of one row; returns how many were drawn."""
        y = self.row_y(segment, k)
        drawn = 0
        for site in self.hole_sites(symbol):
            if not site.punched:
                continue
            radius = (
                self._g.sprocket_hole_radius_mm
                if site.kind is HoleKind.SPROCKET
                else self._g.data_hole_radius_mm
            )
            self._hole((segment.origin_x + site.x, y), radius)
            drawn += 1
        return drawn

    def emit_segment(self, segment: Segment, rows: Sequence[Row]) -> int:
        """Draw every row of *segment*; *rows* is the whole tape."""
        drawn = 0
        for k, row in enumerate(rows[segment.row_start:segment.row_stop]):
            drawn += self.emit_row(segment, k, row.symbol)
        logger.debug(
            "Segment %d: %d rows, %d holes", segment.index, segment.row_count, drawn,
        )
        return drawn
