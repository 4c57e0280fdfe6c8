"""Segment outlines: the two long edges plus top and bottom caps.

Cap shapes, for a strip of width ``w`` at ``x0`` with rows spanning
``0..L`` in Y::

    FLAT   a straight cut across the strip
    VEE    top: a point ``vee_depth_rows`` spacings above the strip;
           bottom: a notch of the same depth cut into the strip
    TAB    joiner alignment profile: flat to the indent point, a slanted
           cut one spacing deep to the centre line, a centre slit, then
           the mirror image back out to the far edge
"""

from __future__ import annotations

from papertape.configs.loader import GeometryConfig
from papertape.dxf.entities import Line
from papertape.layout.segments import CapStyle, Segment


def _top_cap(seg: Segment, g: GeometryConfig) -> list[Line]:
    x0, w, y = seg.origin_x, seg.width, seg.length
    h = g.hole_spacing_mm
    if seg.top_cap is CapStyle.VEE:
        apex = (x0 + w / 2, y + g.vee_depth_rows * h)
        return [Line((x0, y), apex), Line(apex, (x0 + w, y))]
    if seg.top_cap is CapStyle.TAB:
        half = w / 2
        indent = half * g.joiner_tab_fraction
        notch = (x0 + half, y - h)
        return [
            Line((x0, y), (x0 + indent, y)),
            Line((x0 + indent, y), notch),
            Line(notch, (x0 + half, y)),
            Line(notch, (x0 + w - indent, y)),
            Line((x0 + w - indent, y), (x0 + w, y)),
        ]
    return [Line((x0, y), (x0 + w, y))]


def _bottom_cap(seg: Segment, g: GeometryConfig) -> list[Line]:
    x0, w = seg.origin_x, seg.width
    h = g.hole_spacing_mm
    if seg.bottom_cap is CapStyle.VEE:
        apex = (x0 + w / 2, g.vee_depth_rows * h)
        return [Line((x0, 0.0), apex), Line(apex, (x0 + w, 0.0))]
    if seg.bottom_cap is CapStyle.TAB:
        half = w / 2
        indent = half * g.joiner_tab_fraction
        notch = (x0 + half, h)
        return [
            Line((x0, 0.0), (x0 + indent, 0.0)),
            Line((x0 + indent, 0.0), notch),
            Line(notch, (x0 + half, 0.0)),
            Line(notch, (x0 + w - indent, 0.0)),
            Line((x0 + w - indent, 0.0), (x0 + w, 0.0)),
        ]
    return [Line((x0, 0.0), (x0 + w, 0.0))]


def segment_outline(
    seg: Segment, geometry: GeometryConfig | None = None,
) -> list[Line]:
    """Cut lines for one segment: left edge, right edge, top cap, bottom cap."""
    g = geometry or GeometryConfig()
    x0, w, y = seg.origin_x, seg.width, seg.length
    lines = [
        Line((x0, 0.0), (x0, y)),
        Line((x0 + w, 0.0), (x0 + w, y)),
    ]
    lines.extend(_top_cap(seg, g))
    lines.extend(_bottom_cap(seg, g))
    return lines
