"""Drawing primitives -- the only geometry a tape drawing contains.

Coordinates are in mm with the origin at the bottom-left of the first
segment; Z is always 0.  Angles are in degrees, measured
counter-clockwise from +X, and arcs run counter-clockwise from
``start_angle`` to ``end_angle``.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass

Point = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Entity(ABC):
    """Base class for all drawing primitives."""

    pass


@dataclass(frozen=True, slots=True)
class Line(Entity):
    start: Point
    end: Point


@dataclass(frozen=True, slots=True)
class Circle(Entity):
    center: Point
    radius: float

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"Circle radius must be positive, got {self.radius}")


@dataclass(frozen=True, slots=True)
class Arc(Entity):
    """Circular arc; a chadless hole is an Arc that stops short of closing."""

    center: Point
    radius: float
    start_angle: float
    end_angle: float

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"Arc radius must be positive, got {self.radius}")

    @property
    def sweep(self) -> float:
        """Counter-clockwise sweep in degrees, in ``(0, 360]``."""
        sweep = (self.end_angle - self.start_angle) % 360.0
        return sweep or 360.0


def bounds(entities: list[Entity]) -> tuple[Point, Point]:
    """Axis-aligned extents ``((min_x, min_y), (max_x, max_y))``.

    Circles and arcs contribute their full bounding circle.  An empty
    drawing has zero extents at the origin.
    """
    xs: list[float] = []
    ys: list[float] = []
    for e in entities:
        if isinstance(e, Line):
            xs.extend((e.start[0], e.end[0]))
            ys.extend((e.start[1], e.end[1]))
        elif isinstance(e, (Circle, Arc)):
            cx, cy = e.center
            xs.extend((cx - e.radius, cx + e.radius))
            ys.extend((cy - e.radius, cy + e.radius))
    if not xs:
        return (0.0, 0.0), (0.0, 0.0)
    return (min(xs), min(ys)), (max(xs), max(ys))
