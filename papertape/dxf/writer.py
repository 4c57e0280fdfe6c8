"""DXF output -- drawing sink flushed through ezdxf.

Emitters append :mod:`papertape.dxf.entities` to a :class:`DrawingSink`;
nothing touches ezdxf until :meth:`DrawingSink.render` or
:meth:`DrawingSink.save`.  Documents are AutoCAD R12 (AC1009), the
subset desktop cutter software and common 2D CAD tools open, with every
entity on the tape layer in modelspace.
"""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path

import ezdxf
from ezdxf.document import Drawing

from papertape.dxf.entities import Arc, Circle, Entity, Line, Point, bounds
from papertape.utils.fs import atomic_write

logger = logging.getLogger(__name__)

DXF_VERSION = "R12"


class DxfError(Exception):
    """Raised when an entity cannot be written."""

    pass


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class DxfWriter:
    """Build ezdxf documents from a list of entities.

    Parameters
    ----------
    layer : str
        Layer name every entity is placed on.
    precision : int
        Decimal places coordinates, radii and angles are rounded to.
    """

    def __init__(self, layer: str = "TAPE", precision: int = 6) -> None:
        self._layer = layer
        self._precision = precision

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, entities: list[Entity]) -> Drawing:
        """Return a new R12 document holding *entities*."""
        doc = ezdxf.new(DXF_VERSION)
        if self._layer not in doc.layers:
            doc.layers.add(self._layer)

        lo, hi = bounds(entities)
        doc.header["$EXTMIN"] = (*self._point(lo), 0.0)
        doc.header["$EXTMAX"] = (*self._point(hi), 0.0)

        msp = doc.modelspace()
        for entity in entities:
            self._add_entity(msp, entity)
        return doc

    def render(self, entities: list[Entity]) -> str:
        """Return the DXF text for *entities*."""
        stream = StringIO()
        self.build(entities).write(stream)
        return stream.getvalue()

    def save(self, entities: list[Entity], path: Path) -> None:
        """Write *entities* to *path* atomically.

        Raises
        ------
        RuntimeError
            If the file cannot be written; nothing is left at *path*.
        """
        doc = self.build(entities)
        atomic_write(path, doc.saveas)

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def _num(self, value: float) -> float:
        return round(value, self._precision)

    def _point(self, pt: Point) -> tuple[float, float]:
        return self._num(pt[0]), self._num(pt[1])

    def _add_entity(self, msp, entity: Entity) -> None:
        attribs = {"layer": self._layer}
        if isinstance(entity, Line):
            msp.add_line(
                self._point(entity.start), self._point(entity.end),
                dxfattribs=attribs,
            )
        elif isinstance(entity, Circle):
            msp.add_circle(
                self._point(entity.center), self._num(entity.radius),
                dxfattribs=attribs,
            )
        elif isinstance(entity, Arc):
            msp.add_arc(
                self._point(entity.center),
                self._num(entity.radius),
                self._num(entity.start_angle),
                self._num(entity.end_angle),
                dxfattribs=attribs,
            )
        else:
            raise DxfError(f"Unsupported entity type: {type(entity).__name__}")


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------


class DrawingSink:
    """In-memory drawing that emitters append primitives to.

    One sink holds one output file's worth of geometry.  Call
    :meth:`reset` to start the next page.
    """

    def __init__(self, layer: str = "TAPE", precision: int = 6) -> None:
        self._entities: list[Entity] = []
        self._writer = DxfWriter(layer, precision)

    def __len__(self) -> int:
        return len(self._entities)

    @property
    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities)

    def add(self, entity: Entity) -> None:
        self._entities.append(entity)

    def line(self, start: Point, end: Point) -> None:
        self.add(Line(start, end))

    def circle(self, center: Point, radius: float) -> None:
        self.add(Circle(center, radius))

    def arc(
        self, center: Point, radius: float, start_angle: float, end_angle: float,
    ) -> None:
        self.add(Arc(center, radius, start_angle, end_angle))

    def reset(self) -> None:
        self._entities.clear()

    def render(self) -> str:
        return self._writer.render(self._entities)

    def save(self, path: str | Path) -> bool:
        """Write the drawing to *path*.

        Returns
        -------
        bool
            ``True`` on success.  On failure the error is logged, ``False``
            is returned and no partial file is left at *path*.
        """
        path = Path(path)
        try:
            self._writer.save(self._entities, path)
        except (OSError, RuntimeError) as exc:
            logger.error("Could not save %s: %s", path, exc)
            return False
        logger.info("Wrote %s (%d entities)", path, len(self._entities))
        return True
