"""Drawing primitives and the ezdxf writer they are flushed through."""

from papertape.dxf.entities import Arc, Circle, Entity, Line
from papertape.dxf.writer import DrawingSink, DxfError, DxfWriter

__all__ = ["Arc", "Circle", "DrawingSink", "DxfError", "DxfWriter", "Entity", "Line"]
