"""Tests for the DXF writer and drawing sink."""

from __future__ import annotations

import ezdxf
import pytest

from papertape.dxf.entities import Arc, Circle, Entity, Line, bounds
from papertape.dxf.writer import DrawingSink, DxfError, DxfWriter


class _Spline(Entity):
    pass


def _mixed() -> list[Entity]:
    return [
        Line((0.0, 0.0), (0.0, 2.54)),
        Circle((2.54, 1.27), 0.915),
        Arc((5.08, 1.27), 0.915, 130.0, 50.0),
    ]


class TestEntities:
    def test_bounds(self) -> None:
        lo, hi = bounds([Line((0.0, 0.0), (10.0, 5.0)), Circle((12.0, 2.0), 1.0)])
        assert lo == (0.0, 0.0)
        assert hi == (13.0, 5.0)

    def test_empty_bounds(self) -> None:
        assert bounds([]) == ((0.0, 0.0), (0.0, 0.0))

    def test_arc_sweep(self) -> None:
        assert Arc((0.0, 0.0), 1.0, 130.0, 50.0).sweep == pytest.approx(280.0)
        assert Arc((0.0, 0.0), 1.0, 0.0, 360.0).sweep == pytest.approx(360.0)

    def test_radius_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            Circle((0.0, 0.0), 0.0)


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class TestWriter:
    def test_document_is_r12(self) -> None:
        doc = DxfWriter().build(_mixed())
        assert doc.dxfversion == "AC1009"

    def test_entities_in_order_on_layer(self) -> None:
        msp = DxfWriter().build(_mixed()).modelspace()
        assert [e.dxftype() for e in msp] == ["LINE", "CIRCLE", "ARC"]
        assert all(e.dxf.layer == "TAPE" for e in msp)

    def test_coordinates_rounded(self) -> None:
        doc = DxfWriter(precision=2).build([Circle((1.234567, 2.0), 0.5)])
        circle = doc.modelspace().query("CIRCLE")[0]
        assert circle.dxf.center.x == pytest.approx(1.23, abs=1e-12)
        assert circle.dxf.center.y == pytest.approx(2.0)
        assert circle.dxf.radius == pytest.approx(0.5)

    def test_arc_angles(self) -> None:
        doc = DxfWriter().build([Arc((0.0, 0.0), 1.0, 130.0, 50.0)])
        arc = doc.modelspace().query("ARC")[0]
        assert arc.dxf.start_angle == pytest.approx(130.0)
        assert arc.dxf.end_angle == pytest.approx(50.0)

    def test_extents_in_header(self) -> None:
        doc = DxfWriter().build([Line((0.0, 0.0), (10.0, 5.0)), Circle((12.0, 2.0), 1.0)])
        assert tuple(doc.header["$EXTMIN"])[:2] == pytest.approx((0.0, 0.0))
        assert tuple(doc.header["$EXTMAX"])[:2] == pytest.approx((13.0, 5.0))

    def test_custom_layer(self) -> None:
        doc = DxfWriter(layer="CUT").build([Line((0.0, 0.0), (1.0, 0.0))])
        assert "CUT" in doc.layers
        assert doc.modelspace().query("LINE")[0].dxf.layer == "CUT"

    def test_render_is_dxf_text(self) -> None:
        text = DxfWriter().render(_mixed())
        assert "SECTION" in text
        assert "CIRCLE" in text
        assert text.rstrip().endswith("EOF")

    def test_unknown_entity_rejected(self) -> None:
        with pytest.raises(DxfError):
            DxfWriter().build([_Spline()])


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------


class TestDrawingSink:
    def test_accumulates_and_resets(self) -> None:
        sink = DrawingSink()
        sink.line((0.0, 0.0), (1.0, 0.0))
        sink.circle((0.5, 0.5), 0.25)
        sink.arc((0.5, 0.5), 0.25, 130.0, 50.0)
        assert len(sink) == 3
        assert isinstance(sink.entities, tuple)
        sink.reset()
        assert len(sink) == 0

    def test_save_writes_readable_file(self, tmp_path) -> None:
        sink = DrawingSink()
        for entity in _mixed():
            sink.add(entity)
        path = tmp_path / "out.dxf"
        assert sink.save(path) is True
        assert not path.with_suffix(".dxf.tmp").exists()

        doc = ezdxf.readfile(path)
        assert doc.dxfversion == "AC1009"
        msp = doc.modelspace()
        assert len(msp.query("LINE")) == 1
        assert len(msp.query("CIRCLE")) == 1
        assert len(msp.query("ARC")) == 1

    def test_save_replaces_existing_file(self, tmp_path) -> None:
        path = tmp_path / "out.dxf"
        path.write_text("stale")
        sink = DrawingSink()
        sink.circle((0.0, 0.0), 1.0)
        assert sink.save(path) is True
        assert len(ezdxf.readfile(path).modelspace().query("CIRCLE")) == 1

    def test_save_failure_returns_false(self, tmp_path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        path = blocker / "out.dxf"
        sink = DrawingSink()
        sink.line((0.0, 0.0), (1.0, 1.0))
        assert sink.save(path) is False
        assert not path.exists()
