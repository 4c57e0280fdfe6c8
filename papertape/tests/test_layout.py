"""Tests for segment layout, pagination and outline geometry."""

from __future__ import annotations

import pytest

from papertape.assembly.rows import TapeRowList, assemble
from papertape.codes.symbols import TapeSymbol
from papertape.configs.loader import GeometryConfig
from papertape.layout.caps import segment_outline
from papertape.layout.segments import (
    CapStyle,
    layout,
    paginate,
    segment_count,
    tape_width,
)

H = 2.54


def _rows(code: int, level: int = 8, leader: int = 0) -> TapeRowList:
    return assemble([TapeSymbol(1, level)] * code, level=level, leader=leader)


# ---------------------------------------------------------------------------
# Counts and widths
# ---------------------------------------------------------------------------


class TestSegmentCount:
    def test_legacy_count_adds_trailing_segment(self) -> None:
        assert segment_count(100, 100) == 2
        assert segment_count(250, 100) == 3

    def test_exact_count(self) -> None:
        assert segment_count(100, 100, exact=True) == 1
        assert segment_count(250, 100, exact=True) == 3

    def test_empty_tape_has_one_segment(self) -> None:
        assert segment_count(0, 100) == 1
        assert segment_count(0, 100, exact=True) == 1

    def test_unlimited(self) -> None:
        assert segment_count(5000, None) == 1

    def test_zero_rows_per_segment_rejected(self) -> None:
        with pytest.raises(ValueError):
            segment_count(10, 0)


class TestTapeWidth:
    def test_standard_widths(self) -> None:
        assert tape_width(8) == pytest.approx(25.4)
        assert tape_width(6) == pytest.approx(25.4)
        assert tape_width(5) == pytest.approx(17.46)

    def test_narrow_tape_derived_from_spacing(self) -> None:
        assert tape_width(2) == pytest.approx(4 * H)
        assert tape_width(3) == pytest.approx(5 * H)

    def test_joiner_doubles_width(self) -> None:
        assert tape_width(8, joiner=True) == pytest.approx(50.8)

    def test_custom_geometry(self) -> None:
        g = GeometryConfig(wide_tape_width_mm=30.0)
        assert tape_width(7, geometry=g) == pytest.approx(30.0)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


class TestLayout:
    def test_rows_split_across_segments(self) -> None:
        result = layout(_rows(250), rows_per_segment=100)
        assert [s.row_count for s in result.segments] == [100, 100, 50]
        assert [s.row_start for s in result.segments] == [0, 100, 200]
        assert result.segments[2].length == pytest.approx(50 * H)

    def test_exact_division_leaves_empty_segment(self) -> None:
        result = layout(_rows(200), rows_per_segment=100)
        assert [s.row_count for s in result.segments] == [100, 100, 0]
        result = layout(_rows(200), rows_per_segment=100, exact_segment_count=True)
        assert [s.row_count for s in result.segments] == [100, 100]

    def test_segments_cover_every_row_once(self) -> None:
        rows = _rows(137)
        result = layout(rows, rows_per_segment=25)
        assert sum(s.row_count for s in result.segments) == len(rows)
        for a, b in zip(result.segments, result.segments[1:]):
            assert a.row_stop == b.row_start

    def test_single_segment_when_unlimited(self) -> None:
        result = layout(_rows(40))
        assert len(result.segments) == 1
        assert result.segments[0].row_count == 40
        assert result.segments[0].is_first and result.segments[0].is_last

    def test_gap_spaces_origins(self) -> None:
        result = layout(_rows(30), rows_per_segment=10, inter_segment_gap=5.0)
        assert [s.origin_x for s in result.segments] == pytest.approx(
            [0.0, 30.4, 60.8, 91.2]
        )

    def test_zero_gap_shares_edges(self) -> None:
        result = layout(_rows(10), rows_per_segment=5, exact_segment_count=True)
        a, b = result.segments
        assert a.origin_x + a.width == pytest.approx(b.origin_x)

    def test_negative_gap_rejected(self) -> None:
        with pytest.raises(ValueError):
            layout(_rows(10), inter_segment_gap=-1.0)


class TestCaps:
    def test_single_segment_vee_both_ends(self) -> None:
        seg = layout(_rows(10), draw_vee=True).segments[0]
        assert (seg.top_cap, seg.bottom_cap) == (CapStyle.VEE, CapStyle.VEE)

    def test_interior_ends_flat(self) -> None:
        segs = layout(
            _rows(25), rows_per_segment=10, draw_vee=True, exact_segment_count=True,
        ).segments
        assert [(s.top_cap, s.bottom_cap) for s in segs] == [
            (CapStyle.VEE, CapStyle.FLAT),
            (CapStyle.FLAT, CapStyle.FLAT),
            (CapStyle.FLAT, CapStyle.VEE),
        ]

    def test_joiner_overrides_vee(self) -> None:
        seg = layout(_rows(10), draw_vee=True, joiner=True).segments[0]
        assert (seg.top_cap, seg.bottom_cap) == (CapStyle.TAB, CapStyle.TAB)
        assert seg.width == pytest.approx(50.8)

    def test_plain_ends_flat(self) -> None:
        seg = layout(_rows(10)).segments[0]
        assert (seg.top_cap, seg.bottom_cap) == (CapStyle.FLAT, CapStyle.FLAT)


class TestPagination:
    def test_pages_and_positions(self) -> None:
        result = layout(
            _rows(50), rows_per_segment=10, segments_per_file=2,
            exact_segment_count=True,
        )
        assert [len(p) for p in result.pages] == [2, 2, 1]
        assert result.page_count == 3
        assert [s.position for s in result.segments] == [0, 1, 0, 1, 0]
        assert [s.page for s in result.segments] == [0, 0, 1, 1, 2]

    def test_origins_follow_global_index(self) -> None:
        result = layout(
            _rows(30), rows_per_segment=10, inter_segment_gap=2.0,
            segments_per_file=2, exact_segment_count=True,
        )
        pitch = result.tape_width + 2.0
        assert [len(p) for p in result.pages] == [2, 1]
        assert [s.origin_x for s in result.segments] == pytest.approx(
            [0.0, pitch, 2 * pitch]
        )
        assert result.pages[1][0].origin_x == pytest.approx(2 * pitch)

    def test_page_origins_restart_each_page(self) -> None:
        result = layout(
            _rows(30), rows_per_segment=10, inter_segment_gap=2.0,
            segments_per_file=2, exact_segment_count=True, page_origins=True,
        )
        pitch = result.tape_width + 2.0
        assert [s.origin_x for s in result.segments] == pytest.approx(
            [0.0, pitch, 0.0]
        )
        assert result.pages[1][0].origin_x == pytest.approx(0.0)

    def test_zero_means_one_page(self) -> None:
        result = layout(_rows(50), rows_per_segment=10, segments_per_file=0)
        assert result.page_count == 1
        assert len(result.pages[0]) == len(result.segments)

    def test_paginate_keeps_partial_last_page(self) -> None:
        assert [len(p) for p in paginate(list(range(7)), 3)] == [3, 3, 1]


class TestJoinerMarks:
    def test_code_offset_excludes_leader(self) -> None:
        result = layout(_rows(190, leader=10), rows_per_segment=100)
        assert [m.row_offset for m in result.joiner_marks] == [0, 100, 200]
        assert [m.code_offset for m in result.joiner_marks] == [90, 190, 190]


# ---------------------------------------------------------------------------
# Outline
# ---------------------------------------------------------------------------


class TestOutline:
    def test_flat_segment_is_rectangle(self) -> None:
        seg = layout(_rows(4)).segments[0]
        lines = segment_outline(seg)
        assert len(lines) == 4
        assert lines[0].start == (0.0, 0.0)
        assert lines[0].end == pytest.approx((0.0, 4 * H))
        assert lines[1].start[0] == pytest.approx(25.4)

    def test_vee_segment(self) -> None:
        seg = layout(_rows(4), draw_vee=True).segments[0]
        lines = segment_outline(seg)
        assert len(lines) == 6
        top_apex = lines[2].end
        bottom_apex = lines[4].end
        assert top_apex == pytest.approx((12.7, 4 * H + 2 * H))
        assert bottom_apex == pytest.approx((12.7, 2 * H))

    def test_joiner_tab_segment(self) -> None:
        seg = layout(_rows(4), joiner=True).segments[0]
        lines = segment_outline(seg)
        assert len(lines) == 12
        # top notch at the centre line, one spacing below the top edge
        assert lines[3].end == pytest.approx((25.4, 4 * H - H))

    def test_outline_follows_origin(self) -> None:
        result = layout(_rows(20), rows_per_segment=10, exact_segment_count=True)
        lines = segment_outline(result.segments[1])
        assert lines[0].start[0] == pytest.approx(25.4)
