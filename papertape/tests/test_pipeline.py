"""End-to-end tests for the generation pipeline."""

from __future__ import annotations

from pathlib import Path

import ezdxf
import pytest

from papertape.configs.job import build_job
from papertape.dxf.entities import Circle, Line
from papertape.pipeline import (
    TapeInputError,
    default_output_path,
    generate,
    page_path,
    read_input,
)
from papertape.utils.logging_config import current_context


def _count(entities, kind) -> int:
    return sum(1 for e in entities if isinstance(e, kind))


class TestReadInput:
    def test_message_wins(self, tmp_path: Path) -> None:
        src = tmp_path / "data.bin"
        src.write_bytes(b"FILE")
        tape_input = read_input(build_job(message="MSG", input_path=src))
        assert tape_input.data == b"MSG"
        assert tape_input.source == "message"

    def test_file_bytes(self, tmp_path: Path) -> None:
        src = tmp_path / "data.bin"
        src.write_bytes(b"\x00\xff")
        tape_input = read_input(build_job(input_path=src))
        assert tape_input.data == b"\x00\xff"
        assert tape_input.source == "file"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TapeInputError):
            read_input(build_job(input_path=tmp_path / "missing.bin"))

    def test_banner_file_stripped(self, tmp_path: Path) -> None:
        banner = tmp_path / "banner.txt"
        banner.write_text("  HELLO \n")
        tape_input = read_input(build_job(banner_file=banner))
        assert tape_input.banner == "HELLO"
        assert tape_input.data is None
        assert tape_input.source == "banner"

    def test_missing_banner_file(self, tmp_path: Path) -> None:
        with pytest.raises(TapeInputError):
            read_input(build_job(message="HI", banner_file=tmp_path / "nope.txt"))


class TestOutputNaming:
    def test_explicit_output(self, tmp_path: Path) -> None:
        job = build_job(message="HI", output=tmp_path / "my tape.dxf")
        assert default_output_path(job, read_input(job)) == tmp_path / "mytape.dxf"

    def test_input_file_stem(self, tmp_path: Path) -> None:
        src = tmp_path / "prog.bin"
        src.write_bytes(b"x")
        job = build_job(input_path=src)
        assert default_output_path(job, read_input(job)) == tmp_path / "prog.dxf"

    def test_message(self) -> None:
        job = build_job(message="HI")
        assert default_output_path(job, read_input(job)) == Path("MESSAGE.dxf")

    def test_banner_only(self) -> None:
        job = build_job(banner="HELLO WORLD", mirror=True)
        assert default_output_path(job, read_input(job)) == Path(
            "BANNER_MIRROR_HELLOWO.dxf"
        )

    def test_blank_tape(self) -> None:
        job = build_job(leader=5)
        assert default_output_path(job, read_input(job)) == Path("TAPE.dxf")

    def test_page_path(self) -> None:
        assert page_path(Path("out/t.dxf"), 0, False) == Path("out/t.dxf")
        assert page_path(Path("out/t.dxf"), 0, True) == Path("out/t_0001.dxf")
        assert page_path(Path("out/t.dxf"), 11, True) == Path("out/t_0012.dxf")


class TestGenerate:
    def test_single_row_dry_run(self) -> None:
        result = generate(build_job(message="A", dry_run=True))
        assert len(result.rows) == 1
        assert len(result.layout.segments) == 1
        assert len(result.pages) == 1
        page = result.pages[0]
        assert _count(page, Line) == 4
        assert _count(page, Circle) == 3
        assert result.files == []
        assert result.status == "dry-run"
        assert result.ok

    def test_wheatstone(self) -> None:
        result = generate(build_job(message="E", wheatstone=True, dry_run=True))
        assert result.level == 2
        assert result.sprocket == 1
        assert [r.symbol.value for r in result.rows] == [3, 0]
        # dot row: two data holes + sprocket; advance row: sprocket only
        assert _count(result.pages[0], Circle) == 4

    def test_baudot_with_banner(self) -> None:
        result = generate(
            build_job(message="HI", baudot=True, banner="A", leader=2, dry_run=True)
        )
        rows = result.rows
        assert rows.level == 5
        assert rows.banner_count == 7
        assert rows.leader_count == 2
        assert rows.code_count == 2

    def test_writes_file(self, tmp_path: Path) -> None:
        out = tmp_path / "hi.dxf"
        result = generate(build_job(message="HI", output=out))
        assert result.status == "ok"
        assert result.files == [out]
        doc = ezdxf.readfile(out)
        assert len(doc.modelspace().query("CIRCLE")) == len(
            [e for e in result.pages[0] if isinstance(e, Circle)]
        )

    def test_pagination_writes_every_page(self, tmp_path: Path) -> None:
        out = tmp_path / "tape.dxf"
        result = generate(build_job(
            data=b"x" * 50, rows_per_segment=10, segments_per_file=2, output=out,
        ))
        # 50 // 10 + 1 segments, two per page
        assert len(result.layout.segments) == 6
        assert result.files == [
            tmp_path / "tape_0001.dxf",
            tmp_path / "tape_0002.dxf",
            tmp_path / "tape_0003.dxf",
        ]
        assert all(p.exists() for p in result.files)
        assert not out.exists()

    def test_page_origins_flag(self) -> None:
        def min_x(result) -> float:
            return min(e.start[0] for e in result.pages[1] if isinstance(e, Line))

        kwargs = dict(data=b"x" * 30, rows_per_segment=10, segments_per_file=2)
        continued = generate(build_job(dry_run=True, **kwargs))
        restarted = generate(build_job(dry_run=True, page_origins=True, **kwargs))
        assert min_x(continued) == pytest.approx(2 * continued.layout.tape_width)
        assert min_x(restarted) == pytest.approx(0.0)

    def test_missing_input(self, tmp_path: Path) -> None:
        with pytest.raises(TapeInputError):
            generate(build_job(input_path=tmp_path / "missing.bin"))

    def test_save_failure_reported(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        result = generate(build_job(message="HI", output=blocker / "hi.dxf"))
        assert result.status == "save-failed"
        assert not result.ok
        assert result.failed == [blocker / "hi.dxf"]
        assert result.files == []

    def test_job_context_cleared(self) -> None:
        generate(build_job(message="HI", dry_run=True))
        assert "job" not in current_context()

    def test_range_with_negative_start(self) -> None:
        result = generate(build_job(message="AB", start=-3, length=5, dry_run=True))
        assert result.rows.leader_count == 3
        assert result.rows.code_count == 2
