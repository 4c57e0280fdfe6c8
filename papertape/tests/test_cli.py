"""Tests for the papertape command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pytest

from papertape.configs.loader import TapeConfig
from papertape.scripts.generate import build_parser, job_from_args, main, parse_range
from papertape.utils.logging_config import pop_context


@pytest.fixture(autouse=True)
def restore_logging():
    """main() configures the root logger and excepthook; undo it per test."""
    root = logging.getLogger()
    handlers, level, hook = root.handlers[:], root.level, sys.excepthook
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    sys.excepthook = hook
    logging.captureWarnings(False)
    pop_context(keys=["app"])


class TestParseRange:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("10", (10, None)),
            ("10,5", (10, 5)),
            ("10,-4", (6, 4)),
            ("10,+-3", (7, 6)),
            ("200,-+10", (190, 20)),
            ("-3,5", (-3, 5)),
            (" 4 , 2 ", (4, 2)),
        ],
    )
    def test_forms(self, text: str, expected: tuple) -> None:
        assert parse_range(text) == expected

    @pytest.mark.parametrize("text", ["", "x", "1,y", "1,+-", "1,-+"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_range(text)

    def test_parser_accepts_negative_range(self) -> None:
        args = build_parser().parse_args(["-m", "AB", "--range=-3,5"])
        assert args.range == (-3, 5)


class TestJobFromArgs:
    def _job(self, *argv: str):
        return job_from_args(build_parser().parse_args(["-m", "A", *argv]), TapeConfig())

    def test_five_level_defaults_sprocket(self) -> None:
        job = self._job("--level", "5")
        assert job.level == 5
        assert job.sprocket == 2

    def test_explicit_sprocket_wins(self) -> None:
        assert self._job("--level", "5", "--sprocket", "4").sprocket == 4

    def test_other_levels_use_config_sprocket(self) -> None:
        assert self._job("--level", "8").sprocket == TapeConfig().defaults.sprocket

    def test_page_origins_flag(self) -> None:
        assert self._job().page_origins is False
        assert self._job("--page-origins").page_origins is True


class TestMain:
    def test_writes_dxf(self, tmp_path: Path, capsys) -> None:
        out = tmp_path / "a.dxf"
        assert main(["-m", "A", "-o", str(out), "-q"]) == 0
        assert out.exists()
        assert f"Wrote {out}" in capsys.readouterr().out

    def test_dry_run_prints_rows(self, capsys) -> None:
        assert main(["-m", "a", "--dry-run", "--ascii"]) == 0
        out = capsys.readouterr().out
        assert "| OO  .  O|    a" in out
        assert "Wrote" not in out

    def test_input_file(self, tmp_path: Path) -> None:
        src = tmp_path / "prog.bin"
        src.write_bytes(b"\x01\x02\x03")
        assert main([str(src), "-q", "--leader", "4", "--vee"]) == 0
        assert (tmp_path / "prog.dxf").exists()

    def test_bad_sprocket(self, capsys) -> None:
        assert main(["-m", "A", "--level", "3", "--sprocket", "5", "--dry-run"]) == 1
        assert "Sprocket" in capsys.readouterr().err

    def test_nothing_to_generate(self) -> None:
        assert main(["--dry-run"]) == 1

    def test_missing_input(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "missing.bin"), "--dry-run"]) == 1

    def test_missing_config(self, tmp_path: Path, capsys) -> None:
        assert main(["-m", "A", "-c", str(tmp_path / "nope.yaml")]) == 1
        assert "Error loading config" in capsys.readouterr().err

    def test_malformed_config(self, tmp_path: Path, capsys) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("geometry: [1, 2\n")
        assert main(["-m", "A", "--dry-run", "--config", str(bad)]) == 1
        assert "Malformed configuration file" in capsys.readouterr().err

    def test_malformed_job(self, tmp_path: Path, capsys) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("message: [HELLO\n")
        assert main(["--job", str(bad), "--dry-run"]) == 1
        assert "Malformed job file" in capsys.readouterr().err

    def test_negative_range(self) -> None:
        assert main(["-m", "AB", "--range=-1,3", "--dry-run", "-q"]) == 0

    def test_job_file(self, tmp_path: Path) -> None:
        job = tmp_path / "job.yaml"
        job.write_text(
            "message: HELLO\n"
            "baudot: true\n"
            "leader: 10\n"
            "output: hello.dxf\n"
        )
        assert main(["--job", str(job), "-q"]) == 0
        assert (tmp_path / "hello.dxf").exists()

    def test_save_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        assert main(["-m", "A", "-o", str(blocker / "a.dxf"), "-q"]) == 1
