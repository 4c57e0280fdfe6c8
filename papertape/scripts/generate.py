#!/usr/bin/env python3
"""Generate punched paper tape stencils as DXF.

Usage examples:
    # Punch a file on 8-level tape, 100 rows per strip, 4 strips per DXF
    papertape program.bin --rows-per-segment 100 --segments-per-file 4

    # Baudot message with leader, trailer and a banner
    papertape -m "HELLO WORLD" --baudot --banner "HELLO" --leader 20 --trailer 20

    # Joiner tape for the boundary at data byte 200 (10 rows either side)
    papertape program.bin --range 200,+-10 --joiner --mirror

    # Check the layout without writing anything
    papertape program.bin --dry-run --line-numbers --ascii

Range syntax (--range):
    OFFSET,LENGTH     rows [OFFSET, OFFSET+LENGTH)
    OFFSET,-LENGTH    LENGTH rows ending at OFFSET
    OFFSET,+-LENGTH   LENGTH rows either side of OFFSET (-+ also accepted)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from papertape import __version__
from papertape.configs.job import JobError, TapeJob, build_job, load_job
from papertape.configs.loader import ConfigError, TapeConfig, load_config
from papertape.console import ConsoleOptions, render_lines
from papertape.pipeline import TapeInputError, generate
from papertape.utils.logging_config import install_excepthook, setup_logging

logger = logging.getLogger(__name__)

# Sprocket position used on 5-level tape when none is given
FIVE_LEVEL = 5
FIVE_LEVEL_SPROCKET = 2

RANGE_HELP = """\
Range syntax (--range):
    OFFSET,LENGTH     rows [OFFSET, OFFSET+LENGTH)
    OFFSET,-LENGTH    LENGTH rows ending at OFFSET
    OFFSET,+-LENGTH   LENGTH rows either side of OFFSET (-+ also accepted)
"""


def parse_range(text: str) -> tuple[int, int | None]:
    """Parse ``--range`` into ``(start, length)``.

    Raises
    ------
    argparse.ArgumentTypeError
        On malformed input.
    """
    offset_text, _, length_text = text.replace(" ", "").partition(",")
    try:
        offset = int(offset_text)
        if not length_text:
            return offset, None
        if length_text.startswith(("+-", "-+")):
            around = int(length_text[2:])
            return offset - around, 2 * around
        if length_text.startswith("-"):
            before = int(length_text[1:])
            return offset - before, before
        return offset, int(length_text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"Bad range {text!r}: use OFFSET,LENGTH  OFFSET,-LENGTH  or OFFSET,+-LENGTH"
        ) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="papertape",
        description="Generate punched paper tape stencils as DXF",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=RANGE_HELP,
    )
    parser.add_argument("input", nargs="?", type=Path, help="File to punch")
    parser.add_argument("--output", "-o", type=Path, help="Output DXF path")
    parser.add_argument("--message", "-m", type=str, help="Literal message text to punch")
    parser.add_argument("--job", "-j", type=Path, help="Job file (YAML); other job options are ignored")
    parser.add_argument("--config", "-c", type=str, help="Tape configuration file path")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    banner = parser.add_mutually_exclusive_group()
    banner.add_argument("--banner", type=str, help="Banner text in 8x8 letters")
    banner.add_argument("--banner-file", type=Path, help="File holding the banner text")

    # Tape format
    fmt = parser.add_argument_group("tape format")
    fmt.add_argument("--level", type=int, help="Data holes per row, 1-8")
    fmt.add_argument("--sprocket", type=int, help="Data bit the sprocket hole follows")
    codes = fmt.add_mutually_exclusive_group()
    codes.add_argument("--baudot", action="store_true", help="ITA2 Baudot (forces 5-level)")
    codes.add_argument("--wheatstone", action="store_true", help="USN Wheatstone Morse (forces 2-level)")
    codes.add_argument("--cable-code", action="store_true", help="Cable Code Morse (forces 2-level)")
    fmt.add_argument("--parity", choices=["none", "even", "odd"], default="none",
                     help="Use the top bit as a parity bit")
    fmt.add_argument("--invert", action="store_true", help="Invert every row")
    fmt.add_argument("--mirror", action="store_true", help="Mirror image (underside joiners)")
    fmt.add_argument("--chadless", action="store_true", help="Chadless (arc) holes")

    # Regions
    reg = parser.add_argument_group("regions")
    reg.add_argument("--leader", type=int, default=0, help="Blank rows before the code")
    reg.add_argument("--trailer", type=int, default=0, help="Blank rows after the code")
    reg.add_argument("--range", type=parse_range, help="Code sub-range, see below")

    # Layout
    lay = parser.add_argument_group("layout")
    lay.add_argument("--rows-per-segment", type=int, help="Rows per strip")
    lay.add_argument("--gap", type=float, help="Gap between strips (mm)")
    lay.add_argument("--segments-per-file", type=int, help="Strips per DXF; 0 = one file")
    lay.add_argument("--vee", action="store_true", help="Vee ends on the first and last strip")
    lay.add_argument("--joiner", action="store_true", help="Joiner tape with alignment tabs")
    lay.add_argument("--exact-segments", action="store_true",
                     help="ceil() segment count (no empty trailing strip)")
    lay.add_argument("--page-origins", action="store_true",
                     help="Restart strip X positions at 0 in every DXF")
    lay.add_argument("--dry-run", action="store_true", help="Compute but don't write DXF")

    # Console view
    con = parser.add_argument_group("console")
    con.add_argument("--quiet", "-q", action="store_true", help="Don't print rows")
    con.add_argument("--line-numbers", action="store_true", help="Show line numbers")
    con.add_argument("--numbering", type=str,
                     help="Numbered regions: banner,leader,code,trailer or all")
    con.add_argument("--ascii", action="store_true", help="Show printable characters")
    con.add_argument("--control-chars", action="store_true", help="Show control code names")
    con.add_argument("--mark", type=str, help="Punched hole character")
    con.add_argument("--space", type=str, help="Unpunched position character")
    con.add_argument("--log-level", type=str, help="DEBUG, INFO, WARNING, ERROR")
    con.add_argument("--log-file", type=str, help="Also log to this file")
    return parser


def job_from_args(args: argparse.Namespace, config: TapeConfig) -> TapeJob:
    """Build a job record from CLI arguments, config defaults filling gaps."""
    d = config.defaults
    start, length = args.range if args.range else (None, None)
    level = args.level if args.level is not None else d.level
    if args.sprocket is not None:
        sprocket = args.sprocket
    elif args.level == FIVE_LEVEL:
        sprocket = FIVE_LEVEL_SPROCKET
    else:
        sprocket = d.sprocket
    fields: dict[str, Any] = {
        "input_path": args.input,
        "message": args.message,
        "banner": args.banner,
        "banner_file": args.banner_file,
        "output": args.output,
        "dry_run": args.dry_run,
        "start": start,
        "length": length,
        "level": level,
        "sprocket": sprocket,
        "baudot": args.baudot,
        "wheatstone": args.wheatstone,
        "cable_code": args.cable_code,
        "parity": args.parity,
        "invert": args.invert,
        "mirror": args.mirror,
        "chadless": args.chadless,
        "leader": args.leader,
        "trailer": args.trailer,
        "numbering": args.numbering or d.numbering,
        "rows_per_segment": (
            args.rows_per_segment if args.rows_per_segment is not None
            else d.rows_per_segment
        ),
        "inter_segment_gap": args.gap if args.gap is not None else d.inter_segment_gap_mm,
        "segments_per_file": (
            args.segments_per_file if args.segments_per_file is not None
            else d.segments_per_file
        ),
        "vee": args.vee,
        "joiner": args.joiner,
        "exact_segment_count": args.exact_segments,
        "page_origins": args.page_origins,
    }
    return build_job(**fields)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    setup_logging(
        args.log_level or config.logging.level,
        args.log_file or config.logging.file,
        json=config.logging.json,
        context={"app": "papertape"},
    )
    install_excepthook()

    try:
        job = load_job(args.job) if args.job else job_from_args(args, config)
    except (JobError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        result = generate(job, config)
    except TapeInputError as e:
        logger.error("%s", e)
        return 1

    if not args.quiet:
        options = ConsoleOptions(
            mark=args.mark or config.console.mark,
            space=args.space if args.space is not None else config.console.space,
            chadless_mark=config.console.chadless_mark,
            line_numbers=args.line_numbers,
            ascii_chars=args.ascii,
            control_chars=args.control_chars,
        )
        for line in render_lines(result, options):
            print(line)

    if not result.ok:
        print(f"Failed to write: {', '.join(str(p) for p in result.failed)}", file=sys.stderr)
        return 1
    for path in result.files:
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
