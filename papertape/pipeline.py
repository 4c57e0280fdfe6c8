"""Tape generation pipeline -- job record to DXF file(s).

Stages, in order::

    read_input   message text > input bytes / file > banner only
    transcode    bytes -> tape symbols (ASCII, Baudot, Morse)
    assemble     banner + leader + code range + trailer rows
    layout       segments, pages, joiner marks
    emit         outlines and holes into one DrawingSink per page
    save         one DXF per page (skipped on dry run)

Failures:
    - an explicitly requested input or banner file that cannot be read
      raises :class:`TapeInputError` before any geometry work;
    - a DXF that cannot be written is logged and reported through
      :attr:`GenerateResult.ok`, never raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from papertape.assembly.banner import render_banner
from papertape.assembly.rows import TapeRowList, assemble
from papertape.codes import Encoding, transcode
from papertape.configs.job import TapeJob
from papertape.configs.loader import TapeConfig, load_config
from papertape.dxf.entities import Entity
from papertape.dxf.writer import DrawingSink
from papertape.emit.holes import HoleEmitter
from papertape.layout.caps import segment_outline
from papertape.layout.segments import JoinerMark, TapeLayout, layout
from papertape.utils.fs import clean_filename
from papertape.utils.logging_config import pop_context, push_context

logger = logging.getLogger(__name__)


class TapeInputError(Exception):
    """Raised when a requested input or banner file cannot be read."""

    pass


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TapeInput:
    """Resolved sources of one job.

    ``data`` is ``None`` when the tape has no code region (banner, leader
    or trailer only).  ``source`` names where the code bytes came from.
    """

    data: bytes | None
    banner: str | None
    source: str


def read_input(job: TapeJob) -> TapeInput:
    """Resolve the code bytes and banner text of *job*.

    Raises
    ------
    TapeInputError
        If ``input_path`` or ``banner_file`` is set but unreadable.
    """
    banner: str | None = None
    if job.has_banner:
        if job.banner_file is not None:
            try:
                banner = job.banner_file.read_text(encoding="utf-8").strip()
            except OSError as e:
                raise TapeInputError(
                    f"Cannot read banner file {job.banner_file}: {e}"
                ) from e
        else:
            banner = job.banner

    if job.message is not None:
        return TapeInput(job.message.encode("latin-1", errors="replace"), banner, "message")
    if job.data is not None:
        return TapeInput(job.data, banner, "data")
    if job.input_path is not None:
        try:
            data = job.input_path.read_bytes()
        except OSError as e:
            raise TapeInputError(f"Cannot read input file {job.input_path}: {e}") from e
        logger.debug("Read %d bytes from %s", len(data), job.input_path)
        return TapeInput(data, banner, "file")
    return TapeInput(None, banner, "banner" if banner else "blank")


# ---------------------------------------------------------------------------
# Output naming
# ---------------------------------------------------------------------------


def default_output_path(job: TapeJob, tape_input: TapeInput) -> Path:
    """Output path of *job*; the file name is sanitised, the directory kept.

    Without an explicit ``output``: the input file's stem next to the
    input, ``MESSAGE.dxf`` for message text, or
    ``BANNER_[MIRROR_]<first 8 banner characters>.dxf`` for banner-only
    tape.
    """
    if job.output is not None:
        path = job.output
    elif tape_input.source == "file" and job.input_path is not None:
        path = job.input_path.with_suffix(".dxf")
    elif tape_input.source == "message":
        path = Path("MESSAGE.dxf")
    elif tape_input.banner:
        prefix = "BANNER_" + ("MIRROR_" if job.mirror else "")
        path = Path(prefix + tape_input.banner.strip()[:8] + ".dxf")
    else:
        path = Path("TAPE.dxf")

    name = clean_filename(path.name) or "TAPE.dxf"
    return path.with_name(name)


def page_path(output: Path, page: int, paginated: bool) -> Path:
    """``name.dxf`` or, when paginated, ``name_0001.dxf`` for page 0."""
    if not paginated:
        return output
    return output.with_name(f"{output.stem}_{page + 1:04d}{output.suffix or '.dxf'}")


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass
class GenerateResult:
    """Everything one run computed, written or failed to write."""

    job: TapeJob
    rows: TapeRowList
    layout: TapeLayout
    output: Path
    level: int
    sprocket: int
    encoding: Encoding
    pages: list[tuple[Entity, ...]] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    failed: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def status(self) -> str:
        if self.failed:
            return "save-failed"
        return "dry-run" if self.job.dry_run else "ok"

    @property
    def joiner_marks(self) -> tuple[JoinerMark, ...]:
        return self.layout.joiner_marks


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def build_rows(job: TapeJob, tape_input: TapeInput) -> TapeRowList:
    """Transcode and assemble the rows of *job*."""
    level = job.effective_level
    code = transcode(tape_input.data, job.encoding, level) if tape_input.data else []
    banner = render_banner(tape_input.banner, level) if tape_input.banner else []
    return assemble(
        code,
        level=level,
        leader=job.leader,
        banner_symbols=banner,
        trailer=job.trailer,
        start=job.start,
        length=job.length,
        parity=job.parity,
        invert=job.invert,
        numbering=job.numbering_flags,
    )


def generate(job: TapeJob, config: TapeConfig | None = None) -> GenerateResult:
    """Run one job end to end.

    Parameters
    ----------
    job : TapeJob
        Validated job record.
    config : TapeConfig | None
        Tape constants; the shipped ``tape.yaml`` when omitted.

    Returns
    -------
    GenerateResult
        Rows, layout and per-page entities; ``files`` lists what was
        written and ``ok`` is False if any page could not be saved.

    Raises
    ------
    TapeInputError
        If a requested input or banner file cannot be read.
    """
    config = config or load_config()
    tape_input = read_input(job)
    output = default_output_path(job, tape_input)

    push_context(job=output.stem)
    try:
        rows = build_rows(job, tape_input)
        tape = layout(
            rows,
            rows_per_segment=job.rows_per_segment,
            inter_segment_gap=job.inter_segment_gap,
            draw_vee=job.vee,
            joiner=job.joiner,
            segments_per_file=job.segments_per_file,
            exact_segment_count=job.exact_segment_count,
            page_origins=job.page_origins,
            geometry=config.geometry,
        )
        logger.info(
            "%s: %d rows (%s, level %d) in %d segment(s), %d page(s)",
            tape_input.source, len(rows), job.encoding.value,
            job.effective_level, len(tape.segments), tape.page_count,
        )

        result = GenerateResult(
            job=job,
            rows=rows,
            layout=tape,
            output=output,
            level=job.effective_level,
            sprocket=job.effective_sprocket,
            encoding=job.encoding,
        )

        sink = DrawingSink(config.drawing.layer, config.drawing.precision)
        emitter = HoleEmitter(
            sink,
            job.effective_level,
            job.effective_sprocket,
            mirror=job.mirror,
            chadless=job.chadless,
            geometry=config.geometry,
            chadless_angles=config.chadless,
        )
        paginated = bool(job.segments_per_file)

        for page_no, page in enumerate(tape.pages):
            sink.reset()
            for segment in page:
                for line in segment_outline(segment, config.geometry):
                    sink.add(line)
                emitter.emit_segment(segment, rows)
            result.pages.append(sink.entities)

            if job.dry_run:
                continue
            path = page_path(output, page_no, paginated)
            if sink.save(path):
                result.files.append(path)
            else:
                result.failed.append(path)
                break

        if job.dry_run:
            logger.info("Dry run: %d page(s) not written", len(result.pages))
        return result
    finally:
        pop_context(keys=["job"])
