"""Tape job record -- every parameter of one generation run.

A :class:`TapeJob` is validated once, up front, with pydantic.  Invalid
combinations (sprocket beyond the level, two encodings at once, nothing
to punch) are rejected here so that geometry work never starts on a bad
job.

Units:
    - Lengths: millimetres (mm)
    - Counts: tape rows

Usage:
    from papertape.configs.job import TapeJob, load_job

    job = TapeJob(message="HELLO WORLD", baudot=True, leader=20)
    job = load_job("jobs/hello.yaml")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from papertape.assembly.numbering import Numbering
from papertape.assembly.rows import Parity
from papertape.codes import Encoding, effective_geometry


class JobError(ValueError):
    """Raised when a job record fails validation."""

    pass


class TapeJob(BaseModel):
    """One tape generation run.

    Input priority is ``message`` > ``data`` / ``input_path`` > banner
    only.  ``data`` carries raw bytes supplied programmatically; the CLI
    reads files through ``input_path`` instead.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # -- sources -------------------------------------------------------------
    input_path: Optional[Path] = Field(None, description="File whose bytes are punched")
    data: Optional[bytes] = Field(None, description="Raw bytes to punch")
    message: Optional[str] = Field(None, description="Literal message text to punch")
    banner: Optional[str] = Field(None, description="Banner text punched in 8x8 letters")
    banner_file: Optional[Path] = Field(None, description="File holding the banner text")

    # -- output --------------------------------------------------------------
    output: Optional[Path] = Field(None, description="Output DXF path (default derived)")
    dry_run: bool = Field(False, description="Compute everything, write nothing")

    # -- code range ----------------------------------------------------------
    start: Optional[int] = Field(None, description="First data row; negative pads leader")
    length: Optional[int] = Field(None, ge=0, description="Number of data rows")

    # -- tape format ---------------------------------------------------------
    level: int = Field(8, ge=1, le=8, description="Data holes per row")
    sprocket: int = Field(3, ge=0, le=8, description="Data bit the sprocket hole follows")
    baudot: bool = Field(False, description="ITA2 five-level code")
    wheatstone: bool = Field(False, description="USN Wheatstone Morse")
    cable_code: bool = Field(False, description="Cable Code Morse")
    parity: Parity = Field(Parity.NONE, description="MSB parity mode")
    invert: bool = Field(False, description="Invert every row")
    mirror: bool = Field(False, description="Mirror image for underside joiners")
    chadless: bool = Field(False, description="Chadless (arc) holes")

    # -- regions -------------------------------------------------------------
    leader: int = Field(0, ge=0, description="Blank rows before the code")
    trailer: int = Field(0, ge=0, description="Blank rows after the code")
    numbering: int = Field(int(Numbering.CODE), ge=0, le=int(Numbering.ALL),
                           description="Numbering flags for the console view")

    # -- layout --------------------------------------------------------------
    rows_per_segment: Optional[int] = Field(None, ge=1, description="Rows per strip; None = one strip")
    inter_segment_gap: float = Field(0.0, ge=0.0, description="Gap between strips (mm)")
    segments_per_file: int = Field(0, ge=0, description="Strips per output file; 0 = one file")
    vee: bool = Field(False, description="Vee ends on first and last strip")
    joiner: bool = Field(False, description="Produce joiner tape with alignment tabs")
    exact_segment_count: bool = Field(False, description="ceil() segment count")
    page_origins: bool = Field(False, description="Restart strip X origins on every output file")

    @field_validator('numbering', mode='before')
    @classmethod
    def parse_numbering(cls, v: Any) -> int:
        if isinstance(v, str):
            return int(Numbering.parse(v))
        if isinstance(v, (list, tuple)):
            return int(Numbering.parse(list(v)))
        return v

    @field_validator('parity', mode='before')
    @classmethod
    def parse_parity(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.lower()
        return v

    @model_validator(mode='after')
    def validate_job(self) -> 'TapeJob':
        """Cross-field checks."""
        chosen = [
            name for name in ("baudot", "wheatstone", "cable_code")
            if getattr(self, name)
        ]
        if len(chosen) > 1:
            raise ValueError(
                f"Encodings are mutually exclusive, got {', '.join(chosen)}"
            )

        level, sprocket = self.effective_level, self.effective_sprocket
        if sprocket > level:
            raise ValueError(
                f"Sprocket position {sprocket} exceeds level {level}"
            )

        if self.banner is not None and self.banner_file is not None:
            raise ValueError("Give either banner or banner_file, not both")

        has_code = (
            self.message is not None
            or self.data is not None
            or self.input_path is not None
        )
        if not (has_code or self.has_banner or self.leader or self.trailer):
            raise ValueError(
                "Nothing to generate: no input, message, banner, leader or trailer"
            )
        return self

    # -- derived -------------------------------------------------------------

    @property
    def encoding(self) -> Encoding:
        if self.baudot:
            return Encoding.BAUDOT
        if self.wheatstone:
            return Encoding.WHEATSTONE
        if self.cable_code:
            return Encoding.CABLE_CODE
        return Encoding.ASCII

    @property
    def effective_level(self) -> int:
        return effective_geometry(self.encoding, self.level, self.sprocket)[0]

    @property
    def effective_sprocket(self) -> int:
        return effective_geometry(self.encoding, self.level, self.sprocket)[1]

    @property
    def numbering_flags(self) -> Numbering:
        return Numbering(self.numbering)

    @property
    def has_banner(self) -> bool:
        """Banner requested; Morse tapes never carry one."""
        if self.encoding.is_morse:
            return False
        return bool(self.banner) or self.banner_file is not None


def build_job(**fields: Any) -> TapeJob:
    """Construct a :class:`TapeJob`, raising :class:`JobError` on failure."""
    try:
        return TapeJob(**fields)
    except ValidationError as e:
        raise JobError(f"Invalid tape job: {e}") from e


def load_job(path: Union[str, Path]) -> TapeJob:
    """Load and validate a job record from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to the job YAML file.  Relative ``input_path``,
        ``banner_file`` and ``output`` entries are resolved against the
        file's directory.

    Returns
    -------
    TapeJob
        Validated job record.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    JobError
        If the YAML is malformed or validation fails
    """
    from papertape.utils import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Job file not found: {path}")

    try:
        data = fs.load_yaml(path) or {}
    except yaml.YAMLError as e:
        raise JobError(f"Malformed job file {path}: {e}") from e
    if not isinstance(data, dict):
        raise JobError(f"Job file {path} must contain a mapping")
    for key in ("input_path", "banner_file", "output"):
        if data.get(key) is not None and not Path(data[key]).is_absolute():
            data[key] = str(path.parent / data[key])
    try:
        return TapeJob(**data)
    except ValidationError as e:
        raise JobError(f"Job file validation failed at {path}: {e}") from e
