"""Configuration loader for tape generation.

Loads and validates ``tape.yaml`` into typed, frozen dataclasses.  The
physical constants of the tape (hole pitch, hole radii, tape widths) and
the defaults for a job come from the config.

All lengths are in **mm**.  Angles are in **degrees**.

Usage::

    from papertape.configs.loader import load_config
    cfg = load_config()                    # default path
    cfg = load_config("/custom/tape.yaml") # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from papertape.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "tape.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeometryConfig:
    """Physical tape constants in mm.

    ``vee_depth_rows`` is the height of the vee apex in hole spacings.
    ``joiner_tab_fraction`` places the tab indents as a fraction of half
    the tape width, measured from each long edge.
    """

    hole_spacing_mm: float = 2.54
    data_hole_radius_mm: float = 0.915
    sprocket_hole_radius_mm: float = 0.585
    wide_tape_width_mm: float = 25.4
    five_level_tape_width_mm: float = 17.46
    vee_depth_rows: int = 2
    joiner_tab_fraction: float = 0.75


@dataclass(frozen=True)
class ChadlessConfig:
    """Arc angles used in place of circles for chadless punching."""

    start_angle_deg: float = 130.0
    end_angle_deg: float = 50.0


@dataclass(frozen=True)
class DrawingConfig:
    """DXF output settings."""

    layer: str = "TAPE"
    precision: int = 6


@dataclass(frozen=True)
class DefaultsConfig:
    """Job defaults applied when the caller leaves a field unset."""

    level: int = 8
    sprocket: int = 3
    rows_per_segment: int | None = None
    inter_segment_gap_mm: float = 0.0
    segments_per_file: int = 0
    numbering: str = "code"


@dataclass(frozen=True)
class ConsoleConfig:
    """Characters used by the console row projection."""

    mark: str = "O"
    space: str = " "
    chadless_mark: str = "U"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    json: bool = False
    file: str | None = None


@dataclass(frozen=True)
class TapeConfig:
    """Top-level validated configuration."""

    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    chadless: ChadlessConfig = field(default_factory=ChadlessConfig)
    drawing: DrawingConfig = field(default_factory=DrawingConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _validate_config(cfg: TapeConfig) -> None:
    """Validate value ranges and cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid combination.
    """
    g = cfg.geometry
    for name in (
        "hole_spacing_mm",
        "data_hole_radius_mm",
        "sprocket_hole_radius_mm",
        "wide_tape_width_mm",
        "five_level_tape_width_mm",
    ):
        if getattr(g, name) <= 0:
            raise ConfigError(
                f"geometry.{name} must be positive, got {getattr(g, name)}"
            )

    # -- Holes must not overlap their neighbours -----------------------------
    for name in ("data_hole_radius_mm", "sprocket_hole_radius_mm"):
        if 2 * getattr(g, name) >= g.hole_spacing_mm:
            raise ConfigError(
                f"geometry.{name} {getattr(g, name)} too large for "
                f"hole spacing {g.hole_spacing_mm}"
            )

    if g.vee_depth_rows < 0:
        raise ConfigError(
            f"geometry.vee_depth_rows must be >= 0, got {g.vee_depth_rows}"
        )
    if not 0.0 < g.joiner_tab_fraction < 1.0:
        raise ConfigError(
            f"geometry.joiner_tab_fraction must be in (0, 1), "
            f"got {g.joiner_tab_fraction}"
        )

    # -- Defaults -----------------------------------------------------------
    d = cfg.defaults
    if not 1 <= d.level <= 8:
        raise ConfigError(f"defaults.level must be 1-8, got {d.level}")
    if not 0 <= d.sprocket <= d.level:
        raise ConfigError(
            f"defaults.sprocket must be 0-{d.level}, got {d.sprocket}"
        )
    if d.rows_per_segment is not None and d.rows_per_segment < 1:
        raise ConfigError(
            f"defaults.rows_per_segment must be >= 1 or null, "
            f"got {d.rows_per_segment}"
        )
    if d.inter_segment_gap_mm < 0:
        raise ConfigError(
            f"defaults.inter_segment_gap_mm must be >= 0, "
            f"got {d.inter_segment_gap_mm}"
        )
    if d.segments_per_file < 0:
        raise ConfigError(
            f"defaults.segments_per_file must be >= 0, "
            f"got {d.segments_per_file}"
        )

    # -- Console --------------------------------------------------------------
    c = cfg.console
    for name in ("mark", "space", "chadless_mark"):
        if len(getattr(c, name)) != 1:
            raise ConfigError(
                f"console.{name} must be a single character, "
                f"got {getattr(c, name)!r}"
            )

    if not cfg.drawing.layer:
        raise ConfigError("drawing.layer must not be empty")
    if not 0 <= cfg.drawing.precision <= 12:
        raise ConfigError(
            f"drawing.precision must be 0-12, got {cfg.drawing.precision}"
        )

    if cfg.logging.level.upper() not in (
        "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL",
    ):
        raise ConfigError(f"Unknown logging.level: {cfg.logging.level}")


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


def load_config(path: str | Path | None = None) -> TapeConfig:
    """Load and validate tape configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``tape.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    TapeConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation, or the YAML is malformed.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.debug("Loading configuration from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed configuration file {path}: {exc}") from exc
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")

    try:
        # -- geometry -------------------------------------------------------
        gd = data["geometry"]
        geometry = GeometryConfig(
            hole_spacing_mm=float(gd["hole_spacing_mm"]),
            data_hole_radius_mm=float(gd["data_hole_radius_mm"]),
            sprocket_hole_radius_mm=float(gd["sprocket_hole_radius_mm"]),
            wide_tape_width_mm=float(gd["wide_tape_width_mm"]),
            five_level_tape_width_mm=float(gd["five_level_tape_width_mm"]),
            vee_depth_rows=int(gd.get("vee_depth_rows", 2)),
            joiner_tab_fraction=float(gd.get("joiner_tab_fraction", 0.75)),
        )

        # -- chadless -------------------------------------------------------
        cd = data.get("chadless", {})
        chadless = ChadlessConfig(
            start_angle_deg=float(cd.get("start_angle_deg", 130.0)),
            end_angle_deg=float(cd.get("end_angle_deg", 50.0)),
        )

        # -- drawing --------------------------------------------------------
        dr = data.get("drawing", {})
        drawing = DrawingConfig(
            layer=str(dr.get("layer", "TAPE")),
            precision=int(dr.get("precision", 6)),
        )

        # -- defaults -------------------------------------------------------
        df = data["defaults"]
        defaults = DefaultsConfig(
            level=int(df["level"]),
            sprocket=int(df["sprocket"]),
            rows_per_segment=_optional_int(df.get("rows_per_segment")),
            inter_segment_gap_mm=float(df.get("inter_segment_gap_mm", 0.0)),
            segments_per_file=int(df.get("segments_per_file", 0)),
            numbering=str(df.get("numbering", "code")),
        )

        # -- console --------------------------------------------------------
        co = data.get("console", {})
        console = ConsoleConfig(
            mark=str(co.get("mark", "O")),
            space=str(co.get("space", " ")),
            chadless_mark=str(co.get("chadless_mark", "U")),
        )

        # -- logging --------------------------------------------------------
        lg = data.get("logging", {})
        logging_cfg = LoggingConfig(
            level=str(lg.get("level", "INFO")),
            json=bool(lg.get("json", False)),
            file=lg.get("file"),
        )

        config = TapeConfig(
            geometry=geometry,
            chadless=chadless,
            drawing=drawing,
            defaults=defaults,
            console=console,
            logging=logging_cfg,
        )

        _validate_config(config)
        logger.debug("Configuration loaded successfully")
        return config

    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc
