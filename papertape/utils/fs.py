"""Filesystem helpers: atomic writes, YAML loading, safe file names.

Provides:
    - Atomic writes: tmp file → fsync → rename (no partial DXF on disk)
    - YAML load with validation
    - Directory creation with exist_ok semantics
    - File name sanitising for generated output names

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from papertape.utils import fs
    fs.atomic_write(dxf_path, doc.saveas)
    cfg = fs.load_yaml("tape.yaml")
"""

import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Union

import yaml

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory if it doesn't exist, return Path object.

    Parameters
    ----------
    p : Union[str, Path]
        Directory path

    Returns
    -------
    Path
        Path object (guaranteed to exist)
    """
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write(
    path: Union[str, Path],
    write: Callable[[Path], Any],
    tmp_suffix: str = ".tmp"
) -> None:
    """Write a file atomically (tmp → fsync → rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    write : Callable[[Path], Any]
        Writes the complete file to the path it is given, e.g. an ezdxf
        document's ``saveas``
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    RuntimeError
        If the write or rename fails; the temporary file is removed and
        any existing file at *path* is left untouched.

    Notes
    -----
    Uses same directory for tmp file to ensure atomic rename on same filesystem.
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        write(tmp_path)
        with open(tmp_path, 'rb') as f:
            os.fsync(f.fileno())

        # Atomic rename (overwrites existing file on POSIX)
        tmp_path.replace(path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def clean_filename(name: str) -> str:
    """Strip characters outside ``[A-Za-z0-9._-]`` from a file name.

    Only the final path component should be passed in; directory
    separators are removed like any other unsafe character.
    """
    return _UNSAFE_FILENAME_CHARS.sub("", name)
