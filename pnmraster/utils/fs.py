"""Atomic filesystem operations for image files and YAML configs.

Provides:
    - Atomic writes: tmp file → fsync → rename (prevents partial reads)
    - YAML loading
    - Timestamp-suffixed output names (``name-2026-10-19-13-45.ppm``)
    - PNG (or any Pillow format) export of sample arrays
    - Directory creation with exist_ok semantics

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from pnmraster.utils import fs
    fs.atomic_write_bytes(out_path, encoded)
    fs.atomic_save_image(image.samples, "preview.png")
    cfg = fs.load_yaml("configs/pnmraster.v1.yaml")
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml
from PIL import Image

TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M"


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory (and parents) if missing, return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp → fsync → rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    OSError
        If the temporary file cannot be written or renamed. The temporary
        file is removed before the error propagates.

    Notes
    -----
    The tmp file lives in the target directory so the rename stays on one
    filesystem.
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        # Atomic rename (overwrites existing file on POSIX)
        tmp_path.replace(path)
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def read_bytes(path: Union[str, Path]) -> bytes:
    """Read a whole file into memory."""
    with open(Path(path), 'rb') as f:
        return f.read()


def timestamped_path(
    path: Union[str, Path],
    now: Optional[datetime] = None
) -> Path:
    """Insert a ``-YYYY-MM-DD-HH-MM`` suffix before the file extension.

    Parameters
    ----------
    path : Union[str, Path]
        Requested output path, e.g. ``out/inverse.pbm``
    now : datetime, optional
        Timestamp to use; defaults to the current local time

    Returns
    -------
    Path
        e.g. ``out/inverse-2026-10-19-13-45.pbm``
    """
    path = Path(path)
    now = now or datetime.now()
    return path.with_name(f"{path.stem}-{now.strftime(TIMESTAMP_FORMAT)}{path.suffix}")


def atomic_save_image(
    img: np.ndarray,
    path: Union[str, Path]
) -> None:
    """Save a sample array through Pillow atomically.

    Parameters
    ----------
    img : np.ndarray
        (H, W) bool, (H, W) uint8 or (H, W, 3) uint8
    path : Union[str, Path]
        Target file path (extension determines format)

    Notes
    -----
    Bool arrays follow the Netpbm convention (True = black ink) and are
    written as 8-bit grayscale with True → 0 and False → 255.
    """
    path = Path(path)
    ensure_dir(path.parent)

    if img.dtype == np.bool_:
        img = np.where(img, 0, 255).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = np.clip(img, 0, 255).astype(np.uint8)

    pil_img = Image.fromarray(img)

    # Keep the real extension last so Pillow can infer the format
    tmp_path = path.with_name(path.stem + ".tmp" + path.suffix)
    try:
        pil_img.save(tmp_path)
        tmp_path.replace(path)
    except (OSError, ValueError):
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content ({} for an empty file)

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
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
