"""Sample arithmetic for bitmap, gray and color rasters.

Provides:
    - Rec. 601 luma from RGB (0.299 R + 0.587 G + 0.114 B), rounded half up
    - Threshold to bitmap: sample > max_value / 2
    - Linear blend between two samples of the same kind
    - Proportional rescaling between max values

Sample kinds:
    - Bitmap: bool
    - Gray: int in [0, max_value]
    - Color: (r, g, b) ints in [0, max_value]

Array helpers operate on the numpy sample arrays held by RasterImage:
(H, W) for gray and (H, W, 3) for color, dtype uint8.
"""

from typing import Tuple, Union

import numpy as np

from .geometry import round_half_up

Sample = Union[bool, int, Tuple[int, int, int]]

LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def luma(r: int, g: int, b: int) -> int:
    """Rec. 601 luma of one RGB sample, rounded half up."""
    wr, wg, wb = LUMA_WEIGHTS
    return round_half_up(wr * r + wg * g + wb * b)


def luma_array(rgb: np.ndarray) -> np.ndarray:
    """Vectorized luma of an (H, W, 3) array → (H, W) uint8.

    Uses floor(v + 0.5) rather than np.rint, which rounds half to even.
    """
    weights = np.asarray(LUMA_WEIGHTS, dtype=np.float64)
    y = rgb.astype(np.float64) @ weights
    return np.floor(y + 0.5).astype(np.uint8)


def threshold_array(values: np.ndarray, max_value: int) -> np.ndarray:
    """True where values > max_value / 2 (exact, no integer halving)."""
    return values.astype(np.float64) * 2.0 > max_value


def rescale_array(values: np.ndarray, old_max: int, new_max: int) -> np.ndarray:
    """Map samples from [0, old_max] to [0, new_max] proportionally."""
    scaled = values.astype(np.float64) * new_max / old_max
    return np.floor(scaled + 0.5).astype(np.uint8)


def interpolate_color(c1: Sample, c2: Sample, t: float) -> Sample:
    """Linear blend c1 → c2 at parameter t (clamped to [0, 1]).

    Parameters
    ----------
    c1, c2 : Sample
        Two samples of the same kind (bool, int or RGB triplet)
    t : float
        Blend factor; 0 gives c1, 1 gives c2

    Returns
    -------
    Sample
        Same kind as the inputs. Bitmap picks c2 once t ≥ 0.5.

    Raises
    ------
    ValueError
        If c1 and c2 are not the same kind of sample
    """
    t = min(max(float(t), 0.0), 1.0)

    if isinstance(c1, (bool, np.bool_)) and isinstance(c2, (bool, np.bool_)):
        return bool(c2) if t >= 0.5 else bool(c1)

    if isinstance(c1, tuple) and isinstance(c2, tuple):
        if len(c1) != 3 or len(c2) != 3:
            raise ValueError(f"RGB samples need 3 channels, got {c1!r} and {c2!r}")
        return tuple(
            round_half_up(a * (1.0 - t) + b * t) for a, b in zip(c1, c2)
        )

    if isinstance(c1, (tuple, bool)) or isinstance(c2, (tuple, bool)):
        raise ValueError(f"Cannot blend samples of different kinds: {c1!r}, {c2!r}")

    return round_half_up(int(c1) * (1.0 - t) + int(c2) * t)
