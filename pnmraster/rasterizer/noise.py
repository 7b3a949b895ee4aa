"""Gradient (Perlin-style) noise fill.

Algorithm:
    1. Lattice of unit gradient vectors, one per cell corner:
       (ceil(H / cell) + 1) × (ceil(W / cell) + 1), random angles from a
       seedable numpy RandomState
    2. For each pixel center, dot the four surrounding gradients with the
       offsets from their corners
    3. Bilinearly interpolate the four dot products → n in [-1, 1]
    4. t = (n + 1) / 2 clamped to [0, 1]; pixel = interpolate_color(c1, c2, t)

The field is computed with numpy; pixels are written through
RasterImage.set_pixel like every other primitive.
"""

import logging
from typing import Any, Optional, Union

import numpy as np

from ..image.model import RasterImage
from ..utils.color import interpolate_color
from ..utils.validators import NoiseConfig

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIZE = NoiseConfig().cell_size

RngLike = Union[None, int, np.random.RandomState]


def _as_rng(rng: RngLike) -> np.random.RandomState:
    if isinstance(rng, np.random.RandomState):
        return rng
    return np.random.RandomState(rng)


def gradient_grid(rows: int, cols: int, rng: RngLike = None) -> np.ndarray:
    """Random unit vectors, shape (rows, cols, 2)."""
    angles = _as_rng(rng).uniform(0.0, 2.0 * np.pi, size=(rows, cols))
    return np.stack([np.cos(angles), np.sin(angles)], axis=-1)


def noise_field(
    width: int,
    height: int,
    rng: RngLike = None,
    cell_size: int = DEFAULT_CELL_SIZE
) -> np.ndarray:
    """Gradient noise sampled at pixel centers.

    Parameters
    ----------
    width, height : int
        Field size in pixels
    rng : RandomState, int or None
        Randomness source or seed
    cell_size : int
        Lattice spacing in pixels (≥ 1)

    Returns
    -------
    np.ndarray
        (height, width) float64 values in [-1, 1]
    """
    if cell_size < 1:
        raise ValueError(f"cell_size must be ≥ 1, got {cell_size}")

    grid_w = -(-width // cell_size) + 1
    grid_h = -(-height // cell_size) + 1
    grid = gradient_grid(grid_h, grid_w, rng)

    xs = (np.arange(width) + 0.5) / cell_size
    ys = (np.arange(height) + 0.5) / cell_size
    gx, gy = np.meshgrid(xs, ys)

    x0 = np.floor(gx).astype(np.intp)
    y0 = np.floor(gy).astype(np.intp)
    fx = gx - x0
    fy = gy - y0

    def corner(ix, iy, ox, oy):
        g = grid[iy, ix]
        return g[..., 0] * ox + g[..., 1] * oy

    n00 = corner(x0, y0, fx, fy)
    n10 = corner(x0 + 1, y0, fx - 1.0, fy)
    n01 = corner(x0, y0 + 1, fx, fy - 1.0)
    n11 = corner(x0 + 1, y0 + 1, fx - 1.0, fy - 1.0)

    top = n00 * (1.0 - fx) + n10 * fx
    bottom = n01 * (1.0 - fx) + n11 * fx
    return np.clip(top * (1.0 - fy) + bottom * fy, -1.0, 1.0)


def draw_perlin_noise(
    image: RasterImage,
    color1: Any,
    color2: Any,
    rng: RngLike = None,
    cell_size: int = DEFAULT_CELL_SIZE
) -> np.ndarray:
    """Fill the whole image with noise blended between two colors.

    Returns
    -------
    np.ndarray
        The (height, width) blend factors t in [0, 1] that were applied
    """
    c1 = image.coerce_sample(color1)
    c2 = image.coerce_sample(color2)

    field = noise_field(image.width, image.height, rng, cell_size)
    t = np.clip((field + 1.0) / 2.0, 0.0, 1.0)

    for y in range(image.height):
        for x in range(image.width):
            image.set_pixel(x, y, interpolate_color(c1, c2, t[y, x]))

    logger.debug(f"Perlin noise {image.width}x{image.height} cell={cell_size} "
                 f"t∈[{t.min():.3f}, {t.max():.3f}]")
    return t
