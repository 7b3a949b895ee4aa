"""Rasterizer facade bound to one image and one RasterizerConfig.

Wraps the primitive, fractal and noise functions so callers configure the
fractal depth bound and the noise RNG once:

    from pnmraster.image import RasterImage, Variant
    from pnmraster.rasterizer import Rasterizer

    img = RasterImage.blank(64, 64, Variant.COLOR)
    r = Rasterizer(img, cfg.rasterizer)
    r.filled_circle((32, 32), 10, (255, 0, 0)).line((0, 0), (63, 63), (0, 0, 255))

Methods return self so calls can be chained.
"""

import logging
from typing import Any, Optional, Sequence

import numpy as np

from ..image.model import RasterImage
from ..utils.validators import RasterizerConfig
from . import fractals, noise, primitives

logger = logging.getLogger(__name__)


class Rasterizer:
    """Drawing operations on a single RasterImage.

    Attributes
    ----------
    image : RasterImage
        Target image, mutated in place
    config : RasterizerConfig
        Fractal depth bound and noise settings
    rng : np.random.RandomState
        Noise randomness, seeded from config.noise.seed unless given
    """

    def __init__(
        self,
        image: RasterImage,
        config: Optional[RasterizerConfig] = None,
        rng: Optional[np.random.RandomState] = None
    ):
        self.image = image
        self.config = config or RasterizerConfig()
        self.rng = rng if rng is not None else np.random.RandomState(self.config.noise.seed)

        logger.debug(
            f"Rasterizer on {image!r}: max_fractal_depth={self.config.max_fractal_depth}, "
            f"noise seed={self.config.noise.seed} cell={self.config.noise.cell_size}"
        )

    def line(self, p1: Sequence[int], p2: Sequence[int], color: Any) -> 'Rasterizer':
        primitives.draw_line(self.image, p1, p2, color)
        return self

    def rectangle(self, origin: Sequence[int], width: int, height: int, color: Any) -> 'Rasterizer':
        primitives.draw_rectangle(self.image, origin, width, height, color)
        return self

    def filled_rectangle(self, origin: Sequence[int], width: int, height: int, color: Any) -> 'Rasterizer':
        primitives.draw_filled_rectangle(self.image, origin, width, height, color)
        return self

    def circle(self, center: Sequence[int], radius: int, color: Any) -> 'Rasterizer':
        primitives.draw_circle(self.image, center, radius, color)
        return self

    def filled_circle(self, center: Sequence[int], radius: int, color: Any) -> 'Rasterizer':
        primitives.draw_filled_circle(self.image, center, radius, color)
        return self

    def triangle(self, p1, p2, p3, color: Any) -> 'Rasterizer':
        primitives.draw_triangle(self.image, p1, p2, p3, color)
        return self

    def filled_triangle(self, p1, p2, p3, color: Any) -> 'Rasterizer':
        primitives.draw_filled_triangle(self.image, p1, p2, p3, color)
        return self

    def polygon(self, points: Sequence[Sequence[int]], color: Any) -> 'Rasterizer':
        primitives.draw_polygon(self.image, points, color)
        return self

    def filled_polygon(self, points: Sequence[Sequence[int]], color: Any) -> 'Rasterizer':
        primitives.draw_filled_polygon(self.image, points, color)
        return self

    def koch_snowflake(self, depth: int, start: Sequence[int], size: int, color: Any) -> 'Rasterizer':
        fractals.draw_koch_snowflake(
            self.image, depth, start, size, color,
            max_depth=self.config.max_fractal_depth
        )
        return self

    def sierpinski_triangle(self, depth: int, start: Sequence[int], size: int, color: Any) -> 'Rasterizer':
        fractals.draw_sierpinski_triangle(
            self.image, depth, start, size, color,
            max_depth=self.config.max_fractal_depth
        )
        return self

    def perlin_noise(self, color1: Any, color2: Any) -> 'Rasterizer':
        noise.draw_perlin_noise(
            self.image, color1, color2,
            rng=self.rng, cell_size=self.config.noise.cell_size
        )
        return self
