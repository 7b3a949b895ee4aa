"""2-D rasterizer for RasterImage.

Modules:
    - primitives: lines, rectangles, circles, triangles, polygons
    - fractals: Koch snowflake and Sierpinski triangle generators
    - noise: gradient-noise fill between two colors
    - renderer: Rasterizer facade carrying RasterizerConfig

Invariants:
    - All writes go through RasterImage.set_pixel (off-canvas → dropped)
    - Points are integer (x, y), origin top-left, +Y down
    - Fractal recursion depth is bounded by config
"""

from .fractals import draw_koch_snowflake, draw_sierpinski_triangle
from .noise import draw_perlin_noise, noise_field
from .primitives import (
    draw_circle,
    draw_filled_circle,
    draw_filled_polygon,
    draw_filled_rectangle,
    draw_filled_triangle,
    draw_line,
    draw_polygon,
    draw_rectangle,
    draw_triangle,
    line_points,
)
from .renderer import Rasterizer

__all__ = [
    'Rasterizer',
    'draw_line',
    'draw_rectangle',
    'draw_filled_rectangle',
    'draw_circle',
    'draw_filled_circle',
    'draw_triangle',
    'draw_filled_triangle',
    'draw_polygon',
    'draw_filled_polygon',
    'draw_koch_snowflake',
    'draw_sierpinski_triangle',
    'draw_perlin_noise',
    'line_points',
    'noise_field',
]
