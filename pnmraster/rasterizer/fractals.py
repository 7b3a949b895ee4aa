"""Recursive fractal generators: Koch snowflake and Sierpinski triangle.

Both start from the equilateral triangle with base start → start + (size, 0)
and apex int(size·√3/2) pixels above the base (y grows downward). Each level
draws with primitives.draw_triangle and recurses with depth - 1, so depth 0
draws nothing and recursion always terminates.

Depth is bounded: anything above max_depth is clamped (with a warning)
because the Koch generator fans out 6^depth calls and Sierpinski 5^depth.
"""

import logging
from typing import Any, Sequence

from ..image.model import RasterImage
from ..utils.geometry import (
    SQRT3,
    Point,
    as_point,
    centroid,
    equilateral_triangle,
    midpoint,
    round_half_up,
)
from ..utils.validators import RasterizerConfig
from .primitives import draw_triangle

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = RasterizerConfig().max_fractal_depth


def _bounded_depth(depth: int, max_depth: int, name: str) -> int:
    depth = int(depth)
    if depth > max_depth:
        logger.warning(f"{name} depth {depth} exceeds limit {max_depth}; clamping")
        return max_depth
    return depth


def koch_anchors(start: Point, size: int):
    """Triangle corners plus the third points and spike on edge p1→p3.

    Returns (p1, p4, p5, p2, p6, p3): p4 and p5 split p1→p3 in thirds, p6 is
    p5 rotated 60° about p4 (rounded half up).
    """
    p1, p2, p3 = equilateral_triangle(start, size)
    p4 = Point((2 * p1.x + p3.x) // 3, (2 * p1.y + p3.y) // 3)
    p5 = Point((p1.x + 2 * p3.x) // 3, (p1.y + 2 * p3.y) // 3)
    dx, dy = p5.x - p4.x, p5.y - p4.y
    p6 = Point(
        round_half_up(p4.x + dx * 0.5 - dy * SQRT3 / 2.0),
        round_half_up(p4.y + dx * SQRT3 / 2.0 + dy * 0.5),
    )
    return p1, p4, p5, p2, p6, p3


def draw_koch_snowflake(
    image: RasterImage,
    depth: int,
    start: Sequence[int],
    size: int,
    color: Any,
    max_depth: int = DEFAULT_MAX_DEPTH
) -> None:
    """Koch-style snowflake.

    Each level draws its triangle, then recurses with size // 3 from the six
    anchors returned by koch_anchors().
    """
    color = image.coerce_sample(color)
    depth = _bounded_depth(depth, max_depth, "Koch snowflake")
    _koch(image, depth, as_point(start), int(size), color)


def _koch(image: RasterImage, depth: int, start: Point, size: int, color: Any) -> None:
    if depth <= 0:
        return

    anchors = koch_anchors(start, size)
    p1, _, _, p2, _, p3 = anchors
    draw_triangle(image, p1, p2, p3, color)

    for anchor in anchors:
        _koch(image, depth - 1, anchor, size // 3, color)


def sierpinski_anchors(start: Point, size: int):
    """Corners, edge midpoints and centroid of the base triangle.

    Returns ((p1, p2, p3), (mid12, mid23, mid31), center).
    """
    p1, p2, p3 = equilateral_triangle(start, size)
    mids = (midpoint(p1, p2), midpoint(p2, p3), midpoint(p3, p1))
    return (p1, p2, p3), mids, centroid(p1, p2, p3)


def draw_sierpinski_triangle(
    image: RasterImage,
    depth: int,
    start: Sequence[int],
    size: int,
    color: Any,
    max_depth: int = DEFAULT_MAX_DEPTH
) -> None:
    """Sierpinski-style triangle.

    Each level draws the triangle joining the edge midpoints, then recurses
    with size // 2 from five anchors: start, the three midpoints and the
    centroid.
    """
    color = image.coerce_sample(color)
    depth = _bounded_depth(depth, max_depth, "Sierpinski triangle")
    _sierpinski(image, depth, as_point(start), int(size), color)


def _sierpinski(image: RasterImage, depth: int, start: Point, size: int, color: Any) -> None:
    if depth <= 0:
        return

    _, mids, center = sierpinski_anchors(start, size)
    draw_triangle(image, *mids, color)

    for anchor in (start, *mids, center):
        _sierpinski(image, depth - 1, anchor, size // 2, color)
