"""Integer pixel-space geometry for the rasterizer.

Provides:
    - Point: (x, y) pixel coordinate, origin top-left, +Y down
    - Rounding that does not depend on banker's rounding
    - Vertex ordering and bounding boxes
    - Equilateral triangle, midpoint and centroid construction for fractals

All coordinates are integer pixels. Helpers accept plain (x, y) tuples
wherever a Point is expected.
"""

import math
from typing import Iterable, List, NamedTuple, Sequence, Tuple

SQRT3 = math.sqrt(3.0)


class Point(NamedTuple):
    """Integer pixel coordinate."""
    x: int
    y: int


def as_point(p: Sequence[int]) -> Point:
    """Coerce an (x, y) pair to a Point of ints.

    Raises
    ------
    ValueError
        If p does not have exactly two components
    """
    if len(p) != 2:
        raise ValueError(f"Expected an (x, y) pair, got {p!r}")
    return Point(int(p[0]), int(p[1]))


def round_half_up(v: float) -> int:
    """Round to nearest int, ties toward +inf (2.5 → 3, -2.5 → -2)."""
    return int(math.floor(v + 0.5))


def sort_by_y(p1: Point, p2: Point, p3: Point) -> Tuple[Point, Point, Point]:
    """Order three vertices by ascending y (stable for equal y)."""
    a, b, c = sorted((p1, p2, p3), key=lambda p: p.y)
    return a, b, c


def bounding_box(points: Iterable[Point]) -> Tuple[int, int, int, int]:
    """Return (min_x, min_y, max_x, max_y) of a non-empty point set.

    Raises
    ------
    ValueError
        If points is empty
    """
    pts = list(points)
    if not pts:
        raise ValueError("bounding_box() of an empty point set")
    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    return min(xs), min(ys), max(xs), max(ys)


def interpolate_x(a: Point, b: Point, y: int) -> float:
    """X coordinate where edge a→b crosses scanline y.

    Caller guarantees a.y != b.y.
    """
    return a.x + (y - a.y) * (b.x - a.x) / (b.y - a.y)


def equilateral_triangle(start: Point, size: int) -> Tuple[Point, Point, Point]:
    """Triangle with base start→start+(size, 0) and apex above the base.

    Apex height is truncated to an int: int(size·√3/2).
    """
    height = int(size * SQRT3 / 2.0)
    p1 = start
    p2 = Point(start.x + size, start.y)
    p3 = Point(start.x + size // 2, start.y - height)
    return p1, p2, p3


def midpoint(a: Point, b: Point) -> Point:
    """Integer midpoint (floor division, matches the fractal anchors)."""
    return Point((a.x + b.x) // 2, (a.y + b.y) // 2)


def centroid(a: Point, b: Point, c: Point) -> Point:
    """Integer centroid of a triangle."""
    return Point((a.x + b.x + c.x) // 3, (a.y + b.y + c.y) // 3)


def polygon_edges(points: Sequence[Point]) -> List[Tuple[Point, Point]]:
    """Consecutive edges plus the closing edge back to the first vertex."""
    n = len(points)
    return [(points[i], points[(i + 1) % n]) for i in range(n)]
