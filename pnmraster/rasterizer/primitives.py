"""Integer rasterization of lines, rectangles, circles, triangles and polygons.

Every primitive validates its color once with RasterImage.coerce_sample() and
then writes through RasterImage.set_pixel(), so off-canvas pixels are dropped
rather than raising. Loops over spans are clipped to the canvas first; this
only skips pixels set_pixel() would drop anyway.

Fill rules:
    - draw_filled_rectangle: [x, x+w) × [y, y+h)
    - draw_filled_circle: dx² + dy² ≤ r² over the bounding box
    - draw_filled_triangle: inclusive spans between the two interpolated
      boundary x values on every scanline from min y to max y
    - draw_filled_polygon: half-open edges (min_y ≤ y < max_y) and half-open
      spans (ceil(x0) ≤ x < ceil(x1)); a rectangle's four corners fill the
      same pixels as draw_filled_rectangle with that origin and size

Degenerate cases:
    - line with p1 == p2 → one pixel
    - triangle edges with equal y never divide by zero (explicit branches)
    - polygon scanline with an odd intersection count → the unmatched last
      intersection is dropped
"""

import logging
import math
from typing import Any, List, Sequence, Tuple

from ..image.model import RasterImage
from ..utils.geometry import (
    Point,
    as_point,
    bounding_box,
    interpolate_x,
    polygon_edges,
    round_half_up,
    sort_by_y,
)

logger = logging.getLogger(__name__)


def line_points(p1: Sequence[int], p2: Sequence[int]) -> List[Point]:
    """Bresenham path from p1 to p2, both endpoints included.

    Endpoints are put in (x, y) lexicographic order before stepping, so
    line_points(a, b) and line_points(b, a) visit the same pixels.
    """
    a, b = as_point(p1), as_point(p2)
    if b < a:
        a, b = b, a

    x, y = a
    dx = abs(b.x - a.x)
    dy = -abs(b.y - a.y)
    sx = 1 if a.x < b.x else -1
    sy = 1 if a.y < b.y else -1
    err = dx + dy

    points = []
    while True:
        points.append(Point(x, y))
        if x == b.x and y == b.y:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
    return points


def _hspan(image: RasterImage, x0: int, x1: int, y: int, color: Any) -> None:
    """Inclusive horizontal run x0..x1 on row y."""
    if not 0 <= y < image.height:
        return
    lo, hi = min(x0, x1), max(x0, x1)
    for x in range(max(lo, 0), min(hi, image.width - 1) + 1):
        image.set_pixel(x, y, color)


def draw_line(image: RasterImage, p1: Sequence[int], p2: Sequence[int], color: Any) -> None:
    """8-connected Bresenham line, endpoints inclusive."""
    color = image.coerce_sample(color)
    for x, y in line_points(p1, p2):
        image.set_pixel(x, y, color)


def draw_rectangle(
    image: RasterImage,
    origin: Sequence[int],
    width: int,
    height: int,
    color: Any
) -> None:
    """Outline through the corners origin, +(w, 0), +(w, h) and +(0, h)."""
    p1 = as_point(origin)
    p2 = Point(p1.x + width, p1.y)
    p3 = Point(p1.x + width, p1.y + height)
    p4 = Point(p1.x, p1.y + height)

    draw_line(image, p1, p2, color)
    draw_line(image, p2, p3, color)
    draw_line(image, p3, p4, color)
    draw_line(image, p4, p1, color)


def draw_filled_rectangle(
    image: RasterImage,
    origin: Sequence[int],
    width: int,
    height: int,
    color: Any
) -> None:
    """Every pixel of [x, x+width) × [y, y+height); empty for sizes ≤ 0."""
    color = image.coerce_sample(color)
    ox, oy = as_point(origin)
    if width <= 0 or height <= 0:
        return

    for y in range(max(oy, 0), min(oy + height, image.height)):
        _hspan(image, ox, ox + width - 1, y, color)


def draw_circle(image: RasterImage, center: Sequence[int], radius: int, color: Any) -> None:
    """Midpoint circle outline using 8-way symmetry.

    Walks the octant from (r, 0) toward the diagonal with the integer
    decision variable d = 1 - r: while d < 0 the midpoint between x and x - 1
    lies inside the circle and x is kept, otherwise x steps inward. Every
    lit pixel is within half a pixel of the true radius.

    Radius 0 draws the center; a negative radius draws nothing.
    """
    color = image.coerce_sample(color)
    cx, cy = as_point(center)

    x = int(radius)
    y = 0
    d = 1 - x
    while x >= y:
        for px, py in (
            (cx + x, cy + y), (cx + y, cy + x),
            (cx - y, cy + x), (cx - x, cy + y),
            (cx - x, cy - y), (cx - y, cy - x),
            (cx + y, cy - x), (cx + x, cy - y),
        ):
            image.set_pixel(px, py, color)

        y += 1
        if d < 0:
            d += 2 * y + 1
        else:
            x -= 1
            d += 2 * (y - x) + 1


def draw_filled_circle(image: RasterImage, center: Sequence[int], radius: int, color: Any) -> None:
    """Disc of pixels with dx² + dy² ≤ r²; radius 0 sets only the center."""
    color = image.coerce_sample(color)
    cx, cy = as_point(center)
    r = int(radius)
    if r < 0:
        return

    r2 = r * r
    for dy in range(-r, r + 1):
        y = cy + dy
        if not 0 <= y < image.height:
            continue
        for dx in range(-r, r + 1):
            if dx * dx + dy * dy <= r2:
                image.set_pixel(cx + dx, y, color)


def draw_triangle(
    image: RasterImage,
    p1: Sequence[int],
    p2: Sequence[int],
    p3: Sequence[int],
    color: Any
) -> None:
    """Three-line outline."""
    draw_line(image, p1, p2, color)
    draw_line(image, p2, p3, color)
    draw_line(image, p3, p1, color)


def draw_filled_triangle(
    image: RasterImage,
    p1: Sequence[int],
    p2: Sequence[int],
    p3: Sequence[int],
    color: Any
) -> None:
    """Scanline fill split at the middle vertex.

    Vertices are sorted by y into top, mid, bottom. The long edge top→bottom
    bounds one side on every scanline; the other side follows top→mid above
    the middle vertex and mid→bottom from it downward. Boundary x values are
    rounded half up and the span between them is inclusive.
    """
    color = image.coerce_sample(color)
    top, mid, bottom = sort_by_y(as_point(p1), as_point(p2), as_point(p3))

    if top.y == bottom.y:
        # All three vertices on one scanline
        xs = (top.x, mid.x, bottom.x)
        _hspan(image, min(xs), max(xs), top.y, color)
        return

    for y in range(max(top.y, 0), min(bottom.y, image.height - 1) + 1):
        x_long = interpolate_x(top, bottom, y)
        if y < mid.y:
            x_short = interpolate_x(top, mid, y)
        elif mid.y == bottom.y:
            # Flat bottom edge: only reached on the last scanline
            x_short = float(mid.x)
        else:
            x_short = interpolate_x(mid, bottom, y)
        _hspan(image, round_half_up(x_long), round_half_up(x_short), y, color)


def draw_polygon(image: RasterImage, points: Sequence[Sequence[int]], color: Any) -> None:
    """Outline through consecutive vertices plus the closing edge."""
    pts = [as_point(p) for p in points]
    if not pts:
        return
    if len(pts) == 1:
        draw_line(image, pts[0], pts[0], color)
        return
    for a, b in polygon_edges(pts):
        draw_line(image, a, b, color)


def scanline_intersections(points: Sequence[Point], y: int) -> List[float]:
    """Sorted x crossings of scanline y with the polygon's edges.

    An edge contributes when min(y1, y2) ≤ y < max(y1, y2); horizontal
    edges never do.
    """
    xs = [
        interpolate_x(a, b, y)
        for a, b in polygon_edges(points)
        if min(a.y, b.y) <= y < max(a.y, b.y)
    ]
    xs.sort()
    return xs


def pair_intersections(xs: Sequence[float]) -> List[Tuple[float, float]]:
    """Pair sorted crossings (x0, x1), (x2, x3), ... into fill spans.

    An odd count has no partner for the last crossing; it is dropped.
    """
    if len(xs) % 2:
        logger.debug(f"Odd intersection count {len(xs)}; dropping x={xs[-1]:.2f}")
        xs = xs[:-1]
    return list(zip(xs[0::2], xs[1::2]))


def draw_filled_polygon(image: RasterImage, points: Sequence[Sequence[int]], color: Any) -> None:
    """Active-edge scanline fill with even-odd span pairing.

    For each scanline from min y to max y, intersections are paired
    (x0, x1), (x2, x3), ... and pixels ceil(x0) ≤ x < ceil(x1) are set.
    An odd count drops the trailing intersection.
    """
    color = image.coerce_sample(color)
    pts = [as_point(p) for p in points]
    if len(pts) < 3:
        return

    _, min_y, _, max_y = bounding_box(pts)
    for y in range(max(min_y, 0), min(max_y, image.height - 1) + 1):
        for x0, x1 in pair_intersections(scanline_intersections(pts, y)):
            start = max(math.ceil(x0), 0)
            stop = min(math.ceil(x1), image.width)
            for x in range(start, stop):
                image.set_pixel(x, y, color)
