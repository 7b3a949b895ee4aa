"""Test raster primitives.

Tests for pnmraster.rasterizer.primitives:
    - Bresenham lines: endpoints, symmetry, degenerate single pixel
    - Rectangle outline and half-open filled rectangle
    - Midpoint circle outline and filled disc
    - Triangle outline and scanline fill (flat top / flat bottom / degenerate)
    - Polygon outline, even-odd filled polygon and span pairing
    - Off-canvas clipping and color validation

Run:
    pytest tests/test_primitives.py -v
"""

import logging

import numpy as np
import pytest

from pnmraster.image.model import RasterImage, Variant
from pnmraster.rasterizer import primitives as P


def _canvas(width=10, height=10):
    return RasterImage.blank(width, height, Variant.GRAY)


def _lit(image):
    """Set of (x, y) with a non-zero sample."""
    return {(int(x), int(y)) for y, x in np.argwhere(image.samples > 0)}


# ============================================================================
# LINES
# ============================================================================

def test_line_single_pixel():
    img = _canvas()
    P.draw_line(img, (3, 4), (3, 4), 9)
    assert _lit(img) == {(3, 4)}


def test_horizontal_line_fills_row():
    img = _canvas(4, 1)
    P.draw_line(img, (0, 0), (3, 0), 1)
    assert img.to_rows() == [[1, 1, 1, 1]]


def test_line_includes_both_endpoints():
    pts = P.line_points((1, 7), (8, 2))
    assert pts[0] == (1, 7)
    assert pts[-1] == (8, 2)


@pytest.mark.parametrize("a,b", [
    ((0, 0), (7, 3)),
    ((2, 9), (5, 0)),
    ((9, 1), (0, 4)),
    ((4, 4), (4, 0)),
])
def test_line_is_symmetric(a, b):
    assert set(P.line_points(a, b)) == set(P.line_points(b, a))


def test_line_is_eight_connected():
    pts = P.line_points((0, 0), (9, 4))
    assert len(pts) == 10
    for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
        assert max(abs(x1 - x0), abs(y1 - y0)) == 1


def test_line_clipped_to_canvas():
    img = _canvas(4, 4)
    P.draw_line(img, (-5, -5), (10, 10), 1)
    assert _lit(img) == {(0, 0), (1, 1), (2, 2), (3, 3)}


def test_invalid_color_raises_even_off_canvas():
    img = _canvas(4, 4)
    with pytest.raises(ValueError):
        P.draw_line(img, (100, 100), (200, 200), 300)


# ============================================================================
# RECTANGLES
# ============================================================================

def test_rectangle_outline():
    img = _canvas(5, 5)
    P.draw_rectangle(img, (0, 0), 3, 2, 1)
    expected = {(x, 0) for x in range(4)} | {(x, 2) for x in range(4)} | {(0, 1), (3, 1)}
    assert _lit(img) == expected


def test_filled_rectangle_whole_canvas():
    img = _canvas(3, 3)
    P.draw_filled_rectangle(img, (0, 0), 3, 3, 5)
    assert img.to_rows() == [[5, 5, 5]] * 3


def test_filled_rectangle_half_open():
    img = _canvas(5, 5)
    P.draw_filled_rectangle(img, (1, 1), 2, 1, 1)
    assert _lit(img) == {(1, 1), (2, 1)}


def test_filled_rectangle_clipped():
    img = _canvas(5, 5)
    P.draw_filled_rectangle(img, (-1, -1), 3, 3, 1)
    assert _lit(img) == {(0, 0), (1, 0), (0, 1), (1, 1)}


@pytest.mark.parametrize("w,h", [(0, 3), (3, 0), (-2, 2)])
def test_filled_rectangle_empty_sizes(w, h):
    img = _canvas()
    P.draw_filled_rectangle(img, (2, 2), w, h, 1)
    assert not _lit(img)


# ============================================================================
# CIRCLES
# ============================================================================

def test_circle_radius_two():
    img = _canvas()
    P.draw_circle(img, (5, 5), 2, 1)
    assert _lit(img) == {
        (7, 5), (3, 5), (5, 7), (5, 3),
        (7, 6), (7, 4), (3, 6), (3, 4),
        (6, 7), (4, 7), (6, 3), (4, 3),
    }


@pytest.mark.parametrize("radius", [3, 5, 10, 20])
def test_circle_pixels_within_half_pixel_of_radius(radius):
    size = 2 * radius + 3
    c = radius + 1
    img = _canvas(size, size)
    P.draw_circle(img, (c, c), radius, 1)
    lit = _lit(img)
    assert {(c + radius, c), (c - radius, c), (c, c + radius), (c, c - radius)} <= lit
    for x, y in lit:
        assert abs(np.hypot(x - c, y - c) - radius) <= 0.5


def test_circle_radius_zero_and_negative():
    img = _canvas()
    P.draw_circle(img, (5, 5), 0, 1)
    assert _lit(img) == {(5, 5)}

    img = _canvas()
    P.draw_circle(img, (5, 5), -3, 1)
    assert not _lit(img)


def test_filled_circle_radius_zero():
    img = _canvas()
    P.draw_filled_circle(img, (2, 3), 0, 1)
    assert _lit(img) == {(2, 3)}


def test_filled_circle_radius_one():
    img = _canvas()
    P.draw_filled_circle(img, (5, 5), 1, 1)
    assert _lit(img) == {(5, 5), (4, 5), (6, 5), (5, 4), (5, 6)}


def test_filled_circle_contains_outline():
    outline, disc = _canvas(20, 20), _canvas(20, 20)
    P.draw_circle(outline, (10, 10), 6, 1)
    P.draw_filled_circle(disc, (10, 10), 6, 1)
    lit = _lit(disc)
    assert all((x - 10) ** 2 + (y - 10) ** 2 <= 36 for x, y in lit)
    assert (10, 10) in lit and (16, 10) in lit


def test_filled_circle_partially_off_canvas():
    img = _canvas(4, 4)
    P.draw_filled_circle(img, (0, 0), 2, 1)
    assert _lit(img) == {(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (0, 2)}


# ============================================================================
# TRIANGLES
# ============================================================================

def test_triangle_outline_hits_vertices():
    img = _canvas()
    P.draw_triangle(img, (1, 1), (8, 2), (4, 8), 1)
    assert {(1, 1), (8, 2), (4, 8)} <= _lit(img)


def test_filled_triangle_flat_bottom():
    img = _canvas(5, 3)
    P.draw_filled_triangle(img, (2, 0), (0, 2), (4, 2), 1)
    assert img.to_rows() == [
        [0, 0, 1, 0, 0],
        [0, 1, 1, 1, 0],
        [1, 1, 1, 1, 1],
    ]


def test_filled_triangle_flat_top():
    img = _canvas(5, 3)
    P.draw_filled_triangle(img, (0, 0), (4, 0), (2, 2), 1)
    assert img.to_rows() == [
        [1, 1, 1, 1, 1],
        [0, 1, 1, 1, 0],
        [0, 0, 1, 0, 0],
    ]


def test_filled_triangle_vertex_order_irrelevant():
    a, b = _canvas(), _canvas()
    P.draw_filled_triangle(a, (1, 1), (8, 3), (3, 8), 1)
    P.draw_filled_triangle(b, (3, 8), (1, 1), (8, 3), 1)
    assert a == b


def test_filled_triangle_degenerate():
    img = _canvas()
    P.draw_filled_triangle(img, (4, 4), (4, 4), (4, 4), 1)
    assert _lit(img) == {(4, 4)}

    img = _canvas()
    P.draw_filled_triangle(img, (0, 2), (4, 2), (2, 2), 1)
    assert _lit(img) == {(x, 2) for x in range(5)}


# ============================================================================
# POLYGONS
# ============================================================================

def test_polygon_outline_closes():
    img = _canvas()
    P.draw_polygon(img, [(0, 0), (4, 0), (4, 4)], 1)
    # Closing edge (4, 4) → (0, 0)
    assert {(1, 1), (2, 2), (3, 3)} <= _lit(img)


def test_polygon_degenerate_inputs():
    img = _canvas()
    P.draw_polygon(img, [], 1)
    assert not _lit(img)
    P.draw_polygon(img, [(3, 3)], 1)
    assert _lit(img) == {(3, 3)}


def test_filled_polygon_matches_filled_rectangle():
    poly, rect = _canvas(), _canvas()
    P.draw_filled_polygon(poly, [(1, 1), (4, 1), (4, 3), (1, 3)], 1)
    P.draw_filled_rectangle(rect, (1, 1), 3, 2, 1)
    assert poly == rect
    assert _lit(poly) == {(x, y) for x in (1, 2, 3) for y in (1, 2)}


def test_filled_polygon_needs_three_points():
    img = _canvas()
    P.draw_filled_polygon(img, [(0, 0), (5, 5)], 1)
    assert not _lit(img)


def test_filled_polygon_concave():
    img = _canvas(7, 5)
    # U shape: notch between x=2 and x=4 from the top down to y=2
    P.draw_filled_polygon(
        img, [(0, 0), (2, 0), (2, 2), (4, 2), (4, 0), (6, 0), (6, 4), (0, 4)], 1
    )
    assert img.to_rows() == [
        [1, 1, 0, 0, 1, 1, 0],
        [1, 1, 0, 0, 1, 1, 0],
        [1, 1, 1, 1, 1, 1, 0],
        [1, 1, 1, 1, 1, 1, 0],
        [0, 0, 0, 0, 0, 0, 0],
    ]


def test_scanline_intersections_half_open():
    pts = [P.Point(0, 0), P.Point(4, 0), P.Point(4, 4), P.Point(0, 4)]
    assert P.scanline_intersections(pts, 0) == [0.0, 4.0]
    assert P.scanline_intersections(pts, 4) == []


def test_pair_intersections():
    assert P.pair_intersections([0.0, 4.0, 6.0, 9.5]) == [(0.0, 4.0), (6.0, 9.5)]
    assert P.pair_intersections([]) == []


def test_pair_intersections_drops_odd_trailing(caplog):
    with caplog.at_level(logging.DEBUG, logger="pnmraster.rasterizer.primitives"):
        assert P.pair_intersections([1.0, 3.0, 5.0]) == [(1.0, 3.0)]
    assert "Odd intersection count 3" in caplog.text


def test_bitmap_and_color_targets():
    bitmap = RasterImage.blank(3, 1, Variant.BITMAP)
    P.draw_line(bitmap, (0, 0), (2, 0), True)
    assert bitmap.to_rows() == [[True, True, True]]

    color = RasterImage.blank(2, 2, Variant.COLOR)
    P.draw_filled_rectangle(color, (0, 0), 2, 2, (1, 2, 3))
    assert color.to_rows() == [[(1, 2, 3), (1, 2, 3)], [(1, 2, 3), (1, 2, 3)]]
