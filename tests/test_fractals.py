"""Test fractal generators.

Tests for pnmraster.rasterizer.fractals:
    - Depth 0 draws nothing; depth 1 draws the base triangle
    - Deeper levels only add pixels
    - Depth clamping above max_depth (with a warning)
    - Anchor construction for Koch and Sierpinski recursion
    - Off-canvas recursion is harmless

Run:
    pytest tests/test_fractals.py -v
"""

import logging

import numpy as np
import pytest

from pnmraster.image.model import RasterImage, Variant
from pnmraster.rasterizer import fractals
from pnmraster.rasterizer.primitives import draw_triangle
from pnmraster.utils.geometry import Point, equilateral_triangle

GENERATORS = [fractals.draw_koch_snowflake, fractals.draw_sierpinski_triangle]


def _canvas():
    return RasterImage.blank(128, 128, Variant.BITMAP)


# ============================================================================
# ANCHORS
# ============================================================================

def test_koch_anchor_order():
    p1, p4, p5, p2, p6, p3 = fractals.koch_anchors(Point(0, 90), 90)
    assert (p1, p2, p3) == equilateral_triangle(Point(0, 90), 90)
    assert p3 == (45, 13)
    # Thirds of the edge p1 → p3
    assert p4 == (15, 64)
    assert p5 == (30, 38)
    assert p6 == (45, 64)


def test_sierpinski_anchors():
    corners, mids, center = fractals.sierpinski_anchors(Point(0, 8), 8)
    assert corners == (Point(0, 8), Point(8, 8), Point(4, 2))
    assert mids == (Point(4, 8), Point(6, 5), Point(2, 5))
    assert center == Point(4, 6)


# ============================================================================
# DEPTH
# ============================================================================

@pytest.mark.parametrize("draw", GENERATORS)
@pytest.mark.parametrize("depth", [0, -1])
def test_depth_zero_draws_nothing(draw, depth):
    img = _canvas()
    draw(img, depth, (10, 100), 90, True)
    assert not img.samples.any()


def test_koch_depth_one_is_base_triangle():
    img, ref = _canvas(), _canvas()
    fractals.draw_koch_snowflake(img, 1, (10, 100), 90, True)
    draw_triangle(ref, *equilateral_triangle(Point(10, 100), 90), True)
    assert img == ref


def test_sierpinski_depth_one_is_midpoint_triangle():
    img, ref = _canvas(), _canvas()
    fractals.draw_sierpinski_triangle(img, 1, (10, 100), 90, True)
    _, mids, _ = fractals.sierpinski_anchors(Point(10, 100), 90)
    draw_triangle(ref, *mids, True)
    assert img == ref


@pytest.mark.parametrize("draw", GENERATORS)
def test_deeper_levels_add_pixels(draw):
    shallow, deep = _canvas(), _canvas()
    draw(shallow, 2, (10, 100), 90, True)
    draw(deep, 3, (10, 100), 90, True)
    assert np.all(deep.samples[shallow.samples])
    assert deep.samples.sum() > shallow.samples.sum()


@pytest.mark.parametrize("draw", GENERATORS)
def test_depth_clamped_to_max(draw, caplog):
    clamped, ref = _canvas(), _canvas()
    with caplog.at_level(logging.WARNING, logger="pnmraster.rasterizer.fractals"):
        draw(clamped, 50, (10, 100), 90, True, max_depth=2)
    draw(ref, 2, (10, 100), 90, True)
    assert clamped == ref
    assert any("clamping" in rec.getMessage() for rec in caplog.records)


@pytest.mark.parametrize("draw", GENERATORS)
def test_off_canvas_start(draw):
    img = _canvas()
    draw(img, 3, (-500, -500), 90, True)
    assert not img.samples.any()


def test_fractal_color_validated():
    img = RasterImage.blank(16, 16, Variant.GRAY)
    with pytest.raises(ValueError):
        fractals.draw_koch_snowflake(img, 1, (0, 15), 12, (1, 2, 3))


def test_fractal_on_color_image():
    img = RasterImage.blank(64, 64, Variant.COLOR)
    fractals.draw_sierpinski_triangle(img, 2, (4, 60), 56, (255, 0, 0))
    assert img.get_pixel(32, 60) == (255, 0, 0)
