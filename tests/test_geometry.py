"""Test integer geometry and sample arithmetic helpers.

Tests for pnmraster.utils.geometry and pnmraster.utils.color.

Run:
    pytest tests/test_geometry.py -v
"""

import numpy as np
import pytest

from pnmraster.utils import color, geometry
from pnmraster.utils.geometry import Point


# ============================================================================
# GEOMETRY
# ============================================================================

@pytest.mark.parametrize("v,expected", [(2.5, 3), (2.49, 2), (-2.5, -2), (-2.51, -3), (0.0, 0)])
def test_round_half_up(v, expected):
    assert geometry.round_half_up(v) == expected


def test_as_point():
    assert geometry.as_point((3, 4)) == Point(3, 4)
    assert geometry.as_point(np.array([1, 2])) == Point(1, 2)
    with pytest.raises(ValueError, match="pair"):
        geometry.as_point((1, 2, 3))


def test_sort_by_y_is_stable():
    a, b, c = Point(5, 1), Point(0, 1), Point(2, 0)
    assert geometry.sort_by_y(a, b, c) == (c, a, b)


def test_bounding_box():
    assert geometry.bounding_box([Point(3, -1), Point(-2, 4), Point(0, 0)]) == (-2, -1, 3, 4)
    with pytest.raises(ValueError):
        geometry.bounding_box([])


def test_interpolate_x():
    assert geometry.interpolate_x(Point(0, 0), Point(4, 4), 2) == 2.0
    assert geometry.interpolate_x(Point(4, 0), Point(0, 8), 2) == 3.0


def test_equilateral_triangle():
    p1, p2, p3 = geometry.equilateral_triangle(Point(10, 100), 90)
    assert p1 == (10, 100)
    assert p2 == (100, 100)
    assert p3 == (55, 23)


def test_midpoint_and_centroid_floor():
    assert geometry.midpoint(Point(0, 0), Point(3, 5)) == (1, 2)
    assert geometry.midpoint(Point(-1, 0), Point(0, 0)) == (-1, 0)
    assert geometry.centroid(Point(0, 0), Point(4, 0), Point(0, 4)) == (1, 1)


def test_polygon_edges_close():
    pts = [Point(0, 0), Point(1, 0), Point(1, 1)]
    assert geometry.polygon_edges(pts)[-1] == (Point(1, 1), Point(0, 0))
    assert len(geometry.polygon_edges(pts)) == 3


# ============================================================================
# COLOR
# ============================================================================

def test_luma_scalar_matches_array():
    rgb = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255], [10, 20, 30]]], dtype=np.uint8)
    expected = [color.luma(*px) for px in rgb[0].tolist()]
    assert color.luma_array(rgb).tolist() == [expected]
    assert expected == [76, 150, 29, 18]


def test_threshold_array_exact_half():
    assert color.threshold_array(np.array([1, 2]), 3).tolist() == [False, True]
    assert color.threshold_array(np.array([1, 2]), 2).tolist() == [False, True]


def test_rescale_array():
    assert color.rescale_array(np.array([0, 1, 2, 3]), 3, 255).tolist() == [0, 85, 170, 255]


@pytest.mark.parametrize("t,expected", [(0.0, 10), (1.0, 20), (0.5, 15), (0.25, 13), (-3, 10), (7, 20)])
def test_interpolate_gray(t, expected):
    assert color.interpolate_color(10, 20, t) == expected


def test_interpolate_rgb():
    assert color.interpolate_color((0, 0, 0), (255, 100, 1), 0.5) == (128, 50, 1)


def test_interpolate_bitmap():
    assert color.interpolate_color(False, True, 0.49) is False
    assert color.interpolate_color(False, True, 0.5) is True


@pytest.mark.parametrize("c1,c2", [((1, 2, 3), 4), (True, 1), ((1, 2), (3, 4))])
def test_interpolate_mixed_kinds(c1, c2):
    with pytest.raises(ValueError):
        color.interpolate_color(c1, c2, 0.5)
