"""Test gradient noise.

Tests for pnmraster.rasterizer.noise:
    - noise_field shape and value range for sizes that are not cell multiples
    - Determinism with a seeded RandomState
    - Blending onto bitmap, gray and color images
    - Invalid cell size

Run:
    pytest tests/test_noise.py -v
"""

import numpy as np
import pytest

from pnmraster.image.model import RasterImage, Variant
from pnmraster.rasterizer import noise


@pytest.mark.parametrize("width,height,cell", [(32, 32, 8), (13, 7, 4), (1, 1, 8), (5, 40, 1)])
def test_noise_field_shape_and_range(width, height, cell):
    field = noise.noise_field(width, height, np.random.RandomState(0), cell)
    assert field.shape == (height, width)
    assert np.all(field >= -1.0) and np.all(field <= 1.0)


def test_noise_field_varies():
    field = noise.noise_field(64, 64, 3, cell_size=8)
    assert np.ptp(field) > 0.1


def test_noise_field_deterministic():
    a = noise.noise_field(20, 10, np.random.RandomState(7))
    b = noise.noise_field(20, 10, 7)
    assert np.array_equal(a, b)


def test_noise_field_seed_matters():
    assert not np.array_equal(noise.noise_field(16, 16, 1), noise.noise_field(16, 16, 2))


def test_gradient_grid_unit_vectors():
    grid = noise.gradient_grid(3, 4, 0)
    assert grid.shape == (3, 4, 2)
    assert np.allclose(np.linalg.norm(grid, axis=-1), 1.0)


@pytest.mark.parametrize("cell", [0, -4])
def test_invalid_cell_size(cell):
    with pytest.raises(ValueError, match="cell_size"):
        noise.noise_field(8, 8, 0, cell)


def test_gray_blend_stays_between_colors():
    img = RasterImage.blank(24, 16, Variant.GRAY)
    t = noise.draw_perlin_noise(img, 100, 200, rng=5)
    assert t.shape == (16, 24)
    assert np.all((t >= 0.0) & (t <= 1.0))
    assert img.samples.min() >= 100
    assert img.samples.max() <= 200


def test_bitmap_blend_follows_half_threshold():
    img = RasterImage.blank(24, 16, Variant.BITMAP)
    t = noise.draw_perlin_noise(img, False, True, rng=5)
    assert np.array_equal(img.samples, t >= 0.5)


def test_color_blend_per_channel():
    img = RasterImage.blank(10, 10, Variant.COLOR, max_value=100)
    noise.draw_perlin_noise(img, (0, 100, 50), (100, 0, 50), rng=1, cell_size=4)
    assert np.all(img.samples[..., 2] == 50)
    assert img.samples[..., 0].max() <= 100
    assert img.samples[..., 1].max() <= 100


def test_draw_is_deterministic():
    a = RasterImage.blank(16, 16, Variant.GRAY)
    b = RasterImage.blank(16, 16, Variant.GRAY)
    noise.draw_perlin_noise(a, 0, 255, rng=np.random.RandomState(9))
    noise.draw_perlin_noise(b, 0, 255, rng=np.random.RandomState(9))
    assert a == b


def test_invalid_colors_rejected():
    img = RasterImage.blank(4, 4, Variant.GRAY, max_value=10)
    with pytest.raises(ValueError):
        noise.draw_perlin_noise(img, 0, 11, rng=0)
