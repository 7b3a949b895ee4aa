"""Whole-image transforms.

In place (same dimensions):
    - invert: bitmap negation, gray/color max_value - v per channel
    - flip_horizontal / flip_vertical / flip_and_flop: mirror the grid
    - set_encoding: switch between ASCII and binary sub-encodings (by
      Encoding or by a magic number of the same variant)
    - set_max_value: change max_value, rescaling samples to keep them ≤ max

New image:
    - rotate_90_cw: dimensions swap, new[x][height-1-y] = old[y][x]
    - color_to_gray: luma = round(0.299 R + 0.587 G + 0.114 B)
    - gray_to_bitmap / color_to_bitmap: sample > max_value / 2 → True

Downconversions inherit the source encoding; gray output inherits max_value.
Functions that only make sense for one variant raise ValueError otherwise.
"""

import logging
from typing import Union

import numpy as np

from ..utils import color as color_utils
from .model import FORMATS, Encoding, RasterImage, Variant

logger = logging.getLogger(__name__)


def _require(image: RasterImage, variant: Variant, op: str) -> None:
    if image.variant is not variant:
        raise ValueError(
            f"{op}() needs a {variant.value} image, got {image.variant.value}"
        )


def invert(image: RasterImage) -> RasterImage:
    """Invert every sample in place and return the image.

    Bitmap flips each bool; gray and color compute max_value - v exactly.
    """
    if image.variant is Variant.BITMAP:
        np.logical_not(image.samples, out=image.samples)
    else:
        image.samples[...] = image.max_value - image.samples
    return image


def flip_horizontal(image: RasterImage) -> RasterImage:
    """Mirror left ↔ right in place."""
    image.samples[...] = image.samples[:, ::-1].copy()
    return image


def flip_vertical(image: RasterImage) -> RasterImage:
    """Mirror top ↔ bottom in place."""
    image.samples[...] = image.samples[::-1].copy()
    return image


def flip_and_flop(image: RasterImage) -> RasterImage:
    """Both mirrors at once (a 180° turn), in place."""
    image.samples[...] = image.samples[::-1, ::-1].copy()
    return image


def rotate_90_cw(image: RasterImage) -> RasterImage:
    """Rotate 90° clockwise into a new image; the input is untouched.

    new_width = old_height, new_height = old_width and
    new[x][old_height - 1 - y] = old[y][x].
    """
    rotated = np.rot90(image.samples, k=-1).copy()
    return RasterImage(
        image.variant, image.height, image.width, rotated,
        encoding=image.encoding, max_value=image.max_value
    )


def color_to_gray(image: RasterImage) -> RasterImage:
    """Luma conversion of a color image (Rec. 601 weights, round half up)."""
    _require(image, Variant.COLOR, "color_to_gray")
    gray = color_utils.luma_array(image.samples)
    # Weights sum to 1, so luma never exceeds max_value
    return RasterImage(
        Variant.GRAY, image.width, image.height, gray,
        encoding=image.encoding, max_value=image.max_value
    )


def gray_to_bitmap(image: RasterImage) -> RasterImage:
    """Threshold a gray image: sample > max_value / 2 → True."""
    _require(image, Variant.GRAY, "gray_to_bitmap")
    bits = color_utils.threshold_array(image.samples, image.max_value)
    return RasterImage(Variant.BITMAP, image.width, image.height, bits, encoding=image.encoding)


def color_to_bitmap(image: RasterImage) -> RasterImage:
    """Threshold the exact RGB mean: (R + G + B) / 3 > max_value / 2 → True."""
    _require(image, Variant.COLOR, "color_to_bitmap")
    mean = image.samples.astype(np.float64).mean(axis=2)
    bits = color_utils.threshold_array(mean, image.max_value)
    return RasterImage(Variant.BITMAP, image.width, image.height, bits, encoding=image.encoding)


def to_variant(image: RasterImage, variant: Variant) -> RasterImage:
    """Downconvert along color → gray → bitmap; same variant returns a copy.

    Raises
    ------
    ValueError
        For upconversions (bitmap → gray, gray → color, ...)
    """
    variant = Variant(variant)
    if image.variant is variant:
        return image.copy()
    if image.variant is Variant.COLOR and variant is Variant.GRAY:
        return color_to_gray(image)
    if image.variant is Variant.COLOR and variant is Variant.BITMAP:
        return color_to_bitmap(image)
    if image.variant is Variant.GRAY and variant is Variant.BITMAP:
        return gray_to_bitmap(image)
    raise ValueError(
        f"Cannot convert {image.variant.value} to {variant.value}: only downconversion is supported"
    )


def set_encoding(image: RasterImage, encoding: Union[Encoding, str]) -> RasterImage:
    """Switch between ASCII and binary sub-encodings in place.

    Parameters
    ----------
    encoding : Encoding or str
        An Encoding, its value ("ascii"/"binary"), or a magic number
        "P1".."P6" of the image's own variant

    Raises
    ------
    ValueError
        If a magic number names a different variant, or the value is unknown
    """
    spec = FORMATS.get(encoding) if isinstance(encoding, str) else None
    if spec is not None:
        if spec.variant is not image.variant:
            raise ValueError(
                f"Magic number {spec.magic} is a {spec.variant.value} format, "
                f"image is {image.variant.value}"
            )
        encoding = spec.encoding
    image.encoding = Encoding(encoding)
    return image


def set_max_value(image: RasterImage, max_value: int) -> RasterImage:
    """Change max_value in place, rescaling samples proportionally.

    Raises
    ------
    ValueError
        For bitmaps, or max_value outside [1, 255]
    """
    if image.variant is Variant.BITMAP:
        raise ValueError("Bitmap images have no max_value")
    if isinstance(max_value, bool) or not isinstance(max_value, (int, np.integer)) \
            or not 1 <= max_value <= 255:
        raise ValueError(f"max_value must be in [1, 255], got {max_value!r}")

    if max_value != image.max_value:
        logger.debug(f"Rescaling samples from max {image.max_value} to {max_value}")
        image.samples[...] = color_utils.rescale_array(image.samples, image.max_value, max_value)
        image.max_value = int(max_value)
    return image
