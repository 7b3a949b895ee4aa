"""In-memory raster image for the Netpbm family.

A RasterImage owns a numpy sample array plus the metadata the codec needs:

    Variant.BITMAP → bool  array (H, W)         P1 / P4
    Variant.GRAY   → uint8 array (H, W)         P2 / P5
    Variant.COLOR  → uint8 array (H, W, 3)      P3 / P6

Invariants (checked on construction):
    - samples.shape[:2] == (height, width)
    - gray/color components ≤ max_value, with 1 ≤ max_value ≤ 255
    - bitmaps carry no max_value

The encoding (ASCII or binary) only matters to the codec; transforms and the
rasterizer never look at it.

Pixel access goes through get_pixel()/set_pixel(). Coordinates outside
[0, width) × [0, height) read as None and are dropped on write, so drawing
code can step off-canvas freely.
"""

from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

MAX_SAMPLE_VALUE = 255


class Variant(Enum):
    """Sample kind of an image."""
    BITMAP = "bitmap"
    GRAY = "gray"
    COLOR = "color"


class Encoding(Enum):
    """On-disk sample layout."""
    ASCII = "ascii"
    BINARY = "binary"


class FormatSpec(NamedTuple):
    """One row of the magic-number table."""
    magic: str
    variant: Variant
    encoding: Encoding
    channels: int
    has_max_value: bool


FORMATS: Dict[str, FormatSpec] = {
    'P1': FormatSpec('P1', Variant.BITMAP, Encoding.ASCII, 1, False),
    'P2': FormatSpec('P2', Variant.GRAY, Encoding.ASCII, 1, True),
    'P3': FormatSpec('P3', Variant.COLOR, Encoding.ASCII, 3, True),
    'P4': FormatSpec('P4', Variant.BITMAP, Encoding.BINARY, 1, False),
    'P5': FormatSpec('P5', Variant.GRAY, Encoding.BINARY, 1, True),
    'P6': FormatSpec('P6', Variant.COLOR, Encoding.BINARY, 3, True),
}

_BY_KIND = {(spec.variant, spec.encoding): spec for spec in FORMATS.values()}


def format_for(variant: Variant, encoding: Encoding) -> FormatSpec:
    """Look up the table row for a (variant, encoding) pair."""
    return _BY_KIND[(Variant(variant), Encoding(encoding))]


def _is_int(v: Any) -> bool:
    return isinstance(v, (int, np.integer)) and not isinstance(v, (bool, np.bool_))


class RasterImage:
    """Netpbm raster: a sample grid with its dimensions and format metadata.

    Parameters
    ----------
    variant : Variant
        Bitmap, gray or color
    width, height : int
        Positive dimensions in pixels
    samples : array-like, optional
        Initial samples; zero-filled when omitted. Accepts anything
        np.asarray understands, including nested lists of RGB tuples.
    encoding : Encoding
        ASCII (default) or binary sub-encoding
    max_value : int, optional
        Gray/color intensity bound (default 255); must be None for bitmaps

    Raises
    ------
    ValueError
        If dimensions, max_value or samples break the invariants
    """

    def __init__(
        self,
        variant: Variant,
        width: int,
        height: int,
        samples: Optional[Any] = None,
        *,
        encoding: Encoding = Encoding.ASCII,
        max_value: Optional[int] = None
    ):
        self.variant = Variant(variant)
        self.encoding = Encoding(encoding)

        if not _is_int(width) or not _is_int(height) or width <= 0 or height <= 0:
            raise ValueError(f"Dimensions must be positive ints, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)

        if self.variant is Variant.BITMAP:
            if max_value is not None:
                raise ValueError("Bitmap images have no max_value")
            self.max_value = None
        else:
            if max_value is None:
                max_value = MAX_SAMPLE_VALUE
            if not _is_int(max_value) or not 1 <= max_value <= MAX_SAMPLE_VALUE:
                raise ValueError(
                    f"max_value must be in [1, {MAX_SAMPLE_VALUE}], got {max_value!r}"
                )
            self.max_value = int(max_value)

        if samples is None:
            self.samples = np.zeros(self.expected_shape, dtype=self.dtype)
        else:
            self.samples = self._validated_samples(samples)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        variant: Variant = Variant.COLOR,
        *,
        encoding: Encoding = Encoding.ASCII,
        max_value: Optional[int] = None
    ) -> 'RasterImage':
        """Zero-initialized image (all False / all 0)."""
        return cls(variant, width, height, encoding=encoding, max_value=max_value)

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Any]],
        variant: Variant,
        *,
        encoding: Encoding = Encoding.ASCII,
        max_value: Optional[int] = None
    ) -> 'RasterImage':
        """Build from nested rows, e.g. [[True, False], [False, True]].

        Raises
        ------
        ValueError
            If rows are empty or ragged
        """
        if not rows or not rows[0]:
            raise ValueError("from_rows() needs at least one non-empty row")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("from_rows() got rows of different lengths")
        return cls(variant, width, len(rows), rows, encoding=encoding, max_value=max_value)

    def _validated_samples(self, samples: Any) -> np.ndarray:
        arr = np.asarray(samples)
        if arr.shape != self.expected_shape:
            raise ValueError(
                f"samples shape {arr.shape} does not match {self.expected_shape} "
                f"for a {self.width}x{self.height} {self.variant.value} image"
            )

        if self.variant is Variant.BITMAP:
            if arr.dtype != np.bool_:
                if arr.size and not np.isin(arr, (0, 1)).all():
                    raise ValueError("Bitmap samples must be 0/1 or bool")
            return arr.astype(np.bool_)

        if arr.dtype == np.bool_ or not np.issubdtype(arr.dtype, np.integer):
            raise ValueError(f"{self.variant.value} samples must be integers, got {arr.dtype}")
        if arr.size and (arr.min() < 0 or arr.max() > self.max_value):
            raise ValueError(
                f"samples must lie in [0, {self.max_value}], "
                f"got [{arr.min()}, {arr.max()}]"
            )
        return arr.astype(np.uint8)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def expected_shape(self) -> Tuple[int, ...]:
        if self.variant is Variant.COLOR:
            return (self.height, self.width, 3)
        return (self.height, self.width)

    @property
    def dtype(self) -> type:
        return np.bool_ if self.variant is Variant.BITMAP else np.uint8

    @property
    def format(self) -> FormatSpec:
        return format_for(self.variant, self.encoding)

    @property
    def magic_number(self) -> str:
        return self.format.magic

    def size(self) -> Tuple[int, int]:
        """(width, height)."""
        return self.width, self.height

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def coerce_sample(self, value: Any) -> Any:
        """Validate a color for this image and return it in canonical form.

        Bitmap → bool, gray → int, color → (r, g, b) tuple of ints.

        Raises
        ------
        ValueError
            If the value is the wrong kind or exceeds max_value
        """
        if self.variant is Variant.BITMAP:
            if isinstance(value, (bool, np.bool_)):
                return bool(value)
            if _is_int(value) and value in (0, 1):
                return bool(value)
            raise ValueError(f"Bitmap sample must be bool or 0/1, got {value!r}")

        if self.variant is Variant.GRAY:
            if not _is_int(value) or not 0 <= value <= self.max_value:
                raise ValueError(
                    f"Gray sample must be an int in [0, {self.max_value}], got {value!r}"
                )
            return int(value)

        try:
            r, g, b = value
        except (TypeError, ValueError) as e:
            raise ValueError(f"Color sample must be an (r, g, b) triplet, got {value!r}") from e
        for c in (r, g, b):
            if not _is_int(c) or not 0 <= c <= self.max_value:
                raise ValueError(
                    f"Color components must be ints in [0, {self.max_value}], got {value!r}"
                )
        return int(r), int(g), int(b)

    def get_pixel(self, x: int, y: int) -> Any:
        """Sample at (x, y), or None when off-canvas."""
        if not self.in_bounds(x, y):
            return None
        v = self.samples[y, x]
        if self.variant is Variant.BITMAP:
            return bool(v)
        if self.variant is Variant.GRAY:
            return int(v)
        return int(v[0]), int(v[1]), int(v[2])

    def set_pixel(self, x: int, y: int, value: Any) -> None:
        """Write one sample; off-canvas coordinates are silently dropped.

        Raises
        ------
        ValueError
            If value is not a valid sample for this image
        """
        if not self.in_bounds(x, y):
            return
        self.samples[y, x] = self.coerce_sample(value)

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def to_rows(self) -> List[List[Any]]:
        """Samples as nested Python lists (bool, int or RGB tuples)."""
        if self.variant is Variant.COLOR:
            return [[tuple(int(c) for c in px) for px in row] for row in self.samples]
        return self.samples.tolist()

    def copy(self) -> 'RasterImage':
        return RasterImage(
            self.variant, self.width, self.height, self.samples.copy(),
            encoding=self.encoding, max_value=self.max_value
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return (
            self.variant is other.variant
            and self.encoding is other.encoding
            and self.size() == other.size()
            and self.max_value == other.max_value
            and np.array_equal(self.samples, other.samples)
        )

    __hash__ = None

    def __repr__(self) -> str:
        mv = f", max_value={self.max_value}" if self.max_value is not None else ""
        return f"RasterImage({self.magic_number}, {self.width}x{self.height}{mv})"
