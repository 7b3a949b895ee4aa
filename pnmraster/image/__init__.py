"""Netpbm image model, codec and whole-image transforms.

Modules:
    - model: RasterImage, Variant, Encoding and the magic-number table
    - codec: decode/encode bytes, load/save files
    - transform: invert, flip, rotate, downconvert, re-encode
    - errors: ParseError hierarchy and ImageIOError

Data flow:
    bytes → codec.decode → RasterImage → transform / rasterizer → codec.encode → bytes
"""

from .errors import (
    DimensionError,
    ImageIOError,
    MagicNumberError,
    NetpbmError,
    ParseError,
    SampleParseError,
    ShapeError,
)
from .model import FORMATS, Encoding, FormatSpec, RasterImage, Variant
from .codec import decode, encode, load, save

__all__ = [
    'RasterImage',
    'Variant',
    'Encoding',
    'FormatSpec',
    'FORMATS',
    'decode',
    'encode',
    'load',
    'save',
    'NetpbmError',
    'ImageIOError',
    'ParseError',
    'MagicNumberError',
    'DimensionError',
    'SampleParseError',
    'ShapeError',
]
