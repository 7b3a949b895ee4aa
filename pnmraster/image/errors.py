"""Exception taxonomy for Netpbm decoding and file I/O.

    NetpbmError
    ├── ImageIOError        (also an OSError)  read/write failure
    └── ParseError          (also a ValueError) malformed input
        ├── MagicNumberError   missing or unrecognized magic token
        ├── DimensionError     bad width/height line or max-value line
        ├── SampleParseError   bad sample token, out-of-range value,
        │                      or binary raster shorter than required (strict)
        └── ShapeError         ragged ASCII rows in strict mode

Decoding never returns a partial image: the first error propagates.
Drawing and transforms have no error kinds of their own; off-canvas
coordinates are dropped and bad arguments raise plain ValueError.
"""


class NetpbmError(Exception):
    """Base class for all pnmraster codec errors."""


class ImageIOError(NetpbmError, OSError):
    """Underlying read or write of an image file failed."""


class ParseError(NetpbmError, ValueError):
    """Input bytes are not a valid Netpbm image."""


class MagicNumberError(ParseError):
    """Magic number is missing or not one of P1-P6."""


class DimensionError(ParseError):
    """Width/height or max-value header line is missing or invalid."""


class SampleParseError(ParseError):
    """Sample data contains an invalid token or is too short."""


class ShapeError(ParseError):
    """Row or column count does not match the header (strict mode)."""
