"""Netpbm codec: bytes ↔ RasterImage for all six encodings.

Header grammar (line based):
    1. First whitespace-delimited token: magic number P1-P6
    2. Blank lines and '#' comment lines are skipped before each header line;
       trailing '# ...' on a header line is ignored
    3. "width height" line, two positive decimal ints
    4. Gray/color only: max-value line, decimal int in [1, 255]

Sample grammar:
    - ASCII (P1/P2/P3): decimal tokens in row-major order. P1 tokens are 0/1
      and may be packed ("0110"); P2 has one token per sample, P3 three.
    - Binary (P4/P5/P6): raw bytes right after the newline that ends the
      header. P5 one byte per sample, P6 three (R, G, B), P4 one bit per
      sample, MSB first, each row padded to a whole byte.

Shape policy (CodecConfig.pad_short_rows):
    - ASCII whose token count matches width·height·channels is read row-major
      regardless of line wrapping. Otherwise every data line is one row: short
      rows are zero-padded, surplus tokens/rows dropped, missing rows zeroed.
      Strict mode raises ShapeError instead.
    - Binary rasters shorter than required are zero-padded, or raise
      SampleParseError in strict mode.

encode() writes the same layouts; ASCII output has one image row per line, so
decode(encode(img)) == img for every format.

File helpers load()/save() do whole-buffer I/O and wrap OS failures in
ImageIOError.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from ..utils import fs
from ..utils.validators import CodecConfig
from .errors import (
    DimensionError,
    ImageIOError,
    MagicNumberError,
    SampleParseError,
    ShapeError,
)
from .model import FORMATS, MAX_SAMPLE_VALUE, Encoding, FormatSpec, RasterImage, Variant

logger = logging.getLogger(__name__)


class _LineReader:
    """Cursor over raw bytes that hands out header lines.

    Keeps the byte offset so binary sample data can be sliced off exactly
    where the header ends.
    """

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def next_line(self) -> Optional[bytes]:
        if self.pos >= len(self.data):
            return None
        end = self.data.find(b'\n', self.pos)
        if end == -1:
            line = self.data[self.pos:]
            self.pos = len(self.data)
        else:
            line = self.data[self.pos:end]
            self.pos = end + 1
        return line

    def next_header_line(self) -> Optional[bytes]:
        """Next line with content, comments stripped; None at end of data."""
        while True:
            line = self.next_line()
            if line is None:
                return None
            content = line.split(b'#', 1)[0].strip()
            if content:
                return content

    def rest(self) -> bytes:
        return self.data[self.pos:]


# ============================================================================
# DECODING
# ============================================================================

def decode(data: bytes, config: Optional[CodecConfig] = None) -> RasterImage:
    """Parse Netpbm bytes into a RasterImage.

    Parameters
    ----------
    data : bytes
        Complete file contents
    config : CodecConfig, optional
        Shape policy; defaults to permissive zero-padding

    Returns
    -------
    RasterImage
        Image with variant/encoding taken from the magic number

    Raises
    ------
    MagicNumberError
        Missing or unrecognized magic number
    DimensionError
        Bad width/height or max-value line
    SampleParseError
        Bad sample token, value above max_value, or short binary data (strict)
    ShapeError
        Ragged ASCII rows (strict)
    """
    config = config or CodecConfig()
    reader = _LineReader(bytes(data))

    spec = _read_magic(reader)
    width, height = _read_dimensions(reader)
    max_value = _read_max_value(reader) if spec.has_max_value else None

    if spec.encoding is Encoding.ASCII:
        samples = _decode_ascii(reader.rest(), spec, width, height, max_value, config)
    else:
        samples = _decode_binary(reader.rest(), spec, width, height, max_value, config)

    logger.debug(f"Decoded {spec.magic} {width}x{height}"
                 + (f" max={max_value}" if max_value is not None else ""))

    return RasterImage(
        spec.variant, width, height, samples,
        encoding=spec.encoding, max_value=max_value
    )


def _read_magic(reader: _LineReader) -> FormatSpec:
    line = reader.next_line()
    while line is not None and not line.strip():
        line = reader.next_line()
    if line is None:
        raise MagicNumberError("Missing magic number (empty input)")

    tokens = line.split(b'#', 1)[0].split()
    if not tokens:
        raise MagicNumberError("Missing magic number")

    magic = tokens[0].decode('ascii', errors='replace')
    spec = FORMATS.get(magic)
    if spec is None:
        raise MagicNumberError(
            f"Unsupported magic number '{magic}', expected one of {', '.join(FORMATS)}"
        )
    if len(tokens) > 1:
        raise MagicNumberError(
            f"Unexpected data after magic number {magic}: the magic number "
            f"must be alone on its line"
        )
    return spec


def _parse_positive(token: bytes, what: str) -> int:
    if not token.isdigit():
        raise DimensionError(f"Failed to parse {what}: {token!r} is not a decimal integer")
    value = int(token)
    if value <= 0:
        raise DimensionError(f"{what.capitalize()} must be > 0, got {value}")
    return value


def _read_dimensions(reader: _LineReader) -> Tuple[int, int]:
    line = reader.next_header_line()
    if line is None:
        raise DimensionError("Missing dimensions line")

    fields = line.split()
    if len(fields) != 2:
        raise DimensionError(
            f"Invalid dimensions line {line!r}: expected 'width height'"
        )
    return _parse_positive(fields[0], "width"), _parse_positive(fields[1], "height")


def _read_max_value(reader: _LineReader) -> int:
    line = reader.next_header_line()
    if line is None:
        raise DimensionError("Missing max value line")

    fields = line.split()
    if len(fields) != 1:
        raise DimensionError(f"Invalid max value line {line!r}")

    max_value = _parse_positive(fields[0], "max value")
    if max_value > MAX_SAMPLE_VALUE:
        raise DimensionError(
            f"Max value {max_value} exceeds {MAX_SAMPLE_VALUE}; "
            f"only 8-bit samples are supported"
        )
    return max_value


def _split_packed_bits(tokens: List[bytes]) -> List[bytes]:
    """Expand packed P1 runs such as b'0110' into single-digit tokens."""
    out = []
    for tok in tokens:
        if len(tok) > 1 and not tok.strip(b'01'):
            out.extend(tok[i:i + 1] for i in range(len(tok)))
        else:
            out.append(tok)
    return out


def _parse_sample(token: bytes, spec: FormatSpec, max_value: Optional[int]) -> int:
    if spec.variant is Variant.BITMAP:
        if token == b'1':
            return 1
        if token == b'0':
            return 0
        raise SampleParseError(f"Invalid bitmap sample {token!r}, expected 0 or 1")

    if not token.isdigit():
        raise SampleParseError(f"Invalid sample {token!r}, expected a decimal integer")
    value = int(token)
    if value > max_value:
        raise SampleParseError(f"Sample {value} exceeds max value {max_value}")
    return value


def _decode_ascii(
    body: bytes,
    spec: FormatSpec,
    width: int,
    height: int,
    max_value: Optional[int],
    config: CodecConfig
) -> np.ndarray:
    per_row = width * spec.channels

    lines = []
    for raw in body.splitlines():
        tokens = raw.split(b'#', 1)[0].split()
        if spec.variant is Variant.BITMAP:
            tokens = _split_packed_bits(tokens)
        if tokens:
            lines.append(tokens)

    total = sum(len(tokens) for tokens in lines)
    if total == per_row * height:
        flat = [tok for tokens in lines for tok in tokens]
        rows = [flat[y * per_row:(y + 1) * per_row] for y in range(height)]
    else:
        msg = (f"{spec.magic} sample data has {total} tokens in {len(lines)} lines, "
               f"expected {per_row * height} ({height} rows of {per_row})")
        if not config.pad_short_rows:
            raise ShapeError(msg)
        logger.warning(f"{msg}; reading one row per line and zero-padding")
        rows = [lines[y][:per_row] if y < len(lines) else [] for y in range(height)]

    values = np.zeros((height, per_row), dtype=np.uint8)
    for y, row in enumerate(rows):
        for i, tok in enumerate(row):
            values[y, i] = _parse_sample(tok, spec, max_value)

    if spec.variant is Variant.BITMAP:
        return values.astype(np.bool_)
    if spec.variant is Variant.COLOR:
        return values.reshape(height, width, 3)
    return values


def _decode_binary(
    body: bytes,
    spec: FormatSpec,
    width: int,
    height: int,
    max_value: Optional[int],
    config: CodecConfig
) -> np.ndarray:
    if spec.variant is Variant.BITMAP:
        row_bytes = (width + 7) // 8
        need = row_bytes * height
    else:
        need = width * height * spec.channels

    if len(body) < need:
        msg = f"{spec.magic} raster has {len(body)} bytes, expected {need}"
        if not config.pad_short_rows:
            raise SampleParseError(msg)
        logger.warning(f"{msg}; zero-padding the remainder")
        body = body + bytes(need - len(body))
    elif len(body) > need:
        logger.debug(f"Ignoring {len(body) - need} trailing bytes after {spec.magic} raster")

    raw = np.frombuffer(body, dtype=np.uint8, count=need)

    if spec.variant is Variant.BITMAP:
        bits = np.unpackbits(raw.reshape(height, row_bytes), axis=1)
        return bits[:, :width].astype(np.bool_)

    if raw.size and int(raw.max()) > max_value:
        raise SampleParseError(f"Sample {int(raw.max())} exceeds max value {max_value}")

    if spec.variant is Variant.COLOR:
        return raw.reshape(height, width, 3).copy()
    return raw.reshape(height, width).copy()


# ============================================================================
# ENCODING
# ============================================================================

def encode(image: RasterImage) -> bytes:
    """Serialize a RasterImage in its own variant and encoding.

    Layout: magic line, "width height" line, max-value line (gray/color),
    then samples. ASCII rows are space-separated and end with a newline.
    """
    spec = image.format
    header = f"{spec.magic}\n{image.width} {image.height}\n"
    if spec.has_max_value:
        header += f"{image.max_value}\n"

    if spec.encoding is Encoding.BINARY:
        if spec.variant is Variant.BITMAP:
            body = np.packbits(image.samples, axis=1).tobytes()
        else:
            body = np.ascontiguousarray(image.samples, dtype=np.uint8).tobytes()
        return header.encode('ascii') + body

    flat_rows = image.samples.astype(np.uint8).reshape(image.height, -1)
    lines = [' '.join(str(int(v)) for v in row) for row in flat_rows]
    return (header + '\n'.join(lines) + '\n').encode('ascii')


# ============================================================================
# FILE BOUNDARY
# ============================================================================

def load(path: Union[str, Path], config: Optional[CodecConfig] = None) -> RasterImage:
    """Read and decode a Netpbm file.

    Raises
    ------
    ImageIOError
        If the file cannot be read
    ParseError
        If the contents are not a valid Netpbm image
    """
    path = Path(path)
    try:
        data = fs.read_bytes(path)
    except OSError as e:
        raise ImageIOError(f"Failed to read {path}: {e}") from e
    return decode(data, config)


def save(
    image: RasterImage,
    path: Union[str, Path],
    *,
    timestamp: bool = False,
    now: Optional[datetime] = None
) -> Path:
    """Encode and write an image atomically.

    Parameters
    ----------
    image : RasterImage
        Image to write
    path : Union[str, Path]
        Target path
    timestamp : bool
        Insert a -YYYY-MM-DD-HH-MM suffix before the extension
    now : datetime, optional
        Timestamp override (tests)

    Returns
    -------
    Path
        The path actually written

    Raises
    ------
    ImageIOError
        If the file cannot be written
    """
    path = Path(path)
    if timestamp:
        path = fs.timestamped_path(path, now)

    try:
        fs.atomic_write_bytes(path, encode(image))
    except OSError as e:
        raise ImageIOError(f"Failed to write {path}: {e}") from e

    logger.info(f"Saved {image.magic_number} {image.width}x{image.height} to {path}")
    return path
