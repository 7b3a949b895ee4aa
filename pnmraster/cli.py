#!/usr/bin/env python3
"""Command-line front end for pnmraster.

Usage:
    # Header and samples of a file
    pnmraster info image.pbm --data

    # Re-encode / downconvert (color → gray → bitmap only)
    pnmraster convert photo.ppm photo.pgm --to P5

    # Whole-image transforms
    pnmraster transform in.pgm out.pgm --op rotate
    pnmraster --timestamp transform in.pbm inverse.pbm --op invert

    # Generators on a blank canvas
    pnmraster draw koch.ppm --width 300 --height 300 --shape koch --depth 4
    pnmraster draw noise.pgm --variant gray --shape noise --seed 7

    # PNG preview via Pillow
    pnmraster export in.ppm preview.png

Global options:
    --config      pnmraster.v1 YAML (codec shape policy, rasterizer, logging)
    --log-level   overrides the config's logging.log_level
    --timestamp   writes OUT as NAME-YYYY-MM-DD-HH-MM.EXT

Exit codes: 0 on success, 1 on decode/encode/argument errors.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .image import codec, transform
from .image.errors import NetpbmError
from .image.model import FORMATS, MAX_SAMPLE_VALUE, Encoding, RasterImage, Variant
from .rasterizer import Rasterizer
from .utils import color as color_utils
from .utils import fs, logging_config, validators

logger = logging.getLogger(__name__)

TRANSFORM_OPS = {
    'invert': transform.invert,
    'flip-h': transform.flip_horizontal,
    'flip-v': transform.flip_vertical,
    'flip-flop': transform.flip_and_flop,
    'rotate': transform.rotate_90_cw,
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='pnmraster',
        description="Netpbm (PBM/PGM/PPM) codec, transforms and rasterizer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to a pnmraster.v1 YAML config')
    parser.add_argument('--log-level', type=str.upper, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Overrides the config log level')
    parser.add_argument('--timestamp', action='store_true',
                        help='Append -YYYY-MM-DD-HH-MM to output file names')

    sub = parser.add_subparsers(dest='command', required=True)

    p_info = sub.add_parser('info', help='Print magic number, size and max value')
    p_info.add_argument('input', type=str, help='Netpbm file')
    p_info.add_argument('--data', action='store_true', help='Also print every row')

    p_conv = sub.add_parser('convert', help='Re-encode or downconvert')
    p_conv.add_argument('input', type=str)
    p_conv.add_argument('output', type=str)
    p_conv.add_argument('--to', type=str, choices=sorted(FORMATS), default=None,
                        help='Target magic number (default: keep input format)')

    p_tr = sub.add_parser('transform', help='Invert, flip or rotate')
    p_tr.add_argument('input', type=str)
    p_tr.add_argument('output', type=str)
    p_tr.add_argument('--op', type=str, choices=sorted(TRANSFORM_OPS), required=True)

    p_draw = sub.add_parser('draw', help='Render a generator onto a blank canvas')
    p_draw.add_argument('output', type=str)
    p_draw.add_argument('--width', type=int, default=256)
    p_draw.add_argument('--height', type=int, default=256)
    p_draw.add_argument('--variant', type=str, choices=[v.value for v in Variant],
                        default=Variant.COLOR.value)
    p_draw.add_argument('--binary', action='store_true', help='Binary encoding (P4/P5/P6)')
    p_draw.add_argument('--shape', type=str, choices=['koch', 'sierpinski', 'noise', 'demo'],
                        default='demo')
    p_draw.add_argument('--depth', type=int, default=4, help='Fractal depth')
    p_draw.add_argument('--seed', type=int, default=None,
                        help='Noise seed (overrides config)')

    p_exp = sub.add_parser('export', help='Write a PNG (or other Pillow format) preview')
    p_exp.add_argument('input', type=str)
    p_exp.add_argument('output', type=str)

    return parser.parse_args(argv)


def _palette(image: RasterImage) -> Tuple:
    """(background, foreground, accent) samples suited to the image variant."""
    if image.variant is Variant.BITMAP:
        return False, True, True
    m = image.max_value
    if image.variant is Variant.GRAY:
        return m, 0, m // 2
    return (m, m, m), (0, 0, m), (m, 0, 0)


def cmd_info(args: argparse.Namespace, cfg: validators.PnmRasterConfigV1) -> int:
    image = codec.load(args.input, cfg.codec)
    print(f"Magic Number: {image.magic_number}")
    print(f"Width: {image.width}")
    print(f"Height: {image.height}")
    if image.max_value is not None:
        print(f"Max Value: {image.max_value}")
    if args.data:
        print("Data:")
        for row in image.to_rows():
            print(row)
    return 0


def cmd_convert(args: argparse.Namespace, cfg: validators.PnmRasterConfigV1) -> int:
    image = codec.load(args.input, cfg.codec)
    if args.to:
        image = transform.to_variant(image, FORMATS[args.to].variant)
        transform.set_encoding(image, args.to)
    codec.save(image, args.output, timestamp=args.timestamp)
    return 0


def cmd_transform(args: argparse.Namespace, cfg: validators.PnmRasterConfigV1) -> int:
    image = codec.load(args.input, cfg.codec)
    # rotate returns a new image; the in-place ops return their input
    image = TRANSFORM_OPS[args.op](image)
    codec.save(image, args.output, timestamp=args.timestamp)
    return 0


def cmd_draw(args: argparse.Namespace, cfg: validators.PnmRasterConfigV1) -> int:
    raster_cfg = cfg.rasterizer
    if args.seed is not None:
        raster_cfg = raster_cfg.model_copy(
            update={'noise': raster_cfg.noise.model_copy(update={'seed': args.seed})}
        )

    encoding = Encoding.BINARY if args.binary else Encoding.ASCII
    image = RasterImage.blank(args.width, args.height, Variant(args.variant), encoding=encoding)
    bg, fg, accent = _palette(image)
    r = Rasterizer(image, raster_cfg)
    r.filled_rectangle((0, 0), image.width, image.height, bg)

    w, h = image.width, image.height
    size = min(w, h) * 3 // 4
    start = ((w - size) // 2, (h + size * 3 // 4) // 2)

    if args.shape == 'koch':
        r.koch_snowflake(args.depth, start, size, fg)
    elif args.shape == 'sierpinski':
        r.sierpinski_triangle(args.depth, start, size, fg)
    elif args.shape == 'noise':
        r.perlin_noise(bg, fg)
    else:
        r.rectangle((w // 8, h // 8), w * 3 // 4, h * 3 // 4, fg)
        r.filled_circle((w // 2, h // 2), min(w, h) // 6, accent)
        r.circle((w // 2, h // 2), min(w, h) // 4, fg)
        r.filled_triangle((w // 4, h * 3 // 4), (w // 2, h // 2), (w * 3 // 4, h * 3 // 4), fg)
        r.polygon([(w // 8, h // 2), (w // 4, h // 4), (w * 3 // 8, h // 2)], accent)
        r.line((0, h - 1), (w - 1, 0), accent)

    codec.save(image, args.output, timestamp=args.timestamp)
    return 0


def cmd_export(args: argparse.Namespace, cfg: validators.PnmRasterConfigV1) -> int:
    image = codec.load(args.input, cfg.codec)
    out = Path(args.output)
    if args.timestamp:
        out = fs.timestamped_path(out)
    samples = image.samples
    if image.max_value is not None and image.max_value != MAX_SAMPLE_VALUE:
        # PNG samples are 8-bit full scale
        samples = color_utils.rescale_array(samples, image.max_value, MAX_SAMPLE_VALUE)
    fs.atomic_save_image(samples, out)
    logger.info(f"Exported {image.magic_number} {image.width}x{image.height} to {out}")
    return 0


COMMANDS = {
    'info': cmd_info,
    'convert': cmd_convert,
    'transform': cmd_transform,
    'draw': cmd_draw,
    'export': cmd_export,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the pnmraster console script."""
    args = parse_args(argv)

    try:
        cfg = validators.load_config(args.config) if args.config else validators.default_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"pnmraster: {e}", file=sys.stderr)
        return 1

    log_cfg = cfg.logging
    logging_config.setup_logging(
        log_level=args.log_level or log_cfg.log_level,
        log_file=log_cfg.log_file,
        json=log_cfg.json_format,
        color=log_cfg.color,
        quiet_libs=['PIL'],
        context={'cmd': args.command}
    )

    try:
        return COMMANDS[args.command](args, cfg)
    except (NetpbmError, OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        logging_config.pop_context(keys=['cmd'])
        logging_config.shutdown()


if __name__ == '__main__':
    sys.exit(main())
