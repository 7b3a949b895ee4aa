"""pnmraster: Netpbm raster images, codecs, transforms and a 2-D rasterizer.

This package decodes and encodes the six Netpbm encodings (P1-P6), applies
whole-image transforms and draws shapes, fractals and noise onto images.

Architecture layers (strict one-way dependency):
    cli.py → {image, rasterizer}/ → utils/

Key invariants:
    - Samples live in a numpy array owned by RasterImage
    - Bitmap samples are bool, gray/color samples are uint8 ≤ max_value
    - All drawing goes through RasterImage.set_pixel (off-canvas writes dropped)
    - YAML-only configs, validated by pydantic
"""

__version__ = "1.0.0"
