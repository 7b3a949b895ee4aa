"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - Color blending and thresholds (color)
    - Integer geometry helpers (geometry)
    - Atomic I/O (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (image, rasterizer, cli).

Convenience imports:
    from pnmraster.utils import fs, color, validators
    from pnmraster.utils.logging_config import setup_logging, push_context
"""

from . import color
from . import fs
from . import geometry
from . import logging_config
from . import validators

from .logging_config import push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'fs',
    'geometry',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'push_context',
]
