"""YAML schema validation and config loading.

Provides centralized validation for configuration files using pydantic:
    - Codec schema: shape policy for ragged or truncated sample data
    - Rasterizer schema: fractal depth bound, noise seed and lattice size
    - Logging schema: level, file and format for entrypoints
    - Top-level pnmraster.v1 schema tying them together

All entrypoints load configs through these validators for fail-fast error
detection with actionable messages (offending keys, expected ranges).

Usage:
    from pnmraster.utils import validators

    cfg = validators.load_config("configs/pnmraster.v1.yaml")
    cfg.codec.pad_short_rows
    cfg.rasterizer.noise.seed
"""

from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Deeper Koch recursion fans out 6^depth calls
MAX_FRACTAL_DEPTH_LIMIT = 10


# ============================================================================
# CODEC SCHEMA
# ============================================================================

class CodecConfig(BaseModel):
    """Decoder shape policy.

    pad_short_rows=True zero-pads short ASCII rows and truncated binary
    rasters (logged as warnings). False turns both into errors
    (ShapeError for ASCII, SampleParseError for binary).
    """
    pad_short_rows: bool = Field(True, description="Zero-pad ragged/truncated sample data")


# ============================================================================
# RASTERIZER SCHEMA
# ============================================================================

class NoiseConfig(BaseModel):
    """Gradient-noise generator settings."""
    seed: Optional[int] = Field(42, ge=0, description="RandomState seed; null for OS entropy")
    cell_size: int = Field(8, ge=1, le=4096, description="Lattice cell size in pixels")


class RasterizerConfig(BaseModel):
    """Drawing settings shared by the Rasterizer facade."""
    max_fractal_depth: int = Field(
        7, ge=0, le=MAX_FRACTAL_DEPTH_LIMIT,
        description="Fractal depths above this are clamped"
    )
    noise: NoiseConfig = Field(default_factory=NoiseConfig)


# ============================================================================
# LOGGING SCHEMA
# ============================================================================

class LoggingConfig(BaseModel):
    """Entrypoint logging settings (forwarded to setup_logging)."""
    log_level: str = Field("INFO", description="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    log_file: Optional[str] = Field(None, description="Optional log file path")
    json_format: bool = Field(False, alias="json", description="JSON lines in the log file")
    color: bool = Field(True, description="ANSI colors on the console")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('log_level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{v}'")
        return level


# ============================================================================
# TOP-LEVEL SCHEMA
# ============================================================================

class PnmRasterConfigV1(BaseModel):
    """Complete pnmraster.v1 configuration file."""
    schema_version: str = Field("pnmraster.v1", alias="schema", description="Schema version")
    codec: CodecConfig = Field(default_factory=CodecConfig)
    rasterizer: RasterizerConfig = Field(default_factory=RasterizerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "pnmraster.v1":
            raise ValueError(f"Expected schema 'pnmraster.v1', got '{v}'")
        return v


# ============================================================================
# PUBLIC API
# ============================================================================

def default_config() -> PnmRasterConfigV1:
    """Configuration with every field at its default."""
    return PnmRasterConfigV1()


def load_config(path: Union[str, Path]) -> PnmRasterConfigV1:
    """Load and validate a pnmraster.v1 config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to the YAML file

    Returns
    -------
    PnmRasterConfigV1
        Validated configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (message names the file and the offending keys)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    data = fs.load_yaml(path)
    try:
        return PnmRasterConfigV1(**data)
    except Exception as e:
        raise ValueError(f"Config validation failed at {path}: {e}") from e
