"""
Runtime configuration for physconst.

Settings come from, in increasing priority: built-in defaults, an optional
YAML file named by ``PHYSCONST_CONFIG``, and the ``PHYSCONST_PRECISION`` /
``PHYSCONST_LOG_LEVEL`` environment variables.

Exports:
    - Settings: Pydantic model of the configurable knobs.
    - load_settings: Build a Settings instance from file and environment.
    - get_settings: Process-wide cached Settings.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "Settings",
    "load_settings",
    "get_settings",
]

CONFIG_ENV = "PHYSCONST_CONFIG"
PRECISION_ENV = "PHYSCONST_PRECISION"
LOG_LEVEL_ENV = "PHYSCONST_LOG_LEVEL"

# Narrowest arbitrary working width. Between it and the binary64 width (53 bits)
# an mpf rounded to nearest can round again to the wrong binary64 neighbour.
MIN_WORKING_BITS = 64


class Settings(BaseModel):
    """Configurable knobs of the constant framework."""
    model_config = ConfigDict(frozen=True)

    default_precision: int = Field(256, description="Default arbitrary working precision in bits")
    log_level: str = Field("INFO", description="Level used when logging is enabled")

    @field_validator("default_precision")
    @classmethod
    def at_least_min_width(cls, v):
        if v < MIN_WORKING_BITS:
            raise ValueError(f"default_precision must be >= {MIN_WORKING_BITS} bits, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v):
        return v.upper()


def load_settings(config_path: Optional[Path] = None, environ=None) -> Settings:
    """
    Load settings from a YAML file, then apply environment overrides.

    Args:
        config_path: Explicit YAML path; falls back to ``$PHYSCONST_CONFIG``.
        environ: Mapping used instead of ``os.environ`` (for tests).

    Returns:
        Settings: The merged configuration.

    Raises:
        FileNotFoundError: If an explicit or configured file does not exist.
    """
    environ = os.environ if environ is None else environ
    data = {}

    if config_path is None and environ.get(CONFIG_ENV):
        config_path = Path(environ[CONFIG_ENV])
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(config_path, "r") as f:
            data.update(yaml.safe_load(f) or {})

    if environ.get(PRECISION_ENV):
        data["default_precision"] = int(environ[PRECISION_ENV])
    if environ.get(LOG_LEVEL_ENV):
        data["log_level"] = environ[LOG_LEVEL_ENV]

    return Settings(**data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
