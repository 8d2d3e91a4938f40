"""Configuration loading, schema, and defaults."""

from patchgate.config.loader import ConfigError, load_config
from patchgate.config.schema import PatchGateConfig

__all__ = [
    "ConfigError",
    "PatchGateConfig",
    "load_config",
]
