"""Configuration loading system.

Provides YAML loading with hierarchical file includes (with cycle
detection) and the typed exceptions raised when a reconstruction
configuration is invalid.
"""

from .errors import (
    ConfigCycleError,
    ConfigError,
    ConfigIncludeError,
    ConfigValidationError,
)
from .load import load_config, load_config_file

__all__ = [
    "load_config",
    "load_config_file",
    "ConfigError",
    "ConfigIncludeError",
    "ConfigCycleError",
    "ConfigValidationError",
]
