"""cfreport configuration module."""

from .loader import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    generate_example_config_yaml,
    load_config,
)
from .schema import ApiConfig, CfReportConfig

__all__ = [
    # Config classes
    "CfReportConfig",
    "ApiConfig",
    # Loader functions
    "load_config",
    "generate_example_config_yaml",
    # Exceptions
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
]
