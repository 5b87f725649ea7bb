"""Configuration loader for cfreport."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import CfReportConfig


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileNotFoundError(ConfigError):
    """Raised when configuration file is not found."""

    pass


class ConfigParseError(ConfigError):
    """Raised when configuration file cannot be parsed."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dictionary.

    Raises:
        ConfigFileNotFoundError: If file doesn't exist
        ConfigParseError: If YAML parsing fails or the document is not a mapping
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Failed to parse YAML: {e}")  # noqa: B904

    if not content:
        return {}
    if not isinstance(content, dict):
        raise ConfigParseError(f"Expected a mapping at the top of {path}")
    return content


def load_config(path: str | Path) -> CfReportConfig:
    """Load and validate cfreport configuration from file.

    Raises:
        ConfigFileNotFoundError: If file doesn't exist
        ConfigParseError: If YAML parsing fails
        ConfigValidationError: If validation fails
    """
    path = Path(path)
    data = load_yaml(path)

    try:
        return CfReportConfig.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        error_messages = []
        for err in errors:
            loc = ".".join(str(x) for x in err["loc"])
            error_messages.append(f"  - {loc}: {err['msg']}")

        raise ConfigValidationError(  # noqa: B904
            "Configuration validation failed:\n" + "\n".join(error_messages),
            errors=[dict(e) for e in errors],  # type: ignore[call-overload]
        )


def _yaml_scalar_line(key: str, value: str) -> str:
    """Render ``key: value`` with *value* quoted as YAML requires."""
    return yaml.safe_dump({key: value}, default_flow_style=False, width=float("inf")).rstrip("\n")


def generate_example_config_yaml(zone_id: str = "", zone_name: str = "") -> str:
    """Generate example configuration YAML with comments.

    Only the zone is uncommented; every other option is shown commented-out
    with its default.
    """
    zone_line = (
        _yaml_scalar_line("zone_id", zone_id)
        if zone_id
        else 'zone_id: ""  # 32-character hex zone ID'
    )
    name_line = (
        _yaml_scalar_line("zone_name", zone_name) if zone_name else '# zone_name: "example.com"'
    )

    return f"""# cfreport Configuration
# ======================
# Settings for generating Cloudflare analytics reports.
#
# LEGEND:
#   Uncommented fields  = REQUIRED or explicitly set values
#   # field: value      = Available option with its DEFAULT value.
#
# The API token is read from the CLOUDFLARE_API_TOKEN environment variable
# (or --api-token). Avoid storing it in this file.

# REQUIRED: Cloudflare zone to report on
{zone_line}

# Human-readable label shown in the report (defaults to zone_id)
{name_line}

# Report template (see: cfreport templates)
# template: traffic-overview

# Relative window: 24h, 7d or 30d (overridden by --start/--end)
# preset: 7d

# Where generated reports are written
# output_dir: ./cfreport-output

## Cloudflare API
# api:
#   endpoint: https://api.cloudflare.com/client/v4/graphql
#   timeout_seconds: 30
"""
