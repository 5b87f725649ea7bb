"""Pydantic models for cfreport configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cfreport._constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_TEMPLATE_ID,
    GRAPHQL_ENDPOINT,
)
from cfreport.analytics.types import TimePreset


class ApiConfig(BaseModel):
    """Cloudflare API connection settings."""

    model_config = ConfigDict(extra="forbid")

    endpoint: str = GRAPHQL_ENDPOINT
    timeout_seconds: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("api.endpoint must be an http(s) URL")
        return v


class CfReportConfig(BaseModel):
    """Root configuration for cfreport.

    Every field is optional in the file; CLI options override file values.
    The API token is preferably supplied through the environment rather
    than stored here.
    """

    model_config = ConfigDict(extra="forbid")

    zone_id: str = ""
    zone_name: str | None = None
    template: str = DEFAULT_TEMPLATE_ID
    preset: TimePreset = TimePreset.LAST_7D
    api_token: str = Field(default="", repr=False)
    output_dir: str = DEFAULT_OUTPUT_DIR
    api: ApiConfig = Field(default_factory=ApiConfig)

    def has_api_token(self) -> bool:
        return bool(self.api_token)
