"""Report generation entry point.

Validates an inbound request, resolves the template, binds a fetcher to the
caller's API token and turns every failure into a :class:`GenerateResult`
with an HTTP-style status code:

- 400 -- invalid request or unknown template (no network call is made)
- 500 -- upstream, normalization or rendering failure

The API token never appears in a result message or a log record.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from cfreport._constants import DEFAULT_HTTP_TIMEOUT_SECONDS, GRAPHQL_ENDPOINT
from cfreport.analytics.client import Fetcher, create_fetcher
from cfreport.analytics.types import TimeRange, parse_timestamp

from .registry import get_template
from .types import ReportConfig

logger = logging.getLogger(__name__)

ZONE_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$", re.IGNORECASE)

REDACTED = "[REDACTED]"


class RequestValidationError(ValueError):
    """Raised when a generate request fails validation.

    The message lists every violated constraint, joined with ``"; "``.
    """

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class TimeRangeInput(BaseModel):
    """Wire form of a reporting window."""

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_timestamp(cls, v: str, info: ValidationInfo) -> str:
        try:
            parse_timestamp(v)
        except ValueError:
            raise ValueError(f"timeRange.{info.field_name}: Invalid ISO 8601 datetime")  # noqa: B904
        return v

    @model_validator(mode="after")
    def validate_order(self) -> TimeRangeInput:
        if parse_timestamp(self.start) >= parse_timestamp(self.end):
            raise ValueError("timeRange.start must be before timeRange.end")
        return self

    def to_time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)


class GenerateRequest(BaseModel):
    """Inbound report generation request.

    Accepts both the camelCase wire names (``apiToken``, ``zoneId`` ...) and
    the Python field names.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    api_token: str = Field(alias="apiToken", repr=False)
    zone_id: str = Field(alias="zoneId")
    zone_name: str | None = Field(default=None, alias="zoneName")
    template_id: str = Field(alias="templateId")
    time_range: TimeRangeInput = Field(alias="timeRange")

    @field_validator("api_token")
    @classmethod
    def validate_api_token(cls, v: str) -> str:
        if not v:
            raise ValueError("apiToken is required")
        return v

    @field_validator("zone_id")
    @classmethod
    def validate_zone_id(cls, v: str) -> str:
        if not ZONE_ID_PATTERN.fullmatch(v):
            raise ValueError("zoneId must be a 32-character hexadecimal string")
        return v

    @field_validator("template_id")
    @classmethod
    def validate_template_id(cls, v: str) -> str:
        if not v:
            raise ValueError("templateId is required")
        return v

    def to_report_config(self) -> ReportConfig:
        return ReportConfig(
            zone_id=self.zone_id,
            zone_name=self.zone_name,
            time_range=self.time_range.to_time_range(),
        )


@dataclass(frozen=True)
class GenerateResult:
    """Outcome of a generation attempt."""

    ok: bool
    status_code: int
    html: str | None = None
    error: str | None = None

    @classmethod
    def success(cls, html: str) -> GenerateResult:
        return cls(ok=True, status_code=200, html=html)

    @classmethod
    def failure(cls, error: str, status_code: int) -> GenerateResult:
        return cls(ok=False, status_code=status_code, error=error)


def _format_validation_errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        msg = err["msg"]
        if err["type"] == "value_error":
            # Custom validator messages already name the field.
            messages.append(msg.removeprefix("Value error, "))
        else:
            loc = ".".join(str(x) for x in err["loc"]) or "request"
            messages.append(f"{loc}: {msg}")
    return messages


def validate_generate_request(body: Any) -> GenerateRequest:
    """Validate a raw request body.

    Raises:
        RequestValidationError: If any field is missing or invalid
    """
    try:
        return GenerateRequest.model_validate(body)
    except ValidationError as e:
        messages = _format_validation_errors(e)
        raise RequestValidationError("; ".join(messages), errors=messages)  # noqa: B904


def _redact(message: str, secret: str) -> str:
    if secret and secret in message:
        return message.replace(secret, REDACTED)
    return message


def handle_generate(
    request: GenerateRequest,
    fetcher: Fetcher | None = None,
    endpoint: str = GRAPHQL_ENDPOINT,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> GenerateResult:
    """Generate a report for an already validated request.

    Args:
        request: Validated request
        fetcher: Fetch callable override (default: HTTP client bound to the token)
        endpoint: GraphQL endpoint used by the default fetcher
        timeout: HTTP timeout in seconds used by the default fetcher

    Returns:
        GenerateResult carrying the HTML or an error message and status code
    """
    template = get_template(request.template_id)
    if template is None:
        return GenerateResult.failure(f"Unknown template: {request.template_id}", 400)

    if fetcher is None:
        fetcher = create_fetcher(request.api_token, endpoint=endpoint, timeout=timeout)

    try:
        html = template.generate(request.to_report_config(), fetcher)
    except Exception as e:
        message = _redact(str(e), request.api_token) or "Report generation failed"
        logger.error(
            "Report generation failed (template=%s, zone=%s, error=%s)",
            request.template_id,
            request.zone_id,
            type(e).__name__,
        )
        return GenerateResult.failure(message, 500)

    logger.info(
        "Generated %s report for zone %s (%d bytes)",
        request.template_id,
        request.zone_id,
        len(html),
    )
    return GenerateResult.success(html)


def generate_report(
    body: Any,
    fetcher: Fetcher | None = None,
    endpoint: str = GRAPHQL_ENDPOINT,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> GenerateResult:
    """Validate *body* and generate the report in one step.

    Validation failures become a 400 result without any network activity.
    """
    try:
        request = validate_generate_request(body)
    except RequestValidationError as e:
        return GenerateResult.failure(str(e), 400)
    return handle_generate(request, fetcher=fetcher, endpoint=endpoint, timeout=timeout)
