"""Reports module for cfreport.

Renders self-contained HTML analytics reports from Cloudflare query results.
"""

from .formatting import (
    escape_html,
    format_bytes,
    format_count,
    format_date_range,
    format_hour,
    format_number,
    format_percent,
    safe_json_for_script,
    safe_ratio,
    status_code_class,
    status_code_tag_class,
)
from .generate import (
    GenerateRequest,
    GenerateResult,
    RequestValidationError,
    generate_report,
    handle_generate,
    validate_generate_request,
)
from .registry import get_template, list_templates
from .types import ReportConfig, ReportTemplate

__all__ = [
    # Contract
    "ReportConfig",
    "ReportTemplate",
    # Registry
    "get_template",
    "list_templates",
    # Generation
    "GenerateRequest",
    "GenerateResult",
    "RequestValidationError",
    "generate_report",
    "handle_generate",
    "validate_generate_request",
    # Formatting
    "escape_html",
    "format_bytes",
    "format_count",
    "format_date_range",
    "format_hour",
    "format_number",
    "format_percent",
    "safe_json_for_script",
    "safe_ratio",
    "status_code_class",
    "status_code_tag_class",
]
