"""Formatting and escaping helpers for HTML reports.

All functions are pure.  Two escaping contexts are kept apart:

- :func:`escape_html` for text placed into markup,
- :func:`safe_json_for_script` for data placed into an inline ``<script>``.
"""

from __future__ import annotations

import json
import math
from datetime import datetime
from typing import Any

from cfreport.analytics.types import parse_timestamp

_KIB = 1024
_MIB = 1024**2
_GIB = 1024**3
_TIB = 1024**4


def format_number(n: float) -> str:
    """Abbreviate a count: ``1.9M``, ``236.3K``, ``999``."""
    if n >= 1_000_000_000:
        return f"{n / 1_000_000_000:.1f}B"
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return format_count(n)


def format_count(n: float) -> str:
    """Group digits with commas: ``865,779``."""
    if isinstance(n, float) and not n.is_integer():
        return f"{n:,.3f}".rstrip("0").rstrip(".")
    return f"{int(n):,}"


def format_bytes(num_bytes: float) -> str:
    """Format a byte count with binary (1024-based) units."""
    if num_bytes >= _TIB:
        return f"{num_bytes / _TIB:.1f} TB"
    if num_bytes >= _GIB:
        return f"{num_bytes / _GIB:.1f} GB"
    if num_bytes >= _MIB:
        return f"{num_bytes / _MIB:.1f} MB"
    if num_bytes >= _KIB:
        return f"{num_bytes / _KIB:.1f} KB"
    return f"{num_bytes} B"


def format_percent(ratio: float) -> str:
    """Format a 0..1 ratio as a percentage; non-finite input renders as ``0.0%``."""
    try:
        value = float(ratio)
    except (TypeError, ValueError):
        return "0.0%"
    if not math.isfinite(value):
        return "0.0%"
    return f"{value * 100:.1f}%"


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is zero."""
    if not denominator:
        return 0.0
    return numerator / denominator


def escape_html(text: str) -> str:
    """Entity-encode ``&``, ``<``, ``>`` and ``"`` for markup text and attributes."""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def safe_json_for_script(value: Any) -> str:
    """Serialize *value* as compact JSON that cannot close an enclosing tag.

    Every ``</`` becomes ``<\\/``, which is the same string to a JSON/JS
    parser but never terminates a ``<script>`` or ``<style>`` element.
    """
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).replace("</", "<\\/")


def status_code_class(code: int) -> str:
    """Bucket an HTTP status into ``2xx`` .. ``5xx``, or ``other`` outside 200-599."""
    if 200 <= code <= 599:
        return f"{code // 100}xx"
    return "other"


_STATUS_CLASS_TAGS = {
    "2xx": "tag-green",
    "3xx": "tag-blue",
    "4xx": "tag-orange",
    "5xx": "tag-red",
}


def status_code_tag_class(code: int) -> str:
    """CSS tag class for a status code's bucket."""
    return _STATUS_CLASS_TAGS.get(status_code_class(code), "tag-purple")


# Fixed English month names; strftime("%b") follows the process locale.
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

DATE_RANGE_SEPARATOR = " — "


def _month(moment: datetime) -> str:
    return _MONTHS[moment.month - 1]


def _format_day(moment: datetime) -> str:
    return f"{_month(moment)} {moment.day}, {moment.year}"


def format_date_range(start: str, end: str) -> str:
    """``Feb 13, 2026`` to ``Feb 20, 2026`` (UTC), joined by an em dash."""
    return (
        _format_day(parse_timestamp(start))
        + DATE_RANGE_SEPARATOR
        + _format_day(parse_timestamp(end))
    )


def format_hour(timestamp: str) -> str:
    """Chart label for an hourly bucket: ``Feb 13 05:00`` (UTC).

    Unparseable input is returned unchanged.
    """
    try:
        moment = parse_timestamp(timestamp)
    except ValueError:
        return timestamp
    return f"{_month(moment)} {moment.day} {moment:%H:%M}"
