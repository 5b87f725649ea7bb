"""Shared fixtures for the cfreport test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest

from cfreport.analytics.types import TimeRange
from cfreport.reports.types import ReportConfig

ZONE_ID = "0123456789abcdef0123456789abcdef"
API_TOKEN = "cf-test-token-s3cr3t-value"


def _row(count: int, bytes_: int, visits: int | None = None, **dimensions: Any) -> dict:
    row: dict[str, Any] = {"count": count, "sum": {"edgeResponseBytes": bytes_}}
    if visits is not None:
        row["sum"]["visits"] = visits
    if dimensions:
        row["dimensions"] = dimensions
    return row


def make_hourly_rows(hours: int = 168, start: str = "2026-02-13T00:00:00Z") -> list[dict]:
    """Hourly ``trafficOverTime`` rows, oldest first."""
    base = datetime.fromisoformat(start.replace("Z", "+00:00"))
    rows = []
    for i in range(hours):
        hour = (base + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M:%SZ")
        rows.append(_row(10_000 + i, 100_000 + i * 10, 1_000 + i, datetimeHour=hour))
    return rows


def make_zone(**overrides: Any) -> dict:
    """One zone entry shaped like the traffic overview query result.

    Totals match a real week of traffic: 1,916,778 requests,
    19,474,125,231 bytes and 236,272 visitors.
    """
    zone: dict[str, Any] = {
        "totals": [_row(1_916_778, 19_474_125_231, 236_272)],
        "trafficOverTime": make_hourly_rows(),
        "statusCodeBreakdown": [
            _row(865_779, 1_203_554_112, edgeResponseStatus=403),
            _row(812_400, 17_006_221_003, edgeResponseStatus=200),
            _row(150_233, 98_112_004, edgeResponseStatus=301),
            _row(80_112, 150_000_120, edgeResponseStatus=404),
            _row(8_254, 16_237_992, edgeResponseStatus=502),
        ],
        "topPaths": [
            _row(402_113, 9_001_223_004, clientRequestPath="/"),
            _row(201_554, 1_022_339_120, clientRequestPath="/wp-login.php"),
            _row(99_871, 512_004_332, clientRequestPath="/api/v1/items"),
        ],
        "topCountries": [
            _row(1_002_331, 9_882_113_221, 120_554, clientCountryName="US"),
            _row(402_119, 4_112_002_331, 50_112, clientCountryName="DE"),
            _row(99_402, 1_000_223_114, 9_881, clientCountryName="JP"),
        ],
        "cachePerformance": [
            _row(900_000, 8_000_000_000, cacheStatus="dynamic"),
            _row(600_000, 6_000_000_000, cacheStatus="hit"),
            _row(200_000, 2_000_000_000, cacheStatus="miss"),
            _row(100_000, 1_000_000_000, cacheStatus="none"),
            _row(60_000, 600_000_000, cacheStatus="stale"),
            _row(40_000, 400_000_000, cacheStatus="revalidated"),
            _row(16_778, 1_474_125_231, cacheStatus="expired"),
        ],
    }
    zone.update(overrides)
    return zone


def make_traffic_response(*zones: dict) -> dict:
    """A ``data`` payload as returned by the analytics client.

    With no arguments, holds a single default zone from :func:`make_zone`.
    """
    return {"viewer": {"zones": list(zones) if zones else [make_zone()]}}


def make_empty_traffic_response() -> dict:
    """A zone that recorded no traffic in the window."""
    return make_traffic_response(
        make_zone(
            totals=[_row(0, 0, 0)],
            trafficOverTime=[],
            statusCodeBreakdown=[],
            topPaths=[],
            topCountries=[],
            cachePerformance=[],
        )
    )


def make_request_body(**overrides: Any) -> dict:
    """A valid generate request body in wire (camelCase) form."""
    body: dict[str, Any] = {
        "apiToken": API_TOKEN,
        "zoneId": ZONE_ID,
        "zoneName": "example.com",
        "templateId": "traffic-overview",
        "timeRange": {"start": "2026-02-13T00:00:00Z", "end": "2026-02-20T00:00:00Z"},
    }
    body.update(overrides)
    return body


@pytest.fixture
def time_range() -> TimeRange:
    return TimeRange(start="2026-02-13T00:00:00Z", end="2026-02-20T00:00:00Z")


@pytest.fixture
def report_config(time_range) -> ReportConfig:
    return ReportConfig(zone_id=ZONE_ID, time_range=time_range, zone_name="example.com")


@pytest.fixture
def traffic_response() -> dict:
    return make_traffic_response()


@pytest.fixture
def mock_fetcher(traffic_response):
    """Fetcher stub returning the default traffic response."""
    return MagicMock(return_value=traffic_response)


@pytest.fixture
def generated_at() -> datetime:
    return datetime(2026, 2, 20, 12, 0, 0, tzinfo=timezone.utc)
