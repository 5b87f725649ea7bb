"""Cloudflare analytics module for cfreport."""

from .client import (
    AnalyticsApiError,
    AnalyticsClient,
    AnalyticsConnectionError,
    AnalyticsEmptyResponseError,
    AnalyticsHttpError,
    AnalyticsQueryError,
    Fetcher,
    create_fetcher,
)
from .traffic_overview import (
    CacheStatusEntry,
    CountryEntry,
    HourlyTraffic,
    NoZoneDataError,
    PathEntry,
    StatusCodeEntry,
    TrafficDataError,
    TrafficOverviewData,
    TrafficOverviewQuery,
    build_traffic_overview_query,
    compute_cache_hit_ratio,
    parse_traffic_data,
)
from .types import TimePreset, TimeRange, format_timestamp, parse_timestamp

__all__ = [
    # Client
    "AnalyticsClient",
    "Fetcher",
    "create_fetcher",
    # Time range
    "TimePreset",
    "TimeRange",
    "format_timestamp",
    "parse_timestamp",
    # Traffic overview
    "TrafficOverviewQuery",
    "TrafficOverviewData",
    "HourlyTraffic",
    "StatusCodeEntry",
    "PathEntry",
    "CountryEntry",
    "CacheStatusEntry",
    "build_traffic_overview_query",
    "compute_cache_hit_ratio",
    "parse_traffic_data",
    # Exceptions
    "AnalyticsApiError",
    "AnalyticsConnectionError",
    "AnalyticsHttpError",
    "AnalyticsQueryError",
    "AnalyticsEmptyResponseError",
    "TrafficDataError",
    "NoZoneDataError",
]
