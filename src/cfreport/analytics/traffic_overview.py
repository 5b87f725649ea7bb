"""Traffic overview query and response normalization.

A single GraphQL request fetches six aliased ``httpRequestsAdaptiveGroups``
aggregations over the same window:

- ``totals`` -- one row covering the whole window
- ``trafficOverTime`` -- hourly buckets, oldest first
- ``statusCodeBreakdown`` -- per edge response status
- ``topPaths`` -- most requested paths
- ``topCountries`` -- most active client countries
- ``cachePerformance`` -- per cache status

All six aggregations share one round trip.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .types import TimeRange

logger = logging.getLogger(__name__)


TRAFFIC_OVERVIEW_QUERY = """
query TrafficOverview($zoneTag: string!, $since: string!, $until: string!) {
  viewer {
    zones(filter: { zoneTag: $zoneTag }) {
      totals: httpRequestsAdaptiveGroups(
        filter: { datetime_gt: $since, datetime_lt: $until }
        limit: 1
      ) {
        count
        sum { edgeResponseBytes visits }
      }
      trafficOverTime: httpRequestsAdaptiveGroups(
        filter: { datetime_gt: $since, datetime_lt: $until }
        limit: 1000
        orderBy: [datetimeHour_ASC]
      ) {
        count
        sum { edgeResponseBytes visits }
        dimensions { datetimeHour }
      }
      statusCodeBreakdown: httpRequestsAdaptiveGroups(
        filter: { datetime_gt: $since, datetime_lt: $until }
        limit: 100
        orderBy: [count_DESC]
      ) {
        count
        sum { edgeResponseBytes }
        dimensions { edgeResponseStatus }
      }
      topPaths: httpRequestsAdaptiveGroups(
        filter: { datetime_gt: $since, datetime_lt: $until }
        limit: 20
        orderBy: [count_DESC]
      ) {
        count
        sum { edgeResponseBytes }
        dimensions { clientRequestPath }
      }
      topCountries: httpRequestsAdaptiveGroups(
        filter: { datetime_gt: $since, datetime_lt: $until }
        limit: 15
        orderBy: [count_DESC]
      ) {
        count
        sum { edgeResponseBytes visits }
        dimensions { clientCountryName }
      }
      cachePerformance: httpRequestsAdaptiveGroups(
        filter: { datetime_gt: $since, datetime_lt: $until }
        limit: 20
        orderBy: [count_DESC]
      ) {
        count
        sum { edgeResponseBytes }
        dimensions { cacheStatus }
      }
    }
  }
}"""

# Cache statuses that never reach the cache; excluded from the hit-ratio denominator.
UNCACHEABLE_STATUSES = frozenset({"none", "dynamic"})

# Served from cache, including stale and revalidated responses.
CACHE_HIT_STATUSES = frozenset({"hit", "stale", "revalidated"})


class TrafficDataError(Exception):
    """Base exception for malformed traffic query results."""

    pass


class NoZoneDataError(TrafficDataError):
    """Raised when the query result contains no zone entry."""

    pass


@dataclass(frozen=True)
class TrafficOverviewQuery:
    """A ready-to-send GraphQL query and its variable bindings."""

    query: str
    zone_tag: str
    since: str
    until: str

    @property
    def variables(self) -> dict[str, Any]:
        return {"zoneTag": self.zone_tag, "since": self.since, "until": self.until}


def build_traffic_overview_query(zone_id: str, time_range: TimeRange) -> TrafficOverviewQuery:
    """Bind the static traffic overview query to a zone and window."""
    return TrafficOverviewQuery(
        query=TRAFFIC_OVERVIEW_QUERY,
        zone_tag=zone_id,
        since=time_range.start,
        until=time_range.end,
    )


# =============================================================================
# Domain model
# =============================================================================


@dataclass(frozen=True)
class HourlyTraffic:
    hour: str
    requests: int = 0
    bandwidth: int = 0
    visitors: int = 0


@dataclass(frozen=True)
class StatusCodeEntry:
    code: int
    count: int = 0
    bandwidth: int = 0


@dataclass(frozen=True)
class PathEntry:
    path: str
    count: int = 0
    bandwidth: int = 0


@dataclass(frozen=True)
class CountryEntry:
    country: str
    count: int = 0
    bandwidth: int = 0
    visitors: int = 0


@dataclass(frozen=True)
class CacheStatusEntry:
    status: str
    count: int = 0
    bandwidth: int = 0


@dataclass(frozen=True)
class TrafficOverviewData:
    """Normalized traffic overview for one zone and window.

    Totals come from the ``totals`` aggregation and are not reconciled
    against the detail aggregations.
    """

    total_requests: int = 0
    total_bandwidth: int = 0
    total_visitors: int = 0
    cache_hit_ratio: float = 0.0
    traffic_over_time: list[HourlyTraffic] = field(default_factory=list)
    status_codes: list[StatusCodeEntry] = field(default_factory=list)
    top_paths: list[PathEntry] = field(default_factory=list)
    top_countries: list[CountryEntry] = field(default_factory=list)
    cache_statuses: list[CacheStatusEntry] = field(default_factory=list)

    @property
    def has_traffic(self) -> bool:
        return self.total_requests > 0


# =============================================================================
# Normalization helpers
# =============================================================================


def _as_int(value: Any) -> int:
    """Coerce an upstream number to a non-negative int (0 when absent or invalid)."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, (int, float)) and math.isfinite(value):
        return max(int(value), 0)
    return 0


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _rows(zone: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    value = zone.get(key)
    if not isinstance(value, list):
        return []
    return [_mapping(row) for row in value]


def _count(row: Mapping[str, Any]) -> int:
    return _as_int(row.get("count"))


def _sum(row: Mapping[str, Any], key: str) -> int:
    return _as_int(_mapping(row.get("sum")).get(key))


def _dimension(row: Mapping[str, Any], key: str) -> Any:
    return _mapping(row.get("dimensions")).get(key)


def compute_cache_hit_ratio(rows: Iterable[Mapping[str, Any]]) -> float:
    """Share of cacheable requests served from cache.

    ``none`` and ``dynamic`` rows are left out of the denominator entirely;
    ``hit``, ``stale`` and ``revalidated`` count as hits.  Returns 0.0 when
    there is no cacheable traffic.
    """
    hits = 0
    cacheable = 0
    for row in rows:
        row = _mapping(row)
        status = _as_str(_dimension(row, "cacheStatus")).lower()
        if status in UNCACHEABLE_STATUSES:
            continue
        count = _count(row)
        cacheable += count
        if status in CACHE_HIT_STATUSES:
            hits += count

    if cacheable <= 0:
        return 0.0
    return min(max(hits / cacheable, 0.0), 1.0)


def _first_zone(raw: Any) -> Mapping[str, Any]:
    viewer = _mapping(_mapping(raw).get("viewer"))
    zones = viewer.get("zones")
    if not isinstance(zones, list) or not zones:
        raise NoZoneDataError("No zone data returned from Cloudflare API")
    return _mapping(zones[0])


def parse_traffic_data(raw: Any) -> TrafficOverviewData:
    """Normalize a raw traffic overview query result.

    Every field of *raw* is treated as optional.  Missing rows and fields
    default to zero or the empty string; row order is preserved as returned
    by the API.

    Raises:
        NoZoneDataError: If the result holds no zone entry.
    """
    zone = _first_zone(raw)

    totals_rows = _rows(zone, "totals")
    totals = totals_rows[0] if totals_rows else {}
    cache_rows = _rows(zone, "cachePerformance")

    data = TrafficOverviewData(
        total_requests=_count(totals),
        total_bandwidth=_sum(totals, "edgeResponseBytes"),
        total_visitors=_sum(totals, "visits"),
        cache_hit_ratio=compute_cache_hit_ratio(cache_rows),
        traffic_over_time=[
            HourlyTraffic(
                hour=_as_str(_dimension(row, "datetimeHour")),
                requests=_count(row),
                bandwidth=_sum(row, "edgeResponseBytes"),
                visitors=_sum(row, "visits"),
            )
            for row in _rows(zone, "trafficOverTime")
        ],
        status_codes=[
            StatusCodeEntry(
                code=_as_int(_dimension(row, "edgeResponseStatus")),
                count=_count(row),
                bandwidth=_sum(row, "edgeResponseBytes"),
            )
            for row in _rows(zone, "statusCodeBreakdown")
        ],
        top_paths=[
            PathEntry(
                path=_as_str(_dimension(row, "clientRequestPath")),
                count=_count(row),
                bandwidth=_sum(row, "edgeResponseBytes"),
            )
            for row in _rows(zone, "topPaths")
        ],
        top_countries=[
            CountryEntry(
                country=_as_str(_dimension(row, "clientCountryName")),
                count=_count(row),
                bandwidth=_sum(row, "edgeResponseBytes"),
                visitors=_sum(row, "visits"),
            )
            for row in _rows(zone, "topCountries")
        ],
        cache_statuses=[
            CacheStatusEntry(
                status=_as_str(_dimension(row, "cacheStatus")),
                count=_count(row),
                bandwidth=_sum(row, "edgeResponseBytes"),
            )
            for row in cache_rows
        ],
    )

    logger.debug(
        "Parsed traffic data: %d requests, %d hourly rows, %d status codes, "
        "%d paths, %d countries, %d cache statuses",
        data.total_requests,
        len(data.traffic_over_time),
        len(data.status_codes),
        len(data.top_paths),
        len(data.top_countries),
        len(data.cache_statuses),
    )
    return data
