"""Report template contract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from cfreport.analytics.client import Fetcher
from cfreport.analytics.types import TimeRange


@dataclass(frozen=True)
class ReportConfig:
    """Target zone and window for one report generation."""

    zone_id: str
    time_range: TimeRange
    zone_name: str | None = None

    @property
    def display_name(self) -> str:
        """Human label for the zone, falling back to its identifier."""
        return self.zone_name or self.zone_id


class ReportTemplate(Protocol):
    """A named report type.

    ``generate`` must obtain data only through *fetcher*; templates never
    build their own network client.
    """

    id: str
    name: str
    description: str

    def generate(self, config: ReportConfig, fetcher: Fetcher) -> str: ...
