"""Built-in report templates."""

from .traffic_overview import TrafficOverviewTemplate, traffic_overview_template

__all__ = [
    "TrafficOverviewTemplate",
    "traffic_overview_template",
]
