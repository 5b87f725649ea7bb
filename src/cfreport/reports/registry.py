"""Template registry.

Templates are registered once at import.  Adding a report type means adding
its instance to ``_TEMPLATES``; lookup and listing do not change.
"""

from __future__ import annotations

from .templates import traffic_overview_template
from .types import ReportTemplate

_TEMPLATES: tuple[ReportTemplate, ...] = (traffic_overview_template,)

_REGISTRY: dict[str, ReportTemplate] = {t.id: t for t in _TEMPLATES}


def get_template(template_id: str) -> ReportTemplate | None:
    """Return the template registered under *template_id*, or None."""
    return _REGISTRY.get(template_id)


def list_templates() -> list[ReportTemplate]:
    """Return all registered templates in registration order."""
    return list(_REGISTRY.values())
