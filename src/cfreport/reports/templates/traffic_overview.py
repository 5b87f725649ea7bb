"""Traffic Overview report.

Renders a single self-contained HTML document for one zone and window:

    hero (4 summary cards)
    Section 01  Traffic Over Time   line chart
    Section 02  Status Codes        doughnut by class + table
    Section 03  Top Paths           ranked table
    Section 04  Top Countries       horizontal bar chart + table
    Section 05  Cache Performance   doughnut + table
    footer

When the window recorded no requests only the hero, a notice and the
footer are rendered -- no section and no chart.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from cfreport._constants import CHART_JS_URL, GENERATOR_NAME
from cfreport.analytics.client import Fetcher
from cfreport.analytics.traffic_overview import (
    TrafficOverviewData,
    build_traffic_overview_query,
    parse_traffic_data,
)
from cfreport.reports.formatting import (
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
from cfreport.reports.types import ReportConfig

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No traffic data was recorded for this zone during the selected time range."

_STATUS_CLASS_COLORS = {
    "2xx": "#4ade80",
    "3xx": "#38bdf8",
    "4xx": "#fb923c",
    "5xx": "#f43f5e",
}
_STATUS_CLASS_FALLBACK_COLOR = "#a78bfa"

_CACHE_STATUS_COLORS = {
    "hit": "#4ade80",
    "miss": "#f43f5e",
    "dynamic": "#a78bfa",
    "expired": "#fb923c",
    "stale": "#facc15",
    "revalidated": "#22d3ee",
}
_CACHE_STATUS_FALLBACK_COLOR = "#64748b"

_STYLESHEET = """
*,*::before,*::after{margin:0;padding:0;box-sizing:border-box}
:root{
  --bg-deep:#050a14;--bg-primary:#0a1628;--bg-card:#0d1f3c;--bg-elevated:#132f52;
  --border-subtle:rgba(56,189,248,0.08);--border-glow:rgba(56,189,248,0.2);
  --text-primary:#e2e8f0;--text-secondary:#94a3b8;--text-muted:#64748b;--text-bright:#f8fafc;
  --accent-blue:#38bdf8;--accent-cyan:#22d3ee;--accent-red:#f43f5e;
  --accent-orange:#fb923c;--accent-yellow:#facc15;--accent-green:#4ade80;--accent-purple:#a78bfa;
  --radius:12px;--radius-lg:16px;
  --font-sans:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Ubuntu,sans-serif;
  --font-mono:'SF Mono',Monaco,Consolas,'Liberation Mono',monospace;
}
html{font-size:16px}
body{background:var(--bg-deep);color:var(--text-primary);font-family:var(--font-sans);line-height:1.7;-webkit-font-smoothing:antialiased}
.container{max-width:1200px;margin:0 auto;padding:0 2rem}
.hero-inner{text-align:center;padding:6rem 2rem 4rem}
.eyebrow{font-family:var(--font-mono);font-size:0.75rem;color:var(--accent-blue);letter-spacing:0.08em;text-transform:uppercase;margin-bottom:1.5rem}
.hero h1{font-size:clamp(2rem,5vw,3.5rem);font-weight:900;line-height:1.1;color:var(--text-bright);margin-bottom:1rem}
.hero p{color:var(--text-secondary);font-size:1.1rem;max-width:600px;margin:0 auto 2.5rem}
.section{padding:5rem 0}
.section-header{margin-bottom:2.5rem}
.section-number{font-family:var(--font-mono);font-size:0.7rem;font-weight:700;color:var(--accent-blue);letter-spacing:0.15em;text-transform:uppercase;margin-bottom:0.75rem}
.section-title{font-size:clamp(1.8rem,3vw,2.5rem);font-weight:800;letter-spacing:-0.02em;color:var(--text-bright);line-height:1.2}
.card{background:var(--bg-card);border:1px solid var(--border-subtle);border-radius:var(--radius-lg);padding:2rem;text-align:center}
.card-grid{display:grid;gap:1.5rem}
.card-grid-2{grid-template-columns:repeat(auto-fit,minmax(340px,1fr))}
.card-grid-4{grid-template-columns:repeat(auto-fit,minmax(200px,1fr));max-width:900px;margin:0 auto}
.card-label{font-size:0.7rem;color:var(--text-muted);text-transform:uppercase;letter-spacing:0.1em;font-weight:600;margin-bottom:8px}
.card-value{font-size:2.2rem;font-weight:800;letter-spacing:-0.02em;line-height:1;margin-bottom:8px}
.table-wrap{overflow-x:auto;border-radius:var(--radius);border:1px solid var(--border-subtle);margin:1.5rem 0}
.table-scroll{max-height:400px;overflow-y:auto}
table{width:100%;border-collapse:collapse;font-size:0.85rem}
thead{background:var(--bg-elevated)}
th{padding:12px 16px;text-align:left;font-weight:600;font-size:0.7rem;text-transform:uppercase;letter-spacing:0.08em;color:var(--text-muted);border-bottom:1px solid var(--border-subtle);white-space:nowrap}
td{padding:12px 16px;border-bottom:1px solid rgba(56,189,248,0.04);color:var(--text-secondary)}
.mono{font-family:var(--font-mono);font-size:0.8rem}
.tag{display:inline-flex;padding:3px 10px;border-radius:100px;font-size:0.65rem;font-weight:700;text-transform:uppercase;letter-spacing:0.06em}
.tag-red{background:rgba(244,63,94,0.12);color:var(--accent-red)}
.tag-orange{background:rgba(251,146,60,0.12);color:var(--accent-orange)}
.tag-green{background:rgba(74,222,128,0.12);color:var(--accent-green)}
.tag-blue{background:rgba(56,189,248,0.12);color:var(--accent-blue)}
.tag-purple{background:rgba(167,139,250,0.12);color:var(--accent-purple)}
.alert{border-radius:var(--radius);padding:1.25rem 1.5rem;border:1px solid;font-size:0.9rem}
.alert.info{background:rgba(56,189,248,0.06);border-color:rgba(56,189,248,0.2);color:rgba(56,189,248,0.9)}
.chart-container{position:relative;padding:1.5rem;background:var(--bg-card);border-radius:var(--radius-lg);border:1px solid var(--border-subtle)}
.chart-title{font-weight:700;font-size:1rem;margin-bottom:1rem;color:var(--text-bright)}
.chart-wrap{position:relative;width:100%;height:320px}
.chart-wrap-sm{height:280px}
footer{text-align:center;padding:4rem 2rem;color:var(--text-muted);font-size:0.75rem}
@media print{
  body{background:#fff;color:#000}
  .card{border:1px solid #ddd}
  .section{padding:2rem 0;page-break-inside:avoid}
}
"""


class TrafficOverviewTemplate:
    """Traffic volume, status codes, paths, geography and cache performance."""

    id = "traffic-overview"
    name = "Traffic Overview"
    description = (
        "Comprehensive web traffic analytics report with volume, status codes, "
        "paths, geography, and cache performance."
    )

    def generate(self, config: ReportConfig, fetcher: Fetcher) -> str:
        """Fetch, normalize and render the report.

        Args:
            config: Zone and window to report on
            fetcher: Executes the GraphQL query; called exactly once

        Returns:
            Complete HTML document
        """
        request = build_traffic_overview_query(config.zone_id, config.time_range)
        logger.debug("Fetching traffic overview for zone %s", config.zone_id)
        raw = fetcher(request.query, request.variables)
        data = parse_traffic_data(raw)
        return self.render(data, config)

    def render(
        self,
        data: TrafficOverviewData,
        config: ReportConfig,
        generated_at: datetime | None = None,
    ) -> str:
        """Render normalized data into the full HTML document.

        Args:
            data: Normalized traffic overview
            config: Zone and window the data belongs to
            generated_at: Generation timestamp (default: now, UTC)

        Returns:
            HTML string
        """
        generated_at = generated_at or datetime.now(timezone.utc)
        report_date = generated_at.strftime("%Y-%m-%d")
        zone_label = escape_html(config.display_name)

        hero_html = self._render_hero(data, config)
        body_html = self._render_sections(data) if data.has_traffic else self._render_no_data()
        footer_html = self._render_footer(config, report_date)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<meta name="generator" content="{GENERATOR_NAME}">
<meta name="report-date" content="{report_date}">
<meta name="report-zone" content="{zone_label}">
<title>{self.name} — {zone_label}</title>
<script src="{CHART_JS_URL}"></script>
<style>{_STYLESHEET}</style>
</head>
<body>

{hero_html}

<div class="container">
{body_html}
</div>

{footer_html}

</body>
</html>"""

    # ------------------------------------------------------------------
    # Page chrome
    # ------------------------------------------------------------------

    def _render_hero(self, data: TrafficOverviewData, config: ReportConfig) -> str:
        """Title block and the four summary cards (always rendered)."""
        date_range = format_date_range(config.time_range.start, config.time_range.end)

        return f"""<section class="hero">
  <div class="container hero-inner">
    <div class="eyebrow">{GENERATOR_NAME} &middot; {self.name}</div>
    <h1>{self.name}</h1>
    <p>{escape_html(config.display_name)} &middot; {escape_html(date_range)}</p>
    <div class="card-grid card-grid-4">
      <div class="card">
        <div class="card-label">Total Requests</div>
        <div class="card-value" style="color:var(--accent-blue)">{format_number(data.total_requests)}</div>
      </div>
      <div class="card">
        <div class="card-label">Bandwidth</div>
        <div class="card-value" style="color:var(--accent-cyan)">{format_bytes(data.total_bandwidth)}</div>
      </div>
      <div class="card">
        <div class="card-label">Visitors</div>
        <div class="card-value" style="color:var(--accent-green)">{format_number(data.total_visitors)}</div>
      </div>
      <div class="card">
        <div class="card-label">Cache Hit</div>
        <div class="card-value" style="color:var(--accent-purple)">{format_percent(data.cache_hit_ratio)}</div>
      </div>
    </div>
  </div>
</section>"""

    def _render_no_data(self) -> str:
        return f"""<section class="section">
  <div class="alert info">{NO_DATA_MESSAGE}</div>
</section>"""

    def _render_footer(self, config: ReportConfig, report_date: str) -> str:
        date_range = format_date_range(config.time_range.start, config.time_range.end)

        return f"""<footer>
  <p>Generated by {GENERATOR_NAME} &middot; {report_date} &middot; {escape_html(date_range)}</p>
  <p style="margin-top:0.5rem">Data source: Cloudflare Analytics API</p>
</footer>"""

    def _render_section_header(self, number: int, label: str, title: str) -> str:
        return f"""<div class="section-header">
    <div class="section-number">Section {number:02d} &mdash; {label}</div>
    <div class="section-title">{title}</div>
  </div>"""

    def _render_sections(self, data: TrafficOverviewData) -> str:
        return "\n".join(
            [
                self._render_traffic_over_time(data),
                self._render_status_codes(data),
                self._render_top_paths(data),
                self._render_top_countries(data),
                self._render_cache_performance(data),
            ]
        )

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _render_traffic_over_time(self, data: TrafficOverviewData) -> str:
        """Section 01: hourly request volume as a line chart."""
        labels = safe_json_for_script([format_hour(h.hour) for h in data.traffic_over_time])
        requests = safe_json_for_script([h.requests for h in data.traffic_over_time])

        return f"""<section class="section">
  {self._render_section_header(1, "Traffic Over Time", "Request Volume")}
  <div class="chart-container">
    <div class="chart-wrap"><canvas id="trafficChart"></canvas></div>
  </div>
  <script>
  (function(){{
    new Chart(document.getElementById('trafficChart'), {{
      type: 'line',
      data: {{
        labels: {labels},
        datasets: [{{
          label: 'Requests',
          data: {requests},
          borderColor: '#38bdf8',
          backgroundColor: 'rgba(56,189,248,0.08)',
          fill: true,
          tension: 0.3,
          pointRadius: 0,
          borderWidth: 2
        }}]
      }},
      options: {{
        responsive: true,
        maintainAspectRatio: false,
        plugins: {{ legend: {{ labels: {{ color: '#94a3b8', font: {{ size: 11 }} }} }} }},
        scales: {{
          x: {{ ticks: {{ color: '#64748b', maxTicksLimit: 14 }}, grid: {{ color: 'rgba(56,189,248,0.04)' }} }},
          y: {{ ticks: {{ color: '#64748b' }}, grid: {{ color: 'rgba(56,189,248,0.04)' }} }}
        }}
      }}
    }});
  }})();
  </script>
</section>"""

    def _group_status_classes(self, data: TrafficOverviewData) -> dict[str, dict[str, int]]:
        """Sum status code rows per class, in order of first appearance."""
        grouped: dict[str, dict[str, int]] = {}
        for sc in data.status_codes:
            bucket = grouped.setdefault(status_code_class(sc.code), {"count": 0, "bandwidth": 0})
            bucket["count"] += sc.count
            bucket["bandwidth"] += sc.bandwidth
        return grouped

    def _render_status_codes(self, data: TrafficOverviewData) -> str:
        """Section 02: doughnut by status class plus per-code table."""
        grouped = self._group_status_classes(data)
        labels = safe_json_for_script(list(grouped))
        counts = safe_json_for_script([g["count"] for g in grouped.values()])
        colors = safe_json_for_script(
            [_STATUS_CLASS_COLORS.get(cls, _STATUS_CLASS_FALLBACK_COLOR) for cls in grouped]
        )

        rows = "\n".join(
            f"""<tr>
      <td><span class="tag {status_code_tag_class(sc.code)}">{sc.code}</span></td>
      <td class="mono">{format_count(sc.count)}</td>
      <td class="mono">{format_bytes(sc.bandwidth)}</td>
      <td class="mono">{format_percent(safe_ratio(sc.count, data.total_requests))}</td>
    </tr>"""
            for sc in data.status_codes
        )

        return f"""<section class="section">
  {self._render_section_header(2, "Status Codes", "Response Status Breakdown")}
  <div class="card-grid card-grid-2">
    <div class="chart-container">
      <div class="chart-title">By Class</div>
      <div class="chart-wrap chart-wrap-sm"><canvas id="statusChart"></canvas></div>
    </div>
    <div class="table-wrap table-scroll">
      <table>
        <thead><tr><th>Code</th><th>Requests</th><th>Bandwidth</th><th>% Total</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    </div>
  </div>
  {self._render_doughnut_script("statusChart", labels, counts, colors)}
</section>"""

    def _render_top_paths(self, data: TrafficOverviewData) -> str:
        """Section 03: ranked path table."""
        rows = "\n".join(
            f"""<tr>
      <td class="mono">{rank}</td>
      <td class="mono">{escape_html(p.path)}</td>
      <td class="mono">{format_count(p.count)}</td>
      <td class="mono">{format_bytes(p.bandwidth)}</td>
      <td class="mono">{format_percent(safe_ratio(p.count, data.total_requests))}</td>
    </tr>"""
            for rank, p in enumerate(data.top_paths, start=1)
        )

        return f"""<section class="section">
  {self._render_section_header(3, "Top Paths", "Most Requested Paths")}
  <div class="table-wrap">
    <table>
      <thead><tr><th>#</th><th>Path</th><th>Requests</th><th>Bandwidth</th><th>% Total</th></tr></thead>
      <tbody>{rows}</tbody>
    </table>
  </div>
</section>"""

    def _render_top_countries(self, data: TrafficOverviewData) -> str:
        """Section 04: horizontal bar chart plus ranked country table."""
        labels = safe_json_for_script([c.country for c in data.top_countries])
        counts = safe_json_for_script([c.count for c in data.top_countries])

        rows = "\n".join(
            f"""<tr>
      <td class="mono">{rank}</td>
      <td>{escape_html(c.country)}</td>
      <td class="mono">{format_count(c.count)}</td>
      <td class="mono">{format_bytes(c.bandwidth)}</td>
      <td class="mono">{format_count(c.visitors)}</td>
    </tr>"""
            for rank, c in enumerate(data.top_countries, start=1)
        )

        return f"""<section class="section">
  {self._render_section_header(4, "Top Countries", "Geographic Distribution")}
  <div class="card-grid card-grid-2">
    <div class="chart-container">
      <div class="chart-title">Requests by Country</div>
      <div class="chart-wrap"><canvas id="countriesChart"></canvas></div>
    </div>
    <div class="table-wrap table-scroll">
      <table>
        <thead><tr><th>#</th><th>Country</th><th>Requests</th><th>Bandwidth</th><th>Visitors</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    </div>
  </div>
  <script>
  (function(){{
    new Chart(document.getElementById('countriesChart'), {{
      type: 'bar',
      data: {{
        labels: {labels},
        datasets: [{{
          label: 'Requests',
          data: {counts},
          backgroundColor: 'rgba(56,189,248,0.6)',
          borderColor: '#38bdf8',
          borderWidth: 1,
          borderRadius: 4
        }}]
      }},
      options: {{
        indexAxis: 'y',
        responsive: true,
        maintainAspectRatio: false,
        plugins: {{ legend: {{ display: false }} }},
        scales: {{
          x: {{ ticks: {{ color: '#64748b' }}, grid: {{ color: 'rgba(56,189,248,0.04)' }} }},
          y: {{ ticks: {{ color: '#94a3b8' }}, grid: {{ display: false }} }}
        }}
      }}
    }});
  }})();
  </script>
</section>"""

    def _render_cache_performance(self, data: TrafficOverviewData) -> str:
        """Section 05: cache status doughnut plus table."""
        labels = safe_json_for_script([c.status for c in data.cache_statuses])
        counts = safe_json_for_script([c.count for c in data.cache_statuses])
        colors = safe_json_for_script(
            [
                _CACHE_STATUS_COLORS.get(c.status.lower(), _CACHE_STATUS_FALLBACK_COLOR)
                for c in data.cache_statuses
            ]
        )

        rows = "\n".join(
            f"""<tr>
      <td class="mono">{escape_html(c.status)}</td>
      <td class="mono">{format_count(c.count)}</td>
      <td class="mono">{format_bytes(c.bandwidth)}</td>
      <td class="mono">{format_percent(safe_ratio(c.count, data.total_requests))}</td>
    </tr>"""
            for c in data.cache_statuses
        )

        return f"""<section class="section">
  {self._render_section_header(5, "Cache Performance", "Edge Cache Efficiency")}
  <div class="card-grid card-grid-2">
    <div class="chart-container">
      <div class="chart-title">Cache Status Distribution</div>
      <div class="chart-wrap chart-wrap-sm"><canvas id="cacheChart"></canvas></div>
    </div>
    <div class="table-wrap">
      <table>
        <thead><tr><th>Status</th><th>Requests</th><th>Bandwidth</th><th>% Total</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    </div>
  </div>
  {self._render_doughnut_script("cacheChart", labels, counts, colors)}
</section>"""

    def _render_doughnut_script(
        self, canvas_id: str, labels_json: str, counts_json: str, colors_json: str
    ) -> str:
        """Chart bootstrap for a doughnut; all arguments are pre-serialized JSON."""
        return f"""<script>
  (function(){{
    new Chart(document.getElementById('{canvas_id}'), {{
      type: 'doughnut',
      data: {{
        labels: {labels_json},
        datasets: [{{
          data: {counts_json},
          backgroundColor: {colors_json},
          borderColor: '#0a1628',
          borderWidth: 2
        }}]
      }},
      options: {{
        responsive: true,
        maintainAspectRatio: false,
        plugins: {{
          legend: {{ position: 'bottom', labels: {{ color: '#94a3b8', font: {{ size: 11 }}, padding: 16 }} }}
        }}
      }}
    }});
  }})();
  </script>"""


traffic_overview_template = TrafficOverviewTemplate()
