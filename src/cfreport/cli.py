"""cfreport CLI."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from cfreport import __version__
from cfreport._constants import API_TOKEN_ENV_VAR
from cfreport.analytics.types import TimePreset, TimeRange, parse_timestamp
from cfreport.config import (
    CfReportConfig,
    ConfigError,
    generate_example_config_yaml,
    load_config,
)
from cfreport.reports import generate_report, list_templates

# Default config file name for auto-discovery
DEFAULT_CONFIG = "cfreport.yaml"

# Exit codes for `generate`
EXIT_INVALID_INPUT = 1
EXIT_GENERATION_FAILED = 2

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cfreport",
    help="Generate self-contained HTML analytics reports for Cloudflare zones",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    epilog="[dim]Workflow: init -> templates -> generate[/dim]",
)

console = Console()


# =============================================================================
# Helper Functions
# =============================================================================


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]OK[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]ERROR[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]WARN[/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]...[/blue] {message}")


def setup_logging(verbose: bool) -> None:
    """Route library log records through Rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO; keep it quiet unless debugging
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def resolve_config(config_file: Path | None) -> CfReportConfig:
    """Load the config file, falling back to ./cfreport.yaml, then defaults.

    An explicitly named file must exist; the default file is optional.
    """
    path = config_file
    if path is None:
        default = Path(DEFAULT_CONFIG)
        if not default.exists():
            return CfReportConfig()
        path = default

    try:
        return load_config(path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(EXIT_INVALID_INPUT)  # noqa: B904


def default_output_path(output_dir: str, template_id: str, zone_id: str) -> Path:
    """``<output_dir>/<template>-<zone prefix>-<YYYYMMDD-HHMMSS>.html``."""
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    return Path(output_dir) / f"{template_id}-{zone_id[:8]}-{stamp}.html"


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"cfreport version {__version__}")


@app.command()
def init(
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output file path for configuration",
        ),
    ] = Path(DEFAULT_CONFIG),
    zone_id: Annotated[
        str,
        typer.Option(
            "--zone-id",
            help="Cloudflare zone ID (32 hex characters)",
        ),
    ] = "",
    zone_name: Annotated[
        str,
        typer.Option(
            "--zone-name",
            help="Label shown in reports (e.g. example.com)",
        ),
    ] = "",
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing file",
        ),
    ] = False,
) -> None:
    """Create a starter configuration file."""
    if output.exists() and not force:
        print_error(f"{output} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    output.write_text(generate_example_config_yaml(zone_id=zone_id, zone_name=zone_name))
    print_success(f"Created {output}")
    print_info(f"Set {API_TOKEN_ENV_VAR} and run: cfreport generate")


@app.command()
def templates() -> None:
    """List available report templates."""
    table = Table(title="Report Templates")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Description")

    for t in list_templates():
        table.add_row(t.id, t.name, t.description)

    console.print(table)


@app.command()
def generate(
    config_file: Annotated[
        Path | None,
        typer.Argument(
            help=f"Path to configuration file (default: ./{DEFAULT_CONFIG} if present)",
        ),
    ] = None,
    zone_id: Annotated[
        str | None,
        typer.Option(
            "--zone-id",
            "-z",
            help="Cloudflare zone ID (overrides config)",
        ),
    ] = None,
    zone_name: Annotated[
        str | None,
        typer.Option(
            "--zone-name",
            help="Label shown in the report (overrides config)",
        ),
    ] = None,
    template: Annotated[
        str | None,
        typer.Option(
            "--template",
            "-t",
            help="Report template ID (see: cfreport templates)",
        ),
    ] = None,
    preset: Annotated[
        TimePreset | None,
        typer.Option(
            "--preset",
            "-p",
            help="Relative time window (ignored when --start/--end are given)",
        ),
    ] = None,
    start: Annotated[
        str | None,
        typer.Option(
            "--start",
            help="Window start, ISO 8601 (e.g. 2026-02-13T00:00:00Z)",
        ),
    ] = None,
    end: Annotated[
        str | None,
        typer.Option(
            "--end",
            help="Window end, ISO 8601",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the report to this file (default: <output_dir>/<template>-<zone>-<time>.html)",
        ),
    ] = None,
    api_token: Annotated[
        str | None,
        typer.Option(
            "--api-token",
            envvar=API_TOKEN_ENV_VAR,
            help="Cloudflare API token with Analytics:Read",
            show_default=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging",
        ),
    ] = False,
) -> None:
    """Generate an HTML report for a zone and time window.

    Options override values from the config file.
    """
    setup_logging(verbose)
    cfg = resolve_config(config_file)

    if cfg.has_api_token() and not api_token:
        print_warning(f"Using api_token from config file; prefer {API_TOKEN_ENV_VAR}")

    if (start is None) != (end is None):
        print_error("--start and --end must be given together")
        raise typer.Exit(EXIT_INVALID_INPUT)

    # Upstream filters expect UTC RFC 3339; normalize date-only and offset input
    if start is not None and end is not None:
        try:
            resolved = TimeRange.from_datetimes(parse_timestamp(start), parse_timestamp(end))
        except ValueError as e:
            print_error(str(e))
            raise typer.Exit(EXIT_INVALID_INPUT)  # noqa: B904
    else:
        resolved = TimeRange.from_preset(preset or cfg.preset)
    window = {"start": resolved.start, "end": resolved.end}

    template_id = template or cfg.template
    body = {
        "apiToken": api_token or cfg.api_token,
        "zoneId": zone_id or cfg.zone_id,
        "zoneName": zone_name or cfg.zone_name,
        "templateId": template_id,
        "timeRange": window,
    }

    print_info(
        f"Generating [bold]{template_id}[/bold] report for "
        f"{body['zoneName'] or body['zoneId'] or '(no zone)'}"
    )
    result = generate_report(body, endpoint=cfg.api.endpoint, timeout=cfg.api.timeout_seconds)

    if not result.ok:
        print_error(result.error or "Report generation failed")
        if result.status_code < 500:
            raise typer.Exit(EXIT_INVALID_INPUT)
        raise typer.Exit(EXIT_GENERATION_FAILED)

    report_path = output or default_output_path(cfg.output_dir, template_id, body["zoneId"])
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(result.html or "", encoding="utf-8")
    logger.debug("Wrote %s", report_path)

    console.print(
        Panel(
            f"[green]Report generated successfully![/green]\n\n"
            f"Output: {report_path}\n\n"
            f"Open in browser to view.",
            title="Report Generated",
            expand=False,
        )
    )


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
