"""CLI surface tests using typer.testing.CliRunner.

No request leaves the process: ``generate`` tests replace the default
fetcher factory with a stub.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml
from typer.testing import CliRunner

from cfreport import __version__
from cfreport.cli import EXIT_GENERATION_FAILED, EXIT_INVALID_INPUT, app, default_output_path
from tests.conftest import API_TOKEN, ZONE_ID, make_traffic_response

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run every command from an empty directory with no token in the environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CLOUDFLARE_API_TOKEN", raising=False)


@pytest.fixture
def stub_fetcher(monkeypatch):
    """Replace the HTTP fetcher factory; returns the fetcher stub."""
    fetcher = MagicMock(return_value=make_traffic_response())
    factory = MagicMock(return_value=fetcher)
    monkeypatch.setattr("cfreport.reports.generate.create_fetcher", factory)
    fetcher.factory = factory
    return fetcher


def generate_args(*extra: str) -> list[str]:
    return [
        "generate",
        "--zone-id",
        ZONE_ID,
        "--start",
        "2026-02-13T00:00:00Z",
        "--end",
        "2026-02-20T00:00:00Z",
        *extra,
    ]


def output_text(result) -> str:
    """CLI output with Rich line wrapping collapsed to single spaces."""
    return " ".join(result.output.split())


# =============================================================================
# version / templates
# =============================================================================


class TestVersionCommand:
    def test_version_output(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in output_text(result)


class TestTemplatesCommand:
    def test_lists_traffic_overview(self):
        result = runner.invoke(app, ["templates"])
        assert result.exit_code == 0
        assert "traffic-overview" in output_text(result)
        assert "Traffic Overview" in output_text(result)


# =============================================================================
# init
# =============================================================================


class TestInitCommand:
    def test_creates_default_file(self, tmp_path):
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / "cfreport.yaml").exists()

    def test_zone_written(self, tmp_path):
        output = tmp_path / "site.yaml"
        args = ["init", "--output", str(output), "--zone-id", ZONE_ID, "--zone-name", "example.com"]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        data = yaml.safe_load(output.read_text())
        assert data == {"zone_id": ZONE_ID, "zone_name": "example.com"}

    def test_refuses_overwrite(self, tmp_path):
        output = tmp_path / "cfreport.yaml"
        output.write_text("zone_name: keep-me\n")

        result = runner.invoke(app, ["init", "--output", str(output)])
        assert result.exit_code == 1
        assert "already exists" in output_text(result)
        assert output.read_text() == "zone_name: keep-me\n"

    def test_force_overwrites(self, tmp_path):
        output = tmp_path / "cfreport.yaml"
        output.write_text("zone_name: old\n")

        result = runner.invoke(app, ["init", "--output", str(output), "--force"])
        assert result.exit_code == 0
        assert "old" not in output.read_text()


# =============================================================================
# generate
# =============================================================================


class TestGenerateCommand:
    def test_writes_report(self, tmp_path, stub_fetcher):
        output = tmp_path / "report.html"
        result = runner.invoke(
            app, generate_args("--output", str(output), "--api-token", API_TOKEN)
        )

        assert result.exit_code == 0, result.output
        html = output.read_text(encoding="utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "Report Generated" in output_text(result)
        stub_fetcher.assert_called_once()
        _, variables = stub_fetcher.call_args.args
        assert variables["zoneTag"] == ZONE_ID

    def test_token_from_environment(self, tmp_path, stub_fetcher):
        output = tmp_path / "report.html"
        result = runner.invoke(
            app,
            generate_args("--output", str(output)),
            env={"CLOUDFLARE_API_TOKEN": API_TOKEN},
        )

        assert result.exit_code == 0, result.output
        args, kwargs = stub_fetcher.factory.call_args
        assert args[0] == API_TOKEN
        assert kwargs["endpoint"] == "https://api.cloudflare.com/client/v4/graphql"

    def test_default_output_path(self, tmp_path, stub_fetcher):
        result = runner.invoke(app, generate_args("--api-token", API_TOKEN))

        assert result.exit_code == 0, result.output
        reports = list((tmp_path / "cfreport-output").glob("traffic-overview-01234567-*.html"))
        assert len(reports) == 1

    def test_config_file_supplies_zone(self, tmp_path, stub_fetcher):
        (tmp_path / "cfreport.yaml").write_text(
            f'zone_id: "{ZONE_ID}"\nzone_name: example.com\noutput_dir: reports\n'
        )
        result = runner.invoke(app, ["generate", "--api-token", API_TOKEN, "--preset", "24h"])

        assert result.exit_code == 0, result.output
        html = next((tmp_path / "reports").glob("*.html")).read_text(encoding="utf-8")
        assert '<meta name="report-zone" content="example.com">' in html

    def test_config_timeout_passed_to_fetcher(self, tmp_path, stub_fetcher):
        config = tmp_path / "custom.yaml"
        config.write_text(f'zone_id: "{ZONE_ID}"\napi:\n  timeout_seconds: 5\n')
        result = runner.invoke(app, ["generate", str(config), "--api-token", API_TOKEN])

        assert result.exit_code == 0, result.output
        assert stub_fetcher.factory.call_args.kwargs["timeout"] == 5

    def test_token_in_config_warns(self, tmp_path, stub_fetcher):
        (tmp_path / "cfreport.yaml").write_text(
            f'zone_id: "{ZONE_ID}"\napi_token: "{API_TOKEN}"\n'
        )
        result = runner.invoke(app, ["generate"])

        assert result.exit_code == 0, result.output
        assert "WARN" in output_text(result)

    def test_missing_config_file(self, tmp_path, stub_fetcher):
        result = runner.invoke(app, ["generate", str(tmp_path / "absent.yaml")])
        assert result.exit_code == EXIT_INVALID_INPUT
        assert "not found" in output_text(result)
        stub_fetcher.assert_not_called()

    def test_start_without_end(self, stub_fetcher):
        result = runner.invoke(
            app,
            ["generate", "--zone-id", ZONE_ID, "--api-token", API_TOKEN, "--start", "2026-02-13"],
        )
        assert result.exit_code == EXIT_INVALID_INPUT
        assert "--start and --end" in output_text(result)
        stub_fetcher.assert_not_called()

    def test_missing_token(self, stub_fetcher):
        result = runner.invoke(app, generate_args())
        assert result.exit_code == EXIT_INVALID_INPUT
        assert "apiToken is required" in output_text(result)
        stub_fetcher.assert_not_called()

    def test_invalid_zone(self, stub_fetcher):
        result = runner.invoke(app, ["generate", "--zone-id", "nope", "--api-token", API_TOKEN])
        assert result.exit_code == EXIT_INVALID_INPUT
        stub_fetcher.assert_not_called()

    def test_unknown_template(self, stub_fetcher):
        result = runner.invoke(app, generate_args("--api-token", API_TOKEN, "-t", "nope"))
        assert result.exit_code == EXIT_INVALID_INPUT
        assert "Unknown template" in output_text(result)

    def test_upstream_failure(self, tmp_path, stub_fetcher):
        stub_fetcher.side_effect = ConnectionError("network timeout")
        output = tmp_path / "report.html"
        result = runner.invoke(
            app, generate_args("--output", str(output), "--api-token", API_TOKEN)
        )

        assert result.exit_code == EXIT_GENERATION_FAILED
        assert "network timeout" in output_text(result)
        assert API_TOKEN not in output_text(result)
        assert not output.exists()

    @pytest.mark.parametrize(
        ("start", "end"),
        [
            ("2026-02-13", "2026-02-20"),
            ("2026-02-13T00:00:00", "2026-02-20T00:00:00"),
            ("2026-02-13T02:00:00+02:00", "2026-02-19T19:00:00-05:00"),
        ],
    )
    def test_custom_window_normalized_to_utc(self, stub_fetcher, start, end):
        result = runner.invoke(
            app,
            [
                "generate",
                "--zone-id",
                ZONE_ID,
                "--api-token",
                API_TOKEN,
                "--start",
                start,
                "--end",
                end,
            ],
        )

        assert result.exit_code == 0, result.output
        _, variables = stub_fetcher.call_args.args
        assert variables["since"] == "2026-02-13T00:00:00.000Z"
        assert variables["until"] == "2026-02-20T00:00:00.000Z"

    def test_unparseable_window(self, stub_fetcher):
        result = runner.invoke(
            app, generate_args("--api-token", API_TOKEN, "--start", "yesterday")
        )
        assert result.exit_code == EXIT_INVALID_INPUT
        assert "Invalid ISO 8601" in output_text(result)
        stub_fetcher.assert_not_called()

    def test_reversed_window(self, stub_fetcher):
        result = runner.invoke(
            app,
            generate_args("--api-token", API_TOKEN, "--start", "2026-02-21T00:00:00Z"),
        )
        assert result.exit_code == EXIT_INVALID_INPUT
        assert "start must be before" in output_text(result)
        stub_fetcher.assert_not_called()

    def test_invalid_preset(self, stub_fetcher):
        result = runner.invoke(app, ["generate", "--zone-id", ZONE_ID, "--preset", "90d"])
        assert result.exit_code != 0
        stub_fetcher.assert_not_called()


class TestDefaultOutputPath:
    def test_pattern(self):
        path = default_output_path("out", "traffic-overview", ZONE_ID)
        assert path.parent == Path("out")
        assert path.name.startswith("traffic-overview-01234567-")
        assert path.suffix == ".html"
