"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cf_broken_links.cli import main


@pytest.fixture
def runner(monkeypatch) -> CliRunner:
    for name in ("AEM_AUTHOR_URL", "AEM_AUTHOR_TOKEN", "CF_MAX_LEVENSHTEIN_DISTANCE", "CF_BROKEN_PATHS_FILE"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


class TestCli:
    """Tests for the cf-broken-links command."""

    def test_analyze_with_listing(self, runner: CliRunner, sample_broken_paths_csv: Path, sample_content_listing_csv: Path, tmp_path: Path):
        """Suggestions are printed and written to the output file."""
        output = tmp_path / "out.json"

        result = runner.invoke(main, [
            "-b", str(sample_broken_paths_csv),
            "-c", str(sample_content_listing_csv),
            "--site-id", "cli-site",
            "-o", str(output),
        ])

        assert result.exit_code == 0, result.output
        assert "Fixable paths: 2 of 2" in result.output

        saved = json.loads(output.read_text())
        assert saved["site_id"] == "cli-site"
        assert saved["audit_result"]["success"] is True
        suggestions = saved["audit_result"]["suggestions"]
        assert suggestions[0]["requested_path"] == "/content/dam/site/en-US/articles/missing"
        assert suggestions[1]["type"] == "PUBLISH"

    def test_analyze_without_listing(self, runner: CliRunner, sample_broken_paths_csv: Path):
        result = runner.invoke(main, ["-b", str(sample_broken_paths_csv)])

        assert result.exit_code == 0, result.output
        assert "Fixable paths: 0 of 2" in result.output

    def test_empty_export(self, runner: CliRunner, tmp_path: Path):
        broken = tmp_path / "broken.csv"
        broken.write_text("url\n")

        result = runner.invoke(main, ["-b", str(broken)])

        assert result.exit_code == 0, result.output
        assert "Fixable paths: 0 of 0" in result.output

    def test_missing_broken_paths_option(self, runner: CliRunner):
        result = runner.invoke(main, [])

        assert result.exit_code == 2
        assert "--broken-paths" in result.output

    def test_invalid_broken_paths_file(self, runner: CliRunner, tmp_path: Path):
        bad = tmp_path / "bad.csv"
        bad.write_text("name\nvalue\n")

        result = runner.invoke(main, ["-b", str(bad)])

        assert result.exit_code == 1
        output = " ".join(result.output.split())
        assert "Audit error:" in output
        assert "No URL column found" in output

    def test_invalid_listing(self, runner: CliRunner, sample_broken_paths_csv: Path, tmp_path: Path):
        listing = tmp_path / "listing.txt"
        listing.write_text("/content/dam/a.jpg")

        result = runner.invoke(main, ["-b", str(sample_broken_paths_csv), "-c", str(listing)])

        assert result.exit_code == 1
        assert "Loading error:" in result.output

    def test_invalid_max_distance(self, runner: CliRunner, sample_broken_paths_csv: Path):
        result = runner.invoke(main, ["-b", str(sample_broken_paths_csv), "--max-distance", "-1"])

        assert result.exit_code == 1
        assert "Configuration error:" in result.output
