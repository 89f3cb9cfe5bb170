"""
Unit tests for the muaythai-events CLI.

Tests:
- generate-events summary and JSON output
- Exit status when the database is unreachable
- preview-events listing and window validation
- serve handing the app to uvicorn
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from freezegun import freeze_time

from backend.src.cli import cli
from backend.src.models import Event
from backend.src.services.exceptions import StoreUnavailableError


@pytest.fixture
def cli_runner():
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def cli_session(test_db_session):
    """Route the CLI's SessionLocal to the test session."""
    with patch("backend.src.cli.SessionLocal", return_value=test_db_session):
        yield test_db_session


def json_line(output):
    return json.loads(next(line for line in output.splitlines() if line.startswith("{")))


class TestGenerateEventsCommand:
    """Tests for the generate-events command."""

    @freeze_time("2025-04-01")
    def test_generate_events(self, cli_runner, cli_session, sample_template):
        """Test events are generated from today and a summary is printed."""
        sample_template(recurring_days_of_week=[1, 3])

        result = cli_runner.invoke(cli, ["generate-events", "--days", "13"])

        assert result.exit_code == 0, result.output
        assert "Successfully generated 4 events from 1 templates" in result.output
        assert cli_session.query(Event).count() == 4

    @freeze_time("2025-04-01")
    def test_generate_events_json(self, cli_runner, cli_session, sample_template):
        """Test --json prints the run counters."""
        sample_template(recurring_days_of_week=[1, 3])
        cli_runner.invoke(cli, ["generate-events", "--days", "13"])

        result = cli_runner.invoke(cli, ["generate-events", "--days", "13", "--json"])

        assert result.exit_code == 0, result.output
        summary = json_line(result.output)
        assert summary == {
            "generated_count": 0,
            "templates_processed": 1,
            "skipped_count": 4,
            "failed_count": 0,
            "preview_only": False,
        }

    def test_store_unavailable_exits_nonzero(self, cli_runner, cli_session):
        """Test an unreachable database exits with status 1."""
        with patch(
            "backend.src.cli.EventGenerationService.generate_upcoming_events",
            side_effect=StoreUnavailableError(),
        ):
            result = cli_runner.invoke(cli, ["generate-events"])

        assert result.exit_code == 1
        assert "Event store is unavailable" in result.output

    def test_days_out_of_range(self, cli_runner, cli_session):
        """Test --days rejects values above a year."""
        result = cli_runner.invoke(cli, ["generate-events", "--days", "400"])
        assert result.exit_code == 2


class TestPreviewEventsCommand:
    """Tests for the preview-events command."""

    def test_preview_lists_events(self, cli_runner, cli_session, sample_template):
        """Test preview prints each event and saves nothing."""
        sample_template(recurring_days_of_week=[1, 3])

        result = cli_runner.invoke(
            cli, ["preview-events", "--start", "2025-04-01", "--end", "2025-04-14"]
        )

        assert result.exit_code == 0, result.output
        assert "2025-04-02   7:00 PM  Fight Night at Lumpinee Stadium - April 2, 2025" in result.output
        assert "[Tuesday Fights, 1 ticket types]" in result.output
        assert "4 events would be generated from 1 templates" in result.output
        assert cli_session.query(Event).count() == 0

    def test_preview_inverted_window(self, cli_runner, cli_session):
        """Test --start after --end is rejected."""
        result = cli_runner.invoke(
            cli, ["preview-events", "--start", "2025-04-14", "--end", "2025-04-01"]
        )

        assert result.exit_code == 1
        assert "--start must be on or before --end" in result.output

    def test_preview_malformed_template_guid(self, cli_runner, cli_session):
        """Test a malformed template GUID is rejected."""
        result = cli_runner.invoke(
            cli,
            ["preview-events", "--start", "2025-04-01", "--end", "2025-04-14", "-t", "tpl_bad"],
        )
        assert result.exit_code == 1


def test_version(cli_runner):
    """Test --version prints the program name and version."""
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "muaythai-events, version 1.0.0" in result.output


def test_serve_runs_uvicorn(cli_runner):
    """Test serve hands the app to uvicorn with the given options."""
    with patch("uvicorn.run") as mock_run:
        result = cli_runner.invoke(cli, ["serve", "--port", "9000"])

    assert result.exit_code == 0, result.output
    mock_run.assert_called_once_with(
        "backend.src.main:app",
        host="127.0.0.1",
        port=9000,
        reload=False,
        log_level="info",
    )
