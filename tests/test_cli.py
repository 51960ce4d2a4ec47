import json
from dataclasses import replace

import httpx
import pytest
from rich.console import Console
from typer.testing import CliRunner

from cfptime import cli
from cfptime.client import CFPTime
from conftest import conference_row

ROWS = [
    conference_row(id=1, name="PyCon US", country="USA", cfp_deadline="2024-03-01", conf_start_date="2024-05-15"),
    conference_row(id=2, name="PyCon DE", country="Germany", cfp_deadline="2024-01-10", conf_start_date="2024-04-22"),
]


@pytest.fixture
def requests_seen(monkeypatch):
    """Route the CLI's client through a MockTransport and record what it asked for."""
    seen = []

    def handler(request):
        seen.append(request)
        path = request.url.path
        if path.endswith("/cfps/404/"):
            return httpx.Response(404, text="not found")
        if path.endswith("/upcoming"):
            return httpx.Response(200, json=[conference_row(country=None, cfp_deadline=None)])
        if path.rstrip("/").split("/")[-1].isdigit():
            return httpx.Response(200, json=ROWS[0])
        return httpx.Response(200, json=ROWS)

    def fake_client(config):
        return CFPTime(replace(config, backoff_factor=0), transport=httpx.MockTransport(handler))

    monkeypatch.setattr(cli, "make_client", fake_client)
    # Wide enough that table cells never wrap
    monkeypatch.setattr(cli, "console", Console(width=200))
    return seen


def test_cli_lists_cfps(requests_seen):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["cfps"])
    assert result.exit_code == 0
    assert "PyCon US" in result.stdout
    assert "PyCon DE" in result.stdout
    assert str(requests_seen[0].url) == "https://api.cfptime.org/api/cfps"


def test_cli_country_filter_and_json(requests_seen):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["conferences", "--country", "germ", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [row["name"] for row in data] == ["PyCon DE"]
    assert data[0] == ROWS[1]


def test_cli_sort_by_deadline(requests_seen):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["conferences", "--sort", "deadline", "--json"])
    assert result.exit_code == 0
    assert [row["id"] for row in json.loads(result.stdout)] == [2, 1]


def test_cli_no_matches(requests_seen):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["cfps", "--country", "Atlantis"])
    assert result.exit_code == 0
    assert "No conferences matched" in result.stdout


def test_cli_shows_one_conference(requests_seen):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["conference", "1"])
    assert result.exit_code == 0
    assert "PyCon US" in result.stdout
    assert "Speaker benefits" in result.stdout
    assert str(requests_seen[0].url) == "https://api.cfptime.org/api/conferences/1/"


def test_cli_custom_base_url(requests_seen):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["--base-url", "http://localhost:8000/api", "cfp", "1", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["id"] == 1
    assert str(requests_seen[0].url) == "http://localhost:8000/api/cfps/1/"


def test_cli_reports_api_errors(requests_seen):
    runner = CliRunner()
    result = runner.invoke(cli.app, ["cfp", "404"])
    assert result.exit_code == 1
    assert "404" in result.output
    assert "not found" in result.output


def test_cli_rejects_bad_options():
    runner = CliRunner()
    result = runner.invoke(cli.app, ["--timeout", "0", "cfps"])
    assert result.exit_code == 2


def test_sort_puts_unparseable_dates_last():
    confs = [
        cli.Conference.from_dict(conference_row(id=1, conf_start_date="TBA")),
        cli.Conference.from_dict(conference_row(id=2, conf_start_date="2024-06-01")),
    ]
    assert [c.id for c in cli.sort_conferences(confs, cli.SortOrder.start)] == [2, 1]


@pytest.mark.parametrize("args", [["upcoming", "--country", "usa"], ["upcoming", "--sort", "deadline"]])
def test_cli_reports_null_fields_as_errors(requests_seen, args):
    runner = CliRunner()
    result = runner.invoke(cli.app, args)
    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "cfp_deadline" in result.output
