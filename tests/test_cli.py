"""
Tests for the command line interface.
"""

import json

import pendulum
import pytest
from typer.testing import CliRunner

from mentorslots import __version__
from mentorslots.cli.app import app

runner = CliRunner()

RECORDS = [
    {
        "id": "daily",
        "mentor_id": "mentor-1",
        "start_time": "2024-01-01T09:00:00.000Z",
        "end_time": "2024-01-01T09:30:00.000Z",
        "duration_minutes": 30,
        "is_recurring": True,
        "recurring_pattern": "daily",
        "recurring_end_date": None,
        "is_active": True,
    },
    {
        "id": "one-off",
        "mentor_id": "mentor-2",
        "start_time": "2024-03-02T12:00:00.000Z",
        "end_time": "2024-03-02T13:00:00.000Z",
        "duration_minutes": 60,
        "is_recurring": False,
        "recurring_pattern": None,
        "recurring_end_date": None,
        "is_active": True,
    },
]


@pytest.fixture
def workspace(tmp_path):
    rules_path = tmp_path / "slots.json"
    rules_path.write_text(json.dumps(RECORDS), encoding="utf-8")
    config_path = tmp_path / "config.yaml"
    config_path.write_text("timezone: UTC\nrules_file: slots.json\n", encoding="utf-8")
    return {"config": str(config_path), "rules": str(rules_path)}


def test_expand_json_output(workspace):
    """The end date is inclusive and the output uses the front-end keys."""
    result = runner.invoke(
        app,
        [
            "expand",
            "--config", workspace["config"],
            "--start", "2024-03-01",
            "--end", "2024-03-03",
            "--json",
        ],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [item["originalSlotId"] for item in data] == ["daily", "daily", "one-off", "daily"]
    assert pendulum.parse(data[0]["start_time"]) == pendulum.datetime(2024, 3, 1, 9, 0, tz="UTC")


def test_expand_filters_mentor(workspace):
    """Only the requested mentor's rules are expanded."""
    result = runner.invoke(
        app,
        [
            "expand",
            "--file", workspace["rules"],
            "--config", workspace["config"],
            "--mentor", "mentor-2",
            "--start", "2024-03-01",
            "--end", "2024-03-07",
            "--json",
        ],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [item["originalSlotId"] for item in data] == ["one-off"]


def test_expand_sessions(workspace):
    """Sessions split each slot into 15 minute pieces."""
    result = runner.invoke(
        app,
        [
            "expand",
            "--config", workspace["config"],
            "--start", "2024-03-01",
            "--end", "2024-03-01",
            "--sessions",
            "--json",
        ],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert len(data) == 2
    assert all(item["duration_minutes"] == 15 for item in data)


def test_expand_table_output(workspace):
    """The default output is a table with a slot count."""
    result = runner.invoke(
        app,
        [
            "expand",
            "--config", workspace["config"],
            "--start", "2024-03-01",
            "--end", "2024-03-03",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "4 slot(s)" in result.stdout
    assert "09:00 - 09:30" in result.stdout


def test_expand_list_output(workspace):
    """The list output prints one display line per slot."""
    result = runner.invoke(
        app,
        [
            "expand",
            "--config", workspace["config"],
            "--start", "2024-03-01",
            "--end", "2024-03-01",
            "--list",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Friday, 2024-03-01 | 09:00 - 09:30 (30 min, daily)" in result.stdout
    assert "1 slot(s)" in result.stdout


def test_expand_empty_window(workspace):
    """A window without availability prints a notice."""
    result = runner.invoke(
        app,
        [
            "expand",
            "--config", workspace["config"],
            "--mentor", "mentor-2",
            "--start", "2025-01-01",
            "--end", "2025-01-07",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "No availability" in result.stdout


def test_expand_missing_rules_file(tmp_path):
    """A missing rules file exits with an error."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("timezone: UTC\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "expand",
            "--config", str(config_path),
            "--file", str(tmp_path / "missing.json"),
            "--this-week",
        ],
    )

    assert result.exit_code == 1
    assert "Error" in result.stdout


def test_expand_without_source(tmp_path):
    """No configured source exits with an error."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("timezone: UTC\n", encoding="utf-8")

    result = runner.invoke(app, ["expand", "--config", str(config_path), "--this-week"])

    assert result.exit_code == 1
    assert "No availability source" in result.stdout


def test_expand_rejects_both_week_flags(workspace):
    """--this-week and --next-week are mutually exclusive."""
    result = runner.invoke(
        app,
        ["expand", "--config", workspace["config"], "--this-week", "--next-week"],
    )

    assert result.exit_code != 0


def test_rules_lists_rules(workspace):
    """The rules command shows every stored rule."""
    result = runner.invoke(app, ["rules", "--config", workspace["config"]])

    assert result.exit_code == 0, result.output
    assert "daily" in result.stdout
    assert "one-off" in result.stdout


def test_version():
    """The version command prints the package version."""
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout
