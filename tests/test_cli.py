"""Tests for the Typer CLI."""

import json

import pytest
from typer.testing import CliRunner

from cospend.cli import (
    app,
    format_money,
    load_project,
    resolve_member_id,
    visible_balances,
)
from cospend.exceptions import ProjectFileError
from cospend.models import Project

runner = CliRunner()

PROJECT = {
    "id": "trip",
    "name": "Weekend trip",
    "members": [
        {"id": 1, "name": "Alice"},
        {"id": 2, "name": "Bob"},
        {"id": 3, "name": "Carol"},
    ],
    "bills": [
        {
            "id": 1,
            "what": "Groceries",
            "payer_id": 1,
            "amount": 90.0,
            "owers": [1, 2, 3],
            "timestamp": 1000,
        },
        {
            "id": 2,
            "what": "Fuel",
            "payer_id": 2,
            "amount": 30.0,
            "owers": [2, 3],
            "timestamp": 2000,
        },
    ],
}


@pytest.fixture
def project_file(tmp_path):
    """Write the sample project to a JSON file."""
    path = tmp_path / "project.json"
    path.write_text(json.dumps(PROJECT), encoding="utf-8")
    return path


class TestSettleCommand:
    def test_shows_plan(self, project_file):
        result = runner.invoke(app, ["settle", str(project_file)])

        assert result.exit_code == 0
        assert "Weekend trip" in result.output
        assert "Carol" in result.output
        assert "45.00" in result.output

    def test_centered(self, project_file):
        result = runner.invoke(app, ["settle", str(project_file), "--center", "2"])

        assert result.exit_code == 0
        assert "centered on Bob" in result.output
        assert "60.00" in result.output

    def test_json_output(self, project_file):
        result = runner.invoke(app, ["settle", str(project_file), "--json"])

        assert result.exit_code == 0
        assert '"from": 3' in result.output
        assert '"amount": 45.0' in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["settle", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestAutoSettleCommand:
    def test_displays_bills(self, project_file):
        result = runner.invoke(app, ["auto-settle", str(project_file)])

        assert result.exit_code == 0
        assert "Carol → Alice" in result.output

    def test_writes_output(self, project_file, tmp_path):
        output = tmp_path / "settled.json"

        result = runner.invoke(
            app,
            [
                "auto-settle",
                str(project_file),
                "--max-timestamp",
                "1500",
                "--output",
                str(output),
            ],
        )

        assert result.exit_code == 0
        settled = load_project(output)
        assert len(settled.bills) == 4
        assert [bill.timestamp for bill in settled.bills[2:]] == [1499, 1499]

    def test_nothing_to_settle(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(
            json.dumps({**PROJECT, "bills": []}), encoding="utf-8"
        )

        result = runner.invoke(app, ["auto-settle", str(path)])

        assert result.exit_code == 0
        assert "Nothing to settle" in result.output


class TestHelpers:
    def test_load_project_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"id": "x"}', encoding="utf-8")

        with pytest.raises(ProjectFileError, match="Invalid project file"):
            load_project(path)

    def test_resolve_member_id(self, project_file):
        project = load_project(project_file)

        assert resolve_member_id(project, "2") == 2
        assert resolve_member_id(project, "zed") == "zed"

    def test_format_money(self):
        assert format_money(85.02, use_color=False) == " $85.02 "
        assert format_money(-85.02, use_color=False) == "($85.02)"
        assert format_money(1234.5, symbol="€", use_color=False) == " €1,234.50 "

    def test_visible_balances_hides_settled_inactive_members(self):
        project = load_project_from_dict(
            {
                **PROJECT,
                "members": [
                    *PROJECT["members"],
                    {"id": 4, "name": "Dave", "activated": False},
                    {"id": 5, "name": "Erin", "activated": False},
                ],
            }
        )
        balances = {1: 60.0, 2: -15.0, 3: -45.0, 4: 0.0, 5: -2.5}

        visible = visible_balances(project, balances)

        assert list(visible) == [1, 2, 3, 5]


def load_project_from_dict(data: dict) -> Project:
    """Validate a project document held in memory."""
    return Project.model_validate(data)


def test_settle_hides_inactive_member(tmp_path):
    """A deactivated member with nothing to settle is left out of the balances."""
    path = tmp_path / "project.json"
    path.write_text(
        json.dumps(
            {
                **PROJECT,
                "members": [
                    *PROJECT["members"],
                    {"id": 4, "name": "Dave", "activated": False},
                ],
            }
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["settle", str(path)])

    assert result.exit_code == 0
    assert "Alice" in result.output
    assert "Dave" not in result.output
