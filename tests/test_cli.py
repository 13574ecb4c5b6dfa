"""Tests for the command-line interface."""

import json
from datetime import date, timedelta
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from taskdeck.adapters.json_store import JsonHistoryStore, JsonTaskStore
from taskdeck.cli import main
from taskdeck.config import Config
from taskdeck.core.tasks import Priority, Recurrence, Status


@pytest.fixture
def config(tmp_path):
    return Config(data_dir=str(tmp_path))


@pytest.fixture
def runner(config):
    with patch("taskdeck.cli.load_config", return_value=config):
        yield CliRunner()


def tomorrow() -> str:
    return (date.today() + timedelta(days=1)).isoformat()


def stored(tmp_path):
    return JsonTaskStore(tmp_path).load_all()


class TestAdd:
    def test_add_task(self, runner, tmp_path):
        result = runner.invoke(
            main,
            ["add", "Write report", "-p", "high", "-c", "education", "--due", tomorrow(), "-r", "weekly"],
        )
        assert result.exit_code == 0, result.output
        assert "Added Write report" in result.output

        [task] = stored(tmp_path)
        assert task.priority is Priority.HIGH
        assert task.recurring is Recurrence.WEEKLY
        assert task.due_date.date().isoformat() == tomorrow()

    def test_blank_title_fails(self, runner, tmp_path):
        result = runner.invoke(main, ["add", "   "])
        assert result.exit_code == 1
        assert "Please enter a task title" in result.output
        assert stored(tmp_path) == []

    def test_invalid_priority(self, runner):
        result = runner.invoke(main, ["add", "x", "-p", "urgent"])
        assert result.exit_code == 2


class TestToggleAndDelete:
    def test_toggle_cycle_records_history(self, runner, tmp_path):
        runner.invoke(main, ["add", "Write report"])
        task_id = stored(tmp_path)[0].id

        assert "In Progress" in runner.invoke(main, ["toggle", task_id[:8]]).output
        assert "Done" in runner.invoke(main, ["toggle", task_id[:8]]).output

        assert stored(tmp_path)[0].status is Status.DONE
        assert [e.action.value for e in JsonHistoryStore(tmp_path).load_all()] == ["completed"]

    def test_recurring_toggle_reports_next(self, runner, tmp_path):
        runner.invoke(main, ["add", "Standup", "-r", "daily", "--due", tomorrow()])
        task_id = stored(tmp_path)[0].id
        runner.invoke(main, ["toggle", task_id])
        result = runner.invoke(main, ["toggle", task_id])
        assert "Next occurrence due" in result.output
        assert len(stored(tmp_path)) == 2

    def test_toggle_unknown(self, runner):
        result = runner.invoke(main, ["toggle", "nope"])
        assert result.exit_code == 1
        assert "task not found" in result.output

    def test_delete_with_confirmation(self, runner, tmp_path):
        runner.invoke(main, ["add", "Write report"])
        task_id = stored(tmp_path)[0].id

        result = runner.invoke(main, ["delete", task_id], input="n\n")
        assert len(stored(tmp_path)) == 1

        result = runner.invoke(main, ["delete", task_id], input="y\n")
        assert result.exit_code == 0
        assert stored(tmp_path) == []
        assert "deleted" in runner.invoke(main, ["history"]).output


class TestEdit:
    def test_edit_fields(self, runner, tmp_path):
        runner.invoke(main, ["add", "Write report", "--due", tomorrow()])
        task_id = stored(tmp_path)[0].id

        result = runner.invoke(
            main, ["edit", task_id, "-t", "Write annual report", "-s", "in_progress", "--clear-due"]
        )
        assert result.exit_code == 0, result.output
        task = stored(tmp_path)[0]
        assert task.title == "Write annual report"
        assert task.status is Status.IN_PROGRESS
        assert task.due_date is None

    def test_edit_blank_title(self, runner, tmp_path):
        runner.invoke(main, ["add", "Write report"])
        task_id = stored(tmp_path)[0].id
        result = runner.invoke(main, ["edit", task_id, "-t", ""])
        assert result.exit_code == 1
        assert stored(tmp_path)[0].title == "Write report"


class TestList:
    def test_empty(self, runner):
        assert "No tasks." in runner.invoke(main, ["list"]).output

    def test_filters_and_json(self, runner):
        runner.invoke(main, ["add", "Gym", "-c", "health"])
        runner.invoke(main, ["add", "Report", "-c", "work", "-p", "high"])

        result = runner.invoke(main, ["list", "-c", "health", "--json"])
        data = json.loads(result.output)
        assert [t["title"] for t in data] == ["Gym"]
        assert data[0]["isOverdue"] is False

        result = runner.invoke(main, ["list", "--sort", "priority", "--json"])
        assert [t["title"] for t in json.loads(result.output)] == ["Report", "Gym"]

    def test_search(self, runner):
        runner.invoke(main, ["add", "Gym", "-d", "Leg day"])
        runner.invoke(main, ["add", "Report"])
        result = runner.invoke(main, ["list", "-q", "LEG"])
        assert "Gym" in result.output
        assert "Report" not in result.output

    def test_overdue_marker(self, runner):
        yesterday = (date.today() - timedelta(days=2)).isoformat()
        runner.invoke(main, ["add", "Pay bills", "--due", yesterday])
        result = runner.invoke(main, ["list"])
        assert "OVERDUE" in result.output
        assert "1 overdue" in result.output


class TestDemoAndViews:
    def test_demo_then_views(self, runner, tmp_path):
        result = runner.invoke(main, ["demo", "--yes"])
        assert result.exit_code == 0
        assert len(stored(tmp_path)) == 8

        assert "Pay Monthly Bills" in runner.invoke(main, ["list", "-s", "todo"]).output
        assert "OVERDUE" in runner.invoke(main, ["calendar"]).output

        reminders = runner.invoke(main, ["reminders"]).output
        assert "Team Meeting" in reminders
        assert "Update Portfolio Website" not in reminders
        assert "Buy Groceries" not in reminders

    def test_calendar_day(self, runner):
        runner.invoke(main, ["add", "Dentist", "-c", "health", "--due", tomorrow()])
        result = runner.invoke(main, ["calendar", "-d", tomorrow()])
        assert "Dentist" in result.output

    def test_clear(self, runner, tmp_path):
        runner.invoke(main, ["demo", "--yes"])
        result = runner.invoke(main, ["clear", "--yes"])
        assert result.exit_code == 0
        assert stored(tmp_path) == []

    def test_history_empty(self, runner):
        assert "No history yet." in runner.invoke(main, ["history"]).output
