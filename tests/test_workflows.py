"""Tests for the workflow layer."""

import json
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from taskdeck.adapters.json_store import JsonHistoryStore, JsonTaskStore
from taskdeck.config import Config
from taskdeck.core.commands import TaskNotFound
from taskdeck.core.history import HistoryAction
from taskdeck.core.query import QueryParams, SortKey
from taskdeck.core.tasks import (
    Priority,
    Recurrence,
    Status,
    TaskDraft,
    ValidationError,
    new_task,
)
from taskdeck.ports.notifier import NotificationUnavailable
from taskdeck.ports.task_store import StorageUnavailable
from taskdeck.workflows import TaskService, get_service


class FakeDispatcher:
    """Records cancel/schedule calls in order."""

    def __init__(self):
        self.calls = []
        self.pending = []

    def cancel_all(self):
        self.calls.append("cancel_all")
        self.pending = []

    def schedule(self, intent):
        self.calls.append(("schedule", intent.task_id))
        self.pending.append(intent)


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return Clock(datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def config(tmp_path):
    return Config(data_dir=str(tmp_path))


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def service(config, dispatcher, clock):
    return get_service(config, dispatcher=dispatcher, clock=clock)


class TestGetService:
    def test_uses_configured_dir_and_keys(self, tmp_path):
        config = Config(data_dir=str(tmp_path), storage_key="t", history_key="h")
        service = get_service(config)
        assert service.store.path == tmp_path / "t.json"
        assert service.history_store.path == tmp_path / "h.json"


class TestCommands:
    def test_create_persists(self, service, tmp_path):
        service.create(TaskDraft(title="Write report"))
        assert [t.title for t in JsonTaskStore(tmp_path).load_all()] == ["Write report"]

    def test_create_invalid_writes_nothing(self, service, tmp_path):
        with pytest.raises(ValidationError):
            service.create(TaskDraft(title=""))
        assert not (tmp_path / "tasks.json").exists()

    def test_toggle_to_done_appends_history(self, service, clock, tmp_path):
        task = service.create(TaskDraft(title="Write report")).state.tasks[0]
        service.toggle(task.id)
        clock.advance(minutes=1)
        service.toggle(task.id)

        history = JsonHistoryStore(tmp_path).load_all()
        assert [e.action for e in history] == [HistoryAction.COMPLETED]
        assert history[0].action_at == clock.now

    def test_recurring_completion_persists_successor(self, service, clock):
        draft = TaskDraft(title="Standup", recurring=Recurrence.WEEKLY, due_date=clock.now)
        task = service.create(draft).state.tasks[0]
        service.toggle(task.id)
        service.toggle(task.id)

        tasks = service.load().tasks
        assert len(tasks) == 2
        assert tasks[1].due_date == clock.now + timedelta(weeks=1)
        assert tasks[1].status is Status.TODO

    def test_recur_on_create(self, config, dispatcher, clock):
        config.recur_on_create = True
        service = get_service(config, dispatcher=dispatcher, clock=clock)
        draft = TaskDraft(title="Standup", recurring=Recurrence.DAILY, due_date=clock.now)
        service.create(draft)
        assert len(service.load().tasks) == 2

    def test_delete_records_history(self, service, tmp_path):
        task = service.create(TaskDraft(title="Write report")).state.tasks[0]
        service.delete(task.id)
        assert service.load().tasks == ()
        [entry] = service.history()
        assert entry.action is HistoryAction.DELETED
        assert entry.task.title == "Write report"

    def test_update(self, service):
        task = service.create(TaskDraft(title="Write report")).state.tasks[0]
        draft = TaskDraft.from_task(task)
        draft.priority = Priority.HIGH
        service.update(task.id, draft)
        assert service.load().get(task.id).priority is Priority.HIGH


class TestFind:
    def test_by_prefix(self, service):
        task = service.create(TaskDraft(title="Write report")).state.tasks[0]
        assert service.find(task.id[:6]).id == task.id

    def test_unknown(self, service):
        with pytest.raises(TaskNotFound):
            service.find("nope")

    def test_empty_prefix_matches_nothing(self, service):
        service.create(TaskDraft(title="a"))
        with pytest.raises(TaskNotFound):
            service.find("")


class TestReminders:
    def test_cancel_all_then_schedule(self, service, dispatcher, clock):
        service.create(TaskDraft(title="Soon", due_date=clock.now + timedelta(days=1)))
        assert dispatcher.calls[-2:] == ["cancel_all", ("schedule", service.load().tasks[0].id)]

    def test_full_set_rescheduled_on_every_change(self, service, dispatcher, clock):
        service.create(TaskDraft(title="A", due_date=clock.now + timedelta(days=1)))
        service.create(TaskDraft(title="B", due_date=clock.now + timedelta(days=2)))
        assert len(dispatcher.pending) == 2
        a, b = service.load().tasks
        service.toggle(a.id)
        service.toggle(a.id)
        assert [i.task_id for i in dispatcher.pending] == [b.id]

    def test_lead_time_from_config(self, config, dispatcher, clock):
        config.reminder_lead_minutes = 15
        service = get_service(config, dispatcher=dispatcher, clock=clock)
        due = clock.now + timedelta(days=1)
        service.create(TaskDraft(title="A", due_date=due))
        assert dispatcher.pending[0].fire_at == due - timedelta(minutes=15)

    def test_permission_error_reported_once(self, config, clock, caplog):
        dispatcher = MagicMock()
        dispatcher.cancel_all.side_effect = NotificationUnavailable("permission denied")
        service = get_service(config, dispatcher=dispatcher, clock=clock)

        service.create(TaskDraft(title="A"))
        service.create(TaskDraft(title="B"))

        assert dispatcher.cancel_all.call_count == 1
        assert caplog.text.count("Reminders disabled") == 1
        assert len(service.load().tasks) == 2

    def test_no_dispatcher(self, config, clock):
        service = get_service(config, clock=clock)
        service.create(TaskDraft(title="A", due_date=clock.now + timedelta(days=1)))
        assert len(service.reminder_intents()) == 1


class TestStorageErrors:
    def test_unreadable_store_counts_as_empty(self, config, tmp_path, clock, caplog):
        (tmp_path / "tasks.json").write_text("{broken")
        service = get_service(config, clock=clock)
        assert service.load().tasks == ()
        assert "Error loading tasks" in caplog.text

    def test_save_failure_is_logged(self, config, clock, caplog):
        store = MagicMock()
        store.load_all.return_value = []
        store.save_all.return_value = False
        history = MagicMock()
        history.load_all.side_effect = StorageUnavailable("gone")
        service = TaskService(store, history, config=config, clock=clock)

        service.create(TaskDraft(title="A"))

        store.save_all.assert_called_once()
        assert "not saved" in caplog.text

    def test_corrupt_record_does_not_wipe_store(self, service, tmp_path):
        service.create(TaskDraft(title="keep me"))
        service.create(TaskDraft(title="keep me too"))
        path = tmp_path / "tasks.json"
        records = json.loads(path.read_text())
        records[0]["category"] = "shopping"
        path.write_text(json.dumps(records))

        result = service.create(TaskDraft(title="new"))

        assert result.state.tasks == ()
        assert result.effects == []
        assert json.loads(path.read_text()) == records

    def test_failed_save_drops_remaining_effects(self, config, clock):
        store = MagicMock()
        store.load_all.return_value = [
            new_task(TaskDraft(title="A"), clock.now, task_id="a")
        ]
        store.save_all.return_value = False
        history = MagicMock()
        history.load_all.return_value = []
        dispatcher = FakeDispatcher()
        service = TaskService(store, history, config=config, dispatcher=dispatcher, clock=clock)

        result = service.delete("a")

        assert [t.id for t in result.state.tasks] == ["a"]
        history.append.assert_not_called()
        assert dispatcher.calls == []


class TestViews:
    def test_list_tasks_default_sort(self, service, clock):
        service.create(TaskDraft(title="Old"))
        clock.advance(minutes=1)
        service.create(TaskDraft(title="New"))
        assert [t.title for t in service.list_tasks()] == ["New", "Old"]

    def test_list_tasks_params(self, service, clock):
        service.create(TaskDraft(title="Low", priority=Priority.LOW))
        service.create(TaskDraft(title="High", priority=Priority.HIGH))
        params = QueryParams(sort_key=SortKey.PRIORITY)
        assert [t.title for t in service.list_tasks(params)] == ["High", "Low"]

    def test_overdue_computed_at_query_time(self, service, clock):
        service.create(TaskDraft(title="A", due_date=clock.now + timedelta(hours=1)))
        assert service.list_tasks()[0].is_overdue is False
        clock.advance(hours=2)
        assert service.list_tasks()[0].is_overdue is True

    def test_history_newest_first(self, service, clock):
        a = service.create(TaskDraft(title="A")).state.tasks[0]
        service.delete(a.id)
        clock.advance(minutes=1)
        b = service.create(TaskDraft(title="B")).state.tasks[0]
        service.delete(b.id)
        assert [e.task.title for e in service.history()] == ["B", "A"]

    def test_calendar_marks(self, service, clock):
        service.create(TaskDraft(title="A", due_date=clock.now - timedelta(days=1)))
        marks = service.calendar_marks()
        assert marks[date(2025, 1, 14)].overdue is True

    def test_tasks_on(self, service, clock):
        service.create(TaskDraft(title="A", due_date=clock.now))
        service.create(TaskDraft(title="B", due_date=clock.now + timedelta(days=1)))
        assert [t.title for t in service.tasks_on(date(2025, 1, 15))] == ["A"]

    def test_replace_all_reschedules(self, service, dispatcher):
        assert service.replace_all([]) is True
        assert dispatcher.calls == ["cancel_all"]
