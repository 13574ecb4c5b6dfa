"""
Command handlers for user actions.

Each handler takes the current state and returns the next state plus the
side effects (persist, reschedule reminders, append history) the host shell
should carry out. Handlers never perform I/O themselves.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .history import HistoryAction, HistoryEntry, record
from .recurrence import project
from .tasks import Task, TaskDraft, edit_task, new_task, toggle_status


class TaskNotFound(KeyError):
    """Raised when a command names a task id that is not in the set."""

    pass


@dataclass(frozen=True)
class TaskState:
    """The live task set and its history log."""

    tasks: tuple[Task, ...] = ()
    history: tuple[HistoryEntry, ...] = ()

    def get(self, task_id: str) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise TaskNotFound(task_id)


# Side-effect intents


@dataclass(frozen=True)
class Persist:
    tasks: tuple[Task, ...]


@dataclass(frozen=True)
class RescheduleReminders:
    tasks: tuple[Task, ...]


@dataclass(frozen=True)
class AppendHistory:
    entry: HistoryEntry


Effect = Persist | RescheduleReminders | AppendHistory


@dataclass(frozen=True)
class CommandResult:
    state: TaskState
    effects: list[Effect] = field(default_factory=list)

    @property
    def history_entries(self) -> list[HistoryEntry]:
        return [e.entry for e in self.effects if isinstance(e, AppendHistory)]


def _finish(
    state: TaskState, tasks: list[Task], entries: list[HistoryEntry]
) -> CommandResult:
    new_tasks = tuple(tasks)
    new_state = TaskState(tasks=new_tasks, history=state.history + tuple(entries))
    effects: list[Effect] = [Persist(new_tasks), RescheduleReminders(new_tasks)]
    effects.extend(AppendHistory(entry) for entry in entries)
    return CommandResult(state=new_state, effects=effects)


def _status_change(
    before: Task, after: Task, now: datetime
) -> tuple[list[HistoryEntry], Task | None]:
    """History entries and recurring successor produced by a status change."""
    entries = []
    successor = None
    if not before.is_done and after.is_done:
        entries.append(record(after, HistoryAction.COMPLETED, now))
        successor = project(after, now)
    elif before.is_done and not after.is_done:
        entries.append(record(after, HistoryAction.UNDONE, now))
    return entries, successor


def apply_create(
    state: TaskState,
    draft: TaskDraft,
    now: datetime,
    project_on_create: bool = False,
) -> CommandResult:
    """
    Add a new task.

    Raises ValidationError on a blank title, leaving state untouched. With
    project_on_create, a recurring task also gets its next occurrence
    inserted right away.
    """
    task = new_task(draft, now)
    tasks = list(state.tasks) + [task]
    if project_on_create:
        successor = project(task, now)
        if successor is not None:
            tasks.append(successor)
    return _finish(state, tasks, [])


def apply_update(
    state: TaskState, task_id: str, draft: TaskDraft, now: datetime
) -> CommandResult:
    """Replace a task's editable fields."""
    before = state.get(task_id)
    after = edit_task(before, draft, now)
    entries, successor = _status_change(before, after, now)
    tasks = [after if t.id == task_id else t for t in state.tasks]
    if successor is not None:
        tasks.append(successor)
    return _finish(state, tasks, entries)


def apply_toggle(state: TaskState, task_id: str, now: datetime) -> CommandResult:
    """
    Advance a task through the status cycle.

    Reaching Done records a completion and spawns the next occurrence of a
    recurring task. Leaving Done records an undo.
    """
    before = state.get(task_id)
    after = toggle_status(before, now)
    entries, successor = _status_change(before, after, now)
    tasks = [after if t.id == task_id else t for t in state.tasks]
    if successor is not None:
        tasks.append(successor)
    return _finish(state, tasks, entries)


def apply_delete(state: TaskState, task_id: str, now: datetime) -> CommandResult:
    """Remove a task, recording the deletion in history."""
    task = state.get(task_id)
    tasks = [t for t in state.tasks if t.id != task_id]
    return _finish(state, tasks, [record(task, HistoryAction.DELETED, now)])

