"""Functional core - pure business logic with no I/O."""

from .tasks import (
    Task,
    TaskDraft,
    Status,
    Priority,
    Category,
    Recurrence,
    ValidationError,
    new_task,
    edit_task,
    toggle_status,
    is_overdue,
)
from .query import QueryParams, SortKey, TaskSummary, derive, summarize
from .recurrence import next_due, project
from .reminders import ReminderIntent, compute_reminder_intents
from .history import HistoryAction, HistoryEntry, record, view_sorted
from .calendar import DateMark, mark_dates, tasks_on
from .commands import (
    TaskNotFound,
    TaskState,
    CommandResult,
    apply_create,
    apply_update,
    apply_toggle,
    apply_delete,
)

__all__ = [
    # Tasks
    "Task",
    "TaskDraft",
    "Status",
    "Priority",
    "Category",
    "Recurrence",
    "ValidationError",
    "new_task",
    "edit_task",
    "toggle_status",
    "is_overdue",
    # Query
    "QueryParams",
    "SortKey",
    "TaskSummary",
    "derive",
    "summarize",
    # Recurrence
    "next_due",
    "project",
    # Reminders
    "ReminderIntent",
    "compute_reminder_intents",
    # History
    "HistoryAction",
    "HistoryEntry",
    "record",
    "view_sorted",
    # Calendar
    "DateMark",
    "mark_dates",
    "tasks_on",
    # Commands
    "TaskNotFound",
    "TaskState",
    "CommandResult",
    "apply_create",
    "apply_update",
    "apply_toggle",
    "apply_delete",
]
