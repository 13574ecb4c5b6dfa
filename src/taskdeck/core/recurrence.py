"""Recurring task projection - no I/O dependencies."""

import calendar
import uuid
from dataclasses import replace
from datetime import datetime, timedelta

from .tasks import Recurrence, Status, Task


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of a shorter month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def next_due(base: datetime, recurring: Recurrence) -> datetime | None:
    """
    Advance a due date by one recurrence period.

    Returns None for Recurrence.NONE.
    """
    match recurring:
        case Recurrence.DAILY:
            return base + timedelta(days=1)
        case Recurrence.WEEKLY:
            return base + timedelta(weeks=1)
        case Recurrence.MONTHLY:
            return add_months(base, 1)
        case _:
            return None


def project(task: Task, now: datetime, task_id: str | None = None) -> Task | None:
    """
    Build the next occurrence of a recurring task.

    The successor gets a fresh id, the advanced due date (from now when the
    source has none), status To Do and creation time now. Every other field
    is copied. Returns None when the task does not recur. The caller owns
    inserting the result into the store.
    """
    due = next_due(task.due_date or now, task.recurring)
    if due is None:
        return None
    return replace(
        task,
        id=task_id or str(uuid.uuid4()),
        due_date=due,
        status=Status.TODO,
        created_at=now,
        updated_at=now,
        is_overdue=False,
    )
