"""Reminder decision logic - which tasks get notified and when. No I/O."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from .tasks import Task

DEFAULT_LEAD_TIME = timedelta(hours=1)


@dataclass(frozen=True)
class ReminderIntent:
    """A decision to remind the user about a task at fire_at."""

    task_id: str
    fire_at: datetime
    title: str = ""

    @property
    def message(self) -> str:
        return f'"{self.title}" is due soon!'


def wants_reminder(task: Task, now: datetime) -> bool:
    """Reminders on, not done, and due strictly after now."""
    return (
        task.due_date is not None
        and task.reminders_enabled
        and not task.is_done
        and task.due_date > now
    )


def compute_reminder_intents(
    tasks: list[Task],
    now: datetime,
    lead_time: timedelta = DEFAULT_LEAD_TIME,
    clamp: bool = True,
) -> list[ReminderIntent]:
    """
    Compute the full set of reminders for the task set.

    Each reminder fires lead_time before the due date. When that moment has
    already passed (due within the lead time) the intent is clamped to now,
    or dropped when clamp is False. Callers replace every previously
    scheduled reminder with this set.
    """
    intents = []
    for task in tasks:
        if not wants_reminder(task, now):
            continue
        fire_at = task.due_date - lead_time
        if fire_at <= now:
            if not clamp:
                continue
            fire_at = now
        intents.append(ReminderIntent(task_id=task.id, fire_at=fire_at, title=task.title))
    return intents
