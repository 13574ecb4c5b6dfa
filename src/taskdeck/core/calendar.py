"""Pure calendar view logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from .tasks import Task, is_overdue

OVERDUE_COLOR = "#F44336"


@dataclass(frozen=True)
class DateMark:
    """How a calendar day with due tasks is displayed."""

    dot_color: str
    overdue: bool = False

    @property
    def selected_color(self) -> str:
        return OVERDUE_COLOR if self.overdue else self.dot_color


def due_day(task: Task, tz: tzinfo | None = None) -> date | None:
    """Calendar day a task is due on, in tz when given."""
    if task.due_date is None:
        return None
    due = task.due_date.astimezone(tz) if tz else task.due_date
    return due.date()


def mark_dates(tasks: list[Task], now: datetime, tz: tzinfo | None = None) -> dict[date, DateMark]:
    """
    Mark every day that has a task due.

    The dot takes the category color of the last task due that day. A day is
    highlighted as overdue when any of its tasks is overdue.
    """
    marks: dict[date, DateMark] = {}
    for task in tasks:
        day = due_day(task, tz)
        if day is None:
            continue
        overdue = is_overdue(task, now) or (day in marks and marks[day].overdue)
        marks[day] = DateMark(dot_color=task.category.color, overdue=overdue)
    return marks


def tasks_on(tasks: list[Task], day: date, tz: tzinfo | None = None) -> list[Task]:
    """Tasks due on a given day, earliest first."""
    due = [t for t in tasks if due_day(t, tz) == day]
    return sorted(due, key=lambda t: t.due_date)
