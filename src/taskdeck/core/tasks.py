"""Pure task domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum


class ValidationError(ValueError):
    """Raised when a task fails validation (e.g. blank title)."""

    pass


class Status(Enum):
    """Task status. Toggling cycles To Do -> In Progress -> Done -> To Do."""

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    def next(self) -> "Status":
        return _STATUS_CYCLE[self]


_STATUS_CYCLE = {
    Status.TODO: Status.IN_PROGRESS,
    Status.IN_PROGRESS: Status.DONE,
    Status.DONE: Status.TODO,
}


class Priority(Enum):
    """Task priority. Weight drives priority sorting (High first)."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def weight(self) -> int:
        return _PRIORITY_META[self][0]

    @property
    def label(self) -> str:
        return _PRIORITY_META[self][1]

    @property
    def color(self) -> str:
        return _PRIORITY_META[self][2]


_PRIORITY_META = {
    Priority.LOW: (1, "Low", "#4CAF50"),
    Priority.MEDIUM: (2, "Medium", "#FF9800"),
    Priority.HIGH: (3, "High", "#F44336"),
}


class Category(Enum):
    """Fixed task categories. Colors are cosmetic."""

    WORK = "work"
    PERSONAL = "personal"
    HEALTH = "health"
    FINANCE = "finance"
    EDUCATION = "education"

    @property
    def label(self) -> str:
        return _CATEGORY_META[self][0]

    @property
    def color(self) -> str:
        return _CATEGORY_META[self][1]


_CATEGORY_META = {
    Category.WORK: ("Work", "#2196F3"),
    Category.PERSONAL: ("Personal", "#9C27B0"),
    Category.HEALTH: ("Health", "#4CAF50"),
    Category.FINANCE: ("Finance", "#FF5722"),
    Category.EDUCATION: ("Education", "#FF9800"),
}


class Recurrence(Enum):
    """How often a task repeats."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if not value:
        return None
    # Python < 3.11 fromisoformat does not accept a trailing Z
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class TaskDraft:
    """The user-editable fields of a task, as entered in the edit form."""

    title: str = ""
    description: str = ""
    status: Status = Status.TODO
    priority: Priority = Priority.LOW
    category: Category = Category.WORK
    due_date: datetime | None = None
    recurring: Recurrence = Recurrence.NONE
    estimated_time: str = ""
    reminders_enabled: bool = True

    @classmethod
    def from_task(cls, task: "Task") -> "TaskDraft":
        """Pre-fill a draft from an existing task (opening the edit form)."""
        return cls(
            title=task.title,
            description=task.description or "",
            status=task.status,
            priority=task.priority,
            category=task.category,
            due_date=task.due_date,
            recurring=task.recurring,
            estimated_time=task.estimated_time or "",
            reminders_enabled=task.reminders_enabled,
        )


@dataclass
class Task:
    """A to-do item with scheduling and categorization metadata."""

    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    status: Status = Status.TODO
    priority: Priority = Priority.LOW
    category: Category = Category.WORK
    due_date: datetime | None = None
    recurring: Recurrence = Recurrence.NONE
    estimated_time: str = ""
    reminders_enabled: bool = True
    time_spent: int = 0
    # Derived on every query, never persisted
    is_overdue: bool = field(default=False, compare=False)

    @property
    def is_done(self) -> bool:
        return self.status is Status.DONE

    def annotated(self, now: datetime) -> "Task":
        """Copy of this task with is_overdue computed against now."""
        return replace(self, is_overdue=is_overdue(self, now))

    def to_dict(self) -> dict:
        """Serialize to the persisted record layout."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "category": self.category.value,
            "dueDate": format_timestamp(self.due_date),
            "recurring": self.recurring.value,
            "estimatedTime": self.estimated_time,
            "reminders": self.reminders_enabled,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
            "timeSpent": self.time_spent,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from a persisted record."""
        created = parse_timestamp(data["createdAt"])
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description") or "",
            status=Status(data.get("status", Status.TODO.value)),
            priority=Priority(data.get("priority", Priority.LOW.value)),
            category=Category(data.get("category", Category.WORK.value)),
            due_date=parse_timestamp(data.get("dueDate")),
            recurring=Recurrence(data.get("recurring") or Recurrence.NONE.value),
            estimated_time=data.get("estimatedTime") or "",
            # Older records have no reminders key; the form defaults it on
            reminders_enabled=data.get("reminders") is not False,
            created_at=created,
            updated_at=parse_timestamp(data.get("updatedAt")) or created,
            time_spent=data.get("timeSpent", 0) or 0,
        )


def is_overdue(task: Task, now: datetime) -> bool:
    """Due date exists, is before now, and the task is not done."""
    return task.due_date is not None and task.due_date < now and not task.is_done


def _validated_title(draft: TaskDraft) -> str:
    title = draft.title.strip()
    if not title:
        raise ValidationError("Please enter a task title")
    return title


def new_task(draft: TaskDraft, now: datetime, task_id: str | None = None) -> Task:
    """
    Create a task from a draft.

    Raises ValidationError if the title is blank.
    """
    title = _validated_title(draft)
    return Task(
        id=task_id or str(uuid.uuid4()),
        title=title,
        description=draft.description,
        status=draft.status,
        priority=draft.priority,
        category=draft.category,
        due_date=draft.due_date,
        recurring=draft.recurring,
        estimated_time=draft.estimated_time,
        reminders_enabled=draft.reminders_enabled,
        created_at=now,
        updated_at=now,
    )


def edit_task(task: Task, draft: TaskDraft, now: datetime) -> Task:
    """Apply a draft to an existing task. Identity and creation time are kept."""
    title = _validated_title(draft)
    return replace(
        task,
        title=title,
        description=draft.description,
        status=draft.status,
        priority=draft.priority,
        category=draft.category,
        due_date=draft.due_date,
        recurring=draft.recurring,
        estimated_time=draft.estimated_time,
        reminders_enabled=draft.reminders_enabled,
        updated_at=max(now, task.created_at),
        is_overdue=False,
    )


def toggle_status(task: Task, now: datetime) -> Task:
    """Advance the task one step through the status cycle."""
    return replace(
        task,
        status=task.status.next(),
        updated_at=max(now, task.created_at),
        is_overdue=False,
    )
