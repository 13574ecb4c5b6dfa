"""Task query pipeline: filter, annotate overdue, sort. Pure functions - no I/O."""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from .tasks import Category, Priority, Status, Task

ALL = "all"

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class SortKey(Enum):
    CREATED = "created"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"

    def next(self) -> "SortKey":
        members = list(SortKey)
        return members[(members.index(self) + 1) % len(members)]


def _parse_filter(enum_cls, value):
    """Map a raw filter value to an enum member, or None for "all"/unknown."""
    if value is None or isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if value in (member.value, member.name):
            return member
    return None


@dataclass(frozen=True)
class QueryParams:
    """
    Filter bar state.

    A filter of None means "all". Unknown raw values given to from_raw()
    fall back to no filter, and an unknown sort key falls back to created.
    """

    search_text: str = ""
    status: Status | None = None
    category: Category | None = None
    priority: Priority | None = None
    sort_key: SortKey = SortKey.CREATED

    @classmethod
    def from_raw(
        cls,
        search_text: str = "",
        status: str | None = ALL,
        category: str | None = ALL,
        priority: str | None = ALL,
        sort_key: str | None = SortKey.CREATED.value,
    ) -> "QueryParams":
        sort = _parse_filter(SortKey, sort_key) or SortKey.CREATED
        return cls(
            search_text=search_text or "",
            status=_parse_filter(Status, status),
            category=_parse_filter(Category, category),
            priority=_parse_filter(Priority, priority),
            sort_key=sort,
        )

    def cycle_sort(self) -> "QueryParams":
        """Next sort key in the cycle created -> priority -> dueDate."""
        return replace(self, sort_key=self.sort_key.next())


def matches(task: Task, params: QueryParams) -> bool:
    """True if the task passes every active filter."""
    query = params.search_text.lower()
    if query:
        in_title = query in task.title.lower()
        in_description = bool(task.description) and query in task.description.lower()
        if not (in_title or in_description):
            return False
    if params.status is not None and task.status is not params.status:
        return False
    if params.category is not None and task.category is not params.category:
        return False
    if params.priority is not None and task.priority is not params.priority:
        return False
    return True


def sort_tasks(tasks: list[Task], sort_key: SortKey) -> list[Task]:
    """
    Sort tasks by the given key. Ties keep their input order.

    created: newest first. priority: High first.
    dueDate: earliest first, tasks without a due date last.
    """
    match sort_key:
        case SortKey.PRIORITY:
            return sorted(tasks, key=lambda t: t.priority.weight, reverse=True)
        case SortKey.DUE_DATE:
            return sorted(
                tasks,
                key=lambda t: (t.due_date is None, t.due_date or _EARLIEST),
            )
        case _:
            return sorted(tasks, key=lambda t: t.created_at, reverse=True)


def derive(tasks: list[Task], params: QueryParams, now: datetime) -> list[Task]:
    """
    Derive the visible task list.

    Pure function - returns annotated copies, the input list is untouched.
    """
    visible = [t.annotated(now) for t in tasks if matches(t, params)]
    return sort_tasks(visible, params.sort_key)


@dataclass(frozen=True)
class TaskSummary:
    """Header statistics for the list view."""

    total: int
    todo: int
    in_progress: int
    done: int
    overdue: int


def summarize(tasks: list[Task], now: datetime) -> TaskSummary:
    annotated = [t.annotated(now) for t in tasks]
    return TaskSummary(
        total=len(annotated),
        todo=sum(1 for t in annotated if t.status is Status.TODO),
        in_progress=sum(1 for t in annotated if t.status is Status.IN_PROGRESS),
        done=sum(1 for t in annotated if t.status is Status.DONE),
        overdue=sum(1 for t in annotated if t.is_overdue),
    )
