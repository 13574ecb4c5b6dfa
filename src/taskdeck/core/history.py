"""Task history log - immutable records of completions and deletions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .tasks import Task, format_timestamp, parse_timestamp


class HistoryAction(Enum):
    COMPLETED = "completed"
    UNDONE = "undone"
    DELETED = "deleted"


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of a task at the moment an action was applied to it."""

    task: Task
    action: HistoryAction
    action_at: datetime

    def to_dict(self) -> dict:
        """Flat record: the task snapshot plus action and actionAt."""
        data = self.task.to_dict()
        data["action"] = self.action.value
        data["actionAt"] = format_timestamp(self.action_at)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        snapshot = {k: v for k, v in data.items() if k not in ("action", "actionAt")}
        return cls(
            task=Task.from_dict(snapshot),
            action=HistoryAction(data["action"]),
            action_at=parse_timestamp(data["actionAt"]),
        )


def record(task: Task, action: HistoryAction, now: datetime) -> HistoryEntry:
    """Create a history entry. The caller appends it to the log."""
    return HistoryEntry(task=task, action=action, action_at=now)


def view_sorted(entries: list[HistoryEntry]) -> list[HistoryEntry]:
    """Most recent first. Entries sharing a timestamp keep their log order."""
    return sorted(entries, key=lambda e: e.action_at, reverse=True)
