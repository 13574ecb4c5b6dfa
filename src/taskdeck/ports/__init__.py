"""Ports - interfaces/protocols for external dependencies."""

from .task_store import TaskStore, HistoryStore, StorageUnavailable
from .notifier import NotificationDispatcher, NotificationUnavailable

__all__ = [
    "TaskStore",
    "HistoryStore",
    "StorageUnavailable",
    "NotificationDispatcher",
    "NotificationUnavailable",
]
