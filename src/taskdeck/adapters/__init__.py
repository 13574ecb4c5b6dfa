"""Adapters - I/O implementations of ports."""

from .json_store import JsonTaskStore, JsonHistoryStore
from .scheduler_notifier import SchedulerDispatcher

__all__ = [
    "JsonTaskStore",
    "JsonHistoryStore",
    "SchedulerDispatcher",
]
