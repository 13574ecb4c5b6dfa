"""Task storage interface."""

from typing import Protocol

from taskdeck.core.history import HistoryEntry
from taskdeck.core.tasks import Task


class StorageUnavailable(Exception):
    """Raised when the underlying store cannot be read."""

    pass


class TaskStore(Protocol):
    """Interface for loading and saving the whole task set."""

    def load_all(self) -> list[Task]:
        """Load every task. Raises StorageUnavailable if the store is unreadable."""
        ...

    def save_all(self, tasks: list[Task]) -> bool:
        """Replace the stored task set. Returns False on failure."""
        ...


class HistoryStore(Protocol):
    """Interface for the append-only history log."""

    def load_all(self) -> list[HistoryEntry]:
        """Load the log in append order. Raises StorageUnavailable if unreadable."""
        ...

    def append(self, entry: HistoryEntry) -> bool:
        """Append one entry. Returns False on failure."""
        ...
