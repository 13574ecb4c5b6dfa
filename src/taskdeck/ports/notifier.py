"""Notification dispatcher interface."""

from typing import Protocol

from taskdeck.core.reminders import ReminderIntent


class NotificationUnavailable(Exception):
    """Raised when reminders cannot be scheduled (e.g. permission denied)."""

    pass


class NotificationDispatcher(Protocol):
    """Interface for delivering reminders computed by the core."""

    def cancel_all(self) -> None:
        """Cancel every scheduled reminder."""
        ...

    def schedule(self, intent: ReminderIntent) -> None:
        """Schedule one reminder."""
        ...
