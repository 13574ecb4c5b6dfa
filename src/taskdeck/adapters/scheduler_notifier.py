"""APScheduler-backed reminder dispatcher."""

import logging
from typing import Callable

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

from taskdeck.core.reminders import ReminderIntent

logger = logging.getLogger(__name__)

JOB_PREFIX = "reminder-"


def log_reminder(intent: ReminderIntent) -> None:
    """Default delivery: write the reminder to the log."""
    logger.info(f"Task Reminder: {intent.message}")


class SchedulerDispatcher:
    """
    Reminder dispatcher on top of an APScheduler scheduler.

    Implements NotificationDispatcher protocol. Each reminder is a one-shot
    DateTrigger job with id reminder-<task_id>. Jobs the dispatcher did not
    create are left alone by cancel_all().
    """

    def __init__(
        self,
        scheduler: BaseScheduler,
        notify: Callable[[ReminderIntent], None] = log_reminder,
    ):
        self.scheduler = scheduler
        self.notify = notify

    def _reminder_jobs(self) -> list:
        return [j for j in self.scheduler.get_jobs() if j.id.startswith(JOB_PREFIX)]

    def cancel_all(self) -> None:
        for job in self._reminder_jobs():
            self.scheduler.remove_job(job.id)

    def schedule(self, intent: ReminderIntent) -> None:
        job_id = f"{JOB_PREFIX}{intent.task_id}"
        # replace_existing is not honoured for pending jobs of a stopped scheduler
        if self.scheduler.get_job(job_id):
            self.scheduler.remove_job(job_id)
        self.scheduler.add_job(
            self.notify,
            DateTrigger(run_date=intent.fire_at),
            args=[intent],
            id=job_id,
            replace_existing=True,
            # Clamped reminders fire at "now", which is already past by the time the job runs
            misfire_grace_time=None,
        )
        logger.debug(f"Scheduled reminder for {intent.task_id} at {intent.fire_at.isoformat()}")

    def scheduled(self) -> list[ReminderIntent]:
        """Reminders currently waiting to fire, earliest first."""
        intents = [job.args[0] for job in self._reminder_jobs()]
        return sorted(intents, key=lambda i: i.fire_at)
