"""Host shell between the functional core and the adapters.

TaskService loads state, runs a command handler, then carries out the
effects it returns: persist the task set, cancel and reschedule every
reminder, append history entries.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable

from .adapters.json_store import JsonHistoryStore, JsonTaskStore
from .config import Config
from .core import calendar as cal
from .core.commands import (
    AppendHistory,
    CommandResult,
    Persist,
    RescheduleReminders,
    TaskNotFound,
    TaskState,
    apply_create,
    apply_delete,
    apply_toggle,
    apply_update,
)
from .core.history import HistoryEntry, view_sorted
from .core.query import QueryParams, TaskSummary, derive, summarize
from .core.reminders import ReminderIntent, compute_reminder_intents
from .core.tasks import Task, TaskDraft
from .ports.notifier import NotificationDispatcher, NotificationUnavailable
from .ports.task_store import HistoryStore, StorageUnavailable, TaskStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TaskService:
    """Executes user commands against the stores and the reminder dispatcher."""

    def __init__(
        self,
        store: TaskStore,
        history_store: HistoryStore,
        config: Config | None = None,
        dispatcher: NotificationDispatcher | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.history_store = history_store
        self.config = config or Config()
        self.dispatcher = dispatcher
        self.clock = clock
        self._notifications_ok = True
        self._store_readable = True

    # ============== State ==============

    def load(self) -> TaskState:
        """
        Load tasks and history. An unreadable store counts as empty.

        While the task store is unreadable, commands are not persisted, so the
        stored tasks are never overwritten by the empty stand-in.
        """
        try:
            tasks = self.store.load_all()
            self._store_readable = True
        except StorageUnavailable as e:
            logger.error(f"Error loading tasks: {e}")
            tasks = []
            self._store_readable = False
        try:
            history = self.history_store.load_all()
        except StorageUnavailable as e:
            logger.error(f"Error loading history: {e}")
            history = []
        return TaskState(tasks=tuple(tasks), history=tuple(history))

    def find(self, id_prefix: str) -> Task:
        """Look up a task by full id or unambiguous id prefix."""
        tasks = self.load().tasks
        exact = [t for t in tasks if t.id == id_prefix]
        if exact:
            return exact[0]
        candidates = [t for t in tasks if t.id.startswith(id_prefix)] if id_prefix else []
        if len(candidates) == 1:
            return candidates[0]
        if len(candidates) > 1:
            raise TaskNotFound(f"Ambiguous task id {id_prefix!r} ({len(candidates)} matches)")
        raise TaskNotFound(id_prefix)

    # ============== Commands ==============

    def _execute(self, state: TaskState, result: CommandResult) -> CommandResult:
        """
        Carry out the effects of a command in order.

        If the task set cannot be persisted, the command is dropped: no
        reminders are rescheduled, no history is appended, and the previous
        state is returned.
        """
        for effect in result.effects:
            match effect:
                case Persist(tasks=tasks):
                    if not self._store_readable:
                        logger.error("Task store unreadable; command not saved")
                        return CommandResult(state=state)
                    if not self.store.save_all(list(tasks)):
                        logger.warning("Task list not saved; command dropped")
                        return CommandResult(state=state)
                case RescheduleReminders(tasks=tasks):
                    self.reschedule(list(tasks))
                case AppendHistory(entry=entry):
                    if not self.history_store.append(entry):
                        logger.warning(f"History entry for {entry.task.id} not saved")
        return result

    def create(self, draft: TaskDraft) -> CommandResult:
        state = self.load()
        result = apply_create(
            state, draft, self.clock(), project_on_create=self.config.recur_on_create
        )
        logger.info(f"[ADD] {draft.title.strip()!r}")
        return self._execute(state, result)

    def update(self, task_id: str, draft: TaskDraft) -> CommandResult:
        state = self.load()
        result = apply_update(state, task_id, draft, self.clock())
        logger.info(f"[EDIT] {task_id}")
        return self._execute(state, result)

    def toggle(self, task_id: str) -> CommandResult:
        state = self.load()
        result = apply_toggle(state, task_id, self.clock())
        task = result.state.get(task_id)
        logger.info(f"[TOGGLE] {task.title!r} -> {task.status.value}")
        return self._execute(state, result)

    def delete(self, task_id: str) -> CommandResult:
        state = self.load()
        result = apply_delete(state, task_id, self.clock())
        logger.info(f"[DELETE] {task_id}")
        return self._execute(state, result)

    # ============== Reminders ==============

    def reminder_intents(self, tasks: list[Task] | None = None) -> list[ReminderIntent]:
        if tasks is None:
            tasks = list(self.load().tasks)
        return compute_reminder_intents(
            tasks,
            self.clock(),
            lead_time=self.config.reminder_lead_time,
            clamp=self.config.clamp_past_reminders,
        )

    def reschedule(self, tasks: list[Task] | None = None) -> list[ReminderIntent]:
        """Cancel every reminder, then schedule the full recomputed set."""
        intents = self.reminder_intents(tasks)
        if self.dispatcher is None or not self._notifications_ok:
            return intents
        try:
            self.dispatcher.cancel_all()
            for intent in intents:
                self.dispatcher.schedule(intent)
        except NotificationUnavailable as e:
            # Reported once; reminders stay off for the rest of the session
            logger.warning(f"Reminders disabled: {e}")
            self._notifications_ok = False
        return intents

    # ============== Views ==============

    def list_tasks(self, params: QueryParams | None = None) -> list[Task]:
        params = params or QueryParams.from_raw(sort_key=self.config.default_sort)
        return derive(list(self.load().tasks), params, self.clock())

    def summary(self) -> TaskSummary:
        return summarize(list(self.load().tasks), self.clock())

    def history(self) -> list[HistoryEntry]:
        return view_sorted(list(self.load().history))

    def calendar_marks(self) -> dict[date, cal.DateMark]:
        return cal.mark_dates(list(self.load().tasks), self.clock(), self.config.tz)

    def tasks_on(self, day: date) -> list[Task]:
        now = self.clock()
        return [t.annotated(now) for t in cal.tasks_on(list(self.load().tasks), day, self.config.tz)]

    # ============== Maintenance ==============

    def replace_all(self, tasks: list[Task]) -> bool:
        """Overwrite the task set (demo data, imports) and reschedule."""
        saved = self.store.save_all(tasks)
        if saved:
            self.reschedule(tasks)
        return saved


def get_service(
    config: Config,
    dispatcher: NotificationDispatcher | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> TaskService:
    """Build a TaskService on the JSON stores in the configured data dir."""
    data_dir = config.resolved_data_dir
    return TaskService(
        store=JsonTaskStore(data_dir, config.storage_key),
        history_store=JsonHistoryStore(data_dir, config.history_key),
        config=config,
        dispatcher=dispatcher,
        clock=clock,
    )
