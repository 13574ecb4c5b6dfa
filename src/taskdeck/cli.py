"""taskdeck CLI - Task Manager."""

import json
import logging
import sys
from dataclasses import replace
from datetime import date, datetime

import click

from .config import Config, load_config
from .core.commands import TaskNotFound
from .core.query import ALL, QueryParams, SortKey
from .core.tasks import Category, Priority, Recurrence, Status, Task, TaskDraft, ValidationError
from .demo import demo_tasks
from .workflows import TaskService, get_service

logger = logging.getLogger(__name__)

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]

STATUS_MARKERS = {
    Status.TODO: " ",
    Status.IN_PROGRESS: "~",
    Status.DONE: "x",
}


def _choice(enum_cls, use_name: bool = False, with_all: bool = False) -> click.Choice:
    values = [m.name.lower() if use_name else m.value for m in enum_cls]
    if with_all:
        values = [ALL] + values
    return click.Choice(values, case_sensitive=False)


def _status_from_option(value: str) -> Status:
    return Status[value.upper().replace(" ", "_")]


STATUS_CHOICE = click.Choice(["todo", "in_progress", "done"], case_sensitive=False)
STATUS_FILTER_CHOICE = click.Choice([ALL, "todo", "in_progress", "done"], case_sensitive=False)


def _service(config: Config | None = None) -> TaskService:
    return get_service(config or load_config())


def _localize(value: datetime | None, config: Config) -> datetime | None:
    """Attach the configured timezone to a date typed on the command line."""
    if value is None:
        return None
    return value.replace(tzinfo=config.tz)


def _resolve(service: TaskService, task_id: str) -> Task:
    try:
        return service.find(task_id)
    except TaskNotFound as e:
        click.echo(f"Error: task not found: {e.args[0]}", err=True)
        sys.exit(1)


def _format_due(task: Task, config: Config) -> str:
    if not task.due_date:
        return ""
    return task.due_date.astimezone(config.tz).strftime("%b %d, %Y %H:%M")


def _task_json(task: Task) -> dict:
    data = task.to_dict()
    data["isOverdue"] = task.is_overdue
    return data


def _task_line(task: Task, config: Config) -> str:
    marker = STATUS_MARKERS[task.status]
    due = f" due {_format_due(task, config)}" if task.due_date else ""
    overdue = " OVERDUE" if task.is_overdue else ""
    repeat = f" [{task.recurring.label}]" if task.recurring is not Recurrence.NONE else ""
    return (
        f"[{marker}] {task.id[:8]}  {task.title}  "
        f"({task.priority.label}, {task.category.label}){due}{repeat}{overdue}"
    )


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """taskdeck - Task Manager CLI."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


@main.command()
@click.argument("title")
@click.option("--description", "-d", default="", help="Task description")
@click.option("--priority", "-p", type=_choice(Priority, use_name=True), default="low")
@click.option("--category", "-c", type=_choice(Category), default=Category.WORK.value)
@click.option("--due", type=click.DateTime(formats=DATE_FORMATS), default=None, help="Due date")
@click.option("--recurring", "-r", type=_choice(Recurrence), default=Recurrence.NONE.value)
@click.option("--estimate", default="", help="Estimated time, e.g. '2 hours'")
@click.option("--no-reminders", is_flag=True, help="Disable reminders for this task")
def add(title, description, priority, category, due, recurring, estimate, no_reminders):
    """Create a new task."""
    config = load_config()
    draft = TaskDraft(
        title=title,
        description=description,
        priority=Priority[priority.upper()],
        category=Category(category.lower()),
        due_date=_localize(due, config),
        recurring=Recurrence(recurring.lower()),
        estimated_time=estimate,
        reminders_enabled=not no_reminders,
    )
    service = _service(config)
    before = {t.id for t in service.load().tasks}
    try:
        result = service.create(draft)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for task in result.state.tasks:
        if task.id not in before:
            due = f" due {_format_due(task, config)}" if task.due_date else ""
            click.echo(f"✓ Added {task.title} ({task.id[:8]}){due}")


@main.command()
@click.argument("task_id")
@click.option("--title", "-t", default=None)
@click.option("--description", "-d", default=None)
@click.option("--status", "-s", type=STATUS_CHOICE, default=None)
@click.option("--priority", "-p", type=_choice(Priority, use_name=True), default=None)
@click.option("--category", "-c", type=_choice(Category), default=None)
@click.option("--due", type=click.DateTime(formats=DATE_FORMATS), default=None)
@click.option("--clear-due", is_flag=True, help="Remove the due date")
@click.option("--recurring", "-r", type=_choice(Recurrence), default=None)
@click.option("--estimate", default=None)
@click.option("--reminders/--no-reminders", default=None)
def edit(task_id, title, description, status, priority, category, due, clear_due, recurring, estimate, reminders):
    """Edit an existing task."""
    config = load_config()
    service = _service(config)
    task = _resolve(service, task_id)

    draft = TaskDraft.from_task(task)
    changes = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if status is not None:
        changes["status"] = _status_from_option(status)
    if priority is not None:
        changes["priority"] = Priority[priority.upper()]
    if category is not None:
        changes["category"] = Category(category.lower())
    if clear_due:
        changes["due_date"] = None
    elif due is not None:
        changes["due_date"] = _localize(due, config)
    if recurring is not None:
        changes["recurring"] = Recurrence(recurring.lower())
    if estimate is not None:
        changes["estimated_time"] = estimate
    if reminders is not None:
        changes["reminders_enabled"] = reminders

    try:
        service.update(task.id, replace(draft, **changes))
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Updated {task.id[:8]}")


@main.command()
@click.argument("task_id")
def toggle(task_id):
    """Advance a task: To Do -> In Progress -> Done -> To Do."""
    service = _service()
    task = _resolve(service, task_id)
    before = {t.id for t in service.load().tasks}
    result = service.toggle(task.id)

    updated = result.state.get(task.id)
    click.echo(f"{updated.title}: {updated.status.value}")
    for successor in result.state.tasks:
        if successor.id not in before:
            click.echo(f"↻ Next occurrence due {_format_due(successor, service.config)}")


@main.command()
@click.argument("task_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def delete(task_id, yes):
    """Delete a task."""
    service = _service()
    task = _resolve(service, task_id)
    if not yes and not click.confirm(f"Delete '{task.title}'?"):
        return
    service.delete(task.id)
    click.echo(f"✓ Deleted {task.title}")


@main.command("list")
@click.option("--search", "-q", default="", help="Search title and description")
@click.option("--status", "-s", type=STATUS_FILTER_CHOICE, default=ALL)
@click.option("--category", "-c", type=_choice(Category, with_all=True), default=ALL)
@click.option("--priority", "-p", type=_choice(Priority, use_name=True, with_all=True), default=ALL)
@click.option("--sort", "sort_key", type=click.Choice([k.value for k in SortKey]), default=None)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(search, status, category, priority, sort_key, as_json):
    """List tasks, filtered and sorted."""
    config = load_config()
    service = _service(config)
    params = QueryParams.from_raw(
        search_text=search,
        status=ALL if status == ALL else _status_from_option(status),
        category=category.lower(),
        priority=priority.upper() if priority != ALL else ALL,
        sort_key=sort_key or config.default_sort,
    )
    tasks = service.list_tasks(params)

    if as_json:
        click.echo(json.dumps([_task_json(t) for t in tasks], indent=2))
        return

    if not tasks:
        click.echo("No tasks.")
        return

    summary = service.summary()
    click.echo(
        f"{summary.total} tasks: {summary.todo} to do, {summary.in_progress} in progress, "
        f"{summary.done} done, {summary.overdue} overdue\n"
    )
    for task in tasks:
        click.echo(_task_line(task, config))
        if task.description:
            click.echo(f"      {task.description}")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def history(as_json):
    """Show completed, undone and deleted tasks, newest first."""
    entries = _service().history()

    if as_json:
        click.echo(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    if not entries:
        click.echo("No history yet.")
        return

    for entry in entries:
        click.echo(f"{entry.action_at.strftime('%Y-%m-%d %H:%M')}  {entry.action.value:9} {entry.task.title}")


@main.command()
@click.option("--date", "-d", "target_date", default=None, help="Show tasks due on a day (YYYY-MM-DD)")
def calendar(target_date):
    """Show days with tasks due, or the tasks due on one day."""
    config = load_config()
    service = _service(config)

    if target_date:
        day = date.fromisoformat(target_date)
        tasks = service.tasks_on(day)
        if not tasks:
            click.echo(f"Nothing due on {day.strftime('%A, %b %d')}.")
            return
        click.echo(f"### {day.strftime('%A, %B %d')}")
        for task in tasks:
            click.echo(_task_line(task, config))
        return

    marks = service.calendar_marks()
    if not marks:
        click.echo("No tasks with due dates.")
        return
    for day in sorted(marks):
        mark = marks[day]
        flag = "  OVERDUE" if mark.overdue else ""
        click.echo(f"{day.isoformat()}  {mark.selected_color}{flag}")


@main.command()
def reminders():
    """Show pending reminders."""
    config = load_config()
    service = _service(config)
    tasks = {t.id: t for t in service.load().tasks}
    intents = service.reminder_intents()

    if not intents:
        click.echo("No reminders scheduled.")
        return
    for intent in sorted(intents, key=lambda i: i.fire_at):
        fire_at = intent.fire_at.astimezone(config.tz).strftime("%Y-%m-%d %H:%M")
        click.echo(f"{fire_at}  {tasks[intent.task_id].title}")


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def demo(yes):
    """Replace all tasks with the demo task set."""
    service = _service()
    if not yes and not click.confirm("Replace all tasks with demo data?"):
        return
    if not service.replace_all(demo_tasks(service.clock())):
        click.echo("Error loading demo data", err=True)
        sys.exit(1)
    click.echo("Demo data loaded successfully!")


@main.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def clear(yes):
    """Delete all tasks. History is kept."""
    service = _service()
    if not yes and not click.confirm("Delete all tasks?"):
        return
    if not service.replace_all([]):
        click.echo("Error clearing data", err=True)
        sys.exit(1)
    click.echo("All data cleared successfully!")


@main.command()
def watch():
    """Run in the foreground and deliver reminders as they come due."""
    from apscheduler.schedulers.blocking import BlockingScheduler
    from apscheduler.triggers.interval import IntervalTrigger

    from .adapters.scheduler_notifier import SchedulerDispatcher

    logging.getLogger().setLevel(min(logging.getLogger().level, logging.INFO))

    config = load_config()
    scheduler = BlockingScheduler(timezone=config.tz)

    def notify(intent):
        click.echo(f"🔔 Task Reminder: {intent.message}")

    service = get_service(config, dispatcher=SchedulerDispatcher(scheduler, notify=notify))
    state = {"mtime": None}

    def refresh():
        path = service.store.path
        mtime = path.stat().st_mtime if path.exists() else None
        if mtime == state["mtime"]:
            return
        state["mtime"] = mtime
        intents = service.reschedule()
        logger.info(f"Rescheduled {len(intents)} reminders")

    refresh()
    scheduler.add_job(
        refresh,
        IntervalTrigger(seconds=config.watch_interval_seconds),
        id="refresh",
    )

    click.echo("Watching for reminders. Press Ctrl+C to stop")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        click.echo("\nStopped.")


if __name__ == "__main__":
    main()
