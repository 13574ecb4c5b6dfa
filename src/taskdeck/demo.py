"""Sample task set for trying out taskdeck."""

from datetime import datetime, timedelta

from .core.tasks import Category, Priority, Recurrence, Status, Task


def demo_tasks(now: datetime) -> list[Task]:
    """Eight sample tasks with due dates relative to now."""
    day = timedelta(days=1)

    def task(
        task_id: str,
        title: str,
        description: str,
        status: Status,
        priority: Priority,
        category: Category,
        due_in: timedelta,
        recurring: Recurrence,
        estimated_time: str,
        created_ago: timedelta,
        reminders: bool = True,
    ) -> Task:
        created = now - created_ago
        return Task(
            id=task_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            category=category,
            due_date=now + due_in,
            recurring=recurring,
            estimated_time=estimated_time,
            reminders_enabled=reminders,
            created_at=created,
            updated_at=now,
        )

    return [
        task(
            "demo-1", "Complete Project Proposal",
            "Finish the quarterly project proposal for the marketing campaign",
            Status.IN_PROGRESS, Priority.HIGH, Category.WORK,
            2 * day, Recurrence.NONE, "4 hours", 3 * day,
        ),
        task(
            "demo-2", "Doctor Appointment", "Annual health checkup with Dr. Smith",
            Status.TODO, Priority.MEDIUM, Category.HEALTH,
            7 * day, Recurrence.NONE, "2 hours", 1 * day,
        ),
        task(
            "demo-3", "Pay Monthly Bills", "Pay electricity, water, and internet bills",
            Status.TODO, Priority.HIGH, Category.FINANCE,
            -1 * day, Recurrence.MONTHLY, "30 minutes", 5 * day,
        ),
        task(
            "demo-4", "Learn React Native",
            "Complete the React Native course on mobile development",
            Status.IN_PROGRESS, Priority.MEDIUM, Category.EDUCATION,
            14 * day, Recurrence.NONE, "20 hours", 7 * day,
        ),
        task(
            "demo-5", "Buy Groceries",
            "Weekly grocery shopping - milk, bread, fruits, vegetables",
            Status.DONE, Priority.LOW, Category.PERSONAL,
            -2 * day, Recurrence.WEEKLY, "1 hour", 8 * day,
        ),
        task(
            "demo-6", "Team Meeting",
            "Weekly team standup meeting to discuss project progress",
            Status.TODO, Priority.MEDIUM, Category.WORK,
            1 * day, Recurrence.WEEKLY, "1 hour", timedelta(0),
        ),
        task(
            "demo-7", "Exercise - Morning Run", "Daily 5km morning run for fitness",
            Status.DONE, Priority.HIGH, Category.HEALTH,
            timedelta(0), Recurrence.DAILY, "45 minutes", timedelta(0),
        ),
        task(
            "demo-8", "Update Portfolio Website",
            "Add new projects and update skills section on personal website",
            Status.TODO, Priority.LOW, Category.PERSONAL,
            10 * day, Recurrence.NONE, "3 hours", 2 * day, reminders=False,
        ),
    ]
