"""Pure reminder selection logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from .tasks import DueStatus, Task


class ReminderStatus(Enum):
    """Conditions that warrant a reminder."""

    DUE_TODAY = "due today"
    OVERDUE = "overdue"

    @property
    def headline(self) -> str:
        """Notification title, e.g. 'Task OVERDUE!'."""
        return f"Task {self.value.upper()}!"


@dataclass(frozen=True)
class ReminderEvent:
    """A reminder that was (or should be) delivered for a task."""

    task: Task
    status: ReminderStatus


def reminder_status(task: Task, as_of: date | None = None) -> ReminderStatus | None:
    """Reminder condition for a task, or None if it has none."""
    due = task.due_status(as_of)
    if due == DueStatus.DUE_TODAY:
        return ReminderStatus.DUE_TODAY
    if due == DueStatus.OVERDUE:
        return ReminderStatus.OVERDUE
    return None


def pending_reminders(tasks: list[Task], as_of: date | None = None) -> list[ReminderEvent]:
    """
    Tasks due today or overdue that have not been reminded yet.

    Pure function - does not touch `reminded`.
    """
    as_of = as_of or date.today()
    events = []
    for task in tasks:
        if task.reminded:
            continue
        status = reminder_status(task, as_of)
        if status is not None:
            events.append(ReminderEvent(task=task, status=status))
    return events
