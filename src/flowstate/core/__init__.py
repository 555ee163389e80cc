"""Functional core - pure business logic with no I/O."""

from .tasks import Task, Subtask, DueStatus, classify_due, find_by_id, remove_by_id
from .state import AppState, FilterMode, validate_state
from .filters import TaskDisplay, TaskListView, filter_tasks, build_view
from .reminders import ReminderEvent, ReminderStatus, pending_reminders

__all__ = [
    # Tasks
    "Task",
    "Subtask",
    "DueStatus",
    "classify_due",
    "find_by_id",
    "remove_by_id",
    # State
    "AppState",
    "FilterMode",
    "validate_state",
    # Filters
    "TaskDisplay",
    "TaskListView",
    "filter_tasks",
    "build_view",
    # Reminders
    "ReminderEvent",
    "ReminderStatus",
    "pending_reminders",
]
