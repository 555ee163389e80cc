"""Pure view filtering and display metadata - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date

from .state import AppState, FilterMode
from .tasks import DueStatus, Subtask, Task

VIEW_TITLES = {
    FilterMode.ALL: "All Tasks",
    FilterMode.ACTIVE: "Active Tasks",
    FilterMode.COMPLETED: "Completed Tasks",
}
CAUGHT_UP_MESSAGE = "All caught up! Enjoy your day."


@dataclass
class TaskDisplay:
    """Everything a renderer needs to show one task or subtask."""

    id: int
    title: str
    completed: bool
    due_status: DueStatus
    status_class: str = ""
    due_label: str | None = None
    list_badge: str | None = None
    subtasks: list["TaskDisplay"] = field(default_factory=list)


@dataclass
class TaskListView:
    """A rendered-ready view of the current state."""

    title: str
    items: list[TaskDisplay]
    empty_message: str | None = None


def filter_tasks(state: AppState) -> list[Task]:
    """
    Tasks visible in the current view, in insertion order.

    List scope first (when a list is active), then status scope.
    """
    tasks = state.tasks
    if state.active_list is not None:
        tasks = [t for t in tasks if t.list == state.active_list]

    if state.filter == FilterMode.ACTIVE:
        return [t for t in tasks if not t.completed]
    if state.filter == FilterMode.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def format_date(d: date) -> str:
    """Short date label, e.g. 'Jan 05'."""
    return d.strftime("%b %d")


def due_label(due_date: date | None, status: DueStatus) -> str | None:
    """Human-readable due-date badge text."""
    if not due_date:
        return None
    if status == DueStatus.DUE_TODAY:
        return "Due: Today"
    if status == DueStatus.OVERDUE:
        return f"Overdue: {format_date(due_date)}"
    return f"Due: {format_date(due_date)}"


def describe(item: Task | Subtask, state: AppState, as_of: date | None = None) -> TaskDisplay:
    """Build display metadata for a task (and its subtasks) or a subtask."""
    as_of = as_of or date.today()
    is_task = isinstance(item, Task)
    due_date = item.due_date if is_task else None
    status = item.due_status(as_of) if is_task else DueStatus.NONE

    status_class = ""
    if status in (DueStatus.DUE_TODAY, DueStatus.OVERDUE):
        status_class = status.value

    return TaskDisplay(
        id=item.id,
        title=item.title,
        completed=item.completed,
        due_status=status,
        status_class=status_class,
        due_label=due_label(due_date, status),
        list_badge=item.list if is_task and state.is_global_view else None,
        subtasks=[describe(s, state, as_of) for s in item.subtasks] if is_task else [],
    )


def view_title(state: AppState) -> str:
    if state.active_list is not None:
        return state.active_list
    return VIEW_TITLES[state.filter]


def empty_message(state: AppState) -> str:
    """Message shown when nothing is visible in the current view."""
    if state.active_list is not None and not state.tasks_in_list(state.active_list):
        return f"No tasks in {state.active_list}. Add one with 'flowstate add'."
    return CAUGHT_UP_MESSAGE


def build_view(state: AppState, as_of: date | None = None) -> TaskListView:
    """
    Assemble the full view for the current state.

    Pure function - no I/O.
    """
    as_of = as_of or date.today()
    items = [describe(t, state, as_of) for t in filter_tasks(state)]
    return TaskListView(
        title=view_title(state),
        items=items,
        empty_message=None if items else empty_message(state),
    )
