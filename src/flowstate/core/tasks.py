"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterable

# Tasks own subtasks; subtasks own nothing.
MAX_DEPTH = 2


class DueStatus(Enum):
    """Due-date classification relative to a given day."""

    NONE = "none"
    DUE_TODAY = "due-today"
    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    COMPLETED = "completed"


@dataclass
class Subtask:
    """A checklist item nested under a task."""

    id: int
    title: str
    completed: bool = False

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "completed": self.completed}

    @classmethod
    def from_dict(cls, data: dict) -> "Subtask":
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class Task:
    """A to-do item belonging to a named list."""

    id: int
    title: str
    list: str
    completed: bool = False
    due_date: date | None = None
    created_at: str = ""
    subtasks: list[Subtask] = field(default_factory=list)
    reminded: bool = False

    def due_status(self, as_of: date | None = None) -> DueStatus:
        return classify_due(self.due_date, self.completed, as_of)

    def to_dict(self) -> dict:
        """Serialize to the snapshot shape (camelCase keys)."""
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "list": self.list,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "createdAt": self.created_at,
            "subtasks": [s.to_dict() for s in self.subtasks],
            "reminded": self.reminded,
        }

    @classmethod
    def from_dict(cls, data: dict, default_list: str = "") -> "Task":
        """Create Task from a snapshot entry. Expects `title` to be present."""
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            list=str(data.get("list") or default_list),
            completed=bool(data.get("completed", False)),
            due_date=parse_due_date(data.get("dueDate")),
            created_at=str(data.get("createdAt") or ""),
            subtasks=[Subtask.from_dict(s) for s in data.get("subtasks") or []],
            reminded=bool(data.get("reminded", False)),
        )


def parse_due_date(value) -> date | None:
    """Parse a stored due date, dropping any time component."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).split("T")[0])
    except ValueError:
        return None


def classify_due(
    due_date: date | None,
    completed: bool,
    as_of: date | None = None,
) -> DueStatus:
    """
    Classify a due date against `as_of` (defaults to today).

    Completed items with a due date are always COMPLETED, whatever the date.
    """
    if not due_date:
        return DueStatus.NONE
    if completed:
        return DueStatus.COMPLETED
    as_of = as_of or date.today()
    if due_date == as_of:
        return DueStatus.DUE_TODAY
    if due_date < as_of:
        return DueStatus.OVERDUE
    return DueStatus.UPCOMING


def _children(node) -> list | None:
    return getattr(node, "subtasks", None)


def find_by_id(nodes: Iterable, item_id: int):
    """Depth-first lookup of a node by id at any nesting level."""
    for node in nodes:
        if node.id == item_id:
            return node
        children = _children(node)
        if children:
            found = find_by_id(children, item_id)
            if found is not None:
                return found
    return None


def remove_by_id(nodes: list, item_id: int) -> bool:
    """
    Remove the first node matching `item_id`.

    Top-level matches win. Otherwise each node's children are searched in
    order and the walk stops at the first level where something was removed.
    Returns True if a node was removed.
    """
    for i, node in enumerate(nodes):
        if node.id == item_id:
            del nodes[i]
            return True
    for node in nodes:
        children = _children(node)
        if children and remove_by_id(children, item_id):
            return True
    return False


def iter_nodes(nodes: Iterable):
    """Yield every node in the tree, parents before children."""
    for node in nodes:
        yield node
        children = _children(node)
        if children:
            yield from iter_nodes(children)


def depth_of(nodes: Iterable, item_id: int, _level: int = 1) -> int | None:
    """Nesting level of a node (1 = top level), or None if absent."""
    for node in nodes:
        if node.id == item_id:
            return _level
        children = _children(node)
        if children:
            found = depth_of(children, item_id, _level + 1)
            if found is not None:
                return found
    return None


def max_id(nodes: Iterable) -> int:
    """Largest id in the tree, 0 for an empty tree."""
    return max((n.id for n in iter_nodes(nodes)), default=0)


def next_id(nodes: Iterable, now: datetime | None = None) -> int:
    """
    Fresh id derived from the creation timestamp in milliseconds.

    Falls forward to max+1 when the clock would collide with an existing id.
    """
    now = now or datetime.now()
    candidate = int(now.timestamp() * 1000)
    return max(candidate, max_id(nodes) + 1)
