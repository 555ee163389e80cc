"""Application state aggregate and snapshot migration - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .tasks import Task, iter_nodes

logger = logging.getLogger(__name__)

FRESH_LISTS = ["Personal", "Work", "Groceries"]
# Applied when a stored snapshot lacks the key entirely.
SNAPSHOT_DEFAULT_LISTS = ["Personal", "Work"]
DEFAULT_ACTIVE_LIST = "Personal"
FALLBACK_LIST = "Inbox"


class FilterMode(Enum):
    """Status scope applied within the current view."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> "FilterMode":
        try:
            return cls(raw)
        except ValueError:
            return cls.ALL


@dataclass
class AppState:
    """
    Root aggregate: every task and list plus the current view.

    `active_list` is None for the global view.
    """

    tasks: list[Task] = field(default_factory=list)
    lists: list[str] = field(default_factory=lambda: list(FRESH_LISTS))
    active_list: str | None = DEFAULT_ACTIVE_LIST
    filter: FilterMode = FilterMode.ALL

    @property
    def is_global_view(self) -> bool:
        return self.active_list is None

    def tasks_in_list(self, name: str) -> list[Task]:
        return [t for t in self.tasks if t.list == name]

    def to_snapshot(self) -> dict:
        """Serialize to the persisted JSON shape."""
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "lists": list(self.lists),
            "activeList": self.active_list,
            "filter": self.filter.value,
        }

    @classmethod
    def from_snapshot(cls, data: dict) -> "AppState":
        """
        Build state from a persisted snapshot, migrating legacy shapes.

        - tasks and subtasks labelled with `text` are renamed to `title`
        - missing lists / activeList / filter get their defaults
        - entries that cannot be used are dropped one by one, never the whole snapshot
        """
        if not isinstance(data, dict):
            raise ValueError(f"Snapshot must be an object, got {type(data).__name__}")

        lists = [str(name) for name in data.get("lists") or SNAPSHOT_DEFAULT_LISTS]
        tasks = []
        for raw in data.get("tasks") or []:
            try:
                entry = migrate_task_entry(raw)
                if entry is None:
                    logger.warning(f"Dropping unusable task entry: {raw!r}")
                    continue
                tasks.append(Task.from_dict(entry, default_list=FALLBACK_LIST))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Dropping malformed task entry {raw!r}: {e}")

        # A stored null is the global view; only a missing key gets the default.
        active_list = data["activeList"] if "activeList" in data else DEFAULT_ACTIVE_LIST
        if active_list not in lists:
            active_list = None

        return cls(
            tasks=tasks,
            lists=lists,
            active_list=active_list,
            filter=FilterMode.parse(data.get("filter")),
        )


def _migrate_label(raw) -> dict | None:
    """Copy an entry with `text` renamed to `title`; None without id or label."""
    if not isinstance(raw, dict) or "id" not in raw:
        return None
    entry = dict(raw)
    if entry.get("text") and not entry.get("title"):
        entry["title"] = entry["text"]
    entry.pop("text", None)
    if not entry.get("title"):
        return None
    try:
        entry["id"] = int(entry["id"])
    except (TypeError, ValueError):
        return None
    return entry


def migrate_task_entry(raw: dict) -> dict | None:
    """Normalize one stored task entry and its subtasks; None if the task cannot be used."""
    entry = _migrate_label(raw)
    if entry is None:
        return None
    subtasks = []
    for raw_sub in entry.get("subtasks") or []:
        sub = _migrate_label(raw_sub)
        if sub is None:
            logger.warning(f"Dropping unusable subtask of task {entry['id']}: {raw_sub!r}")
            continue
        subtasks.append(sub)
    entry["subtasks"] = subtasks
    return entry


def validate_state(state: AppState) -> list[str]:
    """
    Check structural invariants. Returns a list of problems (empty if valid).

    Pure function - callers decide whether to log or fail.
    """
    problems = []

    seen: set[int] = set()
    for node in iter_nodes(state.tasks):
        if node.id in seen:
            problems.append(f"duplicate id {node.id}")
        seen.add(node.id)
        if not node.title.strip():
            problems.append(f"item {node.id} has an empty title")

    for task in state.tasks:
        if not task.list:
            problems.append(f"task {task.id} has no list")

    if len(set(state.lists)) != len(state.lists):
        problems.append("duplicate list names")

    return problems
