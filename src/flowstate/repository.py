"""Task repository - owns the application state and writes it through to storage."""

import json
import logging
from datetime import date, datetime
from typing import Callable

from .core.state import FALLBACK_LIST, AppState, FilterMode, validate_state
from .core.tasks import MAX_DEPTH, Subtask, Task, depth_of, find_by_id, next_id, remove_by_id
from .ports import KeyValueStore

logger = logging.getLogger(__name__)

STATE_KEY = "flow_todo_data"


class PersistenceError(Exception):
    """Raised when state could not be written to storage."""

    pass


def load_state(store: KeyValueStore) -> AppState:
    """
    Read the persisted snapshot.

    Missing snapshot -> fresh defaults. Unreadable or malformed snapshot is
    logged and also falls back to defaults.
    """
    try:
        raw = store.get(STATE_KEY)
        if raw is None:
            return AppState()
        state = AppState.from_snapshot(json.loads(raw))
    except (OSError, ValueError, KeyError, TypeError):
        logger.exception("Failed to load state, starting from defaults")
        return AppState()

    for problem in validate_state(state):
        logger.warning(f"Loaded state: {problem}")
    return state


class TaskRepository:
    """
    Mutations over a single AppState with write-through persistence.

    Every operation is a no-op (returning None/False) on invalid input;
    only `save` can raise.
    """

    def __init__(
        self,
        store: KeyValueStore,
        state: AppState | None = None,
        fallback_list: str = FALLBACK_LIST,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.state = state if state is not None else AppState()
        self.fallback_list = fallback_list
        self._clock = clock

    @classmethod
    def load(cls, store: KeyValueStore, **kwargs) -> "TaskRepository":
        return cls(store, load_state(store), **kwargs)

    def save(self) -> None:
        """Persist the full snapshot, retrying once before giving up."""
        blob = json.dumps(self.state.to_snapshot())
        try:
            self.store.set(STATE_KEY, blob)
            return
        except OSError as e:
            logger.warning(f"Saving state failed, retrying: {e}")
        try:
            self.store.set(STATE_KEY, blob)
        except OSError as e:
            logger.warning(f"Saving state failed again, changes are only in memory: {e}")
            raise PersistenceError(f"Could not save state: {e}") from e

    # ---- queries ----

    def find(self, item_id: int) -> Task | Subtask | None:
        return find_by_id(self.state.tasks, item_id)

    # ---- tasks ----

    def _target_list(self, list_name: str | None) -> str:
        if list_name:
            return list_name
        lists = self.state.lists
        if self.state.active_list in lists:
            return self.state.active_list
        return lists[0] if lists else self.fallback_list

    def add_task(
        self,
        title: str,
        list_name: str | None = None,
        due_date: date | None = None,
    ) -> Task | None:
        """Insert a new task at the front. None if the title is blank or the list unknown."""
        title = (title or "").strip()
        if not title:
            return None
        if list_name and list_name not in self.state.lists:
            return None

        now = self._clock()
        task = Task(
            id=next_id(self.state.tasks, now),
            title=title,
            list=self._target_list(list_name),
            due_date=due_date,
            created_at=now.isoformat(),
        )
        self.state.tasks.insert(0, task)
        logger.debug(f"Added task {task.id} to {task.list}")
        self.save()
        return task

    def add_subtask(self, parent_id: int, title: str) -> Subtask | None:
        """Append a subtask. None if the title is blank or the parent is unknown."""
        title = (title or "").strip()
        if not title:
            return None

        parent = self.find(parent_id)
        if parent is None or not hasattr(parent, "subtasks"):
            return None
        if depth_of(self.state.tasks, parent_id) >= MAX_DEPTH:
            return None

        sub = Subtask(id=next_id(self.state.tasks, self._clock()), title=title)
        parent.subtasks.append(sub)
        logger.debug(f"Added subtask {sub.id} under {parent_id}")
        self.save()
        return sub

    def toggle_task(self, item_id: int) -> bool:
        """Flip completion of a task or subtask. False if not found."""
        item = self.find(item_id)
        if item is None:
            return False
        item.completed = not item.completed
        self.save()
        return True

    def delete_task(self, item_id: int) -> bool:
        """Remove a task or subtask. False if not found."""
        if not remove_by_id(self.state.tasks, item_id):
            return False
        logger.debug(f"Deleted item {item_id}")
        self.save()
        return True

    # ---- lists ----

    def create_list(self, name: str) -> bool:
        """Add a list and switch to it. False if blank or it already exists."""
        name = (name or "").strip()
        if not name or name in self.state.lists:
            return False
        self.state.lists.append(name)
        self.state.active_list = name
        self.state.filter = FilterMode.ALL
        self.save()
        return True

    def delete_list(self, name: str) -> bool:
        """Remove a list and every task in it. False if the list is unknown."""
        if name not in self.state.lists:
            return False
        self.state.lists = [n for n in self.state.lists if n != name]
        removed = len(self.state.tasks)
        self.state.tasks = [t for t in self.state.tasks if t.list != name]
        removed -= len(self.state.tasks)

        if self.state.active_list == name:
            self.state.active_list = None
            self.state.filter = FilterMode.ALL
        logger.info(f"Deleted list {name!r} and {removed} task(s)")
        self.save()
        return True

    # ---- view ----

    def switch_list(self, name: str) -> bool:
        """Scope the view to one list. False if the list is unknown."""
        if name not in self.state.lists:
            return False
        self.state.active_list = name
        self.state.filter = FilterMode.ALL
        self.save()
        return True

    def set_global_filter(self, mode: FilterMode) -> None:
        """Leave any list scope and filter all tasks by status."""
        self.state.active_list = None
        self.state.filter = mode
        self.save()
