"""Tests for the task repository and its persistence boundary."""

import json
from datetime import date, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from flowstate.adapters.memory_store import MemoryStore
from flowstate.core.filters import filter_tasks
from flowstate.core.state import AppState, FilterMode
from flowstate.core.tasks import Subtask, Task
from flowstate.repository import STATE_KEY, PersistenceError, TaskRepository, load_state


class Clock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def repo(store):
    return TaskRepository(store, clock=Clock(datetime(2025, 1, 15, 9, 0)))


def saved(store) -> dict:
    return json.loads(store.get(STATE_KEY))


@pytest.fixture
def populated(store):
    state = AppState(
        tasks=[
            Task(id=3, title="Report", list="Work", subtasks=[Subtask(id=31, title="Draft")]),
            Task(id=2, title="Milk", list="Groceries"),
            Task(id=1, title="Call mum", list="Personal", subtasks=[
                Subtask(id=11, title="Find number"),
                Subtask(id=12, title="Dial"),
            ]),
        ],
    )
    return TaskRepository(store, state, clock=Clock(datetime(2025, 1, 15, 9, 0)))


class TestAddTask:
    def test_adds_to_front_with_defaults(self, repo):
        repo.add_task("First")
        task = repo.add_task("  Second  ")
        assert repo.state.tasks[0] is task
        assert task.title == "Second"
        assert task.completed is False
        assert task.subtasks == []
        assert task.reminded is False
        assert len(repo.state.tasks) == 2

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_blank_title_is_noop(self, repo, store, title):
        assert repo.add_task(title) is None
        assert repo.state.tasks == []
        assert store.get(STATE_KEY) is None

    def test_defaults_to_active_list(self, repo):
        repo.state.active_list = "Work"
        assert repo.add_task("x").list == "Work"

    def test_global_view_uses_first_list(self, repo):
        repo.state.active_list = None
        assert repo.add_task("x").list == "Personal"

    def test_no_lists_uses_fallback(self, store):
        repo = TaskRepository(store, AppState(lists=[], active_list=None), fallback_list="Inbox")
        assert repo.add_task("x").list == "Inbox"

    def test_explicit_list(self, repo):
        assert repo.add_task("x", list_name="Groceries").list == "Groceries"

    def test_unknown_explicit_list_is_noop(self, repo):
        assert repo.add_task("x", list_name="Nope") is None
        assert repo.state.tasks == []

    def test_due_date_and_ids(self, repo):
        a = repo.add_task("a", due_date=date(2025, 1, 20))
        b = repo.add_task("b")
        assert a.due_date == date(2025, 1, 20)
        assert b.id > a.id
        assert a.created_at.startswith("2025-01-15T09:00")

    def test_writes_through(self, repo, store):
        task = repo.add_task("Persist me")
        assert saved(store)["tasks"][0]["id"] == task.id


class TestAddSubtask:
    def test_appends(self, populated):
        sub = populated.add_subtask(1, "Hang up")
        assert populated.state.tasks[2].subtasks[-1] is sub
        assert [s.title for s in populated.state.tasks[2].subtasks] == ["Find number", "Dial", "Hang up"]

    def test_unknown_parent(self, populated, store):
        assert populated.add_subtask(999, "x") is None
        assert store.get(STATE_KEY) is None

    def test_blank_title(self, populated):
        assert populated.add_subtask(1, "  ") is None
        assert len(populated.state.tasks[2].subtasks) == 2

    def test_no_nesting_under_subtask(self, populated):
        assert populated.add_subtask(11, "too deep") is None

    def test_subtask_id_unique(self, populated):
        sub = populated.add_subtask(2, "Oat")
        ids = [31, 11, 12, 1, 2, 3]
        assert sub.id not in ids


class TestToggleTask:
    def test_task(self, populated):
        assert populated.toggle_task(2) is True
        assert populated.find(2).completed is True
        assert populated.find(1).completed is False
        assert populated.find(3).completed is False

    def test_subtask(self, populated):
        populated.toggle_task(12)
        assert populated.find(12).completed is True
        assert populated.find(11).completed is False
        assert populated.find(1).completed is False

    def test_twice_restores(self, populated):
        populated.toggle_task(31)
        populated.toggle_task(31)
        assert populated.find(31).completed is False

    def test_missing(self, populated, store):
        assert populated.toggle_task(999) is False
        assert store.get(STATE_KEY) is None


class TestDeleteTask:
    def test_top_level_with_subtasks(self, populated):
        assert populated.delete_task(1) is True
        assert [t.id for t in populated.state.tasks] == [3, 2]
        assert populated.find(11) is None

    def test_subtask(self, populated):
        assert populated.delete_task(11) is True
        assert [s.id for s in populated.find(1).subtasks] == [12]
        assert [s.id for s in populated.find(3).subtasks] == [31]
        assert len(populated.state.tasks) == 3

    def test_missing(self, populated, store):
        assert populated.delete_task(999) is False
        assert len(populated.state.tasks) == 3
        assert store.get(STATE_KEY) is None


class TestLists:
    def test_create_switches_view(self, repo):
        repo.state.filter = FilterMode.COMPLETED
        assert repo.create_list("  Errands ") is True
        assert repo.state.lists[-1] == "Errands"
        assert repo.state.active_list == "Errands"
        assert repo.state.filter == FilterMode.ALL

    def test_create_duplicate_rejected(self, repo, store):
        lists_before = list(repo.state.lists)
        active_before = repo.state.active_list
        assert repo.create_list("Personal") is False
        assert repo.state.lists == lists_before
        assert repo.state.active_list == active_before
        assert store.get(STATE_KEY) is None

    def test_create_is_case_sensitive(self, repo):
        assert repo.create_list("personal") is True

    def test_create_blank(self, repo):
        assert repo.create_list("  ") is False

    def test_delete_cascades(self, populated):
        populated.state.active_list = "Work"
        assert populated.delete_list("Personal") is True
        assert "Personal" not in populated.state.lists
        assert [t.id for t in populated.state.tasks] == [3, 2]
        assert populated.find(11) is None
        assert populated.state.active_list == "Work"

    def test_delete_active_resets_view(self, populated):
        populated.state.active_list = "Work"
        populated.state.filter = FilterMode.ACTIVE
        populated.delete_list("Work")
        assert populated.state.active_list is None
        assert populated.state.filter == FilterMode.ALL

    def test_delete_unknown(self, populated):
        assert populated.delete_list("Nope") is False
        assert len(populated.state.tasks) == 3

    def test_switch_list(self, repo):
        repo.state.filter = FilterMode.ACTIVE
        assert repo.switch_list("Work") is True
        assert repo.state.active_list == "Work"
        assert repo.state.filter == FilterMode.ALL
        assert repo.switch_list("Nope") is False

    def test_global_filter(self, populated):
        populated.toggle_task(2)
        populated.set_global_filter(FilterMode.COMPLETED)
        assert populated.state.active_list is None
        assert [t.id for t in filter_tasks(populated.state)] == [2]

    def test_add_after_deleting_active_list(self, populated, store):
        populated.switch_list("Work")
        populated.delete_list("Work")

        reloaded = TaskRepository.load(store)
        task = reloaded.add_task("Follow up")
        assert task.list in reloaded.state.lists
        assert task.list == "Personal"

    def test_stale_active_list_falls_back_to_first(self, store):
        repo = TaskRepository(store, AppState(lists=["Work", "Home"], active_list="Gone"))
        assert repo.add_task("x").list == "Work"

    def test_global_view_survives_reload(self, populated, store):
        populated.set_global_filter(FilterMode.ACTIVE)
        reloaded = TaskRepository.load(store)
        assert reloaded.state.active_list is None
        assert reloaded.state.filter == FilterMode.ACTIVE


class TestPersistence:
    def test_load_round_trip(self, populated, store):
        populated.toggle_task(12)
        reloaded = TaskRepository.load(store)
        assert reloaded.state == populated.state

    def test_load_missing_is_fresh(self, store):
        assert load_state(store) == AppState()

    def test_load_corrupt_falls_back(self, store):
        store.set(STATE_KEY, "{not json")
        assert load_state(store) == AppState()

    def test_load_read_error_falls_back(self):
        store = MagicMock()
        store.get.side_effect = OSError("disk gone")
        assert load_state(store) == AppState()

    def test_save_retries_once(self, repo):
        store = MagicMock()
        store.set.side_effect = [OSError("busy"), None]
        repo.store = store
        repo.add_task("x")
        assert store.set.call_count == 2

    def test_save_failure_raises_but_keeps_memory(self, repo):
        store = MagicMock()
        store.set.side_effect = OSError("read-only")
        repo.store = store
        with pytest.raises(PersistenceError):
            repo.add_task("kept")
        assert repo.state.tasks[0].title == "kept"
        assert store.set.call_count == 2
