"""Tests for the state aggregate, snapshots and migration."""

import pytest

from flowstate.core.state import (
    DEFAULT_ACTIVE_LIST,
    FRESH_LISTS,
    SNAPSHOT_DEFAULT_LISTS,
    AppState,
    FilterMode,
    migrate_task_entry,
    validate_state,
)
from flowstate.core.tasks import Subtask, Task


class TestDefaults:
    def test_fresh_state(self):
        state = AppState()
        assert state.tasks == []
        assert state.lists == FRESH_LISTS
        assert state.active_list == "Personal"
        assert state.filter == FilterMode.ALL

    def test_fresh_lists_are_not_shared(self):
        a, b = AppState(), AppState()
        a.lists.append("Extra")
        assert "Extra" not in b.lists


class TestFromSnapshot:
    def test_legacy_text_field(self):
        state = AppState.from_snapshot({"tasks": [{"id": 5, "text": "Legacy"}]})
        task = state.tasks[0]
        assert task.title == "Legacy"
        assert "text" not in task.to_dict()

    def test_missing_keys_get_defaults(self):
        state = AppState.from_snapshot({"tasks": []})
        assert state.lists == SNAPSHOT_DEFAULT_LISTS
        assert state.active_list == DEFAULT_ACTIVE_LIST
        assert state.filter == FilterMode.ALL

    def test_unknown_filter(self):
        state = AppState.from_snapshot({"filter": "someday"})
        assert state.filter == FilterMode.ALL

    def test_full_snapshot(self):
        snapshot = {
            "tasks": [
                {
                    "id": 1,
                    "title": "Buy milk",
                    "list": "Groceries",
                    "completed": True,
                    "dueDate": "2024-01-01",
                    "createdAt": "2023-12-31T10:00:00",
                    "subtasks": [{"id": 2, "title": "Oat", "completed": False}],
                    "reminded": True,
                }
            ],
            "lists": ["Groceries"],
            "activeList": "Groceries",
            "filter": "completed",
        }
        state = AppState.from_snapshot(snapshot)
        assert state.lists == ["Groceries"]
        assert state.active_list == "Groceries"
        assert state.filter == FilterMode.COMPLETED
        assert state.tasks[0].subtasks == [Subtask(id=2, title="Oat")]
        assert state.to_snapshot() == snapshot

    def test_untitled_entries_dropped(self):
        state = AppState.from_snapshot({"tasks": [{"id": 1}, {"id": 2, "title": "Kept"}, "junk"]})
        assert [t.id for t in state.tasks] == [2]

    def test_legacy_subtask_text_field(self):
        state = AppState.from_snapshot({
            "tasks": [{"id": 5, "title": "Trip", "subtasks": [{"id": 6, "text": "Pack"}]}],
        })
        assert state.tasks[0].subtasks == [Subtask(id=6, title="Pack")]
        assert "text" not in state.to_snapshot()["tasks"][0]["subtasks"][0]

    def test_malformed_subtasks_dropped_task_kept(self):
        state = AppState.from_snapshot({
            "tasks": [{
                "id": 5,
                "title": "Trip",
                "subtasks": [{"id": 6}, {"id": "six", "title": "Bad id"}, "junk", {"id": 7, "title": "Book"}],
            }],
        })
        assert [t.id for t in state.tasks] == [5]
        assert state.tasks[0].subtasks == [Subtask(id=7, title="Book")]

    def test_malformed_task_does_not_discard_others(self):
        state = AppState.from_snapshot({
            "tasks": [
                {"id": "abc", "title": "Bad id"},
                {"id": 2, "title": "Kept"},
                {"id": 3, "title": "Bad subtasks", "subtasks": 7},
            ],
            "lists": ["Work"],
            "activeList": "Work",
        })
        assert [t.id for t in state.tasks] == [2]
        assert state.lists == ["Work"]
        assert state.active_list == "Work"

    def test_null_active_list_is_global_view(self):
        state = AppState.from_snapshot({"tasks": [], "activeList": None, "filter": "active"})
        assert state.active_list is None
        assert state.is_global_view
        assert state.filter == FilterMode.ACTIVE

    def test_unknown_active_list_becomes_global_view(self):
        state = AppState.from_snapshot({"lists": ["Work"], "activeList": "Deleted"})
        assert state.active_list is None

    def test_missing_active_list_not_in_lists(self):
        state = AppState.from_snapshot({"lists": ["Work"]})
        assert state.active_list is None

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            AppState.from_snapshot(["not", "a", "dict"])


class TestMigrateTaskEntry:
    def test_title_wins_over_text(self):
        entry = migrate_task_entry({"id": 1, "title": "New", "text": "Old"})
        assert entry["title"] == "New"
        assert "text" not in entry

    def test_does_not_mutate_input(self):
        raw = {"id": 1, "text": "Old"}
        migrate_task_entry(raw)
        assert raw == {"id": 1, "text": "Old"}


class TestValidateState:
    def test_valid(self):
        state = AppState(tasks=[Task(id=1, title="A", list="Work", subtasks=[Subtask(id=2, title="b")])])
        assert validate_state(state) == []

    def test_duplicate_ids_across_levels(self):
        state = AppState(tasks=[Task(id=1, title="A", list="Work", subtasks=[Subtask(id=1, title="b")])])
        assert "duplicate id 1" in validate_state(state)

    def test_duplicate_lists(self):
        state = AppState(lists=["Work", "Work"])
        assert "duplicate list names" in validate_state(state)
