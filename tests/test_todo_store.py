"""Tests for the in-memory TodoStore."""
from __future__ import annotations

import threading

import pytest

from todo_core.todos.store import (
    Todo,
    TodoNotFoundError,
    TodoStore,
    TodoValidationError,
)


class TestCreate:

    def test_new_todo_is_not_completed(self, store):
        todo = store.create("Task 1")
        assert isinstance(todo, Todo)
        assert todo.id
        assert todo.title == "Task 1"
        assert todo.completed is False

    def test_title_is_trimmed(self, store):
        todo = store.create("  Buy milk  ")
        assert todo.title == "Buy milk"

    @pytest.mark.parametrize("title", ["", "   ", "\t\n", None, 42])
    def test_invalid_title_rejected_without_mutation(self, store, title):
        with pytest.raises(TodoValidationError):
            store.create(title)
        assert len(store) == 0

    def test_ids_are_unique(self, store):
        ids = {store.create(f"Task {i}").id for i in range(50)}
        assert len(ids) == 50

    def test_to_dict_shape(self, store):
        todo = store.create("Task")
        assert todo.to_dict() == {"id": todo.id, "title": "Task", "completed": False}


class TestList:

    def test_empty(self, store):
        assert store.list() == []

    def test_insertion_order(self, store):
        created = [store.create(f"Task {i}") for i in range(5)]
        assert [t.id for t in store.list()] == [t.id for t in created]

    def test_list_returns_a_copy(self, store):
        store.create("Task")
        listing = store.list()
        listing.clear()
        assert len(store.list()) == 1


class TestUpdate:

    def test_partial_update_completed(self, store):
        todo = store.create("Task")
        updated = store.update(todo.id, completed=True)
        assert updated.completed is True
        assert updated.title == "Task"

    def test_partial_update_title(self, store):
        todo = store.create("Original")
        updated = store.update(todo.id, title=" Updated ")
        assert updated.title == "Updated"
        assert updated.completed is False

    def test_update_is_visible_in_list(self, store):
        todo = store.create("Task")
        store.update(todo.id, completed=True)
        assert store.list()[0].completed is True

    def test_missing_id_raises_not_found(self, store):
        store.create("Task")
        with pytest.raises(TodoNotFoundError) as excinfo:
            store.update("non-existent", title="Test")
        assert excinfo.value.todo_id == "non-existent"
        assert str(excinfo.value) == "Todo not found"
        assert [t.title for t in store.list()] == ["Task"]

    def test_blank_title_leaves_record_unchanged(self, store):
        todo = store.create("Task")
        with pytest.raises(TodoValidationError):
            store.update(todo.id, title="   ", completed=True)
        assert todo.title == "Task"
        assert todo.completed is False

    @pytest.mark.parametrize("completed", ["false", "true", 0, 1, "", [], {}])
    def test_non_bool_completed_rejected_without_mutation(self, store, completed):
        todo = store.create("Task")
        with pytest.raises(TodoValidationError):
            store.update(todo.id, title="Renamed", completed=completed)
        assert todo.completed is False
        assert todo.title == "Task"

    def test_completed_can_be_reset_to_false(self, store):
        todo = store.create("Task")
        store.update(todo.id, completed=True)
        assert store.update(todo.id, completed=False).completed is False


class TestDelete:

    def test_delete_twice(self, store):
        todo = store.create("Delete once")
        assert store.delete(todo.id) is True
        assert store.delete(todo.id) is False
        assert store.get(todo.id) is None

    def test_delete_one_of_many(self, store):
        todos = [store.create(f"Task {i}") for i in range(4)]
        assert store.delete(todos[2].id) is True
        remaining = store.list()
        assert [t.id for t in remaining] == [todos[0].id, todos[1].id, todos[3].id]
        for t in remaining:
            assert store.get(t.id) is t

    def test_deleted_id_is_not_reissued(self, store):
        first = store.create("Task")
        store.delete(first.id)
        assert first.id not in {store.create("Again").id for _ in range(20)}


class TestClear:

    def test_clear_empties_store(self, store):
        store.create("Task 1")
        store.create("Task 2")
        store.clear()
        assert len(store) == 0
        assert store.list() == []

    def test_ids_stay_retired_after_clear(self, store):
        before = {store.create(f"Task {i}").id for i in range(5)}
        store.clear()
        after = {store.create(f"Task {i}").id for i in range(5)}
        assert before.isdisjoint(after)


def test_concurrent_creates():
    store = TodoStore()

    def worker():
        for i in range(100):
            store.create(f"Task {i}")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 800
    assert len({t.id for t in store.list()}) == 800
