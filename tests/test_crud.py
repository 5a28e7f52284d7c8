"""
Store tests for the task service.

Exercises TaskStore directly (no HTTP layer) against SQLite in-memory.
"""

import uuid

import pytest

from task_service.crud import TaskStore, is_valid_task_id
from task_service.exceptions import DuplicateKeyError, TaskValidationError
from task_service.schemas import TaskCreate
from factories import make_task, make_update


class TestCreate:

    def test_create_task(self, store):
        task = store.create(make_task())

        assert is_valid_task_id(task.id)
        assert task.title == "Write report"
        assert task.description == "Quarterly numbers"
        assert task.done is False
        assert task.created_at is not None
        assert task.updated_at is not None

    def test_create_with_only_title_defaults_done_false(self, store):
        task = store.create(TaskCreate(title="Only title"))

        assert task.done is False
        assert task.description is None

    def test_create_trims_whitespace(self, store):
        task = store.create(make_task(title="  Padded  ", description="  text \n"))

        assert task.title == "Padded"
        assert task.description == "text"

    def test_duplicate_title_raises(self, store):
        store.create(make_task(title="Same"))

        with pytest.raises(DuplicateKeyError):
            store.create(make_task(title="Same"))

        assert len(store.list_all()) == 1

    def test_store_can_be_used_after_duplicate(self, store):
        store.create(make_task(title="Same"))
        with pytest.raises(DuplicateKeyError):
            store.create(make_task(title="Same"))

        other = store.create(make_task(title="Different"))
        assert other.id is not None

    def test_empty_title_rejected_by_store(self, store):
        # Bypass the request schema to reach the store's own check
        with pytest.raises(TaskValidationError):
            store.create(TaskCreate.model_construct(title="   ", description=None, done=False))

        assert store.list_all() == []


class TestRead:

    def test_list_empty(self, store):
        assert store.list_all() == []

    def test_list_in_insertion_order(self, store):
        for title in ["b", "c", "a"]:
            store.create(make_task(title=title))

        assert [t.title for t in store.list_all()] == ["b", "c", "a"]

    def test_get_by_id(self, store):
        created = store.create(make_task())

        task = store.get_by_id(created.id)
        assert task is not None
        assert task.id == created.id
        assert task.title == created.title

    def test_get_unknown_id(self, store):
        assert store.get_by_id(uuid.uuid4().hex) is None

    @pytest.mark.parametrize("task_id", ["", "1", "not-an-id", "ZZZ" * 11, uuid.uuid4().hex + "0"])
    def test_get_malformed_id(self, store, task_id):
        assert store.get_by_id(task_id) is None


class TestUpdate:

    def test_update_task(self, store):
        created = store.create(make_task(title="Original", description="Original Desc"))

        updated = store.update_by_id(created.id, make_update(title="Updated", done=True))

        assert updated.title == "Updated"
        assert updated.done is True
        assert updated.description == "Original Desc"

    def test_update_only_done(self, store):
        created = store.create(make_task(title="Original", description="Desc"))

        updated = store.update_by_id(created.id, make_update(done=True))

        assert updated.title == "Original"
        assert updated.description == "Desc"
        assert updated.done is True

    def test_update_refreshes_updated_at(self, store):
        created = store.create(make_task())
        created_at = created.created_at
        before = created.updated_at

        updated = store.update_by_id(created.id, make_update())

        assert updated.created_at == created_at
        assert updated.updated_at >= before

    def test_update_keeps_id(self, store):
        created = store.create(make_task())
        task_id = created.id

        updated = store.update_by_id(task_id, make_update(title="Renamed"))
        assert updated.id == task_id

    def test_update_not_found(self, store):
        assert store.update_by_id(uuid.uuid4().hex, make_update(title="x")) is None

    def test_update_to_taken_title(self, store):
        store.create(make_task(title="First"))
        second = store.create(make_task(title="Second"))

        with pytest.raises(DuplicateKeyError):
            store.update_by_id(second.id, make_update(title="First"))

        assert store.get_by_id(second.id).title == "Second"


class TestDelete:

    def test_delete_returns_previous_value(self, store):
        created = store.create(make_task(title="To Delete"))

        deleted = store.delete_by_id(created.id)

        assert deleted is not None
        assert deleted.id == created.id
        assert deleted.title == "To Delete"
        assert store.get_by_id(created.id) is None

    def test_delete_not_found(self, store):
        assert store.delete_by_id(uuid.uuid4().hex) is None

    def test_delete_twice(self, store):
        created = store.create(make_task())

        assert store.delete_by_id(created.id) is not None
        assert store.delete_by_id(created.id) is None


def test_stores_share_one_database(database):
    first = TaskStore(database.SessionLocal())
    second = TaskStore(database.SessionLocal())

    created = first.create(make_task())

    assert second.get_by_id(created.id).title == created.title
