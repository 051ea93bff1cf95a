# tests/test_task_store.py

from __future__ import annotations

import pytest
import pytest_asyncio

from tasklist.core.errors import OperationFailure, RecordNotFound, ValidationError
from tasklist.tasks.storage import StorageLifecycle, ensure_schema
from tasklist.tasks.task_store import TaskStore


@pytest_asyncio.fixture()
async def storage(settings, notifier):
    lifecycle = StorageLifecycle(settings, notifier)
    conn = await lifecycle.open()
    assert conn is not None
    assert await ensure_schema(conn, notifier)
    try:
        yield lifecycle
    finally:
        await lifecycle.close()


@pytest.fixture()
def store(storage) -> TaskStore:
    return TaskStore(storage.handle)


@pytest.mark.asyncio
async def test_insert_trims_and_lists_newest_first(store: TaskStore) -> None:
    ids = [await store.insert(t) for t in ("one", "  two  ", "three")]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3

    tasks = await store.list_tasks()
    assert [t.id for t in tasks] == list(reversed(ids))
    assert [t.text for t in tasks] == ["three", "two", "one"]
    assert all(t.completed is False for t in tasks)
    assert await store.count_tasks() == 3


@pytest.mark.asyncio
async def test_empty_table_lists_nothing(store: TaskStore) -> None:
    assert await store.list_tasks() == []
    assert await store.count_tasks() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
async def test_insert_rejects_blank_text(store: TaskStore, text: str) -> None:
    with pytest.raises(ValidationError):
        await store.insert(text)
    assert await store.list_tasks() == []


@pytest.mark.asyncio
async def test_completed_is_boolean_and_toggle_is_an_involution(store: TaskStore) -> None:
    task_id = await store.insert("water plants")

    await store.set_completed(task_id, True)
    (task,) = await store.list_tasks()
    assert task.completed is True

    await store.toggle_completed(task_id)
    await store.toggle_completed(task_id)
    (task,) = await store.list_tasks()
    assert task.completed is True

    await store.toggle_completed(task_id)
    (task,) = await store.list_tasks()
    assert task.completed is False


@pytest.mark.asyncio
async def test_update_text_keeps_completed(store: TaskStore) -> None:
    task_id = await store.insert("Buy milk")
    await store.set_completed(task_id, True)

    await store.update_text(task_id, "  Buy oat milk ")
    (task,) = await store.list_tasks()
    assert task.id == task_id
    assert task.text == "Buy oat milk"
    assert task.completed is True

    with pytest.raises(ValidationError):
        await store.update_text(task_id, "  ")
    (task,) = await store.list_tasks()
    assert task.text == "Buy oat milk"


@pytest.mark.asyncio
async def test_updates_on_missing_id_raise_record_not_found(store: TaskStore) -> None:
    with pytest.raises(RecordNotFound):
        await store.toggle_completed(42)
    with pytest.raises(RecordNotFound):
        await store.set_completed(42, True)
    with pytest.raises(RecordNotFound):
        await store.update_text(42, "nope")


@pytest.mark.asyncio
async def test_delete_absent_id_is_not_an_error(store: TaskStore) -> None:
    task_id = await store.insert("temp")
    assert await store.delete(task_id) is True
    assert await store.delete(task_id) is False
    assert await store.list_tasks() == []


@pytest.mark.asyncio
async def test_ids_are_not_reused_after_delete(store: TaskStore) -> None:
    first = await store.insert("a")
    second = await store.insert("b")
    await store.delete(second)

    third = await store.insert("c")
    assert third > second > first


@pytest.mark.asyncio
async def test_schema_setup_is_idempotent(storage, store: TaskStore, notifier) -> None:
    await store.insert("keep me")

    assert await ensure_schema(storage.handle, notifier)
    assert await ensure_schema(storage.handle, notifier)

    rows = await storage.handle.execute_fetchall(
        "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = 'todos'"
    )
    assert [tuple(r) for r in rows] == [(1,)]
    assert [t.text for t in await store.list_tasks()] == ["keep me"]
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_closed_handle_raises_operation_failure(storage, store: TaskStore) -> None:
    await storage.close()

    with pytest.raises(OperationFailure):
        await store.list_tasks()
    with pytest.raises(OperationFailure):
        await store.insert("late")


@pytest.mark.asyncio
@pytest.mark.parametrize("task_id", [2**63, -(2**63) - 1])
async def test_out_of_range_ids_behave_like_missing_rows(store: TaskStore, task_id: int) -> None:
    await store.insert("untouched")

    with pytest.raises(RecordNotFound):
        await store.set_completed(task_id, True)
    with pytest.raises(RecordNotFound):
        await store.toggle_completed(task_id)
    with pytest.raises(RecordNotFound):
        await store.update_text(task_id, "nope")
    assert await store.delete(task_id) is False

    (task,) = await store.list_tasks()
    assert task.text == "untouched"
    assert task.completed is False
