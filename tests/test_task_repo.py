import threading

import pytest

from fieldnotes.taskapi.task_domain import Task, TaskNotFoundError
from fieldnotes.taskapi.task_repo import InMemoryTaskRepo


def test_repo_is_seeded():
    repo = InMemoryTaskRepo()
    assert repo.get_by_id("1") == Task("1", "Buy groceries", False)
    assert repo.get_by_id("2") == Task("2", "Write Go notes", True)
    assert {task.id for task in repo.list()} == {"1", "2"}


def test_get_missing_raises():
    repo = InMemoryTaskRepo()
    with pytest.raises(TaskNotFoundError):
        repo.get_by_id("nope")


def test_create_then_get_round_trip():
    repo = InMemoryTaskRepo()
    task = Task("x", "Something")
    repo.create(task)
    assert repo.get_by_id("x") == task
    assert task in repo.list()


def test_create_replaces_existing_id():
    repo = InMemoryTaskRepo()
    repo.create(Task("1", "Replaced", True))
    assert repo.get_by_id("1").title == "Replaced"
    assert len(repo.list()) == 2


def test_delete_removes_task():
    repo = InMemoryTaskRepo()
    repo.delete("1")
    with pytest.raises(TaskNotFoundError):
        repo.get_by_id("1")
    assert [task.id for task in repo.list()] == ["2"]


def test_delete_missing_raises():
    repo = InMemoryTaskRepo()
    with pytest.raises(TaskNotFoundError):
        repo.delete("missing")


def test_list_returns_independent_copy():
    repo = InMemoryTaskRepo()
    listed = repo.list()
    listed.clear()
    assert len(repo.list()) == 2


def test_concurrent_creates_are_all_stored():
    repo = InMemoryTaskRepo()
    threads_count, per_thread = 4, 50

    def worker(prefix):
        for n in range(per_thread):
            repo.create(Task(f"{prefix}-{n}", "t"))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(repo.list()) == 2 + threads_count * per_thread