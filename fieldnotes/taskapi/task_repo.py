"""Thread-safe in-memory storage for tasks."""

from __future__ import annotations

import threading

from fieldnotes.taskapi.task_domain import Task, TaskNotFoundError


class InMemoryTaskRepo:
    """Stores tasks in a dictionary guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, Task] = {
            "1": Task(id="1", title="Buy groceries", done=False),
            "2": Task(id="2", title="Write Go notes", done=True),
        }

    def get_by_id(self, task_id: str) -> Task:
        """Return the task with this id or raise TaskNotFoundError."""
        with self._lock:
            try:
                return self._store[task_id]
            except KeyError:
                raise TaskNotFoundError() from None

    def list(self) -> list[Task]:
        """Return every stored task."""
        with self._lock:
            return list(self._store.values())

    def create(self, task: Task) -> None:
        """Store a task, replacing any task with the same id."""
        with self._lock:
            self._store[task.id] = task

    def delete(self, task_id: str) -> None:
        """Remove a task or raise TaskNotFoundError if it is absent."""
        with self._lock:
            if task_id not in self._store:
                raise TaskNotFoundError()
            del self._store[task_id]