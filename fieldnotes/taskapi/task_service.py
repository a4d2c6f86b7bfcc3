"""Business logic for tasks, independent of transport."""

from __future__ import annotations

import itertools

from fieldnotes.taskapi.task_domain import Task
from fieldnotes.taskapi.task_repo import InMemoryTaskRepo

_ids = itertools.count(1)


class TaskService:
    """Validates requests and delegates storage to a repository."""

    def __init__(self, repo: InMemoryTaskRepo) -> None:
        self.repo = repo

    def get_task(self, task_id: str) -> Task:
        """Return one task; raises TaskNotFoundError if absent."""
        return self.repo.get_by_id(task_id)

    def list_tasks(self) -> list[Task]:
        """Return all tasks."""
        return self.repo.list()

    def create_task(self, title: str) -> Task:
        """Create and store a new task with a generated id."""
        if title == "":
            raise ValueError("title is required")
        task = Task(id=f"task-{next(_ids)}", title=title, done=False)
        self.repo.create(task)
        return task

    def delete_task(self, task_id: str) -> None:
        """Delete a task; raises TaskNotFoundError if absent."""
        self.repo.delete(task_id)