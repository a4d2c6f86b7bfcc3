"""Core task entity and its domain errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class TaskNotFoundError(LookupError):
    """Raised when a task does not exist."""

    def __init__(self, message: str = "task not found") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Task:
    """A unit of work tracked by the task API."""

    id: str
    title: str
    done: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation used on the wire."""
        return {"ID": self.id, "Title": self.title, "Done": self.done}