import dataclasses

import pytest

from fieldnotes.taskapi.task_domain import Task, TaskNotFoundError


def test_task_defaults_to_not_done():
    task = Task(id="1", title="Buy groceries")
    assert task.done is False


def test_to_dict_uses_wire_field_names():
    task = Task(id="2", title="Write Go notes", done=True)
    assert task.to_dict() == {"ID": "2", "Title": "Write Go notes", "Done": True}


def test_task_is_immutable():
    task = Task(id="1", title="Buy groceries")
    with pytest.raises(dataclasses.FrozenInstanceError):
        task.title = "changed"  # type: ignore[misc]
    assert task.title == "Buy groceries"
    assert task.to_dict()["Title"] == "Buy groceries"


def test_not_found_error_message_and_type():
    err = TaskNotFoundError()
    assert str(err) == "task not found"
    assert isinstance(err, LookupError)


def test_tasks_with_same_fields_are_equal():
    assert Task("a", "x", True) == Task("a", "x", True)
    assert Task("a", "x", True) != Task("a", "x", False)