"""HTTP transport for the task service."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import Any

from werkzeug.wrappers import Request, Response

from fieldnotes.taskapi.task_domain import TaskNotFoundError
from fieldnotes.taskapi.task_service import TaskService

_JSON = "application/json"
_PREFIX = "/tasks/"
_JSON_WHITESPACE = " \t\r\n"


def _encode(value: Any) -> str:
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    for raw, escaped in (
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(raw, escaped)
    return text + "\n"


def _json_response(status: int, value: Any) -> Response:
    return Response(_encode(value), status=status, content_type=_JSON)


def _error(status: int, message: str) -> Response:
    return _json_response(status, {"error": message})


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _decode_title(body: bytes) -> str:
    """Read a {"title": ...} object, refusing unknown fields."""
    text = body.decode("utf-8", errors="replace").lstrip(_JSON_WHITESPACE)
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    value, _ = decoder.raw_decode(text)
    if value is None:
        return ""
    if not isinstance(value, dict):
        raise ValueError("expected a JSON object")
    title = ""
    for key, item in value.items():
        if key.lower() != "title":
            raise ValueError(f"unknown field {key!r}")
        if item is None:
            continue
        if not isinstance(item, str):
            raise ValueError("title must be a string")
        title = item
    return title


class TaskHandler:
    """WSGI application serving /tasks and /tasks/<id>."""

    def __init__(self, service: TaskService) -> None:
        self.service = service

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        response = self._dispatch(Request(environ))
        return response(environ, start_response)

    def _dispatch(self, request: Request) -> Response:
        path = request.path
        if path == "/tasks":
            return self._handle_tasks(request)
        if path.startswith(_PREFIX):
            return self._handle_task_by_id(request, path[len(_PREFIX):])
        return Response(
            "404 page not found\n", status=404, content_type="text/plain; charset=utf-8"
        )

    def _handle_tasks(self, request: Request) -> Response:
        if request.method == "GET":
            return self._list_tasks()
        if request.method == "POST":
            return self._create_task(request)
        return _error(405, "method not allowed")

    def _handle_task_by_id(self, request: Request, task_id: str) -> Response:
        if task_id == "":
            return _error(400, "missing task id")
        if request.method == "GET":
            return self._get_task(task_id)
        if request.method == "DELETE":
            return self._delete_task(task_id)
        return _error(405, "method not allowed")

    def _list_tasks(self) -> Response:
        try:
            tasks = self.service.list_tasks()
        except Exception:
            return _error(500, "could not list tasks")
        return _json_response(200, [task.to_dict() for task in tasks])

    def _get_task(self, task_id: str) -> Response:
        try:
            task = self.service.get_task(task_id)
        except TaskNotFoundError:
            return _error(404, "task not found")
        except Exception:
            return _error(500, "internal error")
        return _json_response(200, task.to_dict())

    def _create_task(self, request: Request) -> Response:
        try:
            title = _decode_title(request.get_data())
        except ValueError:
            return _error(400, "invalid JSON")
        try:
            task = self.service.create_task(title)
        except Exception as err:
            return _error(400, str(err))
        return _json_response(201, task.to_dict())

    def _delete_task(self, task_id: str) -> Response:
        try:
            self.service.delete_task(task_id)
        except TaskNotFoundError:
            return _error(404, "task not found")
        except Exception:
            return _error(500, "internal error")
        return Response(status=204)