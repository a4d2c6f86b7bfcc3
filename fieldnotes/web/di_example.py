"""Constructor-injected repository, service and HTTP server for employee tasks."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from werkzeug.serving import make_server
from werkzeug.wrappers import Request, Response


@dataclass(frozen=True)
class Task:
    """A task assigned to an employee."""

    id: str
    title: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON representation."""
        return {"id": self.id, "title": self.title}


class InMemoryTaskRepository:
    """Tasks grouped by employee id, held in memory."""

    def __init__(self, data: Mapping[str, Sequence[Task]] | None = None) -> None:
        self._data = {key: list(tasks) for key, tasks in (data or {}).items()}

    def list_by_employee_id(self, employee_id: str) -> list[Task]:
        """Return the employee's tasks, or an empty list."""
        return list(self._data.get(employee_id, []))


class TaskService:
    """Application logic depending only on an injected repository."""

    def __init__(self, repo: InMemoryTaskRepository) -> None:
        self.repo = repo

    def list_my_tasks(self, employee_id: str) -> list[Task]:
        """Return the tasks of one employee."""
        return self.repo.list_by_employee_id(employee_id)


def _plain_error(message: str, status: int) -> Response:
    return Response(
        message + "\n",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


class Server:
    """WSGI application serving /me/tasks for the employee in X-Employee-ID."""

    def __init__(self, task_service: TaskService) -> None:
        self.task_service = task_service

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        request = Request(environ)
        if request.path == "/me/tasks":
            response = self._my_tasks(request)
        else:
            response = _plain_error("404 page not found", 404)
        return response(environ, start_response)

    def _my_tasks(self, request: Request) -> Response:
        employee_id = request.headers.get("X-Employee-ID", "")
        if employee_id == "":
            return _plain_error("missing employee id", 401)
        try:
            tasks = self.task_service.list_my_tasks(employee_id)
        except Exception:
            return _plain_error("internal server error", 500)
        body = json.dumps([task.to_dict() for task in tasks], separators=(",", ":"))
        return Response(body + "\n", status=200, content_type="application/json")


def main(argv: Sequence[str] | None = None) -> int:
    """Serve sample employee tasks until interrupted."""
    parser = argparse.ArgumentParser(prog="di-example")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    logger = logging.getLogger("fieldnotes.web.di_example")

    repo = InMemoryTaskRepository(
        {
            "emp-1": [
                Task(id="t1", title="Prepare report"),
                Task(id="t2", title="Review PR"),
            ]
        }
    )
    app = Server(TaskService(repo))

    try:
        server = make_server("0.0.0.0", args.port, app, threaded=True)
    except OSError as err:
        logger.error("%s", err)
        return 1

    logger.info("listening on :%d", args.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0