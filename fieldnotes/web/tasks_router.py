"""RESTful task routes with request ids, real-ip, logging and panic recovery."""

from __future__ import annotations

import argparse
import json
import logging
import re
import time
from collections.abc import Callable, Iterable, MutableMapping, Sequence
from typing import Any

from werkzeug.serving import make_server
from werkzeug.wrappers import Request, Response

from fieldnotes.taskapi.task_middleware import REQUEST_ID_KEY, generate_id
from fieldnotes.web.di_example import Task

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]

_LOGGER = logging.getLogger(__name__)

_ITEM = re.compile(r"/tasks/([^/]+)/?")
_COLLECTION = ("/tasks", "/tasks/")
_JSON_WHITESPACE = " \t\r\n"
_STATIC_NEW_ID = "3"


def _seed() -> dict[str, Task]:
    return {
        "1": Task(id="1", title="Buy groceries"),
        "2": Task(id="2", title="Write Go notes"),
    }


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


def _json(status: int, value: Any) -> Response:
    return Response(_encode(value), status=status, content_type="application/json")


def _error(status: int, message: str) -> Response:
    return _json(status, {"error": message})


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _decode_title(body: bytes) -> str:
    """Read a {"title": ...} object, refusing unknown fields."""
    text = body.decode("utf-8", errors="replace").lstrip(_JSON_WHITESPACE)
    value, _ = json.JSONDecoder(parse_constant=_reject_constant).raw_decode(text)
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


class _Router:
    """Dispatches /tasks and /tasks/{id} against a shared task mapping."""

    def __init__(self, tasks: MutableMapping[str, Task]) -> None:
        self.tasks = tasks

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        return self._dispatch(Request(environ))(environ, start_response)

    def _dispatch(self, request: Request) -> Response:
        path = request.path
        if path in _COLLECTION:
            if request.method == "GET":
                return self._list()
            if request.method == "POST":
                return self._create(request)
            return Response(status=405)
        match = _ITEM.fullmatch(path)
        if match is not None:
            task_id = match.group(1)
            if request.method == "GET":
                return self._get(task_id)
            if request.method == "DELETE":
                return self._delete(task_id)
            return Response(status=405)
        return Response(
            "404 page not found\n", status=404, content_type="text/plain; charset=utf-8"
        )

    def _list(self) -> Response:
        return _json(200, [task.to_dict() for task in self.tasks.values()])

    def _get(self, task_id: str) -> Response:
        task = self.tasks.get(task_id)
        if task is None:
            return _error(404, "task not found")
        return _json(200, task.to_dict())

    def _create(self, request: Request) -> Response:
        try:
            title = _decode_title(request.get_data())
        except ValueError:
            title = ""
        if title == "":
            return _error(400, "title is required")
        task = Task(id=_STATIC_NEW_ID, title=title)
        self.tasks[task.id] = task
        return _json(201, task.to_dict())

    def _delete(self, task_id: str) -> Response:
        if task_id not in self.tasks:
            return _error(404, "task not found")
        del self.tasks[task_id]
        return Response(status=204)


def _request_id(app: WSGIApp) -> WSGIApp:
    def wrapped(environ: dict, start_response: Callable) -> Iterable[bytes]:
        scoped = dict(environ)
        scoped[REQUEST_ID_KEY] = environ.get("HTTP_X_REQUEST_ID") or generate_id()
        return app(scoped, start_response)

    return wrapped


def _real_ip(app: WSGIApp) -> WSGIApp:
    def wrapped(environ: dict, start_response: Callable) -> Iterable[bytes]:
        address = environ.get("HTTP_TRUE_CLIENT_IP") or environ.get("HTTP_X_REAL_IP")
        if not address and environ.get("HTTP_X_FORWARDED_FOR"):
            address = environ["HTTP_X_FORWARDED_FOR"].split(",")[0].strip()
        if address:
            environ = {**environ, "REMOTE_ADDR": address}
        return app(environ, start_response)

    return wrapped


def _logger(app: WSGIApp, logger: logging.Logger) -> WSGIApp:
    def wrapped(environ: dict, start_response: Callable) -> Iterable[bytes]:
        started = time.monotonic()
        status = 200

        def recording(status_line: str, headers: list, exc_info: Any = None):
            nonlocal status
            status = int(status_line.split(None, 1)[0])
            return start_response(status_line, headers, exc_info)

        body = list(app(environ, recording))
        logger.info(
            '[%s] "%s %s" from %s - %d %dB in %.3fms',
            environ.get(REQUEST_ID_KEY, ""),
            environ.get("REQUEST_METHOD", ""),
            environ.get("PATH_INFO", ""),
            environ.get("REMOTE_ADDR", ""),
            status,
            sum(len(chunk) for chunk in body),
            (time.monotonic() - started) * 1000,
        )
        return body

    return wrapped


def _recoverer(app: WSGIApp, logger: logging.Logger) -> WSGIApp:
    def wrapped(environ: dict, start_response: Callable) -> Iterable[bytes]:
        try:
            return list(app(environ, start_response))
        except Exception:
            logger.exception("panic while serving request")
            return Response(status=500)(environ, start_response)

    return wrapped


def create_app(tasks: MutableMapping[str, Task] | None = None) -> WSGIApp:
    """Return the task router; tasks is the shared store, seeded when omitted."""
    store = _seed() if tasks is None else tasks
    app: WSGIApp = _Router(store)
    app = _recoverer(app, _LOGGER)
    app = _logger(app, _LOGGER)
    app = _real_ip(app)
    return _request_id(app)


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the task router until interrupted."""
    parser = argparse.ArgumentParser(prog="tasks-router")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    try:
        server = make_server("0.0.0.0", args.port, create_app(), threaded=True)
    except OSError as err:
        _LOGGER.error("server error err=%s", err)
        return 1

    _LOGGER.info("router listening addr=:%d", args.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0