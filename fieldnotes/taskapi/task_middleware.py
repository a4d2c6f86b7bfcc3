"""WSGI middleware for request ids and request logging."""

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable, Iterable
from typing import Any

REQUEST_ID_KEY = "fieldnotes.request_id"
REQUEST_ID_HEADER = "X-Request-ID"

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]


def generate_id() -> str:
    """Return a random 16-character hexadecimal request id."""
    return secrets.token_hex(8)


class RequestIDMiddleware:
    """Gives each request an id, exposed in the environ and a response header."""

    def __init__(self, app: WSGIApp) -> None:
        self.app = app

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        request_id = generate_id()
        scoped = dict(environ)
        scoped[REQUEST_ID_KEY] = request_id

        def start_with_id(status: str, headers: list, exc_info: Any = None):
            if not any(name.lower() == REQUEST_ID_HEADER.lower() for name, _ in headers):
                headers = [(REQUEST_ID_HEADER, request_id), *headers]
            return start_response(status, headers, exc_info)

        return self.app(scoped, start_with_id)


class RequestLoggerMiddleware:
    """Logs method, path, status and duration of every request."""

    def __init__(self, app: WSGIApp, logger: logging.Logger | None = None) -> None:
        self.app = app
        self.logger = logger or logging.getLogger(__name__)

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        started = time.monotonic()
        status = 200

        def recording(status_line: str, headers: list, exc_info: Any = None):
            nonlocal status
            status = int(status_line.split(None, 1)[0])
            return start_response(status_line, headers, exc_info)

        app_iter = self.app(environ, recording)
        try:
            body = list(app_iter)
        finally:
            close = getattr(app_iter, "close", None)
            if close is not None:
                close()

        fields = {
            "request_id": environ.get(REQUEST_ID_KEY, ""),
            "method": environ.get("REQUEST_METHOD", ""),
            "path": environ.get("PATH_INFO", ""),
            "status": status,
            "ms": int((time.monotonic() - started) * 1000),
        }
        self.logger.info(
            "request request_id=%s method=%s path=%s status=%d ms=%d",
            fields["request_id"],
            fields["method"],
            fields["path"],
            fields["status"],
            fields["ms"],
            extra=fields,
        )
        return body