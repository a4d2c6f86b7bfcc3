"""Composable WSGI middleware: request ids, request logging and bearer auth."""

from __future__ import annotations

import argparse
import logging
import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from werkzeug.serving import make_server
from werkzeug.wrappers import Response

from fieldnotes.taskapi.task_middleware import REQUEST_ID_KEY, RequestIDMiddleware

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]
Middleware = Callable[[WSGIApp], WSGIApp]

EXPECTED_AUTHORIZATION = "Bearer token"


def _plain_error(message: str, status: int) -> Response:
    return Response(
        message + "\n",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


def request_id(app: WSGIApp) -> WSGIApp:
    """Give each request a unique id in the environ and the X-Request-ID header."""
    return RequestIDMiddleware(app)


def logging_middleware(logger: logging.Logger) -> Middleware:
    """Return middleware logging method, path, status and duration of requests."""

    def wrap(app: WSGIApp) -> WSGIApp:
        def logged(environ: dict, start_response: Callable) -> Iterable[bytes]:
            started = time.monotonic()
            status = 200

            def recording(status_line: str, headers: list, exc_info: Any = None):
                nonlocal status
                status = int(status_line.split(None, 1)[0])
                return start_response(status_line, headers, exc_info)

            app_iter = app(environ, recording)
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
                "duration_ms": int((time.monotonic() - started) * 1000),
            }
            logger.info(
                "request request_id=%s method=%s path=%s status=%d duration_ms=%d",
                fields["request_id"],
                fields["method"],
                fields["path"],
                fields["status"],
                fields["duration_ms"],
                extra=fields,
            )
            return body

        return logged

    return wrap


def auth(app: WSGIApp) -> WSGIApp:
    """Reject requests whose Authorization header is not the expected bearer value."""

    def guarded(environ: dict, start_response: Callable) -> Iterable[bytes]:
        if environ.get("HTTP_AUTHORIZATION", "") != EXPECTED_AUTHORIZATION:
            return _plain_error("unauthorized", 401)(environ, start_response)
        return app(environ, start_response)

    return guarded


def chain(app: WSGIApp, *middlewares: Middleware) -> WSGIApp:
    """Wrap app so that the first middleware listed runs outermost."""
    for middleware in reversed(middlewares):
        app = middleware(app)
    return app


def hello(environ: dict, start_response: Callable) -> Iterable[bytes]:
    """Greet the caller with the request id."""
    body = "hello, request_id=" + environ.get(REQUEST_ID_KEY, "")
    response = Response(body, status=200, content_type="text/plain")
    return response(environ, start_response)


def build_app(logger: logging.Logger) -> WSGIApp:
    """Serve /hello behind request-id, logging and auth middleware."""
    protected = chain(hello, request_id, logging_middleware(logger), auth)

    def app(environ: dict, start_response: Callable) -> Iterable[bytes]:
        if environ.get("PATH_INFO") == "/hello":
            return protected(environ, start_response)
        return _plain_error("404 page not found", 404)(environ, start_response)

    return app


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the demo application until interrupted."""
    parser = argparse.ArgumentParser(prog="middleware-chain")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    logger = logging.getLogger("fieldnotes.web.middleware_chain")

    try:
        server = make_server("0.0.0.0", args.port, build_app(logger), threaded=True)
    except OSError as err:
        logger.error("server error err=%s", err)
        return 1

    logger.info("listening addr=:%d", args.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0