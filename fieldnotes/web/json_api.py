"""Small JSON endpoints, a cancellable slow endpoint and a gracefully stopping server."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import threading
import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from werkzeug.serving import make_server
from werkzeug.wrappers import Request, Response

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]

GREETING = "Hello, Go API!"
CANCEL_KEY = "fieldnotes.cancel"
SHUTDOWN_TIMEOUT = 5.0
_JSON_WHITESPACE = " \t\r\n"


def _encode(value: Any) -> str:
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    for raw, escaped in (("<", "\\u003c"), (">", "\\u003e"), ("&", "\\u0026")):
        text = text.replace(raw, escaped)
    return text + "\n"


def _json(status: int, value: Any) -> Response:
    return Response(_encode(value), status=status, content_type="application/json")


def _plain_error(message: str, status: int) -> Response:
    return Response(
        message + "\n",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _decode_name(body: bytes) -> str:
    """Read the name field of a JSON object; other fields are ignored."""
    text = body.decode("utf-8", errors="replace").lstrip(_JSON_WHITESPACE)
    value, _ = json.JSONDecoder(parse_constant=_reject_constant).raw_decode(text)
    if value is None:
        return ""
    if not isinstance(value, dict):
        raise ValueError("expected a JSON object")
    name = ""
    for key, item in value.items():
        if key.lower() != "name" or item is None:
            continue
        if not isinstance(item, str):
            raise ValueError("name must be a string")
        name = item
    return name


def hello(environ: dict, start_response: Callable) -> Iterable[bytes]:
    """Answer with a JSON greeting."""
    return _json(200, {"text": GREETING})(environ, start_response)


def create_user(environ: dict, start_response: Callable) -> Iterable[bytes]:
    """Accept POST {"name": ...} and echo the name back with 201."""
    request = Request(environ)
    if request.method != "POST":
        response = _plain_error("method not allowed", 405)
    else:
        try:
            name = _decode_name(request.get_data())
        except ValueError:
            name = ""
        if not name.strip():
            response = _plain_error("invalid request", 400)
        else:
            response = _json(201, {"name": name})
    return response(environ, start_response)


def make_slow_handler(delay: float = 2.0) -> WSGIApp:
    """Return a handler answering "ok" after delay, or 408 if cancelled first.

    A threading.Event under CANCEL_KEY in the environ cancels the request.
    """

    def slow(environ: dict, start_response: Callable) -> Iterable[bytes]:
        cancel = environ.get(CANCEL_KEY)
        if cancel is None:
            time.sleep(delay)
        elif cancel.wait(delay):
            return _plain_error("request canceled", 408)(environ, start_response)
        response = Response(b"ok", status=200, content_type="text/plain; charset=utf-8")
        return response(environ, start_response)

    return slow


def build_app(delay: float = 2.0) -> WSGIApp:
    """Route /hello, /users and /slow."""
    routes: dict[str, WSGIApp] = {
        "/hello": hello,
        "/users": create_user,
        "/slow": make_slow_handler(delay),
    }

    def app(environ: dict, start_response: Callable) -> Iterable[bytes]:
        handler = routes.get(environ.get("PATH_INFO", ""))
        if handler is None:
            return _plain_error("404 page not found", 404)(environ, start_response)
        return handler(environ, start_response)

    return app


def main(argv: Sequence[str] | None = None) -> int:
    """Serve until SIGINT or SIGTERM, then drain and stop."""
    parser = argparse.ArgumentParser(prog="json-api")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--delay", type=float, default=2.0)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    logger = logging.getLogger("fieldnotes.web.json_api")

    try:
        server = make_server("0.0.0.0", args.port, build_app(args.delay), threaded=True)
    except OSError as err:
        logger.error("listen: %s", err)
        return 1

    stop = threading.Event()
    handled = (signal.SIGINT, signal.SIGTERM)
    previous = {sig: signal.signal(sig, lambda *_: stop.set()) for sig in handled}

    worker = threading.Thread(target=server.serve_forever, daemon=True)
    worker.start()
    logger.info("server listening on :%d", args.port)

    try:
        while not stop.wait(0.5):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    logger.info("shutting down")
    server.shutdown()
    worker.join(SHUTDOWN_TIMEOUT)
    if worker.is_alive():
        logger.info("shutdown error: timed out")
    server.server_close()
    return 0