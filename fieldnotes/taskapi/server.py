"""Entry point wiring config, storage, service and HTTP server together."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from collections.abc import Sequence

from werkzeug.serving import make_server

from fieldnotes.taskapi.task_config import ConfigError, load
from fieldnotes.taskapi.task_handler import TaskHandler
from fieldnotes.taskapi.task_middleware import RequestIDMiddleware, RequestLoggerMiddleware
from fieldnotes.taskapi.task_repo import InMemoryTaskRepo
from fieldnotes.taskapi.task_service import TaskService

SHUTDOWN_TIMEOUT = 5.0


def build_app(service: TaskService, logger: logging.Logger):
    """Return the task handler wrapped in request-id and logging middleware."""
    app = TaskHandler(service)
    app = RequestIDMiddleware(app)
    return RequestLoggerMiddleware(app, logger)


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the task API until SIGINT or SIGTERM, then shut down cleanly."""
    parser = argparse.ArgumentParser(
        prog="taskapi", description="Serve the task API configured from the environment."
    )
    parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    logger = logging.getLogger("fieldnotes.taskapi")

    try:
        cfg = load()
    except ConfigError as err:
        logger.error("config load failed err=%s", err)
        return 1

    app = build_app(TaskService(InMemoryTaskRepo()), logger)
    try:
        server = make_server("0.0.0.0", cfg.port, app, threaded=True)
    except OSError as err:
        logger.error("server error err=%s", err)
        return 1

    stop = threading.Event()
    handled = (signal.SIGINT, signal.SIGTERM)
    previous = {sig: signal.signal(sig, lambda *_: stop.set()) for sig in handled}

    worker = threading.Thread(target=server.serve_forever, daemon=True)
    worker.start()
    logger.info("server started addr=:%d", cfg.port)

    try:
        while not stop.wait(0.5):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    logger.info("shutdown signal received, draining connections...")
    server.shutdown()
    worker.join(SHUTDOWN_TIMEOUT)
    server.server_close()
    logger.info("server stopped cleanly")
    return 0