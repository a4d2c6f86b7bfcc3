import logging

import pytest
from werkzeug.test import Client

from fieldnotes.web.middleware_chain import (
    auth,
    build_app,
    chain,
    hello,
    logging_middleware,
    request_id,
)


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    logger = logging.getLogger("tests.middleware_chain")
    logger.setLevel(logging.INFO)
    handler = _ListHandler()
    logger.addHandler(handler)
    yield logger, handler.records
    logger.removeHandler(handler)


def test_unauthorized_without_header(captured):
    logger, _ = captured
    resp = Client(build_app(logger)).get("/hello")
    assert resp.status_code == 401
    assert resp.data == b"unauthorized\n"


def test_authorized_hello_echoes_request_id(captured):
    logger, _ = captured
    resp = Client(build_app(logger)).get(
        "/hello", headers={"Authorization": "Bearer token"}
    )
    assert resp.status_code == 200
    rid = resp.headers["X-Request-ID"]
    assert len(rid) == 16
    assert resp.data.decode() == "hello, request_id=" + rid


def test_request_ids_differ(captured):
    logger, _ = captured
    client = Client(build_app(logger))
    first = client.get("/hello").headers["X-Request-ID"]
    second = client.get("/hello").headers["X-Request-ID"]
    assert first != second
    int(first, 16)


def test_logged_record_has_fields(captured):
    logger, records = captured
    resp = Client(build_app(logger)).get("/hello")
    assert len(records) == 1
    record = records[0]
    assert record.status == resp.status_code
    assert record.request_id == resp.headers["X-Request-ID"]
    assert (record.method, record.path) == ("GET", "/hello")
    assert record.duration_ms >= 0


def test_unknown_path_is_404(captured):
    logger, records = captured
    resp = Client(build_app(logger)).get("/other")
    assert resp.status_code == 404
    assert records == []


def test_chain_runs_first_middleware_outermost():
    calls = []

    def tag(name):
        def middleware(app):
            def wrapped(environ, start_response):
                calls.append(name)
                return app(environ, start_response)

            return wrapped

        return middleware

    app = chain(hello, tag("outer"), tag("middle"), tag("inner"))
    resp = Client(app).get("/")
    assert calls == ["outer", "middle", "inner"]
    assert resp.data == b"hello, request_id="


def test_auth_wrong_token_rejected():
    resp = Client(auth(hello)).get("/", headers={"Authorization": "Bearer other"})
    assert resp.status_code == 401


def test_request_id_sets_header():
    resp = Client(request_id(hello)).get("/")
    assert resp.data.decode().endswith(resp.headers["X-Request-ID"])


def test_logging_middleware_defaults_to_ok(captured):
    logger, records = captured
    resp = Client(logging_middleware(logger)(hello)).get("/x")
    assert resp.status_code == records[0].status
    assert records[0].request_id == ""