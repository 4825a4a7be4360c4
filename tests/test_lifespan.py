"""Startup wiring: logging configured from env, request ids in log lines."""

import io
import logging

import pytest
from fastapi.testclient import TestClient

from videogen.helper import current_request_id, JSONFormatter, RequestIdFilter
from videogen.main import app


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for h in list(root.handlers):
        if getattr(h, "_videogen", False):
            root.removeHandler(h)
    root.setLevel(level)


def _our_handler():
    handlers = [h for h in logging.getLogger().handlers if getattr(h, "_videogen", False)]
    assert len(handlers) == 1
    return handlers[0]


def test_lifespan_configures_logging_from_env(client, monkeypatch, restore_logging):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FORMAT", "json")

    with TestClient(app) as c:
        handler = _our_handler()
        assert isinstance(handler.formatter, JSONFormatter)
        assert logging.getLogger().level == logging.DEBUG
        assert c.get("/health").status_code == 200


def test_pipeline_logs_carry_request_id(client, monkeypatch, restore_logging):
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("LOG_FORMAT", "text")

    with TestClient(app) as c:
        buf = io.StringIO()
        _our_handler().setStream(buf)

        res = c.post("/api/generate", json={"prompt": "a lighthouse"})

    assert res.status_code == 200
    request_id = res.headers["X-Request-ID"]
    lines = [line for line in buf.getvalue().splitlines() if f"[{request_id}]" in line]
    assert any("videogen.pipeline" in line and "a lighthouse" in line for line in lines)
    assert any("videogen.models.runway" in line and "img-task-1" in line for line in lines)


def test_request_id_filter_prefers_explicit_extra():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)
    token = current_request_id.set("from-context")
    try:
        RequestIdFilter().filter(record)
        assert record.request_id == "from-context"

        record.request_id = "explicit"
        RequestIdFilter().filter(record)
        assert record.request_id == "explicit"
    finally:
        current_request_id.reset(token)


def test_request_id_filter_outside_request():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)
    RequestIdFilter().filter(record)
    assert record.request_id is None
