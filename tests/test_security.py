"""Tests for call tracing and the relay log filter."""

import logging

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.security import RelayTraceMiddleware, completion_level
from extension_relay.core.logging import (
    REDACTED,
    RelayLogFilter,
    redact,
    request_id_var,
    resolve_request_id,
)

EXTENSION_ORIGIN = "chrome-extension://abcdefghijklmnop"


def _make_traced_app() -> FastAPI:
    """Create a minimal app with RelayTraceMiddleware configured."""
    test_app = FastAPI()
    test_app.add_middleware(RelayTraceMiddleware)

    @test_app.get("/health")
    async def health():
        return {"status": "ok", "seen": request_id_var.get()}

    @test_app.get("/loading")
    async def loading():
        return JSONResponse(status_code=503, content={"error": "Model is currently loading"})

    return test_app


def _record(msg, args=None) -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


class TestRelayTraceMiddleware:
    """Tests for per-call ids and summary logging."""

    def test_response_has_request_id_header(self):
        """Every response should include an X-Request-ID header."""
        client = TestClient(_make_traced_app())

        resp = client.get("/health")
        assert resp.status_code == 200
        rid = resp.headers["x-request-id"]
        assert len(rid) == 12
        assert resp.json()["seen"] == rid

    def test_request_ids_are_unique(self):
        client = TestClient(_make_traced_app())

        ids = {client.get("/health").headers["x-request-id"] for _ in range(10)}
        assert len(ids) == 10

    def test_incoming_request_id_is_reused(self):
        client = TestClient(_make_traced_app())

        resp = client.get("/health", headers={"X-Request-ID": "ext-req-42"})
        assert resp.headers["x-request-id"] == "ext-req-42"

    def test_malformed_incoming_request_id_is_replaced(self):
        client = TestClient(_make_traced_app())

        resp = client.get("/health", headers={"X-Request-ID": "bad id; drop table"})
        assert resp.headers["x-request-id"] != "bad id; drop table"
        assert len(resp.headers["x-request-id"]) == 12

    def test_summary_line_names_origin_and_status(self, caplog):
        caplog.set_level(logging.INFO, logger="app.security")
        client = TestClient(_make_traced_app())

        client.get("/health", headers={"Origin": EXTENSION_ORIGIN})

        [record] = [r for r in caplog.records if r.name == "app.security"]
        assert record.levelno == logging.INFO
        assert EXTENSION_ORIGIN in record.getMessage()
        assert "GET /health" in record.getMessage()
        assert "-> 200" in record.getMessage()

    def test_summary_line_without_origin(self, caplog):
        caplog.set_level(logging.INFO, logger="app.security")
        client = TestClient(_make_traced_app())

        client.get("/health")

        [record] = [r for r in caplog.records if r.name == "app.security"]
        assert "from - ->" in record.getMessage()

    def test_failed_relay_logged_at_warning(self, caplog):
        caplog.set_level(logging.INFO, logger="app.security")
        client = TestClient(_make_traced_app())

        resp = client.get("/loading", headers={"Origin": EXTENSION_ORIGIN})

        assert resp.status_code == 503
        assert "x-request-id" in resp.headers
        [record] = [r for r in caplog.records if r.name == "app.security"]
        assert record.levelno == logging.WARNING
        assert "-> 503" in record.getMessage()


@pytest.mark.parametrize(
    ("status_code", "level"),
    [(200, logging.INFO), (204, logging.INFO), (400, logging.INFO), (500, logging.WARNING), (503, logging.WARNING)],
)
def test_completion_level(status_code, level):
    assert completion_level(status_code) == level


def test_resolve_request_id():
    assert resolve_request_id("abc-123_DEF") == "abc-123_DEF"
    assert len(resolve_request_id(None)) == 12
    assert len(resolve_request_id("")) == 12
    assert len(resolve_request_id("x" * 65)) == 12
    int(resolve_request_id(None), 16)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Authorization: Bearer hf_abcdefghijklmnop", f"Authorization: Bearer {REDACTED}"),
        ("bearer sk-123456 rejected", f"bearer {REDACTED} rejected"),
        ("Invalid token hf_AbCdEf1234567890XyZwVu for gpt2", f"Invalid token {REDACTED} for gpt2"),
        ("hf_inference endpoint is loading", "hf_inference endpoint is loading"),
        ("No question provided.", "No question provided."),
    ],
)
def test_redact(text, expected):
    assert redact(text) == expected


def test_log_filter_injects_request_id():
    record = _record("msg")
    token = request_id_var.set("abc123")
    try:
        assert RelayLogFilter().filter(record) is True
    finally:
        request_id_var.reset(token)
    assert record.request_id == "abc123"


def test_log_filter_defaults_request_id_outside_a_call():
    record = _record("startup")
    RelayLogFilter().filter(record)
    assert record.request_id == "-"


def test_log_filter_scrubs_formatted_arguments():
    """Credentials passed as %-style arguments are scrubbed after formatting."""
    upstream_text = "Invalid credentials in Authorization header: Bearer hf_secretvalue1234567890"
    record = _record("Upstream said: %s (status %d)", (upstream_text, 401))

    RelayLogFilter().filter(record)

    assert "hf_secretvalue1234567890" not in record.getMessage()
    assert record.getMessage().endswith(f"Bearer {REDACTED} (status 401)")


def test_log_filter_leaves_clean_records_untouched():
    record = _record("Upstream %s returned %d", ("https://x", 503))

    RelayLogFilter().filter(record)

    assert record.msg == "Upstream %s returned %d"
    assert record.args == ("https://x", 503)


def test_real_app_attaches_request_id_and_cors():
    """The real app wires both middlewares around the routes."""
    client = TestClient(create_app(Settings(environment="development", log_level="WARNING")))

    resp = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert "x-request-id" in resp.headers
    assert resp.headers["access-control-allow-origin"] == "*"
