"""
Tests for structured logging.

Tests:
- Sensitive field and PII masking
- Header masking
- Client IP masking
- JSON formatter
- Request id propagation through the middleware
"""

import json
import logging
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.middleware.logging import (
    StructuredFormatter,
    StructuredLoggingMiddleware,
    get_client_ip,
    mask_headers,
    mask_sensitive_data,
    should_log_request,
)


class TestMaskSensitiveData:

    def test_password_fields(self):
        masked = mask_sensitive_data({"username": "ada", "password": "hunter2", "newPassword": "x"})

        assert masked["username"] == "ada"
        assert masked["password"] == "[REDACTED]"
        assert masked["newPassword"] == "[REDACTED]"

    def test_nested_and_lists(self):
        masked = mask_sensitive_data({"items": [{"accessToken": "abc"}, {"score": 4}]})

        assert masked["items"][0]["accessToken"] == "[REDACTED]"
        assert masked["items"][1]["score"] == 4

    def test_pii_in_free_text(self):
        masked = mask_sensitive_data({"notes": "reach me at jane@example.com or +1 555 123 4567"})

        assert "jane@example.com" not in masked["notes"]
        assert "[EMAIL]" in masked["notes"]
        assert "[PHONE]" in masked["notes"]

    def test_max_depth(self):
        data = {}
        current = data
        for _ in range(15):
            current["next"] = {}
            current = current["next"]

        assert "[MAX_DEPTH_EXCEEDED]" in json.dumps(mask_sensitive_data(data))


class TestMaskHeaders:

    def test_authorization_keeps_scheme(self):
        masked = mask_headers({"Authorization": "Bearer abc.def.ghi", "Accept": "application/json"})

        assert masked["Authorization"] == "Bearer [REDACTED]"
        assert masked["Accept"] == "application/json"

    def test_cookie(self):
        assert mask_headers({"cookie": "session=abc"})["cookie"] == "[REDACTED]"


class TestRequestHelpers:

    @pytest.mark.parametrize("path, expected", [
        ("/health", False),
        ("/ready", False),
        ("/api/v1/interviews", True),
    ])
    def test_should_log_request(self, path, expected):
        assert should_log_request(path) is expected

    def test_forwarded_ip_is_masked(self):
        request = Mock()
        request.headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1"}

        assert get_client_ip(request) == "203.0.113.xxx"

    def test_non_ipv4_is_unknown(self):
        request = Mock()
        request.headers = {}
        request.client.host = "testclient"

        assert get_client_ip(request) == "unknown"


class TestStructuredFormatter:

    def test_formats_json(self):
        record = logging.LogRecord("api", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.request_id = "req-1"

        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["request_id"] == "req-1"

    def test_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = logging.LogRecord("api", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

        data = json.loads(StructuredFormatter().format(record))
        assert data["exception"]["type"] == "ValueError"


class TestStructuredLoggingMiddleware:

    @pytest.fixture
    def logging_client(self):
        app = FastAPI()
        app.add_middleware(StructuredLoggingMiddleware, log_request_body=True)

        @app.post("/echo")
        async def echo(payload: dict):
            return payload

        return TestClient(app)

    def test_request_id_echoed(self, logging_client):
        response = logging_client.post("/echo", json={"a": 1}, headers={"x-request-id": "abc-123"})

        assert response.headers["x-request-id"] == "abc-123"

    def test_request_id_generated(self, logging_client):
        response = logging_client.post("/echo", json={"a": 1})

        assert response.headers["x-request-id"]

    def test_body_logged_masked(self, logging_client, caplog):
        with caplog.at_level(logging.INFO, logger="core.middleware.logging"):
            logging_client.post("/echo", json={"username": "ada", "password": "hunter2"})

        started = [
            json.loads(r.getMessage()) for r in caplog.records
            if r.name == "core.middleware.logging" and "request_started" in r.getMessage()
        ]
        assert started
        assert started[0]["body"]["password"] == "[REDACTED]"
        assert "hunter2" not in caplog.text
