"""
Tests for error handling.
Covers message sanitization, the domain exception mapping and the
fallback middleware.
"""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError, OperationalError

from core.exceptions import (
    AccountInactiveError,
    AuthenticationError,
    AuthorizationError,
    InvalidStateTransition,
    LastAdminError,
    NotFoundError,
    ValidationError,
)
from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    sanitize_error_message,
    setup_error_handlers,
)


class TestSensitiveDataSanitization:
    """Test sensitive data sanitization."""

    @pytest.mark.parametrize("sensitive_input", [
        'password="secret123"',
        'user_password: "P@ssw0rd!"',
        'token="abc123xyz"',
        'access_token:jwt.token.here',
        'api_key="sk_live_12345"',
        'client_secret:abc123',
        'authorization: Bearer',
    ])
    def test_redacts(self, sensitive_input):
        assert "[REDACTED]" in sanitize_error_message(sensitive_input)

    @pytest.mark.parametrize("safe_input", [
        'username="john_doe"',
        'Interview 3 not found',
        'count=12345',
    ])
    def test_leaves_safe_text(self, safe_input):
        assert sanitize_error_message(safe_input) == safe_input

    def test_multiple_sensitive_fields_in_one_message(self):
        message = 'Error: password="secret" and token="abc123"'
        sanitized = sanitize_error_message(message)

        assert "secret" not in sanitized
        assert "abc123" not in sanitized
        assert sanitized.count("[REDACTED]") == 2


class Payload(BaseModel):
    score: int = Field(..., ge=0, le=5)


@pytest.fixture
def error_app():
    app = FastAPI()
    setup_error_handlers(app)
    app.add_middleware(ErrorHandlingMiddleware, debug=False)

    raising = {
        "validation": ValidationError("Username already exists"),
        "unauthenticated": AuthenticationError("Invalid username or password"),
        "inactive": AccountInactiveError(),
        "forbidden": AuthorizationError(),
        "last-admin": LastAdminError("Cannot delete the last admin account"),
        "not-found": NotFoundError.for_resource("Interview", 9),
        "conflict": InvalidStateTransition("Cannot move interview 1 from completed to in_progress"),
        "http": HTTPException(status_code=418, detail="teapot"),
        "integrity": IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")),
        "operational": OperationalError("SELECT", {}, Exception("database is locked")),
        "crash": RuntimeError("password=hunter2 leaked"),
    }

    @app.get("/raise/{name}")
    async def raise_error(name: str):
        raise raising[name]

    @app.post("/score")
    async def score(payload: Payload):
        return payload

    return app


@pytest.fixture
def error_client(error_app):
    return TestClient(error_app, raise_server_exceptions=False)


class TestDomainErrorMapping:
    """Each domain exception maps to its status code and error code."""

    @pytest.mark.parametrize("name, status_code, code", [
        ("validation", 400, "VALIDATION_ERROR"),
        ("unauthenticated", 401, "UNAUTHENTICATED"),
        ("inactive", 401, "ACCOUNT_PENDING_ACTIVATION"),
        ("forbidden", 403, "FORBIDDEN"),
        ("last-admin", 403, "LAST_ADMIN"),
        ("not-found", 404, "NOT_FOUND"),
        ("conflict", 409, "INVALID_STATE_TRANSITION"),
        ("http", 418, "HTTP_EXCEPTION"),
    ])
    def test_status_and_code(self, error_client, name, status_code, code):
        response = error_client.get(f"/raise/{name}")

        assert response.status_code == status_code
        error = response.json()["error"]
        assert error["code"] == code
        assert error["path"] == f"/raise/{name}"
        assert error["method"] == "GET"

    def test_inactive_message(self, error_client):
        message = error_client.get("/raise/inactive").json()["error"]["message"]
        assert message == "Account is inactive. Please contact an administrator."

    def test_forbidden_message_is_generic(self, error_client):
        message = error_client.get("/raise/forbidden").json()["error"]["message"]
        assert message == "Forbidden: Insufficient permissions"


class TestValidationErrors:

    def test_validation_is_400_with_readable_message(self, error_client):
        response = error_client.post("/score", json={"score": 9})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"].startswith("score:")
        assert error["details"][0]["field"] == "score"

    def test_missing_field(self, error_client):
        response = error_client.post("/score", json={})

        assert response.status_code == 400
        assert "score" in response.json()["error"]["message"]


class TestUnexpectedErrors:

    def test_unhandled_exception_is_generic_500(self, error_client):
        response = error_client.get("/raise/crash")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_SERVER_ERROR"
        assert "hunter2" not in response.text
        assert "details" not in error

    def test_integrity_error_is_409(self, error_client):
        response = error_client.get("/raise/integrity")

        assert response.status_code == 409
        assert "UNIQUE" not in response.text

    def test_operational_error_is_503(self, error_client):
        assert error_client.get("/raise/operational").status_code == 503
