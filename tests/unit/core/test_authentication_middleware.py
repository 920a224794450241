"""
Tests for the authentication middleware.

Tests:
- Public endpoint classification
- Token extraction
- Missing, malformed and expired tokens
- Revoked sessions and deactivated accounts
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from core.middleware.authentication import AuthenticationMiddleware
from core.security import create_access_token

API = "/api/v1"


@pytest.fixture
def middleware():
    return AuthenticationMiddleware(app=Mock(), jwt_secret="secret", api_prefix=API)


class TestPublicEndpoints:
    """Test public endpoint detection."""

    @pytest.mark.parametrize("method, path", [
        ("GET", "/health"),
        ("GET", "/ready"),
        ("GET", "/docs"),
        ("GET", "/openapi.json"),
        ("POST", f"{API}/auth/login"),
        ("POST", f"{API}/auth/register"),
        ("POST", f"{API}/applications"),
        ("POST", f"{API}/uploads/resume"),
        ("GET", f"{API}/jobs"),
        ("GET", f"{API}/jobs/3"),
        ("GET", f"{API}/jobs/"),
    ])
    def test_public(self, middleware, method, path):
        assert middleware._is_public_endpoint(method, path) is True

    @pytest.mark.parametrize("method, path", [
        ("GET", f"{API}/applications"),
        ("PUT", f"{API}/applications/1/status"),
        ("POST", f"{API}/jobs"),
        ("DELETE", f"{API}/jobs/3"),
        ("GET", f"{API}/jobsearch"),
        ("POST", f"{API}/auth/logout"),
        ("GET", f"{API}/auth/user"),
        ("GET", f"{API}/interviews"),
    ])
    def test_protected(self, middleware, method, path):
        assert middleware._is_public_endpoint(method, path) is False


class TestTokenExtraction:

    def _request(self, header):
        request = Mock()
        request.headers = {"Authorization": header} if header is not None else {}
        return request

    def test_bearer(self, middleware):
        assert middleware._extract_token(self._request("Bearer abc.def")) == "abc.def"

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "bearer abc"])
    def test_missing_or_wrong_scheme(self, middleware, header):
        assert middleware._extract_token(self._request(header)) is None


class TestAuthenticationFlow:
    """End-to-end through the application stack."""

    def test_no_token_is_401(self, client):
        response = client.get(f"{API}/interviews")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["error"]["message"] == "Unauthorized"

    def test_garbage_token_is_401(self, client):
        response = client.get(f"{API}/interviews", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_INVALID"

    def test_expired_token_is_401(self, client, auth_headers):
        expired = create_access_token(
            user_id=1, session_id=1, role="admin", expires_delta=timedelta(minutes=-5)
        )
        response = client.get(f"{API}/auth/user", headers={"Authorization": f"Bearer {expired}"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    def test_token_for_unknown_session_is_401(self, client, auth_headers):
        forged = create_access_token(user_id=1, session_id=9999, role="admin")
        response = client.get(f"{API}/auth/user", headers={"Authorization": f"Bearer {forged}"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "SESSION_INVALID"

    def test_logout_revokes_session(self, client, auth_headers):
        headers = auth_headers["hr"]
        assert client.get(f"{API}/auth/user", headers=headers).status_code == 200

        assert client.post(f"{API}/auth/logout", headers=headers).status_code == 200

        response = client.get(f"{API}/auth/user", headers=headers)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "SESSION_INVALID"

    def test_deactivated_user_is_rejected(self, client, auth_headers, user_ids):
        interviewer_headers = auth_headers["technical_interviewer"]
        client.patch(
            f"{API}/users/{user_ids['technical_interviewer']}",
            json={"active": False},
            headers=auth_headers["admin"],
        )

        response = client.get(f"{API}/auth/user", headers=interviewer_headers)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "ACCOUNT_PENDING_ACTIVATION"

    def test_public_endpoint_works_without_token(self, client):
        assert client.get(f"{API}/jobs").status_code == 200

    def test_public_endpoint_ignores_bad_token(self, client):
        response = client.get(f"{API}/jobs", headers={"Authorization": "Bearer junk"})
        assert response.status_code == 200
