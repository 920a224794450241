"""
Authentication middleware for verifying user identity and session validity.

This middleware:
1. Lets public endpoints through untouched
2. Validates the bearer JWT from the Authorization header
3. Loads the user and the login session the token was issued for
4. Rejects revoked or expired sessions and deactivated users
5. Injects ``user`` and ``session`` into the ASGI scope
"""

import logging
from typing import Callable, Optional

import jwt
from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import AccountInactiveError, AuthenticationError
from core.security import JWTPayload, verify_jwt_token
from core.utils.datetime import is_past
from database.engine import AsyncSessionLocal
from database.models.users import User, UserSession

logger = logging.getLogger(__name__)


class TokenExpiredError(AuthenticationError):
    code = "TOKEN_EXPIRED"
    default_message = "Authentication token has expired. Please login again."


class TokenInvalidError(AuthenticationError):
    code = "TOKEN_INVALID"
    default_message = "Invalid authentication token."


class SessionInvalidError(AuthenticationError):
    code = "SESSION_INVALID"
    default_message = "Session has expired or is invalid. Please login again."


class UserNotFoundError(AuthenticationError):
    code = "USER_NOT_FOUND"
    default_message = "User account not found."


def public_routes(
    api_prefix: str,
) -> tuple[set[str], set[tuple[str, str]], list[tuple[str, str]]]:
    """
    Public endpoints as three groups: paths open to any method, exact
    (method, path) pairs, and (method, path prefix) pairs.
    """
    any_method = {
        "/",
        "/health",
        "/ready",
        "/docs",
        "/redoc",
        "/openapi.json",
        f"{api_prefix}/auth/login",
        f"{api_prefix}/auth/register",
    }
    exact = {
        ("POST", f"{api_prefix}/applications"),
        ("POST", f"{api_prefix}/uploads/resume"),
    }
    prefixes = [
        # public job board
        ("GET", f"{api_prefix}/jobs"),
    ]
    return any_method, exact, prefixes


class AuthenticationMiddleware:
    """
    ASGI middleware that authenticates every non-public request.

    Failures short-circuit with a 401 in the standard error body.
    """

    def __init__(
        self,
        app: Callable,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
        api_prefix: str = "/api/v1",
    ):
        self.app = app
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        (
            self.public_paths,
            self.public_method_paths,
            self.public_method_prefixes,
        ) = public_routes(api_prefix)

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)

        if request.method == "OPTIONS":
            await self.app(scope, receive, send)
            return

        if self._is_public_endpoint(request.method, request.url.path):
            # staff calling a public endpoint still get their identity attached
            try:
                await self._authenticate(request, scope)
            except AuthenticationError:
                pass
            await self.app(scope, receive, send)
            return

        try:
            await self._authenticate(request, scope)
        except AuthenticationError as e:
            if e.details:
                logger.warning(f"Authentication failed ({e.code}): {e.details}")
            else:
                logger.info(f"Authentication failed ({e.code}) for {request.url.path}")
            await self._send_error_response(scope, receive, send, e)
            return

        await self.app(scope, receive, send)

    async def _authenticate(self, request: Request, scope: dict) -> None:
        token = self._extract_token(request)
        if not token:
            raise AuthenticationError("Unauthorized")

        try:
            payload = verify_jwt_token(token, self.jwt_secret, self.jwt_algorithm)
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(details={"reason": str(e)})

        async with AsyncSessionLocal() as db:
            user, session = await self._validate_user_and_session(db, payload)

        scope["user"] = user
        scope["session"] = session
        scope["jwt_payload"] = payload

    def _is_public_endpoint(self, method: str, path: str) -> bool:
        normalized = path.rstrip("/") or "/"
        if normalized in self.public_paths:
            return True

        if normalized.startswith(("/docs", "/redoc")):
            return True

        if (method, normalized) in self.public_method_paths:
            return True

        return any(
            method == allowed_method and (
                normalized == prefix or normalized.startswith(prefix + "/")
            )
            for allowed_method, prefix in self.public_method_prefixes
        )

    def _extract_token(self, request: Request) -> Optional[str]:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            return auth_header[7:].strip() or None
        return None

    async def _validate_user_and_session(
        self,
        db: AsyncSession,
        payload: JWTPayload,
    ) -> tuple[User, UserSession]:
        """
        Raises:
            TokenInvalidError: token lacks user/session claims
            UserNotFoundError: user was deleted
            AccountInactiveError: user was deactivated after logging in
            SessionInvalidError: session missing, revoked or expired
        """
        user_id = payload.get("user_id")
        session_id = payload.get("session_id")
        if not user_id or not session_id:
            raise TokenInvalidError(details={"reason": "missing user_id or session_id"})

        user = await db.get(User, user_id)
        if user is None:
            raise UserNotFoundError()

        if not user.active:
            raise AccountInactiveError()

        result = await db.execute(
            select(UserSession).where(
                UserSession.id == session_id,
                UserSession.user_id == user_id,
            )
        )
        session = result.scalar_one_or_none()

        if session is None:
            raise SessionInvalidError()
        if session.revoked_at is not None:
            raise SessionInvalidError("Session has been revoked. Please login again.")
        if is_past(session.expires_at):
            raise SessionInvalidError()

        return user, session

    async def _send_error_response(
        self,
        scope: dict,
        receive: Callable,
        send: Callable,
        error: AuthenticationError,
    ) -> None:
        response = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "error": {
                    "code": error.code,
                    "message": error.message,
                    "path": scope.get("path"),
                    "method": scope.get("method"),
                }
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
        await response(scope, receive, send)


def get_current_user(request: Request) -> User:
    """
    Authenticated user from the request scope.

    Raises:
        AuthenticationError: no user was attached by the middleware
    """
    user = request.scope.get("user")
    if user is None:
        raise AuthenticationError("Unauthorized")
    return user


def get_current_session(request: Request) -> Optional[UserSession]:
    return request.scope.get("session")
