"""
Security utilities: password hashing, access tokens and audit logging.

Passwords are hashed with scrypt and stored as ``<hex key>.<hex salt>``.
Verification fails closed: a malformed stored value is a failed login, never
an exception.
"""

import asyncio
import json
import logging
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional, Set, TypedDict

import jwt
from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from core.config import settings

logger = logging.getLogger("security.audit")

SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_KEY_LENGTH = 64
SALT_BYTES = 16


# ==================== Passwords ===================== #
def _scrypt(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=SCRYPT_KEY_LENGTH, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(SALT_BYTES)
    key = _scrypt(salt).derive(password.encode("utf-8"))
    return f"{key.hex()}.{salt.hex()}"


def verify_password(password: str, stored: Optional[str]) -> bool:
    """
    Check ``password`` against a stored ``<hex key>.<hex salt>`` value.

    Returns False for a wrong password and for any malformed stored value
    (no separator, an empty half, non-hex content).
    """
    if not stored or "." not in stored:
        return False

    key_hex, _, salt_hex = stored.partition(".")
    if not key_hex or not salt_hex:
        return False

    try:
        key = bytes.fromhex(key_hex)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False

    try:
        _scrypt(salt).verify(password.encode("utf-8"), key)
    except InvalidKey:
        return False
    return True


async def hash_password_async(password: str) -> str:
    """Run ``hash_password`` in a worker thread so the event loop stays free."""
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(password: str, stored: Optional[str]) -> bool:
    return await asyncio.to_thread(verify_password, password, stored)


# ==================== Tokens ===================== #
class JWTPayload(TypedDict, total=False):
    user_id: int
    session_id: int
    role: str
    type: str
    exp: int
    iat: int


def generate_session_token() -> str:
    return secrets.token_urlsafe(48)


def create_access_token(
    user_id: int,
    session_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
    secret: Optional[str] = None,
    algorithm: Optional[str] = None,
) -> str:
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload: JWTPayload = {
        "user_id": user_id,
        "session_id": session_id,
        "role": role,
        "type": "access",
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(
        payload,
        secret or settings.jwt_secret_key,
        algorithm=algorithm or settings.jwt_algorithm,
    )


def verify_jwt_token(token: str, secret: str, algorithm: str = "HS256") -> JWTPayload:
    """
    Decode and verify an access token.

    Raises:
        jwt.ExpiredSignatureError: token is past its ``exp``
        jwt.InvalidTokenError: bad signature, malformed, or not an access token
    """
    payload = jwt.decode(
        token,
        secret,
        algorithms=[algorithm],
        options={"require": ["exp", "iat"]},
    )
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError("Not an access token")
    return payload


# ==================== Audit ===================== #
class AuditAction(str, Enum):
    """Audit log action types."""
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    REGISTER = "REGISTER"
    PASSWORD_CHANGE = "PASSWORD_CHANGE"

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    ROLE_CHANGE = "ROLE_CHANGE"
    GENERATE_SUMMARY = "GENERATE_SUMMARY"
    HR_DECISION = "HR_DECISION"
    STATUS_CHANGE = "STATUS_CHANGE"


class ResourceType(str, Enum):
    """Resource types for audit logging."""
    USER = "USER"
    CANDIDATE = "CANDIDATE"
    INTERVIEW = "INTERVIEW"
    QUESTION = "QUESTION"
    JOB = "JOB"
    APPLICATION = "APPLICATION"


# PII fields that should be masked in logs
PII_FIELDS: Set[str] = {
    "email", "phone", "name", "full_name", "address", "username",
}


def mask_pii(data: Any, depth: int = 0) -> Any:
    """
    Recursively mask PII fields in data structures.

    Args:
        data: Data to mask (dict, list, or primitive)
        depth: Current recursion depth (max 10)

    Returns:
        Data with PII fields masked
    """
    if depth > 10:
        return "[MAX_DEPTH]"

    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if key.lower() in PII_FIELDS:
                if isinstance(value, str) and len(value) > 0:
                    # Partial masking: show first char and length indicator
                    masked[key] = f"{value[0]}***[{len(value)}]"
                else:
                    masked[key] = "[MASKED]"
            else:
                masked[key] = mask_pii(value, depth + 1)
        return masked
    elif isinstance(data, list):
        return [mask_pii(item, depth + 1) for item in data[:5]]
    else:
        return data


def log_audit_event(
    action: AuditAction,
    resource_type: ResourceType,
    resource_id: Optional[Any] = None,
    user_id: Optional[int] = None,
    details: Optional[Dict[str, Any]] = None,
    contains_pii: bool = False,
) -> Dict[str, Any]:
    """
    Emit a structured audit record on the ``security.audit`` logger.

    Returns the event so callers and tests can inspect what was written.
    """
    event = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": "AUDIT",
        "action": action.value,
        "resource_type": resource_type.value,
        "resource_id": str(resource_id) if resource_id is not None else None,
        "user_id": user_id,
        "contains_pii": contains_pii,
        "details": mask_pii(details) if details and contains_pii else details,
    }

    logger.info(json.dumps(event, default=str))
    return event
