"""
Authentication utilities.

Staff callers present a JWT bearer token; its claims become the
UserContext every CRUD operation is scoped by.

Claims:
    sub             subject (user) id
    username        display/login name
    role            one of shared.config.constants.Roles
    organization_id tenant the caller belongs to (absent only for SUPER_ADMIN)
    department_ids  departments the caller belongs to
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt
from fastapi import Header, HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from shared.config.constants import DEPARTMENT_SCOPED_ROLES, Roles
from shared.config.logging import auth_logger as logger
from shared.config.settings import JWT_AUDIENCE, JWT_ISSUER, JWT_SECRET, settings
from shared.utils.context import UserContext


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Sign an access token with the given claims.

    Args:
        payload: Claims (sub, username, role, organization_id, department_ids).
        ttl_seconds: Token lifetime. Defaults to the configured access token expiry.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Raises:
        HTTPException: 401 if the token is invalid, expired or misses the subject.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        # Generic message for the client, actual reason in the logs
        logger.warning("JWT validation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    if "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing subject claim",
        )

    return payload


def user_context_from_claims(claims: dict[str, Any]) -> UserContext:
    """
    Build the UserContext for a verified token.

    Raises:
        HTTPException: 401 for malformed claims, 403 when a non super-admin
            token carries no organization or a department-scoped role carries
            no departments.
    """
    try:
        user = UserContext(
            sub=str(claims["sub"]),
            username=claims.get("username") or str(claims["sub"]),
            role=claims.get("role", ""),
            organization_id=claims.get("organization_id"),
            department_ids=claims.get("department_ids"),
        )
    except PydanticValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: malformed claims",
        )

    if user.role not in Roles.ALL:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: unknown role",
        )

    if user.organization_id is None and user.role != Roles.SUPER_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token is not bound to an organization",
        )

    if user.department_ids is None and user.role in DEPARTMENT_SCOPED_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token is not bound to any department",
        )

    return user


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        HTTPException: If header is missing or malformed.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
        )
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>",
        )
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> UserContext:
    """
    FastAPI dependency resolving the caller's UserContext.

    Usage:
        @router.get("/protected")
        def protected_endpoint(user: UserContext = Depends(current_user_context)):
            ...
    """
    token = get_bearer_token(authorization)
    return user_context_from_claims(verify_jwt(token))
