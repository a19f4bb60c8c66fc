"""
Authentication utilities.
Issues and verifies bearer JWTs for marketplace users.
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt
from fastapi import Header

from shared.config.settings import settings
from shared.config.logging import get_logger
from shared.utils.exceptions import NotAuthorizedError

logger = get_logger(__name__)


def sign_jwt(
    payload: dict[str, Any],
    ttl_seconds: int | None = None,
) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, role, email).
        ttl_seconds: Token lifetime in seconds. Defaults to the access token expiry.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, settings.jwt_secret, algorithm="HS256")


def sign_user_token(user_id: int, role: str, email: str, token_version: int = 0) -> str:
    """Access token for a user; `ver` must match the user's current token version."""
    return sign_jwt({"sub": str(user_id), "role": role, "email": email, "ver": token_version})


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded token claims.

    Raises:
        NotAuthorizedError: If the token is invalid, expired or missing claims.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except jwt.ExpiredSignatureError:
        raise NotAuthorizedError(reason="token expired")
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message to the client
        raise NotAuthorizedError(reason="invalid token", error=str(e))

    if "sub" not in payload or "role" not in payload:
        raise NotAuthorizedError(reason="missing claims")

    try:
        int(payload["sub"])
    except (ValueError, TypeError):
        raise NotAuthorizedError(reason="malformed subject claim")

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        NotAuthorizedError: If header is missing or malformed.
    """
    if not authorization:
        raise NotAuthorizedError(reason="missing authorization header")
    if not authorization.startswith("Bearer "):
        raise NotAuthorizedError(reason="malformed authorization header")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise NotAuthorizedError(reason="empty bearer token")
    return token


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency returning the verified token claims.

    Usage:
        @router.get("/protected")
        def protected_endpoint(ctx = Depends(current_user_context)):
            user_id = int(ctx["sub"])
            role = ctx["role"]
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token)
