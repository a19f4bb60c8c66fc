"""
Common router dependencies: the authenticated user and role guards.
"""

from typing import Any, Callable

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from rest_api.models import User
from rest_api.services.permissions import PermissionContext
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context
from shared.utils.exceptions import NotAuthorizedError


def get_user_id(ctx: dict[str, Any]) -> int:
    """User id from verified token claims."""
    return int(ctx["sub"])


def get_user_email(ctx: dict[str, Any]) -> str:
    return ctx.get("email", "")


def current_user(
    ctx: dict[str, Any] = Depends(current_user_context),
    db: Session = Depends(get_db),
) -> User:
    """
    Authenticated user, reloaded on every request.

    A valid token for a deleted or deactivated account is rejected, as is
    one issued before the user's last logout or password change.
    """
    user_id = get_user_id(ctx)
    user = db.scalar(select(User).where(User.id == user_id))
    if user is None:
        raise NotAuthorizedError(reason="user no longer exists", user_id=user_id)
    if not user.is_active:
        raise NotAuthorizedError(reason="account deactivated", user_id=user_id)
    if ctx.get("ver", 0) != user.token_version:
        raise NotAuthorizedError(reason="token revoked", user_id=user_id)
    return user


def require_roles(*roles: str) -> Callable[..., User]:
    """
    Dependency factory restricting an endpoint to the given roles.

    Usage:
        @router.post("/")
        def create(user: User = Depends(require_roles(Roles.SHOP_OWNER))):
            ...
    """

    def _dependency(user: User = Depends(current_user)) -> User:
        PermissionContext(user).require_roles(*roles)
        return user

    return _dependency
