"""
Users router.
Account management for administrators.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.config.constants import Roles
from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    AdminUserUpdate,
    ApiResponse,
    PaginatedResponse,
    Role,
    UserOutput,
)
from rest_api.models import User
from rest_api.routers._common import Pagination, get_pagination, paginated, require_roles
from rest_api.services.domain import AdminService, AdminUserFilters
from rest_api.services.views import user_view


router = APIRouter(prefix="/api/users", tags=["users"])

require_admin = require_roles(Roles.ADMIN)


@router.get("", response_model=PaginatedResponse[UserOutput])
def list_users(
    role: Role | None = Query(default=None),
    is_active: bool | None = Query(default=None, alias="isActive"),
    search: str | None = Query(default=None, max_length=100),
    pagination: Pagination = Depends(get_pagination),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> PaginatedResponse[UserOutput]:
    filters = AdminUserFilters(role=role, is_active=is_active, search=search)
    users, total = AdminService(db).list_users(filters, pagination.offset, pagination.limit)
    return paginated([user_view(u) for u in users], total, pagination)


@router.get("/{user_id}", response_model=ApiResponse[UserOutput])
def get_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[UserOutput]:
    return ApiResponse(data=user_view(AdminService(db).get_user(user_id)))


@router.put("/{user_id}", response_model=ApiResponse[UserOutput])
def update_user(
    user_id: int,
    body: AdminUserUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[UserOutput]:
    """
    Edit profile fields, role, active flag or email verification.
    Only the fields present in the body are changed.
    """
    user = AdminService(db).update_user(user_id, admin, body)
    return ApiResponse(message="User updated successfully", data=user_view(user))


@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[None]:
    """Remove an account that has no orders and owns no shops."""
    AdminService(db).delete_user(user_id, admin)
    return ApiResponse(message="User deleted successfully")
