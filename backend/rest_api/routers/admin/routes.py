"""
Admin router.
Platform dashboard, reports and shop/user/order administration.

Every endpoint requires the admin role.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.config.constants import Roles
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import DashboardStats, OrderStats, RevenueStats
from shared.utils.schemas import (
    ApiResponse,
    OrderOutput,
    OrderStatus,
    PaginatedResponse,
    PaymentStatus,
    Role,
    ShopCategory,
    ShopOutput,
    UserOutput,
)
from rest_api.models import User
from rest_api.routers._common import Pagination, get_pagination, paginated, require_roles
from rest_api.services.domain import (
    AdminService,
    AdminShopFilters,
    AdminUserFilters,
    OrderFilters,
    OrderService,
)
from rest_api.services.views import order_view, shop_view, user_view


router = APIRouter(prefix="/api/admin", tags=["admin"])

require_admin = require_roles(Roles.ADMIN)

DEFAULT_PERIOD_DAYS = 30


@router.get("/dashboard", response_model=ApiResponse[DashboardStats])
def get_dashboard(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[DashboardStats]:
    """
    Platform overview: totals, breakdowns by role and status, revenue from
    completed payments, recent activity, top shops and 12 months of history.
    """
    return ApiResponse(data=AdminService(db).dashboard())


@router.get("/revenue-stats", response_model=ApiResponse[RevenueStats])
def get_revenue_stats(
    period: int = Query(default=DEFAULT_PERIOD_DAYS, ge=1, le=365, description="Period in days"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[RevenueStats]:
    return ApiResponse(data=AdminService(db).revenue_stats(period))


@router.get("/order-stats", response_model=ApiResponse[OrderStats])
def get_order_stats(
    period: int = Query(default=DEFAULT_PERIOD_DAYS, ge=1, le=365, description="Period in days"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[OrderStats]:
    return ApiResponse(data=AdminService(db).order_stats(period))


# =============================================================================
# Shops
# =============================================================================


@router.get("/shops", response_model=PaginatedResponse[ShopOutput])
def list_shops(
    is_active: bool | None = Query(default=None, alias="isActive"),
    category: ShopCategory | None = Query(default=None),
    search: str | None = Query(default=None, max_length=100),
    pagination: Pagination = Depends(get_pagination),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> PaginatedResponse[ShopOutput]:
    """All shops, active or not."""
    filters = AdminShopFilters(is_active=is_active, category=category, search=search)
    shops, total = AdminService(db).list_shops(filters, pagination.offset, pagination.limit)
    return paginated([shop_view(s) for s in shops], total, pagination)


@router.patch("/shops/{shop_id}/toggle-status", response_model=ApiResponse[ShopOutput])
def toggle_shop_active(
    shop_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[ShopOutput]:
    shop = AdminService(db).toggle_shop_active(shop_id, admin)
    state = "activated" if shop.is_active else "deactivated"
    return ApiResponse(message=f"Shop {state} successfully", data=shop_view(shop))


# =============================================================================
# Users
# =============================================================================


@router.get("/users", response_model=PaginatedResponse[UserOutput])
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


@router.patch("/users/{user_id}/toggle-status", response_model=ApiResponse[UserOutput])
def toggle_user_active(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ApiResponse[UserOutput]:
    """Activate or deactivate an account. Admins cannot toggle themselves."""
    user = AdminService(db).toggle_user_active(user_id, admin)
    state = "activated" if user.is_active else "deactivated"
    return ApiResponse(message=f"User {state} successfully", data=user_view(user))


# =============================================================================
# Orders
# =============================================================================


@router.get("/orders", response_model=PaginatedResponse[OrderOutput])
def list_orders(
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    payment_status: PaymentStatus | None = Query(default=None, alias="paymentStatus"),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    pagination: Pagination = Depends(get_pagination),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> PaginatedResponse[OrderOutput]:
    filters = OrderFilters(
        status=order_status,
        payment_status=payment_status,
        start_date=start_date,
        end_date=end_date,
    )
    orders, total = OrderService(db).list_all_orders(filters, pagination.offset, pagination.limit)
    return paginated([order_view(o) for o in orders], total, pagination)
