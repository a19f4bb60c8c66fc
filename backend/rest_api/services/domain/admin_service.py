"""
Admin Domain Service.

Platform-wide listings, activation toggles and reporting. Date bucketing
for reports happens in Python so the queries stay portable across
PostgreSQL and SQLite.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from shared.config.constants import Limits, OrderStatus, PaymentStatus, Roles
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.admin_schemas import (
    DailyRevenue,
    DashboardStats,
    MonthlyPoint,
    OrderStats,
    RevenueStats,
    RevenueStatsSummary,
    RevenueSummary,
    TotalCounts,
)
from shared.utils.exceptions import BusinessRuleError, DuplicateEntityError, NotFoundError
from shared.utils.schemas import AdminUserUpdate
from shared.utils.validators import sanitize_search_term
from rest_api.models import MenuItem, Order, OrderStatusHistory, Shop, User, utcnow
from rest_api.services.permissions import PermissionContext
from rest_api.services.views import order_view, shop_view, user_view

logger = get_logger(__name__)

RECENT_ITEMS = 10
MONTHLY_WINDOW_DAYS = 365


@dataclass
class AdminShopFilters:
    is_active: bool | None = None
    category: str | None = None
    search: str | None = None


@dataclass
class AdminUserFilters:
    role: str | None = None
    is_active: bool | None = None
    search: str | None = None


class AdminService:
    """Domain service for admin-only operations."""

    def __init__(self, db: Session):
        self._db = db

    def _count(self, model) -> int:
        return self._db.scalar(select(func.count(model.id))) or 0

    def _group_count(self, column) -> dict:
        return {key: count for key, count in self._db.execute(
            select(column, func.count()).group_by(column)
        ).all()}

    # =========================================================================
    # Reports
    # =========================================================================

    def dashboard(self) -> DashboardStats:
        revenue_total, completed = self._db.execute(
            select(func.coalesce(func.sum(Order.total_cents), 0), func.count(Order.id)).where(
                Order.payment_status == PaymentStatus.COMPLETED,
                Order.status != OrderStatus.CANCELLED,
            )
        ).one()

        recent_orders = self._db.scalars(
            select(Order)
            .options(selectinload(Order.items), selectinload(Order.status_history), selectinload(Order.shop))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(RECENT_ITEMS)
        ).all()
        recent_users = self._db.scalars(
            select(User).order_by(User.created_at.desc(), User.id.desc()).limit(RECENT_ITEMS)
        ).all()
        top_shops = self._db.scalars(
            select(Shop).order_by(Shop.total_orders.desc(), Shop.id).limit(Limits.DASHBOARD_TOP_SHOPS)
        ).all()

        shops_by_status = {
            ("active" if is_active else "inactive"): count
            for is_active, count in self._group_count(Shop.is_active).items()
        }

        return DashboardStats(
            total_counts=TotalCounts(
                users=self._count(User),
                shops=self._count(Shop),
                orders=self._count(Order),
                menu_items=self._count(MenuItem),
            ),
            users_by_role=self._group_count(User.role),
            shops_by_status=shops_by_status,
            orders_by_status=self._group_count(Order.status),
            revenue=RevenueSummary(total_cents=int(revenue_total), total_completed_orders=completed),
            recent_orders=[order_view(o) for o in recent_orders],
            recent_users=[user_view(u) for u in recent_users],
            top_shops=[shop_view(s) for s in top_shops],
            monthly_data=self._monthly_data(),
        )

    def _monthly_data(self) -> list[MonthlyPoint]:
        since = utcnow() - timedelta(days=MONTHLY_WINDOW_DAYS)
        rows = self._db.execute(
            select(Order.created_at, Order.payment_status, Order.total_cents).where(Order.created_at >= since)
        ).all()

        buckets: dict[tuple[int, int], list[int]] = defaultdict(lambda: [0, 0])
        for created_at, payment_status, total_cents in rows:
            bucket = buckets[(created_at.year, created_at.month)]
            bucket[0] += 1
            if payment_status == PaymentStatus.COMPLETED:
                bucket[1] += total_cents

        return [
            MonthlyPoint(year=year, month=month, orders=orders, revenue_cents=revenue)
            for (year, month), (orders, revenue) in sorted(buckets.items())
        ]

    def revenue_stats(self, period_days: int) -> RevenueStats:
        since = utcnow() - timedelta(days=period_days)
        rows = self._db.execute(
            select(Order.created_at, Order.total_cents).where(
                Order.created_at >= since,
                Order.payment_status == PaymentStatus.COMPLETED,
            )
        ).all()

        days: dict[str, list[int]] = defaultdict(lambda: [0, 0])
        for created_at, total_cents in rows:
            day = days[created_at.strftime("%Y-%m-%d")]
            day[0] += total_cents
            day[1] += 1

        daily = [
            DailyRevenue(date=date, revenue_cents=revenue, orders=orders)
            for date, (revenue, orders) in sorted(days.items())
        ]
        total_revenue = sum(d.revenue_cents for d in daily)
        total_orders = sum(d.orders for d in daily)
        return RevenueStats(
            daily_stats=daily,
            summary=RevenueStatsSummary(
                total_revenue_cents=total_revenue,
                total_orders=total_orders,
                average_order_value_cents=total_revenue // total_orders if total_orders else 0,
                period=f"{period_days} days",
            ),
        )

    def order_stats(self, period_days: int) -> OrderStats:
        since = utcnow() - timedelta(days=period_days)
        rows = self._db.execute(
            select(Order.created_at, Order.status).where(Order.created_at >= since)
        ).all()

        daily: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        distribution: dict[str, int] = defaultdict(int)
        for created_at, status in rows:
            daily[created_at.strftime("%Y-%m-%d")][status] += 1
            distribution[status] += 1

        return OrderStats(
            daily_stats={date: dict(counts) for date, counts in sorted(daily.items())},
            status_distribution=dict(distribution),
            period=f"{period_days} days",
        )

    # =========================================================================
    # Shops
    # =========================================================================

    def list_shops(self, filters: AdminShopFilters, offset: int, limit: int) -> tuple[list[Shop], int]:
        """All shops, including inactive ones."""
        query = select(Shop)
        if filters.is_active is not None:
            query = query.where(Shop.is_active.is_(filters.is_active))
        if filters.category:
            query = query.where(Shop.category == filters.category)
        term = sanitize_search_term(filters.search)
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(Shop.name.ilike(pattern, escape="\\"), Shop.description.ilike(pattern, escape="\\"))
            )
        total = self._db.scalar(select(func.count()).select_from(query.subquery())) or 0
        shops = self._db.scalars(
            query.order_by(Shop.created_at.desc(), Shop.id.desc()).offset(offset).limit(limit)
        ).all()
        return list(shops), total

    def toggle_shop_active(self, shop_id: int, admin: User) -> Shop:
        shop = self._db.scalar(select(Shop).where(Shop.id == shop_id))
        if shop is None:
            raise NotFoundError("Shop", shop_id)
        shop.is_active = not shop.is_active
        safe_commit(self._db)
        logger.info("Shop activation toggled", shop_id=shop.id, is_active=shop.is_active, admin_id=admin.id)
        return shop

    # =========================================================================
    # Users
    # =========================================================================

    def list_users(self, filters: AdminUserFilters, offset: int, limit: int) -> tuple[list[User], int]:
        query = select(User)
        if filters.role:
            query = query.where(User.role == filters.role)
        if filters.is_active is not None:
            query = query.where(User.is_active.is_(filters.is_active))
        term = sanitize_search_term(filters.search)
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\"))
            )
        total = self._db.scalar(select(func.count()).select_from(query.subquery())) or 0
        users = self._db.scalars(
            query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit)
        ).all()
        return list(users), total

    def toggle_user_active(self, user_id: int, admin: User) -> User:
        """Flip a user's active flag. An admin cannot toggle their own account."""
        user = self._db.scalar(select(User).where(User.id == user_id))
        if user is None:
            raise NotFoundError("User", user_id)
        PermissionContext(admin).require_not_self(user.id)

        user.is_active = not user.is_active
        safe_commit(self._db)
        logger.info("User activation toggled", user_id=user.id, is_active=user.is_active, admin_id=admin.id)
        return user

    def get_user(self, user_id: int) -> User:
        user = self._db.scalar(select(User).where(User.id == user_id))
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def update_user(self, user_id: int, admin: User, request: AdminUserUpdate) -> User:
        """
        Edit any account. An admin cannot change their own role or active flag,
        and a user who still owns shops keeps a shop-managing role.
        """
        user = self.get_user(user_id)
        changes = request.model_dump(exclude_unset=True)

        if user.id == admin.id and ({"role", "is_active"} & changes.keys()):
            PermissionContext(admin).require_not_self(user.id, "change the role or status of your own account")

        if request.email is not None:
            email = request.email.strip().lower()
            taken = self._db.scalar(select(User.id).where(User.email == email, User.id != user.id))
            if taken is not None:
                raise DuplicateEntityError("Email already exists", user_id=user.id)
            user.email = email

        if request.role is not None and request.role != user.role:
            if request.role == Roles.CUSTOMER and self._owns_shops(user.id):
                raise BusinessRuleError("User still owns shops and must keep a shop owner role", user_id=user.id)
            user.role = request.role

        if request.name is not None:
            user.name = request.name.strip()
        if request.phone is not None:
            user.phone = request.phone
        if request.address is not None:
            user.address = request.address.model_dump(by_alias=True, exclude_none=True)
        if request.is_active is not None:
            user.is_active = request.is_active
        if request.email_verified is not None:
            user.email_verified = request.email_verified

        safe_commit(self._db)
        logger.info("User updated by admin", user_id=user.id, fields=sorted(changes), admin_id=admin.id)
        return user

    def delete_user(self, user_id: int, admin: User) -> None:
        """
        Delete an account with no history. Users who placed or handled orders or own
        shops are deactivated instead, so order records stay intact.
        """
        user = self.get_user(user_id)
        PermissionContext(admin).require_not_self(user.id, "delete your own account")

        if self._has_order_history(user.id) or self._owns_shops(user.id):
            raise BusinessRuleError(
                "User has orders or shops and cannot be deleted; deactivate the account instead",
                user_id=user.id,
            )

        self._db.delete(user)
        safe_commit(self._db)
        logger.info("User deleted", user_id=user_id, admin_id=admin.id)

    def _has_order_history(self, user_id: int) -> bool:
        placed = self._db.scalar(select(Order.id).where(Order.customer_id == user_id).limit(1))
        if placed is not None:
            return True
        handled = self._db.scalar(
            select(OrderStatusHistory.id).where(OrderStatusHistory.updated_by_id == user_id).limit(1)
        )
        return handled is not None

    def _owns_shops(self, user_id: int) -> bool:
        return self._db.scalar(select(Shop.id).where(Shop.owner_id == user_id).limit(1)) is not None
