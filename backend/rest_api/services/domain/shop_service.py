"""
Shop Domain Service.

Shop CRUD, open/closed toggling and owner statistics.
"""

from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from shared.config.constants import PaymentStatus, Roles
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import BusinessRuleError, DuplicateEntityError, NotFoundError
from shared.utils.schemas import ShopCreate, ShopStats, ShopUpdate
from shared.utils.validators import sanitize_search_term
from rest_api.models import MenuItem, Order, Shop, User
from rest_api.services.permissions import PermissionContext
from rest_api.services.views import order_view, shop_rating_view
from .geo import address_point, haversine_km

logger = get_logger(__name__)

RECENT_ORDERS_IN_STATS = 10


@dataclass
class ShopFilters:
    category: str | None = None
    search: str | None = None
    is_open: bool | None = None
    featured: bool | None = None


class ShopService:
    """
    Domain service for Shop operations.

    Usage:
        service = ShopService(db)
        shop = service.create_shop(owner, body)
    """

    def __init__(self, db: Session):
        self._db = db

    def get_shop(self, shop_id: int) -> Shop:
        shop = self._db.scalar(select(Shop).where(Shop.id == shop_id))
        if shop is None:
            raise NotFoundError("Shop", shop_id)
        return shop

    def get_managed_shop(self, shop_id: int, user: User, action: str = "update this shop") -> Shop:
        """Shop the user owns, or any shop for an admin."""
        shop = self.get_shop(shop_id)
        PermissionContext(user).require_shop_management(shop, action)
        return shop

    def list_shops(self, filters: ShopFilters, offset: int, limit: int) -> tuple[list[Shop], int]:
        """Active shops, newest first."""
        query = select(Shop).where(Shop.is_active.is_(True))
        if filters.category:
            query = query.where(Shop.category == filters.category)
        if filters.is_open is not None:
            query = query.where(Shop.is_open.is_(filters.is_open))
        if filters.featured is not None:
            query = query.where(Shop.featured.is_(filters.featured))
        term = sanitize_search_term(filters.search)
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(
                    Shop.name.ilike(pattern, escape="\\"),
                    Shop.description.ilike(pattern, escape="\\"),
                )
            )

        total = self._db.scalar(select(func.count()).select_from(query.subquery())) or 0
        shops = self._db.scalars(
            query.order_by(Shop.created_at.desc(), Shop.id.desc()).offset(offset).limit(limit)
        ).all()
        return list(shops), total

    def list_nearby(self, lat: float, lng: float, radius_km: float) -> list[tuple[Shop, float]]:
        """
        Active, open shops within `radius_km` of the point, nearest first.

        Shops without coordinates are never returned.
        """
        shops = self._db.scalars(
            select(Shop).where(Shop.is_active.is_(True), Shop.is_open.is_(True))
        ).all()

        nearby: list[tuple[Shop, float]] = []
        for shop in shops:
            point = address_point(shop.address)
            if point is None:
                continue
            distance = haversine_km(lat, lng, *point)
            if distance <= radius_km:
                nearby.append((shop, distance))
        nearby.sort(key=lambda pair: pair[1])
        return nearby

    def list_owner_shops(self, owner_id: int) -> list[Shop]:
        return list(
            self._db.scalars(
                select(Shop).where(Shop.owner_id == owner_id).order_by(Shop.created_at.desc())
            ).all()
        )

    def create_shop(self, owner: User, request: ShopCreate) -> Shop:
        """Create the owner's shop. A shop owner may own only one."""
        if owner.role != Roles.ADMIN:
            existing = self._db.scalar(select(Shop.id).where(Shop.owner_id == owner.id))
            if existing is not None:
                raise DuplicateEntityError("User can only create one shop", owner_id=owner.id)

        data = request.model_dump(exclude={"delivery_time", "address"})
        shop = Shop(
            owner_id=owner.id,
            address=request.address.model_dump(by_alias=True, exclude_none=True),
            delivery_time_min=request.delivery_time.min,
            delivery_time_max=request.delivery_time.max,
            **data,
        )
        self._db.add(shop)
        safe_commit(self._db)
        logger.info("Shop created", shop_id=shop.id, owner_id=owner.id)
        return shop

    def update_shop(self, shop_id: int, user: User, request: ShopUpdate) -> Shop:
        shop = self.get_managed_shop(shop_id, user, "update this shop")

        data = request.model_dump(exclude_unset=True, exclude={"delivery_time", "address"})
        for field, value in data.items():
            setattr(shop, field, value)
        if request.address is not None:
            shop.address = request.address.model_dump(by_alias=True, exclude_none=True)
        if request.delivery_time is not None:
            shop.delivery_time_min = request.delivery_time.min
            shop.delivery_time_max = request.delivery_time.max

        safe_commit(self._db)
        logger.info("Shop updated", shop_id=shop.id, fields=sorted(request.model_fields_set))
        return shop

    def delete_shop(self, shop_id: int, user: User) -> None:
        """
        Delete a shop together with its menu items.

        Orders reference the shop permanently, so a shop with orders is
        deactivated by an admin instead of deleted.
        """
        shop = self.get_managed_shop(shop_id, user, "delete this shop")

        order_count = self._db.scalar(select(func.count(Order.id)).where(Order.shop_id == shop.id)) or 0
        if order_count:
            raise BusinessRuleError(
                "Shop has orders and cannot be deleted",
                shop_id=shop.id,
                order_count=order_count,
            )

        self._db.delete(shop)
        safe_commit(self._db)
        logger.info("Shop deleted", shop_id=shop_id, actor_id=user.id)

    def toggle_open(self, shop_id: int, user: User) -> Shop:
        shop = self.get_managed_shop(shop_id, user, "update this shop")
        shop.is_open = not shop.is_open
        safe_commit(self._db)
        logger.info("Shop open status toggled", shop_id=shop.id, is_open=shop.is_open)
        return shop

    def get_stats(self, shop_id: int, user: User) -> ShopStats:
        shop = self.get_managed_shop(shop_id, user, "view shop stats")

        total_orders = self._db.scalar(
            select(func.count(Order.id)).where(Order.shop_id == shop.id)
        ) or 0
        revenue = self._db.scalar(
            select(func.coalesce(func.sum(Order.total_cents), 0)).where(
                Order.shop_id == shop.id,
                Order.payment_status == PaymentStatus.COMPLETED,
            )
        ) or 0
        menu_items_count = self._db.scalar(
            select(func.count(MenuItem.id)).where(MenuItem.shop_id == shop.id)
        ) or 0
        by_status = self._db.execute(
            select(Order.status, func.count(Order.id))
            .where(Order.shop_id == shop.id)
            .group_by(Order.status)
        ).all()
        recent = self._db.scalars(
            select(Order)
            .options(selectinload(Order.items), selectinload(Order.status_history))
            .where(Order.shop_id == shop.id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(RECENT_ORDERS_IN_STATS)
        ).all()

        return ShopStats(
            shop_id=shop.id,
            total_orders=total_orders,
            revenue_cents=int(revenue),
            menu_items_count=menu_items_count,
            orders_by_status={status: count for status, count in by_status},
            rating=shop_rating_view(shop),
            recent_orders=[order_view(o) for o in recent],
        )
