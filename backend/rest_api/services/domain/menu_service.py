"""
Menu Domain Service.

Menu items always live under a shop; every lookup checks the item
belongs to the shop in the URL.
"""

from dataclasses import dataclass

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.schemas import MenuItemCreate, MenuItemUpdate
from shared.utils.validators import sanitize_search_term
from rest_api.models import MenuItem, Shop, User
from rest_api.services.permissions import PermissionContext

logger = get_logger(__name__)

SORT_OPTIONS = {
    "price_asc": (MenuItem.price_cents.asc(),),
    "price_desc": (MenuItem.price_cents.desc(),),
    "popular": (MenuItem.total_orders.desc(),),
    "newest": (MenuItem.created_at.desc(),),
    "name": (MenuItem.name.asc(),),
}
DEFAULT_SORT = (MenuItem.created_at.desc(), MenuItem.id.desc())


@dataclass
class MenuFilters:
    category: str | None = None
    is_available: bool | None = None
    is_popular: bool | None = None
    is_featured: bool | None = None
    min_price_cents: int | None = None
    max_price_cents: int | None = None
    search: str | None = None
    sort: str | None = None


class MenuService:
    """Domain service for MenuItem operations."""

    def __init__(self, db: Session):
        self._db = db

    def _get_shop(self, shop_id: int) -> Shop:
        shop = self._db.scalar(select(Shop).where(Shop.id == shop_id))
        if shop is None:
            raise NotFoundError("Shop", shop_id)
        return shop

    def _get_managed_shop(self, shop_id: int, user: User, action: str) -> Shop:
        shop = self._get_shop(shop_id)
        PermissionContext(user).require_shop_management(shop, action)
        return shop

    def get_item(self, shop_id: int, item_id: int) -> MenuItem:
        """Menu item of the given shop. An item of another shop is a 400."""
        item = self._db.scalar(select(MenuItem).where(MenuItem.id == item_id))
        if item is None:
            raise NotFoundError("Menu item")
        if item.shop_id != shop_id:
            raise ValidationError(
                "Menu item does not belong to this shop",
                shop_id=shop_id,
                menu_item_id=item_id,
            )
        return item

    def list_items(
        self, shop_id: int, filters: MenuFilters, offset: int, limit: int
    ) -> tuple[list[MenuItem], int]:
        self._get_shop(shop_id)

        query = select(MenuItem).where(MenuItem.shop_id == shop_id)
        if filters.category:
            query = query.where(MenuItem.category == filters.category)
        if filters.is_available is not None:
            query = query.where(MenuItem.is_available.is_(filters.is_available))
        if filters.is_popular is not None:
            query = query.where(MenuItem.is_popular.is_(filters.is_popular))
        if filters.is_featured is not None:
            query = query.where(MenuItem.is_featured.is_(filters.is_featured))
        if filters.min_price_cents is not None:
            query = query.where(MenuItem.price_cents >= filters.min_price_cents)
        if filters.max_price_cents is not None:
            query = query.where(MenuItem.price_cents <= filters.max_price_cents)
        term = sanitize_search_term(filters.search)
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(
                    MenuItem.name.ilike(pattern, escape="\\"),
                    MenuItem.description.ilike(pattern, escape="\\"),
                )
            )

        total = self._db.scalar(select(func.count()).select_from(query.subquery())) or 0
        order_by = SORT_OPTIONS.get(filters.sort or "", DEFAULT_SORT)
        items = self._db.scalars(query.order_by(*order_by).offset(offset).limit(limit)).all()
        return list(items), total

    def create_item(self, shop_id: int, user: User, request: MenuItemCreate) -> MenuItem:
        shop = self._get_managed_shop(shop_id, user, "add menu items to this shop")
        item = MenuItem(shop_id=shop.id, **request.model_dump())
        self._db.add(item)
        safe_commit(self._db)
        logger.info("Menu item created", shop_id=shop.id, menu_item_id=item.id)
        return item

    def update_item(self, shop_id: int, item_id: int, user: User, request: MenuItemUpdate) -> MenuItem:
        item = self.get_item(shop_id, item_id)
        self._get_managed_shop(shop_id, user, "update this menu item")

        for field, value in request.model_dump(exclude_unset=True).items():
            setattr(item, field, value)

        safe_commit(self._db)
        logger.info("Menu item updated", menu_item_id=item.id, fields=sorted(request.model_fields_set))
        return item

    def delete_item(self, shop_id: int, item_id: int, user: User) -> None:
        item = self.get_item(shop_id, item_id)
        self._get_managed_shop(shop_id, user, "delete this menu item")
        self._db.delete(item)
        safe_commit(self._db)
        logger.info("Menu item deleted", shop_id=shop_id, menu_item_id=item_id)

    def toggle_availability(self, shop_id: int, item_id: int, user: User) -> MenuItem:
        item = self.get_item(shop_id, item_id)
        self._get_managed_shop(shop_id, user, "update this menu item")
        item.is_available = not item.is_available
        safe_commit(self._db)
        logger.info("Menu item availability toggled", menu_item_id=item.id, is_available=item.is_available)
        return item
