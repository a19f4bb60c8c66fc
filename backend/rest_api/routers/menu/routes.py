"""
Menu router.
Menu items are nested under their shop: /api/shops/{shop_id}/menu.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    ApiResponse,
    MenuCategory,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
    PaginatedResponse,
)
from rest_api.models import User
from rest_api.routers._common import Pagination, current_user, get_pagination, paginated
from rest_api.services.domain import MenuFilters, MenuService
from rest_api.services.views import menu_item_view


router = APIRouter(prefix="/api/shops/{shop_id}/menu", tags=["menu"])

MenuSort = Literal["price_asc", "price_desc", "popular", "newest", "name"]


@router.get("", response_model=PaginatedResponse[MenuItemOutput])
def list_menu_items(
    shop_id: int,
    category: MenuCategory | None = Query(default=None),
    is_available: bool | None = Query(default=None, alias="isAvailable"),
    is_popular: bool | None = Query(default=None, alias="isPopular"),
    is_featured: bool | None = Query(default=None, alias="isFeatured"),
    min_price_cents: int | None = Query(default=None, ge=0, alias="minPriceCents"),
    max_price_cents: int | None = Query(default=None, ge=0, alias="maxPriceCents"),
    search: str | None = Query(default=None, max_length=100),
    sort: MenuSort | None = Query(default=None),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> PaginatedResponse[MenuItemOutput]:
    filters = MenuFilters(
        category=category,
        is_available=is_available,
        is_popular=is_popular,
        is_featured=is_featured,
        min_price_cents=min_price_cents,
        max_price_cents=max_price_cents,
        search=search,
        sort=sort,
    )
    items, total = MenuService(db).list_items(shop_id, filters, pagination.offset, pagination.limit)
    return paginated([menu_item_view(i) for i in items], total, pagination)


@router.get("/{item_id}", response_model=ApiResponse[MenuItemOutput])
def get_menu_item(shop_id: int, item_id: int, db: Session = Depends(get_db)) -> ApiResponse[MenuItemOutput]:
    """Single menu item; 400 when it belongs to another shop."""
    return ApiResponse(data=menu_item_view(MenuService(db).get_item(shop_id, item_id)))


@router.post("", response_model=ApiResponse[MenuItemOutput], status_code=status.HTTP_201_CREATED)
def create_menu_item(
    shop_id: int,
    body: MenuItemCreate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[MenuItemOutput]:
    item = MenuService(db).create_item(shop_id, user, body)
    return ApiResponse(data=menu_item_view(item))


@router.put("/{item_id}", response_model=ApiResponse[MenuItemOutput])
def update_menu_item(
    shop_id: int,
    item_id: int,
    body: MenuItemUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[MenuItemOutput]:
    item = MenuService(db).update_item(shop_id, item_id, user, body)
    return ApiResponse(data=menu_item_view(item))


@router.delete("/{item_id}", response_model=ApiResponse[None])
def delete_menu_item(
    shop_id: int,
    item_id: int,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[None]:
    MenuService(db).delete_item(shop_id, item_id, user)
    return ApiResponse(message="Menu item deleted successfully")


@router.patch("/{item_id}/toggle-availability", response_model=ApiResponse[MenuItemOutput])
def toggle_menu_item_availability(
    shop_id: int,
    item_id: int,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[MenuItemOutput]:
    item = MenuService(db).toggle_availability(shop_id, item_id, user)
    state = "available" if item.is_available else "unavailable"
    return ApiResponse(message=f"Menu item is now {state}", data=menu_item_view(item))
