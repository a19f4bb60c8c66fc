"""
Shops router.
Public shop browsing plus owner/admin shop management.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import Roles
from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    ApiResponse,
    ListResponse,
    NearbyShopOutput,
    PaginatedResponse,
    ReviewOutput,
    ShopCategory,
    ShopCreate,
    ShopOutput,
    ShopStats,
    ShopUpdate,
)
from rest_api.models import User
from rest_api.routers._common import (
    Pagination,
    current_user,
    get_pagination,
    paginated,
    require_roles,
)
from rest_api.services.domain import ReviewService, ShopFilters, ShopService
from rest_api.services.views import review_view, shop_view


router = APIRouter(prefix="/api/shops", tags=["shops"])


@router.get("", response_model=PaginatedResponse[ShopOutput])
def list_shops(
    category: ShopCategory | None = Query(default=None),
    search: str | None = Query(default=None, max_length=100),
    is_open: bool | None = Query(default=None, alias="isOpen"),
    featured: bool | None = Query(default=None),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> PaginatedResponse[ShopOutput]:
    """List active shops, newest first."""
    filters = ShopFilters(category=category, search=search, is_open=is_open, featured=featured)
    shops, total = ShopService(db).list_shops(filters, pagination.offset, pagination.limit)
    return paginated([shop_view(s) for s in shops], total, pagination)


# Static paths are declared before /{shop_id}
@router.get("/nearby", response_model=ListResponse[NearbyShopOutput])
def list_nearby_shops(
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
    radius: float = Query(default=10, gt=0, le=100, description="Radius in km"),
    db: Session = Depends(get_db),
) -> ListResponse[NearbyShopOutput]:
    """Active, open shops within `radius` km of (lat, lng), nearest first."""
    nearby = ShopService(db).list_nearby(lat, lng, radius)
    data = [
        NearbyShopOutput(**shop_view(shop).model_dump(), distance_km=round(distance, 2))
        for shop, distance in nearby
    ]
    return ListResponse(count=len(data), data=data)


@router.get("/owner/my-shops", response_model=ApiResponse[list[ShopOutput]])
def list_my_shops(
    user: User = Depends(require_roles(Roles.SHOP_OWNER, Roles.ADMIN)),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ShopOutput]]:
    """Shops owned by the authenticated user."""
    shops = ShopService(db).list_owner_shops(user.id)
    return ApiResponse(data=[shop_view(s) for s in shops])


@router.get("/{shop_id}", response_model=ApiResponse[ShopOutput])
def get_shop(shop_id: int, db: Session = Depends(get_db)) -> ApiResponse[ShopOutput]:
    return ApiResponse(data=shop_view(ShopService(db).get_shop(shop_id)))


@router.post("", response_model=ApiResponse[ShopOutput], status_code=status.HTTP_201_CREATED)
def create_shop(
    body: ShopCreate,
    user: User = Depends(require_roles(Roles.SHOP_OWNER, Roles.ADMIN)),
    db: Session = Depends(get_db),
) -> ApiResponse[ShopOutput]:
    """
    Create a shop owned by the authenticated user.

    A shop owner may create only one shop; admins are not limited.
    """
    shop = ShopService(db).create_shop(user, body)
    return ApiResponse(data=shop_view(shop))


@router.put("/{shop_id}", response_model=ApiResponse[ShopOutput])
def update_shop(
    shop_id: int,
    body: ShopUpdate,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ShopOutput]:
    shop = ShopService(db).update_shop(shop_id, user, body)
    return ApiResponse(data=shop_view(shop))


@router.delete("/{shop_id}", response_model=ApiResponse[None])
def delete_shop(
    shop_id: int,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[None]:
    """Delete a shop and its menu items. Owner or admin only."""
    ShopService(db).delete_shop(shop_id, user)
    return ApiResponse(message="Shop deleted successfully")


@router.patch("/{shop_id}/toggle-status", response_model=ApiResponse[ShopOutput])
def toggle_shop_status(
    shop_id: int,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ShopOutput]:
    """Open or close the shop for new orders."""
    shop = ShopService(db).toggle_open(shop_id, user)
    state = "open" if shop.is_open else "closed"
    return ApiResponse(message=f"Shop is now {state}", data=shop_view(shop))


@router.get("/{shop_id}/stats", response_model=ApiResponse[ShopStats])
def get_shop_stats(
    shop_id: int,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ShopStats]:
    return ApiResponse(data=ShopService(db).get_stats(shop_id, user))


@router.get("/{shop_id}/reviews", response_model=PaginatedResponse[ReviewOutput])
def list_shop_reviews(
    shop_id: int,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> PaginatedResponse[ReviewOutput]:
    """Visible reviews of a shop, newest first."""
    reviews, total = ReviewService(db).list_shop_reviews(shop_id, pagination.offset, pagination.limit)
    return paginated([review_view(r) for r in reviews], total, pagination)
