"""
Orders router.
Checkout, order listings, the status lifecycle, cancellation and rating.

Lifecycle notifications are published after the response via BackgroundTasks.
"""

from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from shared.config.constants import Roles
from shared.infrastructure.db import get_db
from shared.infrastructure.events import (
    NEW_ORDER,
    ORDER_CANCELLED,
    ORDER_CREATED,
    ORDER_STATUS_UPDATED,
)
from shared.utils.schemas import (
    ApiResponse,
    CancelOrderRequest,
    CreateOrderRequest,
    OrderOutput,
    OrderStatus,
    PaginatedResponse,
    PaymentStatus,
    RateOrderRequest,
    UpdateOrderStatusRequest,
)
from rest_api.models import User
from rest_api.routers._common import (
    Pagination,
    current_user,
    get_pagination,
    paginated,
    require_roles,
)
from rest_api.services.domain import OrderFilters, OrderService
from rest_api.services.events import schedule_order_event
from rest_api.services.views import order_view


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=ApiResponse[OrderOutput], status_code=status.HTTP_201_CREATED)
def create_order(
    body: CreateOrderRequest,
    background_tasks: BackgroundTasks,
    user: User = Depends(require_roles(Roles.CUSTOMER)),
    db: Session = Depends(get_db),
) -> ApiResponse[OrderOutput]:
    """
    Place an order.

    Items are validated against the shop's live menu and priced server-side.
    Nothing is persisted when any check fails.
    """
    order = OrderService(db).create_order(user, body)

    schedule_order_event(background_tasks, NEW_ORDER, order, actor_user_id=user.id, actor_role=user.role)
    schedule_order_event(background_tasks, ORDER_CREATED, order, actor_user_id=user.id, actor_role=user.role)

    return ApiResponse(data=order_view(order))


@router.get("/my-orders", response_model=PaginatedResponse[OrderOutput])
def list_my_orders(
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    user: User = Depends(require_roles(Roles.CUSTOMER)),
    db: Session = Depends(get_db),
) -> PaginatedResponse[OrderOutput]:
    orders, total = OrderService(db).list_customer_orders(
        user.id, OrderFilters(status=order_status), pagination.offset, pagination.limit
    )
    return paginated([order_view(o) for o in orders], total, pagination)


@router.get("/shop/{shop_id}", response_model=PaginatedResponse[OrderOutput])
def list_shop_orders(
    shop_id: int,
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    pagination: Pagination = Depends(get_pagination),
    user: User = Depends(require_roles(Roles.SHOP_OWNER, Roles.ADMIN)),
    db: Session = Depends(get_db),
) -> PaginatedResponse[OrderOutput]:
    """Orders of one shop. Owner of that shop or admin."""
    filters = OrderFilters(status=order_status, start_date=start_date, end_date=end_date)
    orders, total = OrderService(db).list_shop_orders(
        shop_id, user, filters, pagination.offset, pagination.limit
    )
    return paginated([order_view(o) for o in orders], total, pagination)


@router.get("", response_model=PaginatedResponse[OrderOutput])
def list_all_orders(
    order_status: OrderStatus | None = Query(default=None, alias="status"),
    payment_status: PaymentStatus | None = Query(default=None, alias="paymentStatus"),
    pagination: Pagination = Depends(get_pagination),
    user: User = Depends(require_roles(Roles.ADMIN)),
    db: Session = Depends(get_db),
) -> PaginatedResponse[OrderOutput]:
    filters = OrderFilters(status=order_status, payment_status=payment_status)
    orders, total = OrderService(db).list_all_orders(filters, pagination.offset, pagination.limit)
    return paginated([order_view(o) for o in orders], total, pagination)


@router.get("/{order_id}", response_model=ApiResponse[OrderOutput])
def get_order(
    order_id: int,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[OrderOutput]:
    """Visible to the ordering customer, the shop owner and admins."""
    order = OrderService(db).get_order_for_user(order_id, user)
    return ApiResponse(data=order_view(order))


@router.patch("/{order_id}/status", response_model=ApiResponse[OrderOutput])
def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    background_tasks: BackgroundTasks,
    user: User = Depends(require_roles(Roles.SHOP_OWNER, Roles.ADMIN)),
    db: Session = Depends(get_db),
) -> ApiResponse[OrderOutput]:
    """
    Move the order to the next status.

    Only transitions listed in the transition table are accepted; anything
    else is a 400 naming both statuses.
    """
    order = OrderService(db).update_status(order_id, user, body.status, body.note)

    schedule_order_event(
        background_tasks, ORDER_STATUS_UPDATED, order,
        actor_user_id=user.id, actor_role=user.role,
        extra={"note": body.note} if body.note else None,
    )
    return ApiResponse(data=order_view(order))


@router.patch("/{order_id}/cancel", response_model=ApiResponse[OrderOutput])
def cancel_order(
    order_id: int,
    background_tasks: BackgroundTasks,
    body: CancelOrderRequest | None = None,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[OrderOutput]:
    """Customer cancellation, only while the order is placed or confirmed."""
    reason = body.reason if body else None
    order = OrderService(db).cancel_order(order_id, user, reason)

    schedule_order_event(
        background_tasks, ORDER_CANCELLED, order,
        actor_user_id=user.id, actor_role=user.role,
        extra={"reason": order.cancellation_reason},
    )
    return ApiResponse(message="Order cancelled successfully", data=order_view(order))


@router.post("/{order_id}/rating", response_model=ApiResponse[OrderOutput])
def rate_order(
    order_id: int,
    body: RateOrderRequest,
    user: User = Depends(current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[OrderOutput]:
    order = OrderService(db).add_rating(order_id, user, body)
    return ApiResponse(message="Rating added successfully", data=order_view(order))
