"""
Order Domain Service.

Checkout, status lifecycle, cancellation, rating and payment recording.
All validation happens before the first write so a rejected checkout
leaves no order and no counter changes behind.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from shared.config.constants import (
    CUSTOMER_CANCELLABLE_STATUSES,
    DEFAULT_CANCELLATION_REASON,
    CancelledBy,
    OrderStatus,
    PaymentStatus,
    Roles,
    validate_order_transition,
)
from shared.config.logging import orders_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    BusinessRuleError,
    InvalidStateError,
    InvalidTransitionError,
    MinimumOrderError,
    NotFoundError,
)
from shared.utils.schemas import (
    CreateOrderRequest,
    RateOrderRequest,
)
from rest_api.models import MenuItem, Order, OrderItem, Shop, User, utcnow
from rest_api.services.permissions import PermissionContext
from .pricing import calculate_pricing, price_line


def generate_order_number(now: datetime | None = None) -> str:
    """
    Human-readable order number: ORD<epoch-ms><6 hex>.

    The random suffix replaces a count-derived sequence; the unique
    constraint on order_number backs it.
    """
    now = now or utcnow()
    millis = int(now.timestamp() * 1000)
    return f"ORD{millis}{uuid.uuid4().hex[:6].upper()}"


@dataclass
class OrderFilters:
    status: str | None = None
    payment_status: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class OrderService:
    """
    Domain service for Order operations.

    Usage:
        service = OrderService(db)
        order = service.create_order(user, body)
    """

    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Loading
    # =========================================================================

    def _base_query(self):
        return select(Order).options(
            selectinload(Order.items),
            selectinload(Order.status_history),
            selectinload(Order.shop),
        )

    def get_order(self, order_id: int) -> Order:
        order = self._db.scalar(self._base_query().where(Order.id == order_id))
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def get_order_for_user(self, order_id: int, user: User) -> Order:
        """Order visible to its customer, the owning shop's owner or an admin."""
        order = self.get_order(order_id)
        PermissionContext(user).require_order_view(order, order.shop)
        return order

    # =========================================================================
    # Checkout
    # =========================================================================

    def create_order(self, customer: User, request: CreateOrderRequest) -> Order:
        """
        Validate the cart against the shop's live menu, price it and persist the order.

        Raises:
            NotFoundError: shop or menu item does not exist
            BusinessRuleError: shop closed/inactive, foreign or unavailable item
            MinimumOrderError: subtotal below the shop's minimum order
        """
        shop = self._db.scalar(select(Shop).where(Shop.id == request.shop))
        if shop is None:
            raise NotFoundError("Shop", request.shop)
        if not shop.accepts_orders():
            raise BusinessRuleError(
                "Shop is currently not accepting orders",
                shop_id=shop.id,
                is_active=shop.is_active,
                is_open=shop.is_open,
            )

        requested_ids = {line.menu_item_id for line in request.items}
        menu_items = {
            item.id: item
            for item in self._db.scalars(select(MenuItem).where(MenuItem.id.in_(requested_ids)))
        }

        priced_lines = []
        order_items: list[OrderItem] = []
        for line in request.items:
            menu_item = menu_items.get(line.menu_item_id)
            if menu_item is None:
                raise NotFoundError("Menu item", line.menu_item_id)
            if menu_item.shop_id != shop.id:
                raise BusinessRuleError(
                    "All items must be from the same shop",
                    shop_id=shop.id,
                    menu_item_id=menu_item.id,
                )
            if not menu_item.is_available:
                raise BusinessRuleError(
                    f"{menu_item.name} is currently not available",
                    menu_item_id=menu_item.id,
                )

            variant = menu_item.find_variant(line.variant)
            add_ons = menu_item.find_add_ons(line.add_ons)
            if len(add_ons) != len(line.add_ons):
                matched = {a["name"] for a in add_ons}
                logger.info(
                    "Ignoring unknown add-ons",
                    menu_item_id=menu_item.id,
                    ignored=[name for name in line.add_ons if name not in matched],
                )

            priced = price_line(menu_item.price_cents, line.quantity, variant, add_ons)
            priced_lines.append(priced)
            order_items.append(
                OrderItem(
                    menu_item_id=menu_item.id,
                    name=menu_item.name,
                    unit_price_cents=priced.unit_price_cents,
                    quantity=line.quantity,
                    variant=(
                        {"name": variant["name"], "price_cents": int(variant["price_cents"])}
                        if variant is not None else None
                    ),
                    add_ons=[{"name": a["name"], "price_cents": int(a["price_cents"])} for a in add_ons],
                    special_instructions=line.special_instructions,
                    item_total_cents=priced.total_cents,
                )
            )

        pricing = calculate_pricing(
            priced_lines,
            delivery_fee_cents=shop.delivery_fee_cents,
            tip_cents=request.tip_cents,
        )
        if pricing.subtotal_cents < shop.minimum_order_cents:
            raise MinimumOrderError(shop.minimum_order_cents, pricing.subtotal_cents, shop_id=shop.id)

        now = utcnow()
        order = Order(
            order_number=generate_order_number(now),
            customer_id=customer.id,
            shop_id=shop.id,
            delivery_address=request.delivery_address.model_dump(by_alias=True, exclude_none=True),
            contact_info=request.contact_info.model_dump(by_alias=True, exclude_none=True),
            special_instructions=request.special_instructions,
            subtotal_cents=pricing.subtotal_cents,
            delivery_fee_cents=pricing.delivery_fee_cents,
            tax_cents=pricing.tax_cents,
            tip_cents=pricing.tip_cents,
            discount_cents=pricing.discount_cents,
            total_cents=pricing.total_cents,
            payment_method=request.payment_info.method,
            payment_status=PaymentStatus.PENDING,
            estimated_delivery_time=now + timedelta(minutes=shop.delivery_time_max),
            items=order_items,
        )
        order.change_status(OrderStatus.PLACED, note="Order placed", actor_id=customer.id)
        self._db.add(order)

        for line in request.items:
            menu_items[line.menu_item_id].total_orders += line.quantity
        shop.total_orders += 1

        safe_commit(self._db)

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            shop_id=shop.id,
            customer_id=customer.id,
            total_cents=order.total_cents,
        )
        return self.get_order(order.id)

    # =========================================================================
    # Listings
    # =========================================================================

    def _filtered(self, query, filters: OrderFilters):
        if filters.status:
            query = query.where(Order.status == filters.status)
        if filters.payment_status:
            query = query.where(Order.payment_status == filters.payment_status)
        if filters.start_date:
            query = query.where(Order.created_at >= _as_utc(filters.start_date))
        if filters.end_date:
            query = query.where(Order.created_at <= _as_utc(filters.end_date))
        return query

    def _page(self, where, filters: OrderFilters, offset: int, limit: int) -> tuple[list[Order], int]:
        total = self._db.scalar(
            self._filtered(select(func.count(Order.id)).where(*where), filters)
        ) or 0
        orders = self._db.scalars(
            self._filtered(self._base_query().where(*where), filters)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return list(orders), total

    def list_customer_orders(
        self, customer_id: int, filters: OrderFilters, offset: int, limit: int
    ) -> tuple[list[Order], int]:
        return self._page([Order.customer_id == customer_id], filters, offset, limit)

    def list_shop_orders(
        self, shop_id: int, user: User, filters: OrderFilters, offset: int, limit: int
    ) -> tuple[list[Order], int]:
        shop = self._db.scalar(select(Shop).where(Shop.id == shop_id))
        if shop is None:
            raise NotFoundError("Shop", shop_id)
        PermissionContext(user).require_shop_management(shop, "view shop orders")
        return self._page([Order.shop_id == shop_id], filters, offset, limit)

    def list_all_orders(self, filters: OrderFilters, offset: int, limit: int) -> tuple[list[Order], int]:
        return self._page([], filters, offset, limit)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def update_status(self, order_id: int, user: User, new_status: str, note: str | None = None) -> Order:
        """
        Move an order along the transition table.

        Only the owning shop's owner or an admin may do this.
        """
        order = self.get_order(order_id)
        PermissionContext(user).require_shop_management(order.shop, "update this order")

        if not validate_order_transition(order.status, new_status):
            raise InvalidTransitionError(order.status, new_status, order_id=order.id)

        order.change_status(new_status, note=note, actor_id=user.id)
        if new_status == OrderStatus.CANCELLED:
            order.cancelled_at = utcnow()
            order.cancelled_by = CancelledBy.ADMIN if user.role == Roles.ADMIN else CancelledBy.SHOP
            order.cancellation_reason = note

        safe_commit(self._db)
        logger.info("Order status updated", order_id=order.id, status=new_status, actor_id=user.id)
        return order

    def cancel_order(self, order_id: int, user: User, reason: str | None = None) -> Order:
        """Customer cancellation, allowed from placed or confirmed only."""
        order = self.get_order(order_id)
        PermissionContext(user).require_order_customer(order, "cancel this order")

        if order.status not in CUSTOMER_CANCELLABLE_STATUSES:
            raise InvalidStateError(
                "Order cannot be cancelled at this stage",
                current_state=order.status,
                order_id=order.id,
            )

        reason = reason or DEFAULT_CANCELLATION_REASON
        order.change_status(OrderStatus.CANCELLED, note=reason, actor_id=user.id)
        order.cancellation_reason = reason
        order.cancelled_by = CancelledBy.CUSTOMER
        order.cancelled_at = utcnow()

        safe_commit(self._db)
        logger.info("Order cancelled by customer", order_id=order.id, customer_id=user.id)
        return order

    def add_rating(self, order_id: int, user: User, request: RateOrderRequest) -> Order:
        """Attach the one-time rating of a delivered order."""
        order = self.get_order(order_id)
        PermissionContext(user).require_order_customer(order, "rate this order")

        if order.status != OrderStatus.DELIVERED:
            raise InvalidStateError(
                "Can only rate delivered orders",
                current_state=order.status,
                order_id=order.id,
            )
        if order.is_rated:
            raise BusinessRuleError("Order has already been rated", order_id=order.id)

        order.food_rating = request.rating.food_rating
        order.delivery_rating = request.rating.delivery_rating
        order.overall_rating = request.rating.overall_rating
        order.rating_review = request.review
        order.rated_at = utcnow()

        safe_commit(self._db)
        logger.info("Order rated", order_id=order.id, overall=order.overall_rating)
        return order

    # =========================================================================
    # Payment recording
    # =========================================================================

    def get_order_for_payment(self, order_id: int, user: User) -> Order:
        order = self.get_order(order_id)
        PermissionContext(user).require_order_customer(order, "pay for this order")
        return order

    def attach_payment_intent(self, order: Order, payment_intent_id: str) -> Order:
        order.payment_intent_id = payment_intent_id
        safe_commit(self._db)
        return order

    def mark_paid(self, order: Order, transaction_id: str) -> bool:
        """
        Record a successful payment.

        Safe to apply more than once: the client confirmation call and the
        webhook may both arrive. Returns True only for the call that changed
        the order.
        """
        if order.is_paid:
            logger.info("Payment already recorded", order_id=order.id, transaction_id=transaction_id)
            return False

        order.payment_status = PaymentStatus.COMPLETED
        order.transaction_id = transaction_id
        order.paid_at = utcnow()
        if order.status == OrderStatus.PLACED:
            order.change_status(OrderStatus.CONFIRMED, note="Payment received")

        safe_commit(self._db)
        logger.info("Payment recorded", order_id=order.id, transaction_id=transaction_id)
        return True

    def mark_payment_failed(self, order: Order) -> bool:
        """Record a failed payment unless the order was already paid."""
        if order.is_paid:
            logger.warning("Ignoring payment failure for paid order", order_id=order.id)
            return False
        order.payment_status = PaymentStatus.FAILED
        safe_commit(self._db)
        logger.info("Payment failed", order_id=order.id)
        return True


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
