"""
Order, OrderItem and OrderStatusHistory models.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import OrderStatus, PaymentStatus
from .base import Base, IdType, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .user import User
    from .shop import Shop


class Order(TimestampMixin, Base):
    """
    A customer's checkout at one shop.

    Created once; afterwards only status changes, payment updates,
    cancellation and rating mutate it. Orders are never deleted.
    """

    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    order_number: Mapped[str] = mapped_column(String(40), nullable=False, unique=True, index=True)
    customer_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=False, index=True
    )
    shop_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("shop.id"), nullable=False, index=True
    )

    # {street, city, state, zipCode, coordinates, deliveryInstructions}
    delivery_address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    # {phone, email}
    contact_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)

    # Pricing breakdown, in cents
    subtotal_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    delivery_fee_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tax_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tip_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    discount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    coupon_code: Mapped[Optional[str]] = mapped_column(String(50))
    discount_description: Mapped[Optional[str]] = mapped_column(Text)
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    # Payment info
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentStatus.PENDING, index=True
    )
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255))
    payment_intent_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    refunded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    refund_amount_cents: Mapped[Optional[int]] = mapped_column(Integer)

    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=OrderStatus.PLACED, index=True
    )
    estimated_delivery_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    actual_delivery_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Rating (set once, rated_at marks presence)
    food_rating: Mapped[Optional[int]] = mapped_column(Integer)
    delivery_rating: Mapped[Optional[int]] = mapped_column(Integer)
    overall_rating: Mapped[Optional[int]] = mapped_column(Integer)
    rating_review: Mapped[Optional[str]] = mapped_column(Text)
    rated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Cancellation record
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text)
    cancelled_by: Mapped[Optional[str]] = mapped_column(String(20))
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    cancellation_refund_cents: Mapped[Optional[int]] = mapped_column(Integer)

    customer: Mapped["User"] = relationship(foreign_keys=[customer_id])
    shop: Mapped["Shop"] = relationship()
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
    status_history: Mapped[list["OrderStatusHistory"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusHistory.id",
    )

    @property
    def is_rated(self) -> bool:
        return self.rated_at is not None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED

    def change_status(
        self,
        new_status: str,
        note: str | None = None,
        actor_id: int | None = None,
    ) -> None:
        """
        Set the status and append a history entry.

        Does not check the transition table; callers validate first.
        Reaching delivered stamps actual_delivery_time.
        """
        now = utcnow()
        self.status = new_status
        self.status_history.append(
            OrderStatusHistory(
                status=new_status,
                timestamp=now,
                note=note,
                updated_by_id=actor_id,
            )
        )
        if new_status == OrderStatus.DELIVERED:
            self.actual_delivery_time = now

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, number='{self.order_number}', status='{self.status}')>"


class OrderItem(Base):
    """
    One line of an order with its price snapshot.

    variant: {name, price_cents} when a matching variant was chosen.
    add_ons: [{name, price_cents}] for matched add-ons only.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("customer_order.id", ondelete="CASCADE"), nullable=False, index=True
    )
    menu_item_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("menu_item.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    variant: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    add_ons: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)
    item_total_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    order: Mapped["Order"] = relationship(back_populates="items")


class OrderStatusHistory(Base):
    """Append-only audit log entry of an order status change."""

    __tablename__ = "order_status_history"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("customer_order.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text)
    updated_by_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=True
    )

    order: Mapped["Order"] = relationship(back_populates="status_history")
