"""
Review model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdType, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Review(TimestampMixin, Base):
    """A customer's review of a shop, tied to one delivered order."""

    __tablename__ = "review"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=False, index=True
    )
    shop_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("shop.id", ondelete="CASCADE"), nullable=False, index=True
    )
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("customer_order.id"), nullable=False, index=True
    )
    food_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    delivery_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    overall_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(100))
    comment: Mapped[Optional[str]] = mapped_column(Text)
    is_visible: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "order_id", name="uq_review_user_order"),
    )

    user: Mapped["User"] = relationship()
