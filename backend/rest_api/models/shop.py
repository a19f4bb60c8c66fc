"""
Shop and MenuItem models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, IdType, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Shop(TimestampMixin, Base):
    """
    A restaurant selling through the marketplace.

    Ratings are kept as running sums plus a count so each review insert or
    removal updates the aggregate in constant time.
    """

    __tablename__ = "shop"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    cuisine: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    # {street, city, state, zipCode, coordinates}
    address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    image: Mapped[Optional[str]] = mapped_column(Text)

    # Operational fields consumed by order creation
    delivery_fee_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    minimum_order_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    delivery_time_min: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    delivery_time_max: Mapped[int] = mapped_column(Integer, default=45, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    is_open: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    total_orders: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    # Running review aggregates
    rating_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rating_overall_sum: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rating_food_sum: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rating_delivery_sum: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    owner: Mapped["User"] = relationship(back_populates="shops")
    menu_items: Mapped[list["MenuItem"]] = relationship(
        back_populates="shop",
        cascade="all, delete-orphan",
    )

    def _average(self, total: int) -> float:
        if self.rating_count == 0:
            return 0.0
        return round(total / self.rating_count, 1)

    @property
    def rating_average(self) -> float:
        return self._average(self.rating_overall_sum)

    @property
    def food_rating_average(self) -> float:
        return self._average(self.rating_food_sum)

    @property
    def delivery_rating_average(self) -> float:
        return self._average(self.rating_delivery_sum)

    def accepts_orders(self) -> bool:
        return self.is_active and self.is_open


class MenuItem(TimestampMixin, Base):
    """
    A dish sold by exactly one shop.

    variants: [{name, price_cents, description}], named price overrides
    add_ons: [{name, price_cents, category}], named price supplements
    """

    __tablename__ = "menu_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    shop_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("shop.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    image: Mapped[Optional[str]] = mapped_column(Text)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_popular: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    preparation_time: Mapped[int] = mapped_column(Integer, default=15, nullable=False)
    variants: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    add_ons: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    total_orders: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    shop: Mapped["Shop"] = relationship(back_populates="menu_items")

    def find_variant(self, name: str | None) -> dict[str, Any] | None:
        """Variant with the given name, or None."""
        if not name:
            return None
        return next((v for v in self.variants or [] if v.get("name") == name), None)

    def find_add_ons(self, names: list[str]) -> list[dict[str, Any]]:
        """Add-ons whose names appear in `names`, in request order. Unknown names are skipped."""
        by_name = {a.get("name"): a for a in self.add_ons or []}
        return [by_name[n] for n in names if n in by_name]
