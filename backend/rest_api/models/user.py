"""
User model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import Roles
from .base import Base, IdType, TimestampMixin

if TYPE_CHECKING:
    from .shop import Shop


class User(TimestampMixin, Base):
    """
    Marketplace account: a customer, a shop owner or an admin.

    The role is fixed at registration. A shop owner owns at most one shop,
    which is checked when the shop is created rather than by a constraint.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)  # bcrypt hash
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Roles.CUSTOMER)
    phone: Mapped[Optional[str]] = mapped_column(String(30))
    # {street, city, state, zipCode, coordinates}
    address: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Bumped on logout and password change; tokens carry it as "ver"
    token_version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    shops: Mapped[list["Shop"]] = relationship(back_populates="owner")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
