"""
SQLAlchemy ORM Models Package.

Models are organized into domain-specific modules:
- base: Base class, TimestampMixin, IdType
- user: User
- shop: Shop, MenuItem
- order: Order, OrderItem, OrderStatusHistory
- review: Review
"""

from .base import Base, TimestampMixin, IdType, utcnow
from .user import User
from .shop import Shop, MenuItem
from .order import Order, OrderItem, OrderStatusHistory
from .review import Review

__all__ = [
    "Base",
    "TimestampMixin",
    "IdType",
    "utcnow",
    "User",
    "Shop",
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatusHistory",
    "Review",
]
