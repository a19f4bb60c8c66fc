"""
Services module for business logic.

- domain/: Application services (business logic) - USE THESE
- payments/: Stripe gateway and webhook signature verification
- events/: Order notification scheduling
- permissions/: Strategy pattern for role-based access control
- views.py: Entity → output schema mapping

Usage:
    from rest_api.services.domain import OrderService
    service = OrderService(db)
    order = service.create_order(user, body)
"""

from .permissions import PermissionContext, PermissionStrategy, get_strategy
from .domain import (
    AdminService,
    MenuService,
    OrderService,
    PaymentService,
    ReviewService,
    ShopService,
)
from .events import schedule_order_event

__all__ = [
    # Permissions
    "PermissionContext",
    "PermissionStrategy",
    "get_strategy",
    # Domain services
    "ShopService",
    "MenuService",
    "OrderService",
    "ReviewService",
    "PaymentService",
    "AdminService",
    # Events
    "schedule_order_event",
]
