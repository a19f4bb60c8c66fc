"""
Permission system using Strategy Pattern.

Centralizes the ownership and role predicates that guard every mutating
operation.

Usage:
    from rest_api.services.permissions import PermissionContext

    ctx = PermissionContext(user)
    ctx.require_shop_management(shop)
"""

from .context import PermissionContext
from .strategies import (
    PermissionStrategy,
    CustomerStrategy,
    ShopOwnerStrategy,
    AdminStrategy,
    get_strategy,
)

__all__ = [
    "PermissionContext",
    "PermissionStrategy",
    "CustomerStrategy",
    "ShopOwnerStrategy",
    "AdminStrategy",
    "get_strategy",
]
