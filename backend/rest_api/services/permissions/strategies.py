"""
Permission Strategy implementations.
Strategy Pattern for role-based access control.

Each strategy answers ownership questions for one role. Every rule reduces
to one of two predicates:
- ownership: shop.owner_id == user.id, order.customer_id == user.id
- role: user.role == admin
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from shared.config.constants import Roles


# =============================================================================
# Entity Protocols
# =============================================================================


@runtime_checkable
class HasOwner(Protocol):
    """Shop-like entity."""
    owner_id: int


@runtime_checkable
class HasCustomer(Protocol):
    """Order-like entity."""
    customer_id: int
    shop_id: int


# =============================================================================
# Base Strategy
# =============================================================================


class PermissionStrategy(ABC):
    """Base permission strategy."""

    @abstractmethod
    def can_manage_shop(self, user_id: int, shop: HasOwner) -> bool:
        """Update, delete, toggle, manage menu and order status of a shop."""
        ...

    def is_order_customer(self, user_id: int, order: HasCustomer) -> bool:
        return order.customer_id == user_id

    def can_view_order(self, user_id: int, order: HasCustomer, shop: HasOwner | None) -> bool:
        if self.is_order_customer(user_id, order):
            return True
        return shop is not None and self.can_manage_shop(user_id, shop)

    def can_delete_review(self, user_id: int, review_user_id: int) -> bool:
        return review_user_id == user_id


# =============================================================================
# Role Strategies
# =============================================================================


class CustomerStrategy(PermissionStrategy):
    """Customers own nothing but their orders and reviews."""

    def can_manage_shop(self, user_id: int, shop: HasOwner) -> bool:
        return False


class ShopOwnerStrategy(PermissionStrategy):
    """Shop owners manage the shop they own."""

    def can_manage_shop(self, user_id: int, shop: HasOwner) -> bool:
        return shop.owner_id == user_id


class AdminStrategy(PermissionStrategy):
    """Admins may act on every shop, order and review."""

    def can_manage_shop(self, user_id: int, shop: HasOwner) -> bool:
        return True

    def can_view_order(self, user_id: int, order: HasCustomer, shop: HasOwner | None) -> bool:
        return True

    def can_delete_review(self, user_id: int, review_user_id: int) -> bool:
        return True


# =============================================================================
# Strategy Registry
# =============================================================================


STRATEGY_REGISTRY: dict[str, PermissionStrategy] = {
    Roles.CUSTOMER: CustomerStrategy(),
    Roles.SHOP_OWNER: ShopOwnerStrategy(),
    Roles.ADMIN: AdminStrategy(),
}


def get_strategy(role: str) -> PermissionStrategy:
    """Strategy for a role. Unknown roles get the least privileged one."""
    return STRATEGY_REGISTRY.get(role, STRATEGY_REGISTRY[Roles.CUSTOMER])
