"""
Permission Context - Main entry point for permission checks.
"""

from typing import Any

from shared.config.constants import Roles
from shared.utils.exceptions import (
    BusinessRuleError,
    InsufficientRoleError,
    NotAuthorizedError,
)

from .strategies import HasCustomer, HasOwner, PermissionStrategy, get_strategy


class PermissionContext:
    """
    Context for performing permission checks on behalf of one user.

    Automatically selects the strategy for the user's role.

    Usage:
        ctx = PermissionContext(user)

        ctx.require_shop_management(shop)
        ctx.require_order_customer(order, "cancel this order")
        if ctx.can_view_order(order, order.shop):
            ...
    """

    def __init__(self, user: Any):
        self._user = user
        self._strategy = get_strategy(user.role)

    @property
    def user(self) -> Any:
        return self._user

    @property
    def user_id(self) -> int:
        return self._user.id

    @property
    def role(self) -> str:
        return self._user.role

    @property
    def strategy(self) -> PermissionStrategy:
        return self._strategy

    @property
    def is_admin(self) -> bool:
        return self.role == Roles.ADMIN

    # -------------------------------------------------------------------------
    # Role checks
    # -------------------------------------------------------------------------

    def has_role(self, *roles: str) -> bool:
        return self.role in roles

    def require_roles(self, *roles: str) -> None:
        """Raise if the user's role is not one of `roles`."""
        if not self.has_role(*roles):
            raise InsufficientRoleError(self.role, list(roles), user_id=self.user_id)

    # -------------------------------------------------------------------------
    # Shop ownership
    # -------------------------------------------------------------------------

    def can_manage_shop(self, shop: HasOwner) -> bool:
        return self._strategy.can_manage_shop(self.user_id, shop)

    def require_shop_management(self, shop: HasOwner, action: str = "manage this shop") -> None:
        if not self.can_manage_shop(shop):
            raise NotAuthorizedError(action, user_id=self.user_id, shop_id=getattr(shop, "id", None))

    # -------------------------------------------------------------------------
    # Order ownership
    # -------------------------------------------------------------------------

    def is_order_customer(self, order: HasCustomer) -> bool:
        return self._strategy.is_order_customer(self.user_id, order)

    def require_order_customer(self, order: HasCustomer, action: str) -> None:
        """Customer-only order actions: cancel, rate, pay, review."""
        if not self.is_order_customer(order):
            raise NotAuthorizedError(action, user_id=self.user_id, order_id=getattr(order, "id", None))

    def can_view_order(self, order: HasCustomer, shop: HasOwner | None) -> bool:
        return self._strategy.can_view_order(self.user_id, order, shop)

    def require_order_view(self, order: HasCustomer, shop: HasOwner | None) -> None:
        if not self.can_view_order(order, shop):
            raise NotAuthorizedError("access this order", user_id=self.user_id, order_id=getattr(order, "id", None))

    # -------------------------------------------------------------------------
    # Reviews & accounts
    # -------------------------------------------------------------------------

    def require_review_deletion(self, review_user_id: int) -> None:
        if not self._strategy.can_delete_review(self.user_id, review_user_id):
            raise NotAuthorizedError("delete this review", user_id=self.user_id)

    def require_not_self(self, target_user_id: int, action: str = "deactivate your own account") -> None:
        """Admins cannot lock themselves out through account administration."""
        if target_user_id == self.user_id:
            raise BusinessRuleError(
                f"Cannot {action}",
                user_id=self.user_id,
            )
