"""
Tests for role strategies and the permission context.
"""

from types import SimpleNamespace

import pytest

from rest_api.services.permissions import (
    AdminStrategy,
    CustomerStrategy,
    PermissionContext,
    ShopOwnerStrategy,
    get_strategy,
)
from shared.utils.exceptions import BusinessRuleError, InsufficientRoleError, NotAuthorizedError


def user(user_id: int, role: str):
    return SimpleNamespace(id=user_id, role=role)


SHOP = SimpleNamespace(id=10, owner_id=2)
ORDER = SimpleNamespace(id=100, customer_id=1, shop_id=10)


class TestStrategies:
    """Ownership predicates per role."""

    def test_registry(self):
        assert isinstance(get_strategy("customer"), CustomerStrategy)
        assert isinstance(get_strategy("shop_owner"), ShopOwnerStrategy)
        assert isinstance(get_strategy("admin"), AdminStrategy)

    def test_unknown_role_gets_least_privilege(self):
        assert isinstance(get_strategy("superuser"), CustomerStrategy)

    def test_shop_management(self):
        assert ShopOwnerStrategy().can_manage_shop(2, SHOP) is True
        assert ShopOwnerStrategy().can_manage_shop(3, SHOP) is False
        assert CustomerStrategy().can_manage_shop(2, SHOP) is False
        assert AdminStrategy().can_manage_shop(99, SHOP) is True

    def test_order_visibility(self):
        assert CustomerStrategy().can_view_order(1, ORDER, SHOP) is True
        assert CustomerStrategy().can_view_order(5, ORDER, SHOP) is False
        assert ShopOwnerStrategy().can_view_order(2, ORDER, SHOP) is True
        assert ShopOwnerStrategy().can_view_order(3, ORDER, SHOP) is False
        assert ShopOwnerStrategy().can_view_order(2, ORDER, None) is False
        assert AdminStrategy().can_view_order(99, ORDER, None) is True

    def test_review_deletion(self):
        assert CustomerStrategy().can_delete_review(1, 1) is True
        assert CustomerStrategy().can_delete_review(1, 2) is False
        assert AdminStrategy().can_delete_review(99, 1) is True


class TestPermissionContext:
    """require_* helpers raise the API's errors."""

    def test_require_roles(self):
        PermissionContext(user(1, "admin")).require_roles("admin")
        with pytest.raises(InsufficientRoleError) as exc_info:
            PermissionContext(user(1, "customer")).require_roles("shop_owner", "admin")
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "User role customer is not authorized to access this route"

    def test_require_shop_management(self):
        PermissionContext(user(2, "shop_owner")).require_shop_management(SHOP)
        with pytest.raises(NotAuthorizedError) as exc_info:
            PermissionContext(user(3, "shop_owner")).require_shop_management(SHOP, "update this shop")
        assert exc_info.value.detail == "Not authorized to update this shop"

    def test_order_customer_only(self):
        """Even an admin is not the ordering customer."""
        PermissionContext(user(1, "customer")).require_order_customer(ORDER, "cancel this order")
        with pytest.raises(NotAuthorizedError):
            PermissionContext(user(99, "admin")).require_order_customer(ORDER, "cancel this order")

    def test_require_order_view(self):
        PermissionContext(user(2, "shop_owner")).require_order_view(ORDER, SHOP)
        with pytest.raises(NotAuthorizedError):
            PermissionContext(user(5, "customer")).require_order_view(ORDER, SHOP)

    def test_require_review_deletion(self):
        PermissionContext(user(99, "admin")).require_review_deletion(1)
        with pytest.raises(NotAuthorizedError):
            PermissionContext(user(2, "shop_owner")).require_review_deletion(1)

    def test_require_not_self(self):
        PermissionContext(user(1, "admin")).require_not_self(2)
        with pytest.raises(BusinessRuleError):
            PermissionContext(user(1, "admin")).require_not_self(1)

    def test_is_admin(self):
        assert PermissionContext(user(1, "admin")).is_admin is True
        assert PermissionContext(user(1, "customer")).is_admin is False
