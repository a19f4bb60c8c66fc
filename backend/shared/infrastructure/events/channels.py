"""
Redis Channel Naming.

Subscriber groups are scoped either to a shop or to a customer.
"""

from __future__ import annotations


def _validate_positive_id(id_value: int, name: str) -> None:
    """Validate that ID is a positive integer."""
    if not isinstance(id_value, int) or id_value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {id_value}")


def channel_shop(shop_id: int) -> str:
    """Channel for notifications to a shop's staff (the owner dashboard)."""
    _validate_positive_id(shop_id, "shop_id")
    return f"shop:{shop_id}"


def channel_customer(customer_id: int) -> str:
    """Channel for notifications to a single customer."""
    _validate_positive_id(customer_id, "customer_id")
    return f"customer:{customer_id}"
