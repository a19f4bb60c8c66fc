"""
Centralized constants for the backend application.
Avoids magic strings and repeated constants.

Usage:
    from shared.config.constants import Roles, OrderStatus, ORDER_TRANSITIONS

    if status == OrderStatus.PLACED:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants."""

    CUSTOMER: Final[str] = "customer"
    SHOP_OWNER: Final[str] = "shop_owner"
    ADMIN: Final[str] = "admin"

    ALL: Final[list[str]] = [CUSTOMER, SHOP_OWNER, ADMIN]
    # Roles a user may pick for themselves at registration
    SELF_REGISTERABLE: Final[list[str]] = [CUSTOMER, SHOP_OWNER]


# =============================================================================
# Order Status
# =============================================================================


class OrderStatus:
    """Order lifecycle status constants."""

    PLACED: Final[str] = "placed"
    CONFIRMED: Final[str] = "confirmed"
    PREPARING: Final[str] = "preparing"
    READY_FOR_PICKUP: Final[str] = "ready_for_pickup"
    OUT_FOR_DELIVERY: Final[str] = "out_for_delivery"
    DELIVERED: Final[str] = "delivered"
    CANCELLED: Final[str] = "cancelled"
    REFUNDED: Final[str] = "refunded"

    ALL: Final[list[str]] = [
        PLACED, CONFIRMED, PREPARING, READY_FOR_PICKUP,
        OUT_FOR_DELIVERY, DELIVERED, CANCELLED, REFUNDED,
    ]
    TERMINAL: Final[list[str]] = [DELIVERED, CANCELLED, REFUNDED]


# Valid order status transitions (from -> [allowed to states])
# placed → confirmed → preparing → ready_for_pickup → out_for_delivery → delivered
ORDER_TRANSITIONS: Final[dict[str, list[str]]] = {
    OrderStatus.PLACED: [OrderStatus.CONFIRMED, OrderStatus.CANCELLED],
    OrderStatus.CONFIRMED: [OrderStatus.PREPARING, OrderStatus.CANCELLED],
    OrderStatus.PREPARING: [OrderStatus.READY_FOR_PICKUP, OrderStatus.CANCELLED],
    OrderStatus.READY_FOR_PICKUP: [OrderStatus.OUT_FOR_DELIVERY],
    OrderStatus.OUT_FOR_DELIVERY: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [],  # Terminal state
    OrderStatus.CANCELLED: [],  # Terminal state
    OrderStatus.REFUNDED: [],  # Terminal state
}

# States from which the customer may cancel through the cancellation path
CUSTOMER_CANCELLABLE_STATUSES: Final[frozenset[str]] = frozenset({
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
})


class CancelledBy:
    """Who cancelled an order."""

    CUSTOMER: Final[str] = "customer"
    SHOP: Final[str] = "shop"
    ADMIN: Final[str] = "admin"


DEFAULT_CANCELLATION_REASON: Final[str] = "Cancelled by customer"


# =============================================================================
# Payments
# =============================================================================


class PaymentMethod:
    """Payment method constants."""

    CARD: Final[str] = "card"
    CASH: Final[str] = "cash"
    DIGITAL_WALLET: Final[str] = "digital_wallet"

    ALL: Final[list[str]] = [CARD, CASH, DIGITAL_WALLET]


class PaymentStatus:
    """Payment status constants."""

    PENDING: Final[str] = "pending"
    COMPLETED: Final[str] = "completed"
    FAILED: Final[str] = "failed"
    REFUNDED: Final[str] = "refunded"

    ALL: Final[list[str]] = [PENDING, COMPLETED, FAILED, REFUNDED]


class StripeEvent:
    """Webhook event types consumed from the payment processor."""

    PAYMENT_SUCCEEDED: Final[str] = "payment_intent.succeeded"
    PAYMENT_FAILED: Final[str] = "payment_intent.payment_failed"


STRIPE_INTENT_SUCCEEDED: Final[str] = "succeeded"


# =============================================================================
# Pricing
# =============================================================================

# Sales tax applied to every order subtotal, in basis points (800 = 8%)
TAX_RATE_BASIS_POINTS: Final[int] = 800
BASIS_POINTS: Final[int] = 10_000


# =============================================================================
# Catalog
# =============================================================================


class ShopCategory:
    """Shop category constants."""

    ALL: Final[list[str]] = [
        "Fast Food", "Restaurant", "Cafe", "Bakery", "Pizza", "Chinese",
        "Indian", "Italian", "Mexican", "Thai", "Japanese", "American",
        "Desserts", "Healthy", "Vegetarian", "Other",
    ]


class MenuCategory:
    """Menu item category constants."""

    ALL: Final[list[str]] = [
        "Appetizers", "Main Course", "Desserts", "Beverages", "Salads",
        "Soups", "Sandwiches", "Burgers", "Pizza", "Pasta", "Rice",
        "Noodles", "Seafood", "Chicken", "Beef", "Pork", "Vegetarian",
        "Vegan", "Sides", "Breakfast", "Lunch", "Dinner", "Snacks", "Other",
    ]


# =============================================================================
# Validation Limits
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    # Price limits (in cents)
    MIN_PRICE_CENTS: Final[int] = 0
    MAX_PRICE_CENTS: Final[int] = 100_000_00  # $100,000

    # Ratings
    MIN_RATING: Final[int] = 1
    MAX_RATING: Final[int] = 5

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 100
    MAX_DESCRIPTION_LENGTH: Final[int] = 500
    MAX_REVIEW_TITLE_LENGTH: Final[int] = 100
    MAX_REVIEW_TEXT_LENGTH: Final[int] = 500
    MAX_NOTE_LENGTH: Final[int] = 500
    MIN_PASSWORD_LENGTH: Final[int] = 6
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 10
    MAX_PAGE_SIZE: Final[int] = 100

    # Admin dashboard
    DASHBOARD_RECENT_COUNT: Final[int] = 5
    DASHBOARD_TOP_SHOPS: Final[int] = 5


# =============================================================================
# Helper Functions
# =============================================================================


def validate_order_transition(current_status: str, new_status: str) -> bool:
    """
    Validate that an order status transition is allowed.

    Returns True if transition is valid, False otherwise.
    """
    allowed = ORDER_TRANSITIONS.get(current_status, [])
    return new_status in allowed


def get_allowed_order_transitions(current_status: str) -> list[str]:
    """Get the statuses an order may move to from its current status."""
    return list(ORDER_TRANSITIONS.get(current_status, []))
