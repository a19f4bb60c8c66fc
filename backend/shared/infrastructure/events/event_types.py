"""
Event Type Constants.

Defines the notification event types published over Redis pub/sub.
"""

# =============================================================================
# Order lifecycle events
# =============================================================================

NEW_ORDER = "new_order"  # Shop: a customer placed an order
ORDER_CREATED = "order_created"  # Customer: order accepted by the system
ORDER_STATUS_UPDATED = "order_status_updated"  # Customer: shop moved the order
ORDER_CANCELLED = "order_cancelled"  # Shop: customer cancelled

# =============================================================================
# Payment events
# =============================================================================

PAYMENT_RECEIVED = "payment_received"  # Shop: order has been paid

ALL_EVENT_TYPES = frozenset({
    NEW_ORDER,
    ORDER_CREATED,
    ORDER_STATUS_UPDATED,
    ORDER_CANCELLED,
    PAYMENT_RECEIVED,
})

# Maximum serialized event size in bytes
MAX_EVENT_SIZE = 64 * 1024
