"""
Event System for Real-time Notifications via Redis pub/sub.

Modules:
- event_types.py: Event type constants
- event_schema.py: Event dataclass with validation
- channels.py: Channel naming functions (shop:{id}, customer:{id})
- redis_pool.py: Connection pool management
- publisher.py: Core publish_event with retry
- domain_publishers.py: Order event publishers with routing
- health_checks.py: Redis health check
"""

from .event_types import (
    NEW_ORDER,
    ORDER_CREATED,
    ORDER_STATUS_UPDATED,
    ORDER_CANCELLED,
    PAYMENT_RECEIVED,
    ALL_EVENT_TYPES,
    MAX_EVENT_SIZE,
)
from .event_schema import Event
from .channels import channel_shop, channel_customer
from .redis_pool import get_redis_pool, close_redis_pool
from .publisher import publish_event, retry_delay
from .domain_publishers import publish_order_event, resolve_channel
from .health_checks import check_redis_async_health

__all__ = [
    # Event types
    "NEW_ORDER",
    "ORDER_CREATED",
    "ORDER_STATUS_UPDATED",
    "ORDER_CANCELLED",
    "PAYMENT_RECEIVED",
    "ALL_EVENT_TYPES",
    "MAX_EVENT_SIZE",
    # Schema
    "Event",
    # Channels
    "channel_shop",
    "channel_customer",
    # Pool
    "get_redis_pool",
    "close_redis_pool",
    # Publishing
    "publish_event",
    "retry_delay",
    "publish_order_event",
    "resolve_channel",
    # Health
    "check_redis_async_health",
]
