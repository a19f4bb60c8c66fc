"""
Domain-Specific Event Publishing Functions.

High-level functions that build order events and route them to the
shop-scoped or customer-scoped channel.
"""

from __future__ import annotations

from typing import Any

import redis.asyncio as redis

from .event_types import (
    NEW_ORDER,
    ORDER_CREATED,
    ORDER_STATUS_UPDATED,
    ORDER_CANCELLED,
    PAYMENT_RECEIVED,
)
from .event_schema import Event
from .channels import channel_shop, channel_customer
from .publisher import publish_event

# Which subscriber group hears each event type
SHOP_EVENTS = frozenset({NEW_ORDER, ORDER_CANCELLED, PAYMENT_RECEIVED})
CUSTOMER_EVENTS = frozenset({ORDER_CREATED, ORDER_STATUS_UPDATED})


def resolve_channel(event: Event) -> str:
    """Channel an event is delivered on."""
    if event.type in SHOP_EVENTS:
        return channel_shop(event.shop_id)
    if event.type in CUSTOMER_EVENTS:
        return channel_customer(event.customer_id)
    raise ValueError(f"No routing for event type {event.type}")


async def publish_order_event(
    redis_client: redis.Redis,
    event_type: str,
    shop_id: int,
    customer_id: int,
    order_id: int,
    order_number: str,
    status: str,
    actor_user_id: int | None = None,
    actor_role: str | None = None,
    extra: dict[str, Any] | None = None,
) -> int:
    """
    Publish an order lifecycle event.

    Shop-facing events (new_order, order_cancelled, payment_received) go to
    shop:{id}; customer-facing events (order_created, order_status_updated)
    go to customer:{id}.

    Returns the number of subscribers that received it.
    """
    entity: dict[str, Any] = {
        "order_id": order_id,
        "order_number": order_number,
        "status": status,
    }
    if extra:
        entity.update(extra)

    event = Event(
        type=event_type,
        shop_id=shop_id,
        customer_id=customer_id,
        order_id=order_id,
        entity=entity,
        actor={"user_id": actor_user_id, "role": actor_role},
    )
    return await publish_event(redis_client, resolve_channel(event), event)
