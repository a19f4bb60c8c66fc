"""
Order notification scheduling.

Routers hand order events to FastAPI BackgroundTasks; delivery runs after
the response is sent. A failed publish is logged and dropped: the order
change it describes is already committed.

Usage:
    schedule_order_event(background_tasks, NEW_ORDER, order)
"""

from typing import Any

from fastapi import BackgroundTasks

from shared.config.logging import get_logger
from shared.infrastructure.events import get_redis_pool, publish_order_event
from rest_api.models import Order

logger = get_logger(__name__)


async def _publish_order_event(**kwargs: Any) -> None:
    """Background task body; never raises."""
    try:
        redis_client = await get_redis_pool()
        receivers = await publish_order_event(redis_client=redis_client, **kwargs)
        logger.debug(
            "Order event published",
            event_type=kwargs.get("event_type"),
            order_id=kwargs.get("order_id"),
            receivers=receivers,
        )
    except Exception as e:
        logger.error(
            "Failed to publish order event",
            event_type=kwargs.get("event_type"),
            order_id=kwargs.get("order_id"),
            error=str(e),
        )


def schedule_order_event(
    background_tasks: BackgroundTasks,
    event_type: str,
    order: Order,
    actor_user_id: int | None = None,
    actor_role: str | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """Queue one order lifecycle event for delivery after the response."""
    background_tasks.add_task(
        _publish_order_event,
        event_type=event_type,
        shop_id=order.shop_id,
        customer_id=order.customer_id,
        order_id=order.id,
        order_number=order.order_number,
        status=order.status,
        actor_user_id=actor_user_id,
        actor_role=actor_role,
        extra=extra,
    )
