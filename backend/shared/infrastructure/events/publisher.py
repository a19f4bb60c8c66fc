"""
Publishing to Redis with a size cap and retries.
"""

from __future__ import annotations

import asyncio
import random

import redis.asyncio as redis

from shared.config.logging import get_logger
from shared.config.settings import settings
from .event_schema import Event
from .event_types import MAX_EVENT_SIZE

logger = get_logger(__name__)

MAX_RETRY_DELAY = 10.0


def retry_delay(attempt: int, base_delay: float) -> float:
    """Jittered exponential backoff: uniform in [base, base * 2**attempt], capped."""
    return random.uniform(base_delay, min(base_delay * 2**attempt, MAX_RETRY_DELAY))


async def publish_event(redis_client: redis.Redis, channel: str, event: Event) -> int:
    """
    Publish ``event`` on ``channel`` and return the receiver count.

    Raises ValueError for oversized events (nothing is sent) and re-raises
    the last Redis error once retries are exhausted.
    """
    payload = event.to_json()
    size = len(payload.encode("utf-8"))
    if size > MAX_EVENT_SIZE:
        raise ValueError(f"Event {event.type} exceeds max size: {size} > {MAX_EVENT_SIZE} bytes")

    attempts = max(1, settings.redis_publish_max_retries)
    for attempt in range(attempts):
        try:
            return await redis_client.publish(channel, payload)
        except Exception as exc:
            if attempt == attempts - 1:
                logger.error("Redis publish gave up", channel=channel, event_type=event.type, error=str(exc))
                raise
            delay = retry_delay(attempt, settings.redis_publish_retry_delay)
            logger.warning(
                "Redis publish failed, retrying",
                channel=channel,
                event_type=event.type,
                attempt=attempt + 1,
                delay_seconds=round(delay, 2),
                error=str(exc),
            )
            await asyncio.sleep(delay)
    raise RuntimeError("unreachable")
