"""
Process-wide async Redis client used for order notifications.
"""

from __future__ import annotations

import asyncio

import redis.asyncio as redis

from shared.config.logging import get_logger
from shared.config.settings import settings

logger = get_logger(__name__)

_client: redis.Redis | None = None
_client_lock: asyncio.Lock | None = None


def _build_client() -> redis.Redis:
    return redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_pool_max_connections,
        decode_responses=True,
        socket_connect_timeout=settings.redis_socket_timeout,
        socket_timeout=settings.redis_socket_timeout,
        health_check_interval=30,
    )


async def get_redis_pool() -> redis.Redis:
    """Return the shared client, creating it on first use."""
    global _client, _client_lock

    if _client is None:
        # Created inside the running loop
        if _client_lock is None:
            _client_lock = asyncio.Lock()
        async with _client_lock:
            if _client is None:
                _client = _build_client()
                logger.info("Redis client created", max_connections=settings.redis_pool_max_connections)
    return _client


async def close_redis_pool() -> None:
    global _client, _client_lock

    if _client is not None:
        await _client.aclose()
        logger.info("Redis client closed")
    _client = None
    _client_lock = None
